# nextgenfit/models.py
# 스키마 관리(마이그레이션)는 이 서비스 범위 밖. 테이블 정의만 둔다.
from sqlalchemy import Column, DateTime, Float, Integer, MetaData, String, Table, Text

metadata = MetaData()

users = Table(
    "users",
    metadata,
    Column("user_id", String(64), primary_key=True),
)

user_plans = Table(
    "user_plans",
    metadata,
    Column("user_id", String(64), primary_key=True),
    Column("units", String(16)),
    Column("gender", String(32)),
    Column("age", Integer),
    Column("weight", Float),
    Column("height", Float),
    Column("goal", String(64)),
    Column("workout_routine", Text),  # JSON 문서
    Column("selected_plan", String(64)),
    Column("updated_at", DateTime),
)
