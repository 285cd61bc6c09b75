# crud/user.py
from nextgenfit.database import database
from nextgenfit.schemas.user import UserSignup


async def create_user(user: UserSignup) -> bool:
    # 1. 먼저 동일한 user_id가 이미 존재하는지 확인
    if await verify_user(user.user_id):
        return False  # 이미 존재함

    # 2. 존재하지 않는다면 새로 INSERT
    insert_query = "INSERT INTO users (user_id) VALUES (:user_id)"
    await database.execute(query=insert_query, values={"user_id": user.user_id})
    return True


async def verify_user(user_id: str) -> bool:
    query = "SELECT user_id FROM users WHERE user_id = :user_id"
    result = await database.fetch_one(query=query, values={"user_id": user_id})
    return result is not None
