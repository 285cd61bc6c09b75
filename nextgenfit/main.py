# nextgenfit/main.py
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from nextgenfit.core.exceptions import FitPlanError
from nextgenfit.core.logging import setup_logging
from nextgenfit.database import database
from nextgenfit.routers import onboarding, plan, profile, user

setup_logging()
logger = logging.getLogger(__name__)

app = FastAPI(title="Next Gen Fit")

# CORS 설정 (배포 시엔 도메인을 지정하는 게 좋음)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
async def startup():
    await database.connect()


@app.on_event("shutdown")
async def shutdown():
    await database.disconnect()


@app.exception_handler(FitPlanError)
async def fitplan_error_handler(request: Request, exc: FitPlanError):
    # 사용자에겐 원인/힌트만, 원본 에러는 로그로
    logger.warning("%s on %s %s: %s | detail=%r", exc.kind, request.method, request.url.path, exc.message, exc.detail)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


app.include_router(user.router)
app.include_router(profile.router)
app.include_router(onboarding.router)
app.include_router(plan.router)
