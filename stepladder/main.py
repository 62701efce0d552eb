"""
StepLadder 步数排行API主应用文件。

本文件是FastAPI应用的入口点，负责：
1. 创建FastAPI应用实例
2. 注册各个模块的路由
3. 注册服务层异常的统一处理器
4. 启动时按需建表（AUTO_CREATE_TABLES）
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from .config import AUTO_CREATE_TABLES, LOG_LEVEL, SERVICE_LOG_LEVEL
from .db_base import Base
from .exceptions import ConcurrentBuildConflict, ServiceError
from .logging_config import setup_logging
from .utils import engine

# 导入模型以确保它们注册到 Base.metadata
from .users import models as _user_models  # noqa: F401
from .activities import models as _activity_models  # noqa: F401
from .leaderboard import models as _leaderboard_models  # noqa: F401

from .users.router import router as users_router
from .users.admin_router import router as admin_router
from .activities.router import router as activities_router
from .leaderboard.router import router as leaderboard_router


@asynccontextmanager
async def lifespan(app: FastAPI):
    if AUTO_CREATE_TABLES:
        Base.metadata.create_all(bind=engine)
    yield


setup_logging(LOG_LEVEL, SERVICE_LOG_LEVEL)
app = FastAPI(title="StepLadder 步数排行 API", lifespan=lifespan)


@app.exception_handler(ServiceError)
async def service_error_handler(request: Request, exc: ServiceError):
    headers = None
    if isinstance(exc, ConcurrentBuildConflict):
        headers = {"Retry-After": str(exc.retry_after)}
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "success": False,
            "error": {"code": exc.code, "message": exc.message, "details": exc.details},
        },
        headers=headers,
    )


# 路由注册
app.include_router(users_router)
app.include_router(admin_router)
app.include_router(activities_router)
app.include_router(leaderboard_router)
