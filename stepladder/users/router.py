"""
本文件定义了用户相关的API路由。

提供以下API端点：
1. POST /users/ - 注册用户
2. GET /users/ - 获取用户列表
3. GET /users/{user_id} - 获取用户详情（含本周步数统计与最近 7 条记录）
"""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from . import crud, schemas
from ..activities import crud as activities_crud
from ..activities.schemas import ActivityRecord
from ..config import SeasonConfig
from ..services.season import current_week, get_season
from ..services.stats_service import weekly_stats
from ..utils import get_db

router = APIRouter(prefix="/users", tags=["用户"])


@router.post("/", response_model=schemas.User)
def register_user(user: schemas.UserCreate, db: Session = Depends(get_db)):
    """注册新用户"""
    if crud.get_user_by_email(db, user.email) is not None:
        raise HTTPException(status_code=400, detail="用户已存在")
    return crud.create_user(db, user)


@router.get("/", response_model=list[schemas.User])
def read_users(skip: int = 0, limit: int = 100, db: Session = Depends(get_db)):
    """获取用户列表"""
    return crud.get_users(db, skip=skip, limit=limit)


@router.get("/{user_id}", response_model=schemas.UserDetail)
def read_user(user_id: str, db: Session = Depends(get_db), season: SeasonConfig = Depends(get_season)):
    """获取用户详情"""
    db_user = crud.get_user(db, user_id)
    if db_user is None:
        raise HTTPException(status_code=404, detail="用户未找到")

    week_number = current_week(season)
    records = activities_crud.list_user_records(db, user_id, week_number)
    return schemas.UserDetail(
        user_id=db_user.user_id,
        username=db_user.username,
        tag=db_user.tag,
        email=db_user.email,
        created_at=db_user.created_at,
        weekly_stats=weekly_stats(week_number, records),
        history=[ActivityRecord.model_validate(r) for r in records[-7:]],
    )
