"""
本文件定义了每日步数记录相关的API路由。

提供以下API端点：
1. POST /activities/ - 上报单日步数（week_number 按日期计算）
2. GET /activities/{user_id} - 获取用户的步数记录，可用 week 过滤
"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from . import crud, schemas
from ..config import SeasonConfig
from ..services.season import get_season, week_for_day
from ..users import crud as users_crud
from ..utils import get_db

router = APIRouter(prefix="/activities", tags=["步数"])


@router.post("/", response_model=schemas.ActivityRecord)
def create_activity_record(
    record: schemas.ActivityRecordCreate,
    db: Session = Depends(get_db),
    season: SeasonConfig = Depends(get_season),
):
    """上报单日步数"""
    if users_crud.get_user(db, record.user_id) is None:
        raise HTTPException(status_code=404, detail="用户未找到")
    return crud.create_record(db, record, week_for_day(season, record.date))


@router.get("/{user_id}", response_model=list[schemas.ActivityRecord])
def read_activity_records(
    user_id: str,
    week: Optional[int] = Query(None, ge=1, description="赛季周，不传则返回全部"),
    db: Session = Depends(get_db),
):
    """获取用户的步数记录，按日期升序"""
    if users_crud.get_user(db, user_id) is None:
        raise HTTPException(status_code=404, detail="用户未找到")
    return crud.list_user_records(db, user_id, week)
