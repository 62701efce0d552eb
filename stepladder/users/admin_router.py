"""
管理员接口。

提供以下API端点：
1. POST /admin/users - 创建用户（可附带步数历史），随后同步重建当前周排行榜
2. DELETE /admin/users/{user_id} - 删除用户，随后重建其出现过的各周及之后已有快照的周
3. POST /admin/populate-sample - 填充示例用户与本周步数，随后重建当前周排行榜

排行榜重建在请求内同步执行，失败会直接返回给调用方，不会在后台静默丢弃。
"""

import datetime
import logging
import random

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from . import crud, schemas
from ..activities import crud as activities_crud
from ..leaderboard import crud as leaderboard_crud
from ..config import SeasonConfig
from ..services.leaderboard_service import LeaderboardService, get_leaderboard_service
from ..services.season import current_week, get_season
from ..utils import get_db

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["管理"])

SAMPLE_USERS = [
    {"username": "John G", "email": "john@test.com"},
    {"username": "Sarah M", "email": "sarah@test.com"},
    {"username": "Mike R", "email": "mike@test.com"},
]


@router.post("/users", response_model=schemas.User, status_code=201)
def create_user(
    user: schemas.AdminUserCreate,
    db: Session = Depends(get_db),
    season: SeasonConfig = Depends(get_season),
    service: LeaderboardService = Depends(get_leaderboard_service),
):
    """创建用户；附带的步数历史全部计入当前赛季周"""
    if crud.get_user_by_email(db, user.email) is not None:
        raise HTTPException(status_code=400, detail="用户已存在")

    db_user = crud.create_user(db, user)
    week_number = current_week(season)
    if user.step_history:
        activities_crud.create_records(db, db_user.user_id, user.step_history, week_number)

    service.build_week(week_number)
    return db_user


@router.delete("/users/{user_id}")
def delete_user(
    user_id: str,
    db: Session = Depends(get_db),
    service: LeaderboardService = Depends(get_leaderboard_service),
):
    """
    删除用户及其记录，然后按周次升序重建：
    该用户出现过的各周（保持名次连续），以及其后所有已有快照的周
    （它们的趋势与名次历史依赖上一周的名次）。
    """
    weeks = crud.delete_user(db, user_id)
    if weeks is None:
        raise HTTPException(status_code=404, detail="用户未找到")

    rebuild = set(weeks)
    if weeks:
        rebuild.update(w for w in leaderboard_crud.persisted_weeks(db) if w > weeks[0])
    rebuilt_weeks = sorted(rebuild)
    for week_number in rebuilt_weeks:
        service.build_week(week_number)
    return {"success": True, "message": "用户已删除", "rebuilt_weeks": rebuilt_weeks}


@router.post("/populate-sample")
def populate_sample(
    db: Session = Depends(get_db),
    season: SeasonConfig = Depends(get_season),
    service: LeaderboardService = Depends(get_leaderboard_service),
):
    """填充示例数据：每个示例用户最近 7 天各 10000~14999 步（已存在的邮箱跳过）"""
    week_number = current_week(season)
    today = datetime.date.today()
    created = 0

    for sample in SAMPLE_USERS:
        if crud.get_user_by_email(db, sample["email"]) is not None:
            continue
        db_user = crud.create_user(db, schemas.UserCreate(**sample))
        history = [
            schemas.StepHistoryItem(date=today - datetime.timedelta(days=day), steps=random.randint(10000, 14999))
            for day in range(7)
        ]
        activities_crud.create_records(db, db_user.user_id, history, week_number)
        created += 1

    logger.info("[admin][populate-sample] created=%s week=%s", created, week_number)
    entries = service.build_week(week_number)
    return {"success": True, "message": "示例数据已填充", "created_users": created, "entries": len(entries)}
