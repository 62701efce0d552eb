"""
本文件定义了排行榜相关的API路由。

提供以下API端点：
1. GET /leaderboard/current - 当前赛季周的排行榜
2. GET /leaderboard/{week_number} - 某周排行榜（未生成时先生成）
3. POST /leaderboard/{week_number}/rebuild - 强制重建某周排行榜
4. GET /leaderboard/{week_number}/status - 某周快照的生成状态

路径中的周超出赛季范围（SEASON_MIN_WEEK~SEASON_MAX_WEEK）时返回 404。

构建失败（数据源不可用、聚合不一致、锁等待超时、构建超时）以 ServiceError 抛出，
由 main.py 的异常处理器转换为对应的 HTTP 状态码。
"""

from fastapi import APIRouter, Depends, HTTPException, Path
import logging

from . import schemas
from ..config import SeasonConfig
from ..services.leaderboard_service import LeaderboardService, get_leaderboard_service
from ..services.season import current_week, get_season

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/leaderboard", tags=["排行榜"])


def season_week(
    week_number: int = Path(..., ge=1, description="赛季周，从 1 开始"),
    season: SeasonConfig = Depends(get_season),
) -> int:
    """路径中的周必须落在赛季范围内，超出范围不生成快照"""
    if not season.min_week <= week_number <= season.max_week:
        raise HTTPException(
            status_code=404,
            detail=f"第 {week_number} 周不在赛季范围内（{season.min_week}~{season.max_week}）"
        )
    return week_number


@router.get("/current", response_model=list[schemas.LeaderboardEntry])
def read_current_leaderboard(
    season: SeasonConfig = Depends(get_season),
    service: LeaderboardService = Depends(get_leaderboard_service),
):
    """当前赛季周的排行榜"""
    return service.get_or_build_week(current_week(season))


@router.get("/{week_number}", response_model=list[schemas.LeaderboardEntry])
def read_leaderboard(
    week_number: int = Depends(season_week),
    service: LeaderboardService = Depends(get_leaderboard_service),
):
    """获取某周排行榜，按名次升序；该周尚未生成时先生成"""
    return service.get_or_build_week(week_number)


@router.post("/{week_number}/rebuild", response_model=list[schemas.LeaderboardEntry])
def rebuild_leaderboard(
    week_number: int = Depends(season_week),
    service: LeaderboardService = Depends(get_leaderboard_service),
):
    """强制重建某周排行榜（旧快照整体替换）"""
    logger.info("[leaderboard-api][rebuild] week=%s", week_number)
    return service.build_week(week_number)


@router.get("/{week_number}/status", response_model=schemas.WeekStatus)
def read_leaderboard_status(
    week_number: int = Depends(season_week),
    service: LeaderboardService = Depends(get_leaderboard_service),
):
    return schemas.WeekStatus(week_number=week_number, state=service.week_state(week_number))
