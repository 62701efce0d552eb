"""
本文件包含排行榜快照的数据库操作函数。

1. get_persisted_entries：读取某周已生成的条目（按名次升序）
2. replace_week_entries：整体替换某周的条目（删除 + 插入在同一事务中提交）
3. persisted_weeks：已有快照的周列表（删除用户后确定重建范围）
"""

import logging
from typing import Any, Dict, List

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from . import models
from ..exceptions import DataSourceUnavailable

logger = logging.getLogger(__name__)


def get_persisted_entries(db: Session, week_number: int) -> List[models.LeaderboardEntry]:
    """读取某周的排行榜条目，可能为空"""
    try:
        return (
            db.query(models.LeaderboardEntry)
            .filter(models.LeaderboardEntry.week_number == week_number)
            .order_by(models.LeaderboardEntry.rank)
            .all()
        )
    except SQLAlchemyError as e:
        logger.error("[db-error][leaderboard-select] week=%s err=%s", week_number, e)
        raise DataSourceUnavailable("读取排行榜失败", {"week_number": week_number}) from e


def replace_week_entries(db: Session, week_number: int, rows: List[Dict[str, Any]]) -> List[models.LeaderboardEntry]:
    """
    用 rows 整体替换某周的排行榜条目。

    删除与插入只提交一次：读者要么看到旧快照，要么看到新快照。
    任一步失败都会回滚，旧快照保持不变。
    """
    try:
        db.query(models.LeaderboardEntry).filter(
            models.LeaderboardEntry.week_number == week_number
        ).delete(synchronize_session=False)
        # 先 flush 删除，避免与新条目的 (week_number, rank) 唯一约束冲突
        db.flush()
        db_entries = [models.LeaderboardEntry(week_number=week_number, **row) for row in rows]
        db.add_all(db_entries)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("[db-error][leaderboard-replace] week=%s err=%s", week_number, e)
        raise DataSourceUnavailable("写入排行榜失败", {"week_number": week_number}) from e
    return db_entries


def persisted_weeks(db: Session) -> List[int]:
    """已有快照的全部周（升序）"""
    try:
        return [
            row[0] for row in
            db.query(models.LeaderboardEntry.week_number)
            .distinct()
            .order_by(models.LeaderboardEntry.week_number)
            .all()
        ]
    except SQLAlchemyError as e:
        logger.error("[db-error][leaderboard-weeks] err=%s", e)
        raise DataSourceUnavailable("读取排行榜周列表失败") from e
