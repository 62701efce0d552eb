"""
本文件包含每日步数记录的数据库操作函数。

记录只新增、不修改；排行榜构建通过 get_activity_records 读取某用户某周的全部记录。
"""

import logging
from typing import Iterable, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from . import models, schemas
from ..exceptions import DataSourceUnavailable

logger = logging.getLogger(__name__)


def create_record(db: Session, record: schemas.ActivityRecordCreate, week_number: int) -> models.ActivityRecord:
    """写入单日步数记录"""
    db_record = models.ActivityRecord(
        user_id=record.user_id,
        date=record.date,
        step_count=record.step_count,
        week_number=week_number,
    )
    db.add(db_record)
    db.commit()
    db.refresh(db_record)
    return db_record


def create_records(db: Session, user_id: str, items: Iterable, week_number: int) -> List[models.ActivityRecord]:
    """
    批量写入步数记录（管理员创建用户、填充示例数据时使用）。

    items 中的每一项需要有 date 与 steps 属性，统一记入 week_number。
    """
    db_records = [
        models.ActivityRecord(user_id=user_id, date=item.date, step_count=item.steps, week_number=week_number)
        for item in items
    ]
    db.add_all(db_records)
    db.commit()
    return db_records


def get_activity_records(db: Session, user_id: str, week_number: int) -> List[models.ActivityRecord]:
    """读取某用户某周的全部记录，按日期升序"""
    try:
        return (
            db.query(models.ActivityRecord)
            .filter(
                models.ActivityRecord.user_id == user_id,
                models.ActivityRecord.week_number == week_number,
            )
            .order_by(models.ActivityRecord.date, models.ActivityRecord.id)
            .all()
        )
    except SQLAlchemyError as e:
        logger.error("[db-error][records-select] user_id=%s week=%s err=%s", user_id, week_number, e)
        raise DataSourceUnavailable("读取步数记录失败", {"user_id": user_id, "week_number": week_number}) from e


def list_user_records(db: Session, user_id: str, week_number: Optional[int] = None) -> List[models.ActivityRecord]:
    """读取用户的记录，可按周过滤"""
    query = db.query(models.ActivityRecord).filter(models.ActivityRecord.user_id == user_id)
    if week_number is not None:
        query = query.filter(models.ActivityRecord.week_number == week_number)
    return query.order_by(models.ActivityRecord.date, models.ActivityRecord.id).all()
