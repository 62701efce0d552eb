"""
本文件包含用户相关的数据库操作函数（CRUD操作）。

提供以下功能：
1. 用户注册（生成 uuid 与显示标签）
2. 用户查询（排行榜构建按注册顺序读取全部用户）
3. 用户删除（同时清理其步数记录与排行榜条目）
"""

import logging
import random
import string
import uuid
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from . import models, schemas
from ..activities.models import ActivityRecord
from ..exceptions import DataSourceUnavailable
from ..leaderboard.models import LeaderboardEntry

logger = logging.getLogger(__name__)

TAG_ALPHABET = string.ascii_lowercase + string.digits


def generate_tag(length: int = 5) -> str:
    """生成显示标签，如 "k3x9a" """
    return ''.join(random.choices(TAG_ALPHABET, k=length))


def get_user(db: Session, user_id: str) -> Optional[models.User]:
    """根据公开标识获取单个用户"""
    return db.query(models.User).filter(models.User.user_id == user_id).first()


def get_user_by_email(db: Session, email: str) -> Optional[models.User]:
    return db.query(models.User).filter(models.User.email == email).first()


def get_users(db: Session, skip: int = 0, limit: int = 100) -> List[models.User]:
    """获取用户列表，支持分页"""
    return db.query(models.User).order_by(models.User.id).offset(skip).limit(limit).all()


def list_users(db: Session) -> List[models.User]:
    """按注册顺序读取全部用户（排行榜构建的输入）"""
    try:
        return db.query(models.User).order_by(models.User.id).all()
    except SQLAlchemyError as e:
        logger.error("[db-error][users-select] err=%s", e)
        raise DataSourceUnavailable("读取用户列表失败", {"error": str(e)}) from e


def create_user(db: Session, user: schemas.UserCreate) -> models.User:
    """创建新用户"""
    db_user = models.User(
        user_id=str(uuid.uuid4()),
        tag=generate_tag(),
        username=user.username,
        email=user.email,
    )
    db.add(db_user)
    db.commit()
    db.refresh(db_user)
    return db_user


def delete_user(db: Session, user_id: str) -> Optional[List[int]]:
    """
    删除用户及其步数记录、排行榜条目。

    返回：
        该用户曾出现过的排行榜周（升序），调用方需要重建这些周以保持名次连续；
        用户不存在时返回 None。
    """
    db_user = get_user(db, user_id)
    if db_user is None:
        return None

    try:
        weeks = [
            row[0] for row in
            db.query(LeaderboardEntry.week_number)
            .filter(LeaderboardEntry.user_id == user_id)
            .distinct()
            .order_by(LeaderboardEntry.week_number)
            .all()
        ]
        db.query(ActivityRecord).filter(ActivityRecord.user_id == user_id).delete(synchronize_session=False)
        db.query(LeaderboardEntry).filter(LeaderboardEntry.user_id == user_id).delete(synchronize_session=False)
        db.delete(db_user)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("[db-error][user-delete] user_id=%s err=%s", user_id, e)
        raise DataSourceUnavailable("删除用户失败", {"user_id": user_id}) from e
    logger.info("[users][deleted] user_id=%s affected_weeks=%s", user_id, weeks)
    return weeks
