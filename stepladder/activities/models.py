"""
本文件定义了每日步数记录的数据模型（ORM类）。

ActivityRecord 是只读的事实记录：某个用户在某一天的步数，以及该日期所属的赛季周。
记录写入后不再修改；排行榜构建只读取它。
数据库层面不强制“每人每天一条”，同一天出现多条时由聚合器求和。
"""

from sqlalchemy import Column, Integer, String, Date, DateTime, CheckConstraint, Index
import datetime
from ..db_base import Base


class ActivityRecord(Base):
    """
    每日步数记录表模型
    - id: 主键（record_id）
    - user_id: 用户公开标识（users.user_id）
    - date: 日历日期
    - step_count: 当日步数，非负
    - week_number: 所属赛季周（写入时根据 date 计算）
    """
    __tablename__ = 'activity_records'
    __table_args__ = (
        CheckConstraint('step_count >= 0', name='ck_activity_records_steps_non_negative'),
        Index('ix_activity_records_user_date', 'user_id', 'date'),
    )
    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String(36), nullable=False)
    date = Column(Date, nullable=False)
    step_count = Column(Integer, nullable=False)
    week_number = Column(Integer, nullable=False, index=True)
    created_at = Column(DateTime, default=datetime.datetime.utcnow)

    @property
    def record_id(self) -> int:
        return self.id
