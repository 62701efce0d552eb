"""
本文件定义了周排行榜快照条目的数据模型（ORM类）。

LeaderboardEntry：某一周排行榜中的一行。
- 同一周的全部条目构成一个快照，只由排行榜构建服务整体替换（先删后插，同一事务提交）
- 条目写入后不做原地更新
"""

from sqlalchemy import Column, Integer, String, DateTime, JSON, Index, UniqueConstraint
import datetime
from ..db_base import Base


class LeaderboardEntry(Base):
    """
    排行榜条目表模型
    - week_number: 赛季周
    - user_id / display_name / display_tag: 用户标识与展示信息（生成时的快照）
    - total_steps: 本周总步数
    - rank: 名次，从 1 开始连续、不并列
    - rank_history: [上周名次, 本周名次] 或 [本周名次]
    - trend: 1 上升，-1 下降，0 持平或上周无名次
    - daily_breakdown: {"YYYY-MM-DD": 步数}，按日期升序
    """
    __tablename__ = 'leaderboard_entries'
    __table_args__ = (
        Index('ix_leaderboard_entries_week_rank', 'week_number', 'rank'),
        UniqueConstraint('week_number', 'user_id', name='uq_leaderboard_entries_week_user'),
        UniqueConstraint('week_number', 'rank', name='uq_leaderboard_entries_week_rank'),
    )
    id = Column(Integer, primary_key=True, index=True)
    week_number = Column(Integer, nullable=False)
    user_id = Column(String(36), nullable=False, index=True)
    display_name = Column(String(64), nullable=False)
    display_tag = Column(String(16), nullable=False)
    total_steps = Column(Integer, nullable=False)
    rank = Column(Integer, nullable=False)
    rank_history = Column(JSON, nullable=False, default=list)
    trend = Column(Integer, nullable=False, default=0)
    daily_breakdown = Column(JSON, nullable=False, default=dict)
    generated_at = Column(DateTime, default=datetime.datetime.utcnow)
