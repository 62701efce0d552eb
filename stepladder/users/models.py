"""
本文件定义了用户的数据模型（ORM类）。

User 类：参与步数排行的用户，对应 users 表。
- id 为自增主键，同时代表注册顺序（排行榜并列时，先注册者排名靠前）
- user_id 为对外公开的 uuid，活动记录与排行榜条目都通过它关联用户
"""

from sqlalchemy import Column, Integer, String, DateTime
import datetime
from ..db_base import Base


class User(Base):
    """
    用户表模型
    - id: 自增主键（注册顺序）
    - user_id: 公开的用户标识（uuid4 字符串）
    - username: 显示名称
    - tag: 显示标签（注册时随机生成的 5 位小写字母数字）
    - email: 邮箱，唯一
    - created_at: 注册时间
    """
    __tablename__ = 'users'
    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String(36), nullable=False, unique=True, index=True)
    username = Column(String(64), nullable=False)
    tag = Column(String(16), nullable=False)
    email = Column(String(128), nullable=False, unique=True)
    created_at = Column(DateTime, default=datetime.datetime.utcnow)
