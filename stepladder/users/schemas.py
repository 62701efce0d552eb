"""
本文件定义了用户相关的Pydantic数据模型，用于API请求和响应的数据验证与序列化。

包含以下模型：
1. UserCreate: 注册用户时的请求模型
2. StepHistoryItem: 管理员创建用户时附带的单日步数
3. AdminUserCreate: 管理员创建用户时的请求模型
4. User: 用户完整响应模型
5. WeeklyStats: 用户本周步数统计
6. UserDetail: 用户详情（含本周统计与最近记录）
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import List
import datetime

from ..activities.schemas import ActivityRecord


class UserCreate(BaseModel):
    """注册用户时的请求模型"""
    username: str = Field(..., min_length=1, max_length=64)
    email: str = Field(..., min_length=3, max_length=128)


class StepHistoryItem(BaseModel):
    """单日步数"""
    date: datetime.date
    steps: int = Field(..., ge=0)


class AdminUserCreate(UserCreate):
    """管理员创建用户时的请求模型，可附带步数历史（计入当前赛季周）"""
    step_history: List[StepHistoryItem] = []


class User(BaseModel):
    """用户完整响应模型"""
    user_id: str
    username: str
    tag: str
    email: str
    created_at: datetime.datetime
    model_config = ConfigDict(from_attributes=True)  # 允许从ORM对象创建


class DailySteps(BaseModel):
    date: datetime.date
    steps: int


class WeeklyStats(BaseModel):
    """用户本周步数统计"""
    week_number: int
    daily_average: int
    total_distance_km: int  # 粗略换算：每步 0.8 米
    estimated_minutes: int  # 粗略换算：每步 0.01 分钟
    weekly_data: List[DailySteps]


class UserDetail(User):
    """用户详情响应模型"""
    weekly_stats: WeeklyStats
    history: List[ActivityRecord]
