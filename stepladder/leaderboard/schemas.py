"""
本文件定义了排行榜相关的Pydantic数据模型。

1. LeaderboardEntry: 排行榜条目响应模型
2. WeekStatus: 某一周快照的生成状态
"""

from enum import Enum
from pydantic import BaseModel, ConfigDict
from typing import Dict, List


class WeekState(str, Enum):
    """单周快照状态：未生成 -> 生成中 -> 已生成；重建时 已生成 -> 生成中 -> 已生成"""
    NOT_GENERATED = "NOT_GENERATED"
    GENERATING = "GENERATING"
    GENERATED = "GENERATED"


class LeaderboardEntry(BaseModel):
    """排行榜条目响应模型"""
    week_number: int
    user_id: str
    display_name: str
    display_tag: str
    total_steps: int
    rank: int
    rank_history: List[int]
    trend: int
    daily_breakdown: Dict[str, int]
    model_config = ConfigDict(from_attributes=True)  # 允许从ORM对象创建


class WeekStatus(BaseModel):
    week_number: int
    state: WeekState
