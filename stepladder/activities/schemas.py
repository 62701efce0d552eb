"""
本文件定义了每日步数记录的Pydantic数据模型。

1. ActivityRecordCreate: 上报单日步数的请求模型（week_number 由服务端根据日期计算）
2. ActivityRecord: 步数记录完整响应模型
"""

from pydantic import BaseModel, ConfigDict, Field
import datetime


class ActivityRecordCreate(BaseModel):
    """上报单日步数的请求模型"""
    user_id: str
    date: datetime.date
    step_count: int = Field(..., ge=0)


class ActivityRecord(BaseModel):
    """步数记录完整响应模型"""
    id: int
    user_id: str
    date: datetime.date
    step_count: int
    week_number: int
    model_config = ConfigDict(from_attributes=True)  # 允许从ORM对象创建
