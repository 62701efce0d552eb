"""
Activity Aggregator（每周步数聚合）

职责：
- 把某个用户在某一周的原始步数记录归并为周总步数 + 每日明细
- 纯函数，不访问数据库、不产生副作用；记录可以是 ORM 对象，也可以是任何带相同属性名的对象

同一天出现多条记录时按求和处理，不会互相覆盖。
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Dict, Iterable

from ..exceptions import InconsistentAggregate


@dataclass(frozen=True)
class WeeklyAggregate:
    """用户周聚合结果；daily_breakdown 按日期升序"""
    user_id: str
    total_steps: int
    daily_breakdown: Dict[date, int] = field(default_factory=dict)

    def breakdown_as_json(self) -> Dict[str, int]:
        """日期键转为 ISO 字符串（YYYY-MM-DD），用于持久化与接口输出"""
        return {day.isoformat(): steps for day, steps in self.daily_breakdown.items()}


def to_day(value: Any) -> date:
    """把记录中的日期统一为 date；datetime 直接取日期部分，不做时区换算"""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


def aggregate_week(user_id: str, week_number: int, records: Iterable[Any]) -> WeeklyAggregate:
    """
    聚合某用户某周的步数。

    Args:
        user_id: 用户公开标识
        week_number: 赛季周
        records: 候选记录（会再次按 user_id / week_number 过滤）

    Returns:
        WeeklyAggregate: 无记录时 total_steps 为 0、明细为空
    """
    daily: Dict[date, int] = defaultdict(int)
    total = 0
    for record in records:
        if record.user_id != user_id or record.week_number != week_number:
            continue
        if record.step_count < 0:
            raise InconsistentAggregate(
                "步数记录为负数",
                {"user_id": user_id, "week_number": week_number, "date": str(record.date)},
            )
        daily[to_day(record.date)] += record.step_count
        total += record.step_count

    breakdown = {day: daily[day] for day in sorted(daily)}
    return WeeklyAggregate(user_id=user_id, total_steps=total, daily_breakdown=breakdown)


def check_consistency(aggregate: WeeklyAggregate) -> None:
    """每日明细之和必须等于总步数，否则视为致命错误"""
    breakdown_sum = sum(aggregate.daily_breakdown.values())
    if breakdown_sum != aggregate.total_steps:
        raise InconsistentAggregate(details={
            "user_id": aggregate.user_id,
            "total_steps": aggregate.total_steps,
            "breakdown_sum": breakdown_sum,
        })
