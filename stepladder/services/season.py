"""
赛季周计算。

周数 = 距赛季开始的整天数 // 7 + 1，并限制在 [min_week, max_week] 之内。
所有函数都显式接收时间与赛季参数，不读取系统时间，方便测试。
"""

import math
from datetime import date, datetime, time, timezone
from typing import Optional

from ..config import SeasonConfig, get_season_config

SECONDS_PER_DAY = 24 * 60 * 60


def get_season() -> SeasonConfig:
    """FastAPI 依赖项：获取赛季配置（测试中可覆盖）"""
    return get_season_config()


def _aware(moment: datetime) -> datetime:
    # 不带时区的时间按 UTC 处理
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment


def week_number_for(moment: datetime, season_start: datetime, min_week: int = 1, max_week: int = 10) -> int:
    """计算 moment 所在的赛季周"""
    elapsed = (_aware(moment) - _aware(season_start)).total_seconds()
    days_elapsed = math.floor(elapsed / SECONDS_PER_DAY)
    weeks_passed = days_elapsed // 7
    return min(max(weeks_passed + 1, min_week), max_week)


def week_number_for_day(day: date, season_start: datetime, min_week: int = 1, max_week: int = 10) -> int:
    """计算某个日历日所在的赛季周（取该日在赛季时区的零点）"""
    start = _aware(season_start)
    moment = datetime.combine(day, time.min, tzinfo=start.tzinfo)
    return week_number_for(moment, start, min_week, max_week)


def current_week(season: SeasonConfig, now: Optional[datetime] = None) -> int:
    """当前赛季周；now 不传时取当前 UTC 时间（仅接口层使用）"""
    if now is None:
        now = datetime.now(timezone.utc)
    return week_number_for(now, season.start, season.min_week, season.max_week)


def week_for_day(season: SeasonConfig, day: date) -> int:
    return week_number_for_day(day, season.start, season.min_week, season.max_week)
