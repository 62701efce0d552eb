"""
用户本周步数统计（个人主页展示用）。

距离与时长是粗略换算：每步约 0.8 米、约 0.01 分钟。
"""

from typing import Any, Dict, Iterable

KM_PER_STEP = 0.0008
MINUTES_PER_STEP = 0.01


def weekly_stats(week_number: int, records: Iterable[Any]) -> Dict[str, Any]:
    """
    根据本周记录计算统计值。

    Returns:
        dict: {
            "week_number": int,
            "daily_average": int,      # 总步数 / 记录条数，四舍五入
            "total_distance_km": int,
            "estimated_minutes": int,
            "weekly_data": [{"date": date, "steps": int}, ...]  # 按日期升序
        }
    """
    ordered = sorted(records, key=lambda r: (r.date, r.id))
    total = sum(r.step_count for r in ordered)
    return {
        "week_number": week_number,
        "daily_average": round(total / len(ordered)) if ordered else 0,
        "total_distance_km": round(total * KM_PER_STEP),
        "estimated_minutes": round(total * MINUTES_PER_STEP),
        "weekly_data": [{"date": r.date, "steps": r.step_count} for r in ordered],
    }
