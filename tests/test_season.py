"""
赛季周计算测试
"""

from datetime import date, datetime, timedelta, timezone

from stepladder.config import SeasonConfig
from stepladder.services.season import current_week, week_for_day, week_number_for, week_number_for_day

NZDT = timezone(timedelta(hours=13))
START = datetime(2025, 10, 10, tzinfo=NZDT)


def test_first_day_is_week_one():
    assert week_number_for(START, START) == 1
    assert week_number_for(START + timedelta(days=6, hours=23), START) == 1


def test_week_boundaries():
    assert week_number_for(START + timedelta(days=7), START) == 2
    assert week_number_for(START + timedelta(days=20), START) == 3


def test_clamped_to_season_bounds():
    assert week_number_for(START - timedelta(days=30), START) == 1
    assert week_number_for(START + timedelta(days=365), START) == 10
    assert week_number_for(START + timedelta(days=365), START, max_week=12) == 12


def test_naive_values_treated_as_utc():
    naive_start = datetime(2025, 10, 10)
    assert week_number_for(datetime(2025, 10, 17, 0, 0), naive_start) == 2
    assert week_number_for(datetime(2025, 10, 16, 23, 59), naive_start) == 1


def test_day_uses_season_timezone():
    # 10 月 17 日零点（+13:00）正好是第 8 天
    assert week_number_for_day(date(2025, 10, 16), START) == 1
    assert week_number_for_day(date(2025, 10, 17), START) == 2


def test_season_config_helpers():
    season = SeasonConfig(start=START, min_week=1, max_week=10)
    assert current_week(season, now=START + timedelta(days=15)) == 3
    assert week_for_day(season, date(2025, 10, 24)) == 3
