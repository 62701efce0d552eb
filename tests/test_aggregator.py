"""
每周步数聚合测试（纯函数，不依赖数据库）
"""

from datetime import date, datetime
from types import SimpleNamespace

import pytest

from stepladder.exceptions import InconsistentAggregate
from stepladder.services.aggregator import WeeklyAggregate, aggregate_week, check_consistency


def record(user_id, day, steps, week=2):
    return SimpleNamespace(user_id=user_id, date=day, step_count=steps, week_number=week)


def test_total_and_breakdown():
    records = [
        record("u1", date(2025, 10, 18), 4000),
        record("u1", date(2025, 10, 17), 6000),
    ]
    agg = aggregate_week("u1", 2, records)

    assert agg.total_steps == 10000
    assert list(agg.daily_breakdown.items()) == [
        (date(2025, 10, 17), 6000),
        (date(2025, 10, 18), 4000),
    ]


def test_filters_other_users_and_weeks():
    records = [
        record("u1", date(2025, 10, 17), 1000),
        record("u2", date(2025, 10, 17), 9999),
        record("u1", date(2025, 10, 10), 5555, week=1),
    ]
    agg = aggregate_week("u1", 2, records)

    assert agg.total_steps == 1000
    assert agg.daily_breakdown == {date(2025, 10, 17): 1000}


def test_no_records_gives_zero():
    agg = aggregate_week("u1", 3, [])
    assert agg.total_steps == 0
    assert agg.daily_breakdown == {}


def test_same_day_records_are_summed_not_overwritten():
    """同一天多条记录求和"""
    records = [
        record("u1", date(2025, 10, 17), 3000),
        record("u1", date(2025, 10, 17), 2500),
    ]
    agg = aggregate_week("u1", 2, records)

    assert agg.total_steps == 5500
    assert agg.daily_breakdown == {date(2025, 10, 17): 5500}


def test_datetime_and_string_dates_are_normalised():
    records = [
        record("u1", datetime(2025, 10, 17, 23, 30), 100),
        record("u1", "2025-10-17", 50),
    ]
    agg = aggregate_week("u1", 2, records)
    assert agg.breakdown_as_json() == {"2025-10-17": 150}


def test_negative_steps_rejected():
    with pytest.raises(InconsistentAggregate):
        aggregate_week("u1", 2, [record("u1", date(2025, 10, 17), -1)])


def test_check_consistency():
    check_consistency(WeeklyAggregate("u1", 10, {date(2025, 10, 17): 10}))

    with pytest.raises(InconsistentAggregate) as exc_info:
        check_consistency(WeeklyAggregate("u1", 11, {date(2025, 10, 17): 10}))
    assert exc_info.value.details["breakdown_sum"] == 10
