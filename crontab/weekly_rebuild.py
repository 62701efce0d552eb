#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
排行榜定时重建脚本

用法：
    python -m crontab.weekly_rebuild              # 重建当前赛季周
    python -m crontab.weekly_rebuild --week 3     # 重建指定周
    python -m crontab.weekly_rebuild --through-current   # 从第 1 周依次重建到当前周

数据库与赛季配置读取同一套环境变量（见 stepladder/config.py）。
任一周重建失败时记录日志并以非 0 退出码结束，便于 cron / 监控发现。
"""

import argparse
import logging
import sys

from stepladder.config import LOG_LEVEL, SERVICE_LOG_LEVEL, get_season_config
from stepladder.exceptions import ServiceError
from stepladder.logging_config import setup_logging
from stepladder.services.leaderboard_service import LeaderboardService
from stepladder.services.season import current_week

logger = logging.getLogger("crontab.weekly_rebuild")


def rebuild_weeks(service: LeaderboardService, weeks) -> int:
    """按顺序重建给定的周，返回失败的周数"""
    failures = 0
    for week_number in weeks:
        try:
            entries = service.build_week(week_number)
        except ServiceError as e:
            failures += 1
            logger.error("[weekly-rebuild][failed] week=%s code=%s message=%s", week_number, e.code, e.message)
            continue
        logger.info("[weekly-rebuild][done] week=%s entries=%s", week_number, len(entries))
    return failures


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="重建周步数排行榜快照")
    parser.add_argument("--week", type=int, help="要重建的赛季周，不传则为当前周")
    parser.add_argument("--through-current", action="store_true", help="从第 1 周依次重建到当前周")
    args = parser.parse_args(argv)

    setup_logging(LOG_LEVEL, SERVICE_LOG_LEVEL)
    season = get_season_config()
    this_week = current_week(season)
    if args.week is not None and not season.min_week <= args.week <= season.max_week:
        parser.error(f"--week 必须在赛季范围 {season.min_week}~{season.max_week} 内")

    if args.week is not None:
        weeks = [args.week]
    elif args.through_current:
        # 按周次升序，保证每周的趋势基于已重建的上一周
        weeks = list(range(season.min_week, this_week + 1))
    else:
        weeks = [this_week]

    failures = rebuild_weeks(LeaderboardService(), weeks)
    return 0 if failures == 0 else 1


if __name__ == "__main__":
    sys.exit(main())
