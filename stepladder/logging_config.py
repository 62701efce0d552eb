"""
日志初始化（Logging Bootstrap）

说明：
- 统一初始化根日志记录器（root logger），设置格式与日志等级；
- 等级从显式传入 `level` 或环境变量 `LOG_LEVEL` 读取，默认 INFO；
- 排行榜构建日志（stepladder.services）可单独设置等级，例如生产环境整体 WARNING、
  构建过程仍保留 INFO；未设置时跟随根等级；
- SQLAlchemy 引擎日志固定为 WARNING，避免 DEBUG 时被 SQL 语句淹没；
- 在 stepladder/main.py 与 crontab 脚本启动时各调用一次。
"""

import logging
import os
from typing import Optional

SERVICES_LOGGER = "stepladder.services"


def _to_level(name: str) -> int:
    return getattr(logging, name.upper(), logging.INFO)


def setup_logging(level: str = None, service_level: Optional[str] = None) -> None:
    """
    初始化全局日志配置。

    参数：
        level: 可选的日志等级（字符串）。若未提供，则读取环境变量 LOG_LEVEL（默认 INFO）。
        service_level: 可选，stepladder.services 的日志等级。若未提供，则读取环境变量
            SERVICE_LOG_LEVEL；两者都没有时不单独设置。
    """
    log_level = level or os.environ.get('LOG_LEVEL', 'INFO')
    logging.basicConfig(
        level=_to_level(log_level),
        format='%(asctime)s %(levelname)s [%(name)s] %(message)s'
    )

    service_level = service_level or os.environ.get('SERVICE_LOG_LEVEL')
    if service_level:
        logging.getLogger(SERVICES_LOGGER).setLevel(_to_level(service_level))

    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
