"""
Leaderboard Service（周排行榜快照服务）

职责：
- 对全部用户聚合某一周的步数，按总步数排名
- 与上一周已保存的名次比较，计算趋势与名次历史
- 整体替换该周的排行榜快照（删除 + 插入同一事务提交）

并发约束：
- 同一进程内，同一周同时最多只有一次构建（按周加锁）
- get_or_build_week 拿到锁后会再读一次，已被其他调用方生成则直接返回
- 单用户聚合彼此独立，可在线程池中并行；排名与写库在全部聚合完成后串行执行

排名规则：
- 总步数降序；总步数相同时先注册的用户在前（users.id 升序）
- 名次 1..K 连续、不并列；本周总步数为 0 的用户不上榜
"""

import logging
import threading
import time
from concurrent.futures import ThreadPoolExecutor, wait
from contextlib import contextmanager
from typing import Any, Callable, Dict, List, NamedTuple, Optional

from sqlalchemy.orm import Session

from ..activities import crud as activities_crud
from ..config import AGGREGATION_WORKERS, BUILD_LOCK_TIMEOUT, BUILD_TIMEOUT
from ..exceptions import ConcurrentBuildConflict, LeaderboardBuildTimeout
from ..leaderboard import crud as leaderboard_crud
from ..leaderboard import schemas
from ..users import crud as users_crud
from ..utils import SessionLocal
from .aggregator import WeeklyAggregate, aggregate_week, check_consistency

logger = logging.getLogger(__name__)


class UserIdentity(NamedTuple):
    user_id: str
    display_name: str
    display_tag: str


def calculate_trend(current_rank: int, previous_rank: Optional[int]) -> int:
    """名次数值越小越好：上升 1，下降 -1，持平或上周无名次 0"""
    if not previous_rank:
        return 0
    if current_rank < previous_rank:
        return 1
    if current_rank > previous_rank:
        return -1
    return 0


def rank_entries(
    users: List[UserIdentity],
    aggregates: Dict[str, WeeklyAggregate],
    previous_ranks: Dict[str, int],
) -> List[Dict[str, Any]]:
    """
    根据聚合结果生成排行榜条目（不含 week_number）。

    Args:
        users: 按注册顺序排列的用户
        aggregates: user_id -> 周聚合
        previous_ranks: user_id -> 上周名次（无则表示上周未上榜）

    Returns:
        list[dict]: 按名次升序的条目字段
    """
    candidates = []
    for position, user in enumerate(users):
        aggregate = aggregates[user.user_id]
        check_consistency(aggregate)
        if aggregate.total_steps <= 0:
            continue
        candidates.append((position, user, aggregate))

    candidates.sort(key=lambda item: (-item[2].total_steps, item[0]))

    rows = []
    for index, (_, user, aggregate) in enumerate(candidates):
        rank = index + 1
        previous_rank = previous_ranks.get(user.user_id)
        rows.append({
            "user_id": user.user_id,
            "display_name": user.display_name,
            "display_tag": user.display_tag,
            "total_steps": aggregate.total_steps,
            "rank": rank,
            "rank_history": [previous_rank, rank] if previous_rank else [rank],
            "trend": calculate_trend(rank, previous_rank),
            "daily_breakdown": aggregate.breakdown_as_json(),
        })
    return rows


class LeaderboardService:
    """周排行榜快照服务"""

    def __init__(
        self,
        session_factory: Callable[[], Session] = SessionLocal,
        max_workers: int = AGGREGATION_WORKERS,
        build_timeout: Optional[float] = BUILD_TIMEOUT,
        lock_timeout: Optional[float] = BUILD_LOCK_TIMEOUT,
    ):
        self._session_factory = session_factory
        self._max_workers = max(1, max_workers)
        self._build_timeout = build_timeout
        self._lock_timeout = lock_timeout
        self._week_locks: Dict[int, threading.Lock] = {}
        self._registry_lock = threading.Lock()

    # ---- 按周加锁 ----

    def _week_lock(self, week_number: int) -> threading.Lock:
        with self._registry_lock:
            lock = self._week_locks.get(week_number)
            if lock is None:
                lock = threading.Lock()
                self._week_locks[week_number] = lock
            return lock

    @contextmanager
    def _hold_week(self, week_number: int):
        lock = self._week_lock(week_number)
        timeout = -1 if self._lock_timeout is None else self._lock_timeout
        if not lock.acquire(timeout=timeout):
            logger.warning("[leaderboard][lock-timeout] week=%s timeout=%s", week_number, self._lock_timeout)
            raise ConcurrentBuildConflict(details={"week_number": week_number})
        try:
            yield
        finally:
            lock.release()

    # ---- 对外接口 ----

    def build_week(self, week_number: int) -> List[schemas.LeaderboardEntry]:
        """强制重建某周快照，返回按名次升序的条目"""
        with self._hold_week(week_number):
            return self._build(week_number)

    def get_or_build_week(self, week_number: int) -> List[schemas.LeaderboardEntry]:
        """读穿：已有快照直接返回，否则先生成再读取"""
        entries = self.get_entries(week_number)
        if entries:
            return entries
        with self._hold_week(week_number):
            # 等锁期间可能已由其他调用方生成
            entries = self.get_entries(week_number)
            if entries:
                return entries
            return self._build(week_number)

    def get_entries(self, week_number: int) -> List[schemas.LeaderboardEntry]:
        db = self._session_factory()
        try:
            return [
                schemas.LeaderboardEntry.model_validate(entry)
                for entry in leaderboard_crud.get_persisted_entries(db, week_number)
            ]
        finally:
            db.close()

    def week_state(self, week_number: int) -> schemas.WeekState:
        with self._registry_lock:
            lock = self._week_locks.get(week_number)
        if lock is not None and lock.locked():
            return schemas.WeekState.GENERATING
        if self.get_entries(week_number):
            return schemas.WeekState.GENERATED
        return schemas.WeekState.NOT_GENERATED

    # ---- 构建 ----

    def _build(self, week_number: int) -> List[schemas.LeaderboardEntry]:
        started = time.monotonic()
        logger.info("[leaderboard][build-start] week=%s", week_number)
        db = self._session_factory()
        try:
            users = [
                UserIdentity(u.user_id, u.username, u.tag)
                for u in users_crud.list_users(db)
            ]
            previous_ranks = {
                entry.user_id: entry.rank
                for entry in leaderboard_crud.get_persisted_entries(db, week_number - 1)
            }
            aggregates = self._aggregate_all(db, [u.user_id for u in users], week_number)
            rows = rank_entries(users, aggregates, previous_ranks)
            leaderboard_crud.replace_week_entries(db, week_number, rows)
            entries = [
                schemas.LeaderboardEntry.model_validate(entry)
                for entry in leaderboard_crud.get_persisted_entries(db, week_number)
            ]
        except Exception:
            logger.exception("[leaderboard][build-failed] week=%s", week_number)
            raise
        finally:
            db.close()

        logger.info(
            "[leaderboard][build-done] week=%s users=%s entries=%s elapsed=%.3fs",
            week_number, len(users), len(entries), time.monotonic() - started
        )
        return entries

    def _aggregate_user(self, user_id: str, week_number: int) -> WeeklyAggregate:
        """线程池任务：每个任务使用独立的会话"""
        db = self._session_factory()
        try:
            records = activities_crud.get_activity_records(db, user_id, week_number)
            return aggregate_week(user_id, week_number, records)
        finally:
            db.close()

    def _aggregate_all(self, db: Session, user_ids: List[str], week_number: int) -> Dict[str, WeeklyAggregate]:
        if self._max_workers == 1 or len(user_ids) <= 1:
            deadline = None if self._build_timeout is None else time.monotonic() + self._build_timeout
            aggregates = {}
            for user_id in user_ids:
                if deadline is not None and time.monotonic() > deadline:
                    raise LeaderboardBuildTimeout(details={"week_number": week_number})
                records = activities_crud.get_activity_records(db, user_id, week_number)
                aggregates[user_id] = aggregate_week(user_id, week_number, records)
            return aggregates

        executor = ThreadPoolExecutor(max_workers=self._max_workers, thread_name_prefix="leaderboard-agg")
        try:
            futures = {
                executor.submit(self._aggregate_user, user_id, week_number): user_id
                for user_id in user_ids
            }
            done, not_done = wait(futures, timeout=self._build_timeout)
            if not_done:
                for future in not_done:
                    future.cancel()
                raise LeaderboardBuildTimeout(details={
                    "week_number": week_number,
                    "pending_users": len(not_done),
                })
            # 任一任务失败都中止整个构建
            return {futures[future]: future.result() for future in done}
        finally:
            executor.shutdown(wait=False)


# 创建单例实例
leaderboard_service = LeaderboardService()


def get_leaderboard_service() -> LeaderboardService:
    """FastAPI 依赖项：获取排行榜服务（测试中可覆盖）"""
    return leaderboard_service
