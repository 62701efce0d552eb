"""
pytest配置文件，定义测试环境和共享的测试夹具（fixtures）。

主要功能：
1. 每个测试使用 tmp_path 下独立的 SQLite 数据库文件（排行榜服务会在多个线程中各自开会话）
2. 提供数据库会话与排行榜服务
3. 提供FastAPI测试客户端（覆盖 get_db / 排行榜服务 / 赛季配置）
4. 提供构造用户、步数记录、排行榜条目的辅助夹具
"""

import os

# 必须在导入 stepladder 之前设置：测试不在默认数据库上建表
os.environ.setdefault("AUTO_CREATE_TABLES", "false")

import datetime
import uuid

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from stepladder.activities.models import ActivityRecord
from stepladder.config import SeasonConfig
from stepladder.db_base import Base
from stepladder.leaderboard.models import LeaderboardEntry
from stepladder.main import app
from stepladder.services.leaderboard_service import LeaderboardService, get_leaderboard_service
from stepladder.services.season import get_season
from stepladder.users.models import User
from stepladder.utils import get_db, make_engine


@pytest.fixture
def engine(tmp_path):
    """测试前建表，测试后释放连接"""
    engine = make_engine(f"sqlite:///{tmp_path / 'stepladder_test.db'}")
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db_session(session_factory):
    """提供数据库会话"""
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def service(session_factory):
    """串行聚合的排行榜服务，构建结果确定"""
    return LeaderboardService(session_factory, max_workers=1, build_timeout=10, lock_timeout=10)


@pytest.fixture
def season():
    """赛季开始于 8 天前，当前周为第 2 周"""
    start = datetime.datetime.now(datetime.timezone.utc) - datetime.timedelta(days=8)
    return SeasonConfig(start=start, min_week=1, max_week=10)


@pytest.fixture
def client(session_factory, service, season):
    """提供FastAPI测试客户端"""
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_leaderboard_service] = lambda: service
    app.dependency_overrides[get_season] = lambda: season
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db_session):
    """按调用顺序注册用户（即注册顺序）"""
    def _make(username: str) -> User:
        user = User(
            user_id=str(uuid.uuid4()),
            username=username,
            tag=username.lower()[:5],
            email=f"{username.lower()}@test.com",
        )
        db_session.add(user)
        db_session.commit()
        return user
    return _make


@pytest.fixture
def add_steps(db_session):
    """写入一条步数记录"""
    def _add(user: User, week_number: int, steps: int, day: datetime.date = None) -> ActivityRecord:
        if day is None:
            day = datetime.date(2025, 10, 10) + datetime.timedelta(days=7 * (week_number - 1))
        record = ActivityRecord(user_id=user.user_id, date=day, step_count=steps, week_number=week_number)
        db_session.add(record)
        db_session.commit()
        return record
    return _add


@pytest.fixture
def add_entry(db_session):
    """直接写入一条已生成的排行榜条目（模拟上一周快照）"""
    def _add(user: User, week_number: int, rank: int, total_steps: int = 1000) -> LeaderboardEntry:
        entry = LeaderboardEntry(
            week_number=week_number,
            user_id=user.user_id,
            display_name=user.username,
            display_tag=user.tag,
            total_steps=total_steps,
            rank=rank,
            rank_history=[rank],
            trend=0,
            daily_breakdown={"2025-10-10": total_steps},
        )
        db_session.add(entry)
        db_session.commit()
        return entry
    return _add
