"""
本文件包含数据库连接和会话管理的工具函数。

主要功能：
1. 数据库连接配置（从环境变量读取，避免硬编码）
2. 数据库会话管理
3. FastAPI依赖注入
"""

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from .config import get_database_url


DATABASE_URL = get_database_url()


def make_engine(url: str):
    """创建引擎；SQLite 需要允许跨线程使用连接（排行榜并行聚合会用到）"""
    if url.startswith("sqlite"):
        return create_engine(url, connect_args={"check_same_thread": False})
    return create_engine(url, pool_pre_ping=True)


engine = make_engine(DATABASE_URL)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db():
    """FastAPI 依赖项：获取数据库会话（Session）。"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
