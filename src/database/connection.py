"""
データベース接続モジュール

ディープダイブ結果を保存する SQLAlchemy async engine とセッションを提供します。
"""

from pathlib import Path
from typing import AsyncGenerator

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from src.config.logging import get_logger
from src.config.settings import get_settings

logger = get_logger(__name__)


class Base(DeclarativeBase):
    """SQLAlchemy ベースクラス"""

    pass


_engine = None
_async_session_maker = None


def _ensure_sqlite_directory(database_url: str) -> None:
    """SQLite ファイルの親ディレクトリを作成（インメモリは対象外）"""
    url = make_url(database_url)
    if url.get_backend_name() != "sqlite" or url.database in (None, "", ":memory:"):
        return
    Path(url.database).parent.mkdir(parents=True, exist_ok=True)


def get_engine():
    """データベースエンジンを取得（初回呼び出しで作成）"""
    global _engine
    if _engine is None:
        settings = get_settings()
        _ensure_sqlite_directory(settings.database_url)
        _engine = create_async_engine(
            settings.database_url,
            echo=settings.environment == "development",
        )
        logger.info(f"Database engine created: {make_url(settings.database_url).get_backend_name()}")

    return _engine


def get_session_maker() -> async_sessionmaker[AsyncSession]:
    """セッションメーカーを取得"""
    global _async_session_maker
    if _async_session_maker is None:
        _async_session_maker = async_sessionmaker(
            get_engine(),
            class_=AsyncSession,
            expire_on_commit=False,
        )

    return _async_session_maker


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """リクエスト単位のセッション（依存性注入用）

    エンドポイントで例外が発生した場合は未コミットの変更をロールバックする。
    """
    async with get_session_maker()() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise


async def init_db():
    """deep_dive_results テーブルを作成"""
    engine = get_engine()
    async with engine.begin() as conn:
        from src.models import deep_dive  # noqa: F401

        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database initialized")


async def close_db():
    """データベース接続を閉じる"""
    global _engine, _async_session_maker
    if _engine is not None:
        await _engine.dispose()
        logger.info("Database connection closed")
    _engine = None
    _async_session_maker = None
