"""
データベース接続のユニットテスト
"""

from unittest.mock import MagicMock, patch

import pytest
from sqlalchemy import inspect, select

from src.database import connection
from src.models.deep_dive import DeepDiveResult


@pytest.fixture
def file_settings(tmp_path):
    """存在しないディレクトリ配下の SQLite ファイルを指す設定"""
    settings = MagicMock()
    settings.database_url = f"sqlite+aiosqlite:///{tmp_path / 'nested' / 'deep_dive.db'}"
    settings.environment = "test"
    return settings


@pytest.fixture
async def database(file_settings):
    with patch("src.database.connection.get_settings", return_value=file_settings):
        await connection.close_db()
        await connection.init_db()
        yield file_settings
        await connection.close_db()


@pytest.mark.asyncio
async def test_init_db_creates_directory_and_table(database, tmp_path):
    """親ディレクトリと deep_dive_results テーブルを作成する"""
    assert (tmp_path / "nested").is_dir()

    async with connection.get_engine().connect() as conn:
        tables = await conn.run_sync(lambda sync_conn: inspect(sync_conn).get_table_names())

    assert "deep_dive_results" in tables


@pytest.mark.asyncio
async def test_get_session_persists(database):
    """依存性注入用セッションで保存した結果を別セッションから取得できる"""
    sessions = connection.get_session()
    session = await sessions.__anext__()
    session.add(DeepDiveResult(idea_id="idea-1"))
    await session.commit()
    await sessions.aclose()

    async with connection.get_session_maker()() as other:
        result = await other.execute(
            select(DeepDiveResult).where(DeepDiveResult.idea_id == "idea-1")
        )
        assert result.scalar_one().idea_id == "idea-1"


@pytest.mark.asyncio
async def test_get_session_rolls_back_on_error(database):
    """エンドポイントで例外が起きた場合は未コミットの変更を破棄する"""
    sessions = connection.get_session()
    session = await sessions.__anext__()
    session.add(DeepDiveResult(idea_id="idea-2"))
    await session.flush()

    with pytest.raises(RuntimeError):
        await sessions.athrow(RuntimeError("endpoint failed"))

    async with connection.get_session_maker()() as other:
        result = await other.execute(
            select(DeepDiveResult).where(DeepDiveResult.idea_id == "idea-2")
        )
        assert result.scalar_one_or_none() is None


@pytest.mark.asyncio
async def test_close_db_resets_engine(database):
    engine = connection.get_engine()

    await connection.close_db()

    assert connection._engine is None
    assert connection._async_session_maker is None
    assert connection.get_engine() is not engine
