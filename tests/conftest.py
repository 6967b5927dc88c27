"""Test configuration"""
import pytest
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker

from src.database.connection import Base
# Import all models to ensure they are registered
from src.models.deep_dive import DeepDiveResult  # noqa: F401
from src.models.idea import CommitmentLevel, Idea, UserLocation, UserProfile, VentureType
from src.models.research import MarketResearchData


@pytest.fixture
async def test_db():
    """テスト用データベースセッション"""
    # インメモリ SQLite
    engine = create_async_engine("sqlite+aiosqlite:///:memory:")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async_session = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async with async_session() as session:
        yield session

    await engine.dispose()


@pytest.fixture
def idea():
    """テスト用アイデア"""
    return Idea(
        id="idea-1",
        name="Acme",
        tagline="Neighborhood tool library for shared repairs",
        problem="People buy tools they use once",
        audience="Urban renters",
        impact="Less waste, more connected neighbors",
        cause_areas=["climate"],
    )


@pytest.fixture
def profile():
    """テスト用ユーザープロファイル"""
    return UserProfile(
        venture_type=VentureType.BUSINESS,
        location=UserLocation(city="Austin", state="TX"),
        causes=["climate"],
        budget="low",
        commitment=CommitmentLevel.ALL_IN,
    )


@pytest.fixture
def rich_research():
    """品質ゲートを通過する市場調査結果"""
    return MarketResearchData(
        market_size=(
            "The global tool rental market is valued at roughly 5 billion dollars, with "
            "community sharing programs growing quickly in dense metro areas."
        ),
        demand_signals="Demand is rising among renters who lack storage space.",
        competitor_urls=["https://toolshare.example.com", "https://lendit.example.org"],
        competitor_names=["ToolShare", "LendIt"],
        funding_landscape=(
            "Sustainability grants and municipal resilience funds regularly back "
            "lending libraries."
        ),
    )
