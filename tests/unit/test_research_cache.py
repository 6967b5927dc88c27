"""
リサーチキャッシュのユニットテスト
"""

import asyncio
from unittest.mock import AsyncMock

import pytest

from src.models.idea import Idea, UserProfile, VentureType
from src.models.research import MarketResearchData, ResearchEntry
from src.services.research_cache import ResearchCache, build_subject_key


class FakeClock:
    """手動で進める時計"""

    def __init__(self, now: float = 1_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache(clock):
    return ResearchCache(clock=clock)


def trusted_entry() -> ResearchEntry:
    return ResearchEntry(
        research=MarketResearchData(market_size="m" * 120),
        research_attempted=True,
        trust_research=True,
    )


# ---------------------------------------------------------------------------
# Subject key
# ---------------------------------------------------------------------------


def test_subject_key_is_stable():
    """同じ入力からは同じキー"""
    idea = Idea(name="Acme")
    profile = UserProfile(venture_type=VentureType.BUSINESS, causes=["climate", "education"])

    assert build_subject_key(idea, profile) == build_subject_key(idea, profile)


def test_subject_key_ignores_cause_order_and_other_profile_fields():
    """社会課題の順序や他のプロファイル項目はキーに影響しない"""
    idea = Idea(name="Acme", tagline="one")
    a = UserProfile(venture_type=VentureType.BUSINESS, causes=["climate", "education"], budget="low")
    b = UserProfile(venture_type=VentureType.BUSINESS, causes=["education", "climate"], budget="high")

    assert build_subject_key(idea, a) == build_subject_key(Idea(name="Acme", tagline="two"), b)


@pytest.mark.parametrize(
    "other_idea,other_profile",
    [
        (Idea(name="Acme 2"), UserProfile(venture_type=VentureType.BUSINESS, causes=["climate"])),
        (Idea(name="Acme"), UserProfile(venture_type=VentureType.NONPROFIT, causes=["climate"])),
        (Idea(name="Acme"), UserProfile(venture_type=VentureType.BUSINESS, causes=["health"])),
    ],
)
def test_subject_key_distinguishes_subjects(other_idea, other_profile):
    """名前・事業形態・社会課題が異なればキーも異なる"""
    base = build_subject_key(
        Idea(name="Acme"), UserProfile(venture_type=VentureType.BUSINESS, causes=["climate"])
    )
    assert build_subject_key(other_idea, other_profile) != base


# ---------------------------------------------------------------------------
# get / put / TTL
# ---------------------------------------------------------------------------


def test_get_returns_entry_within_ttl(cache, clock):
    """TTL 内のエントリは取得できる"""
    entry = trusted_entry().model_copy(update={"created_at": clock()})
    cache.put("key", entry)

    clock.advance(ResearchCache.TTL_SECONDS - 1)

    assert cache.get("key") is entry


def test_expired_entry_is_a_miss(cache, clock):
    """TTL を過ぎたエントリはミス扱いになり削除される"""
    cache.put("key", trusted_entry().model_copy(update={"created_at": clock()}))

    clock.advance(ResearchCache.TTL_SECONDS)

    assert cache.get("key") is None
    assert len(cache) == 0
    # 期限切れ判定は冪等
    assert cache.get("key") is None


def test_is_valid_boundary(cache, clock):
    entry = ResearchEntry.not_attempted(created_at=clock())

    assert cache.is_valid(entry) is True
    clock.advance(ResearchCache.TTL_SECONDS - 1)
    assert cache.is_valid(entry) is True
    clock.advance(1)
    assert cache.is_valid(entry) is False


# ---------------------------------------------------------------------------
# get_or_run
# ---------------------------------------------------------------------------


async def test_second_request_hits_cache(cache, clock):
    """同じサブジェクトの 2 回目の呼び出しはプロバイダーを呼ばない"""
    idea = Idea(name="Acme")
    profile = UserProfile(venture_type=VentureType.BUSINESS, causes=["climate"])
    key = build_subject_key(idea, profile)
    run = AsyncMock(return_value=trusted_entry())

    first = await cache.get_or_run(key, run)
    clock.advance(60)
    second = await cache.get_or_run(key, run)

    assert run.await_count == 1
    assert second is first
    assert second.trust_research is True


async def test_created_at_is_stamped_at_store_time(cache, clock):
    """作成時刻はキャッシュの時計で書き込み時に設定される"""
    entry = await cache.get_or_run("key", AsyncMock(return_value=ResearchEntry(created_at=0.0)))

    assert entry.created_at == clock()


async def test_expired_entry_is_recomputed(cache, clock):
    """期限切れ後はリサーチを再実行する"""
    run = AsyncMock(return_value=trusted_entry())

    await cache.get_or_run("key", run)
    clock.advance(ResearchCache.TTL_SECONDS + 1)
    await cache.get_or_run("key", run)

    assert run.await_count == 2


async def test_concurrent_misses_share_one_run(cache):
    """同時ミスは 1 回の実行を共有する"""
    started = asyncio.Event()
    release = asyncio.Event()
    calls = 0

    async def run():
        nonlocal calls
        calls += 1
        started.set()
        await release.wait()
        return trusted_entry()

    first = asyncio.create_task(cache.get_or_run("key", run))
    await started.wait()
    second = asyncio.create_task(cache.get_or_run("key", run))
    await asyncio.sleep(0)
    release.set()

    results = await asyncio.gather(first, second)

    assert calls == 1
    assert results[0] is results[1]
    assert len(cache) == 1


async def test_failed_run_writes_nothing(cache):
    """実行が例外で終わった場合は書き込まない"""
    run = AsyncMock(side_effect=RuntimeError("boom"))

    with pytest.raises(RuntimeError):
        await cache.get_or_run("key", run)

    assert cache.get("key") is None


async def test_cancellation_writes_nothing(cache):
    """キャンセルされた場合は部分的な結果を書き込まない"""
    started = asyncio.Event()

    async def run():
        started.set()
        await asyncio.sleep(3600)
        return trusted_entry()

    task = asyncio.create_task(cache.get_or_run("key", run))
    await started.wait()
    task.cancel()

    with pytest.raises(asyncio.CancelledError):
        await task
    # 共有タスクのキャンセル完了を待つ
    await asyncio.sleep(0)

    assert cache.get("key") is None
    assert len(cache) == 0


async def test_cancelling_one_waiter_keeps_shared_run(cache):
    """待機者の 1 人がキャンセルされても他の待機者の実行は継続する"""
    started = asyncio.Event()
    release = asyncio.Event()

    async def run():
        started.set()
        await release.wait()
        return trusted_entry()

    first = asyncio.create_task(cache.get_or_run("key", run))
    await started.wait()
    second = asyncio.create_task(cache.get_or_run("key", run))
    await asyncio.sleep(0)

    first.cancel()
    with pytest.raises(asyncio.CancelledError):
        await first

    release.set()
    entry = await second

    assert entry.trust_research is True
    assert cache.get("key") is entry


async def test_close_clears_entries(cache):
    await cache.get_or_run("key", AsyncMock(return_value=trusted_entry()))

    await cache.close()

    assert len(cache) == 0
