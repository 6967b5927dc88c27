"""
リサーチ品質ゲートのユニットテスト
"""

import pytest

from src.models.research import MarketResearchData
from src.services import quality_gate

SUBSTANTIVE_MARKET = "x" * 150
SUBSTANTIVE_FUNDING = "Foundations and impact investors actively fund this space." * 2


def test_two_of_three_passing_is_trusted():
    """市場規模と競合が通過し資金調達が失敗する場合は信頼する"""
    research = MarketResearchData(
        market_size=SUBSTANTIVE_MARKET,
        competitor_names=[],
        competitor_urls=["a", "b"],
        funding_landscape="unavailable",
    )

    assert quality_gate.run_checks(research) == (True, True, False)
    assert quality_gate.evaluate(research) is True


def test_all_checks_passing_is_trusted(rich_research):
    """3 つすべて通過"""
    assert quality_gate.run_checks(rich_research) == (True, True, True)
    assert quality_gate.evaluate(rich_research) is True


def test_one_of_three_passing_is_not_trusted():
    """1 つだけ通過する場合は信頼しない"""
    research = MarketResearchData(
        market_size=SUBSTANTIVE_MARKET,
        competitor_names=["Only One"],
        funding_landscape="Funding research unavailable",
    )

    assert sum(quality_gate.run_checks(research)) == 1
    assert quality_gate.evaluate(research) is False


def test_empty_research_is_not_trusted():
    """空の調査結果は信頼しない"""
    assert quality_gate.evaluate(MarketResearchData()) is False


def test_none_is_not_trusted():
    """調査結果なし"""
    assert quality_gate.evaluate(None) is False


@pytest.mark.parametrize(
    "market_size,expected",
    [
        ("x" * 100, False),
        ("x" * 101, True),
        ("Market research unavailable" + "x" * 100, False),
        ("An ERROR occurred while searching" + "x" * 100, False),
        ("", False),
    ],
)
def test_market_size_check(market_size, expected):
    """市場規模チェックの境界"""
    research = MarketResearchData(market_size=market_size)
    assert quality_gate.has_substantive_market_size(research) is expected


@pytest.mark.parametrize(
    "funding,expected",
    [
        ("x" * 50, False),
        ("x" * 51, True),
        ("Funding research UNAVAILABLE" + "x" * 50, False),
        # 資金調達チェックは "error" を除外条件にしない
        ("Error-prone grant processes still fund many programs" + "x" * 10, True),
    ],
)
def test_funding_landscape_check(funding, expected):
    """資金調達チェックの境界"""
    research = MarketResearchData(funding_landscape=funding)
    assert quality_gate.has_substantive_funding_landscape(research) is expected


@pytest.mark.parametrize(
    "names,urls,expected",
    [
        ([], [], False),
        (["A"], ["https://a.example.com"], False),
        (["A", "B"], [], True),
        ([], ["https://a.example.com", "https://b.example.com"], True),
    ],
)
def test_competitor_coverage_check(names, urls, expected):
    """競合カバレッジは名前または URL が 2 件以上"""
    research = MarketResearchData(competitor_names=names, competitor_urls=urls)
    assert quality_gate.has_competitor_coverage(research) is expected


def test_evaluate_is_pure(rich_research):
    """同じ入力に対して同じ結果を返し、入力を変更しない"""
    before = rich_research.model_dump()

    first = quality_gate.evaluate(rich_research)
    second = quality_gate.evaluate(rich_research)

    assert first == second
    assert rich_research.model_dump() == before
