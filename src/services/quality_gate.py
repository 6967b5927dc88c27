"""
リサーチ品質ゲート

市場調査結果を 3 つの独立したヒューリスティックで評価し、
コンテンツ生成でリサーチ結果を信頼するかどうかを判定する純粋関数群
"""

from src.models.research import MarketResearchData

MARKET_SIZE_MIN_LENGTH = 100
FUNDING_LANDSCAPE_MIN_LENGTH = 50
MIN_COMPETITORS = 2
REQUIRED_PASSING_CHECKS = 2


def has_substantive_market_size(research: MarketResearchData) -> bool:
    """市場規模の記述が十分な長さを持ち、取得失敗を示していないか"""
    text = research.market_size or ""
    lowered = text.lower()
    return (
        len(text) > MARKET_SIZE_MIN_LENGTH
        and "unavailable" not in lowered
        and "error" not in lowered
    )


def has_competitor_coverage(research: MarketResearchData) -> bool:
    """競合名または競合 URL が 2 件以上あるか"""
    return (
        len(research.competitor_names) >= MIN_COMPETITORS
        or len(research.competitor_urls) >= MIN_COMPETITORS
    )


def has_substantive_funding_landscape(research: MarketResearchData) -> bool:
    """資金調達動向の記述が十分な長さを持ち、取得失敗を示していないか"""
    text = research.funding_landscape or ""
    return len(text) > FUNDING_LANDSCAPE_MIN_LENGTH and "unavailable" not in text.lower()


QUALITY_CHECKS = (
    has_substantive_market_size,
    has_competitor_coverage,
    has_substantive_funding_landscape,
)


def run_checks(research: MarketResearchData) -> tuple[bool, ...]:
    """各チェックの結果を QUALITY_CHECKS の順で返す"""
    return tuple(check(research) for check in QUALITY_CHECKS)


def evaluate(research: MarketResearchData | None) -> bool:
    """リサーチ結果を信頼するか判定

    3 つのチェックのうち 2 つ以上を満たせば信頼する。

    Args:
        research: 市場調査結果

    Returns:
        信頼する場合 True
    """
    if research is None:
        return False
    return sum(run_checks(research)) >= REQUIRED_PASSING_CHECKS
