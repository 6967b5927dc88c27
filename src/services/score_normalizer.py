"""
スコアノーマライザー

事業性レポートのスコア内訳（5 軸）を検査し、欠落または値が揃いすぎている場合は
レポート本文のテキストシグナルから決定的に内訳を合成する。
"""

from collections.abc import Callable
from typing import NamedTuple

from src.models.content import DimensionScore, ScoreBreakdown, ViabilityReport

FACTORS = (
    "market_opportunity",
    "competition_level",
    "feasibility",
    "revenue_potential",
    "impact_potential",
)

MIN_DISTINCT_VALUES = 3
MIN_SCORE = 1.0
MAX_SCORE = 10.0

# シグナルが何もない場合の基本オフセット（この時点で 4 種類の値になる）
BASE_OFFSETS: dict[str, float] = {
    "market_opportunity": 0.5,
    "competition_level": -0.5,
    "feasibility": 1.0,
    "revenue_potential": -1.0,
    "impact_potential": 0.0,
}

# 最終手段の分散パターン（FACTORS の順）
SPREAD_OFFSETS = (1.0, 0.0, -1.0, 0.5, -0.5)


class ScoreRule(NamedTuple):
    """レポートのテキストに対する判定、対象の評価軸、補正値"""

    description: str
    predicate: Callable[[ViabilityReport], bool]
    factor: str
    adjustment: float


def _text(*parts: str) -> str:
    return " ".join(parts).lower()


def _mentions(report_text: Callable[[ViabilityReport], str], *keywords: str):
    def predicate(report: ViabilityReport) -> bool:
        text = report_text(report)
        return any(keyword in text for keyword in keywords)

    return predicate


def _market_text(report: ViabilityReport) -> str:
    return _text(report.market_size, report.demand_analysis)


def _risk_text(report: ViabilityReport) -> str:
    return _text(*report.risks)


def _revenue_text(report: ViabilityReport) -> str:
    return _text(report.recommendation, report.target_audience.primary_persona, *report.strengths)


def _impact_text(report: ViabilityReport) -> str:
    return _text(report.demand_analysis, *report.strengths, *report.opportunities)


SCORE_RULES: tuple[ScoreRule, ...] = (
    ScoreRule(
        "Large addressable market",
        _mentions(_market_text, "billion"),
        "market_opportunity",
        1.0,
    ),
    ScoreRule(
        "Niche market",
        _mentions(_market_text, "niche", "small market", "limited market"),
        "market_opportunity",
        -1.0,
    ),
    ScoreRule(
        "Few direct competitors",
        lambda report: len(report.competitors) < 3,
        "competition_level",
        1.0,
    ),
    ScoreRule(
        "Crowded field",
        lambda report: len(report.competitors) >= 5,
        "competition_level",
        -1.0,
    ),
    ScoreRule(
        "Complex execution",
        _mentions(_risk_text, "complex"),
        "feasibility",
        -1.0,
    ),
    ScoreRule(
        "Regulatory exposure",
        _mentions(_risk_text, "regulat", "legal", "liability", "compliance"),
        "feasibility",
        -0.5,
    ),
    ScoreRule(
        "Recurring revenue",
        _mentions(_revenue_text, "subscription", "recurring", "membership"),
        "revenue_potential",
        1.0,
    ),
    ScoreRule(
        "Funding dependence",
        _mentions(_risk_text, "funding", "grant", "donation"),
        "revenue_potential",
        -0.5,
    ),
    ScoreRule(
        "Community benefit",
        _mentions(_impact_text, "community", "impact", "neighbor"),
        "impact_potential",
        0.5,
    ),
    ScoreRule(
        "Multiple growth opportunities",
        lambda report: len(report.opportunities) >= 3,
        "impact_potential",
        0.5,
    ),
)


def clamp(value: float, low: float = MIN_SCORE, high: float = MAX_SCORE) -> float:
    return min(high, max(low, value))


def _scores(breakdown: ScoreBreakdown | None) -> list[float] | None:
    if breakdown is None:
        return None
    dimensions = [getattr(breakdown, factor) for factor in FACTORS]
    if any(dimension is None for dimension in dimensions):
        return None
    return [dimension.score for dimension in dimensions]


def is_acceptable(breakdown: ScoreBreakdown | None) -> bool:
    """5 軸すべてが揃い、小数第 1 位で丸めた値が 3 種類以上あるか"""
    scores = _scores(breakdown)
    if scores is None:
        return False
    return len({round(score, 1) for score in scores}) >= MIN_DISTINCT_VALUES


def synthesize_breakdown(report: ViabilityReport) -> ScoreBreakdown:
    """ルールテーブルからスコア内訳を合成

    Args:
        report: 事業性レポート

    Returns:
        5 軸が揃い、3 種類以上の値を持つスコア内訳
    """
    base = report.viability_score
    offsets = dict(BASE_OFFSETS)
    reasons: dict[str, list[str]] = {factor: [] for factor in FACTORS}

    for rule in SCORE_RULES:
        if rule.predicate(report):
            offsets[rule.factor] += rule.adjustment
            reasons[rule.factor].append(rule.description)

    scores = {factor: round(clamp(base + offsets[factor]), 1) for factor in FACTORS}

    # 端の値でクランプされて値が潰れた場合は中央寄せの分散パターンに切り替える
    if len(set(scores.values())) < MIN_DISTINCT_VALUES:
        center = clamp(base, 2.0, 9.0)
        scores = {
            factor: round(clamp(center + offset), 1)
            for factor, offset in zip(FACTORS, SPREAD_OFFSETS)
        }

    return ScoreBreakdown(
        **{
            factor: DimensionScore(
                score=scores[factor],
                explanation="; ".join(reasons[factor]) or "Estimated from overall viability score",
            )
            for factor in FACTORS
        }
    )


def normalize(report: ViabilityReport) -> ViabilityReport:
    """スコア内訳を検証し、必要なら合成した内訳に置き換えたレポートを返す

    入力のレポートは変更しない。
    """
    if is_acceptable(report.score_breakdown):
        return report
    return report.model_copy(update={"score_breakdown": synthesize_breakdown(report)})
