"""
ディープダイブ生成コンテンツのスキーマ

ViabilityReport, BusinessPlan, MarketingAssets, ActionRoadmap
各クラスはそのまま LLM への構造化出力スキーマとしても使用する。
"""

from typing import Literal

from pydantic import AliasChoices, Field, field_validator

from src.models.idea import CamelModel


# ---------------------------------------------------------------------------
# Viability report
# ---------------------------------------------------------------------------


class DimensionScore(CamelModel):
    """評価軸ごとのスコア"""

    score: float = Field(description="1-10 のスコア")
    explanation: str = Field(default="", description="一行の説明")

    @field_validator("score")
    @classmethod
    def _clamp_score(cls, value: float) -> float:
        return min(10.0, max(1.0, value))


class ScoreBreakdown(CamelModel):
    """5 軸のスコア内訳"""

    market_opportunity: DimensionScore | None = None
    competition_level: DimensionScore | None = None
    feasibility: DimensionScore | None = None
    revenue_potential: DimensionScore | None = None
    impact_potential: DimensionScore | None = None


class Competitor(CamelModel):
    """競合"""

    name: str
    url: str = ""
    description: str = ""
    strengths: list[str] = Field(default_factory=list)
    weaknesses: list[str] = Field(default_factory=list)


class AudienceProfile(CamelModel):
    """ターゲット顧客像"""

    primary_persona: str = ""
    demographics: str = ""
    pain_points: list[str] = Field(default_factory=list)
    motivations: list[str] = Field(default_factory=list)


class ViabilityReport(CamelModel):
    """事業性レポート"""

    market_size: str = ""
    demand_analysis: str = ""
    competitors: list[Competitor] = Field(default_factory=list)
    target_audience: AudienceProfile = Field(default_factory=AudienceProfile)
    strengths: list[str] = Field(default_factory=list)
    risks: list[str] = Field(default_factory=list)
    opportunities: list[str] = Field(default_factory=list)
    viability_score: float = Field(description="総合スコア（1-10）")
    score_breakdown: ScoreBreakdown | None = None
    verdict: Literal["go", "refine", "pivot"] = "refine"
    recommendation: str = ""

    @field_validator("viability_score")
    @classmethod
    def _clamp_score(cls, value: float) -> float:
        return min(10.0, max(1.0, value))


class CompetitorPositioning(CamelModel):
    """調査結果に基づく競合ポジショニング"""

    competitor: str
    positioning: str = ""
    gap: str = ""


class ResearchBackedViabilityReport(ViabilityReport):
    """リサーチ結果を根拠にした事業性レポート"""

    research_sources: list[str] = Field(default_factory=list)
    competitor_positioning: list[CompetitorPositioning] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Business plan
# ---------------------------------------------------------------------------


class RevenueStream(CamelModel):
    name: str
    description: str = ""
    estimated_revenue: str = ""
    timeline: str = ""


class VolunteerPlan(CamelModel):
    roles_needed: list[str] = Field(default_factory=list)
    recruitment_strategy: str = ""
    retention_strategy: str = ""


class FinancialProjection(CamelModel):
    year: int
    revenue: float = 0
    expenses: float = 0
    net_income: float = 0


class BudgetItem(CamelModel):
    category: str
    amount: float = 0
    priority: Literal["essential", "important", "nice_to_have"] = "important"
    notes: str = ""


class Partnership(CamelModel):
    type: str
    description: str = ""
    potential_partners: list[str] = Field(default_factory=list)


class ImpactMetric(CamelModel):
    metric: str
    target: str = ""
    measurement_method: str = ""
    frequency: str = ""


class BusinessPlan(CamelModel):
    """事業計画"""

    executive_summary: str = ""
    mission_statement: str = ""
    impact_thesis: str = ""
    revenue_streams: list[RevenueStream] | None = None
    volunteer_plan: VolunteerPlan | None = None
    financial_projections: list[FinancialProjection] | None = None
    budget_plan: list[BudgetItem] | None = None
    partnerships: list[Partnership] = Field(default_factory=list)
    operations: str = ""
    impact_measurement: list[ImpactMetric] = Field(default_factory=list)


class ResearchBackedBusinessPlan(BusinessPlan):
    """リサーチ結果を根拠にした事業計画"""

    competitive_advantage: str = ""
    research_sources: list[str] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Marketing assets
# ---------------------------------------------------------------------------


class SocialPost(CamelModel):
    platform: Literal["twitter", "linkedin", "instagram", "nextdoor"]
    content: str
    hashtags: list[str] = Field(default_factory=list)


class EmailTemplate(CamelModel):
    subject: str = ""
    body: str = ""


class MarketingAssets(CamelModel):
    """マーケティング素材"""

    elevator_pitch: str = ""
    tagline: str = ""
    landing_page_headline: str = ""
    landing_page_subheadline: str = ""
    social_posts: list[SocialPost] = Field(default_factory=list)
    email_template: EmailTemplate = Field(default_factory=EmailTemplate)
    primary_cta: str = Field(
        default="",
        validation_alias=AliasChoices("primaryCTA", "primaryCta", "primary_cta"),
        serialization_alias="primaryCTA",
    )


class ResearchBackedMarketingAssets(MarketingAssets):
    """競合の訴求を踏まえたマーケティング素材"""

    competitor_differentiation: list[str] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Action roadmap
# ---------------------------------------------------------------------------


class QuickWin(CamelModel):
    task: str
    timeframe: str = ""
    cost: Literal["free", "low", "medium"] = "free"


class RoadmapTask(CamelModel):
    task: str
    priority: Literal["critical", "high", "medium", "low"] = "medium"
    cost: Literal["free", "low", "medium", "high"] = "free"
    dependencies: list[str] = Field(default_factory=list)


class Phase(CamelModel):
    name: str
    duration: str = ""
    tasks: list[RoadmapTask] = Field(default_factory=list)


class ActionRoadmap(CamelModel):
    """アクションロードマップ"""

    quick_wins: list[QuickWin] = Field(default_factory=list)
    phases: list[Phase] = Field(default_factory=list)
    skip_list: list[str] = Field(default_factory=list)


class ResearchBackedActionRoadmap(ActionRoadmap):
    """調査で見つかった機会・リスクを反映したロードマップ"""

    market_validation_steps: list[str] = Field(default_factory=list)


DeepDiveContent = ViabilityReport | BusinessPlan | MarketingAssets | ActionRoadmap
