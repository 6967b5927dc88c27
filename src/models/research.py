"""
市場調査関連モデル

MarketResearchData, CompetitorInsight, ResearchEntry
"""

import time

from pydantic import ConfigDict, Field, model_validator

from src.models.idea import CamelModel


class ResearchQueryResult(CamelModel):
    """市場調査プロバイダーの 1 クエリ分の応答"""

    query: str
    answer: str = ""
    citations: list[str] = Field(default_factory=list)


class MarketResearchData(CamelModel):
    """市場調査結果（どのフィールドも空であり得る）"""

    market_size: str = ""
    demand_signals: str = ""
    competitor_urls: list[str] = Field(default_factory=list)
    competitor_names: list[str] = Field(default_factory=list)
    funding_landscape: str = ""
    trends: str = ""
    raw_responses: list[ResearchQueryResult] = Field(default_factory=list)


class CompetitorInsight(CamelModel):
    """スクレイピングした競合サイト 1 件分のインサイト"""

    model_config = ConfigDict(frozen=True)

    url: str
    name: str
    tagline: str = ""
    description: str = ""
    key_messages: tuple[str, ...] = ()
    target_audience: str = "General public"
    pricing_model: str = "Not visible on homepage"
    differentiators: tuple[str, ...] = ()
    raw_content: str = ""


class ResearchEntry(CamelModel):
    """サブジェクトキーごとのリサーチ結果キャッシュエントリ

    trust_research はエントリの有効期間中、そのサブジェクトの全セクションに対する
    唯一の判定結果となる。
    """

    model_config = ConfigDict(frozen=True)

    research: MarketResearchData | None = None
    competitor_insights: tuple[CompetitorInsight, ...] = ()
    created_at: float = Field(default_factory=time.time)
    research_attempted: bool = False
    trust_research: bool = False

    @model_validator(mode="after")
    def _check_trust_requires_attempt(self) -> "ResearchEntry":
        if self.trust_research and not self.research_attempted:
            raise ValueError("trust_research requires research_attempted")
        return self

    @classmethod
    def not_attempted(cls, created_at: float | None = None) -> "ResearchEntry":
        """リサーチ未実施のエントリ"""
        if created_at is None:
            return cls()
        return cls(created_at=created_at)
