"""
リサーチオーケストレーター

市場調査プロバイダーと競合スクレイピングプロバイダーを順に呼び出し、
品質ゲートで信頼判定したキャッシュエントリを組み立てる。
"""

from typing import Protocol

from src.config.logging import LoggerAdapter, get_logger_with_context
from src.config.settings import Settings, get_settings
from src.models.idea import Idea, UserProfile
from src.models.research import CompetitorInsight, MarketResearchData, ResearchEntry
from src.services import quality_gate
from src.services.error_handler import ApplicationError
from src.services.research_cache import build_subject_key


class MarketResearchProvider(Protocol):
    async def conduct_market_research(
        self,
        idea_name: str,
        idea_description: str,
        primary_cause: str,
        venture_type: str,
        delivery_format: str,
        location: str | None = None,
    ) -> MarketResearchData: ...


class CompetitorScrapeProvider(Protocol):
    async def scrape_competitors(self, urls: list[str]) -> list[CompetitorInsight]: ...


class ResearchOrchestrator:
    """リサーチの実行と信頼判定"""

    def __init__(
        self,
        research_provider: MarketResearchProvider,
        scrape_provider: CompetitorScrapeProvider | None = None,
        settings: Settings | None = None,
    ):
        self.settings = settings or get_settings()
        self.research_provider = research_provider
        self.scrape_provider = scrape_provider

    async def run(self, idea: Idea, profile: UserProfile) -> ResearchEntry:
        """リサーチを実行してエントリを返す

        プロバイダーの失敗はすべてここで吸収し、例外は送出しない
        （キャンセルのみ呼び出し元へ伝播する）。

        Args:
            idea: アイデア
            profile: ユーザープロファイル

        Returns:
            リサーチエントリ
        """
        logger = get_logger_with_context(
            __name__, subject_key=build_subject_key(idea, profile)[:12]
        )

        if not self.settings.research_enabled:
            logger.info("Market research provider not configured, skipping research")
            return ResearchEntry.not_attempted()

        research = await self._conduct_research(idea, profile, logger)
        if research is None:
            return ResearchEntry(research_attempted=True, trust_research=False)

        insights = await self._scrape_competitors(research, logger)

        trusted = quality_gate.evaluate(research)
        logger.info(
            f"Research quality gate: trust={trusted}",
            extra={"checks": quality_gate.run_checks(research)},
        )

        return ResearchEntry(
            research=research,
            competitor_insights=tuple(insights),
            research_attempted=True,
            trust_research=trusted,
        )

    async def _conduct_research(
        self, idea: Idea, profile: UserProfile, logger: LoggerAdapter
    ) -> MarketResearchData | None:
        causes = idea.cause_areas or profile.causes
        location = profile.location.to_query_string() if profile.location else None

        try:
            return await self.research_provider.conduct_market_research(
                idea_name=idea.name,
                idea_description=idea.tagline,
                primary_cause=causes[0] if causes else "",
                venture_type=profile.venture_type.value if profile.venture_type else "project",
                delivery_format=profile.format.value if profile.format else "both",
                location=location,
            )
        except ApplicationError as e:
            logger.warning(f"Market research failed, continuing without research: {e.message}")
        except Exception as e:
            logger.warning(
                f"Market research failed unexpectedly, continuing without research: {str(e)}",
                exc_info=True,
            )
        return None

    async def _scrape_competitors(
        self, research: MarketResearchData, logger: LoggerAdapter
    ) -> list[CompetitorInsight]:
        if self.scrape_provider is None or not self.settings.scraping_enabled:
            return []
        if not research.competitor_urls:
            return []

        try:
            return await self.scrape_provider.scrape_competitors(research.competitor_urls)
        except ApplicationError as e:
            logger.warning(f"Competitor scraping failed, continuing without insights: {e.message}")
        except Exception as e:
            logger.warning(
                f"Competitor scraping failed unexpectedly, continuing without insights: {str(e)}",
                exc_info=True,
            )
        return []
