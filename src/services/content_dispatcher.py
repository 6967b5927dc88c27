"""
コンテンツディスパッチャー

セクションごとにプロンプトとスキーマを選択して LLM で生成し、
生成に失敗した場合はコミットメントレベル別のフォールバックコンテンツに置き換える。
"""

from dataclasses import dataclass

from src.config.logging import get_logger_with_context
from src.models.content import (
    ActionRoadmap,
    BusinessPlan,
    DeepDiveContent,
    MarketingAssets,
    ResearchBackedActionRoadmap,
    ResearchBackedBusinessPlan,
    ResearchBackedMarketingAssets,
    ResearchBackedViabilityReport,
    ViabilityReport,
)
from src.models.idea import DeepDiveSection, Idea, UserProfile
from src.models.research import ResearchEntry
from src.services import prompts
from src.services.error_handler import ApplicationError, DeepDiveRequestError, ErrorCode
from src.services.fallback_content import get_fallback_content
from src.services.llm_client import StructuredLLMClient


@dataclass(frozen=True)
class SectionSpec:
    """セクションごとの生成パラメータ"""

    baseline_schema: type[DeepDiveContent]
    research_schema: type[DeepDiveContent]
    temperature: float
    max_tokens: int


SECTION_SPECS: dict[DeepDiveSection, SectionSpec] = {
    DeepDiveSection.VIABILITY: SectionSpec(
        ViabilityReport, ResearchBackedViabilityReport, temperature=0.7, max_tokens=4096
    ),
    DeepDiveSection.PLAN: SectionSpec(
        BusinessPlan, ResearchBackedBusinessPlan, temperature=0.7, max_tokens=6000
    ),
    DeepDiveSection.MARKETING: SectionSpec(
        MarketingAssets, ResearchBackedMarketingAssets, temperature=0.8, max_tokens=4096
    ),
    DeepDiveSection.ROADMAP: SectionSpec(
        ActionRoadmap, ResearchBackedActionRoadmap, temperature=0.7, max_tokens=4096
    ),
}


def parse_section(section: str | DeepDiveSection | None) -> DeepDiveSection:
    """セクション名を検証して DeepDiveSection に変換

    Raises:
        DeepDiveRequestError: 未指定または未知のセクションの場合
    """
    if section is None or section == "":
        raise DeepDiveRequestError("Missing required fields: idea, profile, or section")
    try:
        return DeepDiveSection(section)
    except ValueError as e:
        raise DeepDiveRequestError(
            f"Invalid section: {section}",
            code=ErrorCode.INVALID_SECTION,
            details={"section": str(section)},
        ) from e


class ContentDispatcher:
    """セクションコンテンツの生成"""

    def __init__(self, llm_client: StructuredLLMClient | None):
        self.llm_client = llm_client

    async def generate(
        self,
        idea: Idea,
        profile: UserProfile,
        section: str | DeepDiveSection,
        trust_research: bool,
        entry: ResearchEntry | None = None,
    ) -> DeepDiveContent:
        """セクションのコンテンツを生成

        trust_research が True かつリサーチ結果がある場合のみリサーチ強化版の
        プロンプトとスキーマを使用する。生成の失敗は例外として送出せず、
        フォールバックコンテンツを返す。

        Args:
            idea: アイデア
            profile: ユーザープロファイル
            section: セクション
            trust_research: リサーチ結果を信頼するか
            entry: キャッシュ済みのリサーチエントリ

        Returns:
            生成またはフォールバックのコンテンツ

        Raises:
            DeepDiveRequestError: リクエストが構造的に不正な場合
        """
        if idea is None or profile is None:
            raise DeepDiveRequestError("Missing required fields: idea, profile, or section")
        section = parse_section(section)

        logger = get_logger_with_context(__name__, section=section.value)
        spec = SECTION_SPECS[section]

        if self.llm_client is None:
            logger.info("No LLM provider configured, returning fallback content")
            return get_fallback_content(section, idea, profile)

        use_research = trust_research and entry is not None and entry.research is not None
        if use_research:
            schema = spec.research_schema
            prompt = prompts.build_research_prompt(section, idea, profile, entry)
        else:
            schema = spec.baseline_schema
            prompt = prompts.build_baseline_prompt(section, idea, profile)

        logger.info(f"Generating {section.value} content (research_backed={use_research})")

        try:
            return await self.llm_client.generate_structured(
                prompt=prompt,
                system_prompt=prompts.SYSTEM_PROMPTS[section],
                schema=schema,
                temperature=spec.temperature,
                max_tokens=spec.max_tokens,
            )
        except ApplicationError as e:
            logger.warning(
                f"Content generation failed, using fallback content: {e.message}",
                extra={"error_code": e.code.value},
            )
        except Exception as e:
            logger.error(
                f"Content generation failed unexpectedly, using fallback content: {str(e)}",
                exc_info=True,
            )

        return get_fallback_content(section, idea, profile)

    async def close(self) -> None:
        if self.llm_client is not None:
            await self.llm_client.close()
