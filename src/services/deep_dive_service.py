"""
ディープダイブサービス

リクエストの検証、リサーチキャッシュの参照、コンテンツ生成、スコア正規化をまとめる
"""

from typing import Any

from pydantic import ValidationError

from src.config.logging import get_logger_with_context
from src.models.content import DeepDiveContent, ViabilityReport
from src.models.idea import DeepDiveSection, Idea, UserProfile
from src.services import score_normalizer
from src.services.content_dispatcher import ContentDispatcher, parse_section
from src.services.error_handler import DeepDiveRequestError
from src.services.research_cache import ResearchCache, build_subject_key
from src.services.research_orchestrator import ResearchOrchestrator

MISSING_FIELDS_MESSAGE = "Missing required fields: idea, profile, or section"


def _parse_field(name: str, value: Any, model: type[Idea] | type[UserProfile]) -> Any:
    """dict をモデルに変換（必須項目の欠落と形式不正を区別する）"""
    if isinstance(value, model):
        return value
    try:
        return model.model_validate(value)
    except ValidationError as e:
        if all(error["type"] == "missing" for error in e.errors()):
            message = MISSING_FIELDS_MESSAGE
        else:
            message = f"Invalid field: {name}"
        raise DeepDiveRequestError(
            message, details={"field": name, "errors": e.error_count()}, original_error=e
        ) from e


def validate_request(
    idea: Any, profile: Any, section: Any
) -> tuple[Idea, UserProfile, DeepDiveSection]:
    """リクエストを検証してドメインモデルに変換

    Args:
        idea: アイデア（dict または Idea）
        profile: ユーザープロファイル（dict または UserProfile）
        section: セクション名

    Returns:
        (Idea, UserProfile, DeepDiveSection)

    Raises:
        DeepDiveRequestError: 必須項目の欠落、形式不正、未知のセクション
    """
    if not idea or not profile or not section:
        raise DeepDiveRequestError(MISSING_FIELDS_MESSAGE)

    parsed_section = parse_section(section)

    parsed_idea = _parse_field("idea", idea, Idea)
    parsed_profile = _parse_field("profile", profile, UserProfile)

    return parsed_idea, parsed_profile, parsed_section


class DeepDiveService:
    """ディープダイブのコーディネーター"""

    def __init__(
        self,
        cache: ResearchCache,
        orchestrator: ResearchOrchestrator,
        dispatcher: ContentDispatcher,
    ):
        self.cache = cache
        self.orchestrator = orchestrator
        self.dispatcher = dispatcher

    async def generate(self, idea: Any, profile: Any, section: Any) -> DeepDiveContent:
        """セクションのコンテンツを生成

        リサーチは (アイデア, プロファイル) ごとに TTL 内で 1 回だけ実行し、
        すべてのセクションが同じ信頼判定を共有する。

        Raises:
            DeepDiveRequestError: リクエストが構造的に不正な場合
        """
        idea, profile, section = validate_request(idea, profile, section)

        subject_key = build_subject_key(idea, profile)
        logger = get_logger_with_context(
            __name__, subject_key=subject_key[:12], section=section.value
        )
        logger.info(f"Deep dive requested: {idea.name}")

        entry = await self.cache.get_or_run(
            subject_key, lambda: self.orchestrator.run(idea, profile)
        )

        content = await self.dispatcher.generate(
            idea, profile, section, entry.trust_research, entry
        )

        if section == DeepDiveSection.VIABILITY and isinstance(content, ViabilityReport):
            content = score_normalizer.normalize(content)

        return content
