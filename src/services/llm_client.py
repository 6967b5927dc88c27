"""
構造化出力 LLM クライアントの共通インターフェース

プロバイダーの選択と、応答テキストをスキーマに沿ったモデルへ変換する処理を提供
"""

import json
from typing import Protocol, TypeVar

from pydantic import BaseModel, ValidationError

from src.config.logging import get_logger
from src.config.settings import Settings
from src.services.error_handler import LLMGenerationError
from src.services.json_repair import parse_model_json

logger = get_logger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class StructuredLLMClient(Protocol):
    """スキーマ準拠の構造化出力を返す LLM クライアント"""

    async def generate_structured(
        self,
        prompt: str,
        system_prompt: str,
        schema: type[ModelT],
        temperature: float,
        max_tokens: int,
    ) -> ModelT: ...

    async def close(self) -> None: ...


def parse_structured_output(response_text: str, schema: type[ModelT]) -> ModelT:
    """LLM の応答テキストを修復・検証してスキーマのインスタンスに変換

    Args:
        response_text: LLM の生の応答
        schema: 期待するスキーマ

    Returns:
        検証済みのモデルインスタンス

    Raises:
        LLMGenerationError: JSON として解析できない、またはスキーマに適合しない場合
    """
    try:
        data = parse_model_json(response_text)
    except json.JSONDecodeError as e:
        logger.error(
            f"Failed to parse LLM response as JSON: {str(e)}",
            extra={"response_length": len(response_text)},
        )
        raise LLMGenerationError("LLM returned invalid JSON format", original_error=e) from e

    if not isinstance(data, dict):
        raise LLMGenerationError(
            "LLM returned a non-object JSON value", details={"type": type(data).__name__}
        )

    try:
        return schema.model_validate(data)
    except ValidationError as e:
        logger.error(f"LLM response does not match {schema.__name__}: {e.error_count()} errors")
        raise LLMGenerationError(
            f"LLM response does not match {schema.__name__}",
            details={"errors": e.error_count()},
            original_error=e,
        ) from e


def create_llm_client(settings: Settings) -> StructuredLLMClient | None:
    """設定に応じた LLM クライアントを生成

    Returns:
        LLM クライアント、選択したプロバイダーが未設定の場合は None
    """
    if settings.llm_provider == "ollama":
        from src.services.ollama_client import OllamaClient

        return OllamaClient(settings)

    if not settings.gemini_api_key:
        logger.warning("Gemini API key not configured, deep dive will use fallback content")
        return None

    from src.services.gemini_client import GeminiClient

    return GeminiClient(settings)
