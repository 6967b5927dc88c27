"""
Gemini API クライアント

Google Gemini API を使用してディープダイブの構造化コンテンツを生成
"""

import asyncio

from google import genai
from google.genai import types

from src.config.logging import get_logger
from src.config.settings import Settings, get_settings
from src.services.error_handler import ApplicationError, ErrorCode
from src.services.llm_client import ModelT, parse_structured_output

logger = get_logger(__name__)


class GeminiAPIError(ApplicationError):
    """Gemini API エラー"""

    def __init__(self, message: str, original_error: Exception | None = None):
        super().__init__(
            code=ErrorCode.LLM_API_ERROR,
            message=message,
            original_error=original_error,
        )


class GeminiClient:
    """Gemini API クライアント（構造化テキスト生成用）"""

    def __init__(self, settings: Settings | None = None):
        self.settings = settings or get_settings()
        if not self.settings.gemini_api_key:
            raise GeminiAPIError("Gemini API key is not configured")

        # Gemini クライアントの初期化
        self.client = genai.Client(
            api_key=self.settings.gemini_api_key,
            http_options=types.HttpOptions(timeout=int(self.settings.llm_timeout * 1000)),
        )
        self.model = self.settings.gemini_model

    async def close(self) -> None:
        """クライアントを閉じる（SDK 側でコネクションを管理するため処理なし）"""
        return None

    async def generate_structured(
        self,
        prompt: str,
        system_prompt: str,
        schema: type[ModelT],
        temperature: float,
        max_tokens: int,
    ) -> ModelT:
        """スキーマに沿った JSON を生成してモデルに変換

        Args:
            prompt: ユーザープロンプト
            system_prompt: システムプロンプト
            schema: 出力スキーマ（pydantic モデル）
            temperature: 温度パラメータ
            max_tokens: 最大出力トークン数

        Returns:
            検証済みのスキーマインスタンス

        Raises:
            GeminiAPIError: API 呼び出しエラー
            LLMGenerationError: 出力が JSON でない、またはスキーマ不一致
        """
        try:
            # Gemini SDK は同期HTTP通信のため別スレッドで実行
            response = await asyncio.to_thread(
                self.client.models.generate_content,
                model=self.model,
                contents=prompt,
                config=types.GenerateContentConfig(
                    system_instruction=system_prompt,
                    temperature=temperature,
                    max_output_tokens=max_tokens,
                    response_mime_type="application/json",
                    response_schema=schema,
                ),
            )
        except Exception as e:
            logger.exception(f"Gemini generation error: {str(e)}")
            raise GeminiAPIError(
                f"Gemini API generation failed: {str(e)}",
                original_error=e,
            ) from e

        response_text = response.text or ""
        if not response_text.strip():
            raise GeminiAPIError("Empty response from Gemini")

        logger.info(
            f"Generated {schema.__name__} via Gemini",
            extra={"prompt_length": len(prompt), "response_length": len(response_text)},
        )

        return parse_structured_output(response_text, schema)
