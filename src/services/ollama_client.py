"""
Ollama LLM クライアント

ローカル LLM でディープダイブの構造化コンテンツを生成する API クライアント
"""

import json
from typing import Any

import httpx

from src.config.logging import get_logger
from src.config.settings import Settings, get_settings
from src.services.error_handler import LLMAPIError
from src.services.llm_client import ModelT, parse_structured_output

logger = get_logger(__name__)


class OllamaClient:
    """Ollama API クライアント"""

    def __init__(self, settings: Settings | None = None):
        self.settings = settings or get_settings()
        self.base_url = self.settings.ollama_api_url
        self.model = self.settings.ollama_model
        self.client = httpx.AsyncClient(timeout=self.settings.llm_timeout)

    async def close(self) -> None:
        """クライアントを閉じる"""
        await self.client.aclose()

    async def chat(
        self,
        messages: list[dict[str, str]],
        temperature: float = 0.7,
        max_tokens: int | None = None,
        format: dict[str, Any] | None = None,
    ) -> str:
        """チャット形式で生成

        Args:
            messages: メッセージリスト [{"role": "user|assistant|system", "content": "..."}]
            temperature: 温度パラメータ
            max_tokens: 最大トークン数
            format: JSON schema for structured outputs (optional)

        Returns:
            生成されたテキスト

        Raises:
            LLMAPIError: API エラー
        """
        try:
            logger.info(f"Chat generation with Ollama: model={self.model}")

            # リクエストボディ構築
            request_data: dict[str, Any] = {
                "model": self.model,
                "messages": messages,
                "stream": False,
                "options": {"temperature": temperature},
            }

            if max_tokens:
                request_data["options"]["num_predict"] = max_tokens

            if format:
                request_data["format"] = format

            # API 呼び出し
            response = await self.client.post(f"{self.base_url}/api/chat", json=request_data)

            if response.status_code != 200:
                error_msg = f"Ollama API error: {response.status_code}"
                logger.error(error_msg, extra={"response_text": response.text})
                raise LLMAPIError(
                    error_msg, details={"status_code": response.status_code, "body": response.text}
                )

            # レスポンス解析
            result = response.json()
            message = result.get("message", {})
            generated_text = message.get("content", "").strip()

            if not generated_text:
                raise LLMAPIError("Empty response from Ollama")

            logger.info(
                f"Chat generation complete: {len(generated_text)} characters",
                extra={"message_count": len(messages)},
            )

            return generated_text

        except httpx.TimeoutException as e:
            error_msg = "Ollama API request timed out"
            logger.error(error_msg)
            raise LLMAPIError(error_msg, original_error=e) from e

        except httpx.RequestError as e:
            error_msg = f"Ollama API request error: {str(e)}"
            logger.error(error_msg)
            raise LLMAPIError(error_msg, original_error=e) from e

        except json.JSONDecodeError as e:
            error_msg = "Failed to decode Ollama response"
            logger.error(error_msg)
            raise LLMAPIError(error_msg, original_error=e) from e

        except LLMAPIError:
            raise

        except Exception as e:
            error_msg = f"Unexpected error in Ollama client: {str(e)}"
            logger.exception(error_msg)
            raise LLMAPIError(error_msg, original_error=e) from e

    async def generate_structured(
        self,
        prompt: str,
        system_prompt: str,
        schema: type[ModelT],
        temperature: float,
        max_tokens: int,
    ) -> ModelT:
        """スキーマに沿った JSON を生成してモデルに変換

        Raises:
            LLMAPIError: API エラー
            LLMGenerationError: 出力が JSON でない、またはスキーマ不一致
        """
        response_text = await self.chat(
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": prompt},
            ],
            temperature=temperature,
            max_tokens=max_tokens,
            format=schema.model_json_schema(by_alias=True),
        )
        return parse_structured_output(response_text, schema)
