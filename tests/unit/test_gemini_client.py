"""
Gemini クライアントのユニットテスト
"""

import json
from unittest.mock import MagicMock, patch

import pytest

from src.models.content import MarketingAssets, ViabilityReport
from src.services.error_handler import ErrorCode, LLMGenerationError
from src.services.gemini_client import GeminiAPIError, GeminiClient


@pytest.fixture
def mock_settings():
    """モック設定"""
    settings = MagicMock()
    settings.gemini_api_key = "test_api_key"
    settings.gemini_model = "gemini-2.5-flash"
    settings.llm_timeout = 30.0
    return settings


@pytest.fixture
def gemini_client(mock_settings):
    """Gemini クライアントのフィクスチャ"""
    with patch("src.services.gemini_client.get_settings", return_value=mock_settings):
        with patch("src.services.gemini_client.genai.Client") as mock_client_class:
            mock_client = MagicMock()
            mock_client_class.return_value = mock_client
            client = GeminiClient()
            client.client = mock_client
            yield client


async def generate(client: GeminiClient, schema=ViabilityReport):
    return await client.generate_structured(
        prompt="Evaluate Acme",
        system_prompt="You are an analyst",
        schema=schema,
        temperature=0.7,
        max_tokens=4096,
    )


@pytest.mark.asyncio
async def test_generate_structured_success(gemini_client):
    """構造化生成が成功するケース"""
    mock_response = MagicMock()
    mock_response.text = json.dumps(
        {
            "marketSize": "Large",
            "viabilityScore": 7.5,
            "verdict": "go",
            "competitors": [{"name": "ToolShare"}],
        }
    )
    gemini_client.client.models.generate_content = MagicMock(return_value=mock_response)

    result = await generate(gemini_client)

    assert isinstance(result, ViabilityReport)
    assert result.viability_score == 7.5
    assert result.competitors[0].name == "ToolShare"


@pytest.mark.asyncio
async def test_generate_structured_passes_config(gemini_client):
    """温度・最大トークン・スキーマが設定に渡される"""
    mock_response = MagicMock()
    mock_response.text = json.dumps({"viabilityScore": 6})
    gemini_client.client.models.generate_content = MagicMock(return_value=mock_response)

    await generate(gemini_client)

    call_kwargs = gemini_client.client.models.generate_content.call_args.kwargs
    assert call_kwargs["model"] == "gemini-2.5-flash"
    assert call_kwargs["contents"] == "Evaluate Acme"
    config = call_kwargs["config"]
    assert config.temperature == 0.7
    assert config.max_output_tokens == 4096
    assert config.response_mime_type == "application/json"
    assert config.system_instruction == "You are an analyst"


@pytest.mark.asyncio
async def test_generate_structured_repairs_snake_case_and_fences(gemini_client):
    """コードフェンス付き・snake_case の応答も修復して検証"""
    mock_response = MagicMock()
    mock_response.text = '```json\n{"elevator_pitch": "Borrow, don\'t buy", "primary_cta": "Join"}\n```'
    gemini_client.client.models.generate_content = MagicMock(return_value=mock_response)

    result = await generate(gemini_client, MarketingAssets)

    assert result.elevator_pitch == "Borrow, don't buy"
    assert result.primary_cta == "Join"


@pytest.mark.asyncio
async def test_generate_structured_invalid_json(gemini_client):
    """JSON でない応答は LLMGenerationError"""
    mock_response = MagicMock()
    mock_response.text = "This is not JSON"
    gemini_client.client.models.generate_content = MagicMock(return_value=mock_response)

    with pytest.raises(LLMGenerationError) as exc_info:
        await generate(gemini_client)

    assert exc_info.value.code == ErrorCode.LLM_GENERATION_ERROR


@pytest.mark.asyncio
async def test_generate_structured_schema_mismatch(gemini_client):
    """スキーマに適合しない応答は LLMGenerationError"""
    mock_response = MagicMock()
    mock_response.text = json.dumps({"marketSize": "Large"})
    gemini_client.client.models.generate_content = MagicMock(return_value=mock_response)

    with pytest.raises(LLMGenerationError):
        await generate(gemini_client)


@pytest.mark.asyncio
async def test_generate_structured_api_error(gemini_client):
    """Gemini API エラーが発生するケース"""
    gemini_client.client.models.generate_content = MagicMock(side_effect=Exception("API Error"))

    with pytest.raises(GeminiAPIError) as exc_info:
        await generate(gemini_client)

    assert exc_info.value.code == ErrorCode.LLM_API_ERROR
    assert "API Error" in exc_info.value.message


@pytest.mark.asyncio
async def test_generate_structured_empty_response(gemini_client):
    mock_response = MagicMock()
    mock_response.text = ""
    gemini_client.client.models.generate_content = MagicMock(return_value=mock_response)

    with pytest.raises(GeminiAPIError):
        await generate(gemini_client)


def test_gemini_client_no_api_key():
    """API キーが設定されていない場合のエラー"""
    mock_settings = MagicMock()
    mock_settings.gemini_api_key = ""

    with patch("src.services.gemini_client.get_settings", return_value=mock_settings):
        with pytest.raises(GeminiAPIError) as exc_info:
            GeminiClient()

        assert "API key is not configured" in str(exc_info.value.message)
