"""
ヘルスチェックエンドポイント
"""

from datetime import datetime

from fastapi import APIRouter, Request
from pydantic import BaseModel

router = APIRouter()


class HealthResponse(BaseModel):
    """ヘルスチェックレスポンス"""

    status: str
    timestamp: datetime
    version: str = "0.1.0"
    research_enabled: bool = False
    llm_configured: bool = False
    cached_subjects: int = 0


@router.get("/health", response_model=HealthResponse)
async def health_check(request: Request) -> HealthResponse:
    """ヘルスチェック

    Returns:
        HealthResponse: ヘルスチェック結果（プロバイダー設定状況とキャッシュ件数を含む）
    """
    state = request.app.state
    cache = getattr(state, "research_cache", None)
    dispatcher = getattr(state, "content_dispatcher", None)
    settings = getattr(state, "settings", None)

    return HealthResponse(
        status="healthy",
        timestamp=datetime.utcnow(),
        research_enabled=bool(settings and settings.research_enabled),
        llm_configured=bool(dispatcher and dispatcher.llm_client is not None),
        cached_subjects=len(cache) if cache is not None else 0,
    )


@router.get("/")
async def root() -> dict[str, str]:
    """ルートエンドポイント

    Returns:
        dict: API情報
    """
    return {"name": "Idea Deep Dive API", "version": "0.1.0"}
