"""
ディープダイブ API エンドポイント
"""

from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from pydantic import Field
from sqlalchemy.ext.asyncio import AsyncSession

from src.config.logging import get_logger
from src.database.connection import get_session
from src.models.deep_dive import DeepDiveResult
from src.models.idea import CamelModel
from src.services.deep_dive_results import DeepDiveResultService
from src.services.deep_dive_service import DeepDiveService
from src.services.error_handler import DeepDiveRequestError, RecordNotFoundError

logger = get_logger(__name__)
router = APIRouter(prefix="/api/v1", tags=["DeepDive"])


class DeepDiveRequest(CamelModel):
    """ディープダイブ生成リクエスト

    欠落や形式不正は 422 ではなく success=false で返すため、型を問わず受け取り
    サービス側で検証する。
    """

    idea: Any = Field(default=None, description="アイデア")
    profile: Any = Field(default=None, description="ユーザープロファイル")
    section: Any = Field(
        default=None, description="viability / plan / marketing / roadmap"
    )


class SaveDeepDiveRequest(CamelModel):
    """ディープダイブ結果保存リクエスト"""

    idea_id: str | None = Field(default=None, description="アイデア ID")
    user_id: str | None = Field(default=None, description="ユーザー ID")
    viability: dict[str, Any] | None = None
    business_plan: dict[str, Any] | None = None
    marketing: dict[str, Any] | None = None
    roadmap: dict[str, Any] | None = None


class DeepDiveResultResponse(CamelModel):
    """ディープダイブ結果レスポンス"""

    deep_dive_id: str
    idea_id: str
    user_id: str | None = None
    viability: dict[str, Any] | None = None
    business_plan: dict[str, Any] | None = None
    marketing: dict[str, Any] | None = None
    roadmap: dict[str, Any] | None = None
    created_at: str
    updated_at: str

    @classmethod
    def from_record(cls, record: DeepDiveResult) -> "DeepDiveResultResponse":
        return cls(
            deep_dive_id=record.id,
            idea_id=record.idea_id,
            user_id=record.user_id,
            viability=record.viability,
            business_plan=record.business_plan,
            marketing=record.marketing,
            roadmap=record.roadmap,
            created_at=record.created_at.isoformat(),
            updated_at=record.updated_at.isoformat(),
        )


def get_deep_dive_service(request: Request) -> DeepDiveService:
    """ライフスパンで構築したディープダイブサービスを取得"""
    return request.app.state.deep_dive_service


@router.post("/deep-dive")
async def generate_deep_dive(
    body: DeepDiveRequest,
    service: DeepDiveService = Depends(get_deep_dive_service),
) -> dict[str, Any]:
    """ディープダイブのセクションを生成

    構造的に不正なリクエストは success=false で返す。リサーチや生成の失敗は
    フォールバックコンテンツとして吸収されるため、常に 200 を返す。
    """
    logger.info(f"POST /deep-dive: section={body.section}")

    try:
        content = await service.generate(body.idea, body.profile, body.section)
    except DeepDiveRequestError as e:
        logger.info(f"Deep dive request rejected: {e.message}")
        return {"success": False, "error": e.message}

    return {"success": True, "data": content.model_dump(mode="json", by_alias=True)}


@router.put("/deep-dive/results")
async def save_deep_dive_results(
    body: SaveDeepDiveRequest,
    session: AsyncSession = Depends(get_session),
) -> dict[str, Any]:
    """ディープダイブ結果を保存

    Raises:
        HTTPException: ideaId がない場合
    """
    if not body.idea_id:
        raise HTTPException(status_code=400, detail="ideaId is required")

    logger.info(f"PUT /deep-dive/results: idea_id={body.idea_id}, user_id={body.user_id}")

    service = DeepDiveResultService(session)
    record = await service.save_result(
        body.idea_id,
        body.user_id,
        viability=body.viability,
        business_plan=body.business_plan,
        marketing=body.marketing,
        roadmap=body.roadmap,
    )

    return {"success": True, "data": {"deepDiveId": record.id}}


@router.get("/deep-dive/results")
async def get_deep_dive_results(
    idea_id: str = Query(..., alias="ideaId", description="アイデア ID"),
    user_id: str | None = Query(None, alias="userId", description="ユーザー ID"),
    session: AsyncSession = Depends(get_session),
) -> dict[str, Any]:
    """ディープダイブ結果を取得

    Raises:
        HTTPException: 結果が見つからない場合
    """
    logger.info(f"GET /deep-dive/results: idea_id={idea_id}, user_id={user_id}")

    service = DeepDiveResultService(session)
    try:
        record = await service.get_result(idea_id, user_id)
    except RecordNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message) from e

    return {
        "success": True,
        "data": DeepDiveResultResponse.from_record(record).model_dump(by_alias=True),
    }
