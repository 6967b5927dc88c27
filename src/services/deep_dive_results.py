"""
ディープダイブ結果サービス

DeepDiveResult の取得と保存（部分更新）を提供
"""

from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.config.logging import get_logger
from src.models.deep_dive import SECTION_COLUMNS, DeepDiveResult
from src.services.error_handler import DatabaseError, DeepDiveRequestError, RecordNotFoundError

logger = get_logger(__name__)


class DeepDiveResultService:
    """ディープダイブ結果サービス"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def find_result(self, idea_id: str, user_id: str | None = None) -> DeepDiveResult | None:
        """ディープダイブ結果を検索

        Args:
            idea_id: アイデア ID
            user_id: ユーザー ID

        Returns:
            ディープダイブ結果（存在しない場合は None）
        """
        stmt = select(DeepDiveResult).where(
            DeepDiveResult.idea_id == idea_id, DeepDiveResult.user_id == user_id
        )
        try:
            result = await self.session.execute(stmt)
        except SQLAlchemyError as e:
            raise DatabaseError(
                "Failed to load deep dive result", details={"idea_id": idea_id}, original_error=e
            ) from e
        return result.scalar_one_or_none()

    async def get_result(self, idea_id: str, user_id: str | None = None) -> DeepDiveResult:
        """ディープダイブ結果を取得

        Raises:
            RecordNotFoundError: 結果が存在しない場合
        """
        deep_dive = await self.find_result(idea_id, user_id)

        logger.info(
            f"Get deep dive result: idea={idea_id}, user={user_id}, found={deep_dive is not None}"
        )

        if deep_dive is None:
            raise RecordNotFoundError(
                "Deep dive result not found", details={"idea_id": idea_id, "user_id": user_id}
            )
        return deep_dive

    async def save_result(
        self,
        idea_id: str,
        user_id: str | None = None,
        **sections: dict[str, Any] | None,
    ) -> DeepDiveResult:
        """ディープダイブ結果を保存（存在しない場合は作成）

        指定されたセクションのみ上書きし、None のセクションは既存の値を保持する。

        Args:
            idea_id: アイデア ID
            user_id: ユーザー ID
            **sections: viability, business_plan, marketing, roadmap

        Returns:
            保存されたディープダイブ結果
        """
        if not idea_id:
            raise DeepDiveRequestError("ideaId is required")

        unknown = set(sections) - set(SECTION_COLUMNS)
        if unknown:
            raise DeepDiveRequestError(
                f"Unknown deep dive sections: {', '.join(sorted(unknown))}",
                details={"sections": sorted(unknown)},
            )

        deep_dive = await self.find_result(idea_id, user_id)
        if deep_dive is None:
            deep_dive = DeepDiveResult(idea_id=idea_id, user_id=user_id)
            self.session.add(deep_dive)

        for column, value in sections.items():
            if value is not None:
                setattr(deep_dive, column, value)

        try:
            await self.session.commit()
            await self.session.refresh(deep_dive)
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise DatabaseError(
                "Failed to save deep dive result", details={"idea_id": idea_id}, original_error=e
            ) from e

        logger.info(
            f"Saved deep dive result: {deep_dive.id} for idea={idea_id}, user={user_id}",
            extra={"idea_id": idea_id},
        )
        return deep_dive
