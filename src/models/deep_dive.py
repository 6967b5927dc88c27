"""
ディープダイブ結果モデル

DeepDiveResult
"""

import uuid
from datetime import datetime

from sqlalchemy import JSON, String
from sqlalchemy.orm import Mapped, mapped_column

from src.database.connection import Base

# 保存対象のセクション列
SECTION_COLUMNS = ("viability", "business_plan", "marketing", "roadmap")


class DeepDiveResult(Base):
    """アイデアごとのディープダイブ生成結果"""

    __tablename__ = "deep_dive_results"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    idea_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    user_id: Mapped[str | None] = mapped_column(String(64), nullable=True, index=True)

    # セクションごとの生成コンテンツ（camelCase の JSON）
    viability: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    business_plan: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    marketing: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    roadmap: Mapped[dict | None] = mapped_column(JSON, nullable=True)

    created_at: Mapped[datetime] = mapped_column(nullable=False, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    def __repr__(self) -> str:
        return f"<DeepDiveResult(id={self.id}, idea={self.idea_id}, user={self.user_id})>"
