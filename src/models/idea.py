"""
アイデア・ユーザープロファイル関連モデル

Idea, UserProfile, DeepDiveSection
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """camelCase の JSON と snake_case の属性を相互変換するベースモデル"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class VentureType(str, Enum):
    """事業形態"""

    PROJECT = "project"
    NONPROFIT = "nonprofit"
    BUSINESS = "business"
    HYBRID = "hybrid"


class DeliveryFormat(str, Enum):
    """提供形態"""

    ONLINE = "online"
    IN_PERSON = "in_person"
    BOTH = "both"


class CommitmentLevel(str, Enum):
    """コミットメントレベル"""

    WEEKEND = "weekend"
    STEADY = "steady"
    ALL_IN = "all_in"


class DeepDiveSection(str, Enum):
    """ディープダイブのセクション"""

    VIABILITY = "viability"
    PLAN = "plan"
    MARKETING = "marketing"
    ROADMAP = "roadmap"


class UserLocation(CamelModel):
    """ユーザーの所在地"""

    city: str = ""
    state: str = ""

    def to_query_string(self) -> str | None:
        """検索クエリ用の所在地文字列（例: "Austin, TX"）"""
        parts = [part.strip() for part in (self.city, self.state) if part and part.strip()]
        return ", ".join(parts) or None


class Idea(CamelModel):
    """生成されたビジネスアイデア"""

    id: str = ""
    name: str = Field(description="アイデアの表示名")
    tagline: str = ""
    problem: str = ""
    audience: str = ""
    revenue_model: str | None = None
    impact: str = ""
    cause_areas: list[str] = Field(default_factory=list)
    mechanism: str | None = None
    why_now: str | None = None
    first_step: str | None = None


class UserProfile(CamelModel):
    """アンケート回答から得られるユーザープロファイル"""

    venture_type: VentureType | None = None
    format: DeliveryFormat | None = None
    location: UserLocation | None = None
    causes: list[str] = Field(default_factory=list)
    experience: str | None = None
    budget: str | None = None
    commitment: CommitmentLevel | None = None
    depth: str | None = None
    has_idea: bool | None = None
    own_idea: str = ""

    @field_validator("venture_type", "format", "commitment", mode="before")
    @classmethod
    def _drop_unknown_choice(cls, value, info):
        # 未知の選択肢は未回答として扱う
        enum_type = {
            "venture_type": VentureType,
            "format": DeliveryFormat,
            "commitment": CommitmentLevel,
        }[info.field_name]
        if isinstance(value, enum_type):
            return value
        if isinstance(value, str) and value in {member.value for member in enum_type}:
            return value
        return None

    @property
    def commitment_level(self) -> CommitmentLevel:
        """コミットメントレベル（未回答時は steady）"""
        return self.commitment or CommitmentLevel.STEADY
