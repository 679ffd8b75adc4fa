"""
Static game-data definitions.

Definitions are immutable records built once by the table loader and shared
read-only by every leveled entity. Cross references (trace node -> skill,
eidolon -> skill, character -> nodes) are plain ids resolved through the
``GameTables`` arena, never live object references.
"""

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from .leveling import LevelRow, max_level
from .localization import TextHandle
from .stats import StatBonus, StatType


class StatProperty(BaseModel):
    """A stat property: the typed meaning of a raw property id."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Raw property id, e.g. 'AttackAddedRatio'")
    type: StatType = Field(..., description="Stat kind")
    name: TextHandle | None = Field(default=None, description="Localised stat name")
    is_percent: bool = Field(default=False, description="Values are ratios")

    def bonus(self, value: float) -> StatBonus:
        """Build the typed bonus for ``value`` of this property."""
        return StatBonus(type=self.type, value=value, is_percent=self.is_percent)


class StatRef(BaseModel):
    """A raw (property id, value) pair as carried by a level row."""

    model_config = ConfigDict(frozen=True)

    property_id: str
    value: float


# ─── Trace node payload variants ──────────────────────────────────────


class StatBonusPayload(BaseModel):
    """Payload of a Minor trace node: a single typed stat delta."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["stat_bonus"] = "stat_bonus"
    property_id: str
    value: float


class SkillUpgradePayload(BaseModel):
    """Payload of a Major trace node: an effect with its own text."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["skill_upgrade"] = "skill_upgrade"
    effect_type: str = ""
    description: TextHandle | None = None
    params: list[float] = Field(default_factory=list)


class EmptyPayload(BaseModel):
    """Payload of a row that carries neither a stat nor an upgrade."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["empty"] = "empty"


NodeDetail = Annotated[
    Union[StatBonusPayload, SkillUpgradePayload, EmptyPayload],
    Field(discriminator="kind"),
]


# ─── Level rows ───────────────────────────────────────────────────────


class ParamRow(LevelRow):
    """A level row holding the numeric parameters of a text template."""

    params: list[float] = Field(default_factory=list)


class TraceLevelRow(LevelRow):
    """A level row of a trace node."""

    detail: NodeDetail = Field(default_factory=EmptyPayload)
    stats: list[StatRef] = Field(default_factory=list, description="Stats surfaced by this row")
    params: list[float] = Field(default_factory=list)


class CharacterLevelRow(LevelRow):
    """Base stats of a character; ``sub_level`` is the ascension."""

    hp: float = 0.0
    attack: float = 0.0
    defense: float = 0.0
    speed: float = 0.0
    taunt: float = 0.0


# ─── Definitions ──────────────────────────────────────────────────────


class SkillDefinition(BaseModel):
    """An active or passive skill with per-level parameters."""

    model_config = ConfigDict(frozen=True)

    id: int
    name: TextHandle | None = None
    kind: str = Field(default="", description="Raw skill kind tag, e.g. 'BPSkill'")
    effect_type: str = Field(default="", description="Effect tag, e.g. 'Single Target'")
    description: TextHandle | None = None
    rows: list[ParamRow] = Field(default_factory=list)
    fixed: bool = False

    @property
    def max_level(self) -> int:
        return 1 if self.fixed else max_level(self.rows)


class TraceNodeDefinition(BaseModel):
    """A node of a character's skill tree."""

    model_config = ConfigDict(frozen=True)

    id: int
    name: TextHandle | None = None
    skill_id: int | None = Field(default=None, description="Base skill of this node")
    max_level: int = Field(default=1, ge=1)
    anchor: str = ""
    pre_points: list[int] = Field(default_factory=list, description="Prerequisite node ids")
    rows: list[TraceLevelRow] = Field(default_factory=list)
    fixed: bool = False


class EidolonSkillRef(BaseModel):
    """A skill level bonus granted by an eidolon."""

    model_config = ConfigDict(frozen=True)

    skill_id: int
    amount: int


class EidolonDefinition(BaseModel):
    """A rank upgrade of a character. Levelless: one fixed parameter row."""

    model_config = ConfigDict(frozen=True)

    id: int
    rank: int = Field(..., ge=1)
    name: TextHandle | None = None
    description: TextHandle | None = None
    rows: list[ParamRow] = Field(default_factory=list)
    skill_upgrades: list[EidolonSkillRef] = Field(default_factory=list)
    fixed: bool = True

    @property
    def params(self) -> list[float]:
        return self.rows[0].params if self.rows else []


class CharacterDefinition(BaseModel):
    """A playable character and the ids of everything it owns."""

    model_config = ConfigDict(frozen=True)

    id: int
    name: TextHandle | None = None
    rarity: int = 4
    path: str = ""
    element: str = ""
    skill_ids: list[int] = Field(default_factory=list)
    trace_ids: list[int] = Field(default_factory=list)
    eidolon_ids: list[int] = Field(default_factory=list)
    rows: list[CharacterLevelRow] = Field(default_factory=list)
    fixed: bool = False

    @property
    def max_level(self) -> int:
        return max_level(self.rows)
