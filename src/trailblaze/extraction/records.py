"""
Flat export records produced by the extractor.

Records hold plain data only: strings, numbers, ids and nested records. They
never reference definitions or leveled entities, so they can be dumped to
JSON as-is.
"""

from typing import Literal

from pydantic import BaseModel, Field

from ..errors import SkipReason
from ..stats import StatBonus


class SkillLevel(BaseModel):
    """Parameters of one skill level."""

    level: int
    params: list[float] = Field(default_factory=list)


class SkillData(BaseModel):
    """A skill with its parameters at every level."""

    id: int
    name: str
    type: str = Field(description="Translated skill kind, e.g. 'Ultimate'")
    effect: str = Field(default="", description="Effect tag, e.g. 'Single Target'")
    description: str = Field(default="", description="Level-1 description")
    max_level: int
    levels: list[SkillLevel] = Field(default_factory=list)


class TraceData(BaseModel):
    """An unlockable trace node."""

    id: int
    name: str
    kind: Literal["Minor", "Major"]
    description: str = ""
    params: list[float] = Field(default_factory=list)
    stats: list[StatBonus] = Field(default_factory=list)
    skill_id: int | None = None
    anchor: str = ""
    pre_points: list[int] = Field(default_factory=list)


class EidolonSkillUpgrade(BaseModel):
    """A skill level bonus granted by an eidolon."""

    skill_id: int
    skill_type: str
    skill_name: str
    amount: int


class EidolonExport(BaseModel):
    """An eidolon with its resolved text."""

    id: int
    rank: int
    name: str
    description: str = ""
    params: list[float] = Field(default_factory=list)
    unlocked: bool = False
    skills: list[EidolonSkillUpgrade] = Field(default_factory=list)


class BaseStats(BaseModel):
    """Character base stats at one level and ascension."""

    hp: float = 0.0
    attack: float = 0.0
    defense: float = 0.0
    speed: float = 0.0
    taunt: float = 0.0


class CharacterExport(BaseModel):
    """A character snapshot at one progression state."""

    id: int
    name: str
    rarity: int
    path: str = ""
    element: str = ""
    level: int
    ascension: int
    rank: int
    base_stats: BaseStats
    skills: list[SkillData] = Field(default_factory=list)
    traces: list[TraceData] = Field(default_factory=list)
    eidolons: list[EidolonExport] = Field(default_factory=list)


class SkippedItem(BaseModel):
    """An item left out of an extraction, and why."""

    kind: Literal["skill", "trace", "eidolon", "eidolon_skill"]
    item_id: int
    reason: SkipReason
    detail: str = ""


class ExtractionResult(BaseModel):
    """Result of extracting one character."""

    character: CharacterExport
    skipped: list[SkippedItem] = Field(default_factory=list)


class BatchFailure(BaseModel):
    """A character whose extraction failed as a whole."""

    character_id: int
    error: str


class BatchResult(BaseModel):
    """Result of extracting several characters."""

    results: list[ExtractionResult] = Field(default_factory=list)
    failures: list[BatchFailure] = Field(default_factory=list)
