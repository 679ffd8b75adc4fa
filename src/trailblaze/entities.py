"""
Leveled entities: definitions bound to one resolved level row.

A leveled entity is built on demand for one query and carries the derived
fields of that level: resolved name and description, the numeric parameter
list and, for trace nodes, the stat bonuses. Leveled entities keep a
reference to their definition and are therefore not export records; the
extractor copies what it needs into flat records.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Mapping

from .errors import DataIntegrityError
from .leveling import NOT_FOUND, Leveled, RowT, select_row
from .localization import TextResolver
from .models import (
    CharacterDefinition,
    CharacterLevelRow,
    EidolonDefinition,
    NodeDetail,
    SkillDefinition,
    SkillUpgradePayload,
    StatBonusPayload,
    StatProperty,
    StatRef,
    TraceNodeDefinition,
)
from .stats import StatBonus, reconcile

logger = logging.getLogger(__name__)


class BindPolicy(str, Enum):
    """What a missing level row means for the caller."""

    OPTIONAL = "optional"  # skip the item
    REQUIRED = "required"  # the table is inconsistent


class Skipped(Enum):
    """Result of an optional bind whose row does not exist. Falsy."""

    SKIPPED = "skipped"

    def __bool__(self) -> bool:
        return False


SKIPPED = Skipped.SKIPPED


def bind_level(
    definition: Leveled[RowT],
    level: int,
    sub_level: int = 0,
    *,
    policy: BindPolicy = BindPolicy.OPTIONAL,
) -> RowT | Skipped:
    """Select the row for ``(level, sub_level)`` under a bind policy.

    Returns:
        The row, or ``SKIPPED`` for an optional bind with no matching row

    Raises:
        DataIntegrityError: If the policy is REQUIRED and no row matches
    """
    row = select_row(definition, level, sub_level)
    if row is NOT_FOUND:
        if policy is BindPolicy.REQUIRED:
            owner = f"{type(definition).__name__} {getattr(definition, 'id', '?')}"
            raise DataIntegrityError(f"{owner} has no level row ({level}, {sub_level})")
        return SKIPPED
    return row


def resolve_stats(
    refs: list[StatRef],
    properties: Mapping[str, StatProperty],
) -> list[StatBonus]:
    """Turn raw ``(property id, value)`` pairs into typed bonuses.

    Pairs naming an unknown property are dropped.
    """
    bonuses: list[StatBonus] = []
    for ref in refs:
        prop = properties.get(ref.property_id)
        if prop is None:
            logger.debug(f"Unknown stat property {ref.property_id}, dropped")
            continue
        bonuses.append(prop.bonus(ref.value))
    return bonuses


@dataclass(frozen=True)
class LeveledSkill:
    definition: SkillDefinition
    level: int
    name: str
    description: str
    params: list[float]


def bind_skill(
    definition: SkillDefinition,
    level: int,
    texts: TextResolver,
    language: str,
    *,
    sub_level: int = 0,
    policy: BindPolicy = BindPolicy.OPTIONAL,
) -> LeveledSkill | Skipped:
    """Bind a skill at a level and resolve its text with that level's params."""
    row = bind_level(definition, level, sub_level, policy=policy)
    if row is SKIPPED:
        return SKIPPED
    return LeveledSkill(
        definition=definition,
        level=level,
        name=texts.resolve(definition.name, language),
        description=texts.resolve(definition.description, language, row.params),
        params=list(row.params),
    )


@dataclass(frozen=True)
class LeveledTrace:
    """A trace node at one level.

    ``primary_stats`` holds the node's own typed stat (Minor nodes only);
    ``secondary_stats`` holds the stats surfaced by the level row.
    """

    definition: TraceNodeDefinition
    level: int
    detail: NodeDetail
    name: str
    description: str
    params: list[float]
    primary_stats: list[StatBonus] = field(default_factory=list)
    secondary_stats: list[StatBonus] = field(default_factory=list)

    @property
    def is_minor(self) -> bool:
        return isinstance(self.detail, StatBonusPayload)

    @property
    def is_major(self) -> bool:
        return isinstance(self.detail, SkillUpgradePayload)

    @property
    def stats(self) -> list[StatBonus]:
        return reconcile(self.primary_stats, self.secondary_stats)


def bind_trace(
    definition: TraceNodeDefinition,
    level: int,
    texts: TextResolver,
    language: str,
    properties: Mapping[str, StatProperty],
    *,
    sub_level: int = 0,
    policy: BindPolicy = BindPolicy.OPTIONAL,
) -> LeveledTrace | Skipped:
    """Bind a trace node at a level and resolve its payload.

    Minor nodes (stat bonus payload) are described as e.g. ``"ATK +8%"``;
    Major nodes (skill upgrade payload) use the payload's own description
    expanded with its params, falling back to the row params.
    """
    row = bind_level(definition, level, sub_level, policy=policy)
    if row is SKIPPED:
        return SKIPPED

    detail = row.detail
    name = texts.resolve(definition.name, language)
    description = ""
    params = list(row.params)
    primary: list[StatBonus] = []

    if isinstance(detail, StatBonusPayload):
        prop = properties.get(detail.property_id)
        if prop is None:
            logger.debug(f"Trace {definition.id}: unknown stat property {detail.property_id}")
        else:
            bonus = prop.bonus(detail.value)
            stat_name = texts.resolve(prop.name, language)
            primary.append(bonus)
            description = bonus.describe(stat_name)
            if not name:
                name = stat_name or bonus.type.value
    elif isinstance(detail, SkillUpgradePayload):
        params = list(detail.params) or params
        description = texts.resolve(detail.description, language, params)

    return LeveledTrace(
        definition=definition,
        level=level,
        detail=detail,
        name=name,
        description=description,
        params=params,
        primary_stats=primary,
        secondary_stats=resolve_stats(row.stats, properties),
    )


@dataclass(frozen=True)
class LeveledEidolon:
    definition: EidolonDefinition
    name: str
    description: str
    params: list[float]
    unlocked: bool


def bind_eidolon(
    definition: EidolonDefinition,
    texts: TextResolver,
    language: str,
    rank: int = 0,
) -> LeveledEidolon:
    """Resolve an eidolon's text with its own params.

    Eidolons are levelless; ``rank`` is the character's current eidolon rank
    and only decides ``unlocked``.
    """
    params = list(definition.params)
    return LeveledEidolon(
        definition=definition,
        name=texts.resolve(definition.name, language),
        description=texts.resolve(definition.description, language, params),
        params=params,
        unlocked=rank >= definition.rank,
    )


@dataclass(frozen=True)
class LeveledCharacter:
    definition: CharacterDefinition
    level: int
    ascension: int
    name: str
    row: CharacterLevelRow


def bind_character(
    definition: CharacterDefinition,
    texts: TextResolver,
    language: str,
    level: int = 1,
    ascension: int = 0,
) -> LeveledCharacter:
    """Bind a character at ``(level, ascension)``.

    Raises:
        DataIntegrityError: If the character has no level-1 row
        ValueError: If no row exists for the requested level and ascension
    """
    bind_level(definition, 1, 0, policy=BindPolicy.REQUIRED)
    row = bind_level(definition, level, ascension)
    if row is SKIPPED:
        raise ValueError(
            f"Character {definition.id} has no data for level {level} ascension {ascension}"
        )
    return LeveledCharacter(
        definition=definition,
        level=level,
        ascension=ascension,
        name=texts.resolve(definition.name, language),
        row=row,
    )
