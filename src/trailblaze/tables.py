"""
Table loader: turns raw, already-parsed tables into immutable definitions.

Each loader function takes a mapping of id -> raw record and returns a
``(definitions, warnings)`` tuple. A malformed record is skipped with a
warning; it never stops the rest of the table from loading.

Raw record shapes (keys not listed are ignored):

    characters:  {"name", "rarity", "path", "element", "skills": [id],
                  "traces": [id], "eidolons": [id],
                  "levels": [{"level", "ascension", "hp", "atk", "def",
                              "spd", "taunt"}]}
    skills:      {"name", "type", "effect", "desc",
                  "levels": [{"level", "sub_level", "params"}]}
                 or {"params"} alone for a levelless skill
    traces:      {"name", "skill", "max_level", "anchor", "pre_points",
                  "levels": [{"level", <payload keys>, "stats", "params"}]}
    eidolons:    {"rank", "name", "desc", "params",
                  "skills": {skill_id: amount}}
    properties:  {"type", "name", "percent"}

Text fields are either a text map key (plain text) or
``{"hash": key, "dynamic": bool, "fallback": lang}``.
"""

import logging
from typing import Any, Callable, Mapping, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from .errors import DataIntegrityError
from .leveling import validate_rows
from .localization import TextHandle
from .models import (
    CharacterDefinition,
    CharacterLevelRow,
    EidolonDefinition,
    EidolonSkillRef,
    EmptyPayload,
    NodeDetail,
    ParamRow,
    SkillDefinition,
    SkillUpgradePayload,
    StatBonusPayload,
    StatProperty,
    StatRef,
    TraceLevelRow,
    TraceNodeDefinition,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Errors that mark a single raw record as malformed
RECORD_ERRORS = (ValueError, TypeError, KeyError, AttributeError, DataIntegrityError)


class GameTables(BaseModel):
    """Id-indexed arena of every loaded definition."""

    model_config = ConfigDict(frozen=True)

    characters: dict[int, CharacterDefinition] = Field(default_factory=dict)
    skills: dict[int, SkillDefinition] = Field(default_factory=dict)
    traces: dict[int, TraceNodeDefinition] = Field(default_factory=dict)
    eidolons: dict[int, EidolonDefinition] = Field(default_factory=dict)
    properties: dict[str, StatProperty] = Field(default_factory=dict)


class LoadResult(BaseModel):
    """Loaded tables plus one warning per skipped record."""

    tables: GameTables
    warnings: list[str] = Field(default_factory=list)


# ─── Field helpers ────────────────────────────────────────────────────


def parse_text_handle(raw: Any) -> TextHandle | None:
    """Convert a raw text field into a ``TextHandle``.

    Args:
        raw: A text map key (str or int), a ``{"hash", "dynamic",
            "fallback"}`` mapping, or None

    Returns:
        The handle, or None when the field is absent
    """
    if raw is None or raw == "":
        return None
    if isinstance(raw, Mapping):
        return TextHandle(
            key=str(raw["hash"]),
            dynamic=bool(raw.get("dynamic", False)),
            fallback_language=raw.get("fallback"),
        )
    if isinstance(raw, (str, int)) and not isinstance(raw, bool):
        return TextHandle(key=str(raw))
    raise TypeError(f"unsupported text field {raw!r}")


def _parse_params(raw: Any) -> list[float]:
    if raw is None:
        return []
    return [float(value) for value in raw]


def parse_trace_detail(raw: Mapping[str, Any]) -> NodeDetail:
    """Classify a raw trace row by its shape.

    A row carrying ``property`` and ``value`` is a stat bonus (Minor node);
    a row carrying ``effect`` or ``desc`` is a skill upgrade (Major node);
    anything else is empty. This is the only place the raw shape is
    inspected.
    """
    if raw.get("property") is not None and raw.get("value") is not None:
        return StatBonusPayload(property_id=str(raw["property"]), value=float(raw["value"]))
    if raw.get("effect") is not None or raw.get("desc") is not None:
        return SkillUpgradePayload(
            effect_type=str(raw.get("effect") or ""),
            description=parse_text_handle(raw.get("desc")),
            params=_parse_params(raw.get("params")),
        )
    return EmptyPayload()


def _load_each(
    raw_table: Mapping[Any, Any],
    table_name: str,
    parse: Callable[[Any, Mapping[str, Any]], T],
) -> tuple[dict[Any, T], list[str]]:
    loaded: dict[Any, T] = {}
    warnings: list[str] = []
    for raw_id, record in raw_table.items():
        try:
            definition = parse(raw_id, record)
        except RECORD_ERRORS as e:
            message = f"Skipped {table_name} record {raw_id}: {e}"
            logger.warning(message)
            warnings.append(message)
            continue
        loaded[definition.id] = definition
    return loaded, warnings


# ─── Per-table loaders ────────────────────────────────────────────────


def _parse_property(raw_id: Any, raw: Mapping[str, Any]) -> StatProperty:
    return StatProperty(
        id=str(raw_id),
        type=raw["type"],
        name=parse_text_handle(raw.get("name")),
        is_percent=bool(raw.get("percent", False)),
    )


def _parse_skill(raw_id: Any, raw: Mapping[str, Any]) -> SkillDefinition:
    levels = raw.get("levels")
    if levels is None:
        rows = [ParamRow(level=1, params=_parse_params(raw.get("params")))]
        fixed = True
    else:
        rows = [
            ParamRow(
                level=int(row["level"]),
                sub_level=int(row.get("sub_level", 0)),
                params=_parse_params(row.get("params")),
            )
            for row in levels
        ]
        fixed = False
        validate_rows(rows, f"skill {raw_id}", require_base=True)
    return SkillDefinition(
        id=int(raw_id),
        name=parse_text_handle(raw.get("name")),
        kind=str(raw.get("type") or ""),
        effect_type=str(raw.get("effect") or ""),
        description=parse_text_handle(raw.get("desc")),
        rows=rows,
        fixed=fixed,
    )


def _parse_trace(raw_id: Any, raw: Mapping[str, Any]) -> TraceNodeDefinition:
    rows = [
        TraceLevelRow(
            level=int(row["level"]),
            sub_level=int(row.get("sub_level", 0)),
            detail=parse_trace_detail(row),
            stats=[
                StatRef(property_id=str(stat["property"]), value=float(stat["value"]))
                for stat in row.get("stats") or []
            ],
            params=_parse_params(row.get("params")),
        )
        for row in raw.get("levels") or []
    ]
    validate_rows(rows, f"trace {raw_id}")
    declared = raw.get("max_level")
    skill_id = raw.get("skill")
    return TraceNodeDefinition(
        id=int(raw_id),
        name=parse_text_handle(raw.get("name")),
        skill_id=int(skill_id) if skill_id is not None else None,
        max_level=int(declared) if declared is not None else max(len({r.level for r in rows}), 1),
        anchor=str(raw.get("anchor") or ""),
        pre_points=[int(point) for point in raw.get("pre_points") or []],
        rows=rows,
    )


def _parse_eidolon(raw_id: Any, raw: Mapping[str, Any]) -> EidolonDefinition:
    upgrades = raw.get("skills") or {}
    return EidolonDefinition(
        id=int(raw_id),
        rank=int(raw["rank"]),
        name=parse_text_handle(raw.get("name")),
        description=parse_text_handle(raw.get("desc")),
        rows=[ParamRow(level=1, params=_parse_params(raw.get("params")))],
        skill_upgrades=[
            EidolonSkillRef(skill_id=int(skill_id), amount=int(amount))
            for skill_id, amount in upgrades.items()
        ],
    )


def _parse_character(raw_id: Any, raw: Mapping[str, Any]) -> CharacterDefinition:
    rows = [
        CharacterLevelRow(
            level=int(row["level"]),
            sub_level=int(row.get("ascension", 0)),
            hp=float(row.get("hp", 0)),
            attack=float(row.get("atk", 0)),
            defense=float(row.get("def", 0)),
            speed=float(row.get("spd", 0)),
            taunt=float(row.get("taunt", 0)),
        )
        for row in raw.get("levels") or []
    ]
    validate_rows(rows, f"character {raw_id}")
    return CharacterDefinition(
        id=int(raw_id),
        name=parse_text_handle(raw.get("name")),
        rarity=int(raw.get("rarity", 4)),
        path=str(raw.get("path") or ""),
        element=str(raw.get("element") or ""),
        skill_ids=[int(i) for i in raw.get("skills") or []],
        trace_ids=[int(i) for i in raw.get("traces") or []],
        eidolon_ids=[int(i) for i in raw.get("eidolons") or []],
        rows=rows,
    )


def load_properties(raw: Mapping[Any, Any]) -> tuple[dict[str, StatProperty], list[str]]:
    """Load the stat property table. Unknown stat types are skipped."""
    return _load_each(raw, "property", _parse_property)


def load_skills(raw: Mapping[Any, Any]) -> tuple[dict[int, SkillDefinition], list[str]]:
    """Load the skill table."""
    return _load_each(raw, "skill", _parse_skill)


def load_traces(raw: Mapping[Any, Any]) -> tuple[dict[int, TraceNodeDefinition], list[str]]:
    """Load the trace node table."""
    return _load_each(raw, "trace", _parse_trace)


def load_eidolons(raw: Mapping[Any, Any]) -> tuple[dict[int, EidolonDefinition], list[str]]:
    """Load the eidolon table."""
    return _load_each(raw, "eidolon", _parse_eidolon)


def load_characters(raw: Mapping[Any, Any]) -> tuple[dict[int, CharacterDefinition], list[str]]:
    """Load the character table."""
    return _load_each(raw, "character", _parse_character)


def load_tables(raw: Mapping[str, Mapping[Any, Any]]) -> LoadResult:
    """Build a ``GameTables`` arena from raw tables.

    Args:
        raw: Mapping of table name ("characters", "skills", "traces",
            "eidolons", "properties") to that table's id -> record mapping.
            Missing tables load as empty.

    Returns:
        LoadResult with the arena and every skip warning
    """
    warnings: list[str] = []

    properties, w = load_properties(raw.get("properties", {}))
    warnings.extend(w)
    skills, w = load_skills(raw.get("skills", {}))
    warnings.extend(w)
    traces, w = load_traces(raw.get("traces", {}))
    warnings.extend(w)
    eidolons, w = load_eidolons(raw.get("eidolons", {}))
    warnings.extend(w)
    characters, w = load_characters(raw.get("characters", {}))
    warnings.extend(w)

    tables = GameTables(
        characters=characters,
        skills=skills,
        traces=traces,
        eidolons=eidolons,
        properties=properties,
    )
    logger.info(
        f"Loaded {len(characters)} characters, {len(skills)} skills, "
        f"{len(traces)} traces, {len(eidolons)} eidolons, "
        f"{len(properties)} properties ({len(warnings)} skipped)"
    )
    return LoadResult(tables=tables, warnings=warnings)
