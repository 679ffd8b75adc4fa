"""
Level row lookup for level-parameterised definitions.

A definition owns an ordered list of level rows, each keyed by
``(level, sub_level)``. ``sub_level`` selects an alternate scaling track
(ascension for characters, rank-based multipliers for skills) and is 0 for
the default track.
"""

from enum import Enum
from typing import Protocol, Sequence, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from .errors import DataIntegrityError


class LevelRow(BaseModel):
    """One row of a leveled definition."""

    model_config = ConfigDict(frozen=True)

    level: int = Field(default=1, ge=1, description="Progression level, starting at 1")
    sub_level: int = Field(default=0, ge=0, description="Alternate scaling track")


class NotFound(Enum):
    """Result of a row lookup that matched nothing. Falsy."""

    NOT_FOUND = "not_found"

    def __bool__(self) -> bool:
        return False


NOT_FOUND = NotFound.NOT_FOUND

RowT = TypeVar("RowT", bound=LevelRow, covariant=True)


class Leveled(Protocol[RowT]):
    """Anything exposing level rows: skills, trace nodes, characters, eidolons."""

    @property
    def rows(self) -> Sequence[RowT]: ...

    @property
    def fixed(self) -> bool: ...


def max_level(rows: Sequence[LevelRow]) -> int:
    """Highest level present in ``rows`` (0 when there are none)."""
    return max((row.level for row in rows), default=0)


def select_row(definition: Leveled[RowT], level: int, sub_level: int = 0) -> RowT | NotFound:
    """Return the row matching ``(level, sub_level)`` exactly.

    No interpolation happens between levels. A levelless definition
    (``fixed``) accepts any level and always returns its single row.

    Args:
        definition: The leveled definition to search
        level: Requested level, a positive integer
        sub_level: Requested scaling track, defaults to 0

    Returns:
        The matching row, or ``NOT_FOUND``. Callers decide whether a miss
        is a skip or an error.

    Raises:
        ValueError: If ``level`` is not a positive integer or ``sub_level``
            is negative
    """
    if isinstance(level, bool) or not isinstance(level, int) or level < 1:
        raise ValueError(f"level must be a positive integer, got {level!r}")
    if isinstance(sub_level, bool) or not isinstance(sub_level, int) or sub_level < 0:
        raise ValueError(f"sub_level must be a non-negative integer, got {sub_level!r}")

    rows = definition.rows
    if definition.fixed:
        return rows[0] if rows else NOT_FOUND

    for row in rows:
        if row.level == level and row.sub_level == sub_level:
            return row
    return NOT_FOUND


def validate_rows(
    rows: Sequence[LevelRow],
    owner: str = "definition",
    *,
    require_base: bool = False,
) -> None:
    """Check the level-row invariants of one definition.

    Rows must be unique per ``(level, sub_level)`` and their levels must form
    the contiguous range ``1..max_level``. With ``require_base`` the default
    track must also have a level-1 row.

    Raises:
        DataIntegrityError: If either invariant is violated
    """
    seen: set[tuple[int, int]] = set()
    for row in rows:
        key = (row.level, row.sub_level)
        if key in seen:
            raise DataIntegrityError(f"{owner} has duplicate level row {key}")
        seen.add(key)

    levels = {row.level for row in rows}
    expected = set(range(1, max_level(rows) + 1))
    if levels != expected:
        missing = sorted(expected - levels)
        raise DataIntegrityError(f"{owner} level rows are not contiguous, missing {missing}")
    if require_base and (1, 0) not in seen:
        raise DataIntegrityError(f"{owner} has no level-1 row")
