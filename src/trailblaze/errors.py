"""
Exception types and skip reasons for the resolution pipeline.

Only ``DataIntegrityError`` and ``CharacterNotFoundError`` ever leave a
per-character extraction. Every other problem (a missing level row, a
missing translation, a malformed template, an unrecognised kind) is absorbed
where it happens and reported as a ``SkipReason`` instead.
"""

from enum import Enum


class TrailblazeError(Exception):
    """Base class for all errors raised by trailblaze."""


class DataIntegrityError(TrailblazeError):
    """Raised when a table is structurally inconsistent.

    Typical cause: a definition that must always have a level-1 row (a
    character, or a skill bound for its identity fields) does not. This is
    fatal for the extraction of the owning character, but never for the
    other characters of a batch.
    """


class CharacterNotFoundError(TrailblazeError, KeyError):
    """Raised when an extraction is requested for an unknown character id."""

    def __str__(self) -> str:
        return Exception.__str__(self)


class SkipReason(str, Enum):
    """Why a single node, skill, eidolon or record was left out."""

    NOT_FOUND = "not_found"
    UNRECOGNIZED_KIND = "unrecognized_kind"
    MISSING_REFERENCE = "missing_reference"
    MALFORMED = "malformed"
    TECHNIQUE = "technique"
    MULTI_LEVEL = "multi_level"
