"""
trailblaze - resolves leveled game-data definitions (characters, skills,
trace nodes, eidolons) into localised, serialisable snapshots.
"""

from .config import ExtractionConfig, load_skill_types
from .errors import CharacterNotFoundError, DataIntegrityError, SkipReason, TrailblazeError
from .export import export_dict, export_json, write_export
from .extraction import CharacterExtractor, ExtractionResult, extract_character
from .localization import TextHandle, TextResolver
from .stats import StatBonus, StatType, reconcile
from .tables import GameTables, LoadResult, load_tables

try:
    from importlib.metadata import version as _get_version
    __version__ = _get_version("trailblaze-data")
except Exception:
    __version__ = "0.1.0"  # Fallback if metadata unavailable

__all__ = [
    "CharacterExtractor",
    "CharacterNotFoundError",
    "DataIntegrityError",
    "ExtractionConfig",
    "ExtractionResult",
    "GameTables",
    "LoadResult",
    "SkipReason",
    "StatBonus",
    "StatType",
    "TextHandle",
    "TextResolver",
    "TrailblazeError",
    "export_dict",
    "export_json",
    "extract_character",
    "load_skill_types",
    "load_tables",
    "reconcile",
    "write_export",
]
