"""
Extraction of flat, serialisable character records.
"""

from .extractor import CharacterExtractor, extract_character
from .records import (
    BaseStats,
    BatchFailure,
    BatchResult,
    CharacterExport,
    EidolonExport,
    EidolonSkillUpgrade,
    ExtractionResult,
    SkillData,
    SkillLevel,
    SkippedItem,
    TraceData,
)

__all__ = [
    "CharacterExtractor",
    "extract_character",
    "BaseStats",
    "BatchFailure",
    "BatchResult",
    "CharacterExport",
    "EidolonExport",
    "EidolonSkillUpgrade",
    "ExtractionResult",
    "SkillData",
    "SkillLevel",
    "SkippedItem",
    "TraceData",
]
