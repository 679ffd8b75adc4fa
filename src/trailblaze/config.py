"""
Extraction settings: output language, fallback language and the skill kind
translation table.
"""

import logging
import os
from pathlib import Path

import yaml
from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

DEFAULT_SKILL_TYPES_PATH = Path(__file__).parent / "data" / "skill_types.yaml"

# Raw kind tag of a character's innate technique ability
TECHNIQUE_KIND = "Maze"


def load_skill_types(path: Path) -> dict[str, str]:
    """Load the skill kind translation table from a YAML file.

    Expected YAML format:
        skill_types:
          Normal: Basic ATK
          BPSkill: Skill

    Args:
        path: Path to the YAML file

    Returns:
        Mapping of raw skill kind tag to display label

    Raises:
        FileNotFoundError: If the YAML file doesn't exist
        yaml.YAMLError: If the YAML is malformed
        ValueError: If the 'skill_types' key is missing or not a mapping
    """
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)

    if not data or "skill_types" not in data:
        raise ValueError("YAML file must contain a 'skill_types' key")
    table = data["skill_types"]
    if not isinstance(table, dict):
        raise ValueError("'skill_types' must be a mapping of kind to label")

    return {str(kind): str(label) for kind, label in table.items()}


class ExtractionConfig(BaseModel):
    """Settings shared by every extraction run."""

    language: str = Field(default="en", description="Output language code")
    fallback_language: str = Field(
        default="en",
        description="Language used when a text has no translation in `language`",
    )
    technique_kind: str = Field(
        default=TECHNIQUE_KIND,
        description="Raw skill kind tag identifying the innate technique node",
    )
    skill_types: dict[str, str] = Field(
        default_factory=lambda: load_skill_types(DEFAULT_SKILL_TYPES_PATH),
        description="Raw skill kind tag -> display label; unlisted kinds are excluded",
    )

    @classmethod
    def from_env(cls) -> "ExtractionConfig":
        """Build a config from TRAILBLAZE_* environment variables.

        Recognised variables:
            TRAILBLAZE_LANGUAGE: output language
            TRAILBLAZE_FALLBACK_LANGUAGE: fallback language
            TRAILBLAZE_SKILL_TYPES: path to a YAML skill kind table
        """
        values: dict = {}
        language = os.getenv("TRAILBLAZE_LANGUAGE")
        if language:
            values["language"] = language
        fallback = os.getenv("TRAILBLAZE_FALLBACK_LANGUAGE")
        if fallback:
            values["fallback_language"] = fallback
        skill_types_path = os.getenv("TRAILBLAZE_SKILL_TYPES")
        if skill_types_path:
            path = Path(skill_types_path).expanduser().resolve()
            values["skill_types"] = load_skill_types(path)
            logger.info(f"Loaded skill type table from {path}")
        return cls(**values)

    def skill_type_label(self, kind: str) -> str | None:
        """Translate a raw skill kind, or None when the kind is unrecognised."""
        return self.skill_types.get(kind)
