"""
JSON export of extraction results.
"""

import logging
from pathlib import Path
from typing import Any

from pydantic import BaseModel

logger = logging.getLogger(__name__)


def export_dict(record: BaseModel) -> dict[str, Any]:
    """Dump a record to plain JSON-compatible data (enums become their values)."""
    return record.model_dump(mode="json")


def export_json(record: BaseModel, indent: int | None = 2) -> str:
    """Serialise a record to a JSON string."""
    return record.model_dump_json(indent=indent)


def write_export(record: BaseModel, path: Path, indent: int | None = 2) -> Path:
    """Write a record as UTF-8 JSON, creating parent directories.

    Returns:
        The path written to
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(export_json(record, indent=indent), encoding="utf-8")
    logger.info(f"Wrote export to {path}")
    return path
