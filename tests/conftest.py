"""
Pytest configuration and fixtures for trailblaze tests.
"""

import json
import sys
from pathlib import Path
import pytest

# Add src directory to Python path to allow importing trailblaze
src_path = Path(__file__).parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from trailblaze.config import ExtractionConfig  # noqa: E402
from trailblaze.extraction import CharacterExtractor  # noqa: E402
from trailblaze.localization import TextResolver  # noqa: E402
from trailblaze.tables import GameTables, LoadResult, load_tables  # noqa: E402

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def sample_data() -> dict:
    """Raw tables and text map of the sample character 1001."""
    with open(FIXTURES_DIR / "tables_sample.json", encoding="utf-8") as f:
        return json.load(f)


@pytest.fixture
def load_result(sample_data: dict) -> LoadResult:
    return load_tables(sample_data["tables"])


@pytest.fixture
def tables(load_result: LoadResult) -> GameTables:
    return load_result.tables


@pytest.fixture
def texts(sample_data: dict) -> TextResolver:
    return TextResolver(sample_data["texts"], fallback_language="en")


@pytest.fixture
def config() -> ExtractionConfig:
    return ExtractionConfig(language="en", fallback_language="en")


@pytest.fixture
def extractor(tables: GameTables, texts: TextResolver, config: ExtractionConfig) -> CharacterExtractor:
    return CharacterExtractor(tables, texts, config)
