"""Tests for binding definitions to a level."""

import pytest

from trailblaze.entities import (
    SKIPPED,
    BindPolicy,
    bind_character,
    bind_eidolon,
    bind_level,
    bind_skill,
    bind_trace,
)
from trailblaze.errors import DataIntegrityError
from trailblaze.localization import TextResolver
from trailblaze.models import (
    CharacterDefinition,
    EidolonDefinition,
    ParamRow,
    SkillDefinition,
    StatBonusPayload,
    StatRef,
    TraceLevelRow,
    TraceNodeDefinition,
)
from trailblaze.stats import StatBonus, StatType
from trailblaze.tables import GameTables


class TestBindLevel:
    """Test skip-or-require policies."""

    def test_optional_miss_is_skipped(self, tables: GameTables) -> None:
        skill = tables.skills[100103]
        assert bind_level(skill, 4) is SKIPPED
        assert not SKIPPED

    def test_required_miss_raises(self, tables: GameTables) -> None:
        skill = tables.skills[100103]
        with pytest.raises(DataIntegrityError, match="SkillDefinition 100103"):
            bind_level(skill, 4, policy=BindPolicy.REQUIRED)

    def test_hit_returns_row(self, tables: GameTables) -> None:
        row = bind_level(tables.skills[100103], 2, policy=BindPolicy.REQUIRED)
        assert row.params == [0.96]


class TestBindSkill:
    """Test leveled skills."""

    def test_description_uses_level_params(self, tables: GameTables, texts: TextResolver) -> None:
        skill = bind_skill(tables.skills[100101], 3, texts, "en")
        assert skill.level == 3
        assert skill.params == [0.7]
        assert skill.name == "Frigid Cold Arrow"
        assert skill.description == "Deals Ice DMG equal to 70% of ATK to a single enemy."

    def test_localized_name(self, tables: GameTables, texts: TextResolver) -> None:
        skill = bind_skill(tables.skills[100101], 1, texts, "cn")
        assert skill.name == "极寒的弓矢"
        # description has no cn text, falls back to en
        assert skill.description.startswith("Deals Ice DMG equal to 50%")

    def test_missing_level_skipped(self, tables: GameTables, texts: TextResolver) -> None:
        assert bind_skill(tables.skills[100102], 5, texts, "en") is SKIPPED

    def test_levelless_skill_any_level(self, tables: GameTables, texts: TextResolver) -> None:
        skill = bind_skill(tables.skills[100107], 7, texts, "en")
        assert skill.description == "Freezes enemies for 1 turn(s)."


class TestBindTrace:
    """Test leveled trace nodes and payload dispatch."""

    def test_minor_node(self, tables: GameTables, texts: TextResolver) -> None:
        trace = bind_trace(tables.traces[1001201], 1, texts, "en", tables.properties)
        assert trace.is_minor and not trace.is_major
        assert trace.description == "ATK +8%"
        assert trace.name == "ATK"
        assert trace.primary_stats == [StatBonus(type=StatType.ATK, value=0.08, is_percent=True)]
        assert trace.secondary_stats == []

    def test_minor_node_stats_reconciled(self, tables: GameTables, texts: TextResolver) -> None:
        trace = bind_trace(tables.traces[1001202], 1, texts, "en", tables.properties)
        assert [(s.type, s.value) for s in trace.stats] == [
            (StatType.HP, 0.1),
            (StatType.DEF, 0.05),
        ]

    def test_major_node_uses_payload_text(self, tables: GameTables, texts: TextResolver) -> None:
        trace = bind_trace(tables.traces[1001102], 1, texts, "en", tables.properties)
        assert trace.is_major
        assert trace.name == "Reinforce"
        assert trace.description == "Ice RES increases by 20%."
        assert trace.params == [0.2]
        assert trace.primary_stats == []
        assert trace.secondary_stats == [
            StatBonus(type=StatType.ICE_DMG_BOOST, value=0.032, is_percent=True)
        ]

    def test_unknown_property_gives_no_primary(self, tables: GameTables, texts: TextResolver) -> None:
        trace = bind_trace(tables.traces[1001203], 1, texts, "en", tables.properties)
        assert trace.is_minor
        assert trace.primary_stats == []
        assert trace.description == ""

    def test_unknown_secondary_property_dropped(self, texts: TextResolver) -> None:
        node = TraceNodeDefinition(
            id=9,
            rows=[
                TraceLevelRow(
                    level=1,
                    detail=StatBonusPayload(property_id="Nope", value=1.0),
                    stats=[StatRef(property_id="Nope", value=1.0)],
                )
            ],
        )
        trace = bind_trace(node, 1, texts, "en", {})
        assert trace.stats == []

    def test_missing_level_skipped(self, tables: GameTables, texts: TextResolver) -> None:
        assert bind_trace(tables.traces[1001201], 2, texts, "en", tables.properties) is SKIPPED


class TestBindEidolon:
    """Test eidolon resolution."""

    def test_dynamic_description(self, tables: GameTables, texts: TextResolver) -> None:
        eidolon = bind_eidolon(tables.eidolons[100101], texts, "en", rank=0)
        assert eidolon.description == "Increases DMG by 50% for 2 turn(s)"
        assert eidolon.params == [50.0, 2.0]
        assert eidolon.unlocked is False

    def test_plain_description(self, tables: GameTables, texts: TextResolver) -> None:
        eidolon = bind_eidolon(tables.eidolons[100102], texts, "en", rank=2)
        assert eidolon.description == "Casts a Shield on the ally with the lowest HP."
        assert eidolon.unlocked is True

    def test_dynamic_without_params_stays_template(self, texts: TextResolver) -> None:
        definition = EidolonDefinition(
            id=1,
            rank=1,
            description={"key": "e1_desc", "dynamic": True},
            rows=[ParamRow(level=1, params=[])],
        )
        eidolon = bind_eidolon(definition, texts, "en")
        assert eidolon.description == "Increases DMG by {0}% for {1} turn(s)"


class TestBindCharacter:
    """Test character binding and the level-1 requirement."""

    def test_bind_at_ascension(self, tables: GameTables, texts: TextResolver) -> None:
        character = bind_character(tables.characters[1001], texts, "en", level=3, ascension=1)
        assert character.name == "Frostbow"
        assert character.row.hp == 187.2

    def test_missing_level_one_row(self, texts: TextResolver) -> None:
        character = CharacterDefinition(id=1002, rows=[])
        with pytest.raises(DataIntegrityError):
            bind_character(character, texts, "en")

    def test_unknown_progression_state(self, tables: GameTables, texts: TextResolver) -> None:
        with pytest.raises(ValueError, match="level 3 ascension 2"):
            bind_character(tables.characters[1001], texts, "en", level=3, ascension=2)

    def test_skill_without_rows_required(self, texts: TextResolver) -> None:
        skill = SkillDefinition(id=5, kind="Normal", rows=[])
        with pytest.raises(DataIntegrityError):
            bind_skill(skill, 1, texts, "en", policy=BindPolicy.REQUIRED)
