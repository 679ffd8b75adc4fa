"""
Stat bonuses and the reconciler that merges them across sources.
"""

from enum import Enum
from typing import Iterable

from pydantic import BaseModel, ConfigDict, Field

from .localization import format_stat_value


class StatType(str, Enum):
    """Kinds of stat a bonus can apply to."""

    HP = "HP"
    ATK = "ATK"
    DEF = "DEF"
    SPD = "SPD"
    CRIT_RATE = "CRIT Rate"
    CRIT_DMG = "CRIT DMG"
    BREAK_EFFECT = "Break Effect"
    EFFECT_HIT_RATE = "Effect Hit Rate"
    EFFECT_RES = "Effect RES"
    ENERGY_REGENERATION_RATE = "Energy Regeneration Rate"
    OUTGOING_HEALING_BOOST = "Outgoing Healing Boost"
    PHYSICAL_DMG_BOOST = "Physical DMG Boost"
    FIRE_DMG_BOOST = "Fire DMG Boost"
    ICE_DMG_BOOST = "Ice DMG Boost"
    LIGHTNING_DMG_BOOST = "Lightning DMG Boost"
    WIND_DMG_BOOST = "Wind DMG Boost"
    QUANTUM_DMG_BOOST = "Quantum DMG Boost"
    IMAGINARY_DMG_BOOST = "Imaginary DMG Boost"


class StatBonus(BaseModel):
    """A typed numeric stat delta, e.g. ATK +8%."""

    model_config = ConfigDict(frozen=True)

    type: StatType = Field(..., description="Stat kind")
    value: float = Field(..., description="Bonus amount; 0.08 means 8% when is_percent")
    is_percent: bool = Field(default=False, description="Whether value is a ratio")

    def describe(self, name: str | None = None) -> str:
        """Render as display text, e.g. ``"ATK +8%"``.

        Args:
            name: Localised stat name; the stat kind is used when empty
        """
        label = name or self.type.value
        return f"{label} +{format_stat_value(self.value, self.is_percent)}"


def reconcile(primary: Iterable[StatBonus], secondary: Iterable[StatBonus]) -> list[StatBonus]:
    """Merge two stat contributions, dropping exact duplicates.

    The result starts with every ``primary`` entry. Each ``secondary`` entry
    is then appended in order unless an entry with the same ``(type, value)``
    is already in the accumulating result. Entries with the same type but a
    different value are both kept.

    Example:
        >>> hp = StatBonus(type=StatType.HP, value=0.1, is_percent=True)
        >>> reconcile([hp], [hp])
        [StatBonus(type=<StatType.HP: 'HP'>, value=0.1, is_percent=True)]
    """
    result: list[StatBonus] = list(primary)
    seen = {(stat.type, stat.value) for stat in result}
    for stat in secondary:
        key = (stat.type, stat.value)
        if key in seen:
            continue
        seen.add(key)
        result.append(stat)
    return result
