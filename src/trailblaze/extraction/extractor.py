"""
Per-character extraction: skills, traces and eidolons as flat records.

The extractor walks a character's trace nodes, skills and eidolons through
the ``GameTables`` arena by id and copies the resolved values into export
records. A problem with one node, skill or eidolon skips that item only and
is reported as a ``SkippedItem`` (and to the optional ``on_skip`` hook).
Only ``DataIntegrityError`` and ``CharacterNotFoundError`` propagate out of
``extract``; ``extract_many`` contains those per character.
"""

import logging
from typing import Callable, Iterable

from ..config import ExtractionConfig
from ..entities import (
    SKIPPED,
    BindPolicy,
    bind_character,
    bind_eidolon,
    bind_skill,
    bind_trace,
)
from ..errors import CharacterNotFoundError, DataIntegrityError, SkipReason
from ..localization import TextResolver
from ..models import CharacterDefinition, SkillDefinition, TraceNodeDefinition
from ..tables import GameTables
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

logger = logging.getLogger(__name__)

SkipHook = Callable[[SkippedItem], None]


class CharacterExtractor:
    """Extract export records for characters of one ``GameTables`` arena.

    Example:
        >>> extractor = CharacterExtractor(tables, TextResolver(text_map))
        >>> result = extractor.extract(1001, level=80, ascension=6, rank=2)
        >>> [t.kind for t in result.character.traces]
        ['Major', 'Major', 'Minor', 'Minor']
    """

    def __init__(
        self,
        tables: GameTables,
        texts: TextResolver,
        config: ExtractionConfig | None = None,
        on_skip: SkipHook | None = None,
    ) -> None:
        self.tables = tables
        self.config = config or ExtractionConfig()
        # The config decides the fallback language, not the resolver it is given
        self.texts = texts.with_fallback(self.config.fallback_language)
        self.on_skip = on_skip

    @property
    def language(self) -> str:
        return self.config.language

    def _skip(
        self,
        skipped: list[SkippedItem],
        kind: str,
        item_id: int,
        reason: SkipReason,
        detail: str = "",
    ) -> None:
        item = SkippedItem(kind=kind, item_id=item_id, reason=reason, detail=detail)
        logger.debug(f"Skipped {kind} {item_id}: {reason.value} {detail}".rstrip())
        skipped.append(item)
        if self.on_skip is not None:
            self.on_skip(item)

    def _nodes(
        self, character: CharacterDefinition, skipped: list[SkippedItem] | None = None
    ) -> list[TraceNodeDefinition]:
        nodes: list[TraceNodeDefinition] = []
        for trace_id in character.trace_ids:
            node = self.tables.traces.get(trace_id)
            if node is None:
                if skipped is not None:
                    self._skip(skipped, "trace", trace_id, SkipReason.MISSING_REFERENCE,
                               "unknown trace id")
                continue
            nodes.append(node)
        return nodes

    def _base_skill(self, node: TraceNodeDefinition) -> SkillDefinition | None:
        if node.skill_id is None:
            return None
        return self.tables.skills.get(node.skill_id)

    # ─── Skills ──────────────────────────────────────────────────────

    def extract_skills(
        self,
        character: CharacterDefinition,
        skipped: list[SkippedItem] | None = None,
    ) -> list[SkillData]:
        """Extract every leveled skill reachable from the trace tree.

        Nodes whose base skill kind is missing from the translation table are
        excluded. Each kept skill is bound at level 1 for its identity, then
        at every level ``1..node.max_level`` that has a row.

        Raises:
            DataIntegrityError: If a recognised skill has no level-1 row
        """
        skipped = [] if skipped is None else skipped
        records: list[SkillData] = []

        for node in self._nodes(character):
            if node.skill_id is None:
                continue
            skill = self._base_skill(node)
            if skill is None:
                self._skip(skipped, "skill", node.skill_id, SkipReason.MISSING_REFERENCE,
                           f"trace {node.id} references an unknown skill")
                continue
            label = self.config.skill_type_label(skill.kind)
            if label is None:
                self._skip(skipped, "skill", skill.id, SkipReason.UNRECOGNIZED_KIND, skill.kind)
                continue

            base = bind_skill(skill, 1, self.texts, self.language, policy=BindPolicy.REQUIRED)

            levels: list[SkillLevel] = []
            for level in range(1, node.max_level + 1):
                leveled = bind_skill(skill, level, self.texts, self.language)
                if leveled is SKIPPED:
                    continue
                levels.append(SkillLevel(level=level, params=leveled.params))
            levels.sort(key=lambda entry: entry.level)

            records.append(
                SkillData(
                    id=skill.id,
                    name=base.name,
                    type=label,
                    effect=skill.effect_type,
                    description=base.description,
                    max_level=node.max_level,
                    levels=levels,
                )
            )
        return records

    # ─── Traces ──────────────────────────────────────────────────────

    def extract_traces(
        self,
        character: CharacterDefinition,
        skipped: list[SkippedItem] | None = None,
    ) -> list[TraceData]:
        """Extract the unlockable (single-level) trace nodes.

        The technique node is excluded; multi-level nodes belong to the skill
        extraction. Minor nodes carry a stat bonus, Major nodes a skill
        upgrade whose skill-level text, when present, wins over the node's.
        """
        skipped = [] if skipped is None else skipped
        records: list[TraceData] = []

        for node in self._nodes(character, skipped):
            skill = self._base_skill(node)
            if skill is not None and skill.kind == self.config.technique_kind:
                self._skip(skipped, "trace", node.id, SkipReason.TECHNIQUE)
                continue
            if node.max_level != 1:
                if skill is None or self.config.skill_type_label(skill.kind) is None:
                    # Neither a trace nor a recognised skill: dropped from both outputs
                    self._skip(skipped, "trace", node.id, SkipReason.MULTI_LEVEL,
                               f"max_level={node.max_level}")
                continue

            leveled = bind_trace(node, 1, self.texts, self.language, self.tables.properties)
            if leveled is SKIPPED:
                self._skip(skipped, "trace", node.id, SkipReason.NOT_FOUND, "no level-1 row")
                continue

            name = leveled.name
            description = leveled.description
            params = leveled.params
            if leveled.is_minor:
                if not leveled.primary_stats:
                    self._skip(skipped, "trace", node.id, SkipReason.MISSING_REFERENCE,
                               "unknown stat property")
                    continue
                kind = "Minor"
            elif leveled.is_major:
                kind = "Major"
                if skill is not None:
                    skill_level = bind_skill(skill, 1, self.texts, self.language)
                    if skill_level is not SKIPPED:
                        if skill_level.description:
                            description = skill_level.description
                            params = skill_level.params
                        name = name or skill_level.name
            else:
                self._skip(skipped, "trace", node.id, SkipReason.MALFORMED, "empty payload")
                continue

            records.append(
                TraceData(
                    id=node.id,
                    name=name,
                    kind=kind,
                    description=description,
                    params=params,
                    stats=leveled.stats,
                    skill_id=node.skill_id,
                    anchor=node.anchor,
                    pre_points=list(node.pre_points),
                )
            )
        return records

    # ─── Eidolons ────────────────────────────────────────────────────

    def _skill_lookup(self, character: CharacterDefinition) -> dict[int, SkillDefinition]:
        skill_ids = list(character.skill_ids)
        for trace_id in character.trace_ids:
            node = self.tables.traces.get(trace_id)
            if node is not None and node.skill_id is not None:
                skill_ids.append(node.skill_id)
        return {
            skill_id: self.tables.skills[skill_id]
            for skill_id in skill_ids
            if skill_id in self.tables.skills
        }

    def extract_eidolons(
        self,
        character: CharacterDefinition,
        rank: int = 0,
        skipped: list[SkippedItem] | None = None,
    ) -> list[EidolonExport]:
        """Extract the character's eidolons, sorted by rank.

        Args:
            character: Character whose eidolons to extract
            rank: Current eidolon rank; eidolons up to it are ``unlocked``
            skipped: Accumulator for skipped items
        """
        skipped = [] if skipped is None else skipped
        skills = self._skill_lookup(character)
        records: list[EidolonExport] = []

        for eidolon_id in character.eidolon_ids:
            eidolon = self.tables.eidolons.get(eidolon_id)
            if eidolon is None:
                self._skip(skipped, "eidolon", eidolon_id, SkipReason.MISSING_REFERENCE,
                           "unknown eidolon id")
                continue
            leveled = bind_eidolon(eidolon, self.texts, self.language, rank)

            upgrades: list[EidolonSkillUpgrade] = []
            for ref in eidolon.skill_upgrades:
                skill = skills.get(ref.skill_id)
                if skill is None:
                    self._skip(skipped, "eidolon_skill", ref.skill_id, SkipReason.MISSING_REFERENCE,
                               f"eidolon {eidolon.id}")
                    continue
                label = self.config.skill_type_label(skill.kind)
                if label is None:
                    self._skip(skipped, "eidolon_skill", ref.skill_id, SkipReason.UNRECOGNIZED_KIND,
                               skill.kind)
                    continue
                upgrades.append(
                    EidolonSkillUpgrade(
                        skill_id=skill.id,
                        skill_type=label,
                        skill_name=self.texts.resolve(skill.name, self.language),
                        amount=ref.amount,
                    )
                )

            records.append(
                EidolonExport(
                    id=eidolon.id,
                    rank=eidolon.rank,
                    name=leveled.name,
                    description=leveled.description,
                    params=leveled.params,
                    unlocked=leveled.unlocked,
                    skills=upgrades,
                )
            )

        records.sort(key=lambda record: record.rank)
        return records

    # ─── Whole character ─────────────────────────────────────────────

    def extract(
        self,
        character_id: int,
        level: int = 1,
        ascension: int = 0,
        rank: int = 0,
    ) -> ExtractionResult:
        """Extract a full character snapshot at one progression state.

        Args:
            character_id: Id of the character in the arena
            level: Character level
            ascension: Ascension (sub-level track of the character rows)
            rank: Eidolon rank, 0 for none

        Returns:
            ExtractionResult with the snapshot and every skipped item

        Raises:
            CharacterNotFoundError: If the id is not in the arena
            DataIntegrityError: If the character or one of its recognised
                skills has no level-1 row
            ValueError: If the requested progression state does not exist
        """
        if rank < 0:
            raise ValueError(f"rank must be non-negative, got {rank}")
        character = self.tables.characters.get(character_id)
        if character is None:
            raise CharacterNotFoundError(f"Unknown character id {character_id}")

        leveled = bind_character(character, self.texts, self.language, level, ascension)
        skipped: list[SkippedItem] = []
        row = leveled.row

        export = CharacterExport(
            id=character.id,
            name=leveled.name,
            rarity=character.rarity,
            path=character.path,
            element=character.element,
            level=level,
            ascension=ascension,
            rank=rank,
            base_stats=BaseStats(
                hp=row.hp,
                attack=row.attack,
                defense=row.defense,
                speed=row.speed,
                taunt=row.taunt,
            ),
            skills=self.extract_skills(character, skipped),
            traces=self.extract_traces(character, skipped),
            eidolons=self.extract_eidolons(character, rank, skipped),
        )
        logger.info(
            f"Extracted character {character.id}: {len(export.skills)} skills, "
            f"{len(export.traces)} traces, {len(export.eidolons)} eidolons, "
            f"{len(skipped)} skipped"
        )
        return ExtractionResult(character=export, skipped=skipped)

    def extract_many(
        self,
        character_ids: Iterable[int],
        level: int = 1,
        ascension: int = 0,
        rank: int = 0,
    ) -> BatchResult:
        """Extract several characters; a failing character never stops the batch."""
        batch = BatchResult()
        for character_id in character_ids:
            try:
                result = self.extract(character_id, level=level, ascension=ascension, rank=rank)
            except (DataIntegrityError, CharacterNotFoundError, ValueError) as e:
                logger.warning(f"Extraction failed for character {character_id}: {e}")
                batch.failures.append(BatchFailure(character_id=character_id, error=str(e)))
                continue
            batch.results.append(result)
        return batch


def extract_character(
    tables: GameTables,
    texts: TextResolver,
    character_id: int,
    *,
    level: int = 1,
    ascension: int = 0,
    rank: int = 0,
    config: ExtractionConfig | None = None,
    on_skip: SkipHook | None = None,
) -> ExtractionResult:
    """Extract one character with a throwaway ``CharacterExtractor``."""
    extractor = CharacterExtractor(tables, texts, config=config, on_skip=on_skip)
    return extractor.extract(character_id, level=level, ascension=ascension, rank=rank)
