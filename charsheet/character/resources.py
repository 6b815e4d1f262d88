"""
Resource tracking for the character sheet core.

Spends and restores the player-tracked resources on a sheet: spell slots,
hit dice and hit points, plus short rests, long rests and level ups.

Every action works on a recalculated copy of the record and returns it
inside a result object; the caller's record is never mutated. Spending a
resource that is not available is not an error: the result comes back
with ``success=False`` and the copy unchanged.
"""

from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping, Optional, Union
import logging

from charsheet.data_models import (
    Ability,
    CharacterRecord,
    Feature,
    HitDieRoll,
    SpellSlot,
    coerce_int,
)
from charsheet.dice.dice_engine import DiceRoller, get_dice_roller
from charsheet.resolver.stat_resolver import ResolverConfig, recalculate
from charsheet.rules.rules_data import MAX_LEVEL, get_spell_slot_table

logger = logging.getLogger(__name__)

RecordLike = Union[CharacterRecord, Mapping[str, Any]]


# =============================================================================
# RESULT DATACLASSES
# =============================================================================


@dataclass
class ResourceResult:
    """Result of spending or restoring a resource."""
    success: bool
    record: CharacterRecord
    message: str = ""
    hp_regained: int = 0
    rolls: list[HitDieRoll] = field(default_factory=list)


@dataclass
class LevelUpResult:
    """Result of a level-up operation."""
    success: bool
    record: CharacterRecord
    old_level: int
    new_level: int
    hp_gained: int = 0
    new_features: list[str] = field(default_factory=list)
    new_spell_slots: dict[int, int] = field(default_factory=dict)  # Added slots per level
    message: str = ""


# =============================================================================
# SPELL SLOTS
# =============================================================================


def _find_slot(record: CharacterRecord, level: int) -> Optional[SpellSlot]:
    return next((s for s in record.spell_slots if s.level == level), None)


def expend_spell_slot(
    record: RecordLike, level: int, config: Optional[ResolverConfig] = None
) -> ResourceResult:
    """
    Spend one spell slot of the given level.

    Fails (without raising) when the character has no slots of that level
    or none remaining.
    """
    rec = recalculate(record, config)
    slot = _find_slot(rec, level)
    if slot is None or slot.maximum == 0:
        return ResourceResult(False, rec, f"{rec.name} has no level {level} spell slots")
    if slot.current <= 0:
        return ResourceResult(False, rec, f"No level {level} spell slots remaining")

    slot.current -= 1
    logger.debug(f"{rec.name} spent a level {level} slot ({slot.current}/{slot.maximum} left)")
    return ResourceResult(True, rec, f"Spent a level {level} spell slot")


def restore_spell_slots(
    record: RecordLike, level: Optional[int] = None, config: Optional[ResolverConfig] = None
) -> ResourceResult:
    """Refill every spell slot, or only those of one level."""
    rec = recalculate(record, config)
    for slot in rec.spell_slots:
        if level is None or slot.level == level:
            slot.current = slot.maximum
    scope = "all spell slots" if level is None else f"level {level} spell slots"
    return ResourceResult(True, rec, f"Restored {scope}")


# =============================================================================
# HIT DICE AND RESTS
# =============================================================================


def _spend_one_hit_die(rec: CharacterRecord, roller: DiceRoller) -> Optional[HitDieRoll]:
    """Spend a hit die in place on an already-copied record."""
    hit_dice = rec.hit_dice
    if hit_dice is None or hit_dice.current <= 0:
        return None
    con_mod = rec.get_ability_modifier(Ability.CON)
    result = roller.roll_hit_die(hit_dice.sides, con_mod)
    hit_dice.current -= 1
    rec.hp.current = min(rec.hp.maximum, rec.hp.current + result.total)
    logger.debug(
        f"{rec.name} spent a hit die: d{hit_dice.sides}={result.roll} "
        f"{con_mod:+d} CON, regained {result.total}"
    )
    return result


def spend_hit_die(
    record: RecordLike,
    roller: Optional[DiceRoller] = None,
    config: Optional[ResolverConfig] = None,
) -> ResourceResult:
    """
    Spend one hit die to regain HP (die roll + CON, never below 0).

    HP never rises above the maximum.
    """
    rec = recalculate(record, config)
    hp_before = rec.hp.current
    result = _spend_one_hit_die(rec, roller or get_dice_roller())
    if result is None:
        return ResourceResult(False, rec, "No hit dice remaining")
    return ResourceResult(
        True, rec, "Spent a hit die",
        hp_regained=rec.hp.current - hp_before,
        rolls=[result],
    )


def short_rest(
    record: RecordLike,
    hit_dice: int = 1,
    roller: Optional[DiceRoller] = None,
    config: Optional[ResolverConfig] = None,
) -> ResourceResult:
    """
    Take a short rest, spending up to ``hit_dice`` hit dice.

    Stops early when the pool runs out. Fails only when at least one die
    was requested and none could be spent.
    """
    rec = recalculate(record, config)
    roller = roller or get_dice_roller()
    wanted = coerce_int(hit_dice, 1, minimum=0)
    hp_before = rec.hp.current

    rolls = []
    for _ in range(wanted):
        result = _spend_one_hit_die(rec, roller)
        if result is None:
            break
        rolls.append(result)

    if wanted and not rolls:
        return ResourceResult(False, rec, "No hit dice remaining")

    regained = rec.hp.current - hp_before
    logger.info(f"{rec.name} took a short rest: {len(rolls)} hit dice, +{regained} HP")
    return ResourceResult(
        True, rec, f"Short rest: spent {len(rolls)} hit dice",
        hp_regained=regained,
        rolls=rolls,
    )


def long_rest(record: RecordLike, config: Optional[ResolverConfig] = None) -> ResourceResult:
    """
    Take a long rest.

    Restores all HP and every spell slot, and regains half the character's
    maximum hit dice (minimum 1).
    """
    rec = recalculate(record, config)
    regained = rec.hp.maximum - rec.hp.current
    rec.hp.current = rec.hp.maximum

    for slot in rec.spell_slots:
        slot.current = slot.maximum

    if rec.hit_dice is not None:
        recovered = max(1, rec.hit_dice.maximum // 2)
        rec.hit_dice.current = min(rec.hit_dice.maximum, rec.hit_dice.current + recovered)

    logger.info(f"{rec.name} took a long rest (+{regained} HP)")
    return ResourceResult(True, rec, "Long rest complete", hp_regained=regained)


# =============================================================================
# LEVEL UP
# =============================================================================


def _coerce_features(features: Optional[Iterable[Any]]) -> list[Feature]:
    result = []
    for feature in features or ():
        if isinstance(feature, Feature):
            result.append(Feature.from_dict(feature.to_dict()))
        elif isinstance(feature, Mapping):
            result.append(Feature.from_dict(feature))
    return result


def _refresh_spell_slots(
    slots: list[SpellSlot], character_class: str, level: int
) -> tuple[list[SpellSlot], dict[int, int]]:
    """
    New slot maxima for a level, keeping how many slots were spent.

    Returns the new slot list and the number of slots added per spell
    level. Classes without a slot table keep their tracked slots.
    """
    table = get_spell_slot_table(character_class, level)
    if not table:
        return slots, {}

    existing = {s.level: s for s in slots}
    refreshed = []
    added = {}
    for spell_level, count in sorted(table.items()):
        old = existing.get(spell_level)
        spent = old.maximum - old.current if old else 0
        refreshed.append(SpellSlot(level=spell_level, maximum=count, current=max(0, count - spent)))
        previous = old.maximum if old else 0
        if count > previous:
            added[spell_level] = count - previous
    return refreshed, added


def level_up(
    record: RecordLike,
    hp_increase: int,
    new_features: Optional[Iterable[Any]] = None,
    config: Optional[ResolverConfig] = None,
) -> LevelUpResult:
    """
    Advance a character one level.

    Args:
        record: The character to level up
        hp_increase: HP added to both current and maximum (negative -> 0)
        new_features: Features gained at the new level (Feature objects or
            feature mappings)
        config: Resolver configuration

    Returns:
        LevelUpResult; ``success`` is False at level 20
    """
    rec = recalculate(record, config)
    old_level = rec.level
    if old_level >= MAX_LEVEL:
        return LevelUpResult(
            False, rec, old_level, old_level,
            message=f"{rec.name} is already level {MAX_LEVEL}",
        )

    new_level = old_level + 1
    hp_gained = coerce_int(hp_increase, 0, minimum=0)
    features = _coerce_features(new_features)

    rec.level = new_level
    rec.hp.maximum += hp_gained
    rec.hp.current = min(rec.hp.maximum, rec.hp.current + hp_gained)
    rec.features.extend(features)
    rec.spell_slots, added_slots = _refresh_spell_slots(
        rec.spell_slots, rec.character_class, new_level
    )
    if rec.hit_dice is not None:
        rec.hit_dice.maximum += 1
        rec.hit_dice.current = min(rec.hit_dice.maximum, rec.hit_dice.current + 1)

    rec = recalculate(rec, config)

    logger.info(
        f"{rec.name} leveled up! Level {old_level} -> {new_level}, +{hp_gained} HP"
    )
    return LevelUpResult(
        True, rec, old_level, new_level,
        hp_gained=hp_gained,
        new_features=[f.name for f in features],
        new_spell_slots=added_slots,
        message=f"Reached level {new_level}",
    )
