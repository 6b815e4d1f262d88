"""
Stat Resolver for the character sheet core.

Recomputes every derived value on a character record from its raw inputs
(ability scores, level, class, skill tiers, equipped items):

1. Proficiency bonus from level
2. Ability modifiers and saving throws
3. Skill modifiers
4. Armor class (armor table, unarmored defense, shield)
5. Attacks (equipped weapons plus Unarmed Strike)
6. Spell slots (generated from the class table when absent)
7. Passive perception, initiative, hit dice, carry load

Recalculation never raises. Records loaded from storage may be partial or
malformed; every field is coerced to a safe default instead (score 10,
level 1, gold 0, empty lists), so a damaged record still renders a sheet.
The input is never mutated and recalculating an already-derived record
returns an equal record.
"""

from dataclasses import asdict, dataclass
from typing import Any, Mapping, Optional, Type, TypeVar, Union
import logging
import re

from charsheet.data_models import (
    ABILITY_KEYS,
    AbilityScore,
    Ability,
    Attack,
    CarryLoad,
    CharacterRecord,
    Feature,
    HitDice,
    HitPoints,
    Inventory,
    Item,
    ItemType,
    JournalEntry,
    Skill,
    SpellSlot,
    ability_modifier,
    as_list,
    coerce_bool,
    coerce_enum,
    coerce_int,
    coerce_str,
    proficiency_bonus,
)
from charsheet.rules.rules_data import (
    DAMAGE_TYPES,
    DEFAULT_DAMAGE_DICE,
    DEFAULT_DAMAGE_TYPE,
    LIGHT_LOAD_PER_STR,
    MAX_LEVEL,
    MEDIUM_LOAD_PER_STR,
    RANGED_WEAPON_KEYWORDS,
    SHIELD_BONUS,
    STANDARD_SKILLS,
    UNARMORED_BASE_AC,
    find_armor,
    get_hit_die,
    get_skill_ability,
    get_spell_slot_table,
    get_unarmored_defense,
    is_shield,
    parse_armor_hint,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

UNARMED_STRIKE = "Unarmed Strike"

_DAMAGE_DICE_RE = re.compile(r"(\d+d\d+)", re.IGNORECASE)
_RANGE_RE = re.compile(r"\brange\s*:?\s*(\d+(?:\s*/\s*\d+)?)", re.IGNORECASE)
_RANGE_PAIR_RE = re.compile(r"\b(\d+\s*/\s*\d+)\b")
_RANGE_PROPERTY_RE = re.compile(r"^range\b", re.IGNORECASE)


# =============================================================================
# CONFIGURATION
# =============================================================================


@dataclass
class ResolverConfig:
    """Tunable policies for recalculation."""

    # Barbarian / Monk AC from a second ability when no armor is worn
    unarmored_defense: bool = True

    # Attack range shown when the weapon notes give none
    melee_default_range: str = "5"
    ranged_default_range: str = "80/320"

    default_damage_dice: str = DEFAULT_DAMAGE_DICE


# =============================================================================
# SANITATION
# =============================================================================


def _coerce_component(value: Any, cls: Type[T]) -> Optional[T]:
    """Rebuild a dataclass component through its from_dict coercion."""
    if isinstance(value, cls):
        return cls.from_dict(asdict(value))
    if isinstance(value, Mapping):
        return cls.from_dict(value)
    return None


def _coerce_components(values: Any, cls: Type[T]) -> list[T]:
    """Coerce each entry of a list, skipping entries that are not records."""
    result = []
    for value in as_list(values):
        component = _coerce_component(value, cls)
        if component is not None:
            result.append(component)
    return result


def _coerce_stats(raw: Any) -> dict[str, AbilityScore]:
    source = raw if isinstance(raw, Mapping) else {}
    stats = {}
    for key in ABILITY_KEYS:
        value = source.get(key)
        if isinstance(value, AbilityScore):
            stats[key] = AbilityScore(
                score=coerce_int(value.score, 10),
                proficient_save=coerce_bool(value.proficient_save),
            )
        elif value is None:
            logger.debug("Ability %s missing; defaulting score to 10", key)
            stats[key] = AbilityScore()
        else:
            stats[key] = AbilityScore.from_dict(value)
    return stats


def sanitize_record(record: Union[CharacterRecord, Mapping[str, Any], Any]) -> CharacterRecord:
    """
    Produce a fresh, well-typed copy of a record.

    Accepts a CharacterRecord (possibly with wrongly typed fields set by
    code) or a raw stored mapping. Never raises and never mutates the input.
    """
    if not isinstance(record, CharacterRecord):
        return CharacterRecord.from_dict(record)

    inventory = _coerce_component(record.inventory, Inventory) or Inventory()
    hit_dice = _coerce_component(record.hit_dice, HitDice)

    return CharacterRecord(
        character_id=coerce_str(record.character_id),
        name=coerce_str(record.name, "Unknown Hero"),
        race=coerce_str(record.race, "Human"),
        character_class=coerce_str(record.character_class),
        level=coerce_int(record.level, 1, minimum=1),
        stats=_coerce_stats(record.stats),
        hp=_coerce_component(record.hp, HitPoints) or HitPoints(),
        armor_class=coerce_int(record.armor_class, 10),
        initiative=coerce_int(record.initiative, 0),
        speed=coerce_int(record.speed, 30, minimum=0),
        passive_perception=coerce_int(record.passive_perception, 10),
        skills=_coerce_components(record.skills, Skill),
        attacks=[],
        features=_coerce_components(record.features, Feature),
        inventory=inventory,
        spell_slots=_coerce_components(record.spell_slots, SpellSlot),
        hit_dice=hit_dice,
        journal=_coerce_components(record.journal, JournalEntry),
        spells=[dict(s) for s in as_list(record.spells) if isinstance(s, Mapping)],
        nickname=coerce_str(record.nickname),
        campaign=coerce_str(record.campaign),
        background=coerce_str(record.background),
        alignment=coerce_str(record.alignment),
        portrait_url=coerce_str(record.portrait_url),
        extras=dict(record.extras) if isinstance(record.extras, Mapping) else {},
    )


# =============================================================================
# STAT RESOLVER
# =============================================================================


class StatResolver:
    """
    Derives every computed field of a character record.

    Stateless apart from its configuration; one instance can serve any
    number of concurrent callers.
    """

    def __init__(self, config: Optional[ResolverConfig] = None):
        self.config = config or ResolverConfig()

    def recalculate(self, record: Union[CharacterRecord, Mapping[str, Any]]) -> CharacterRecord:
        """
        Return a fully derived copy of a character record.

        Args:
            record: A CharacterRecord or a raw stored document

        Returns:
            A new CharacterRecord; the input is left untouched
        """
        rec = sanitize_record(record)

        # Table lookups stop at level 20; the stored level is kept as-is
        level = min(rec.level, MAX_LEVEL)
        prof = proficiency_bonus(level)

        stats = self._resolve_stats(rec.stats, prof)
        skills = self._resolve_skills(rec.skills, stats, prof)
        armor_class = self._resolve_armor_class(rec.character_class, stats, rec.inventory)
        attacks = self._resolve_attacks(stats, rec.inventory, prof)
        spell_slots = self._resolve_spell_slots(rec.spell_slots, rec.character_class, level)

        perception = next((s for s in skills if s.name.lower() == "perception"), None)
        wis_mod = stats[Ability.WIS.value].modifier
        passive_perception = 10 + (perception.modifier if perception else wis_mod)

        hit_dice = rec.hit_dice or HitDice(
            current=level,
            maximum=level,
            die=f"1d{get_hit_die(rec.character_class)}",
        )

        rec.inventory.load = self._resolve_carry_load(rec.inventory, stats)

        rec.stats = stats
        rec.skills = skills
        rec.armor_class = armor_class
        rec.attacks = attacks
        rec.spell_slots = spell_slots
        rec.passive_perception = passive_perception
        rec.initiative = stats[Ability.DEX.value].modifier
        rec.hit_dice = hit_dice

        logger.debug(
            "Recalculated %s (level %d %s): AC %d, initiative %+d, passive perception %d",
            rec.name, rec.level, rec.character_class or "classless",
            rec.armor_class, rec.initiative, rec.passive_perception,
        )
        return rec

    # --- Steps ---

    @staticmethod
    def _resolve_stats(stats: dict[str, AbilityScore], prof: int) -> dict[str, AbilityScore]:
        resolved = {}
        for key in ABILITY_KEYS:
            raw = stats[key]
            modifier = ability_modifier(raw.score)
            resolved[key] = AbilityScore(
                score=raw.score,
                modifier=modifier,
                save=modifier + (prof if raw.proficient_save else 0),
                proficient_save=raw.proficient_save,
            )
        return resolved

    @staticmethod
    def _resolve_skills(
        skills: list[Skill], stats: dict[str, AbilityScore], prof: int
    ) -> list[Skill]:
        if not skills:
            logger.debug("No skills on record; using the standard roster")
            skills = [Skill(name=name, ability=ability) for name, ability in STANDARD_SKILLS]

        resolved = []
        for skill in skills:
            ability = get_skill_ability(skill.name) or skill.ability
            resolved.append(Skill(
                name=skill.name,
                ability=ability,
                proficiency=skill.proficiency,
                modifier=stats[ability.value].modifier + prof * skill.proficiency.multiplier,
            ))
        return resolved

    def _resolve_armor_class(
        self, character_class: str, stats: dict[str, AbilityScore], inventory: Inventory
    ) -> int:
        """
        Armor class from worn armor, unarmored defense and a shield.

        The first equipped armor piece the table (or an "AC N" note)
        recognizes sets the formula. Unrecognized armor falls back to
        10 + DEX.
        """
        dex = stats[Ability.DEX.value].modifier
        worn = inventory.equipped_items(ItemType.ARMOR)
        body_armor = [item for item in worn if not is_shield(item.name)]
        has_shield = any(is_shield(item.name) for item in worn)

        profile = None
        for item in body_armor:
            profile = find_armor(item.name) or parse_armor_hint(item.name, item.notes)
            if profile:
                break
            logger.warning("Unrecognized armor %r; using unarmored AC", item.name)

        if profile:
            ac = profile.armor_class(dex)
        else:
            ac = UNARMORED_BASE_AC + dex
            defense = get_unarmored_defense(character_class) if self.config.unarmored_defense else None
            if defense and not body_armor and (defense.allows_shield or not has_shield):
                ac = max(ac, ac + stats[defense.ability.value].modifier)

        if has_shield:
            ac += SHIELD_BONUS
        return ac

    def _resolve_attacks(
        self, stats: dict[str, AbilityScore], inventory: Inventory, prof: int
    ) -> list[Attack]:
        str_mod = stats[Ability.STR.value].modifier
        dex_mod = stats[Ability.DEX.value].modifier

        attacks = [
            self._weapon_attack(weapon, str_mod, dex_mod, prof)
            for weapon in inventory.equipped_items(ItemType.WEAPON)
        ]
        attacks.append(Attack(
            name=UNARMED_STRIKE,
            bonus=str_mod + prof,
            damage=str(max(1, 1 + str_mod)),
            damage_type="Bludgeoning",
            range=self.config.melee_default_range,
        ))
        return attacks

    def _weapon_attack(self, weapon: Item, str_mod: int, dex_mod: int, prof: int) -> Attack:
        """
        Build an attack line from a weapon's name and notes.

        Finesse or ranged weapons use DEX when it is at least as good as STR.
        Ranged means a bow/crossbow by name or a range marker in the notes.
        """
        notes = weapon.notes
        lowered = notes.lower()
        range_match = _RANGE_RE.search(notes) or _RANGE_PAIR_RE.search(notes)

        finesse = "finesse" in lowered
        ranged = range_match is not None or any(
            keyword in weapon.name.lower() for keyword in RANGED_WEAPON_KEYWORDS
        )
        modifier = dex_mod if (finesse or ranged) and dex_mod >= str_mod else str_mod

        dice_match = _DAMAGE_DICE_RE.search(notes)
        dice = dice_match.group(1).lower() if dice_match else self.config.default_damage_dice
        damage = dice if modifier == 0 else f"{dice}{modifier:+d}"

        damage_type = next(
            (kind.capitalize() for kind in DAMAGE_TYPES if kind in lowered),
            DEFAULT_DAMAGE_TYPE,
        )

        if range_match:
            attack_range = re.sub(r"\s+", "", range_match.group(1))
        elif ranged:
            attack_range = self.config.ranged_default_range
        else:
            attack_range = self.config.melee_default_range

        return Attack(
            name=weapon.name,
            bonus=modifier + prof,
            damage=damage,
            damage_type=damage_type,
            range=attack_range,
            properties=self._weapon_properties(notes),
        )

    @staticmethod
    def _weapon_properties(notes: str) -> list[str]:
        """Comma-separated note entries other than damage and range."""
        properties = []
        for part in notes.split(","):
            part = part.strip()
            if not part or _DAMAGE_DICE_RE.search(part) or _RANGE_PROPERTY_RE.match(part):
                continue
            if part.lower() in DAMAGE_TYPES:
                continue
            properties.append(part)
        return properties

    @staticmethod
    def _resolve_spell_slots(
        slots: list[SpellSlot], character_class: str, level: int
    ) -> list[SpellSlot]:
        if slots:
            # Player-tracked: trust max, keep current within [0, max]
            return [
                SpellSlot(
                    level=s.level,
                    maximum=s.maximum,
                    current=min(max(s.current, 0), s.maximum),
                )
                for s in slots
            ]
        table = get_spell_slot_table(character_class, level)
        return [
            SpellSlot(level=spell_level, maximum=count, current=count)
            for spell_level, count in sorted(table.items())
        ]

    @staticmethod
    def _resolve_carry_load(inventory: Inventory, stats: dict[str, AbilityScore]) -> CarryLoad:
        """Load band from carried weight; kept as stored when no item has a weight."""
        if not any(item.weight is not None for item in inventory.items):
            return coerce_enum(CarryLoad, inventory.load, CarryLoad.LIGHT)
        strength = max(stats[Ability.STR.value].score, 1)
        weight = inventory.get_total_weight()
        if weight <= strength * LIGHT_LOAD_PER_STR:
            return CarryLoad.LIGHT
        if weight <= strength * MEDIUM_LOAD_PER_STR:
            return CarryLoad.MEDIUM
        return CarryLoad.HEAVY


# =============================================================================
# MODULE-LEVEL API
# =============================================================================


def recalculate(
    record: Union[CharacterRecord, Mapping[str, Any]],
    config: Optional[ResolverConfig] = None,
) -> CharacterRecord:
    """Recalculate a record with a default (or given) configuration."""
    return StatResolver(config).recalculate(record)
