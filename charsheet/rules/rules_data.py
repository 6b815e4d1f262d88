"""
Canonical 5e SRD lookup tables used by the stat resolver.

One authoritative table per concern: the skill roster, armor, unarmored
defense, spell slot progressions, class hit dice and saving throw
proficiencies. Armor and weapon identification by item name is a
best-effort heuristic; structured hints in item notes take precedence where
the name gives no match.

Source: D&D 5e System Reference Document
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional
import re

from charsheet.data_models import Ability


MAX_LEVEL = 20

STANDARD_ARRAY: tuple[int, ...] = (15, 14, 13, 12, 10, 8)


# =============================================================================
# SKILLS
# =============================================================================

STANDARD_SKILLS: tuple[tuple[str, Ability], ...] = (
    ("Acrobatics", Ability.DEX),
    ("Animal Handling", Ability.WIS),
    ("Arcana", Ability.INT),
    ("Athletics", Ability.STR),
    ("Deception", Ability.CHA),
    ("History", Ability.INT),
    ("Insight", Ability.WIS),
    ("Intimidation", Ability.CHA),
    ("Investigation", Ability.INT),
    ("Medicine", Ability.WIS),
    ("Nature", Ability.INT),
    ("Perception", Ability.WIS),
    ("Performance", Ability.CHA),
    ("Persuasion", Ability.CHA),
    ("Religion", Ability.INT),
    ("Sleight of Hand", Ability.DEX),
    ("Stealth", Ability.DEX),
    ("Survival", Ability.WIS),
)

# Lowercased skill name -> governing ability
SKILL_ABILITIES: dict[str, Ability] = {name.lower(): ability for name, ability in STANDARD_SKILLS}


def get_skill_ability(skill_name: str) -> Optional[Ability]:
    """Governing ability for a standard skill, None for homebrew skills."""
    return SKILL_ABILITIES.get(skill_name.strip().lower())


# =============================================================================
# ARMOR
# =============================================================================


class ArmorCategory(str, Enum):
    """Armor weight categories and how they treat DEX."""
    LIGHT = "light"    # Full DEX modifier
    MEDIUM = "medium"  # DEX modifier capped at +2
    HEAVY = "heavy"    # No DEX modifier


@dataclass(frozen=True)
class ArmorProfile:
    """AC rules for one armor type."""
    key: str            # Normalized substring matched against item names
    name: str
    base_ac: int
    category: ArmorCategory

    @property
    def dex_cap(self) -> Optional[int]:
        """Maximum usable DEX modifier (None = uncapped)."""
        if self.category == ArmorCategory.LIGHT:
            return None
        if self.category == ArmorCategory.MEDIUM:
            return MEDIUM_ARMOR_DEX_CAP
        return 0

    def armor_class(self, dex_modifier: int) -> int:
        """AC granted by this armor for a given DEX modifier."""
        if self.category == ArmorCategory.HEAVY:
            return self.base_ac
        dex = dex_modifier if self.dex_cap is None else min(self.dex_cap, dex_modifier)
        return self.base_ac + dex


MEDIUM_ARMOR_DEX_CAP = 2
UNARMORED_BASE_AC = 10
SHIELD_KEYWORD = "shield"
SHIELD_BONUS = 2

# Matched in order, first hit wins, so longer names that contain shorter
# ones ("studded leather", "half plate", "chain shirt") come first.
ARMOR_TABLE: tuple[ArmorProfile, ...] = (
    ArmorProfile("studded", "Studded Leather", 12, ArmorCategory.LIGHT),
    ArmorProfile("padded", "Padded", 11, ArmorCategory.LIGHT),
    ArmorProfile("leather", "Leather", 11, ArmorCategory.LIGHT),
    ArmorProfile("chain shirt", "Chain Shirt", 13, ArmorCategory.MEDIUM),
    ArmorProfile("half plate", "Half Plate", 15, ArmorCategory.MEDIUM),
    ArmorProfile("breastplate", "Breastplate", 14, ArmorCategory.MEDIUM),
    ArmorProfile("scale", "Scale Mail", 14, ArmorCategory.MEDIUM),
    ArmorProfile("hide", "Hide", 12, ArmorCategory.MEDIUM),
    ArmorProfile("ring mail", "Ring Mail", 14, ArmorCategory.HEAVY),
    ArmorProfile("chain mail", "Chain Mail", 16, ArmorCategory.HEAVY),
    ArmorProfile("splint", "Splint", 17, ArmorCategory.HEAVY),
    ArmorProfile("plate", "Plate", 18, ArmorCategory.HEAVY),
)

# "AC 11 + Dex", "AC 14 + Dex (max 2)", "AC 16"
_AC_HINT_RE = re.compile(r"\bAC\s*(\d+)", re.IGNORECASE)
_DEX_CAP_HINT_RE = re.compile(r"max\s*\+?(\d+)", re.IGNORECASE)


def normalize_item_name(name: str) -> str:
    """Lowercase, treat hyphens as spaces, "armour" as "armor", squash spaces."""
    text = name.lower().replace("-", " ").replace("armour", "armor")
    return " ".join(text.split())


def is_shield(name: str) -> bool:
    return SHIELD_KEYWORD in normalize_item_name(name)


def find_armor(name: str) -> Optional[ArmorProfile]:
    """Look up armor rules by name substring; None when nothing matches."""
    normalized = normalize_item_name(name)
    for profile in ARMOR_TABLE:
        if profile.key in normalized:
            return profile
    return None


def parse_armor_hint(name: str, notes: str) -> Optional[ArmorProfile]:
    """
    Build armor rules from an "AC N [+ Dex [(max M)]]" note.

    No DEX mention means a flat AC (heavy), a "max 2" cap means medium,
    otherwise light.
    """
    match = _AC_HINT_RE.search(notes or "")
    if not match:
        return None
    lowered = notes.lower()
    if "dex" not in lowered:
        category = ArmorCategory.HEAVY
    elif _DEX_CAP_HINT_RE.search(notes):
        category = ArmorCategory.MEDIUM
    else:
        category = ArmorCategory.LIGHT
    return ArmorProfile(normalize_item_name(name), name, int(match.group(1)), category)


# =============================================================================
# UNARMORED DEFENSE
# =============================================================================


@dataclass(frozen=True)
class UnarmoredDefense:
    """A class feature that adds a second ability to AC without armor."""
    ability: Ability
    allows_shield: bool


UNARMORED_DEFENSE: dict[str, UnarmoredDefense] = {
    "barbarian": UnarmoredDefense(Ability.CON, allows_shield=True),
    "monk": UnarmoredDefense(Ability.WIS, allows_shield=False),
}


def get_unarmored_defense(character_class: str) -> Optional[UnarmoredDefense]:
    return UNARMORED_DEFENSE.get(character_class.strip().lower())


# =============================================================================
# WEAPONS
# =============================================================================

DEFAULT_DAMAGE_DICE = "1d4"
DEFAULT_DAMAGE_TYPE = "Damage"
DAMAGE_TYPES: tuple[str, ...] = ("slashing", "piercing", "bludgeoning")
RANGED_WEAPON_KEYWORDS: tuple[str, ...] = ("crossbow", "bow")


# =============================================================================
# SPELLCASTING
# =============================================================================

# Character level -> {spell level: slots}
FULL_CASTER_SLOTS: dict[int, dict[int, int]] = {
    1:  {1: 2},
    2:  {1: 3},
    3:  {1: 4, 2: 2},
    4:  {1: 4, 2: 3},
    5:  {1: 4, 2: 3, 3: 2},
    6:  {1: 4, 2: 3, 3: 3},
    7:  {1: 4, 2: 3, 3: 3, 4: 1},
    8:  {1: 4, 2: 3, 3: 3, 4: 2},
    9:  {1: 4, 2: 3, 3: 3, 4: 3, 5: 1},
    10: {1: 4, 2: 3, 3: 3, 4: 3, 5: 2},
    11: {1: 4, 2: 3, 3: 3, 4: 3, 5: 2, 6: 1},
    12: {1: 4, 2: 3, 3: 3, 4: 3, 5: 2, 6: 1},
    13: {1: 4, 2: 3, 3: 3, 4: 3, 5: 2, 6: 1, 7: 1},
    14: {1: 4, 2: 3, 3: 3, 4: 3, 5: 2, 6: 1, 7: 1},
    15: {1: 4, 2: 3, 3: 3, 4: 3, 5: 2, 6: 1, 7: 1, 8: 1},
    16: {1: 4, 2: 3, 3: 3, 4: 3, 5: 2, 6: 1, 7: 1, 8: 1},
    17: {1: 4, 2: 3, 3: 3, 4: 3, 5: 2, 6: 1, 7: 1, 8: 1, 9: 1},
    18: {1: 4, 2: 3, 3: 3, 4: 3, 5: 3, 6: 1, 7: 1, 8: 1, 9: 1},
    19: {1: 4, 2: 3, 3: 3, 4: 3, 5: 3, 6: 2, 7: 1, 8: 1, 9: 1},
    20: {1: 4, 2: 3, 3: 3, 4: 3, 5: 3, 6: 2, 7: 2, 8: 1, 9: 1},
}

# Paladin and Ranger, no slots at level 1
HALF_CASTER_SLOTS: dict[int, dict[int, int]] = {
    1:  {},
    2:  {1: 2},
    3:  {1: 3},
    4:  {1: 3},
    5:  {1: 4, 2: 2},
    6:  {1: 4, 2: 2},
    7:  {1: 4, 2: 3},
    8:  {1: 4, 2: 3},
    9:  {1: 4, 2: 3, 3: 2},
    10: {1: 4, 2: 3, 3: 2},
    11: {1: 4, 2: 3, 3: 3},
    12: {1: 4, 2: 3, 3: 3},
    13: {1: 4, 2: 3, 3: 3, 4: 1},
    14: {1: 4, 2: 3, 3: 3, 4: 1},
    15: {1: 4, 2: 3, 3: 3, 4: 2},
    16: {1: 4, 2: 3, 3: 3, 4: 2},
    17: {1: 4, 2: 3, 3: 3, 4: 3, 5: 1},
    18: {1: 4, 2: 3, 3: 3, 4: 3, 5: 1},
    19: {1: 4, 2: 3, 3: 3, 4: 3, 5: 2},
    20: {1: 4, 2: 3, 3: 3, 4: 3, 5: 2},
}

# Warlock pact magic: level -> (number of slots, slot level)
WARLOCK_PACT_SLOTS: dict[int, tuple[int, int]] = {
    1:  (1, 1),
    2:  (2, 1),
    3:  (2, 2),
    4:  (2, 2),
    5:  (2, 3),
    6:  (2, 3),
    7:  (2, 4),
    8:  (2, 4),
    9:  (2, 5),
    10: (2, 5),
    11: (3, 5),
    12: (3, 5),
    13: (3, 5),
    14: (3, 5),
    15: (3, 5),
    16: (3, 5),
    17: (4, 5),
    18: (4, 5),
    19: (4, 5),
    20: (4, 5),
}

FULL_CASTERS = {"bard", "cleric", "druid", "sorcerer", "wizard"}
HALF_CASTERS = {"paladin", "ranger"}
PACT_CASTERS = {"warlock"}


def get_spell_slot_table(character_class: str, level: int) -> dict[int, int]:
    """
    Spell slots for a class at a level, as {spell level: slots}.

    Non-casters and unknown classes get no slots. Levels outside 1-20 are
    clamped into the table.
    """
    cls = character_class.strip().lower()
    level = min(max(level, 1), MAX_LEVEL)
    if cls in FULL_CASTERS:
        return dict(FULL_CASTER_SLOTS[level])
    if cls in HALF_CASTERS:
        return dict(HALF_CASTER_SLOTS[level])
    if cls in PACT_CASTERS:
        count, slot_level = WARLOCK_PACT_SLOTS[level]
        return {slot_level: count}
    return {}


# =============================================================================
# HIT DICE AND SAVES
# =============================================================================

CLASS_HIT_DIE: dict[str, int] = {
    "barbarian": 12,
    "fighter": 10,
    "paladin": 10,
    "ranger": 10,
    "bard": 8,
    "cleric": 8,
    "druid": 8,
    "monk": 8,
    "rogue": 8,
    "warlock": 8,
    "sorcerer": 6,
    "wizard": 6,
}

DEFAULT_HIT_DIE = 8


def get_hit_die(character_class: str) -> int:
    """Hit die size for a class, d8 for unknown classes."""
    return CLASS_HIT_DIE.get(character_class.strip().lower(), DEFAULT_HIT_DIE)


CLASS_SAVING_THROWS: dict[str, tuple[Ability, Ability]] = {
    "barbarian": (Ability.STR, Ability.CON),
    "bard": (Ability.DEX, Ability.CHA),
    "cleric": (Ability.WIS, Ability.CHA),
    "druid": (Ability.INT, Ability.WIS),
    "fighter": (Ability.STR, Ability.CON),
    "monk": (Ability.STR, Ability.DEX),
    "paladin": (Ability.WIS, Ability.CHA),
    "ranger": (Ability.STR, Ability.DEX),
    "rogue": (Ability.DEX, Ability.INT),
    "sorcerer": (Ability.CON, Ability.CHA),
    "warlock": (Ability.WIS, Ability.CHA),
    "wizard": (Ability.INT, Ability.WIS),
}


def get_saving_throw_proficiencies(character_class: str) -> tuple[Ability, ...]:
    return CLASS_SAVING_THROWS.get(character_class.strip().lower(), ())


# =============================================================================
# CARRYING
# =============================================================================

# Carried weight (lb) per point of STR before the next load band
LIGHT_LOAD_PER_STR = 5
MEDIUM_LOAD_PER_STR = 10
