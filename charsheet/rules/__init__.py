"""
Rules tables for the character sheet core.

Provides the canonical skill roster, armor table, unarmored defense rules,
spell slot progressions, class hit dice and saving throw proficiencies.
"""

from charsheet.rules.rules_data import (
    ARMOR_TABLE,
    MAX_LEVEL,
    SHIELD_BONUS,
    STANDARD_ARRAY,
    STANDARD_SKILLS,
    UNARMORED_BASE_AC,
    ArmorCategory,
    ArmorProfile,
    UnarmoredDefense,
    find_armor,
    get_hit_die,
    get_saving_throw_proficiencies,
    get_skill_ability,
    get_spell_slot_table,
    get_unarmored_defense,
    is_shield,
    normalize_item_name,
    parse_armor_hint,
)

__all__ = [
    # Constants
    "ARMOR_TABLE",
    "MAX_LEVEL",
    "SHIELD_BONUS",
    "STANDARD_ARRAY",
    "STANDARD_SKILLS",
    "UNARMORED_BASE_AC",
    # Data structures
    "ArmorCategory",
    "ArmorProfile",
    "UnarmoredDefense",
    # Lookups
    "find_armor",
    "get_hit_die",
    "get_saving_throw_proficiencies",
    "get_skill_ability",
    "get_spell_slot_table",
    "get_unarmored_defense",
    "is_shield",
    "normalize_item_name",
    "parse_armor_hint",
]
