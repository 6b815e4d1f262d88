"""
Character lifecycle for the character sheet core.

Creates new characters and tracks spendable resources (spell slots, hit
dice, rests and level ups).
"""

from charsheet.character.character_factory import (
    CharacterFactory,
    ScoreMethod,
    create_new_character,
)
from charsheet.character.resources import (
    LevelUpResult,
    ResourceResult,
    expend_spell_slot,
    level_up,
    long_rest,
    restore_spell_slots,
    short_rest,
    spend_hit_die,
)

__all__ = [
    # Creation
    "CharacterFactory",
    "ScoreMethod",
    "create_new_character",
    # Resources
    "LevelUpResult",
    "ResourceResult",
    "expend_spell_slot",
    "level_up",
    "long_rest",
    "restore_spell_slots",
    "short_rest",
    "spend_hit_die",
]
