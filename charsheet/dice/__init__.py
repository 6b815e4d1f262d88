"""
Dice engine for the character sheet core.

Parses dice expressions ("2d6+1d4+2") into terms and rolls them, with
advantage/disadvantage on single d20 terms, batch rolls and an injectable
single-die primitive for deterministic tests.
"""

from charsheet.dice.dice_parser import (
    DiceExpressionError,
    format_expression,
    parse_expression,
)
from charsheet.dice.dice_engine import (
    DiceRoller,
    ScriptedDice,
    get_dice_roller,
    reset_dice_roller,
    roll,
    roll_batch,
    roll_die,
    set_dice_roller,
)

__all__ = [
    # Parsing
    "DiceExpressionError",
    "format_expression",
    "parse_expression",
    # Rolling
    "DiceRoller",
    "ScriptedDice",
    "get_dice_roller",
    "reset_dice_roller",
    "roll",
    "roll_batch",
    "roll_die",
    "set_dice_roller",
]
