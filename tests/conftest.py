"""
Pytest fixtures for the character sheet core test suite.

Provides reusable fixtures for dice rollers (seeded and scripted) and
sample character documents in the stored document shape.
"""

import pytest

from charsheet.data_models import CharacterRecord
from charsheet.dice.dice_engine import DiceRoller, ScriptedDice, reset_dice_roller


# =============================================================================
# DICE FIXTURES
# =============================================================================


@pytest.fixture
def seeded_roller():
    """Provide a seeded DiceRoller for reproducible tests."""
    return DiceRoller(seed=42)


@pytest.fixture
def scripted_roller():
    """Factory for a DiceRoller that replays the given die faces."""
    def _make(*faces: int) -> DiceRoller:
        return DiceRoller(die_source=ScriptedDice(faces))
    return _make


@pytest.fixture
def clean_default_roller():
    """Reset the process-wide default roller around a test."""
    yield reset_dice_roller()
    reset_dice_roller()


# =============================================================================
# CHARACTER FIXTURES
# =============================================================================


def _stats(str_=10, dex=10, con=10, int_=10, wis=10, cha=10, saves=()):
    scores = {"STR": str_, "DEX": dex, "CON": con, "INT": int_, "WIS": wis, "CHA": cha}
    return {
        key: {"score": score, "proficientSave": key in saves}
        for key, score in scores.items()
    }


@pytest.fixture
def fighter_data():
    """A stored level 3 fighter in chain mail with a shield and longsword."""
    return {
        "id": "fighter_1",
        "name": "Aldric the Bold",
        "race": "Human",
        "class": "Fighter",
        "level": 3,
        "stats": _stats(str_=16, dex=14, con=15, wis=12, cha=8, saves=("STR", "CON")),
        "hp": {"current": 24, "max": 28},
        "skills": [
            {"name": "Athletics", "ability": "STR", "proficiency": "proficient"},
            {"name": "Perception", "ability": "WIS", "proficiency": "proficient"},
            {"name": "Stealth", "ability": "DEX", "proficiency": "none"},
        ],
        "inventory": {
            "gold": 35,
            "items": [
                {"name": "Chain Mail", "type": "Armor", "equipped": True, "quantity": 1},
                {"name": "Shield", "type": "Armor", "equipped": True, "quantity": 1},
                {
                    "name": "Longsword",
                    "type": "Weapon",
                    "equipped": True,
                    "quantity": 1,
                    "notes": "1d8 slashing, Versatile",
                },
                {"name": "Rope (50 ft)", "type": "Gear", "quantity": 1},
            ],
            "load": "Light",
        },
        "features": [{"name": "Second Wind", "source": "Class", "description": "Regain 1d10+level HP"}],
    }


@pytest.fixture
def rogue_data():
    """A stored level 1 rogue: DEX 18, leather armor, rapier and shortbow."""
    return {
        "id": "rogue_1",
        "name": "Shadowmere",
        "race": "Halfling",
        "class": "Rogue",
        "level": 1,
        "stats": _stats(str_=10, dex=18, con=12, int_=13, wis=10, cha=14, saves=("DEX", "INT")),
        "hp": {"current": 9, "max": 9},
        "skills": [
            {"name": "Stealth", "ability": "DEX", "proficiency": "expertise"},
            {"name": "Sleight of Hand", "ability": "DEX", "proficiency": "proficient"},
        ],
        "inventory": {
            "gold": 12,
            "items": [
                {"name": "Leather Armor", "type": "Armor", "equipped": True},
                {"name": "Rapier", "type": "Weapon", "equipped": True, "notes": "1d8 piercing, Finesse"},
                {"name": "Shortbow", "type": "Weapon", "equipped": True, "notes": "1d6 piercing, range 80/320"},
                {"name": "Dagger", "type": "Weapon", "equipped": False, "notes": "1d4 piercing, Finesse"},
            ],
        },
    }


@pytest.fixture
def wizard_data():
    """A stored level 5 wizard with no spell slots recorded yet."""
    return {
        "id": "wizard_1",
        "name": "Mirabel",
        "race": "Elf",
        "class": "Wizard",
        "level": 5,
        "stats": _stats(str_=8, dex=14, con=13, int_=18, wis=12, saves=("INT", "WIS")),
        "hp": {"current": 27, "max": 27},
        "spells": [{"name": "Fireball", "level": 3}],
    }


@pytest.fixture
def fighter_record(fighter_data):
    """The sample fighter as an (underived) CharacterRecord."""
    return CharacterRecord.from_dict(fighter_data)
