"""
Tests for resource tracking.

Tests spell slots, hit dice, rests and level ups from
charsheet/character/resources.py.
"""

import copy

import pytest

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
from charsheet.data_models import Feature, FeatureSource, HitDieRoll, SpellSlot


@pytest.fixture
def tired_wizard(wizard_data):
    """The sample wizard after a hard day: spent slots, hit dice and HP."""
    wizard_data["hp"] = {"current": 3, "max": 27}
    wizard_data["hitDice"] = {"current": 1, "max": 5, "die": "1d6"}
    wizard_data["spellSlots"] = [
        {"level": 1, "max": 4, "current": 2},
        {"level": 2, "max": 3, "current": 3},
        {"level": 3, "max": 2, "current": 0},
    ]
    return wizard_data


class TestSpellSlots:
    """Tests for spending and restoring spell slots."""

    def test_expend_slot(self, wizard_data):
        """Spending a slot lowers its current count by one."""
        result = expend_spell_slot(wizard_data, 1)
        assert isinstance(result, ResourceResult)
        assert result.success is True
        assert result.record.spell_slots[0] == SpellSlot(level=1, maximum=4, current=3)

    def test_expend_missing_level_fails(self, wizard_data):
        """A level 5 wizard has no level 4 slots."""
        result = expend_spell_slot(wizard_data, 4)
        assert result.success is False
        assert "no level 4" in result.message

    def test_expend_exhausted_level_fails(self, tired_wizard):
        """An empty slot level cannot be spent."""
        result = expend_spell_slot(tired_wizard, 3)
        assert result.success is False
        assert result.record.spell_slots[2].current == 0

    def test_non_caster_fails(self, fighter_data):
        """Fighters have no slots to spend."""
        assert expend_spell_slot(fighter_data, 1).success is False

    def test_input_not_mutated(self, tired_wizard):
        """The caller's document is untouched."""
        snapshot = copy.deepcopy(tired_wizard)
        expend_spell_slot(tired_wizard, 1)
        assert tired_wizard == snapshot

    def test_restore_all(self, tired_wizard):
        """Restoring refills every level."""
        slots = restore_spell_slots(tired_wizard).record.spell_slots
        assert [s.current for s in slots] == [4, 3, 2]

    def test_restore_one_level(self, tired_wizard):
        """Restoring a single level leaves the others."""
        slots = restore_spell_slots(tired_wizard, level=3).record.spell_slots
        assert [s.current for s in slots] == [2, 3, 2]


class TestHitDice:
    """Tests for spending hit dice and short rests."""

    def test_spend_hit_die(self, fighter_data, scripted_roller):
        """A hit die regains d10 + CON, capped at max HP."""
        result = spend_hit_die(fighter_data, roller=scripted_roller(6))
        assert result.success is True
        assert result.rolls == [HitDieRoll(roll=6, total=8)]
        assert result.record.hp.current == 28
        assert result.hp_regained == 4
        assert result.record.hit_dice.current == 2

    def test_spend_with_none_left(self, fighter_data, scripted_roller):
        """No hit dice left means no healing."""
        fighter_data["hitDice"] = {"current": 0, "max": 3, "die": "1d10"}
        result = spend_hit_die(fighter_data, roller=scripted_roller(6))
        assert result.success is False
        assert result.record.hp.current == 24

    def test_short_rest_spends_several(self, fighter_data, scripted_roller):
        """A short rest spends the requested dice."""
        fighter_data["hp"] = {"current": 1, "max": 28}
        result = short_rest(fighter_data, hit_dice=2, roller=scripted_roller(2, 5))
        assert result.success is True
        assert [r.total for r in result.rolls] == [4, 7]
        assert result.record.hp.current == 12
        assert result.record.hit_dice.current == 1

    def test_short_rest_stops_when_pool_empty(self, fighter_data, scripted_roller):
        """Asking for more dice than remain spends what is left."""
        fighter_data["hp"] = {"current": 1, "max": 28}
        result = short_rest(fighter_data, hit_dice=5, roller=scripted_roller(2, 2, 2))
        assert len(result.rolls) == 3
        assert result.record.hp.current == 13
        assert result.record.hit_dice.current == 0

    def test_short_rest_without_dice(self, fighter_data, scripted_roller):
        """Resting with no dice requested still succeeds."""
        result = short_rest(fighter_data, hit_dice=0, roller=scripted_roller())
        assert result.success is True
        assert result.rolls == []

    def test_short_rest_with_empty_pool_fails(self, fighter_data, scripted_roller):
        """Requesting dice from an empty pool fails."""
        fighter_data["hitDice"] = {"current": 0, "max": 3, "die": "1d10"}
        assert short_rest(fighter_data, hit_dice=1, roller=scripted_roller()).success is False


class TestLongRest:
    """Tests for long rests."""

    def test_long_rest_restores(self, tired_wizard):
        """HP and slots refill; half the hit dice come back."""
        result = long_rest(tired_wizard)
        record = result.record
        assert result.success is True
        assert record.hp.current == 27
        assert result.hp_regained == 24
        assert [s.current for s in record.spell_slots] == [4, 3, 2]
        assert record.hit_dice.current == 3

    def test_long_rest_regains_at_least_one_die(self):
        """A level 1 character regains its single hit die."""
        data = {"class": "Rogue", "level": 1, "hitDice": {"current": 0, "max": 1, "die": "1d8"}}
        assert long_rest(data).record.hit_dice.current == 1

    def test_long_rest_caps_hit_dice(self, fighter_data):
        """Hit dice never exceed the maximum."""
        fighter_data["hitDice"] = {"current": 3, "max": 3, "die": "1d10"}
        assert long_rest(fighter_data).record.hit_dice.current == 3


class TestLevelUp:
    """Tests for level ups."""

    def test_level_up_wizard(self, tired_wizard):
        """Level, HP, features, slots and hit dice all advance."""
        result = level_up(
            tired_wizard,
            hp_increase=5,
            new_features=[{"name": "Arcane Tradition Feature", "source": "Class"}],
        )
        assert isinstance(result, LevelUpResult)
        assert result.success is True
        assert (result.old_level, result.new_level) == (5, 6)
        record = result.record
        assert record.level == 6
        assert (record.hp.current, record.hp.maximum) == (8, 32)
        assert record.features[-1].name == "Arcane Tradition Feature"
        assert result.new_features == ["Arcane Tradition Feature"]
        assert [(s.level, s.maximum, s.current) for s in record.spell_slots] == [
            (1, 4, 2), (2, 3, 3), (3, 3, 1),
        ]
        assert result.new_spell_slots == {3: 1}
        assert (record.hit_dice.current, record.hit_dice.maximum) == (2, 6)

    def test_level_up_recalculates(self, fighter_data):
        """Reaching level 5 raises the proficiency bonus."""
        fighter_data["level"] = 4
        result = level_up(fighter_data, hp_increase=8)
        assert result.record.stats["STR"].save == 6
        assert result.record.attacks[0].bonus == 6

    def test_level_up_feature_objects(self, fighter_data):
        """Feature objects are accepted as well as mappings."""
        feature = Feature(name="Extra Attack", source=FeatureSource.CLASS)
        result = level_up(fighter_data, hp_increase=6, new_features=[feature, "junk"])
        assert [f.name for f in result.record.features] == ["Second Wind", "Extra Attack"]

    def test_non_caster_slots_untouched(self, fighter_data):
        """Fighters still have no slots after levelling."""
        assert level_up(fighter_data, hp_increase=6).record.spell_slots == []

    def test_warlock_pact_slot_moves_up(self):
        """Warlock pact slots move to the new slot level."""
        data = {
            "class": "Warlock",
            "level": 4,
            "spellSlots": [{"level": 2, "max": 2, "current": 0}],
        }
        result = level_up(data, hp_increase=5)
        assert [(s.level, s.maximum, s.current) for s in result.record.spell_slots] == [(3, 2, 2)]
        assert result.new_spell_slots == {3: 2}

    def test_negative_hp_increase_ignored(self, fighter_data):
        """HP never drops on a level up."""
        result = level_up(fighter_data, hp_increase=-4)
        assert result.hp_gained == 0
        assert result.record.hp.maximum == 28

    def test_max_level(self, fighter_data):
        """Level 20 characters cannot level up."""
        fighter_data["level"] = 20
        result = level_up(fighter_data, hp_increase=5)
        assert result.success is False
        assert result.record.level == 20

    def test_input_not_mutated(self, fighter_record):
        """The caller's record is untouched."""
        snapshot = copy.deepcopy(fighter_record)
        level_up(fighter_record, hp_increase=6, new_features=[{"name": "Extra Attack"}])
        assert fighter_record == snapshot
