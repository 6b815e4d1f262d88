"""
Character Factory for the character sheet core.

Builds brand new CharacterRecords for the "create character" flow:
1. Generates ability scores (standard array, 4d6 drop lowest, or manual)
2. Applies class saving throw proficiencies
3. Sets starting HP to the class hit die maximum + CON modifier
4. Seeds the standard skill roster and passes the result through the
   stat resolver, so the new sheet is fully derived
"""

import logging
import uuid
from enum import Enum
from typing import Any, Mapping, Optional, Sequence, Union

from charsheet.data_models import (
    ABILITY_KEYS,
    AbilityScore,
    CharacterRecord,
    HitPoints,
    Skill,
    ability_modifier,
    coerce_enum,
    coerce_int,
    coerce_str,
)
from charsheet.dice.dice_engine import DiceRoller, get_dice_roller
from charsheet.resolver.stat_resolver import ResolverConfig, recalculate
from charsheet.rules.rules_data import (
    STANDARD_ARRAY,
    STANDARD_SKILLS,
    get_hit_die,
    get_saving_throw_proficiencies,
)

logger = logging.getLogger(__name__)


DEFAULT_NAME = "Unknown Hero"
DEFAULT_RACE = "Human"
DEFAULT_CLASS = "Fighter"
DEFAULT_CAMPAIGN = "New Campaign"


class ScoreMethod(str, Enum):
    """How starting ability scores are generated."""
    STANDARD_ARRAY = "standard_array"  # 15, 14, 13, 12, 10, 8 in random order
    ROLL = "roll"                      # 4d6 drop lowest, six times
    MANUAL = "manual"                  # Player-supplied scores


# =============================================================================
# CHARACTER FACTORY
# =============================================================================


class CharacterFactory:
    """
    Factory for new character records.

    Usage:
        factory = CharacterFactory(roller=DiceRoller(seed=42))
        record = factory.create("Mira", "Elf", "Wizard")

        # Manual scores
        record = factory.create(
            "Bram", "Dwarf", "Cleric",
            method=ScoreMethod.MANUAL,
            scores={"STR": 14, "CON": 15, "WIS": 16},
        )
    """

    def __init__(
        self,
        roller: Optional[DiceRoller] = None,
        config: Optional[ResolverConfig] = None,
    ):
        """
        Initialize the factory.

        Args:
            roller: Dice roller for shuffling or rolling scores (uses the
                default roller if None)
            config: Resolver configuration for the final recalculation
        """
        self._roller = roller
        self._config = config

    @property
    def roller(self) -> DiceRoller:
        if self._roller is None:
            self._roller = get_dice_roller()
        return self._roller

    def generate_scores(
        self,
        method: Union[ScoreMethod, str] = ScoreMethod.STANDARD_ARRAY,
        scores: Optional[Union[Mapping[str, Any], Sequence[Any]]] = None,
    ) -> dict[str, int]:
        """
        Generate six ability scores keyed STR..CHA.

        Args:
            method: Generation method
            scores: Manual scores, as a mapping by ability key or a sequence
                in STR, DEX, CON, INT, WIS, CHA order. Missing or malformed
                entries default to 10.

        Raises:
            ValueError: For an unknown method, or MANUAL without scores
        """
        resolved = coerce_enum(ScoreMethod, method, None)
        if resolved is None:
            raise ValueError(f"Unknown score method: {method!r}")

        if resolved == ScoreMethod.STANDARD_ARRAY:
            values = self.roller.shuffle(STANDARD_ARRAY)
            return dict(zip(ABILITY_KEYS, values))

        if resolved == ScoreMethod.ROLL:
            return {key: self.roller.roll_ability_score() for key in ABILITY_KEYS}

        if scores is None:
            raise ValueError("Manual score generation requires scores")
        if isinstance(scores, Mapping):
            normalized = {str(k).strip().upper(): v for k, v in scores.items()}
            return {key: coerce_int(normalized.get(key), 10, minimum=1) for key in ABILITY_KEYS}
        values = list(scores)
        return {
            key: coerce_int(values[i] if i < len(values) else None, 10, minimum=1)
            for i, key in enumerate(ABILITY_KEYS)
        }

    def create(
        self,
        name: str = DEFAULT_NAME,
        race: str = DEFAULT_RACE,
        character_class: str = DEFAULT_CLASS,
        method: Union[ScoreMethod, str] = ScoreMethod.STANDARD_ARRAY,
        scores: Optional[Union[Mapping[str, Any], Sequence[Any]]] = None,
        character_id: Optional[str] = None,
    ) -> CharacterRecord:
        """
        Create a fully derived level 1 character.

        Blank name, race or class fall back to "Unknown Hero", "Human" and
        "Fighter".
        """
        name = coerce_str(name, DEFAULT_NAME)
        race = coerce_str(race, DEFAULT_RACE)
        character_class = coerce_str(character_class, DEFAULT_CLASS)

        ability_scores = self.generate_scores(method, scores)
        save_proficiencies = {a.value for a in get_saving_throw_proficiencies(character_class)}
        stats = {
            key: AbilityScore(score=ability_scores[key], proficient_save=key in save_proficiencies)
            for key in ABILITY_KEYS
        }

        max_hp = max(1, get_hit_die(character_class) + ability_modifier(ability_scores["CON"]))

        record = CharacterRecord(
            character_id=character_id or uuid.uuid4().hex,
            name=name,
            race=race,
            character_class=character_class,
            level=1,
            stats=stats,
            hp=HitPoints(current=max_hp, maximum=max_hp),
            skills=[Skill(name=skill, ability=ability) for skill, ability in STANDARD_SKILLS],
            campaign=DEFAULT_CAMPAIGN,
        )

        logger.info(f"Created {name}, a level 1 {race} {character_class} ({max_hp} HP)")
        return recalculate(record, self._config)


# =============================================================================
# MODULE-LEVEL API
# =============================================================================


def create_new_character(
    name: str = DEFAULT_NAME,
    race: str = DEFAULT_RACE,
    character_class: str = DEFAULT_CLASS,
    method: Union[ScoreMethod, str] = ScoreMethod.STANDARD_ARRAY,
    scores: Optional[Union[Mapping[str, Any], Sequence[Any]]] = None,
    roller: Optional[DiceRoller] = None,
    config: Optional[ResolverConfig] = None,
) -> CharacterRecord:
    """Create a new character; see CharacterFactory.create."""
    factory = CharacterFactory(roller=roller, config=config)
    return factory.create(name, race, character_class, method=method, scores=scores)
