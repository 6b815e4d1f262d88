"""
Dice engine: rolls parsed dice expressions.

Every random number comes from ``DiceRoller.roll_die``, which draws from an
injectable die source (a seeded ``random.Random`` by default, or a
``ScriptedDice`` stream for tests and replays). Rolls are stateless: the
roller keeps no session or turn state between calls.
"""

from typing import Any, Callable, Iterable, Mapping, Optional, Union
import logging
import random

from charsheet.data_models import (
    BatchRollEntry,
    DiceGroup,
    DiceTerm,
    HitDieRoll,
    RollMode,
    RollResult,
)
from charsheet.dice.dice_parser import parse_expression

logger = logging.getLogger(__name__)

DieSource = Callable[[int], int]


# =============================================================================
# DIE SOURCES
# =============================================================================


class ScriptedDice:
    """
    Die source that replays a recorded stream of faces.

    Once the stream is exhausted it falls back to a seeded RNG and counts
    the overruns, so a replay that asks for more dice than were recorded
    still completes deterministically.

    Usage:
        roller = DiceRoller(die_source=ScriptedDice([15]))
        roller.roll("1d20", base_modifier=4).total  # 19
    """

    def __init__(self, values: Iterable[int], seed: int = 0):
        self._values = list(values)
        self._position = 0
        self._overruns = 0
        self._fallback = random.Random(seed)

    def __call__(self, sides: int) -> int:
        if self._position < len(self._values):
            value = self._values[self._position]
            self._position += 1
            if not 1 <= value <= sides:
                raise ValueError(f"Scripted face {value} is not valid for a d{sides}")
            return value
        self._overruns += 1
        return self._fallback.randint(1, sides)

    @property
    def remaining(self) -> int:
        return len(self._values) - self._position

    @property
    def overruns(self) -> int:
        return self._overruns


# =============================================================================
# DICE ROLLER
# =============================================================================


class DiceRoller:
    """
    Rolls dice expressions with advantage/disadvantage and batch support.

    Args:
        seed: Seed for the internal RNG (ignored when ``rng`` is given)
        rng: A ``random.Random`` to draw from
        die_source: Callable ``sides -> face`` that replaces the RNG entirely
    """

    def __init__(
        self,
        seed: Optional[int] = None,
        rng: Optional[random.Random] = None,
        die_source: Optional[DieSource] = None,
    ):
        self._rng = rng if rng is not None else random.Random(seed)
        self._die_source = die_source

    def set_seed(self, seed: int) -> None:
        """Reseed the internal RNG for reproducible rolls."""
        self._rng.seed(seed)

    # --- Core primitive ---

    def roll_die(self, sides: int) -> int:
        """
        Roll one die, uniform in [1, sides].

        Raises:
            ValueError: If sides < 1, or a die source returns an
                out-of-range face
        """
        if sides < 1:
            raise ValueError(f"A die needs at least one side, got {sides}")
        if self._die_source is None:
            return self._rng.randint(1, sides)
        face = self._die_source(sides)
        if not 1 <= face <= sides:
            raise ValueError(f"Die source returned {face} for a d{sides}")
        return face

    # --- Expression rolls ---

    def roll(
        self,
        expression: str,
        base_modifier: int = 0,
        mode: Union[RollMode, str] = RollMode.NORMAL,
        label: str = "",
        strict: bool = False,
    ) -> RollResult:
        """
        Roll a dice expression.

        Args:
            expression: Dice notation, e.g. "2d6+1d4+2" or "1d20-3"
            base_modifier: Flat bonus added before any modifier terms
            mode: normal, advantage or disadvantage (single d20 terms only)
            label: Caption carried on the result
            strict: Raise on unparseable tokens instead of dropping them

        Returns:
            RollResult with per-term dice groups. An expression with no
            usable terms totals ``base_modifier``.
        """
        terms = parse_expression(expression, strict=strict)
        text = expression if isinstance(expression, str) else ""
        return self.roll_terms(terms, base_modifier, mode, expression=text, label=label)

    def roll_terms(
        self,
        terms: list[DiceTerm],
        base_modifier: int = 0,
        mode: Union[RollMode, str] = RollMode.NORMAL,
        expression: str = "",
        label: str = "",
    ) -> RollResult:
        """Roll already-parsed terms (avoids reparsing)."""
        mode = RollMode.coerce(mode)
        dice_groups: list[DiceGroup] = []
        total = 0
        final_modifier = base_modifier

        for term in terms:
            if not term.is_dice:
                final_modifier += term.signed_value
                continue

            # Advantage / disadvantage only applies to a single d20
            if term.count == 1 and term.sides == 20 and mode != RollMode.NORMAL:
                first = self.roll_die(20)
                second = self.roll_die(20)
                high, low = max(first, second), min(first, second)
                if mode == RollMode.ADVANTAGE:
                    group = DiceGroup(sides=20, rolls=[high], dropped=low, sign=term.sign)
                else:
                    group = DiceGroup(sides=20, rolls=[low], dropped=high, sign=term.sign)
            else:
                rolls = [self.roll_die(term.sides) for _ in range(term.count)]
                group = DiceGroup(sides=term.sides, rolls=rolls, sign=term.sign)

            total += group.subtotal
            dice_groups.append(group)

        total += final_modifier

        result = RollResult(
            total=total,
            expression=expression,
            dice_groups=dice_groups,
            modifier=final_modifier,
            mode=mode,
            label=label,
        )
        logger.debug("Rolled %s", result)
        return result

    def roll_batch(
        self, entries: Iterable[Union[BatchRollEntry, Mapping[str, Any]]]
    ) -> list[RollResult]:
        """
        Roll many expressions at once, e.g. initiative for every combatant.

        Results come back in input order, each carrying its entry's label.
        Entries may be BatchRollEntry objects or mappings with ``label``,
        ``expression`` and optional ``baseModifier`` / ``mode`` keys.
        """
        results = []
        for entry in entries:
            if not isinstance(entry, BatchRollEntry):
                entry = BatchRollEntry.from_dict(entry)
            results.append(
                self.roll(entry.expression, entry.base_modifier, entry.mode, label=entry.label)
            )
        return results

    # --- Convenience helpers ---

    def roll_d20(
        self,
        modifier: int = 0,
        mode: Union[RollMode, str] = RollMode.NORMAL,
        label: str = "",
    ) -> RollResult:
        """Ability check, save or attack roll."""
        return self.roll("1d20", modifier, mode, label=label)

    def roll_hit_die(self, sides: int, con_modifier: int) -> HitDieRoll:
        """Spend one hit die: regain the face plus CON, never below zero."""
        face = self.roll_die(sides)
        return HitDieRoll(roll=face, total=max(0, face + con_modifier))

    def roll_ability_score(self) -> int:
        """Roll 4d6 and drop the lowest die."""
        rolls = sorted(self.roll_die(6) for _ in range(4))
        return sum(rolls[1:])

    def shuffle(self, values: Iterable[Any]) -> list[Any]:
        """Return a shuffled copy (Fisher-Yates driven by roll_die)."""
        items = list(values)
        for i in range(len(items) - 1, 0, -1):
            j = self.roll_die(i + 1) - 1
            items[i], items[j] = items[j], items[i]
        return items


# =============================================================================
# DEFAULT ROLLER AND MODULE-LEVEL API
# =============================================================================

_dice_roller: Optional[DiceRoller] = None


def get_dice_roller() -> DiceRoller:
    """Get the process-wide default DiceRoller."""
    global _dice_roller
    if _dice_roller is None:
        _dice_roller = DiceRoller()
    return _dice_roller


def set_dice_roller(roller: DiceRoller) -> DiceRoller:
    """Replace the default roller (e.g. with a seeded or scripted one)."""
    global _dice_roller
    _dice_roller = roller
    return roller


def reset_dice_roller() -> DiceRoller:
    """Install and return a fresh unseeded default roller."""
    return set_dice_roller(DiceRoller())


def roll_die(sides: int) -> int:
    return get_dice_roller().roll_die(sides)


def roll(
    expression: str,
    base_modifier: int = 0,
    mode: Union[RollMode, str] = RollMode.NORMAL,
    label: str = "",
) -> RollResult:
    return get_dice_roller().roll(expression, base_modifier, mode, label=label)


def roll_batch(entries: Iterable[Union[BatchRollEntry, Mapping[str, Any]]]) -> list[RollResult]:
    return get_dice_roller().roll_batch(entries)
