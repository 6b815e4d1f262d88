"""
Character Sheet Core - Command Line Entry Point

Thin command line surface over the stat resolver, the dice engine and the
character factory:

  python -m charsheet.main roll "1d20+5" --mode advantage
  python -m charsheet.main batch party_initiative.json
  python -m charsheet.main recalc character.json
  python -m charsheet.main new --name Mira --race Elf --class Wizard
"""

import argparse
import json
import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

from charsheet.character import ScoreMethod, create_new_character
from charsheet.data_models import RollMode
from charsheet.dice import DiceExpressionError, DiceRoller
from charsheet.resolver import ResolverConfig, recalculate


# Configure logging
def setup_logging(verbose: bool = False) -> None:
    """Configure logging based on verbosity level."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )


logger = logging.getLogger(__name__)


# =============================================================================
# CONFIGURATION
# =============================================================================

@dataclass
class SheetConfig:
    """Configuration for one command line run."""

    # Dice options
    seed: Optional[int] = None
    strict_dice: bool = False

    # Resolver options
    unarmored_defense: bool = True

    # Output options
    indent: int = 2

    # Runtime options
    verbose: bool = False

    def resolver_config(self) -> ResolverConfig:
        return ResolverConfig(unarmored_defense=self.unarmored_defense)

    def create_roller(self) -> DiceRoller:
        return DiceRoller(seed=self.seed)


# =============================================================================
# INPUT / OUTPUT HELPERS
# =============================================================================

def _load_json(source: str) -> Any:
    """Read JSON from a file path, or stdin for "-"."""
    if source == "-":
        return json.load(sys.stdin)
    with Path(source).open(encoding="utf-8") as handle:
        return json.load(handle)


def _print_json(data: Any, config: SheetConfig) -> None:
    print(json.dumps(data, indent=config.indent or None))


# =============================================================================
# COMMANDS
# =============================================================================

def cmd_roll(args: argparse.Namespace, config: SheetConfig) -> int:
    """Roll a single expression."""
    roller = config.create_roller()
    result = roller.roll(
        args.expression,
        base_modifier=args.modifier,
        mode=args.mode,
        label=args.label,
        strict=config.strict_dice,
    )
    if args.json:
        _print_json(result.to_dict(), config)
    else:
        print(result)
    return 0


def cmd_batch(args: argparse.Namespace, config: SheetConfig) -> int:
    """Roll a JSON list of {label, expression, baseModifier, mode} entries."""
    entries = _load_json(args.file)
    if not isinstance(entries, list):
        logger.error(f"Batch input must be a JSON list, got {type(entries).__name__}")
        return 1

    results = config.create_roller().roll_batch(e for e in entries if isinstance(e, dict))
    if args.json:
        _print_json([r.to_dict() for r in results], config)
    else:
        for result in results:
            print(result)
    return 0


def cmd_recalc(args: argparse.Namespace, config: SheetConfig) -> int:
    """Recalculate a stored character document and print the result."""
    data = _load_json(args.file)
    record = recalculate(data, config.resolver_config())
    _print_json(record.to_dict(), config)
    return 0


def cmd_new(args: argparse.Namespace, config: SheetConfig) -> int:
    """Create a new level 1 character and print it."""
    scores = None
    if args.scores:
        scores = [part.strip() for part in args.scores.split(",")]

    record = create_new_character(
        name=args.name,
        race=args.race,
        character_class=args.character_class,
        method=args.method,
        scores=scores,
        roller=config.create_roller(),
        config=config.resolver_config(),
    )
    _print_json(record.to_dict(), config)
    return 0


COMMANDS = {
    "roll": cmd_roll,
    "batch": cmd_batch,
    "recalc": cmd_recalc,
    "new": cmd_new,
}


# =============================================================================
# ARGUMENT PARSING
# =============================================================================

def parse_arguments(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Character Sheet Core - stat resolution and dice rolling",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m charsheet.main roll 2d6+1d4+2              # Roll damage
  python -m charsheet.main roll 1d20+5 --mode adv      # Attack with advantage
  python -m charsheet.main --seed 7 batch party.json   # Reproducible initiative
  python -m charsheet.main recalc hero.json            # Re-derive a stored sheet
  python -m charsheet.main new --class Wizard          # New character
        """
    )

    # General options
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Seed the dice roller for reproducible results",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Reject unparseable dice tokens instead of dropping them",
    )
    parser.add_argument(
        "--no-unarmored-defense",
        action="store_true",
        help="Ignore Barbarian/Monk unarmored defense when computing AC",
    )
    parser.add_argument(
        "--indent",
        type=int,
        default=2,
        help="JSON indentation, 0 for compact output (default: 2)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    # roll
    roll_parser = subparsers.add_parser("roll", help="Roll a dice expression")
    roll_parser.add_argument("expression", help='Dice notation, e.g. "2d6+1d4+2"')
    roll_parser.add_argument(
        "-m", "--modifier",
        type=int,
        default=0,
        help="Flat modifier added to the roll (default: 0)",
    )
    roll_parser.add_argument(
        "--mode",
        type=str,
        default=RollMode.NORMAL.value,
        choices=["normal", "advantage", "disadvantage", "adv", "dis"],
        help="Advantage mode for a single d20 (default: normal)",
    )
    roll_parser.add_argument("--label", type=str, default="", help="Caption for the roll")
    roll_parser.add_argument("--json", action="store_true", help="Print the result as JSON")

    # batch
    batch_parser = subparsers.add_parser("batch", help="Roll a JSON list of expressions")
    batch_parser.add_argument("file", help='JSON file of roll entries ("-" for stdin)')
    batch_parser.add_argument("--json", action="store_true", help="Print results as JSON")

    # recalc
    recalc_parser = subparsers.add_parser("recalc", help="Recalculate a character document")
    recalc_parser.add_argument("file", help='Character JSON file ("-" for stdin)')

    # new
    new_parser = subparsers.add_parser("new", help="Create a new character")
    new_parser.add_argument("--name", type=str, default="Unknown Hero")
    new_parser.add_argument("--race", type=str, default="Human")
    new_parser.add_argument("--class", dest="character_class", type=str, default="Fighter")
    new_parser.add_argument(
        "--method",
        type=str,
        default=ScoreMethod.STANDARD_ARRAY.value,
        choices=[m.value for m in ScoreMethod],
        help="Ability score generation (default: standard_array)",
    )
    new_parser.add_argument(
        "--scores",
        type=str,
        default=None,
        help="Manual scores in STR,DEX,CON,INT,WIS,CHA order, e.g. 15,14,13,12,10,8",
    )

    return parser.parse_args(argv)


def create_config_from_args(args: argparse.Namespace) -> SheetConfig:
    """Create SheetConfig from parsed arguments."""
    return SheetConfig(
        seed=args.seed,
        strict_dice=args.strict,
        unarmored_defense=not args.no_unarmored_defense,
        indent=args.indent,
        verbose=args.verbose,
    )


# =============================================================================
# MAIN ENTRY POINT
# =============================================================================

def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point for CLI usage. Returns the process exit status."""
    args = parse_arguments(argv)
    setup_logging(args.verbose)
    config = create_config_from_args(args)

    try:
        return COMMANDS[args.command](args, config)
    except (OSError, json.JSONDecodeError) as e:
        logger.error(f"Could not read input: {e}")
        return 1
    except DiceExpressionError as e:
        logger.error(str(e))
        return 1
    except ValueError as e:
        logger.error(f"Invalid input: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
