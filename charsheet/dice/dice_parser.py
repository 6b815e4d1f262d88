"""
Dice expression parser.

Turns expressions like "2d6+1d4+2", "1d20-3", "-d4" or "4" into an ordered
list of DiceTerm values. The parser is lenient by default: tokens it cannot
classify are dropped with a warning, so a typo in a free-text damage field
never blocks a roll. Pass ``strict=True`` to raise instead.
"""

from typing import Any, Optional
import logging
import re

from charsheet.data_models import DiceTerm

logger = logging.getLogger(__name__)


# Guards against runaway expressions such as "100000d6"
MAX_DICE_PER_TERM = 100
MAX_DIE_SIDES = 1000

_WHITESPACE_RE = re.compile(r"\s+")
_SIGN_BOUNDARY_RE = re.compile(r"(?=[+-])")
_DICE_TOKEN_RE = re.compile(r"^([+-]?)(\d*)d(\d+)$", re.IGNORECASE)
_FLAT_TOKEN_RE = re.compile(r"^[+-]?\d+$")


class DiceExpressionError(ValueError):
    """Raised by strict parsing when a token is not a dice term or integer."""

    def __init__(self, expression: str, token: str):
        self.expression = expression
        self.token = token
        super().__init__(f"Cannot parse {token!r} in dice expression {expression!r}")


def tokenize(expression: str) -> list[str]:
    """Strip whitespace and split before every + or - sign."""
    cleaned = _WHITESPACE_RE.sub("", expression)
    return [token for token in _SIGN_BOUNDARY_RE.split(cleaned) if token]


def parse_token(token: str) -> Optional[DiceTerm]:
    """
    Classify one token.

    Returns:
        A dice or modifier term, or None when the token is unparseable
        (including zero-sized or oversized dice).
    """
    dice_match = _DICE_TOKEN_RE.match(token)
    if dice_match:
        sign_text, count_text, sides_text = dice_match.groups()
        count = int(count_text) if count_text else 1
        sides = int(sides_text)
        if not (1 <= count <= MAX_DICE_PER_TERM and 1 <= sides <= MAX_DIE_SIDES):
            return None
        return DiceTerm.dice(count, sides, sign=-1 if sign_text == "-" else 1)

    if _FLAT_TOKEN_RE.match(token):
        return DiceTerm.modifier(int(token))

    return None


def parse_expression(expression: Any, strict: bool = False) -> list[DiceTerm]:
    """
    Parse a dice expression into ordered terms.

    Args:
        expression: Expression text, e.g. "2d6+1d4+2"
        strict: Raise on unparseable tokens instead of dropping them

    Returns:
        Terms in expression order; empty for blank or non-string input

    Raises:
        DiceExpressionError: In strict mode, for the first bad token
    """
    if not isinstance(expression, str):
        if strict:
            raise DiceExpressionError(repr(expression), repr(expression))
        return []

    terms: list[DiceTerm] = []
    for token in tokenize(expression):
        term = parse_token(token)
        if term is None:
            if strict:
                raise DiceExpressionError(expression, token)
            logger.warning("Dropping unparseable dice token %r in %r", token, expression)
            continue
        terms.append(term)
    return terms


def format_expression(terms: list[DiceTerm]) -> str:
    """Render terms back to compact notation ("2d6+1d4+2")."""
    text = "".join(str(term) for term in terms)
    return text[1:] if text.startswith("+") else text
