"""
Unit tests for the dice expression parser.

Tests tokenizing, term classification and the lenient/strict policies in
charsheet/dice/dice_parser.py.
"""

import logging

import pytest

from charsheet.data_models import DiceTerm, TermKind
from charsheet.dice.dice_parser import (
    DiceExpressionError,
    format_expression,
    parse_expression,
    parse_token,
    tokenize,
)


class TestTokenize:
    """Tests for splitting expressions on sign boundaries."""

    def test_splits_before_signs(self):
        """Each + or - starts a new token."""
        assert tokenize("2d6+1d4-2") == ["2d6", "+1d4", "-2"]

    def test_strips_whitespace(self):
        """Whitespace anywhere is ignored."""
        assert tokenize(" 1d20 + 5 ") == ["1d20", "+5"]

    def test_leading_sign(self):
        """A leading sign stays with the first token."""
        assert tokenize("-d4+3") == ["-d4", "+3"]

    def test_empty(self):
        """Blank input has no tokens."""
        assert tokenize("   ") == []


class TestParseExpression:
    """Tests for parse_expression."""

    def test_multi_term_expression(self):
        """2d6+1d4+2 yields two dice terms and a modifier, in order."""
        assert parse_expression("2d6+1d4+2") == [
            DiceTerm.dice(2, 6, sign=1),
            DiceTerm.dice(1, 4, sign=1),
            DiceTerm.modifier(2),
        ]

    def test_negative_modifier(self):
        """A trailing -3 is a negative flat modifier."""
        terms = parse_expression("1d20-3")
        assert terms[1].kind == TermKind.MODIFIER
        assert terms[1].signed_value == -3

    def test_bare_integer(self):
        """A bare integer is a positive modifier."""
        assert parse_expression("4") == [DiceTerm.modifier(4)]

    def test_missing_count_defaults_to_one(self):
        """d20 means 1d20."""
        assert parse_expression("d20") == [DiceTerm.dice(1, 20)]

    def test_negative_dice_term(self):
        """A leading - flips the sign of a dice term."""
        term = parse_expression("1d6-1d4")[1]
        assert term.is_dice
        assert term.sign == -1
        assert (term.count, term.sides) == (1, 4)

    def test_uppercase_d(self):
        """The d is case-insensitive."""
        assert parse_expression("2D8") == [DiceTerm.dice(2, 8)]

    def test_unparseable_tokens_dropped(self, caplog):
        """Lenient parsing drops junk tokens and logs a warning."""
        with caplog.at_level(logging.WARNING, logger="charsheet.dice.dice_parser"):
            terms = parse_expression("1d8+fire+2")
        assert terms == [DiceTerm.dice(1, 8), DiceTerm.modifier(2)]
        assert "fire" in caplog.text

    def test_zero_sized_dice_dropped(self):
        """0d6 and 1d0 are not valid dice terms."""
        assert parse_expression("0d6+1d0+1") == [DiceTerm.modifier(1)]

    def test_oversized_dice_dropped(self):
        """Runaway dice counts are rejected."""
        assert parse_expression("100000d6") == []

    def test_empty_and_non_string(self):
        """Blank or non-string input parses to no terms."""
        assert parse_expression("") == []
        assert parse_expression(None) == []
        assert parse_expression(42) == []

    def test_strict_mode_raises(self):
        """Strict parsing raises on the first bad token."""
        with pytest.raises(DiceExpressionError) as exc_info:
            parse_expression("1d8+fire", strict=True)
        assert exc_info.value.token == "+fire"
        assert exc_info.value.expression == "1d8+fire"

    def test_strict_mode_is_a_value_error(self):
        """DiceExpressionError can be caught as ValueError."""
        with pytest.raises(ValueError):
            parse_expression(None, strict=True)

    def test_strict_mode_accepts_valid(self):
        """Valid expressions parse the same in strict mode."""
        assert parse_expression("2d6+3", strict=True) == parse_expression("2d6+3")


class TestHelpers:
    """Tests for token-level helpers and formatting."""

    def test_parse_token_none_for_junk(self):
        """Unclassifiable tokens return None."""
        assert parse_token("+abc") is None
        assert parse_token("2d") is None

    def test_format_expression(self):
        """Terms render back to compact notation."""
        assert format_expression(parse_expression("2d6 + 1d4 - 2")) == "2d6+1d4-2"
        assert format_expression(parse_expression("-d4")) == "-1d4"
        assert format_expression([]) == ""
