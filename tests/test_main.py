"""
Tests for the command line entry point.

Tests argument parsing, configuration and each subcommand of
charsheet/main.py.
"""

import json

import pytest

from charsheet.main import (
    SheetConfig,
    create_config_from_args,
    main,
    parse_arguments,
)


class TestConfiguration:
    """Tests for argument parsing and SheetConfig."""

    def test_defaults(self):
        """Global options default sensibly."""
        config = create_config_from_args(parse_arguments(["roll", "1d20"]))
        assert config == SheetConfig()

    def test_global_options(self):
        """Global flags map onto SheetConfig."""
        args = parse_arguments([
            "-v", "--seed", "7", "--strict", "--no-unarmored-defense", "--indent", "0",
            "roll", "1d20",
        ])
        config = create_config_from_args(args)
        assert config.verbose is True
        assert config.seed == 7
        assert config.strict_dice is True
        assert config.unarmored_defense is False
        assert config.indent == 0
        assert config.resolver_config().unarmored_defense is False

    def test_seeded_rollers_match(self):
        """A seeded config creates reproducible rollers."""
        config = SheetConfig(seed=3)
        first = config.create_roller()
        second = config.create_roller()
        assert first.roll_die(20) == second.roll_die(20)

    def test_command_required(self):
        """A subcommand must be given."""
        with pytest.raises(SystemExit):
            parse_arguments([])


class TestRollCommand:
    """Tests for the roll subcommand."""

    def test_roll_text(self, capsys):
        """Rolls print a readable breakdown."""
        assert main(["--seed", "1", "roll", "2d6+3", "--label", "Damage"]) == 0
        out = capsys.readouterr().out
        assert out.startswith("Damage: 2d6+3 => d6[")

    def test_roll_json(self, capsys):
        """--json prints the result document."""
        assert main(["--seed", "1", "roll", "1d20", "-m", "4", "--mode", "adv", "--json"]) == 0
        data = json.loads(capsys.readouterr().out)
        assert data["mode"] == "advantage"
        assert data["modifier"] == 4
        assert 5 <= data["total"] <= 24
        assert "dropped" in data["diceGroups"][0]

    def test_strict_roll_error(self, capsys):
        """A bad token under --strict exits with status 1."""
        assert main(["--strict", "roll", "1d20+oops"]) == 1


class TestBatchCommand:
    """Tests for the batch subcommand."""

    def test_batch_order(self, tmp_path, capsys):
        """Batch results keep input order."""
        path = tmp_path / "initiative.json"
        path.write_text(json.dumps([
            {"label": "Aldric", "expression": "1d20", "baseModifier": 2},
            {"label": "Goblin", "expression": "1d20", "baseModifier": 2},
            {"label": "Mirabel", "expression": "1d20", "mode": "disadvantage"},
        ]))
        assert main(["--seed", "5", "batch", str(path), "--json"]) == 0
        data = json.loads(capsys.readouterr().out)
        assert [r["label"] for r in data] == ["Aldric", "Goblin", "Mirabel"]

    def test_batch_not_a_list(self, tmp_path):
        """A batch file must hold a list."""
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"label": "A"}))
        assert main(["batch", str(path)]) == 1

    def test_batch_bad_mode(self, tmp_path):
        """An unknown mode in an entry exits with status 1."""
        path = tmp_path / "bad_mode.json"
        path.write_text(json.dumps([{"label": "A", "expression": "1d20", "mode": "sideways"}]))
        assert main(["batch", str(path)]) == 1


class TestRecalcCommand:
    """Tests for the recalc subcommand."""

    def test_recalc_file(self, tmp_path, capsys, rogue_data):
        """A stored sheet is recalculated and printed."""
        path = tmp_path / "rogue.json"
        path.write_text(json.dumps(rogue_data))
        assert main(["recalc", str(path)]) == 0
        data = json.loads(capsys.readouterr().out)
        assert data["ac"] == 15
        assert data["initiative"] == 4
        assert data["attacks"][-1]["name"] == "Unarmed Strike"

    def test_recalc_no_unarmored_defense(self, tmp_path, capsys):
        """The resolver option reaches the resolver."""
        path = tmp_path / "barbarian.json"
        path.write_text(json.dumps({
            "class": "Barbarian",
            "stats": {"DEX": {"score": 14}, "CON": {"score": 16}},
        }))
        assert main(["--no-unarmored-defense", "recalc", str(path)]) == 0
        assert json.loads(capsys.readouterr().out)["ac"] == 12

    def test_recalc_missing_file(self, tmp_path):
        """An unreadable file exits with status 1."""
        assert main(["recalc", str(tmp_path / "missing.json")]) == 1

    def test_recalc_invalid_json(self, tmp_path):
        """Invalid JSON exits with status 1."""
        path = tmp_path / "broken.json"
        path.write_text("{not json")
        assert main(["recalc", str(path)]) == 1


class TestNewCommand:
    """Tests for the new subcommand."""

    def test_new_manual(self, capsys):
        """Manual scores produce the expected sheet."""
        assert main([
            "new", "--name", "Aldric", "--class", "Fighter",
            "--method", "manual", "--scores", "16,14,15,10,12,8",
        ]) == 0
        data = json.loads(capsys.readouterr().out)
        assert data["name"] == "Aldric"
        assert data["class"] == "Fighter"
        assert data["hp"] == {"current": 12, "max": 12}
        assert data["stats"]["STR"]["save"] == 5

    def test_new_seeded_standard_array(self, capsys):
        """The default method deals the standard array."""
        assert main(["--seed", "11", "new", "--class", "Wizard"]) == 0
        data = json.loads(capsys.readouterr().out)
        scores = sorted(stat["score"] for stat in data["stats"].values())
        assert scores == [8, 10, 12, 13, 14, 15]
        assert data["spellSlots"] == [{"level": 1, "max": 2, "current": 2}]
