"""
Tests for the command-line interface.

Tests:
- Catalog listings (cards, decks)
- simulate and replay-check output
- Error exits
"""

import json

import pytest

from ..cli import main

pytestmark = pytest.mark.usefixtures("package_logger")


def run(capsys, *argv):
    main(list(argv))
    return capsys.readouterr().out


class TestCatalogCommands:
    """Tests for cards and decks."""

    def test_decks(self, capsys):
        out = run(capsys, "decks")

        lines = out.strip().splitlines()
        assert len(lines) == 5
        assert any(line.startswith("mage_starlit_ritual") for line in lines)
        assert all("(20 cards)" in line for line in lines)

    def test_cards_by_faction(self, capsys):
        out = run(capsys, "cards", "--faction", "knight")

        lines = out.strip().splitlines()
        assert lines[-1].endswith("cards")
        count = int(lines[-1].split()[0])
        assert count == len(lines) - 1 > 0

    def test_cards_unknown_faction(self, capsys):
        with pytest.raises(SystemExit) as exc:
            main(["cards", "--faction", "pirate"])

        assert exc.value.code == 1
        assert "Error: Unknown faction: pirate" in capsys.readouterr().out


class TestGameCommands:
    """Tests for simulate and replay-check."""

    def test_simulate(self, capsys):
        out = run(capsys, "simulate", "--deck1", "mage", "--deck2", "knight", "--seed", "cli-seed")

        assert out.startswith("Winner: ")
        assert "Turns: " in out
        assert "player1 [mage/balanced]" in out
        assert "player2 [knight/balanced]" in out
        assert "Actions: " in out

    def test_simulate_same_seed_same_output(self, capsys):
        argv = ("simulate", "--deck1", "necromancer", "--deck2", "inquisitor", "--seed", "x")

        assert run(capsys, *argv) == run(capsys, *argv)

    def test_simulate_with_log(self, capsys):
        out = run(
            capsys, "simulate", "--deck1", "mage", "--deck2", "knight",
            "--seed", "cli-seed", "--log",
        )

        records = [json.loads(line) for line in out.splitlines() if line.startswith("{")]
        count = int(out.strip().splitlines()[-1].split(": ")[1])
        assert len(records) == count
        assert [r["sequence"] for r in records] == list(range(count))

    def test_replay_check(self, capsys):
        out = run(
            capsys, "replay-check", "--deck1", "berserker", "--deck2", "mage",
            "--tactics1", "aggressive", "--seed", "cli-seed",
        )

        assert out.startswith("OK: ")
        assert "records identical" in out

    def test_unknown_deck(self, capsys):
        with pytest.raises(SystemExit) as exc:
            main(["simulate", "--deck1", "nope", "--deck2", "knight", "--seed", "s"])

        assert exc.value.code == 1
        assert "Error: Unknown deck: nope" in capsys.readouterr().out

    def test_no_command(self, capsys):
        with pytest.raises(SystemExit) as exc:
            main([])

        assert exc.value.code == 1
