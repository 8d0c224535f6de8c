"""
Tests for the action log.

Tests:
- Sequencing and immutability
- Replay keys ignore timestamps
- ActionResult as a boolean signal
"""

import dataclasses

import pytest

from ..engine_core.action import ActionLog, ActionResult, ActionType


class TestActionLog:
    """Tests for ActionLog."""

    def test_sequences_are_contiguous(self):
        """Sequence numbers start at 0 and increase by one."""
        log = ActionLog(lambda: 0.0)
        log.add_phase_change("player1", "draw", "energy")
        log.add_energy_update("player1", 0, 1)
        log.add_energy_refill("player1", 0, 1)
        assert [a.sequence for a in log] == [0, 1, 2]

    def test_records_are_frozen(self):
        """A record cannot be reassigned after the fact."""
        log = ActionLog()
        action = log.add_phase_change("player1", "draw", "energy")
        with pytest.raises(dataclasses.FrozenInstanceError):
            action.player_id = "player2"

    def test_data_is_copied(self):
        """Mutating the caller's dict later does not change the record."""
        log = ActionLog()
        stats = {"attack": 1, "health": 1}
        action = log.add_card_play("player1", "c1", 0, initial_stats=stats)
        stats["attack"] = 99
        assert action.data["initial_stats"]["attack"] == 1

    def test_replay_keys_ignore_timestamps(self):
        """Two logs with different clocks compare equal by replay key."""
        a = ActionLog(lambda: 1.0)
        b = ActionLog(lambda: 2.0)
        for log in (a, b):
            log.add_phase_change("player1", "draw", "energy")
            log.add_card_draw("player1", "c1", 3, 4, 16)
        assert a.replay_keys() == b.replay_keys()
        assert a[0].timestamp != b[0].timestamp

    def test_since_and_of_type(self):
        log = ActionLog()
        log.add_phase_change("player1", "draw", "energy")
        mark = len(log)
        log.add_energy_update("player1", 0, 1)
        log.add_phase_change("player1", "energy", "deploy")

        assert [a.action_type for a in log.since(mark)] == [
            ActionType.ENERGY_UPDATE,
            ActionType.PHASE_CHANGE,
        ]
        assert len(log.of_type(ActionType.PHASE_CHANGE)) == 2

    def test_last_destroyed_sequences(self):
        """Later destruction records of the same id win."""
        log = ActionLog()
        log.add_creature_destroyed("player1", "c1", "combat", None, {})
        log.add_phase_change("player1", "battle", "end")
        log.add_creature_destroyed("player1", "c1", "effect", None, {})
        assert log.last_destroyed_sequences() == {"c1": 2}
        assert log.destroyed_ids() == {"c1"}

    def test_fatigue_draw_record(self):
        log = ActionLog()
        action = log.add_card_draw(
            "player1", None, 2, 2, 0, fatigue={"life_before": 15, "life_after": 14}
        )
        assert action.data["card_id"] is None
        assert action.data["fatigue"] == {"life_before": 15, "life_after": 14}

    def test_to_list(self):
        log = ActionLog(lambda: 0.0)
        log.add_phase_change("player1", "draw", "energy")
        assert log.to_list() == [{
            "sequence": 0,
            "player_id": "player1",
            "type": "phase_change",
            "data": {"from_phase": "draw", "to_phase": "energy"},
            "timestamp": 0.0,
        }]


class TestActionResult:
    """Tests for ActionResult."""

    def test_failure_is_falsy(self):
        result = ActionResult.failure("nope", "FIELD_FULL")
        assert not result
        assert result.error_code == "FIELD_FULL"

    def test_ok_is_truthy(self):
        assert ActionResult.ok()
        assert ActionResult.ok().actions == []
