"""
Tests for the match manager and the step driver.

Tests:
- Stepped matches write the same log as a full run
- Battle stepping yields one record per step
- Match lifecycle (finish, abandon, cleanup)
- Phase-step cap
"""

import pytest

from ..engine_core.cards import Faction, TacticsType
from ..engine_core.engine import GameEngine, execute_full_game
from ..engine_core.state import EndReason, GamePhase
from ..session import GameLoop, LoopState, MatchManager, MatchStatus
from .helpers import fixed_clock


def create(manager, mage_deck, knight_deck, seed="seed-1", **kwargs):
    return manager.create_match(
        mage_deck, knight_deck,
        Faction.MAGE, Faction.KNIGHT,
        TacticsType.BALANCED, TacticsType.DEFENSIVE,
        seed, clock=fixed_clock, **kwargs,
    )


class TestStepping:
    """Tests for GameLoop stepping."""

    @pytest.mark.parametrize("step_combat", [True, False])
    def test_stepped_match_matches_full_run(self, mage_deck, knight_deck, step_combat):
        """Stepping one phase or record at a time writes the same log."""
        match = create(MatchManager(), mage_deck, knight_deck, step_combat=step_combat)
        while not match.step().is_over:
            pass

        full = execute_full_game(
            "g1", mage_deck, knight_deck,
            Faction.MAGE, Faction.KNIGHT,
            TacticsType.BALANCED, TacticsType.DEFENSIVE,
            "seed-1", engine=GameEngine(), clock=fixed_clock,
        )
        assert match.state.action_log.replay_keys() == full.action_log.replay_keys()
        assert match.state.result.winner == full.result.winner
        assert match.state.result.total_turns == full.result.total_turns

    def test_battle_steps_yield_one_record(self, mage_deck, knight_deck):
        match = create(MatchManager(), mage_deck, knight_deck)
        mid_battle_steps = 0
        while True:
            step = match.step()
            if step.is_over:
                break
            if not step.phase_completed:
                assert step.loop_state == LoopState.IN_BATTLE
                assert step.phase == GamePhase.BATTLE
                assert len(step.actions) == 1
                mid_battle_steps += 1
        assert mid_battle_steps > 0

    def test_steps_report_every_record_once(self, mage_deck, knight_deck):
        """Concatenated step actions are the log after the opening record, in order."""
        match = create(MatchManager(), mage_deck, knight_deck)
        reported = []
        while True:
            step = match.step()
            reported.extend(a.sequence for a in step.actions)
            if step.is_over:
                break

        assert reported == list(range(1, len(match.state.action_log)))

    def test_unstepped_combat_never_pauses_in_battle(self, mage_deck, knight_deck):
        match = create(MatchManager(), mage_deck, knight_deck, step_combat=False)
        while True:
            step = match.step()
            assert step.phase_completed or step.is_over
            assert step.loop_state != LoopState.IN_BATTLE
            if step.is_over:
                break

    def test_step_after_game_over_adds_nothing(self, mage_deck, knight_deck):
        match = create(MatchManager(), mage_deck, knight_deck)
        match.run_to_completion()
        length = len(match.state.action_log)

        step = match.step()

        assert step.is_over
        assert step.actions == []
        assert len(match.state.action_log) == length

    def test_phase_step_cap_forces_timeout(self, mage_deck, knight_deck):
        manager = MatchManager(engine_factory=lambda: GameEngine(max_steps=3))
        match = create(manager, mage_deck, knight_deck)

        state = match.run_to_completion()

        assert isinstance(match.loop, GameLoop)
        assert match.loop.phase_steps == 3
        assert state.result.reason == EndReason.TIMEOUT
        assert state.result.winner is None


class TestMatchManager:
    """Tests for MatchManager."""

    def test_create_match(self, mage_deck, knight_deck):
        manager = MatchManager()
        match = create(manager, mage_deck, knight_deck, metadata={"seed": "seed-1"})

        assert match.state.game_id == match.match_id
        assert match.status == MatchStatus.ACTIVE
        assert match.metadata == {"seed": "seed-1"}
        assert manager.get_match(match.match_id) is match
        assert len(manager) == 1

    def test_run_to_completion_finishes(self, mage_deck, knight_deck):
        match = create(MatchManager(), mage_deck, knight_deck)
        state = match.run_to_completion()

        assert state.result is not None
        assert match.status == MatchStatus.FINISHED
        assert not match.is_active()

    def test_end_active_match_is_abandoned(self, mage_deck, knight_deck):
        manager = MatchManager()
        match = create(manager, mage_deck, knight_deck)
        match.step()

        assert manager.end_match(match.match_id)
        assert match.status == MatchStatus.ABANDONED
        assert manager.get_match(match.match_id) is None

    def test_end_match_mid_battle(self, mage_deck, knight_deck):
        manager = MatchManager()
        match = create(manager, mage_deck, knight_deck)
        while match.loop.loop_state != LoopState.IN_BATTLE and not match.step().is_over:
            pass

        assert manager.end_match(match.match_id)
        assert match.loop.loop_state != LoopState.IN_BATTLE

    def test_end_missing_match(self):
        assert not MatchManager().end_match("nope")

    def test_list_active_matches(self, mage_deck, knight_deck):
        manager = MatchManager()
        running = create(manager, mage_deck, knight_deck)
        done = create(manager, mage_deck, knight_deck, seed="seed-2")
        done.run_to_completion()

        assert set(manager.list_matches()) == {running.match_id, done.match_id}
        assert manager.list_active_matches() == [running.match_id]

    def test_cleanup_only_drops_inactive_matches(self, mage_deck, knight_deck):
        manager = MatchManager()
        running = create(manager, mage_deck, knight_deck)
        done = create(manager, mage_deck, knight_deck, seed="seed-2")
        done.run_to_completion()

        assert manager.cleanup_stale_matches(max_age_seconds=-1) == 1
        assert manager.list_matches() == [running.match_id]

    def test_cleanup_keeps_fresh_matches(self, mage_deck, knight_deck):
        manager = MatchManager()
        create(manager, mage_deck, knight_deck).run_to_completion()

        assert manager.cleanup_stale_matches() == 0
        assert len(manager) == 1
