"""
Game Loop - Step driver for a running match.

One call to step() does one of:
1. Run a whole non-battle phase (draw, energy, deploy, end)
2. Pull one record out of the battle iterator
3. Close out a finished battle phase and advance to end

The terminal check is only applied between phases, never in the middle
of a battle, so a stepped game and a game run in one go write the same
action log.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING
import logging

from ..engine_core.combat import BattleIterator
from ..engine_core.state import GamePhase

if TYPE_CHECKING:
    from ..engine_core.action import GameAction
    from ..engine_core.engine import GameEngine
    from ..engine_core.state import GameState

logger = logging.getLogger(__name__)


class LoopState(Enum):
    """State of the game loop."""
    READY = "ready"
    IN_BATTLE = "in_battle"
    GAME_OVER = "game_over"


@dataclass
class StepResult:
    """
    Outcome of one step.

    actions holds the records the step produced: the one record pulled
    mid-battle, otherwise everything appended during the step.
    """
    loop_state: LoopState
    phase: GamePhase
    turn_number: int
    current_player: str
    actions: list[GameAction] = field(default_factory=list)
    phase_completed: bool = False
    winner: str | None = None

    @property
    def is_over(self) -> bool:
        return self.loop_state == LoopState.GAME_OVER


class GameLoop:
    """
    Drives one GameState with a GameEngine.

    Usage:
        loop = GameLoop(state, engine)
        while not loop.step().is_over:
            render(...)

    With step_combat=False a battle phase is run in a single step.
    """

    def __init__(self, state: GameState, engine: GameEngine, step_combat: bool = True):
        self.state = state
        self.engine = engine
        self.step_combat = step_combat
        self.phase_steps = 0
        self._battle: BattleIterator | None = None

    @property
    def loop_state(self) -> LoopState:
        if self.state.result is not None:
            return LoopState.GAME_OVER
        if self._battle is not None:
            return LoopState.IN_BATTLE
        return LoopState.READY

    def step(self) -> StepResult:
        state = self.state
        mark = len(state.action_log)

        if self._battle is None and self.engine.finish_if_over(state):
            return self._result(mark, False)

        if state.phase == GamePhase.BATTLE and self.step_combat:
            action = self._step_battle()
            if action is not None:
                return self._result(mark, False, actions=[action])
        else:
            self.engine.step(state)

        self.phase_steps += 1
        self.engine.finish_if_over(state)
        return self._result(mark, True)

    def _step_battle(self) -> GameAction | None:
        """
        Pull one battle record.

        Returns None once the iterator is exhausted and the phase has been
        closed out.
        """
        if self._battle is None:
            self._battle = BattleIterator(self.state, self.engine.resolver, self.engine.policy)

        try:
            return next(self._battle)
        except StopIteration:
            self._battle = None

        self.engine.machine.advance_phase(self.state)
        self.engine.verify(self.state)
        return None

    def run_to_completion(self) -> GameState:
        """Step until a result exists or the phase-step cap is reached."""
        while self.state.result is None:
            if self.phase_steps >= self.engine.max_steps:
                logger.warning(
                    "Game %s hit the step cap (%d); forcing timeout",
                    self.state.game_id, self.engine.max_steps,
                )
                self.engine.force_timeout(self.state)
                break
            self.step()
        return self.state

    def close(self) -> None:
        """Abandon a battle in progress."""
        if self._battle is not None:
            self._battle.close()
            self._battle = None

    def _result(self, mark: int, completed: bool, actions: list[GameAction] | None = None) -> StepResult:
        state = self.state
        return StepResult(
            loop_state=self.loop_state,
            phase=state.phase,
            turn_number=state.turn_number,
            current_player=state.current_player,
            actions=state.action_log.since(mark) if actions is None else actions,
            phase_completed=completed,
            winner=state.result.winner if state.result else None,
        )
