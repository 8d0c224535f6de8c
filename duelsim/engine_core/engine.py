"""
Engine - Game creation, terminal checks and the per-step driver.

process_game_step is the one entry point a driver calls repeatedly:
check for a result, run the current phase, verify invariants. The state
is mutated in place; callers wanting a snapshot take deep_copy() first.
"""

from __future__ import annotations
from typing import Callable, Sequence, TYPE_CHECKING
import logging
import time

from .action import ActionLog
from .cards import Card, CardTemplate, Faction, TacticsType, instantiate_cards
from .constants import RULES
from .effect_resolver import EffectResolver
from .invariants import assert_no_lingering_dead
from .phases import PhaseMachine
from .rng import SeededRandom
from .state import EndReason, GamePhase, GameResult, GameState, PlayerState
from ..config import get_settings

if TYPE_CHECKING:
    from ..bots.policy import AIPolicy

logger = logging.getLogger(__name__)


def _as_cards(deck: Sequence[Card | CardTemplate], player_id: str) -> list[Card]:
    if all(isinstance(c, Card) for c in deck):
        return list(deck)
    templates = [c.template if isinstance(c, Card) else c for c in deck]
    return instantiate_cards(templates, player_id)


def create_initial_game_state(
    game_id: str,
    player1_deck: Sequence[Card | CardTemplate],
    player2_deck: Sequence[Card | CardTemplate],
    player1_faction: Faction,
    player2_faction: Faction,
    player1_tactics: TacticsType,
    player2_tactics: TacticsType,
    random_seed: str,
    clock: Callable[[], float] | None = None,
) -> GameState:
    """
    Build a fresh game.

    The first player is rolled before either deck is shuffled; each deck
    is then shuffled and its first cards dealt as the opening hand.
    """
    rng = SeededRandom(random_seed)
    first_player = "player1" if rng.next() < 0.5 else "player2"

    def create_player(player_id, deck, faction, tactics) -> PlayerState:
        shuffled = rng.shuffle(_as_cards(deck, player_id))
        return PlayerState(
            player_id=player_id,
            faction=faction,
            tactics=tactics,
            hand=shuffled[:RULES.initial_hand_size],
            deck=shuffled[RULES.initial_hand_size:],
        )

    state = GameState(
        game_id=game_id,
        players={
            "player1": create_player("player1", player1_deck, player1_faction, player1_tactics),
            "player2": create_player("player2", player2_deck, player2_faction, player2_tactics),
        },
        current_player=first_player,
        turn_number=1,
        phase=GamePhase.DRAW,
        action_log=ActionLog(clock),
        random_seed=random_seed,
    )
    state.action_log.add_phase_change(first_player, GamePhase.DRAW.value, GamePhase.DRAW.value)
    logger.info("Game %s created (seed=%s, first=%s)", game_id, random_seed, first_player)
    return state


def _result(state: GameState, winner: str | None, reason: EndReason) -> GameResult:
    now = time.time()
    return GameResult(
        winner=winner,
        reason=reason,
        total_turns=state.turn_number,
        duration_seconds=float(int(now - state.start_time)),
        end_time=now,
    )


def check_game_end(state: GameState) -> GameResult | None:
    """
    Terminal check applied between steps.

    Life at or below zero on either side ends the game (both sides is a
    draw). Past the turn limit, the higher life total wins.
    """
    life1 = state.players["player1"].life
    life2 = state.players["player2"].life

    if life1 <= 0 and life2 <= 0:
        return _result(state, None, EndReason.LIFE_ZERO)
    if life1 <= 0:
        return _result(state, "player2", EndReason.LIFE_ZERO)
    if life2 <= 0:
        return _result(state, "player1", EndReason.LIFE_ZERO)

    if state.turn_number > RULES.turn_limit:
        if life1 > life2:
            winner = "player1"
        elif life2 > life1:
            winner = "player2"
        else:
            winner = None
        return _result(state, winner, EndReason.TIMEOUT)

    return None


class GameEngine:
    """
    Wires the effect resolver, phase machine and AI policy together.

    Usage:
        engine = GameEngine()
        state = create_initial_game_state(...)
        engine.run(state)
        print(state.result.winner)
    """

    def __init__(
        self,
        policy: AIPolicy | None = None,
        strict: bool | None = None,
        max_steps: int | None = None,
    ):
        if policy is None:
            from ..bots.policy import HeuristicPolicy
            policy = HeuristicPolicy()
        settings = get_settings()
        self.policy = policy
        self.strict = settings.strict_invariants if strict is None else strict
        self.max_steps = settings.max_steps if max_steps is None else max_steps
        self.resolver = EffectResolver()
        self.machine = PhaseMachine(self.resolver, self.policy)

    def finish_if_over(self, state: GameState) -> bool:
        if state.result is None:
            state.result = check_game_end(state)
            if state.result is not None:
                logger.info(
                    "Game %s over: winner=%s reason=%s turns=%d",
                    state.game_id, state.result.winner, state.result.reason.value,
                    state.result.total_turns,
                )
        return state.result is not None

    def verify(self, state: GameState) -> None:
        assert_no_lingering_dead(state, self.resolver.deaths, strict=self.strict)

    def step(self, state: GameState) -> GameState:
        """Advance one phase, unless the game has already ended."""
        if self.finish_if_over(state):
            return state
        self.machine.process_phase(state)
        self.verify(state)
        return state

    def run(self, state: GameState) -> GameState:
        steps = 0
        while state.result is None and steps < self.max_steps:
            self.step(state)
            steps += 1

        if state.result is None:
            logger.warning("Game %s hit the step cap (%d); forcing timeout", state.game_id, self.max_steps)
            self.force_timeout(state)
        return state

    def force_timeout(self, state: GameState) -> GameResult:
        state.result = _result(state, None, EndReason.TIMEOUT)
        return state.result


def process_game_step(state: GameState, engine: GameEngine | None = None) -> GameState:
    return (engine or GameEngine()).step(state)


def execute_full_game(
    game_id: str,
    player1_deck: Sequence[Card | CardTemplate],
    player2_deck: Sequence[Card | CardTemplate],
    player1_faction: Faction,
    player2_faction: Faction,
    player1_tactics: TacticsType,
    player2_tactics: TacticsType,
    random_seed: str,
    engine: GameEngine | None = None,
    clock: Callable[[], float] | None = None,
) -> GameState:
    """Create a game and run it to a terminal result."""
    state = create_initial_game_state(
        game_id,
        player1_deck,
        player2_deck,
        player1_faction,
        player2_faction,
        player1_tactics,
        player2_tactics,
        random_seed,
        clock=clock,
    )
    return (engine or GameEngine()).run(state)
