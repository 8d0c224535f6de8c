"""
Pytest fixtures for Duelsim tests.
"""

import logging

import pytest

from ..bots.policy import GreedyPolicy
from ..catalog import get_sample_deck, resolve_templates
from ..engine_core.effect_resolver import EffectResolver
from ..engine_core.phases import PhaseMachine
from ..engine_core.state import GamePhase, GameState
from .helpers import make_state


@pytest.fixture(autouse=True)
def strict_invariants(monkeypatch):
    """Run every test with strict invariant checks regardless of the shell."""
    monkeypatch.setenv("DUELSIM_ENV", "development")
    for name in ("DUELSIM_STRICT_INVARIANTS", "DUELSIM_MAX_STEPS", "DUELSIM_LOG_LEVEL", "ALLOWED_ORIGINS"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def state() -> GameState:
    """Empty board in player1's deploy phase, turn 3."""
    return make_state()


@pytest.fixture
def battle_state() -> GameState:
    """Empty board in player1's battle phase, turn 3."""
    return make_state(phase=GamePhase.BATTLE)


@pytest.fixture
def resolver() -> EffectResolver:
    return EffectResolver()


@pytest.fixture
def policy() -> GreedyPolicy:
    return GreedyPolicy()


@pytest.fixture
def machine(resolver, policy) -> PhaseMachine:
    return PhaseMachine(resolver, policy)


@pytest.fixture
def mage_deck():
    return resolve_templates(get_sample_deck("mage").card_ids)


@pytest.fixture
def knight_deck():
    return resolve_templates(get_sample_deck("knight").card_ids)


@pytest.fixture
def package_logger():
    """The duelsim logger with its handlers and level restored afterwards."""
    logger = logging.getLogger("duelsim")
    saved_handlers, saved_level = list(logger.handlers), logger.level
    logger.handlers = []
    yield logger
    logger.handlers = saved_handlers
    logger.setLevel(saved_level)
