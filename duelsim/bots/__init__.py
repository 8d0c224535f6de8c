"""
Bots module - Automated players for the simulation.

Provides:
- AIPolicy: Interface for deployment and attack decisions
- HeuristicPolicy: Tactics and faction aware default
- CardEvaluator: Scores hand cards
- TacticsProfile: Per-tactics scoring weights
"""

from .policy import AIPolicy, AttackChoice, HeuristicPolicy, GreedyPolicy, FaceAttackPolicy
from .evaluator import CardEvaluator, EvaluationWeights
from .personality import TacticsProfile, PROFILES, get_profile

__all__ = [
    "AIPolicy",
    "AttackChoice",
    "HeuristicPolicy",
    "GreedyPolicy",
    "FaceAttackPolicy",
    "CardEvaluator",
    "EvaluationWeights",
    "TacticsProfile",
    "PROFILES",
    "get_profile",
]
