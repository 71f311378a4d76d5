"""Deterministic, headless rules engine for Scoundrel.

IMPORTANT: This package must never do file or console I/O.
"""

from .actions import (
    AvoidRoomAction,
    ConfirmSelectionAction,
    ResolveMonsterAction,
    SelectCardAction,
    StartNewGameAction,
)
from .commands import replay, step
from .deck import create_deck, shuffle_deck
from .game import new_game, start_new_game
from .state import GameConfig, GameState, StepResult
from .types import Card, Role, Suit

__all__ = [
    "AvoidRoomAction",
    "Card",
    "ConfirmSelectionAction",
    "GameConfig",
    "GameState",
    "ResolveMonsterAction",
    "Role",
    "SelectCardAction",
    "StartNewGameAction",
    "StepResult",
    "Suit",
    "create_deck",
    "new_game",
    "replay",
    "shuffle_deck",
    "start_new_game",
    "step",
]
