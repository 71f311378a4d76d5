from __future__ import annotations

from typing import Iterable, Sequence

from .actions import (
    Action,
    AvoidRoomAction,
    ConfirmSelectionAction,
    ResolveMonsterAction,
    SelectCardAction,
    StartNewGameAction,
)
from .game import new_game, start_new_game
from .state import GameConfig, GameState, StepResult
from .turn import avoid_room, confirm_selection, resolve_monster_choice, select_card
from .types import Card


def step(state: GameState, action: Action) -> StepResult:
    """Apply a single command to the game state.

    This mutates `state` in-place but remains deterministic for a given
    (seed, initial deck, action sequence).
    """
    if state.game_over and not isinstance(action, StartNewGameAction):
        return StepResult(ok=False, events=[], error="Game already ended.")

    # Log first so replay has a full record of attempted commands
    state.action_log.append(action)

    if isinstance(action, StartNewGameAction):
        mark = len(state.event_log)
        start_new_game(state, seed=action.seed)
        return StepResult(ok=True, events=state.event_log[mark:])
    if isinstance(action, SelectCardAction):
        return select_card(state, action.index)
    if isinstance(action, ResolveMonsterAction):
        return resolve_monster_choice(state, action.use_weapon)
    if isinstance(action, ConfirmSelectionAction):
        return confirm_selection(state)
    if isinstance(action, AvoidRoomAction):
        return avoid_room(state)
    return StepResult(ok=False, events=[], error="Unknown action.")


def replay(
    seed: int,
    actions: Iterable[Action],
    config: GameConfig | None = None,
    deck: Sequence[Card] | None = None,
) -> GameState:
    state = new_game(seed=seed, config=config, deck=deck)
    for a in actions:
        step(state, a)
    return state
