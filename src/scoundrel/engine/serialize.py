from __future__ import annotations

from .actions import (
    Action,
    AvoidRoomAction,
    ConfirmSelectionAction,
    ResolveMonsterAction,
    SelectCardAction,
    StartNewGameAction,
)
from .state import GameState, PendingAction
from .turn import selection_limit
from .types import Card


def card_to_dict(c: Card | None) -> dict[str, object] | None:
    if c is None:
        return None
    return {"suit": c.suit, "value": c.value, "display": c.display}


def action_to_dict(a: Action) -> dict[str, object]:
    if isinstance(a, StartNewGameAction):
        return {"type": "new_game", "seed": a.seed}
    if isinstance(a, SelectCardAction):
        return {"type": "select", "index": a.index}
    if isinstance(a, ResolveMonsterAction):
        return {"type": "resolve_monster", "use_weapon": a.use_weapon}
    if isinstance(a, ConfirmSelectionAction):
        return {"type": "confirm"}
    if isinstance(a, AvoidRoomAction):
        return {"type": "avoid"}
    # should be unreachable
    return {"type": "unknown"}


def _pending_to_dict(p: PendingAction) -> dict[str, object]:
    return {"index": p.index, "card": card_to_dict(p.card), "use_weapon": p.use_weapon}


def snapshot(state: GameState) -> dict[str, object]:
    """Return a JSON-serializable canonical snapshot of everything a display layer reads."""
    turn = state.turn
    return {
        "seed": state.seed,
        "deck_size": state.deck_size,
        "room": [card_to_dict(c) for c in state.room],
        "discard_top": card_to_dict(state.discard_top),
        "discard_size": len(state.discard),
        "health": state.health,
        "max_health": state.config.max_health,
        "weapon": card_to_dict(state.weapon),
        "weapon_ceiling": state.weapon_ceiling,
        "weapon_defeated": [card_to_dict(c) for c in state.weapon_defeated],
        "potion_used_this_turn": state.potion_used_this_turn,
        "can_avoid": state.can_avoid,
        "turn": {
            "phase": turn.phase,
            "selection": list(turn.selection),
            "selection_limit": selection_limit(state),
            "pending": [_pending_to_dict(p) for p in turn.pending],
            "pending_monster": turn.pending_monster,
            "retained_index": turn.retained_index,
        },
        "game_over": state.game_over,
        "survived": state.survived,
        "score": state.score,
        "action_log": [action_to_dict(a) for a in state.action_log],
    }
