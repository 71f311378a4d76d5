from __future__ import annotations

from .game import end_game, fill_room, resolve_card
from .state import GameState, PendingAction, StepResult, WeaponSnapshot


def _reject(msg: str) -> StepResult:
    return StepResult(ok=False, events=[], error=msg)


def _done(state: GameState, mark: int) -> StepResult:
    return StepResult(ok=True, events=state.event_log[mark:])


def _check_selectable(state: GameState, index: int) -> StepResult | None:
    if state.game_over:
        return _reject("Game already ended.")
    if state.turn.phase == "committing":
        return _reject("Turn is being processed.")
    if state.turn.phase == "awaiting_monster_choice":
        return _reject("Choose how to fight the pending monster first.")
    if index < 0 or index >= len(state.room):
        return _reject("Invalid room index.")
    return None


def selection_limit(state: GameState) -> int:
    """Cards to pick this turn. The final partial room must be cleared entirely."""
    cfg = state.config
    if state.deck or len(state.room) >= cfg.room_size:
        return cfg.picks_per_room
    return len(state.room)


def _ready_to_commit(state: GameState) -> bool:
    picked = len(state.turn.selection)
    if len(state.room) == state.config.room_size:
        return picked == state.config.picks_per_room
    return not state.deck and 0 < len(state.room) == picked


def select_card(state: GameState, index: int) -> StepResult:
    """Select the room card at `index`; selecting it again deselects it.

    Weapons are equipped immediately so the player sees the new weapon while
    choosing how to fight monsters. Monsters are not selected until the
    weapon-or-barehanded decision arrives via resolve_monster_choice().
    """
    err = _check_selectable(state, index)
    if err:
        return err
    turn = state.turn
    if index in turn.selection:
        return deselect_card(state, index)
    if len(turn.selection) >= selection_limit(state):
        return StepResult(ok=True, events=[])

    mark = len(state.event_log)
    card = state.room[index]
    if card.role == "monster":
        turn.phase = "awaiting_monster_choice"
        turn.pending_monster = index
        state.emit(f"Monster encountered: {card.label}. Fight with your weapon or barehanded?")
        return _done(state, mark)

    if card.role == "weapon":
        turn.weapon_snapshot = WeaponSnapshot(weapon=state.weapon, defeated=tuple(state.weapon_defeated))
        state.weapon = card
        state.weapon_defeated = []
        state.emit(f"Selected: {card.label} as your weapon.")
    else:
        state.emit(f"Selected: {card.label} (Health Potion)")

    turn.selection.append(index)
    turn.pending.append(PendingAction(card=card, index=index))
    return _done(state, mark)


def deselect_card(state: GameState, index: int) -> StepResult:
    err = _check_selectable(state, index)
    if err:
        return err
    turn = state.turn
    if index not in turn.selection:
        return _reject("Card is not selected.")

    mark = len(state.event_log)
    card = state.room[index]
    removed = next((a for a in turn.pending if a.index == index), None)
    turn.selection.remove(index)
    turn.pending = [a for a in turn.pending if a.index != index]

    if card.role == "weapon":
        snap = turn.weapon_snapshot
        if snap is not None:
            state.weapon = snap.weapon
            state.weapon_defeated = list(snap.defeated)
            turn.weapon_snapshot = None
            state.emit(f"Deselected: {card.label}. Previous weapon restored.")
        else:
            state.emit(f"Deselected: {card.label}.")
    elif card.role == "potion":
        state.emit(f"Deselected: {card.label} (Health Potion).")
    elif removed is not None and removed.use_weapon:
        state.emit(f"Deselected: {card.label} (Monster) - Was using weapon.")
    else:
        state.emit(f"Deselected: {card.label} (Monster) - Was fighting barehanded.")
    return _done(state, mark)


def resolve_monster_choice(state: GameState, use_weapon: bool) -> StepResult:
    if state.game_over:
        return _reject("Game already ended.")
    turn = state.turn
    if turn.phase != "awaiting_monster_choice" or turn.pending_monster is None:
        return _reject("No monster is waiting for a decision.")

    mark = len(state.event_log)
    index = turn.pending_monster
    card = state.room[index]
    turn.selection.append(index)
    turn.pending.append(PendingAction(card=card, index=index, use_weapon=use_weapon))
    turn.pending_monster = None
    turn.phase = "idle"
    state.emit(f"Selected: {card.label} (Monster) - {'Using weapon' if use_weapon else 'Barehanded'}")
    return _done(state, mark)


def confirm_selection(state: GameState) -> StepResult:
    """Resolve the selected cards in selection order and move to the next room."""
    if state.game_over:
        return _reject("Game already ended.")
    turn = state.turn
    if turn.phase == "awaiting_monster_choice":
        return _reject("Choose how to fight the pending monster first.")
    if turn.phase != "idle":
        return _reject("Turn is being processed.")
    if not _ready_to_commit(state):
        return _reject(f"Select {selection_limit(state)} cards to proceed.")

    mark = len(state.event_log)
    turn.phase = "committing"
    unselected = [i for i in range(len(state.room)) if i not in turn.selection]
    turn.retained_index = unselected[0] if unselected else None
    carried = [state.room[i] for i in unselected]
    if carried:
        state.emit(f"Card {carried[0].label} will be retained for the next room.")

    # Changes are committed now; no more weapon rollback.
    turn.weapon_snapshot = None
    state.emit("Processing turn...")

    resolved: set[int] = set()
    for action in list(turn.pending):
        resolve_card(state, action)
        resolved.add(action.index)
        if state.health <= 0:
            state.room = [c for i, c in enumerate(state.room) if i not in resolved]
            turn.reset()
            end_game(state, survived=False)
            return _done(state, mark)

    state.room = carried
    turn.reset()
    state.avoided_last_turn = False
    fill_room(state)

    if not state.room:
        end_game(state, survived=True)
    elif carried:
        state.emit(f"Entered a new room with {len(state.room)} cards, including 1 retained card.")
    else:
        state.emit(f"Entered a new room with {len(state.room)} cards.")
    return _done(state, mark)


def avoid_room(state: GameState) -> StepResult:
    """Send the whole room to the bottom of the deck and deal a fresh one."""
    if state.game_over:
        return _reject("Game already ended.")
    if state.turn.phase != "idle" or state.turn.selection:
        return _reject("Deselect all cards before avoiding the room.")
    if state.avoided_last_turn:
        return _reject("You cannot avoid rooms twice in a row.")
    if not state.room:
        return _reject("There is no room to avoid.")

    mark = len(state.event_log)
    state.emit("Avoiding this room...")
    state.deck.extend(state.room)
    state.room = []
    state.avoided_last_turn = True
    fill_room(state)
    state.emit("Room avoided. All cards were placed at the bottom of the deck.")
    state.emit(f"Entered a new room with {len(state.room)} cards.")
    return _done(state, mark)
