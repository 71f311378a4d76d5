from __future__ import annotations

from scoundrel.engine.deck import create_deck
from scoundrel.engine.game import new_game
from scoundrel.engine.serialize import snapshot
from scoundrel.engine.state import GameState
from scoundrel.engine.turn import (
    avoid_room,
    confirm_selection,
    deselect_card,
    resolve_monster_choice,
    select_card,
    selection_limit,
)
from scoundrel.engine.types import Card


def _c(suit: str, value: int) -> Card:
    return Card(suit=suit, value=value)  # type: ignore[arg-type]


def _game_with_room(*front: Card) -> GameState:
    """Full 44-card game whose deck starts with `front` in that order."""
    rest = [c for c in create_deck() if c not in front]
    return new_game(seed=1, deck=list(front) + rest)


def _pick_monster(state: GameState, index: int, use_weapon: bool) -> None:
    assert select_card(state, index).ok
    assert resolve_monster_choice(state, use_weapon).ok


def test_new_game_deals_first_room() -> None:
    state = new_game(seed=42)
    assert len(state.room) == 4
    assert state.deck_size == 40
    assert state.health == 20
    assert state.weapon is None
    assert not state.game_over
    assert state.can_avoid
    assert state.event_log[0] == "Game started. Good luck!"
    assert "Entered a new room with 4 cards." in state.event_log


def test_scenario_weapon_monster_potion() -> None:
    state = _game_with_room(_c("diamonds", 2), _c("spades", 5), _c("hearts", 3), _c("clubs", 10))
    deck_before = state.deck_size

    assert select_card(state, 0).ok
    assert state.weapon == _c("diamonds", 2)  # equipped on select
    _pick_monster(state, 1, use_weapon=True)
    assert select_card(state, 2).ok
    assert state.turn.selection == [0, 1, 2]

    res = confirm_selection(state)
    assert res.ok
    assert state.health == 20
    assert state.weapon == _c("diamonds", 2)
    assert state.weapon_ceiling == 5
    assert state.deck_size == deck_before - 3
    assert state.room[0] == _c("clubs", 10)
    assert len(state.room) == 4
    assert state.discard == [_c("diamonds", 2), _c("spades", 5), _c("hearts", 3)]
    assert any("Took 3 damage. Health: 17/20" in e for e in res.events)
    assert any("Restored 3 health. Health: 20/20" in e for e in res.events)


def test_scenario_death_stops_remaining_actions() -> None:
    state = _game_with_room(_c("spades", 8), _c("clubs", 5), _c("hearts", 4), _c("diamonds", 2))
    state.health = 3

    _pick_monster(state, 0, use_weapon=False)
    assert select_card(state, 2).ok  # potion, must never be drunk
    assert select_card(state, 3).ok

    res = confirm_selection(state)
    assert res.ok
    assert state.game_over
    assert state.survived is False
    assert state.health == -5
    assert state.discard == [_c("spades", 8)]
    # unresolved cards stay in the room
    assert state.room == [_c("clubs", 5), _c("hearts", 4), _c("diamonds", 2)]
    # every black card except the 8 that was fought: 2 * (2 + ... + 14) - 8
    assert state.score == -200
    assert res.events[-1] == "Game Over! You died! Final score: -200"


def test_scenario_victory_after_final_partial_room() -> None:
    deck = [_c("diamonds", 3), _c("spades", 2), _c("clubs", 4), _c("hearts", 5)]
    state = new_game(seed=3, deck=deck)
    assert state.deck_size == 0

    assert select_card(state, 0).ok
    _pick_monster(state, 1, use_weapon=True)
    _pick_monster(state, 2, use_weapon=True)  # 4 > ceiling 2, falls back to barehanded
    assert confirm_selection(state).ok
    assert state.health == 16
    assert state.room == [_c("hearts", 5)]
    assert not state.game_over

    assert selection_limit(state) == 1
    assert select_card(state, 0).ok
    res = confirm_selection(state)
    assert res.ok
    assert state.room == []
    assert state.game_over
    assert state.survived is True
    # 20 health plus the potion that was discarded last
    assert state.health == 20
    assert state.score == 25


def test_victory_without_potion_bonus() -> None:
    deck = [_c("diamonds", 3), _c("spades", 2), _c("hearts", 5), _c("clubs", 4)]
    state = new_game(seed=3, deck=deck)
    assert select_card(state, 0).ok
    _pick_monster(state, 1, use_weapon=True)
    assert select_card(state, 2).ok
    assert confirm_selection(state).ok

    _pick_monster(state, 0, use_weapon=False)
    assert confirm_selection(state).ok
    assert state.game_over and state.survived
    assert state.score == 16


def test_second_potion_in_same_room_has_no_effect() -> None:
    state = _game_with_room(_c("hearts", 2), _c("hearts", 3), _c("hearts", 4), _c("spades", 5))
    state.health = 10
    for i in range(3):
        assert select_card(state, i).ok
    res = confirm_selection(state)
    assert res.ok
    assert state.health == 12
    assert state.discard == [_c("hearts", 2), _c("hearts", 3), _c("hearts", 4)]
    assert sum("only use one potion per turn" in e for e in res.events) == 2
    # new room, fresh potion allowance
    assert not state.potion_used_this_turn


def test_healing_is_capped() -> None:
    state = _game_with_room(_c("hearts", 9), _c("clubs", 2), _c("clubs", 3), _c("clubs", 4))
    state.health = 15
    assert select_card(state, 0).ok
    _pick_monster(state, 1, use_weapon=False)
    _pick_monster(state, 2, use_weapon=False)
    assert confirm_selection(state).ok
    assert state.health == 20 - 2 - 3


def test_monsters_share_weapon_history_in_order() -> None:
    state = _game_with_room(_c("diamonds", 5), _c("spades", 9), _c("clubs", 10), _c("hearts", 2))
    assert select_card(state, 0).ok
    _pick_monster(state, 1, use_weapon=True)
    _pick_monster(state, 2, use_weapon=True)

    res = confirm_selection(state)
    assert res.ok
    assert state.health == 20 - 4 - 10
    assert state.weapon_defeated == [_c("spades", 9)]
    assert any("can't be used against the 10 of clubs" in e for e in res.events)


def test_monster_selection_waits_for_choice() -> None:
    state = _game_with_room(_c("spades", 6), _c("hearts", 2), _c("hearts", 3), _c("clubs", 4))
    res = select_card(state, 0)
    assert res.ok
    assert state.turn.phase == "awaiting_monster_choice"
    assert state.turn.selection == []

    assert not select_card(state, 1).ok
    assert not confirm_selection(state).ok
    assert not avoid_room(state).ok

    assert resolve_monster_choice(state, False).ok
    assert state.turn.phase == "idle"
    assert state.turn.selection == [0]
    assert state.turn.pending[0].use_weapon is False
    assert not resolve_monster_choice(state, True).ok


def test_fourth_selection_is_silent_noop() -> None:
    state = _game_with_room(_c("hearts", 2), _c("hearts", 3), _c("hearts", 4), _c("spades", 5))
    for i in range(3):
        select_card(state, i)
    before = snapshot(state)
    res = select_card(state, 3)
    assert res.ok
    assert res.events == []
    assert snapshot(state) == before
    assert state.turn.phase == "idle"


def test_deselect_removes_pending_action() -> None:
    state = _game_with_room(_c("spades", 6), _c("hearts", 2), _c("hearts", 3), _c("clubs", 4))
    _pick_monster(state, 0, use_weapon=True)
    select_card(state, 1)
    res = select_card(state, 0)  # toggles off
    assert res.ok
    assert state.turn.selection == [1]
    assert [a.index for a in state.turn.pending] == [1]
    assert res.events == ["Deselected: 6 of spades (Monster) - Was using weapon."]
    assert not deselect_card(state, 2).ok


def test_deselecting_weapon_restores_previous_weapon() -> None:
    state = _game_with_room(_c("diamonds", 5), _c("hearts", 2), _c("hearts", 3), _c("clubs", 4))
    state.weapon = _c("diamonds", 9)
    state.weapon_defeated = [_c("spades", 7)]

    select_card(state, 0)
    assert state.weapon == _c("diamonds", 5)
    assert state.weapon_defeated == []

    res = select_card(state, 0)
    assert res.ok
    assert state.weapon == _c("diamonds", 9)
    assert state.weapon_defeated == [_c("spades", 7)]
    assert res.events == ["Deselected: 5 of diamonds. Previous weapon restored."]


def test_weapon_undo_is_single_level() -> None:
    state = _game_with_room(_c("diamonds", 5), _c("diamonds", 7), _c("hearts", 3), _c("clubs", 4))
    state.weapon = _c("diamonds", 10)
    state.weapon_defeated = [_c("spades", 6)]

    select_card(state, 0)
    select_card(state, 1)
    assert state.weapon == _c("diamonds", 7)

    select_card(state, 1)
    assert state.weapon == _c("diamonds", 5)
    # the 10 is gone for good: only the latest swap could be undone
    select_card(state, 0)
    assert state.weapon == _c("diamonds", 5)
    assert state.turn.selection == []


def test_confirm_requires_three_cards() -> None:
    state = _game_with_room(_c("hearts", 2), _c("hearts", 3), _c("hearts", 4), _c("spades", 5))
    select_card(state, 0)
    select_card(state, 1)
    before = snapshot(state)
    res = confirm_selection(state)
    assert not res.ok
    assert res.error == "Select 3 cards to proceed."
    assert snapshot(state) == before


def test_confirm_keeps_unselected_card() -> None:
    state = _game_with_room(_c("hearts", 2), _c("hearts", 3), _c("hearts", 4), _c("spades", 5))
    next_three = state.deck[:3]
    select_card(state, 3)
    resolve_monster_choice(state, False)
    select_card(state, 2)
    select_card(state, 0)
    res = confirm_selection(state)
    assert res.ok
    assert res.events[0] == "Card 3 of hearts will be retained for the next room."
    assert state.room == [_c("hearts", 3)] + next_three
    assert state.turn.selection == []
    assert state.turn.pending == []
    assert state.turn.retained_index is None


def test_avoid_room_rotates_cards_to_bottom() -> None:
    front = (_c("spades", 14), _c("clubs", 13), _c("spades", 12), _c("clubs", 11))
    state = _game_with_room(*front)
    next_four = state.deck[:4]

    res = avoid_room(state)
    assert res.ok
    assert state.room == next_four
    assert state.deck[-4:] == list(front)
    assert state.deck_size == 40
    assert state.avoided_last_turn
    assert not state.can_avoid

    before = snapshot(state)
    res2 = avoid_room(state)
    assert not res2.ok
    assert res2.error == "You cannot avoid rooms twice in a row."
    assert snapshot(state) == before


def test_avoid_allowed_again_after_confirm() -> None:
    state = new_game(seed=11, deck=create_deck())
    assert avoid_room(state).ok
    for i in range(3):
        card = state.room[i]
        select_card(state, i)
        if card.is_monster:
            resolve_monster_choice(state, False)
    assert confirm_selection(state).ok
    assert not state.avoided_last_turn
    assert avoid_room(state).ok


def test_avoid_rejected_with_selection() -> None:
    state = _game_with_room(_c("diamonds", 5), _c("hearts", 2), _c("hearts", 3), _c("clubs", 4))
    select_card(state, 0)
    res = avoid_room(state)
    assert not res.ok
    assert state.room[0] == _c("diamonds", 5)
    assert state.deck_size == 40


def test_commands_rejected_after_game_over() -> None:
    state = _game_with_room(_c("spades", 14), _c("hearts", 2), _c("hearts", 3), _c("clubs", 4))
    state.health = 1
    _pick_monster(state, 0, use_weapon=False)
    select_card(state, 1)
    select_card(state, 2)
    assert confirm_selection(state).ok
    assert state.game_over

    assert not select_card(state, 0).ok
    assert not avoid_room(state).ok
    assert not confirm_selection(state).ok


def test_weapon_usable_against_matches_resolver() -> None:
    state = _game_with_room(_c("hearts", 2), _c("hearts", 3), _c("hearts", 4), _c("spades", 5))
    assert not state.weapon_usable_against(_c("spades", 2))
    state.weapon = _c("diamonds", 4)
    assert state.weapon_usable_against(_c("spades", 14))
    state.weapon_defeated = [_c("clubs", 8)]
    assert state.weapon_usable_against(_c("spades", 8))
    assert not state.weapon_usable_against(_c("spades", 9))
