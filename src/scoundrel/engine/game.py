from __future__ import annotations

import random
from typing import Sequence

from .combat import resolve_combat
from .deck import create_deck, shuffle_deck
from .state import GameConfig, GameState, PendingAction
from .types import Card


def _fresh_seed() -> int:
    return random.randrange(2**31)


def fill_room(state: GameState) -> int:
    """Top the room up from the deck front. Returns the number of cards drawn."""
    drawn = 0
    while len(state.room) < state.config.room_size and state.deck:
        state.room.append(state.deck.pop(0))
        drawn += 1
    state.potion_used_this_turn = False
    return drawn


def start_new_game(state: GameState, seed: int | None = None, deck: Sequence[Card] | None = None) -> None:
    """Reset `state` in place and deal the first room.

    Without an explicit seed the next one is drawn from the game's own RNG,
    so a replayed action log reproduces every restart.
    """
    if seed is None:
        seed = state.rng.randrange(2**31)
    state.seed = seed
    state.rng = random.Random(seed)

    if deck is None:
        state.deck = shuffle_deck(create_deck(), state.rng)
    else:
        if len(set(deck)) != len(deck):
            raise ValueError("Deck contains duplicate cards.")
        state.deck = list(deck)

    state.room = []
    state.discard = []
    state.health = state.config.max_health
    state.weapon = None
    state.weapon_defeated = []
    state.potion_used_this_turn = False
    state.avoided_last_turn = False
    state.turn.reset()
    state.game_over = False
    state.survived = None
    state.score = 0

    state.emit("Game started. Good luck!")
    fill_room(state)
    state.emit(f"Entered a new room with {len(state.room)} cards.")
    if not state.room:
        end_game(state, survived=True)


def new_game(
    seed: int | None = None,
    config: GameConfig | None = None,
    deck: Sequence[Card] | None = None,
) -> GameState:
    """Create a game. An explicit `deck` is dealt in the given order, unshuffled."""
    cfg = config or GameConfig()
    if seed is None:
        seed = _fresh_seed()
    state = GameState(config=cfg, seed=seed, rng=random.Random(seed), health=cfg.max_health)
    start_new_game(state, seed=seed, deck=deck)
    return state


def _drink_potion(state: GameState, card: Card) -> None:
    if state.potion_used_this_turn:
        state.emit(f"Discarded {card.label} - You can only use one potion per turn.")
        return
    before = state.health
    state.health = min(state.config.max_health, state.health + card.value)
    state.potion_used_this_turn = True
    state.emit(
        f"Used {card.label} - Restored {state.health - before} health. "
        f"Health: {state.health}/{state.config.max_health}"
    )


def _fight_monster(state: GameState, card: Card, use_weapon: bool) -> None:
    before = len(state.weapon_defeated)
    outcome = resolve_combat(card, state.weapon, state.weapon_defeated, use_weapon)
    state.weapon_defeated = list(outcome.defeated)
    state.health -= outcome.damage
    hp = f"Health: {state.health}/{state.config.max_health}"

    if outcome.mode == "weapon":
        if len(outcome.defeated) > before:
            state.emit(f"Your weapon can now defeat monsters up to value {card.value}.")
        state.emit(f"Used weapon to defeat {card.label}. Took {outcome.damage} damage. {hp}")
    elif outcome.mode == "weapon_rejected":
        state.emit(f"Your weapon can't be used against the {card.label}. You must fight barehanded.")
        state.emit(f"Fought {card.label} barehanded. Took {outcome.damage} damage. {hp}")
    elif state.weapon is None:
        state.emit(f"No weapon! Fought {card.label} barehanded. Took {outcome.damage} damage. {hp}")
    else:
        state.emit(f"Fought {card.label} barehanded. Took {outcome.damage} damage. {hp}")


def resolve_card(state: GameState, action: PendingAction) -> None:
    """Apply one committed card. The caller checks for death afterwards."""
    card = action.card
    state.discard.append(card)
    if card.role == "potion":
        _drink_potion(state, card)
    elif card.role == "weapon":
        # Equipped when selected; nothing left to do but confirm.
        state.emit(f"Confirmed {card.label} as your weapon.")
    else:
        _fight_monster(state, card, bool(action.use_weapon))


def monster_penalty(cards: Sequence[Card]) -> int:
    return sum(c.value for c in cards if c.is_monster)


def end_game(state: GameState, survived: bool) -> None:
    if state.game_over:
        return
    if survived:
        score = state.health
        last = state.discard_top
        if last is not None and last.role == "potion":
            score += last.value
        state.emit(f"Victory! You survived the dungeon with {state.health} health. Final score: {score}")
    else:
        score = -(monster_penalty(state.deck) + monster_penalty(state.room))
        state.emit(f"Game Over! You died! Final score: {score}")
    state.score = score
    state.survived = survived
    state.game_over = True
