from __future__ import annotations

import random
from typing import Sequence

from .types import MAX_VALUE, MIN_VALUE, SUITS, Card

# Red suits (potions and weapons) stop at 10: no faces, no aces.
RED_SUIT_MAX_VALUE = 10
DECK_SIZE = 44


def create_deck() -> list[Card]:
    """Build the canonical 44-card dungeon in suit order, values ascending."""
    deck: list[Card] = []
    for suit in SUITS:
        top = RED_SUIT_MAX_VALUE if suit in ("hearts", "diamonds") else MAX_VALUE
        for value in range(MIN_VALUE, top + 1):
            deck.append(Card(suit=suit, value=value))
    return deck


def shuffle_deck(deck: Sequence[Card], rng: random.Random | None = None) -> list[Card]:
    """Return a shuffled copy of `deck`. The input is never mutated."""
    shuffled = list(deck)
    (rng or random.Random()).shuffle(shuffled)
    return shuffled
