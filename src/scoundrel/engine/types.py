from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

Suit = Literal["hearts", "diamonds", "clubs", "spades"]
Role = Literal["potion", "weapon", "monster"]
CardDisplay = Literal["2", "3", "4", "5", "6", "7", "8", "9", "10", "J", "Q", "K", "A"]

SUITS: tuple[Suit, ...] = ("hearts", "diamonds", "clubs", "spades")
MIN_VALUE = 2
MAX_VALUE = 14

_DISPLAY: dict[int, CardDisplay] = {
    2: "2",
    3: "3",
    4: "4",
    5: "5",
    6: "6",
    7: "7",
    8: "8",
    9: "9",
    10: "10",
    11: "J",
    12: "Q",
    13: "K",
    14: "A",
}

_ROLES: dict[Suit, Role] = {
    "hearts": "potion",
    "diamonds": "weapon",
    "clubs": "monster",
    "spades": "monster",
}


def role_for_suit(suit: Suit) -> Role:
    return _ROLES[suit]


@dataclass(frozen=True)
class Card:
    """A single dungeon card. Equality is structural (suit + value)."""

    suit: Suit
    value: int

    def __post_init__(self) -> None:
        if self.suit not in _ROLES:
            raise ValueError(f"Unknown suit: {self.suit!r}")
        if not MIN_VALUE <= self.value <= MAX_VALUE:
            raise ValueError(f"Card value out of range: {self.value}")

    @property
    def display(self) -> CardDisplay:
        return _DISPLAY[self.value]

    @property
    def role(self) -> Role:
        return role_for_suit(self.suit)

    @property
    def is_monster(self) -> bool:
        return self.role == "monster"

    @property
    def label(self) -> str:
        return f"{self.display} of {self.suit}"

    def __str__(self) -> str:
        return self.label
