from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Literal

from .actions import Action
from .combat import can_use_weapon, defeat_ceiling
from .types import Card

TurnPhase = Literal["idle", "awaiting_monster_choice", "committing"]


@dataclass(frozen=True)
class GameConfig:
    max_health: int = 20
    room_size: int = 4
    picks_per_room: int = 3

    def __post_init__(self) -> None:
        if self.max_health <= 0:
            raise ValueError("max_health must be positive.")
        if not 0 < self.picks_per_room < self.room_size:
            raise ValueError("picks_per_room must leave at least one card in the room.")


@dataclass(frozen=True)
class PendingAction:
    card: Card
    index: int
    use_weapon: bool | None = None  # only set for monsters


@dataclass(frozen=True)
class WeaponSnapshot:
    weapon: Card | None
    defeated: tuple[Card, ...]


@dataclass
class TurnState:
    phase: TurnPhase = "idle"
    selection: list[int] = field(default_factory=list)
    pending: list[PendingAction] = field(default_factory=list)
    pending_monster: int | None = None
    # Depth-1 undo: a second weapon selection overwrites the first snapshot.
    weapon_snapshot: WeaponSnapshot | None = None
    retained_index: int | None = None

    def reset(self) -> None:
        self.phase = "idle"
        self.selection.clear()
        self.pending.clear()
        self.pending_monster = None
        self.weapon_snapshot = None
        self.retained_index = None


@dataclass
class StepResult:
    ok: bool
    events: list[str]
    error: str | None = None


@dataclass
class GameState:
    config: GameConfig
    seed: int
    rng: random.Random
    deck: list[Card] = field(default_factory=list)
    room: list[Card] = field(default_factory=list)
    discard: list[Card] = field(default_factory=list)
    health: int = 20
    weapon: Card | None = None
    weapon_defeated: list[Card] = field(default_factory=list)
    potion_used_this_turn: bool = False
    avoided_last_turn: bool = False
    turn: TurnState = field(default_factory=TurnState)
    game_over: bool = False
    survived: bool | None = None
    score: int = 0
    action_log: list[Action] = field(default_factory=list)
    event_log: list[str] = field(default_factory=list)

    @property
    def deck_size(self) -> int:
        return len(self.deck)

    @property
    def discard_top(self) -> Card | None:
        return self.discard[-1] if self.discard else None

    @property
    def weapon_ceiling(self) -> int:
        return defeat_ceiling(self.weapon_defeated)

    @property
    def can_avoid(self) -> bool:
        return (
            not self.game_over
            and not self.avoided_last_turn
            and bool(self.room)
            and self.turn.phase == "idle"
            and not self.turn.selection
        )

    def weapon_usable_against(self, card: Card) -> bool:
        return can_use_weapon(card.value, self.weapon, self.weapon_defeated)

    def emit(self, message: str) -> None:
        self.event_log.append(message)
