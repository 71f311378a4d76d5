from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class StartNewGameAction:
    seed: int | None = None


@dataclass(frozen=True)
class SelectCardAction:
    """Select a room card, or deselect it if it is already selected."""

    index: int


@dataclass(frozen=True)
class ResolveMonsterAction:
    use_weapon: bool


@dataclass(frozen=True)
class ConfirmSelectionAction:
    pass


@dataclass(frozen=True)
class AvoidRoomAction:
    pass


Action = (
    StartNewGameAction
    | SelectCardAction
    | ResolveMonsterAction
    | ConfirmSelectionAction
    | AvoidRoomAction
)
