from __future__ import annotations

from typing import Sequence

from scoundrel.engine.actions import (
    Action,
    AvoidRoomAction,
    ConfirmSelectionAction,
    ResolveMonsterAction,
    SelectCardAction,
    StartNewGameAction,
)
from scoundrel.engine.commands import step
from scoundrel.engine.game import new_game
from scoundrel.engine.serialize import action_to_dict, snapshot
from scoundrel.engine.state import GameConfig, GameState, StepResult
from scoundrel.engine.types import Card

from .telemetry import TelemetryService


class GameSession:
    """One game session as seen by a presentation layer.

    Every command goes through engine.commands.step so the action log stays
    replayable; telemetry, when configured, records each outcome.
    """

    def __init__(
        self,
        seed: int | None = None,
        telemetry: TelemetryService | None = None,
        config: GameConfig | None = None,
        deck: Sequence[Card] | None = None,
    ) -> None:
        self._telemetry = telemetry
        self._state = new_game(seed=seed, config=config, deck=deck)
        self._log_started()

    @property
    def state(self) -> GameState:
        return self._state

    @property
    def events(self) -> list[str]:
        return list(self._state.event_log)

    def start_new_game(self, seed: int | None = None) -> StepResult:
        res = self._run(StartNewGameAction(seed=seed))
        if res.ok:
            self._log_started()
        return res

    def select_card(self, index: int) -> StepResult:
        return self._run(SelectCardAction(index=index))

    def resolve_monster_choice(self, use_weapon: bool) -> StepResult:
        return self._run(ResolveMonsterAction(use_weapon=use_weapon))

    def confirm_selection(self) -> StepResult:
        return self._run(ConfirmSelectionAction())

    def avoid_room(self) -> StepResult:
        return self._run(AvoidRoomAction())

    def snapshot(self) -> dict[str, object]:
        return snapshot(self._state)

    def _run(self, action: Action) -> StepResult:
        was_over = self._state.game_over
        res = step(self._state, action)
        if self._telemetry is not None:
            self._telemetry.log(
                "command",
                {"action": action_to_dict(action), "ok": res.ok, "error": res.error},
            )
            if self._state.game_over and not was_over:
                self._telemetry.log(
                    "game_ended",
                    {
                        "seed": self._state.seed,
                        "survived": self._state.survived,
                        "score": self._state.score,
                        "health": self._state.health,
                    },
                )
        return res

    def _log_started(self) -> None:
        if self._telemetry is None:
            return
        self._telemetry.log(
            "game_started",
            {"seed": self._state.seed, "deck_size": self._state.deck_size, "room_size": len(self._state.room)},
        )
