from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Sequence

from .types import Card

CombatMode = Literal["weapon", "barehanded", "weapon_rejected"]


@dataclass(frozen=True)
class CombatOutcome:
    damage: int
    defeated: tuple[Card, ...]
    mode: CombatMode


def defeat_ceiling(defeated: Sequence[Card]) -> int:
    """Strongest monster value the weapon has beaten, 0 for a fresh weapon."""
    if not defeated:
        return 0
    return max(c.value for c in defeated)


def can_use_weapon(monster_value: int, weapon: Card | None, defeated: Sequence[Card]) -> bool:
    if weapon is None:
        return False
    if not defeated:
        return True
    return monster_value <= defeat_ceiling(defeated)


def resolve_combat(
    monster: Card,
    weapon: Card | None,
    defeated: Sequence[Card],
    use_weapon: bool,
) -> CombatOutcome:
    """Decide the damage for one monster fight.

    Pure: the caller applies `damage` to health and replaces the weapon's
    defeat history with `defeated`. A weapon request the ceiling forbids
    falls back to a barehanded fight and reports `weapon_rejected`.
    """
    history = tuple(defeated)

    if not use_weapon or weapon is None:
        return CombatOutcome(damage=monster.value, defeated=history, mode="barehanded")

    if not can_use_weapon(monster.value, weapon, history):
        return CombatOutcome(damage=monster.value, defeated=history, mode="weapon_rejected")

    damage = max(0, monster.value - weapon.value)
    if monster.value > defeat_ceiling(history):
        history = history + (monster,)
    return CombatOutcome(damage=damage, defeated=history, mode="weapon")
