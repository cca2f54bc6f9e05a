"""
Effect Applicator: maps a picked card to the gameplay effect it produces.

Stateless. Turning an outcome into health or stat changes belongs to
whoever consumes the outcome.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Awaitable, Callable

from pydantic import BaseModel

if TYPE_CHECKING:
    from .catalog import CardDefinition


class EffectKind(str, Enum):
    BUFF_ATTACK = "buff_attack"
    BUFF_DEFENSE = "buff_defense"
    DEBUFF_ATTACK = "debuff_attack"
    DEBUFF_DEFENSE = "debuff_defense"
    HEAL = "heal"


# debuffs land on the opponent, everything else on the picker
_TARGETS_OPPONENT = {
    EffectKind.BUFF_ATTACK: False,
    EffectKind.BUFF_DEFENSE: False,
    EffectKind.DEBUFF_ATTACK: True,
    EffectKind.DEBUFF_DEFENSE: True,
    EffectKind.HEAL: False,
}


class EffectOutcome(BaseModel):
    effect_kind: EffectKind
    magnitude: float
    acting_player: str
    affects_opponent_of: bool

    def describe(self) -> str:
        target = f"enemy of {self.acting_player}" if self.affects_opponent_of else self.acting_player
        percent = round(self.magnitude * 100)
        return f"{self.effect_kind.value} {percent}% on {target}"


EffectSink = Callable[[EffectOutcome], Awaitable[None]]


def apply_effect(card: CardDefinition, player_id: str) -> EffectOutcome:
    """Compute the outcome of ``player_id`` playing ``card``.

    Raises ValueError for an effect kind this applicator does not know.
    """
    try:
        kind = EffectKind(card.effect_kind)
        affects_opponent = _TARGETS_OPPONENT[kind]
    except (ValueError, KeyError):
        raise ValueError(f"Unknown effect kind: {card.effect_kind!r}")

    return EffectOutcome(
        effect_kind=kind,
        magnitude=card.magnitude,
        acting_player=player_id,
        affects_opponent_of=affects_opponent,
    )
