from pydantic import BaseModel

from ..game.effects import EffectKind


class CardPublic(BaseModel):
    card_id: int
    name: str
    effect_kind: EffectKind
    magnitude: float
