"""
Card Catalog - the fixed, ordered deck every match draws from.

A card id is the entry's position in the catalog. Two entries with the
same name and effect are still two different cards and may both be drawn
in the same round.
"""

from __future__ import annotations

import json
import logging
import random
from pathlib import Path
from typing import Iterator, Sequence

from pydantic import BaseModel, Field, ValidationError

from .effects import EffectKind
from .exceptions import ConfigurationError

log = logging.getLogger(__name__)


class CardDefinition(BaseModel):
    model_config = {"frozen": True}

    name: str
    effect_kind: EffectKind
    magnitude: float = Field(ge=0.0, le=1.0)


DEFAULT_CARDS: tuple[CardDefinition, ...] = (
    CardDefinition(name="Battle Cry", effect_kind=EffectKind.BUFF_ATTACK, magnitude=0.2),
    CardDefinition(name="Berserk", effect_kind=EffectKind.BUFF_ATTACK, magnitude=0.35),
    CardDefinition(name="Iron Hide", effect_kind=EffectKind.BUFF_DEFENSE, magnitude=0.2),
    CardDefinition(name="Fortify", effect_kind=EffectKind.BUFF_DEFENSE, magnitude=0.3),
    CardDefinition(name="Intimidate", effect_kind=EffectKind.DEBUFF_ATTACK, magnitude=0.2),
    CardDefinition(name="Armor Break", effect_kind=EffectKind.DEBUFF_DEFENSE, magnitude=0.25),
    CardDefinition(name="Second Wind", effect_kind=EffectKind.HEAL, magnitude=0.15),
    CardDefinition(name="Full Recovery", effect_kind=EffectKind.HEAL, magnitude=0.3),
)


class CardCatalog:
    """Read-only lookup table of card definitions, shared by every match."""

    def __init__(self, cards: Sequence[CardDefinition]):
        if not cards:
            raise ConfigurationError("Card catalog is empty")
        self._cards = tuple(cards)

    def __len__(self) -> int:
        return len(self._cards)

    def __iter__(self) -> Iterator[CardDefinition]:
        return iter(self._cards)

    def __getitem__(self, card_id: int) -> CardDefinition:
        if card_id < 0:
            raise IndexError(card_id)
        return self._cards[card_id]

    def items(self) -> Iterator[tuple[int, CardDefinition]]:
        return enumerate(self._cards)

    def draw(self, count: int, rng: random.Random | None = None) -> list[int]:
        """Draw ``count`` distinct card ids, uniformly, without replacement."""
        if count < 1:
            raise ConfigurationError(f"Cannot draw {count} cards")
        if count > len(self._cards):
            raise ConfigurationError(
                f"Catalog has {len(self._cards)} cards, cannot draw {count}"
            )

        rng = rng or random
        pool = list(range(len(self._cards)))
        drawn = []
        for _ in range(count):
            drawn.append(pool.pop(rng.randrange(len(pool))))
        return drawn


def load_catalog(path: str | Path | None = None) -> CardCatalog:
    """Load the catalog from a JSON array of cards, or the built-in deck."""
    if path is None:
        log.info(f"Using built-in card catalog ({len(DEFAULT_CARDS)} cards)")
        return CardCatalog(DEFAULT_CARDS)

    try:
        raw = json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigurationError(f"Cannot read card catalog {path}: {e}") from e

    if not isinstance(raw, list):
        raise ConfigurationError(f"Card catalog {path} must be a JSON array")

    try:
        cards = [CardDefinition.model_validate(entry) for entry in raw]
    except ValidationError as e:
        raise ConfigurationError(f"Invalid card in {path}: {e}") from e

    log.info(f"Loaded {len(cards)} cards from {path}")
    return CardCatalog(cards)
