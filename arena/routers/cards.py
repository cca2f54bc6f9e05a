from fastapi import APIRouter, HTTPException

from ..dependencies import CatalogDep
from ..schemas import CardPublic

router = APIRouter(tags=["cards"])


def _card_public(card_id: int, card) -> CardPublic:
    return CardPublic(
        card_id=card_id,
        name=card.name,
        effect_kind=card.effect_kind,
        magnitude=card.magnitude,
    )


@router.get("/cards", response_model=list[CardPublic])
async def list_cards(catalog: CatalogDep):
    return [_card_public(card_id, card) for card_id, card in catalog.items()]


@router.get("/cards/{card_id}", response_model=CardPublic)
async def get_card(card_id: int, catalog: CatalogDep):
    try:
        card = catalog[card_id]
    except IndexError:
        raise HTTPException(status_code=404, detail="Card not found")
    return _card_public(card_id, card)
