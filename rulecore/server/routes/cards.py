"""
Cards Routes

Endpoints for querying the card catalog.
"""

from fastapi import APIRouter, HTTPException, Query
from typing import Optional

from ..models import CardDefinitionData, CardListResponse
from ..session import session_manager

from rulecore.cards import CardCatalog, build_catalog
from rulecore.engine import CardDefinition, CardType, Color

router = APIRouter(prefix="/cards", tags=["cards"])


def get_catalog() -> CardCatalog:
    """The catalog the server was started with (built-in sets if none)."""
    if session_manager.catalog is None:
        session_manager.catalog = build_catalog()
    return session_manager.catalog


def card_def_to_data(card_def: CardDefinition) -> CardDefinitionData:
    """Convert a CardDefinition to CardDefinitionData."""
    type_line = card_def.type_line
    metadata = card_def.metadata
    morph_cost = card_def.morph_cost

    return CardDefinitionData(
        name=card_def.name,
        mana_cost=card_def.mana_cost.to_string() or None,
        mana_value=card_def.mana_cost.mana_value,
        types=[t.name for t in sorted(type_line.card_types, key=lambda t: t.value)],
        subtypes=sorted(type_line.subtypes),
        supertypes=sorted(type_line.supertypes),
        power=card_def.power,
        toughness=card_def.toughness,
        text=card_def.text,
        colors=[c.name for c in sorted(card_def.colors, key=lambda c: c.value)],
        abilities=[a.render_text(card_def.name) for a in card_def.abilities],
        morph_cost=morph_cost.to_string() if morph_cost else None,
        rarity=metadata.rarity.value if metadata.rarity else None,
        collector_number=metadata.collector_number,
        artist=metadata.artist,
        flavor_text=metadata.flavor_text,
        image_uri=metadata.image_uri
    )


@router.get("", response_model=CardListResponse)
async def list_cards(
    type_filter: Optional[str] = Query(None, description="Filter by card type (CREATURE, ENCHANTMENT, etc)"),
    color_filter: Optional[str] = Query(None, description="Filter by color (WHITE, BLUE, BLACK, RED, GREEN)"),
    name_search: Optional[str] = Query(None, description="Search by card name"),
    subtype: Optional[str] = Query(None, description="Filter by subtype (Goblin, Human, etc)"),
    limit: int = Query(100, ge=1, le=500),
    offset: int = Query(0, ge=0)
) -> CardListResponse:
    """
    List available cards from the card catalog.

    Supports filtering by type, color, subtype, and name search.
    """
    card_type = None
    if type_filter:
        try:
            card_type = CardType[type_filter.upper()]
        except KeyError:
            raise HTTPException(status_code=422, detail=f"Unknown card type '{type_filter}'")

    color = None
    if color_filter:
        try:
            color = Color[color_filter.upper()]
        except KeyError:
            raise HTTPException(status_code=422, detail=f"Unknown color '{color_filter}'")

    cards = get_catalog().search(card_type=card_type, color=color, name=name_search, subtype=subtype)
    total = len(cards)

    # Apply pagination
    cards = cards[offset:offset + limit]

    return CardListResponse(
        cards=[card_def_to_data(c) for c in cards],
        total=total
    )


@router.get("/types/list")
async def list_card_types() -> dict:
    """
    List all available card types.
    """
    return {
        "types": [t.name for t in CardType]
    }


@router.get("/colors/list")
async def list_colors() -> dict:
    """
    List all available colors.
    """
    return {
        "colors": [c.name for c in Color]
    }


@router.get("/{card_name}", response_model=CardDefinitionData)
async def get_card(card_name: str) -> CardDefinitionData:
    """
    Get details for a specific card by name (case-insensitive).
    """
    card_def = get_catalog().get(card_name)
    if card_def is None:
        raise HTTPException(status_code=404, detail=f"Card '{card_name}' not found")
    return card_def_to_data(card_def)
