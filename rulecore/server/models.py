"""
Pydantic Models for rulecore API

Data transfer objects for the REST API.
"""

from pydantic import BaseModel, Field
from typing import Optional, Any
from enum import Enum


# =============================================================================
# Enums
# =============================================================================

class ZoneName(str, Enum):
    """Zones an object can be created in."""
    LIBRARY = "LIBRARY"
    HAND = "HAND"
    BATTLEFIELD = "BATTLEFIELD"
    GRAVEYARD = "GRAVEYARD"
    EXILE = "EXILE"


class ManaSymbol(str, Enum):
    """Mana a player can add to their pool."""
    WHITE = "W"
    BLUE = "U"
    BLACK = "B"
    RED = "R"
    GREEN = "G"
    COLORLESS = "C"


# =============================================================================
# Request Models
# =============================================================================

class CreateGameRequest(BaseModel):
    """Request to create a new game."""
    player_names: list[str] = Field(
        default_factory=lambda: ["Player 1", "Player 2"],
        description="One player is created per name, in turn order"
    )
    starting_life: Optional[int] = Field(default=None, ge=1, description="Defaults to the server setting")


class AddPlayerRequest(BaseModel):
    """Request to add a player to a game."""
    name: str = Field(min_length=1)
    life: Optional[int] = None


class CreateObjectRequest(BaseModel):
    """Put a card from the catalog into a zone (the casting subsystem's hook)."""
    card_name: str
    owner_id: str
    zone: ZoneName = ZoneName.BATTLEFIELD
    face_down: bool = Field(default=False, description="Enter the battlefield as a face-down 2/2")
    controller_id: Optional[str] = None


class AddManaRequest(BaseModel):
    """Request to add mana to a player's pool."""
    player_id: str
    color: ManaSymbol
    amount: int = Field(default=1, ge=1, le=100)


class AttackDeclarationData(BaseModel):
    attacker_id: str
    defending_player_id: str


class DeclareAttackersRequest(BaseModel):
    player_id: str
    attackers: list[AttackDeclarationData] = Field(default_factory=list)


class BlockDeclarationData(BaseModel):
    blocker_id: str
    attacker_id: str


class DeclareBlockersRequest(BaseModel):
    player_id: str
    blockers: list[BlockDeclarationData] = Field(default_factory=list)


class TurnFaceUpRequest(BaseModel):
    """Special action: turn a face-down permanent face up."""
    player_id: str
    object_id: str
    targets: list[str] = Field(default_factory=list, description="Targets for 'when turned face up' triggers")


# =============================================================================
# Response Models
# =============================================================================

class CardDefinitionData(BaseModel):
    """Card definition for the card database."""
    name: str
    mana_cost: Optional[str] = None
    mana_value: int = 0
    types: list[str] = Field(default_factory=list)
    subtypes: list[str] = Field(default_factory=list)
    supertypes: list[str] = Field(default_factory=list)
    power: Optional[int] = None
    toughness: Optional[int] = None
    text: str = ""
    colors: list[str] = Field(default_factory=list)
    abilities: list[str] = Field(default_factory=list)
    morph_cost: Optional[str] = None

    # Display metadata, passed through untouched
    rarity: Optional[str] = None
    collector_number: Optional[str] = None
    artist: Optional[str] = None
    flavor_text: Optional[str] = None
    image_uri: Optional[str] = None


class CardListResponse(BaseModel):
    """Response with list of available cards."""
    cards: list[CardDefinitionData]
    total: int


class CreateGameResponse(BaseModel):
    """Response after creating a game."""
    game_id: str
    player_ids: list[str]
    status: str = "created"


class PlayerData(BaseModel):
    """Player data for API responses."""
    id: str
    name: str
    life: int
    has_lost: bool = False
    mana_pool: dict[str, int] = Field(default_factory=dict)


class ObjectData(BaseModel):
    """
    A game object as currently seen, after continuous effects.

    Face-down objects show no name, subtypes, colors or abilities.
    """
    id: str
    name: Optional[str] = None
    zone: str
    face_down: bool = False
    types: list[str] = Field(default_factory=list)
    subtypes: list[str] = Field(default_factory=list)
    colors: list[str] = Field(default_factory=list)
    power: Optional[int] = None
    toughness: Optional[int] = None
    abilities: list[str] = Field(default_factory=list)
    damage: int = 0
    tapped: bool = False
    controller: Optional[str] = None
    owner: Optional[str] = None


class CombatData(BaseModel):
    """Combat state data for API responses."""
    attackers: list[AttackDeclarationData] = Field(default_factory=list)
    blockers: list[BlockDeclarationData] = Field(default_factory=list)
    blocked_attackers: list[str] = Field(default_factory=list)


class EventData(BaseModel):
    type: str
    payload: dict[str, Any] = Field(default_factory=dict)
    source: Optional[str] = None
    controller: Optional[str] = None
    timestamp: int = 0


class GameStateResponse(BaseModel):
    """Complete game state."""
    game_id: str
    turn_number: int
    active_player: Optional[str] = None
    players: dict[str, PlayerData]
    objects: list[ObjectData] = Field(default_factory=list)
    combat: CombatData = Field(default_factory=CombatData)
    is_game_over: bool = False


class ActionResultResponse(BaseModel):
    """Response after processing an action."""
    success: bool
    message: str = ""
    new_state: Optional[GameStateResponse] = None
    events: list[EventData] = Field(default_factory=list)


class InteractionResponse(BaseModel):
    """What source may do to target right now."""
    source_id: str
    target_id: str
    can_block: bool
    block_restriction: Optional[str] = None
    can_target: bool
    can_deal_damage: bool
    can_attach: bool
