"""
Game Routes

Endpoints for creating games and performing rules actions in them.

Illegal actions are not HTTP errors: they come back as 200 with
success=false and the reason. Unknown games, objects and cards are 404s.
"""

from fastapi import APIRouter, HTTPException, Query

from ..session import session_manager, GameSession
from ..models import (
    CreateGameRequest, CreateGameResponse, AddPlayerRequest, PlayerData,
    CreateObjectRequest, ObjectData, AddManaRequest,
    DeclareAttackersRequest, DeclareBlockersRequest, TurnFaceUpRequest,
    ActionResultResponse, GameStateResponse, InteractionResponse,
)
from .cards import get_catalog

from rulecore.engine import CardNotFoundError

router = APIRouter(prefix="/games", tags=["games"])


def _get_session(game_id: str) -> GameSession:
    session = session_manager.get_session(game_id)
    if not session:
        raise HTTPException(status_code=404, detail="Game not found")
    return session


def _require_player(session: GameSession, player_id: str) -> None:
    if player_id not in session.game.state.players:
        raise HTTPException(status_code=404, detail=f"Player '{player_id}' not found")


@router.post("", response_model=CreateGameResponse)
async def create_game(request: CreateGameRequest) -> CreateGameResponse:
    """
    Create a new, independent game.

    Returns the game id and the player ids in turn order.
    """
    get_catalog()
    session = await session_manager.create_session(
        player_names=request.player_names,
        starting_life=request.starting_life
    )
    return CreateGameResponse(game_id=session.id, player_ids=list(session.player_ids))


@router.get("/{game_id}", response_model=GameStateResponse)
async def get_game_state(game_id: str) -> GameStateResponse:
    """Get the current game state."""
    return _get_session(game_id).get_client_state()


@router.delete("/{game_id}")
async def delete_game(game_id: str) -> dict:
    """Drop a game."""
    _get_session(game_id)
    await session_manager.remove_session(game_id)
    return {"status": "deleted", "game_id": game_id}


@router.post("/{game_id}/players", response_model=PlayerData)
async def add_player(game_id: str, request: AddPlayerRequest) -> PlayerData:
    """Add a player to a game."""
    session = _get_session(game_id)
    player_id = session.add_player(request.name, life=request.life)
    return session.get_client_state().players[player_id]


@router.post("/{game_id}/objects", response_model=ObjectData)
async def create_object(game_id: str, request: CreateObjectRequest) -> ObjectData:
    """
    Put a catalog card into a zone, optionally face down.

    Whether that was a legal play is the caller's business.
    """
    session = _get_session(game_id)
    _require_player(session, request.owner_id)
    if request.controller_id:
        _require_player(session, request.controller_id)

    try:
        obj = session.create_object(request)
    except CardNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))

    return session.serialize_object(obj)


@router.post("/{game_id}/mana", response_model=PlayerData)
async def add_mana(game_id: str, request: AddManaRequest) -> PlayerData:
    """Add mana to a player's pool."""
    session = _get_session(game_id)
    _require_player(session, request.player_id)
    session.add_mana(request)
    return session.get_client_state().players[request.player_id]


@router.post("/{game_id}/attackers", response_model=ActionResultResponse)
async def declare_attackers(game_id: str, request: DeclareAttackersRequest) -> ActionResultResponse:
    """Declare attackers. All-or-nothing."""
    session = _get_session(game_id)
    _require_player(session, request.player_id)
    return session.declare_attackers(request)


@router.post("/{game_id}/blockers", response_model=ActionResultResponse)
async def declare_blockers(game_id: str, request: DeclareBlockersRequest) -> ActionResultResponse:
    """Declare blockers. An illegal block rejects the whole declaration."""
    session = _get_session(game_id)
    _require_player(session, request.player_id)
    return session.declare_blockers(request)


@router.post("/{game_id}/combat-damage", response_model=ActionResultResponse)
async def combat_damage(game_id: str) -> ActionResultResponse:
    """Deal combat damage and end combat."""
    return _get_session(game_id).combat_damage()


@router.post("/{game_id}/turn-face-up", response_model=ActionResultResponse)
async def turn_face_up(game_id: str, request: TurnFaceUpRequest) -> ActionResultResponse:
    """Special action: pay the morph cost and turn a permanent face up."""
    session = _get_session(game_id)
    _require_player(session, request.player_id)
    state = session.game.state
    for target_id in request.targets:
        if target_id not in state.players and target_id not in state.objects:
            raise HTTPException(status_code=404, detail=f"Target '{target_id}' not found")
    return session.turn_face_up(request)


@router.post("/{game_id}/end-turn", response_model=ActionResultResponse)
async def end_turn(game_id: str) -> ActionResultResponse:
    """Cleanup: remove damage, end 'until end of turn' effects, pass the turn."""
    return _get_session(game_id).end_turn()


@router.get("/{game_id}/interactions", response_model=InteractionResponse)
async def get_interactions(
    game_id: str,
    source: str = Query(..., description="Object acting (blocker, spell source, damage source)"),
    target: str = Query(..., description="Object acted upon")
) -> InteractionResponse:
    """
    What source may do to target right now: block it, target it, damage
    it, or be attached to it.
    """
    session = _get_session(game_id)
    try:
        return session.interactions(source, target)
    except KeyError as e:
        raise HTTPException(status_code=404, detail=f"Object {e} not found")
