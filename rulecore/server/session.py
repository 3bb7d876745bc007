"""
Game Session Management

Manages active games. Every session owns one Game; sessions share only
the read-only card catalog.
"""

import asyncio
from dataclasses import dataclass, field
from typing import Optional
from uuid import uuid4
import time
import logging

from rulecore.cards import CardCatalog
from rulecore.engine import (
    Game, GameObject, ActionResult, Event, ZoneType, ManaType,
    AttackDeclaration, BlockDeclaration,
    get_characteristics, is_creature,
    can_be_blocked_by, blocking_restriction, can_be_targeted_by,
    can_deal_damage_to, can_be_attached_by,
)

from .models import (
    GameStateResponse, PlayerData, ObjectData, CombatData, EventData,
    ActionResultResponse, InteractionResponse,
    AttackDeclarationData, BlockDeclarationData,
    CreateObjectRequest, DeclareAttackersRequest, DeclareBlockersRequest,
    TurnFaceUpRequest, AddManaRequest,
)

logger = logging.getLogger(__name__)


def generate_id() -> str:
    """Generate a short unique ID."""
    return str(uuid4())[:8]


@dataclass
class GameSession:
    """
    Manages a single game session.

    Wraps the engine Game class and provides:
    - State serialization for clients
    - Action handling, with rejected actions reported instead of raised
    """
    id: str
    game: Game
    player_ids: list[str] = field(default_factory=list)
    created_at: float = field(default_factory=time.time)

    def add_player(self, name: str, life: int = None) -> str:
        player = self.game.add_player(name, life=life)
        self.player_ids.append(player.id)
        return player.id

    # =========================================================================
    # Actions
    # =========================================================================

    def create_object(self, request: CreateObjectRequest) -> GameObject:
        """Raises CardNotFoundError / KeyError / ValueError on bad input."""
        return self.game.create_object(
            request.card_name,
            request.owner_id,
            zone=ZoneType[request.zone.value],
            face_down=request.face_down,
            controller_id=request.controller_id
        )

    def add_mana(self, request: AddManaRequest) -> None:
        self.game.add_mana(request.player_id, ManaType(request.color.value), request.amount)

    def declare_attackers(self, request: DeclareAttackersRequest) -> ActionResultResponse:
        declarations = [
            AttackDeclaration(attacker_id=a.attacker_id, defending_player_id=a.defending_player_id)
            for a in request.attackers
        ]
        return self._result(self.game.combat_manager.declare_attackers(request.player_id, declarations))

    def declare_blockers(self, request: DeclareBlockersRequest) -> ActionResultResponse:
        declarations = [
            BlockDeclaration(blocker_id=b.blocker_id, blocking_attacker_id=b.attacker_id)
            for b in request.blockers
        ]
        return self._result(self.game.combat_manager.declare_blockers(request.player_id, declarations))

    def combat_damage(self) -> ActionResultResponse:
        result = self.game.combat_manager.combat_damage()
        if result.success:
            self.game.combat_manager.end_combat()
        return self._result(result)

    def turn_face_up(self, request: TurnFaceUpRequest) -> ActionResultResponse:
        return self._result(self.game.turn_face_up(
            request.object_id, request.player_id, tuple(request.targets)
        ))

    def end_turn(self) -> ActionResultResponse:
        return self._result(ActionResult.ok(self.game.end_turn()))

    def _result(self, result: ActionResult) -> ActionResultResponse:
        if not result.success:
            logger.warning("Session %s rejected action: %s", self.id, result.message)
            return ActionResultResponse(success=False, message=result.message)
        return ActionResultResponse(
            success=True,
            message=result.message or "Action processed",
            new_state=self.get_client_state(),
            events=[self._serialize_event(e) for e in result.events]
        )

    def interactions(self, source_id: str, target_id: str) -> InteractionResponse:
        """Raises KeyError for unknown objects."""
        state = self.game.state
        source = state.objects[source_id]
        target = state.objects[target_id]
        return InteractionResponse(
            source_id=source_id,
            target_id=target_id,
            can_block=can_be_blocked_by(target, source, state),
            block_restriction=blocking_restriction(target, source, state),
            can_target=can_be_targeted_by(target, source, state),
            can_deal_damage=can_deal_damage_to(source, target, state),
            can_attach=can_be_attached_by(target, source, state),
        )

    # =========================================================================
    # Serialization
    # =========================================================================

    def get_client_state(self) -> GameStateResponse:
        """Get game state formatted for a client."""
        game_state = self.game.state

        players = {}
        for pid, player in game_state.players.items():
            pool = self.game.mana_system.get_pool(pid)
            players[pid] = PlayerData(
                id=pid,
                name=player.name,
                life=player.life,
                has_lost=player.has_lost,
                mana_pool={
                    t.value: pool.get_count(t) for t in ManaType if pool.get_count(t)
                }
            )

        combat_state = self.game.combat_manager.combat_state
        combat = CombatData(
            attackers=[
                AttackDeclarationData(
                    attacker_id=a.attacker_id, defending_player_id=a.defending_player_id
                ) for a in combat_state.attackers
            ],
            blockers=[
                BlockDeclarationData(blocker_id=b.blocker_id, attacker_id=b.blocking_attacker_id)
                for b in combat_state.blockers
            ],
            blocked_attackers=sorted(combat_state.blocked_attackers)
        )

        return GameStateResponse(
            game_id=self.id,
            turn_number=game_state.turn_number,
            active_player=game_state.active_player,
            players=players,
            objects=[self.serialize_object(obj) for obj in game_state.objects.values()],
            combat=combat,
            is_game_over=self.game.is_game_over()
        )

    def serialize_object(self, obj: GameObject) -> ObjectData:
        """Serialize an object as it currently looks."""
        state = self.game.state
        chars = get_characteristics(obj, state)
        creature = is_creature(obj, state)

        return ObjectData(
            id=obj.id,
            name=chars.name,
            zone=obj.zone.name,
            face_down=obj.is_face_down,
            types=[t.name for t in sorted(chars.types, key=lambda t: t.value)],
            subtypes=sorted(chars.subtypes),
            colors=[c.name for c in sorted(chars.colors, key=lambda c: c.value)],
            power=chars.power if creature else None,
            toughness=chars.toughness if creature else None,
            abilities=[a.render_text(chars.name or "this creature") for a in chars.abilities],
            damage=obj.damage,
            tapped=obj.tapped,
            controller=obj.controller,
            owner=obj.owner
        )

    def _serialize_event(self, event: Event) -> EventData:
        return EventData(
            type=event.type.name,
            payload=event.payload,
            source=event.source,
            controller=event.controller,
            timestamp=event.timestamp
        )


class SessionManager:
    """
    Manages all active game sessions.
    """

    def __init__(self, catalog: Optional[CardCatalog] = None, starting_life: int = 20):
        self.sessions: dict[str, GameSession] = {}
        self.catalog = catalog
        self.starting_life = starting_life
        self._lock = asyncio.Lock()

    def configure(self, catalog: CardCatalog, starting_life: int = 20) -> None:
        self.catalog = catalog
        self.starting_life = starting_life

    async def create_session(
        self,
        player_names: list[str] = (),
        starting_life: int = None
    ) -> GameSession:
        """Create a new game session with its own Game."""
        async with self._lock:
            session_id = generate_id()
            game = Game(
                catalog=self.catalog,
                starting_life=self.starting_life if starting_life is None else starting_life
            )
            session = GameSession(id=session_id, game=game)
            for name in player_names:
                session.add_player(name)

            self.sessions[session_id] = session
            logger.info("Created game %s with %d players", session_id, len(session.player_ids))
            return session

    def get_session(self, session_id: str) -> Optional[GameSession]:
        """Get a session by ID."""
        return self.sessions.get(session_id)

    async def remove_session(self, session_id: str) -> None:
        """Remove a session."""
        async with self._lock:
            if session_id in self.sessions:
                del self.sessions[session_id]
                logger.info("Removed game %s", session_id)


# Global session manager instance
session_manager = SessionManager()
