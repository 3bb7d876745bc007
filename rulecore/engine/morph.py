"""
rulecore Morph Resolver

Face-down permanents are 2/2 creatures with no name, subtypes, colors or
abilities. Turning one face up is a special action:
- Doesn't use the stack (it can't be responded to)
- Requires paying the morph cost
- Reveals the real card at once, then its "when turned face up" triggers
  resolve immediately

    FACE_DOWN --turn_face_up (cost paid)--> FACE_UP

FACE_UP is terminal for as long as the object stays on the battlefield.
"""

import logging
from contextlib import contextmanager
from enum import Enum, auto
from typing import TYPE_CHECKING

from .abilities.keywords import TurnedFaceUpTrigger
from .interaction import can_be_targeted_by
from .queries import get_abilities, get_name
from .types import ActionResult, Event, EventType, Face, GameObject, ZoneType

if TYPE_CHECKING:
    from .game import Game

logger = logging.getLogger(__name__)


class MorphState(Enum):
    FACE_DOWN = auto()
    FACE_UP = auto()


def morph_state(obj: GameObject) -> MorphState:
    return MorphState.FACE_DOWN if obj.face == Face.DOWN else MorphState.FACE_UP


@contextmanager
def revealed(obj: GameObject):
    """Temporarily treat obj as face up (restored on exit)."""
    face = obj.face
    obj.face = Face.UP
    try:
        yield obj
    finally:
        obj.face = face


class MorphResolver:
    """
    Handles the face-down -> face-up transition for one game.

    Cost payment is delegated to game.pay_cost(payer_id, cost).
    """

    def __init__(self, game: 'Game'):
        self.game = game

    def validate(self, obj: GameObject, player_id: str, targets: tuple = ()) -> str:
        """Return why obj can't be turned face up by player_id, or '' if it can."""
        if morph_state(obj) != MorphState.FACE_DOWN:
            return "This creature is not face-down"
        if obj.zone != ZoneType.BATTLEFIELD:
            return "Permanent is not on the battlefield"
        if obj.controller != player_id:
            return "You don't control this permanent"
        if obj.card_def.morph_cost is None:
            return "This creature cannot be turned face up (no morph cost)"
        return self.target_problem(obj, player_id, targets)

    def target_problem(self, obj: GameObject, player_id: str, targets: tuple) -> str:
        """
        Check trigger targets against the card as it will be once revealed.

        A target is a player id or the id of an object on the battlefield
        that the revealed card may target.
        """
        state = self.game.state
        with revealed(obj):
            for target_id in targets:
                if target_id in state.players:
                    continue
                target = state.objects.get(target_id)
                if target is None:
                    return f"Invalid target: {target_id}"
                if target.zone != ZoneType.BATTLEFIELD:
                    return f"Target is not on the battlefield: {target_id}"
                if not can_be_targeted_by(target, obj, state, player_id):
                    target_name = get_name(target, state) or "a face-down creature"
                    return f"{obj.card_def.name} can't target {target_name}"
        return ""

    def turn_face_up(self, obj: GameObject, player_id: str, targets: tuple = ()) -> ActionResult:
        """
        Turn obj face up if it is legal and the morph cost gets paid.

        Rejections (illegal action or failed payment) leave obj untouched.
        """
        problem = self.validate(obj, player_id, targets)
        if problem:
            logger.debug("Turn face up rejected for %s: %s", obj.id, problem)
            return ActionResult.rejected(problem)

        cost = obj.card_def.morph_cost
        if not self.game.pay_cost(player_id, cost):
            logger.debug("Player %s failed to pay morph cost %s", player_id, cost)
            return ActionResult.rejected(
                f"Could not pay morph cost {cost.to_string()}"
            )

        obj.face = Face.UP
        logger.debug("%s turned face up by %s", obj, player_id)

        events = [self.game.emit(Event(
            type=EventType.TURNED_FACE_UP,
            payload={
                'object_id': obj.id,
                'name': obj.card_def.name,
                'cost': cost.to_string(),
            },
            source=obj.id,
            controller=player_id
        ))]

        # Triggers see the now-visible abilities, including any granted ones
        for ability in get_abilities(obj, self.game.state):
            if isinstance(ability, TurnedFaceUpTrigger):
                events.extend(ability.effect(obj, self.game, tuple(targets)) or [])

        return ActionResult.ok(events)
