"""
rulecore Game

One independent game: players, objects, continuous effects, the event log,
and the subsystems that act on them. Games share nothing but the read-only
catalog, so a server can host many side by side.

Every action runs to completion and is followed by a state-based action
sweep to a fixed point before it returns.
"""

import logging
from typing import Iterable, Optional, Union

from .combat import CombatManager
from .effects import ContinuousEffect, Duration, Modification
from .errors import ConfigurationError
from .interaction import can_deal_damage_to
from .mana import ManaSystem, ManaType, PayCost
from .abilities.keywords import Keyword
from .morph import MorphResolver
from .queries import get_toughness, has_ability, is_creature
from .types import (
    ActionResult, CardDefinition, CardMetadata, CardType, Color, Event, EventType,
    Face, GameObject, GameState, Player, TypeLine, ZoneType, new_id,
)

logger = logging.getLogger(__name__)


CardRef = Union[str, CardDefinition]


class Game:
    """
    Main game controller.

    Integrates all subsystems:
    - Mana System (default cost payment)
    - Combat Manager
    - Morph Resolver
    - State-based actions
    """

    def __init__(
        self,
        catalog=None,
        pay_cost: Optional[PayCost] = None,
        starting_life: int = 20
    ):
        self.state = GameState()
        self.catalog = catalog
        self.starting_life = starting_life

        self.mana_system = ManaSystem()
        self.pay_cost: PayCost = pay_cost or self.mana_system.pay_cost

        self.combat_manager = CombatManager(self)
        self.morph = MorphResolver(self)

    # =========================================================================
    # Players and objects
    # =========================================================================

    def add_player(self, name: str, life: int = None) -> Player:
        """Add a player to the game."""
        player = Player(
            id=new_id(),
            name=name,
            life=self.starting_life if life is None else life
        )
        self.state.players[player.id] = player
        if self.state.active_player is None:
            self.state.active_player = player.id
        return player

    def get_player(self, player_id: str) -> Player:
        return self.state.players[player_id]

    def get_object(self, object_id: str) -> GameObject:
        return self.state.objects[object_id]

    def resolve_card(self, card: CardRef) -> CardDefinition:
        """Name -> CardDefinition through the catalog; definitions pass through."""
        if isinstance(card, CardDefinition):
            return card
        if self.catalog is None:
            raise ConfigurationError(f"No catalog to look up {card!r}")
        return self.catalog.lookup(card)

    def create_object(
        self,
        card: CardRef,
        owner_id: str,
        zone: ZoneType = ZoneType.BATTLEFIELD,
        face_down: bool = False,
        controller_id: str = None
    ) -> GameObject:
        """
        Create a game object for a card entering a zone.

        face_down=True puts it onto the battlefield as a face-down 2/2.
        Whether that was a legal way to play the card is decided by the
        caller (the casting subsystem), not here.
        """
        card_def = self.resolve_card(card)
        if owner_id not in self.state.players:
            raise KeyError(f"Unknown player: {owner_id}")
        if face_down and zone != ZoneType.BATTLEFIELD:
            raise ValueError("Only permanents on the battlefield can be face down")

        obj = GameObject(
            id=new_id(),
            card_def=card_def,
            owner=owner_id,
            controller=controller_id or owner_id,
            zone=zone,
            face=Face.DOWN if face_down else Face.UP,
            timestamp=self.state.next_timestamp()
        )
        self.state.objects[obj.id] = obj

        self.emit(Event(
            type=EventType.OBJECT_CREATED,
            payload={
                'object_id': obj.id,
                'zone': zone.name,
                'face_down': face_down,
            },
            controller=obj.controller
        ))
        if zone == ZoneType.BATTLEFIELD:
            self.check_state_based_actions()
        return obj

    def move_object(self, obj: GameObject, to_zone: ZoneType, reason: str = None) -> list[Event]:
        """
        Move an object to another zone.

        Leaving the battlefield makes it a new object as far as the rules
        are concerned: it is revealed (face up), damage and tapped status
        are cleared, and effects that applied to it end.
        """
        from_zone = obj.zone
        if from_zone == to_zone:
            return []

        events = []
        if from_zone == ZoneType.BATTLEFIELD:
            obj.face = Face.UP
            obj.damage = 0
            obj.tapped = False
            events.extend(self._end_effects(
                e for e in self.state.effects
                if e.object_id == obj.id or (
                    e.source_id == obj.id and e.duration == Duration.WHILE_SOURCE_ON_BATTLEFIELD
                )
            ))
            self.combat_manager.remove_from_combat(obj.id)

        obj.zone = to_zone
        obj.timestamp = self.state.next_timestamp()

        events.append(self.emit(Event(
            type=EventType.ZONE_CHANGE,
            payload={
                'object_id': obj.id,
                'from_zone': from_zone.name,
                'to_zone': to_zone.name,
                'reason': reason,
            },
            controller=obj.controller
        )))
        return events

    def destroy(self, obj: GameObject, reason: str = "destroy") -> list[Event]:
        """Destroy a permanent. Indestructible permanents survive."""
        if obj.zone != ZoneType.BATTLEFIELD:
            return []
        if has_ability(obj, Keyword.INDESTRUCTIBLE, self.state):
            logger.debug("%s is indestructible, ignoring %s", obj, reason)
            return []

        name = obj.card_def.name
        events = self.move_object(obj, ZoneType.GRAVEYARD, reason=reason)
        events.append(self.emit(Event(
            type=EventType.OBJECT_DESTROYED,
            payload={'object_id': obj.id, 'name': name, 'reason': reason},
            controller=obj.controller
        )))
        logger.debug("Destroyed %s (%s)", obj, reason)
        return events

    # =========================================================================
    # Damage and life
    # =========================================================================

    def deal_damage(self, source: GameObject, target_id: str, amount: int, combat: bool = False) -> list[Event]:
        """
        Deal damage from source to a player or permanent.

        Damage a protected permanent would take from a matching source is
        prevented and logged as DAMAGE_PREVENTED.
        """
        if amount <= 0:
            return []

        if target_id in self.state.players:
            player = self.state.players[target_id]
            player.life -= amount
            return [
                self.emit(Event(
                    type=EventType.DAMAGE,
                    payload={'target': target_id, 'amount': amount, 'combat': combat},
                    source=source.id,
                    controller=source.controller
                )),
                self.emit(Event(
                    type=EventType.LIFE_CHANGE,
                    payload={'player': target_id, 'amount': -amount},
                    source=source.id
                )),
            ]

        target = self.state.objects[target_id]
        if target.zone != ZoneType.BATTLEFIELD:
            return []

        if not can_deal_damage_to(source, target, self.state):
            return [self.emit(Event(
                type=EventType.DAMAGE_PREVENTED,
                payload={'target': target_id, 'amount': amount, 'reason': 'protection'},
                source=source.id,
                controller=source.controller
            ))]

        target.damage += amount
        return [self.emit(Event(
            type=EventType.DAMAGE,
            payload={'target': target_id, 'amount': amount, 'combat': combat},
            source=source.id,
            controller=source.controller
        ))]

    # =========================================================================
    # Continuous effects
    # =========================================================================

    def add_effect(
        self,
        obj: GameObject,
        modification: Modification,
        duration: Duration = Duration.END_OF_TURN,
        source: GameObject = None
    ) -> ContinuousEffect:
        """Create a continuous effect on obj with a fresh timestamp."""
        effect = ContinuousEffect(
            object_id=obj.id,
            modification=modification,
            timestamp=self.state.next_timestamp(),
            source_id=source.id if source else None,
            duration=duration
        )
        self.state.effects.append(effect)
        self.emit(Event(
            type=EventType.EFFECT_CREATED,
            payload={
                'effect_id': effect.id,
                'object_id': obj.id,
                'modification': type(modification).__name__,
                'duration': duration.name,
            },
            source=effect.source_id
        ))
        self.check_state_based_actions()
        return effect

    def _end_effects(self, effects: Iterable[ContinuousEffect]) -> list[Event]:
        ending = list(effects)
        if not ending:
            return []
        ending_ids = {e.id for e in ending}
        self.state.effects = [e for e in self.state.effects if e.id not in ending_ids]
        events = []
        for effect in ending:
            logger.debug("Effect %s on %s expired", effect.id, effect.object_id)
            events.append(self.emit(Event(
                type=EventType.EFFECT_EXPIRED,
                payload={'effect_id': effect.id, 'object_id': effect.object_id}
            )))
        return events

    # =========================================================================
    # Mana
    # =========================================================================

    def add_mana(self, player_id: str, color: Union[ManaType, str], amount: int = 1) -> None:
        """Add mana to a player's pool."""
        if isinstance(color, str):
            color = ManaType(color.upper())
        self.mana_system.produce_mana(player_id, color, amount)
        self.emit(Event(
            type=EventType.MANA_PRODUCED,
            payload={'player': player_id, 'color': color.value, 'amount': amount}
        ))

    # =========================================================================
    # Actions
    # =========================================================================

    def turn_face_up(self, object_id: str, player_id: str, targets: tuple = ()) -> ActionResult:
        """Special action: turn a face-down permanent face up."""
        obj = self.state.objects.get(object_id)
        if obj is None:
            return ActionResult.rejected(f"Permanent not found: {object_id}")
        result = self.morph.turn_face_up(obj, player_id, targets)
        if result.success:
            result.events.extend(self.check_state_based_actions())
        return result

    def end_turn(self) -> list[Event]:
        """
        Cleanup step: remove damage, end "until end of turn" effects,
        empty mana pools, and pass the turn.
        """
        events = []
        for obj in self.state.objects_in(ZoneType.BATTLEFIELD):
            obj.damage = 0
        events.extend(self._end_effects(
            e for e in self.state.effects if e.duration == Duration.END_OF_TURN
        ))
        self.mana_system.empty_pools()
        self.combat_manager.reset_combat()

        events.append(self.emit(Event(
            type=EventType.TURN_END,
            payload={'turn': self.state.turn_number, 'player': self.state.active_player}
        )))
        self.state.turn_number += 1
        self.state.active_player = self._next_player(self.state.active_player)
        events.extend(self.check_state_based_actions())
        return events

    def _next_player(self, player_id: Optional[str]) -> Optional[str]:
        ids = list(self.state.players)
        if not ids or player_id not in ids:
            return player_id
        return ids[(ids.index(player_id) + 1) % len(ids)]

    # =========================================================================
    # Events and state-based actions
    # =========================================================================

    def emit(self, event: Event) -> Event:
        """Record an event in the log."""
        event.timestamp = self.state.timestamp
        self.state.event_log.append(event)
        return event

    def check_state_based_actions(self) -> list[Event]:
        """Check and process state-based actions until nothing changes."""
        all_events = []

        # Loop until no more SBAs apply
        while True:
            events = self._check_sbas_once()
            if not events:
                break
            all_events.extend(events)

        return all_events

    def _check_sbas_once(self) -> list[Event]:
        """Single pass of SBA checking. All checks see the same state."""
        events = []

        # Player life totals
        for player in self.state.players.values():
            if player.life <= 0 and not player.has_lost:
                player.has_lost = True
                events.append(self.emit(Event(
                    type=EventType.PLAYER_LOSES,
                    payload={'player': player.id, 'reason': 'life'}
                )))

        zero_toughness = []
        lethal_damage = []
        for obj in self.state.objects_in(ZoneType.BATTLEFIELD):
            if not is_creature(obj, self.state):
                continue

            toughness = get_toughness(obj, self.state)

            # Zero or less toughness (indestructible doesn't help)
            if toughness <= 0:
                zero_toughness.append(obj)
            # Lethal damage
            elif obj.damage >= toughness and not has_ability(obj, Keyword.INDESTRUCTIBLE, self.state):
                lethal_damage.append(obj)

        for obj in zero_toughness:
            logger.debug("%s has zero toughness", obj)
            name = obj.card_def.name
            events.extend(self.move_object(obj, ZoneType.GRAVEYARD, reason='zero_toughness'))
            events.append(self.emit(Event(
                type=EventType.OBJECT_DESTROYED,
                payload={'object_id': obj.id, 'name': name, 'reason': 'zero_toughness'}
            )))
        for obj in lethal_damage:
            events.extend(self.destroy(obj, reason='lethal_damage'))

        return events

    def is_game_over(self) -> bool:
        remaining = [p for p in self.state.players.values() if not p.has_lost]
        return len(self.state.players) > 1 and len(remaining) <= 1


# =============================================================================
# Card definition helpers
# =============================================================================

def make_creature(
    name: str,
    power: int,
    toughness: int,
    mana_cost: str = "",
    subtypes: set[str] = None,
    supertypes: set[str] = None,
    types: set[CardType] = None,
    colors: set[Color] = None,
    abilities: list = None,
    metadata: CardMetadata = None,
    text: str = ""
) -> CardDefinition:
    """Helper to create creature card definitions."""
    return CardDefinition(
        name=name,
        mana_cost=mana_cost,
        type_line=TypeLine(
            card_types=frozenset((types or set()) | {CardType.CREATURE}),
            subtypes=frozenset(subtypes or ()),
            supertypes=frozenset(supertypes or ()),
        ),
        power=power,
        toughness=toughness,
        abilities=tuple(abilities or ()),
        colors=frozenset(colors) if colors is not None else None,
        metadata=metadata or CardMetadata(),
        text=text
    )


def make_card(
    name: str,
    types: set[CardType],
    mana_cost: str = "",
    subtypes: set[str] = None,
    supertypes: set[str] = None,
    colors: set[Color] = None,
    abilities: list = None,
    metadata: CardMetadata = None,
    text: str = ""
) -> CardDefinition:
    """Helper for non-creature cards (enchantments, artifacts, spells)."""
    return CardDefinition(
        name=name,
        mana_cost=mana_cost,
        type_line=TypeLine(
            card_types=frozenset(types),
            subtypes=frozenset(subtypes or ()),
            supertypes=frozenset(supertypes or ()),
        ),
        abilities=tuple(abilities or ()),
        colors=frozenset(colors) if colors is not None else None,
        metadata=metadata or CardMetadata(),
        text=text
    )
