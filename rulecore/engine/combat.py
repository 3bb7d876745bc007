"""
rulecore Combat Manager

Handles the combat phase:
- Declare Attackers
- Declare Blockers
- Combat Damage
- End of Combat

Evasion and protection are decided by the interaction resolver. No first
strike: all combat damage is dealt at once.
"""

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional

from .abilities.keywords import Keyword
from .interaction import blocking_restriction
from .queries import get_power, get_toughness, has_ability, is_creature
from .types import ActionResult, Event, EventType, GameObject, ZoneType

if TYPE_CHECKING:
    from .game import Game

logger = logging.getLogger(__name__)


@dataclass
class AttackDeclaration:
    """Declaration of an attacking creature."""
    attacker_id: str
    defending_player_id: str


@dataclass
class BlockDeclaration:
    """Declaration of a blocking creature."""
    blocker_id: str
    blocking_attacker_id: str


@dataclass
class CombatState:
    """State of the current combat."""
    attackers: list[AttackDeclaration] = field(default_factory=list)
    blockers: list[BlockDeclaration] = field(default_factory=list)

    # Attackers that were blocked stay blocked even if their blockers leave
    blocked_attackers: set[str] = field(default_factory=set)

    # Defending players who have already declared blocks
    blocking_players: set[str] = field(default_factory=set)
    combat_damage_dealt: bool = False

    def attack_for(self, attacker_id: str) -> Optional[AttackDeclaration]:
        for decl in self.attackers:
            if decl.attacker_id == attacker_id:
                return decl
        return None

    def blockers_of(self, attacker_id: str) -> list[str]:
        return [b.blocker_id for b in self.blockers if b.blocking_attacker_id == attacker_id]

    def attackers_blocked_by(self, blocker_id: str) -> list[str]:
        return [b.blocking_attacker_id for b in self.blockers if b.blocker_id == blocker_id]


class CombatManager:
    """
    Manages combat phase mechanics for one game.
    """

    def __init__(self, game: 'Game'):
        self.game = game
        self.combat_state = CombatState()

    @property
    def state(self):
        return self.game.state

    def reset_combat(self) -> None:
        """Reset combat state for a new combat phase."""
        self.combat_state = CombatState()

    def remove_from_combat(self, object_id: str) -> None:
        """Called when a creature leaves the battlefield."""
        cs = self.combat_state
        cs.attackers = [a for a in cs.attackers if a.attacker_id != object_id]
        cs.blockers = [
            b for b in cs.blockers
            if b.blocker_id != object_id and b.blocking_attacker_id != object_id
        ]

    # =========================================================================
    # Declare Attackers
    # =========================================================================

    def get_possible_attackers(self, player_id: str) -> list[str]:
        """Creatures player_id could declare as attackers."""
        return [
            obj.id for obj in self.state.objects_in(ZoneType.BATTLEFIELD, controller=player_id)
            if self._attack_problem(obj, player_id) is None
        ]

    def _attack_problem(self, obj: GameObject, player_id: str) -> Optional[str]:
        if obj.zone != ZoneType.BATTLEFIELD:
            return "Attacker is not on the battlefield"
        if obj.controller != player_id:
            return "You don't control this creature"
        if not is_creature(obj, self.state):
            return "Only creatures can attack"
        if obj.tapped:
            return "Tapped creatures can't attack"
        if has_ability(obj, Keyword.DEFENDER, self.state):
            return "Creatures with defender can't attack"
        return None

    def declare_attackers(self, player_id: str, declarations: list[AttackDeclaration]) -> ActionResult:
        """
        Declare attackers. Either every declaration is legal and all of them
        happen, or the whole declaration is rejected.
        """
        if self.combat_state.attackers:
            return ActionResult.rejected("Attackers have already been declared")

        seen = set()
        for decl in declarations:
            obj = self.state.objects.get(decl.attacker_id)
            if obj is None:
                return ActionResult.rejected(f"Attacker not found: {decl.attacker_id}")
            if decl.attacker_id in seen:
                return ActionResult.rejected(f"{obj.card_def.name} is declared twice")
            seen.add(decl.attacker_id)

            problem = self._attack_problem(obj, player_id)
            if problem:
                return ActionResult.rejected(problem)

            defender = self.state.players.get(decl.defending_player_id)
            if defender is None or defender.id == player_id:
                return ActionResult.rejected("Must attack an opponent")

        events = []
        for decl in declarations:
            attacker = self.state.objects[decl.attacker_id]
            attacker.tapped = True
            self.combat_state.attackers.append(decl)
            events.append(self.game.emit(Event(
                type=EventType.ATTACK_DECLARED,
                payload={
                    'attacker_id': decl.attacker_id,
                    'defending_player': decl.defending_player_id,
                },
                source=decl.attacker_id,
                controller=player_id
            )))

        events.extend(self.game.check_state_based_actions())
        return ActionResult.ok(events)

    # =========================================================================
    # Declare Blockers
    # =========================================================================

    def get_possible_blockers(self, player_id: str, attacker_id: str) -> list[str]:
        """Creatures player_id could legally block attacker_id with."""
        attacker = self.state.objects.get(attacker_id)
        if attacker is None or self.combat_state.attack_for(attacker_id) is None:
            return []
        return [
            obj.id for obj in self.state.objects_in(ZoneType.BATTLEFIELD, controller=player_id)
            if self._block_problem(obj, attacker, player_id) is None
        ]

    def _block_problem(self, blocker: GameObject, attacker: GameObject, player_id: str) -> Optional[str]:
        decl = self.combat_state.attack_for(attacker.id)
        if decl is None:
            return f"{attacker.card_def.name} is not attacking"
        if decl.defending_player_id != player_id:
            return "That creature is not attacking you"
        if blocker.zone != ZoneType.BATTLEFIELD:
            return "Blocker is not on the battlefield"
        if blocker.controller != player_id:
            return "You don't control this creature"
        if not is_creature(blocker, self.state):
            return "Only creatures can block"
        if blocker.tapped:
            return "Tapped creatures can't block"
        return blocking_restriction(attacker, blocker, self.state)

    def declare_blockers(self, player_id: str, declarations: list[BlockDeclaration]) -> ActionResult:
        """
        Declare blockers. Each creature blocks at most one attacker. An
        illegal block rejects the whole declaration and changes nothing.
        """
        if not self.combat_state.attackers:
            return ActionResult.rejected("No attackers have been declared")
        if player_id in self.combat_state.blocking_players:
            return ActionResult.rejected("Blockers have already been declared")

        seen = set()
        for decl in declarations:
            blocker = self.state.objects.get(decl.blocker_id)
            attacker = self.state.objects.get(decl.blocking_attacker_id)
            if blocker is None or attacker is None:
                return ActionResult.rejected("Blocker or attacker not found")
            if decl.blocker_id in seen:
                return ActionResult.rejected(f"{blocker.card_def.name} can only block one attacker")
            seen.add(decl.blocker_id)

            problem = self._block_problem(blocker, attacker, player_id)
            if problem:
                logger.debug("Block rejected: %s", problem)
                return ActionResult.rejected(problem)

        events = []
        for decl in declarations:
            self.combat_state.blockers.append(decl)
            self.combat_state.blocked_attackers.add(decl.blocking_attacker_id)
            events.append(self.game.emit(Event(
                type=EventType.BLOCK_DECLARED,
                payload={
                    'blocker_id': decl.blocker_id,
                    'attacker_id': decl.blocking_attacker_id,
                },
                source=decl.blocker_id,
                controller=player_id
            )))
        self.combat_state.blocking_players.add(player_id)

        events.extend(self.game.check_state_based_actions())
        return ActionResult.ok(events)

    # =========================================================================
    # Combat Damage
    # =========================================================================

    def assign_combat_damage(self) -> list[tuple[str, str, int]]:
        """
        Work out every (source_id, target_id, amount) for this combat.

        Attackers assign lethal damage to each blocker in declaration order
        and the rest to the last one. Unblocked attackers hit the defending
        player. An attacker whose blockers are all gone deals no damage.
        """
        assignments = []

        for decl in self.combat_state.attackers:
            attacker = self.state.objects.get(decl.attacker_id)
            if attacker is None or attacker.zone != ZoneType.BATTLEFIELD:
                continue
            power = get_power(attacker, self.state)

            if decl.attacker_id not in self.combat_state.blocked_attackers:
                if power > 0:
                    assignments.append((attacker.id, decl.defending_player_id, power))
                continue

            blockers = [
                self.state.objects[b] for b in self.combat_state.blockers_of(decl.attacker_id)
                if self.state.objects[b].zone == ZoneType.BATTLEFIELD
            ]
            remaining = power
            for i, blocker in enumerate(blockers):
                if remaining <= 0:
                    break
                if i == len(blockers) - 1:
                    amount = remaining
                else:
                    lethal = max(1, get_toughness(blocker, self.state) - blocker.damage)
                    amount = min(remaining, lethal)
                assignments.append((attacker.id, blocker.id, amount))
                remaining -= amount

        for decl in self.combat_state.blockers:
            blocker = self.state.objects.get(decl.blocker_id)
            attacker = self.state.objects.get(decl.blocking_attacker_id)
            if blocker is None or attacker is None:
                continue
            if blocker.zone != ZoneType.BATTLEFIELD or attacker.zone != ZoneType.BATTLEFIELD:
                continue
            power = get_power(blocker, self.state)
            if power > 0:
                assignments.append((blocker.id, attacker.id, power))

        return assignments

    def combat_damage(self) -> ActionResult:
        """Deal all combat damage simultaneously, then check SBAs."""
        if not self.combat_state.attackers:
            return ActionResult.rejected("No attackers have been declared")
        if self.combat_state.combat_damage_dealt:
            return ActionResult.rejected("Combat damage has already been dealt")

        events = []
        for source_id, target_id, amount in self.assign_combat_damage():
            source = self.state.objects[source_id]
            events.extend(self.game.deal_damage(source, target_id, amount, combat=True))
        self.combat_state.combat_damage_dealt = True

        events.extend(self.game.check_state_based_actions())
        return ActionResult.ok(events)

    def end_combat(self) -> None:
        self.reset_combat()
