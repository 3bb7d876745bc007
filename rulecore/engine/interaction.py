"""
rulecore Interaction Resolver

Answers "may this object do X to that one?" for blocking, targeting,
damage and attachment. Evasion and protection both live here.

Protection from X means the protected object:
- Can't be Damaged by X
- Can't be Enchanted/Equipped by X
- Can't be Blocked by X
- Can't be Targeted by X
All four checks go through is_protected_from(), so they always agree.
"""

from typing import Optional

from .abilities.keywords import Keyword, Protection
from .queries import get_abilities, get_characteristics, get_colors, get_types, has_ability
from .types import CardType, Color, GameObject, GameState


def is_protected_from(obj: GameObject, source: GameObject, state: GameState) -> bool:
    """
    Check if obj has protection from source.

    Matching uses the source's current characteristics, so a creature
    that became a Goblin this turn is a Goblin for protection purposes,
    and a face-down source matches only "everything".
    """
    protections = [a for a in get_abilities(obj, state) if isinstance(a, Protection)]
    if not protections:
        return False

    source_chars = get_characteristics(source, state)
    return any(p.protects_from(source_chars) for p in protections)


def protection_reason(obj: GameObject, source: GameObject, state: GameState) -> Optional[str]:
    """Human-readable protection that applies, or None."""
    source_chars = get_characteristics(source, state)
    for ability in get_abilities(obj, state):
        if isinstance(ability, Protection) and ability.protects_from(source_chars):
            return ability.render_text(_display_name(obj)).lower()
    return None


def blocking_restriction(attacker: GameObject, blocker: GameObject, state: GameState) -> Optional[str]:
    """
    Why blocker can't block attacker, or None if the block is allowed.

    Only evasion and protection are checked here. Zone, tapped state and
    controller are the combat manager's business.
    """
    attacker_name = _display_name(attacker)
    blocker_name = _display_name(blocker)

    # Flying: Can only be blocked by creatures with flying or reach
    if has_ability(attacker, Keyword.FLYING, state):
        if not (has_ability(blocker, Keyword.FLYING, state) or
                has_ability(blocker, Keyword.REACH, state)):
            return f"{blocker_name} cannot block {attacker_name} (flying)"

    # Horsemanship: Can only be blocked by creatures with horsemanship
    if has_ability(attacker, Keyword.HORSEMANSHIP, state):
        if not has_ability(blocker, Keyword.HORSEMANSHIP, state):
            return f"{blocker_name} cannot block {attacker_name} (horsemanship)"

    # Shadow works both ways
    attacker_shadow = has_ability(attacker, Keyword.SHADOW, state)
    blocker_shadow = has_ability(blocker, Keyword.SHADOW, state)
    if attacker_shadow and not blocker_shadow:
        return f"{blocker_name} cannot block {attacker_name} (shadow)"
    if blocker_shadow and not attacker_shadow:
        return f"{blocker_name} has shadow and can only block creatures with shadow"

    # Fear: Can only be blocked by artifact creatures or black creatures
    if has_ability(attacker, Keyword.FEAR, state):
        if not (CardType.ARTIFACT in get_types(blocker, state) or
                Color.BLACK in get_colors(blocker, state)):
            return f"{blocker_name} cannot block {attacker_name} (fear)"

    # Protection: can't be blocked by creatures with the stated quality
    reason = protection_reason(attacker, blocker, state)
    if reason:
        return f"{attacker_name} has {reason} and can't be blocked by {blocker_name}"

    return None


def can_be_blocked_by(attacker: GameObject, blocker: GameObject, state: GameState) -> bool:
    """Check if attacker can be blocked by blocker (evasion and protection)."""
    return blocking_restriction(attacker, blocker, state) is None


def can_be_targeted_by(
    target: GameObject,
    source: GameObject,
    state: GameState,
    source_controller: str = None
) -> bool:
    """
    Check if target can be targeted by a spell or ability from source.

    source_controller defaults to the source's controller.
    """
    if source_controller is None:
        source_controller = source.controller

    # Shroud - can't be targeted by anything
    if has_ability(target, Keyword.SHROUD, state):
        return False

    # Hexproof - can't be targeted by opponents
    if has_ability(target, Keyword.HEXPROOF, state):
        if target.controller != source_controller:
            return False

    return not is_protected_from(target, source, state)


def can_deal_damage_to(source: GameObject, target: GameObject, state: GameState) -> bool:
    """Damage from a source the target is protected from is prevented."""
    return not is_protected_from(target, source, state)


def can_be_attached_by(obj: GameObject, source: GameObject, state: GameState) -> bool:
    """Can source (an Aura or Equipment) be attached to obj?"""
    return not is_protected_from(obj, source, state)


def _display_name(obj: GameObject) -> str:
    if obj.is_face_down:
        return "Face-down creature"
    return obj.card_def.name
