"""
rulecore Query System

Continuous effects don't modify state directly. Every characteristic is
computed on read: start from the printed value (or the face-down baseline)
and fold it through the object's active effects in timestamp order.

Nothing here is cached, so an effect that expires stops applying the
moment it leaves the effect list.
"""

from typing import Optional, Union

from .abilities.base import Ability
from .abilities.keywords import Keyword, KeywordAbility, check_ability
from .effects import in_application_order
from .types import (
    GameState, GameObject, CardType, Characteristics, Color, TypeLine,
    FACE_DOWN_TYPE_LINE, FACE_DOWN_POWER, FACE_DOWN_TOUGHNESS,
)


AbilityVariant = Union[Ability, type, Keyword]


def get_name(obj: GameObject, state: GameState) -> Optional[str]:
    """Face-down objects have no name."""
    if obj.is_face_down:
        return None
    return obj.card_def.name


def get_types(obj: GameObject, state: GameState) -> set[CardType]:
    """Get computed card types of an object."""
    return set(_base_type_line(obj).card_types)


def get_subtypes(obj: GameObject, state: GameState) -> set[str]:
    """Get computed subtypes, after type-changing effects."""
    subtypes = _base_type_line(obj).subtypes
    for effect in in_application_order(state.effects_on(obj)):
        subtypes = effect.modification.apply_subtypes(subtypes)
    return set(subtypes)


def get_type_line(obj: GameObject, state: GameState) -> TypeLine:
    base = _base_type_line(obj)
    return TypeLine(
        card_types=base.card_types,
        subtypes=frozenset(get_subtypes(obj, state)),
        supertypes=base.supertypes,
    )


def get_colors(obj: GameObject, state: GameState) -> set[Color]:
    """Get computed colors. Face-down objects are colorless."""
    colors = frozenset() if obj.is_face_down else obj.card_def.colors
    for effect in in_application_order(state.effects_on(obj)):
        colors = effect.modification.apply_colors(colors)
    return set(colors)


def get_abilities(obj: GameObject, state: GameState) -> list[Ability]:
    """
    Current abilities of an object.

    Face-down objects start from nothing; their printed abilities are never
    consulted. Granted and removed abilities are then applied in timestamp
    order, removals after additions on the same timestamp.
    """
    if obj.is_face_down:
        abilities = []
    else:
        abilities = list(obj.card_def.abilities)

    for effect in in_application_order(state.effects_on(obj)):
        abilities = effect.modification.apply_abilities(abilities)

    for ability in abilities:
        check_ability(ability)
    return abilities


def has_ability(obj: GameObject, variant: AbilityVariant, state: GameState) -> bool:
    """
    Check if object has an ability.

    variant may be:
        - a Keyword: has_ability(obj, Keyword.FLYING, state)
        - an ability class: has_ability(obj, Protection, state)
        - an ability value: has_ability(obj, protection_from("Goblin"), state)
    """
    abilities = get_abilities(obj, state)

    if isinstance(variant, Keyword):
        return any(
            isinstance(a, KeywordAbility) and a.keyword == variant
            for a in abilities
        )
    if isinstance(variant, type):
        if not issubclass(variant, Ability):
            raise TypeError(f"Not an ability class: {variant!r}")
        return any(isinstance(a, variant) for a in abilities)

    check_ability(variant)
    if isinstance(variant, KeywordAbility):
        return has_ability(obj, variant.keyword, state)
    return variant in abilities


def _fold_pt(obj: GameObject, state: GameState) -> Optional[tuple[int, int]]:
    """Raw (unclamped) power/toughness after all modifiers."""
    if obj.is_face_down:
        power, toughness = FACE_DOWN_POWER, FACE_DOWN_TOUGHNESS
    elif obj.card_def.power is None or obj.card_def.toughness is None:
        return None
    else:
        power, toughness = obj.card_def.power, obj.card_def.toughness

    for effect in in_application_order(state.effects_on(obj)):
        power, toughness = effect.modification.apply_pt(power, toughness)
    return power, toughness


def get_power(obj: GameObject, state: GameState) -> int:
    """Get computed power of a creature, applying all continuous effects."""
    pt = _fold_pt(obj, state)
    if pt is None:
        return 0
    return max(0, pt[0])


def get_toughness(obj: GameObject, state: GameState) -> int:
    """Get computed toughness of a creature, applying all continuous effects."""
    pt = _fold_pt(obj, state)
    if pt is None:
        return 0
    return max(0, pt[1])


def is_creature(obj: GameObject, state: GameState) -> bool:
    """Check if object is currently a creature. Face-down permanents always are."""
    return CardType.CREATURE in get_types(obj, state)


def get_characteristics(obj: GameObject, state: GameState) -> Characteristics:
    """Full projected view, used for protection matching and the API."""
    pt = _fold_pt(obj, state)
    return Characteristics(
        name=get_name(obj, state),
        type_line=get_type_line(obj, state),
        colors=frozenset(get_colors(obj, state)),
        power=None if pt is None else max(0, pt[0]),
        toughness=None if pt is None else max(0, pt[1]),
        abilities=tuple(get_abilities(obj, state)),
    )


# =============================================================================
# Helper functions
# =============================================================================

def _base_type_line(obj: GameObject) -> TypeLine:
    if obj.is_face_down:
        return FACE_DOWN_TYPE_LINE
    return obj.card_def.type_line
