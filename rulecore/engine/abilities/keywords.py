"""
Ability System - Keyword Abilities

The closed set of ability variants the engine understands. Anything else
reaching a resolver is a configuration error, never silently ignored.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Callable

from ..errors import UnknownAbilityError
from ..mana import ManaCost
from ..types import CardType, Color
from .base import Ability, ProtectionQuality

if TYPE_CHECKING:
    from ..types import Characteristics, Event, GameObject
    from ..game import Game


class Keyword(Enum):
    FLYING = "Flying"
    REACH = "Reach"
    FEAR = "Fear"
    SHADOW = "Shadow"
    HORSEMANSHIP = "Horsemanship"
    DEFENDER = "Defender"
    HEXPROOF = "Hexproof"
    SHROUD = "Shroud"
    INDESTRUCTIBLE = "Indestructible"


# Reminder text for keywords
KEYWORD_REMINDER_TEXT = {
    Keyword.FLYING: "This creature can't be blocked except by creatures with flying or reach.",
    Keyword.REACH: "This creature can block creatures with flying.",
    Keyword.FEAR: "This creature can't be blocked except by artifact creatures and/or black creatures.",
    Keyword.SHADOW: "This creature can block or be blocked by only creatures with shadow.",
    Keyword.HORSEMANSHIP: "This creature can't be blocked except by creatures with horsemanship.",
    Keyword.DEFENDER: "This creature can't attack.",
    Keyword.HEXPROOF: "This creature can't be the target of spells or abilities your opponents control.",
    Keyword.SHROUD: "This creature can't be the target of spells or abilities.",
    Keyword.INDESTRUCTIBLE: "Damage and effects that say \"destroy\" don't destroy this.",
}


@dataclass(frozen=True)
class KeywordAbility(Ability):
    """
    A parameterless keyword like Flying or Reach.

    Examples:
        - KeywordAbility(Keyword.FLYING)
        - KeywordAbility(Keyword.REACH, show_reminder=True)
    """
    keyword: Keyword
    show_reminder: bool = field(default=False, compare=False)

    def render_text(self, card_name: str) -> str:
        if self.show_reminder:
            return f"{self.keyword.value} ({KEYWORD_REMINDER_TEXT[self.keyword]})"
        return self.keyword.value


# =============================================================================
# Protection
# =============================================================================

@dataclass(frozen=True)
class FromColor(ProtectionQuality):
    color: Color

    def matches(self, source: 'Characteristics') -> bool:
        return self.color in source.colors

    def describe(self) -> str:
        return self.color.name.lower()


@dataclass(frozen=True)
class FromCardType(ProtectionQuality):
    card_type: CardType

    def matches(self, source: 'Characteristics') -> bool:
        return self.card_type in source.types

    def describe(self) -> str:
        return self.card_type.name.lower() + "s"


@dataclass(frozen=True)
class FromSubtype(ProtectionQuality):
    """Protection from a creature subtype, e.g. "protection from Goblins"."""
    subtype: str

    def matches(self, source: 'Characteristics') -> bool:
        wanted = self.subtype.lower()
        return any(s.lower() == wanted for s in source.subtypes)

    def describe(self) -> str:
        return f"{self.subtype}s"


@dataclass(frozen=True)
class FromName(ProtectionQuality):
    name: str

    def matches(self, source: 'Characteristics') -> bool:
        # Face-down sources have no name and match nothing here
        return source.name is not None and source.name == self.name

    def describe(self) -> str:
        return f"cards named {self.name}"


@dataclass(frozen=True)
class FromEverything(ProtectionQuality):

    def matches(self, source: 'Characteristics') -> bool:
        return True

    def describe(self) -> str:
        return "everything"


@dataclass(frozen=True)
class Protection(Ability):
    """
    Protection from a quality.

    One predicate covers all four consequences: damage is prevented,
    it can't be Enchanted/Equipped, Blocked or Targeted by matching sources.
    """
    quality: ProtectionQuality

    def render_text(self, card_name: str) -> str:
        return f"Protection from {self.quality.describe()}"

    def protects_from(self, source: 'Characteristics') -> bool:
        return self.quality.matches(source)


# =============================================================================
# Morph
# =============================================================================

@dataclass(frozen=True)
class Morph(Ability):
    """
    Morph {cost}.

    The card may be cast face down as a 2/2 for {3} (casting is handled
    elsewhere) and turned face up any time its controller could pay the cost.
    """
    cost: ManaCost

    def __post_init__(self):
        if isinstance(self.cost, str):
            object.__setattr__(self, 'cost', ManaCost.parse(self.cost))

    def render_text(self, card_name: str) -> str:
        return f"Morph {self.cost.to_string()}"


TurnedFaceUpEffect = Callable[['GameObject', 'Game', tuple], list['Event']]


@dataclass(frozen=True)
class TurnedFaceUpTrigger(Ability):
    """
    "When ~ is turned face up, ..."

    The effect runs immediately after the transition and returns the events
    it produced. targets are whatever the controller chose when turning the
    card face up.
    """
    effect: TurnedFaceUpEffect
    text: str

    def render_text(self, card_name: str) -> str:
        return f"When {card_name} is turned face up, {self.text}"


# =============================================================================
# Closed variant set
# =============================================================================

ABILITY_VARIANTS = (KeywordAbility, Protection, Morph, TurnedFaceUpTrigger)

PROTECTION_QUALITIES = (FromColor, FromCardType, FromSubtype, FromName, FromEverything)


def check_ability(ability) -> Ability:
    """Return the ability unchanged, or fail loudly if it is not a known variant."""
    if type(ability) not in ABILITY_VARIANTS:
        raise UnknownAbilityError(ability)
    if isinstance(ability, Protection) and type(ability.quality) not in PROTECTION_QUALITIES:
        raise UnknownAbilityError(ability)
    if isinstance(ability, KeywordAbility) and not isinstance(ability.keyword, Keyword):
        raise UnknownAbilityError(ability)
    return ability


# Shorthands for card files
FLYING = KeywordAbility(Keyword.FLYING)
REACH = KeywordAbility(Keyword.REACH)
FEAR = KeywordAbility(Keyword.FEAR)
SHADOW = KeywordAbility(Keyword.SHADOW)
HORSEMANSHIP = KeywordAbility(Keyword.HORSEMANSHIP)
DEFENDER = KeywordAbility(Keyword.DEFENDER)
HEXPROOF = KeywordAbility(Keyword.HEXPROOF)
SHROUD = KeywordAbility(Keyword.SHROUD)
INDESTRUCTIBLE = KeywordAbility(Keyword.INDESTRUCTIBLE)


def protection_from(quality) -> Protection:
    """
    Build a Protection ability from a Color, CardType, or subtype string.

    Examples:
        protection_from(Color.BLACK)
        protection_from("Goblin")
    """
    if isinstance(quality, ProtectionQuality):
        return Protection(quality)
    if isinstance(quality, Color):
        return Protection(FromColor(quality))
    if isinstance(quality, CardType):
        return Protection(FromCardType(quality))
    if isinstance(quality, str):
        return Protection(FromSubtype(quality))
    raise TypeError(f"Can't build protection from {quality!r}")
