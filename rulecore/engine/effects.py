"""
rulecore Continuous Effects

Continuous effects don't modify objects directly. They sit in the game's
ordered effect list and change how characteristics are READ.

When you ask "what's this creature's power?", the query folds the base
value through every applicable effect in timestamp order.
"""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Iterable, Optional

from .abilities.keywords import check_ability
from .types import Color, new_id


class Duration(Enum):
    END_OF_TURN = auto()
    WHILE_SOURCE_ON_BATTLEFIELD = auto()
    PERMANENT = auto()


@dataclass(frozen=True)
class Modification:
    """
    Base modification. Every hook defaults to the identity.

    Hooks must be pure: they receive the value computed so far and return
    the new one, never touching the object or other effects.
    """

    # Ordering inside one timestamp; removals (1) apply after additions (0)
    order = 0

    def apply_pt(self, power: int, toughness: int) -> tuple[int, int]:
        return power, toughness

    def apply_abilities(self, abilities: list) -> list:
        return abilities

    def apply_subtypes(self, subtypes: frozenset[str]) -> frozenset[str]:
        return subtypes

    def apply_colors(self, colors: frozenset[Color]) -> frozenset[Color]:
        return colors


@dataclass(frozen=True)
class ModifyPT(Modification):
    """+X/+Y (or -X/-Y)."""
    power: int
    toughness: int

    def apply_pt(self, power: int, toughness: int) -> tuple[int, int]:
        return power + self.power, toughness + self.toughness


@dataclass(frozen=True)
class SetBasePT(Modification):
    """"has base power and toughness X/Y"."""
    power: int
    toughness: int

    def apply_pt(self, power: int, toughness: int) -> tuple[int, int]:
        return self.power, self.toughness


@dataclass(frozen=True)
class GrantAbilities(Modification):
    abilities: tuple

    def __post_init__(self):
        object.__setattr__(self, 'abilities', tuple(self.abilities))
        for ability in self.abilities:
            check_ability(ability)

    def apply_abilities(self, abilities: list) -> list:
        return abilities + [a for a in self.abilities if a not in abilities]


@dataclass(frozen=True)
class RemoveAbilities(Modification):
    abilities: tuple
    order = 1

    def __post_init__(self):
        object.__setattr__(self, 'abilities', tuple(self.abilities))
        for ability in self.abilities:
            check_ability(ability)

    def apply_abilities(self, abilities: list) -> list:
        return [a for a in abilities if a not in self.abilities]


@dataclass(frozen=True)
class RemoveAllAbilities(Modification):
    """"loses all abilities"."""
    order = 1

    def apply_abilities(self, abilities: list) -> list:
        return []


@dataclass(frozen=True)
class AddSubtypes(Modification):
    """"is a Goblin in addition to its other types"."""
    subtypes: frozenset[str]

    def __post_init__(self):
        object.__setattr__(self, 'subtypes', frozenset(self.subtypes))

    def apply_subtypes(self, subtypes: frozenset[str]) -> frozenset[str]:
        return subtypes | self.subtypes


@dataclass(frozen=True)
class SetSubtypes(Modification):
    """"becomes the creature type of your choice" (replaces all subtypes)."""
    subtypes: frozenset[str]

    def __post_init__(self):
        object.__setattr__(self, 'subtypes', frozenset(self.subtypes))

    def apply_subtypes(self, subtypes: frozenset[str]) -> frozenset[str]:
        return self.subtypes


@dataclass(frozen=True)
class SetColors(Modification):
    colors: frozenset[Color]

    def __post_init__(self):
        object.__setattr__(self, 'colors', frozenset(self.colors))

    def apply_colors(self, colors: frozenset[Color]) -> frozenset[Color]:
        return self.colors


@dataclass(frozen=True)
class ContinuousEffect:
    """A timestamped modification applying to one object."""
    object_id: str
    modification: Modification
    timestamp: int
    source_id: Optional[str] = None
    duration: Duration = Duration.END_OF_TURN
    id: str = field(default_factory=new_id)

    @property
    def sort_key(self) -> tuple[int, int]:
        return self.timestamp, self.modification.order


def in_application_order(effects: Iterable[ContinuousEffect]) -> list[ContinuousEffect]:
    """Timestamp order, removals after additions on ties."""
    return sorted(effects, key=lambda e: e.sort_key)
