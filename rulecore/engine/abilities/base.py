"""
Ability System - Base Classes

Abilities are plain immutable values. Each one knows how to render its own
rules text; the resolvers (queries, interaction, morph) give them meaning.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..types import Characteristics


# Bump whenever a variant is added to or removed from ABILITY_VARIANTS.
# Serialized catalogs record the version they were written against and are
# refused on mismatch.
ABILITY_MODEL_VERSION = 1


@dataclass(frozen=True)
class Ability(ABC):
    """Base class for all abilities."""

    @abstractmethod
    def render_text(self, card_name: str) -> str:
        """Generate human-readable rules text for this ability."""
        ...


@dataclass(frozen=True)
class ProtectionQuality(ABC):
    """The X in "protection from X"."""

    @abstractmethod
    def matches(self, source: 'Characteristics') -> bool:
        """Does a source with these current characteristics have quality X?"""
        ...

    @abstractmethod
    def describe(self) -> str:
        ...
