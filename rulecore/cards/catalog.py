"""
Card Catalog

Immutable registry of card definitions keyed by name. Built once at
startup and shared by reference between every game; nothing mutates it
afterwards.
"""

import logging
from pathlib import Path
from typing import Iterable, Iterator, Optional, Union

from rulecore.engine import (
    CardDefinition, CardType, Color, CardNotFoundError, ConfigurationError,
)

from .records import dump_catalog_file, parse_catalog_file

logger = logging.getLogger(__name__)


class CardCatalog:
    """
    Read-only name -> CardDefinition lookup.

    Lookups are exact first, then case-insensitive. Unknown names raise
    CardNotFoundError.
    """

    def __init__(self, cards: Iterable[CardDefinition] = ()):
        self._cards: dict[str, CardDefinition] = {}
        self._lower: dict[str, str] = {}
        for card in cards:
            self._add(card)

    def _add(self, card: CardDefinition) -> None:
        existing = self._cards.get(card.name)
        if existing is card:
            return
        if existing is not None or card.name.lower() in self._lower:
            raise ConfigurationError(f"Duplicate card name in catalog: {card.name!r}")
        self._cards[card.name] = card
        self._lower[card.name.lower()] = card.name

    # =========================================================================
    # Construction
    # =========================================================================

    @classmethod
    def from_registries(cls, *registries: dict[str, CardDefinition]) -> 'CardCatalog':
        """Build a catalog from name -> definition registries (the card set modules)."""
        cards = []
        for registry in registries:
            for name, card in registry.items():
                if name != card.name:
                    raise ConfigurationError(
                        f"Registry key {name!r} doesn't match card name {card.name!r}"
                    )
                cards.append(card)
        return cls(cards)

    @classmethod
    def from_json(cls, path: Union[str, Path]) -> 'CardCatalog':
        """Load a catalog file. See records.py for the format."""
        path = Path(path)
        catalog = cls(parse_catalog_file(path.read_text(encoding="utf-8")))
        logger.info("Loaded %d cards from %s", len(catalog), path)
        return catalog

    def merged(self, other: 'CardCatalog') -> 'CardCatalog':
        """A new catalog holding both; names must not collide."""
        return CardCatalog(list(self) + list(other))

    def to_json(self) -> str:
        return dump_catalog_file(self)

    # =========================================================================
    # Lookup
    # =========================================================================

    def lookup(self, name: str) -> CardDefinition:
        card = self.get(name)
        if card is None:
            raise CardNotFoundError(name)
        return card

    def get(self, name: str, default: Optional[CardDefinition] = None) -> Optional[CardDefinition]:
        card = self._cards.get(name)
        if card is not None:
            return card
        real_name = self._lower.get(name.lower())
        if real_name is None:
            return default
        return self._cards[real_name]

    def names(self) -> list[str]:
        return sorted(self._cards)

    def search(
        self,
        card_type: Optional[CardType] = None,
        color: Optional[Color] = None,
        name: Optional[str] = None,
        subtype: Optional[str] = None
    ) -> list[CardDefinition]:
        """Filter cards, sorted by name. name is a case-insensitive substring."""
        results = []
        for card_name in self.names():
            card = self._cards[card_name]
            if card_type is not None and card_type not in card.type_line.card_types:
                continue
            if color is not None and color not in card.colors:
                continue
            if name and name.lower() not in card_name.lower():
                continue
            if subtype and subtype.lower() not in {s.lower() for s in card.type_line.subtypes}:
                continue
            results.append(card)
        return results

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.get(name) is not None

    def __len__(self) -> int:
        return len(self._cards)

    def __iter__(self) -> Iterator[CardDefinition]:
        return (self._cards[n] for n in self.names())

    def __repr__(self) -> str:
        return f"CardCatalog({len(self)} cards)"
