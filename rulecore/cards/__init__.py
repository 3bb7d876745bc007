"""
Card Registry Module

Exports all card registries from the different sets, and the catalog
built from them.
"""

from pathlib import Path
from typing import Optional, Union

# Test set
from .test_cards import TEST_CARDS

# Sets
from .onslaught import ONSLAUGHT_CARDS
from .portal import PORTAL_CARDS

from .catalog import CardCatalog


def build_catalog(extra_path: Optional[Union[str, Path]] = None) -> CardCatalog:
    """
    Catalog of every built-in set, plus the cards in a JSON catalog file
    when extra_path is given. A name may appear in only one set.
    """
    catalog = CardCatalog.from_registries(TEST_CARDS, ONSLAUGHT_CARDS, PORTAL_CARDS)
    if extra_path:
        catalog = catalog.merged(CardCatalog.from_json(extra_path))
    return catalog


__all__ = [
    'TEST_CARDS',
    'ONSLAUGHT_CARDS',
    'PORTAL_CARDS',
    'CardCatalog',
    'build_catalog',
]
