"""
Shared fixtures: a two-player game backed by the built-in catalog.
"""

import pytest

from rulecore.cards import build_catalog
from rulecore.engine import Game


@pytest.fixture(scope="session")
def catalog():
    return build_catalog()


@pytest.fixture
def game(catalog):
    return Game(catalog=catalog)


@pytest.fixture
def players(game):
    """(alice, bob): Alice is the active player."""
    return game.add_player("Alice"), game.add_player("Bob")
