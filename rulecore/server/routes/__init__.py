"""
API Routes
"""

from .games import router as games_router
from .cards import router as cards_router

__all__ = ['games_router', 'cards_router']
