"""
rulecore API Server

FastAPI backend hosting independent rules-engine games.
"""

from .main import app
from .session import GameSession, SessionManager

__all__ = ['app', 'GameSession', 'SessionManager']
