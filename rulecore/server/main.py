"""
rulecore API Server

FastAPI application exposing the card catalog and hosting independent games.
"""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from rulecore import __version__
from rulecore.cards import build_catalog
from rulecore.config import ServerConfig, configure_logging

from .routes import games_router, cards_router
from .session import session_manager

logger = logging.getLogger(__name__)

config = ServerConfig.from_env()


# =============================================================================
# FastAPI Application
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    # Startup
    configure_logging(config.log_level)
    catalog = build_catalog(config.catalog_path)
    session_manager.configure(catalog, starting_life=config.starting_life)
    logger.info("rulecore API starting with %d cards", len(catalog))
    yield
    # Shutdown
    logger.info("rulecore API shutting down (%d games open)", len(session_manager.sessions))


# Create FastAPI app
app = FastAPI(
    title="rulecore API",
    description="Card catalog and rules evaluation for morph, protection and evasion",
    version=__version__,
    lifespan=lifespan
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Mount routers
app.include_router(games_router, prefix="/api")
app.include_router(cards_router, prefix="/api")


# Health check endpoint
@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": "rulecore-api"}


@app.get("/")
async def root():
    """Root endpoint with API info."""
    return {
        "name": "rulecore API",
        "version": __version__,
        "docs": "/docs",
        "health": "/health"
    }


def main():
    """Run the server with uvicorn."""
    import uvicorn
    uvicorn.run(
        "rulecore.server.main:app",
        host=config.host,
        port=config.port,
        log_level=config.log_level.lower()
    )


# Main entry point
if __name__ == "__main__":
    main()
