"""
Hoook API Server

FastAPI server for the pickup-games feed, hosting, rosters and the discovery map.
"""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse
import logging
import uvicorn
from slowapi import _rate_limit_exceeded_handler  # type: ignore
from slowapi.errors import RateLimitExceeded  # type: ignore

from hoook.api.routes import router, limiter as routes_limiter
from hoook.database.app_state import AppState
from hoook.database.seed_games import seed_games
from hoook.services import settings_service
from hoook.services.auth_service import AuthService
from hoook.services.map_service import MapService, create_map_service
from hoook.services.map_session import MapSession

# Set up logging
# Allow log level to be configured via environment variable (default: INFO)
log_level = settings_service.get_log_level()
numeric_level = getattr(logging, log_level, logging.INFO)
logging.basicConfig(
    level=numeric_level, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def build_app_state() -> AppState:
    """Fresh in-memory state, seeded with demo games unless SEED_DEMO_GAMES is off."""
    state = AppState(timezone=settings_service.get_app_timezone())
    if settings_service.should_seed_demo_games():
        try:
            seed_games(state)
        except Exception as e:
            logger.error(f"Failed to seed demo games: {e}", exc_info=True)
    return state


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan handler for startup and shutdown events."""
    logger.info("Starting up Hoook API...")
    logger.info(f"Log level set from environment: {log_level}")
    logger.info(f"✓ {len(app.state.app_state.games)} games in memory")

    yield  # App is running

    logger.info("Shutting down Hoook API...")
    app.state.map_service.cache.clear()


def create_app(
    app_state: Optional[AppState] = None,
    map_service: Optional[MapService] = None,
    auth_service: Optional[AuthService] = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        app_state: Game/user state; built (and seeded) from settings if omitted
        map_service: Map service; built from settings if omitted
        auth_service: Identity provider; a fresh in-memory one if omitted

    Returns:
        FastAPI: Configured application
    """
    app = FastAPI(
        title="Hoook API",
        description="API for finding, hosting and joining pickup games",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.state.app_state = app_state or build_app_state()
    app.state.map_service = map_service or create_map_service()
    app.state.auth_service = auth_service or AuthService()
    app.state.map_session = MapSession(app.state.map_service, app_state=app.state.app_state)
    app.state.map_session.location.on_first_fix(app.state.map_session.initialize_region)

    # Setup rate limiter
    app.state.limiter = routes_limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    # Add CORS middleware, origins configured via ALLOWED_ORIGINS env var
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings_service.get_allowed_origins(),
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )

    # Include API routes
    app.include_router(router)

    @app.get("/", response_class=HTMLResponse)
    async def root():
        """API root endpoint - the mobile client is served separately."""
        return HTMLResponse(
            content="""
            <!DOCTYPE html>
            <html>
                <head>
                    <title>Hoook API</title>
                    <style>
                        body { font-family: sans-serif; max-width: 800px; margin: 50px auto; padding: 20px; }
                        h1 { color: #667eea; }
                        a { color: #667eea; }
                    </style>
                </head>
                <body>
                    <h1>Hoook API</h1>
                    <p>API is running successfully!</p>
                    <h2>Available Resources:</h2>
                    <ul>
                        <li><a href="/docs">API Documentation</a> - Interactive API docs</li>
                        <li><a href="/api/health">Health Check</a> - System status</li>
                    </ul>
                </body>
            </html>
        """
        )

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
