"""
API routes - combined router from all domain modules.

Shared infrastructure (limiter) lives here; every sub-router imports what it
needs from this package.
"""

from fastapi import APIRouter
from slowapi import Limiter
from slowapi.util import get_remote_address

from hoook.services.settings_service import is_test_env

# ---------------------------------------------------------------------------
# Shared rate limiter
# ---------------------------------------------------------------------------
if is_test_env():
    limiter = Limiter(key_func=get_remote_address)

    def no_op_limit(*args, **kwargs):
        """No-op decorator for test mode - doesn't apply any rate limiting."""
        def decorator(func):
            return func
        return decorator

    limiter.limit = lambda *args, **kwargs: no_op_limit()
else:
    limiter = Limiter(key_func=get_remote_address)

# ---------------------------------------------------------------------------
# Import sub-routers and combine
# ---------------------------------------------------------------------------
from hoook.api.routes.health import router as health_router  # noqa: E402
from hoook.api.routes.games import router as games_router  # noqa: E402
from hoook.api.routes.users import router as users_router  # noqa: E402
from hoook.api.routes.map import router as map_router  # noqa: E402
from hoook.api.routes.location import router as location_router  # noqa: E402
from hoook.api.routes.auth import router as auth_router  # noqa: E402

router = APIRouter()
router.include_router(health_router)
router.include_router(games_router)
router.include_router(users_router)
router.include_router(map_router)
router.include_router(location_router)
router.include_router(auth_router)
