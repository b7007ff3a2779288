"""Health check route handler."""

import logging

from fastapi import APIRouter, Depends

from hoook.api.dependencies import get_app_state
from hoook.database.app_state import AppState
from hoook.models.schemas import HealthResponse

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/api/health", response_model=HealthResponse)
async def health_check(state: AppState = Depends(get_app_state)):
    """
    Health check endpoint.

    Returns:
        HealthResponse: Service status and number of games held in memory
    """
    try:
        return HealthResponse(status="healthy", game_count=len(state.games), message="API is running")
    except Exception as e:
        return HealthResponse(status="unhealthy", game_count=0, message=f"Error: {str(e)}")
