"""Current-user profile route handlers."""

import logging

from fastapi import APIRouter, Depends, HTTPException

from hoook.api.dependencies import get_app_state
from hoook.database.app_state import AppState
from hoook.models.schemas import UpdateProfileRequest, UserResponse
from hoook.services import user_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/api/me", response_model=UserResponse)
def get_me(state: AppState = Depends(get_app_state)):
    """Get the current user's profile."""
    return UserResponse.from_user(state.current_user)


@router.patch("/api/me", response_model=UserResponse)
def update_me(payload: UpdateProfileRequest, state: AppState = Depends(get_app_state)):
    """Update the current user's profile. Omitted fields are left as they are."""
    try:
        user = user_service.update_profile(
            state,
            skill=payload.skill_band,
            bio=payload.bio,
            sports=payload.sports,
            availability=payload.availability,
        )
        return UserResponse.from_user(user)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error updating profile: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Error updating profile: {str(e)}")
