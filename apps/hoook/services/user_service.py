"""
User service layer for profile updates of the current user.
"""

import logging
from typing import Iterable, Optional

from hoook.database.app_state import AppState
from hoook.models.domain import Availability, SkillBand, Sport, User

logger = logging.getLogger(__name__)

BIO_MAX_LENGTH = 280


def update_profile(
    state: AppState,
    skill: Optional[SkillBand] = None,
    bio: Optional[str] = None,
    sports: Optional[Iterable[Sport]] = None,
    availability: Optional[Availability] = None,
) -> User:
    """
    Update the current user's profile in place.

    Games hold references to the same User object, so rosters and host names
    reflect the change immediately. Fields left as None are unchanged.

    Args:
        state: Application state
        skill: New skill band
        bio: New bio (stripped)
        sports: New set of sports; duplicates and Sport.ALL are dropped
        availability: New availability

    Returns:
        The updated user

    Raises:
        ValueError: If the bio is too long
    """
    if bio is not None and len(bio.strip()) > BIO_MAX_LENGTH:
        raise ValueError(f"Bio must be at most {BIO_MAX_LENGTH} characters")

    with state.lock:
        user = state.current_user
        if skill is not None:
            user.skill_band = skill
        if bio is not None:
            user.bio = bio.strip()
        if sports is not None:
            unique = []
            for sport in sports:
                if sport is not Sport.ALL and sport not in unique:
                    unique.append(sport)
            user.sports = unique
        if availability is not None:
            user.availability = availability

    logger.info(f"Updated profile for {user.display_name}")
    return user
