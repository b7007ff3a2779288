"""
Game service: hosting new games, including weekly recurring series.
"""

import logging
from datetime import datetime
from typing import List, Optional

import pytz

from hoook.database.app_state import AppState
from hoook.models.domain import Game, SkillBand, Sport
from hoook.utils.constants import MAX_PLAYER_CAP, MAX_RECURRENCE_WEEKS, TITLE_MAX_LENGTH
from hoook.utils.datetime_utils import add_weeks
from hoook.utils.exceptions import GameValidationError

logger = logging.getLogger(__name__)


def validate_game_request(title: str, sport: Sport, cap: int, recurrence: int) -> str:
    """
    Check hosting constraints before any game is built.

    Returns:
        The stripped title

    Raises:
        GameValidationError: If a constraint is broken
    """
    cleaned = (title or "").strip()
    if not cleaned:
        raise GameValidationError("Title is required")
    if len(cleaned) > TITLE_MAX_LENGTH:
        raise GameValidationError(f"Title must be at most {TITLE_MAX_LENGTH} characters")
    if sport is Sport.ALL:
        raise GameValidationError("Pick a specific sport for the game")
    if cap < 1 or cap > MAX_PLAYER_CAP:
        raise GameValidationError(f"Player cap must be between 1 and {MAX_PLAYER_CAP}")
    if recurrence < 0 or recurrence > MAX_RECURRENCE_WEEKS:
        raise GameValidationError(f"Recurrence must be between 0 and {MAX_RECURRENCE_WEEKS} weeks")
    return cleaned


def validate_coordinate(latitude: Optional[float], longitude: Optional[float]) -> None:
    """
    A game is either pinned with both coordinates or not pinned at all.

    Raises:
        GameValidationError: If only one coordinate is given or one is out of range
    """
    if latitude is None and longitude is None:
        return
    if latitude is None or longitude is None:
        raise GameValidationError("Latitude and longitude must be given together")
    if not -90 <= latitude <= 90 or not -180 <= longitude <= 180:
        raise GameValidationError("Coordinate is out of range")


def create_game(
    state: AppState,
    title: str,
    sport: Sport,
    date: datetime,
    location: str,
    skill_band: SkillBand,
    cap: int,
    on_campus: bool,
    recurrence: int = 0,
    description: str = "",
    latitude: Optional[float] = None,
    longitude: Optional[float] = None,
) -> List[Game]:
    """
    Host a game, repeated weekly ``recurrence`` more times.

    Every instance gets its own id, is hosted by the current user and starts
    with the host as the only roster member. All instances are added to the
    state together and the host's hosted count goes up by the number created.
    Existing games at the same place and time are not checked.

    Args:
        state: Application state to add the games to
        title: Game title
        sport: Sport played (not Sport.ALL)
        date: Start of the first instance; naive values are taken as UTC
        location: Free-text location
        skill_band: Skill band (SkillBand.ALL means open to everyone)
        cap: Roster capacity
        on_campus: Whether the game is on campus
        recurrence: Number of extra weekly instances after the first
        description: Free-text description
        latitude: Latitude of the map pin; omit both to leave the game off the map
        longitude: Longitude of the map pin

    Returns:
        The created games, earliest first

    Raises:
        GameValidationError: If title, sport, cap, recurrence or coordinate is invalid
    """
    cleaned_title = validate_game_request(title, sport, cap, recurrence)
    validate_coordinate(latitude, longitude)
    if date.tzinfo is None:
        date = pytz.UTC.localize(date)

    with state.lock:
        host = state.current_user
        new_games = [
            Game(
                title=cleaned_title,
                sport=sport,
                date=add_weeks(date, offset, state.timezone),
                location=location.strip(),
                skill_band=skill_band,
                player_cap=cap,
                on_campus=on_campus,
                host=host,
                roster=[host],
                waitlist=[],
                description=description,
                latitude=latitude,
                longitude=longitude,
            )
            for offset in range(recurrence + 1)
        ]
        state.add_games(new_games)
        host.games_hosted += len(new_games)

    logger.info(f"{host.display_name} created {len(new_games)} {sport.value} game(s) '{cleaned_title}'")
    return new_games
