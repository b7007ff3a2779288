"""
Shared pytest configuration for hoook tests.

Everything is in memory, so each test builds its own AppState with a fixed
clock. Calendar logic runs in UTC unless a test asks for another timezone.
"""

import os

# Must be set before hoook.api.routes is imported so the rate limiter is a no-op
os.environ["ENV"] = "test"
os.environ.setdefault("SEED_DEMO_GAMES", "false")

from datetime import datetime, timedelta  # noqa: E402

import pytest  # noqa: E402
import pytz  # noqa: E402

from hoook.database.app_state import AppState  # noqa: E402
from hoook.models.domain import Game, SkillBand, Sport, User  # noqa: E402

# Wednesday 2026-10-14 15:00 UTC
FIXED_NOW = pytz.UTC.localize(datetime(2026, 10, 14, 15, 0))


def _make_user(first_name: str, last_initial: str = "T") -> User:
    return User(first_name=first_name, last_initial=last_initial)


def _make_game(
    host: User,
    title: str = "Pickup Run",
    sport: Sport = Sport.BASKETBALL,
    date: datetime = FIXED_NOW + timedelta(hours=3),
    skill_band: SkillBand = SkillBand.CASUAL,
    player_cap: int = 10,
    on_campus: bool = True,
    roster=None,
    waitlist=None,
    location: str = "Gregory Gym",
    latitude=None,
    longitude=None,
) -> Game:
    return Game(
        title=title,
        sport=sport,
        date=date,
        location=location,
        skill_band=skill_band,
        player_cap=player_cap,
        on_campus=on_campus,
        host=host,
        roster=list(roster) if roster is not None else [host],
        waitlist=list(waitlist or []),
        latitude=latitude,
        longitude=longitude,
    )


@pytest.fixture
def make_user():
    """Factory for throwaway players."""
    return _make_user


@pytest.fixture
def make_game():
    """Factory for games; the host is the only roster member unless ``roster`` is given."""
    return _make_game


@pytest.fixture
def now():
    return FIXED_NOW


@pytest.fixture
def clock():
    return lambda: FIXED_NOW


@pytest.fixture
def current_user():
    return User(first_name="Alex", last_initial="S")


@pytest.fixture
def state(current_user, clock):
    """Empty AppState for the current user with a fixed UTC clock."""
    return AppState(current_user=current_user, clock=clock, timezone="UTC")
