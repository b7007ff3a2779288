"""
Seed demo players and games into a fresh AppState on startup.

Times are relative to the state's clock so the feed always has something in
the Today and Tomorrow windows.
"""

import logging
from datetime import timedelta

from hoook.database.app_state import AppState
from hoook.models.domain import Availability, Game, SkillBand, Sport, User
from hoook.utils.datetime_utils import get_timezone, start_of_day

logger = logging.getLogger(__name__)

# Map pins for the demo courts around UT Austin
COURT_COORDINATES = {
    "Whitaker Fields": (30.3105, -97.7318),
    "Intramural Courts": (30.3090, -97.7305),
    "Gregory Gym Court 3": (30.2842, -97.7366),
    "Penick-Allison Courts": (30.2893, -97.7305),
}


def _demo_players():
    jordan = User(
        first_name="Jordan",
        last_initial="P",
        skill_band=SkillBand.CASUAL,
        availability=Availability.WEEKENDS,
        sports=[Sport.BASKETBALL, Sport.SOCCER],
        bio="Shows up early, brings an extra ball.",
    )
    dev = User(
        first_name="Dev",
        last_initial="K",
        skill_band=SkillBand.COMPETITIVE,
        availability=Availability.ANYTIME,
        sports=[Sport.PICKLEBALL, Sport.TENNIS],
        bio="Club player testing competitive runs.",
    )
    return jordan, dev


def seed_games(state: AppState) -> int:
    """
    Add the demo games hosted by the current user.

    Returns:
        Number of games added
    """
    host = state.current_user
    jordan, dev = _demo_players()
    now = state.now()

    # Today at 6pm local, or tomorrow if 6pm has passed
    zone = get_timezone(state.timezone)
    evening = start_of_day(now, zone).replace(tzinfo=None) + timedelta(hours=18)
    evening = zone.localize(evening)
    if evening < now:
        evening = zone.localize(evening.replace(tzinfo=None) + timedelta(days=1))

    games = [
        Game(
            title="Evening Basketball",
            sport=Sport.BASKETBALL,
            date=evening,
            location="Whitaker Fields",
            skill_band=SkillBand.CASUAL,
            player_cap=10,
            on_campus=True,
            host=host,
            roster=[host],
            description="Casual pickup game. All skill levels welcome.",
        ),
        Game(
            title="Pickleball – West Campus Courts",
            sport=Sport.PICKLEBALL,
            date=now + timedelta(hours=4),
            location="Intramural Courts",
            skill_band=SkillBand.INTERMEDIATE,
            player_cap=8,
            on_campus=True,
            host=host,
            roster=[jordan, dev],
            description="Casual run, paddles available. Show up 10 min early.",
        ),
        Game(
            title="Friday Night Hoops",
            sport=Sport.BASKETBALL,
            date=now + timedelta(hours=24),
            location="Gregory Gym Court 3",
            skill_band=SkillBand.CASUAL,
            player_cap=10,
            on_campus=True,
            host=host,
            roster=[host, jordan],
            description="Anchor game to keep the list warm. All levels welcome.",
        ),
        Game(
            title="Weekend Soccer Scrimmage",
            sport=Sport.SOCCER,
            date=now + timedelta(hours=54),
            location="Whitaker Fields",
            skill_band=SkillBand.COMPETITIVE,
            player_cap=14,
            on_campus=False,
            host=host,
            roster=[dev, jordan],
            description="Full-field if we hit 14. Bring a light and dark shirt.",
        ),
        Game(
            title="Doubles Tennis Ladder",
            sport=Sport.TENNIS,
            date=now + timedelta(hours=30),
            location="Penick-Allison Courts",
            skill_band=SkillBand.COMPETITIVE,
            player_cap=2,
            on_campus=True,
            host=host,
            roster=[dev, jordan],
            waitlist=[],
            description="Full this week, join the waitlist for a seat.",
        ),
        Game(
            title="Volleyball Practice",
            sport=Sport.VOLLEYBALL,
            date=evening + timedelta(hours=2),
            location="Intramural Courts",
            skill_band=SkillBand.INTERMEDIATE,
            player_cap=12,
            on_campus=True,
            host=host,
            roster=[host],
            description="Intermediate level volleyball game.",
        ),
    ]
    for game in games:
        game.latitude, game.longitude = COURT_COORDINATES.get(game.location, (None, None))

    state.add_games(games)
    host.games_hosted = len(games)
    logger.info(f"Seeded {len(games)} demo games")
    return len(games)
