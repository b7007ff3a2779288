"""
Feed service: filter and order the game list for the discovery feed, and
project located games onto the discovery map.
"""

from datetime import datetime, timedelta
from typing import Iterable, List, Optional, Sequence, Union

import pytz

from hoook.models.domain import (
    Coordinate,
    Game,
    MapGame,
    MapTimeFilter,
    SkillBand,
    Sport,
    TimeWindow,
    Venue,
)
from hoook.utils.constants import DEFAULT_TIMEZONE, NOW_WINDOW_MINUTES
from hoook.utils.datetime_utils import is_next_day, is_same_day, is_same_week, is_weekend
from hoook.utils.geo_utils import calculate_distance_miles


def matches_time_window(
    game_date: datetime,
    time_window: TimeWindow,
    now: datetime,
    tz: Union[str, pytz.BaseTzInfo] = DEFAULT_TIMEZONE,
) -> bool:
    """
    Check a game date against a feed time window relative to ``now``.

    WEEKEND matches any Saturday or Sunday, not only the coming one.
    """
    if time_window is TimeWindow.TODAY:
        return is_same_day(game_date, now, tz)
    if time_window is TimeWindow.TOMORROW:
        return is_next_day(game_date, now, tz)
    if time_window is TimeWindow.WEEK:
        return is_same_week(game_date, now, tz)
    if time_window is TimeWindow.WEEKEND:
        return is_weekend(game_date, tz)
    return True


def filtered_games(
    games: Iterable[Game],
    now: datetime,
    sport: Optional[Sport] = None,
    skill: Optional[SkillBand] = None,
    on_campus_only: bool = False,
    time_window: TimeWindow = TimeWindow.ALL,
    tz: Union[str, pytz.BaseTzInfo] = DEFAULT_TIMEZONE,
) -> List[Game]:
    """
    Return the games matching every filter, earliest first.

    Args:
        games: Games to filter (not modified)
        now: Reference time for the time window
        sport: Sport filter; None or Sport.ALL matches every sport
        skill: Skill filter; None or SkillBand.ALL matches every band
        on_campus_only: Keep only on-campus games
        time_window: Calendar bucket relative to ``now``
        tz: Timezone that defines calendar days

    Returns:
        New list sorted by date; games with equal dates keep their input order
    """
    matching = []
    for game in games:
        if sport not in (None, Sport.ALL) and game.sport != sport:
            continue
        if skill not in (None, SkillBand.ALL) and game.skill_band != skill:
            continue
        if on_campus_only and not game.on_campus:
            continue
        if not matches_time_window(game.date, time_window, now, tz):
            continue
        matching.append(game)

    # sorted() is stable
    return sorted(matching, key=lambda game: game.date)


def matches_map_time_filter(
    start_time: datetime,
    time_filter: MapTimeFilter,
    now: datetime,
    tz: Union[str, pytz.BaseTzInfo] = DEFAULT_TIMEZONE,
) -> bool:
    """
    Check a game start against a map time filter relative to ``now``.

    NOW covers games that started or start within NOW_WINDOW_MINUTES of now.
    NEXT_24H only looks forward; TODAY and THIS_WEEK use the local calendar.
    """
    if start_time.tzinfo is None:
        start_time = pytz.UTC.localize(start_time)
    if time_filter is MapTimeFilter.NOW:
        window = timedelta(minutes=NOW_WINDOW_MINUTES)
        return now - window <= start_time <= now + window
    if time_filter is MapTimeFilter.TODAY:
        return is_same_day(start_time, now, tz)
    if time_filter is MapTimeFilter.NEXT_24H:
        return now <= start_time <= now + timedelta(hours=24)
    return is_same_week(start_time, now, tz)


def map_games(
    games: Iterable[Game],
    now: datetime,
    center: Coordinate,
    radius_miles: float,
    sport: Optional[Sport] = None,
    time_filter: MapTimeFilter = MapTimeFilter.TODAY,
    venues: Sequence[Venue] = (),
    tz: Union[str, pytz.BaseTzInfo] = DEFAULT_TIMEZONE,
) -> List[MapGame]:
    """
    Project hosted games onto map pins around ``center``.

    Only games with a coordinate are placed. A game whose location names one
    of ``venues`` is linked to that venue.

    Args:
        games: Hosted games (not modified)
        now: Reference time for the time filter
        center: Search center
        radius_miles: Great-circle search radius
        sport: Sport filter; None or Sport.ALL matches every sport
        time_filter: Map time filter relative to ``now``
        venues: Venues already on the map
        tz: Timezone that defines calendar days

    Returns:
        Map games sorted by start time, each sharing its game's id
    """
    venues_by_name = {venue.name.casefold(): venue for venue in venues}
    projected = []
    for game in games:
        coordinate = game.coordinate
        if coordinate is None:
            continue
        if sport not in (None, Sport.ALL) and game.sport != sport:
            continue
        if not matches_map_time_filter(game.date, time_filter, now, tz):
            continue
        distance = calculate_distance_miles(
            center.latitude, center.longitude, coordinate.latitude, coordinate.longitude
        )
        if distance > radius_miles:
            continue
        venue = venues_by_name.get(game.location.strip().casefold())
        projected.append(MapGame.from_game(game, coordinate.latitude, coordinate.longitude, venue=venue))

    return sorted(projected, key=lambda map_game: map_game.start_time)
