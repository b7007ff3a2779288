"""
Map data sources: where venues and games near a coordinate come from.

PlaceholderMapDataSource generates believable pins around the requested point
until the discovery API exists. HttpMapDataSource talks to that API with the
same query shape.
"""

import logging
import math
import random
import uuid
from datetime import timedelta
from typing import List, Optional

import httpx

from hoook.models.domain import MapGame, MapTimeFilter, SkillBand, Sport, Venue
from hoook.models.schemas import GamesResponse, VenuesResponse
from hoook.utils.datetime_utils import Clock, utcnow
from hoook.utils.geo_utils import miles_to_degrees

logger = logging.getLogger(__name__)

MIN_OFFSET_DEGREES = 0.1

# (name, address, sports)
PLACEHOLDER_VENUES = [
    ("Gregory Gymnasium", "2101 Speedway, Austin, TX 78712", ("basketball", "volleyball")),
    ("Whitaker Fields", "2101 Speedway, Austin, TX 78712", ("soccer",)),
    ("Recreational Sports Center", "2001 San Jacinto Blvd, Austin, TX 78712", ("basketball", "volleyball", "pickleball")),
    ("Belmont Hall Courts", "2100 San Antonio St, Austin, TX 78705", ("tennis", "pickleball")),
    ("East Campus Courts", "2101 Speedway, Austin, TX 78712", ("basketball", "tennis")),
    ("Intramural Fields", "2101 Speedway, Austin, TX 78712", ("soccer", "other")),
    ("Recreation Center", "2101 Speedway, Austin, TX 78712", ("basketball", "volleyball")),
    ("West Campus Gym", "2400 Nueces St, Austin, TX 78705", ("basketball", "pickleball")),
    ("North Field Complex", "2400 Nueces St, Austin, TX 78705", ("soccer", "volleyball")),
    ("South Athletic Facility", "2101 Speedway, Austin, TX 78712", ("tennis", "soccer")),
]

# Start offsets in seconds for each map time filter
TIME_OFFSETS = {
    MapTimeFilter.NOW: [0, 1800, 3600],
    MapTimeFilter.TODAY: [3600, 7200, 14400, 21600],
    MapTimeFilter.NEXT_24H: [3600, 7200, 14400, 21600, 43200, 64800],
    MapTimeFilter.THIS_WEEK: [86400, 172800, 259200, 345600, 432000],
}

SKILL_ROTATION = [SkillBand.CASUAL, SkillBand.INTERMEDIATE, SkillBand.COMPETITIVE]
PLACEHOLDER_SPORTS = [
    Sport.BASKETBALL,
    Sport.SOCCER,
    Sport.TENNIS,
    Sport.PICKLEBALL,
    Sport.VOLLEYBALL,
]


class MapDataSource:
    """Interface for venue/game lookups by radius."""

    async def fetch_venues(
        self, lat: float, lng: float, radius_miles: int, sport: Optional[Sport] = None
    ) -> List[Venue]:
        raise NotImplementedError

    async def fetch_games(
        self,
        lat: float,
        lng: float,
        radius_miles: int,
        sport: Optional[Sport] = None,
        time_window: MapTimeFilter = MapTimeFilter.TODAY,
    ) -> List[MapGame]:
        raise NotImplementedError


def _sport_filter(sport: Optional[Sport]) -> Optional[Sport]:
    return None if sport in (None, Sport.ALL) else sport


class PlaceholderMapDataSource(MapDataSource):
    """Generates pins spread around the center, one per compass direction slot."""

    def __init__(self, rng: Optional[random.Random] = None, clock: Clock = utcnow):
        self.rng = rng or random.Random()
        self.clock = clock

    def _offset(self, index: int, count: int, radius_miles: int):
        radius_degrees = miles_to_degrees(radius_miles)
        angle = index * 2.0 * math.pi / count
        distance = self.rng.uniform(min(MIN_OFFSET_DEGREES, radius_degrees), radius_degrees)
        return distance * math.cos(angle), distance * math.sin(angle)

    async def fetch_venues(
        self, lat: float, lng: float, radius_miles: int, sport: Optional[Sport] = None
    ) -> List[Venue]:
        wanted = _sport_filter(sport)
        venues = []
        for index, (name, address, sports) in enumerate(PLACEHOLDER_VENUES):
            lat_offset, lng_offset = self._offset(index, len(PLACEHOLDER_VENUES), radius_miles)
            if wanted is not None and wanted.value not in sports:
                continue
            venues.append(
                Venue(
                    name=name,
                    address=address,
                    latitude=lat + lat_offset,
                    longitude=lng + lng_offset,
                    sport_types=sports,
                )
            )
        return venues

    async def fetch_games(
        self,
        lat: float,
        lng: float,
        radius_miles: int,
        sport: Optional[Sport] = None,
        time_window: MapTimeFilter = MapTimeFilter.TODAY,
    ) -> List[MapGame]:
        wanted = _sport_filter(sport)
        sports = [wanted] if wanted is not None else PLACEHOLDER_SPORTS
        offsets = TIME_OFFSETS[time_window]
        now = self.clock()

        games = []
        for index, seconds in enumerate(offsets):
            game_sport = sports[index % len(sports)]
            lat_offset, lng_offset = self._offset(index, len(offsets), radius_miles)
            games.append(
                MapGame(
                    title=f"{game_sport.value.capitalize()} pickup",
                    sport=game_sport.value,
                    venue_name=f"Venue {index + 1}",
                    start_time=now + timedelta(seconds=seconds),
                    host_id=uuid.uuid4(),
                    host_name=f"Player {index + 1}",
                    latitude=lat + lat_offset,
                    longitude=lng + lng_offset,
                    skill_band=SKILL_ROTATION[index % len(SKILL_ROTATION)].value,
                    player_count=self.rng.randint(2, 8),
                    player_cap=10,
                )
            )
        return games


class HttpMapDataSource(MapDataSource):
    """
    Client for the discovery API.

    GET {base_url}/venues?lat=&lng=&radius_miles=&sport=
    GET {base_url}/games?lat=&lng=&radius_miles=&sport=&time_window=
    """

    def __init__(self, base_url: str, timeout: float = 10.0, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    def _params(self, lat: float, lng: float, radius_miles: int, sport: Optional[Sport]) -> dict:
        wanted = _sport_filter(sport)
        return {
            "lat": lat,
            "lng": lng,
            "radius_miles": radius_miles,
            "sport": wanted.value if wanted else "",
        }

    async def _get(self, path: str, params: dict) -> dict:
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            resp = await client.get(f"{self.base_url}{path}", params=params)
            resp.raise_for_status()
            return resp.json()

    async def fetch_venues(
        self, lat: float, lng: float, radius_miles: int, sport: Optional[Sport] = None
    ) -> List[Venue]:
        data = await self._get("/venues", self._params(lat, lng, radius_miles, sport))
        return [item.to_venue() for item in VenuesResponse.model_validate(data).venues]

    async def fetch_games(
        self,
        lat: float,
        lng: float,
        radius_miles: int,
        sport: Optional[Sport] = None,
        time_window: MapTimeFilter = MapTimeFilter.TODAY,
    ) -> List[MapGame]:
        params = self._params(lat, lng, radius_miles, sport)
        params["time_window"] = time_window.value
        data = await self._get("/games", params)
        return [item.to_map_game() for item in GamesResponse.model_validate(data).games]
