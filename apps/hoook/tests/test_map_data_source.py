"""
Unit tests for map data sources.
"""
import random
import uuid
from datetime import timedelta

import httpx
import pytest

from hoook.models.domain import MapTimeFilter, Sport
from hoook.services.map_data_source import (
    PLACEHOLDER_VENUES,
    HttpMapDataSource,
    PlaceholderMapDataSource,
)
from hoook.services.map_service import MapService
from hoook.utils.exceptions import MapFetchError
from hoook.utils.geo_utils import calculate_distance_miles

LAT, LNG = 30.2672, -97.7431


@pytest.fixture
def placeholder(clock):
    return PlaceholderMapDataSource(rng=random.Random(7), clock=clock)


class TestPlaceholderSource:
    """Tests for generated pins."""

    @pytest.mark.asyncio
    async def test_venues_within_radius(self, placeholder):
        venues = await placeholder.fetch_venues(LAT, LNG, 10)

        assert len(venues) == len(PLACEHOLDER_VENUES)
        for venue in venues:
            assert calculate_distance_miles(LAT, LNG, venue.latitude, venue.longitude) <= 10.5

    @pytest.mark.asyncio
    async def test_venue_sport_filter(self, placeholder):
        venues = await placeholder.fetch_venues(LAT, LNG, 10, Sport.SOCCER)

        assert venues
        assert all("soccer" in v.sport_types for v in venues)

    @pytest.mark.asyncio
    async def test_games_follow_time_window(self, placeholder, now):
        games = await placeholder.fetch_games(LAT, LNG, 20, None, MapTimeFilter.TODAY)

        assert len(games) == 4
        for game in games:
            assert now + timedelta(hours=1) <= game.start_time <= now + timedelta(hours=6)
            assert 2 <= game.player_count <= 8
            assert game.player_cap == 10

    @pytest.mark.asyncio
    async def test_game_sport_filter(self, placeholder):
        games = await placeholder.fetch_games(LAT, LNG, 10, Sport.TENNIS, MapTimeFilter.THIS_WEEK)

        assert {g.sport for g in games} == {"tennis"}


class TestHttpSource:
    """Tests for the discovery API client using httpx.MockTransport."""

    @pytest.mark.asyncio
    async def test_fetch_venues_and_games(self):
        venue_id = uuid.uuid4()
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            if request.url.path == "/v1/venues":
                return httpx.Response(
                    200,
                    json={
                        "venues": [
                            {
                                "id": str(venue_id),
                                "name": "Gregory Gymnasium",
                                "address": "2101 Speedway",
                                "latitude": LAT,
                                "longitude": LNG,
                                "sportTypes": ["basketball"],
                            }
                        ]
                    },
                )
            return httpx.Response(
                200,
                json={
                    "games": [
                        {
                            "id": str(uuid.uuid4()),
                            "title": "Lunch run",
                            "sport": "basketball",
                            "venueId": str(venue_id),
                            "venueName": "Gregory Gymnasium",
                            "startTime": "2026-10-14T18:00:00Z",
                            "hostId": str(uuid.uuid4()),
                            "hostName": "Jordan P.",
                            "latitude": LAT,
                            "longitude": LNG,
                            "skillBand": "casual",
                            "playerCount": 4,
                            "playerCap": 10,
                        }
                    ]
                },
            )

        source = HttpMapDataSource("https://maps.example.test/v1/", transport=httpx.MockTransport(handler))

        venues = await source.fetch_venues(LAT, LNG, 10, Sport.BASKETBALL)
        games = await source.fetch_games(LAT, LNG, 10, None, MapTimeFilter.NEXT_24H)

        assert venues[0].id == venue_id
        assert venues[0].sport_types == ("basketball",)
        assert games[0].venue_id == venue_id
        assert games[0].player_count == 4
        assert seen[0].url.params["sport"] == "basketball"
        assert seen[0].url.params["radius_miles"] == "10"
        assert seen[1].url.params["time_window"] == "next24h"

    @pytest.mark.asyncio
    async def test_http_error_becomes_fetch_error(self):
        source = HttpMapDataSource(
            "https://maps.example.test", transport=httpx.MockTransport(lambda request: httpx.Response(503))
        )

        with pytest.raises(MapFetchError):
            await MapService(source).fetch_venues(LAT, LNG, 10)
