"""
Unit tests for map service.
Tests the keyed TTL cache, timeouts and the paired venues + games fetch.
"""
import asyncio
from unittest.mock import AsyncMock

import pytest

from hoook.models.domain import MapTimeFilter, Sport, Venue
from hoook.services import map_service as map_service_module
from hoook.services.map_data_source import (
    HttpMapDataSource,
    MapDataSource,
    PlaceholderMapDataSource,
)
from hoook.services.map_service import MapCache, MapService
from hoook.utils.exceptions import MapFetchError, MapFetchTimeoutError


class FakeClock:
    def __init__(self):
        self.t = 1000.0

    def __call__(self):
        return self.t


class CountingSource(MapDataSource):
    """Returns one venue per call and counts calls."""

    def __init__(self):
        self.venue_calls = 0
        self.game_calls = 0

    async def fetch_venues(self, lat, lng, radius_miles, sport=None):
        self.venue_calls += 1
        return [Venue(name=f"Venue at {lat},{lng}", address="", latitude=lat, longitude=lng)]

    async def fetch_games(self, lat, lng, radius_miles, sport=None, time_window=MapTimeFilter.TODAY):
        self.game_calls += 1
        return []


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def source():
    return CountingSource()


@pytest.fixture
def service(source, fake_clock):
    return MapService(source, cache=MapCache(ttl_seconds=60, clock=fake_clock), timeout_seconds=1.0)


class TestMapCache:
    """Tests for MapCache expiry."""

    def test_entry_expires_after_ttl(self, fake_clock):
        cache = MapCache(ttl_seconds=60, clock=fake_clock)
        cache.set("k", [1])

        fake_clock.t += 59
        assert cache.get("k") == [1]

        fake_clock.t += 1
        assert cache.get("k") is None
        assert len(cache) == 0

    def test_entries_expire_independently(self, fake_clock):
        cache = MapCache(ttl_seconds=60, clock=fake_clock)
        cache.set("a", "first")
        fake_clock.t += 30
        cache.set("b", "second")
        fake_clock.t += 30

        assert cache.get("a") is None
        assert cache.get("b") == "second"

    def test_write_drops_expired_entries(self, fake_clock):
        cache = MapCache(ttl_seconds=60, clock=fake_clock)
        for i in range(10):
            cache.set(i, i)

        fake_clock.t += 60
        cache.set("fresh", "value")

        assert len(cache) == 1
        assert cache.get("fresh") == "value"

    def test_size_is_capped_oldest_first(self, fake_clock):
        cache = MapCache(ttl_seconds=60, clock=fake_clock, max_entries=3)
        for key in ("a", "b", "c"):
            cache.set(key, key)
            fake_clock.t += 1

        cache.set("d", "d")

        assert len(cache) == 3
        assert cache.get("a") is None
        assert [cache.get(key) for key in ("b", "c", "d")] == ["b", "c", "d"]

    def test_rewriting_a_key_refreshes_its_position(self, fake_clock):
        cache = MapCache(ttl_seconds=60, clock=fake_clock, max_entries=2)
        cache.set("a", 1)
        cache.set("b", 2)
        cache.set("a", 3)

        cache.set("c", 4)

        assert cache.get("b") is None
        assert cache.get("a") == 3
        assert cache.get("c") == 4


class TestFetchCaching:
    """Tests for cache hits and misses through MapService."""

    @pytest.mark.asyncio
    async def test_repeat_within_ttl_hits_cache(self, service, source, fake_clock):
        first = await service.fetch_venues(30.2672, -97.7431, 10)
        fake_clock.t += 30
        second = await service.fetch_venues(30.2672, -97.7431, 10)

        assert second == first
        assert source.venue_calls == 1

    @pytest.mark.asyncio
    async def test_refetch_after_ttl(self, service, source, fake_clock):
        await service.fetch_venues(30.2672, -97.7431, 10)
        fake_clock.t += 60
        await service.fetch_venues(30.2672, -97.7431, 10)

        assert source.venue_calls == 2

    @pytest.mark.asyncio
    async def test_other_location_never_gets_cached_pins(self, service, source):
        austin = await service.fetch_venues(30.2672, -97.7431, 10)
        dallas = await service.fetch_venues(32.7767, -96.7970, 10)

        assert austin != dallas
        assert dallas[0].latitude == 32.7767
        assert source.venue_calls == 2

    @pytest.mark.asyncio
    async def test_nearby_coordinates_share_an_entry(self, service, source):
        await service.fetch_venues(30.26721, -97.74312, 10)
        await service.fetch_venues(30.26724, -97.74309, 10)

        assert source.venue_calls == 1

    @pytest.mark.asyncio
    async def test_radius_sport_and_window_are_part_of_the_key(self, service, source):
        await service.fetch_venues(30.0, -97.0, 10)
        await service.fetch_venues(30.0, -97.0, 20)
        await service.fetch_venues(30.0, -97.0, 10, Sport.SOCCER)
        await service.fetch_games(30.0, -97.0, 10, None, MapTimeFilter.TODAY)
        await service.fetch_games(30.0, -97.0, 10, None, MapTimeFilter.THIS_WEEK)

        assert source.venue_calls == 3
        assert source.game_calls == 2

    @pytest.mark.asyncio
    async def test_sport_all_matches_no_sport(self, service, source):
        await service.fetch_venues(30.0, -97.0, 10, None)
        await service.fetch_venues(30.0, -97.0, 10, Sport.ALL)

        assert source.venue_calls == 1

    @pytest.mark.asyncio
    async def test_many_distinct_locations_keep_cache_bounded(self, source, fake_clock):
        service = MapService(source, cache=MapCache(ttl_seconds=60, clock=fake_clock, max_entries=64))

        for i in range(500):
            await service.fetch_venues(30.0 + i * 0.01, -97.0, 10)

        assert source.venue_calls == 500
        assert len(service.cache) == 64

    @pytest.mark.asyncio
    async def test_stale_locations_are_dropped_on_later_fetches(self, service, source, fake_clock):
        for i in range(20):
            await service.fetch_venues(30.0 + i * 0.01, -97.0, 10)

        fake_clock.t += 60
        await service.fetch_venues(40.0, -97.0, 10)

        assert len(service.cache) == 1

    @pytest.mark.asyncio
    async def test_venues_and_games_cached_separately(self, service, source):
        await service.fetch_venues(30.0, -97.0, 10)
        games = await service.fetch_games(30.0, -97.0, 10)

        assert games == []
        assert source.game_calls == 1


class TestFetchFailures:
    """Tests for errors and timeouts."""

    @pytest.mark.asyncio
    async def test_failure_does_not_touch_cache(self, fake_clock):
        source = CountingSource()
        source.fetch_venues = AsyncMock(side_effect=RuntimeError("upstream down"))
        service = MapService(source, cache=MapCache(60, clock=fake_clock))

        with pytest.raises(MapFetchError):
            await service.fetch_venues(30.0, -97.0, 10)

        assert len(service.cache) == 0

    @pytest.mark.asyncio
    async def test_retry_after_failure_fetches_again(self, service, source):
        real_fetch = source.fetch_games
        source.fetch_games = AsyncMock(side_effect=RuntimeError("boom"))

        with pytest.raises(MapFetchError):
            await service.fetch_games(30.0, -97.0, 10)

        source.fetch_games = real_fetch
        assert await service.fetch_games(30.0, -97.0, 10) == []
        assert source.game_calls == 1

    @pytest.mark.asyncio
    async def test_timeout(self, fake_clock):
        class SlowSource(CountingSource):
            async def fetch_venues(self, lat, lng, radius_miles, sport=None):
                await asyncio.sleep(5)
                return []

        service = MapService(SlowSource(), cache=MapCache(60, clock=fake_clock), timeout_seconds=0.01)

        with pytest.raises(MapFetchTimeoutError):
            await service.fetch_venues(30.0, -97.0, 10)
        assert len(service.cache) == 0


class TestFetchMapData:
    """Tests for the paired fetch."""

    @pytest.mark.asyncio
    async def test_fetches_both(self, service, source):
        data = await service.fetch_map_data(30.0, -97.0, 10, None, MapTimeFilter.TODAY)

        assert len(data.venues) == 1
        assert data.games == []
        assert data.total == 1
        assert (source.venue_calls, source.game_calls) == (1, 1)

    @pytest.mark.asyncio
    async def test_either_failure_fails_the_pair(self, service, source):
        source.fetch_games = AsyncMock(side_effect=RuntimeError("games down"))

        with pytest.raises(MapFetchError):
            await service.fetch_map_data(30.0, -97.0, 10)


class TestCreateMapService:
    """Tests for building the service from settings."""

    def test_default_is_placeholder(self, monkeypatch):
        monkeypatch.delenv("MAP_DATA_SOURCE", raising=False)
        monkeypatch.setenv("MAP_CACHE_TTL_SECONDS", "30")

        service = map_service_module.create_map_service()

        assert isinstance(service.data_source, PlaceholderMapDataSource)
        assert service.cache.ttl_seconds == 30.0

    def test_cache_size_from_settings(self, monkeypatch):
        monkeypatch.delenv("MAP_DATA_SOURCE", raising=False)
        monkeypatch.setenv("MAP_CACHE_MAX_ENTRIES", "16")

        service = map_service_module.create_map_service()

        assert service.cache.max_entries == 16

    def test_http_source(self, monkeypatch):
        monkeypatch.setenv("MAP_DATA_SOURCE", "http")
        monkeypatch.setenv("MAP_API_URL", "https://maps.example.test/v1/")
        monkeypatch.setenv("MAP_FETCH_TIMEOUT_SECONDS", "2.5")

        service = map_service_module.create_map_service()

        assert isinstance(service.data_source, HttpMapDataSource)
        assert service.data_source.base_url == "https://maps.example.test/v1"
        assert service.timeout_seconds == 2.5

    def test_http_without_url_falls_back(self, monkeypatch):
        monkeypatch.setenv("MAP_DATA_SOURCE", "http")
        monkeypatch.delenv("MAP_API_URL", raising=False)

        service = map_service_module.create_map_service()

        assert isinstance(service.data_source, PlaceholderMapDataSource)
