"""
Map service: venue/game lookups by radius with a short-lived cache.

Each (kind, rounded coordinate, radius, sport[, time window]) request has its
own cache entry and expiry, so a request for a different place or filter never
returns another request's pins. Failed fetches leave the cache untouched.
"""

import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Hashable, List, Optional, Tuple

from hoook.models.domain import MapGame, MapTimeFilter, Sport, Venue
from hoook.services import settings_service
from hoook.services.map_data_source import (
    HttpMapDataSource,
    MapDataSource,
    PlaceholderMapDataSource,
)
from hoook.utils.constants import (
    CACHE_COORDINATE_PLACES,
    DEFAULT_CACHE_MAX_ENTRIES,
    DEFAULT_CACHE_TTL_SECONDS,
    DEFAULT_FETCH_TIMEOUT_SECONDS,
)
from hoook.utils.exceptions import MapFetchError, MapFetchTimeoutError
from hoook.utils.geo_utils import round_coordinate

logger = logging.getLogger(__name__)


class MapCache:
    """
    TTL cache with an independent timestamp per key.

    Expired entries are dropped on every write, and at most ``max_entries``
    are kept; the oldest entry is evicted first.
    """

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_CACHE_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
        max_entries: int = DEFAULT_CACHE_MAX_ENTRIES,
    ):
        self.ttl_seconds = ttl_seconds
        self.clock = clock
        self.max_entries = max_entries
        self._store: Dict[Hashable, Tuple[float, Any]] = {}

    def get(self, key: Hashable) -> Optional[Any]:
        """Return the cached value, or None if missing or expired."""
        item = self._store.get(key)
        if item is None:
            return None
        stored_at, value = item
        if self.clock() - stored_at >= self.ttl_seconds:
            self._store.pop(key, None)
            return None
        return value

    def set(self, key: Hashable, value: Any) -> None:
        now = self.clock()
        self._purge_expired(now)
        # Re-inserting moves the key to the end so dict order stays oldest-first
        self._store.pop(key, None)
        while self._store and len(self._store) >= self.max_entries:
            oldest = next(iter(self._store))
            del self._store[oldest]
            logger.debug(f"Evicted map cache entry {oldest}")
        self._store[key] = (now, value)

    def _purge_expired(self, now: float) -> None:
        expired = [key for key, (stored_at, _) in self._store.items() if now - stored_at >= self.ttl_seconds]
        for key in expired:
            del self._store[key]

    def clear(self) -> None:
        self._store.clear()

    def __len__(self) -> int:
        return len(self._store)


@dataclass
class MapData:
    """Result of one paired venues + games fetch."""

    venues: List[Venue] = field(default_factory=list)
    games: List[MapGame] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.venues) + len(self.games)


def _sport_key(sport: Optional[Sport]) -> Optional[str]:
    return None if sport in (None, Sport.ALL) else sport.value


class MapService:
    """Cached, time-boxed access to a MapDataSource."""

    def __init__(
        self,
        data_source: MapDataSource,
        cache: Optional[MapCache] = None,
        timeout_seconds: float = DEFAULT_FETCH_TIMEOUT_SECONDS,
    ):
        self.data_source = data_source
        self.cache = cache or MapCache()
        self.timeout_seconds = timeout_seconds

    def _key(self, kind: str, lat: float, lng: float, radius_miles: int, sport: Optional[Sport], *extra) -> tuple:
        rounded_lat, rounded_lng = round_coordinate(lat, lng, CACHE_COORDINATE_PLACES)
        return (kind, rounded_lat, rounded_lng, int(radius_miles), _sport_key(sport)) + extra

    async def _call(self, kind: str, coro) -> list:
        try:
            return await asyncio.wait_for(coro, timeout=self.timeout_seconds)
        except asyncio.TimeoutError as e:
            logger.warning(f"Map {kind} fetch timed out after {self.timeout_seconds}s")
            raise MapFetchTimeoutError(f"Fetching {kind} timed out after {self.timeout_seconds}s") from e
        except MapFetchError:
            raise
        except Exception as e:
            logger.error(f"Map {kind} fetch failed: {e}", exc_info=True)
            raise MapFetchError(f"Fetching {kind} failed: {e}") from e

    async def fetch_venues(
        self, lat: float, lng: float, radius_miles: int, sport: Optional[Sport] = None
    ) -> List[Venue]:
        """
        Venues within ``radius_miles`` of (lat, lng).

        Raises:
            MapFetchError: If the data source fails
            MapFetchTimeoutError: If the data source does not answer in time
        """
        key = self._key("venues", lat, lng, radius_miles, sport)
        cached = self.cache.get(key)
        if cached is not None:
            logger.debug(f"Venue cache hit for {key}")
            return cached

        venues = await self._call(
            "venues", self.data_source.fetch_venues(lat, lng, radius_miles, sport)
        )
        self.cache.set(key, venues)
        return venues

    async def fetch_games(
        self,
        lat: float,
        lng: float,
        radius_miles: int,
        sport: Optional[Sport] = None,
        time_window: MapTimeFilter = MapTimeFilter.TODAY,
    ) -> List[MapGame]:
        """
        Games within ``radius_miles`` of (lat, lng) in the given time window.

        Raises:
            MapFetchError: If the data source fails
            MapFetchTimeoutError: If the data source does not answer in time
        """
        key = self._key("games", lat, lng, radius_miles, sport, time_window.value)
        cached = self.cache.get(key)
        if cached is not None:
            logger.debug(f"Game cache hit for {key}")
            return cached

        games = await self._call(
            "games", self.data_source.fetch_games(lat, lng, radius_miles, sport, time_window)
        )
        self.cache.set(key, games)
        return games

    async def fetch_map_data(
        self,
        lat: float,
        lng: float,
        radius_miles: int,
        sport: Optional[Sport] = None,
        time_window: MapTimeFilter = MapTimeFilter.TODAY,
    ) -> MapData:
        """
        Fetch venues and games concurrently.

        If either half fails the error propagates and no partial result is
        returned.
        """
        venues, games = await asyncio.gather(
            self.fetch_venues(lat, lng, radius_miles, sport),
            self.fetch_games(lat, lng, radius_miles, sport, time_window),
        )
        logger.info(f"Map data loaded: {len(venues)} venues, {len(games)} games within {radius_miles} mi")
        return MapData(venues=venues, games=games)


def create_map_service() -> MapService:
    """Build the MapService configured by environment settings."""
    timeout = settings_service.get_map_fetch_timeout_seconds()
    source_name = settings_service.get_map_data_source()
    api_url = settings_service.get_map_api_url()

    if source_name == "http" and api_url:
        data_source: MapDataSource = HttpMapDataSource(api_url, timeout=timeout)
        logger.info(f"Using map API at {api_url}")
    else:
        if source_name == "http":
            logger.warning("MAP_DATA_SOURCE=http but MAP_API_URL is not set, using placeholder data")
        data_source = PlaceholderMapDataSource()

    cache = MapCache(
        ttl_seconds=settings_service.get_map_cache_ttl_seconds(),
        max_entries=settings_service.get_map_cache_max_entries(),
    )
    return MapService(data_source, cache=cache, timeout_seconds=timeout)
