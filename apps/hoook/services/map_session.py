"""
Map session: the discovery map's filters, region, selection and pins.

A refresh fetches venues and games together for the current filters, then adds
the locally hosted games that have a pin inside the search radius. When a
refresh comes back with too few pins the distance preset is widened so the next
refresh searches further; the widening itself does not fetch again.
"""

import itertools
import logging
from dataclasses import dataclass
from typing import List, Optional

from hoook.database.app_state import AppState
from hoook.models.domain import (
    Coordinate,
    DistancePreset,
    GamePin,
    MapGame,
    MapPin,
    MapTimeFilter,
    Sport,
    Venue,
    VenuePin,
)
from hoook.services.location_service import LocationTracker
from hoook.services.map_service import MapData, MapService
from hoook.utils.constants import (
    BROADEN_THRESHOLD,
    DEFAULT_CENTER_LAT,
    DEFAULT_CENTER_LNG,
    DEFAULT_SPAN_DEGREES,
    FOCUS_SPAN_DEGREES,
    MIN_SPAN_DEGREES,
)
from hoook.utils.geo_utils import miles_to_degrees

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Region:
    center: Coordinate
    span: float  # latitude/longitude delta in degrees


def span_for(distance: DistancePreset) -> float:
    return max(miles_to_degrees(distance.value), MIN_SPAN_DEGREES)


class MapSession:
    """State behind one user's map screen."""

    def __init__(
        self,
        map_service: MapService,
        location: Optional[LocationTracker] = None,
        app_state: Optional[AppState] = None,
    ):
        self.map_service = map_service
        self.location = location or LocationTracker()
        self.app_state = app_state
        self.region = Region(Coordinate(DEFAULT_CENTER_LAT, DEFAULT_CENTER_LNG), DEFAULT_SPAN_DEGREES)
        self.venues: List[Venue] = []
        self.games: List[MapGame] = []
        self.selected_sport: Optional[Sport] = None
        self.selected_time_filter = MapTimeFilter.TODAY
        self.selected_distance = DistancePreset.TEN
        self.selected_venue: Optional[Venue] = None
        self.selected_game: Optional[MapGame] = None
        self.is_loading = False
        self.has_initialized_region = False
        self._user_has_moved_map = False
        self._sequence = itertools.count(1)
        self._latest_requested = 0
        self._latest_applied = 0

    @property
    def pins(self) -> List[MapPin]:
        """Venue pins first, then game pins."""
        return [VenuePin(v) for v in self.venues] + [GamePin(g) for g in self.games]

    # Region management

    def initialize_region(self, coordinate: Coordinate) -> bool:
        """Center on the user's first known location. Only the first call has an effect."""
        if self.has_initialized_region:
            return False
        self.has_initialized_region = True
        self.region = Region(coordinate, span_for(self.selected_distance))
        logger.debug(f"Initialized region at {coordinate} span {self.region.span:.3f}")
        return True

    def center_on(self, coordinate: Coordinate, span: float = 0.01) -> None:
        self._user_has_moved_map = True
        self.region = Region(coordinate, span)

    def center_on_venue(self, venue: Venue) -> None:
        self.selected_venue = venue
        self.selected_game = None
        self.center_on(venue.coordinate, FOCUS_SPAN_DEGREES)

    def center_on_game(self, game: MapGame) -> None:
        self.selected_game = game
        self.selected_venue = None
        self.center_on(game.coordinate, FOCUS_SPAN_DEGREES)

    def clear_selection(self) -> None:
        self.selected_venue = None
        self.selected_game = None

    def update_distance(self, distance: DistancePreset) -> bool:
        """
        Change the distance preset.

        The visible span follows the preset unless the user has moved the map.

        Returns:
            False if the preset was already selected
        """
        if distance is self.selected_distance:
            return False
        self.selected_distance = distance
        if not self.has_initialized_region or not self._user_has_moved_map:
            self.region = Region(self.region.center, span_for(distance))
        return True

    # Data

    def _search_center(self, coordinate: Optional[Coordinate]) -> Optional[Coordinate]:
        if coordinate is not None:
            return coordinate
        return self.location.current_coordinate

    async def refresh(self, coordinate: Optional[Coordinate] = None) -> Optional[MapData]:
        """
        Fetch venues and games around ``coordinate`` (or the tracked location).

        Results from a refresh that was overtaken by a newer one are dropped.
        A fetch error propagates and leaves the current pins in place.

        Returns:
            The applied data, or None if there was no location or the result
            was superseded
        """
        center = self._search_center(coordinate)
        if center is None:
            logger.debug("Map refresh skipped, no location yet")
            return None

        sequence = next(self._sequence)
        self._latest_requested = sequence
        radius = self.selected_distance
        sport = self.selected_sport
        time_filter = self.selected_time_filter
        self.is_loading = True
        try:
            data = await self.map_service.fetch_map_data(
                center.latitude,
                center.longitude,
                radius.value,
                sport,
                time_filter,
            )
        finally:
            if sequence == self._latest_requested:
                self.is_loading = False

        if sequence < self._latest_applied:
            logger.debug(f"Dropping map result {sequence}, already applied {self._latest_applied}")
            return None

        self._latest_applied = sequence
        data = self._with_hosted_games(data, center, radius, sport, time_filter)
        self.venues = data.venues
        self.games = data.games
        self._broaden_if_sparse(data, radius)
        return data

    def _with_hosted_games(
        self,
        data: MapData,
        center: Coordinate,
        radius: DistancePreset,
        sport: Optional[Sport],
        time_filter: MapTimeFilter,
    ) -> MapData:
        """Add hosted games in range; a hosted game replaces a fetched pin with the same id."""
        if self.app_state is None:
            return data
        hosted = self.app_state.map_games(
            center,
            radius.value,
            sport,
            time_filter,
            venues=data.venues,
        )
        if not hosted:
            return data
        hosted_ids = {game.id for game in hosted}
        fetched = [game for game in data.games if game.id not in hosted_ids]
        logger.debug(f"Adding {len(hosted)} hosted games to the map")
        return MapData(venues=data.venues, games=fetched + hosted)

    def _broaden_if_sparse(self, data: MapData, radius: DistancePreset) -> None:
        if data.total >= BROADEN_THRESHOLD or radius is DistancePreset.FIFTY:
            return
        if self.selected_distance is not radius:
            # Preset changed while the fetch was in flight
            return
        wider = radius.broadened()
        logger.info(f"Only {data.total} pins within {radius.value} mi, widening to {wider.value} mi")
        self.selected_distance = wider
