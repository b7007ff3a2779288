"""Map route handlers: venues and games around a point."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from hoook.api.dependencies import get_map_service, get_map_session
from hoook.models.domain import Coordinate, DistancePreset, MapTimeFilter, Sport
from hoook.models.schemas import (
    GamesResponse,
    MapDataResponse,
    MapGameResponse,
    MapPinResponse,
    VenueResponse,
    VenuesResponse,
)
from hoook.services.map_service import MapService
from hoook.services.map_session import MapSession
from hoook.utils.exceptions import MapFetchError, MapFetchTimeoutError

logger = logging.getLogger(__name__)
router = APIRouter()


def _fetch_error(e: MapFetchError) -> HTTPException:
    if isinstance(e, MapFetchTimeoutError):
        return HTTPException(status_code=504, detail=str(e))
    return HTTPException(status_code=502, detail=str(e))


def _parse_distance(distance: Optional[int]) -> Optional[DistancePreset]:
    if distance is None:
        return None
    try:
        return DistancePreset(distance)
    except ValueError:
        allowed = ", ".join(str(p.value) for p in DistancePreset)
        raise HTTPException(status_code=400, detail=f"distance must be one of: {allowed}")


@router.get("/api/map/venues", response_model=VenuesResponse)
async def get_venues(
    lat: float = Query(..., ge=-90, le=90),
    lng: float = Query(..., ge=-180, le=180),
    radius_miles: int = Query(DistancePreset.TEN.value, ge=1, le=DistancePreset.FIFTY.value),
    sport: Optional[Sport] = None,
    map_service: MapService = Depends(get_map_service),
):
    """Venues within ``radius_miles`` of (lat, lng)."""
    try:
        venues = await map_service.fetch_venues(lat, lng, radius_miles, sport)
        return VenuesResponse(venues=[VenueResponse.from_venue(v) for v in venues])
    except MapFetchError as e:
        raise _fetch_error(e)


@router.get("/api/map/games", response_model=GamesResponse)
async def get_map_games(
    lat: float = Query(..., ge=-90, le=90),
    lng: float = Query(..., ge=-180, le=180),
    radius_miles: int = Query(DistancePreset.TEN.value, ge=1, le=DistancePreset.FIFTY.value),
    sport: Optional[Sport] = None,
    time_window: MapTimeFilter = MapTimeFilter.TODAY,
    map_service: MapService = Depends(get_map_service),
):
    """Games within ``radius_miles`` of (lat, lng) starting in ``time_window``."""
    try:
        games = await map_service.fetch_games(lat, lng, radius_miles, sport, time_window)
        return GamesResponse(games=[MapGameResponse.from_map_game(g) for g in games])
    except MapFetchError as e:
        raise _fetch_error(e)


@router.get("/api/map", response_model=MapDataResponse)
async def refresh_map(
    lat: Optional[float] = Query(None, ge=-90, le=90),
    lng: Optional[float] = Query(None, ge=-180, le=180),
    distance: Optional[int] = None,
    sport: Optional[Sport] = None,
    time_window: Optional[MapTimeFilter] = None,
    session: MapSession = Depends(get_map_session),
):
    """
    Refresh the map screen: venues and games together for the session's filters.

    Games hosted here that were given a coordinate are included when they fall
    inside the radius and match the filters. ``pins`` lists every marker, venues
    first.

    Filters passed here are stored on the session. Without lat/lng the last
    reported device location is used. When the result is sparse the session
    widens its distance preset; ``nextRadiusMiles`` reports the preset the
    next refresh will use.
    """
    preset = _parse_distance(distance)
    if preset is not None:
        session.update_distance(preset)
    if sport is not None:
        session.selected_sport = None if sport is Sport.ALL else sport
    if time_window is not None:
        session.selected_time_filter = time_window

    coordinate = None
    if lat is not None and lng is not None:
        coordinate = Coordinate(lat, lng)
    elif session.location.current_coordinate is None:
        raise HTTPException(status_code=400, detail="No location available, pass lat and lng")

    radius = session.selected_distance
    try:
        data = await session.refresh(coordinate)
    except MapFetchError as e:
        raise _fetch_error(e)

    if data is None:
        logger.debug("Map refresh superseded, returning current pins")
    return MapDataResponse(
        venues=[VenueResponse.from_venue(v) for v in session.venues],
        games=[MapGameResponse.from_map_game(g) for g in session.games],
        pins=[MapPinResponse.from_pin(p) for p in session.pins],
        radius_miles=radius.value,
        next_radius_miles=session.selected_distance.value,
    )
