"""Device location route handlers."""

import logging

from fastapi import APIRouter, Depends, HTTPException

from hoook.api.dependencies import get_map_session
from hoook.models.domain import Coordinate
from hoook.models.schemas import (
    LocationPermissionRequest,
    LocationResponse,
    LocationUpdateRequest,
    PermissionPromptResponse,
)
from hoook.services.location_service import LocationPermission, LocationTracker
from hoook.services.map_session import MapSession

logger = logging.getLogger(__name__)
router = APIRouter()


def _to_response(tracker: LocationTracker) -> LocationResponse:
    coordinate = tracker.current_coordinate
    return LocationResponse(
        permission=tracker.permission.value,
        is_updating=tracker.is_updating,
        latitude=coordinate.latitude if coordinate else None,
        longitude=coordinate.longitude if coordinate else None,
    )


@router.get("/api/location", response_model=LocationResponse)
def get_location(session: MapSession = Depends(get_map_session)):
    return _to_response(session.location)


@router.put("/api/location/permission", response_model=LocationResponse)
def set_permission(payload: LocationPermissionRequest, session: MapSession = Depends(get_map_session)):
    """Record the permission the user granted on the device."""
    try:
        permission = LocationPermission(payload.permission)
    except ValueError:
        allowed = ", ".join(p.value for p in LocationPermission)
        raise HTTPException(status_code=400, detail=f"permission must be one of: {allowed}")
    session.location.change_authorization(permission)
    return _to_response(session.location)


@router.post("/api/location/permission/request", response_model=PermissionPromptResponse)
def request_permission(session: MapSession = Depends(get_map_session)):
    """
    Ask whether the client should show the system location prompt.

    Only true while the user has not answered yet; after that the client
    reports the answer with PUT /api/location/permission.
    """
    should_prompt = session.location.request_permission()
    return PermissionPromptResponse(should_prompt=should_prompt, permission=session.location.permission.value)


@router.post("/api/location", response_model=LocationResponse)
def update_location(payload: LocationUpdateRequest, session: MapSession = Depends(get_map_session)):
    """
    Report the device's coordinate.

    Rejected with 409 until location permission has been granted.
    """
    accepted = session.location.update_location(Coordinate(payload.latitude, payload.longitude))
    if not accepted:
        raise HTTPException(status_code=409, detail="Location updates are not running")
    return _to_response(session.location)
