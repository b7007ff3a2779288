"""
Location tracking: permission state and the device's current coordinate.

The device location APIs live on the client; this tracker mirrors what the
client reports so the map session knows where to search.
"""

import enum
import logging
from typing import Callable, List, Optional

from hoook.models.domain import Coordinate

logger = logging.getLogger(__name__)


class LocationPermission(str, enum.Enum):
    NOT_DETERMINED = "not_determined"
    AUTHORIZED_WHEN_IN_USE = "authorized_when_in_use"
    AUTHORIZED_ALWAYS = "authorized_always"
    DENIED = "denied"
    RESTRICTED = "restricted"

    @property
    def is_authorized(self) -> bool:
        return self in (LocationPermission.AUTHORIZED_WHEN_IN_USE, LocationPermission.AUTHORIZED_ALWAYS)


class LocationTracker:
    """Tracks permission and the latest coordinate; notifies listeners on the first fix."""

    def __init__(self, permission: LocationPermission = LocationPermission.NOT_DETERMINED):
        self.permission = permission
        self.current_coordinate: Optional[Coordinate] = None
        self.is_updating = permission.is_authorized
        self.permission_requested = False
        self._first_fix_listeners: List[Callable[[Coordinate], None]] = []

    def on_first_fix(self, listener: Callable[[Coordinate], None]) -> None:
        self._first_fix_listeners.append(listener)

    def request_permission(self) -> bool:
        """
        Ask for permission. Only meaningful before the user has decided.

        Returns:
            True if a prompt would be shown
        """
        if self.permission is not LocationPermission.NOT_DETERMINED:
            return False
        self.permission_requested = True
        return True

    def change_authorization(self, permission: LocationPermission) -> None:
        """Apply a new permission state, starting or stopping updates."""
        self.permission = permission
        self.is_updating = permission.is_authorized
        logger.info(f"Location permission changed to {permission.value}")

    def update_location(self, coordinate: Coordinate) -> bool:
        """
        Record a new coordinate from the device.

        Returns:
            False if updates are not running (no permission), True otherwise
        """
        if not self.is_updating:
            logger.debug("Location update ignored, updates not running")
            return False

        first_fix = self.current_coordinate is None
        self.current_coordinate = coordinate
        if first_fix:
            for listener in self._first_fix_listeners:
                listener(coordinate)
        return True
