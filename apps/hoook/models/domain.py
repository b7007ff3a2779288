"""
In-memory domain entities for pickup games and map discovery.

Users and games are mutable records owned by the application state; venues and
map games are immutable snapshots produced by the map data source.
"""

import enum
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, NamedTuple, Optional, Tuple, Union


class Sport(str, enum.Enum):
    """Sport of a game. ALL is only meaningful as a filter value."""

    ALL = "all"
    BASKETBALL = "basketball"
    SOCCER = "soccer"
    TENNIS = "tennis"
    PICKLEBALL = "pickleball"
    VOLLEYBALL = "volleyball"
    OTHER = "other"

    @classmethod
    def playable(cls) -> List["Sport"]:
        return [sport for sport in cls if sport is not cls.ALL]


class SkillBand(str, enum.Enum):
    """Self-reported competitiveness tier."""

    ALL = "all"
    CASUAL = "casual"
    INTERMEDIATE = "intermediate"
    COMPETITIVE = "competitive"

    @property
    def display(self) -> str:
        return self.value.capitalize()


class Availability(str, enum.Enum):
    """When a user usually plays."""

    WEEKNIGHTS = "weeknights"
    WEEKENDS = "weekends"
    MORNINGS = "mornings"
    ANYTIME = "anytime"

    @property
    def label(self) -> str:
        return self.value.capitalize()


class TimeWindow(str, enum.Enum):
    """Calendar bucket used to filter the game feed."""

    TODAY = "today"
    TOMORROW = "tomorrow"
    WEEK = "week"
    WEEKEND = "weekend"
    ALL = "all"


class MapTimeFilter(str, enum.Enum):
    """Time window sent to the map data source."""

    NOW = "now"
    TODAY = "today"
    NEXT_24H = "next24h"
    THIS_WEEK = "thisWeek"


class DistancePreset(int, enum.Enum):
    """Search radius presets in miles."""

    TEN = 10
    TWENTY = 20
    FIFTY = 50

    @property
    def label(self) -> str:
        return f"{self.value} mi"

    def broadened(self) -> "DistancePreset":
        """Next wider preset: double the radius, or the widest preset if doubling is not one."""
        try:
            return DistancePreset(self.value * 2)
        except ValueError:
            return DistancePreset.FIFTY


class Membership(str, enum.Enum):
    """Where a user stands relative to one game."""

    NOT_IN_GAME = "not_in_game"
    IN_ROSTER = "in_roster"
    IN_WAITLIST = "in_waitlist"


class Coordinate(NamedTuple):
    latitude: float
    longitude: float


@dataclass(eq=False)
class User:
    """A player. Two users are the same user when their ids match."""

    first_name: str
    last_initial: str
    skill_band: SkillBand = SkillBand.INTERMEDIATE
    availability: Availability = Availability.ANYTIME
    sports: List[Sport] = field(default_factory=list)
    bio: str = ""
    games_played: int = 0
    games_hosted: int = 0
    id: uuid.UUID = field(default_factory=uuid.uuid4)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, User):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    @property
    def display_name(self) -> str:
        return f"{self.first_name} {self.last_initial}."

    @property
    def initials(self) -> str:
        return f"{self.first_name[:1]}{self.last_initial}"


@dataclass(eq=False)
class Game:
    """
    A hosted pickup game.

    ``roster`` holds confirmed players (never more than ``player_cap``) and
    ``waitlist`` is a FIFO queue of users waiting for a seat. A user is in at
    most one of the two; the roster service keeps both rules. Games with a
    coordinate also show up as pins on the discovery map.
    """

    title: str
    sport: Sport
    date: datetime
    location: str
    skill_band: SkillBand
    player_cap: int
    on_campus: bool
    host: User
    roster: List[User] = field(default_factory=list)
    waitlist: List[User] = field(default_factory=list)
    description: str = ""
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    id: uuid.UUID = field(default_factory=uuid.uuid4)

    @property
    def spots_left(self) -> int:
        return max(self.player_cap - len(self.roster), 0)

    @property
    def is_full(self) -> bool:
        return len(self.roster) >= self.player_cap

    def is_user_joined(self, user: User) -> bool:
        return user in self.roster

    def is_user_waitlisted(self, user: User) -> bool:
        return user in self.waitlist

    @property
    def coordinate(self) -> Optional[Coordinate]:
        """Where the game is played, if the host pinned it."""
        if self.latitude is None or self.longitude is None:
            return None
        return Coordinate(self.latitude, self.longitude)


@dataclass(frozen=True)
class Venue:
    name: str
    address: str
    latitude: float
    longitude: float
    sport_types: Tuple[str, ...] = ()
    id: uuid.UUID = field(default_factory=uuid.uuid4)

    @property
    def coordinate(self) -> Coordinate:
        return Coordinate(self.latitude, self.longitude)


@dataclass(frozen=True)
class MapGame:
    """Read-only projection of a game for map pins."""

    title: str
    sport: str
    start_time: datetime
    host_id: uuid.UUID
    host_name: str
    latitude: float
    longitude: float
    skill_band: str
    player_count: int
    player_cap: int
    venue_id: Optional[uuid.UUID] = None
    venue_name: Optional[str] = None
    id: uuid.UUID = field(default_factory=uuid.uuid4)

    @property
    def coordinate(self) -> Coordinate:
        return Coordinate(self.latitude, self.longitude)

    @classmethod
    def from_game(
        cls,
        game: Game,
        latitude: float,
        longitude: float,
        venue: Optional[Venue] = None,
    ) -> "MapGame":
        """Project a feed game onto the map shape, sharing its id."""
        return cls(
            id=game.id,
            title=game.title,
            sport=game.sport.value,
            venue_id=venue.id if venue else None,
            venue_name=venue.name if venue else game.location,
            start_time=game.date,
            host_id=game.host.id,
            host_name=game.host.display_name,
            latitude=latitude,
            longitude=longitude,
            skill_band=game.skill_band.value,
            player_count=len(game.roster),
            player_cap=game.player_cap,
        )


@dataclass(frozen=True)
class VenuePin:
    venue: Venue

    @property
    def id(self) -> uuid.UUID:
        return self.venue.id

    @property
    def coordinate(self) -> Coordinate:
        return self.venue.coordinate


@dataclass(frozen=True)
class GamePin:
    game: MapGame

    @property
    def id(self) -> uuid.UUID:
        return self.game.id

    @property
    def coordinate(self) -> Coordinate:
        return self.game.coordinate


MapPin = Union[VenuePin, GamePin]


def pin_title(pin: MapPin) -> str:
    """Callout heading for a pin."""
    match pin:
        case VenuePin(venue=venue):
            return venue.name
        case GamePin(game=game):
            return game.title
    raise TypeError(f"Unknown map pin: {pin!r}")


def pin_kind(pin: MapPin) -> str:
    match pin:
        case VenuePin():
            return "venue"
        case GamePin():
            return "game"
    raise TypeError(f"Unknown map pin: {pin!r}")
