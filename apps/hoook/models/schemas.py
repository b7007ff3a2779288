"""
Pydantic models for API request/response validation.
"""

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from hoook.models.domain import (
    Availability,
    Game,
    MapGame,
    MapPin,
    SkillBand,
    Sport,
    User,
    Venue,
    pin_kind,
    pin_title,
)
from hoook.utils.constants import MAX_PLAYER_CAP, MAX_RECURRENCE_WEEKS, TITLE_MAX_LENGTH


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    game_count: int
    message: str


# User schemas
class UserSummary(BaseModel):
    """Player shown in a roster or as a host."""

    id: uuid.UUID
    display_name: str
    initials: str

    @classmethod
    def from_user(cls, user: User) -> "UserSummary":
        return cls(id=user.id, display_name=user.display_name, initials=user.initials)


class UserResponse(BaseModel):
    """Full profile of the current user."""

    id: uuid.UUID
    first_name: str
    last_initial: str
    display_name: str
    initials: str
    skill_band: SkillBand
    availability: Availability
    sports: List[Sport]
    bio: str
    games_played: int
    games_hosted: int

    @classmethod
    def from_user(cls, user: User) -> "UserResponse":
        return cls(
            id=user.id,
            first_name=user.first_name,
            last_initial=user.last_initial,
            display_name=user.display_name,
            initials=user.initials,
            skill_band=user.skill_band,
            availability=user.availability,
            sports=list(user.sports),
            bio=user.bio,
            games_played=user.games_played,
            games_hosted=user.games_hosted,
        )


class UpdateProfileRequest(BaseModel):
    """Request to update the current user's profile. Omitted fields are unchanged."""

    skill_band: Optional[SkillBand] = None
    bio: Optional[str] = None
    sports: Optional[List[Sport]] = None
    availability: Optional[Availability] = None


# Game schemas
class GameResponse(BaseModel):
    """Game as shown in the feed, from the current user's point of view."""

    id: uuid.UUID
    title: str
    sport: Sport
    date: datetime
    location: str
    skill_band: SkillBand
    player_cap: int
    on_campus: bool
    host: UserSummary
    roster: List[UserSummary]
    waitlist: List[UserSummary]
    description: str
    spots_left: int
    is_full: bool
    membership: str
    action_label: str
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    @classmethod
    def from_game(cls, game: Game, membership: str, action_label: str) -> "GameResponse":
        return cls(
            id=game.id,
            title=game.title,
            sport=game.sport,
            date=game.date,
            location=game.location,
            skill_band=game.skill_band,
            player_cap=game.player_cap,
            on_campus=game.on_campus,
            host=UserSummary.from_user(game.host),
            roster=[UserSummary.from_user(u) for u in game.roster],
            waitlist=[UserSummary.from_user(u) for u in game.waitlist],
            description=game.description,
            spots_left=game.spots_left,
            is_full=game.is_full,
            membership=membership,
            action_label=action_label,
            latitude=game.latitude,
            longitude=game.longitude,
        )


class CreateGameRequest(BaseModel):
    """Request to host a game, optionally repeating weekly."""

    title: str = Field(..., min_length=1, max_length=TITLE_MAX_LENGTH)
    sport: Sport
    date: datetime  # ISO datetime; naive values are taken as UTC
    location: str = Field(..., min_length=1, max_length=200)
    skill_band: SkillBand = SkillBand.ALL
    player_cap: int = Field(..., ge=1, le=MAX_PLAYER_CAP)
    on_campus: bool = False
    recurrence: int = Field(default=0, ge=0, le=MAX_RECURRENCE_WEEKS)
    description: str = ""
    # Optional map pin; games without one stay off the map
    latitude: Optional[float] = Field(default=None, ge=-90, le=90)
    longitude: Optional[float] = Field(default=None, ge=-180, le=180)


class CreateGameResponse(BaseModel):
    """All instances created by one hosting request."""

    games: List[GameResponse]


# Map schemas (camelCase on the wire to match the mobile client)
class VenueResponse(BaseModel):
    """Venue pin."""

    model_config = ConfigDict(populate_by_name=True)
    id: uuid.UUID
    name: str
    address: str
    latitude: float
    longitude: float
    sport_types: List[str] = Field(default_factory=list, alias="sportTypes")

    @classmethod
    def from_venue(cls, venue: Venue) -> "VenueResponse":
        return cls(
            id=venue.id,
            name=venue.name,
            address=venue.address,
            latitude=venue.latitude,
            longitude=venue.longitude,
            sport_types=list(venue.sport_types),
        )

    def to_venue(self) -> Venue:
        return Venue(
            id=self.id,
            name=self.name,
            address=self.address,
            latitude=self.latitude,
            longitude=self.longitude,
            sport_types=tuple(self.sport_types),
        )


class MapGameResponse(BaseModel):
    """Game pin."""

    model_config = ConfigDict(populate_by_name=True)
    id: uuid.UUID
    title: str
    sport: str
    venue_id: Optional[uuid.UUID] = Field(default=None, alias="venueId")
    venue_name: Optional[str] = Field(default=None, alias="venueName")
    start_time: datetime = Field(alias="startTime")
    host_id: uuid.UUID = Field(alias="hostId")
    host_name: str = Field(alias="hostName")
    latitude: float
    longitude: float
    skill_band: str = Field(alias="skillBand")
    player_count: int = Field(alias="playerCount")
    player_cap: int = Field(alias="playerCap")

    @classmethod
    def from_map_game(cls, game: MapGame) -> "MapGameResponse":
        return cls(
            id=game.id,
            title=game.title,
            sport=game.sport,
            venue_id=game.venue_id,
            venue_name=game.venue_name,
            start_time=game.start_time,
            host_id=game.host_id,
            host_name=game.host_name,
            latitude=game.latitude,
            longitude=game.longitude,
            skill_band=game.skill_band,
            player_count=game.player_count,
            player_cap=game.player_cap,
        )

    def to_map_game(self) -> MapGame:
        return MapGame(
            id=self.id,
            title=self.title,
            sport=self.sport,
            venue_id=self.venue_id,
            venue_name=self.venue_name,
            start_time=self.start_time,
            host_id=self.host_id,
            host_name=self.host_name,
            latitude=self.latitude,
            longitude=self.longitude,
            skill_band=self.skill_band,
            player_count=self.player_count,
            player_cap=self.player_cap,
        )


class VenuesResponse(BaseModel):
    venues: List[VenueResponse]


class GamesResponse(BaseModel):
    games: List[MapGameResponse]


class MapPinResponse(BaseModel):
    """One marker on the map, venue or game."""

    id: uuid.UUID
    kind: str  # venue | game
    title: str
    latitude: float
    longitude: float

    @classmethod
    def from_pin(cls, pin: MapPin) -> "MapPinResponse":
        coordinate = pin.coordinate
        return cls(
            id=pin.id,
            kind=pin_kind(pin),
            title=pin_title(pin),
            latitude=coordinate.latitude,
            longitude=coordinate.longitude,
        )


class MapDataResponse(BaseModel):
    """Venues and games for one map refresh."""

    model_config = ConfigDict(populate_by_name=True)
    venues: List[VenueResponse]
    games: List[MapGameResponse]
    pins: List[MapPinResponse] = Field(default_factory=list)
    radius_miles: int = Field(alias="radiusMiles")
    next_radius_miles: int = Field(alias="nextRadiusMiles")  # Radius to use on the next refresh


# Auth schemas
class SignUpRequest(BaseModel):
    email: str = Field(..., min_length=3, max_length=254)
    password: str = Field(..., min_length=1)
    first_name: str = Field(..., min_length=1, max_length=50)
    last_name: str = Field(..., min_length=1, max_length=50)


class SignInRequest(BaseModel):
    email: str
    password: str


class SendCodeRequest(BaseModel):
    phone_number: str


class SendCodeResponse(BaseModel):
    verification_id: str


class VerifyCodeRequest(BaseModel):
    verification_id: str
    code: str


class FederatedSignInRequest(BaseModel):
    provider: str
    id_token: str
    display_name: Optional[str] = None
    email: Optional[str] = None


class AuthResponse(BaseModel):
    """Authenticated account handle."""

    account_id: str
    display_name: Optional[str] = None
    email: Optional[str] = None
    phone_number: Optional[str] = None
    provider: str


# Location schemas
class LocationUpdateRequest(BaseModel):
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)


class LocationPermissionRequest(BaseModel):
    permission: str  # not_determined | authorized_when_in_use | authorized_always | denied | restricted


class LocationResponse(BaseModel):
    permission: str
    is_updating: bool
    latitude: Optional[float] = None
    longitude: Optional[float] = None


class PermissionPromptResponse(BaseModel):
    should_prompt: bool  # True only while the user has not decided yet
    permission: str
