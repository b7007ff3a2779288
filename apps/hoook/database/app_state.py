"""
In-memory application state: the signed-in user and every hosted game.

One AppState is built at startup (see api/main.py) and handed to routes through
a FastAPI dependency; tests build their own. Nothing is persisted. Mutations
run under a single lock because sync route handlers run in a thread pool.
"""

import logging
import threading
import uuid
from datetime import datetime
from typing import Iterable, List, Optional, Sequence

from hoook.models.domain import (
    Availability,
    Coordinate,
    Game,
    MapGame,
    MapTimeFilter,
    Membership,
    SkillBand,
    Sport,
    TimeWindow,
    User,
    Venue,
)
from hoook.services import feed_service, roster_service
from hoook.utils.constants import DEFAULT_TIMEZONE
from hoook.utils.datetime_utils import Clock, utcnow
from hoook.utils.exceptions import GameNotFoundError

logger = logging.getLogger(__name__)


def default_current_user() -> User:
    """The single local profile the app starts with."""
    return User(
        first_name="Alex",
        last_initial="S",
        skill_band=SkillBand.INTERMEDIATE,
        availability=Availability.WEEKNIGHTS,
        sports=[Sport.BASKETBALL, Sport.SOCCER, Sport.PICKLEBALL],
        bio="UT Austin student who loves pickup hoops and casual soccer.",
    )


class AppState:
    """Owns the current user and the game collection."""

    def __init__(
        self,
        current_user: Optional[User] = None,
        games: Optional[Iterable[Game]] = None,
        clock: Clock = utcnow,
        timezone: str = DEFAULT_TIMEZONE,
    ):
        self.current_user = current_user or default_current_user()
        self._games: List[Game] = list(games or [])
        self.clock = clock
        self.timezone = timezone
        self.lock = threading.RLock()

    @property
    def games(self) -> List[Game]:
        """Snapshot of the collection in insertion order."""
        with self.lock:
            return list(self._games)

    def now(self) -> datetime:
        return self.clock()

    def get_game(self, game_id: uuid.UUID) -> Optional[Game]:
        with self.lock:
            for game in self._games:
                if game.id == game_id:
                    return game
        return None

    def require_game(self, game_id: uuid.UUID) -> Game:
        """Strict lookup for callers that want a NotFound error instead of None."""
        game = self.get_game(game_id)
        if game is None:
            raise GameNotFoundError(f"Game {game_id} not found")
        return game

    def add_games(self, games: List[Game]) -> None:
        """Append a batch of games in one step."""
        with self.lock:
            self._games.extend(games)
        logger.info(f"Added {len(games)} game(s); collection size {len(self._games)}")

    def join_game(self, game_id: uuid.UUID, user: Optional[User] = None) -> Optional[Game]:
        """
        Join a game as ``user``, the current user by default.

        Returns:
            The game, or None if the id is unknown (nothing changes)
        """
        with self.lock:
            game = self.get_game(game_id)
            if game is None:
                logger.debug(f"Join ignored, unknown game {game_id}")
                return None
            roster_service.join(game, user or self.current_user)
            return game

    def leave_game(self, game_id: uuid.UUID, user: Optional[User] = None) -> Optional[Game]:
        """
        Leave a game (roster or waitlist) as ``user``, the current user by default.

        Returns:
            The game, or None if the id is unknown (nothing changes)
        """
        with self.lock:
            game = self.get_game(game_id)
            if game is None:
                logger.debug(f"Leave ignored, unknown game {game_id}")
                return None
            roster_service.leave(game, user or self.current_user)
            return game

    def membership(self, game: Game) -> Membership:
        return roster_service.membership(game, self.current_user)

    def action_label(self, game: Game) -> str:
        return roster_service.action_label(game, self.current_user)

    def filtered_games(
        self,
        sport: Optional[Sport] = None,
        skill: Optional[SkillBand] = None,
        on_campus_only: bool = False,
        time_window: TimeWindow = TimeWindow.ALL,
    ) -> List[Game]:
        """Feed for the current moment; evaluated fresh on every call."""
        return feed_service.filtered_games(
            self.games,
            now=self.now(),
            sport=sport,
            skill=skill,
            on_campus_only=on_campus_only,
            time_window=time_window,
            tz=self.timezone,
        )

    def map_games(
        self,
        center: Coordinate,
        radius_miles: float,
        sport: Optional[Sport] = None,
        time_filter: MapTimeFilter = MapTimeFilter.TODAY,
        venues: Sequence[Venue] = (),
    ) -> List[MapGame]:
        """Hosted games with a coordinate inside the radius, as map pins."""
        with self.lock:
            return feed_service.map_games(
                self._games,
                now=self.now(),
                center=center,
                radius_miles=radius_miles,
                sport=sport,
                time_filter=time_filter,
                venues=venues,
                tz=self.timezone,
            )
