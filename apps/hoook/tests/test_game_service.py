"""
Unit tests for game service.
Tests hosting single and weekly recurring games and request validation.
"""
from datetime import datetime, timedelta

import pytest
import pytz

from hoook.database.app_state import AppState
from hoook.models.domain import SkillBand, Sport
from hoook.services import game_service
from hoook.utils.exceptions import GameValidationError


def _create(state, **overrides):
    params = dict(
        title="Sunday Runs",
        sport=Sport.BASKETBALL,
        date=state.now() + timedelta(days=1),
        location="Gregory Gym",
        skill_band=SkillBand.CASUAL,
        cap=10,
        on_campus=True,
        recurrence=0,
    )
    params.update(overrides)
    return game_service.create_game(state, **params)


class TestCreateGame:
    """Tests for create_game."""

    def test_single_game(self, state, current_user):
        games = _create(state)

        assert len(games) == 1
        game = games[0]
        assert game.host == current_user
        assert game.roster == [current_user]
        assert game.waitlist == []
        assert state.games == games
        assert current_user.games_hosted == 1

    def test_recurrence_creates_weekly_instances(self, state, current_user):
        first_date = state.now() + timedelta(days=1)

        games = _create(state, date=first_date, recurrence=3)

        assert len(games) == 4
        assert [g.date for g in games] == [first_date + timedelta(weeks=i) for i in range(4)]
        assert len({g.id for g in games}) == 4
        assert all(g.roster == [current_user] for g in games)
        assert current_user.games_hosted == 4
        assert len(state.games) == 4

    def test_instances_have_independent_rosters(self, state, make_user):
        games = _create(state, recurrence=1)
        games[0].roster.append(make_user("Jordan"))

        assert len(games[1].roster) == 1

    def test_recurrence_keeps_local_time_across_dst(self, current_user, clock):
        chicago = pytz.timezone("America/Chicago")
        state = AppState(current_user=current_user, clock=clock, timezone="America/Chicago")
        first_date = chicago.localize(datetime(2026, 10, 28, 18, 0))

        games = _create(state, date=first_date, recurrence=2)

        assert [g.date.astimezone(chicago).hour for g in games] == [18, 18, 18]

    def test_naive_date_is_taken_as_utc(self, state):
        games = _create(state, date=datetime(2026, 10, 20, 18, 0))

        assert games[0].date == pytz.UTC.localize(datetime(2026, 10, 20, 18, 0))

    def test_title_is_stripped(self, state):
        games = _create(state, title="  Hoops  ")

        assert games[0].title == "Hoops"

    def test_coordinate_is_copied_to_every_instance(self, state):
        games = _create(state, recurrence=2, latitude=30.2849, longitude=-97.7341)

        assert all(g.coordinate == (30.2849, -97.7341) for g in games)

    def test_games_without_coordinate_have_no_pin(self, state):
        game = _create(state)[0]

        assert game.coordinate is None

    def test_duplicate_games_allowed(self, state):
        """Test nothing stops hosting the same game twice."""
        date = state.now() + timedelta(days=2)

        _create(state, date=date)
        _create(state, date=date)

        assert len(state.games) == 2


class TestValidation:
    """Tests for rejected hosting requests."""

    @pytest.mark.parametrize(
        "overrides",
        [
            {"title": "   "},
            {"title": "x" * 101},
            {"sport": Sport.ALL},
            {"cap": 0},
            {"cap": 101},
            {"recurrence": -1},
            {"recurrence": 53},
            {"latitude": 30.28},
            {"longitude": -97.74},
            {"latitude": 91.0, "longitude": -97.74},
        ],
    )
    def test_invalid_request_creates_nothing(self, state, current_user, overrides):
        with pytest.raises(GameValidationError):
            _create(state, **overrides)

        assert state.games == []
        assert current_user.games_hosted == 0

    def test_bounds_are_inclusive(self, state):
        games = _create(state, cap=1, recurrence=52, title="x" * 100)

        assert len(games) == 53
        assert games[0].player_cap == 1
