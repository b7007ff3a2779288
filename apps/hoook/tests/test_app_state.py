"""
Unit tests for AppState.
"""
import uuid
from concurrent.futures import ThreadPoolExecutor
from datetime import timedelta

import pytest

from hoook.database.app_state import AppState, default_current_user
from hoook.models.domain import Coordinate, MapTimeFilter, Membership, Sport, TimeWindow
from hoook.utils.exceptions import GameNotFoundError


class TestLookup:
    def test_get_game_unknown_returns_none(self, state):
        assert state.get_game(uuid.uuid4()) is None

    def test_require_game_unknown_raises(self, state):
        with pytest.raises(GameNotFoundError):
            state.require_game(uuid.uuid4())

    def test_games_is_a_snapshot(self, state, current_user, make_game):
        state.add_games([make_game(current_user)])

        snapshot = state.games
        snapshot.clear()

        assert len(state.games) == 1


class TestJoinLeave:
    """Tests for join/leave through the state."""

    def test_join_and_leave_as_current_user(self, state, current_user, make_game, make_user):
        host = make_user("Jordan")
        game = make_game(host, player_cap=2)
        state.add_games([game])

        assert state.join_game(game.id) is game
        assert state.membership(game) is Membership.IN_ROSTER
        assert state.action_label(game) == "Leave"

        assert state.leave_game(game.id) is game
        assert state.membership(game) is Membership.NOT_IN_GAME
        assert game.roster == [host]

    def test_unknown_id_is_silent_noop(self, state, current_user, make_game):
        game = make_game(current_user)
        state.add_games([game])

        assert state.join_game(uuid.uuid4()) is None
        assert state.leave_game(uuid.uuid4()) is None
        assert game.roster == [current_user]

    def test_join_does_not_change_games_played(self, state, current_user, make_game, make_user):
        game = make_game(make_user("Jordan"))
        state.add_games([game])

        state.join_game(game.id)

        assert current_user.games_played == 0


def test_filtered_games_uses_injected_clock(current_user, make_game, now):
    later = now + timedelta(days=1)
    state = AppState(current_user=current_user, clock=lambda: later, timezone="UTC")
    state.add_games([make_game(current_user, date=now + timedelta(hours=1))])

    assert state.filtered_games(time_window=TimeWindow.TODAY) == []
    assert len(state.filtered_games(time_window=TimeWindow.ALL)) == 1


def test_default_current_user():
    user = default_current_user()

    assert user.display_name == "Alex S."
    assert user.games_hosted == 0


class TestConcurrentRosterChanges:
    """Roster changes from many threads at once, as sync route handlers run."""

    def test_concurrent_joins_never_exceed_cap(self, state, make_game, make_user):
        host = make_user("Jordan")
        game = make_game(host, player_cap=3, roster=[])
        state.add_games([game])
        players = [make_user(f"Player{i}") for i in range(40)]

        with ThreadPoolExecutor(max_workers=16) as pool:
            list(pool.map(lambda player: state.join_game(game.id, user=player), players))

        assert len(game.roster) == 3
        assert len(game.waitlist) == 37
        assert set(game.roster) | set(game.waitlist) == set(players)
        assert not set(game.roster) & set(game.waitlist)

    def test_mixed_joins_and_leaves_keep_roster_rules(self, state, make_game, make_user):
        host = make_user("Jordan")
        game = make_game(host, player_cap=4, roster=[])
        state.add_games([game])
        leaving = [make_user(f"Leaver{i}") for i in range(10)]
        staying = [make_user(f"Stayer{i}") for i in range(10)]
        for player in leaving:
            state.join_game(game.id, user=player)

        def change(step):
            action, player = step
            if action == "join":
                return state.join_game(game.id, user=player)
            return state.leave_game(game.id, user=player)

        steps = [("leave", p) for p in leaving] + [("join", p) for p in staying]
        with ThreadPoolExecutor(max_workers=8) as pool:
            list(pool.map(change, steps))

        assert len(game.roster) == 4
        assert len(game.roster) + len(game.waitlist) == len(staying)
        assert set(game.roster) | set(game.waitlist) == set(staying)
        assert len(set(game.waitlist)) == len(game.waitlist)

    def test_repeated_joins_by_current_user_are_idempotent(self, state, current_user, make_game, make_user):
        game = make_game(make_user("Jordan"), player_cap=2)
        state.add_games([game])

        with ThreadPoolExecutor(max_workers=8) as pool:
            list(pool.map(lambda _: state.join_game(game.id), range(50)))

        assert game.roster.count(current_user) == 1
        assert current_user not in game.waitlist


class TestMapGames:
    def test_only_located_games_in_range(self, state, current_user, make_game):
        pinned = make_game(current_user, title="pinned", latitude=30.2849, longitude=-97.7341)
        unpinned = make_game(current_user, title="unpinned")
        state.add_games([pinned, unpinned])

        pins = state.map_games(Coordinate(30.2672, -97.7431), 10)

        assert [p.id for p in pins] == [pinned.id]

    def test_uses_state_clock_and_filters(self, state, current_user, make_game, now):
        later = make_game(
            current_user,
            sport=Sport.SOCCER,
            date=now + timedelta(days=2),
            latitude=30.2849,
            longitude=-97.7341,
        )
        state.add_games([later])
        center = Coordinate(30.2672, -97.7431)

        assert state.map_games(center, 10, time_filter=MapTimeFilter.TODAY) == []
        assert len(state.map_games(center, 10, Sport.SOCCER, MapTimeFilter.THIS_WEEK)) == 1
        assert state.map_games(center, 10, Sport.TENNIS, MapTimeFilter.THIS_WEEK) == []
