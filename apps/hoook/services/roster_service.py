"""
Roster service: join / leave / waitlist rules for a single game.

Membership edge cases (already joined, not present) are no-ops rather than
errors so callers can fire actions without checking state first.
"""

import logging
from typing import Optional

from hoook.models.domain import Game, Membership, User

logger = logging.getLogger(__name__)

LEAVE = "Leave"
LEAVE_WAITLIST = "Leave waitlist"
JOIN_WAITLIST = "Join waitlist"
JOIN = "Join"


def membership(game: Game, user: User) -> Membership:
    """Return whether the user holds a seat, is waiting, or is not in the game."""
    if game.is_user_joined(user):
        return Membership.IN_ROSTER
    if game.is_user_waitlisted(user):
        return Membership.IN_WAITLIST
    return Membership.NOT_IN_GAME


def join(game: Game, user: User) -> Membership:
    """
    Add a user to a game.

    The user takes the last roster seat if one is open, otherwise goes to the
    back of the waitlist. Joining again while already in either list changes
    nothing.

    Args:
        game: Game to join
        user: User joining

    Returns:
        The user's membership after the call
    """
    current = membership(game, user)
    if current is not Membership.NOT_IN_GAME:
        return current

    if len(game.roster) < game.player_cap:
        game.roster.append(user)
        logger.info(f"{user.display_name} joined game {game.id} ({len(game.roster)}/{game.player_cap})")
        return Membership.IN_ROSTER

    game.waitlist.append(user)
    logger.info(f"{user.display_name} waitlisted for game {game.id} (position {len(game.waitlist)})")
    return Membership.IN_WAITLIST


def leave(game: Game, user: User) -> Optional[User]:
    """
    Remove a user from a game's roster and waitlist.

    If that opens a roster seat, the longest-waiting user is promoted. A single
    departure frees at most one seat, so at most one user is promoted.

    Args:
        game: Game to leave
        user: User leaving

    Returns:
        The promoted user, or None if nobody was promoted
    """
    seats_before = len(game.roster)
    game.roster[:] = [member for member in game.roster if member != user]
    game.waitlist[:] = [waiting for waiting in game.waitlist if waiting != user]
    freed_seat = len(game.roster) < seats_before

    promoted = None
    if freed_seat and len(game.roster) < game.player_cap and game.waitlist:
        promoted = game.waitlist.pop(0)
        game.roster.append(promoted)
        logger.info(f"Promoted {promoted.display_name} from waitlist for game {game.id}")

    return promoted


def action_label(game: Game, user: User) -> str:
    """Button label for the user's next action on this game."""
    current = membership(game, user)
    if current is Membership.IN_ROSTER:
        return LEAVE
    if current is Membership.IN_WAITLIST:
        return LEAVE_WAITLIST
    return JOIN_WAITLIST if game.is_full else JOIN
