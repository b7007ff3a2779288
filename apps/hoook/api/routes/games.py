"""Game route handlers: feed, detail, hosting, joining and leaving."""

import logging
import uuid
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException

from hoook.api.dependencies import get_app_state
from hoook.database.app_state import AppState
from hoook.models.domain import Game, SkillBand, Sport, TimeWindow
from hoook.models.schemas import CreateGameRequest, CreateGameResponse, GameResponse
from hoook.services import game_service

logger = logging.getLogger(__name__)
router = APIRouter()


def _to_response(state: AppState, game: Game) -> GameResponse:
    return GameResponse.from_game(game, state.membership(game).value, state.action_label(game))


@router.get("/api/games")
def list_games(
    sport: Optional[Sport] = None,
    skill: Optional[SkillBand] = None,
    on_campus_only: bool = False,
    time_window: TimeWindow = TimeWindow.ALL,
    state: AppState = Depends(get_app_state),
):
    """
    Game feed for the current user, earliest first.

    ``sport=all`` and ``skill=all`` are the same as leaving the filter out.
    """
    try:
        games = state.filtered_games(
            sport=sport,
            skill=skill,
            on_campus_only=on_campus_only,
            time_window=time_window,
        )
        return [_to_response(state, g) for g in games]
    except Exception as e:
        logger.error(f"Error listing games: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Error listing games: {str(e)}")


@router.get("/api/games/{game_id}", response_model=GameResponse)
def get_game(game_id: uuid.UUID, state: AppState = Depends(get_app_state)):
    """Single game with the current user's membership and action label."""
    game = state.get_game(game_id)
    if game is None:
        raise HTTPException(status_code=404, detail="Game not found")
    return _to_response(state, game)


@router.post("/api/games", status_code=201, response_model=CreateGameResponse)
def create_game(payload: CreateGameRequest, state: AppState = Depends(get_app_state)):
    """
    Host a game as the current user.

    With ``recurrence`` > 0 the game is repeated weekly that many extra times.
    Games given a latitude and longitude also appear on the discovery map.
    """
    try:
        games = game_service.create_game(
            state,
            title=payload.title,
            sport=payload.sport,
            date=payload.date,
            location=payload.location,
            skill_band=payload.skill_band,
            cap=payload.player_cap,
            on_campus=payload.on_campus,
            recurrence=payload.recurrence,
            description=payload.description,
            latitude=payload.latitude,
            longitude=payload.longitude,
        )
        return CreateGameResponse(games=[_to_response(state, g) for g in games])
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error creating game: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Error creating game: {str(e)}")


@router.post("/api/games/{game_id}/join", response_model=GameResponse)
def join_game(game_id: uuid.UUID, state: AppState = Depends(get_app_state)):
    """Join the roster, or the waitlist when the game is full. Repeat calls change nothing."""
    game = state.join_game(game_id)
    if game is None:
        raise HTTPException(status_code=404, detail="Game not found")
    return _to_response(state, game)


@router.post("/api/games/{game_id}/leave", response_model=GameResponse)
def leave_game(game_id: uuid.UUID, state: AppState = Depends(get_app_state)):
    """Leave the roster or waitlist; a freed seat goes to the head of the waitlist."""
    game = state.leave_game(game_id)
    if game is None:
        raise HTTPException(status_code=404, detail="Game not found")
    return _to_response(state, game)
