"""
FastAPI dependencies that hand the process-wide services to route handlers.

The objects are built in api/main.py and stored on ``app.state``.
"""

from fastapi import Request

from hoook.database.app_state import AppState
from hoook.services.auth_service import AuthService
from hoook.services.map_service import MapService
from hoook.services.map_session import MapSession


def get_app_state(request: Request) -> AppState:
    return request.app.state.app_state


def get_map_service(request: Request) -> MapService:
    return request.app.state.map_service


def get_map_session(request: Request) -> MapSession:
    return request.app.state.map_session


def get_auth_service(request: Request) -> AuthService:
    return request.app.state.auth_service
