"""Auth route handlers: email, phone code and federated sign-in."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request

from hoook.api.dependencies import get_auth_service
from hoook.api.routes import limiter
from hoook.models.schemas import (
    AuthResponse,
    FederatedSignInRequest,
    SendCodeRequest,
    SendCodeResponse,
    SignInRequest,
    SignUpRequest,
    VerifyCodeRequest,
)
from hoook.services.auth_service import Account, AuthService
from hoook.utils.exceptions import AuthError

logger = logging.getLogger(__name__)
router = APIRouter()


def _to_response(account: Account) -> AuthResponse:
    return AuthResponse(
        account_id=account.id,
        display_name=account.display_name,
        email=account.email,
        phone_number=account.phone_number,
        provider=account.provider,
    )


@router.post("/api/auth/signup", status_code=201, response_model=AuthResponse)
@limiter.limit("5/minute")
async def signup(request: Request, payload: SignUpRequest, auth: AuthService = Depends(get_auth_service)):
    """Create an email/password account and sign it in."""
    try:
        account = auth.sign_up(payload.email, payload.password, payload.first_name, payload.last_name)
        return _to_response(account)
    except AuthError as e:
        raise HTTPException(status_code=400, detail=e.message)


@router.post("/api/auth/signin", response_model=AuthResponse)
@limiter.limit("10/minute")
async def signin(request: Request, payload: SignInRequest, auth: AuthService = Depends(get_auth_service)):
    """Sign in with email and password."""
    try:
        return _to_response(auth.sign_in(payload.email, payload.password))
    except AuthError as e:
        raise HTTPException(status_code=401, detail=e.message)


@router.post("/api/auth/phone/send-code", response_model=SendCodeResponse)
@limiter.limit("5/minute")
async def send_code(request: Request, payload: SendCodeRequest, auth: AuthService = Depends(get_auth_service)):
    """Send a one-time code by SMS."""
    try:
        return SendCodeResponse(verification_id=auth.send_verification_code(payload.phone_number))
    except AuthError as e:
        raise HTTPException(status_code=400, detail=e.message)


@router.post("/api/auth/phone/verify", response_model=AuthResponse)
@limiter.limit("10/minute")
async def verify_code(request: Request, payload: VerifyCodeRequest, auth: AuthService = Depends(get_auth_service)):
    """Sign in with the one-time code."""
    try:
        return _to_response(auth.verify_code(payload.verification_id, payload.code))
    except AuthError as e:
        raise HTTPException(status_code=401, detail=e.message)


@router.post("/api/auth/federated", response_model=AuthResponse)
@limiter.limit("10/minute")
async def federated_signin(
    request: Request, payload: FederatedSignInRequest, auth: AuthService = Depends(get_auth_service)
):
    """Sign in with a Google or Apple ID token."""
    try:
        account = auth.sign_in_federated(
            payload.provider, payload.id_token, display_name=payload.display_name, email=payload.email
        )
        return _to_response(account)
    except AuthError as e:
        raise HTTPException(status_code=401, detail=e.message)


@router.post("/api/auth/signout")
async def signout(auth: AuthService = Depends(get_auth_service)):
    auth.sign_out()
    return {"status": "signed_out"}
