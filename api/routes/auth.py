"""
api/routes/auth.py -- Registration, login and identity REST endpoints.

Routes:
  POST /api/auth/register   -- create a user for an email; returns a JWT
  POST /api/auth/login      -- issue a JWT for an existing email
  GET  /api/auth/me         -- current user record (requires auth)

Security:
  Login checks only that the email is registered. There is no password, so
  anyone who knows a registered address can obtain a token for it. This is
  existing behaviour, kept and flagged in DESIGN.md rather than changed here.

  Unknown email on login returns the same generic "Invalid credentials."
  message used for any other login failure.

  Registration is look-up-then-create with no store-level unique constraint;
  two concurrent registrations for one email can both succeed.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Request

from api.models import AuthResponse, CredentialsRequest, ErrorDetail, MeResponse
from auth.dependencies import get_current_user_id
from auth.store import UserStore
from auth.tokens import create_access_token

logger = logging.getLogger("tasktrack.api")

# Auth policy:
# - POST /api/auth/register: public
# - POST /api/auth/login:    public
# - GET  /api/auth/me:       requires auth (get_current_user_id)
router = APIRouter()


@router.post("/auth/register", response_model=AuthResponse, status_code=201)
def register(request: Request, body: CredentialsRequest) -> AuthResponse:
    """Register a new user and return a token bound to the new id."""
    user_store: UserStore = request.app.state.user_store
    if user_store.get_by_email(body.email) is not None:
        raise HTTPException(
            status_code=400,
            detail=ErrorDetail(
                code="already_exists",
                message="User with this email already exists.",
            ).model_dump(),
        )

    user_id = user_store.create_user(body.email)
    logger.info("User %s registered", user_id)
    return AuthResponse(
        token=create_access_token(user_id),
        user_id=user_id,
        message="User registered successfully.",
    )


@router.post("/auth/login", response_model=AuthResponse)
def login(request: Request, body: CredentialsRequest) -> AuthResponse:
    """Issue a token for a registered email."""
    user_store: UserStore = request.app.state.user_store
    user = user_store.get_by_email(body.email)
    if user is None:
        raise HTTPException(
            status_code=400,
            detail=ErrorDetail(code="invalid_credentials", message="Invalid credentials.").model_dump(),
        )

    return AuthResponse(
        token=create_access_token(user.id),
        user_id=user.id,
        message="Logged in successfully.",
    )


@router.get("/auth/me", response_model=MeResponse)
def me(request: Request, user_id: str = Depends(get_current_user_id)) -> MeResponse:
    """Return the stored record for the authenticated user.

    A valid token whose user no longer exists is treated as an invalid
    credential.
    """
    user_store: UserStore = request.app.state.user_store
    user = user_store.get_by_id(user_id)
    if user is None:
        raise HTTPException(
            status_code=401,
            detail=ErrorDetail(code="invalid_credential", message="Token is not valid.").model_dump(),
        )
    return MeResponse.from_user(user)
