"""
auth/dependencies.py -- FastAPI Depends() helper for bearer authentication.

Only one auth method exists: an `Authorization: Bearer <token>` header
carrying a JWT from auth/tokens.py. The check is stateless -- the token alone
proves identity, and the user record is not looked up.

get_current_user_id() raises HTTP 401 with one of two codes:
  no_credential       -- header missing, wrong scheme, or empty token
  invalid_credential  -- token failed verification (bad signature, expired, ...)

Layer rule: no imports from api/, tasks/, or docstore/.
  auth/dependencies.py may import from fastapi (for HTTPException/Request)
  because this module is part of the FastAPI dependency injection system.
"""

from __future__ import annotations

from fastapi import HTTPException, Request

from auth.tokens import decode_access_token

_BEARER_PREFIX = "Bearer "


def get_bearer_token(request: Request) -> str | None:
    """Return the raw token from the Authorization header, or None.

    The "Bearer " prefix is matched case-sensitively, single space included.
    """
    auth_header = request.headers.get("Authorization", "")
    if not auth_header.startswith(_BEARER_PREFIX):
        return None
    return auth_header[len(_BEARER_PREFIX) :] or None


def get_current_user_id(request: Request) -> str:
    """Require a valid bearer token. Raises HTTP 401 otherwise.

    On success the user id is also attached to request.state.user_id so
    middleware and handlers that only hold the Request can read it.

    Use as a FastAPI dependency:
        @router.get("/protected")
        def route(user_id: str = Depends(get_current_user_id)): ...
    """
    token = get_bearer_token(request)
    if token is None:
        raise HTTPException(
            status_code=401,
            detail={"code": "no_credential", "message": "No token, authorization denied."},
        )
    user_id = decode_access_token(token)
    if user_id is None:
        raise HTTPException(
            status_code=401,
            detail={"code": "invalid_credential", "message": "Token is not valid."},
        )
    request.state.user_id = user_id
    return user_id
