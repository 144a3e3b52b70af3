"""
auth/tokens.py -- JWT issue and verification.

Security design decisions:
  JWT: python-jose with HS256. Tokens are signed with SECRET_KEY and carry the
       user id as the subject claim plus issued-at and expiry. Verification
       returns None on any failure -- the auth dependency turns that into a 401.

  SECRET_KEY: sourced from core.config.get_settings(). Settings refuses to
       start without a key of at least 32 characters; there is no fallback.

  No passwords: users are identified by email alone, so there is nothing to
       hash here. See DESIGN.md.

Layer rule: no imports from api/, tasks/, or docstore/. Import from core/
is allowed -- core/ is the kernel and has no reverse dependencies.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone

from jose import ExpiredSignatureError, JWTError, jwt

from core.config import get_settings

logger = logging.getLogger("tasktrack.auth")

# ---------------------------------------------------------------------------
# Config -- read once at module load via the lru_cache singleton
# ---------------------------------------------------------------------------

_settings = get_settings()

_ALGORITHM = "HS256"


# ---------------------------------------------------------------------------
# JWT encode / decode
# ---------------------------------------------------------------------------


def create_access_token(user_id: str, expire_seconds: int = 0) -> str:
    """Encode a signed JWT whose subject is the given user id.

    Args:
        user_id:        Store-assigned user id.
        expire_seconds: Lifetime in seconds. If 0 (default), uses
                        Settings.token_expire_seconds.
    """
    duration = expire_seconds if expire_seconds > 0 else _settings.token_expire_seconds
    now = datetime.now(timezone.utc)
    payload = {
        "sub": user_id,
        "iat": now,
        "exp": now + timedelta(seconds=duration),
    }
    return jwt.encode(payload, _settings.secret_key, algorithm=_ALGORITHM)


def decode_access_token(token: str) -> str | None:
    """Verify a JWT and return its user id, or None on any failure.

    Covers malformed tokens, signature mismatch, expiry and a missing subject.
    The reason is logged; nothing is raised to the caller.
    """
    try:
        payload = jwt.decode(token, _settings.secret_key, algorithms=[_ALGORITHM])
    except ExpiredSignatureError:
        logger.warning("JWT verification failed: token expired")
        return None
    except JWTError as exc:
        logger.warning("JWT verification failed: %s", exc)
        return None
    user_id = payload.get("sub")
    if not isinstance(user_id, str) or not user_id:
        logger.warning("JWT verification failed: missing subject claim")
        return None
    return user_id
