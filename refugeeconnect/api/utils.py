"""
JWT utilities and the session dependencies built on them.

Functions
---------
create_access_token(data: dict) -> str
    Creates a signed JWT access token with an expiration (`exp`) claim.
verify_token(token: str) -> str | None
    Verify a JWT's signature & expiration and return the subject (`sub`) if valid.
get_current_user / get_optional_user / get_admin_user
    FastAPI dependencies resolving the `token` cookie to the session user.

Environment contract (from `settings`)
--------------------------------------
SECRET_KEY : str
    HMAC signing key for JWTs.
ALGORITHM : str
    JWT signing algorithm (e.g., "HS256").
ACCESS_TOKEN_EXPIRE_MINUTES : int
    Token lifetime window in minutes.
"""

import logging
from datetime import datetime
from typing import Optional

from fastapi import Cookie, Depends, HTTPException, Response
from jose import jwt, JWTError
from refugeeconnect.database.config.config import settings
from refugeeconnect.database.core.funcs import get_session_user

logger = logging.getLogger(__name__)

TOKEN_COOKIE = "token"


def create_access_token(data: dict) -> str:
    """
    Create a signed JWT access token.

    Parameters
    ----------
    data : dict
        Claims to embed in the token (``sub`` holds the user id).

    Returns
    -------
    str
        Encoded JWT string.
    """
    expiration_time = settings.ACCESS_TOKEN_EXPIRE_MINUTES
    encoding = data.copy()
    # exp is a NumericDate (seconds since epoch)
    expires = int(datetime.now().timestamp()) + (int(expiration_time) * 60)
    encoding.update({"exp": expires})
    return jwt.encode(encoding, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def verify_token(token: str) -> Optional[str]:
    """
    Verify a JWT and return its subject.

    Returns
    ----------
    str | None
        The `sub` claim if the token is valid, otherwise None (invalid
        signature, expired, malformed).
    """
    if not token:
        return None
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
        return payload.get("sub")
    except JWTError as e:
        logger.info(f"Rejected session token: {e}")
        return None


def set_session_cookie(response: Response, user_id: str) -> None:
    """Issue a fresh session token for `user_id` as an HttpOnly cookie."""
    response.set_cookie(
        key=TOKEN_COOKIE,
        value=create_access_token({"sub": user_id}),
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite="lax",
        max_age=int(settings.ACCESS_TOKEN_EXPIRE_MINUTES) * 60,
    )


def clear_session_cookie(response: Response) -> None:
    response.delete_cookie(key=TOKEN_COOKIE)


def user_from_token(token: Optional[str]) -> Optional[dict]:
    """Session user named by `token`, or None for a missing/invalid token or inactive user."""
    user_id = verify_token(token)
    if not user_id:
        return None
    return get_session_user(user_id=user_id)


def get_optional_user(token: Optional[str] = Cookie(None)) -> Optional[dict]:
    return user_from_token(token)


def get_current_user(user: Optional[dict] = Depends(get_optional_user)) -> dict:
    """Require an authenticated session; 401 otherwise."""
    if user is None:
        raise HTTPException(
            status_code=401,
            detail={"error": "Authentication required", "message": "Please log in to access this resource"},
        )
    return user


def get_admin_user(user: dict = Depends(get_current_user)) -> dict:
    if not user.get("isAdmin"):
        raise HTTPException(status_code=403, detail="Admin access required")
    return user
