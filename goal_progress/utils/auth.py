"""Bearer token helpers.

Tokens are issued by the account service; this service only needs to read
the requester's user ID out of them. ``create_access_token`` exists for
tooling and tests.
"""
from datetime import timedelta
from typing import Optional

from jose import JWTError, jwt

from goal_progress.config import settings
from goal_progress.utils.dates import utcnow


def create_access_token(
    user_id: str, expires_delta: Optional[timedelta] = None
) -> str:
    """
    Sign a JWT whose ``sub`` claim is the user ID.

    Example:
        >>> token = create_access_token(user_id="user123")
        >>> verify_access_token(token)
        'user123'
    """
    lifetime = expires_delta or timedelta(minutes=settings.jwt_expiration_minutes)
    claims = {"sub": user_id, "exp": utcnow() + lifetime}
    return jwt.encode(claims, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def verify_access_token(token: str) -> str:
    """
    Decode a JWT and return the user ID it was issued for.

    Raises:
        JWTError: If the token is invalid, expired or has no subject
    """
    payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    user_id = payload.get("sub")
    if user_id is None:
        raise JWTError("Token payload missing 'sub' claim")
    return user_id
