"""JWT helpers for phone-number logins."""

from datetime import datetime, timedelta, timezone
from typing import Any

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from kart_api.core.config import settings
from kart_api.services.errors import UnauthorizedError

bearer_scheme: HTTPBearer = HTTPBearer(auto_error=False)


def create_access_token(data: dict[str, Any]) -> str:
    """Create a signed JWT access token from payload data."""
    to_encode: dict[str, Any] = data.copy()
    expire: datetime = datetime.now(timezone.utc) + timedelta(
        minutes=settings.jwt_expire_minutes
    )
    to_encode.update({"exp": expire})
    return jwt.encode(
        to_encode,
        settings.jwt_secret_key,
        algorithm=settings.jwt_algorithm,
    )


def verify_token(token: str) -> dict[str, Any]:
    """Decode and validate a JWT token payload."""
    try:
        payload: dict[str, Any] = jwt.decode(
            token,
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm],
        )
    except JWTError as exc:
        raise UnauthorizedError("Could not validate credentials") from exc

    return payload


def get_current_phone(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> str:
    """Resolve the verified phone number from the Authorization header."""
    if credentials is None:
        raise UnauthorizedError("Not authenticated")
    payload: dict[str, Any] = verify_token(credentials.credentials)
    phone: str | None = payload.get("sub")
    if not phone:
        raise UnauthorizedError("Invalid authentication token")
    return phone
