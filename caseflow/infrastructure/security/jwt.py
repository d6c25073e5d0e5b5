"""JWT verification for access tokens issued by the hosted auth service.

Claims used: sub (user id), roles (list of app roles), worlds (world ids the
user may access). create_access_token exists for local development and tests.
"""

from datetime import UTC, datetime, timedelta
from typing import Any, cast

from jose import JWTError, jwt

from caseflow.core.config import get_settings
from caseflow.domain.entities.actor import ActingUser


def create_access_token(
    data: dict[str, Any],
    expires_delta: timedelta | None = None,
) -> str:
    """Create a signed JWT with the given claims (default TTL 1 hour).

    Args:
        data: Claims to encode (sub, roles, worlds).
        expires_delta: Optional TTL.

    Returns:
        Encoded JWT string.
    """
    settings = get_settings()
    to_encode = data.copy()
    to_encode["exp"] = datetime.now(UTC) + (expires_delta or timedelta(hours=1))
    if settings.jwt_audience and "aud" not in to_encode:
        to_encode["aud"] = settings.jwt_audience
    encoded = jwt.encode(
        to_encode,
        settings.jwt_secret.get_secret_value(),
        algorithm=settings.jwt_algorithm,
    )
    return cast(str, encoded)


def verify_token(token: str) -> dict[str, Any]:
    """Verify and decode a JWT. Returns the payload.

    Enforces presence of exp and sub; checks aud when JWT_AUDIENCE is set.

    Raises:
        ValueError: If token is invalid, expired, or missing required claims.
    """
    settings = get_settings()
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret.get_secret_value(),
            algorithms=[settings.jwt_algorithm],
            audience=settings.jwt_audience,
            options={
                "require_exp": True,
                "require_sub": True,
                "verify_aud": settings.jwt_audience is not None,
            },
        )
    except JWTError as e:
        raise ValueError(f"Invalid token: {e!s}") from e
    if not payload.get("sub"):
        raise ValueError("Token missing required claim: sub")
    return payload


def acting_user_from_claims(payload: dict[str, Any]) -> ActingUser:
    """Build the ActingUser from verified claims; absent lists mean no roles / no worlds."""
    roles = payload.get("roles") or []
    worlds = payload.get("worlds") or []
    if isinstance(roles, str):
        roles = [roles]
    if isinstance(worlds, str):
        worlds = [worlds]
    return ActingUser(
        id=str(payload["sub"]),
        roles=frozenset(str(r) for r in roles),
        world_access=frozenset(str(w) for w in worlds),
    )
