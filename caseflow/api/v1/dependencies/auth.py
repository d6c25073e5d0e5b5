"""Acting-user dependency: bearer JWT -> ActingUser."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from caseflow.domain.entities.actor import ActingUser
from caseflow.domain.exceptions import AuthenticationException
from caseflow.infrastructure.security.jwt import acting_user_from_claims, verify_token
from caseflow.shared.telemetry.logging import get_logger

logger = get_logger(__name__)

_http_bearer = HTTPBearer(auto_error=False)


async def get_acting_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(_http_bearer)],
) -> ActingUser:
    """Return the caller from the bearer token; 401 if missing or invalid."""
    if not credentials:
        raise AuthenticationException("Not authenticated")
    try:
        payload = verify_token(credentials.credentials)
    except ValueError as e:
        logger.info("Rejected bearer token: %s", e)
        raise AuthenticationException("Invalid or expired token") from e
    return acting_user_from_claims(payload)


CurrentUser = Annotated[ActingUser, Depends(get_acting_user)]
