"""Access-token verification."""

from caseflow.infrastructure.security.jwt import (
    acting_user_from_claims,
    create_access_token,
    verify_token,
)

__all__ = ["acting_user_from_claims", "create_access_token", "verify_token"]
