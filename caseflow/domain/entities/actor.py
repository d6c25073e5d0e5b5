"""Acting user: identity, roles and world access of the caller.

Built from verified access-token claims. Every engine and compositor call
takes one explicitly; there is no ambient auth state.
"""

from dataclasses import dataclass

from caseflow.domain.enums import AppRole
from caseflow.domain.exceptions import AuthorizationException

_WRITER_ROLES = frozenset({AppRole.ADMIN.value, AppRole.EDITOR.value})
_ADMIN_ROLES = frozenset({AppRole.SUPERADMIN.value, AppRole.ADMIN.value})


@dataclass(frozen=True)
class ActingUser:
    """Caller identity with roles and the worlds (tenants) they may access."""

    id: str
    roles: frozenset[str] = frozenset()
    world_access: frozenset[str] = frozenset()

    @property
    def is_superadmin(self) -> bool:
        return AppRole.SUPERADMIN.value in self.roles

    def can_read(self, world_id: str) -> bool:
        return self.is_superadmin or world_id in self.world_access

    def can_write(self, world_id: str) -> bool:
        if self.is_superadmin:
            return True
        return bool(self.roles & _WRITER_ROLES) and world_id in self.world_access

    def can_administer(self, world_id: str) -> bool:
        if self.is_superadmin:
            return True
        return bool(self.roles & _ADMIN_ROLES) and world_id in self.world_access

    def require_read(self, world_id: str, resource: str = "dossier") -> None:
        """Raise AuthorizationException unless the user may read in world_id."""
        if not self.can_read(world_id):
            raise AuthorizationException(resource=resource, action="read")

    def require_write(self, world_id: str, action: str, resource: str = "dossier") -> None:
        """Raise AuthorizationException unless the user may write in world_id."""
        if not self.can_write(world_id):
            raise AuthorizationException(resource=resource, action=action)

    def require_admin(self, world_id: str, action: str, resource: str = "dossier") -> None:
        """Raise AuthorizationException unless the user is admin (or superadmin) in world_id."""
        if not self.can_administer(world_id):
            raise AuthorizationException(resource=resource, action=action)
