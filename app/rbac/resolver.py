"""Resolve whether a user may act on a resource inside a workspace.

Access is the workspace role combined with resource-scoped grants. OWNER and
ADMIN always get MANAGE; everyone else gets the highest level granted either
to their membership directly or to any of their teams in that workspace.
Grants only ever add access, there are no deny rules.
"""

from dataclasses import dataclass

from app.errors import InvalidArgumentError
from app.models.enums import ELEVATED_ROLES, PermissionLevel, ResourceType, WorkspaceRole
from app.rbac.resources import ResourceRef, check_resource_ref
from app.rbac.store import AccessStore

@dataclass(frozen=True)
class AccessResult:
    granted: bool
    effective_level: PermissionLevel | None
    workspace_role: WorkspaceRole | None

    def as_dict(self) -> dict:
        return {
            "hasAccess": self.granted,
            "level": self.effective_level.value if self.effective_level else None,
            "role": self.workspace_role.value if self.workspace_role else None,
        }

@dataclass(frozen=True)
class WorkspaceAccess:
    is_member: bool
    role: WorkspaceRole | None
    membership_id: int | None = None

    def has_role(self, *roles: WorkspaceRole) -> bool:
        return self.is_member and self.role in roles

DENIED = AccessResult(granted=False, effective_level=None, workspace_role=None)

def coerce_level(level: PermissionLevel | str) -> PermissionLevel:
    try:
        return PermissionLevel(level)
    except ValueError:
        raise InvalidArgumentError(f"unknown permission level: {level!r}") from None

def highest_level(levels) -> PermissionLevel | None:
    best: PermissionLevel | None = None
    for level in levels:
        if best is None or level.rank > best.rank:
            best = level
    return best

def resolve_workspace_role(store: AccessStore, user_id: str, workspace_id: int) -> WorkspaceAccess:
    membership = store.find_membership(workspace_id, user_id)
    if membership is None:
        return WorkspaceAccess(is_member=False, role=None, membership_id=None)
    return WorkspaceAccess(is_member=True, role=WorkspaceRole(membership.role), membership_id=membership.id)

def resolve_access(
    store: AccessStore,
    user_id: str,
    workspace_id: int,
    resource: ResourceRef,
    required_level: PermissionLevel | str,
) -> AccessResult:
    required = coerce_level(required_level)
    # fail fast on a bad discriminant even when the role would short-circuit
    check_resource_ref(resource)

    membership = store.find_membership(workspace_id, user_id)
    if membership is None:
        return DENIED

    role = WorkspaceRole(membership.role)
    if role in ELEVATED_ROLES:
        return AccessResult(granted=True, effective_level=PermissionLevel.MANAGE, workspace_role=role)

    team_ids = store.find_team_ids_for_user_in_workspace(user_id, workspace_id)
    grants = store.find_grants(resource, membership.id, team_ids)
    effective = highest_level(PermissionLevel(g.level) for g in grants)

    granted = effective is not None and effective.rank >= required.rank
    return AccessResult(granted=granted, effective_level=effective, workspace_role=role)

def visible_resource_ids(
    store: AccessStore,
    user_id: str,
    workspace_id: int,
    resource_type: ResourceType,
) -> set[int] | None:
    """Ids of one resource kind the user can at least VIEW.

    ``None`` means every resource in the workspace (elevated role); an empty
    set means none, including for non-members.
    """
    membership = store.find_membership(workspace_id, user_id)
    if membership is None:
        return set()
    if WorkspaceRole(membership.role) in ELEVATED_ROLES:
        return None

    team_ids = store.find_team_ids_for_user_in_workspace(user_id, workspace_id)
    return store.find_granted_resource_ids(resource_type, membership.id, team_ids)
