from fastapi import Depends, HTTPException
from sqlalchemy.orm import Session

from app.auth.deps import get_current_user
from app.db import get_db
from app.errors import AccessDenied
from app.models.enums import ELEVATED_ROLES, PermissionLevel, ResourceType, WorkspaceRole
from app.models.user import User
from app.rbac.resolver import AccessResult, WorkspaceAccess, resolve_access, resolve_workspace_role
from app.rbac.resources import ResourceRef, resource_ref
from app.rbac.store import SqlAccessStore

def get_access_store(db: Session = Depends(get_db)) -> SqlAccessStore:
    return SqlAccessStore(db)

class WorkspaceContext:
    def __init__(self, user: User, workspace_id: int, access: WorkspaceAccess):
        self.user = user
        self.workspace_id = workspace_id
        self.access = access

    @property
    def role(self) -> WorkspaceRole:
        return self.access.role

    @property
    def membership_id(self) -> int:
        return self.access.membership_id

class ResourceContext:
    def __init__(self, user: User, workspace_id: int, resource: ResourceRef, access: AccessResult):
        self.user = user
        self.workspace_id = workspace_id
        self.resource = resource
        self.access = access

def get_workspace_context(
    workspace_id: int,
    user: User = Depends(get_current_user),
    store: SqlAccessStore = Depends(get_access_store),
) -> WorkspaceContext:
    # a missing workspace and a non-member look the same from outside
    access = resolve_workspace_role(store, user.id, workspace_id)
    if not access.is_member:
        raise AccessDenied()
    return WorkspaceContext(user=user, workspace_id=workspace_id, access=access)

def not_found(ctx: WorkspaceContext, detail: str) -> Exception:
    # only callers who can see every row in the workspace learn that one is missing
    if ctx.role in ELEVATED_ROLES:
        return HTTPException(status_code=404, detail=detail)
    return AccessDenied()

def require_workspace_role(*roles: WorkspaceRole):
    allowed = frozenset(roles)
    if not allowed:
        raise RuntimeError("require_workspace_role needs at least one role")

    def _checker(ctx: WorkspaceContext = Depends(get_workspace_context)) -> WorkspaceContext:
        if ctx.role not in allowed:
            raise AccessDenied()
        return ctx

    return _checker

def enforce_access(
    store: SqlAccessStore,
    user: User,
    workspace_id: int,
    resource: ResourceRef,
    level: PermissionLevel,
) -> AccessResult:
    result = resolve_access(store, user.id, workspace_id, resource, level)
    if not result.granted:
        raise AccessDenied()
    return result

def require_access(resource_type: ResourceType, level: PermissionLevel):
    """Guard a ``/workspaces/{workspace_id}/.../{resource_id}`` route."""

    def _checker(
        workspace_id: int,
        resource_id: int,
        user: User = Depends(get_current_user),
        store: SqlAccessStore = Depends(get_access_store),
    ) -> ResourceContext:
        resource = resource_ref(resource_type, resource_id)
        result = enforce_access(store, user, workspace_id, resource, level)
        return ResourceContext(user=user, workspace_id=workspace_id, resource=resource, access=result)

    return _checker
