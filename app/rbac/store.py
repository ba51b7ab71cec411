"""Read-only queries the access resolver depends on.

``AccessStore`` is the interface; ``SqlAccessStore`` answers it from the
SQLAlchemy session. Any ``SQLAlchemyError`` is re-raised as
``StorageUnavailableError`` so callers can tell an outage from a denial.
"""

from collections.abc import Iterable
from typing import Protocol

from sqlalchemy import ColumnElement, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.errors import InvalidResourceError, StorageUnavailableError
from app.logger import logger
from app.models.enums import ResourceType
from app.models.permission import Permission
from app.models.team import Team, TeamMember
from app.models.workspace import WorkspaceMember
from app.rbac.resources import ChecklistTemplateRef, ProjectRef, ResourceRef

class AccessStore(Protocol):
    def find_membership(self, workspace_id: int, user_id: str) -> WorkspaceMember | None: ...

    def find_team_ids_for_user_in_workspace(self, user_id: str, workspace_id: int) -> set[int]: ...

    def find_grants(
        self,
        resource: ResourceRef,
        membership_id: int,
        team_ids: Iterable[int],
    ) -> list[Permission]: ...

    def find_granted_resource_ids(
        self,
        resource_type: ResourceType,
        membership_id: int,
        team_ids: Iterable[int],
    ) -> set[int]: ...

def grant_column(resource_type: ResourceType):
    if resource_type == ResourceType.checklist_template:
        return Permission.checklist_template_id
    if resource_type == ResourceType.project:
        return Permission.project_id
    raise InvalidResourceError(f"unknown resource type: {resource_type!r}")

def grant_resource_clause(resource: ResourceRef) -> ColumnElement[bool]:
    if isinstance(resource, ChecklistTemplateRef):
        return Permission.checklist_template_id == resource.id
    if isinstance(resource, ProjectRef):
        return Permission.project_id == resource.id
    raise InvalidResourceError(f"unsupported resource reference: {resource!r}")

# direct grant on the membership OR a grant on any of the teams
def principal_clause(membership_id: int, team_ids: Iterable[int]) -> ColumnElement[bool]:
    clauses = [Permission.workspace_member_id == membership_id]
    team_ids = list(team_ids)
    if team_ids:
        clauses.append(Permission.team_id.in_(team_ids))
    return or_(*clauses)

class SqlAccessStore:
    def __init__(self, db: Session):
        self.db = db

    def find_membership(self, workspace_id: int, user_id: str) -> WorkspaceMember | None:
        q = select(WorkspaceMember).where(
            WorkspaceMember.workspace_id == workspace_id,
            WorkspaceMember.user_id == user_id,
        )
        return self._read("membership", lambda: self.db.scalar(q))

    def find_team_ids_for_user_in_workspace(self, user_id: str, workspace_id: int) -> set[int]:
        # teams of other workspaces are excluded by the join, not afterwards
        q = (
            select(TeamMember.team_id)
            .join(Team, Team.id == TeamMember.team_id)
            .where(TeamMember.user_id == user_id, Team.workspace_id == workspace_id)
        )
        return self._read("team_ids", lambda: set(self.db.scalars(q).all()))

    def find_grants(
        self,
        resource: ResourceRef,
        membership_id: int,
        team_ids: Iterable[int],
    ) -> list[Permission]:
        q = select(Permission).where(
            grant_resource_clause(resource),
            principal_clause(membership_id, team_ids),
        )
        return self._read("grants", lambda: list(self.db.scalars(q).all()))

    def find_granted_resource_ids(
        self,
        resource_type: ResourceType,
        membership_id: int,
        team_ids: Iterable[int],
    ) -> set[int]:
        column = grant_column(resource_type)
        q = (
            select(column)
            .where(column.is_not(None), principal_clause(membership_id, team_ids))
            .distinct()
        )
        return self._read("granted_ids", lambda: set(self.db.scalars(q).all()))

    def _read(self, what: str, fn):
        try:
            return fn()
        except SQLAlchemyError as e:
            logger.error(
                "access store read failed",
                extra={"query": what, "error_type": type(e).__name__},
            )
            raise StorageUnavailableError(f"{what} lookup failed") from e
