from datetime import datetime

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base
from app.models.enums import PermissionLevel

# one principal and one resource per grant; no uniqueness on (principal, resource)
class Permission(Base):
    __tablename__ = "permissions"
    __table_args__ = (
        sa.CheckConstraint(
            "(workspace_member_id IS NULL) <> (team_id IS NULL)",
            name="ck_permission_one_principal",
        ),
        sa.CheckConstraint(
            "(checklist_template_id IS NULL) <> (project_id IS NULL)",
            name="ck_permission_one_resource",
        ),
    )

    id: Mapped[int] = mapped_column(sa.Integer, primary_key=True, autoincrement=True)
    level: Mapped[PermissionLevel] = mapped_column(
        sa.Enum(PermissionLevel, name="permission_level"), nullable=False
    )

    workspace_member_id: Mapped[int | None] = mapped_column(
        sa.ForeignKey("workspace_members.id", ondelete="CASCADE"), index=True, nullable=True
    )
    team_id: Mapped[int | None] = mapped_column(
        sa.ForeignKey("teams.id", ondelete="CASCADE"), index=True, nullable=True
    )

    checklist_template_id: Mapped[int | None] = mapped_column(
        sa.ForeignKey("checklist_templates.id", ondelete="CASCADE"), index=True, nullable=True
    )
    project_id: Mapped[int | None] = mapped_column(
        sa.ForeignKey("projects.id", ondelete="CASCADE"), index=True, nullable=True
    )

    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True),
        nullable=False,
        server_default=sa.func.now(),
    )
