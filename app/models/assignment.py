from datetime import date, datetime

from sqlalchemy import Date, DateTime, Enum, ForeignKey, Integer, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base
from app.models.enums import ResponseStatus

class ChecklistAssignment(Base):
    __tablename__ = "checklist_assignments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    template_id: Mapped[int] = mapped_column(
        ForeignKey("checklist_templates.id", ondelete="CASCADE"), index=True, nullable=False
    )
    due_date: Mapped[date | None] = mapped_column(Date, nullable=True)

    created_by: Mapped[str] = mapped_column(ForeignKey("users.id"), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

class AssignmentAssignee(Base):
    __tablename__ = "checklist_assignment_assignees"

    assignment_id: Mapped[int] = mapped_column(
        ForeignKey("checklist_assignments.id", ondelete="CASCADE"), primary_key=True
    )
    user_id: Mapped[str] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), primary_key=True, index=True
    )

class AssignmentTeam(Base):
    __tablename__ = "checklist_assignment_teams"

    assignment_id: Mapped[int] = mapped_column(
        ForeignKey("checklist_assignments.id", ondelete="CASCADE"), primary_key=True
    )
    team_id: Mapped[int] = mapped_column(
        ForeignKey("teams.id", ondelete="CASCADE"), primary_key=True, index=True
    )

# one row per (assignment, item), created up front with status NONE
class ChecklistResponse(Base):
    __tablename__ = "checklist_responses"
    __table_args__ = (
        UniqueConstraint("assignment_id", "item_id", name="uq_checklist_response_assignment_item"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    assignment_id: Mapped[int] = mapped_column(
        ForeignKey("checklist_assignments.id", ondelete="CASCADE"), index=True, nullable=False
    )
    item_id: Mapped[int] = mapped_column(
        ForeignKey("checklist_items.id", ondelete="CASCADE"), nullable=False
    )
    status: Mapped[ResponseStatus] = mapped_column(
        Enum(ResponseStatus, name="response_status"), nullable=False, default=ResponseStatus.NONE
    )

    responded_by: Mapped[str | None] = mapped_column(ForeignKey("users.id"), nullable=True)
    responded_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
