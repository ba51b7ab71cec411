"""checklist items, assignments, responses, categories, tags, issues

Revision ID: 0002_checklist_workflow
Revises: 0001_init
Create Date: 2026-10-19
"""
from __future__ import annotations

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision = "0002_checklist_workflow"
down_revision = "0001_init"
branch_labels = None
depends_on = None

def upgrade() -> None:
    postgresql.ENUM("NONE", "ACCEPTABLE", "UNACCEPTABLE", name="response_status").create(
        op.get_bind(), checkfirst=True
    )
    postgresql.ENUM("OPEN", "IN_PROGRESS", "CLOSED", name="issue_status").create(op.get_bind(), checkfirst=True)

    response_status = postgresql.ENUM(
        "NONE", "ACCEPTABLE", "UNACCEPTABLE", name="response_status", create_type=False
    )
    issue_status = postgresql.ENUM("OPEN", "IN_PROGRESS", "CLOSED", name="issue_status", create_type=False)

    op.create_table(
        "checklist_items",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True, nullable=False),
        sa.Column(
            "template_id",
            sa.Integer(),
            sa.ForeignKey("checklist_templates.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("position", sa.Integer(), nullable=False, server_default="0"),
    )
    op.create_index("ix_checklist_items_template_id", "checklist_items", ["template_id"])

    op.create_table(
        "categories",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True, nullable=False),
        sa.Column(
            "workspace_id", sa.Integer(), sa.ForeignKey("workspaces.id", ondelete="CASCADE"), nullable=False
        ),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("parent_id", sa.Integer(), sa.ForeignKey("categories.id", ondelete="RESTRICT"), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.UniqueConstraint("workspace_id", "name", name="uq_category_workspace_name"),
    )
    op.create_index("ix_categories_workspace_id", "categories", ["workspace_id"])
    op.create_index("ix_categories_parent_id", "categories", ["parent_id"])

    op.create_table(
        "tags",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True, nullable=False),
        sa.Column(
            "workspace_id", sa.Integer(), sa.ForeignKey("workspaces.id", ondelete="CASCADE"), nullable=False
        ),
        sa.Column("name", sa.String(length=50), nullable=False),
        sa.Column("color", sa.String(length=30), nullable=False, server_default="gray"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.UniqueConstraint("workspace_id", "name", name="uq_tag_workspace_name"),
    )
    op.create_index("ix_tags_workspace_id", "tags", ["workspace_id"])

    op.create_table(
        "checklist_template_categories",
        sa.Column(
            "template_id",
            sa.Integer(),
            sa.ForeignKey("checklist_templates.id", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column("category_id", sa.Integer(), sa.ForeignKey("categories.id", ondelete="CASCADE"), primary_key=True),
    )
    op.create_index(
        "ix_checklist_template_categories_category_id", "checklist_template_categories", ["category_id"]
    )

    op.create_table(
        "checklist_template_tags",
        sa.Column(
            "template_id",
            sa.Integer(),
            sa.ForeignKey("checklist_templates.id", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column("tag_id", sa.Integer(), sa.ForeignKey("tags.id", ondelete="CASCADE"), primary_key=True),
    )
    op.create_index("ix_checklist_template_tags_tag_id", "checklist_template_tags", ["tag_id"])

    op.create_table(
        "checklist_assignments",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True, nullable=False),
        sa.Column(
            "template_id",
            sa.Integer(),
            sa.ForeignKey("checklist_templates.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("due_date", sa.Date(), nullable=True),
        sa.Column("created_by", sa.String(length=36), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
    )
    op.create_index("ix_checklist_assignments_template_id", "checklist_assignments", ["template_id"])

    op.create_table(
        "checklist_assignment_assignees",
        sa.Column(
            "assignment_id",
            sa.Integer(),
            sa.ForeignKey("checklist_assignments.id", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column("user_id", sa.String(length=36), sa.ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
    )
    op.create_index("ix_checklist_assignment_assignees_user_id", "checklist_assignment_assignees", ["user_id"])

    op.create_table(
        "checklist_assignment_teams",
        sa.Column(
            "assignment_id",
            sa.Integer(),
            sa.ForeignKey("checklist_assignments.id", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column("team_id", sa.Integer(), sa.ForeignKey("teams.id", ondelete="CASCADE"), primary_key=True),
    )
    op.create_index("ix_checklist_assignment_teams_team_id", "checklist_assignment_teams", ["team_id"])

    op.create_table(
        "checklist_responses",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True, nullable=False),
        sa.Column(
            "assignment_id",
            sa.Integer(),
            sa.ForeignKey("checklist_assignments.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("item_id", sa.Integer(), sa.ForeignKey("checklist_items.id", ondelete="CASCADE"), nullable=False),
        sa.Column("status", response_status, nullable=False, server_default="NONE"),
        sa.Column("responded_by", sa.String(length=36), sa.ForeignKey("users.id"), nullable=True),
        sa.Column("responded_at", sa.DateTime(timezone=True), nullable=True),
        sa.UniqueConstraint("assignment_id", "item_id", name="uq_checklist_response_assignment_item"),
    )
    op.create_index("ix_checklist_responses_assignment_id", "checklist_responses", ["assignment_id"])

    op.create_table(
        "issues",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True, nullable=False),
        sa.Column("project_id", sa.Integer(), sa.ForeignKey("projects.id", ondelete="CASCADE"), nullable=False),
        sa.Column(
            "checklist_response_id",
            sa.Integer(),
            sa.ForeignKey("checklist_responses.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("status", issue_status, nullable=False, server_default="OPEN"),
        sa.Column("created_by", sa.String(length=36), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
    )
    op.create_index("ix_issues_project_id", "issues", ["project_id"])
    op.create_index("ix_issues_checklist_response_id", "issues", ["checklist_response_id"])

    op.create_table(
        "issue_assignees",
        sa.Column("issue_id", sa.Integer(), sa.ForeignKey("issues.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("user_id", sa.String(length=36), sa.ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
    )
    op.create_index("ix_issue_assignees_user_id", "issue_assignees", ["user_id"])

    op.create_table(
        "issue_teams",
        sa.Column("issue_id", sa.Integer(), sa.ForeignKey("issues.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("team_id", sa.Integer(), sa.ForeignKey("teams.id", ondelete="CASCADE"), primary_key=True),
    )
    op.create_index("ix_issue_teams_team_id", "issue_teams", ["team_id"])

def downgrade() -> None:
    op.drop_index("ix_issue_teams_team_id", table_name="issue_teams")
    op.drop_table("issue_teams")
    op.drop_index("ix_issue_assignees_user_id", table_name="issue_assignees")
    op.drop_table("issue_assignees")

    op.drop_index("ix_issues_checklist_response_id", table_name="issues")
    op.drop_index("ix_issues_project_id", table_name="issues")
    op.drop_table("issues")

    op.drop_index("ix_checklist_responses_assignment_id", table_name="checklist_responses")
    op.drop_table("checklist_responses")
    op.drop_index("ix_checklist_assignment_teams_team_id", table_name="checklist_assignment_teams")
    op.drop_table("checklist_assignment_teams")
    op.drop_index("ix_checklist_assignment_assignees_user_id", table_name="checklist_assignment_assignees")
    op.drop_table("checklist_assignment_assignees")
    op.drop_index("ix_checklist_assignments_template_id", table_name="checklist_assignments")
    op.drop_table("checklist_assignments")

    op.drop_index("ix_checklist_template_tags_tag_id", table_name="checklist_template_tags")
    op.drop_table("checklist_template_tags")
    op.drop_index("ix_checklist_template_categories_category_id", table_name="checklist_template_categories")
    op.drop_table("checklist_template_categories")

    op.drop_index("ix_tags_workspace_id", table_name="tags")
    op.drop_table("tags")
    op.drop_index("ix_categories_parent_id", table_name="categories")
    op.drop_index("ix_categories_workspace_id", table_name="categories")
    op.drop_table("categories")

    op.drop_index("ix_checklist_items_template_id", table_name="checklist_items")
    op.drop_table("checklist_items")

    postgresql.ENUM(name="issue_status").drop(op.get_bind(), checkfirst=True)
    postgresql.ENUM(name="response_status").drop(op.get_bind(), checkfirst=True)
