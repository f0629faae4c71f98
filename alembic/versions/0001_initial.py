"""Initial schema: organisations, users/roles/permissions, menus, recruitment.

Revision ID: 0001_initial
Revises: None
Create Date: 2026-10-19 00:00:00.000000
"""
from alembic import op
import sqlalchemy as sa

revision = '0001_initial'
down_revision = None
branch_labels = None
depends_on = None


def _timestamps():
    return [
        sa.Column("created_at", sa.DateTime, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime, server_default=sa.func.now()),
    ]


def upgrade() -> None:
    bind = op.get_bind()
    insp = sa.inspect(bind)

    # create only what is missing so the baseline can run on a partly built DB
    if not insp.has_table("organizations"):
        op.create_table(
            "organizations",
            sa.Column("id", sa.Integer, primary_key=True),
            sa.Column("name", sa.String(120), nullable=False, unique=True),
            *_timestamps(),
        )
    if not insp.has_table("permissions"):
        op.create_table(
            "permissions",
            sa.Column("id", sa.Integer, primary_key=True),
            sa.Column("name", sa.String(120), nullable=False, unique=True),
            sa.Column("label", sa.String(200)),
            sa.Column("group_name", sa.String(80)),
            sa.Column("group_icon", sa.String(16)),
            sa.Column("sort_order", sa.Integer),
            *_timestamps(),
        )
    if not insp.has_table("roles"):
        op.create_table(
            "roles",
            sa.Column("id", sa.Integer, primary_key=True),
            sa.Column("org_id", sa.Integer, nullable=False, index=True),
            sa.Column("name", sa.String(120), nullable=False),
            sa.Column("description", sa.Text),
            sa.Column("is_system", sa.Boolean, nullable=False, server_default=sa.false()),
            *_timestamps(),
            sa.UniqueConstraint("org_id", "name", name="uq_roles_org_name"),
        )
    if not insp.has_table("role_permissions"):
        op.create_table(
            "role_permissions",
            sa.Column("role_id", sa.Integer, sa.ForeignKey("roles.id", ondelete="CASCADE"), primary_key=True),
            sa.Column("permission_id", sa.Integer, sa.ForeignKey("permissions.id", ondelete="CASCADE"), primary_key=True),
        )
    if not insp.has_table("users"):
        op.create_table(
            "users",
            sa.Column("id", sa.Integer, primary_key=True),
            sa.Column("org_id", sa.Integer, nullable=False, index=True),
            sa.Column("email", sa.String(255), nullable=False, unique=True),
            sa.Column("password_hash", sa.String(255), nullable=False),
            sa.Column("full_name", sa.String(160)),
            sa.Column("role", sa.String(50), nullable=False, server_default="ROLE_EMPLOYEE"),
            sa.Column("role_id", sa.Integer, sa.ForeignKey("roles.id")),
            *_timestamps(),
        )
    if not insp.has_table("menu_items"):
        op.create_table(
            "menu_items",
            sa.Column("id", sa.Integer, primary_key=True),
            sa.Column("org_id", sa.Integer, nullable=False, index=True),
            sa.Column("name", sa.String(120), nullable=False),
            sa.Column("path", sa.String(255)),
            sa.Column("icon", sa.String(32)),
            sa.Column("section", sa.String(50)),
            sa.Column("description", sa.String(255)),
            sa.Column("parent_id", sa.Integer, sa.ForeignKey("menu_items.id"), index=True),
            sa.Column("required_permission", sa.String(255)),
            sa.Column("allowed_roles", sa.JSON),
            sa.Column("sort_order", sa.Integer, nullable=False, server_default="0"),
            sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.true()),
            *_timestamps(),
        )
    if not insp.has_table("job_offers"):
        op.create_table(
            "job_offers",
            sa.Column("id", sa.Integer, primary_key=True),
            sa.Column("org_id", sa.Integer, nullable=False, index=True),
            sa.Column("title", sa.String(200), nullable=False),
            sa.Column("department", sa.String(120)),
            sa.Column("status", sa.String(20), index=True),
            sa.Column("description", sa.Text),
            sa.Column("required_skills", sa.JSON),
            sa.Column("min_experience", sa.Float),
            sa.Column("scoring_criteria", sa.JSON),
            sa.Column("ranked_at", sa.DateTime),
            *_timestamps(),
        )
    if not insp.has_table("candidates"):
        op.create_table(
            "candidates",
            sa.Column("id", sa.Integer, primary_key=True),
            sa.Column("org_id", sa.Integer, nullable=False, index=True),
            sa.Column("first_name", sa.String(80), nullable=False),
            sa.Column("last_name", sa.String(80), nullable=False),
            sa.Column("email", sa.String(254), index=True),
            sa.Column("phone", sa.String(40)),
            sa.Column("skills", sa.JSON),
            sa.Column("years_experience", sa.Float),
            sa.Column("rating", sa.Float),
            *_timestamps(),
        )
    if not insp.has_table("applications"):
        op.create_table(
            "applications",
            sa.Column("id", sa.Integer, primary_key=True),
            sa.Column("org_id", sa.Integer, nullable=False, index=True),
            sa.Column("candidate_id", sa.Integer, sa.ForeignKey("candidates.id"), nullable=False),
            sa.Column("job_offer_id", sa.Integer, sa.ForeignKey("job_offers.id"), nullable=False, index=True),
            sa.Column("stage", sa.String(30), nullable=False, server_default="submitted"),
            sa.Column("submitted_at", sa.DateTime, nullable=False, server_default=sa.func.now()),
            sa.Column("score", sa.Integer),
            sa.Column("score_breakdown", sa.JSON),
            sa.Column("rank", sa.Integer),
            sa.Column("scored_at", sa.DateTime),
            *_timestamps(),
            sa.UniqueConstraint("candidate_id", "job_offer_id", name="uq_applications_candidate_job"),
        )
    if not insp.has_table("interviews"):
        op.create_table(
            "interviews",
            sa.Column("id", sa.Integer, primary_key=True),
            sa.Column("org_id", sa.Integer, nullable=False, index=True),
            sa.Column("application_id", sa.Integer, sa.ForeignKey("applications.id"), nullable=False, index=True),
            sa.Column("scheduled_at", sa.DateTime),
            sa.Column("status", sa.String(20)),
            sa.Column("rating", sa.Float),
            sa.Column("comment", sa.Text),
            sa.Column("interviewer_id", sa.Integer),
            *_timestamps(),
        )
    if not insp.has_table("settings"):
        op.create_table(
            "settings",
            sa.Column("id", sa.Integer, primary_key=True),
            sa.Column("org_id", sa.Integer, nullable=False, index=True),
            sa.Column("key", sa.String(128), nullable=False, index=True),
            sa.Column("value", sa.Text),
            *_timestamps(),
            sa.UniqueConstraint("org_id", "key", name="uq_settings_org_key"),
        )
    if not insp.has_table("notifications"):
        op.create_table(
            "notifications",
            sa.Column("id", sa.Integer, primary_key=True),
            sa.Column("org_id", sa.Integer, nullable=False, index=True),
            sa.Column("application_id", sa.Integer, sa.ForeignKey("applications.id"), nullable=False),
            sa.Column("type", sa.String(50)),
            sa.Column("sent_to", sa.String(255)),
            sa.Column("subject", sa.String(255)),
            sa.Column("body", sa.Text),
            sa.Column("status_code", sa.Integer),
            sa.Column("provider_message_id", sa.String(255)),
            sa.Column("sent_at", sa.DateTime),
            *_timestamps(),
        )


def downgrade() -> None:
    bind = op.get_bind()
    insp = sa.inspect(bind)
    for name in ("notifications", "settings", "interviews", "applications", "candidates", "job_offers",
                 "menu_items", "users", "role_permissions", "roles", "permissions", "organizations"):
        if insp.has_table(name):
            op.drop_table(name)
