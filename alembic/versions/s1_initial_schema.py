"""
S1 initial schema
=================

Users, projects with their domains and databases, the activity log and
system metric snapshots. ``activity.project_id`` has no foreign key: the log
keeps attributions to projects that were deleted.
"""

from alembic import op
import sqlalchemy as sa

# revision identifiers
revision = "s1_initial_schema"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "user",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("username", sa.String(), nullable=False),
        sa.Column("password", sa.String(), nullable=False),
        sa.Column("email", sa.String(), nullable=False),
        sqlite_autoincrement=True,
    )
    op.create_index("ix_user_id", "user", ["id"])
    op.create_index("ix_user_username", "user", ["username"], unique=True)

    op.create_table(
        "project",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("framework", sa.String(), nullable=False),
        sa.Column("repository_url", sa.String(), nullable=False),
        sa.Column("branch", sa.String(), nullable=False),
        sa.Column("domain", sa.String(), nullable=True),
        sa.Column("status", sa.String(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sqlite_autoincrement=True,
    )
    op.create_index("ix_project_id", "project", ["id"])
    op.create_index("ix_project_updated_at", "project", ["updated_at"])

    op.create_table(
        "domain",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("project_id", sa.Integer(), sa.ForeignKey("project.id"), nullable=True),
        sa.Column("status", sa.String(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sqlite_autoincrement=True,
    )
    op.create_index("ix_domain_id", "domain", ["id"])
    op.create_index("ix_domain_name", "domain", ["name"], unique=True)
    op.create_index("ix_domain_project_id", "domain", ["project_id"])

    op.create_table(
        "database",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("type", sa.String(), nullable=False),
        sa.Column("project_id", sa.Integer(), sa.ForeignKey("project.id"), nullable=True),
        sa.Column("connection_string", sa.String(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sqlite_autoincrement=True,
    )
    op.create_index("ix_database_id", "database", ["id"])
    op.create_index("ix_database_name", "database", ["name"], unique=True)
    op.create_index("ix_database_project_id", "database", ["project_id"])

    op.create_table(
        "activity",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("type", sa.String(), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("project_id", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sqlite_autoincrement=True,
    )
    op.create_index("ix_activity_id", "activity", ["id"])
    op.create_index("ix_activity_type", "activity", ["type"])
    op.create_index("ix_activity_project_id", "activity", ["project_id"])
    op.create_index("ix_activity_created_at", "activity", ["created_at"])

    op.create_table(
        "systemmetric",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("cpu_usage", sa.Integer(), nullable=False),
        sa.Column("memory_usage", sa.Integer(), nullable=False),
        sa.Column("disk_usage", sa.Integer(), nullable=False),
        sa.Column("network_usage", sa.Integer(), nullable=False),
        sa.Column("timestamp", sa.DateTime(timezone=True), nullable=False),
        sqlite_autoincrement=True,
    )
    op.create_index("ix_systemmetric_id", "systemmetric", ["id"])
    op.create_index("ix_systemmetric_timestamp", "systemmetric", ["timestamp"])


def downgrade() -> None:
    op.drop_table("systemmetric")
    op.drop_table("activity")
    op.drop_table("database")
    op.drop_table("domain")
    op.drop_table("project")
    op.drop_table("user")
