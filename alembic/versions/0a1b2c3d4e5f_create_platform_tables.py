"""create platform tables

Revision ID: 0a1b2c3d4e5f
Revises:
Create Date: 2026-10-19 12:00:00.000000

This migration:
1. Creates the user_role, account_status, enquiry_type and enquiry_status enum types
2. Creates the users table (one table for all roles, profile as JSONB)
3. Creates the admissions, materials and vacancies tables owned by users
4. Creates the enquiries table, targeting exactly one admission or vacancy

Tables are created parents-first so every foreign key resolves.
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "0a1b2c3d4e5f"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
    ]


def upgrade() -> None:
    """Create enum types and all platform tables."""
    bind = op.get_bind()

    user_role = postgresql.ENUM(
        "student", "teacher", "institution", "center", "admin",
        name="user_role",
        create_type=False,
    )
    account_status = postgresql.ENUM(
        "pending", "approved", "rejected",
        name="account_status",
        create_type=False,
    )
    enquiry_type = postgresql.ENUM(
        "admission", "vacancy",
        name="enquiry_type",
        create_type=False,
    )
    enquiry_status = postgresql.ENUM(
        "pending", "accepted", "rejected",
        name="enquiry_status",
        create_type=False,
    )
    for enum_type in (user_role, account_status, enquiry_type, enquiry_status):
        enum_type.create(bind, checkfirst=True)

    # Users
    op.create_table(
        "users",
        sa.Column("id", postgresql.UUID(as_uuid=False), nullable=False),
        *_timestamps(),
        sa.Column("role", user_role, nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("password_hash", sa.Text(), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("phone", sa.String(length=20), nullable=True),
        sa.Column("status", account_status, nullable=False, server_default="approved"),
        sa.Column(
            "profile",
            postgresql.JSONB(astext_type=sa.Text()),
            nullable=False,
            server_default=sa.text("'{}'::jsonb"),
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_users_email"), "users", ["email"], unique=True)
    op.create_index(op.f("ix_users_role"), "users", ["role"], unique=False)
    op.create_index(op.f("ix_users_status"), "users", ["status"], unique=False)

    # Admissions
    op.create_table(
        "admissions",
        sa.Column("id", postgresql.UUID(as_uuid=False), nullable=False),
        *_timestamps(),
        sa.Column("institution_id", postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("course", sa.String(length=200), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("eligibility", sa.Text(), nullable=True),
        sa.Column("fees", sa.Integer(), nullable=True),
        sa.Column("seats", sa.Integer(), nullable=True),
        sa.Column("deadline", sa.Date(), nullable=True),
        sa.Column("is_open", sa.Boolean(), nullable=False, server_default="true"),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(
            ["institution_id"],
            ["users.id"],
            name="fk_admissions_institution_id",
            ondelete="CASCADE",
        ),
    )
    op.create_index(
        op.f("ix_admissions_institution_id"), "admissions", ["institution_id"], unique=False
    )

    # Materials
    op.create_table(
        "materials",
        sa.Column("id", postgresql.UUID(as_uuid=False), nullable=False),
        *_timestamps(),
        sa.Column("posted_by_id", postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column("posted_by_role", user_role, nullable=False),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("subject", sa.String(length=100), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("resource_url", sa.String(length=500), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(
            ["posted_by_id"],
            ["users.id"],
            name="fk_materials_posted_by_id",
            ondelete="CASCADE",
        ),
    )
    op.create_index(op.f("ix_materials_posted_by_id"), "materials", ["posted_by_id"], unique=False)
    op.create_index(op.f("ix_materials_subject"), "materials", ["subject"], unique=False)

    # Vacancies
    op.create_table(
        "vacancies",
        sa.Column("id", postgresql.UUID(as_uuid=False), nullable=False),
        *_timestamps(),
        sa.Column("posted_by_id", postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column("posted_by_role", user_role, nullable=False),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("subject", sa.String(length=100), nullable=True),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("qualification", sa.String(length=200), nullable=True),
        sa.Column("salary", sa.Integer(), nullable=True),
        sa.Column("location", sa.String(length=200), nullable=True),
        sa.Column("openings", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("deadline", sa.Date(), nullable=True),
        sa.Column("is_open", sa.Boolean(), nullable=False, server_default="true"),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(
            ["posted_by_id"],
            ["users.id"],
            name="fk_vacancies_posted_by_id",
            ondelete="CASCADE",
        ),
    )
    op.create_index(op.f("ix_vacancies_posted_by_id"), "vacancies", ["posted_by_id"], unique=False)

    # Enquiries
    op.create_table(
        "enquiries",
        sa.Column("id", postgresql.UUID(as_uuid=False), nullable=False),
        *_timestamps(),
        sa.Column("enquiry_type", enquiry_type, nullable=False),
        sa.Column("admission_id", postgresql.UUID(as_uuid=False), nullable=True),
        sa.Column("vacancy_id", postgresql.UUID(as_uuid=False), nullable=True),
        sa.Column("owner_id", postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column("enquirer_id", postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("status", enquiry_status, nullable=False, server_default="pending"),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(
            ["admission_id"],
            ["admissions.id"],
            name="fk_enquiries_admission_id",
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["vacancy_id"],
            ["vacancies.id"],
            name="fk_enquiries_vacancy_id",
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["owner_id"],
            ["users.id"],
            name="fk_enquiries_owner_id",
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["enquirer_id"],
            ["users.id"],
            name="fk_enquiries_enquirer_id",
            ondelete="CASCADE",
        ),
        sa.CheckConstraint(
            "(admission_id IS NULL) <> (vacancy_id IS NULL)",
            name="ck_enquiries_single_target",
        ),
    )
    op.create_index(op.f("ix_enquiries_admission_id"), "enquiries", ["admission_id"], unique=False)
    op.create_index(op.f("ix_enquiries_vacancy_id"), "enquiries", ["vacancy_id"], unique=False)
    op.create_index(op.f("ix_enquiries_enquirer_id"), "enquiries", ["enquirer_id"], unique=False)
    op.create_index(
        "ix_enquiries_owner_status", "enquiries", ["owner_id", "status"], unique=False
    )

    # Only one pending enquiry per enquirer and target; closes the race
    # between the duplicate check and the insert
    op.execute(
        """
        CREATE UNIQUE INDEX uq_enquiries_pending_admission
        ON enquiries (enquirer_id, admission_id)
        WHERE status = 'pending' AND admission_id IS NOT NULL
        """
    )
    op.execute(
        """
        CREATE UNIQUE INDEX uq_enquiries_pending_vacancy
        ON enquiries (enquirer_id, vacancy_id)
        WHERE status = 'pending' AND vacancy_id IS NOT NULL
        """
    )


def downgrade() -> None:
    """Drop all platform tables and enum types."""
    op.execute("DROP INDEX IF EXISTS uq_enquiries_pending_vacancy")
    op.execute("DROP INDEX IF EXISTS uq_enquiries_pending_admission")
    op.drop_table("enquiries")
    op.drop_table("vacancies")
    op.drop_table("materials")
    op.drop_table("admissions")
    op.drop_index(op.f("ix_users_status"), table_name="users")
    op.drop_index(op.f("ix_users_role"), table_name="users")
    op.drop_index(op.f("ix_users_email"), table_name="users")
    op.drop_table("users")

    bind = op.get_bind()
    for name in ("enquiry_status", "enquiry_type", "account_status", "user_role"):
        postgresql.ENUM(name=name).drop(bind, checkfirst=True)
