"""create_role_partition_tables

Revision ID: 3f9a1c2d7b64
Revises:
Create Date: 2026-10-19 09:12:31.184022

"""
from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op


# revision identifiers, used by Alembic.
revision: str = '3f9a1c2d7b64'
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def _account_columns() -> list[sa.Column]:
    """Credential and lifecycle columns shared by every partition."""
    return [
        sa.Column("id", sa.String(length=36), nullable=False, comment="Account ID (UUID)"),
        sa.Column("email", sa.String(length=255), nullable=False, comment="Account email address"),
        sa.Column(
            "password_hash",
            sa.String(length=255),
            nullable=False,
            comment="Hashed password (argon2)",
        ),
        sa.Column("status", sa.String(length=20), nullable=False, comment="Lifecycle status"),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("(CURRENT_TIMESTAMP)"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("(CURRENT_TIMESTAMP)"),
            nullable=False,
        ),
        sa.Column("last_login", sa.DateTime(timezone=True), nullable=True),
    ]


def _create_partition(table: str, *columns: sa.Column, unique: tuple[str, ...] = ()) -> None:
    op.create_table(
        table,
        *_account_columns(),
        *columns,
        sa.PrimaryKeyConstraint("id"),
        *(sa.UniqueConstraint(column) for column in unique),
    )
    op.create_index(op.f(f"ix_{table}_email"), table, ["email"], unique=True)


def upgrade() -> None:
    """Upgrade schema."""
    _create_partition(
        "simple_users",
        sa.Column("name", sa.String(length=255), nullable=False),
    )
    _create_partition(
        "ngos",
        sa.Column("organization_name", sa.String(length=255), nullable=False),
        sa.Column(
            "registration_number",
            sa.String(length=100),
            nullable=False,
            comment="Government registration number",
        ),
        sa.Column("contact_person", sa.String(length=255), nullable=False),
        sa.Column("location", sa.String(length=255), nullable=True),
        sa.Column("verified", sa.Boolean(), nullable=False),
        unique=("registration_number",),
    )
    _create_partition(
        "corporates",
        sa.Column("company_name", sa.String(length=255), nullable=False),
        sa.Column("tax_id", sa.String(length=100), nullable=False, comment="Company tax identifier"),
        sa.Column("contact_person", sa.String(length=255), nullable=False),
        sa.Column("verified", sa.Boolean(), nullable=False),
        unique=("tax_id",),
    )
    _create_partition(
        "carbon_users",
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("verified", sa.Boolean(), nullable=False),
    )
    _create_partition(
        "admins",
        sa.Column("name", sa.String(length=255), nullable=False),
    )


def downgrade() -> None:
    """Downgrade schema."""
    for table in ("admins", "carbon_users", "corporates", "ngos", "simple_users"):
        op.drop_index(op.f(f"ix_{table}_email"), table_name=table)
        op.drop_table(table)
