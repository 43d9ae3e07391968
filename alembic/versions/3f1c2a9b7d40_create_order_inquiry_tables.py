"""create order inquiry tables

Revision ID: 3f1c2a9b7d40
Revises:
Create Date: 2026-10-19 09:12:44.118302

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f1c2a9b7d40'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "order_inquiries",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("contact", sa.String(length=50), nullable=False),
        sa.Column("cake_type", sa.String(length=100), nullable=False),
        sa.Column("event_type", sa.String(length=100), nullable=True),
        sa.Column("delivery_option", sa.String(length=20), nullable=False, server_default="pickup"),
        sa.Column("delivery_location", sa.String(length=200), nullable=True),
        sa.Column("date_needed", sa.String(length=10), nullable=False),
        sa.Column("additional_notes", sa.Text(), nullable=True),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="new"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint(
            "status IN ('new', 'contacted', 'confirmed', 'completed', 'cancelled')",
            name="ck_order_inquiries_status",
        ),
        sa.CheckConstraint(
            "delivery_option IN ('pickup', 'delivery')",
            name="ck_order_inquiries_delivery_option",
        ),
    )
    op.create_index("ix_order_inquiries_status", "order_inquiries", ["status"])
    op.create_index("ix_order_inquiries_status_created_at", "order_inquiries", ["status", "created_at"])

    op.create_table(
        "submission_rate_limits",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("ip_hash", sa.String(length=16), nullable=False),
        sa.Column("submitted_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_submission_rate_limits_submitted_at", "submission_rate_limits", ["submitted_at"])
    op.create_index(
        "ix_submission_rate_limits_hash_time", "submission_rate_limits", ["ip_hash", "submitted_at"]
    )

    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("full_name", sa.String(length=100), nullable=True),
        sa.Column("password_hash", sa.String(length=255), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("last_login_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint("email", name="uq_users_email"),
    )


def downgrade() -> None:
    op.drop_table("users")
    op.drop_index("ix_submission_rate_limits_hash_time", table_name="submission_rate_limits")
    op.drop_index("ix_submission_rate_limits_submitted_at", table_name="submission_rate_limits")
    op.drop_table("submission_rate_limits")
    op.drop_index("ix_order_inquiries_status_created_at", table_name="order_inquiries")
    op.drop_index("ix_order_inquiries_status", table_name="order_inquiries")
    op.drop_table("order_inquiries")
