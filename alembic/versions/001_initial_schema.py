"""Initial database schema.

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-19

Creates the tables of the status synchronization service:
- Bookings
- Payments (one per booking)
- Audit logs (append-only)
"""

from typing import Sequence

import sqlalchemy as sa

from alembic import op

# revision identifiers
revision: str = "001_initial"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Create all database tables."""

    # ==================== BOOKINGS ====================
    op.create_table(
        "bookings",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column("user_id", sa.Uuid, index=True),
        sa.Column("hotel_id", sa.Uuid, index=True),
        sa.Column("room_id", sa.Uuid, index=True),
        sa.Column("check_in_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("check_out_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="Pending", index=True),
        sa.Column("payment_status", sa.String(20), nullable=False, server_default="Unpaid"),
        sa.Column("version", sa.Integer, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now(), index=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint("check_out_date > check_in_date", name="ck_bookings_dates"),
        sa.CheckConstraint(
            "status <> 'Cancelled' OR payment_status = 'Unpaid'",
            name="ck_bookings_cancelled_unpaid",
        ),
    )

    # ==================== PAYMENTS ====================
    op.create_table(
        "payments",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column(
            "booking_id",
            sa.Uuid,
            sa.ForeignKey("bookings.id", ondelete="CASCADE"),
            nullable=False,
            unique=True,
        ),
        sa.Column("amount", sa.Integer),
        sa.Column("method", sa.String(30)),
        sa.Column("status", sa.String(20), nullable=False, server_default="Pending"),
        sa.Column("paid_at", sa.DateTime(timezone=True)),
        sa.Column("version", sa.Integer, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now(), index=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint(
            "(status IN ('Deposit', 'Paid')) = (paid_at IS NOT NULL)",
            name="ck_payments_paid_at",
        ),
    )

    # ==================== AUDIT LOGS ====================
    op.create_table(
        "audit_logs",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column("actor_id", sa.String(100), index=True),
        sa.Column("action", sa.String(100), nullable=False, index=True),
        sa.Column("resource_type", sa.String(50), nullable=False, index=True),
        sa.Column("resource_id", sa.Uuid),
        sa.Column("old_values", sa.JSON),
        sa.Column("new_values", sa.JSON),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now(), index=True),
    )


def downgrade() -> None:
    """Drop all tables."""
    op.drop_table("audit_logs")
    op.drop_table("payments")
    op.drop_table("bookings")
