"""initial_schema

Revision ID: 0001
Revises:
Create Date: 2025-03-10

Creates municipalities, reservations and booking_state_changes.
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

STATUSES = ("RECEIVED", "ASSIGNED", "IN_PROGRESS", "COMPLETED", "CANCELLED")
TIME_SLOTS = ("EARLY_MORNING", "MORNING", "AFTERNOON", "EVENING", "NIGHT", "LATE_NIGHT", "ANYTIME")


def upgrade() -> None:
    # --- municipalities ---
    op.create_table(
        "municipalities",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(150), nullable=False, unique=True),
    )

    # --- reservations ---
    op.create_table(
        "reservations",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("token", sa.String(36), nullable=False, unique=True),
        sa.Column("municipality_id", sa.Integer, sa.ForeignKey("municipalities.id"), nullable=False),
        sa.Column("description", sa.String(1000), nullable=False),
        sa.Column("requested_date", sa.Date, nullable=False),
        sa.Column("time_slot", sa.Enum(*TIME_SLOTS, name="timeslot"), nullable=False),
        sa.Column("status", sa.Enum(*STATUSES, name="reservationstatus"), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_reservations_municipality_id", "reservations", ["municipality_id"])

    # --- booking_state_changes ---
    op.create_table(
        "booking_state_changes",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "reservation_id",
            sa.String(36),
            sa.ForeignKey("reservations.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("status", postgresql.ENUM(*STATUSES, name="reservationstatus", create_type=False), nullable=False),
        sa.Column("timestamp", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_booking_state_changes_reservation_id", "booking_state_changes", ["reservation_id"])


def downgrade() -> None:
    op.drop_index("ix_booking_state_changes_reservation_id", table_name="booking_state_changes")
    op.drop_table("booking_state_changes")
    op.drop_index("ix_reservations_municipality_id", table_name="reservations")
    op.drop_table("reservations")
    op.drop_table("municipalities")
    sa.Enum(name="reservationstatus").drop(op.get_bind(), checkfirst=True)
    sa.Enum(name="timeslot").drop(op.get_bind(), checkfirst=True)
