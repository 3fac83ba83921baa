"""bookings and company_slots_config

Revision ID: 0001
Revises:
Create Date: 2026-10-19 00:00:00.000000
"""

import sqlalchemy as sa
from alembic import op

revision = "0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "bookings",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("company_id", sa.Integer(), nullable=False),
        sa.Column("address_id", sa.Integer(), nullable=False),
        sa.Column("service_id", sa.Integer(), nullable=False),
        sa.Column("vehicle_id", sa.Integer(), nullable=False),
        sa.Column("booking_date", sa.Date(), nullable=False),
        sa.Column("start_time", sa.String(5), nullable=False),
        sa.Column("duration_minutes", sa.Integer(), nullable=False),
        sa.Column("status", sa.Text(), nullable=False, server_default=sa.text("'pending'")),
        sa.Column("service_name", sa.Text(), nullable=False),
        sa.Column("service_price", sa.Float(), nullable=False, server_default=sa.text("0")),
        sa.Column("vehicle_brand", sa.Text()),
        sa.Column("vehicle_model", sa.Text()),
        sa.Column("vehicle_license_plate", sa.Text()),
        sa.Column("notes", sa.Text()),
        sa.Column("cancellation_reason", sa.Text()),
        sa.Column("cancelled_at", sa.DateTime()),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index(
        "ix_bookings_company_address_date",
        "bookings",
        ["company_id", "address_id", "booking_date"],
    )
    op.create_index("ix_bookings_user_id", "bookings", ["user_id"])

    op.create_table(
        "company_slots_config",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("company_id", sa.Integer(), nullable=False),
        sa.Column("address_id", sa.Integer()),
        sa.Column("service_id", sa.Integer()),
        sa.Column("slot_duration_minutes", sa.Integer(), nullable=False),
        sa.Column("max_concurrent_bookings", sa.Integer(), nullable=False),
        sa.Column("advance_booking_days", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("min_booking_notice_minutes", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint("company_id", "address_id", "service_id"),
    )
    op.create_index(
        "ix_company_slots_config_company_id",
        "company_slots_config",
        ["company_id"],
    )


def downgrade() -> None:
    op.drop_index("ix_company_slots_config_company_id", table_name="company_slots_config")
    op.drop_table("company_slots_config")
    op.drop_index("ix_bookings_user_id", table_name="bookings")
    op.drop_index("ix_bookings_company_address_date", table_name="bookings")
    op.drop_table("bookings")
