"""Initial schema for rooms, guests, bookings and activity log

Revision ID: 3f1c2a9d7b10
Revises:
Create Date: 2026-10-18 09:12:31.408215

"""

import sqlalchemy as sa

from alembic import op  # type: ignore[attr-defined]

# revision identifiers, used by Alembic.
revision = "3f1c2a9d7b10"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False
        ),
        sa.Column(
            "updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False
        ),
    ]


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "floor",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("number", sa.Integer(), nullable=False, unique=True),
        *_timestamps(),
    )
    op.create_table(
        "bed_type",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(50), nullable=False, unique=True),
        *_timestamps(),
    )
    op.create_table(
        "feature",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(200), nullable=False, unique=True),
        sa.Column("image_url", sa.String(), nullable=True),
        sa.Column("price", sa.Float(), nullable=False),
        *_timestamps(),
    )
    for table in ("room_status", "payment_status"):
        op.create_table(
            table,
            sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
            sa.Column("name", sa.String(), nullable=False, unique=True),
            sa.Column("number", sa.Integer(), nullable=False, unique=True),
            sa.Column("color", sa.String(), nullable=True),
            *_timestamps(),
        )
    op.create_table(
        "addon",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(), nullable=False, unique=True),
        sa.Column("price", sa.Float(), nullable=False),
        *_timestamps(),
    )
    op.create_table(
        "guest",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("nationality", sa.String(), nullable=False),
        sa.Column("id_card_type", sa.String(), nullable=False),
        sa.Column("id_card_number", sa.String(), nullable=False),
        sa.Column("name", sa.String(), nullable=False, index=True),
        sa.Column("email", sa.String(), nullable=True, unique=True),
        sa.Column("phone", sa.String(), nullable=False),
        sa.Column("address", sa.String(), nullable=True),
        *_timestamps(),
    )
    op.create_table(
        "room_class",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(30), nullable=False, unique=True),
        sa.Column("price", sa.Float(), nullable=False),
        sa.Column("image_url", sa.String(), nullable=True),
        *_timestamps(),
    )
    op.create_table(
        "room_class_bed_type",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "room_class_id",
            sa.Integer(),
            sa.ForeignKey("room_class.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        ),
        sa.Column(
            "bed_type_id",
            sa.Integer(),
            sa.ForeignKey("bed_type.id", ondelete="RESTRICT"),
            nullable=False,
            index=True,
        ),
        sa.Column("num_beds", sa.Integer(), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint("room_class_id", "bed_type_id"),
    )
    op.create_table(
        "room_class_feature",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "room_class_id",
            sa.Integer(),
            sa.ForeignKey("room_class.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        ),
        sa.Column(
            "feature_id",
            sa.Integer(),
            sa.ForeignKey("feature.id", ondelete="RESTRICT"),
            nullable=False,
            index=True,
        ),
        *_timestamps(),
        sa.UniqueConstraint("room_class_id", "feature_id"),
    )
    op.create_table(
        "room",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("number", sa.Integer(), nullable=False, index=True),
        sa.Column(
            "floor_id", sa.Integer(), sa.ForeignKey("floor.id", ondelete="RESTRICT"), nullable=False
        ),
        sa.Column(
            "room_class_id",
            sa.Integer(),
            sa.ForeignKey("room_class.id", ondelete="RESTRICT"),
            nullable=False,
            index=True,
        ),
        sa.Column(
            "room_status_id",
            sa.Integer(),
            sa.ForeignKey("room_status.id", ondelete="RESTRICT"),
            nullable=False,
        ),
        *_timestamps(),
        sa.UniqueConstraint("number", "floor_id"),
    )
    op.create_table(
        "booking",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "guest_id", sa.Integer(), sa.ForeignKey("guest.id", ondelete="RESTRICT"), nullable=False
        ),
        sa.Column(
            "payment_status_id",
            sa.Integer(),
            sa.ForeignKey("payment_status.id", ondelete="RESTRICT"),
            nullable=False,
        ),
        sa.Column("checkin_date", sa.DateTime(timezone=True), nullable=False, index=True),
        sa.Column("checkout_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("num_adults", sa.Integer(), nullable=False),
        sa.Column("num_children", sa.Integer(), nullable=False),
        sa.Column("booking_amount", sa.Float(), nullable=False),
        *_timestamps(),
        sa.CheckConstraint(
            "checkout_date > checkin_date", name="ck_booking_checkout_after_checkin"
        ),
    )
    op.create_table(
        "booking_room",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "booking_id",
            sa.Integer(),
            sa.ForeignKey("booking.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        ),
        sa.Column(
            "room_id",
            sa.Integer(),
            sa.ForeignKey("room.id", ondelete="RESTRICT"),
            nullable=False,
            index=True,
        ),
        *_timestamps(),
        sa.UniqueConstraint("booking_id", "room_id"),
    )
    op.create_table(
        "booking_addon",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "booking_id",
            sa.Integer(),
            sa.ForeignKey("booking.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        ),
        sa.Column(
            "addon_id", sa.Integer(), sa.ForeignKey("addon.id", ondelete="RESTRICT"), nullable=False
        ),
        sa.Column("quantity", sa.Integer(), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint("booking_id", "addon_id"),
    )
    op.create_table(
        "activity_log",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("action_type", sa.String(), nullable=False, index=True),
        sa.Column("resource_type", sa.String(), nullable=False, index=True),
        sa.Column("resource_id", sa.Integer(), nullable=True),
        sa.Column("changes", sa.JSON(), nullable=False),
        sa.Column(
            "created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False
        ),
    )


def downgrade() -> None:
    """Downgrade schema."""
    for table in (
        "activity_log",
        "booking_addon",
        "booking_room",
        "booking",
        "room",
        "room_class_feature",
        "room_class_bed_type",
        "room_class",
        "guest",
        "addon",
        "payment_status",
        "room_status",
        "feature",
        "bed_type",
        "floor",
    ):
        op.drop_table(table)
