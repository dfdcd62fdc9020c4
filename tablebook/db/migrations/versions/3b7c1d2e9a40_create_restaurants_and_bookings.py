from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "3b7c1d2e9a40"
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        "restaurants",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("cuisine", sa.String(), nullable=False),
        sa.Column("rating", sa.Float(), nullable=True),
        sa.Column("address", sa.String(), nullable=False),
        sa.Column("phone", sa.String(), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("total_seats", sa.Integer(), nullable=False),
        sa.Column("open_time", sa.Time(), nullable=False),
        sa.Column("close_time", sa.Time(), nullable=False),
        sa.Column("price_per_seat", sa.Float(), nullable=False),
        sa.CheckConstraint("total_seats >= 1", name="check_restaurant_total_seats"),
        sa.CheckConstraint("price_per_seat >= 0", name="check_restaurant_price_per_seat"),
        sa.CheckConstraint("close_time > open_time", name="check_restaurant_hours"),
    )
    op.create_index("ix_restaurants_id", "restaurants", ["id"])

    booking_status_enum = sa.Enum(
        "confirmed",
        "cancelled",
        "completed",
        name="bookingstatus"
    )

    payment_status_enum = sa.Enum(
        "pending",
        "paid",
        "skipped",
        name="paymentstatus"
    )

    op.create_table(
        "bookings",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("restaurant_id", sa.Integer(), sa.ForeignKey("restaurants.id"), nullable=False),
        sa.Column("user_id", sa.String(), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("time", sa.Time(), nullable=False),
        sa.Column("seats", sa.Integer(), nullable=False),
        sa.Column("total_amount", sa.Float(), nullable=False),
        sa.Column("payment_status", payment_status_enum, nullable=False, server_default="pending"),
        sa.Column("booking_status", booking_status_enum, nullable=False, server_default="confirmed"),
        sa.Column("confirmation_code", sa.String(length=16), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.CheckConstraint("seats >= 1", name="check_booking_seats_positive"),
        sa.CheckConstraint("total_amount >= 0", name="check_booking_amount_non_negative"),
    )
    op.create_index("ix_bookings_id", "bookings", ["id"])
    op.create_index("ix_bookings_user_id", "bookings", ["user_id"])
    op.create_index("ix_bookings_confirmation_code", "bookings", ["confirmation_code"], unique=True)
    op.create_index("ix_bookings_slot", "bookings", ["restaurant_id", "date", "time"])


def downgrade():
    op.drop_index("ix_bookings_slot", table_name="bookings")
    op.drop_index("ix_bookings_confirmation_code", table_name="bookings")
    op.drop_index("ix_bookings_user_id", table_name="bookings")
    op.drop_index("ix_bookings_id", table_name="bookings")
    op.drop_table("bookings")

    op.drop_index("ix_restaurants_id", table_name="restaurants")
    op.drop_table("restaurants")

    # Drop ENUM types (no-op on backends without native enums)
    sa.Enum(name="bookingstatus").drop(op.get_bind(), checkfirst=True)
    sa.Enum(name="paymentstatus").drop(op.get_bind(), checkfirst=True)
