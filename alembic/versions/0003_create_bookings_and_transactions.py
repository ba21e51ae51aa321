from alembic import op
import sqlalchemy as sa

revision = "0003"
down_revision = "0002"
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        "bookings",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("rider_id", sa.String(36), nullable=False),
        sa.Column("driver_id", sa.String(36), nullable=True),
        sa.Column("vehicle_id", sa.String(36), nullable=True),
        sa.Column("pickup_address", sa.String(500), nullable=False),
        sa.Column("dropoff_address", sa.String(500), nullable=False),
        sa.Column("pickup_latitude", sa.Float(), nullable=True),
        sa.Column("pickup_longitude", sa.Float(), nullable=True),
        sa.Column("dropoff_latitude", sa.Float(), nullable=True),
        sa.Column("dropoff_longitude", sa.Float(), nullable=True),
        sa.Column("scheduled_date", sa.Date(), nullable=True),
        sa.Column("scheduled_time", sa.String(8), nullable=True),
        sa.Column("vehicle_type", sa.String(10), nullable=True),
        sa.Column("payment_method", sa.String(10), nullable=False),
        sa.Column("distance_km", sa.Float(), nullable=True),
        sa.Column("duration_minutes", sa.Integer(), nullable=True),
        sa.Column("base_fare", sa.Float(), nullable=True),
        sa.Column("distance_fare", sa.Float(), nullable=True),
        sa.Column("platform_fee", sa.Float(), nullable=True),
        sa.Column("subtotal", sa.Float(), nullable=True),
        sa.Column("fare", sa.Float(), nullable=True),
        sa.Column("status", sa.String(12), nullable=False),
        sa.Column("cancellation_reason", sa.String(500), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("version", sa.Integer(), nullable=False),
    )
    op.create_index("ix_bookings_rider_id", "bookings", ["rider_id"], unique=False)
    op.create_index("ix_bookings_driver_id", "bookings", ["driver_id"], unique=False)
    op.create_index("ix_bookings_status", "bookings", ["status"], unique=False)

    op.create_table(
        "transactions",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("booking_id", sa.String(36), nullable=False),
        sa.Column("rider_id", sa.String(36), nullable=False),
        sa.Column("driver_id", sa.String(36), nullable=False),
        sa.Column("amount", sa.Float(), nullable=False),
        sa.Column("commission", sa.Float(), nullable=False),
        sa.Column("driver_earning", sa.Float(), nullable=False),
        sa.Column("payment_method", sa.String(10), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_transactions_booking_id", "transactions", ["booking_id"], unique=True)
    op.create_index("ix_transactions_rider_id", "transactions", ["rider_id"], unique=False)
    op.create_index("ix_transactions_driver_id", "transactions", ["driver_id"], unique=False)


def downgrade():
    op.drop_index("ix_transactions_driver_id", table_name="transactions")
    op.drop_index("ix_transactions_rider_id", table_name="transactions")
    op.drop_index("ix_transactions_booking_id", table_name="transactions")
    op.drop_table("transactions")
    op.drop_index("ix_bookings_status", table_name="bookings")
    op.drop_index("ix_bookings_driver_id", table_name="bookings")
    op.drop_index("ix_bookings_rider_id", table_name="bookings")
    op.drop_table("bookings")
