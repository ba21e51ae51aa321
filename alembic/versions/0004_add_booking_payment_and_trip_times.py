from alembic import op
import sqlalchemy as sa

revision = "0004"
down_revision = "0003"
branch_labels = None
depends_on = None


def upgrade():
    op.add_column("bookings", sa.Column("pickup_time", sa.DateTime(timezone=True), nullable=True))
    op.add_column("bookings", sa.Column("dropoff_time", sa.DateTime(timezone=True), nullable=True))

    # existing rows start unpaid
    op.add_column(
        "bookings",
        sa.Column("payment_status", sa.String(10), nullable=False, server_default="pending"),
    )
    op.add_column("bookings", sa.Column("payment_id", sa.String(100), nullable=True))
    op.add_column("bookings", sa.Column("paid_at", sa.DateTime(timezone=True), nullable=True))
    op.add_column("bookings", sa.Column("payment_failure_reason", sa.String(500), nullable=True))
    op.create_index("ix_bookings_payment_status", "bookings", ["payment_status"], unique=False)


def downgrade():
    op.drop_index("ix_bookings_payment_status", table_name="bookings")
    op.drop_column("bookings", "payment_failure_reason")
    op.drop_column("bookings", "paid_at")
    op.drop_column("bookings", "payment_id")
    op.drop_column("bookings", "payment_status")
    op.drop_column("bookings", "dropoff_time")
    op.drop_column("bookings", "pickup_time")
