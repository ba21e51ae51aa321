from alembic import op
import sqlalchemy as sa

revision = "0002"
down_revision = "0001"
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        "drivers",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("user_id", sa.String(36), nullable=False),
        sa.Column("aadhar_number", sa.String(12), nullable=False),
        sa.Column("pan_number", sa.String(10), nullable=False),
        sa.Column("license_number", sa.String(20), nullable=False),
        sa.Column("license_expiry_date", sa.Date(), nullable=True),
        sa.Column("is_aadhar_verified", sa.Boolean(), nullable=False),
        sa.Column("is_pan_verified", sa.Boolean(), nullable=False),
        sa.Column("is_license_verified", sa.Boolean(), nullable=False),
        sa.Column("aadhar_remarks", sa.String(500), nullable=True),
        sa.Column("pan_remarks", sa.String(500), nullable=True),
        sa.Column("license_remarks", sa.String(500), nullable=True),
        sa.Column("is_available", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("version", sa.Integer(), nullable=False),
    )
    op.create_index("ix_drivers_user_id", "drivers", ["user_id"], unique=True)

    op.create_table(
        "vehicles",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("driver_id", sa.String(36), nullable=False),
        sa.Column("vehicle_type", sa.String(10), nullable=False),
        sa.Column("rc_number", sa.String(20), nullable=False, unique=True),
        sa.Column("manufacturer", sa.String(50), nullable=True),
        sa.Column("model", sa.String(50), nullable=True),
        sa.Column("color", sa.String(30), nullable=True),
        sa.Column("puc_number", sa.String(30), nullable=False),
        sa.Column("puc_expiry_date", sa.Date(), nullable=True),
        sa.Column("insurance_number", sa.String(30), nullable=False),
        sa.Column("insurance_expiry_date", sa.Date(), nullable=True),
        sa.Column("is_rc_verified", sa.Boolean(), nullable=False),
        sa.Column("is_puc_verified", sa.Boolean(), nullable=False),
        sa.Column("is_insurance_verified", sa.Boolean(), nullable=False),
        sa.Column("rc_remarks", sa.String(500), nullable=True),
        sa.Column("puc_remarks", sa.String(500), nullable=True),
        sa.Column("insurance_remarks", sa.String(500), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("version", sa.Integer(), nullable=False),
    )
    op.create_index("ix_vehicles_driver_id", "vehicles", ["driver_id"], unique=False)


def downgrade():
    op.drop_index("ix_vehicles_driver_id", table_name="vehicles")
    op.drop_table("vehicles")
    op.drop_index("ix_drivers_user_id", table_name="drivers")
    op.drop_table("drivers")
