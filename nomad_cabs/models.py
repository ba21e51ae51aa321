import uuid
from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, Date, DateTime, Float, Integer, String

from .db import Base


def _uuid() -> str:
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=_uuid)
    email = Column(String, unique=True, nullable=False, index=True)
    password_hash = Column(String, nullable=False)

    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=True)
    phone_number = Column(String(16), nullable=True)
    city = Column(String(50), nullable=True)
    state = Column(String(50), nullable=True)

    role = Column(String(10), nullable=False, index=True)  # rider/driver/admin
    status = Column(String(24), nullable=False, default="active", index=True)

    is_email_verified = Column(Boolean, nullable=False, default=False)
    is_phone_verified = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=True)
    version = Column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version}


class Driver(Base):
    __tablename__ = "drivers"

    id = Column(String(36), primary_key=True, default=_uuid)
    user_id = Column(String(36), unique=True, nullable=False, index=True)

    aadhar_number = Column(String(12), nullable=False)
    pan_number = Column(String(10), nullable=False)
    license_number = Column(String(20), nullable=False)
    license_expiry_date = Column(Date, nullable=True)

    is_aadhar_verified = Column(Boolean, nullable=False, default=False)
    is_pan_verified = Column(Boolean, nullable=False, default=False)
    is_license_verified = Column(Boolean, nullable=False, default=False)
    aadhar_remarks = Column(String(500), nullable=True)
    pan_remarks = Column(String(500), nullable=True)
    license_remarks = Column(String(500), nullable=True)

    is_available = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=True)
    version = Column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version}


class Vehicle(Base):
    __tablename__ = "vehicles"

    id = Column(String(36), primary_key=True, default=_uuid)
    driver_id = Column(String(36), nullable=False, index=True)

    vehicle_type = Column(String(10), nullable=False)
    rc_number = Column(String(20), unique=True, nullable=False)
    manufacturer = Column(String(50), nullable=True)
    model = Column(String(50), nullable=True)
    color = Column(String(30), nullable=True)

    puc_number = Column(String(30), nullable=False)
    puc_expiry_date = Column(Date, nullable=True)
    insurance_number = Column(String(30), nullable=False)
    insurance_expiry_date = Column(Date, nullable=True)

    is_rc_verified = Column(Boolean, nullable=False, default=False)
    is_puc_verified = Column(Boolean, nullable=False, default=False)
    is_insurance_verified = Column(Boolean, nullable=False, default=False)
    rc_remarks = Column(String(500), nullable=True)
    puc_remarks = Column(String(500), nullable=True)
    insurance_remarks = Column(String(500), nullable=True)

    is_active = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=True)
    version = Column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version}


class Booking(Base):
    __tablename__ = "bookings"

    id = Column(String(36), primary_key=True, default=_uuid)

    rider_id = Column(String(36), nullable=False, index=True)
    driver_id = Column(String(36), nullable=True, index=True)
    vehicle_id = Column(String(36), nullable=True)

    pickup_address = Column(String(500), nullable=False)
    dropoff_address = Column(String(500), nullable=False)
    pickup_latitude = Column(Float, nullable=True)
    pickup_longitude = Column(Float, nullable=True)
    dropoff_latitude = Column(Float, nullable=True)
    dropoff_longitude = Column(Float, nullable=True)

    scheduled_date = Column(Date, nullable=True)
    scheduled_time = Column(String(8), nullable=True)

    vehicle_type = Column(String(10), nullable=True)
    payment_method = Column(String(10), nullable=False, default="cash")

    distance_km = Column(Float, nullable=True)
    duration_minutes = Column(Integer, nullable=True)

    # null until a vehicle type is chosen
    base_fare = Column(Float, nullable=True)
    distance_fare = Column(Float, nullable=True)
    platform_fee = Column(Float, nullable=True)
    subtotal = Column(Float, nullable=True)
    fare = Column(Float, nullable=True)

    status = Column(String(12), nullable=False, index=True)  # pending/accepted/in_progress/completed/cancelled
    cancellation_reason = Column(String(500), nullable=True)

    pickup_time = Column(DateTime(timezone=True), nullable=True)
    dropoff_time = Column(DateTime(timezone=True), nullable=True)

    payment_status = Column(String(10), nullable=False, default="pending", server_default="pending", index=True)  # pending/completed/failed
    payment_id = Column(String(100), nullable=True)
    paid_at = Column(DateTime(timezone=True), nullable=True)
    payment_failure_reason = Column(String(500), nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=True)
    version = Column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version}


class Transaction(Base):
    __tablename__ = "transactions"

    id = Column(String(36), primary_key=True, default=_uuid)
    booking_id = Column(String(36), unique=True, nullable=False, index=True)
    rider_id = Column(String(36), nullable=False, index=True)
    driver_id = Column(String(36), nullable=False, index=True)

    amount = Column(Float, nullable=False)
    commission = Column(Float, nullable=False)
    driver_earning = Column(Float, nullable=False)
    payment_method = Column(String(10), nullable=False)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
