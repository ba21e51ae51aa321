import re
from datetime import date, datetime
from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator
from pydantic.alias_generators import to_camel

from . import booking_status, verification
from .fares import VEHICLE_TYPES

T = TypeVar("T")

_ALLOWED_ROLES = {"rider", "driver", "admin"}
_USER_STATUSES = {"active", "suspended", "deleted", "pending_verification"}
_PAYMENT_METHODS = {"cash", "upi", "card", "wallet"}

_AADHAR_RE = re.compile(r"^\d{12}$")
_PAN_RE = re.compile(r"^[A-Z]{5}\d{4}[A-Z]$")


def _lower(v):
    return (v or "").strip().lower()


class APIModel(BaseModel):
    # camelCase on the wire, snake_case accepted too
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class Page(APIModel, Generic[T]):
    items: List[T]
    page: int
    size: int
    total: int


# ---- Auth / users ----

class Register(APIModel):
    email: str
    password: str = Field(min_length=6)
    role: str
    first_name: str = Field(min_length=1)
    last_name: Optional[str] = None
    phone_number: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None

    @field_validator("email")
    @classmethod
    def _email(cls, v: str) -> str:
        v = _lower(v)
        if "@" not in v or v.startswith("@") or v.endswith("@"):
            raise ValueError("Invalid email address")
        return v

    @field_validator("role")
    @classmethod
    def _role(cls, v: str) -> str:
        rr = _lower(v)
        if rr not in _ALLOWED_ROLES:
            raise ValueError(f"Invalid role: {v}. Allowed: {sorted(_ALLOWED_ROLES)}")
        return rr


class Login(APIModel):
    email: str
    password: str

    @field_validator("email")
    @classmethod
    def _email(cls, v: str) -> str:
        return _lower(v)


class UserOut(APIModel):
    id: str
    email: str
    first_name: str
    last_name: Optional[str] = None
    phone_number: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    role: str
    status: str
    is_email_verified: bool
    is_phone_verified: bool
    created_at: datetime
    updated_at: Optional[datetime] = None


class AuthResponse(APIModel):
    token: str
    user: UserOut


class UpdateProfile(APIModel):
    first_name: Optional[str] = Field(default=None, min_length=1)
    last_name: Optional[str] = None
    phone_number: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None

    @field_validator("first_name")
    @classmethod
    def _first_name(cls, v):
        # omitted means unchanged; an explicit null is not
        if v is None or not v.strip():
            raise ValueError("firstName cannot be empty")
        return v.strip()


class UpdateUserStatus(APIModel):
    status: str

    @field_validator("status")
    @classmethod
    def _status(cls, v: str) -> str:
        s = _lower(v)
        if s not in _USER_STATUSES:
            raise ValueError(f"Invalid status: {v}. Allowed: {sorted(_USER_STATUSES)}")
        return s


# ---- Fares ----

class FareQuoteRequest(APIModel):
    distance_km: Optional[float] = Field(default=None, ge=0)
    vehicle_type: Optional[str] = None

    @field_validator("vehicle_type")
    @classmethod
    def _vehicle_type(cls, v):
        return _lower(v) or None


class FareQuote(APIModel):
    vehicle_type: str
    distance_km: float
    duration_minutes: int
    base_fare: float
    distance_fare: float
    platform_fee: int
    subtotal: float
    total: float


# ---- Bookings ----

def _vehicle_type_or_none(v):
    if v is None:
        return None
    vt = _lower(v)
    if vt not in VEHICLE_TYPES:
        raise ValueError(f"Invalid vehicle type: {v}. Allowed: {list(VEHICLE_TYPES)}")
    return vt


class CreateBooking(APIModel):
    pickup_address: str = Field(min_length=1)
    dropoff_address: str = Field(min_length=1)
    pickup_latitude: Optional[float] = Field(default=None, ge=-90, le=90)
    pickup_longitude: Optional[float] = Field(default=None, ge=-180, le=180)
    dropoff_latitude: Optional[float] = Field(default=None, ge=-90, le=90)
    dropoff_longitude: Optional[float] = Field(default=None, ge=-180, le=180)
    scheduled_date: Optional[date] = None
    scheduled_time: Optional[str] = None
    vehicle_type: Optional[str] = None
    payment_method: str = "cash"
    distance_km: Optional[float] = Field(default=None, ge=0)

    @field_validator("vehicle_type")
    @classmethod
    def _vehicle_type(cls, v):
        return _vehicle_type_or_none(v)

    @field_validator("payment_method")
    @classmethod
    def _payment(cls, v: str) -> str:
        pm = _lower(v)
        if pm not in _PAYMENT_METHODS:
            raise ValueError(f"Invalid payment method: {v}. Allowed: {sorted(_PAYMENT_METHODS)}")
        return pm

    @field_validator("scheduled_time")
    @classmethod
    def _time(cls, v):
        if v is None:
            return None
        if not re.match(r"^([01]\d|2[0-3]):[0-5]\d$", v.strip()):
            raise ValueError("scheduledTime must be HH:MM")
        return v.strip()


class BookingOut(APIModel):
    id: str
    rider_id: str
    driver_id: Optional[str] = None
    vehicle_id: Optional[str] = None
    pickup_address: str
    dropoff_address: str
    pickup_latitude: Optional[float] = None
    pickup_longitude: Optional[float] = None
    dropoff_latitude: Optional[float] = None
    dropoff_longitude: Optional[float] = None
    scheduled_date: Optional[date] = None
    scheduled_time: Optional[str] = None
    vehicle_type: Optional[str] = None
    payment_method: str
    distance_km: Optional[float] = None
    duration_minutes: Optional[int] = None
    base_fare: Optional[float] = None
    distance_fare: Optional[float] = None
    platform_fee: Optional[float] = None
    subtotal: Optional[float] = None
    fare: Optional[float] = None
    status: str
    cancellation_reason: Optional[str] = None
    pickup_time: Optional[datetime] = None
    dropoff_time: Optional[datetime] = None
    payment_status: str
    paid_at: Optional[datetime] = None
    created_at: datetime
    updated_at: Optional[datetime] = None


class UpdateBookingStatus(APIModel):
    status: str
    driver_id: Optional[str] = None
    vehicle_id: Optional[str] = None
    distance_km: Optional[float] = Field(default=None, ge=0)
    cancellation_reason: Optional[str] = None

    @field_validator("status")
    @classmethod
    def _status(cls, v: str) -> str:
        s = booking_status.norm(v)
        if not booking_status.is_valid(s):
            raise ValueError(f"Invalid status: {v}. Allowed: {list(booking_status.STATUSES)}")
        return s


class AcceptBooking(APIModel):
    vehicle_id: Optional[str] = None


# ---- Drivers / vehicles ----

class CreateDriver(APIModel):
    aadhar_number: str
    pan_number: str
    license_number: str = Field(min_length=5, max_length=20)
    license_expiry_date: Optional[date] = None

    @field_validator("aadhar_number")
    @classmethod
    def _aadhar(cls, v: str) -> str:
        v = v.replace(" ", "")
        if not _AADHAR_RE.match(v):
            raise ValueError("Aadhar number must be 12 digits")
        return v

    @field_validator("pan_number")
    @classmethod
    def _pan(cls, v: str) -> str:
        v = v.strip().upper()
        if not _PAN_RE.match(v):
            raise ValueError("PAN must look like ABCDE1234F")
        return v

    @field_validator("license_number")
    @classmethod
    def _license(cls, v: str) -> str:
        return v.strip().upper()


class VerificationMixin(APIModel):
    @computed_field(alias="verificationStatus")
    @property
    def verification_status(self) -> str:
        return verification.summarize(self)["verification_status"]

    @computed_field(alias="documentStatuses")
    @property
    def document_statuses(self) -> dict[str, str]:
        return verification.summarize(self)["document_statuses"]

    @computed_field(alias="hasRejections")
    @property
    def has_rejections(self) -> bool:
        return verification.summarize(self)["has_rejections"]


class DriverOut(VerificationMixin):
    id: str
    user_id: str
    aadhar_number: str
    pan_number: str
    license_number: str
    license_expiry_date: Optional[date] = None
    is_aadhar_verified: bool
    is_pan_verified: bool
    is_license_verified: bool
    aadhar_remarks: Optional[str] = None
    pan_remarks: Optional[str] = None
    license_remarks: Optional[str] = None
    is_available: bool
    created_at: datetime
    updated_at: Optional[datetime] = None


class CreateVehicle(APIModel):
    vehicle_type: str
    rc_number: str = Field(min_length=4, max_length=20)
    manufacturer: Optional[str] = None
    model: Optional[str] = None
    color: Optional[str] = None
    puc_number: str = Field(min_length=1)
    puc_expiry_date: Optional[date] = None
    insurance_number: str = Field(min_length=1)
    insurance_expiry_date: Optional[date] = None

    @field_validator("vehicle_type")
    @classmethod
    def _vehicle_type(cls, v: str) -> str:
        return _vehicle_type_or_none(v)

    @field_validator("rc_number")
    @classmethod
    def _rc(cls, v: str) -> str:
        return v.replace(" ", "").upper()


class VehicleOut(VerificationMixin):
    id: str
    driver_id: str
    vehicle_type: str
    rc_number: str
    manufacturer: Optional[str] = None
    model: Optional[str] = None
    color: Optional[str] = None
    puc_number: str
    puc_expiry_date: Optional[date] = None
    insurance_number: str
    insurance_expiry_date: Optional[date] = None
    is_rc_verified: bool
    is_puc_verified: bool
    is_insurance_verified: bool
    rc_remarks: Optional[str] = None
    puc_remarks: Optional[str] = None
    insurance_remarks: Optional[str] = None
    is_active: bool
    created_at: datetime
    updated_at: Optional[datetime] = None


class ResubmitDocument(APIModel):
    number: str = Field(min_length=1)
    expiry_date: Optional[date] = None


class ReviewDocument(APIModel):
    action: str
    remarks: Optional[str] = None

    @field_validator("action")
    @classmethod
    def _action(cls, v: str) -> str:
        a = _lower(v)
        if a not in (verification.APPROVE, verification.REJECT):
            raise ValueError("action must be approve or reject")
        return a


# ---- Transactions / admin ----

class RecordPayment(APIModel):
    booking_id: str = Field(min_length=1)
    payment_id: Optional[str] = Field(default=None, max_length=100)
    payment_method: Optional[str] = None

    @field_validator("payment_method")
    @classmethod
    def _payment(cls, v):
        if v is None:
            return None
        pm = _lower(v)
        if pm not in _PAYMENT_METHODS:
            raise ValueError(f"Invalid payment method: {v}. Allowed: {sorted(_PAYMENT_METHODS)}")
        return pm


class PaymentDetails(APIModel):
    booking_id: str
    payment_id: Optional[str] = None
    amount: Optional[float] = None
    payment_method: str
    payment_status: str
    paid_at: Optional[datetime] = None
    failure_reason: Optional[str] = None
    message: Optional[str] = None


class TransactionOut(APIModel):
    id: str
    booking_id: str
    rider_id: str
    driver_id: str
    amount: float
    commission: float
    driver_earning: float
    payment_method: str
    created_at: datetime


class TransactionPage(Page[TransactionOut]):
    total_amount: float
    total_commission: float
    total_driver_earning: float


class StatsOut(APIModel):
    users_by_role: dict[str, int]
    bookings_by_status: dict[str, int]
    transaction_count: int
    total_revenue: float
    total_commission: float
