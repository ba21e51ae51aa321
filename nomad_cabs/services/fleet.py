"""Driver profiles, vehicles and their document verification."""
import logging
from datetime import date

from sqlalchemy import and_, not_
from sqlalchemy.ext.asyncio import AsyncSession

from .. import verification
from ..errors import Conflict, Forbidden, NotFound, ValidationFailed
from ..events import VERIFICATION_UPDATED, emit
from ..models import Driver, User, Vehicle, utcnow
from ..repository import Repository, transaction
from ..schemas import CreateDriver, CreateVehicle, ResubmitDocument

logger = logging.getLogger(__name__)

# document -> (number column, expiry column)
DRIVER_DOCUMENT_FIELDS = {
    "aadhar": ("aadhar_number", None),
    "pan": ("pan_number", None),
    "license": ("license_number", "license_expiry_date"),
}

VEHICLE_DOCUMENT_FIELDS = {
    "rc": ("rc_number", None),
    "puc": ("puc_number", "puc_expiry_date"),
    "insurance": ("insurance_number", "insurance_expiry_date"),
}


def _check_not_expired(expiry: date | None, label: str):
    if expiry and expiry < date.today():
        raise ValidationFailed(f"{label} has expired. Expiry date cannot be in the past.")


def _verification_criteria(model, flags, status: str | None):
    status = (status or "").strip().lower()
    if not status:
        return []
    all_verified = and_(*[getattr(model, f) == True for f in flags])  # noqa: E712
    if status == verification.VERIFIED:
        return [all_verified]
    if status == verification.PENDING:
        return [not_(all_verified)]
    raise ValidationFailed(f"Invalid verification filter: {status}")


# ---- Drivers ----

async def create_driver_profile(db: AsyncSession, user: User, data: CreateDriver) -> Driver:
    repo = Repository(db, Driver)

    if await repo.get_by(user_id=user.id):
        raise Conflict("Driver profile already exists")

    _check_not_expired(data.license_expiry_date, "Driving license")

    driver = Driver(
        user_id=user.id,
        aadhar_number=data.aadhar_number,
        pan_number=data.pan_number,
        license_number=data.license_number,
        license_expiry_date=data.license_expiry_date,
        is_aadhar_verified=False,
        is_pan_verified=False,
        is_license_verified=False,
        is_available=False,
    )

    async with transaction(db):
        await repo.upsert(driver)

    logger.info("driver profile %s created for user %s", driver.id, user.id)
    return driver


async def get_driver(db: AsyncSession, driver_id: str, viewer: User | None = None) -> Driver:
    driver = await Repository(db, Driver).get(driver_id)
    if not driver:
        raise NotFound("Driver not found")
    if viewer and viewer.role != "admin" and driver.user_id != viewer.id:
        raise Forbidden("Not your driver profile")
    return driver


async def driver_for_user(db: AsyncSession, user_id: str) -> Driver | None:
    return await Repository(db, Driver).get_by(user_id=user_id)


async def list_drivers(
    db: AsyncSession,
    viewer: User,
    verification_status: str | None = None,
    page: int = 1,
    size: int = 20,
):
    criteria = _verification_criteria(
        Driver,
        ("is_aadhar_verified", "is_pan_verified", "is_license_verified"),
        verification_status,
    )
    if viewer.role != "admin":
        criteria.append(Driver.user_id == viewer.id)

    return await Repository(db, Driver).page(
        *criteria, order_by=Driver.created_at.desc(), page=page, size=size
    )


async def resubmit_driver_document(
    db: AsyncSession, driver_id: str, document: str, data: ResubmitDocument, viewer: User
) -> Driver:
    if document not in DRIVER_DOCUMENT_FIELDS:
        raise ValidationFailed(f"Unknown document: {document}. Allowed: {list(DRIVER_DOCUMENT_FIELDS)}")

    number_field, expiry_field = DRIVER_DOCUMENT_FIELDS[document]
    if expiry_field:
        _check_not_expired(data.expiry_date, document.capitalize())

    async with transaction(db):
        driver = await Repository(db, Driver).get(driver_id, for_update=True)
        if not driver:
            raise NotFound("Driver not found")
        if driver.user_id != viewer.id:
            raise Forbidden("Not your driver profile")

        setattr(driver, number_field, data.number.strip().upper())
        if expiry_field and data.expiry_date:
            setattr(driver, expiry_field, data.expiry_date)
        verification.reset_document(driver, document)

    logger.info("driver %s resubmitted %s", driver.id, document)
    return driver


async def review_driver_document(
    db: AsyncSession, driver_id: str, document: str, action: str, remarks: str | None = None
) -> Driver:
    async with transaction(db):
        driver = await Repository(db, Driver).get(driver_id, for_update=True)
        if not driver:
            raise NotFound("Driver not found")

        try:
            verification.apply_review(driver, document, action, remarks)
        except ValueError as e:
            raise ValidationFailed(str(e))

        summary = verification.summarize(driver)
        if summary["verification_status"] == verification.VERIFIED:
            user = await Repository(db, User).get(driver.user_id, for_update=True)
            if user and user.status == "pending_verification":
                user.status = "active"
                user.updated_at = utcnow()
                logger.info("driver user %s activated after verification", user.id)

    logger.info("driver %s %s: %s -> %s", driver.id, document, action, summary["verification_status"])
    await emit(VERIFICATION_UPDATED, {
        "entity": "driver",
        "id": driver.id,
        "document": document,
        "action": action,
        **summary,
    })
    return driver


# ---- Vehicles ----

async def create_vehicle(db: AsyncSession, user: User, data: CreateVehicle) -> Vehicle:
    driver = await driver_for_user(db, user.id)
    if not driver:
        raise ValidationFailed("Create a driver profile before adding vehicles")

    repo = Repository(db, Vehicle)
    if await repo.get_by(rc_number=data.rc_number):
        raise Conflict("Vehicle with this RC number already exists")

    _check_not_expired(data.puc_expiry_date, "PUC certificate")
    _check_not_expired(data.insurance_expiry_date, "Insurance")

    vehicle = Vehicle(
        driver_id=driver.id,
        vehicle_type=data.vehicle_type,
        rc_number=data.rc_number,
        manufacturer=data.manufacturer,
        model=data.model,
        color=data.color,
        puc_number=data.puc_number,
        puc_expiry_date=data.puc_expiry_date,
        insurance_number=data.insurance_number,
        insurance_expiry_date=data.insurance_expiry_date,
        is_rc_verified=False,
        is_puc_verified=False,
        is_insurance_verified=False,
        is_active=True,
    )

    async with transaction(db):
        await repo.upsert(vehicle)

    logger.info("vehicle %s (%s) registered for driver %s", vehicle.id, vehicle.vehicle_type, driver.id)
    return vehicle


async def _vehicle_owner_check(db: AsyncSession, vehicle: Vehicle, viewer: User):
    if viewer.role == "admin":
        return
    driver = await driver_for_user(db, viewer.id)
    if not driver or vehicle.driver_id != driver.id:
        raise Forbidden("Not your vehicle")


async def get_vehicle(db: AsyncSession, vehicle_id: str, viewer: User | None = None) -> Vehicle:
    vehicle = await Repository(db, Vehicle).get(vehicle_id)
    if not vehicle:
        raise NotFound("Vehicle not found")
    if viewer:
        await _vehicle_owner_check(db, vehicle, viewer)
    return vehicle


async def list_vehicles(
    db: AsyncSession,
    viewer: User,
    verification_status: str | None = None,
    vehicle_type: str | None = None,
    page: int = 1,
    size: int = 20,
):
    criteria = _verification_criteria(
        Vehicle,
        ("is_rc_verified", "is_puc_verified", "is_insurance_verified"),
        verification_status,
    )
    if vehicle_type:
        criteria.append(Vehicle.vehicle_type == vehicle_type.lower())

    if viewer.role != "admin":
        driver = await driver_for_user(db, viewer.id)
        if not driver:
            return [], 0
        criteria.append(Vehicle.driver_id == driver.id)

    return await Repository(db, Vehicle).page(
        *criteria, order_by=Vehicle.created_at.desc(), page=page, size=size
    )


async def resubmit_vehicle_document(
    db: AsyncSession, vehicle_id: str, document: str, data: ResubmitDocument, viewer: User
) -> Vehicle:
    if document not in VEHICLE_DOCUMENT_FIELDS:
        raise ValidationFailed(f"Unknown document: {document}. Allowed: {list(VEHICLE_DOCUMENT_FIELDS)}")

    number_field, expiry_field = VEHICLE_DOCUMENT_FIELDS[document]
    if expiry_field:
        _check_not_expired(data.expiry_date, document.upper())

    async with transaction(db):
        vehicle = await Repository(db, Vehicle).get(vehicle_id, for_update=True)
        if not vehicle:
            raise NotFound("Vehicle not found")
        await _vehicle_owner_check(db, vehicle, viewer)

        setattr(vehicle, number_field, data.number.replace(" ", "").upper())
        if expiry_field and data.expiry_date:
            setattr(vehicle, expiry_field, data.expiry_date)
        verification.reset_document(vehicle, document)

    logger.info("vehicle %s resubmitted %s", vehicle.id, document)
    return vehicle


async def review_vehicle_document(
    db: AsyncSession, vehicle_id: str, document: str, action: str, remarks: str | None = None
) -> Vehicle:
    async with transaction(db):
        vehicle = await Repository(db, Vehicle).get(vehicle_id, for_update=True)
        if not vehicle:
            raise NotFound("Vehicle not found")

        try:
            verification.apply_review(vehicle, document, action, remarks)
        except ValueError as e:
            raise ValidationFailed(str(e))

        summary = verification.summarize(vehicle)

    logger.info("vehicle %s %s: %s -> %s", vehicle.id, document, action, summary["verification_status"])
    await emit(VERIFICATION_UPDATED, {
        "entity": "vehicle",
        "id": vehicle.id,
        "document": document,
        "action": action,
        **summary,
    })
    return vehicle
