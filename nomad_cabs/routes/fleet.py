from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from ..db import get_db
from ..models import User
from ..rbac import require_role
from ..schemas import CreateDriver, CreateVehicle, DriverOut, Page, ResubmitDocument, VehicleOut
from ..security import get_current_user
from ..services import fleet

router = APIRouter()


# ================= DRIVERS =================

@router.post("/drivers", status_code=201, response_model=DriverOut, tags=["Drivers"])
async def create_driver(
    data: CreateDriver,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    require_role(user, ["driver"])
    return await fleet.create_driver_profile(db, user, data)


@router.get("/drivers", response_model=Page[DriverOut], tags=["Drivers"])
async def list_drivers(
    verification_status: Optional[str] = Query(None, alias="verificationStatus"),
    page: int = Query(1, ge=1),
    size: int = Query(20, ge=1, le=100),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    require_role(user, ["driver", "admin"])
    items, total = await fleet.list_drivers(db, user, verification_status, page, size)
    return {"items": items, "page": page, "size": size, "total": total}


@router.get("/drivers/{driver_id}", response_model=DriverOut, tags=["Drivers"])
async def get_driver(
    driver_id: str,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    require_role(user, ["driver", "admin"])
    return await fleet.get_driver(db, driver_id, viewer=user)


@router.put("/drivers/{driver_id}/documents/{document}", response_model=DriverOut, tags=["Drivers"])
async def resubmit_driver_document(
    driver_id: str,
    document: str,
    data: ResubmitDocument,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    require_role(user, ["driver"])
    return await fleet.resubmit_driver_document(db, driver_id, document.lower(), data, user)


# ================= VEHICLES =================

@router.post("/vehicles", status_code=201, response_model=VehicleOut, tags=["Vehicles"])
async def create_vehicle(
    data: CreateVehicle,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    require_role(user, ["driver"])
    return await fleet.create_vehicle(db, user, data)


@router.get("/vehicles", response_model=Page[VehicleOut], tags=["Vehicles"])
async def list_vehicles(
    verification_status: Optional[str] = Query(None, alias="verificationStatus"),
    vehicle_type: Optional[str] = Query(None, alias="vehicleType"),
    page: int = Query(1, ge=1),
    size: int = Query(20, ge=1, le=100),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    require_role(user, ["driver", "admin"])
    items, total = await fleet.list_vehicles(db, user, verification_status, vehicle_type, page, size)
    return {"items": items, "page": page, "size": size, "total": total}


@router.get("/vehicles/{vehicle_id}", response_model=VehicleOut, tags=["Vehicles"])
async def get_vehicle(
    vehicle_id: str,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    require_role(user, ["driver", "admin"])
    return await fleet.get_vehicle(db, vehicle_id, viewer=user)


@router.put("/vehicles/{vehicle_id}/documents/{document}", response_model=VehicleOut, tags=["Vehicles"])
async def resubmit_vehicle_document(
    vehicle_id: str,
    document: str,
    data: ResubmitDocument,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    require_role(user, ["driver"])
    return await fleet.resubmit_vehicle_document(db, vehicle_id, document.lower(), data, user)
