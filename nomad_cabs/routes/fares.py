from typing import List

from fastapi import APIRouter

from ..fares import DEFAULT_DISTANCE_KM, VEHICLE_TYPES, calculate_fare, estimate_duration_minutes
from ..schemas import FareQuote, FareQuoteRequest

router = APIRouter(tags=["Fares"])


@router.post("/fares/quote", response_model=List[FareQuote])
async def quote(data: FareQuoteRequest):
    vehicle_types = [data.vehicle_type] if data.vehicle_type else list(VEHICLE_TYPES)

    quotes = []
    for vt in vehicle_types:
        fare = calculate_fare(data.distance_km, vt)
        quotes.append({
            "vehicle_type": vt,
            "distance_km": data.distance_km or DEFAULT_DISTANCE_KM,
            "duration_minutes": estimate_duration_minutes(data.distance_km),
            **fare.to_dict(),
        })
    return quotes
