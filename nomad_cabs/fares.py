import math
from dataclasses import asdict, dataclass
from decimal import ROUND_HALF_UP, Decimal

from .config import PLATFORM_FEE_RATE

VEHICLE_TYPES = ("bike", "auto", "hatchback", "sedan", "suv")

BASE_FARES = {
    "bike": 50,
    "auto": 80,
    "hatchback": 120,
    "sedan": 150,
    "suv": 200,
}

PER_KM_RATES = {
    "bike": 8,
    "auto": 12,
    "hatchback": 15,
    "sedan": 15,
    "suv": 22,
}

DEFAULT_BASE_FARE = 100
DEFAULT_PER_KM_RATE = 15
DEFAULT_DISTANCE_KM = 5

AVERAGE_SPEED_KMH = 30.0


@dataclass(frozen=True)
class FareBreakdown:
    base_fare: float
    distance_fare: float
    platform_fee: int
    subtotal: float
    total: float

    def to_dict(self) -> dict:
        return asdict(self)


def round_half_up(value) -> int:
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def calculate_fare(distance_km, vehicle_type) -> FareBreakdown:
    """
    Itemised fare for a trip.

    A falsy distance (None or 0) is treated as the default 5 km, and an
    unknown vehicle type uses the default base/per-km rates. Never raises.
    """
    distance = distance_km or DEFAULT_DISTANCE_KM

    base_fare = BASE_FARES.get(vehicle_type, DEFAULT_BASE_FARE)
    distance_fare = distance * PER_KM_RATES.get(vehicle_type, DEFAULT_PER_KM_RATE)
    subtotal = base_fare + distance_fare
    platform_fee = round_half_up(Decimal(str(subtotal)) * Decimal(str(PLATFORM_FEE_RATE)))

    return FareBreakdown(
        base_fare=base_fare,
        distance_fare=distance_fare,
        platform_fee=platform_fee,
        subtotal=subtotal,
        total=subtotal + platform_fee,
    )


def estimate_duration_minutes(distance_km) -> int:
    distance = distance_km or DEFAULT_DISTANCE_KM
    return round_half_up(distance / AVERAGE_SPEED_KMH * 60)


def haversine_km(lat1, lon1, lat2, lon2) -> float:
    R = 6371
    d_lat = math.radians(lat2 - lat1)
    d_lon = math.radians(lon2 - lon1)

    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1))
        * math.cos(math.radians(lat2))
        * math.sin(d_lon / 2) ** 2
    )

    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return R * c
