import pytest

from nomad_cabs.fares import (
    BASE_FARES,
    VEHICLE_TYPES,
    calculate_fare,
    estimate_duration_minutes,
    haversine_km,
    round_half_up,
)


def test_sedan_five_km_breakdown():
    fare = calculate_fare(5, "sedan")

    assert fare.base_fare == 150
    assert fare.distance_fare == 75
    assert fare.subtotal == 225
    assert fare.platform_fee == 23
    assert fare.total == 248


@pytest.mark.parametrize("distance", [0, None])
def test_missing_distance_defaults_to_five_km(distance):
    assert calculate_fare(distance, "bike") == calculate_fare(5, "bike")
    assert calculate_fare(distance, "bike").distance_fare == 40


def test_unknown_vehicle_type_uses_default_rates():
    fare = calculate_fare(10, "limousine")

    assert fare.base_fare == 100
    assert fare.distance_fare == 150
    assert fare.platform_fee == 25
    assert fare.total == 275


def test_total_is_subtotal_plus_fee_for_every_type():
    for vt in VEHICLE_TYPES:
        fare = calculate_fare(7.3, vt)
        assert fare.base_fare == BASE_FARES[vt]
        assert fare.total == pytest.approx(fare.subtotal + fare.platform_fee)


def test_round_half_up():
    assert round_half_up(22.5) == 23
    assert round_half_up(24.49) == 24
    assert round_half_up(0.5) == 1


def test_duration_estimate():
    assert estimate_duration_minutes(15) == 30
    assert estimate_duration_minutes(None) == 10


def test_haversine():
    assert haversine_km(19.0760, 72.8777, 19.0760, 72.8777) == 0
    # Mumbai to Pune
    assert haversine_km(19.0760, 72.8777, 18.5204, 73.8567) == pytest.approx(120, abs=5)
