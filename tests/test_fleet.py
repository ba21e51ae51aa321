import pytest

DRIVER_PROFILE = {
    "aadharNumber": "1234 5678 9012",
    "panNumber": "abcde1234f",
    "licenseNumber": "MH1220110062821",
    "licenseExpiryDate": "2035-06-30",
}

VEHICLE = {
    "vehicleType": "Sedan",
    "rcNumber": "MH 12 AB 1234",
    "manufacturer": "Maruti",
    "model": "Dzire",
    "color": "White",
    "pucNumber": "PUC123",
    "pucExpiryDate": "2035-01-01",
    "insuranceNumber": "INS123",
    "insuranceExpiryDate": "2035-01-01",
}


@pytest.fixture
def driver_profile(client, pending_driver):
    res = client.post("/drivers", json=DRIVER_PROFILE, headers=pending_driver["headers"])
    assert res.status_code == 201, res.text
    return res.json()


@pytest.fixture
def vehicle(client, pending_driver, driver_profile):
    res = client.post("/vehicles", json=VEHICLE, headers=pending_driver["headers"])
    assert res.status_code == 201, res.text
    return res.json()


def review(client, admin, kind, entity_id, document, action, remarks=None):
    return client.put(
        f"/admin/{kind}/{entity_id}/documents/{document}",
        json={"action": action, "remarks": remarks},
        headers=admin["headers"],
    )


def test_create_driver_profile(driver_profile, pending_driver):
    assert driver_profile["userId"] == pending_driver["id"]
    assert driver_profile["aadharNumber"] == "123456789012"
    assert driver_profile["panNumber"] == "ABCDE1234F"
    assert driver_profile["verificationStatus"] == "pending"
    assert driver_profile["hasRejections"] is False
    assert driver_profile["documentStatuses"] == {"aadhar": "pending", "pan": "pending", "license": "pending"}


def test_driver_profile_is_unique(client, pending_driver, driver_profile):
    res = client.post("/drivers", json=DRIVER_PROFILE, headers=pending_driver["headers"])
    assert res.status_code == 409


def test_driver_profile_validation(client, pending_driver):
    res = client.post("/drivers", json={**DRIVER_PROFILE, "aadharNumber": "12345"}, headers=pending_driver["headers"])
    assert res.status_code == 400

    res = client.post("/drivers", json={**DRIVER_PROFILE, "panNumber": "12345ABCDE"}, headers=pending_driver["headers"])
    assert res.status_code == 400

    res = client.post("/drivers", json={**DRIVER_PROFILE, "licenseExpiryDate": "2001-01-01"}, headers=pending_driver["headers"])
    assert res.status_code == 400
    assert "expired" in res.json()["message"]


def test_riders_cannot_create_driver_profiles(client, rider):
    res = client.post("/drivers", json=DRIVER_PROFILE, headers=rider["headers"])
    assert res.status_code == 403


def test_full_verification_activates_driver(client, admin, pending_driver, driver_profile):
    for doc in ("license", "aadhar"):
        res = review(client, admin, "drivers", driver_profile["id"], doc, "approve")
        assert res.status_code == 200
        assert res.json()["verificationStatus"] == "pending"

    assert client.get("/auth/profile", headers=pending_driver["headers"]).json()["status"] == "pending_verification"

    res = review(client, admin, "drivers", driver_profile["id"], "pan", "approve")
    assert res.json()["verificationStatus"] == "verified"

    assert client.get("/auth/profile", headers=pending_driver["headers"]).json()["status"] == "active"


def test_rejected_document_and_resubmission(client, admin, pending_driver, driver_profile):
    review(client, admin, "drivers", driver_profile["id"], "aadhar", "approve")
    review(client, admin, "drivers", driver_profile["id"], "license", "approve")

    res = review(client, admin, "drivers", driver_profile["id"], "pan", "reject", "Name does not match")
    body = res.json()
    assert body["verificationStatus"] == "pending"
    assert body["hasRejections"] is True
    assert body["documentStatuses"]["pan"] == "rejected"
    assert body["panRemarks"] == "Name does not match"

    res = client.put(
        f"/drivers/{driver_profile['id']}/documents/pan",
        json={"number": "fghij5678k"},
        headers=pending_driver["headers"],
    )
    assert res.status_code == 200
    body = res.json()
    assert body["panNumber"] == "FGHIJ5678K"
    assert body["documentStatuses"]["pan"] == "pending"
    assert body["panRemarks"] is None
    assert body["hasRejections"] is False


def test_review_unknown_document(client, admin, driver_profile):
    res = review(client, admin, "drivers", driver_profile["id"], "passport", "approve")
    assert res.status_code == 400

    res = review(client, admin, "drivers", "missing", "pan", "approve")
    assert res.status_code == 404


def test_only_admins_review(client, pending_driver, driver_profile):
    res = review(client, pending_driver, "drivers", driver_profile["id"], "pan", "approve")
    assert res.status_code == 403


def test_driver_sees_only_own_profile(client, signup, admin, driver_profile):
    other = signup("other.driver@test.com", "driver")

    assert client.get(f"/drivers/{driver_profile['id']}", headers=other["headers"]).status_code == 403
    assert client.get("/drivers", headers=other["headers"]).json()["total"] == 0

    res = client.get("/drivers", headers=admin["headers"])
    assert res.json()["total"] == 1
    res = client.get("/drivers", params={"verificationStatus": "verified"}, headers=admin["headers"])
    assert res.json()["total"] == 0


def test_vehicle_requires_driver_profile(client, pending_driver):
    res = client.post("/vehicles", json=VEHICLE, headers=pending_driver["headers"])
    assert res.status_code == 400


def test_create_vehicle(vehicle, driver_profile):
    assert vehicle["driverId"] == driver_profile["id"]
    assert vehicle["vehicleType"] == "sedan"
    assert vehicle["rcNumber"] == "MH12AB1234"
    assert vehicle["isActive"] is True
    assert vehicle["verificationStatus"] == "pending"


def test_duplicate_rc_number(client, pending_driver, vehicle):
    res = client.post("/vehicles", json=VEHICLE, headers=pending_driver["headers"])
    assert res.status_code == 409


def test_vehicle_verification(client, admin, vehicle):
    for doc in ("rc", "puc"):
        review(client, admin, "vehicles", vehicle["id"], doc, "approve")

    res = review(client, admin, "vehicles", vehicle["id"], "insurance", "reject", "Policy lapsed")
    assert res.json()["verificationStatus"] == "pending"
    assert res.json()["documentStatuses"]["insurance"] == "rejected"

    res = review(client, admin, "vehicles", vehicle["id"], "insurance", "approve")
    assert res.json()["verificationStatus"] == "verified"
    assert res.json()["hasRejections"] is False

    res = client.get("/vehicles", params={"verificationStatus": "verified"}, headers=admin["headers"])
    assert res.json()["total"] == 1


def test_vehicle_resubmission_rejects_past_expiry(client, pending_driver, vehicle):
    res = client.put(
        f"/vehicles/{vehicle['id']}/documents/puc",
        json={"number": "PUC999", "expiryDate": "2001-01-01"},
        headers=pending_driver["headers"],
    )
    assert res.status_code == 400

    res = client.put(
        f"/vehicles/{vehicle['id']}/documents/puc",
        json={"number": "PUC999", "expiryDate": "2036-01-01"},
        headers=pending_driver["headers"],
    )
    assert res.status_code == 200
    assert res.json()["pucNumber"] == "PUC999"
    assert res.json()["pucExpiryDate"] == "2036-01-01"


def test_vehicle_ownership(client, signup, vehicle):
    other = signup("other.driver@test.com", "driver")
    assert client.get(f"/vehicles/{vehicle['id']}", headers=other["headers"]).status_code == 403
    assert client.get("/vehicles", headers=other["headers"]).json()["total"] == 0


def test_verification_filter_is_case_insensitive(client, admin, driver_profile):
    res = client.get("/drivers", params={"verificationStatus": "Pending"}, headers=admin["headers"])
    assert res.status_code == 200
    assert res.json()["total"] == 1

    res = client.get("/vehicles", params={"verificationStatus": " VERIFIED "}, headers=admin["headers"])
    assert res.status_code == 200

    res = client.get("/drivers", params={"verificationStatus": "rejected"}, headers=admin["headers"])
    assert res.status_code == 400
