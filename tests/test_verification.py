from types import SimpleNamespace

import pytest

from nomad_cabs import verification as v


def make_driver(**flags):
    fields = {}
    for doc in v.DRIVER_DOCUMENTS:
        fields[f"is_{doc}_verified"] = flags.get(doc, False)
        fields[f"{doc}_remarks"] = None
    return SimpleNamespace(updated_at=None, **fields)


def make_vehicle():
    fields = {}
    for doc in v.VEHICLE_DOCUMENTS:
        fields[f"is_{doc}_verified"] = False
        fields[f"{doc}_remarks"] = None
    return SimpleNamespace(updated_at=None, **fields)


def test_aggregate_is_two_valued():
    assert v.aggregate_status([True, True, True]) == v.VERIFIED
    assert v.aggregate_status([True, False, True]) == v.PENDING
    assert v.aggregate_status([False, False, False]) == v.PENDING
    assert v.aggregate_status([]) == v.PENDING


def test_rejection_keeps_aggregate_pending():
    driver = make_driver(aadhar=True, license=True)
    v.apply_review(driver, "pan", v.REJECT, "Blurry scan")

    summary = v.summarize(driver)
    assert summary["verification_status"] == v.PENDING
    assert summary["document_statuses"] == {
        "aadhar": v.VERIFIED,
        "pan": v.REJECTED,
        "license": v.VERIFIED,
    }
    assert summary["has_rejections"] is True
    assert driver.pan_remarks == "Blurry scan"
    assert driver.updated_at is not None


def test_reject_without_remarks_still_marks_rejected():
    driver = make_driver()
    v.apply_review(driver, "aadhar", "Reject")

    assert driver.aadhar_remarks == "Rejected"
    assert v.summarize(driver)["document_statuses"]["aadhar"] == v.REJECTED


def test_approve_in_any_order():
    driver = make_driver()
    for doc in ("license", "aadhar", "pan"):
        v.apply_review(driver, doc, v.APPROVE)

    assert v.summarize(driver)["verification_status"] == v.VERIFIED


def test_approve_clears_remarks():
    driver = make_driver()
    v.apply_review(driver, "pan", v.REJECT, "Name mismatch")
    v.apply_review(driver, "pan", v.APPROVE)

    assert driver.pan_remarks is None
    assert driver.is_pan_verified is True


def test_reset_document():
    driver = make_driver(aadhar=True, pan=True, license=True)
    v.reset_document(driver, "license")

    assert driver.is_license_verified is False
    assert v.summarize(driver)["verification_status"] == v.PENDING


def test_vehicle_documents():
    vehicle = make_vehicle()
    assert v.documents_for(vehicle) == v.VEHICLE_DOCUMENTS

    with pytest.raises(ValueError):
        v.apply_review(vehicle, "aadhar", v.APPROVE)


def test_bad_action():
    with pytest.raises(ValueError):
        v.apply_review(make_driver(), "pan", "maybe")
