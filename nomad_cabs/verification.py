"""
Document verification for drivers and vehicles.

Every document has its own boolean flag and an optional rejection remark.
The aggregate is derived from the flags alone: ``verified`` when all of
them are set, ``pending`` otherwise. A rejection never changes the
aggregate; it shows up per document and through ``has_rejections``.
"""
from datetime import datetime, timezone

VERIFIED = "verified"
PENDING = "pending"
REJECTED = "rejected"

DRIVER_DOCUMENTS = ("aadhar", "pan", "license")
VEHICLE_DOCUMENTS = ("rc", "puc", "insurance")

APPROVE = "approve"
REJECT = "reject"


def _flag(doc: str) -> str:
    return f"is_{doc}_verified"


def _remarks(doc: str) -> str:
    return f"{doc}_remarks"


def aggregate_status(flags) -> str:
    flags = list(flags)
    if flags and all(flags):
        return VERIFIED
    return PENDING


def document_status(verified: bool, remarks: str | None) -> str:
    if verified:
        return VERIFIED
    if remarks:
        return REJECTED
    return PENDING


def documents_for(entity) -> tuple[str, ...]:
    if hasattr(entity, "is_aadhar_verified"):
        return DRIVER_DOCUMENTS
    return VEHICLE_DOCUMENTS


def summarize(entity) -> dict:
    docs = documents_for(entity)
    statuses = {
        d: document_status(getattr(entity, _flag(d)), getattr(entity, _remarks(d)))
        for d in docs
    }
    return {
        "verification_status": aggregate_status(getattr(entity, _flag(d)) for d in docs),
        "document_statuses": statuses,
        "has_rejections": any(s == REJECTED for s in statuses.values()),
    }


def apply_review(entity, document: str, action: str, remarks: str | None = None) -> None:
    """Admin approve/reject of a single document. Documents can be reviewed in any order."""
    docs = documents_for(entity)
    if document not in docs:
        raise ValueError(f"Unknown document: {document}. Allowed: {list(docs)}")

    action = (action or "").strip().lower()
    if action == APPROVE:
        setattr(entity, _flag(document), True)
        setattr(entity, _remarks(document), None)
    elif action == REJECT:
        setattr(entity, _flag(document), False)
        setattr(entity, _remarks(document), (remarks or "").strip() or "Rejected")
    else:
        raise ValueError(f"Invalid action: {action}. Allowed: {[APPROVE, REJECT]}")

    entity.updated_at = datetime.now(timezone.utc)


def reset_document(entity, document: str) -> None:
    """Resubmission puts the document back to pending."""
    docs = documents_for(entity)
    if document not in docs:
        raise ValueError(f"Unknown document: {document}. Allowed: {list(docs)}")

    setattr(entity, _flag(document), False)
    setattr(entity, _remarks(document), None)
    entity.updated_at = datetime.now(timezone.utc)
