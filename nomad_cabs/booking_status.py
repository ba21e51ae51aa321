PENDING = "pending"
ACCEPTED = "accepted"
IN_PROGRESS = "in_progress"
COMPLETED = "completed"
CANCELLED = "cancelled"

STATUSES = (PENDING, ACCEPTED, IN_PROGRESS, COMPLETED, CANCELLED)

TERMINAL = frozenset({COMPLETED, CANCELLED})
ACTIVE = frozenset({ACCEPTED, IN_PROGRESS})

# pending -> accepted -> in_progress -> completed, cancel from any non-terminal state
TRANSITIONS = {
    PENDING: frozenset({ACCEPTED, CANCELLED}),
    ACCEPTED: frozenset({IN_PROGRESS, CANCELLED}),
    IN_PROGRESS: frozenset({COMPLETED, CANCELLED}),
    COMPLETED: frozenset(),
    CANCELLED: frozenset(),
}


def norm(status: str) -> str:
    return (status or "").strip().lower().replace("-", "_")


def is_valid(status: str) -> bool:
    return norm(status) in TRANSITIONS


def can_transition(current: str, target: str) -> bool:
    return norm(target) in TRANSITIONS.get(norm(current), frozenset())


def next_statuses(current: str) -> list[str]:
    allowed = TRANSITIONS.get(norm(current), frozenset())
    return [s for s in STATUSES if s in allowed]
