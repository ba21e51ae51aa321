class NomadCabsError(Exception):
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationFailed(NomadCabsError):
    status_code = 400


class NotAuthenticated(NomadCabsError):
    status_code = 401


class Forbidden(NomadCabsError):
    status_code = 403


class NotFound(NomadCabsError):
    status_code = 404


class Conflict(NomadCabsError):
    status_code = 409


class DuplicateEmail(Conflict):
    def __init__(self, email: str):
        super().__init__("User already exists")
        self.email = email


class BookingNotFound(NotFound):
    def __init__(self, booking_id: str):
        super().__init__("Booking not found")
        self.booking_id = booking_id


class InvalidStatusTransition(Conflict):
    def __init__(self, current: str, target: str):
        super().__init__(f"Cannot move booking from {current} to {target}")
        self.current = current
        self.target = target


class ConcurrentUpdate(Conflict):
    def __init__(self):
        super().__init__("Record was modified by another request, retry the operation")
