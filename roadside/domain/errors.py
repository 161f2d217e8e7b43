"""
Error taxonomy.

Each error carries the HTTP status the API layer renders it with; the
exception handlers in ``roadside.api.app`` turn them into the
``{"success": false, "message": ...}`` envelope.
"""


class DispatchError(Exception):
    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidCoordinates(DispatchError):
    status_code = 400
    default_message = "Invalid coordinate values"


class InvalidRadius(DispatchError):
    status_code = 400
    default_message = "Invalid radius value"


class StorageQueryFailure(DispatchError):
    status_code = 500
    default_message = "Internal server error while querying partners"


class EmergencyConflict(DispatchError):
    status_code = 409
    default_message = "You already have an active emergency request"


class InvalidStateTransition(DispatchError):
    """Raised when an emergency status change violates the state machine."""

    status_code = 400
    default_message = "Invalid emergency status change"
