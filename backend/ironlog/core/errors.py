"""Domain errors raised by services and rendered by the app's exception handlers."""


class ValidationFailed(ValueError):
    """Input was well-formed but breaks a business rule (-> 400)."""


class RecordNotFound(LookupError):
    """Requested row does not exist or is not visible to the user (-> 404)."""

    def __init__(self, kind: str, record_id):
        self.kind = kind
        self.record_id = record_id
        super().__init__(f"{kind} not found")


class NotAllowed(PermissionError):
    """User is not a party to the record they tried to change (-> 403)."""
