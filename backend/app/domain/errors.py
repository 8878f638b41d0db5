"""
Domain errors

Raised by repositories and services; the API layer maps them to HTTP codes
(NotFoundError -> 404, PermissionDeniedError -> 403, ValueError -> 400).
"""


class NotFoundError(Exception):
    """Requested row does not exist (or is outside the caller's scope)"""

    def __init__(self, entity: str, identifier):
        self.entity = entity
        self.identifier = identifier
        super().__init__(f"{entity} {identifier} not found")


class PermissionDeniedError(Exception):
    """Caller is authenticated but may not touch this row"""


class InvalidStatusError(ValueError):
    """Status value outside the order / item vocabulary"""

    def __init__(self, kind: str, value, allowed):
        self.kind = kind
        self.value = value
        self.allowed = list(allowed)
        super().__init__(
            f"Invalid {kind} status '{value}'. Allowed: {', '.join(self.allowed)}"
        )
