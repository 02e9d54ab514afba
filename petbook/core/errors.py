"""
Error taxonomy shared by every core operation.

Each error carries the HTTP status the API renders it with, so routers
never translate exceptions themselves.
"""


class PetbookError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(PetbookError):
    """Malformed input, rejected before any write."""
    status_code = 400


class SelfFollowError(ValidationError):
    pass


class SelfChatError(ValidationError):
    pass


class NoActorError(PetbookError):
    """Signed-in account cannot act (guardian without pets, foreign pet selected)."""
    status_code = 403


class NotFoundError(PetbookError):
    status_code = 404


class ConflictError(PetbookError):
    """Uniqueness violation. Recovered inside the core, never rendered to clients."""
    status_code = 409


class DependencyError(PetbookError):
    """The store or a realtime channel is unreachable."""
    status_code = 503
