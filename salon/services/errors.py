class SalonError(Exception):
    """Base class for errors that map onto a client-facing HTTP status."""

    status_code = 400

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(SalonError):
    status_code = 400


class InvalidTransitionError(ValidationError):
    pass


class NotFoundError(SalonError):
    status_code = 404


class ConflictError(SalonError):
    status_code = 409
