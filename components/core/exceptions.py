"""Domain errors raised by calculators and repositories."""


class ServiceError(Exception):
    """Base class for errors the API turns into HTTP responses."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidArgument(ServiceError):
    """A numeric or enumerated input is outside its allowed range."""

    status_code = 400


class NotFound(ServiceError):
    status_code = 404


class PreconditionFailed(ServiceError):
    """The requested transition is not allowed in the current state."""

    status_code = 409


class ConcurrentUpdate(ServiceError):
    """A row changed between read and conditional write."""

    status_code = 409
