"""Domain errors raised by the stores and mapped to HTTP responses in main."""


class TrackerError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(TrackerError):
    status_code = 404


class ConflictError(TrackerError):
    """A (metric, week) pair already has a row."""

    status_code = 409


class InvalidInputError(TrackerError):
    status_code = 400
