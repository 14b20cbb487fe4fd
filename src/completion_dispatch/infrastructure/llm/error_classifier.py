"""HTTP status classification for provider failures."""

from typing import NamedTuple

from ...domain.enums import ErrorKind


class ErrorClassification(NamedTuple):
    """Failure kind and whether another attempt may succeed."""

    kind: ErrorKind
    retryable: bool


_STATUS_TABLE: dict[int, ErrorClassification] = {
    400: ErrorClassification(ErrorKind.BAD_REQUEST, False),
    401: ErrorClassification(ErrorKind.AUTH_FAILURE, False),
    403: ErrorClassification(ErrorKind.AUTH_FAILURE, False),
    404: ErrorClassification(ErrorKind.MODEL_NOT_FOUND, False),
    429: ErrorClassification(ErrorKind.RATE_LIMITED, True),
    500: ErrorClassification(ErrorKind.SERVER_FAULT, True),
    502: ErrorClassification(ErrorKind.SERVER_FAULT, True),
    503: ErrorClassification(ErrorKind.SERVER_FAULT, True),
}

_UNKNOWN = ErrorClassification(ErrorKind.UNKNOWN, True)


def classify_status(status_code: int) -> ErrorClassification:
    """Map an HTTP status code to a failure classification.

    Total over all integers: anything not in the table is ``Unknown`` and
    retryable, so an unexpected status gets one more chance.
    """
    return _STATUS_TABLE.get(status_code, _UNKNOWN)
