"""Error kinds raised by the service layer.

Routers never inspect messages: the exception handlers in ``studycards.main``
pick the HTTP status from ``status_code`` and render ``kind`` plus the message
into the response envelope.
"""


class StudyCardsError(Exception):
    kind = "internal"
    status_code = 500
    title = "Internal server error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidArgumentError(StudyCardsError, ValueError):
    kind = "invalid_argument"
    status_code = 400
    title = "Request processing failed"


class ConflictError(StudyCardsError):
    # duplicate folder names are reported as a bad request
    kind = "conflict"
    status_code = 400
    title = "Request processing failed"


class NotFoundError(StudyCardsError):
    kind = "not_found"
    status_code = 404
    title = "Not found"


class UnauthenticatedError(StudyCardsError):
    kind = "unauthenticated"
    status_code = 401
    title = "Unauthorized"


class InternalError(StudyCardsError):
    kind = "internal"
    status_code = 500
    title = "Database error"
