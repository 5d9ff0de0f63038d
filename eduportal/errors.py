"""
Error types for the eduportal backend.

Routes map these to JSON error responses; anything else is treated as an
infrastructure failure and returned as a 500.
"""


class PortalError(Exception):
    """Base class for errors with a user-facing message."""
    status_code = 400

    def __init__(self, message):
        super().__init__(message)
        self.message = message

    def to_dict(self):
        return {"error": self.message}


class ParseEmptyError(PortalError):
    """Raw question text produced no valid questions."""

    def __init__(self, message="No valid questions found. Please check the format."):
        super().__init__(message)


class IncompleteSubmissionError(PortalError):
    """At least one answer is blank. Grading is not attempted."""

    def __init__(self, unanswered, message="Please answer all questions"):
        super().__init__(message)
        self.unanswered = list(unanswered)

    def to_dict(self):
        return {"error": self.message, "unanswered": self.unanswered}


class MalformedQuestionSetError(PortalError):
    """A question set breaks its structural invariants."""


class MalformedSubmissionError(PortalError):
    """Answers do not line up with the questions they answer."""


class NotFoundError(PortalError):
    status_code = 404


class AuthError(PortalError):
    status_code = 401


class ForbiddenError(PortalError):
    status_code = 403
