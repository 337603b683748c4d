"""
Error taxonomy for the question/answer workflow.

Services raise these; ApiErrorMiddleware turns them into JSON responses.
"""


class QAError(Exception):
    """Base class for errors that map onto an HTTP status."""

    status_code = 500
    default_message = "Internal server error."

    def __init__(self, message=None, errors=None):
        self.message = message or self.default_message
        self.errors = errors
        super().__init__(self.message)

    def as_payload(self):
        payload = {"success": False, "message": self.message}
        if self.errors:
            payload["errors"] = self.errors
        return payload


class InvalidInput(QAError):
    status_code = 400
    default_message = "Validation error"

    @classmethod
    def from_form(cls, form):
        return cls(errors={field: list(messages) for field, messages in form.errors.items()})


class Unauthorized(QAError):
    status_code = 401
    default_message = "Authentication required."


class Forbidden(QAError):
    status_code = 403
    default_message = "You are not allowed to do that."


class NotFound(QAError):
    status_code = 404
    default_message = "Not found."


class CapabilityUnavailable(QAError):
    """The enhancement capability is not configured at all."""

    status_code = 400
    default_message = "AI enhancement is not available."


class UpstreamFailure(QAError):
    """The enhancement capability is configured but the call failed."""

    status_code = 502
    default_message = "AI enhancement failed."
