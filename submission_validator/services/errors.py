from typing import Optional


class SubmissionValidationError(Exception):
    """Base class for failures surfaced to the caller as an ``{"error": ...}`` envelope."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"error": self.message}


class BadRequest(SubmissionValidationError):
    status_code = 400

    def __init__(self, message: str = "Invalid request"):
        super().__init__(message)


class CallerUnauthorized(SubmissionValidationError):
    status_code = 401

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message)


class ConfigurationError(SubmissionValidationError):
    """Deployment is missing a required setting. Never degraded to a fallback report."""

    status_code = 500


class RateLimited(SubmissionValidationError):
    status_code = 429

    def __init__(self, message: str = "Rate limit exceeded, please try again later."):
        super().__init__(message)


class PaymentRequired(SubmissionValidationError):
    status_code = 402

    def __init__(self, message: str = "Payment required, please add credits."):
        super().__init__(message)


class UpstreamError(SubmissionValidationError):
    status_code = 500

    def __init__(self, message: str = "AI gateway error", detail: Optional[str] = None,
                 upstream_status: Optional[int] = None):
        super().__init__(message)
        self.detail = detail
        self.upstream_status = upstream_status
