import requests
from pydantic import ValidationError

from submission_validator.models.report_schema import ValidationReport
from submission_validator.models.submission_schema import ValidationRequest
from submission_validator.services.errors import (
    BadRequest,
    CallerUnauthorized,
    PaymentRequired,
    RateLimited,
    SubmissionValidationError,
    UpstreamError,
)
from submission_validator.utils.logger import get_logger


logger = get_logger("validation-api")

_ERRORS_BY_STATUS = {
    400: BadRequest,
    401: CallerUnauthorized,
    402: PaymentRequired,
    429: RateLimited,
}


class RemoteValidator:
    """Calls a running validation service over HTTP; the wizard's remote transport."""

    def __init__(self, base_url: str, token: str, timeout: float = 180):
        self.url = f"{base_url.rstrip('/')}/api/submissions/validate"
        self.token = token
        self.timeout = timeout

    def report_for(self, request: ValidationRequest) -> ValidationReport:
        body = request.model_dump(by_alias=True, exclude_none=True)
        try:
            r = requests.post(
                self.url,
                json=body,
                headers={"Authorization": f"Bearer {self.token}"},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error("validate-submission error: %s", e)
            raise UpstreamError("Validation service unreachable", detail=str(e)) from e

        try:
            data = r.json()
        except ValueError:
            data = {}
        if r.status_code != 200:
            message = data.get("error") if isinstance(data, dict) else None
            error_cls = _ERRORS_BY_STATUS.get(r.status_code)
            logger.warning("validate-submission failed: %s %s", r.status_code, message)
            if error_cls:
                raise error_cls(message) if message else error_cls()
            raise SubmissionValidationError(message or f"Validation failed ({r.status_code})")
        try:
            return ValidationReport.from_reply(data)
        except ValidationError as e:
            raise UpstreamError("Malformed validation response", detail=str(e)) from e
