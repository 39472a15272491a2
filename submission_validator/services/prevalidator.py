from dataclasses import dataclass

from submission_validator.models.submission_schema import ValidationRequest
from submission_validator.services.registry import SubmissionTypeProfile


@dataclass(frozen=True)
class PreValidation:
    format_valid: bool
    size_valid: bool


def format_matches(request: ValidationRequest, profile: SubmissionTypeProfile) -> bool:
    if profile.accepts_any_format:
        return True
    if request.mime_type in profile.allowed_formats:
        return True
    ext = request.extension
    return any(ext in fmt.lower() for fmt in profile.allowed_formats)


def pre_validate(request: ValidationRequest, profile: SubmissionTypeProfile) -> PreValidation:
    """Format and size checks against the profile, computed before any analyzer call."""
    return PreValidation(
        format_valid=format_matches(request, profile),
        size_valid=request.size_bytes <= profile.max_size_bytes,
    )
