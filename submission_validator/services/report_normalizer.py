"""
Turns the analyzer's raw reply into a ``ValidationReport``.

A reply that parses and matches the report schema is used as-is. Anything
else the analyzer returned (prose, truncated JSON, JSON of the wrong shape)
is replaced by a fallback report built only from the pre-validation results,
marked by ``status="warning"`` and ``score=50``. Analyzer call failures are
not absorbed: they are raised as their error class.
"""

import json
import re
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from pydantic import ValidationError

from submission_validator.models.report_schema import (
    DocumentAnalysis,
    FormatAnalysis,
    NamingConvention,
    SizeAssessment,
    ValidationReport,
)
from submission_validator.models.submission_schema import ValidationRequest
from submission_validator.services.analyzer_client import AnalyzerFailure, AnalyzerOutcome
from submission_validator.services.prevalidator import PreValidation
from submission_validator.services.prompt_builder import format_megabytes
from submission_validator.services.registry import SubmissionTypeProfile
from submission_validator.utils.logger import get_logger


logger = get_logger("report-normalizer")

_FENCE_MARKER = re.compile(r"```(?:json|JSON)?[ \t]*\n?")

DEGRADED_MARKER = "AI analysis incomplete - basic validation performed"
FALLBACK_SCORE = 50
FALLBACK_BEST_PRACTICES = (
    "Ensure file follows submission guidelines",
    "Use appropriate file naming",
    "Keep file size reasonable",
)


class ReportParseError(ValueError):
    def __init__(self, code: str, details: Optional[Mapping[str, Any]] = None):
        super().__init__(code)
        self.code = code
        self.details = dict(details) if details else {}


@dataclass(frozen=True)
class NormalizedReport:
    report: ValidationReport
    degraded: bool = False
    reason: str = ""


def strip_code_fences(text: str) -> str:
    return _FENCE_MARKER.sub("", text).strip()


def parse_report(raw_text: Optional[str]) -> ValidationReport:
    cleaned = strip_code_fences(raw_text or "")
    if not cleaned:
        raise ReportParseError("empty_content")
    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as e:
        raise ReportParseError("invalid_json", {"error": str(e)}) from e
    if not isinstance(data, dict):
        raise ReportParseError("not_an_object", {"type": type(data).__name__})
    try:
        return ValidationReport.from_reply(data)
    except ValidationError as e:
        raise ReportParseError("schema_mismatch", {"errors": e.error_count()}) from e


def build_fallback_report(
    request: ValidationRequest,
    profile: SubmissionTypeProfile,
    pre_validation: PreValidation,
) -> ValidationReport:
    return ValidationReport(
        status="warning",
        score=FALLBACK_SCORE,
        document_analysis=DocumentAnalysis(
            detected_type=request.mime_type,
            matches_submission_type=True,
            match_percentage=50,
            analysis="Unable to fully analyze document content",
        ),
        format_analysis=FormatAnalysis(
            is_acceptable=pre_validation.format_valid,
            current_format=request.mime_type,
            details="Format is acceptable" if pre_validation.format_valid else "Format may not be optimal",
            recommended_formats=list(profile.allowed_formats[:3]),
        ),
        naming_convention=NamingConvention(
            is_acceptable=True,
            issues=[],
            suggested_name=request.file_name,
        ),
        size_assessment=SizeAssessment(
            is_acceptable=pre_validation.size_valid,
            details="Size is within limits" if pre_validation.size_valid else "File may be too large",
            current_size=f"{format_megabytes(request.size_bytes)} MB",
            max_recommended_size=f"{format_megabytes(profile.max_size_bytes, digits=0)} MB",
        ),
        issues=[DEGRADED_MARKER],
        corrections=[],
        best_practices=list(FALLBACK_BEST_PRACTICES),
    )


def normalize(
    outcome: AnalyzerOutcome,
    request: ValidationRequest,
    profile: SubmissionTypeProfile,
    pre_validation: PreValidation,
) -> NormalizedReport:
    if isinstance(outcome, AnalyzerFailure):
        raise outcome.to_error()
    try:
        report = parse_report(outcome.raw_text)
    except ReportParseError as e:
        logger.warning("Failed to parse AI response (%s): %.200r", e.code, outcome.raw_text)
        return NormalizedReport(
            report=build_fallback_report(request, profile, pre_validation),
            degraded=True,
            reason=e.code,
        )
    return NormalizedReport(report=report)
