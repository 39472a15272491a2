from typing import Callable, Optional

from submission_validator.models.report_schema import ValidationReport
from submission_validator.models.submission_schema import ValidationRequest
from submission_validator.services import supabase_client
from submission_validator.services.analyzer_client import AnalyzerConfig, SemanticAnalyzerClient
from submission_validator.services.prevalidator import pre_validate
from submission_validator.services.prompt_builder import build_analysis_request
from submission_validator.services.registry import SubmissionTypeRegistry, load_registry
from submission_validator.services.report_normalizer import NormalizedReport, normalize
from submission_validator.utils.config import SUBMISSION_TYPES_FILE
from submission_validator.utils.logger import get_logger


logger = get_logger("validation-service")

Recorder = Callable[[str, ValidationReport], bool]


class ValidationService:
    """
    Runs one submission through pre-validation, prompt assembly, the analyzer
    call and normalization. Holds no per-request state.
    """

    def __init__(self, registry: SubmissionTypeRegistry, analyzer: SemanticAnalyzerClient,
                 recorder: Optional[Recorder] = None):
        self.registry = registry
        self.analyzer = analyzer
        self.recorder = recorder

    def validate(self, request: ValidationRequest) -> NormalizedReport:
        profile = self.registry.lookup(request.submission_type)
        pre = pre_validate(request, profile)
        logger.info(
            "Validating %s as %s (profile=%s, format_valid=%s, size_valid=%s)",
            request.file_name, request.declared_category, profile.key, pre.format_valid, pre.size_valid,
        )

        prompt = build_analysis_request(request, profile, pre)
        outcome = self.analyzer.analyze(prompt)
        result = normalize(outcome, request, profile, pre)

        if result.degraded:
            logger.warning("Returning fallback report for %s (%s)", request.file_name, result.reason)
        else:
            logger.info("Validation complete for %s: %s (%d)", request.file_name,
                        result.report.status, result.report.score)

        if request.submission_id and self.recorder:
            self.recorder(request.submission_id, result.report)
        return result

    def report_for(self, request: ValidationRequest) -> ValidationReport:
        return self.validate(request).report


def build_service(registry: Optional[SubmissionTypeRegistry] = None) -> ValidationService:
    """Service wired from process configuration."""
    return ValidationService(
        registry=registry or load_registry(SUBMISSION_TYPES_FILE),
        analyzer=SemanticAnalyzerClient(AnalyzerConfig.from_env()),
        recorder=supabase_client.record_validation,
    )
