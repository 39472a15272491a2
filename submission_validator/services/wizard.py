"""
Step sequencing for one validation session.

    SELECTING_FILE -> SELECTING_CATEGORY -> READY_TO_VALIDATE -> VALIDATING -> RESULTS
                                                                                  |
    SELECTING_FILE <------------------------- reset() ----------------------------+

``back()`` steps from READY_TO_VALIDATE to SELECTING_CATEGORY and from there to
SELECTING_FILE. Choosing ``others`` only moves on once a free-text category is
given. A session runs at most one validation at a time.
"""

import threading
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Protocol

from submission_validator.models.report_schema import ValidationReport
from submission_validator.models.submission_schema import ValidationRequest
from submission_validator.services.errors import SubmissionValidationError
from submission_validator.services.registry import FALLBACK_KEY
from submission_validator.utils.logger import get_logger


logger = get_logger("wizard")


class WizardState(str, Enum):
    SELECTING_FILE = "selecting_file"
    SELECTING_CATEGORY = "selecting_category"
    READY_TO_VALIDATE = "ready_to_validate"
    VALIDATING = "validating"
    RESULTS = "results"


class WizardTransitionError(RuntimeError):
    pass


class Validator(Protocol):
    def report_for(self, request: ValidationRequest) -> ValidationReport: ...


@dataclass(frozen=True)
class SelectedFile:
    name: str
    mime_type: str
    size_bytes: int
    content_excerpt: Optional[str] = None


class ValidationWizard:

    def __init__(self, validator: Validator):
        self._validator = validator
        self._in_flight = threading.Lock()
        self._clear()

    def _clear(self) -> None:
        self.state = WizardState.SELECTING_FILE
        self.file: Optional[SelectedFile] = None
        self.category = ""
        self.custom_type = ""
        self.report: Optional[ValidationReport] = None
        self.error: Optional[str] = None

    def _require(self, action: str, *allowed: WizardState) -> None:
        if self.state not in allowed:
            raise WizardTransitionError(f"cannot {action} while {self.state.value}")

    @property
    def is_others(self) -> bool:
        return self.category == FALLBACK_KEY

    def select_file(self, file: SelectedFile) -> None:
        self._require("select a file", WizardState.SELECTING_FILE)
        self.file = file
        self.report = None
        self.error = None
        self.state = WizardState.SELECTING_CATEGORY

    def choose_category(self, category: str, custom_type: Optional[str] = None) -> None:
        self._require("choose a category", WizardState.SELECTING_CATEGORY)
        category = (category or "").strip()
        if not category:
            raise WizardTransitionError("category must not be empty")
        self.category = category
        if self.is_others:
            if custom_type is not None:
                self.set_custom_type(custom_type)
            return
        self.custom_type = ""
        self.state = WizardState.READY_TO_VALIDATE

    def set_custom_type(self, text: str) -> None:
        self._require("set a custom type", WizardState.SELECTING_CATEGORY)
        if not self.is_others:
            raise WizardTransitionError("custom type only applies to 'others'")
        self.custom_type = (text or "").strip()
        if self.custom_type:
            self.state = WizardState.READY_TO_VALIDATE

    def back(self) -> None:
        if self.state is WizardState.READY_TO_VALIDATE:
            self.state = WizardState.SELECTING_CATEGORY
        elif self.state is WizardState.SELECTING_CATEGORY:
            self.state = WizardState.SELECTING_FILE
        else:
            raise WizardTransitionError(f"cannot go back while {self.state.value}")

    def build_request(self) -> ValidationRequest:
        if self.file is None:
            raise WizardTransitionError("no file selected")
        return ValidationRequest(
            file_name=self.file.name,
            mime_type=self.file.mime_type,
            size_bytes=self.file.size_bytes,
            submission_type=self.category,
            custom_type=self.custom_type or None,
            content_excerpt=self.file.content_excerpt,
        )

    def validate(self) -> Optional[ValidationReport]:
        """
        Runs the validation and moves to RESULTS. A validation error leaves the
        session in RESULTS with ``error`` set and no report.
        """
        if not self._in_flight.acquire(blocking=False):
            raise WizardTransitionError("a validation is already in progress")
        try:
            self._require("validate", WizardState.READY_TO_VALIDATE)
            request = self.build_request()
            self.state = WizardState.VALIDATING
            try:
                self.report = self._validator.report_for(request)
                self.error = None
            except SubmissionValidationError as e:
                logger.error("Validation error: %s", e.message)
                self.report = None
                self.error = f"Failed to validate file: {e.message}"
            except Exception:
                self.state = WizardState.READY_TO_VALIDATE
                raise
            self.state = WizardState.RESULTS
            return self.report
        finally:
            self._in_flight.release()

    def reset(self) -> None:
        if self.state is WizardState.VALIDATING:
            raise WizardTransitionError("cannot reset while validating")
        self._clear()
