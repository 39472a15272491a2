import copy
import json

import pytest

from submission_validator.models.submission_schema import ValidationRequest
from submission_validator.server import create_app
from submission_validator.services.analyzer_client import AnalyzerSuccess
from submission_validator.services.registry import default_registry
from submission_validator.services.validation_service import ValidationService


VALID_REPORT = {
    "status": "valid",
    "score": 92,
    "documentAnalysis": {
        "detectedType": "Resume",
        "matchesSubmissionType": True,
        "matchPercentage": 95,
        "analysis": "Looks like a one-page professional resume.",
    },
    "formatAnalysis": {
        "isAcceptable": True,
        "currentFormat": "application/pdf",
        "details": "PDF is the preferred format for resumes.",
        "recommendedFormats": ["application/pdf"],
    },
    "namingConvention": {
        "isAcceptable": False,
        "issues": ["File name does not include the candidate's name"],
        "suggestedName": "Jane_Doe_Resume.pdf",
    },
    "sizeAssessment": {
        "isAcceptable": True,
        "details": "Well under the limit.",
        "currentSize": "0.95 MB",
        "maxRecommendedSize": "5 MB",
    },
    "issues": ["Generic file name"],
    "corrections": ["Rename the file to Jane_Doe_Resume.pdf"],
    "bestPractices": ["Keep resumes to two pages or fewer"],
}


class FakeAnalyzer:
    """Stand-in for SemanticAnalyzerClient; replays queued outcomes and records prompts."""

    def __init__(self, *outcomes):
        self.outcomes = list(outcomes)
        self.prompts = []
        self.is_configured = True

    def reply(self, text: str) -> None:
        self.outcomes.append(AnalyzerSuccess(text))

    def analyze(self, prompt):
        self.prompts.append(prompt)
        outcome = self.outcomes.pop(0) if self.outcomes else AnalyzerSuccess("")
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch):
    for name in (
        "SUPABASE_URL",
        "SUPABASE_ANON_KEY",
        "SUPABASE_SERVICE_ROLE_KEY",
        "BACKEND_API_KEY",
        "AI_GATEWAY_API_KEY",
        "AI_GATEWAY_URL",
        "AI_GATEWAY_MODEL",
        "AI_GATEWAY_TIMEOUT",
        "AI_GATEWAY_MAX_RETRIES",
        "AI_GATEWAY_BACKOFF_SCHEDULE",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr("submission_validator.services.supabase_client._client", None)


@pytest.fixture
def valid_report():
    return copy.deepcopy(VALID_REPORT)


@pytest.fixture
def valid_report_json(valid_report):
    return json.dumps(valid_report)


@pytest.fixture
def registry():
    return default_registry()


@pytest.fixture
def make_request():
    def _make(**overrides):
        data = {
            "fileName": "resume.pdf",
            "fileType": "application/pdf",
            "fileSize": 1_000_000,
            "submissionType": "resume",
        }
        data.update(overrides)
        return ValidationRequest.model_validate(data)
    return _make


@pytest.fixture
def analyzer():
    return FakeAnalyzer()


@pytest.fixture
def recorded():
    return []


@pytest.fixture
def service(registry, analyzer, recorded):
    def recorder(submission_id, report):
        recorded.append((submission_id, report))
        return True
    return ValidationService(registry, analyzer, recorder=recorder)


@pytest.fixture
def app(service):
    return create_app(service)


@pytest.fixture
def client(app, monkeypatch):
    monkeypatch.setenv("BACKEND_API_KEY", "test-key")
    return app.test_client()


@pytest.fixture
def auth_headers():
    return {"Authorization": "Bearer test-key"}
