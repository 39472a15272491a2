import pytest

from submission_validator.services.analyzer_client import AnalyzerFailure, FailureKind, SemanticAnalyzerClient
from submission_validator.services.errors import ConfigurationError, RateLimited
from submission_validator.services.validation_service import build_service


def test_happy_path_returns_analyzer_report(service, analyzer, make_request, valid_report_json):
    analyzer.reply(valid_report_json)
    result = service.validate(make_request())

    assert result.degraded is False
    assert result.report.status == "valid"
    assert result.report.score == 92
    assert len(analyzer.prompts) == 1
    assert "- Format Valid: true" in analyzer.prompts[0].user


def test_pre_validation_feeds_fallback(service, analyzer, make_request):
    analyzer.reply("Sorry, I cannot help.")
    req = make_request(fileName="report.txt", fileType="text/plain", fileSize=10_000, submissionType="thesis")
    result = service.validate(req)

    assert result.degraded is True
    assert result.report.status == "warning"
    assert result.report.format_analysis.is_acceptable is False
    assert result.report.size_assessment.is_acceptable is True


def test_unknown_category_uses_others_rules(service, analyzer, make_request):
    analyzer.reply("")
    result = service.validate(make_request(fileName="notes.xyz", fileType="", submissionType="lab report"))
    assert "Any format accepted" in analyzer.prompts[0].user
    assert result.report.format_analysis.is_acceptable is True
    assert result.report.size_assessment.max_recommended_size == "50 MB"


def test_analyzer_failure_is_surfaced(service, analyzer, make_request, recorded):
    analyzer.outcomes.append(AnalyzerFailure(FailureKind.RATE_LIMITED, status_code=429))
    with pytest.raises(RateLimited):
        service.validate(make_request(submissionId="sub-1"))
    assert recorded == []


def test_result_is_mirrored_when_submission_id_given(service, analyzer, make_request, recorded, valid_report_json):
    analyzer.reply(valid_report_json)
    result = service.validate(make_request(submissionId="sub-1"))
    assert recorded == [("sub-1", result.report)]


def test_result_is_not_mirrored_without_submission_id(service, analyzer, make_request, recorded):
    analyzer.reply("nope")
    service.validate(make_request())
    assert recorded == []


def test_report_for_returns_report_only(service, analyzer, make_request, valid_report_json):
    analyzer.reply(valid_report_json)
    assert service.report_for(make_request()).score == 92


def test_build_service_from_env_without_key_is_config_error(make_request, monkeypatch):
    def fail_post(*args, **kwargs):
        raise AssertionError("no network call expected")

    monkeypatch.setattr("submission_validator.services.analyzer_client.requests.post", fail_post)
    svc = build_service()
    assert isinstance(svc.analyzer, SemanticAnalyzerClient)
    with pytest.raises(ConfigurationError):
        svc.validate(make_request())
