import pytest

from submission_validator.services.prevalidator import pre_validate
from submission_validator.services.registry import MB, default_registry


ALL_PROFILES = default_registry().profiles()


def test_resume_pdf_within_limit(registry, make_request):
    req = make_request()
    result = pre_validate(req, registry.lookup(req.submission_type))
    assert result.format_valid is True
    assert result.size_valid is True


def test_thesis_rejects_plain_text(registry, make_request):
    req = make_request(fileName="report.txt", fileType="text/plain", fileSize=10_000, submissionType="thesis")
    assert pre_validate(req, registry.lookup("thesis")).format_valid is False


def test_thesis_over_100mb_is_too_large(registry, make_request):
    req = make_request(fileName="thesis.pdf", fileSize=150_000_000, submissionType="thesis")
    result = pre_validate(req, registry.lookup("thesis"))
    assert result.format_valid is True
    assert result.size_valid is False


@pytest.mark.parametrize("size,expected", [(10 * MB, True), (50 * MB, True), (50 * MB + 1, False)])
def test_free_text_category_uses_others_profile(registry, make_request, size, expected):
    req = make_request(fileName="lab.xyz", fileType="application/x-whatever", fileSize=size,
                       submissionType="others", customType="lab report")
    result = pre_validate(req, registry.lookup(req.submission_type))
    assert result.format_valid is True
    assert result.size_valid is expected


@pytest.mark.parametrize("profile", ALL_PROFILES, ids=lambda p: p.key)
def test_size_ceiling_is_inclusive(make_request, profile):
    at_limit = make_request(fileSize=profile.max_size_bytes, submissionType=profile.key)
    over_limit = make_request(fileSize=profile.max_size_bytes + 1, submissionType=profile.key)
    assert pre_validate(at_limit, profile).size_valid is True
    assert pre_validate(over_limit, profile).size_valid is False


@pytest.mark.parametrize("profile", [p for p in ALL_PROFILES if p.allowed_formats], ids=lambda p: p.key)
def test_foreign_type_and_extension_are_rejected(make_request, profile):
    req = make_request(fileName="photo.png", fileType="image/png", submissionType=profile.key)
    assert pre_validate(req, profile).format_valid is False


def test_extension_match_rescues_unknown_mime(registry, make_request):
    req = make_request(fileName="Final_Thesis.PDF", fileType="application/octet-stream", submissionType="thesis")
    assert pre_validate(req, registry.lookup("thesis")).format_valid is True


def test_extension_match_is_substring_of_mime(registry, make_request):
    # "csv" appears in "text/csv"
    req = make_request(fileName="data.csv", fileType="", submissionType="spreadsheet")
    assert pre_validate(req, registry.lookup("spreadsheet")).format_valid is True


def test_trailing_dot_extension_matches_any_entry(registry, make_request):
    # the empty extension after a trailing dot is contained in every allowed entry
    req = make_request(fileName="report.", fileType="application/zip", submissionType="thesis")
    assert pre_validate(req, registry.lookup("thesis")).format_valid is True


def test_zero_byte_file_is_within_limit(registry, make_request):
    req = make_request(fileSize=0)
    assert pre_validate(req, registry.lookup("resume")).size_valid is True
