import dataclasses
import json

import pytest

from submission_validator.services.registry import (
    MB,
    SubmissionTypeProfile,
    SubmissionTypeRegistry,
    default_registry,
    load_registry,
)


def test_lookup_known_category(registry):
    profile = registry.lookup("thesis")
    assert profile.key == "thesis"
    assert profile.allowed_formats == ("application/pdf",)
    assert profile.max_size_bytes == 100 * MB


@pytest.mark.parametrize("category", ["lab report", "academic_project", "", None, "   "])
def test_unknown_or_missing_category_resolves_to_others(registry, category):
    assert registry.lookup(category).key == "others"


def test_lookup_ignores_case_and_whitespace(registry):
    assert registry.lookup("  Resume ").key == "resume"


def test_others_accepts_any_format_up_to_50mb(registry):
    others = registry.lookup("others")
    assert others.allowed_formats == ()
    assert others.accepts_any_format
    assert others.max_size_bytes == 50 * MB


def test_default_registry_has_one_profile_per_key():
    keys = [p.key for p in default_registry().profiles()]
    assert len(keys) == len(set(keys))
    assert "others" in keys
    assert len(keys) == 10


def test_profiles_are_immutable(registry):
    with pytest.raises(dataclasses.FrozenInstanceError):
        registry.lookup("resume").max_size_bytes = 1


def test_registry_requires_others_profile():
    resume = default_registry().lookup("resume")
    with pytest.raises(ValueError):
        SubmissionTypeRegistry([resume])


def test_registry_rejects_duplicate_keys():
    others = default_registry().lookup("others")
    with pytest.raises(ValueError):
        SubmissionTypeRegistry([others, others])


def test_from_mapping_overrides_and_keeps_base():
    base = default_registry()
    reg = SubmissionTypeRegistry.from_mapping(
        {
            "Lab_Report": {
                "formats": ["application/pdf"],
                "maxSize": 10 * MB,
                "naming": "Lab_Number_Name",
                "contentExpectations": "Aim, method, results.",
            },
            "resume": {"formats": ["application/pdf"], "maxSize": 1 * MB},
        },
        base=base,
    )
    assert reg.lookup("lab_report").max_size_bytes == 10 * MB
    assert reg.lookup("resume").allowed_formats == ("application/pdf",)
    assert reg.lookup("thesis") == base.lookup("thesis")
    assert "lab_report" in reg


def test_load_registry_without_path_is_default():
    assert [p.key for p in load_registry(None).profiles()] == [p.key for p in default_registry().profiles()]


def test_load_registry_from_file(tmp_path):
    path = tmp_path / "types.json"
    path.write_text(json.dumps({"poster": {"formats": ["image/png"], "maxSize": 20 * MB, "label": "Poster"}}))
    reg = load_registry(path)
    poster = reg.lookup("poster")
    assert isinstance(poster, SubmissionTypeProfile)
    assert poster.label == "Poster"
    assert reg.lookup("unknown").key == "others"


def test_load_registry_rejects_non_object(tmp_path):
    path = tmp_path / "types.json"
    path.write_text("[]")
    with pytest.raises(ValueError):
        load_registry(path)


@pytest.mark.parametrize(
    "entry,field",
    [
        ({"formats": "application/pdf", "maxSize": MB}, "formats"),
        ({"formats": ["application/pdf"]}, "maxSize"),
        ({"maxSize": -1}, "maxSize"),
        ("not an object", "entry"),
    ],
)
def test_from_mapping_rejects_malformed_entries(entry, field):
    with pytest.raises(ValueError) as exc:
        SubmissionTypeRegistry.from_mapping({"poster": entry}, base=default_registry())
    assert "'poster'" in str(exc.value)
    assert field in str(exc.value)


def test_load_registry_names_bad_entry(tmp_path):
    path = tmp_path / "types.json"
    path.write_text(json.dumps({"poster": {"formats": "image/png"}}))
    with pytest.raises(ValueError, match="poster"):
        load_registry(path)


def test_profile_to_dict_lists_formats(registry):
    d = registry.lookup("resume").to_dict()
    assert d["key"] == "resume"
    assert isinstance(d["allowed_formats"], list)
