"""
Submission type registry: the per-category rules a file is checked against.

Built once at start-up and passed to the validation service; lookups never fail,
anything unknown resolves to the ``others`` profile.
"""

from dataclasses import dataclass, asdict
from pathlib import Path
from types import MappingProxyType
from typing import Any, Iterable, Mapping, Optional
import json

from pydantic import ValidationError

from submission_validator.models.submission_schema import ProfileOverride
from submission_validator.utils.logger import get_logger


logger = get_logger("registry")

FALLBACK_KEY = "others"

MB = 1024 * 1024

PDF = "application/pdf"
DOC = "application/msword"
DOCX = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
PPT = "application/vnd.ms-powerpoint"
PPTX = "application/vnd.openxmlformats-officedocument.presentationml.presentation"
XLS = "application/vnd.ms-excel"
XLSX = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


@dataclass(frozen=True)
class SubmissionTypeProfile:
    key: str
    allowed_formats: tuple[str, ...]
    max_size_bytes: int
    naming_convention: str
    content_expectations: str
    label: str = ""

    @property
    def accepts_any_format(self) -> bool:
        return not self.allowed_formats

    def to_dict(self) -> dict[str, Any]:
        d = asdict(self)
        d["allowed_formats"] = list(self.allowed_formats)
        return d


_DEFAULT_PROFILES = (
    SubmissionTypeProfile(
        key="resume",
        label="Resume",
        allowed_formats=(PDF, DOC, DOCX),
        max_size_bytes=5 * MB,
        naming_convention="FirstName_LastName_Resume or Resume_FirstName_LastName",
        content_expectations="Should contain: contact info, work experience, education, skills. "
                             "Professional formatting with clear sections.",
    ),
    SubmissionTypeProfile(
        key="cv",
        label="Curriculum Vitae",
        allowed_formats=(PDF, DOC, DOCX),
        max_size_bytes=10 * MB,
        naming_convention="FirstName_LastName_CV or CV_FirstName_LastName",
        content_expectations="Should contain: detailed work history, publications, research, education, "
                             "certifications. Academic formatting preferred.",
    ),
    SubmissionTypeProfile(
        key="cover_letter",
        label="Cover Letter",
        allowed_formats=(PDF, DOC, DOCX),
        max_size_bytes=2 * MB,
        naming_convention="CoverLetter_CompanyName or FirstName_LastName_CoverLetter",
        content_expectations="Should be addressed to specific company/role, express interest, "
                             "highlight relevant experience, include call to action.",
    ),
    SubmissionTypeProfile(
        key="college_assignment",
        label="College Assignment",
        allowed_formats=(PDF, DOC, DOCX, "text/plain"),
        max_size_bytes=25 * MB,
        naming_convention="SubjectCode_AssignmentNumber_StudentID or StudentName_Assignment_Date",
        content_expectations="Should include title page, student details, proper citations, "
                             "bibliography if applicable.",
    ),
    SubmissionTypeProfile(
        key="research_paper",
        label="Research Paper",
        allowed_formats=(PDF, DOCX),
        max_size_bytes=50 * MB,
        naming_convention="ResearchTitle_AuthorName or Paper_Topic_Date",
        content_expectations="Should include abstract, introduction, methodology, results, discussion, "
                             "conclusion, references. Follow academic formatting (APA, MLA, etc.).",
    ),
    SubmissionTypeProfile(
        key="thesis",
        label="Thesis / Dissertation",
        allowed_formats=(PDF,),
        max_size_bytes=100 * MB,
        naming_convention="Thesis_Title_AuthorName_Year",
        content_expectations="Should include title page, abstract, acknowledgements, table of contents, "
                             "chapters, bibliography, appendices.",
    ),
    SubmissionTypeProfile(
        key="project_report",
        label="Project Report",
        allowed_formats=(PDF, DOC, DOCX),
        max_size_bytes=50 * MB,
        naming_convention="ProjectName_Report_Date or TeamName_ProjectReport",
        content_expectations="Should include project overview, objectives, methodology, "
                             "implementation details, results, conclusion.",
    ),
    SubmissionTypeProfile(
        key="presentation",
        label="Presentation",
        allowed_formats=(PPT, PPTX, PDF),
        max_size_bytes=50 * MB,
        naming_convention="Topic_Presentation or PresentationTitle_Author",
        content_expectations="Should have clear slides, consistent formatting, visual aids, "
                             "speaker notes if applicable.",
    ),
    SubmissionTypeProfile(
        key="spreadsheet",
        label="Spreadsheet",
        allowed_formats=(XLS, XLSX, "text/csv"),
        max_size_bytes=25 * MB,
        naming_convention="DataTitle_Date or FileName_Version",
        content_expectations="Should have proper headers, organized data, formulas documentation if applicable.",
    ),
    SubmissionTypeProfile(
        key=FALLBACK_KEY,
        label="Others",
        allowed_formats=(),
        max_size_bytes=50 * MB,
        naming_convention="DescriptiveName_Date",
        content_expectations="General document formatting and organization expected.",
    ),
)


class SubmissionTypeRegistry:
    """Immutable mapping of category key -> profile with an ``others`` fallback."""

    def __init__(self, profiles: Iterable[SubmissionTypeProfile]):
        by_key: dict[str, SubmissionTypeProfile] = {}
        for p in profiles:
            key = p.key.strip().lower()
            if key in by_key:
                raise ValueError(f"duplicate submission type: {key}")
            by_key[key] = p
        if FALLBACK_KEY not in by_key:
            raise ValueError("registry requires an 'others' profile")
        self._profiles = MappingProxyType(by_key)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Mapping[str, Any]],
                     base: Optional["SubmissionTypeRegistry"] = None) -> "SubmissionTypeRegistry":
        """
        Build from ``{key: {formats, maxSize, naming, contentExpectations, label?}}``.
        Entries override same-named profiles of ``base``; the rest of ``base`` is kept.
        """
        merged: dict[str, SubmissionTypeProfile] = dict(base._profiles) if base else {}
        for raw_key, spec in data.items():
            key = raw_key.strip().lower()
            try:
                entry = ProfileOverride.model_validate(spec)
            except ValidationError as e:
                err = e.errors()[0]
                field = ".".join(str(p) for p in err["loc"]) or "entry"
                raise ValueError(f"submission type {raw_key!r}: {field}: {err['msg']}") from e
            merged[key] = SubmissionTypeProfile(
                key=key,
                allowed_formats=tuple(entry.formats or ()),
                max_size_bytes=entry.max_size,
                naming_convention=entry.naming,
                content_expectations=entry.content_expectations,
                label=entry.label,
            )
        return cls(merged.values())

    def lookup(self, category: Optional[str]) -> SubmissionTypeProfile:
        key = (category or "").strip().lower()
        return self._profiles.get(key) or self._profiles[FALLBACK_KEY]

    def __contains__(self, category: object) -> bool:
        return isinstance(category, str) and category.strip().lower() in self._profiles

    def profiles(self) -> list[SubmissionTypeProfile]:
        return list(self._profiles.values())


def default_registry() -> SubmissionTypeRegistry:
    return SubmissionTypeRegistry(_DEFAULT_PROFILES)


def load_registry(path: Optional[str | Path] = None) -> SubmissionTypeRegistry:
    """Built-in registry, with overrides from a JSON file merged on top when ``path`` is given."""
    base = default_registry()
    if not path:
        return base
    path = Path(path)
    data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError(f"{path}: expected a JSON object keyed by submission type")
    registry = SubmissionTypeRegistry.from_mapping(data, base=base)
    logger.info("Loaded %d submission type override(s) from %s", len(data), path)
    return registry
