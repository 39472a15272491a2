import copy

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr
from pydantic.alias_generators import to_camel
from typing import Literal, Optional, Union


ReportStatus = Literal["valid", "invalid", "warning"]


class _ReportPart(BaseModel):
    # wire format is camelCase; unknown keys from the analyzer are kept as-is
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")


class DocumentAnalysis(_ReportPart):
    detected_type: str
    matches_submission_type: bool
    match_percentage: Union[int, float] = Field(..., ge=0, le=100)
    analysis: str


class FormatAnalysis(_ReportPart):
    is_acceptable: bool
    current_format: Optional[str] = None
    details: str
    recommended_formats: list[str]


class NamingConvention(_ReportPart):
    is_acceptable: bool
    issues: list[str]
    suggested_name: str


class SizeAssessment(_ReportPart):
    is_acceptable: bool
    details: str
    current_size: Optional[str] = None
    max_recommended_size: str


class ValidationReport(_ReportPart):
    status: ReportStatus
    score: int = Field(..., ge=0, le=100)
    document_analysis: Optional[DocumentAnalysis] = None
    format_analysis: FormatAnalysis
    naming_convention: NamingConvention
    size_assessment: SizeAssessment
    issues: list[str]
    corrections: list[str]
    best_practices: list[str]

    # JSON exactly as received, for reports built by from_reply
    _source: Optional[dict] = PrivateAttr(default=None)

    @classmethod
    def from_reply(cls, data: dict) -> "ValidationReport":
        report = cls.model_validate(data)
        report._source = copy.deepcopy(data)
        return report

    def to_payload(self) -> dict:
        if self._source is not None:
            return copy.deepcopy(self._source)
        return self.model_dump(by_alias=True, mode="json", exclude_unset=True)
