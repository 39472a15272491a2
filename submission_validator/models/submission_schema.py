from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional


class ValidationRequest(BaseModel):
    """Inbound payload from the presentation layer: metadata of the file to check."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    file_name: str = Field(..., alias="fileName")
    mime_type: str = Field("", alias="fileType")
    size_bytes: int = Field(..., alias="fileSize", ge=0)
    submission_type: str = Field("others", alias="submissionType")
    custom_type: Optional[str] = Field(None, alias="customType")
    content_excerpt: Optional[str] = Field(None, alias="fileContent")
    submission_id: Optional[str] = Field(None, alias="submissionId")  # row to mirror the result into

    @field_validator("file_name")
    @classmethod
    def _file_name_present(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("fileName must not be empty")
        return v

    @field_validator("mime_type", "submission_type", mode="before")
    @classmethod
    def _none_as_blank(cls, v):
        return "" if v is None else v

    @property
    def declared_category(self) -> str:
        """Free-text category for ``others`` submissions, otherwise the type key."""
        if self.submission_type.strip().lower() == "others" and self.custom_type and self.custom_type.strip():
            return self.custom_type.strip()
        return self.submission_type.strip() or "others"

    @property
    def extension(self) -> str:
        return self.file_name.rsplit(".", 1)[-1].lower()


class ProfileOverride(BaseModel):
    """One entry of the submission types override file."""

    formats: Optional[list[str]] = None
    max_size: int = Field(..., alias="maxSize", ge=0)
    naming: str = ""
    content_expectations: str = Field("", alias="contentExpectations")
    label: str = ""
