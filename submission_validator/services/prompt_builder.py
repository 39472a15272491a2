"""
Prompt assembly for the semantic analyzer.

Pure data transformation: the same request, profile and pre-validation
always produce the same prompt text.
"""

from dataclasses import dataclass
from typing import Any, Dict, List

from submission_validator.models.submission_schema import ValidationRequest
from submission_validator.services.prevalidator import PreValidation
from submission_validator.services.registry import SubmissionTypeProfile, MB
from submission_validator.utils.config import EXCERPT_MAX_CHARS


SYSTEM_INSTRUCTION = (
    "You are a professional document submission validator. Analyze submissions thoroughly "
    "and provide actionable feedback. Always respond with valid JSON only, no markdown formatting."
)


REPORT_SHAPE = """{
  "status": "valid" | "invalid" | "warning",
  "score": number (0-100),
  "documentAnalysis": {
    "detectedType": string,
    "matchesSubmissionType": boolean,
    "matchPercentage": number,
    "analysis": string
  },
  "formatAnalysis": {
    "isAcceptable": boolean,
    "currentFormat": string,
    "details": string,
    "recommendedFormats": string[]
  },
  "namingConvention": {
    "isAcceptable": boolean,
    "issues": string[],
    "suggestedName": string
  },
  "sizeAssessment": {
    "isAcceptable": boolean,
    "details": string,
    "currentSize": string,
    "maxRecommendedSize": string
  },
  "issues": string[],
  "corrections": string[],
  "bestPractices": string[]
}"""


PROMPT_TEMPLATE = """You are an expert document submission validator for academic and corporate environments. Perform a comprehensive analysis of this submission.

## FILE INFORMATION
- File Name: %(file_name)s
- File Type: %(mime_type)s
- File Size: %(size_kb)s KB (%(size_mb)s MB)
- Submission Type: %(category)s
- File Extension: %(extension)s

## SUBMISSION TYPE REQUIREMENTS
- Expected Formats: %(formats)s
- Maximum Size: %(max_mb)s MB
- Naming Convention: %(naming)s
- Content Expectations: %(expectations)s

## INITIAL CHECKS
- Format Valid: %(format_valid)s
- Size Valid: %(size_valid)s
%(excerpt_block)s
## YOUR ANALYSIS TASKS

### 1. Document Analysis
- What type of content is in the file based on the name and type?
- Does it match the selected submission type (%(category)s)?
- Rate the match between content and submission type (0-100%%)

### 2. Format Assessment
- Is the file format appropriate for %(category)s?
- What would be better formats if current is not ideal?
- Any compatibility concerns?

### 3. Naming Convention Analysis
- Does the filename follow professional standards?
- What issues exist in the current naming?
- Provide a suggested better filename

### 4. Size Assessment
- Is the file size appropriate for this type?
- Any concerns about the file being too large or too small?

### 5. Quality Improvements
- What specific improvements would make this submission better?
- What are common issues to avoid for this submission type?
- Best practices to follow

Respond with a single JSON object ONLY, no prose and no markdown code fences, with this exact structure:
%(shape)s"""


@dataclass(frozen=True)
class AnalysisPrompt:
    system: str
    user: str

    def messages(self) -> List[Dict[str, Any]]:
        return [
            {"role": "system", "content": self.system},
            {"role": "user", "content": self.user},
        ]


def format_megabytes(size_bytes: int, digits: int = 2) -> str:
    return f"{size_bytes / MB:.{digits}f}"


def _excerpt_block(excerpt: str | None) -> str:
    if not excerpt:
        return ""
    return (
        f"\n## FILE CONTENT PREVIEW (First {EXCERPT_MAX_CHARS} characters)\n"
        f"{excerpt[:EXCERPT_MAX_CHARS]}\n"
    )


def build_analysis_request(
    request: ValidationRequest,
    profile: SubmissionTypeProfile,
    pre_validation: PreValidation,
) -> AnalysisPrompt:
    user = PROMPT_TEMPLATE % {
        "file_name": request.file_name,
        "mime_type": request.mime_type or "unknown",
        "size_kb": f"{request.size_bytes / 1024:.2f}",
        "size_mb": format_megabytes(request.size_bytes),
        "category": request.declared_category,
        "extension": request.extension,
        "formats": ", ".join(profile.allowed_formats) or "Any format accepted",
        "max_mb": format_megabytes(profile.max_size_bytes, digits=0),
        "naming": profile.naming_convention,
        "expectations": profile.content_expectations,
        "format_valid": str(pre_validation.format_valid).lower(),
        "size_valid": str(pre_validation.size_valid).lower(),
        "excerpt_block": _excerpt_block(request.content_excerpt),
        "shape": REPORT_SHAPE,
    }
    return AnalysisPrompt(system=SYSTEM_INSTRUCTION, user=user)
