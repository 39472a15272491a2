import time

import requests
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence, Union

from submission_validator.services.errors import (
    ConfigurationError,
    PaymentRequired,
    RateLimited,
    SubmissionValidationError,
    UpstreamError,
)
from submission_validator.services.prompt_builder import AnalysisPrompt
from submission_validator.utils.config import (
    _env,
    DEFAULT_AI_GATEWAY_MODEL,
    DEFAULT_AI_GATEWAY_TIMEOUT,
    DEFAULT_AI_GATEWAY_URL,
)
from submission_validator.utils.logger import get_logger


logger = get_logger("analyzer-client")

MISSING_KEY_MESSAGE = "AI_GATEWAY_API_KEY is not configured"
DEFAULT_BACKOFF_SCHEDULE = "1,2,4"


class FailureKind(str, Enum):
    CONFIGURATION = "configuration"
    RATE_LIMITED = "rate_limited"
    PAYMENT_REQUIRED = "payment_required"
    UPSTREAM = "upstream"


@dataclass(frozen=True)
class AnalyzerSuccess:
    raw_text: str


@dataclass(frozen=True)
class AnalyzerFailure:
    kind: FailureKind
    detail: str = ""
    status_code: Optional[int] = None

    def to_error(self) -> SubmissionValidationError:
        if self.kind is FailureKind.CONFIGURATION:
            return ConfigurationError(self.detail or MISSING_KEY_MESSAGE)
        if self.kind is FailureKind.RATE_LIMITED:
            return RateLimited()
        if self.kind is FailureKind.PAYMENT_REQUIRED:
            return PaymentRequired()
        return UpstreamError(detail=self.detail, upstream_status=self.status_code)


AnalyzerOutcome = Union[AnalyzerSuccess, AnalyzerFailure]


@dataclass(frozen=True)
class AnalyzerConfig:
    api_key: Optional[str]
    url: str = DEFAULT_AI_GATEWAY_URL
    model: str = DEFAULT_AI_GATEWAY_MODEL
    timeout: float = DEFAULT_AI_GATEWAY_TIMEOUT
    max_retries: int = 0
    backoff_schedule: tuple[float, ...] = (1.0, 2.0, 4.0)

    @classmethod
    def from_env(cls) -> "AnalyzerConfig":
        return cls(
            api_key=_env("AI_GATEWAY_API_KEY"),
            url=_env("AI_GATEWAY_URL", DEFAULT_AI_GATEWAY_URL),
            model=_env("AI_GATEWAY_MODEL", DEFAULT_AI_GATEWAY_MODEL),
            timeout=float(_env("AI_GATEWAY_TIMEOUT", str(DEFAULT_AI_GATEWAY_TIMEOUT))),
            max_retries=int(_env("AI_GATEWAY_MAX_RETRIES", "0")),
            backoff_schedule=parse_backoff_schedule(_env("AI_GATEWAY_BACKOFF_SCHEDULE", DEFAULT_BACKOFF_SCHEDULE)),
        )


def parse_backoff_schedule(raw: Optional[str]) -> tuple[float, ...]:
    """Comma-separated seconds to wait before each retry; the last entry repeats."""
    schedule = []
    for part in (raw or "").split(","):
        part = part.strip()
        if not part:
            continue
        try:
            value = float(part)
        except ValueError as exc:
            raise ValueError("AI_GATEWAY_BACKOFF_SCHEDULE values must be numbers") from exc
        if value < 0:
            raise ValueError("AI_GATEWAY_BACKOFF_SCHEDULE values must be non-negative")
        schedule.append(value)
    return tuple(schedule)


def _backoff_delay(schedule: Sequence[float], attempt: int) -> float:
    if not schedule:
        return 0.0
    return schedule[min(attempt - 1, len(schedule) - 1)]


def _is_success(status_code: int) -> bool:
    return 200 <= status_code < 300


def _is_transient(status_code: int) -> bool:
    return status_code >= 500


def _classify(r: requests.Response) -> AnalyzerFailure:
    if r.status_code == 429:
        return AnalyzerFailure(FailureKind.RATE_LIMITED, status_code=429)
    if r.status_code == 402:
        return AnalyzerFailure(FailureKind.PAYMENT_REQUIRED, status_code=402)
    body = r.text or ""
    logger.error("AI gateway error: %s %s", r.status_code, body[:500])
    return AnalyzerFailure(FailureKind.UPSTREAM, detail=body, status_code=r.status_code)


def _reply_text(r: requests.Response) -> str:
    # a body without choices[0].message.content is malformed output, not a transport failure
    try:
        data = r.json()
    except ValueError:
        logger.warning("AI gateway reply was not JSON")
        return ""
    try:
        content = data["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError):
        logger.warning("AI gateway reply missing choices[0].message.content")
        return ""
    return content if isinstance(content, str) else ""


class SemanticAnalyzerClient:
    """Single chat-completion call to the AI gateway; the only network I/O in the pipeline."""

    def __init__(self, config: AnalyzerConfig):
        self.config = config

    @property
    def is_configured(self) -> bool:
        return bool(self.config.api_key)

    def analyze(self, prompt: AnalysisPrompt) -> AnalyzerOutcome:
        """
        Sends the prompt and returns the model's raw reply text, unparsed.
        Failures come back as ``AnalyzerFailure``; nothing here raises.
        """
        if not self.config.api_key:
            logger.error(MISSING_KEY_MESSAGE)
            return AnalyzerFailure(FailureKind.CONFIGURATION, MISSING_KEY_MESSAGE)

        payload = {"model": self.config.model, "messages": prompt.messages()}
        headers = {
            "Authorization": f"Bearer {self.config.api_key}",
            "Content-Type": "application/json",
        }

        failure: Optional[AnalyzerFailure] = None
        for attempt in range(self.config.max_retries + 1):
            if attempt:
                delay = _backoff_delay(self.config.backoff_schedule, attempt)
                logger.info("Retrying AI gateway call (%d/%d) in %.1fs", attempt, self.config.max_retries, delay)
                if delay:
                    time.sleep(delay)
            logger.debug("AI gateway request → %s (%s)", self.config.url, self.config.model)
            try:
                r = requests.post(self.config.url, json=payload, headers=headers, timeout=self.config.timeout)
            except requests.RequestException as e:
                logger.error("AI gateway request failed: %s", e)
                failure = AnalyzerFailure(FailureKind.UPSTREAM, detail=str(e))
                continue
            if _is_success(r.status_code):
                logger.info("AI response received")
                return AnalyzerSuccess(_reply_text(r))
            failure = _classify(r)
            if not _is_transient(r.status_code):
                break
        return failure
