import os
from dotenv import load_dotenv

load_dotenv(override=False)


def _env(name: str, default: str | None = None) -> str | None:
    v = os.getenv(name)
    return v if v not in (None, "", "null", "None") else default


# Optional JSON file with submission type overrides, merged over the built-in registry
SUBMISSION_TYPES_FILE = _env("SUBMISSION_TYPES_FILE")


# AI gateway settings are read per client build (see AnalyzerConfig.from_env), these are the defaults
DEFAULT_AI_GATEWAY_URL = "https://ai.gateway.lovable.dev/v1/chat/completions"
DEFAULT_AI_GATEWAY_MODEL = "google/gemini-2.5-flash"
DEFAULT_AI_GATEWAY_TIMEOUT = 60.0


HOST = _env("HOST", "0.0.0.0")
PORT = int(_env("PORT", "8080") or "8080")
FLASK_ENV = _env("FLASK_ENV", "production")


# Content excerpts longer than this are cut before they reach the prompt
EXCERPT_MAX_CHARS = 2000
