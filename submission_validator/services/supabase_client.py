from typing import Any, Optional
from supabase import create_client, Client

from submission_validator.models.report_schema import ValidationReport
from submission_validator.utils.config import _env
from submission_validator.utils.logger import get_logger


logger = get_logger("supabase-client")


_client: Optional[Client] = None


def auth_configured() -> bool:
    return bool(_env("SUPABASE_URL") and _env("SUPABASE_ANON_KEY"))


def supabase() -> Optional[Client]:
    """Service-role client used to mirror results; ``None`` when not configured."""
    global _client
    if _client:
        return _client
    url, key = _env("SUPABASE_URL"), _env("SUPABASE_SERVICE_ROLE_KEY")
    if not url or not key:
        logger.info("Supabase not configured; running without mirror.")
        return None
    _client = create_client(url, key)
    return _client


def get_user(token: str) -> Optional[Any]:
    """Resolves a caller's access token to a Supabase user, or ``None`` if it is not valid."""
    sb = create_client(_env("SUPABASE_URL"), _env("SUPABASE_ANON_KEY"))
    try:
        res = sb.auth.get_user(token)
    except Exception as e:
        logger.error("Authentication failed: %s", e)
        return None
    return getattr(res, "user", None)


def record_validation(submission_id: str, report: ValidationReport) -> bool:
    """Copies status and issues onto the ``submissions`` row. Best-effort."""
    sb = supabase()
    if not sb:
        return False
    try:
        (
            sb.table("submissions")
            .update({"validation_status": report.status, "validation_errors": report.issues})
            .eq("id", submission_id)
            .execute()
        )
        return True
    except Exception as e:
        logger.error("Supabase update failed: %s", e)
        return False
