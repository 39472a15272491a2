import hmac
from dataclasses import dataclass
from functools import wraps
from typing import Optional

from flask import g, request

from submission_validator.services import supabase_client
from submission_validator.services.errors import CallerUnauthorized, ConfigurationError
from submission_validator.utils.config import _env
from submission_validator.utils.logger import get_logger


logger = get_logger("auth")


@dataclass(frozen=True)
class Caller:
    id: str
    method: str  # "supabase" | "api_key"


def bearer_token(authorization: Optional[str]) -> str:
    if not authorization or not authorization.startswith("Bearer "):
        logger.error("No authorization header provided")
        raise CallerUnauthorized()
    token = authorization.removeprefix("Bearer ").strip()
    if not token:
        raise CallerUnauthorized()
    return token


def authenticate(authorization: Optional[str]) -> Caller:
    """
    Supabase session tokens when the project is configured, else a shared
    ``BACKEND_API_KEY``. With neither configured the deployment is broken.
    """
    token = bearer_token(authorization)

    if supabase_client.auth_configured():
        user = supabase_client.get_user(token)
        if not user:
            raise CallerUnauthorized()
        logger.info("Authenticated user: %s", user.id)
        return Caller(id=str(user.id), method="supabase")

    expected = _env("BACKEND_API_KEY")
    if not expected:
        raise ConfigurationError("Server not configured: BACKEND_API_KEY missing")
    if not hmac.compare_digest(token, expected):
        raise CallerUnauthorized()
    return Caller(id="api-key", method="api_key")


def require_caller(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        g.caller = authenticate(request.headers.get("Authorization"))
        return view(*args, **kwargs)
    return wrapper
