from flask import Blueprint, current_app, jsonify
from submission_validator.services import supabase_client


bp = Blueprint("health", __name__, url_prefix="/api/system")


@bp.get("/health")
def health():
    service = current_app.extensions["validation_service"]
    status = {
        "flask": "ok",
        "analyzer": "ok" if service.analyzer.is_configured else "not_configured",
        "supabase": "ok" if supabase_client.auth_configured() else "not_configured",
    }
    return jsonify(status), 200
