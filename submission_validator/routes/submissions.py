from flask import Blueprint, current_app, jsonify, request
from pydantic import ValidationError

from submission_validator.models.submission_schema import ValidationRequest
from submission_validator.services.auth import require_caller
from submission_validator.services.errors import BadRequest


bp = Blueprint("submissions", __name__, url_prefix="/api/submissions")


def _service():
    return current_app.extensions["validation_service"]


@bp.post("/validate")
@require_caller
def validate():
    """
    JSON: { fileName, fileType, fileSize, submissionType, fileContent?, customType?, submissionId? }
    Returns the validation report, or { error } with 400/401/402/429/500.
    """
    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        raise BadRequest("JSON object body is required")
    try:
        req = ValidationRequest.model_validate(body)
    except ValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(p) for p in first["loc"])
        raise BadRequest(f"{field}: {first['msg']}")

    result = _service().validate(req)
    return jsonify(result.report.to_payload()), 200


@bp.get("/types")
@require_caller
def submission_types():
    profiles = _service().registry.profiles()
    return jsonify({"count": len(profiles), "types": [p.to_dict() for p in profiles]}), 200
