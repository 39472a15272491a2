from typing import Optional

from flask import Flask, jsonify
from flask_cors import CORS
from werkzeug.exceptions import HTTPException
from submission_validator.routes.health import bp as health_bp
from submission_validator.routes.submissions import bp as submissions_bp
from submission_validator.services.errors import SubmissionValidationError
from submission_validator.services.validation_service import ValidationService, build_service
from submission_validator.utils.config import HOST, PORT, FLASK_ENV
from submission_validator.utils.logger import get_logger


logger = get_logger("server")

CORS_ALLOW_HEADERS = ["authorization", "x-client-info", "apikey", "content-type"]


def create_app(service: Optional[ValidationService] = None) -> Flask:
    app = Flask(__name__)
    app.extensions["validation_service"] = service or build_service()
    app.register_blueprint(health_bp)
    app.register_blueprint(submissions_bp)
    CORS(app, origins="*", allow_headers=CORS_ALLOW_HEADERS)


    @app.get("/")
    def root():
        return jsonify({"service": "submission-validator", "env": FLASK_ENV})


    @app.errorhandler(SubmissionValidationError)
    def validation_error(e: SubmissionValidationError):
        if e.status_code >= 500:
            logger.error("Validation error: %s", e.message)
        return jsonify(e.to_dict()), e.status_code


    @app.errorhandler(Exception)
    def unexpected_error(e: Exception):
        if isinstance(e, HTTPException):
            return jsonify({"error": e.description}), e.code
        logger.exception("Unhandled error")
        return jsonify({"error": "Internal server error"}), 500


    return app


def main():
    app = create_app()
    logger.info("Starting submission-validator on %s:%s (%s)", HOST, PORT, FLASK_ENV)
    app.run(host=HOST, port=PORT)


if __name__ == "__main__":
    main()
