from __future__ import annotations

from typing import Any, Dict

from flask import Flask, jsonify, request
from werkzeug.exceptions import HTTPException

from ..core.exceptions import DomainError
from .logger import get_logger

logger = get_logger(__name__)


def json_body() -> Dict[str, Any]:
    """Request JSON as a dict; a missing or malformed body reads as ``{}``."""
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def success():
    return jsonify({"success": True})


def error_response(message: str, status: int):
    return jsonify({"error": message}), status


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(e: DomainError):
        return error_response(str(e), e.status_code)

    @app.errorhandler(HTTPException)
    def handle_http_error(e: HTTPException):
        return error_response(e.name, e.code or 500)

    @app.errorhandler(Exception)
    def handle_unexpected(e: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.path}")
        return error_response(str(e) or "Server error", 500)
