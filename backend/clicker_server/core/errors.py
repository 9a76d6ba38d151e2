"""Centralized JSON (RFC 7807) error handling for the API."""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Any

from flask import Flask, Response, jsonify, request
from marshmallow import ValidationError
from sqlalchemy.exc import OperationalError
from werkzeug.exceptions import HTTPException

from clicker_server.core.logger import ensure_request_id
from clicker_server.services._shared.errors import (
    AuthError,
    AuthorizationError,
    ConflictError,
    HashingFailureError,
    NotFoundError,
    ServiceError,
    StoreFailureError,
    UsernameTakenError,
)

log = logging.getLogger(__name__)

# Status per auth failure kind; every other AuthError is an authentication failure (401)
AUTH_STATUS: dict[str, int] = {
    UsernameTakenError.kind: HTTPStatus.CONFLICT,
    HashingFailureError.kind: HTTPStatus.INTERNAL_SERVER_ERROR,
    StoreFailureError.kind: HTTPStatus.SERVICE_UNAVAILABLE,
}


def _http_status_to_code(status_code: int) -> str:
    """Map common HTTP status codes to canonical, stable error codes."""
    mapping = {
        400: "bad_request",
        401: "unauthorized",
        403: "forbidden",
        404: "not_found",
        405: "method_not_allowed",
        409: "conflict",
        413: "payload_too_large",
        415: "unsupported_media_type",
        422: "unprocessable_entity",
        429: "too_many_requests",
        500: "internal_server_error",
        503: "service_unavailable",
    }
    return mapping.get(status_code, "error")


def _as_problem(
    *,
    status: int,
    code: str,
    message: str,
    details: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """
    Build an RFC 7807 Problem Details dict.

    :param status: HTTP status code.
    :param code: Stable machine-consumable error code.
    :param message: Human-readable error summary (safe for clients).
    :param details: Optional safe, structured details.
    :returns: Problem+JSON dictionary.
    :rtype: dict
    """
    problem = {
        "type": "about:blank",
        "title": HTTPStatus(status).phrase,
        "status": int(status),
        "detail": message,
        "instance": request.path if request else None,
        "code": code,
    }
    if details:
        problem["details"] = details
    problem["request_id"] = ensure_request_id()
    return problem


def _problem_response(problem: dict[str, Any], status: int) -> tuple[Response, int]:
    """Return a ``application/problem+json`` response and its status."""
    resp = jsonify(problem)
    resp.mimetype = "application/problem+json"
    return resp, int(status)


def auth_error_status(err: AuthError) -> int:
    """Return the HTTP status for an authentication error kind."""
    return int(AUTH_STATUS.get(err.kind, HTTPStatus.UNAUTHORIZED))


def init_app(app: Flask) -> None:
    """
    Attach JSON error handlers to the Flask app.

    Notes
    -----
    - Guarantees RFC 7807 responses for all handled errors.
    - Auth failures expose their ``kind`` as ``code``; 401s never say *why*
      beyond that (no user enumeration).
    - ``StoreFailure`` details were logged where they happened; here only
      the correlation id is logged.
    """

    @app.errorhandler(AuthError)
    def handle_auth_error(err: AuthError):
        status = auth_error_status(err)
        problem = _as_problem(status=status, code=err.kind, message=str(err))
        if status >= 500:
            log.error(
                "AuthError: kind=%s request_id=%s",
                err.kind,
                problem["request_id"],
                extra={"error_kind": err.kind},
            )
        else:
            log.info(
                "AuthError: kind=%s request_id=%s",
                err.kind,
                problem["request_id"],
                extra={"error_kind": err.kind},
            )
        return _problem_response(problem, status)

    @app.errorhandler(NotFoundError)
    def handle_not_found(err: NotFoundError):
        problem = _as_problem(
            status=HTTPStatus.NOT_FOUND, code="not_found", message=f"{err.entity} not found"
        )
        return _problem_response(problem, HTTPStatus.NOT_FOUND)

    @app.errorhandler(ConflictError)
    def handle_conflict(err: ConflictError):
        problem = _as_problem(status=HTTPStatus.CONFLICT, code="conflict", message=err.detail)
        log.warning("ConflictError: entity=%s request_id=%s", err.entity, problem["request_id"])
        return _problem_response(problem, HTTPStatus.CONFLICT)

    @app.errorhandler(AuthorizationError)
    def handle_forbidden(err: AuthorizationError):
        problem = _as_problem(status=HTTPStatus.FORBIDDEN, code="forbidden", message=str(err))
        log.warning("AuthorizationError: request_id=%s", problem["request_id"])
        return _problem_response(problem, HTTPStatus.FORBIDDEN)

    @app.errorhandler(ServiceError)
    def handle_service_error(err: ServiceError):
        problem = _as_problem(status=HTTPStatus.BAD_REQUEST, code="bad_request", message=str(err))
        log.warning("ServiceError: %s request_id=%s", type(err).__name__, problem["request_id"])
        return _problem_response(problem, HTTPStatus.BAD_REQUEST)

    @app.errorhandler(HTTPException)
    def handle_http_exception(err: HTTPException):
        status = int(err.code or HTTPStatus.INTERNAL_SERVER_ERROR)
        error_code = _http_status_to_code(status)
        # Werkzeug may provide HTML-ish description; normalize for clients
        message = (err.description or error_code.replace("_", " ").capitalize()).strip()
        if status == HTTPStatus.NOT_FOUND and request:
            message = f"Route '{request.path}' not found"
        problem = _as_problem(status=status, code=error_code, message=message)
        level = log.error if status >= 500 else log.warning
        level(
            "HTTPException: code=%s status=%s request_id=%s",
            error_code,
            status,
            problem["request_id"],
        )
        return _problem_response(problem, status)

    @app.errorhandler(ValidationError)
    def handle_validation_error(err: ValidationError):
        problem = _as_problem(
            status=HTTPStatus.UNPROCESSABLE_ENTITY,
            code="validation_error",
            message="Validation failed",
            details={"errors": err.messages},
        )
        log.warning("ValidationError: request_id=%s", problem["request_id"])
        return _problem_response(problem, HTTPStatus.UNPROCESSABLE_ENTITY)

    @app.errorhandler(OperationalError)
    def handle_operational_error(err: OperationalError):
        # E.g., transient DB connectivity, pool timeout
        problem = _as_problem(
            status=HTTPStatus.SERVICE_UNAVAILABLE,
            code="service_unavailable",
            message="Service temporarily unavailable",
        )
        log.error("OperationalError: request_id=%s", problem["request_id"], exc_info=True)
        return _problem_response(problem, HTTPStatus.SERVICE_UNAVAILABLE)

    @app.errorhandler(Exception)
    def handle_unexpected_error(err: Exception):
        # Never leak internal details
        problem = _as_problem(
            status=HTTPStatus.INTERNAL_SERVER_ERROR,
            code="internal_server_error",
            message="Unexpected error",
        )
        log.error("Unhandled exception: request_id=%s", problem["request_id"], exc_info=True)
        return _problem_response(problem, HTTPStatus.INTERNAL_SERVER_ERROR)


__all__ = ["AUTH_STATUS", "auth_error_status", "init_app"]
