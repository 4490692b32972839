"""Flask glue shared by the JSON controllers: session caller, body parsing and error mapping."""

from __future__ import annotations

import logging
from functools import wraps
from typing import Any, Dict

from flask import Flask, jsonify, request, session
from werkzeug.exceptions import HTTPException

from ..auth.policy import Caller
from ..core.enums import Role
from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    DomainError,
    NotFoundError,
    RecordNotFoundError,
    StoreError,
    ValidationError,
)
from .coercion import as_enum

logger = logging.getLogger(__name__)

# Most specific first: RecordNotFoundError is also a StoreError.
_STATUS_BY_ERROR = (
    (RecordNotFoundError, 404),
    (ValidationError, 400),
    (AuthenticationError, 401),
    (AuthorizationError, 403),
    (NotFoundError, 404),
    (StoreError, 502),
)


def json_error(message: str, status: int):
    return jsonify({"success": False, "message": message}), status


def json_ok(status: int = 200, **payload: Any):
    return jsonify({"success": True, **payload}), status


def status_for(error: DomainError) -> int:
    for cls, status in _STATUS_BY_ERROR:
        if isinstance(error, cls):
            return status
    return 400


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(e: DomainError):
        status = status_for(e)
        if status >= 500:
            logger.warning("Store call failed on %s %s: %s", request.method, request.path, e)
        return json_error(str(e), status)

    @app.errorhandler(HTTPException)
    def handle_http_error(e: HTTPException):
        return json_error(e.description or e.name, e.code or 500)

    @app.errorhandler(Exception)
    def handle_unexpected(e: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.path)
        return json_error("Internal server error", 500)


def current_caller() -> Caller:
    uid = session.get("uid")
    role = as_enum(session.get("role"), Role, None)
    if not uid or role is None:
        raise AuthenticationError("Please sign in to continue")
    return Caller(uid=uid, role=role)


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        current_caller()
        return view(*args, **kwargs)

    return wrapper


def json_body() -> Dict[str, Any]:
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def id_list(data: Dict[str, Any], key: str = "ids") -> list:
    ids = data.get(key)
    if not isinstance(ids, list) or not all(isinstance(i, str) and i for i in ids):
        raise ValidationError(f"'{key}' must be a list of ids")
    return ids
