"""Shared Flask helpers: session guards, JSON errors and query parsing."""

from __future__ import annotations

import logging
from datetime import date
from functools import wraps
from typing import Optional

from flask import Flask, jsonify, session
from werkzeug.exceptions import HTTPException, RequestEntityTooLarge

from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError, DomainError, NotFoundError, ValidationError
from .datetime_utils import parse_iso_date

logger = logging.getLogger(__name__)


def json_error(message: str, status: int, **extra):
    return jsonify({"success": False, "error": message, **extra}), status


def current_role() -> Optional[Role]:
    role = session.get("role")
    return Role(role) if role in {r.value for r in Role} else None


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return json_error("Não autenticado", 401)
        return view(*args, **kwargs)

    return wrapper


def admin_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return json_error("Não autenticado", 401)
        if session.get("role") != Role.ADMIN.value:
            return json_error("Acesso negado", 403)
        return view(*args, **kwargs)

    return wrapper


def optional_date(value: Optional[str], field_name: str) -> Optional[date]:
    if not value:
        return None
    try:
        return parse_iso_date(value.strip()[:10])
    except ValueError:
        raise ValidationError(f"{field_name} inválida (use AAAA-MM-DD)") from None


def optional_bool(value: Optional[str]) -> Optional[bool]:
    if value is None:
        return None
    lowered = value.strip().lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    return None


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(e: DomainError):
        if isinstance(e, AuthenticationError):
            return json_error(str(e), 401)
        if isinstance(e, AuthorizationError):
            return json_error(str(e), 403)
        if isinstance(e, NotFoundError):
            return json_error(str(e), 404)
        return json_error(str(e), 400)

    @app.errorhandler(RequestEntityTooLarge)
    def handle_too_large(e: RequestEntityTooLarge):
        limit_mb = int(app.config.get("MAX_CONTENT_LENGTH") or 0) // (1024 * 1024)
        return json_error(f"Arquivo muito grande. Máximo: {limit_mb}MB", 400)

    @app.errorhandler(HTTPException)
    def handle_http_error(e: HTTPException):
        if e.code == 404:
            return json_error("Rota não encontrada", 404)
        return json_error(e.description or e.name, e.code or 500)

    @app.errorhandler(Exception)
    def handle_unexpected(e: Exception):
        logger.exception("Unhandled error")
        if bool(app.config.get("DEBUG", False)):
            return json_error("Erro interno do servidor", 500, details=str(e))
        return json_error("Erro interno do servidor", 500)
