"""Helpers shared by the JSON controllers: auth guards, error mapping, serialization."""

from __future__ import annotations

from dataclasses import fields, is_dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from functools import wraps
from typing import Any, Optional

from flask import current_app, jsonify, request, session

from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    CounterError,
    DomainError,
    DuplicateError,
    NotFoundError,
    ValidationError,
)
from ..core.logger import logger
from ..roles.permissions import has_minimum_role, has_permission
from .datetime_utils import parse_optional_date
from .errors import to_user_message

_STATUS_BY_ERROR = (
    (AuthenticationError, 401),
    (AuthorizationError, 403),
    (NotFoundError, 404),
    (DuplicateError, 409),
    (CounterError, 500),
    (ValidationError, 400),
    (DomainError, 400),
)


def to_jsonable(value: Any) -> Any:
    if is_dataclass(value) and not isinstance(value, type):
        return {f.name: to_jsonable(getattr(value, f.name)) for f in fields(value)}
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, dict):
        return {(k.value if isinstance(k, Enum) else k): to_jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set)):
        return [to_jsonable(v) for v in value]
    return value


def json_ok(data: Any = None, *, status: int = 200, message: Optional[str] = None):
    body: dict[str, Any] = {"success": True}
    if data is not None:
        body["data"] = to_jsonable(data)
    if message:
        body["message"] = message
    return jsonify(body), status


def json_error(message: str, status: int):
    return jsonify({"success": False, "message": message}), status


def handle_errors(fallback: str):
    """Turn domain errors into {"success": false} responses; log anything unexpected."""

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            try:
                return view(*args, **kwargs)
            except DomainError as e:
                status = next(code for cls, code in _STATUS_BY_ERROR if isinstance(e, cls))
                if status >= 500:
                    logger.error(f"{request.method} {request.path}: {e}")
                return json_error(to_user_message(e, fallback), status)
            except Exception as e:
                logger.exception(f"{request.method} {request.path} failed")
                if bool(current_app.config.get("DEBUG", False)):
                    return json_error(f"{fallback}: {e}", 500)
                return json_error(fallback, 500)

        return wrapper

    return decorator


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return json_error("Silakan login terlebih dahulu", 401)
        return view(*args, **kwargs)

    return wrapper


def permission_required(flag: str):
    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if "user_id" not in session:
                return json_error("Silakan login terlebih dahulu", 401)
            if not has_permission(session.get("role"), flag):
                return json_error("Anda tidak memiliki akses ke fitur ini", 403)
            return view(*args, **kwargs)

        return wrapper

    return decorator


def request_data() -> dict:
    """JSON body, or form fields when the client posts a form."""
    payload = request.get_json(silent=True)
    if isinstance(payload, dict):
        return payload
    return request.form.to_dict()


def query_date(name: str) -> Optional[date]:
    return parse_optional_date(request.args.get(name))


def as_int(value: Any, field_name: str, default: Optional[int] = None) -> Optional[int]:
    if value is None or value == "":
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} harus berupa angka")


def as_float(value: Any, field_name: str, default: Optional[float] = None) -> Optional[float]:
    if value is None or value == "":
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} harus berupa angka")


def as_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value or "").strip().lower() in {"1", "true", "yes", "on", "ya"}


def parse_enum(enum_cls, value: Any, field_name: str, default=None):
    if value is None or value == "":
        if default is None:
            raise ValidationError(f"{field_name} wajib diisi")
        return default
    try:
        return enum_cls(value)
    except ValueError:
        raise ValidationError(f"{field_name} tidak valid: {value}")


def role_required(minimum_role):
    """Allow the given role and everything ranked above it."""

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if "user_id" not in session:
                return json_error("Silakan login terlebih dahulu", 401)
            if not has_minimum_role(session.get("role"), minimum_role):
                return json_error("Anda tidak memiliki akses ke fitur ini", 403)
            return view(*args, **kwargs)

        return wrapper

    return decorator
