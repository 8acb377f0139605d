"""Request helpers shared by the feature controllers."""

from __future__ import annotations

from datetime import date
from functools import wraps
from typing import Optional

from flask import request, session

from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError, ValidationError
from ..core.identity import Identity
from .datetime_utils import parse_iso_date


def current_identity() -> Identity:
    if "employee_id" not in session:
        raise AuthenticationError("Authentication required")
    try:
        return Identity(employee_id=int(session["employee_id"]), role=Role(session.get("role")))
    except (TypeError, ValueError):
        session.clear()
        raise AuthenticationError("Authentication required")


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        current_identity()
        return view(*args, **kwargs)

    return wrapper


def roles_required(*roles: Role):
    allowed = frozenset(roles)

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if current_identity().role not in allowed:
                names = " or ".join(r.value for r in roles)
                raise AuthorizationError(f"Access restricted to {names} roles")
            return view(*args, **kwargs)

        return wrapper

    return decorator


def json_body() -> dict:
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def parse_date_arg(name: str, default: Optional[date] = None, *, required: bool = False) -> Optional[date]:
    raw = request.args.get(name)
    if not raw:
        if required:
            raise ValidationError(f"{name} is required")
        return default
    return parse_iso_date(raw)
