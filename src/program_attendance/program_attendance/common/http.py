from __future__ import annotations

from functools import wraps

from flask import current_app, jsonify, session

from ..core.enums import Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError


def fail(message: str, status: int):
    return jsonify({"success": False, "message": message}), status


def current_user_id() -> str:
    return str(session["user_id"])


def current_role() -> Role:
    try:
        return Role(session.get("role", Role.PARTICIPANT.value))
    except ValueError:
        return Role.PARTICIPANT


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return fail("로그인이 필요합니다", 401)
        return view(*args, **kwargs)

    return wrapper


def organizer_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return fail("로그인이 필요합니다", 401)
        if current_role() != Role.ORGANIZER:
            return fail("진행자 권한이 필요합니다", 403)
        return view(*args, **kwargs)

    return wrapper


def domain_errors(view):
    """Map domain exceptions to JSON error responses."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        try:
            return view(*args, **kwargs)
        except ValidationError as e:
            return fail(str(e), 400)
        except AuthorizationError as e:
            return fail(str(e), 403)
        except NotFoundError as e:
            return fail(str(e), 404)
        except Exception:
            current_app.logger.exception("unhandled error in %s", view.__name__)
            return fail("서버 오류가 발생했습니다", 500)

    return wrapper
