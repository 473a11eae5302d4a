"""Session guards and JSON error responses shared by the controllers."""

from __future__ import annotations

import logging
from functools import wraps
from typing import Optional

from flask import Flask, Response, g, jsonify, request, session
from werkzeug.exceptions import HTTPException

from ..core.enums import Role, UserStatus
from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    DomainError,
    NotFoundError,
    RemoteServiceError,
    ValidationError,
)
from ..users.service import SessionUser

logger = logging.getLogger(__name__)

PENDING_NOTICE = "Your account is pending admin approval."
SUSPENDED_NOTICE = "Your account has been suspended."

_STATUS_CODES = (
    (ValidationError, 400),
    (AuthenticationError, 401),
    (AuthorizationError, 403),
    (NotFoundError, 404),
    (RemoteServiceError, 502),
)


def json_error(message: str, status: int) -> tuple[Response, int]:
    return jsonify({"success": False, "message": message}), status


def ok(**payload) -> Response:
    return jsonify({"success": True, **payload})


def current_user() -> Optional[SessionUser]:
    data = session.get("user")
    if not data:
        return None
    if "current_user" not in g:
        g.current_user = SessionUser.from_session(data)
    return g.current_user


def store_user(user: SessionUser) -> None:
    permanent = session.permanent
    session.clear()
    session["user"] = user.to_session()
    session.permanent = permanent
    g.current_user = user


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if current_user() is None:
            return json_error("Please log in to continue", 401)
        return view(*args, **kwargs)

    return wrapper


def approved_required(view):
    """Signed-in and approved; pending or suspended accounts see a blocking notice."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        user = current_user()
        if user is None:
            return json_error("Please log in to continue", 401)
        if not user.is_approved:
            return json_error(PENDING_NOTICE if user.status == UserStatus.PENDING else SUSPENDED_NOTICE, 403)
        return view(*args, **kwargs)

    return wrapper


def roles_required(*roles: Role):
    def decorator(view):
        @approved_required
        @wraps(view)
        def wrapper(*args, **kwargs):
            if current_user().role not in roles:
                return json_error("You do not have access to this page", 403)
            return view(*args, **kwargs)

        return wrapper

    return decorator


admin_required = roles_required(Role.ADMIN)


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(e: DomainError):
        for exc_type, status in _STATUS_CODES:
            if isinstance(e, exc_type):
                if status >= 500:
                    logger.warning("Remote failure: %s", e)
                return json_error(str(e), status)
        return json_error(str(e), 400)

    @app.errorhandler(HTTPException)
    def handle_http_error(e: HTTPException):
        return json_error(e.description or e.name, e.code or 500)

    @app.errorhandler(Exception)
    def handle_unexpected(e: Exception):
        logger.exception("Unhandled error")
        if bool(app.config.get("DEBUG", False)):
            return json_error(f"System error: {e}", 500)
        return json_error("System error", 500)


def payload() -> dict:
    """JSON body, or form fields for multipart/urlencoded requests."""

    return request.get_json(silent=True) or request.form.to_dict()
