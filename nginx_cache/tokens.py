"""
Single-use action tokens for destructive admin links.

A token is a signed Flask-WTF CSRF token whose session key is scoped to the
action and whose signing key is scoped to the action and the logged-in user.
Validating it removes the session value, so a link works once.
"""

from flask import current_app, g, session
from flask_login import current_user
from flask_wtf.csrf import generate_csrf, validate_csrf
from wtforms.validators import ValidationError

from .cache import UnauthorizedError

ACTION_PURGE_CACHE = "purge-cache"


def _token_key(action: str) -> str:
    return "_action_token_" + action.replace("-", "_")


def _secret_key(action: str) -> str:
    principal = current_user.get_id() if current_user.is_authenticated else "anonymous"
    return f"{current_app.secret_key}|{action}|{principal}"


def action_token(action: str) -> str:
    return generate_csrf(secret_key=_secret_key(action), token_key=_token_key(action))


def verify_action_token(action: str, token: str) -> None:
    """Raises UnauthorizedError unless ``token`` is a live token for ``action``."""
    if not current_user.is_authenticated:
        raise UnauthorizedError()

    key = _token_key(action)
    try:
        validate_csrf(
            token,
            secret_key=_secret_key(action),
            time_limit=current_app.config.get("NGINX_PURGE_TOKEN_TTL", 3600),
            token_key=key,
        )
    except ValidationError as e:
        raise UnauthorizedError(str(e)) from e

    session.pop(key, None)
    g.pop(key, None)
