from functools import wraps
from flask import abort
from flask_login import current_user

from .models import ROLE_ADMIN, ROLE_EDITOR, ROLE_VIEWER

ROLE_RANK = {ROLE_VIEWER: 1, ROLE_EDITOR: 2, ROLE_ADMIN: 3}

def require_role(min_role: str):
    """
    Enforce role-based access:
      viewer < editor < admin
    """
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            if not current_user.is_authenticated:
                abort(401)
            user_rank = ROLE_RANK.get(getattr(current_user, "role", ROLE_VIEWER), 1)
            required_rank = ROLE_RANK.get(min_role, 3)
            if user_rank < required_rank:
                abort(403)
            if getattr(current_user, "is_active", True) is not True:
                abort(403)
            return fn(*args, **kwargs)
        return wrapper
    return decorator

def require_admin(fn):
    """Cache settings and manual purges are admin only."""
    return require_role(ROLE_ADMIN)(fn)

def require_editor(fn):
    """Viewers are read-only; editors and admins may change content."""
    return require_role(ROLE_EDITOR)(fn)
