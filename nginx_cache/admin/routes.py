import logging

from flask import abort, Blueprint, render_template, redirect, url_for, flash, request
from flask_login import login_required, current_user

from ..cache import InvalidReason, PurgeError, UnauthorizedError, DeletionFailedError
from ..decorators import require_admin
from ..events import build_controller
from ..settings import load_config, save_config
from ..tokens import ACTION_PURGE_CACHE, action_token, verify_action_token
from .forms import CacheSettingsForm

logger = logging.getLogger(__name__)

admin_bp = Blueprint("admin", __name__, url_prefix="/admin")

MESSAGE_PURGED = "cache-purged"
MESSAGE_PURGE_FAILED = "purge-cache-failed"
REASON_DELETION_FAILED = "deletion-failed"


def _failure_code(error: PurgeError) -> str:
    if isinstance(error, DeletionFailedError):
        return REASON_DELETION_FAILED
    return error.reason.value if error.reason else ""


def _failure_message(code: str) -> str:
    if code == REASON_DELETION_FAILED:
        return DeletionFailedError().message
    try:
        return InvalidReason(code).message
    except ValueError:
        return ""


def _settings_notices():
    """
    (category, text) pairs shown above the settings form.
    An unset path is informational; other path problems are errors.
    """
    message = request.args.get("message")
    if message and "settings-updated" not in request.args:
        if message == MESSAGE_PURGED:
            return [("success", "Cache purged.")]
        if message == MESSAGE_PURGE_FAILED:
            text = "Cache could not be purged. " + _failure_message(request.args.get("reason", ""))
            return [("danger", text.strip())]
        return []

    result = build_controller().validate()
    if result.reason is InvalidReason.PATH_EMPTY:
        return [("info", "Set the cache zone path to enable purging.")]
    if not result.valid:
        return [("danger", result.message)]
    return []


def _purge_cache():
    try:
        verify_action_token(ACTION_PURGE_CACHE, request.args.get("_token", ""))
    except UnauthorizedError as e:
        logger.warning("Rejected cache purge request from user %s: %s", current_user.get_id(), e)
        abort(403, description=str(e))

    try:
        build_controller().request_purge()
    except PurgeError as e:
        logger.warning("Manual cache purge by user %s failed: %s", current_user.get_id(), e)
        return redirect(url_for("admin.nginx_cache", message=MESSAGE_PURGE_FAILED, reason=_failure_code(e)))

    logger.info("Cache purged manually by user %s", current_user.get_id())
    return redirect(url_for("admin.nginx_cache", message=MESSAGE_PURGED))


# -----------------------
# Nginx cache settings
# -----------------------

@admin_bp.get("/nginx-cache")
@admin_bp.post("/nginx-cache")
@login_required
@require_admin
def nginx_cache():
    if request.method == "GET" and request.args.get("action") == ACTION_PURGE_CACHE:
        return _purge_cache()

    config = load_config()
    form = CacheSettingsForm()
    if request.method == "GET":
        form.cache_path.data = config.path
        form.auto_purge.data = config.auto_purge_enabled

    if form.validate_on_submit():
        save_config(form.cache_path.data, bool(form.auto_purge.data))
        flash("Settings saved.", "success")
        return redirect(url_for("admin.nginx_cache", **{"settings-updated": "true"}))

    return render_template(
        "admin/nginx_cache.html",
        form=form,
        notices=_settings_notices(),
        purge_action=ACTION_PURGE_CACHE,
        purge_token=action_token(ACTION_PURGE_CACHE),
    )


@admin_bp.app_context_processor
def nginx_cache_nav():
    """Expose a one-click purge link to admin users on every page."""
    def purge_cache_url():
        if not (current_user.is_authenticated and getattr(current_user, "is_admin", False)):
            return None
        return url_for(
            "admin.nginx_cache",
            action=ACTION_PURGE_CACHE,
            _token=action_token(ACTION_PURGE_CACHE),
        )
    return {"purge_cache_url": purge_cache_url}
