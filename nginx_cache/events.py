"""
Content-change events and the auto purge subscription.

Every event name maps to a blinker signal in ``content_events``. Committed
changes to posts, comments and users are translated into these events by
SQLAlchemy session hooks and sent after the view has run, so one request
that touches many rows still purges at most once (see ``current_guard``).
Other code can send any signal from the namespace with ``emit``.
"""

import logging
from typing import Iterable, List, Optional, Sequence, Tuple, Union

from blinker import Namespace
from flask import Flask, current_app, g, has_app_context
from sqlalchemy import event as sa_event
from sqlalchemy import inspect as sa_inspect

from .cache import ConfigurationError, PurgeController, PurgeError, PurgeGuard, acquire_filesystem
from .models import POST_PUBLISHED, POST_TRASH, Comment, Post, User
from .settings import load_config

logger = logging.getLogger(__name__)

content_events = Namespace()

DEFAULT_PURGE_ACTIONS: Tuple[str, ...] = (
    "publish_post",
    "save_post",
    "edit_post",
    "delete_post",
    "trash_post",
    "clean_post_cache",
    "trackback_post",
    "pingback_post",
    "comment_post",
    "edit_comment",
    "delete_comment",
    "set_comment_status",
    "switch_theme",
    "update_nav_menu",
    "edit_user_profile_update",
)

_EXT_KEY = "nginx_cache"
_SESSION_KEY = "nginx_cache_events"
_GUARD_KEY = "nginx_cache_purge_guard"
_COMMITTED_KEY = "nginx_cache_committed_events"


def content_event(name: str):
    return content_events.signal(name)


def emit(name: str, sender=None, **extra) -> None:
    content_event(name).send(sender, event=name, **extra)


def resolve_purge_actions(value: Union[None, str, Iterable[str]]) -> Tuple[str, ...]:
    """Config value (comma separated string or list) to a tuple of event names."""
    if not value:
        return DEFAULT_PURGE_ACTIONS
    if isinstance(value, str):
        value = value.split(",")
    names = []
    for name in value:
        name = (name or "").strip()
        if name and name not in names:
            names.append(name)
    return tuple(names) or DEFAULT_PURGE_ACTIONS


# -----------------------
# Purging
# -----------------------

def build_controller(app: Optional[Flask] = None) -> PurgeController:
    app = app or current_app
    method = app.config.get("NGINX_FILESYSTEM_METHOD", "direct")
    return PurgeController(load_config, acquire=lambda: acquire_filesystem(method))


def current_guard() -> PurgeGuard:
    """The guard of the current app context (one per request)."""
    guard = g.get(_GUARD_KEY)
    if guard is None:
        guard = PurgeGuard()
        setattr(g, _GUARD_KEY, guard)
    return guard


def purge_on_content_change(sender, **extra) -> None:
    name = extra.get("event")
    if name is not None and name not in purge_actions():
        return

    if not load_config().auto_purge_enabled:
        return

    try:
        build_controller().request_purge_once(current_guard())
    except ConfigurationError:
        logger.debug("Auto purge skipped: cache zone path is not set")
    except PurgeError as e:
        logger.warning("Auto purge after %s failed: %s", name or "content change", e)


def purge_actions(app: Optional[Flask] = None) -> Tuple[str, ...]:
    app = app or current_app
    return app.extensions.get(_EXT_KEY, {}).get("purge_actions", ())


def subscribe_purge_actions(app: Flask, actions: Sequence[str]) -> Tuple[str, ...]:
    """Connect the auto purge receiver to ``actions`` for this app."""
    actions = tuple(actions)
    app.extensions.setdefault(_EXT_KEY, {})["purge_actions"] = actions
    for name in actions:
        content_event(name).connect(purge_on_content_change)
    logger.debug("Auto purge subscribed to %d events", len(actions))
    return actions


# -----------------------
# ORM hooks
# -----------------------

def _changed(obj, attr: str) -> bool:
    return sa_inspect(obj).attrs[attr].history.has_changes()


def _events_for_new(obj) -> List[str]:
    if isinstance(obj, Post):
        names = ["save_post"]
        if obj.status == POST_PUBLISHED:
            names.append("publish_post")
        return names
    if isinstance(obj, Comment):
        return ["comment_post"]
    return []


def _events_for_dirty(obj) -> List[str]:
    if isinstance(obj, Post):
        names = ["edit_post", "save_post"]
        if _changed(obj, "status"):
            if obj.status == POST_PUBLISHED:
                names.append("publish_post")
            elif obj.status == POST_TRASH:
                names.append("trash_post")
        return names
    if isinstance(obj, Comment):
        names = ["edit_comment"]
        if _changed(obj, "status"):
            names.append("set_comment_status")
        return names
    if isinstance(obj, User):
        return ["edit_user_profile_update"]
    return []


def _events_for_deleted(obj) -> List[str]:
    if isinstance(obj, Post):
        return ["delete_post"]
    if isinstance(obj, Comment):
        return ["delete_comment"]
    return []


def _after_flush(session, flush_context) -> None:
    pending = session.info.setdefault(_SESSION_KEY, [])
    for obj in session.new:
        pending.extend(_events_for_new(obj))
    for obj in session.dirty:
        if session.is_modified(obj, include_collections=False):
            pending.extend(_events_for_dirty(obj))
    for obj in session.deleted:
        pending.extend(_events_for_deleted(obj))


def _after_commit(session) -> None:
    pending = session.info.pop(_SESSION_KEY, [])
    if not pending:
        return
    if not has_app_context():
        logger.debug("Dropping %d content events committed outside an app context", len(pending))
        return
    committed = g.get(_COMMITTED_KEY)
    if committed is None:
        committed = []
        setattr(g, _COMMITTED_KEY, committed)
    committed.extend(pending)


def _after_rollback(session) -> None:
    session.info.pop(_SESSION_KEY, None)


def dispatch_content_events() -> int:
    """
    Send the events committed so far in this app context.
    Runs after every request; call it yourself after commits made outside one.
    """
    committed = g.pop(_COMMITTED_KEY, None) or []
    for name in committed:
        emit(name)
    return len(committed)


def _dispatch_after_request(response):
    dispatch_content_events()
    return response


def init_app(app: Flask, db, actions: Optional[Sequence[str]] = None) -> None:
    if actions is None:
        actions = resolve_purge_actions(app.config.get("NGINX_PURGE_ACTIONS"))
    subscribe_purge_actions(app, actions)

    if not sa_event.contains(db.session, "after_flush", _after_flush):
        sa_event.listen(db.session, "after_flush", _after_flush)
        sa_event.listen(db.session, "after_commit", _after_commit)
        sa_event.listen(db.session, "after_rollback", _after_rollback)

    app.after_request(_dispatch_after_request)
