"""Tests for nginx_cache.events — content events driving the auto purge."""

from __future__ import annotations

import pathlib
from unittest import mock

from config import Config
from nginx_cache import create_app
from nginx_cache.cache import LocalFilesystem
from nginx_cache.events import (
    DEFAULT_PURGE_ACTIONS,
    current_guard,
    dispatch_content_events,
    emit,
    purge_actions,
    resolve_purge_actions,
)
from nginx_cache.extensions import db
from nginx_cache.models import (
    COMMENT_APPROVED,
    POST_DRAFT,
    POST_PUBLISHED,
    POST_TRASH,
    Comment,
    Post,
    User,
)
from nginx_cache.settings import save_config

from .conftest import login


def _collect(app, fn):
    """Run ``fn`` in an app context and return the names of emitted events."""
    names = []
    with app.app_context():
        fn()
        with mock.patch("nginx_cache.events.emit", side_effect=lambda name, sender=None, **kw: names.append(name)):
            dispatch_content_events()
    return names


class TestResolvePurgeActions:
    def test_empty_means_default(self) -> None:
        assert resolve_purge_actions("") == DEFAULT_PURGE_ACTIONS
        assert resolve_purge_actions(None) == DEFAULT_PURGE_ACTIONS

    def test_comma_separated(self) -> None:
        assert resolve_purge_actions("save_post, delete_post,,save_post") == ("save_post", "delete_post")

    def test_list(self) -> None:
        assert resolve_purge_actions(["switch_theme"]) == ("switch_theme",)

    def test_default_list_covers_content_events(self) -> None:
        for name in ("publish_post", "save_post", "delete_post", "comment_post", "switch_theme", "update_nav_menu"):
            assert name in DEFAULT_PURGE_ACTIONS


class TestSubscription:
    def test_app_uses_default_actions(self, app) -> None:
        with app.app_context():
            assert purge_actions() == DEFAULT_PURGE_ACTIONS

    def test_create_app_override(self, tmp_path: pathlib.Path) -> None:
        class CustomConfig(Config):
            TESTING = True
            SQLALCHEMY_DATABASE_URI = f"sqlite:///{tmp_path / 'custom.db'}"
            BOOTSTRAP_ADMIN_EMAIL = ""

        custom = create_app(CustomConfig, purge_actions=["switch_theme"])
        with custom.app_context():
            assert purge_actions() == ("switch_theme",)

    def test_config_override(self, tmp_path: pathlib.Path) -> None:
        class CustomConfig(Config):
            TESTING = True
            SQLALCHEMY_DATABASE_URI = f"sqlite:///{tmp_path / 'custom.db'}"
            BOOTSTRAP_ADMIN_EMAIL = ""
            NGINX_PURGE_ACTIONS = "save_post,delete_post"

        custom = create_app(CustomConfig)
        with custom.app_context():
            assert purge_actions() == ("save_post", "delete_post")


class TestOrmEvents:
    def test_new_published_post(self, app) -> None:
        def run():
            db.session.add(Post(title="Hello", slug="hello", status=POST_PUBLISHED))
            db.session.commit()

        assert _collect(app, run) == ["save_post", "publish_post"]

    def test_new_draft_post(self, app) -> None:
        def run():
            db.session.add(Post(title="Draft", slug="draft", status=POST_DRAFT))
            db.session.commit()

        assert _collect(app, run) == ["save_post"]

    def test_edit_and_trash_post(self, app) -> None:
        with app.app_context():
            db.session.add(Post(title="Hello", slug="hello", status=POST_PUBLISHED))
            db.session.commit()
            dispatch_content_events()

        def run():
            post = Post.query.filter_by(slug="hello").one()
            post.status = POST_TRASH
            db.session.commit()

        assert _collect(app, run) == ["edit_post", "save_post", "trash_post"]

    def test_delete_post(self, app) -> None:
        with app.app_context():
            db.session.add(Post(title="Hello", slug="hello"))
            db.session.commit()
            dispatch_content_events()

        def run():
            db.session.delete(Post.query.filter_by(slug="hello").one())
            db.session.commit()

        assert _collect(app, run) == ["delete_post"]

    def test_comment_lifecycle(self, app) -> None:
        with app.app_context():
            post = Post(title="Hello", slug="hello")
            db.session.add(post)
            db.session.commit()
            post_id = post.id
            dispatch_content_events()

        def add():
            db.session.add(Comment(post_id=post_id, author_name="Ann", body="Nice"))
            db.session.commit()

        assert _collect(app, add) == ["comment_post"]

        def approve():
            Comment.query.one().status = COMMENT_APPROVED
            db.session.commit()

        assert _collect(app, approve) == ["edit_comment", "set_comment_status"]

        def delete():
            db.session.delete(Comment.query.one())
            db.session.commit()

        assert _collect(app, delete) == ["delete_comment"]

    def test_user_profile_update(self, app, editor_id: int) -> None:
        def run():
            db.session.get(User, editor_id).name = "Renamed"
            db.session.commit()

        assert _collect(app, run) == ["edit_user_profile_update"]

    def test_rollback_discards_events(self, app) -> None:
        def run():
            db.session.add(Post(title="Hello", slug="hello"))
            db.session.flush()
            db.session.rollback()

        assert _collect(app, run) == []

    def test_unchanged_object_emits_nothing(self, app) -> None:
        with app.app_context():
            db.session.add(Post(title="Hello", slug="hello"))
            db.session.commit()
            dispatch_content_events()

        def run():
            post = Post.query.one()
            post.title = post.title
            db.session.commit()

        assert _collect(app, run) == []


class TestAutoPurge:
    def test_fan_out_purges_once(self, app, cache_zone: pathlib.Path) -> None:
        with app.app_context():
            save_config(str(cache_zone), True)
            with mock.patch.object(LocalFilesystem, "remove_recursive", autospec=True) as remove:
                db.session.add(Post(title="Hello", slug="hello", status=POST_PUBLISHED))
                db.session.commit()
                post = Post.query.one()
                post.title = "Hello again"
                db.session.commit()

                assert dispatch_content_events() == 4
                emit("clean_post_cache")
                emit("switch_theme")

            assert remove.call_count == 1
            assert current_guard().completed is True

    def test_purge_removes_zone(self, app, cache_zone: pathlib.Path) -> None:
        with app.app_context():
            save_config(str(cache_zone), True)
            emit("save_post")
        assert not cache_zone.exists()

    def test_disabled_auto_purge(self, app, cache_zone: pathlib.Path) -> None:
        with app.app_context():
            save_config(str(cache_zone), False)
            emit("save_post")
            assert current_guard().completed is False
        assert cache_zone.exists()

    def test_unsubscribed_event_is_ignored(self, tmp_path: pathlib.Path, cache_zone: pathlib.Path) -> None:
        class CustomConfig(Config):
            TESTING = True
            SQLALCHEMY_DATABASE_URI = f"sqlite:///{tmp_path / 'custom.db'}"
            BOOTSTRAP_ADMIN_EMAIL = ""

        custom = create_app(CustomConfig, purge_actions=["switch_theme"])
        with custom.app_context():
            save_config(str(cache_zone), True)
            emit("save_post")
            assert cache_zone.exists()
            emit("switch_theme")
        assert not cache_zone.exists()

    def test_invalid_path_is_logged_not_raised(self, app, tmp_path: pathlib.Path, caplog) -> None:
        (tmp_path / "index.php").write_text("<?php")
        with app.app_context():
            save_config(str(tmp_path), True)
            with mock.patch.object(LocalFilesystem, "remove_recursive", autospec=True) as remove:
                emit("save_post")
            remove.assert_not_called()
        assert "Auto purge after save_post failed" in caplog.text
        assert (tmp_path / "index.php").exists()

    def test_unset_path_is_quiet(self, app) -> None:
        with app.app_context():
            save_config("", True)
            emit("save_post")
            assert current_guard().completed is True

    def test_each_request_gets_its_own_guard(self, app, client, editor_id: int, cache_zone: pathlib.Path) -> None:
        with app.app_context():
            save_config(str(cache_zone), True)
        login(client, editor_id)

        with mock.patch.object(LocalFilesystem, "remove_recursive", autospec=True) as remove:
            for title in ("First", "Second"):
                resp = client.post("/posts/new", data={"title": title, "status": POST_PUBLISHED, "body": "x"})
                assert resp.status_code == 302

        assert remove.call_count == 2

    def test_request_purges_real_zone(self, app, client, editor_id: int, cache_zone: pathlib.Path) -> None:
        with app.app_context():
            save_config(str(cache_zone), True)
        login(client, editor_id)

        resp = client.post("/posts/new", data={"title": "Hello", "status": POST_PUBLISHED})
        assert resp.status_code == 302
        assert not cache_zone.exists()
