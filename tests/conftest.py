"""Shared fixtures for the test suite."""

from __future__ import annotations

import pathlib

import pytest

from config import Config
from nginx_cache import create_app
from nginx_cache.extensions import db
from nginx_cache.models import ROLE_ADMIN, ROLE_EDITOR, ROLE_VIEWER, User

HASH_A = "d41d8cd98f00b204e9800998ecf8427e"
HASH_B = "0CC175B9C0F1B6A831C399E269772661"
HASH_C = "a1b2c3d4e5f60718293a4b5c6d7e8f90"


@pytest.fixture()
def app(tmp_path: pathlib.Path):
    class TestConfig(Config):
        TESTING = True
        SECRET_KEY = "test-secret"
        SQLALCHEMY_DATABASE_URI = f"sqlite:///{tmp_path / 'test.db'}"
        WTF_CSRF_ENABLED = False
        BOOTSTRAP_ADMIN_EMAIL = ""
        BOOTSTRAP_ADMIN_PASSWORD = ""
        NGINX_CACHE_PATH = ""
        NGINX_AUTO_PURGE = "0"
        NGINX_PURGE_ACTIONS = ""
        NGINX_FILESYSTEM_METHOD = "direct"

    app = create_app(TestConfig)
    yield app

    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(app):
    return app.test_client()


def _make_user(app, email: str, role: str) -> int:
    with app.app_context():
        user = User(email=email, name=role.title(), role=role, is_active=True)
        user.set_password("correct-horse")
        db.session.add(user)
        db.session.commit()
        return user.id


@pytest.fixture()
def admin_id(app) -> int:
    return _make_user(app, "admin@nginx-cache.org", ROLE_ADMIN)


@pytest.fixture()
def editor_id(app) -> int:
    return _make_user(app, "editor@nginx-cache.org", ROLE_EDITOR)


@pytest.fixture()
def viewer_id(app) -> int:
    return _make_user(app, "viewer@nginx-cache.org", ROLE_VIEWER)


def login(client, user_id: int) -> None:
    with client.session_transaction() as sess:
        sess["_user_id"] = str(user_id)
        sess["_fresh"] = True


@pytest.fixture()
def cache_zone(tmp_path: pathlib.Path) -> pathlib.Path:
    """A populated cache zone using levels=1:2 style subdirectories."""
    zone = tmp_path / "nginx-cache"
    (zone / "e" / "27").mkdir(parents=True)
    (zone / "1").mkdir()
    (zone / HASH_A).write_text("KEY: /\n")
    (zone / "e" / "27" / HASH_B).write_text("KEY: /about\n")
    (zone / "1" / HASH_C).write_text("KEY: /blog\n")
    return zone
