import logging

from flask import Flask, redirect, url_for

from config import Config
from .extensions import db, login_manager
from .log import configure_logging
from .models import User, ROLE_ADMIN

logger = logging.getLogger(__name__)


def create_app(config_object=Config, purge_actions=None):
    """
    Build the admin app.

    ``purge_actions`` overrides the content events that trigger an automatic
    purge; by default they come from NGINX_PURGE_ACTIONS or the built-in list.
    """
    app = Flask(__name__)
    app.config.from_object(config_object)
    app.config.setdefault("SQLALCHEMY_ENGINE_OPTIONS", {})
    if not app.config["SQLALCHEMY_DATABASE_URI"].startswith("sqlite"):
        app.config["SQLALCHEMY_ENGINE_OPTIONS"].update({
            "pool_pre_ping": True,
            "pool_recycle": 300,
        })

    configure_logging(app)

    # Init extensions
    db.init_app(app)
    login_manager.init_app(app)

    @login_manager.user_loader
    def load_user(user_id):
        return db.session.get(User, int(user_id))

    from . import events
    events.init_app(app, db, actions=purge_actions)

    # Blueprints
    from .auth.routes import auth_bp
    from .admin.routes import admin_bp
    from .content.routes import content_bp

    app.register_blueprint(auth_bp)
    app.register_blueprint(admin_bp)
    app.register_blueprint(content_bp)

    from .cli import cache_cli
    app.cli.add_command(cache_cli)

    # Create tables + bootstrap first admin if needed
    with app.app_context():
        db.create_all()
        _bootstrap_admin_if_needed(app)

    @app.get("/")
    def root():
        return redirect(url_for("content.posts_list"))

    @app.get("/health")
    def health():
        return {"status": "ok"}

    return app


def _bootstrap_admin_if_needed(app: Flask):
    """
    If the DB has no users, create a first admin user from env vars.
    This runs on startup and will only create a user once.
    """
    if User.query.count() > 0:
        return

    email = (app.config.get("BOOTSTRAP_ADMIN_EMAIL") or "").strip().lower()
    password = app.config.get("BOOTSTRAP_ADMIN_PASSWORD") or ""
    name = app.config.get("BOOTSTRAP_ADMIN_NAME") or "Admin"

    if not email or not password:
        # No bootstrap info provided; leave DB empty.
        return

    admin = User(email=email, name=name, role=ROLE_ADMIN, is_active=True)
    admin.set_password(password)
    db.session.add(admin)
    db.session.commit()
    logger.info("Bootstrapped admin user %s", email)
