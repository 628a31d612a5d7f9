import os

class Config:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-unsafe-change-me")
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///local.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Bootstrap first admin user on first run (only if DB has no users)
    BOOTSTRAP_ADMIN_EMAIL = os.getenv("ADMIN_EMAIL", "")
    BOOTSTRAP_ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "")
    BOOTSTRAP_ADMIN_NAME = os.getenv("ADMIN_NAME", "Admin")

    APP_NAME = os.getenv("APP_NAME", "nginx cache")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # Used only until the settings page has been saved once.
    NGINX_CACHE_PATH = os.getenv("NGINX_CACHE_PATH", "")
    NGINX_AUTO_PURGE = os.getenv("NGINX_AUTO_PURGE", "0")

    # Comma separated event names; empty means the built-in default list.
    NGINX_PURGE_ACTIONS = os.getenv("NGINX_PURGE_ACTIONS", "")

    # Only "direct" (local disk, process permissions) can be acquired.
    NGINX_FILESYSTEM_METHOD = os.getenv("NGINX_FILESYSTEM_METHOD", "direct")

    # Seconds a "Purge Cache" link stays usable.
    NGINX_PURGE_TOKEN_TTL = int(os.getenv("NGINX_PURGE_TOKEN_TTL", "3600"))
