import logging
import os

import click
from flask.cli import AppGroup

from .cache import ConfigurationError, PurgeError
from .events import build_controller
from .settings import load_config, save_config

logger = logging.getLogger(__name__)

cache_cli = AppGroup("nginx-cache", help="Inspect and purge the Nginx cache zone.")


@cache_cli.command("validate")
def validate_command():
    """Check the configured cache zone path."""
    config = load_config()
    result = build_controller().validate()
    if result.valid:
        click.echo(f"OK: {config.path} looks like a cache zone.")
        return
    click.echo(result.message, err=True)
    raise SystemExit(1)


@cache_cli.command("purge")
def purge_command():
    """Delete the cache zone now."""
    try:
        build_controller().request_purge()
    except ConfigurationError as e:
        click.echo(e.message, err=True)
        raise SystemExit(1)
    except PurgeError as e:
        click.echo(f"Cache could not be purged. {e.message}", err=True)
        raise SystemExit(1)
    logger.info("Cache purged from the command line")
    click.echo("Cache purged.")


@cache_cli.command("config")
@click.option("--path", "cache_path", default=None, help="Absolute path of the cache zone.")
@click.option("--auto-purge/--no-auto-purge", default=None, help="Purge when content changes.")
def config_command(cache_path, auto_purge):
    """Show or change the cache settings."""
    if cache_path and not os.path.isabs(cache_path.strip()):
        raise click.BadParameter("must be an absolute path", param_hint="--path")

    config = load_config()
    if cache_path is not None or auto_purge is not None:
        config = save_config(
            config.path if cache_path is None else cache_path,
            config.auto_purge_enabled if auto_purge is None else auto_purge,
        )
    click.echo(f"path: {config.path or '(not set)'}")
    click.echo(f"auto purge: {'on' if config.auto_purge_enabled else 'off'}")
