"""CLI entry point for task-service.

Usage:
    task-service                           # Start the HTTP server
    task-service --port 8080               # Start on another port
    task-service init-config               # Create config file
    task-service --version                 # Show version
    task-service --help                    # Show help
"""

import contextlib
import sys
from pathlib import Path
from typing import Any

import click
import tomli_w

from task_service import __version__
from task_service.config import Settings, get_config_path, load_settings_with_toml


def get_default_config() -> dict[str, Any]:
    """Get default configuration for init-config.

    Returns:
        Default configuration dictionary
    """
    return {
        "server": {
            "host": "localhost",
            "port": 6969,
        },
        "logging": {
            "level": "INFO",
            "format": "json",
        },
        "metrics": {
            "enabled": True,
        },
    }


@click.group(invoke_without_command=True)
@click.option(
    "--config",
    type=click.Path(exists=False),
    help="Override global config file path",
)
@click.option("--host", type=str, help="Override bind address")
@click.option("--port", type=int, help="Override port")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"]),
    help="Override log level",
)
@click.version_option(version=__version__, prog_name="task-service")
@click.pass_context
def main(
    ctx: click.Context,
    config: str | None,
    host: str | None,
    port: int | None,
    log_level: str | None,
) -> None:
    """Task Service HTTP server.

    Configuration is loaded from (in priority order):
    1. CLI arguments
    2. Environment variables (TASK_SERVICE_*)
    3. Global config file (~/.config/task-service/config.toml)
    4. Built-in defaults
    """
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config

    # If no subcommand, run server
    if ctx.invoked_subcommand is None:
        settings = load_settings_with_toml(
            Path(config) if config else None,
            host=host,
            port=port,
            log_level=log_level,
        )
        run_server(settings)


@main.command()
@click.pass_context
def init_config(ctx: click.Context) -> None:
    """Create global configuration file with defaults.

    Creates the configuration file at ~/.config/task-service/config.toml
    (or %APPDATA%/task-service/config.toml on Windows).
    """
    config_path = Path(ctx.obj.get("config_path") or get_config_path())

    if config_path.exists():
        click.echo(f"Config file already exists: {config_path}")
        if not click.confirm("Overwrite?"):
            sys.exit(0)

    config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, "wb") as f:
        tomli_w.dump(get_default_config(), f)

    # chmod may not be supported on Windows
    with contextlib.suppress(OSError):
        config_path.chmod(0o600)

    click.echo(f"Created config file: {config_path}")


def run_server(settings: Settings) -> None:
    """Run the HTTP server until interrupted.

    Args:
        settings: Resolved service settings
    """
    import uvicorn

    from task_service.api.http_server import create_http_server
    from task_service.core import TaskStore
    from task_service.utils.logging import get_logger, setup_logging

    setup_logging(settings)
    logger = get_logger(__name__)

    store = TaskStore()
    app = create_http_server(store, settings)

    logger.info(
        "starting_task_service",
        version=__version__,
        host=settings.host,
        port=settings.port,
    )
    try:
        uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)
    except KeyboardInterrupt:
        logger.info("task_service_interrupted")
    finally:
        logger.info("task_service_stopped", tasks=len(store))


if __name__ == "__main__":
    main()
