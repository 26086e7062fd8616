"""Entry point for the task service."""

import sys
from typing import NoReturn

from task_service.cli import run_server
from task_service.config import load_settings_with_toml


def main() -> NoReturn:
    """Main entry point."""
    run_server(load_settings_with_toml())
    sys.exit(0)


if __name__ == "__main__":
    main()
