#!/usr/bin/env python
"""Django's command-line utility for administrative tasks."""

import os
import sys


def with_default_port(argv: list[str], port: int) -> list[str]:
    """Add ``port`` to a ``runserver`` call that names no address."""
    if len(argv) < 2 or argv[1] != "runserver":
        return argv
    if any(not arg.startswith("-") for arg in argv[2:]):
        return argv
    return [*argv, str(port)]


def main() -> None:
    os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings.local")

    from django.conf import settings
    from django.core.management import execute_from_command_line

    execute_from_command_line(with_default_port(sys.argv, settings.PORT))


if __name__ == "__main__":
    main()
