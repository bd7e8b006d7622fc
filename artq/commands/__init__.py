"""Subcommands of the ``artq`` group.

Each public module defines a click command named ``cli``. The command name
is the module name with ``_`` replaced by ``-`` (``build_publish`` becomes
``build-publish``).
"""

from __future__ import annotations

import importlib
import pkgutil
from typing import TYPE_CHECKING

import click

if TYPE_CHECKING:
    from collections.abc import Iterator


def command_name_for(module_name: str) -> str:
    return module_name.replace("_", "-")


def discover_commands() -> Iterator[click.Command]:
    """Yield the ``cli`` command of every public module, sorted by module name.

    Raises:
        RuntimeError: If a command name does not match its module name.
    """
    for module_info in sorted(pkgutil.iter_modules(__path__), key=lambda m: m.name):
        if module_info.name.startswith("_"):
            continue

        module = importlib.import_module(f"{__name__}.{module_info.name}")
        cmd = getattr(module, "cli", None)
        if not isinstance(cmd, click.Command):
            continue

        expected = command_name_for(module_info.name)
        if cmd.name != expected:
            raise RuntimeError(
                f"Command in {module.__name__} is named {cmd.name!r}, expected {expected!r}"
            )
        yield cmd
