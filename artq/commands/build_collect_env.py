"""Record the current environment as build data."""

from __future__ import annotations

import os

import click

from artq.buildinfo.store import get_build_dir, save_env_partial
from artq.cli import Context, pass_context
from artq.exceptions import BuildInfoError
from artq.utils.output import error, success

EXIT_SUCCESS = 0
EXIT_WRITE_ERROR = 1


@click.command("build-collect-env")
@click.argument("build_name")
@click.argument("build_number")
@pass_context
def cli(ctx: Context, build_name: str, build_number: str) -> None:
    """Record environment variables for BUILD_NAME / BUILD_NUMBER.

    Variables are filtered when the build is published, not here.
    """
    config = ctx.config
    if config is None:
        error("Configuration not loaded")
        raise SystemExit(EXIT_WRITE_ERROR)

    build_dir = get_build_dir(config.build_root, build_name, build_number)
    try:
        save_env_partial(build_dir, dict(os.environ))
    except (OSError, BuildInfoError) as e:
        error(f"Failed to record environment: {e}")
        raise SystemExit(EXIT_WRITE_ERROR)

    success(f"Collected environment variables for {build_name}/{build_number}")
