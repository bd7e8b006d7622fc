"""Publish recorded build info to the repository server."""

from __future__ import annotations

import json

import click

from artq.buildinfo.client import BuildInfoClient
from artq.buildinfo.filters import split_patterns
from artq.buildinfo.models import create_build_info
from artq.buildinfo.store import read_build_data, remove_build_dir
from artq.cli import Context, pass_context
from artq.exceptions import BuildInfoError, ServerError
from artq.utils.output import error, info, success, warning

EXIT_SUCCESS = 0
EXIT_NO_SERVER = 1
EXIT_BUILD_DATA_ERROR = 2
EXIT_PUBLISH_ERROR = 3


@click.command("build-publish")
@click.argument("build_name")
@click.argument("build_number")
@click.option(
    "--env-include",
    default=None,
    help="';'-separated patterns of env keys to publish (default: from config)",
)
@click.option(
    "--env-exclude",
    default=None,
    help="';'-separated patterns of env keys to withhold (default: from config)",
)
@click.option(
    "--dry-run",
    is_flag=True,
    default=False,
    help="Print the build info document instead of publishing it",
)
@pass_context
def cli(
    ctx: Context,
    build_name: str,
    build_number: str,
    env_include: str | None,
    env_exclude: str | None,
    dry_run: bool,
) -> None:
    """Publish the data recorded for BUILD_NAME / BUILD_NUMBER.

    Recorded artifacts, dependencies and environment variables are merged
    into one build info document. Environment keys are kept when they
    match an include pattern and no exclude pattern.

    \b
    Examples:
      artq build-publish my-build 42 --dry-run
      artq build-publish my-build 42 --env-exclude "*token*;*password*"
    """
    config = ctx.config
    if config is None:
        error("Configuration not loaded")
        raise SystemExit(EXIT_NO_SERVER)

    if not dry_run and not config.server_url:
        error("No server URL configured", hint="Set server.url in the config or pass --url")
        raise SystemExit(EXIT_NO_SERVER)

    include = split_patterns(env_include if env_include is not None else config.env_include)
    exclude = split_patterns(env_exclude if env_exclude is not None else config.env_exclude)

    try:
        build_data = read_build_data(config.build_root, build_name, build_number)
    except BuildInfoError as e:
        error(str(e))
        raise SystemExit(EXIT_BUILD_DATA_ERROR)

    build_info = create_build_info(
        build_name,
        build_number,
        build_data.started,
        build_data.partials,
        include,
        exclude,
    )

    if dry_run:
        click.echo(json.dumps(build_info, indent=2))
        return

    client = BuildInfoClient(
        config.server_url,
        user=config.user,
        password=config.password,
        api_key=config.api_key,
    )
    info("Deploying build info...")
    try:
        client.publish(build_info)
    except ServerError as e:
        error(str(e))
        raise SystemExit(EXIT_PUBLISH_ERROR)

    success(
        "Build info successfully deployed. Browse it under "
        f"{client.build_url(build_name, build_number)}"
    )
    try:
        remove_build_dir(config.build_root, build_name, build_number)
    except OSError as e:
        warning(f"Published, but could not remove recorded build data: {e}")
