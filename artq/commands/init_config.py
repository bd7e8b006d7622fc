"""Initialize configuration file for artq."""

from __future__ import annotations

from importlib import resources
from pathlib import Path

import click

from artq.cli import Context, pass_context
from artq.config import Config, get_default_config_path, save_config
from artq.utils.output import error, info, success


def _load_example_config() -> str:
    """Load the example configuration from package data."""
    return resources.files("artq").joinpath("config.example.toml").read_text()


@click.command("init-config")
@click.option(
    "--force",
    "-f",
    is_flag=True,
    default=False,
    help="Overwrite existing config file",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(path_type=Path),
    default=None,
    help="Output path for config file (default: ~/.config/artq/config.toml)",
)
@click.option(
    "--server-url",
    default=None,
    help="Write a config for this server instead of the commented example",
)
@click.option("--user", default=None, help="User name stored with --server-url")
@pass_context
def cli(
    ctx: Context,
    force: bool,
    output: Path | None,
    server_url: str | None,
    user: str | None,
) -> None:
    """Create a new configuration file.

    Without --server-url the commented example configuration is written.

    \b
    Examples:
      artq init-config
      artq init-config --output ./artq.toml
      artq init-config --server-url https://repo.example.com/artifactory/ --user ci
    """
    config_path = output if output is not None else get_default_config_path()
    config_path = config_path.expanduser().resolve()

    if config_path.exists() and not force:
        error(
            f"Config file already exists: {config_path}",
            hint="Use --force to overwrite",
        )
        raise SystemExit(1)

    try:
        if server_url is not None:
            config = Config(server_url=server_url, user=user)
            config.validate()
            save_config(config, config_path)
        else:
            config_path.parent.mkdir(parents=True, exist_ok=True)
            config_path.write_text(_load_example_config())
        config_path.chmod(0o600)
    except OSError as e:
        error(f"Failed to write config file: {e}")
        raise SystemExit(1)

    success(f"Created config file: {config_path}")
    info("Edit this file to customize your settings.")
