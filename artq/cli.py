"""Command-line interface for artq."""

from __future__ import annotations

import os
from pathlib import Path

import click

from artq import __version__
from artq.config import Config, load_config
from artq.exceptions import ConfigError
from artq.utils.output import (
    error,
    set_color,
    set_verbosity,
    warning,
)

# Extra pages for `artq help TOPIC`, beside the per-command help.
HELP_TOPICS: dict[str, str] = {
    "patterns": """\
Search patterns

  A pattern has the form REPO/PATH/NAME. `*` matches any run of
  characters, including `/` when the search is recursive.

    libs-release               every file in the repository
    libs-release/org/          every file under org/
    libs-release/org/*.jar     jars in org/ and, recursively, below it
    libs-release/(org)/a.jar   parentheses are stripped before matching

  A pattern without `*` that names a single file is compiled as a
  literal path and never searched recursively.

  Property filters are written key=value;key=value and must all match.
""",
    "spec": """\
Spec files

  `artq query --spec FILE` reads a JSON document:

    {"files": [
      {"pattern": "libs-release/org/*.jar", "props": "status=ok",
       "recursive": "false"},
      {"aql": {"items.find": {"repo": "libs-release"}}}
    ]}

  Each entry has either a pattern or a raw `aql` body. Flags accept
  booleans or the strings "true" and "false"; recursive defaults to true.
  Entries are compiled in order and a failing entry is reported by its
  position.
""",
}


class Context:
    """Shared context for all commands."""

    def __init__(self) -> None:
        self.config: Config | None = None
        self.verbose: bool = False
        self.debug: bool = False
        self.quiet: bool = False


pass_context = click.make_pass_decorator(Context, ensure=True)


@click.group()
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=False, path_type=Path),
    envvar="ARTQ_CONFIG",
    help="Path to config file (default: ~/.config/artq/config.toml, env: ARTQ_CONFIG)",
)
@click.option(
    "--url",
    "-u",
    default=None,
    envvar="ARTQ_URL",
    help="Repository server URL (overrides config, env: ARTQ_URL)",
)
@click.option(
    "--no-color",
    is_flag=True,
    default=False,
    help="Disable colored output",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    default=False,
    help="Print per-entry progress to stderr",
)
@click.option(
    "--debug",
    is_flag=True,
    default=False,
    help="Log requests and build data access (implies --verbose)",
)
@click.option(
    "--quiet",
    "-q",
    is_flag=True,
    default=False,
    help="Suppress config warnings",
)
@click.version_option(version=__version__, prog_name="artq")
@click.pass_context
def cli(
    ctx: click.Context,
    config: Path | None,
    url: str | None,
    no_color: bool,
    verbose: bool,
    debug: bool,
    quiet: bool,
) -> None:
    """artq: Compile file patterns into artifact repository queries.

    Turns glob patterns such as repo/libs/*.jar, optionally filtered by
    properties, into item queries that match the server's separate
    path and name fields, and publishes recorded build info.

    Configuration is loaded from ~/.config/artq/config.toml by default.
    Use --config or ARTQ_CONFIG to specify an alternative file.

    \b
    Examples:
      artq query "libs-release/org/*.jar" --props "status=released"
      artq help patterns
    """
    app_ctx = ctx.ensure_object(Context)
    app_ctx.verbose = verbose or debug
    app_ctx.debug = debug
    app_ctx.quiet = quiet

    set_verbosity(verbose=verbose, debug=debug)

    # NO_COLOR wins over config
    color_forced_off = no_color or os.environ.get("NO_COLOR") is not None
    if color_forced_off:
        set_color(False)

    try:
        app_ctx.config, warnings = load_config(config, server_url=url)
    except (ConfigError, OSError) as e:
        error(str(e), hint="Fix the file or regenerate it with 'artq init-config --force'")
        ctx.exit(1)
        return

    if not color_forced_off and not app_ctx.config.colored_output:
        set_color(False)

    # init-config is how a missing config gets fixed; don't nag about it there
    if not quiet and ctx.invoked_subcommand != "init-config":
        for warn in warnings:
            warning(warn)


@cli.command("help")
@click.argument("topic", required=False, nargs=-1)
@click.pass_context
def help_cmd(ctx: click.Context, topic: tuple[str, ...]) -> None:
    """Show help for a command or a topic.

    Topics: patterns, spec.
    """
    if len(topic) == 1 and topic[0] in HELP_TOPICS:
        click.echo(HELP_TOPICS[topic[0]])
        return

    group = cli
    for name in topic:
        cmd = group.get_command(ctx, name)
        if cmd is None:
            error(
                f"Unknown command or topic: {name}",
                hint=f"Topics: {', '.join(sorted(HELP_TOPICS))}",
            )
            ctx.exit(1)
            return
        if isinstance(cmd, click.Group):
            group = cmd
        else:
            click.echo(cmd.get_help(ctx))
            return
    click.echo(group.get_help(ctx))


def register_commands() -> None:
    """Register all commands from the commands package."""
    from artq.commands import discover_commands

    for command in discover_commands():
        cli.add_command(command)


register_commands()
