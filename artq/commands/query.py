"""Compile search patterns or spec files into item queries."""

from __future__ import annotations

import json
from pathlib import Path

import click

from artq.cli import Context, pass_context
from artq.config import DEFAULT_RETURN_FIELDS
from artq.exceptions import MalformedSpecFileError, SpecEntryError
from artq.query.spec import SpecEntry, classify, compile_spec, create_spec, load_spec_file
from artq.utils.output import error, verbose, warning

EXIT_SUCCESS = 0
EXIT_USAGE_ERROR = 1
EXIT_COMPILE_ERROR = 2
EXIT_SPEC_ERROR = 3


def _parse_fields(fields: str | None, default: list[str]) -> list[str]:
    if fields is None:
        return default
    return [f.strip() for f in fields.split(",") if f.strip()]


def _entry_label(entry: SpecEntry) -> str:
    return entry.pattern or entry.aql


@click.command("query")
@click.argument("pattern", required=False)
@click.option(
    "--spec",
    "spec_path",
    type=click.Path(exists=False, dir_okay=False, path_type=Path),
    default=None,
    help="JSON spec file listing patterns or raw queries",
)
@click.option(
    "--props",
    default="",
    help='Property filters, e.g. "status=released;team=core"',
)
@click.option(
    "--recursive/--no-recursive",
    default=True,
    show_default=True,
    help="Also match items in subdirectories",
)
@click.option(
    "--folders",
    is_flag=True,
    default=False,
    help="Match folders instead of files",
)
@click.option(
    "--fields",
    default=None,
    help="Comma-separated fields to include (default: from config)",
)
@click.option(
    "--format",
    "-f",
    "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format (default: text)",
)
@click.option(
    "--keep-going",
    "-k",
    is_flag=True,
    default=False,
    help="Continue with remaining spec entries after a failure",
)
@pass_context
def cli(
    ctx: Context,
    pattern: str | None,
    spec_path: Path | None,
    props: str,
    recursive: bool,
    folders: bool,
    fields: str | None,
    output_format: str,
    keep_going: bool,
) -> None:
    """Compile PATTERN (or every entry of --spec) into item queries.

    PATTERN has the form repository/path/name where * matches any run of
    characters. A bare repository name searches the whole repository.

    \b
    Examples:
      artq query "libs-release/org/*.jar"
      artq query "libs-release/org/*.jar" --no-recursive
      artq query "libs-release/a/*b*c*" --props "status=ok;team=core"
      artq query "libs-release/build-*/" --folders
      artq query --spec download-spec.json --format json

    Queries are printed one per line; the command never contacts the server.
    """
    if (pattern is None) == (spec_path is None):
        error("Provide either PATTERN or --spec", hint="See 'artq query --help'")
        raise SystemExit(EXIT_USAGE_ERROR)

    # Spec entries carry their own props and recursive flag.
    if spec_path is not None and (props or not recursive):
        error(
            "--props and --no-recursive only apply to PATTERN",
            hint="Set props and recursive on each spec entry instead",
        )
        raise SystemExit(EXIT_USAGE_ERROR)

    config = ctx.config
    default_fields = list(config.return_fields if config is not None else DEFAULT_RETURN_FIELDS)
    return_fields = _parse_fields(fields, default_fields)

    if spec_path is not None:
        try:
            entries = load_spec_file(spec_path)
        except MalformedSpecFileError as e:
            error(str(e))
            raise SystemExit(EXIT_SPEC_ERROR)
    else:
        entries = create_spec(pattern, props=props, recursive=recursive)

    results: list[dict[str, object]] = []
    failed = 0
    for index, entry in enumerate(entries):
        spec_type = classify(entry)
        verbose(f"Entry #{index + 1}: {spec_type.value if spec_type else 'empty'}")
        try:
            (query,) = compile_spec([entry], return_fields, folders)
        except SpecEntryError as e:
            failed += 1
            message = f"Spec entry #{index + 1} ({e.fragment!r}): {e.reason}"
            if not keep_going:
                error(message)
                raise SystemExit(EXIT_COMPILE_ERROR)
            warning(message)
            continue
        results.append(
            {
                "index": index + 1,
                "type": spec_type.value if spec_type else None,
                "pattern": _entry_label(entry),
                "query": query,
            }
        )

    if output_format == "json":
        click.echo(json.dumps(results, indent=2))
    else:
        for result in results:
            click.echo(result["query"])

    if failed:
        raise SystemExit(EXIT_COMPILE_ERROR)
