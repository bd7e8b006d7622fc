"""Build info document construction."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime
from typing import Any

from artq import __version__
from artq.buildinfo.filters import filter_env
from artq.buildinfo.store import Partial

CLI_AGENT_NAME = "artq"
BUILD_AGENT_NAME = "GENERIC"


def format_started(started: datetime) -> str:
    """Format a start time as ``2006-01-02T15:04:05.000-0700``."""
    if started.tzinfo is None:
        started = started.astimezone()
    millis = started.microsecond // 1000
    return started.strftime("%Y-%m-%dT%H:%M:%S.") + f"{millis:03d}" + started.strftime("%z")


def collect_partials(
    partials: Sequence[Partial],
    include: Sequence[str],
    exclude: Sequence[str],
) -> tuple[list[dict[str, Any]], list[dict[str, Any]], dict[str, str]]:
    """Merge partials into (artifacts, dependencies, filtered env)."""
    artifacts: list[dict[str, Any]] = []
    dependencies: list[dict[str, Any]] = []
    env: dict[str, str] = {}
    for partial in partials:
        if partial.artifacts is not None:
            artifacts.extend(partial.artifacts)
        elif partial.dependencies is not None:
            dependencies.extend(partial.dependencies)
        elif partial.env is not None:
            env.update(filter_env(partial.env, include, exclude))
    return artifacts, dependencies, env


def create_module(
    build_name: str,
    artifacts: list[dict[str, Any]],
    dependencies: list[dict[str, Any]],
) -> dict[str, Any]:
    module: dict[str, Any] = {"id": build_name}
    if artifacts:
        module["artifacts"] = artifacts
    if dependencies:
        module["dependencies"] = dependencies
    return module


def create_build_info(
    build_name: str,
    build_number: str,
    started: datetime,
    partials: Sequence[Partial],
    include: Sequence[str],
    exclude: Sequence[str],
) -> dict[str, Any]:
    """Build the document published for a build.

    Args:
        build_name: Build name, also the id of the single module.
        build_number: Build number.
        started: When the build was first recorded.
        partials: Recorded partials in timestamp order.
        include: Env key patterns to keep.
        exclude: Env key patterns to drop after the include filter.

    Returns:
        JSON-serializable dict; ``properties`` is omitted when no env
        variables survive filtering.
    """
    artifacts, dependencies, env = collect_partials(partials, include, exclude)
    build_info: dict[str, Any] = {
        "name": build_name,
        "number": build_number,
        "agent": {"name": CLI_AGENT_NAME, "version": __version__},
        "buildAgent": {"name": BUILD_AGENT_NAME, "version": __version__},
        "started": format_started(started),
        "modules": [create_module(build_name, artifacts, dependencies)],
    }
    if env:
        build_info["properties"] = env
    return build_info
