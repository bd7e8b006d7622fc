"""On-disk build data recorded between commands.

Layout under the build root::

    <name>_<number>/
        details.json          {"started": "<ISO-8601 timestamp>"}
        partials/<ms>.json    {"timestamp": <ms>, "artifacts" | "dependencies" | "env": ...}
"""

from __future__ import annotations

import json
import logging
import shutil
import time
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any
from urllib.parse import quote

from artq.exceptions import BuildDataNotFoundError, BuildInfoError

logger = logging.getLogger(__name__)

DETAILS_FILENAME = "details.json"
PARTIALS_DIRNAME = "partials"


@dataclass
class Partial:
    """One recorded chunk of build data."""

    timestamp: int
    artifacts: list[dict[str, Any]] | None = None
    dependencies: list[dict[str, Any]] | None = None
    env: dict[str, str] | None = None


@dataclass
class BuildData:
    """Everything recorded for one build, partials sorted by timestamp."""

    started: datetime
    partials: list[Partial] = field(default_factory=list)


def get_build_dir(build_root: Path, build_name: str, build_number: str) -> Path:
    """Return the directory holding data for a build."""
    return build_root / quote(f"{build_name}_{build_number}", safe="")


def _write_json(path: Path, payload: dict[str, Any]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as handle:
        json.dump(payload, handle, indent=2)


def _read_json(path: Path) -> Any:
    try:
        with path.open("r", encoding="utf-8") as handle:
            return json.load(handle)
    except (OSError, json.JSONDecodeError) as e:
        raise BuildInfoError(f"Failed to read build data file {path}: {e}") from e


def ensure_general_details(build_dir: Path, started: datetime | None = None) -> datetime:
    """Record the build start time once; return the recorded value."""
    details_path = build_dir / DETAILS_FILENAME
    if details_path.exists():
        return read_general_details(build_dir)
    started = started or datetime.now().astimezone()
    _write_json(details_path, {"started": started.isoformat()})
    return started


def read_general_details(build_dir: Path) -> datetime:
    payload = _read_json(build_dir / DETAILS_FILENAME)
    try:
        return datetime.fromisoformat(payload["started"])
    except (KeyError, TypeError, ValueError) as e:
        raise BuildInfoError(f"Invalid build details in {build_dir}: {e}") from e


def save_partial(build_dir: Path, partial: Partial) -> Path:
    """Write a partial and make sure the build has general details."""
    ensure_general_details(build_dir)
    payload: dict[str, Any] = {"timestamp": partial.timestamp}
    if partial.artifacts is not None:
        payload["artifacts"] = partial.artifacts
    if partial.dependencies is not None:
        payload["dependencies"] = partial.dependencies
    if partial.env is not None:
        payload["env"] = partial.env
    path = build_dir / PARTIALS_DIRNAME / f"{partial.timestamp}-{uuid.uuid4().hex[:8]}.json"
    _write_json(path, payload)
    logger.debug("Saved build partial %s", path)
    return path


def save_env_partial(build_dir: Path, env: dict[str, str]) -> Path:
    """Record environment variables as a partial, keyed with ``buildInfo.env.``."""
    recorded = {f"buildInfo.env.{key}": value for key, value in env.items()}
    return save_partial(build_dir, Partial(timestamp=time.time_ns() // 1_000_000, env=recorded))


def _parse_partial(payload: Any, path: Path) -> Partial:
    if not isinstance(payload, dict):
        raise BuildInfoError(f"Invalid build partial {path}: expected an object")
    try:
        timestamp = int(payload.get("timestamp", 0))
    except (TypeError, ValueError) as e:
        raise BuildInfoError(f"Invalid build partial {path}: bad timestamp: {e}") from e

    for key, expected in (("artifacts", list), ("dependencies", list), ("env", dict)):
        value = payload.get(key)
        if value is not None and not isinstance(value, expected):
            raise BuildInfoError(
                f"Invalid build partial {path}: '{key}' must be a {expected.__name__}"
            )
    return Partial(
        timestamp=timestamp,
        artifacts=payload.get("artifacts"),
        dependencies=payload.get("dependencies"),
        env=payload.get("env"),
    )


def read_build_data(build_root: Path, build_name: str, build_number: str) -> BuildData:
    """Load all recorded data for a build.

    Raises:
        BuildDataNotFoundError: If no partials were recorded.
        BuildInfoError: If a data file cannot be read.
    """
    build_dir = get_build_dir(build_root, build_name, build_number)
    partials_dir = build_dir / PARTIALS_DIRNAME
    paths = sorted(partials_dir.glob("*.json")) if partials_dir.is_dir() else []
    if not paths:
        raise BuildDataNotFoundError(build_name, build_number)

    partials = [_parse_partial(_read_json(path), path) for path in paths]
    partials.sort(key=lambda p: p.timestamp)
    return BuildData(started=read_general_details(build_dir), partials=partials)


def remove_build_dir(build_root: Path, build_name: str, build_number: str) -> None:
    """Delete recorded data for a build once it has been published."""
    build_dir = get_build_dir(build_root, build_name, build_number)
    if build_dir.exists():
        shutil.rmtree(build_dir)
        logger.debug("Removed build directory %s", build_dir)
