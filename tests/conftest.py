"""Shared pytest fixtures."""

from __future__ import annotations

import shutil
import tempfile
from pathlib import Path
from typing import TYPE_CHECKING

import pytest

if TYPE_CHECKING:
    from collections.abc import Generator


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files."""
    path = Path(tempfile.mkdtemp())
    try:
        yield path
    finally:
        shutil.rmtree(path, ignore_errors=True)


@pytest.fixture
def sample_config(temp_dir: Path) -> Path:
    """Create a sample config file."""
    config_path = temp_dir / "config.toml"
    config_path.write_text(f"""[server]
url = "https://repo.example.com/artifactory"
user = "deployer"
password = "s3cret"

[query]
return_fields = ['"name"', '"path"']

[build]
root = "{temp_dir / 'builds'}"
env_include = "*"
env_exclude = "*password*"

[display]
colored_output = false
""")
    return config_path


@pytest.fixture
def sample_spec(temp_dir: Path) -> Path:
    """Create a spec file with a pattern entry and a raw query entry."""
    spec_path = temp_dir / "spec.json"
    spec_path.write_text("""{
  "files": [
    {
      "pattern": "libs-release/org/*.jar",
      "props": "status=released",
      "recursive": "false"
    },
    {
      "aql": {
        "items.find": {
          "repo": "libs-release",
          "name": {"$match": "*.pom"}
        }
      }
    }
  ]
}
""")
    return spec_path
