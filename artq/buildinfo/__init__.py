"""Build info collection, filtering and publishing."""

from artq.buildinfo.client import BuildInfoClient
from artq.buildinfo.filters import exclude_env, filter_env, include_env, split_patterns
from artq.buildinfo.models import create_build_info
from artq.buildinfo.store import (
    read_build_data,
    remove_build_dir,
    save_env_partial,
)

__all__ = [
    "BuildInfoClient",
    "create_build_info",
    "exclude_env",
    "filter_env",
    "include_env",
    "read_build_data",
    "remove_build_dir",
    "save_env_partial",
    "split_patterns",
]
