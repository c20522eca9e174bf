"""Persistence for discovered component versions."""

from .version_map import (
    VersionMapStore,
    build_version_map,
    fetch_listing,
    load_overrides,
    refresh_version_map,
)

__all__ = [
    "VersionMapStore",
    "build_version_map",
    "fetch_listing",
    "load_overrides",
    "refresh_version_map",
]
