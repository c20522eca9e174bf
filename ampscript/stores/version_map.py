"""Persistent map from component name to its newest published version."""

from __future__ import annotations

import json
import os
import re
import tempfile
from pathlib import Path
from types import MappingProxyType
from typing import Callable, Dict, Iterable, Mapping, Tuple
from urllib.request import Request, urlopen

from ..components import DEFAULT_LISTING_URL
from ..logging import get_logger

_EXTENSION_DIR = re.compile(r"extensions/(amp-[^/]+)/([0-9]+)\.([0-9]+)$")

logger = get_logger("stores.version_map")


class VersionMapStore:
    """Reads and atomically replaces the discovered version map file."""

    def __init__(self, path: Path) -> None:
        self.path = path

    def load(self) -> Mapping[str, str]:
        """Return the stored map; a missing or malformed file reads as empty."""
        return MappingProxyType(read_version_file(self.path))

    def save(self, versions: Mapping[str, str]) -> None:
        payload = json.dumps(dict(sorted(versions.items())), indent=2)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, temp_name = tempfile.mkstemp(
            prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(payload)
            os.replace(temp_name, self.path)
        except BaseException:
            Path(temp_name).unlink(missing_ok=True)
            raise


def read_version_file(path: Path) -> Dict[str, str]:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return {}
    except (OSError, UnicodeDecodeError, json.JSONDecodeError):
        logger.debug("Ignoring unreadable version file %s", path)
        return {}
    if not isinstance(data, dict):
        return {}
    return {
        key: value
        for key, value in data.items()
        if isinstance(key, str) and isinstance(value, str) and value
    }


def load_overrides(path: Path) -> Dict[str, str]:
    """Read the project's pinned component versions."""
    return read_version_file(path)


def build_version_map(paths: Iterable[str]) -> Dict[str, str]:
    """Reduce extension directory paths to the highest version per component."""
    best: Dict[str, Tuple[int, int]] = {}
    for path in paths:
        match = _EXTENSION_DIR.search(path)
        if match is None:
            continue
        name = match.group(1)
        if name.endswith("impl"):
            continue
        version = (int(match.group(2)), int(match.group(3)))
        if name not in best or best[name] < version:
            best[name] = version
    return {name: f"{major}.{minor}" for name, (major, minor) in sorted(best.items())}


def fetch_listing(url: str = DEFAULT_LISTING_URL, *, timeout: float = 30.0) -> list[str]:
    """Fetch the repository tree listing and return every path in it."""
    request = Request(
        url,
        headers={"Accept": "application/vnd.github+json", "User-Agent": "ampscript"},
    )
    with urlopen(request, timeout=timeout) as response:  # type: ignore[arg-type]
        raw = response.read()
    payload = json.loads(raw.decode("utf-8"))
    tree = payload.get("tree") if isinstance(payload, dict) else None
    if not isinstance(tree, list):
        raise ValueError("Directory listing did not contain a 'tree' array")
    return [
        item["path"]
        for item in tree
        if isinstance(item, dict) and isinstance(item.get("path"), str)
    ]


def refresh_version_map(
    store: VersionMapStore,
    url: str = DEFAULT_LISTING_URL,
    *,
    fetcher: Callable[[str], Iterable[str]] | None = None,
) -> Mapping[str, str]:
    """Rebuild the version map from the remote listing and persist it.

    The stored file is only replaced once the listing has been fetched and
    reduced; any failure before that leaves it untouched.
    """
    fetch = fetcher or fetch_listing
    versions = build_version_map(fetch(url))
    store.save(versions)
    logger.info("Recorded versions for %d components in %s", len(versions), store.path)
    return MappingProxyType(versions)


__all__ = [
    "VersionMapStore",
    "build_version_map",
    "fetch_listing",
    "load_overrides",
    "read_version_file",
    "refresh_version_map",
]
