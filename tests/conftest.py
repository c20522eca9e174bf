from __future__ import annotations

import json
from pathlib import Path

import pytest

from ampscript.pipeline import ScriptImporter
from ampscript.stores import VersionMapStore

KNOWN_VERSIONS = {
    "amp-access": "0.1",
    "amp-access-laterpay": "0.2",
    "amp-analytics": "0.1",
    "amp-bind": "0.1",
    "amp-carousel": "0.2",
    "amp-dynamic-css-classes": "0.1",
    "amp-fx-collection": "0.1",
    "amp-geo": "0.1",
    "amp-lightbox-gallery": "0.1",
    "amp-list": "0.1",
    "amp-mustache": "0.2",
}


@pytest.fixture
def version_store(tmp_path: Path) -> VersionMapStore:
    """Provide a discovered version map seeded with commonly used components."""
    path = tmp_path / "components.json"
    path.write_text(json.dumps(KNOWN_VERSIONS), encoding="utf-8")
    return VersionMapStore(path)


@pytest.fixture
def importer(version_store: VersionMapStore) -> ScriptImporter:
    return ScriptImporter(store=version_store)
