"""Detectors that look at identifiers and inline script or style content."""

from __future__ import annotations

from types import MappingProxyType
from typing import Iterable, Mapping, Sequence

from bs4 import BeautifulSoup

from .attributes import STATE_COMPONENT
from .base import Detector

_IDENTIFIED_COMPONENTS: Mapping[str, Sequence[str]] = MappingProxyType(
    {
        "amp-access-laterpay-dialog": ("amp-access-laterpay",),
    }
)

_DYNAMIC_CLASS_MARKERS = (".amp-referrer-", ".amp-viewer")


class IdentifierDetector(Detector):
    """Vendor integrations announced by a well-known element id."""

    name = "identifiers"

    def __init__(self, identifiers: Mapping[str, Sequence[str]] | None = None) -> None:
        self.identifiers = identifiers if identifiers is not None else _IDENTIFIED_COMPONENTS

    def detect(self, document: BeautifulSoup) -> Iterable[str]:
        found: list[str] = []
        for identifier, components in self.identifiers.items():
            if document.find(id=identifier) is None:
                continue
            found.extend(name for name in components if name not in found)
        return found


class GeoBindDetector(Detector):
    """amp-geo configured with ``"AmpBind": true`` publishes its groups to amp-bind."""

    name = "geo-bind"

    def detect(self, document: BeautifulSoup) -> Iterable[str]:
        for geo in document.find_all("amp-geo"):
            for script in geo.find_all("script", attrs={"type": "application/json"}):
                if "AmpBind" in script.get_text():
                    return [STATE_COMPONENT]
        return []


class DynamicClassesDetector(Detector):
    """Custom styles targeting referrer or viewer classes need amp-dynamic-css-classes."""

    name = "dynamic-classes"

    COMPONENT = "amp-dynamic-css-classes"

    def detect(self, document: BeautifulSoup) -> Iterable[str]:
        for style in document.find_all("style", attrs={"amp-custom": True}):
            css = style.get_text()
            if any(marker in css for marker in _DYNAMIC_CLASS_MARKERS):
                return [self.COMPONENT]
        return []
