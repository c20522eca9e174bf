"""Document scanner that runs the detector battery over parsed HTML."""

from __future__ import annotations

from typing import Iterable, List, Optional, Set, Tuple
from urllib.parse import urlsplit

from bs4 import BeautifulSoup

from .components import CUSTOM_ELEMENT, CUSTOM_TEMPLATE, DEFAULT_CDN_BASE, canonical_component
from .detectors import Detector, default_detectors
from .logging import get_logger

# Evergreen and long-term-stable channels, classic and module builds.
_RUNTIME_SUFFIXES = ("/v0.js", "/v0.mjs", "/lts/v0.js", "/lts/v0.mjs")


def parse_document(html: str) -> BeautifulSoup:
    """Parse raw markup into a queryable tree."""
    return BeautifulSoup(html, "html.parser")


class DocumentScanner:
    """Unions the output of an ordered list of detectors into one requirement set."""

    def __init__(self, detectors: Optional[Iterable[Detector]] = None) -> None:
        self.detectors: List[Detector] = (
            list(detectors) if detectors is not None else default_detectors()
        )
        self.logger = get_logger("scanner")

    def scan(self, document: BeautifulSoup) -> Set[str]:
        required: Set[str] = set()
        for _, contributed in self.scan_with_trace(document):
            required.update(contributed)
        return required

    def scan_with_trace(self, document: BeautifulSoup) -> List[Tuple[str, List[str]]]:
        """Return each detector's canonical contributions in execution order."""
        trace: List[Tuple[str, List[str]]] = []
        for detector in self.detectors:
            contributed: List[str] = []
            for raw in detector.detect(document):
                component = canonical_component(raw)
                if component is not None and component not in contributed:
                    contributed.append(component)
            if contributed:
                self.logger.debug(
                    "Detector %s contributed %s", detector.name, ", ".join(contributed)
                )
            trace.append((detector.name, contributed))
        return trace


def existing_components(document: BeautifulSoup) -> Set[str]:
    """Return components whose extension script the document already declares."""
    present: Set[str] = set()
    for attribute in (CUSTOM_ELEMENT, CUSTOM_TEMPLATE):
        for script in document.find_all("script", attrs={attribute: True}):
            value = script.get(attribute)
            if isinstance(value, str) and value.strip():
                present.add(value.strip().lower())
    return present


def has_runtime_script(document: BeautifulSoup, cdn_base: str = DEFAULT_CDN_BASE) -> bool:
    """Return True when the base runtime script is already loaded."""
    cdn = urlsplit(cdn_base)
    prefix = cdn.path.rstrip("/")
    runtime_paths = {f"{prefix}{suffix}" for suffix in _RUNTIME_SUFFIXES}
    for script in document.find_all("script", src=True):
        if script.has_attr(CUSTOM_ELEMENT) or script.has_attr(CUSTOM_TEMPLATE):
            continue
        src = script.get("src")
        if not isinstance(src, str):
            continue
        # Query strings and fragments (e.g. ?f=sxg) do not change which script loads.
        parts = urlsplit(src.strip())
        if parts.netloc.lower() == cdn.netloc.lower() and parts.path in runtime_paths:
            return True
    return False


__all__ = ["DocumentScanner", "existing_components", "has_runtime_script", "parse_document"]
