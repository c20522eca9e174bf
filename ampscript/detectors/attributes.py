"""Detectors driven by element attributes."""

from __future__ import annotations

import re
from typing import Iterable, Sequence

from bs4 import BeautifulSoup

from .base import Detector

_STATE_MUTATION = re.compile(r"\bAMP\.(?:setState|pushState)\s*\(")
_BOUND_ATTRIBUTE = re.compile(r"^\[[^\]]+\]$")

STATE_COMPONENT = "amp-bind"


class StateMutationDetector(Detector):
    """An ``on`` handler that mutates state needs amp-bind even without ``<amp-state>``."""

    name = "state-mutation"

    def detect(self, document: BeautifulSoup) -> Iterable[str]:
        for tag in document.find_all(attrs={"on": True}):
            handler = tag.get("on")
            if isinstance(handler, str) and _STATE_MUTATION.search(handler):
                return [STATE_COMPONENT]
        return []


class BoundAttributeDetector(Detector):
    """Bracketed binding attributes such as ``[text]`` are evaluated by amp-bind."""

    name = "bound-attributes"

    def detect(self, document: BeautifulSoup) -> Iterable[str]:
        for tag in document.find_all(True):
            if any(_BOUND_ATTRIBUTE.match(attribute) for attribute in tag.attrs):
                return [STATE_COMPONENT]
        return []


class AccessDetector(Detector):
    """amp-access is signalled by the ``amp-access`` attribute or its config script."""

    name = "access"

    # amp-access depends on amp-analytics being loaded alongside it.
    COMPONENTS = ("amp-access", "amp-analytics")

    def detect(self, document: BeautifulSoup) -> Iterable[str]:
        if document.find(attrs={"amp-access": True}) is not None:
            return list(self.COMPONENTS)
        if document.find("script", id="amp-access") is not None:
            return list(self.COMPONENTS)
        return []


class AttributeDetector(Detector):
    """Contributes fixed components whenever an attribute appears on any element."""

    def __init__(self, name: str, attribute: str, components: Sequence[str]) -> None:
        self.name = name
        self.attribute = attribute
        self.components = tuple(components)

    def detect(self, document: BeautifulSoup) -> Iterable[str]:
        if document.find(attrs={self.attribute: True}) is not None:
            return list(self.components)
        return []


def effects_detector() -> AttributeDetector:
    return AttributeDetector("effects", "amp-fx", ("amp-fx-collection",))


def lightbox_detector() -> AttributeDetector:
    return AttributeDetector("lightbox", "lightbox", ("amp-lightbox-gallery",))
