"""Detectors driven by element names."""

from __future__ import annotations

from typing import Iterable, Iterator

from bs4 import BeautifulSoup

from .base import Detector
from ..components import COMPONENT_PREFIX, CUSTOM_TEMPLATE, SCRIPT_TYPES, canonical_component


class ElementDetector(Detector):
    """Collects every ``amp-*`` element that is backed by an extension script."""

    name = "elements"

    def detect(self, document: BeautifulSoup) -> Iterable[str]:
        found: list[str] = []
        for tag in document.find_all(True):
            if not tag.name.startswith(COMPONENT_PREFIX):
                continue
            component = canonical_component(tag.name)
            if component is not None and component not in found:
                found.append(component)
        return found


class TemplateDetector(Detector):
    """Maps ``<template type=...>`` and ``<script template=...>`` to template engines."""

    name = "templates"

    def detect(self, document: BeautifulSoup) -> Iterable[str]:
        return list(dict.fromkeys(self._iter_engines(document)))

    def _iter_engines(self, document: BeautifulSoup) -> Iterator[str]:
        for tag in document.find_all(["template", "script"]):
            attribute = "type" if tag.name == "template" else "template"
            engine = tag.get(attribute)
            if not isinstance(engine, str):
                continue
            engine = engine.strip().lower()
            if SCRIPT_TYPES.get(engine) == CUSTOM_TEMPLATE:
                yield engine
