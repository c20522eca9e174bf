"""Detector implementations and the fixed detector battery."""

from __future__ import annotations

from typing import Callable, List, Tuple

from .attributes import (
    AccessDetector,
    AttributeDetector,
    BoundAttributeDetector,
    StateMutationDetector,
    effects_detector,
    lightbox_detector,
)
from .base import Detector
from .content import DynamicClassesDetector, GeoBindDetector, IdentifierDetector
from .elements import ElementDetector, TemplateDetector

# Execution order is fixed so intermediate scan traces are reproducible.
BUILTIN_DETECTORS: Tuple[Callable[[], Detector], ...] = (
    ElementDetector,
    StateMutationDetector,
    BoundAttributeDetector,
    AccessDetector,
    IdentifierDetector,
    GeoBindDetector,
    DynamicClassesDetector,
    TemplateDetector,
    effects_detector,
    lightbox_detector,
)


def default_detectors() -> List[Detector]:
    """Return fresh instances of the built-in battery in execution order."""
    return [factory() for factory in BUILTIN_DETECTORS]


__all__ = [
    "AccessDetector",
    "AttributeDetector",
    "BUILTIN_DETECTORS",
    "BoundAttributeDetector",
    "Detector",
    "DynamicClassesDetector",
    "ElementDetector",
    "GeoBindDetector",
    "IdentifierDetector",
    "StateMutationDetector",
    "TemplateDetector",
    "default_detectors",
]
