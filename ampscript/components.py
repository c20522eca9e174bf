"""Static lookup tables describing AMP components and their script tags."""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping, Optional

COMPONENT_PREFIX = "amp-"
DEFAULT_PLACEHOLDER = "${ampjs}"
DEFAULT_CDN_BASE = "https://cdn.ampproject.org"
DEFAULT_LISTING_URL = (
    "https://api.github.com/repos/ampproject/amphtml/git/trees/main?recursive=1"
)
LATEST = "latest"

# Parameter the validator reports when the base runtime script is absent.
RUNTIME_FINDING_PARAM = "amphtml engine v0.js script"

CUSTOM_ELEMENT = "custom-element"
CUSTOM_TEMPLATE = "custom-template"

# Elements provided by an extension other than the one sharing their name.
REMAPPED_COMPONENTS: Mapping[str, str] = MappingProxyType(
    {
        "amp-state": "amp-bind",
        "amp-embed": "amp-ad",
        "amp-embedly-key": "amp-embedly-card",
        "amp-inline-gallery-pagination": "amp-inline-gallery",
        "amp-inline-gallery-thumbnails": "amp-inline-gallery",
        "amp-list-load-more": "amp-list",
        "amp-nested-menu": "amp-sidebar",
        "amp-story-bookend": "amp-story",
        "amp-story-cta-layer": "amp-story",
        "amp-story-grid-layer": "amp-story",
        "amp-story-page": "amp-story",
        "amp-story-page-attachment": "amp-story",
    }
)

# Built into the base runtime, so no extension script is loaded for them.
EXCLUDED_COMPONENTS = frozenset({"amp-img", "amp-layout", "amp-pixel"})

SCRIPT_TYPES: Mapping[str, str] = MappingProxyType(
    {
        "amp-mustache": CUSTOM_TEMPLATE,
    }
)


def canonical_component(name: str) -> Optional[str]:
    """Return the component whose script provides ``name``, or None when no script is needed."""
    lowered = name.strip().lower()
    if not lowered.startswith(COMPONENT_PREFIX) or lowered == COMPONENT_PREFIX:
        return None
    canonical = REMAPPED_COMPONENTS.get(lowered, lowered)
    if canonical in EXCLUDED_COMPONENTS:
        return None
    return canonical


def script_type(name: str) -> str:
    return SCRIPT_TYPES.get(name, CUSTOM_ELEMENT)


__all__ = [
    "COMPONENT_PREFIX",
    "CUSTOM_ELEMENT",
    "CUSTOM_TEMPLATE",
    "DEFAULT_CDN_BASE",
    "DEFAULT_LISTING_URL",
    "DEFAULT_PLACEHOLDER",
    "EXCLUDED_COMPONENTS",
    "LATEST",
    "REMAPPED_COMPONENTS",
    "RUNTIME_FINDING_PARAM",
    "SCRIPT_TYPES",
    "canonical_component",
    "script_type",
]
