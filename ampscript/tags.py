"""Rendering of AMP script declarations."""

from __future__ import annotations

from typing import Iterable, List

from .components import DEFAULT_CDN_BASE, script_type
from .models import ResolvedRequirement


class TagBuilder:
    """Builds ``<script>`` tags for the runtime and for extension components."""

    def __init__(self, cdn_base: str = DEFAULT_CDN_BASE) -> None:
        self.cdn_base = cdn_base.rstrip("/")

    def build(self, name: str, version: str) -> str:
        kind = script_type(name)
        return (
            f'<script async {kind}="{name}" '
            f'src="{self.cdn_base}/v0/{name}-{version}.js"></script>'
        )

    def build_runtime(self) -> str:
        return f'<script async src="{self.cdn_base}/v0.js"></script>'

    def render(
        self, requirements: Iterable[ResolvedRequirement], *, runtime: bool = False
    ) -> List[str]:
        """Return the runtime tag (when requested) followed by one tag per component."""
        declarations: List[str] = [self.build_runtime()] if runtime else []
        seen = set()
        for requirement in sorted(requirements, key=lambda item: item.name):
            if requirement.name in seen:
                continue
            seen.add(requirement.name)
            declarations.append(self.build(requirement.name, requirement.version))
        return declarations


__all__ = ["TagBuilder"]
