"""Version resolution for required components."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterable, List, Mapping, Optional

from .components import LATEST
from .models import ResolvedRequirement


class UnresolvedComponentError(LookupError):
    """Raised when no version source knows about a required component."""

    def __init__(self, component: str) -> None:
        super().__init__(f"Unknown AMP component {component}")
        self.component = component


def _frozen(mapping: Optional[Mapping[str, str]]) -> Mapping[str, str]:
    return MappingProxyType(dict(mapping or {}))


@dataclass(frozen=True)
class VersionSources:
    """The three version sources consulted, in precedence order, per component."""

    overrides: Mapping[str, str] = field(default_factory=dict)
    force_latest: bool = False
    discovered: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "overrides", _frozen(self.overrides))
        object.__setattr__(self, "discovered", _frozen(self.discovered))


class VersionResolver:
    """Chooses a version per component: override, then forced latest, then discovered."""

    def __init__(self, sources: VersionSources) -> None:
        self.sources = sources

    def resolve(self, name: str) -> str:
        override = self.sources.overrides.get(name)
        if override:
            return override
        if self.sources.force_latest:
            return LATEST
        discovered = self.sources.discovered.get(name)
        if discovered:
            return discovered
        raise UnresolvedComponentError(name)

    def resolve_all(self, names: Iterable[str]) -> List[ResolvedRequirement]:
        """Resolve every name, failing on the first unknown component."""
        return [
            ResolvedRequirement(name=name, version=self.resolve(name))
            for name in sorted(set(names))
        ]


__all__ = ["UnresolvedComponentError", "VersionResolver", "VersionSources"]
