"""Core data models shared across ampscript components."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Set, Tuple


class InsertionMode(str, Enum):
    """Where rendered script declarations are written into a document."""

    PLACEHOLDER = "placeholder"
    HEAD = "head"


class DetectionMode(str, Enum):
    """Which source decides the components a document requires."""

    SCANNER = "scanner"
    VALIDATOR = "validator"


@dataclass
class Requirements:
    """Components a document needs plus whether the base runtime is missing."""

    components: Set[str] = field(default_factory=set)
    runtime: bool = False

    def __bool__(self) -> bool:
        return self.runtime or bool(self.components)


@dataclass(frozen=True)
class ResolvedRequirement:
    """A component paired with the version token used to load it."""

    name: str
    version: str


@dataclass(frozen=True)
class InsertionPoint:
    """Location of the insertion marker and the whitespace that preceded it."""

    mode: InsertionMode
    start: int
    end: int
    indent: str


@dataclass(frozen=True)
class ValidatorFinding:
    """A single finding reported by the AMP validator."""

    code: str
    params: Tuple[str, ...] = ()
    severity: str = "ERROR"
    line: Optional[int] = None
    col: Optional[int] = None
