"""Whitespace-preserving insertion of script declarations into raw markup."""

from __future__ import annotations

import re
from typing import Optional, Sequence

from .components import DEFAULT_PLACEHOLDER
from .models import InsertionMode, InsertionPoint

# Horizontal whitespace only, so the indent never reaches back onto a previous line.
_LEADING_WHITESPACE = r"([^\S\r\n]*)"
_HEAD_CLOSE = "</head>"


class Injector:
    """Replaces the insertion marker with indented script declarations.

    Placeholder mode swaps a literal token for the declarations. Head mode
    writes them, one nesting level deeper, just before the closing head tag
    and keeps that tag as the final line. Only the first marker is replaced.
    """

    HEAD_CHILD_INDENT = "  "

    def __init__(self, placeholder: str = DEFAULT_PLACEHOLDER) -> None:
        self.placeholder = placeholder

    def pattern(self, mode: InsertionMode, placeholder: Optional[str] = None) -> re.Pattern[str]:
        if mode is InsertionMode.HEAD:
            return re.compile(_LEADING_WHITESPACE + re.escape(_HEAD_CLOSE), re.IGNORECASE)
        token = placeholder if placeholder is not None else self.placeholder
        return re.compile(_LEADING_WHITESPACE + re.escape(token))

    def locate(
        self, text: str, mode: InsertionMode, placeholder: Optional[str] = None
    ) -> Optional[InsertionPoint]:
        match = self.pattern(mode, placeholder).search(text)
        if match is None:
            return None
        return InsertionPoint(mode=mode, start=match.start(), end=match.end(), indent=match.group(1))

    def inject(
        self,
        text: str,
        declarations: Sequence[str],
        mode: InsertionMode = InsertionMode.PLACEHOLDER,
        placeholder: Optional[str] = None,
    ) -> str:
        """Return ``text`` with the declarations written at the insertion point."""
        if not declarations:
            return text
        point = self.locate(text, mode, placeholder)
        if point is None:
            return text
        return text[: point.start] + self.render(point, declarations) + text[point.end :]

    def render(self, point: InsertionPoint, declarations: Sequence[str]) -> str:
        if point.mode is InsertionMode.HEAD:
            lines = [self.HEAD_CHILD_INDENT + declaration for declaration in declarations]
            lines.append(_HEAD_CLOSE)
        else:
            lines = list(declarations)
        return "\n".join(point.indent + line for line in lines)


__all__ = ["Injector"]
