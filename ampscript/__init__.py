"""Add the AMP runtime and extension script tags an AMP HTML document needs."""

from .models import DetectionMode, InsertionMode
from .pipeline import ImportOptions, ScriptImporter, UnsupportedInputError
from .versions import UnresolvedComponentError

__version__ = "0.1.0"

__all__ = [
    "DetectionMode",
    "ImportOptions",
    "InsertionMode",
    "ScriptImporter",
    "UnresolvedComponentError",
    "UnsupportedInputError",
    "__version__",
]
