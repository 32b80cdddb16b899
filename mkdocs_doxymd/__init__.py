"""
mkdocs-doxymd — Doxygen doc comments as Markdown for MkDocs.

Converts Doxygen-style C/C++ documentation comments (``@param``,
``@return``, ``@see`` and friends) into Markdown, either one comment at a
time, in batch over source files, or while building an MkDocs site.
"""

from .diagnostics import Diagnostic, DiagnosticKind, TransformError
from .renderer import TransformResult, transform, try_transform

__version__ = "0.3.0"

__all__ = [
    "Diagnostic",
    "DiagnosticKind",
    "TransformError",
    "TransformResult",
    "transform",
    "try_transform",
]
