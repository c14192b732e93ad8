from __future__ import annotations

from reviewbuddy.engine.detection import analyze
from reviewbuddy.engine.gate import is_plain_text
from reviewbuddy.engine.types import Diagnostic, DiagnosticSet
from reviewbuddy.languages.catalog import Language
from reviewbuddy.languages.classifier import classify_language, validate_language_match

__version__ = "0.3.0"

__all__ = [
    "Diagnostic",
    "DiagnosticSet",
    "Language",
    "__version__",
    "analyze",
    "classify_language",
    "is_plain_text",
    "validate_language_match",
]
