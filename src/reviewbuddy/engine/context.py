from __future__ import annotations

from dataclasses import dataclass

from reviewbuddy.config import ReviewBuddyConfig
from reviewbuddy.languages.catalog import Language


@dataclass(frozen=True, slots=True)
class AnalysisContext:
    text: str
    lines: tuple[str, ...]
    language: Language
    config: ReviewBuddyConfig


@dataclass(slots=True)
class AnalysisState:
    """Mutable bookkeeping owned by a single rule invocation."""

    brace_balance: int = 0
    paren_balance: int = 0
    indent_level: int = 0
    expecting_indent: bool = False
    seen_return: bool = False
    return_indent: int = 0
    in_function: bool = False
    function_lines: int = 0


def build_context(text: str, language: Language, config: ReviewBuddyConfig) -> AnalysisContext:
    normalized = text.replace("\r\n", "\n")
    return AnalysisContext(
        text=normalized,
        lines=tuple(normalized.split("\n")),
        language=language,
        config=config,
    )
