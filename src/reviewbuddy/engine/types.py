from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from typing import Literal

Severity = Literal["info", "warn", "error"]
Category = Literal["syntax", "security", "performance", "quality", "logic", "generic"]

CATEGORIES: tuple[Category, ...] = ("syntax", "security", "performance", "quality", "logic", "generic")

NO_ISSUES_MESSAGE = "No issues detected"


@dataclass(frozen=True, slots=True)
class Diagnostic:
    message: str
    category: Category
    line: int | None = None  # 1-based; also embedded in `message` as "Line N: ..."
    rule_id: str | None = None
    severity: Severity = "warn"


@dataclass(frozen=True, slots=True)
class DiagnosticSet:
    """
    Ordered, de-duplicated result of one `analyze()` call.

    Never empty: a clean run holds exactly the "no issues" sentinel so callers
    can tell "nothing found" apart from "analysis did not run".
    """

    diagnostics: tuple[Diagnostic, ...]

    def __iter__(self) -> Iterator[Diagnostic]:
        return iter(self.diagnostics)

    def __len__(self) -> int:
        return len(self.diagnostics)

    def __getitem__(self, index: int) -> Diagnostic:
        return self.diagnostics[index]

    @property
    def messages(self) -> tuple[str, ...]:
        return tuple(d.message for d in self.diagnostics)

    @property
    def is_clean(self) -> bool:
        return len(self.diagnostics) == 1 and self.diagnostics[0].message == NO_ISSUES_MESSAGE


NO_ISSUES = Diagnostic(message=NO_ISSUES_MESSAGE, category="generic", severity="info")
