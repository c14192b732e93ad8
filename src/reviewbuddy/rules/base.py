from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from reviewbuddy.engine.context import AnalysisContext
from reviewbuddy.engine.types import Category, Diagnostic, Severity
from reviewbuddy.languages.catalog import Language


@dataclass(frozen=True, slots=True)
class RuleMeta:
    rule_id: str
    title: str
    description: str
    category: Category
    default_severity: Severity
    language: Language | None = None  # None: runs for every declared language


class BaseRule(ABC):
    meta: RuleMeta

    @abstractmethod
    def check(self, ctx: AnalysisContext) -> list[Diagnostic]:
        raise NotImplementedError

    def _diagnostic(
        self,
        *,
        message: str,
        line: int | None = None,
        severity: Severity | None = None,
        category: Category | None = None,
    ) -> Diagnostic:
        # Line numbers are part of the message contract ("Line N: ...").
        text = f"Line {line}: {message}" if line is not None else message
        return Diagnostic(
            message=text,
            category=category or self.meta.category,
            line=line,
            rule_id=self.meta.rule_id,
            severity=severity or self.meta.default_severity,
        )
