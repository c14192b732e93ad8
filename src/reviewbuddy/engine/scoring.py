from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Literal

from reviewbuddy.engine.types import DiagnosticSet

Readability = Literal["Good", "Fair", "Needs Improvement"]
Bucket = Literal["critical", "warnings", "style"]

# Stable presentation order for reports.
BUCKET_ORDER: tuple[Bucket, ...] = ("critical", "warnings", "style")

BUCKET_LABELS: dict[Bucket, str] = {
    "critical": "Critical Issues",
    "warnings": "Warnings",
    "style": "Style & Best Practices",
}

_COMPLEXITY_RE = re.compile(r"\b(?:if|else|for|while|switch|case|try|catch)\b")
_CRITICAL_MARKERS = ("Missing", "Unmatched", "syntax")
_WARNING_MARKERS = ("Consider", "should", "recommend")

COMPLEXITY_MIN = 1
COMPLEXITY_MAX = 10
READABLE_LINE_LENGTH = 100


@dataclass(frozen=True, slots=True)
class CodeMetrics:
    lines: int  # non-blank lines
    complexity: int  # 1..10
    readability: Readability


@dataclass(frozen=True, slots=True)
class SeverityBuckets:
    critical: tuple[str, ...]
    warnings: tuple[str, ...]
    style: tuple[str, ...]

    def get(self, bucket: Bucket) -> tuple[str, ...]:
        return getattr(self, bucket)

    @property
    def total(self) -> int:
        return len(self.critical) + len(self.warnings) + len(self.style)


def compute_metrics(text: str) -> CodeMetrics:
    """
    Rough size, complexity and readability figures for a snippet.

    Complexity counts control-flow keywords and is clamped to 1..10.
    Readability looks at whether any comment marker appears and at the
    average line length.
    """

    all_lines = text.split("\n")
    non_blank = sum(1 for line in all_lines if line.strip())
    complexity = max(COMPLEXITY_MIN, min(COMPLEXITY_MAX, len(_COMPLEXITY_RE.findall(text))))

    has_comments = "//" in text or "#" in text or "/*" in text
    # Total length over non-blank lines: blank lines do not dilute the average.
    avg_line_length = sum(len(line) for line in all_lines) / non_blank if non_blank else 0.0
    short_lines = avg_line_length < READABLE_LINE_LENGTH

    readability: Readability
    if has_comments and short_lines:
        readability = "Good"
    elif has_comments or short_lines:
        readability = "Fair"
    else:
        readability = "Needs Improvement"

    return CodeMetrics(lines=non_blank, complexity=complexity, readability=readability)


def bucket_messages(result: DiagnosticSet) -> SeverityBuckets:
    """
    Split messages into critical / warnings / style by their wording.

    The first matching bucket wins, so each message lands in exactly one.
    A clean result yields three empty buckets.
    """

    critical: list[str] = []
    warnings: list[str] = []
    style: list[str] = []
    if result.is_clean:
        return SeverityBuckets((), (), ())

    for message in result.messages:
        if any(marker in message for marker in _CRITICAL_MARKERS):
            critical.append(message)
        elif any(marker in message for marker in _WARNING_MARKERS):
            warnings.append(message)
        else:
            style.append(message)
    return SeverityBuckets(critical=tuple(critical), warnings=tuple(warnings), style=tuple(style))


@dataclass(frozen=True, slots=True)
class ReviewReport:
    """Everything a reporter needs to render one analysis."""

    source: str
    language: str
    result: DiagnosticSet
    metrics: CodeMetrics
    buckets: SeverityBuckets


def build_report(text: str, result: DiagnosticSet, *, language: str, source: str = "<stdin>") -> ReviewReport:
    return ReviewReport(
        source=source,
        language=language,
        result=result,
        metrics=compute_metrics(text),
        buckets=bucket_messages(result),
    )
