from __future__ import annotations

import re
from collections import Counter

from reviewbuddy.engine.context import AnalysisContext
from reviewbuddy.engine.types import Diagnostic
from reviewbuddy.rules.base import BaseRule, RuleMeta
from reviewbuddy.rules.utils import has_documentation

_MARKER_RE = re.compile(r"\b(?P<marker>TODO|FIXME|HACK|XXX)\b")

LOW_INFORMATION_NAMES: tuple[str, ...] = (
    "temp",
    "tmp",
    "data",
    "foo",
    "bar",
    "baz",
    "stuff",
    "thing",
    "obj",
    "val",
)

_SNIPPET_MAX = 40


class Q01WorkMarkers(BaseRule):
    meta = RuleMeta(
        rule_id="Q01",
        title="Work markers",
        description="TODO/FIXME/HACK/XXX markers left in the code.",
        category="quality",
        default_severity="info",
    )

    def check(self, ctx: AnalysisContext) -> list[Diagnostic]:
        violations: list[Diagnostic] = []
        for line_no, line in enumerate(ctx.lines, start=1):
            match = _MARKER_RE.search(line)
            if match is None:
                continue
            violations.append(
                self._diagnostic(
                    message=f"{match.group('marker')} marker found - track it or resolve it",
                    line=line_no,
                )
            )
        return violations


class Q02DuplicateLines(BaseRule):
    meta = RuleMeta(
        rule_id="Q02",
        title="Duplicated lines",
        description="The same non-trivial line appears more often than the configured count.",
        category="quality",
        default_severity="warn",
    )

    def check(self, ctx: AnalysisContext) -> list[Diagnostic]:
        min_length = ctx.config.duplicate_min_length
        counts = Counter(
            stripped for stripped in (line.strip() for line in ctx.lines) if len(stripped) > min_length
        )

        violations: list[Diagnostic] = []
        # Counter keeps first-seen order, so reports follow the text.
        for content, count in counts.items():
            if count < ctx.config.duplicate_min_count:
                continue
            snippet = content if len(content) <= _SNIPPET_MAX else content[: _SNIPPET_MAX - 3] + "..."
            violations.append(
                self._diagnostic(message=f"Duplicated line appears {count} times: '{snippet}'")
            )
        return violations


class Q03MissingComments(BaseRule):
    meta = RuleMeta(
        rule_id="Q03",
        title="Missing comments",
        description="A longer body of code without a single comment line.",
        category="quality",
        default_severity="info",
    )

    def check(self, ctx: AnalysisContext) -> list[Diagnostic]:
        non_blank = [line for line in ctx.lines if line.strip()]
        if len(non_blank) <= ctx.config.comment_required_lines:
            return []
        if has_documentation(non_blank):
            return []
        return [self._diagnostic(message="Consider adding comments to explain complex logic")]


class Q04LowInformationNames(BaseRule):
    meta = RuleMeta(
        rule_id="Q04",
        title="Low-information names",
        description="Placeholder identifiers that say nothing about their content.",
        category="quality",
        default_severity="info",
    )

    def check(self, ctx: AnalysisContext) -> list[Diagnostic]:
        violations: list[Diagnostic] = []
        for name in LOW_INFORMATION_NAMES:
            if re.search(rf"\b{name}\b", ctx.text):
                violations.append(
                    self._diagnostic(message=f"Consider a more descriptive name than '{name}'")
                )
        return violations


def builtin_quality_rules() -> list[BaseRule]:
    return [
        Q01WorkMarkers(),
        Q02DuplicateLines(),
        Q03MissingComments(),
        Q04LowInformationNames(),
    ]
