from __future__ import annotations

import re

from reviewbuddy.engine.context import AnalysisContext
from reviewbuddy.engine.types import Diagnostic
from reviewbuddy.rules.base import BaseRule, RuleMeta
from reviewbuddy.rules.utils import TypoTable, find_text_typos, indent_width, is_comment_line

_BRACKET_PAIRS = (
    ("parentheses", "(", ")"),
    ("curly brackets", "{", "}"),
    ("square brackets", "[", "]"),
)
_QUOTES = (
    ("double quotes", '"'),
    ("single quotes", "'"),
    ("backticks", "`"),
)

_BARE_MARKER_RE = re.compile(r"\b(TODO|FIXME)\b[\s:\-]*$")
_SENSITIVE_VALUE_RE = re.compile(
    r"""[=:]\s*(?P<q>['"])[^'"\n]*?\b(?P<token>localhost|127\.0\.0\.1|password|secret|key)\b[^'"\n]*(?P=q)""",
    re.IGNORECASE,
)
_SENSITIVE_NAME_RE = re.compile(
    r"""(?:\b|_)(?P<token>password|secret|key)\w*\s*[=:]\s*(?P<q>['"])[^'"\n]+(?P=q)""",
    re.IGNORECASE,
)

COMMON_TYPOS: TypoTable = (
    ("functoin", "function"),
    ("fucntion", "function"),
    ("retrun", "return"),
    ("reutrn", "return"),
    ("lenght", "length"),
    ("widht", "width"),
    ("heigth", "height"),
    ("improt", "import"),
    ("calss", "class"),
    ("flase", "false"),
)


class T01UnbalancedDelimiters(BaseRule):
    meta = RuleMeta(
        rule_id="T01",
        title="Unbalanced delimiters",
        description="Opening and closing bracket counts differ, or a quote character appears an odd number of times.",
        category="syntax",
        default_severity="error",
    )

    def check(self, ctx: AnalysisContext) -> list[Diagnostic]:
        violations: list[Diagnostic] = []
        for name, opening, closing in _BRACKET_PAIRS:
            opened = ctx.text.count(opening)
            closed = ctx.text.count(closing)
            if opened != closed:
                violations.append(
                    self._diagnostic(message=f"Unmatched {name}: {opened} opening, {closed} closing")
                )

        # Quotes do not nest, so only parity is meaningful.
        for name, quote in _QUOTES:
            count = ctx.text.count(quote)
            if count % 2:
                violations.append(self._diagnostic(message=f"Unmatched {name}: {count} found (odd count)"))
        return violations


class T02LineShape(BaseRule):
    meta = RuleMeta(
        rule_id="T02",
        title="Line shape",
        description=(
            "Per-line checks: empty statements, trailing whitespace, overlong lines, mixed indentation, "
            "bare TODO markers and hardcoded sensitive literals."
        ),
        category="quality",
        default_severity="warn",
    )

    def check(self, ctx: AnalysisContext) -> list[Diagnostic]:
        violations: list[Diagnostic] = []
        indent_char = _first_indent_char(ctx.lines)
        limit = ctx.config.max_line_length

        for line_no, line in enumerate(ctx.lines, start=1):
            stripped = line.strip()
            if not stripped or is_comment_line(line):
                continue

            if stripped == ";":
                violations.append(
                    self._diagnostic(message="Empty statement (lone ';')", line=line_no, category="syntax")
                )
            if line != line.rstrip():
                violations.append(self._diagnostic(message="Trailing whitespace", line=line_no, severity="info"))
            if len(line) > limit:
                violations.append(
                    self._diagnostic(
                        message=f"Line too long ({len(line)} characters), consider breaking it down",
                        line=line_no,
                    )
                )
            if indent_char is not None and _mixes_indentation(line, indent_char):
                violations.append(self._diagnostic(message="Mixed tabs and spaces in indentation", line=line_no))
            if _BARE_MARKER_RE.search(line):
                violations.append(
                    self._diagnostic(message="TODO/FIXME marker without a description", line=line_no, severity="info")
                )

            token = _sensitive_token(line)
            if token is not None:
                violations.append(
                    self._diagnostic(
                        message=f"Hardcoded sensitive value ('{token}') in string literal",
                        line=line_no,
                        category="security",
                    )
                )
        return violations


class T03CommonTypos(BaseRule):
    meta = RuleMeta(
        rule_id="T03",
        title="Common typos",
        description="Frequent misspellings of keywords and identifiers, reported once per distinct typo.",
        category="syntax",
        default_severity="warn",
    )

    def check(self, ctx: AnalysisContext) -> list[Diagnostic]:
        return [
            self._diagnostic(message=f"Possible typo detected: '{typo}' - did you mean '{correct}'?")
            for typo, correct in find_text_typos(ctx.text, COMMON_TYPOS)
        ]


def _first_indent_char(lines: tuple[str, ...]) -> str | None:
    for line in lines:
        if not line.strip():
            continue
        if line.startswith("\t"):
            return "\t"
        if line.startswith("    "):
            return " "
    return None


def _mixes_indentation(line: str, indent_char: str) -> bool:
    leading = line[: indent_width(line)]
    if not leading:
        return False
    if " " in leading and "\t" in leading:
        return True
    if indent_char == " ":
        return leading.startswith("\t")
    return leading.startswith("    ")


def _sensitive_token(line: str) -> str | None:
    match = _SENSITIVE_NAME_RE.search(line) or _SENSITIVE_VALUE_RE.search(line)
    if match is None:
        return None
    return match.group("token").lower()


def builtin_shape_rules() -> list[BaseRule]:
    return [
        T01UnbalancedDelimiters(),
        T02LineShape(),
        T03CommonTypos(),
    ]
