from __future__ import annotations

import re

from reviewbuddy.engine.context import AnalysisContext, AnalysisState
from reviewbuddy.engine.types import Diagnostic
from reviewbuddy.languages.catalog import Language
from reviewbuddy.rules.base import BaseRule, RuleMeta
from reviewbuddy.rules.utils import (
    TypoTable,
    find_line_typos,
    is_comment_line,
    iter_code_lines,
    signed_balance_message,
)

_DECLARATION_RE = re.compile(r"^\s*(?:var|let|const|return)\s+\S")
_ASSIGNMENT_RE = re.compile(r"^\s*[\w$.\[\]]+\s*[+\-*/%]?=(?!=)")
_CALL_RE = re.compile(r"^\s*[\w$.]+\s*\(.*\)\s*$")
_CONTROL_RE = re.compile(r"^\s*(?:if|else|for|while|do|switch|case|catch|try|finally|function|class)\b")
_CONSOLE_LOG_NO_PARENS_RE = re.compile(r"console\.log\s+\w+")
_CONSOLE_LOG_ANY_CASE_RE = re.compile(r"console\.log", re.IGNORECASE)
_VAR_RE = re.compile(r"\bvar\s+")
_CONSTRUCTOR_CALL_RE = re.compile(r"=\s*(?P<name>[A-Z]\w+)\s*\(")
_LOOSE_EQUALITY_RE = re.compile(r"(?<![=!<>])(?P<op>==|!=)(?!=)")

# Callable without `new`; they convert rather than construct.
_CONVERSION_FUNCTIONS = frozenset({"Number", "String", "Boolean", "Symbol", "BigInt"})

_NODE_MODULES = ("fs", "path", "http", "crypto")

JAVASCRIPT_TYPOS: TypoTable = (
    ("fucntion", "function"),
    ("functoin", "function"),
    ("cosnt", "const"),
    ("retrun", "return"),
    ("consoel", "console"),
    ("docuemnt", "document"),
    ("lenght", "length"),
    ("udefined", "undefined"),
    ("awiat", "await"),
)


class J01BraceBalance(BaseRule):
    meta = RuleMeta(
        rule_id="J01",
        title="Brace balance",
        description="Curly braces opened and closed across the file do not match.",
        category="syntax",
        default_severity="error",
        language=Language.JAVASCRIPT,
    )

    def check(self, ctx: AnalysisContext) -> list[Diagnostic]:
        state = AnalysisState()
        for line in ctx.lines:
            if not line.strip():
                continue
            state.brace_balance += line.count("{") - line.count("}")

        message = signed_balance_message(state.brace_balance, noun="brace(s)", symbol="}")
        return [self._diagnostic(message=message)] if message else []


class J02MissingSemicolon(BaseRule):
    meta = RuleMeta(
        rule_id="J02",
        title="Missing semicolon",
        description="A declaration, assignment, return or call line does not end with ';', '{' or '}'.",
        category="syntax",
        default_severity="warn",
        language=Language.JAVASCRIPT,
    )

    def check(self, ctx: AnalysisContext) -> list[Diagnostic]:
        violations: list[Diagnostic] = []
        for line_no, line in iter_code_lines(ctx):
            if "//" in line or _CONTROL_RE.match(line):
                continue
            stripped = line.rstrip()
            if stripped.endswith((";", "{", "}")):
                continue
            if _DECLARATION_RE.match(line) or _ASSIGNMENT_RE.match(line) or _CALL_RE.match(line):
                violations.append(self._diagnostic(message="Missing semicolon", line=line_no))
        return violations


class J03ConsoleUsage(BaseRule):
    meta = RuleMeta(
        rule_id="J03",
        title="console.log usage",
        description="console.log without parentheses or with the wrong capitalization.",
        category="syntax",
        default_severity="error",
        language=Language.JAVASCRIPT,
    )

    def check(self, ctx: AnalysisContext) -> list[Diagnostic]:
        violations: list[Diagnostic] = []
        for line_no, line in iter_code_lines(ctx):
            if _CONSOLE_LOG_NO_PARENS_RE.search(line) and "(" not in line:
                violations.append(self._diagnostic(message="Missing parentheses in console.log", line=line_no))
            if _CONSOLE_LOG_ANY_CASE_RE.search(line) and "console.log" not in line:
                violations.append(
                    self._diagnostic(message="Incorrect capitalization - use 'console.log'", line=line_no)
                )
        return violations


class J04VarDeclaration(BaseRule):
    meta = RuleMeta(
        rule_id="J04",
        title="var declaration",
        description="`var` is function-scoped; block-scoped declarations are preferred.",
        category="quality",
        default_severity="info",
        language=Language.JAVASCRIPT,
    )

    def check(self, ctx: AnalysisContext) -> list[Diagnostic]:
        return [
            self._diagnostic(message="Consider using 'let' or 'const' instead of 'var'", line=line_no)
            for line_no, line in iter_code_lines(ctx)
            if _VAR_RE.search(line)
        ]


class J05MissingNew(BaseRule):
    meta = RuleMeta(
        rule_id="J05",
        title="Constructor without new",
        description="A capitalized callable is assigned without the `new` keyword.",
        category="syntax",
        default_severity="warn",
        language=Language.JAVASCRIPT,
    )

    def check(self, ctx: AnalysisContext) -> list[Diagnostic]:
        violations: list[Diagnostic] = []
        for line_no, line in iter_code_lines(ctx):
            match = _CONSTRUCTOR_CALL_RE.search(line)
            if match is None or match.group("name") in _CONVERSION_FUNCTIONS:
                continue
            violations.append(self._diagnostic(message="Missing 'new' keyword for constructor", line=line_no))
        return violations


class J06LooseEquality(BaseRule):
    meta = RuleMeta(
        rule_id="J06",
        title="Loose equality",
        description="`==` and `!=` coerce types before comparing.",
        category="logic",
        default_severity="warn",
        language=Language.JAVASCRIPT,
    )

    def check(self, ctx: AnalysisContext) -> list[Diagnostic]:
        violations: list[Diagnostic] = []
        for line_no, line in iter_code_lines(ctx):
            match = _LOOSE_EQUALITY_RE.search(line)
            if match is None:
                continue
            op = match.group("op")
            violations.append(
                self._diagnostic(message=f"Use '{op}=' instead of '{op}' for comparison", line=line_no)
            )
        return violations


class J07MissingRequire(BaseRule):
    meta = RuleMeta(
        rule_id="J07",
        title="Missing require",
        description="A Node.js core module is used without `require` or `import`.",
        category="syntax",
        default_severity="error",
        language=Language.JAVASCRIPT,
    )

    def check(self, ctx: AnalysisContext) -> list[Diagnostic]:
        violations: list[Diagnostic] = []
        for module in _NODE_MODULES:
            if not re.search(rf"\b{module}\.", ctx.text):
                continue
            if re.search(rf"""(?:require\(\s*|from\s+)['"](?:node:)?{module}['"]""", ctx.text):
                continue
            violations.append(self._diagnostic(message=f"Missing require statement for {module} module"))
        return violations


class J08JavaScriptTypos(BaseRule):
    meta = RuleMeta(
        rule_id="J08",
        title="JavaScript typos",
        description="Misspelled JavaScript keywords and globals.",
        category="syntax",
        default_severity="warn",
        language=Language.JAVASCRIPT,
    )

    def check(self, ctx: AnalysisContext) -> list[Diagnostic]:
        lines = ((no, line) for no, line in enumerate(ctx.lines, start=1) if not is_comment_line(line))
        return [
            self._diagnostic(message=f"Possible typo '{typo}' - did you mean '{correct}'?", line=line_no)
            for line_no, typo, correct in find_line_typos(lines, JAVASCRIPT_TYPOS)
        ]


def builtin_javascript_rules() -> list[BaseRule]:
    return [
        J01BraceBalance(),
        J02MissingSemicolon(),
        J03ConsoleUsage(),
        J04VarDeclaration(),
        J05MissingNew(),
        J06LooseEquality(),
        J07MissingRequire(),
        J08JavaScriptTypos(),
    ]
