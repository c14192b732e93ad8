from __future__ import annotations

import re

from reviewbuddy.engine.context import AnalysisContext, AnalysisState
from reviewbuddy.engine.types import Diagnostic
from reviewbuddy.languages.catalog import Language
from reviewbuddy.rules.base import BaseRule, RuleMeta
from reviewbuddy.rules.utils import TypoTable, find_line_typos, signed_balance_message

_JAVA_TYPES = "int|String|boolean|double|float|char|long|short|byte|Integer|Double|Float|Character|Boolean"
_DECLARATION_RE = re.compile(rf"^\s*(?:{_JAVA_TYPES})\s+\w+.*[^;{{}}\s]$")
_METHOD_CALL_RE = re.compile(r"^\s*\w+\.\w+\([^)]*\)\s*$")
_ASSIGNMENT_RE = re.compile(r"^\s*\w+\s*=\s*[^;{]+$")
_RETURN_RE = re.compile(r"^\s*return\s+[^;]+$")
_SYSTEM_OUT_ANY_CASE_RE = re.compile(r"system\.out", re.IGNORECASE)
_METHOD_DECL_RE = re.compile(r"^\s*(?:void|int|String|boolean|double|float|char)\s+\w+\s*\([^)]*\)\s*\{?")
_ACCESS_WORDS = ("public", "private", "protected", "static")
_STRING_EQUALITY_RE = re.compile(r"\b\w+\s*==\s*['\"]")
_CLASS_RE = re.compile(r"^\s*(?:public\s+)?(?:abstract\s+|final\s+)?class\s+\w+")
_BRACELESS_CONTROL_RE = re.compile(r"^\s*(?P<kw>if|while|for)\s*\(.*\)\s*$")

# (class name, import statement); `import java.util.*;` satisfies every entry.
_REQUIRED_IMPORTS: tuple[tuple[str, str], ...] = (
    ("Scanner", "java.util.Scanner"),
    ("ArrayList", "java.util.ArrayList"),
    ("HashMap", "java.util.HashMap"),
    ("List", "java.util.List"),
    ("Arrays", "java.util.Arrays"),
)

JAVA_TYPOS: TypoTable = (
    ("pubilc", "public"),
    ("pubic", "public"),
    ("pulbic", "public"),
    ("statc", "static"),
    ("viod", "void"),
    ("Sytem", "System"),
    ("Stirng", "String"),
    ("retrun", "return"),
    ("improt", "import"),
    ("calss", "class"),
)


def _java_code_lines(ctx: AnalysisContext) -> list[tuple[int, str]]:
    lines: list[tuple[int, str]] = []
    for line_no, line in enumerate(ctx.lines, start=1):
        stripped = line.strip()
        if not stripped or stripped.startswith(("//", "/*", "*")):
            continue
        lines.append((line_no, line))
    return lines


class V01BracketBalance(BaseRule):
    meta = RuleMeta(
        rule_id="V01",
        title="Bracket balance",
        description="Running brace and parenthesis counters are non-zero at the end of the file.",
        category="syntax",
        default_severity="error",
        language=Language.JAVA,
    )

    def check(self, ctx: AnalysisContext) -> list[Diagnostic]:
        state = AnalysisState()
        for _line_no, line in _java_code_lines(ctx):
            state.brace_balance += line.count("{") - line.count("}")
            state.paren_balance += line.count("(") - line.count(")")

        violations: list[Diagnostic] = []
        brace = signed_balance_message(state.brace_balance, noun="brace(s)", symbol="}")
        if brace:
            violations.append(self._diagnostic(message=brace))
        paren = signed_balance_message(state.paren_balance, noun="parenthesis", symbol=")")
        if paren:
            violations.append(self._diagnostic(message=paren))
        return violations


class V02MissingSemicolon(BaseRule):
    meta = RuleMeta(
        rule_id="V02",
        title="Missing semicolon",
        description="Declarations, calls, assignments, returns and System.out statements must end with ';'.",
        category="syntax",
        default_severity="error",
        language=Language.JAVA,
    )

    def check(self, ctx: AnalysisContext) -> list[Diagnostic]:
        violations: list[Diagnostic] = []
        for line_no, line in _java_code_lines(ctx):
            commented = "//" in line
            if _DECLARATION_RE.match(line) and not commented:
                violations.append(
                    self._diagnostic(message="Missing semicolon after variable declaration", line=line_no)
                )
            if _METHOD_CALL_RE.match(line) and ";" not in line and "{" not in line:
                violations.append(self._diagnostic(message="Missing semicolon after method call", line=line_no))
            if _ASSIGNMENT_RE.match(line) and ";" not in line and "{" not in line and not commented:
                violations.append(
                    self._diagnostic(message="Missing semicolon after assignment statement", line=line_no)
                )
            if _RETURN_RE.match(line) and ";" not in line and not commented:
                violations.append(self._diagnostic(message="Missing semicolon after return statement", line=line_no))
            if "System.out.print" in line and ";" not in line:
                violations.append(
                    self._diagnostic(message="Missing semicolon after System.out statement", line=line_no)
                )
        return violations


class V03Conventions(BaseRule):
    meta = RuleMeta(
        rule_id="V03",
        title="Java conventions",
        description="Wrong `System.out` capitalization, methods without access modifiers, `==` on strings.",
        category="syntax",
        default_severity="warn",
        language=Language.JAVA,
    )

    def check(self, ctx: AnalysisContext) -> list[Diagnostic]:
        violations: list[Diagnostic] = []
        for line_no, line in _java_code_lines(ctx):
            if _SYSTEM_OUT_ANY_CASE_RE.search(line) and "System.out" not in line:
                violations.append(
                    self._diagnostic(
                        message="Incorrect capitalization - use 'System.out' (capital S)",
                        line=line_no,
                        severity="error",
                    )
                )
            if _METHOD_DECL_RE.match(line) and not any(word in line for word in _ACCESS_WORDS):
                violations.append(
                    self._diagnostic(
                        message="Missing access modifier (public, private, or protected) for method",
                        line=line_no,
                        category="quality",
                        severity="info",
                    )
                )
            if _STRING_EQUALITY_RE.search(line):
                violations.append(
                    self._diagnostic(
                        message="Use .equals() method for string comparison, not == operator",
                        line=line_no,
                        category="logic",
                    )
                )
        return violations


class V04MissingImport(BaseRule):
    meta = RuleMeta(
        rule_id="V04",
        title="Missing import",
        description="A java.util class is used without being imported.",
        category="syntax",
        default_severity="error",
        language=Language.JAVA,
    )

    def check(self, ctx: AnalysisContext) -> list[Diagnostic]:
        if "import java.util.*" in ctx.text:
            return []
        violations: list[Diagnostic] = []
        for line_no, line in _java_code_lines(ctx):
            if line.lstrip().startswith("import "):
                continue
            for name, qualified in _REQUIRED_IMPORTS:
                if not re.search(rf"\b{name}\b", line) or f"import {qualified}" in ctx.text:
                    continue
                violations.append(
                    self._diagnostic(message=f"{name} class used but {qualified} not imported", line=line_no)
                )
        return violations


class V05ControlFlow(BaseRule):
    meta = RuleMeta(
        rule_id="V05",
        title="Control flow style",
        description="Braceless if/while/for bodies and switch cases that fall through without `break`.",
        category="quality",
        default_severity="warn",
        language=Language.JAVA,
    )

    def check(self, ctx: AnalysisContext) -> list[Diagnostic]:
        violations: list[Diagnostic] = []
        lines = ctx.lines
        for idx, line in enumerate(lines):
            line_no = idx + 1
            stripped = line.strip()
            if not stripped or stripped.startswith(("//", "/*", "*")):
                continue

            match = _BRACELESS_CONTROL_RE.match(line)
            if match is not None and idx + 1 < len(lines):
                following = lines[idx + 1].strip()
                if following and not following.startswith("{") and ";" not in following:
                    violations.append(
                        self._diagnostic(
                            message=f"Consider using braces {{}} for {match.group('kw')} statement",
                            line=line_no,
                            severity="info",
                        )
                    )

            if "case " in line:
                upcoming = lines[idx + 1 : idx + 5]
                window = lines[idx : idx + 5]
                if any("case " in later for later in upcoming) and not any("break" in later for later in window):
                    violations.append(
                        self._diagnostic(
                            message="Missing 'break' statement in switch case",
                            line=line_no,
                            category="logic",
                        )
                    )
        return violations


class V06ProgramStructure(BaseRule):
    meta = RuleMeta(
        rule_id="V06",
        title="Program structure",
        description=(
            "Files longer than the configured thresholds must declare a class and a main method. "
            "Shorter snippets are treated as fragments."
        ),
        category="syntax",
        default_severity="error",
        language=Language.JAVA,
    )

    def check(self, ctx: AnalysisContext) -> list[Diagnostic]:
        has_class = False
        has_main = False
        for _line_no, line in _java_code_lines(ctx):
            if "static void main" in line:
                has_main = True
            if _CLASS_RE.match(line):
                has_class = True

        violations: list[Diagnostic] = []
        size = len(ctx.text)
        if not has_class and size > ctx.config.java_class_threshold:
            violations.append(
                self._diagnostic(message="Missing public class declaration - Java programs must have a public class")
            )
        if not has_main and size > ctx.config.java_main_threshold:
            violations.append(
                self._diagnostic(message="Missing main method - add: public static void main(String[] args)")
            )
        return violations


class V07JavaTypos(BaseRule):
    meta = RuleMeta(
        rule_id="V07",
        title="Java typos",
        description="Misspelled Java keywords and core classes.",
        category="syntax",
        default_severity="warn",
        language=Language.JAVA,
    )

    def check(self, ctx: AnalysisContext) -> list[Diagnostic]:
        return [
            self._diagnostic(message=f"Possible typo '{typo}' - did you mean '{correct}'?", line=line_no)
            for line_no, typo, correct in find_line_typos(_java_code_lines(ctx), JAVA_TYPOS)
        ]


def builtin_java_rules() -> list[BaseRule]:
    return [
        V01BracketBalance(),
        V02MissingSemicolon(),
        V03Conventions(),
        V04MissingImport(),
        V05ControlFlow(),
        V06ProgramStructure(),
        V07JavaTypos(),
    ]
