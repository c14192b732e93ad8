from __future__ import annotations

import re

from reviewbuddy.engine.context import AnalysisContext, AnalysisState
from reviewbuddy.engine.types import Diagnostic
from reviewbuddy.languages.catalog import Language
from reviewbuddy.rules.base import BaseRule, RuleMeta
from reviewbuddy.rules.utils import TypoTable, find_line_typos, iter_code_lines, signed_balance_message

_DECLARATION_RE = re.compile(r"^\s*(?:int|char|double|float|string|bool|long|auto)\s+\w+.*[^;{}\s,(]$")
_RETURN_RE = re.compile(r"^\s*return\b[^;{}]*[^;{}\s]$")
_ASSIGNMENT_RE = re.compile(r"^\s*[\w\[\]\.>-]+\s*[+\-*/%]?=(?!=)[^;{}]*[^;{}\s,(]$")
_STREAM_WORD_RE = re.compile(r"\b(?:cout|cin|endl)\b")
_COUT_RE = re.compile(r"\bcout\b")
_CIN_RE = re.compile(r"\bcin\b")
_INCLUDE_RE = re.compile(r"^\s*#\s*include\b")
_MAIN_RE = re.compile(r"\b(?:int|void)\s+main\s*\(")

# (usage pattern, header, what is used)
_REQUIRED_HEADERS: tuple[tuple[re.Pattern[str], str, str], ...] = (
    (re.compile(r"\b(?:cout|cin|cerr)\b"), "iostream", "stream I/O"),
    (re.compile(r"\bvector\s*<"), "vector", "std::vector"),
    (re.compile(r"\bstring\s+\w+\s*[;=]|std::string\b"), "string", "std::string"),
    (re.compile(r"\bmap\s*<"), "map", "std::map"),
    (re.compile(r"\b(?:sort|reverse|max_element|min_element)\s*\("), "algorithm", "an <algorithm> function"),
)

CPP_TYPOS: TypoTable = (
    ("cuot", "cout"),
    ("incldue", "include"),
    ("inlcude", "include"),
    ("namepsace", "namespace"),
    ("retrun", "return"),
    ("strign", "string"),
    ("mian", "main"),
    ("vecotr", "vector"),
)


class C01BraceBalance(BaseRule):
    meta = RuleMeta(
        rule_id="C01",
        title="Brace balance",
        description="Curly braces opened and closed across the file do not match.",
        category="syntax",
        default_severity="error",
        language=Language.CPP,
    )

    def check(self, ctx: AnalysisContext) -> list[Diagnostic]:
        state = AnalysisState()
        for _line_no, line in iter_code_lines(ctx):
            state.brace_balance += line.count("{") - line.count("}")

        message = signed_balance_message(state.brace_balance, noun="brace(s)", symbol="}")
        return [self._diagnostic(message=message)] if message else []


class C02MissingSemicolon(BaseRule):
    meta = RuleMeta(
        rule_id="C02",
        title="Missing semicolon",
        description="A declaration, assignment or return line does not end with ';'.",
        category="syntax",
        default_severity="error",
        language=Language.CPP,
    )

    def check(self, ctx: AnalysisContext) -> list[Diagnostic]:
        violations: list[Diagnostic] = []
        for line_no, line in iter_code_lines(ctx):
            if "//" in line:
                continue
            stripped = line.rstrip()
            if _DECLARATION_RE.match(stripped) and not _MAIN_RE.search(stripped):
                violations.append(
                    self._diagnostic(message="Missing semicolon after variable declaration", line=line_no)
                )
            elif _RETURN_RE.match(stripped):
                violations.append(self._diagnostic(message="Missing semicolon after return statement", line=line_no))
            elif _ASSIGNMENT_RE.match(stripped):
                violations.append(
                    self._diagnostic(message="Missing semicolon after assignment statement", line=line_no)
                )
        return violations


class C03StreamUsage(BaseRule):
    meta = RuleMeta(
        rule_id="C03",
        title="Stream usage",
        description="cout/cin without their stream operators, or without the `std::` prefix.",
        category="syntax",
        default_severity="error",
        language=Language.CPP,
    )

    def check(self, ctx: AnalysisContext) -> list[Diagnostic]:
        using_std = "using namespace std" in ctx.text
        violations: list[Diagnostic] = []
        for line_no, line in iter_code_lines(ctx):
            if _STREAM_WORD_RE.search(line) and "std::" not in line and not using_std:
                violations.append(
                    self._diagnostic(
                        message="Missing 'std::' prefix for standard library functions",
                        line=line_no,
                        severity="warn",
                    )
                )
            if _COUT_RE.search(line) and "<<" not in line:
                violations.append(self._diagnostic(message="cout should use '<<' operator", line=line_no))
            if _CIN_RE.search(line) and ">>" not in line:
                violations.append(self._diagnostic(message="cin should use '>>' operator", line=line_no))
        return violations


class C04MissingInclude(BaseRule):
    meta = RuleMeta(
        rule_id="C04",
        title="Missing include",
        description="A standard library facility is used without including its header.",
        category="syntax",
        default_severity="error",
        language=Language.CPP,
    )

    def check(self, ctx: AnalysisContext) -> list[Diagnostic]:
        code = "\n".join(line for _line_no, line in iter_code_lines(ctx) if not _INCLUDE_RE.match(line))
        violations: list[Diagnostic] = []
        for usage, header, what in _REQUIRED_HEADERS:
            if not usage.search(code):
                continue
            if re.search(rf"#\s*include\s*<{header}>", ctx.text):
                continue
            violations.append(
                self._diagnostic(message=f"Missing #include <{header}> - {what} used but header not included")
            )
        return violations


class C05ProgramStructure(BaseRule):
    meta = RuleMeta(
        rule_id="C05",
        title="Program structure",
        description=(
            "Files longer than the configured thresholds should include headers and define main(). "
            "Shorter snippets are treated as fragments."
        ),
        category="syntax",
        default_severity="warn",
        language=Language.CPP,
    )

    def check(self, ctx: AnalysisContext) -> list[Diagnostic]:
        has_include = False
        has_main = False
        for line in ctx.lines:
            if "#include" in line:
                has_include = True
            if "int main" in line or "void main" in line:
                has_main = True

        violations: list[Diagnostic] = []
        size = len(ctx.text)
        if not has_include and size > ctx.config.cpp_include_threshold:
            violations.append(
                self._diagnostic(message="Missing #include statements - C++ programs typically need includes")
            )
        if not has_main and size > ctx.config.cpp_main_threshold:
            violations.append(
                self._diagnostic(message="Missing main function - C++ programs need int main() or void main()")
            )
        return violations


class C06CppTypos(BaseRule):
    meta = RuleMeta(
        rule_id="C06",
        title="C++ typos",
        description="Misspelled C++ keywords and standard library names.",
        category="syntax",
        default_severity="warn",
        language=Language.CPP,
    )

    def check(self, ctx: AnalysisContext) -> list[Diagnostic]:
        return [
            self._diagnostic(message=f"Possible typo '{typo}' - did you mean '{correct}'?", line=line_no)
            for line_no, typo, correct in find_line_typos(enumerate(ctx.lines, start=1), CPP_TYPOS)
        ]


def builtin_cpp_rules() -> list[BaseRule]:
    return [
        C01BraceBalance(),
        C02MissingSemicolon(),
        C03StreamUsage(),
        C04MissingInclude(),
        C05ProgramStructure(),
        C06CppTypos(),
    ]
