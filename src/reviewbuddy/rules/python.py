from __future__ import annotations

import re

from reviewbuddy.engine.context import AnalysisContext, AnalysisState
from reviewbuddy.engine.types import Diagnostic
from reviewbuddy.languages.catalog import Language
from reviewbuddy.rules.base import BaseRule, RuleMeta
from reviewbuddy.rules.utils import TypoTable, find_line_typos, indent_width, iter_code_lines

_CONTROL_KEYWORD_RE = re.compile(r"^\s*(?:if|elif|else|for|while|def|class|try|except|finally|with)\b")
_BLOCK_OPENER_RE = re.compile(r":\s*$")
_CLASS_RE = re.compile(r"^(?P<indent>\s*)class\s+\w+")
_ZERO_ARG_DEF_RE = re.compile(r"^(?P<indent>\s*)def\s+(?P<name>\w+)\s*\(\s*\)")
_PRINT_NAME_RE = re.compile(r"print\s*\(\s*(?P<name>\w+)\s*\)")
_PRINT_STATEMENT_RE = re.compile(r"\bprint\s+\w+")
_ASSIGN_IN_IF_RE = re.compile(r"\bif\s+\w+\s*=\s*\w+")

# (usage pattern, module name, accepted import statements)
_REQUIRED_IMPORTS: tuple[tuple[re.Pattern[str], str, tuple[str, ...]], ...] = tuple(
    (re.compile(rf"\b{module}\."), module, (f"import {module}",))
    for module in ("json", "os", "sys", "re", "math", "random", "time")
)

PYTHON_TYPOS: TypoTable = (
    ("pritn", "print"),
    ("slef", "self"),
    ("improt", "import"),
    ("retrun", "return"),
    ("lamda", "lambda"),
    ("Ture", "True"),
    ("Flase", "False"),
    ("Noen", "None"),
    ("esle", "else"),
    ("whiel", "while"),
)


class P01MissingColon(BaseRule):
    meta = RuleMeta(
        rule_id="P01",
        title="Missing colon",
        description="A control statement does not end with ':'.",
        category="syntax",
        default_severity="error",
        language=Language.PYTHON,
    )

    def check(self, ctx: AnalysisContext) -> list[Diagnostic]:
        violations: list[Diagnostic] = []
        for line_no, line in enumerate(ctx.lines, start=1):
            stripped = line.strip()
            if not stripped:
                continue
            if _CONTROL_KEYWORD_RE.match(line) and not stripped.endswith(":"):
                violations.append(
                    self._diagnostic(message="Missing colon (:) after control statement", line=line_no)
                )
        return violations


class P02UnexpectedIndentation(BaseRule):
    """
    Track block structure through indentation.

    A line ending in ':' opens a block and records its indent as the baseline.
    Until a deeper line shows up, every non-blank line at or above the
    baseline is reported.
    """

    meta = RuleMeta(
        rule_id="P02",
        title="Expected indentation",
        description="A block opener is not followed by an indented line.",
        category="syntax",
        default_severity="error",
        language=Language.PYTHON,
    )

    def check(self, ctx: AnalysisContext) -> list[Diagnostic]:
        violations: list[Diagnostic] = []
        state = AnalysisState()
        for line_no, line in enumerate(ctx.lines, start=1):
            if not line.strip():
                continue

            current = indent_width(line)
            if state.expecting_indent and current <= state.indent_level:
                violations.append(
                    self._diagnostic(message="Expected indentation after previous statement", line=line_no)
                )

            if _BLOCK_OPENER_RE.search(line):
                state.expecting_indent = True
                state.indent_level = current
            elif current > state.indent_level:
                state.expecting_indent = False
        return violations


class P03MethodWithoutSelf(BaseRule):
    meta = RuleMeta(
        rule_id="P03",
        title="Method without self",
        description="A method inside a class takes no parameters and has no decorator.",
        category="syntax",
        default_severity="warn",
        language=Language.PYTHON,
    )

    def check(self, ctx: AnalysisContext) -> list[Diagnostic]:
        violations: list[Diagnostic] = []
        class_indents: list[int] = []
        previous = ""

        for line_no, line in iter_code_lines(ctx):
            current = indent_width(line)
            while class_indents and current <= class_indents[-1]:
                class_indents.pop()

            class_match = _CLASS_RE.match(line)
            if class_match is not None:
                class_indents.append(current)
            else:
                def_match = _ZERO_ARG_DEF_RE.match(line)
                decorated = previous.lstrip().startswith("@")
                if def_match is not None and class_indents and not decorated:
                    violations.append(
                        self._diagnostic(
                            message=f"Method '{def_match.group('name')}' is missing the 'self' parameter",
                            line=line_no,
                        )
                    )
            previous = line
        return violations


class P04PrintUsage(BaseRule):
    meta = RuleMeta(
        rule_id="P04",
        title="Print usage",
        description="Python 2 print statements and printed names that are never assigned.",
        category="syntax",
        default_severity="warn",
        language=Language.PYTHON,
    )

    def check(self, ctx: AnalysisContext) -> list[Diagnostic]:
        violations: list[Diagnostic] = []
        for line_no, line in enumerate(ctx.lines, start=1):
            if not line.strip():
                continue

            match = _PRINT_NAME_RE.search(line)
            if match is not None:
                name = match.group("name")
                if f"{name} =" not in ctx.text and f"def {name}" not in ctx.text and not _is_literal(name):
                    violations.append(self._diagnostic(message=f"Variable '{name}' may be undefined", line=line_no))

            if _PRINT_STATEMENT_RE.search(line) and "(" not in line:
                violations.append(
                    self._diagnostic(message="Missing parentheses in print statement", line=line_no, severity="error")
                )
        return violations


class P05AssignmentInCondition(BaseRule):
    meta = RuleMeta(
        rule_id="P05",
        title="Assignment in condition",
        description="An `if` statement uses '=' where '==' was intended.",
        category="syntax",
        default_severity="error",
        language=Language.PYTHON,
    )

    def check(self, ctx: AnalysisContext) -> list[Diagnostic]:
        return [
            self._diagnostic(
                message="Use '==' for comparison, not '=' for assignment in if statement",
                line=line_no,
            )
            for line_no, line in iter_code_lines(ctx)
            if _ASSIGN_IN_IF_RE.search(line)
        ]


class P06MissingImport(BaseRule):
    meta = RuleMeta(
        rule_id="P06",
        title="Missing import",
        description="A standard-library module is used without a matching import statement.",
        category="syntax",
        default_severity="error",
        language=Language.PYTHON,
    )

    def check(self, ctx: AnalysisContext) -> list[Diagnostic]:
        violations: list[Diagnostic] = []
        for usage, module, statements in _REQUIRED_IMPORTS:
            if not usage.search(ctx.text):
                continue
            if any(statement in ctx.text for statement in statements):
                continue
            violations.append(
                self._diagnostic(message=f"Missing import: {module} module used but not imported")
            )
        return violations


class P07PythonTypos(BaseRule):
    meta = RuleMeta(
        rule_id="P07",
        title="Python typos",
        description="Misspelled Python keywords and builtins.",
        category="syntax",
        default_severity="warn",
        language=Language.PYTHON,
    )

    def check(self, ctx: AnalysisContext) -> list[Diagnostic]:
        return [
            self._diagnostic(message=f"Possible typo '{typo}' - did you mean '{correct}'?", line=line_no)
            for line_no, typo, correct in find_line_typos(enumerate(ctx.lines, start=1), PYTHON_TYPOS)
        ]


def _is_literal(name: str) -> bool:
    return name.isdigit() or name in {"True", "False", "None"}


def builtin_python_rules() -> list[BaseRule]:
    return [
        P01MissingColon(),
        P02UnexpectedIndentation(),
        P03MethodWithoutSelf(),
        P04PrintUsage(),
        P05AssignmentInCondition(),
        P06MissingImport(),
        P07PythonTypos(),
    ]
