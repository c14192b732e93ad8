from __future__ import annotations

import re

from reviewbuddy.engine.context import AnalysisContext, AnalysisState
from reviewbuddy.engine.types import Diagnostic
from reviewbuddy.rules.base import BaseRule, RuleMeta
from reviewbuddy.rules.utils import block_end, indent_width, iter_code_lines

_LOOP_RE = re.compile(r"^\s*(?:for|while|do)\b|\.forEach\s*\(")
_LOG_CALL_RE = re.compile(
    r"\b(?:console\.(?:log|debug|info|warn|error)|print|println|printf|logging\.\w+|logger\.\w+|"
    r"System\.(?:out|err)\.print(?:ln|f)?|std::cout|cout|cerr)\b\s*(?:\(|<<)"
)

_PY_DEF_RE = re.compile(r"^\s*(?:async\s+)?def\s+(?P<name>\w+)\s*\(")
_JS_FUNCTION_RE = re.compile(
    r"^\s*(?:export\s+)?(?:async\s+)?function\s*\*?\s*(?P<name>\w+)\s*\(|"
    r"^\s*(?:const|let|var)\s+(?P<arrow>\w+)\s*=\s*(?:async\s+)?\([^)]*\)\s*=>\s*\{"
)
_C_LIKE_FUNCTION_RE = re.compile(
    r"^\s*(?:(?:public|private|protected|static|final|virtual|inline|synchronized|abstract)\s+)*"
    r"[\w:<>\[\],]+\s+(?P<name>\w+)\s*\([^;]*\)\s*(?:const\s*)?(?:throws\s+[\w,\s]+)?\{?\s*$"
)
_NOT_A_FUNCTION = frozenset({"if", "for", "while", "switch", "catch", "return", "else", "new"})


class F01NestedLoops(BaseRule):
    meta = RuleMeta(
        rule_id="F01",
        title="Deeply nested loops",
        description="Loops nested beyond the configured depth grow polynomially with input size.",
        category="performance",
        default_severity="warn",
    )

    def check(self, ctx: AnalysisContext) -> list[Diagnostic]:
        violations: list[Diagnostic] = []
        limit = ctx.config.max_loop_depth
        for line_no, depth in _loop_headers(ctx):
            if depth > limit:
                violations.append(
                    self._diagnostic(
                        message=f"Deeply nested loops (depth {depth}) may cause poor performance",
                        line=line_no,
                    )
                )
        return violations


class F02LoggingInLoop(BaseRule):
    meta = RuleMeta(
        rule_id="F02",
        title="Logging inside loop",
        description="Printing or logging on every iteration slows hot loops.",
        category="performance",
        default_severity="info",
    )

    def check(self, ctx: AnalysisContext) -> list[Diagnostic]:
        violations: list[Diagnostic] = []
        loop_indents: list[int] = []
        for line_no, line in iter_code_lines(ctx):
            current = indent_width(line)
            while loop_indents and current <= loop_indents[-1]:
                loop_indents.pop()

            is_loop = bool(_LOOP_RE.search(line))
            if _LOG_CALL_RE.search(line) and (loop_indents or is_loop):
                violations.append(
                    self._diagnostic(
                        message="Logging/printing inside a loop may degrade performance",
                        line=line_no,
                    )
                )
            if is_loop:
                loop_indents.append(current)
        return violations


class F03LongFunction(BaseRule):
    meta = RuleMeta(
        rule_id="F03",
        title="Long function",
        description="Function bodies spanning more lines than the configured maximum.",
        category="performance",
        default_severity="warn",
    )

    def check(self, ctx: AnalysisContext) -> list[Diagnostic]:
        violations: list[Diagnostic] = []
        limit = ctx.config.max_function_lines
        lines = ctx.lines
        for idx, line in enumerate(lines):
            name = _function_name(line)
            if name is None:
                continue

            state = AnalysisState(in_function=True)
            end = block_end(lines, idx)
            state.function_lines = end - idx + 1
            if state.function_lines > limit:
                violations.append(
                    self._diagnostic(
                        message=(
                            f"Function '{name}' spans {state.function_lines} lines (>{limit}); "
                            "consider splitting it up"
                        ),
                        line=idx + 1,
                    )
                )
        return violations


def _loop_headers(ctx: AnalysisContext) -> list[tuple[int, int]]:
    """Return (line number, nesting depth) for every loop header, by indentation."""

    headers: list[tuple[int, int]] = []
    loop_indents: list[int] = []
    for line_no, line in iter_code_lines(ctx):
        current = indent_width(line)
        while loop_indents and current <= loop_indents[-1]:
            loop_indents.pop()
        if _LOOP_RE.search(line):
            loop_indents.append(current)
            headers.append((line_no, len(loop_indents)))
    return headers


def _function_name(line: str) -> str | None:
    for pattern in (_PY_DEF_RE, _JS_FUNCTION_RE, _C_LIKE_FUNCTION_RE):
        match = pattern.match(line)
        if match is None:
            continue
        name = match.groupdict().get("name") or match.groupdict().get("arrow")
        if name and name not in _NOT_A_FUNCTION:
            return name
    return None


def builtin_performance_rules() -> list[BaseRule]:
    return [
        F01NestedLoops(),
        F02LoggingInLoop(),
        F03LongFunction(),
    ]
