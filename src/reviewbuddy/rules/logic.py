from __future__ import annotations

import re

from reviewbuddy.engine.context import AnalysisContext, AnalysisState
from reviewbuddy.engine.types import Diagnostic
from reviewbuddy.rules.base import BaseRule, RuleMeta
from reviewbuddy.rules.utils import block_end, indent_width, is_comment_line, iter_code_lines

_CONSTANT_CONDITION_RE = re.compile(
    r"\b(?P<kw>if|while|elif)\s*\(\s*(?P<c1>true|false|True|False|0|1)\s*\)"
    r"|\b(?P<kw2>if|while|elif)\s+(?P<c2>True|False|0|1)\s*:"
)
_SELF_COMPARISON_RE = re.compile(r"\b(?:if|while|elif)\b.*?(?<![\w.])(?P<lhs>[A-Za-z_]\w*)\s*(?:===?|!==?)\s*(?P=lhs)\b(?![\w.(])")
_INFINITE_LOOP_RE = re.compile(
    r"^\s*(?:while\s*\(\s*(?:true|1)\s*\)|while\s+(?:True|1)\s*:|for\s*\(\s*;\s*;\s*\))"
)
_LOOP_EXIT_RE = re.compile(r"\b(?:break|return|exit|throw|raise|goto)\b|sys\.exit|process\.exit")
_TIGHT_COMPARISON_RE = re.compile(r"\w(?P<op>==|!=|<=|>=)\w")
_BRANCH_RESET_RE = re.compile(r"^(?:case\b|default\s*:|else\b|elif\b|except\b|catch\b|finally\b)")
_STRING_LITERAL_RE = re.compile(r"""(["'`])(?:\\.|(?!\1).)*\1""")


class L01ConstantCondition(BaseRule):
    meta = RuleMeta(
        rule_id="L01",
        title="Constant condition",
        description="A condition that is always true or always false.",
        category="logic",
        default_severity="warn",
    )

    def check(self, ctx: AnalysisContext) -> list[Diagnostic]:
        violations: list[Diagnostic] = []
        for line_no, line in iter_code_lines(ctx):
            code = _STRING_LITERAL_RE.sub('""', line)
            match = _CONSTANT_CONDITION_RE.search(code)
            if match is not None:
                keyword = match.group("kw") or match.group("kw2")
                # `while (true)` is an intentional loop; L02 judges it.
                if keyword != "while":
                    value = match.group("c1") or match.group("c2")
                    truth = "true" if value in ("true", "True", "1") else "false"
                    violations.append(
                        self._diagnostic(message=f"Condition is always {truth}", line=line_no)
                    )
                    continue
            if _SELF_COMPARISON_RE.search(code):
                violations.append(
                    self._diagnostic(message="Comparing a value with itself is always constant", line=line_no)
                )
        return violations


class L02InfiniteLoop(BaseRule):
    meta = RuleMeta(
        rule_id="L02",
        title="Infinite loop",
        description="An unconditional loop whose body shows no break, return or raise.",
        category="logic",
        default_severity="error",
    )

    def check(self, ctx: AnalysisContext) -> list[Diagnostic]:
        violations: list[Diagnostic] = []
        lines = ctx.lines
        for idx, line in enumerate(lines):
            if is_comment_line(line) or not _INFINITE_LOOP_RE.match(line):
                continue
            end = block_end(lines, idx)
            body = lines[idx + 1 : end + 1] if end > idx else lines[idx : idx + 1]
            if any(_LOOP_EXIT_RE.search(body_line) for body_line in body):
                continue
            violations.append(
                self._diagnostic(message="Potential infinite loop without a visible exit", line=idx + 1)
            )
        return violations


class L03TightComparison(BaseRule):
    meta = RuleMeta(
        rule_id="L03",
        title="Comparison without spaces",
        description="Comparison operators packed between operands are easy to misread or mistype.",
        category="logic",
        default_severity="info",
    )

    def check(self, ctx: AnalysisContext) -> list[Diagnostic]:
        violations: list[Diagnostic] = []
        for line_no, line in iter_code_lines(ctx):
            match = _TIGHT_COMPARISON_RE.search(_STRING_LITERAL_RE.sub('""', line))
            if match is None:
                continue
            violations.append(
                self._diagnostic(
                    message=f"Add spaces around the '{match.group('op')}' operator for clarity",
                    line=line_no,
                )
            )
        return violations


class L04UnreachableCode(BaseRule):
    meta = RuleMeta(
        rule_id="L04",
        title="Unreachable code",
        description="Statements after a `return` in the same block never run.",
        category="logic",
        default_severity="warn",
    )

    def check(self, ctx: AnalysisContext) -> list[Diagnostic]:
        violations: list[Diagnostic] = []
        state = AnalysisState()
        for line_no, line in iter_code_lines(ctx):
            stripped = line.strip()
            current = indent_width(line)

            if state.seen_return:
                if (
                    stripped.startswith("}")
                    or current < state.return_indent
                    or _BRANCH_RESET_RE.match(stripped)
                ):
                    state.seen_return = False
                elif current > state.return_indent:
                    # continuation of a multi-line return expression
                    continue
                else:
                    violations.append(
                        self._diagnostic(message="Unreachable code after return statement", line=line_no)
                    )
                    state.seen_return = False
                    continue

            if re.match(r"return\b", stripped):
                state.seen_return = True
                state.return_indent = current
        return violations


def builtin_logic_rules() -> list[BaseRule]:
    return [
        L01ConstantCondition(),
        L02InfiniteLoop(),
        L03TightComparison(),
        L04UnreachableCode(),
    ]
