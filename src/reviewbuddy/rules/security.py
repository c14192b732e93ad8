from __future__ import annotations

import re

from reviewbuddy.engine.context import AnalysisContext
from reviewbuddy.engine.types import Diagnostic
from reviewbuddy.languages.catalog import Language
from reviewbuddy.rules.base import BaseRule, RuleMeta
from reviewbuddy.rules.utils import iter_code_lines

_CREDENTIAL_RE = re.compile(
    r"""(?:\b|_)(?:password|passwd|pwd|secret|token|api_?key|access_?key|private_?key)\w*['"]?\s*[:=]\s*['"][^'"\s]{3,}['"]""",
    re.IGNORECASE,
)
_KEY_MATERIAL_RES: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"\bAKIA[0-9A-Z]{16}\b"), "AWS access key id"),
    (re.compile(r"-----BEGIN (?:RSA |EC |DSA |OPENSSH )?PRIVATE KEY-----"), "private key block"),
    (re.compile(r"\bgh[pousr]_[A-Za-z0-9]{36,}\b"), "GitHub token"),
    (re.compile(r"\bsk-[A-Za-z0-9]{20,}\b"), "API secret key"),
)

_DYNAMIC_EXECUTION_RES: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"(?<![\w.])eval\s*\("), "eval()"),
    (re.compile(r"(?<![\w.])exec\s*\("), "exec()"),
    (re.compile(r"\bnew\s+Function\s*\("), "new Function()"),
    (re.compile(r"\bset(?:Timeout|Interval)\s*\(\s*['\"`]"), "string-based setTimeout/setInterval"),
    (re.compile(r"\bos\.system\s*\("), "os.system()"),
    (re.compile(r"\bsubprocess\.\w+\([^)]*shell\s*=\s*True"), "subprocess with shell=True"),
    (re.compile(r"\bRuntime\.getRuntime\(\)\.exec\s*\("), "Runtime.exec()"),
    (re.compile(r"(?<![\w.])system\s*\(\s*[\w\"]"), "system()"),
)

_DOM_SINK_RES: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"\.innerHTML\s*\+?=(?!=)"), "innerHTML"),
    (re.compile(r"\.outerHTML\s*\+?=(?!=)"), "outerHTML"),
    (re.compile(r"\bdocument\.write(?:ln)?\s*\("), "document.write()"),
    (re.compile(r"\.insertAdjacentHTML\s*\("), "insertAdjacentHTML()"),
    (re.compile(r"\bdangerouslySetInnerHTML\b"), "dangerouslySetInnerHTML"),
)

_PY_EVAL_INPUT_RE = re.compile(r"\b(?:eval|exec)\s*\(\s*(?:raw_)?input\s*\(")
_PY_PICKLE_RE = re.compile(r"\bpickle\.loads?\s*\(")
_PY_YAML_LOAD_RE = re.compile(r"\byaml\.load\s*\((?![^)]*Loader)")
_JS_EVAL_UNTRUSTED_RE = re.compile(r"\beval\s*\([^)]*(?:req\.|request\.|location\.|prompt\s*\(|document\.cookie)")
_C_UNSAFE_RE = re.compile(r"(?<![\w.])(?P<fn>gets|strcpy|strcat|sprintf)\s*\(")
_SQL_CONCAT_RE = re.compile(
    r"""['"]\s*(?:SELECT|INSERT|UPDATE|DELETE)\b[^'"]*['"]\s*\+|\b(?:SELECT|INSERT|UPDATE|DELETE)\b[^'"]*['"]\s*%\s*\w""",
    re.IGNORECASE,
)
_F_STRING_SQL_RE = re.compile(r"""\bf['"]\s*(?:SELECT|INSERT|UPDATE|DELETE)\b[^'"]*\{""", re.IGNORECASE)


class S01HardcodedSecret(BaseRule):
    meta = RuleMeta(
        rule_id="S01",
        title="Hardcoded secret",
        description="Credentials, tokens or key material written directly into source.",
        category="security",
        default_severity="error",
    )

    def check(self, ctx: AnalysisContext) -> list[Diagnostic]:
        violations: list[Diagnostic] = []
        for line_no, line in iter_code_lines(ctx):
            if _CREDENTIAL_RE.search(line):
                violations.append(self._diagnostic(message="Hardcoded credential or secret detected", line=line_no))
                continue
            for pattern, label in _KEY_MATERIAL_RES:
                if pattern.search(line):
                    violations.append(self._diagnostic(message=f"Hardcoded {label} detected", line=line_no))
                    break
        return violations


class S02DynamicExecution(BaseRule):
    meta = RuleMeta(
        rule_id="S02",
        title="Dynamic code execution",
        description="Constructs that execute strings as code or hand them to a shell.",
        category="security",
        default_severity="error",
    )

    def check(self, ctx: AnalysisContext) -> list[Diagnostic]:
        violations: list[Diagnostic] = []
        for line_no, line in iter_code_lines(ctx):
            for pattern, label in _DYNAMIC_EXECUTION_RES:
                if pattern.search(line):
                    violations.append(
                        self._diagnostic(message=f"Use of {label} can execute arbitrary code", line=line_no)
                    )
                    break
        return violations


class S03UnsafeDomInsertion(BaseRule):
    meta = RuleMeta(
        rule_id="S03",
        title="Unsafe DOM insertion",
        description="Raw HTML written into the DOM enables cross-site scripting.",
        category="security",
        default_severity="warn",
    )

    def check(self, ctx: AnalysisContext) -> list[Diagnostic]:
        violations: list[Diagnostic] = []
        for line_no, line in iter_code_lines(ctx):
            for pattern, label in _DOM_SINK_RES:
                if pattern.search(line):
                    violations.append(
                        self._diagnostic(
                            message=f"Unsafe DOM insertion via {label} may allow cross-site scripting",
                            line=line_no,
                        )
                    )
                    break
        return violations


class S04LanguageSpecificRisks(BaseRule):
    """
    Risks that only make sense for some languages.

    Rules keyed to a language run when that language is declared, and also
    for `Other` so undeclared snippets still get coverage. SQL string
    building is checked everywhere.
    """

    meta = RuleMeta(
        rule_id="S04",
        title="Language-specific security risks",
        description="Untrusted input reaching eval, unsafe deserialization, unbounded C string functions, SQL concatenation.",
        category="security",
        default_severity="error",
    )

    def check(self, ctx: AnalysisContext) -> list[Diagnostic]:
        lang = ctx.language
        python_like = lang in (Language.PYTHON, Language.OTHER)
        js_like = lang in (Language.JAVASCRIPT, Language.OTHER)
        c_like = lang in (Language.CPP, Language.OTHER)

        violations: list[Diagnostic] = []
        for line_no, line in iter_code_lines(ctx):
            if python_like and _PY_EVAL_INPUT_RE.search(line):
                violations.append(
                    self._diagnostic(message="User input passed to eval/exec allows arbitrary code execution", line=line_no)
                )
            if python_like and _PY_PICKLE_RE.search(line):
                violations.append(
                    self._diagnostic(message="Unpickling data can execute arbitrary code", line=line_no, severity="warn")
                )
            if python_like and _PY_YAML_LOAD_RE.search(line):
                violations.append(
                    self._diagnostic(message="yaml.load() without a safe Loader can construct arbitrary objects", line=line_no)
                )
            if js_like and _JS_EVAL_UNTRUSTED_RE.search(line):
                violations.append(
                    self._diagnostic(message="Untrusted input passed to eval() allows code injection", line=line_no)
                )
            if c_like:
                match = _C_UNSAFE_RE.search(line)
                if match is not None:
                    violations.append(
                        self._diagnostic(
                            message=f"{match.group('fn')}() does not check buffer bounds (buffer overflow risk)",
                            line=line_no,
                        )
                    )
            if _SQL_CONCAT_RE.search(line) or _F_STRING_SQL_RE.search(line):
                violations.append(
                    self._diagnostic(message="SQL query built from string concatenation (SQL injection risk)", line=line_no)
                )
        return violations


def builtin_security_rules() -> list[BaseRule]:
    return [
        S01HardcodedSecret(),
        S02DynamicExecution(),
        S03UnsafeDomInsertion(),
        S04LanguageSpecificRisks(),
    ]
