from __future__ import annotations

import logging

from reviewbuddy import analyze
from reviewbuddy.config import ReviewBuddyConfig, RulesConfig
from reviewbuddy.engine.aggregate import aggregate
from reviewbuddy.engine.detection import (
    EMPTY_INPUT_MESSAGE,
    INVALID_INPUT_MESSAGE,
    resolve_language,
    run_rule,
)
from reviewbuddy.engine.types import NO_ISSUES_MESSAGE, Diagnostic
from reviewbuddy.languages.catalog import Language
from reviewbuddy.rules.shape import T01UnbalancedDelimiters

from helpers import make_ctx

UNBALANCED_JS = 'console.log("hi";\nlet total = 1;\n'
UNREACHABLE_JS = "function f(x) {\n  return x;\n  console.log(x);\n}\n"
CALCULATOR_JAVA = """public class Calculator {
    public int add(int a, int b) {
        return a + b;
    }
    public int sub(int a, int b) {
        return a - b;
    }
}
"""


def test_clean_code_yields_only_the_sentinel(clean_python: str) -> None:
    result = analyze(clean_python, "Python")
    assert result.messages == (NO_ISSUES_MESSAGE,)
    assert result.is_clean
    assert len(result) == 1


def test_analysis_is_deterministic() -> None:
    first = analyze(UNBALANCED_JS, "JavaScript")
    second = analyze(UNBALANCED_JS, "JavaScript")
    assert first == second


def test_non_string_input_degrades_to_diagnostic() -> None:
    assert analyze(None, "Python").messages == (INVALID_INPUT_MESSAGE,)
    assert analyze(42, "Python").messages == (INVALID_INPUT_MESSAGE,)


def test_blank_input_degrades_to_diagnostic() -> None:
    assert analyze("   \n", "Python").messages == (EMPTY_INPUT_MESSAGE,)


def test_unmatched_parenthesis_message_and_shape_pass_first() -> None:
    result = analyze(UNBALANCED_JS, "JavaScript")
    assert "Unmatched parentheses: 1 opening, 0 closing" in result.messages
    assert result[0].rule_id == "T01"


def test_messages_are_unique() -> None:
    result = analyze(UNBALANCED_JS + UNBALANCED_JS, "JavaScript")
    assert len(result.messages) == len(set(result.messages))


def test_single_unreachable_code_diagnostic() -> None:
    result = analyze(UNREACHABLE_JS, "JavaScript")
    unreachable = [m for m in result.messages if "Unreachable code" in m]
    assert unreachable == ["Line 3: Unreachable code after return statement"]


def test_java_missing_main_depends_on_length() -> None:
    message = "Missing main method - add: public static void main(String[] args)"
    assert len(CALCULATOR_JAVA) > 100
    assert message in analyze(CALCULATOR_JAVA, "Java").messages

    short = "public class A {\n    int x = 1;\n}\n"
    assert len(short) <= 100
    assert message not in analyze(short, "Java").messages


def test_auto_language_runs_detected_engine() -> None:
    result = analyze(CALCULATOR_JAVA, "auto")
    assert any(d.rule_id == "V06" for d in result)


def test_unsupported_language_runs_generic_passes_only(clean_python: str) -> None:
    result = analyze(clean_python, "Rust")
    assert result.messages == ("Unsupported language 'Rust'; ran language-agnostic checks only",)
    assert result[0].category == "generic"


def test_other_language_skips_language_engines() -> None:
    result = analyze(UNREACHABLE_JS, Language.OTHER)
    assert all(d.rule_id is None or d.rule_id[0] not in "PJVC" for d in result)


def test_disabled_groups_are_skipped() -> None:
    config = ReviewBuddyConfig(rules=RulesConfig(disable=("shape",)))
    result = analyze(UNBALANCED_JS, "JavaScript", config=config)
    assert all(d.rule_id is None or not d.rule_id.startswith("T") for d in result)


def test_failing_rule_is_isolated(monkeypatch, caplog) -> None:
    def boom(self, ctx):  # type: ignore[no-untyped-def]
        raise RuntimeError("kaboom")

    monkeypatch.setattr(T01UnbalancedDelimiters, "check", boom)
    text = "function f() {\n  return 1;\n"
    with caplog.at_level(logging.WARNING, logger="reviewbuddy.engine.detection"):
        result = analyze(text, "JavaScript")

    assert "Missing 1 closing brace(s) '}'" in result.messages
    assert all(d.rule_id != "T01" for d in result)
    assert "rule T01 failed" in caplog.text


def test_run_rule_reports_error(monkeypatch) -> None:
    def boom(self, ctx):  # type: ignore[no-untyped-def]
        raise ValueError("bad")

    monkeypatch.setattr(T01UnbalancedDelimiters, "check", boom)
    outcome = run_rule(T01UnbalancedDelimiters(), make_ctx("x = (1"))
    assert outcome.rule_id == "T01"
    assert outcome.diagnostics == ()
    assert outcome.error == "ValueError: bad"


def test_resolve_language() -> None:
    assert resolve_language("x", Language.JAVA) == (Language.JAVA, None)
    assert resolve_language("x", "js") == (Language.JAVASCRIPT, None)
    assert resolve_language("x", "Rust") == (Language.OTHER, "Rust")
    assert resolve_language("???", "auto") == (Language.OTHER, None)
    assert resolve_language("???", "  ") == (Language.OTHER, None)


def test_blank_language_is_classified(clean_python: str) -> None:
    result = analyze(clean_python, "")
    assert result.is_clean
    assert not any("Unsupported language" in message for message in result.messages)


def test_aggregate_dedupes_and_drops_blank_messages() -> None:
    first = Diagnostic(message="Line 1: a", category="syntax", line=1)
    again = Diagnostic(message="Line 1: a", category="logic", line=1)
    blank = Diagnostic(message="   ", category="quality")
    other = Diagnostic(message="b", category="quality")

    result = aggregate([[first, blank], [again, other]])
    assert result.messages == ("Line 1: a", "b")
    assert result[0].category == "syntax"


def test_aggregate_empty_becomes_sentinel() -> None:
    result = aggregate([[], []])
    assert result.is_clean
    assert result[0].category == "generic"
