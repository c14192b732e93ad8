from __future__ import annotations

from reviewbuddy.rules.shape import T01UnbalancedDelimiters, T02LineShape, T03CommonTypos

from helpers import messages, run_rules


def test_bracket_counts_are_reported() -> None:
    found = messages(run_rules([T01UnbalancedDelimiters()], "foo(bar\nx = [1, 2\n"))
    assert found == [
        "Unmatched parentheses: 1 opening, 0 closing",
        "Unmatched square brackets: 1 opening, 0 closing",
    ]


def test_quote_parity() -> None:
    found = messages(run_rules([T01UnbalancedDelimiters()], 'say("a", "b)\n'))
    assert "Unmatched double quotes: 3 found (odd count)" in found


def test_balanced_text_is_clean() -> None:
    assert run_rules([T01UnbalancedDelimiters()], "f(x) { a[0] = 'b'; }") == []


def test_line_checks() -> None:
    text = "\n".join(
        [
            "x = 1   ",
            ";",
            "y = " + "1" * 130,
            "z = 2  # TODO",
        ]
    )
    found = messages(run_rules([T02LineShape()], text))
    assert "Line 1: Trailing whitespace" in found
    assert "Line 2: Empty statement (lone ';')" in found
    assert any(m.startswith("Line 3: Line too long (134 characters)") for m in found)
    assert "Line 4: TODO/FIXME marker without a description" in found


def test_comment_lines_are_skipped() -> None:
    assert run_rules([T02LineShape()], "# TODO   \n// ;") == []


def test_mixed_indentation_relative_to_first_indented_line() -> None:
    text = "if x:\n    a = 1\n\tb = 2\n"
    found = messages(run_rules([T02LineShape()], text))
    assert found == ["Line 3: Mixed tabs and spaces in indentation"]


def test_sensitive_literals() -> None:
    found = run_rules([T02LineShape()], 'password = "hunter2"\nhost = "localhost"\n')
    assert [d.message for d in found] == [
        "Line 1: Hardcoded sensitive value ('password') in string literal",
        "Line 2: Hardcoded sensitive value ('localhost') in string literal",
    ]
    assert all(d.category == "security" for d in found)


def test_typos_reported_once_per_distinct_typo() -> None:
    found = messages(run_rules([T03CommonTypos()], "retrun x\nretrun y\nlenght"))
    assert found == [
        "Possible typo detected: 'retrun' - did you mean 'return'?",
        "Possible typo detected: 'lenght' - did you mean 'length'?",
    ]


def test_single_unclosed_call() -> None:
    assert messages(run_rules([T01UnbalancedDelimiters()], "func(a, b")) == [
        "Unmatched parentheses: 1 opening, 0 closing"
    ]
