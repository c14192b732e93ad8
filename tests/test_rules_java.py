from __future__ import annotations

import time

from reviewbuddy.languages.catalog import Language
from reviewbuddy.rules.java import (
    V01BracketBalance,
    V02MissingSemicolon,
    V03Conventions,
    V04MissingImport,
    V05ControlFlow,
    V06ProgramStructure,
    V07JavaTypos,
)

from helpers import messages, run_rules


def _run(rule, text: str, **config_values) -> list[str]:  # type: ignore[no-untyped-def]
    return messages(run_rules([rule], text, Language.JAVA, **config_values))


def test_brace_and_paren_balance() -> None:
    found = _run(V01BracketBalance(), "class A {\n  void f() {\n    go((1);\n  }\n")
    assert found == [
        "Missing 1 closing brace(s) '}'",
        "Missing 1 closing parenthesis ')'",
    ]


def test_comment_lines_do_not_count_for_balance() -> None:
    assert _run(V01BracketBalance(), "// {\nclass A {}\n") == []


def test_missing_semicolon_variants() -> None:
    text = "int x = 5\nlist.add(x)\ny = 3\nreturn y\nSystem.out.println(x)\n"
    found = _run(V02MissingSemicolon(), text)
    assert "Line 1: Missing semicolon after variable declaration" in found
    assert "Line 2: Missing semicolon after method call" in found
    assert "Line 3: Missing semicolon after assignment statement" in found
    assert "Line 4: Missing semicolon after return statement" in found
    assert "Line 5: Missing semicolon after System.out statement" in found


def test_conventions() -> None:
    text = 'system.out.println("x");\nvoid helper() {\nif (name == "bob") {\n'
    found = run_rules([V03Conventions()], text, Language.JAVA)
    by_message = {d.message: d for d in found}

    assert by_message["Line 1: Incorrect capitalization - use 'System.out' (capital S)"].severity == "error"
    assert by_message["Line 2: Missing access modifier (public, private, or protected) for method"].category == "quality"
    assert (
        by_message["Line 3: Use .equals() method for string comparison, not == operator"].category == "logic"
    )


def test_missing_import() -> None:
    text = "Scanner in = new Scanner(System.in);\n"
    assert _run(V04MissingImport(), text) == ["Line 1: Scanner class used but java.util.Scanner not imported"]
    assert _run(V04MissingImport(), "import java.util.Scanner;\n" + text) == []
    assert _run(V04MissingImport(), "import java.util.*;\n" + text) == []


def test_braceless_if_and_missing_break() -> None:
    text = "\n".join(
        [
            "if (x > 1)",
            "    y = 2",
            "switch (x) {",
            "    case 1:",
            "        y = 1;",
            "    case 2:",
            "        y = 2;",
            "        z = 3;",
            "        w = 4;",
            "        break;",
            "}",
        ]
    )
    found = _run(V05ControlFlow(), text)
    assert "Line 1: Consider using braces {} for if statement" in found
    assert "Line 4: Missing 'break' statement in switch case" in found


def test_program_structure_thresholds() -> None:
    fragment = "int x = 1;\n"
    assert _run(V06ProgramStructure(), fragment) == []

    body = "int x = 1;\n" * 12
    assert len(body) > 100
    assert _run(V06ProgramStructure(), body) == [
        "Missing public class declaration - Java programs must have a public class",
        "Missing main method - add: public static void main(String[] args)",
    ]
    assert _run(V06ProgramStructure(), body, java_main_threshold=1000) == [
        "Missing public class declaration - Java programs must have a public class",
    ]


def test_java_typos() -> None:
    assert _run(V07JavaTypos(), "pubilc class A {}\n") == ["Line 1: Possible typo 'pubilc' - did you mean 'public'?"]


def test_string_equality_scan_is_linear_on_long_words() -> None:
    n = 20_000
    line = "if (" + "a" * n + " '" * (n // 2)
    started = time.perf_counter()
    run_rules([V03Conventions()], line, Language.JAVA)
    assert time.perf_counter() - started < 1.0
