from __future__ import annotations

from reviewbuddy.languages.catalog import Language
from reviewbuddy.rules.javascript import (
    J01BraceBalance,
    J02MissingSemicolon,
    J03ConsoleUsage,
    J04VarDeclaration,
    J05MissingNew,
    J06LooseEquality,
    J07MissingRequire,
    J08JavaScriptTypos,
)

from helpers import messages, run_rules


def _run(rule, text: str) -> list[str]:  # type: ignore[no-untyped-def]
    return messages(run_rules([rule], text, Language.JAVASCRIPT))


def test_brace_balance_reports_sign_and_magnitude() -> None:
    assert _run(J01BraceBalance(), "function f() {\n  if (x) {\n") == ["Missing 2 closing brace(s) '}'"]
    assert _run(J01BraceBalance(), "}\n") == ["Extra 1 closing brace(s) '}'"]
    assert _run(J01BraceBalance(), "function f() {}\n") == []


def test_missing_semicolon_shapes() -> None:
    text = "let a = 1\ncount += 2\ndoThing(a)\nreturn a\nif (a) {\n"
    assert _run(J02MissingSemicolon(), text) == [
        "Line 1: Missing semicolon",
        "Line 2: Missing semicolon",
        "Line 3: Missing semicolon",
        "Line 4: Missing semicolon",
    ]


def test_terminated_lines_are_clean() -> None:
    assert _run(J02MissingSemicolon(), "let a = 1;\nconst o = {\n}\n") == []


def test_console_usage() -> None:
    found = _run(J03ConsoleUsage(), "console.log msg\nConsole.Log('x');\n")
    assert found == [
        "Line 1: Missing parentheses in console.log",
        "Line 2: Incorrect capitalization - use 'console.log'",
    ]


def test_var_is_discouraged() -> None:
    assert _run(J04VarDeclaration(), "var x = 1;\n") == ["Line 1: Consider using 'let' or 'const' instead of 'var'"]


def test_missing_new_skips_conversion_functions() -> None:
    assert _run(J05MissingNew(), "const d = Date();\n") == ["Line 1: Missing 'new' keyword for constructor"]
    assert _run(J05MissingNew(), "const n = Number(s);\nconst d = new Date();\n") == []


def test_loose_equality() -> None:
    found = _run(J06LooseEquality(), "if (a == b) {}\nif (a != b) {}\nif (a === b) {}\n")
    assert found == [
        "Line 1: Use '===' instead of '==' for comparison",
        "Line 2: Use '!==' instead of '!=' for comparison",
    ]


def test_missing_require() -> None:
    assert _run(J07MissingRequire(), "fs.readFileSync('a');\n") == ["Missing require statement for fs module"]
    assert _run(J07MissingRequire(), "const fs = require('fs');\nfs.readFileSync('a');\n") == []
    assert _run(J07MissingRequire(), "import path from 'node:path';\npath.join('a');\n") == []


def test_javascript_typos() -> None:
    assert _run(J08JavaScriptTypos(), "fucntion go() {}\n") == ["Line 1: Possible typo 'fucntion' - did you mean 'function'?"]
    assert _run(J08JavaScriptTypos(), "// fucntion\n") == []
