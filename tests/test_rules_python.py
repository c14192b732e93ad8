from __future__ import annotations

from reviewbuddy.languages.catalog import Language
from reviewbuddy.rules.python import (
    P01MissingColon,
    P02UnexpectedIndentation,
    P03MethodWithoutSelf,
    P04PrintUsage,
    P05AssignmentInCondition,
    P06MissingImport,
    P07PythonTypos,
    builtin_python_rules,
)

from helpers import messages, run_rules


def _run(rule, text: str) -> list[str]:  # type: ignore[no-untyped-def]
    return messages(run_rules([rule], text, Language.PYTHON))


def test_missing_colon() -> None:
    assert _run(P01MissingColon(), "if x > 1\n    pass\n") == ["Line 1: Missing colon (:) after control statement"]
    assert _run(P01MissingColon(), "for i in y:\n    pass\n") == []


def test_expected_indentation_after_block_opener() -> None:
    text = "def f():\nreturn 1\n"
    assert _run(P02UnexpectedIndentation(), text) == ["Line 2: Expected indentation after previous statement"]


def test_indented_block_is_clean() -> None:
    text = "def f():\n    if x:\n        return 1\n    return 2\n"
    assert _run(P02UnexpectedIndentation(), text) == []


def test_method_without_self() -> None:
    text = "class A:\n    def run():\n        pass\n\n    @staticmethod\n    def make():\n        pass\n"
    assert _run(P03MethodWithoutSelf(), text) == ["Line 2: Method 'run' is missing the 'self' parameter"]


def test_module_level_function_without_params_is_fine() -> None:
    assert _run(P03MethodWithoutSelf(), "def main():\n    pass\n") == []


def test_print_usage() -> None:
    found = _run(P04PrintUsage(), "print(total)\nprint value\n")
    assert "Line 1: Variable 'total' may be undefined" in found
    assert "Line 2: Missing parentheses in print statement" in found


def test_print_of_assigned_name_is_fine() -> None:
    assert _run(P04PrintUsage(), "total = 3\nprint(total)\n") == []


def test_assignment_in_condition() -> None:
    assert _run(P05AssignmentInCondition(), "if x = 5:\n    pass\n") == [
        "Line 1: Use '==' for comparison, not '=' for assignment in if statement"
    ]
    assert _run(P05AssignmentInCondition(), "if x == 5:\n    pass\n") == []


def test_missing_import() -> None:
    found = _run(P06MissingImport(), "data = json.loads(s)\nos.getcwd()\n")
    assert found == [
        "Missing import: json module used but not imported",
        "Missing import: os module used but not imported",
    ]
    assert _run(P06MissingImport(), "import json\njson.loads(s)\n") == []


def test_python_typos_skip_lines_with_correct_spelling() -> None:
    assert _run(P07PythonTypos(), "slef.x = 1\n") == ["Line 1: Possible typo 'slef' - did you mean 'self'?"]
    assert _run(P07PythonTypos(), "self.slef = 1\n") == []


def test_all_python_rules_are_tagged_with_python() -> None:
    assert all(rule.meta.language is Language.PYTHON for rule in builtin_python_rules())
