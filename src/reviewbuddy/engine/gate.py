from __future__ import annotations

import re

PLAIN_TEXT_MAX_LENGTH = 100
MIN_CODE_INDICATORS = 2

_KEYWORDS = (
    "var|let|const|int|string|float|double|bool|boolean|char|void|class|def|function|public|private|"
    "protected|static|final|abstract|interface|enum|struct|union|namespace|using|import|include|require|"
    "from|as|in|is|not|and|or|if|else|elif|for|while|do|switch|case|default|break|continue|return|yield|"
    "try|catch|except|finally|throw|throws|new|delete|this|super|self|null|undefined|true|false|None|True|False"
)

CODE_INDICATORS: tuple[re.Pattern[str], ...] = (
    re.compile(r"[{}();=<>!&|]+"),  # operator cluster
    re.compile(rf"\b(?:{_KEYWORDS})\b"),
    re.compile(r"\b\w+\s*\(.*\)"),  # call
    re.compile(r"\b\w+\[.*\]"),  # index
    re.compile(r"\b\w+\.\w+"),  # member access
    re.compile(r"//|/\*|\*/|#|<!--"),
    re.compile(r"#include|import|require|using"),
    re.compile(r"[\"'`][^\"'`]*[\"'`]"),
    re.compile(r"\+\+|--|&&|\|\||==|!=|<=|>=|=>|->|\*=|\+=|-=|/="),
    re.compile(r"^\s{4,}", re.MULTILINE),
    re.compile(r";\s*$", re.MULTILINE),
    re.compile(r"\{\s*\w+"),
    re.compile(r"\[[^\[\]\n]*\]|\{[^{}\n]*\}"),
)


def count_code_indicators(text: str) -> int:
    """Number of distinct indicator patterns that match anywhere in `text`."""

    return sum(1 for pattern in CODE_INDICATORS if pattern.search(text))


def is_plain_text(text: str) -> bool:
    """
    Return True when `text` looks like prose rather than source code.

    Both conditions are required: short snippets that trip two indicators are
    still code, and long input is always treated as code.
    """

    return count_code_indicators(text) < MIN_CODE_INDICATORS and len(text) < PLAIN_TEXT_MAX_LENGTH
