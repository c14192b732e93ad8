from __future__ import annotations

import re
from collections.abc import Iterable

from reviewbuddy.engine.context import AnalysisContext

_LINE_COMMENT_PREFIXES = (
    "#",  # Python
    "//",  # JS/Java/C++
)
_BLOCK_COMMENT_START = "/*"
_BLOCK_COMMENT_END = "*/"
_PREPROCESSOR_RE = re.compile(r"^#\s*(?:include|define|undef|ifn?def|if|elif|else|endif|pragma|error)\b")

TypoTable = tuple[tuple[str, str], ...]


def is_comment_line(line: str) -> bool:
    stripped = line.lstrip()
    if not stripped:
        return False
    return stripped.startswith(_LINE_COMMENT_PREFIXES) or stripped.startswith(_BLOCK_COMMENT_START)


def is_documentation_line(line: str, *, in_block_comment: bool = False) -> bool:
    """
    Like `is_comment_line`, but aware of block-comment bodies, docstrings and
    C preprocessor directives (which start with `#` but are not comments).

    A leading `*` only marks a comment while a `/* ... */` block is open.
    """

    stripped = line.strip()
    if not stripped:
        return False
    if in_block_comment:
        return True
    if _PREPROCESSOR_RE.match(stripped):
        return False
    if stripped.startswith(('"""', "'''")):
        return True
    return is_comment_line(stripped)


def has_documentation(lines: Iterable[str]) -> bool:
    in_block_comment = False
    for line in lines:
        if is_documentation_line(line, in_block_comment=in_block_comment):
            return True
        stripped = line.strip()
        if _BLOCK_COMMENT_START in stripped:
            tail = stripped.split(_BLOCK_COMMENT_START, 1)[1]
            in_block_comment = _BLOCK_COMMENT_END not in tail
    return False


def iter_code_lines(ctx: AnalysisContext) -> Iterable[tuple[int, str]]:
    """
    Yield non-empty code lines with basic block-comment support.

    Lines that are part of a leading `/* ... */` block are treated as comments.
    """

    in_block_comment = False
    for idx, line in enumerate(ctx.lines, start=1):
        stripped = line.strip()
        if not stripped:
            continue

        if in_block_comment:
            if _BLOCK_COMMENT_END in stripped:
                in_block_comment = False
            continue

        if stripped.startswith(_LINE_COMMENT_PREFIXES):
            continue
        if stripped.startswith(_BLOCK_COMMENT_START):
            if _BLOCK_COMMENT_END not in stripped:
                in_block_comment = True
            continue

        yield idx, line


def indent_width(line: str) -> int:
    return len(line) - len(line.lstrip())


def signed_balance_message(balance: int, *, noun: str, symbol: str) -> str | None:
    """
    Render a final bracket balance with sign and magnitude.

    `noun` is the plural form, e.g. "brace(s)".
    """

    if balance > 0:
        return f"Missing {balance} closing {noun} '{symbol}'"
    if balance < 0:
        return f"Extra {abs(balance)} closing {noun} '{symbol}'"
    return None


def find_text_typos(text: str, table: TypoTable) -> list[tuple[str, str]]:
    """Distinct (typo, correction) pairs appearing anywhere in `text`."""

    return [(typo, correct) for typo, correct in table if typo in text]


def find_line_typos(lines: Iterable[tuple[int, str]], table: TypoTable) -> list[tuple[int, str, str]]:
    """
    Whole-word typos per line.

    A hit is dropped when the correct spelling also appears on that line.
    """

    hits: list[tuple[int, str, str]] = []
    for line_no, line in lines:
        for typo, correct in table:
            if not re.search(rf"\b{re.escape(typo)}\b", line):
                continue
            if re.search(rf"\b{re.escape(correct)}\b", line):
                continue
            hits.append((line_no, typo, correct))
    return hits


def block_end(lines: tuple[str, ...], start: int) -> int:
    """
    Return the 0-based index of the last line of the block opened at `start`.

    Headers ending in `:` use indentation; anything else uses brace depth,
    allowing the opening brace on the following line.
    """

    header = lines[start]
    if header.rstrip().endswith(":"):
        base = indent_width(header)
        end = start
        for idx in range(start + 1, len(lines)):
            line = lines[idx]
            if not line.strip():
                continue
            if indent_width(line) <= base:
                break
            end = idx
        return end

    depth = 0
    opened = False
    for idx in range(start, len(lines)):
        for ch in lines[idx]:
            if ch == "{":
                depth += 1
                opened = True
            elif ch == "}":
                depth -= 1
        if opened and depth <= 0:
            return idx
        if not opened and idx >= start + 1:
            return start
    return len(lines) - 1 if opened else start
