from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Literal

SignalKind = Literal["keyword", "regex"]

KEYWORD_WEIGHT = 2
REGEX_WEIGHT = 3


class Language(str, Enum):
    PYTHON = "Python"
    JAVASCRIPT = "JavaScript"
    JAVA = "Java"
    CPP = "C++"
    OTHER = "Other"

    @classmethod
    def parse(cls, value: str | Language | None) -> Language | None:
        """
        Resolve a user-supplied language name.

        Matching is case-insensitive and accepts a few common aliases.
        Returns None for names outside the closed set.
        """

        if isinstance(value, Language):
            return value
        if not isinstance(value, str):
            return None
        return _ALIASES.get(value.strip().lower())


_ALIASES: dict[str, Language] = {
    "python": Language.PYTHON,
    "py": Language.PYTHON,
    "javascript": Language.JAVASCRIPT,
    "js": Language.JAVASCRIPT,
    "java": Language.JAVA,
    "c++": Language.CPP,
    "cpp": Language.CPP,
    "cxx": Language.CPP,
    "other": Language.OTHER,
    "generic": Language.OTHER,
}


@dataclass(frozen=True, slots=True)
class Signal:
    pattern: str
    kind: SignalKind
    weight: int
    compiled: re.Pattern[str] | None = field(default=None, compare=False, repr=False)

    def count(self, text: str) -> int:
        if self.kind == "keyword":
            return text.count(self.pattern)
        assert self.compiled is not None
        return len(self.compiled.findall(text))


def keyword(text: str) -> Signal:
    return Signal(pattern=text, kind="keyword", weight=KEYWORD_WEIGHT)


def regex(pattern: str) -> Signal:
    return Signal(pattern=pattern, kind="regex", weight=REGEX_WEIGHT, compiled=re.compile(pattern))


@dataclass(frozen=True, slots=True)
class LanguageProfile:
    language: Language
    signals: tuple[Signal, ...]
    indentation_sensitive: bool = False


# Declaration order is the classifier tie-break order.
CATALOG: tuple[LanguageProfile, ...] = (
    LanguageProfile(
        Language.PYTHON,
        (
            keyword("def "),
            keyword("import "),
            keyword("from "),
            keyword("class "),
            keyword("if __name__"),
            keyword("print("),
            keyword("elif "),
            keyword("lambda "),
            keyword("yield "),
            keyword("with "),
            keyword("try:"),
            keyword("except:"),
            keyword("finally:"),
            keyword("pass"),
            keyword("self."),
            regex(r"def\s+\w+\s*\("),
            regex(r"import\s+\w+"),
            regex(r"from\s+\w+\s+import"),
            regex(r"class\s+\w+"),
            regex(r"if\s+__name__\s*==\s*['\"]__main__['\"]"),
            regex(r"print\s*\("),
            regex(r":\s*$"),
            regex(r"^\s+"),
        ),
        indentation_sensitive=True,
    ),
    LanguageProfile(
        Language.JAVASCRIPT,
        (
            keyword("function "),
            keyword("const "),
            keyword("let "),
            keyword("var "),
            keyword("console.log"),
            keyword("return "),
            keyword("if ("),
            keyword("for ("),
            keyword("while ("),
            keyword("class "),
            keyword("=>"),
            keyword("async "),
            keyword("await "),
            keyword("require("),
            regex(r"function\s+\w+\s*\("),
            regex(r"const\s+\w+"),
            regex(r"let\s+\w+"),
            regex(r"var\s+\w+"),
            regex(r"console\.log\s*\("),
            regex(r"=>\s*"),
            regex(r"\{\s*$"),
            regex(r"\}\s*$"),
            regex(r";\s*$"),
        ),
    ),
    LanguageProfile(
        Language.JAVA,
        (
            keyword("public class"),
            keyword("private "),
            keyword("public "),
            keyword("static "),
            keyword("void "),
            keyword("import "),
            keyword("package "),
            keyword("extends "),
            keyword("implements "),
            keyword("System.out"),
            regex(r"public\s+class\s+\w+"),
            regex(r"private\s+\w+"),
            regex(r"public\s+\w+"),
            regex(r"static\s+\w+"),
            regex(r"void\s+\w+"),
            regex(r"import\s+[\w.]+"),
            regex(r"package\s+[\w.]+"),
            regex(r"System\.out"),
        ),
    ),
    LanguageProfile(
        Language.CPP,
        (
            keyword("#include"),
            keyword("using namespace"),
            keyword("int main"),
            keyword("std::"),
            keyword("cout <<"),
            keyword("cin >>"),
            keyword("class "),
            keyword("struct "),
            keyword("void "),
            keyword("int "),
            keyword("char "),
            keyword("double "),
            regex(r"#include\s*[<\"]"),
            regex(r"using\s+namespace\s+\w+"),
            regex(r"int\s+main\s*\("),
            regex(r"std::\w+"),
            regex(r"cout\s*<<"),
            regex(r"cin\s*>>"),
            regex(r"class\s+\w+"),
            regex(r"struct\s+\w+"),
        ),
    ),
)

SUPPORTED_LANGUAGES: tuple[Language, ...] = tuple(Language)


def profile_for(language: Language) -> LanguageProfile | None:
    for profile in CATALOG:
        if profile.language is language:
            return profile
    return None
