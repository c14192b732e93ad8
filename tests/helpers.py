from __future__ import annotations

from collections.abc import Iterable

from reviewbuddy.config import ReviewBuddyConfig
from reviewbuddy.engine.context import AnalysisContext, build_context
from reviewbuddy.engine.types import Diagnostic
from reviewbuddy.languages.catalog import Language
from reviewbuddy.rules.base import BaseRule


def make_ctx(text: str, language: Language = Language.OTHER, config: ReviewBuddyConfig | None = None) -> AnalysisContext:
    return build_context(text, language, config or ReviewBuddyConfig())


def run_rules(rules: Iterable[BaseRule], text: str, language: Language = Language.OTHER, **config_values) -> list[Diagnostic]:
    ctx = make_ctx(text, language, ReviewBuddyConfig(**config_values))
    found: list[Diagnostic] = []
    for rule in rules:
        found.extend(rule.check(ctx))
    return found


def messages(diagnostics: Iterable[Diagnostic]) -> list[str]:
    return [d.message for d in diagnostics]
