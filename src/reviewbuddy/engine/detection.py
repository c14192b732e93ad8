from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from reviewbuddy.config import DEFAULT_LANGUAGE, ReviewBuddyConfig, compute_enabled_rule_ids
from reviewbuddy.engine.aggregate import aggregate
from reviewbuddy.engine.context import AnalysisContext, build_context
from reviewbuddy.engine.gate import is_plain_text
from reviewbuddy.engine.types import Diagnostic, DiagnosticSet
from reviewbuddy.languages.catalog import Language
from reviewbuddy.languages.classifier import classify_language
from reviewbuddy.rules.base import BaseRule
from reviewbuddy.rules.registry import PASS_ORDER, engine_for, rule_ids, rule_passes

logger = logging.getLogger(__name__)

INVALID_INPUT_MESSAGE = "Invalid input: expected source text as a string"
EMPTY_INPUT_MESSAGE = "Code is empty - please paste some code to analyze"
PLAIN_TEXT_MESSAGE = "This appears to be plain text, not code. Please paste actual programming code for analysis."


@dataclass(frozen=True, slots=True)
class RuleOutcome:
    rule_id: str
    diagnostics: tuple[Diagnostic, ...]
    error: str | None = None


def run_rule(rule: BaseRule, ctx: AnalysisContext) -> RuleOutcome:
    """
    Run a single rule, turning any exception into an empty outcome.

    A failing rule never aborts the other passes.
    """

    rule_id = rule.meta.rule_id
    try:
        found = rule.check(ctx)
    except Exception as exc:
        logger.warning("rule %s failed: %s", rule_id, exc)
        return RuleOutcome(rule_id=rule_id, diagnostics=(), error=f"{type(exc).__name__}: {exc}")
    return RuleOutcome(rule_id=rule_id, diagnostics=tuple(found))


def resolve_language(text: str, declared: Language | str | None) -> tuple[Language, str | None]:
    """
    Map a declared language to the engine to run.

    Returns `(language, unsupported_name)`. `"auto"`, a blank name or `None` asks the
    classifier; an unknown name falls back to `Language.OTHER` and is returned
    so the caller can report it.
    """

    if isinstance(declared, Language):
        return declared, None
    if declared is None or declared.strip().lower() in ("", DEFAULT_LANGUAGE):
        detected = classify_language(text)
        return (detected or Language.OTHER), None
    parsed = Language.parse(declared)
    if parsed is None:
        return Language.OTHER, declared
    return parsed, None


def analyze(
    text: object,
    declared_language: Language | str | None,
    *,
    config: ReviewBuddyConfig | None = None,
) -> DiagnosticSet:
    """
    Analyze `text` and return an ordered, de-duplicated diagnostic set.

    Never raises: invalid input, plain text and failing rules all degrade to
    diagnostics (or to no diagnostics for the failing rule).
    """

    if not isinstance(text, str):
        return DiagnosticSet((Diagnostic(message=INVALID_INPUT_MESSAGE, category="generic", severity="error"),))
    if not text.strip():
        return DiagnosticSet((Diagnostic(message=EMPTY_INPUT_MESSAGE, category="generic", severity="error"),))
    if is_plain_text(text):
        return DiagnosticSet((Diagnostic(message=PLAIN_TEXT_MESSAGE, category="generic", severity="warn"),))

    cfg = config or ReviewBuddyConfig()
    language, unsupported = resolve_language(text, declared_language)
    ctx = build_context(text, language, cfg)
    enabled = compute_enabled_rule_ids(cfg, available_rule_ids=rule_ids())

    engine = engine_for(language)
    logger.debug("dispatching %s engine (%d rule(s))", language.value, len(engine))

    groups: list[tuple[Diagnostic, ...]] = []
    passes = rule_passes()
    for pass_name in PASS_ORDER:
        rules = engine if pass_name == "engine" else passes[pass_name]
        groups.extend(_run_pass(rules, ctx, enabled))

    if unsupported is not None:
        groups.append(
            (
                Diagnostic(
                    message=f"Unsupported language '{unsupported}'; ran language-agnostic checks only",
                    category="generic",
                    severity="info",
                ),
            )
        )

    return aggregate(groups)


def _run_pass(rules: Iterable[BaseRule], ctx: AnalysisContext, enabled: set[str]) -> list[tuple[Diagnostic, ...]]:
    outcomes: list[tuple[Diagnostic, ...]] = []
    for rule in rules:
        if rule.meta.rule_id not in enabled:
            continue
        outcome = run_rule(rule, ctx)
        outcomes.append(outcome.diagnostics)
    return outcomes
