from __future__ import annotations

import re
from collections.abc import Mapping
from functools import lru_cache
from types import MappingProxyType

from reviewbuddy.languages.catalog import Language
from reviewbuddy.rules.base import BaseRule, RuleMeta
from reviewbuddy.rules.cpp import builtin_cpp_rules
from reviewbuddy.rules.java import builtin_java_rules
from reviewbuddy.rules.javascript import builtin_javascript_rules
from reviewbuddy.rules.logic import builtin_logic_rules
from reviewbuddy.rules.performance import builtin_performance_rules
from reviewbuddy.rules.python import builtin_python_rules
from reviewbuddy.rules.quality import builtin_quality_rules
from reviewbuddy.rules.security import builtin_security_rules
from reviewbuddy.rules.shape import builtin_shape_rules

_RULE_ID_RE = re.compile(r"^[A-Z][0-9]{2,}$")

# Pass names in the order their diagnostics are reported.
PASS_ORDER: tuple[str, ...] = ("shape", "engine", "security", "performance", "quality", "logic")


@lru_cache(maxsize=1)
def rule_passes() -> Mapping[str, tuple[BaseRule, ...]]:
    """Language-agnostic passes, keyed by pass name."""

    return MappingProxyType(
        {
            "shape": tuple(builtin_shape_rules()),
            "security": tuple(builtin_security_rules()),
            "performance": tuple(builtin_performance_rules()),
            "quality": tuple(builtin_quality_rules()),
            "logic": tuple(builtin_logic_rules()),
        }
    )


@lru_cache(maxsize=1)
def language_engines() -> Mapping[Language, tuple[BaseRule, ...]]:
    """
    Per-language rule engines.

    `Language.OTHER` has no entry: it runs the language-agnostic passes only.
    """

    return MappingProxyType(
        {
            Language.PYTHON: tuple(builtin_python_rules()),
            Language.JAVASCRIPT: tuple(builtin_javascript_rules()),
            Language.JAVA: tuple(builtin_java_rules()),
            Language.CPP: tuple(builtin_cpp_rules()),
        }
    )


def engine_for(language: Language) -> tuple[BaseRule, ...]:
    return language_engines().get(language, ())


@lru_cache(maxsize=1)
def builtin_rules() -> tuple[BaseRule, ...]:
    rules: list[BaseRule] = []
    for engine in language_engines().values():
        rules.extend(engine)
    for rules_in_pass in rule_passes().values():
        rules.extend(rules_in_pass)

    by_id: dict[str, BaseRule] = {}
    for rule in rules:
        rule_id = rule.meta.rule_id
        if not _RULE_ID_RE.match(rule_id):  # pragma: no cover
            raise RuntimeError(f"Rule id must match {_RULE_ID_RE.pattern}: {rule_id!r}")
        if rule_id in by_id:  # pragma: no cover
            raise RuntimeError(f"Duplicate rule id: {rule_id}")
        by_id[rule_id] = rule

    return tuple(by_id[k] for k in sorted(by_id))


def rule_ids() -> set[str]:
    return {r.meta.rule_id for r in builtin_rules()}


@lru_cache(maxsize=1)
def rule_meta_by_id() -> Mapping[str, RuleMeta]:
    return MappingProxyType({r.meta.rule_id: r.meta for r in builtin_rules()})
