from __future__ import annotations

import logging
import re
from collections.abc import Iterable

from reviewbuddy.languages.catalog import CATALOG, Language, LanguageProfile

logger = logging.getLogger(__name__)

INDENTATION_BONUS = 5
INDENTED_LINE_RATIO = 0.2

_INDENTED_LINE_RE = re.compile(r"^(?: {4,}|\t)")


def score_languages(text: str, catalog: Iterable[LanguageProfile] = CATALOG) -> dict[Language, int]:
    """
    Score `text` against every profile in `catalog`.

    Keyword signals add `occurrences * 2`, regex signals `occurrences * 3`.
    Indentation-sensitive profiles get a flat bonus when more than 20% of the
    non-empty lines are indented by 4+ spaces or a tab.
    """

    scores: dict[Language, int] = {}
    for profile in catalog:
        score = sum(signal.count(text) * signal.weight for signal in profile.signals)
        if profile.indentation_sensitive and _indented_ratio(text) > INDENTED_LINE_RATIO:
            score += INDENTATION_BONUS
        scores[profile.language] = score
    return scores


def classify_language(text: str, catalog: Iterable[LanguageProfile] = CATALOG) -> Language | None:
    """
    Return the best-matching language for `text`, or None when nothing matched.

    Ties resolve to the profile declared first in the catalog.
    """

    if not isinstance(text, str) or not text.strip():
        return None

    scores = score_languages(text, catalog)
    best: Language | None = None
    best_score = 0
    for language, score in scores.items():
        if score > best_score:
            best = language
            best_score = score
    logger.debug("classifier scores: %s", {lang.value: s for lang, s in scores.items()})
    return best


def validate_language_match(text: str, declared: Language | str) -> bool:
    """
    Advisory check that the declared language agrees with the classifier.

    Undetectable input never contradicts the declaration.
    """

    detected = classify_language(text)
    if detected is None:
        return True
    return detected is Language.parse(declared)


def _indented_ratio(text: str) -> float:
    non_empty = [line for line in text.split("\n") if line.strip()]
    if not non_empty:
        return 0.0
    indented = sum(1 for line in non_empty if _INDENTED_LINE_RE.match(line))
    return indented / len(non_empty)
