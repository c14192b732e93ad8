from __future__ import annotations

from reviewbuddy.engine.aggregate import aggregate
from reviewbuddy.engine.scoring import bucket_messages, compute_metrics
from reviewbuddy.engine.types import Diagnostic


def _result(*texts: str):  # type: ignore[no-untyped-def]
    return aggregate([[Diagnostic(message=t, category="quality") for t in texts]])


def test_metrics_count_non_blank_lines_and_clamp_complexity() -> None:
    metrics = compute_metrics("x = 1\n\ny = 2\n")
    assert metrics.lines == 2
    assert metrics.complexity == 1

    busy = "if a:\n    pass\n" * 20
    assert compute_metrics(busy).complexity == 10


def test_readability_levels() -> None:
    assert compute_metrics("# note\nx = 1\n").readability == "Good"
    assert compute_metrics("x = 1\n").readability == "Fair"
    assert compute_metrics("x = '" + "a" * 150 + "'\n").readability == "Needs Improvement"


def test_buckets_by_wording() -> None:
    buckets = bucket_messages(
        _result(
            "Missing semicolon",
            "Consider using 'let' or 'const' instead of 'var'",
            "Trailing whitespace",
        )
    )
    assert buckets.critical == ("Missing semicolon",)
    assert buckets.warnings == ("Consider using 'let' or 'const' instead of 'var'",)
    assert buckets.style == ("Trailing whitespace",)
    assert buckets.total == 3


def test_clean_result_has_empty_buckets() -> None:
    assert bucket_messages(aggregate([])).total == 0
