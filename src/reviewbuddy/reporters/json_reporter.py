from __future__ import annotations

import json
from typing import Any

from reviewbuddy import __version__
from reviewbuddy.engine.scoring import BUCKET_ORDER, ReviewReport
from reviewbuddy.engine.types import Diagnostic

REPORT_SCHEMA_VERSION = 1


def render_json(report: ReviewReport) -> str:
    payload = {
        "schema_version": REPORT_SCHEMA_VERSION,
        "tool": {"name": "reviewbuddy", "version": __version__},
        "source": report.source,
        "language": report.language,
        "clean": report.result.is_clean,
        "metrics": {
            "lines": report.metrics.lines,
            "complexity": report.metrics.complexity,
            "readability": report.metrics.readability,
        },
        "buckets": {bucket: list(report.buckets.get(bucket)) for bucket in BUCKET_ORDER},
        "diagnostics": [_diagnostic_to_dict(d) for d in report.result],
    }
    return json.dumps(payload, indent=2, sort_keys=False)


def _diagnostic_to_dict(d: Diagnostic) -> dict[str, Any]:
    return {
        "rule_id": d.rule_id,
        "category": d.category,
        "severity": d.severity,
        "line": d.line,
        "message": d.message,
    }
