from __future__ import annotations

from collections.abc import Iterable

from reviewbuddy.engine.types import NO_ISSUES, Diagnostic, DiagnosticSet


def aggregate(groups: Iterable[Iterable[Diagnostic]]) -> DiagnosticSet:
    """
    Merge per-pass diagnostics into one `DiagnosticSet`.

    Groups are concatenated in the order given. Blank messages are dropped and
    repeated messages keep their first occurrence. An empty result becomes the
    single "no issues" sentinel.
    """

    seen: set[str] = set()
    merged: list[Diagnostic] = []
    for group in groups:
        for diagnostic in group:
            if not diagnostic.message.strip():
                continue
            if diagnostic.message in seen:
                continue
            seen.add(diagnostic.message)
            merged.append(diagnostic)

    if not merged:
        return DiagnosticSet((NO_ISSUES,))
    return DiagnosticSet(tuple(merged))
