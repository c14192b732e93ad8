from __future__ import annotations

from reviewbuddy.engine.scoring import BUCKET_LABELS, BUCKET_ORDER, ReviewReport


def render_markdown(report: ReviewReport) -> str:
    result = report.result
    metrics = report.metrics

    lines: list[str] = []
    lines.append(f"# Code review: {report.language}")
    lines.append("")
    lines.append(f"- Source: `{report.source}`")
    lines.append(f"- Lines of code: {metrics.lines}")
    lines.append(f"- Complexity score: {metrics.complexity}/10")
    lines.append(f"- Readability: {metrics.readability}")
    lines.append("")

    lines.append("## Issues")
    lines.append("")
    if result.is_clean:
        lines.append("No issues detected.")
        lines.append("")
        return "\n".join(lines)

    for bucket in BUCKET_ORDER:
        messages = report.buckets.get(bucket)
        if messages:
            lines.append(f"- {BUCKET_LABELS[bucket]}: {len(messages)}")
    lines.append("")

    lines.append("| Line | Rule | Category | Severity | Message |")
    lines.append("| ---: | --- | --- | --- | --- |")
    for d in result:
        line_cell = str(d.line) if d.line is not None else "-"
        rule_cell = f"`{d.rule_id}`" if d.rule_id else "-"
        lines.append(f"| {line_cell} | {rule_cell} | {d.category} | {d.severity} | {_md_escape_cell(d.message)} |")

    lines.append("")
    return "\n".join(lines)


def _md_escape_cell(text: str) -> str:
    # Markdown tables break on pipes/newlines.
    return text.replace("\\", "\\\\").replace("|", "\\|").replace("\n", " ").strip()
