from __future__ import annotations

from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from reviewbuddy import __version__
from reviewbuddy.engine.scoring import BUCKET_LABELS, BUCKET_ORDER, ReviewReport
from reviewbuddy.engine.types import Diagnostic

_SEVERITY_ICON = {"error": "✖", "warn": "⚠", "info": "ℹ"}
_SEVERITY_STYLE = {"error": "bold red", "warn": "yellow", "info": "dim"}
_BUCKET_STYLE = {"critical": "bold red", "warnings": "yellow", "style": "cyan"}


def render_terminal(report: ReviewReport, *, console: Console, show_details: bool = True) -> None:
    header = Text()
    header.append("reviewbuddy ", style="bold")
    header.append(f"v{__version__}", style="dim")
    header.append(f" · {report.language} review", style="dim")

    console.print(Panel(header, subtitle=report.source, border_style="cyan"))

    result = report.result
    if result.is_clean:
        console.print(Text("✔ No issues detected", style="bold green"))
    elif show_details:
        console.print(Text(f"Found {len(result)} issue{'s' if len(result) != 1 else ''}", style="bold"))
        for diagnostic in result:
            _print_diagnostic(console, diagnostic)
        console.print()
        _print_buckets(report, console=console)

    _print_metrics(report, console=console)


def _print_diagnostic(console: Console, d: Diagnostic) -> None:
    icon = _SEVERITY_ICON.get(d.severity, "•")
    style = _SEVERITY_STYLE.get(d.severity, "")

    line = Text()
    line.append(f"  {icon} ", style=style)
    line.append(d.rule_id or "-", style="bold")
    line.append(f"  [{d.category}]", style="dim")
    line.append(f"  {d.message}")
    console.print(line)


def _print_buckets(report: ReviewReport, *, console: Console) -> None:
    for bucket in BUCKET_ORDER:
        messages = report.buckets.get(bucket)
        if not messages:
            continue
        console.print(Text(f"{BUCKET_LABELS[bucket]} ({len(messages)})", style=_BUCKET_STYLE[bucket]))


def _print_metrics(report: ReviewReport, *, console: Console) -> None:
    metrics = report.metrics
    console.print(Text("─" * 60, style="dim"))
    console.print(
        Text(
            f"Lines of code: {metrics.lines}  Complexity: {metrics.complexity}/10  "
            f"Readability: {metrics.readability}",
            style="bold",
        )
    )
    console.print(Text("─" * 60, style="dim"))
