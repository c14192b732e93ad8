from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Annotated

import click
import typer
from rich.console import Console

from reviewbuddy import __version__
from reviewbuddy.config import DEFAULT_LANGUAGE, ConfigError, ReviewBuddyConfig, compute_enabled_rule_ids, load_config
from reviewbuddy.engine.detection import analyze as analyze_text
from reviewbuddy.engine.detection import resolve_language
from reviewbuddy.engine.scoring import ReviewReport, build_report
from reviewbuddy.languages.catalog import Language
from reviewbuddy.languages.classifier import classify_language, score_languages, validate_language_match
from reviewbuddy.logging_utils import configure_logging
from reviewbuddy.reporters.json_reporter import render_json
from reviewbuddy.reporters.markdown import render_markdown
from reviewbuddy.reporters.terminal import render_terminal

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    help="reviewbuddy: pattern-based code review for Python, JavaScript, Java and C++ snippets.",
)
console = Console()
err_console = Console(stderr=True)
logger = logging.getLogger(__name__)

STDIN_PATH = "-"


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(__version__)
        raise typer.Exit()


@app.callback()
def _main(
    ctx: typer.Context,
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            callback=_version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Verbose logs (printed to stderr)."),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option("--quiet", "-q", help="Reduce non-essential output."),
    ] = False,
) -> None:
    """reviewbuddy CLI."""

    if verbose and quiet:
        raise typer.BadParameter("Choose at most one: --verbose or --quiet.")
    configure_logging(verbose=verbose, quiet=quiet)
    ctx.obj = {"verbose": verbose, "quiet": quiet}


def _cli_settings() -> dict[str, bool]:
    ctx = click.get_current_context(silent=True)
    if ctx is None or not isinstance(ctx.obj, dict):
        return {"verbose": False, "quiet": False}
    return {"verbose": bool(ctx.obj.get("verbose", False)), "quiet": bool(ctx.obj.get("quiet", False))}


def _load_config_or_exit(project_dir: Path) -> ReviewBuddyConfig:
    try:
        return load_config(project_dir)
    except ConfigError as exc:
        err_console.print(f"Invalid configuration: {exc}")
        raise typer.Exit(code=2) from exc


def _read_source(path: str, *, max_chars: int) -> tuple[str, str]:
    """Return `(text, display name)`; exits with code 2 on unreadable or oversized input."""

    try:
        if path.strip() == STDIN_PATH:
            text, name = sys.stdin.read(), "<stdin>"
        else:
            text, name = Path(path).read_text(encoding="utf-8", errors="replace"), path
    except OSError as exc:
        err_console.print(f"Cannot read {path}: {exc}")
        raise typer.Exit(code=2) from exc

    if len(text) > max_chars:
        err_console.print(f"Input too large: {len(text)} characters (limit {max_chars}).")
        raise typer.Exit(code=2)
    return text, name


def _emit_output(fmt: str, *, report: ReviewReport, console: Console, show_details: bool = True) -> None:
    normalized = fmt.strip().lower()
    if normalized == "terminal":
        render_terminal(report, console=console, show_details=show_details)
        return
    if normalized == "json":
        typer.echo(render_json(report))
        return
    if normalized == "markdown":
        typer.echo(render_markdown(report))
        return
    raise typer.BadParameter("Unsupported format. Use: terminal, json, markdown.")


@app.command()
def analyze(
    path: Annotated[
        str,
        typer.Argument(help="Source file to review, or '-' to read from stdin."),
    ],
    language: Annotated[
        str | None,
        typer.Option(
            "--language",
            "-l",
            help="Python, JavaScript, Java, C++, Other, or auto (default: config value, then auto).",
        ),
    ] = None,
    output_format: Annotated[
        str,
        typer.Option("--format", help="Output format: terminal, json, markdown.", show_default=True),
    ] = "terminal",
    fail_on_issues: Annotated[
        bool,
        typer.Option("--fail-on-issues", help="Exit with code 1 when any issue is reported."),
    ] = False,
    project_dir: Annotated[
        Path,
        typer.Option(
            "--project",
            file_okay=False,
            dir_okay=True,
            help="Directory whose pyproject.toml holds [tool.reviewbuddy] settings.",
        ),
    ] = Path("."),
) -> None:
    """
    Review a single source file and report the diagnostics.
    """

    config = _load_config_or_exit(project_dir)
    text, source = _read_source(path, max_chars=config.max_input_chars)

    declared = language if language is not None else config.language
    if declared.strip().lower() != DEFAULT_LANGUAGE:
        parsed = Language.parse(declared)
        if parsed is not None and parsed is not Language.OTHER and not validate_language_match(text, parsed):
            detected = classify_language(text)
            logger.warning(
                "declared language %s does not look like the code (detected %s)",
                parsed.value,
                detected.value if detected is not None else "unknown",
            )

    resolved, unsupported = resolve_language(text, declared)
    logger.debug("reviewing %s as %s", source, unsupported or resolved.value)

    result = analyze_text(text, declared, config=config)
    report = build_report(text, result, language=unsupported or resolved.value, source=source)

    settings = _cli_settings()
    _emit_output(output_format, report=report, console=console, show_details=not settings["quiet"])

    if fail_on_issues and not result.is_clean:
        raise typer.Exit(code=1)


@app.command()
def classify(
    path: Annotated[
        str,
        typer.Argument(help="Source file to classify, or '-' to read from stdin."),
    ],
    scores: Annotated[
        bool,
        typer.Option("--scores", help="Also print the score of every language."),
    ] = False,
) -> None:
    """
    Guess the programming language of a source file.
    """

    config = ReviewBuddyConfig()
    text, _source = _read_source(path, max_chars=config.max_input_chars)

    detected = classify_language(text)
    typer.echo(detected.value if detected is not None else "unknown")
    if scores:
        for lang, score in score_languages(text).items():
            typer.echo(f"{lang.value}: {score}")


@app.command()
def rules(
    project_dir: Annotated[
        Path,
        typer.Option(
            "--project",
            file_okay=False,
            dir_okay=True,
            help="Directory whose pyproject.toml holds [tool.reviewbuddy] settings.",
        ),
    ] = Path("."),
    output_format: Annotated[
        str,
        typer.Option("--format", help="Output format: terminal, json.", show_default=True),
    ] = "terminal",
) -> None:
    """
    List all built-in rules and whether the current config enables them.
    """

    from rich.table import Table

    from reviewbuddy.rules.registry import builtin_rules

    config = _load_config_or_exit(project_dir)
    available_rules = list(builtin_rules())
    enabled_ids = compute_enabled_rule_ids(config, available_rule_ids=(r.meta.rule_id for r in available_rules))

    rows = []
    for rule in available_rules:
        meta = rule.meta
        rows.append(
            {
                "rule_id": meta.rule_id,
                "enabled": meta.rule_id in enabled_ids,
                "title": meta.title,
                "description": meta.description,
                "category": meta.category,
                "default_severity": meta.default_severity,
                "language": meta.language.value if meta.language is not None else None,
            }
        )

    normalized = output_format.strip().lower()
    if normalized == "json":
        typer.echo(json.dumps(rows, indent=2, sort_keys=True))
        return
    if normalized != "terminal":
        raise typer.BadParameter("Unsupported format. Use: terminal, json.")

    table = Table(title="reviewbuddy rules")
    table.add_column("ID", style="bold")
    table.add_column("Enabled", justify="center")
    table.add_column("Severity")
    table.add_column("Category")
    table.add_column("Language")
    table.add_column("Title")
    for row in rows:
        table.add_row(
            str(row["rule_id"]),
            "yes" if row["enabled"] else "no",
            str(row["default_severity"]),
            str(row["category"]),
            str(row["language"] or "any"),
            str(row["title"]),
        )
    console.print(table)
