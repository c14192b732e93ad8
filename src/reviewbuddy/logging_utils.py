from __future__ import annotations

import logging
import sys


def configure_logging(*, verbose: bool, quiet: bool) -> None:
    """
    Configure process-wide logging for the CLI.

    - Default: INFO
    - --verbose: DEBUG
    - --quiet: WARNING

    Records go to stderr so `--format json` output on stdout stays parseable.
    """

    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    else:
        level = logging.INFO

    fmt = "reviewbuddy: %(message)s"
    if verbose:
        fmt = "reviewbuddy [%(levelname)s] %(name)s: %(message)s"

    logging.basicConfig(level=level, format=fmt, stream=sys.stderr, force=True)
