"""Shared CLI plumbing — stderr console, logging setup, failure reporting.

Documents go to stdout; progress and errors go to stderr so the JSON on
stdout can be piped straight into the next stage.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import NoReturn

import typer
from rich.console import Console
from rich.logging import RichHandler

from relmanifest.core.errors import DecodeError, ManifestError
from relmanifest.core.output import append_step_output, write_document

err_console = Console(stderr=True)

_PACKAGE_LOGGER = "relmanifest"


def configure_logging(level: str) -> None:
    """Route package logs through a Rich handler on stderr.

    Re-running replaces the handler installed by an earlier call.
    """
    logger = logging.getLogger(_PACKAGE_LOGGER)
    for handler in list(logger.handlers):
        if isinstance(handler, RichHandler):
            logger.removeHandler(handler)
    handler = RichHandler(
        console=err_console,
        show_time=False,
        show_path=False,
        markup=False,
    )
    logger.addHandler(handler)
    logger.setLevel(level.upper())


def fail(command: str, exc: ManifestError, *, annotate: bool = False) -> NoReturn:
    """Report *exc* on stderr and exit with status 1.

    With *annotate*, the message carries the ``::error::`` prefix that
    GitHub Actions surfaces inline.
    """
    prefix = "::error::" if annotate else "error: "
    err_console.print(
        f"{command}: {prefix}{exc}", markup=False, highlight=False, soft_wrap=True
    )
    if isinstance(exc, DecodeError):
        err_console.print(
            f"{command}: Raw content:\n{exc.raw}",
            markup=False,
            highlight=False,
            soft_wrap=True,
        )
    raise typer.Exit(code=1)


def emit(
    document: str,
    *,
    output: Path | None = None,
    step_output: Path | None = None,
    step_key: str = "",
    to_stdout: bool = True,
) -> None:
    """Publish an encoded document to every requested destination."""
    if output is not None:
        write_document(output, document)
    if step_output is not None:
        append_step_output(step_output, step_key, document)
    if to_stdout:
        typer.echo(document)
