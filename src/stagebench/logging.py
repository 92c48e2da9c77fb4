"""Logging for stagebench.

Engine modules take a child logger from :func:`get_logger` and only emit
records: stage lifecycle at DEBUG, misuse and misaligned profiles at
WARNING.  Nothing is printed until an application calls
:func:`setup_logging`, which sends records to standard error through
``click.echo`` so they share the colour handling of the result tables.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import IO

import click

ROOT_LOGGER = "stagebench"
_FILE_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"

_LEVEL_COLORS = {
    logging.DEBUG: "bright_black",
    logging.WARNING: "yellow",
    logging.ERROR: "red",
    logging.CRITICAL: "red",
}


class ClickEchoHandler(logging.Handler):
    """Write records with ``click.echo``, coloured by level.

    Records print as ``[stage] message``, where the tag is the logger name
    below ``stagebench``.  *color* is passed to ``click.echo``; ``None``
    keeps colour only when the stream is a terminal.
    """

    def __init__(self, *, file: IO[str] | None = None, color: bool | None = None):
        super().__init__()
        self.file = file
        self.color = color

    def format(self, record: logging.LogRecord) -> str:
        tag = record.name.removeprefix(ROOT_LOGGER).lstrip(".") or ROOT_LOGGER
        text = f"[{tag}] {record.getMessage()}"
        if record.exc_info:
            text += "\n" + logging.Formatter().formatException(record.exc_info)
        return text

    def emit(self, record: logging.LogRecord) -> None:
        try:
            text = self.format(record)
            fg = _LEVEL_COLORS.get(record.levelno)
            if fg is not None:
                text = click.style(text, fg=fg)
            click.echo(text, file=self.file, err=self.file is None, color=self.color)
        except Exception:
            self.handleError(record)


def get_logger(name: str) -> logging.Logger:
    """Return the ``stagebench.<name>`` logger used by one module."""
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")


def setup_logging(
    *,
    verbose: bool = False,
    quiet: bool = False,
    log_file: Path | None = None,
    stream: IO[str] | None = None,
    color: bool | None = None,
) -> logging.Logger:
    """Attach handlers to the ``stagebench`` logger and return it.

    Calling it again replaces the previous handlers.

    Args:
        verbose: Show DEBUG records (stage started/completed, config loads).
        quiet: Show only warnings. Ignored if *verbose* is True.
        log_file: Also write every record, DEBUG included, to this file.
        stream: Console stream; ``None`` means standard error.
        color: Colour mode for the console, as in ``ReportConfig.color``.
    """
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(logging.DEBUG)
    for handler in logger.handlers:
        handler.close()
    logger.handlers.clear()

    console = ClickEchoHandler(file=stream, color=color)
    if verbose:
        console.setLevel(logging.DEBUG)
    elif quiet:
        console.setLevel(logging.WARNING)
    else:
        console.setLevel(logging.INFO)
    logger.addHandler(console)

    if log_file is not None:
        fh = logging.FileHandler(log_file, encoding="utf-8")
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(logging.Formatter(_FILE_FORMAT))
        logger.addHandler(fh)

    return logger
