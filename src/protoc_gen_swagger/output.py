"""Diagnostic output with strict stdout/stderr discipline.

When ``protoc`` runs the plugin, stdout carries the binary
``CodeGeneratorResponse`` and nothing else may be written to it. Every
diagnostic therefore goes to stderr:

* **stderr** -- all diagnostics, rendered through a Rich console.
* **Colour control** -- respects ``NO_COLOR`` and ``TERM=dumb``.

The module exposes two layers:

1. :class:`OutputManager` -- holds the Rich console and the verbose flag.
   The ``generate`` command creates one per run (``--verbose`` or
   ``PROTOC_GEN_SWAGGER_DEBUG`` turns on debug logging) and installs it via
   :func:`set_output`.
2. :func:`success` and :func:`error`, which the command uses for its own
   messages and which delegate to the global ``OutputManager``.

Library modules never print. They log through the ``protoc_gen_swagger``
logger, which :func:`configure_logging` attaches to the same stderr console
with a :class:`rich.logging.RichHandler`.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "protoc_gen_swagger"


class OutputManager:
    """Central manager for diagnostic output on stderr.

    Args:
        verbose: Log at debug level instead of warning level.
    """

    def __init__(self, verbose: bool = False) -> None:
        self._no_color = _should_disable_color()
        self._verbose = verbose

        self._stderr = Console(
            file=sys.stderr,
            no_color=self._no_color,
            stderr=True,
            highlight=False,
        )

    @property
    def console(self) -> Console:
        """The stderr console, shared with the logging handler."""
        return self._stderr

    @property
    def is_verbose(self) -> bool:
        """Whether verbose mode is enabled."""
        return self._verbose

    def success(self, message: str) -> None:
        """Print a green success message to stderr."""
        if self._no_color:
            print(message, file=sys.stderr, flush=True)
        else:
            self._stderr.print(f"[green]{message}[/green]")

    def error(self, message: str) -> None:
        """Print a bold-red error to stderr."""
        if self._no_color:
            print(f"Error: {message}", file=sys.stderr, flush=True)
        else:
            self._stderr.print(f"[bold red]Error:[/bold red] {message}")


# ------------------------------------------------------------------ #
# Module-level helpers
# ------------------------------------------------------------------ #


def _should_disable_color() -> bool:
    """Check if color should be disabled.

    Returns True when NO_COLOR env var is set (any value) or TERM=dumb.
    """
    if os.environ.get("NO_COLOR") is not None:
        return True
    if os.environ.get("TERM") == "dumb":
        return True
    return False


def configure_logging(output: OutputManager) -> logging.Logger:
    """Route the package logger to *output*'s stderr console.

    Any handler installed by an earlier call is replaced, so calling this
    repeatedly (as tests do) never duplicates log lines.

    Returns:
        The configured ``protoc_gen_swagger`` logger.
    """
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    handler = RichHandler(
        console=output.console,
        show_time=False,
        show_path=False,
        markup=False,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if output.is_verbose else logging.WARNING)
    logger.propagate = False
    return logger


# ------------------------------------------------------------------ #
# Global output instance (set during app startup)
# ------------------------------------------------------------------ #

_output: Optional[OutputManager] = None


def get_output() -> OutputManager:
    """Return the global :class:`OutputManager` instance.

    If no instance has been installed via :func:`set_output`, a default
    ``OutputManager`` is created lazily.
    """
    global _output
    if _output is None:
        _output = OutputManager()
    return _output


def set_output(output: OutputManager) -> None:
    """Install *output* as the global :class:`OutputManager` instance."""
    global _output
    _output = output


def reset_output() -> None:
    """Reset the global :class:`OutputManager` to ``None``.

    Primarily useful in test suites to ensure a clean state between tests.
    """
    global _output
    _output = None


# ------------------------------------------------------------------ #
# Convenience functions that use the global instance
# ------------------------------------------------------------------ #


def error(message: str) -> None:
    """Print error to stderr via the global OutputManager."""
    get_output().error(message)


def success(message: str) -> None:
    """Print success message to stderr via the global OutputManager."""
    get_output().success(message)
