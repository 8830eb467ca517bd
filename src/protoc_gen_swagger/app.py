"""Typer application and console-script entry point for protoc-gen-swagger.

``protoc`` spawns the ``protoc-gen-swagger`` executable with no arguments, a
serialized ``CodeGeneratorRequest`` on stdin and the expectation of a
serialized ``CodeGeneratorResponse`` on stdout. That is the default mode of
:func:`generate_command`.

With ``--descriptor-set`` the command runs offline instead: it reads a
``FileDescriptorSet`` from disk and writes ``<package>.json`` under
``--out``. Both modes share :mod:`protoc_gen_swagger.plugin`.

stdout is reserved for the binary response, so every diagnostic goes to
stderr through :mod:`protoc_gen_swagger.output`.

See Also:
    :mod:`protoc_gen_swagger.plugin`: The request/response envelope.
    :mod:`protoc_gen_swagger.config`: ``swagger.toml`` and the parameter string.
"""

from __future__ import annotations

import signal
import sys
import traceback
from pathlib import Path
from typing import Any, Optional

import typer

from protoc_gen_swagger import __version__
from protoc_gen_swagger.exceptions import EnvelopeError, ProtocGenSwaggerError
from protoc_gen_swagger.exit_codes import EXIT_GENERIC_FAILURE

DEBUG_ENVVAR = "PROTOC_GEN_SWAGGER_DEBUG"

app = typer.Typer(
    name="protoc-gen-swagger",
    help="Generate a Swagger 2.0 document from protobuf service definitions.",
    no_args_is_help=False,
    add_completion=False,
    rich_markup_mode="rich",
)


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"protoc-gen-swagger {__version__}")
        raise typer.Exit()


def _write_files(response: Any, out: Path) -> list[Path]:
    """Write every file of a ``CodeGeneratorResponse`` under *out*."""
    written: list[Path] = []
    for generated in response.file:
        target = out / generated.name
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(generated.content, encoding="utf-8")
        except OSError as exc:
            raise EnvelopeError(f"write {target} failed. {exc}") from exc
        written.append(target)
    return written


@app.command()
def generate_command(
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        envvar=DEBUG_ENVVAR,
        help="Enable debug output on stderr.",
    ),
    descriptor_set: Optional[Path] = typer.Option(
        None,
        "--descriptor-set",
        help="Read a FileDescriptorSet instead of a plugin request on stdin.",
    ),
    parameter: str = typer.Option(
        "",
        "--parameter",
        help="Plugin parameter string, e.g. 'confdir=./conf'.",
    ),
    out: Path = typer.Option(
        Path("."),
        "--out",
        help="Directory the document is written to (offline mode only).",
    ),
) -> None:
    """Generate ``<package>.json``.

    Without ``--descriptor-set`` this is a ``protoc`` plugin: a
    ``CodeGeneratorRequest`` is read from stdin and the response is written
    to stdout.
    """
    from protoc_gen_swagger.output import OutputManager, configure_logging, error, set_output, success
    from protoc_gen_swagger.plugin import generate, request_from_descriptor_set, run

    output = OutputManager(verbose=verbose)
    set_output(output)
    configure_logging(output)

    try:
        if descriptor_set is None:
            run(sys.stdin.buffer, sys.stdout.buffer)
            return

        request = request_from_descriptor_set(descriptor_set, parameter)
        for path in _write_files(generate(request), out):
            success(f"Wrote {path}")
    except ProtocGenSwaggerError as exc:
        error(str(exc))
        raise typer.Exit(exc.exit_code)


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def main() -> None:
    """CLI entry point invoked by the ``protoc-gen-swagger`` console script.

    :class:`~protoc_gen_swagger.exceptions.ProtocGenSwaggerError` instances
    exit with the error's ``exit_code``. Any other exception prints its
    traceback to stderr and exits with a generic failure.

    Raises:
        SystemExit: Always raised (either by Typer or explicitly).
    """
    _setup_signal_handlers()
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)
    except Exception as exc:
        from protoc_gen_swagger.output import error

        if isinstance(exc, ProtocGenSwaggerError):
            error(str(exc))
            sys.exit(exc.exit_code)
        else:
            sys.stderr.write(traceback.format_exc())
            error(f"Unexpected error: {exc}")
            sys.exit(EXIT_GENERIC_FAILURE)
