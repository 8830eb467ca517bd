"""Exception hierarchy for protoc-gen-swagger.

All exceptions inherit from :class:`ProtocGenSwaggerError`, which carries an
``exit_code`` attribute mapped to a constant from
:mod:`protoc_gen_swagger.exit_codes`. Every failure in the pipeline is fatal:
the top-level handler in :func:`protoc_gen_swagger.app.main` catches
``ProtocGenSwaggerError``, prints the message to stderr and exits with the
error's code. No partial response is ever written.

Subclass hierarchy::

    ProtocGenSwaggerError (exit 1)
    +-- EnvelopeError        (exit 2)
    +-- DescriptorError      (exit 3)
    +-- DuplicateRouteError  (exit 4)
    +-- ConfigError          (exit 5)
"""

from protoc_gen_swagger.exit_codes import (
    EXIT_CONFIG_ERROR,
    EXIT_DESCRIPTOR_ERROR,
    EXIT_DUPLICATE_ROUTE,
    EXIT_ENVELOPE_ERROR,
    EXIT_GENERIC_FAILURE,
)


class ProtocGenSwaggerError(Exception):
    """Base exception for all protoc-gen-swagger errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`protoc_gen_swagger.exit_codes`.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class EnvelopeError(ProtocGenSwaggerError):
    """Raised when the generator request/response envelope cannot be (de)serialised,
    or the request names no files to generate."""

    exit_code = EXIT_ENVELOPE_ERROR


class DescriptorError(ProtocGenSwaggerError):
    """Raised for malformed input descriptors (e.g. an unqualified type name)."""

    exit_code = EXIT_DESCRIPTOR_ERROR


class DuplicateRouteError(ProtocGenSwaggerError):
    """Raised when a second operation is registered at an existing (path, verb) pair.

    Args:
        path: The route path, e.g. ``/v1/users``.
        method: The lower-case HTTP verb, e.g. ``get``.
    """

    exit_code = EXIT_DUPLICATE_ROUTE

    def __init__(self, path: str, method: str):
        super().__init__(f"duplicate route. {path} [{method}]")
        self.path = path
        self.method = method


class ConfigError(ProtocGenSwaggerError):
    """Raised when ``swagger.toml`` cannot be read, parsed or validated."""

    exit_code = EXIT_CONFIG_ERROR
