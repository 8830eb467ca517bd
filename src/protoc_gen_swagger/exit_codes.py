"""Numeric process exit codes.

``protoc`` only distinguishes zero from non-zero, but wrapper scripts and CI
jobs can inspect the exact code to tell failure classes apart without
parsing stderr. Each constant is referenced by the corresponding
:class:`~protoc_gen_swagger.exceptions.ProtocGenSwaggerError` subclass.

Example::

    $ protoc --swagger_out=. api.proto
    $ echo $?
    4   # EXIT_DUPLICATE_ROUTE -- two rpcs map to the same path and verb
"""

EXIT_SUCCESS = 0
"""The document was generated and written."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_ENVELOPE_ERROR = 2
"""The generator request could not be read or the response could not be written."""

EXIT_DESCRIPTOR_ERROR = 3
"""The descriptor tree contains a malformed type name or an unsupported route verb."""

EXIT_DUPLICATE_ROUTE = 4
"""Two operations were registered for the same path and HTTP method."""

EXIT_CONFIG_ERROR = 5
"""The ``swagger.toml`` configuration file is missing or invalid."""
