"""protoc-gen-swagger -- Generate Swagger 2.0 documents from protobuf services.

This package is a ``protoc`` plugin. ``protoc`` hands it the decoded
descriptors of a set of ``.proto`` files; it returns a single
``<package>.json`` Swagger 2.0 document describing every service method as
an HTTP operation and every message and enum as a schema definition.

Typical usage::

    protoc --plugin=protoc-gen-swagger --swagger_out=confdir=./conf:./docs api.proto

Routing is controlled by JSON annotations in the leading comment of each rpc::

    // {"uri": "/v1/users/{id}", "method": "GET"}
    rpc GetUser(GetUserRequest) returns (User);

Modules:
    app: Typer application and console-script entry point.
    plugin: CodeGeneratorRequest/Response envelope.
    parser: Descriptor ingest, comments, type mapping, ordering.
    generator: Schemas, parameters, routes and document assembly.
    models: Pydantic models shared across the entire package.
    config: ``swagger.toml`` loading and parameter parsing.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes.
    output: stderr diagnostics with Rich support.
"""

__version__ = "0.1.0"
