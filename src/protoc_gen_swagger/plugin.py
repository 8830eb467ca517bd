"""The ``protoc`` plugin envelope: request in, response out.

``protoc`` runs the plugin with a serialized ``CodeGeneratorRequest`` on
stdin and expects a serialized ``CodeGeneratorResponse`` on stdout. This
module decodes the request, runs the pipeline::

    parse_parameter -> ingest -> assemble -> render

and encodes a response holding exactly one file, ``<package>.json``.

:func:`request_from_descriptor_set` builds an equivalent request from a
``FileDescriptorSet`` written by
``protoc --include_source_info --descriptor_set_out=...``, which lets the
generator run without being spawned by ``protoc``.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import BinaryIO, Optional

from google.protobuf import descriptor_pb2
from google.protobuf.compiler import plugin_pb2
from google.protobuf.message import DecodeError, EncodeError

from protoc_gen_swagger.config import parse_parameter
from protoc_gen_swagger.exceptions import EnvelopeError
from protoc_gen_swagger.generator import assemble, document_filename, render
from protoc_gen_swagger.models import PluginConfig
from protoc_gen_swagger.parser import ingest

logger = logging.getLogger(__name__)


def read_request(stream: BinaryIO) -> plugin_pb2.CodeGeneratorRequest:
    """Decode a ``CodeGeneratorRequest`` from *stream*.

    Raises:
        EnvelopeError: If the stream cannot be read or decoded, or the
            request names no file to generate.
    """
    try:
        data = stream.read()
    except OSError as exc:
        raise EnvelopeError(f"read stdin failed. {exc}") from exc

    request = plugin_pb2.CodeGeneratorRequest()
    try:
        request.ParseFromString(data)
    except DecodeError as exc:
        raise EnvelopeError(f"unmarshal stdin failed. {exc}") from exc

    if not request.file_to_generate:
        raise EnvelopeError("no file to generate")
    return request


def write_response(response: plugin_pb2.CodeGeneratorResponse, stream: BinaryIO) -> None:
    """Encode *response* onto *stream*.

    Raises:
        EnvelopeError: If the response cannot be serialized or written.
    """
    try:
        data = response.SerializeToString()
    except EncodeError as exc:
        raise EnvelopeError(f"marshal response failed. {exc}") from exc

    try:
        stream.write(data)
        stream.flush()
    except OSError as exc:
        raise EnvelopeError(f"write stdout failed. {exc}") from exc


def package_name(request: plugin_pb2.CodeGeneratorRequest) -> str:
    """Package the document is named after.

    ``proto_file`` lists dependencies before the files that import them, so
    the first file named in ``file_to_generate`` is preferred over the first
    file of the request.
    """
    wanted = set(request.file_to_generate)
    for proto_file in request.proto_file:
        if proto_file.name in wanted:
            return proto_file.package
    return request.proto_file[0].package if request.proto_file else ""


def generate(
    request: plugin_pb2.CodeGeneratorRequest,
    config: Optional[PluginConfig] = None,
) -> plugin_pb2.CodeGeneratorResponse:
    """Run the whole pipeline for *request*.

    Args:
        request: The decoded generator request.
        config: Effective configuration; parsed from ``request.parameter``
            when omitted.

    Returns:
        A response holding exactly one file, ``<package>.json``.

    Raises:
        ProtocGenSwaggerError: Any pipeline failure; no partial response is
            produced.
    """
    if config is None:
        config = parse_parameter(request.parameter)

    package = ingest(
        request.proto_file,
        package_name(request),
        include_reserved=config.include_reserved,
    )
    document = assemble(package, config)

    response = plugin_pb2.CodeGeneratorResponse()
    output = response.file.add()
    output.name = document_filename(package)
    output.content = render(document)

    logger.debug("Generated %s", output.name)
    return response


def request_from_descriptor_set(
    path: str | Path,
    parameter: str = "",
    files: Optional[list[str]] = None,
) -> plugin_pb2.CodeGeneratorRequest:
    """Build a ``CodeGeneratorRequest`` from a serialized ``FileDescriptorSet``.

    Args:
        path: File written by ``protoc --descriptor_set_out``.
        parameter: Plugin parameter string, as ``protoc`` would pass it.
        files: Names of the files to generate; defaults to every file in the
            set.

    Raises:
        EnvelopeError: If the file cannot be read or decoded, or the set is
            empty.
    """
    try:
        data = Path(path).read_bytes()
    except OSError as exc:
        raise EnvelopeError(f"read descriptor set failed. {exc}") from exc

    descriptor_set = descriptor_pb2.FileDescriptorSet()
    try:
        descriptor_set.ParseFromString(data)
    except DecodeError as exc:
        raise EnvelopeError(f"unmarshal descriptor set failed. {exc}") from exc

    request = plugin_pb2.CodeGeneratorRequest(parameter=parameter)
    request.proto_file.extend(descriptor_set.file)
    request.file_to_generate.extend(files or [f.name for f in descriptor_set.file])
    if not request.file_to_generate:
        raise EnvelopeError("no file to generate")
    return request


def run(stdin: BinaryIO, stdout: BinaryIO) -> None:
    """Plugin mode: read a request from *stdin*, write the response to *stdout*."""
    request = read_request(stdin)
    write_response(generate(request), stdout)
