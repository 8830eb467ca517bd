"""Place a service method's inputs into Swagger parameters.

The policy is applied in order and is cumulative:

1. **Header auth** -- if ``Header.Auth`` is configured, one optional string
   ``header`` parameter with that name.
2. **Path** -- one optional string ``path`` parameter per ``{name}``
   placeholder in the route.
3. **Multipart form** (consume ``multipart/form-data``) -- one ``formData``
   parameter per top-level request field. Repeated fields are left out;
   ``bytes`` fields become ``type: file``.
4. **GET** -- one ``query`` parameter per top-level request field. Repeated
   fields become ``type: array`` with ``items``; enum fields carry their
   value names; message fields are dropped since a query string cannot
   carry them.
5. **Otherwise** -- a single required ``body`` parameter named after the
   method whose schema references the whole request message.

Steps 3 to 5 are mutually exclusive.
"""

from __future__ import annotations

import logging
from typing import Optional

from google.protobuf import descriptor_pb2

from protoc_gen_swagger.generator.routes import path_placeholders
from protoc_gen_swagger.generator.schemas import (
    SchemaBuilder,
    is_enum,
    is_repeated,
    primitive_schema,
)
from protoc_gen_swagger.models import (
    CONTENT_TYPE_MULTIPART,
    HTTPMethod,
    MessageField,
    Parameter,
    PluginConfig,
    Schema,
    ServiceMethod,
)

logger = logging.getLogger(__name__)

FieldDescriptorProto = descriptor_pb2.FieldDescriptorProto

IN_HEADER = "header"
IN_PATH = "path"
IN_QUERY = "query"
IN_FORM = "formData"
IN_BODY = "body"

AUTH_DESCRIPTION = "Authorization in Header"


def header_parameters(config: PluginConfig) -> list[Parameter]:
    if not config.header.auth:
        return []
    return [
        Parameter(
            in_=IN_HEADER,
            name=config.header.auth,
            type="string",
            required=False,
            description=AUTH_DESCRIPTION,
        )
    ]


def path_parameters(method: ServiceMethod) -> list[Parameter]:
    return [
        Parameter(in_=IN_PATH, name=name, type="string", required=False)
        for name in path_placeholders(method.path)
    ]


def _enum_values(builder: SchemaBuilder, field: MessageField) -> Optional[list[str]]:
    enum = builder.enum(field.proto_type_name)
    if enum is None:
        return None
    return [value.name for value in enum.fields] or None


def _scalar_schema(builder: SchemaBuilder, field: MessageField) -> Optional[Schema]:
    """Flat schema for a query/form value: scalars and enums only."""
    primitive = primitive_schema(field)
    if primitive is not None:
        return primitive
    if is_enum(field):
        return Schema(type="string", enum=_enum_values(builder, field))
    return None


def form_parameters(builder: SchemaBuilder, fields: list[MessageField]) -> list[Parameter]:
    parameters: list[Parameter] = []
    for field in fields:
        if is_repeated(field):
            logger.debug("Omitting repeated field '%s' from form parameters", field.proto_name)
            continue

        if field.proto_type == FieldDescriptorProto.TYPE_BYTES:
            parameters.append(
                Parameter(
                    in_=IN_FORM,
                    name=field.proto_name,
                    type="file",
                    description=field.description or None,
                )
            )
            continue

        schema = _scalar_schema(builder, field) or Schema(type="string")
        parameters.append(
            Parameter(
                in_=IN_FORM,
                name=field.proto_name,
                type=schema.type,
                format=schema.format,
                enum=schema.enum,
                description=field.description or None,
            )
        )
    return parameters


def query_parameters(builder: SchemaBuilder, fields: list[MessageField]) -> list[Parameter]:
    parameters: list[Parameter] = []
    for field in fields:
        schema = _scalar_schema(builder, field)
        if schema is None:
            logger.debug("Dropping message field '%s' from query parameters", field.proto_name)
            continue

        if is_repeated(field):
            parameters.append(
                Parameter(
                    in_=IN_QUERY,
                    name=field.proto_name,
                    type="array",
                    items=schema,
                    description=field.description or None,
                )
            )
        else:
            parameters.append(
                Parameter(
                    in_=IN_QUERY,
                    name=field.proto_name,
                    type=schema.type,
                    format=schema.format,
                    enum=schema.enum,
                    description=field.description or None,
                )
            )
    return parameters


def body_parameters(builder: SchemaBuilder, method: ServiceMethod) -> list[Parameter]:
    return [
        Parameter(
            in_=IN_BODY,
            name=method.name,
            required=True,
            description=method.description or None,
            schema=builder.reference(method.request_name),
        )
    ]


def build_parameters(
    builder: SchemaBuilder,
    method: ServiceMethod,
    config: PluginConfig,
) -> list[Parameter]:
    """All parameters of *method*'s operation, in placement order."""
    parameters = header_parameters(config) + path_parameters(method)

    if method.consume == CONTENT_TYPE_MULTIPART or method.method == HTTPMethod.GET:
        request = builder.message(method.request_name)
        fields = request.fields if request is not None else []
        if request is None:
            logger.debug("Request message '%s' is not defined", method.request_name)

        if method.consume == CONTENT_TYPE_MULTIPART:
            return parameters + form_parameters(builder, fields)
        return parameters + query_parameters(builder, fields)

    return parameters + body_parameters(builder, method)
