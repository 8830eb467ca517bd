"""Build Swagger schemas for fields and the ``definitions`` object.

:class:`SchemaBuilder` owns the definitions of one document. Messages are
emitted lazily: building the schema of a field that references a message
emits that message's definition first (if it has not been emitted yet), so
every ``$ref`` in the document resolves. A message that refers to itself,
directly or through others, is guarded against infinite recursion.

Field rendering rules:

* scalar -> ``{"type": ..., "format": ...}`` from
  :data:`~protoc_gen_swagger.parser.types.PRIMITIVE_SCHEMAS`;
* enum or message -> ``{"$ref": "#/definitions/<Name>"}``;
* map field -> ``{"type": "object", "additionalProperties": <value schema>}``,
  never a ``$ref`` to the hidden entry message (which is still emitted as an
  ordinary definition);
* any other repeated field -> ``{"type": "array", "items": <element>}``.
"""

from __future__ import annotations

import logging
from typing import Optional

from google.protobuf import descriptor_pb2

from protoc_gen_swagger.models import Enum, Message, MessageField, Package, Schema
from protoc_gen_swagger.parser.types import PRIMITIVE_SCHEMAS, is_map_entry

logger = logging.getLogger(__name__)

FieldDescriptorProto = descriptor_pb2.FieldDescriptorProto

DEFINITIONS_PREFIX = "#/definitions/"

MAP_VALUE_FIELD = "value"


def own_description(item: Enum | Message) -> Optional[str]:
    """The element's comment, or ``None`` when it only fell back to its name."""
    if not item.description or item.description == item.name:
        return None
    return item.description


def enum_definition(enum: Enum) -> Schema:
    """``{"type": "string", "enum": [...], "default": <first name>}``."""
    names = [field.name for field in enum.fields]
    return Schema(
        type="string",
        description=own_description(enum),
        enum=names or None,
        default=names[0] if names else None,
    )


def primitive_schema(field: MessageField) -> Optional[Schema]:
    """Type/format schema for a scalar field, ``None`` for enums and messages."""
    primitive = PRIMITIVE_SCHEMAS.get(field.proto_type)
    if primitive is None:
        return None
    schema_type, schema_format = primitive
    return Schema(type=schema_type, format=schema_format)


def is_repeated(field: MessageField) -> bool:
    return field.proto_label == FieldDescriptorProto.LABEL_REPEATED


def is_enum(field: MessageField) -> bool:
    return field.proto_type == FieldDescriptorProto.TYPE_ENUM


class SchemaBuilder:
    """Definitions and field schemas for one package.

    Args:
        package: The ingested package; not modified.
    """

    def __init__(self, package: Package) -> None:
        self._messages: dict[str, Message] = {m.name: m for m in package.messages}
        self._enums: dict[str, Enum] = {e.name: e for e in package.enums}
        self._definitions: dict[str, Schema] = {}
        self._emitting: set[str] = set()

        for name in sorted(self._messages.keys() & self._enums.keys()):
            logger.warning("Enum and message share the name '%s'; keeping the enum", name)

    def message(self, name: str) -> Optional[Message]:
        return self._messages.get(name)

    def enum(self, name: str) -> Optional[Enum]:
        return self._enums.get(name)

    def reference(self, name: str) -> Schema:
        """``{"$ref": "#/definitions/<name>"}``, or ``{}`` for an unknown name.

        Unknown names are types the package does not define, typically
        well-known types from the skipped ``google.protobuf`` files.
        """
        if name in self._messages or name in self._enums:
            return Schema(ref=DEFINITIONS_PREFIX + name)
        logger.warning("No definition for type '%s'; using an empty schema", name)
        return Schema()

    # ------------------------------------------------------------------ #
    # Definitions
    # ------------------------------------------------------------------ #

    def emit_enum(self, enum: Enum) -> None:
        if enum.name in self._definitions:
            logger.warning("Definition '%s' already emitted; skipping enum", enum.name)
            return
        self._definitions[enum.name] = enum_definition(enum)

    def emit_message(self, name: str) -> None:
        """Emit the definition of message *name* unless it exists already."""
        if name in self._definitions or name in self._emitting:
            return
        message = self._messages.get(name)
        if message is None:
            return

        self._emitting.add(name)
        try:
            properties = {field.proto_name: self.field_schema(field) for field in message.fields}
        finally:
            self._emitting.discard(name)

        self._definitions[name] = Schema(
            type="object",
            description=own_description(message),
            properties=properties or None,
        )

    def definitions(self) -> dict[str, Schema]:
        """All emitted definitions, sorted by name."""
        return dict(sorted(self._definitions.items()))

    # ------------------------------------------------------------------ #
    # Field schemas
    # ------------------------------------------------------------------ #

    def element_schema(self, field: MessageField) -> Schema:
        """Schema of a single element of *field*, ignoring its label."""
        primitive = primitive_schema(field)
        if primitive is not None:
            return primitive
        if not is_enum(field):
            self.emit_message(field.proto_type_name)
        return self.reference(field.proto_type_name)

    def map_schema(self, field: MessageField) -> Schema:
        """``{"type": "object", "additionalProperties": <value schema>}`` for a map field."""
        self.emit_message(field.proto_type_name)
        entry = self._messages.get(field.proto_type_name)
        value: Schema = Schema()
        if entry is not None:
            for entry_field in entry.fields:
                if entry_field.proto_name == MAP_VALUE_FIELD:
                    value = self.field_schema(entry_field)
                    break
        return Schema(type="object", additional_properties=value)

    def field_schema(self, field: MessageField) -> Schema:
        """Full schema of *field* as a message property."""
        if is_map_entry(field):
            return self.map_schema(field)
        element = self.element_schema(field)
        if is_repeated(field):
            return Schema(type="array", items=element)
        return element
