"""Translate field wire types and labels into schema classifications.

Three tables drive the mapping:

* wire type -> :class:`~protoc_gen_swagger.models.JSONType` (Number, String,
  Boolean or Object);
* wire label -> human label (``optional`` / ``required`` / ``repeated``);
* JSON type -> illustrative default value.

:data:`PRIMITIVE_SCHEMAS` then gives the Swagger ``type``/``format`` pair for
each scalar wire type, which the assembler copies into property schemas.

Map fields need special care. ``protoc`` lowers ``map<K, V> counts = 3`` on
message ``M`` into a hidden nested message ``M.CountsEntry`` with fields
``key`` and ``value``, and turns the field into ``repeated CountsEntry``.
:func:`is_map_entry` recognises such a field by comparing its resolved type
name with the name the compiler would have synthesized.
"""

from __future__ import annotations

from typing import Any, Iterable

from google.protobuf import descriptor_pb2

from protoc_gen_swagger.exceptions import DescriptorError
from protoc_gen_swagger.models import JSONType, MessageField

FieldDescriptorProto = descriptor_pb2.FieldDescriptorProto

LABEL_OPTIONAL = "optional"
LABEL_REQUIRED = "required"
LABEL_REPEATED = "repeated"

WIRE_TYPE_TO_JSON: dict[int, JSONType] = {
    FieldDescriptorProto.TYPE_DOUBLE: JSONType.NUMBER,
    FieldDescriptorProto.TYPE_FLOAT: JSONType.NUMBER,
    FieldDescriptorProto.TYPE_INT32: JSONType.NUMBER,
    FieldDescriptorProto.TYPE_UINT32: JSONType.NUMBER,
    FieldDescriptorProto.TYPE_INT64: JSONType.NUMBER,
    FieldDescriptorProto.TYPE_UINT64: JSONType.NUMBER,
    FieldDescriptorProto.TYPE_FIXED32: JSONType.NUMBER,
    FieldDescriptorProto.TYPE_FIXED64: JSONType.NUMBER,
    FieldDescriptorProto.TYPE_SFIXED32: JSONType.NUMBER,
    FieldDescriptorProto.TYPE_SFIXED64: JSONType.NUMBER,
    FieldDescriptorProto.TYPE_SINT32: JSONType.NUMBER,
    FieldDescriptorProto.TYPE_SINT64: JSONType.NUMBER,
    FieldDescriptorProto.TYPE_BYTES: JSONType.STRING,
    FieldDescriptorProto.TYPE_STRING: JSONType.STRING,
    FieldDescriptorProto.TYPE_BOOL: JSONType.BOOLEAN,
    FieldDescriptorProto.TYPE_ENUM: JSONType.OBJECT,
    FieldDescriptorProto.TYPE_GROUP: JSONType.OBJECT,
    FieldDescriptorProto.TYPE_MESSAGE: JSONType.OBJECT,
}

WIRE_LABEL_TO_JSON: dict[int, str] = {
    FieldDescriptorProto.LABEL_OPTIONAL: LABEL_OPTIONAL,
    FieldDescriptorProto.LABEL_REQUIRED: LABEL_REQUIRED,
    FieldDescriptorProto.LABEL_REPEATED: LABEL_REPEATED,
}

JSON_DEFAULTS: dict[JSONType, Any] = {
    JSONType.NUMBER: 0,
    JSONType.STRING: "string",
    JSONType.BOOLEAN: False,
    JSONType.OBJECT: None,
}

# (type, format) per scalar wire type
PRIMITIVE_SCHEMAS: dict[int, tuple[str, str | None]] = {
    FieldDescriptorProto.TYPE_BYTES: ("string", "byte"),
    FieldDescriptorProto.TYPE_STRING: ("string", None),
    FieldDescriptorProto.TYPE_FLOAT: ("number", "float"),
    FieldDescriptorProto.TYPE_DOUBLE: ("number", "double"),
    FieldDescriptorProto.TYPE_BOOL: ("boolean", "boolean"),
    FieldDescriptorProto.TYPE_INT32: ("integer", "int32"),
    FieldDescriptorProto.TYPE_SINT32: ("integer", "int32"),
    FieldDescriptorProto.TYPE_SFIXED32: ("integer", "int32"),
    FieldDescriptorProto.TYPE_INT64: ("integer", "int64"),
    FieldDescriptorProto.TYPE_SINT64: ("integer", "int64"),
    FieldDescriptorProto.TYPE_SFIXED64: ("integer", "int64"),
    FieldDescriptorProto.TYPE_UINT32: ("integer", "uint32"),
    FieldDescriptorProto.TYPE_FIXED32: ("integer", "uint32"),
    FieldDescriptorProto.TYPE_UINT64: ("integer", "uint64"),
    FieldDescriptorProto.TYPE_FIXED64: ("integer", "uint64"),
}


def json_type(wire_type: int) -> JSONType:
    """Classify a ``FieldDescriptorProto.Type`` value."""
    try:
        return WIRE_TYPE_TO_JSON[wire_type]
    except KeyError:
        raise DescriptorError(f"Unknown field type: {wire_type}") from None


def json_label(wire_label: int) -> str:
    """Human label for a ``FieldDescriptorProto.Label`` value."""
    try:
        return WIRE_LABEL_TO_JSON[wire_label]
    except KeyError:
        raise DescriptorError(f"Unknown field label: {wire_label}") from None


def wire_type_name(wire_type: int) -> str:
    """Canonical name of a scalar wire type, e.g. ``TYPE_STRING``."""
    return FieldDescriptorProto.Type.Name(wire_type)


def split_type_name(full_name: str, packages: Iterable[str] = ()) -> tuple[str, str]:
    """Split a fully-qualified type name into ``(package, local_name)``.

    The leading dot is dropped. When one of *packages* is a dotted prefix of
    the name, the longest such package is stripped; otherwise the first
    segment is taken as the package. The remaining segments, joined by
    ``_``, form the local name, which matches the name nested types are
    registered under.

    Example::

        >>> split_type_name(".user.v1.User.Address", packages=["user.v1"])
        ('user.v1', 'User_Address')
        >>> split_type_name(".user.User")
        ('user', 'User')

    Raises:
        DescriptorError: If fewer than two dot-separated segments remain
            (an unqualified type name).
    """
    segments = full_name.lstrip(".").split(".")
    if len(segments) < 2 or not all(segments):
        raise DescriptorError(f"split type failed. {full_name}")

    matched = ""
    for package in packages:
        if not package:
            continue
        prefix = package.split(".")
        if len(prefix) < len(segments) and segments[: len(prefix)] == prefix:
            if len(package) > len(matched):
                matched = package

    if matched:
        depth = len(matched.split("."))
        return matched, "_".join(segments[depth:])
    return segments[0], "_".join(segments[1:])


def _upper_first(token: str) -> str:
    first = token[0]
    if "a" <= first <= "z":
        return first.upper() + token[1:]
    return token


def map_entry_name(message_name: str, field_name: str) -> str:
    """Name ``protoc`` synthesizes for the hidden entry message of a map field.

    Each ``_``-delimited token of *field_name* has its first ASCII lowercase
    letter upper-cased; any other leading character, including non-ASCII
    letters, is kept as is.

    Example::

        >>> map_entry_name("User", "extra_labels")
        'User_ExtraLabelsEntry'
    """
    camel = "".join(_upper_first(token) for token in field_name.split("_") if token)
    return f"{message_name}_{camel}Entry"


def is_map_entry(field: MessageField) -> bool:
    """Whether *field* is the lowered form of a ``map<K, V>`` declaration."""
    if field.proto_type != FieldDescriptorProto.TYPE_MESSAGE:
        return False
    return field.proto_type_name == map_entry_name(field.message_name, field.proto_name)


def build_field(
    message_name: str,
    descriptor: descriptor_pb2.FieldDescriptorProto,
    description: str,
    packages: Iterable[str] = (),
) -> MessageField:
    """Build a :class:`~protoc_gen_swagger.models.MessageField` from its descriptor.

    Args:
        message_name: Synthesized name of the owning message
            (``Parent_Nested`` for nested types).
        descriptor: The field descriptor.
        description: Resolved comment for the field.
        packages: Known package names, used to strip the package qualifier
            from object type names.
    """
    kind = json_type(descriptor.type)
    field = MessageField(
        message_name=message_name,
        description=description,
        proto_name=descriptor.name,
        proto_label=descriptor.label,
        proto_type=descriptor.type,
        proto_number=descriptor.number,
        json_name=descriptor.name,
        json_label=json_label(descriptor.label),
        json_type=kind,
        json_default=JSON_DEFAULTS[kind],
    )

    if kind == JSONType.OBJECT:
        package, local_name = split_type_name(descriptor.type_name, packages)
        field.proto_type_name = local_name
        field.proto_package = package
        field.proto_full_name = descriptor.type_name
    else:
        field.proto_type_name = wire_type_name(descriptor.type)

    return field
