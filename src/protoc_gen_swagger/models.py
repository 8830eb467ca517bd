"""Canonical Pydantic models shared across all protoc-gen-swagger modules.

This is the single source of truth for data shapes in the project. Every other
module imports from here rather than defining its own models. The models fall
into three groups:

**Configuration models** -- deserialised from ``swagger.toml``:
    :class:`HeaderConfig` and :class:`PluginConfig`.

**Intermediate models** -- produced by the descriptor ingest and consumed by
the document assembler:
    :class:`Comment`, :class:`Annotation`, :class:`HTTPMethod`,
    :class:`JSONType`, :class:`EnumField`, :class:`Enum`,
    :class:`MessageField`, :class:`Message`, :class:`ServiceMethod`,
    :class:`Service`, and :class:`Package`.

**Document models** -- the Swagger 2.0 output:
    :class:`Info`, :class:`Tag`, :class:`Schema`, :class:`Parameter`,
    :class:`Response`, :class:`Operation`, and :class:`Document`.

All models use Pydantic v2. Document models declare their wire names as
aliases (``$ref``, ``additionalProperties``, ``in`` ...) and are serialised
with ``model_dump(by_alias=True, exclude_none=True)``.
"""

from __future__ import annotations

import enum
from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator

CONTENT_TYPE_JSON = "application/json"
CONTENT_TYPE_MULTIPART = "multipart/form-data"

StructuralPath = tuple[int, ...]
"""Integer sequence locating one descriptor node inside a file."""


# --- Configuration ---


class HeaderConfig(BaseModel):
    """The ``[Header]`` table of ``swagger.toml``."""

    model_config = ConfigDict(populate_by_name=True)

    auth: Optional[str] = Field(
        default=None,
        alias="Auth",
        description="Header name carrying the authorization token",
    )


class PluginConfig(BaseModel):
    """Effective plugin configuration.

    Built from ``swagger.toml`` (keys ``Host``, ``Service`` and
    ``[Header] Auth``) and the ``protoc`` parameter string. Passed explicitly
    to :func:`~protoc_gen_swagger.generator.assemble`; there is no
    process-wide configuration object.

    Example::

        PluginConfig(host="api.example.com", header=HeaderConfig(auth="Authorization"))
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    host: Optional[str] = Field(default=None, alias="Host")
    service: Optional[str] = Field(
        default=None,
        alias="Service",
        description="Document title; the package name is used when unset",
    )
    header: HeaderConfig = Field(default_factory=HeaderConfig, alias="Header")
    include_reserved: bool = Field(
        default=False,
        description="Generate definitions for files in the google.protobuf namespace",
    )


# --- Comments ---


class Comment(BaseModel):
    """Comment text attached to one descriptor node, decoration trimmed."""

    model_config = ConfigDict(frozen=True)

    leading: str = ""
    trailing: str = ""
    detached: tuple[str, ...] = ()


class Annotation(BaseModel):
    """Routing override written as a JSON object in a leading comment.

    Example::

        // {"uri": "/v1/users/{id}", "method": "get", "desc": "Fetch one user"}
        rpc GetUser(GetUserRequest) returns (UserReply);

    ``name`` is the element's own identifier and is never read from JSON.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    name: str = Field(default="", exclude=True)
    uri: str = ""
    desc: str = Field(default="", validation_alias=AliasChoices("desc", "description"))
    method: str = "POST"
    consume: str = ""
    produce: str = ""


# --- Intermediate model ---


class HTTPMethod(str, enum.Enum):
    """HTTP verbs a service method may be routed with."""

    GET = "GET"
    PUT = "PUT"
    POST = "POST"
    DELETE = "DELETE"

    def lower_case(self) -> str:
        """The key used under ``paths[<uri>]`` in the document."""
        return self.value.lower()


class JSONType(str, enum.Enum):
    """Schema classification of a field's wire type."""

    NUMBER = "Number"
    STRING = "String"
    BOOLEAN = "Boolean"
    OBJECT = "Object"


class EnumField(BaseModel):
    name: str
    value: int
    description: str = ""


class Enum(BaseModel):
    name: str
    description: str = ""
    fields: list[EnumField] = Field(default_factory=list)


class MessageField(BaseModel):
    """One field of a :class:`Message`.

    The ``proto_*`` attributes describe the field as declared in the IDL; the
    ``json_*`` attributes describe its classification in the document.
    ``proto_type`` and ``proto_label`` hold
    ``descriptor_pb2.FieldDescriptorProto`` enum values.
    """

    message_name: str
    description: str = ""

    proto_name: str
    proto_label: int
    proto_type: int
    proto_type_name: str = Field(
        default="",
        description="Display type: local message/enum name, or the scalar's TYPE_* name",
    )
    proto_full_name: str = ""
    proto_package: str = ""
    proto_number: int = 0

    json_name: str
    json_label: str
    json_type: JSONType
    json_default: Any = None


class Message(BaseModel):
    name: str
    description: str = ""
    fields: list[MessageField] = Field(default_factory=list)


class ServiceMethod(BaseModel):
    """A single rpc routed to one (path, verb) pair."""

    name: str
    path: str = ""
    method: HTTPMethod = HTTPMethod.POST
    description: str = ""
    consume: str = ""
    produce: str = ""
    request_name: str = ""
    response_name: str = ""


class Service(BaseModel):
    name: str
    description: str = ""
    methods: list[ServiceMethod] = Field(default_factory=list)


class Package(BaseModel):
    """Everything extracted from one generator request.

    Built once by :func:`~protoc_gen_swagger.parser.ingest`, then handed to
    the assembler and never mutated again. Messages and enums are unique by
    name; the validator rejects a package that breaks this.
    """

    name: str
    version: str
    services: list[Service] = Field(default_factory=list)
    messages: list[Message] = Field(default_factory=list)
    enums: list[Enum] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_unique_names(self) -> Package:
        for kind, items in (("message", self.messages), ("enum", self.enums)):
            seen: set[str] = set()
            for item in items:
                if item.name in seen:
                    raise ValueError(f"duplicate {kind} name: {item.name}")
                seen.add(item.name)
        return self

    def message(self, name: str) -> Optional[Message]:
        """Return the message called *name*, or ``None``."""
        for item in self.messages:
            if item.name == name:
                return item
        return None

    def enum(self, name: str) -> Optional[Enum]:
        """Return the enum called *name*, or ``None``."""
        for item in self.enums:
            if item.name == name:
                return item
        return None


# --- Swagger document ---


class Info(BaseModel):
    title: str
    version: str
    description: Optional[str] = None


class Tag(BaseModel):
    name: str
    description: Optional[str] = None


class Schema(BaseModel):
    """A Swagger schema object, used for definitions and nested properties.

    An instance with every field unset serialises as ``{}``.
    """

    model_config = ConfigDict(populate_by_name=True)

    type: Optional[str] = None
    description: Optional[str] = None
    format: Optional[str] = None
    enum: Optional[list[str]] = None
    default: Optional[str] = None
    ref: Optional[str] = Field(default=None, alias="$ref")
    items: Optional[Schema] = None
    additional_properties: Optional[Schema] = Field(
        default=None, alias="additionalProperties"
    )
    properties: Optional[dict[str, Schema]] = None


class Parameter(BaseModel):
    """A Swagger parameter object (header, path, query, formData or body)."""

    model_config = ConfigDict(populate_by_name=True)

    in_: str = Field(alias="in")
    name: str
    type: Optional[str] = None
    format: Optional[str] = None
    required: bool = False
    enum: Optional[list[str]] = None
    default: Optional[str] = None
    description: Optional[str] = None
    schema_: Optional[Schema] = Field(default=None, alias="schema")
    items: Optional[Schema] = None


class Response(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    description: str
    schema_: Optional[Schema] = Field(default=None, alias="schema")


class Operation(BaseModel):
    """One Swagger operation, registered at ``paths[<uri>][<verb>]``."""

    model_config = ConfigDict(populate_by_name=True)

    tags: list[str] = Field(default_factory=list)
    summary: Optional[str] = None
    description: Optional[str] = None
    operation_id: Optional[str] = Field(default=None, alias="operationId")
    consumes: Optional[list[str]] = None
    produces: Optional[list[str]] = None
    parameters: list[Parameter] = Field(default_factory=list)
    responses: dict[str, Response] = Field(default_factory=dict)


class Document(BaseModel):
    """The complete Swagger 2.0 document written as ``<package>.json``."""

    model_config = ConfigDict(populate_by_name=True)

    swagger: str = "2.0"
    info: Info
    host: str
    base_path: str = Field(default="", alias="basePath")
    tags: list[Tag] = Field(default_factory=list)
    schemes: list[str] = Field(default_factory=lambda: ["http", "https"])
    paths: dict[str, dict[str, Operation]] = Field(default_factory=dict)
    definitions: dict[str, Schema] = Field(default_factory=dict)
