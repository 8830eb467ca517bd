"""Shared test fixtures for protoc-gen-swagger.

Descriptors are built directly with ``descriptor_pb2`` so that no ``protoc``
binary is needed. The main fixture, :func:`user_file`, mirrors this IDL::

    syntax = "proto3";
    package user.v1;

    enum Status {
      ACTIVE = 0;
      // Disabled account.
      INACTIVE = 1;
    }

    // A user account.
    message User {
      // Display name.
      string name = 1;
      repeated string tags = 2;
      map<string, int32> counts = 3;
      Status status = 4;
      Address address = 5;

      message Address { string city = 1; }
    }

    message GetUserRequest { string id = 1; }
    message UserReply { User user = 1; }

    message ListUsersRequest {
      string id = 1;
      int32 page = 2;
      repeated int64 ids = 3;
      Status status = 4;
      User filter = 5;
      repeated Status labels = 6;
    }

    message UploadRequest {
      string id = 1;
      bytes data = 2;
      repeated string tags = 3;
      User owner = 4;
    }

    // Manages users.
    service UserService {
      rpc GetUser(GetUserRequest) returns (UserReply);
      // {"uri": "/v1/users/{id}", "method": "get", "desc": "List users"}
      rpc ListUsers(ListUsersRequest) returns (UserReply);
      // {"uri": "/v1/upload", "consume": "multipart/form-data", "desc": "Upload a file"}
      rpc Upload(UploadRequest) returns (UserReply);
    }
"""

from __future__ import annotations

import logging
from typing import Sequence

import pytest
from google.protobuf import descriptor_pb2
from google.protobuf.compiler import plugin_pb2

from protoc_gen_swagger.output import LOGGER_NAME, reset_output

FieldDescriptorProto = descriptor_pb2.FieldDescriptorProto

OPTIONAL = FieldDescriptorProto.LABEL_OPTIONAL
REPEATED = FieldDescriptorProto.LABEL_REPEATED

LIST_USERS_MARK = '{"uri": "/v1/users/{id}", "method": "get", "desc": "List users"}'
UPLOAD_MARK = '{"uri": "/v1/upload", "consume": "multipart/form-data", "desc": "Upload a file"}'


# ---------------------------------------------------------------------------
# Auto-reset global state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager and the package logger after every test.

    The OutputManager and the RichHandler installed by ``configure_logging``
    hold references to sys.stderr at creation time. When Typer's CliRunner
    redirects the stream and the test finishes, those references become
    stale. Resetting forces fresh ones on next use.
    """
    yield
    reset_output()
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


# ---------------------------------------------------------------------------
# Descriptor builders
# ---------------------------------------------------------------------------


def make_field(
    name: str,
    number: int,
    type_: int,
    label: int = OPTIONAL,
    type_name: str = "",
) -> FieldDescriptorProto:
    """Build one ``FieldDescriptorProto``."""
    field = FieldDescriptorProto(name=name, number=number, type=type_, label=label)
    if type_name:
        field.type_name = type_name
    return field


def add_comment(
    file: descriptor_pb2.FileDescriptorProto,
    path: Sequence[int],
    leading: str,
) -> None:
    """Attach a leading comment at *path*, the way ``protoc`` records it."""
    location = file.source_code_info.location.add()
    location.path.extend(path)
    location.leading_comments = f" {leading}\n"


def make_enum(name: str, *values: str) -> descriptor_pb2.EnumDescriptorProto:
    enum = descriptor_pb2.EnumDescriptorProto(name=name)
    for number, value in enumerate(values):
        enum.value.add(name=value, number=number)
    return enum


def make_message(
    name: str, *fields: FieldDescriptorProto
) -> descriptor_pb2.DescriptorProto:
    message = descriptor_pb2.DescriptorProto(name=name)
    message.field.extend(fields)
    return message


def map_entry(name: str, value: FieldDescriptorProto) -> descriptor_pb2.DescriptorProto:
    """The hidden message ``protoc`` synthesizes for a ``map<string, V>`` field."""
    entry = make_message(
        name,
        make_field("key", 1, FieldDescriptorProto.TYPE_STRING),
        value,
    )
    entry.options.map_entry = True
    return entry


def make_method(
    name: str, input_type: str, output_type: str
) -> descriptor_pb2.MethodDescriptorProto:
    return descriptor_pb2.MethodDescriptorProto(
        name=name, input_type=input_type, output_type=output_type
    )


def build_user_file() -> descriptor_pb2.FileDescriptorProto:
    """The ``user.v1`` file described in the module docstring."""
    T = FieldDescriptorProto
    file = descriptor_pb2.FileDescriptorProto(
        name="user/v1/user.proto", package="user.v1", syntax="proto3"
    )

    file.enum_type.append(make_enum("Status", "ACTIVE", "INACTIVE"))

    user = make_message(
        "User",
        make_field("name", 1, T.TYPE_STRING),
        make_field("tags", 2, T.TYPE_STRING, REPEATED),
        make_field("counts", 3, T.TYPE_MESSAGE, REPEATED, ".user.v1.User.CountsEntry"),
        make_field("status", 4, T.TYPE_ENUM, type_name=".user.v1.Status"),
        make_field("address", 5, T.TYPE_MESSAGE, type_name=".user.v1.User.Address"),
    )
    user.nested_type.append(map_entry("CountsEntry", make_field("value", 2, T.TYPE_INT32)))
    user.nested_type.append(make_message("Address", make_field("city", 1, T.TYPE_STRING)))
    file.message_type.append(user)

    file.message_type.append(make_message("GetUserRequest", make_field("id", 1, T.TYPE_STRING)))
    file.message_type.append(
        make_message(
            "UserReply",
            make_field("user", 1, T.TYPE_MESSAGE, type_name=".user.v1.User"),
        )
    )
    file.message_type.append(
        make_message(
            "ListUsersRequest",
            make_field("id", 1, T.TYPE_STRING),
            make_field("page", 2, T.TYPE_INT32),
            make_field("ids", 3, T.TYPE_INT64, REPEATED),
            make_field("status", 4, T.TYPE_ENUM, type_name=".user.v1.Status"),
            make_field("filter", 5, T.TYPE_MESSAGE, type_name=".user.v1.User"),
            make_field("labels", 6, T.TYPE_ENUM, REPEATED, ".user.v1.Status"),
        )
    )
    file.message_type.append(
        make_message(
            "UploadRequest",
            make_field("id", 1, T.TYPE_STRING),
            make_field("data", 2, T.TYPE_BYTES),
            make_field("tags", 3, T.TYPE_STRING, REPEATED),
            make_field("owner", 4, T.TYPE_MESSAGE, type_name=".user.v1.User"),
        )
    )

    service = file.service.add(name="UserService")
    service.method.append(make_method("GetUser", ".user.v1.GetUserRequest", ".user.v1.UserReply"))
    service.method.append(make_method("ListUsers", ".user.v1.ListUsersRequest", ".user.v1.UserReply"))
    service.method.append(make_method("Upload", ".user.v1.UploadRequest", ".user.v1.UserReply"))

    add_comment(file, (5, 0, 2, 1), "Disabled account.")
    add_comment(file, (4, 0), "A user account.")
    add_comment(file, (4, 0, 2, 0), "Display name.")
    add_comment(file, (6, 0), "Manages users.")
    add_comment(file, (6, 0, 2, 1), LIST_USERS_MARK)
    add_comment(file, (6, 0, 2, 2), UPLOAD_MARK)
    return file


def build_empty_proto_file() -> descriptor_pb2.FileDescriptorProto:
    """A stand-in for ``google/protobuf/empty.proto``."""
    file = descriptor_pb2.FileDescriptorProto(
        name="google/protobuf/empty.proto", package="google.protobuf", syntax="proto3"
    )
    file.message_type.append(make_message("Empty"))
    return file


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def user_file() -> descriptor_pb2.FileDescriptorProto:
    return build_user_file()


@pytest.fixture
def empty_proto_file() -> descriptor_pb2.FileDescriptorProto:
    return build_empty_proto_file()


@pytest.fixture
def user_request(
    user_file: descriptor_pb2.FileDescriptorProto,
    empty_proto_file: descriptor_pb2.FileDescriptorProto,
) -> plugin_pb2.CodeGeneratorRequest:
    """A request as ``protoc`` sends it: dependencies first, then the target file."""
    request = plugin_pb2.CodeGeneratorRequest()
    request.file_to_generate.append(user_file.name)
    request.proto_file.extend([empty_proto_file, user_file])
    return request


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()
