"""Walk descriptor files into the intermediate :class:`~protoc_gen_swagger.models.Package`.

Each input ``FileDescriptorProto`` is parsed by its own task on a thread
pool. A task only reads its own file and writes into a task-local
:class:`FileContents`; nothing is shared while tasks run. Once every task has
finished (a single join), the results are merged sequentially in input-file
order:

* services are concatenated in declaration order;
* enums and messages go through a
  :class:`~protoc_gen_swagger.parser.ordering.NameRegistry`, so when two files
  declare the same name the one from the earlier file wins and the later one
  is dropped (logged at debug level, not an error).

Naming of nested types::

    message User {            // User
      enum Role { ... }       // User_Role
      message Address {       // User_Address
        message Geo { ... }   // User_Address_Geo
      }
      map<string, int32> counts = 3;   // hidden entry: User_CountsEntry
    }

Files in the compiler's own ``google.protobuf`` namespace are skipped unless
``include_reserved`` is set. A malformed type name anywhere raises
:class:`~protoc_gen_swagger.exceptions.DescriptorError` and aborts the whole
run.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, wait
from datetime import datetime
from typing import Iterable, Optional

from google.protobuf import descriptor_pb2
from pydantic import BaseModel, Field

from protoc_gen_swagger.exceptions import DescriptorError
from protoc_gen_swagger.models import (
    Enum,
    EnumField,
    HTTPMethod,
    Message,
    Package,
    Service,
    ServiceMethod,
    StructuralPath,
)
from protoc_gen_swagger.parser.comments import (
    PATH_ENUM,
    PATH_ENUM_VALUE,
    PATH_MESSAGE,
    PATH_MESSAGE_ENUM,
    PATH_MESSAGE_FIELD,
    PATH_MESSAGE_NESTED,
    PATH_SERVICE,
    PATH_SERVICE_METHOD,
    CommentMap,
)
from protoc_gen_swagger.parser.ordering import NameRegistry, sort_package
from protoc_gen_swagger.parser.types import build_field, split_type_name

logger = logging.getLogger(__name__)

RESERVED_NAMESPACE = "google.protobuf"


class FileContents(BaseModel):
    """Everything one task extracted from one file, in declaration order."""

    file_name: str = ""
    enums: list[Enum] = Field(default_factory=list)
    messages: list[Message] = Field(default_factory=list)
    services: list[Service] = Field(default_factory=list)


def nested_name(*parts: str) -> str:
    return "_".join(parts)


def method_path(*parts: str) -> str:
    """Default route for an unannotated rpc: ``/<Service>/<Method>``."""
    return "/" + "/".join(parts)


def generation_version() -> str:
    """Timestamp stamped into ``info.version``."""
    return datetime.now().strftime("%Y%m%d%H%M%S")


def is_reserved(package: str) -> bool:
    """Whether *package* belongs to the schema compiler's own namespace."""
    return package == RESERVED_NAMESPACE or package.startswith(RESERVED_NAMESPACE + ".")


class FileParser:
    """Parse one ``FileDescriptorProto`` into a :class:`FileContents`.

    Args:
        descriptor: The file to parse.
        packages: Package names of every input file, used to strip package
            qualifiers from referenced type names.
    """

    def __init__(
        self,
        descriptor: descriptor_pb2.FileDescriptorProto,
        packages: Iterable[str] = (),
    ) -> None:
        self._file = descriptor
        self._packages = tuple(packages)
        source_info = descriptor.source_code_info if descriptor.HasField("source_code_info") else None
        self._comments = CommentMap.from_source_info(source_info)

    def parse(self) -> FileContents:
        contents = FileContents(file_name=self._file.name)

        for idx, proto_enum in enumerate(self._file.enum_type):
            contents.enums.append(
                self._parse_enum(proto_enum, proto_enum.name, (PATH_ENUM, idx))
            )

        for idx, proto_message in enumerate(self._file.message_type):
            self._parse_message(proto_message, proto_message.name, (PATH_MESSAGE, idx), contents)

        for idx, proto_service in enumerate(self._file.service):
            contents.services.append(self._parse_service(proto_service, (PATH_SERVICE, idx)))

        logger.debug(
            "Parsed %s: %d services, %d messages, %d enums",
            self._file.name,
            len(contents.services),
            len(contents.messages),
            len(contents.enums),
        )
        return contents

    def _parse_enum(
        self,
        proto_enum: descriptor_pb2.EnumDescriptorProto,
        name: str,
        path: StructuralPath,
    ) -> Enum:
        enum = Enum(name=name, description=self._comments.comment(name, path))
        for idx, value in enumerate(proto_enum.value):
            enum.fields.append(
                EnumField(
                    name=value.name,
                    value=value.number,
                    description=self._comments.comment(
                        value.name, path + (PATH_ENUM_VALUE, idx)
                    ),
                )
            )
        return enum

    def _parse_message(
        self,
        proto_message: descriptor_pb2.DescriptorProto,
        name: str,
        path: StructuralPath,
        contents: FileContents,
    ) -> None:
        """Collect nested enums, then nested messages, then the message itself."""
        for idx, proto_enum in enumerate(proto_message.enum_type):
            contents.enums.append(
                self._parse_enum(
                    proto_enum,
                    nested_name(name, proto_enum.name),
                    path + (PATH_MESSAGE_ENUM, idx),
                )
            )

        for idx, proto_nested in enumerate(proto_message.nested_type):
            self._parse_message(
                proto_nested,
                nested_name(name, proto_nested.name),
                path + (PATH_MESSAGE_NESTED, idx),
                contents,
            )

        message = Message(name=name, description=self._comments.comment(name, path))
        for idx, proto_field in enumerate(proto_message.field):
            description = self._comments.comment(
                proto_field.name, path + (PATH_MESSAGE_FIELD, idx)
            )
            message.fields.append(build_field(name, proto_field, description, self._packages))
        contents.messages.append(message)

    def _parse_service(
        self,
        proto_service: descriptor_pb2.ServiceDescriptorProto,
        path: StructuralPath,
    ) -> Service:
        service = Service(
            name=proto_service.name,
            description=self._comments.comment(proto_service.name, path),
        )
        for idx, proto_method in enumerate(proto_service.method):
            service.methods.append(
                self._parse_method(service.name, proto_method, path + (PATH_SERVICE_METHOD, idx))
            )
        return service

    def _parse_method(
        self,
        service_name: str,
        proto_method: descriptor_pb2.MethodDescriptorProto,
        path: StructuralPath,
    ) -> ServiceMethod:
        mark = self._comments.mark(proto_method.name, path)

        try:
            verb = HTTPMethod(mark.method)
        except ValueError:
            raise DescriptorError(
                f"Unsupported HTTP method '{mark.method}' on "
                f"{service_name}.{proto_method.name}"
            ) from None

        return ServiceMethod(
            name=proto_method.name,
            path=mark.uri or method_path(service_name, proto_method.name),
            method=verb,
            description=mark.desc,
            consume=mark.consume,
            produce=mark.produce,
            request_name=split_type_name(proto_method.input_type, self._packages)[1],
            response_name=split_type_name(proto_method.output_type, self._packages)[1],
        )


def parse_file(
    descriptor: descriptor_pb2.FileDescriptorProto,
    packages: Iterable[str] = (),
) -> FileContents:
    """Parse one file, comment index included; the unit of work of one task."""
    return FileParser(descriptor, packages).parse()


def parse_files(
    files: list[descriptor_pb2.FileDescriptorProto],
    packages: Iterable[str] = (),
    max_workers: Optional[int] = None,
) -> list[FileContents]:
    """Parse *files* concurrently, one task per file.

    All tasks are submitted together and joined at a single barrier. The
    returned list follows the order of *files*. The first task failure is
    re-raised after the join.
    """
    if not files:
        return []

    packages = tuple(packages)
    workers = max_workers or len(files)
    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="ingest") as pool:
        futures = [pool.submit(parse_file, f, packages) for f in files]
        wait(futures)
    return [future.result() for future in futures]


def merge(package_name: str, results: Iterable[FileContents]) -> Package:
    """Merge per-file results into one ordered, name-unique :class:`Package`.

    Name collisions across files keep the enum or message from the earliest
    file in *results*.
    """
    services: list[Service] = []
    messages = NameRegistry[Message]("message")
    enums = NameRegistry[Enum]("enum")

    for contents in results:
        services.extend(contents.services)
        messages.extend(contents.messages)
        enums.extend(contents.enums)

    package = Package(
        name=package_name,
        version=generation_version(),
        services=services,
        messages=messages.items(),
        enums=enums.items(),
    )
    return sort_package(package)


def ingest(
    files: Iterable[descriptor_pb2.FileDescriptorProto],
    package_name: Optional[str] = None,
    *,
    include_reserved: bool = False,
    max_workers: Optional[int] = None,
) -> Package:
    """Build the intermediate :class:`~protoc_gen_swagger.models.Package`.

    Args:
        files: Every file descriptor of the request, dependencies included.
        package_name: Name of the generated package; defaults to the first
            file's package.
        include_reserved: Also parse files in the ``google.protobuf``
            namespace.
        max_workers: Thread pool size; defaults to one thread per file.

    Returns:
        A fully populated, sorted package.

    Raises:
        DescriptorError: If any type name is malformed or an annotation names
            an unsupported HTTP method.
    """
    files = list(files)
    if package_name is None:
        package_name = files[0].package if files else ""

    packages = {f.package for f in files if f.package}
    selected = [f for f in files if include_reserved or not is_reserved(f.package)]
    skipped = len(files) - len(selected)
    if skipped:
        logger.debug("Skipped %d file(s) in the %s namespace", skipped, RESERVED_NAMESPACE)

    results = parse_files(selected, packages, max_workers=max_workers)
    return merge(package_name, results)
