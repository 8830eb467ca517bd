"""Assemble the Swagger 2.0 document from an ingested Package.

The assembler consumes a :class:`~protoc_gen_swagger.models.Package` and a
:class:`~protoc_gen_swagger.models.PluginConfig` and produces a
:class:`~protoc_gen_swagger.models.Document`:

* ``definitions`` -- one entry per enum and message
  (:class:`~protoc_gen_swagger.generator.schemas.SchemaBuilder`);
* ``tags`` -- one per service;
* ``paths`` -- one operation per rpc at ``paths[<uri>][<verb>]``, with
  parameters placed by :func:`~protoc_gen_swagger.generator.params.build_parameters`
  and a single ``200`` response referencing the reply message.

The package is never modified, so assembling the same package twice yields
identical documents. :func:`render` turns a document into the pretty-printed
JSON text written to ``<package>.json``.
"""

from __future__ import annotations

import json
import logging
from typing import Optional

from protoc_gen_swagger.generator.params import build_parameters
from protoc_gen_swagger.generator.routes import RouteTable
from protoc_gen_swagger.generator.schemas import SchemaBuilder
from protoc_gen_swagger.models import (
    Document,
    Info,
    Operation,
    Package,
    PluginConfig,
    Response,
    Service,
    ServiceMethod,
    Tag,
)

logger = logging.getLogger(__name__)

SWAGGER_VERSION = "2.0"
DEFAULT_HOST = "0.0.0.0"
DEFAULT_SCHEMES = ("http", "https")
SUCCESS_STATUS = "200"
SUCCESS_DESCRIPTION = "successful"


class Assembler:
    """Build one :class:`~protoc_gen_swagger.models.Document`.

    Args:
        package: The ingested package.
        config: Effective plugin configuration (host, title, auth header).
    """

    def __init__(self, package: Package, config: PluginConfig) -> None:
        self._package = package
        self._config = config
        self._schemas = SchemaBuilder(package)
        self._routes = RouteTable()

    def assemble(self) -> Document:
        for enum in self._package.enums:
            self._schemas.emit_enum(enum)
        for message in self._package.messages:
            self._schemas.emit_message(message.name)

        tags = [self._parse_service(service) for service in self._package.services]

        logger.debug(
            "Assembled %d operations and %d definitions",
            len(self._routes),
            len(self._schemas.definitions()),
        )
        return Document(
            swagger=SWAGGER_VERSION,
            info=Info(
                title=self._config.service or self._package.name,
                version=self._package.version,
                description=self._package.name,
            ),
            host=self._config.host or DEFAULT_HOST,
            base_path="",
            tags=tags,
            schemes=list(DEFAULT_SCHEMES),
            paths=self._routes.paths(),
            definitions=self._schemas.definitions(),
        )

    def _parse_service(self, service: Service) -> Tag:
        tag = Tag(name=service.name, description=service.description or None)
        for method in service.methods:
            self._routes.push(method.path, method.method, self._operation(tag, method))
        return tag

    def _operation(self, tag: Tag, method: ServiceMethod) -> Operation:
        return Operation(
            tags=[tag.name],
            summary=method.description or None,
            consumes=[method.consume] if method.consume else None,
            produces=[method.produce] if method.produce else None,
            parameters=build_parameters(self._schemas, method, self._config),
            responses={
                SUCCESS_STATUS: Response(
                    description=SUCCESS_DESCRIPTION,
                    schema=self._schemas.reference(method.response_name),
                )
            },
        )


def assemble(package: Package, config: Optional[PluginConfig] = None) -> Document:
    """Assemble the Swagger document for *package*.

    Raises:
        DuplicateRouteError: If two rpcs resolve to the same path and verb.
    """
    return Assembler(package, config or PluginConfig()).assemble()


def document_filename(package: Package) -> str:
    return f"{package.name}.json"


def render(document: Document) -> str:
    """Serialise *document* as 2-space indented JSON."""
    data = document.model_dump(by_alias=True, exclude_none=True)
    return json.dumps(data, indent=2, ensure_ascii=False)
