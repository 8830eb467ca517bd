"""Descriptor parser -- comments, type mapping, and the intermediate Package.

This sub-package is responsible for the first half of the pipeline: turning
the decoded ``FileDescriptorProto`` list of a generator request into a
:class:`~protoc_gen_swagger.models.Package` that the assembler can consume.

Typical usage::

    from protoc_gen_swagger.parser import ingest

    package = ingest(request.proto_file, include_reserved=False)

Sub-modules:

* :mod:`~protoc_gen_swagger.parser.comments` -- Path-keyed comment lookup and
  JSON routing annotations.
* :mod:`~protoc_gen_swagger.parser.types` -- Wire type / label mapping,
  qualified-name splitting and map-entry detection.
* :mod:`~protoc_gen_swagger.parser.ingest` -- Concurrent per-file walk and the
  first-writer-wins merge.
* :mod:`~protoc_gen_swagger.parser.ordering` -- Name-unique registries and
  deterministic sorting.
"""

from protoc_gen_swagger.parser.comments import CommentMap
from protoc_gen_swagger.parser.ingest import ingest

__all__ = ["CommentMap", "ingest"]
