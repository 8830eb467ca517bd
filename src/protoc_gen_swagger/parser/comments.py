"""Resolve source comments and routing annotations by structural path.

``protoc`` records every comment in a file's ``SourceCodeInfo`` as a
location: an integer path that walks the ``FileDescriptorProto`` field tags
and repeated-field indices down to one element, plus the leading, trailing
and detached comment text found around it. For example the second rpc of the
first service sits at::

    (6, 0, 2, 1)   # service[0].method[1]

:class:`CommentMap` indexes those locations by path (as a ``tuple[int, ...]``)
for one file. Lookups never fail: an element without a comment resolves to a
fallback identifier, usually its own name.

A leading comment written as a JSON object is also a routing annotation, see
:meth:`CommentMap.mark`.
"""

from __future__ import annotations

from typing import Optional

from google.protobuf import descriptor_pb2
from pydantic import ValidationError

from protoc_gen_swagger.models import (
    CONTENT_TYPE_JSON,
    Annotation,
    Comment,
    HTTPMethod,
    StructuralPath,
)

# Tag numbers in FileDescriptorProto
PATH_PACKAGE = 2
PATH_MESSAGE = 4
PATH_ENUM = 5
PATH_SERVICE = 6
PATH_EXTENSION = 7
PATH_SYNTAX = 12

# Tag numbers in DescriptorProto
PATH_MESSAGE_FIELD = 2
PATH_MESSAGE_NESTED = 3
PATH_MESSAGE_ENUM = 4
PATH_MESSAGE_EXTENSION = 6

# Tag numbers in EnumDescriptorProto
PATH_ENUM_VALUE = 2

# Tag numbers in ServiceDescriptorProto
PATH_SERVICE_METHOD = 2

_DECORATION = ("*", "\n")

JSON_NULL = "null"


def trim_comment(text: str) -> str:
    """Strip comment-block decoration from both ends of *text*.

    Surrounding whitespace, ``*`` markers and newlines are removed
    repeatedly until none is left at either end, so ``"** hello **\\n"``
    becomes ``"hello"``. Inner text is untouched.
    """
    previous = None
    while previous != text:
        previous = text
        text = text.strip()
        for marker in _DECORATION:
            while text.startswith(marker):
                text = text[len(marker):]
            while text.endswith(marker):
                text = text[: -len(marker)]
    return text


class CommentMap:
    """Path-to-comment index for one input file.

    Build one with :meth:`from_source_info`; the constructor takes an
    already-built mapping, which is convenient in tests.
    """

    def __init__(self, comments: Optional[dict[StructuralPath, Comment]] = None) -> None:
        self._comments: dict[StructuralPath, Comment] = dict(comments or {})

    @classmethod
    def from_source_info(
        cls, source_info: Optional[descriptor_pb2.SourceCodeInfo]
    ) -> CommentMap:
        """Index every commented location of a file's ``SourceCodeInfo``.

        Locations with no leading, trailing or detached text are skipped.
        ``None`` (a file compiled without ``--include_source_info``) gives an
        empty map.
        """
        comments: dict[StructuralPath, Comment] = {}
        if source_info is None:
            return cls(comments)

        for location in source_info.location:
            if (
                not location.leading_comments
                and not location.trailing_comments
                and not location.leading_detached_comments
            ):
                continue

            comments[tuple(location.path)] = Comment(
                leading=trim_comment(location.leading_comments),
                trailing=trim_comment(location.trailing_comments),
                detached=tuple(trim_comment(c) for c in location.leading_detached_comments),
            )
        return cls(comments)

    def __len__(self) -> int:
        return len(self._comments)

    def get(self, path: StructuralPath) -> Optional[Comment]:
        return self._comments.get(tuple(path))

    def comment(self, fallback: str, path: StructuralPath) -> str:
        """Return the leading comment at *path*, or *fallback* if there is none."""
        found = self.get(path)
        if found is not None and found.leading:
            return found.leading
        return fallback

    def mark(self, fallback: str, path: StructuralPath) -> Annotation:
        """Return the routing annotation at *path*.

        The leading comment is decoded as an :class:`Annotation` JSON object.
        If it is not one, the whole comment becomes the description and
        routing keeps its defaults; this is not an error. Afterwards the verb
        is upper-cased (an empty one becomes POST), ``produce`` defaults to
        JSON, and ``consume`` defaults to JSON unless the verb is GET.
        """
        mark = Annotation(name=fallback, desc=fallback, method=HTTPMethod.POST.value)

        found = self.get(path)
        # JSON null decodes to nothing and leaves the defaults in place
        if found is not None and found.leading and found.leading != JSON_NULL:
            try:
                decoded = Annotation.model_validate_json(found.leading)
            except ValidationError:
                mark.desc = found.leading
            else:
                mark = decoded.model_copy(update={"name": fallback})
                if not mark.desc:
                    mark.desc = fallback

        mark.method = (mark.method or HTTPMethod.POST.value).upper()

        if not mark.consume and mark.method != HTTPMethod.GET.value:
            mark.consume = CONTENT_TYPE_JSON
        if not mark.produce:
            mark.produce = CONTENT_TYPE_JSON

        return mark
