"""Route path helpers: placeholder extraction and the route table.

Annotated rpcs may declare templated routes such as
``/v1/users/{user_id}/posts/{post_id}``. :func:`path_placeholders` pulls the
placeholder names out, in order, so the assembler can emit one path
parameter per placeholder.

:class:`RouteTable` holds the document's ``paths`` object and enforces that
each (path, verb) pair is registered at most once.
"""

from __future__ import annotations

from protoc_gen_swagger.exceptions import DuplicateRouteError
from protoc_gen_swagger.models import HTTPMethod, Operation


def path_placeholders(path: str) -> list[str]:
    """Return the ``{name}`` placeholders of *path*, left to right.

    Scanning stops silently at the first unbalanced brace: an opening brace
    without a closing one, or a second opening brace before the closing one.
    Empty placeholders (``{}``) are skipped.

    Example::

        >>> path_placeholders("/v1/users/{user_id}/posts/{post_id}")
        ['user_id', 'post_id']
        >>> path_placeholders("/v1/users/{id}/broken/{oops")
        ['id']
    """
    names: list[str] = []
    position = 0
    while True:
        start = path.find("{", position)
        if start < 0:
            break
        end = path.find("}", start + 1)
        if end < 0:
            break
        name = path[start + 1:end]
        if "{" in name:
            break
        if name:
            names.append(name)
        position = end + 1
    return names


class RouteTable:
    """The ``paths`` object: ``{uri: {verb: Operation}}``."""

    def __init__(self) -> None:
        self._paths: dict[str, dict[str, Operation]] = {}

    def push(self, uri: str, method: HTTPMethod, operation: Operation) -> None:
        """Register *operation* at ``paths[uri][method]``.

        Raises:
            DuplicateRouteError: If an operation is already registered for
                the same path and verb.
        """
        verb = method.lower_case()
        operations = self._paths.setdefault(uri, {})
        if verb in operations:
            raise DuplicateRouteError(uri, verb)
        operations[verb] = operation

    def __len__(self) -> int:
        return sum(len(operations) for operations in self._paths.values())

    def paths(self) -> dict[str, dict[str, Operation]]:
        """Snapshot of the table with paths and verbs in sorted order."""
        return {
            uri: dict(sorted(self._paths[uri].items()))
            for uri in sorted(self._paths)
        }
