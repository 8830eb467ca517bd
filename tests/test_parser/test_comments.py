"""Tests for protoc_gen_swagger.parser.comments."""

from __future__ import annotations

import pytest
from google.protobuf import descriptor_pb2

from protoc_gen_swagger.models import CONTENT_TYPE_JSON, Comment
from protoc_gen_swagger.parser.comments import CommentMap, trim_comment


def _source_info(*locations: tuple[tuple[int, ...], str]) -> descriptor_pb2.SourceCodeInfo:
    info = descriptor_pb2.SourceCodeInfo()
    for path, leading in locations:
        location = info.location.add()
        location.path.extend(path)
        location.leading_comments = leading
    return info


# ---------------------------------------------------------------------------
# trim_comment
# ---------------------------------------------------------------------------


class TestTrimComment:
    def test_strips_whitespace(self) -> None:
        assert trim_comment("  hello world \n") == "hello world"

    def test_strips_block_decoration(self) -> None:
        assert trim_comment("** hello **\n") == "hello"

    def test_strips_repeatedly(self) -> None:
        assert trim_comment("\n * \n * Fetch one user.\n * \n") == "Fetch one user."

    def test_keeps_inner_text(self) -> None:
        assert trim_comment(" a * b\nc ") == "a * b\nc"

    def test_empty(self) -> None:
        assert trim_comment("") == ""
        assert trim_comment(" * \n ") == ""


# ---------------------------------------------------------------------------
# CommentMap lookups
# ---------------------------------------------------------------------------


class TestCommentMap:
    def test_from_source_info_indexes_by_path(self) -> None:
        comments = CommentMap.from_source_info(
            _source_info(((4, 0), " A user.\n"), ((4, 0, 2, 1), " The name.\n"))
        )
        assert len(comments) == 2
        assert comments.get((4, 0)) == Comment(leading="A user.")
        assert comments.comment("name", (4, 0, 2, 1)) == "The name."

    def test_skips_locations_without_text(self) -> None:
        info = _source_info(((4, 0), ""))
        assert len(CommentMap.from_source_info(info)) == 0

    def test_none_source_info(self) -> None:
        assert len(CommentMap.from_source_info(None)) == 0

    def test_trailing_and_detached_are_kept(self) -> None:
        info = descriptor_pb2.SourceCodeInfo()
        location = info.location.add()
        location.path.extend([4, 1])
        location.trailing_comments = " after\n"
        location.leading_detached_comments.append(" detached\n")

        found = CommentMap.from_source_info(info).get((4, 1))
        assert found is not None
        assert found.trailing == "after"
        assert found.detached == ("detached",)

    def test_comment_falls_back_to_identifier(self) -> None:
        comments = CommentMap()
        assert comments.comment("User", (4, 0)) == "User"

    def test_trailing_only_falls_back(self) -> None:
        comments = CommentMap({(4, 0): Comment(trailing="after")})
        assert comments.comment("User", (4, 0)) == "User"

    def test_paths_do_not_collide(self) -> None:
        comments = CommentMap(
            {(4, 1, 2, 3): Comment(leading="a"), (4, 12, 3): Comment(leading="b")}
        )
        assert comments.comment("x", (4, 1, 2, 3)) == "a"
        assert comments.comment("x", (4, 12, 3)) == "b"
        assert comments.comment("x", (4, 1, 23)) == "x"


# ---------------------------------------------------------------------------
# Routing annotations
# ---------------------------------------------------------------------------


class TestMark:
    PATH = (6, 0, 2, 0)

    def _mark(self, leading: str | None):
        comments = CommentMap({self.PATH: Comment(leading=leading)} if leading else {})
        return comments.mark("GetUser", self.PATH)

    def test_no_comment_defaults(self) -> None:
        mark = self._mark(None)
        assert mark.name == "GetUser"
        assert mark.desc == "GetUser"
        assert mark.uri == ""
        assert mark.method == "POST"
        assert mark.consume == CONTENT_TYPE_JSON
        assert mark.produce == CONTENT_TYPE_JSON

    def test_plain_comment_becomes_description(self) -> None:
        mark = self._mark("Fetch one user.")
        assert mark.desc == "Fetch one user."
        assert mark.method == "POST"
        assert mark.uri == ""

    def test_json_annotation(self) -> None:
        mark = self._mark('{"uri": "/v1/users/{id}", "method": "get", "desc": "Fetch"}')
        assert mark.name == "GetUser"
        assert mark.uri == "/v1/users/{id}"
        assert mark.method == "GET"
        assert mark.desc == "Fetch"

    def test_get_has_no_default_consume(self) -> None:
        mark = self._mark('{"method": "GET"}')
        assert mark.consume == ""
        assert mark.produce == CONTENT_TYPE_JSON

    def test_annotation_without_desc_uses_fallback(self) -> None:
        mark = self._mark('{"uri": "/v1/users"}')
        assert mark.desc == "GetUser"

    def test_description_alias(self) -> None:
        mark = self._mark('{"description": "Long form"}')
        assert mark.desc == "Long form"

    def test_explicit_content_types_kept(self) -> None:
        mark = self._mark('{"consume": "multipart/form-data", "produce": "text/plain"}')
        assert mark.consume == "multipart/form-data"
        assert mark.produce == "text/plain"

    @pytest.mark.parametrize("leading", ["[1, 2]", '"just a string"', "{not json}"])
    def test_non_object_json_is_description(self, leading: str) -> None:
        mark = self._mark(leading)
        assert mark.desc == leading
        assert mark.method == "POST"

    def test_unknown_keys_ignored(self) -> None:
        mark = self._mark('{"uri": "/x", "deprecated": true}')
        assert mark.uri == "/x"

    def test_empty_method_defaults_to_post(self) -> None:
        mark = self._mark('{"uri": "/x", "method": ""}')
        assert mark.uri == "/x"
        assert mark.method == "POST"
        assert mark.consume == CONTENT_TYPE_JSON

    def test_json_null_keeps_defaults(self) -> None:
        mark = self._mark("null")
        assert mark.desc == "GetUser"
        assert mark.method == "POST"
        assert mark.uri == ""
