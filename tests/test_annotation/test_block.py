"""Tests for modelhint.annotation.block: docstring parsing and rendering."""

from __future__ import annotations

import pytest

from modelhint.annotation.block import AnnotationBlock, Tag


DOCSTRING = """Registered user.

Owns posts and comments.

@property-read integer $id
@property string $name Display name
@method static tinyorm.Builder|app.models.user.User whereName($value)
@see https://example.com/docs"""


class TestTag:
    @pytest.mark.parametrize(
        ("content", "expected"),
        [
            ("integer $id", "id"),
            ("string $name Display name", "name"),
            ("tinyorm.Collection|app.models.post.Post[] $posts", "posts"),
            ("no variable here", None),
        ],
    )
    def test_variable_name(self, content: str, expected: str | None) -> None:
        assert Tag("property", content).variable_name == expected

    @pytest.mark.parametrize(
        ("content", "expected"),
        [
            ("static tinyorm.Builder|User whereName($value)", "whereName"),
            ("static User|null find($id)", "find"),
            ("ofType($kind, $strict = true)", "ofType"),
            ("static User", None),
            ("(broken)", None),
        ],
    )
    def test_method_name(self, content: str, expected: str | None) -> None:
        assert Tag("method", content).method_name == expected

    def test_render(self) -> None:
        assert Tag("property-read", "integer $id").render() == "@property-read integer $id"
        assert Tag("deprecated").render() == "@deprecated"


class TestParse:
    def test_summary_and_tags(self) -> None:
        block = AnnotationBlock.parse(DOCSTRING)

        assert block.summary == "Registered user.\n\nOwns posts and comments."
        assert [tag.kind for tag in block.tags] == ["property-read", "property", "method", "see"]
        assert block.tags[1].content == "string $name Display name"

    def test_none_and_empty(self) -> None:
        assert AnnotationBlock.parse(None) == AnnotationBlock()
        assert AnnotationBlock.parse("") == AnnotationBlock()

    def test_summary_only(self) -> None:
        block = AnnotationBlock.parse("Just text.\n\nMore text.")
        assert block.summary == "Just text.\n\nMore text."
        assert block.tags == []

    def test_tags_only(self) -> None:
        block = AnnotationBlock.parse("@property-read integer $id")
        assert block.summary == ""
        assert block.tags == [Tag("property-read", "integer $id")]

    def test_continuation_lines_join_previous_tag(self) -> None:
        block = AnnotationBlock.parse("Model.\n\n@property string $bio Long\n    description here\n@method static X y()")

        assert block.tags[0].content == "string $bio Long\n    description here"
        assert block.tags[1].content == "static X y()"

    def test_declared_names(self) -> None:
        block = AnnotationBlock.parse(DOCSTRING)

        assert block.declared_properties() == {"id", "name"}
        assert block.declared_methods() == {"whereName"}


class TestRender:
    def test_summary_blank_line_tags(self) -> None:
        block = AnnotationBlock("User", [Tag("property-read", "integer $id"), Tag("method", "static User|null find($id)")])

        assert block.render() == "User\n\n@property-read integer $id\n@method static User|null find($id)"

    def test_summary_only(self) -> None:
        assert AnnotationBlock("User").render() == "User"

    def test_parse_render_is_stable(self) -> None:
        rendered = AnnotationBlock.parse(DOCSTRING).render()

        assert rendered == DOCSTRING
        assert AnnotationBlock.parse(rendered).render() == rendered

    def test_extra_spacing_is_normalized_once(self) -> None:
        rendered = AnnotationBlock.parse("User\n\n\n@property-read   integer $id   ").render()

        assert rendered == "User\n\n@property-read integer $id"
        assert AnnotationBlock.parse(rendered).render() == rendered
