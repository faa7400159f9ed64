"""Tests for flatgraph.schema."""

from __future__ import annotations

from dataclasses import dataclass, field

import pytest

from flatgraph.errors import BadSchemaTag, InvalidEntityKind
from flatgraph.schema import (
    Cardinality,
    SchemaRegistry,
    build_schema,
    default_registry,
    entity,
    is_entity,
    primary,
    relation,
    scalar,
)

from entities import Category, Comment, Post


# ---------------------------------------------------------------------------
# build_schema
# ---------------------------------------------------------------------------

class TestBuildSchema:
    def test_post(self):
        schema = build_schema(Post)
        assert schema.entity_type is Post
        assert schema.primary == "id"
        assert [s.name for s in schema.scalars] == ["text"]
        assert len(schema.relations) == 1
        rel = schema.relations[0]
        assert rel.attr == "comments"
        assert rel.segment == "comments"
        assert rel.target is Comment
        assert rel.cardinality is Cardinality.REPEATED
        assert rel.repeated

    def test_single_relation(self):
        rel = build_schema(Comment).relations[0]
        assert rel.cardinality is Cardinality.SINGLE
        assert not rel.repeated

    def test_scalar_rename_and_index(self):
        @dataclass
        class Renamed:
            body: str = scalar("", name="text", indexed=True)
            other: int = 0

        schema = build_schema(Renamed)
        assert schema.scalars[0].attr == "body"
        assert schema.scalars[0].name == "text"
        assert schema.scalars[0].indexed is True
        assert schema.scalars[1].indexed is False
        assert schema.scalar_by_name("text") is schema.scalars[0]
        assert schema.scalar_by_name("body") is None

    def test_string_target_kept(self):
        rel = build_schema(Category).relations[0]
        assert rel.target == "Category"

    def test_not_a_dataclass(self):
        class Bare:
            pass

        with pytest.raises(BadSchemaTag):
            build_schema(Bare)


class TestBadSchemaTag:
    def test_two_primaries(self):
        @dataclass
        class Twice:
            id: str = primary()
            other: str = primary()

        with pytest.raises(BadSchemaTag, match="more than one primary"):
            build_schema(Twice)

    def test_empty_segment(self):
        @dataclass
        class Empty:
            child: Post | None = relation("", Post)

        with pytest.raises(BadSchemaTag):
            build_schema(Empty)

    def test_dotted_segment(self):
        @dataclass
        class Dotted:
            child: Post | None = relation("a.b", Post)

        with pytest.raises(BadSchemaTag):
            build_schema(Dotted)

    def test_reserved_scalar_name(self):
        @dataclass
        class Reserved:
            id: str = ""

        with pytest.raises(BadSchemaTag, match="reserved"):
            build_schema(Reserved)

    def test_duplicate_scalar_name(self):
        @dataclass
        class Dup:
            a: str = scalar("", name="text")
            b: str = scalar("", name="text")

        with pytest.raises(BadSchemaTag, match="duplicate"):
            build_schema(Dup)

    def test_duplicate_segment(self):
        @dataclass
        class Dup:
            a: Post | None = relation("x", Post)
            b: Post | None = relation("x", Post)

        with pytest.raises(BadSchemaTag, match="duplicate"):
            build_schema(Dup)

    def test_target_not_dataclass(self):
        @dataclass
        class BadTarget:
            child: object = relation("child", dict)

        with pytest.raises(BadSchemaTag):
            build_schema(BadTarget)

    def test_malformed_metadata(self):
        @dataclass
        class Raw:
            text: str = field(default="", metadata={"flatgraph": "relation"})

        with pytest.raises(BadSchemaTag, match="malformed"):
            build_schema(Raw)

    def test_uninstantiable(self):
        @dataclass
        class Required:
            text: str

        with pytest.raises(BadSchemaTag, match="default"):
            build_schema(Required).new_instance()


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

class TestSchemaRegistry:
    def test_resolve_builds_once(self):
        registry = SchemaRegistry()
        first = registry.resolve(Post)
        assert Post in registry
        assert registry.resolve(Post) is first
        assert len(registry) == 1

    def test_schema_of_instance(self):
        registry = SchemaRegistry()
        assert registry.schema_of(Post()).entity_type is Post

    @pytest.mark.parametrize("value", [None, "text", {"text": "x"}, Post])
    def test_schema_of_rejects(self, value):
        with pytest.raises(InvalidEntityKind):
            SchemaRegistry().schema_of(value)

    def test_target_by_name(self):
        rel = default_registry.resolve(Category).relations[0]
        assert default_registry.target_of(rel).entity_type is Category

    def test_target_unknown_name(self):
        @dataclass
        class Orphan:
            parent: object = relation("parent", "Nowhere")

        registry = SchemaRegistry()
        rel = registry.resolve(Orphan).relations[0]
        with pytest.raises(BadSchemaTag, match="unknown entity type"):
            registry.target_of(rel)

    def test_clear(self):
        registry = SchemaRegistry()
        registry.resolve(Post)
        registry.clear()
        assert Post not in registry


class TestEntityDecorator:
    def test_bare(self):
        assert Post in default_registry

    def test_with_registry(self):
        registry = SchemaRegistry()

        @entity(registry=registry)
        @dataclass
        class Note:
            text: str = ""

        assert Note in registry
        assert Note not in default_registry

    def test_rejects_bad_declaration(self):
        with pytest.raises(BadSchemaTag):
            @entity(registry=SchemaRegistry())
            @dataclass
            class Broken:
                id: str = ""


def test_is_entity():
    assert is_entity(Post())
    assert not is_entity(Post)
    assert not is_entity({"text": "x"})


def test_relation_defaults():
    post = Post()
    assert post.comments == []
    assert Comment().author is None
    assert post.id == ""
