"""Tests for flatgraph.flatten."""

import copy

import pytest

from flatgraph.codec import Codecs
from flatgraph.errors import InvalidEntityKind, KeyEncodeError
from flatgraph.flatten import flatten
from flatgraph.keys import Key
from flatgraph.values import Attribute, VKey, VText

from entities import Author, Category, Comment, Plain, Post, Profile, key_text


@pytest.fixture
def codecs():
    return Codecs.default()


def _names(attrs):
    return [a.name for a in attrs]


class TestPrimaryKey:
    def test_root_key_not_written(self, codecs):
        attrs = flatten(Post(id=key_text("Post", 1), text="p"), codecs)
        assert attrs == [Attribute("text", VText("p"))]

    def test_nested_key_written_once(self, codecs):
        post = Post(text="p", comments=[Comment(id=key_text("Comment", 9), text="c")])
        keys = [a for a in flatten(post, codecs) if a.name.endswith(".id")]
        assert keys == [
            Attribute("comments.id", VKey(Key("Comment", 9)), indexed=True, multiple=True)
        ]

    def test_empty_nested_key_skipped(self, codecs):
        post = Post(text="p", comments=[Comment(text="c")])
        assert _names(flatten(post, codecs)) == ["text", "comments.text"]

    def test_malformed_key(self, codecs):
        post = Post(comments=[Comment(id="???", text="c")])
        with pytest.raises(KeyEncodeError):
            flatten(post, codecs)


class TestRelations:
    def test_repeated_order_and_multiple(self, codecs):
        post = Post(
            text="p",
            comments=[
                Comment(id=key_text("Comment", 1), text="c1"),
                Comment(id=key_text("Comment", 2), text="c2"),
            ],
        )
        attrs = flatten(post, codecs)
        assert _names(attrs) == [
            "text",
            "comments.text",
            "comments.id",
            "comments.text",
            "comments.id",
        ]
        assert attrs[0].multiple is False
        assert all(a.multiple for a in attrs[1:])

    def test_single_inherits_multiple(self, codecs):
        profile = Profile(bio="b", author=Author(name="ann"))
        attrs = flatten(profile, codecs)
        assert attrs[1] == Attribute("author.name", VText("ann"))

    def test_multiple_is_sticky(self, codecs):
        post = Post(comments=[Comment(text="c", author=Author(name="ann"))])
        attrs = flatten(post, codecs)
        author = [a for a in attrs if a.name == "comments.author.name"]
        assert author == [Attribute("comments.author.name", VText("ann"), multiple=True)]

    def test_absent_single(self, codecs):
        assert _names(flatten(Profile(bio="b"), codecs)) == ["bio"]

    def test_none_repeated(self, codecs):
        assert _names(flatten(Post(text="p", comments=None), codecs)) == ["text"]

    def test_repeated_not_a_sequence(self, codecs):
        with pytest.raises(InvalidEntityKind):
            flatten(Post(comments="oops"), codecs)

    def test_repeated_element_not_an_entity(self, codecs):
        with pytest.raises(InvalidEntityKind):
            flatten(Post(comments=[{"text": "c"}]), codecs)


class TestDepthCap:
    def _chain(self, depth):
        root = node = Category(name="L0")
        for level in range(1, depth + 1):
            nxt = Category(name=f"L{level}")
            node.children.append(nxt)
            node = nxt
        return root

    def test_default_cap(self, codecs):
        attrs = flatten(self._chain(5), codecs)
        assert _names(attrs) == ["name", "children.name", "children.children.name"]

    def test_custom_cap(self, codecs):
        attrs = flatten(self._chain(5), codecs, max_depth=0)
        assert _names(attrs) == ["name"]

    def test_beyond_cap_is_empty(self, codecs):
        assert flatten(Plain(text="x"), codecs, depth=3) == []


def test_rejects_non_entity(codecs):
    with pytest.raises(InvalidEntityKind):
        flatten({"text": "x"}, codecs)


def test_does_not_mutate_graph(codecs):
    post = Post(
        id=key_text("Post", 1),
        text="p",
        comments=[Comment(id=key_text("Comment", 1), text="c", author=Author(name="a"))],
    )
    before = copy.deepcopy(post)
    flatten(post, codecs)
    assert post == before


def test_namespace_argument(codecs):
    attrs = flatten(Plain(text="x"), codecs, namespace="outer", multiple=True)
    assert attrs == [Attribute("outer.text", VText("x"), multiple=True)]
