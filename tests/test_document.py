"""Tests for the in-memory TextDocument."""

import pytest

from mentionkit.document import NODE_PLACEHOLDER, TextDocument
from mentionkit.domain.types import AnnotationNode, DocumentMutation, TriggerKind

ADA = AnnotationNode(kind=TriggerKind.MENTION, label="Ada", href="/u/ada", id="u1")


def test_nodes_take_one_position():
    document = TextDocument(["hi ", ADA, "!"])

    assert len(document) == 5
    assert document.node_at(3) == ADA
    assert document.node_at(2) is None
    assert document.char_at(3) == NODE_PLACEHOLDER
    assert document.text == "hi Ada!"
    assert document.plain_text == f"hi {NODE_PLACEHOLDER}!"
    assert document.character_count == 7


def test_trailing_text_is_bounded():
    document = TextDocument("abcdef")

    assert document.get_trailing_text(6, 3) == "def"
    assert document.get_trailing_text(4, 10) == "abcd"
    assert document.get_trailing_text(0, 10) == ""


def test_replace_range_mixes_text_and_nodes():
    document = TextDocument("hi @ada")
    document.replace_range(3, 7, [ADA, " "])

    assert list(document.nodes()) == [(3, ADA)]
    assert document.text == "hi Ada "


def test_insert_node():
    document = TextDocument("ab")
    document.insert_node(1, ADA)
    assert document.plain_text == f"a{NODE_PLACEHOLDER}b"


@pytest.mark.parametrize("span", [(-1, 0), (2, 1), (0, 99)])
def test_invalid_range_leaves_document_unchanged(span):
    document = TextDocument("abc")
    with pytest.raises(ValueError):
        document.replace_range(*span, "x")
    assert document.text == "abc"


def test_unsupported_content_rejected_atomically():
    document = TextDocument("abc")
    with pytest.raises(TypeError):
        document.replace_range(0, 3, ["x", 42])
    assert document.text == "abc"


class TestDocumentMutation:
    """Tests for DocumentMutation position mapping."""

    def test_map_position(self):
        mutation = DocumentMutation(3, 7, (ADA, " "))

        assert mutation.inserted_length == 2
        assert mutation.caret_after == 5
        assert mutation.map_position(1) == 1
        assert mutation.map_position(5) == 5
        assert mutation.map_position(9) == 7

    def test_apply(self):
        document = TextDocument("hi @ada")
        DocumentMutation(3, 7, (ADA,)).apply(document)
        assert document.text == "hi Ada"
