"""Tests for relationship and content-type registry edits."""

from dynamic_docx.engine.registry import (
    add_content_type,
    add_relationship,
    empty_relationships,
    extract_relationship_ids,
    insert_after_tag,
    insert_before_tag,
    replace_between_tags,
)

from conftest import CONTENT_TYPES_XML, DOCUMENT_RELS_XML

REL = '<Relationship Id="rId9" Type="t" Target="media/image1.png"/>'


class TestTagHelpers:
    def test_insert_before_first_occurrence(self):
        assert insert_before_tag("<a></a><a></a>", "</a>", "x") == "<a>x</a><a></a>"

    def test_insert_after_first_occurrence(self):
        assert insert_after_tag("<a></a><a></a>", "<a>", "x") == "<a>x</a><a></a>"

    def test_missing_tag_leaves_text(self):
        assert insert_before_tag("<a/>", "</b>", "x") == "<a/>"
        assert insert_after_tag("<a/>", "<b>", "x") == "<a/>"

    def test_replace_between_tags(self):
        assert replace_between_tags("<a>old</a>", "<a>", "</a>", "new") == "<a>new</a>"
        assert replace_between_tags("<a>old", "<a>", "</a>", "new") == "<a>old"


class TestRelationships:
    def test_add_before_closing_tag(self):
        result = add_relationship(DOCUMENT_RELS_XML, REL)
        assert result.endswith(REL + "\n</Relationships>")
        assert extract_relationship_ids(result) == ["rId1", "rId2", "rId9"]

    def test_self_closing_root(self):
        rels = '<Relationships xmlns="ns"/>'
        assert add_relationship(rels, REL) == f'<Relationships xmlns="ns">{REL}</Relationships>'

    def test_empty_relationships_accepts_entries(self):
        result = add_relationship(empty_relationships(), REL)
        assert extract_relationship_ids(result) == ["rId9"]

    def test_extract_ignores_target_ids(self):
        rels = '<Relationship Id="rId1" Target="x" TargetMode="External" sId="no"/>'
        assert extract_relationship_ids(rels) == ["rId1"]

    def test_extract_empty(self):
        assert extract_relationship_ids("") == []


class TestContentTypes:
    def test_adds_default_once(self):
        once = add_content_type(CONTENT_TYPES_XML, "png", "image/png")
        twice = add_content_type(once, "png", "image/png")
        assert twice == once
        assert once.count('<Default Extension="png" ContentType="image/png"/>') == 1
        assert once.endswith("\n</Types>")

    def test_existing_declaration_kept(self):
        types_xml = '<Types><Default Extension="jpeg" ContentType="image/jpeg"/></Types>'
        assert add_content_type(types_xml, "jpeg", "image/jpeg") == types_xml
