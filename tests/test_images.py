"""Tests for image ids, naming and drawing markup."""

import re

import pytest

from dynamic_docx.config.settings import settings
from dynamic_docx.engine import images
from dynamic_docx.engine.images import (
    DEFAULT_IMAGE_SIZE,
    IMAGE_RELATIONSHIP_TYPE,
    assign_relationship_id,
    generate_image_id,
    image_content_type,
    image_filename,
    infer_extension,
    next_drawing_id,
    render_inline,
    render_relationship,
    sniff_extension,
)

from conftest import JPEG_BYTES, PNG_BYTES


class TestRelationshipIds:
    def test_generated_id_shape(self):
        for _ in range(20):
            assert re.fullmatch(r"rId[A-Z]{2}\d{4}", generate_image_id())

    def test_requested_id_used_when_free(self):
        assert assign_relationship_id("rIdLogo", {"rId1"}, 0) == "rIdLogo"

    def test_requested_id_replaced_on_collision(self):
        new_id = assign_relationship_id("rId1", {"rId1", "rId2"}, 0)
        assert new_id not in {"rId1", "rId2"}

    def test_ids_distinct_across_images(self):
        taken = {"rId1", "rId2"}
        assigned = []
        for index in range(3):
            rel_id = assign_relationship_id(None, taken, index)
            taken.add(rel_id)
            assigned.append(rel_id)
        assert len(set(assigned)) == 3
        assert not set(assigned) & {"rId1", "rId2"}

    def test_counter_fallback_when_random_ids_collide(self, monkeypatch):
        monkeypatch.setattr(images, "generate_image_id", lambda: "rIdAA0000")
        taken = {"rIdAA0000", "rId101"}
        assert assign_relationship_id(None, taken, 0) == "rId102"
        assert assign_relationship_id(None, {"rIdAA0000"}, 2) == "rId103"

    def test_zero_random_attempts_goes_straight_to_counter(self):
        assert assign_relationship_id(None, set(), 0, max_random_attempts=0) == "rId101"

    def test_random_attempts_default_from_settings(self, monkeypatch):
        monkeypatch.setattr(settings, "image_max_random_id_attempts", 0)
        monkeypatch.setattr(images, "generate_image_id", lambda: pytest.fail("random id generated"))
        assert assign_relationship_id(None, {"rId101"}, 0) == "rId102"


class TestFragments:
    def test_render_relationship(self):
        assert render_relationship("rId7", "image1.png") == (
            f'<Relationship Id="rId7" Type="{IMAGE_RELATIONSHIP_TYPE}" Target="media/image1.png"/>'
        )

    def test_render_inline_sizes(self):
        xml = render_inline("rId7", 100, 50, drawing_id=3)
        assert '<wp:extent cx="100" cy="50"/>' in xml
        assert '<a:ext cx="100" cy="50"/>' in xml
        assert '<a:blip r:embed="rId7" cstate="print"/>' in xml
        assert '<wp:docPr id="3" name="Picture"/>' in xml
        assert xml.startswith("<w:drawing>") and xml.endswith("</w:drawing>")

    def test_render_inline_defaults(self):
        xml = render_inline("rId7")
        assert f'<wp:extent cx="{DEFAULT_IMAGE_SIZE}" cy="{DEFAULT_IMAGE_SIZE}"/>' in xml

    def test_height_defaults_to_width(self):
        xml = render_inline("rId7", 500)
        assert '<wp:extent cx="500" cy="500"/>' in xml

    def test_name_is_escaped(self):
        xml = render_inline("rId7", name='A "quoted" & <name>')
        assert 'name="A &quot;quoted&quot; &amp; &lt;name&gt;"' in xml

    def test_next_drawing_id(self):
        markup = '<wp:docPr id="4" name="a"/><wp:docPr id="12" name="b"/>'
        assert next_drawing_id(markup) == 13
        assert next_drawing_id("<w:p/>") == 1


class TestExtensions:
    def test_sniff(self):
        assert sniff_extension(PNG_BYTES) == "png"
        assert sniff_extension(JPEG_BYTES) == "jpeg"
        assert sniff_extension(b"GIF89a...") == "gif"
        assert sniff_extension(b"RIFF\x00\x00\x00\x00WEBPVP8 ") == "webp"
        assert sniff_extension(b"plain text") is None
        assert sniff_extension(None) is None

    def test_path_suffix_wins(self):
        assert infer_extension(data=PNG_BYTES, path="/tmp/photo.JPG") == "jpg"

    def test_url_suffix_ignores_query(self):
        assert infer_extension(url="https://example.com/a/logo.gif?v=2") == "gif"

    def test_falls_back_to_bytes_then_png(self):
        assert infer_extension(data=JPEG_BYTES) == "jpeg"
        assert infer_extension(data=b"???") == "png"
        assert infer_extension(path="noext") == "png"

    @pytest.mark.parametrize(
        "ext,content_type",
        [("png", "image/png"), ("jpg", "image/jpeg"), ("JPEG", "image/jpeg"), ("tiff", "image/png")],
    )
    def test_content_type(self, ext, content_type):
        assert image_content_type(ext) == content_type

    def test_filename_skips_taken_names(self):
        assert image_filename(0, "png") == "image1.png"
        assert image_filename(0, "png", {"image1.png", "image2.png"}) == "image3.png"
