"""
Unit tests for CropRect and the display-to-PDF crop mapping
"""
import pytest

from magazine_backend.domain.value_objects.crop_rect import (
    CropRect,
    crop_to_pdf_box,
    display_point_to_pdf_point,
    normalize_rotation,
)


class TestCropRectNormalize:

    def test_disabled_crop_is_full_page(self):
        crop = CropRect(0.2, 0.2, 0.3, 0.3, enabled=False)
        assert crop.normalize() == CropRect.full_page()
        assert crop.visual() is None

    def test_clamps_origin_into_page(self):
        crop = CropRect(-0.5, 1.5, 0.5, 0.5, enabled=True).normalize()
        assert crop.x == 0.0
        assert crop.y == 1.0

    def test_enforces_minimum_size(self):
        crop = CropRect(0.1, 0.1, 0.0, 0.01, enabled=True).normalize()
        assert crop.width == pytest.approx(0.05)
        assert crop.height == pytest.approx(0.05)

    def test_page_edge_wins_over_minimum(self):
        crop = CropRect(0.98, 0.0, 0.5, 1.0, enabled=True).normalize()
        assert crop.width == pytest.approx(0.02)

    def test_enabled_full_page_is_not_meaningful(self):
        assert not CropRect(0, 0, 1, 1, enabled=True).is_meaningful()

    def test_inset_crop_is_meaningful(self):
        crop = CropRect(0.1, 0.0, 0.9, 1.0, enabled=True)
        assert crop.is_meaningful()
        assert crop.visual() == crop.normalize()

    def test_from_dict_defaults(self):
        assert CropRect.from_dict(None) == CropRect.full_page()
        crop = CropRect.from_dict({"x": 0.25, "enabled": True})
        assert crop == CropRect(0.25, 0.0, 1.0, 1.0, True)

    def test_mask_percentages(self):
        masks = CropRect(0.1, 0.2, 0.5, 0.6, True).mask_percentages()
        assert masks["left"] == pytest.approx(10)
        assert masks["top"] == pytest.approx(20)
        assert masks["right"] == pytest.approx(40)
        assert masks["bottom"] == pytest.approx(20)


class TestRotation:

    @pytest.mark.parametrize(
        "raw,expected",
        [(0, 0), (90, 90), (-90, 270), (450, 90), (44, 0), (46, 90), (360, 0)],
    )
    def test_normalize_rotation(self, raw, expected):
        assert normalize_rotation(raw) == expected

    def test_display_point_unrotated_flips_y(self):
        assert display_point_to_pdf_point(10, 20, 300, 200, 300, 0) == (10, 280)


class TestCropToPdfBox:

    def test_unrotated_page(self):
        crop = CropRect(0.1, 0.2, 0.5, 0.5, True)
        box = crop_to_pdf_box(600, 800, 0, crop)
        assert box.left == pytest.approx(60)
        assert box.bottom == pytest.approx(240)
        assert box.width == pytest.approx(300)
        assert box.height == pytest.approx(400)

    def test_full_crop_on_rotated_page_covers_page(self):
        box = crop_to_pdf_box(600, 800, 90, CropRect(0, 0, 1, 1, True))
        assert (box.left, box.bottom, box.width, box.height) == (0, 0, 600, 800)

    def test_top_half_of_quarter_turned_page_is_left_strip(self):
        box = crop_to_pdf_box(600, 800, 90, CropRect(0, 0, 1, 0.5, True))
        assert box.left == pytest.approx(0)
        assert box.bottom == pytest.approx(0)
        assert box.width == pytest.approx(300)
        assert box.height == pytest.approx(800)

    def test_half_turn_mirrors_both_axes(self):
        box = crop_to_pdf_box(600, 800, 180, CropRect(0, 0, 0.5, 0.5, True))
        assert box.left == pytest.approx(300)
        assert box.bottom == pytest.approx(0)
        assert box.right == pytest.approx(600)
        assert box.top == pytest.approx(400)
