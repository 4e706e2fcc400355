"""
Unit tests for the SplitLayout value object
"""
import pytest

from magazine_backend.domain.value_objects.crop_rect import CropRect
from magazine_backend.domain.value_objects.split_layout import SplitLayout, page_range_label

CROP_A = CropRect(0.1, 0.1, 0.5, 0.5, True)
CROP_B = CropRect(0.2, 0.2, 0.5, 0.5, True)


class TestSections:

    def test_single_section_without_splits(self):
        sections = SplitLayout.for_page_count(3).sections()
        assert len(sections) == 1
        assert sections[0].pages == (0, 1, 2)
        assert sections[0].end == 2

    def test_split_positions(self):
        layout = SplitLayout(page_order=tuple(range(6)), split_positions=frozenset({1, 3}))
        sections = layout.sections()
        assert [section.pages for section in sections] == [(0, 1), (2, 3), (4, 5)]
        assert [section.start for section in sections] == [0, 2, 4]

    def test_auto_split_interval(self):
        layout = SplitLayout(page_order=tuple(range(5)), auto_split_interval=2)
        assert [section.pages for section in layout.sections()] == [(0, 1), (2, 3), (4,)]

    def test_skipped_sections_are_not_active(self):
        layout = SplitLayout(
            page_order=tuple(range(4)),
            split_positions=frozenset({1}),
            skipped_sections=frozenset({0}),
        )
        assert [section.index for section in layout.active_sections()] == [1]

    def test_empty_layout(self):
        assert SplitLayout(page_order=()).sections() == []


class TestFromDict:

    def test_defaults_to_document_order(self):
        layout = SplitLayout.from_dict({}, 3)
        assert layout.page_order == (0, 1, 2)

    def test_parses_string_keys(self):
        layout = SplitLayout.from_dict(
            {
                "pageOrder": [2, 0],
                "splitPositions": [0],
                "rotations": {"2": 90},
                "crops": {"1": {"x": 0.1, "y": 0, "width": 0.8, "height": 1, "enabled": True}},
                "skippedSections": [1],
            },
            3,
        )
        assert layout.page_order == (2, 0)
        assert layout.rotation_for(2) == 90
        assert layout.crop_for(1).x == pytest.approx(0.1)
        assert layout.skipped_sections == frozenset({1})

    def test_rejects_pages_outside_document(self):
        with pytest.raises(ValueError):
            SplitLayout.from_dict({"pageOrder": [0, 5]}, 3)

    def test_to_dict_uses_sorted_string_keys(self):
        layout = SplitLayout(
            page_order=(0, 1),
            split_positions=frozenset({1, 0}),
            rotations={1: 180},
            crops={0: CROP_A},
        )
        data = layout.to_dict()
        assert data["splitPositions"] == [0, 1]
        assert data["rotations"] == {"1": 180}
        assert data["crops"]["0"]["x"] == pytest.approx(0.1)


class TestPageOperations:

    def test_rotate_wraps(self):
        layout = SplitLayout.for_page_count(2).rotate(0, "left")
        assert layout.rotation_for(0) == 270
        layout = layout.rotate(0, "right").rotate(0, "right")
        assert layout.rotation_for(0) == 90

    def test_duplicate_shifts_crops_and_copies_crop(self):
        layout = SplitLayout(
            page_order=(0, 1, 2),
            crops={1: CROP_A, 2: CROP_B},
            skipped_sections=frozenset({0}),
        ).duplicate(1)
        assert layout.page_order == (0, 1, 1, 2)
        assert layout.crops == {1: CROP_A, 2: CROP_A, 3: CROP_B}
        assert layout.skipped_sections == frozenset()

    def test_delete_shifts_splits_and_crops(self):
        layout = SplitLayout(
            page_order=(0, 1, 2, 3),
            split_positions=frozenset({0, 2, 3}),
            crops={1: CROP_A, 3: CROP_B},
        ).delete(1)
        assert layout.page_order == (0, 2, 3)
        assert layout.split_positions == frozenset({0, 1, 2})
        assert layout.crops == {2: CROP_B}

    def test_delete_drops_positions_past_the_end(self):
        layout = SplitLayout(page_order=(0, 1, 2), split_positions=frozenset({1, 7})).delete(0)
        assert layout.page_order == (1, 2)
        assert layout.split_positions == frozenset({0})

    def test_delete_out_of_range_is_noop(self):
        layout = SplitLayout.for_page_count(2)
        assert layout.delete(5) is layout

    def test_toggle_split(self):
        layout = SplitLayout.for_page_count(4).toggle_split(1)
        assert layout.split_positions == frozenset({1})
        assert layout.toggle_split(1).split_positions == frozenset()

    def test_with_crop_sets_and_clears(self):
        layout = SplitLayout.for_page_count(2).with_crop(0, CROP_A)
        assert 0 in layout.crops
        assert 0 not in layout.with_crop(0, None).crops
        assert 0 not in layout.with_crop(0, CropRect(0, 0, 1, 1, True)).crops


class TestPageRangeLabel:

    def test_labels(self):
        assert page_range_label((3, 4, 7)) == "3-7"
        assert page_range_label([5]) == "5"
        assert page_range_label(()) == ""
