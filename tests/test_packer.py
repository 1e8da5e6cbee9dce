"""Tests for the footprint packer."""

import math
import random

import pytest

from platepack.packing.errors import (
    GrowthFailureError,
    InvalidItemError,
    PackingError,
    PrematureArrangeError,
)
from platepack.packing.packer import Packer
from platepack.packing.regions import Region, SplitRule


class Box:
    """Minimal packable item that records placements."""

    def __init__(self, width, length):
        self._width = width
        self._length = length
        self.calls = []

    def width(self):
        return self._width

    def length(self):
        return self._length

    def place(self, x, y):
        self.calls.append((x, y))

    @property
    def position(self):
        return self.calls[-1]


def random_boxes(seed, count=40, low=1, high=30):
    rng = random.Random(seed)
    return [Box(rng.randint(low, high), rng.randint(low, high)) for _ in range(count)]


def overlaps(a, b):
    (ax, ay), (bx, by) = a.position, b.position
    return (
        ax < bx + b.width() and bx < ax + a.width()
        and ay < by + b.length() and by < ay + a.length()
    )


class TestBasicPacking:
    """Tests for small, hand-checked layouts."""

    def test_single_item(self):
        """Test one item fills the bin exactly."""
        box = Box(10, 5)
        packer = Packer([box])

        assert packer.pack() == (10.0, 5.0)

        packer.arrange(3.0, 4.0)
        assert box.calls == [(3.0, 4.0)]

    def test_two_items_side_by_side(self):
        """Test two equal items end up next to each other."""
        a, b = Box(4, 6), Box(4, 6)
        packer = Packer([a, b])

        width, length = packer.pack()
        assert (width, length) == (8.0, 6.0)

        packer.arrange()
        assert a.position == (0.0, 0.0)
        assert b.position == (4.0, 0.0)
        assert not overlaps(a, b)

    def test_zero_items(self):
        """Test an empty pack."""
        packer = Packer([])

        assert packer.pack() == (0.0, 0.0)
        packer.arrange(10.0, 10.0)

    def test_item_fills_leftover(self):
        """Test a small item reuses space left beside an earlier one."""
        big, first, second = Box(10, 10), Box(4, 4), Box(4, 4)
        packer = Packer([big, first, second])

        assert packer.pack() == (14.0, 10.0)
        packer.arrange()
        assert first.position == (10.0, 0.0)
        assert second.position == (10.0, 4.0)

    def test_accepts_floats(self):
        """Test fractional footprints."""
        packer = Packer([Box(2.5, 1.25), Box(2.5, 1.25)])

        assert packer.pack() == (2.5, 2.5)


class TestGrowthHeuristic:
    """Tests for the growth direction chosen while packing."""

    def test_wide_item_grows_up(self):
        """Test growth that keeps the bin square for a wide item."""
        first, second = Box(10, 10), Box(10, 2)
        packer = Packer([first, second])

        assert packer.pack() == (10.0, 12.0)
        packer.arrange()
        assert second.position == (0.0, 10.0)

    def test_long_item_grows_right(self):
        """Test growth that keeps the bin square for a long item."""
        first, second = Box(10, 10), Box(2, 10)
        packer = Packer([first, second])

        assert packer.pack() == (12.0, 10.0)
        packer.arrange()
        assert second.position == (10.0, 0.0)


class TestValidation:
    """Tests for invalid item rejection."""

    @pytest.mark.parametrize("width, length", [
        (0, 5),
        (5, 0),
        (-1, 5),
        (5, float("nan")),
        (float("inf"), 5),
        ("5", 5),
        (True, 5),
        (None, 5),
    ])
    def test_invalid_item(self, width, length):
        """Test items that cannot be packed."""
        packer = Packer([Box(width, length)])

        with pytest.raises(InvalidItemError) as exc_info:
            packer.pack()

        assert exc_info.value.index == 0
        assert not packer.packed

    def test_invalid_item_is_packing_error(self):
        """Test the error hierarchy."""
        with pytest.raises(PackingError):
            Packer([Box(0, 0)]).pack()

    def test_partial_results_preserved(self):
        """Test items before the invalid one stay in the tree."""
        packer = Packer([Box(5, 5), Box(3, 3), Box(0, 1)])

        with pytest.raises(InvalidItemError) as exc_info:
            packer.pack()

        assert exc_info.value.index == 2
        assert sorted(index for index, _, _ in packer.placements()) == [0, 1]

    def test_invalid_spacing(self):
        """Test spacing validation."""
        with pytest.raises(ValueError):
            Packer([Box(1, 1)], spacing=-1.0)
        with pytest.raises(ValueError):
            Packer([Box(1, 1)], spacing=math.nan)


class TestArrange:
    """Tests for arrange preconditions and side effects."""

    def test_arrange_before_pack(self):
        """Test arranging items that were never packed."""
        box = Box(1, 1)
        packer = Packer([box])

        with pytest.raises(PrematureArrangeError):
            packer.arrange()
        assert box.calls == []

    def test_arrange_after_failed_pack(self):
        """Test arranging after a failed pack."""
        packer = Packer([Box(2, 2), Box(0, 2)])
        with pytest.raises(InvalidItemError):
            packer.pack()

        with pytest.raises(PrematureArrangeError):
            packer.arrange()

    def test_pack_does_not_place(self):
        """Test items are only moved by arrange."""
        boxes = random_boxes(1, count=5)
        Packer(boxes).pack()

        assert all(box.calls == [] for box in boxes)

    def test_each_item_placed_once(self):
        """Test every item receives exactly one placement."""
        boxes = random_boxes(2)
        packer = Packer(boxes)
        packer.pack()
        packer.arrange(1.0, 2.0)

        assert all(len(box.calls) == 1 for box in boxes)

    def test_placements_match_arrange(self):
        """Test placements() reports the bin-relative positions."""
        boxes = random_boxes(3, count=10)
        packer = Packer(boxes)
        packer.pack()
        packer.arrange(5.0, 7.0)

        for index, x, y in packer.placements():
            assert boxes[index].position == (x + 5.0, y + 7.0)


class TestGrowthFailure:
    """Tests for growth that cannot hold its item."""

    def test_growth_failure(self):
        """Test a grown region that is too small."""
        packer = Packer([Box(10, 10), Box(10, 2)])
        packer.tree.grow = lambda direction, width, length: Region(0.0, 0.0, 0.0, 0.0)

        with pytest.raises(GrowthFailureError) as exc_info:
            packer.pack()

        assert exc_info.value.index == 1
        assert not packer.packed


class TestIdempotence:
    """Tests for repeated calls."""

    def test_pack_twice(self):
        """Test repeated pack returns cached dimensions."""
        packer = Packer(random_boxes(4))
        first = packer.pack()
        tree = packer.tree

        assert packer.pack() == first
        assert packer.size == first
        assert packer.size == first
        assert packer.tree is tree

    def test_retry_after_failure(self):
        """Test a failed pack starts over when called again."""
        bad = Box(0, 1)
        packer = Packer([Box(2, 2), bad])
        with pytest.raises(InvalidItemError):
            packer.pack()

        bad._width = 1
        assert packer.pack() == (3.0, 2.0)


class TestSpacing:
    """Tests for the gap between footprints."""

    def test_spacing_between_items(self):
        """Test spacing inflates each footprint."""
        a, b = Box(4, 6), Box(4, 6)
        packer = Packer([a, b], spacing=1.0)

        assert packer.pack() == (10.0, 7.0)
        packer.arrange()
        assert a.position == (0.0, 0.0)
        assert b.position == (5.0, 0.0)


class TestLegacySplit:
    """Tests for the legacy partition rule."""

    def test_two_items(self):
        """Test the legacy rule on a simple layout."""
        a, b = Box(4, 6), Box(4, 6)
        packer = Packer([a, b], split_rule=SplitRule.LEGACY)

        assert packer.pack() == (8.0, 6.0)
        packer.arrange()
        assert b.position == (4.0, 0.0)

    def test_split_rule_from_string(self):
        """Test split rule given by value."""
        assert Packer([], split_rule="legacy").split_rule == SplitRule.LEGACY

    @pytest.mark.parametrize("seed", [10, 11, 12])
    def test_containment_and_area(self, seed):
        """Test legacy layouts stay inside the bin."""
        boxes = random_boxes(seed)
        packer = Packer(boxes, split_rule=SplitRule.LEGACY)
        width, length = packer.pack()
        packer.arrange()

        for box in boxes:
            x, y = box.position
            assert x >= 0 and y >= 0
            assert x + box.width() <= width
            assert y + box.length() <= length
        assert width * length >= sum(b.width() * b.length() for b in boxes)


class TestLayoutProperties:
    """Property checks over seeded random item sets."""

    @pytest.fixture(params=[0, 1, 2, 3, 4, 5])
    def boxes(self, request):
        """Create random boxes, some sets sorted largest first."""
        boxes = random_boxes(100 + request.param)
        if request.param % 2:
            boxes.sort(key=lambda b: max(b.width(), b.length()), reverse=True)
        return boxes

    def test_no_overlap(self, boxes):
        """Test no two placed items overlap."""
        packer = Packer(boxes)
        packer.pack()
        packer.arrange()

        for i, a in enumerate(boxes):
            for b in boxes[i + 1:]:
                assert not overlaps(a, b)

    def test_containment(self, boxes):
        """Test every item lies inside the offset bin."""
        packer = Packer(boxes)
        width, length = packer.pack()
        packer.arrange(20.0, 30.0)

        for box in boxes:
            x, y = box.position
            assert x >= 20.0 and y >= 30.0
            assert x + box.width() <= 20.0 + width
            assert y + box.length() <= 30.0 + length

    def test_area_lower_bound(self, boxes):
        """Test the bin is at least as large as the items."""
        width, length = Packer(boxes).pack()

        assert width * length >= sum(b.width() * b.length() for b in boxes)

    def test_deterministic(self, boxes):
        """Test identical input yields identical layouts."""
        copies = [Box(b.width(), b.length()) for b in boxes]

        first = Packer(boxes)
        second = Packer(copies)
        assert first.pack() == second.pack()

        first.arrange()
        second.arrange()
        assert [b.calls for b in boxes] == [c.calls for c in copies]

    def test_spacing_keeps_gap(self, boxes):
        """Test spaced items stay at least the gap apart."""
        gap = 2
        packer = Packer(boxes, spacing=gap)
        packer.pack()
        packer.arrange()

        inflated = [Box(b.width() + gap, b.length() + gap) for b in boxes]
        for box, big in zip(boxes, inflated):
            big.calls = box.calls
        for i, a in enumerate(inflated):
            for b in inflated[i + 1:]:
                assert not overlaps(a, b)


class TestLargeInput:
    """Tests for many items."""

    def test_many_items(self):
        """Test many small items."""
        boxes = [Box(1, 1) for _ in range(1000)]
        packer = Packer(boxes)

        width, length = packer.pack()
        packer.arrange()

        assert width * length >= 1000
        assert len({box.position for box in boxes}) == 1000

    def test_deep_tree(self):
        """Test a tree deeper than the recursion limit."""
        boxes = [Box(1, 1200)] + [Box(1, 1) for _ in range(1199)]
        packer = Packer(boxes)

        assert packer.pack() == (2.0, 1200.0)
        assert packer.tree.depth() > 1000

        packer.arrange()
        assert boxes[-1].position == (1.0, 1198.0)
