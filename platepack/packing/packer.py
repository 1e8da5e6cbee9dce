"""Pack object footprints into a minimal, roughly square bin.

Typical usage:
    packer = Packer(objects)
    width, length = packer.pack()
    packer.arrange(offset_x, offset_y)

Items are packed in the order given. Callers that want the best results
should sort them largest first (see ``layout.sort_for_packing``).
"""

import math
from numbers import Real
from typing import List, Optional, Protocol, Sequence, Tuple

from platepack.packing.errors import GrowthFailureError, InvalidItemError, PrematureArrangeError
from platepack.packing.regions import SpatialTree, SplitRule
from platepack.utils import get_logger

logger = get_logger("packing.packer")


class PackableItem(Protocol):
    """An object whose XY footprint can be packed and then moved."""

    def width(self) -> float:
        ...

    def length(self) -> float:
        ...

    def place(self, x: float, y: float) -> None:
        ...


def _valid_extent(value) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool) and math.isfinite(value) and value > 0


class Packer:
    """
    Rectangle packer for build plate layout.

    Builds a binary tree of regions, growing the bin whenever an item
    does not fit, so that the bin stays close to square.
    """

    def __init__(
        self,
        items: Sequence[PackableItem],
        spacing: float = 0.0,
        split_rule: SplitRule = SplitRule.TILED,
    ):
        """
        Initialize packer.

        Args:
            items: Items to pack, in packing order
            spacing: Gap added to each footprint's width and length
            split_rule: Partition used for leftover space
        """
        if not isinstance(spacing, Real) or not math.isfinite(spacing) or spacing < 0:
            raise ValueError(f"Spacing must be a finite, non-negative number, got {spacing!r}")

        self.items: List[PackableItem] = list(items)
        self.spacing = float(spacing)
        self.split_rule = SplitRule(split_rule)
        self.tree = SpatialTree()
        self._size: Optional[Tuple[float, float]] = None

    @property
    def packed(self) -> bool:
        """Whether the last pack completed successfully."""
        return self._size is not None

    @property
    def size(self) -> Tuple[float, float]:
        """Dimensions of the current bin."""
        return self._size if self._size is not None else self.tree.size

    def pack(self) -> Tuple[float, float]:
        """
        Calculate a bin for all items.

        Returns:
            (width, length) of the resulting bin

        Raises:
            InvalidItemError: An item has a non-positive or non-finite size.
                Items placed before it stay in the tree.
            GrowthFailureError: A grown bin could not hold its item.
        """
        if self._size is not None:
            return self._size

        if self.tree.root is not None:
            # a previous attempt failed part way; start over
            self.tree = SpatialTree()

        for index, item in enumerate(self.items):
            width, length = self._extents(index, item)

            if self.tree.root is None:
                self.tree.seed(width, length)

            region = self.tree.find_region(width, length)
            if region is None:
                direction = self.tree.choose_growth(width, length)
                fresh = self.tree.grow(direction, width, length)
                logger.debug(
                    f"Grew bin {direction.value} for item {index} to "
                    f"{self.tree.size[0]} x {self.tree.size[1]}"
                )
                region = self.tree.find_region(width, length, start=fresh)
                if region is None:
                    logger.warning(f"Bin growth failed for item {index} ({width} x {length})")
                    raise GrowthFailureError(index, width, length)

            self.tree.place_in_region(region, index, width, length, self.split_rule)

        self._size = self.tree.size
        logger.debug(f"Packed {len(self.items)} items into {self._size[0]} x {self._size[1]}")
        return self._size

    def arrange(self, offset_x: float = 0.0, offset_y: float = 0.0) -> None:
        """
        Move every item to its packed position on the build plate.

        Args:
            offset_x: X offset of the bin from the plate origin
            offset_y: Y offset of the bin from the plate origin

        Raises:
            PrematureArrangeError: Items were given but not packed.
        """
        if not self.items:
            return
        if not self.packed:
            raise PrematureArrangeError("arrange() called before a successful pack()")

        for index, x, y in self.placements():
            self.items[index].place(x + offset_x, y + offset_y)

    def placements(self) -> List[Tuple[int, float, float]]:
        """Item indices with their positions inside the bin, without moving anything."""
        return [
            (region.item_index, region.x, region.y)
            for region in self.tree.walk()
            if region.is_occupied
        ]

    def _extents(self, index: int, item: PackableItem) -> Tuple[float, float]:
        width, length = item.width(), item.length()
        if not (_valid_extent(width) and _valid_extent(length)):
            logger.warning(f"Rejected item {index}: {width!r} x {length!r}")
            raise InvalidItemError(index, width, length)
        return float(width) + self.spacing, float(length) + self.spacing
