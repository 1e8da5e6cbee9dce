"""Binary tree of rectangular regions used to pack footprints into a bin.

The tree starts as a single region sized to the first footprint. Placing a
footprint in a free leaf splits the leftover space into an ``up`` strip and a
``right`` strip. When no leaf can hold a footprint, the bin grows: the current
root is wrapped in a larger root, and the new space becomes a fresh leaf.

Widths run along the X axis and lengths along the Y axis.

The growth scheme follows Jake Gordon's growing binary tree packer
https://github.com/jakesgordon/bin-packing
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Optional, Tuple


class SplitRule(str, Enum):
    """How the leftover space of an occupied region is partitioned."""
    TILED = "tiled"  # children and footprint exactly tile the region
    LEGACY = "legacy"  # right strip offset and shrunk by the footprint length


class GrowthDirection(str, Enum):
    """Axis along which the bin is extended."""
    UP = "up"  # +Y
    RIGHT = "right"  # +X


@dataclass
class Region:
    """A rectangle on the plate, free, occupied, or split into two children."""
    x: float
    y: float
    width: float
    length: float
    up: Optional["Region"] = None
    right: Optional["Region"] = None
    item_index: Optional[int] = None

    def __post_init__(self):
        if self.width < 0 or self.length < 0:
            raise ValueError(
                f"Region at ({self.x}, {self.y}) has negative extents {self.width} x {self.length}"
            )

    @property
    def is_leaf(self) -> bool:
        return self.up is None

    @property
    def is_occupied(self) -> bool:
        return self.item_index is not None

    def fits(self, width: float, length: float) -> bool:
        """Check whether a footprint fits inside this region."""
        return width <= self.width and length <= self.length

    def __str__(self) -> str:
        return f"{self.x},{self.y} {self.width}x{self.length}"


@dataclass(frozen=True)
class Growth:
    """Outcome of a candidate bin growth, evaluated without touching the tree."""
    direction: GrowthDirection
    width: float
    length: float

    @property
    def skew(self) -> float:
        """Distance from a square bin."""
        return abs(self.width - self.length)


class SpatialTree:
    """Growable binary tree of regions.

    Attributes:
        root: Region covering the whole bin, or None before seeding.
    """

    def __init__(self) -> None:
        self.root: Optional[Region] = None

    @property
    def size(self) -> Tuple[float, float]:
        """Bin dimensions, (0, 0) for an empty tree."""
        if self.root is None:
            return (0.0, 0.0)
        return (self.root.width, self.root.length)

    def seed(self, width: float, length: float) -> Region:
        """Start the bin with a single free region."""
        if self.root is not None:
            raise RuntimeError("Tree has already been seeded")
        self.root = Region(0.0, 0.0, width, length)
        return self.root

    def find_region(self, width: float, length: float, start: Optional[Region] = None) -> Optional[Region]:
        """Find a free leaf that can hold a footprint.

        Searches depth-first from ``start`` (the root by default), visiting the
        ``right`` child of a split region before its ``up`` child. The tree is
        not modified.

        Args:
            width: Footprint width.
            length: Footprint length.
            start: Region to search from.

        Returns:
            The first suitable leaf, or None if none exists.
        """
        node = start if start is not None else self.root
        if node is None:
            return None

        stack = [node]
        while stack:
            node = stack.pop()
            if node.is_leaf:
                if not node.is_occupied and node.fits(width, length):
                    return node
                continue
            # LIFO: push up first so right is searched first
            stack.append(node.up)
            stack.append(node.right)
        return None

    @staticmethod
    def place_in_region(
        region: Region,
        item_index: int,
        width: float,
        length: float,
        split_rule: SplitRule = SplitRule.TILED,
    ) -> Region:
        """Occupy a free leaf and split the leftover space into children.

        Args:
            region: Free leaf already known to fit the footprint.
            item_index: Index of the item in the caller's list.
            width: Footprint width.
            length: Footprint length.
            split_rule: Partition applied to the leftover space.

        Returns:
            The occupied region.
        """
        if not region.is_leaf or region.is_occupied:
            raise ValueError(f"Region {region} is not a free leaf")

        region.item_index = item_index
        region.up = Region(region.x, region.y + length, region.width, region.length - length)
        if split_rule == SplitRule.LEGACY:
            # NOTE: possible latent defect, preserved so legacy layouts stay
            # reproducible. The right strip is offset by the footprint
            # *length* along X, shrinks by the *length* as well, and spans the
            # full region length, so it overlaps the up strip.
            # Regions never have negative extents: a right strip that would
            # be narrower than zero is created empty, so no item can land in it.
            region.right = Region(
                region.x + length,
                region.y,
                max(0.0, region.width - length),
                region.length,
            )
        else:
            region.right = Region(region.x + width, region.y, region.width - width, length)
        return region

    def growth_candidates(self, width: float, length: float) -> Tuple[Growth, Growth]:
        """Evaluate both growth moves for a footprint, up first."""
        root_width, root_length = self.size
        return (
            Growth(GrowthDirection.UP, max(root_width, width), root_length + length),
            Growth(GrowthDirection.RIGHT, root_width + width, max(root_length, length)),
        )

    def choose_growth(self, width: float, length: float) -> GrowthDirection:
        """Pick the growth that keeps the bin closest to square.

        Ties go to the axis that is currently shorter, and to the X axis when
        the bin is square.
        """
        up, right = self.growth_candidates(width, length)
        if up.skew < right.skew:
            return GrowthDirection.UP
        if right.skew < up.skew:
            return GrowthDirection.RIGHT
        root_width, root_length = self.size
        if root_length < root_width:
            return GrowthDirection.UP
        return GrowthDirection.RIGHT

    def grow(self, direction: GrowthDirection, width: float, length: float) -> Region:
        if direction == GrowthDirection.UP:
            return self.grow_up(width, length)
        return self.grow_right(width, length)

    def grow_up(self, width: float, length: float) -> Region:
        """Extend the bin along +Y.

        The current root keeps its position as the new root's ``right`` child.

        Returns:
            The fresh region above the old bin.
        """
        old = self._require_root()
        new_width = max(old.width, width)
        fresh = Region(0.0, old.length, new_width, length)
        self.root = Region(0.0, 0.0, new_width, old.length + length, up=fresh, right=old)
        return fresh

    def grow_right(self, width: float, length: float) -> Region:
        """Extend the bin along +X.

        The current root keeps its position as the new root's ``up`` child.

        Returns:
            The fresh region beside the old bin.
        """
        old = self._require_root()
        new_length = max(old.length, length)
        fresh = Region(old.width, 0.0, width, new_length)
        self.root = Region(0.0, 0.0, old.width + width, new_length, up=old, right=fresh)
        return fresh

    def walk(self) -> Iterator[Region]:
        """Yield every region depth-first, parents before children."""
        if self.root is None:
            return
        stack = [self.root]
        while stack:
            node = stack.pop()
            yield node
            if node.right is not None:
                stack.append(node.right)
            if node.up is not None:
                stack.append(node.up)

    def depth(self) -> int:
        """Number of regions on the longest root-to-leaf path."""
        if self.root is None:
            return 0
        deepest = 0
        stack = [(self.root, 1)]
        while stack:
            node, level = stack.pop()
            deepest = max(deepest, level)
            for child in (node.up, node.right):
                if child is not None:
                    stack.append((child, level + 1))
        return deepest

    def _require_root(self) -> Region:
        if self.root is None:
            raise RuntimeError("Cannot grow an unseeded tree")
        return self.root
