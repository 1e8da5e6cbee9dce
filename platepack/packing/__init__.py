"""Rectangle packing of object footprints onto a build plate.

Provides the growing binary tree packer and build plate layout helpers.
"""

from platepack.packing.errors import (
    PackingError,
    InvalidItemError,
    GrowthFailureError,
    PrematureArrangeError,
)
from platepack.packing.regions import (
    Region,
    SpatialTree,
    SplitRule,
    Growth,
    GrowthDirection,
)
from platepack.packing.packer import Packer, PackableItem
from platepack.packing.layout import (
    Footprint,
    BuildPlate,
    LayoutConfig,
    LayoutResult,
    arrange_on_plate,
    export_layout,
    sort_for_packing,
)

__all__ = [
    "PackingError",
    "InvalidItemError",
    "GrowthFailureError",
    "PrematureArrangeError",
    "Region",
    "SpatialTree",
    "SplitRule",
    "Growth",
    "GrowthDirection",
    "Packer",
    "PackableItem",
    "Footprint",
    "BuildPlate",
    "LayoutConfig",
    "LayoutResult",
    "arrange_on_plate",
    "export_layout",
    "sort_for_packing",
]
