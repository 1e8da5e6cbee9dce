"""Exceptions raised by the rectangle packer."""

from typing import Any


class PackingError(Exception):
    """Base class for packing failures."""


class InvalidItemError(PackingError):
    """Raised when an item's footprint is not a positive, finite size."""

    def __init__(self, index: int, width: Any, length: Any) -> None:
        self.index = index
        self.width = width
        self.length = length
        super().__init__(
            f"Item {index} has an invalid footprint {width!r} x {length!r}: "
            "width and length must be positive and finite"
        )


class GrowthFailureError(PackingError):
    """Raised when a grown bin still cannot hold the item that triggered growth."""

    def __init__(self, index: int, width: float, length: float) -> None:
        self.index = index
        self.width = width
        self.length = length
        super().__init__(f"Bin growth could not accommodate item {index} ({width} x {length})")


class PrematureArrangeError(PackingError):
    """Raised when items are arranged before a successful pack."""
