"""Arrange footprints on a printer build plate.

Wraps the packer with the pieces a slicing pipeline needs: concrete
footprints, largest-first ordering, build plate sizes, and a report.
"""

from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence, Tuple, TypeVar

from platepack.packing.errors import PackingError
from platepack.packing.packer import Packer, PackableItem
from platepack.packing.regions import SplitRule
from platepack.utils import get_logger

logger = get_logger("packing.layout")

T = TypeVar("T", bound=PackableItem)


@dataclass
class Footprint:
    """XY bounding box of an object, and where it ends up on the plate."""
    name: str
    size_x: float  # width, X axis
    size_y: float  # length, Y axis
    x: Optional[float] = None
    y: Optional[float] = None

    def width(self) -> float:
        return self.size_x

    def length(self) -> float:
        return self.size_y

    def place(self, x: float, y: float) -> None:
        self.x = x
        self.y = y

    @property
    def is_placed(self) -> bool:
        return self.x is not None

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "name": self.name,
            "width": self.size_x,
            "length": self.size_y,
            "x": self.x,
            "y": self.y,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Footprint":
        """Create from dictionary."""
        return cls(
            name=str(data.get("name", "part")),
            size_x=float(data["width"]),
            size_y=float(data["length"]),
        )


def sort_for_packing(items: Iterable[T]) -> List[T]:
    """Order items largest first by their longer side; ties keep input order."""
    return sorted(items, key=lambda item: max(item.width(), item.length()), reverse=True)


@dataclass
class BuildPlate:
    """Rectangular build plate dimensions (mm)."""
    width: float = 256.0
    depth: float = 256.0

    @property
    def area(self) -> float:
        return self.width * self.depth

    def fits(self, bin_width: float, bin_length: float) -> bool:
        """Check whether a packed bin fits on the plate."""
        return bin_width <= self.width and bin_length <= self.depth

    def center_offset(self, bin_width: float, bin_length: float) -> Tuple[float, float]:
        """Offset that centers a bin on the plate, never below the origin."""
        return (
            max(0.0, (self.width - bin_width) / 2),
            max(0.0, (self.depth - bin_length) / 2),
        )

    @classmethod
    def for_printer(cls, printer_model: str) -> "BuildPlate":
        """Create plate for specific printer."""
        plates = {
            "bambu_x1c": cls(256.0, 256.0),
            "bambu_p1s": cls(256.0, 256.0),
            "bambu_a1": cls(256.0, 256.0),
            "bambu_a1_mini": cls(180.0, 180.0),
            "prusa_mk4": cls(250.0, 210.0),
            "ender_3": cls(220.0, 220.0),
        }
        return plates.get(printer_model, cls())


@dataclass
class LayoutConfig:
    """Configuration for plate layout."""
    plate: BuildPlate = field(default_factory=BuildPlate)
    spacing: float = 0.0  # gap between footprints
    split_rule: SplitRule = SplitRule.TILED
    sort_parts: bool = True
    offset: Optional[Tuple[float, float]] = None  # None centers the bin

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "plate_width": self.plate.width,
            "plate_depth": self.plate.depth,
            "spacing": self.spacing,
            "split_rule": self.split_rule.value,
            "sort_parts": self.sort_parts,
            "offset": list(self.offset) if self.offset is not None else None,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "LayoutConfig":
        """Create from dictionary."""
        offset = data.get("offset")
        return cls(
            plate=BuildPlate(data.get("plate_width", 256.0), data.get("plate_depth", 256.0)),
            spacing=data.get("spacing", 0.0),
            split_rule=SplitRule(data.get("split_rule", "tiled")),
            sort_parts=data.get("sort_parts", True),
            offset=tuple(offset) if offset is not None else None,
        )


@dataclass
class LayoutResult:
    """Result of arranging footprints on a plate."""
    success: bool
    bin_width: float = 0.0
    bin_length: float = 0.0
    offset: Tuple[float, float] = (0.0, 0.0)
    footprints: List[Footprint] = field(default_factory=list)
    plate_utilization: float = 0.0  # percentage of plate covered by footprints
    fits_plate: bool = True
    error_message: Optional[str] = None

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "success": self.success,
            "bin_width": self.bin_width,
            "bin_length": self.bin_length,
            "offset": list(self.offset),
            "footprints": [f.to_dict() for f in self.footprints],
            "plate_utilization": self.plate_utilization,
            "fits_plate": self.fits_plate,
            "error_message": self.error_message,
        }


def arrange_on_plate(footprints: Sequence[Footprint], config: Optional[LayoutConfig] = None) -> LayoutResult:
    """
    Pack footprints and move them onto the build plate.

    Args:
        footprints: Footprints to arrange
        config: Layout configuration

    Returns:
        Layout result; packing errors produce a failed result
    """
    config = config or LayoutConfig()
    parts = sort_for_packing(footprints) if config.sort_parts else list(footprints)

    packer = Packer(parts, spacing=config.spacing, split_rule=config.split_rule)
    try:
        bin_width, bin_length = packer.pack()
    except PackingError as e:
        logger.error(f"Packing error: {e}")
        return LayoutResult(success=False, footprints=parts, error_message=str(e))

    offset = config.offset or config.plate.center_offset(bin_width, bin_length)
    packer.arrange(*offset)

    fits = config.plate.fits(bin_width, bin_length)
    if not fits:
        logger.warning(
            f"Packed bin {bin_width} x {bin_length} exceeds plate "
            f"{config.plate.width} x {config.plate.depth}"
        )

    covered = sum(p.size_x * p.size_y for p in parts)
    utilization = min(100.0, covered / config.plate.area * 100) if config.plate.area else 0.0

    return LayoutResult(
        success=True,
        bin_width=bin_width,
        bin_length=bin_length,
        offset=(float(offset[0]), float(offset[1])),
        footprints=parts,
        plate_utilization=utilization,
        fits_plate=fits,
    )


def export_layout(result: LayoutResult) -> str:
    """Export layout as text description."""
    lines = [
        "; Build plate layout",
        f"; Bin: {result.bin_width:.1f}x{result.bin_length:.1f}mm",
        f"; Offset: ({result.offset[0]:.1f}, {result.offset[1]:.1f})",
        f"; Utilization: {result.plate_utilization:.1f}%",
        f"; Parts placed: {sum(1 for f in result.footprints if f.is_placed)}",
        "",
    ]

    if not result.success:
        lines.append(f"; Failed: {result.error_message}")
        return "\n".join(lines)

    for i, part in enumerate(result.footprints):
        lines.append(f"; Part {i + 1}: {part.name}")
        lines.append(f";   Position: ({part.x:.1f}, {part.y:.1f})")
        lines.append(f";   Size: {part.size_x:.1f}x{part.size_y:.1f}")
        lines.append("")

    if not result.fits_plate:
        lines.append("; Warning: layout exceeds the build plate")

    return "\n".join(lines)
