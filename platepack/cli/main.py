"""Main CLI entry point for platepack."""

import json
from pathlib import Path
from typing import List, Optional, Tuple

import click
from rich.console import Console
from rich.table import Table

from platepack import __version__
from platepack.packing.layout import Footprint

console = Console()


@click.group()
@click.version_option(version=__version__, prog_name="platepack")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """platepack - arrange object footprints on a build plate.

    Packs the XY bounding boxes of printable objects into a compact,
    roughly square area and centers it on the plate.
    """
    from platepack.config import get_settings
    from platepack.utils import setup_logging

    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    setup_logging("DEBUG" if verbose else get_settings().log_level)


def load_footprints(path: Path) -> List[Footprint]:
    """Read footprints from a JSON list or a {"parts": [...]} document."""
    data = json.loads(path.read_text())
    if isinstance(data, dict):
        data = data.get("parts", [])
    if not isinstance(data, list):
        raise ValueError("Expected a list of parts")
    if not all(isinstance(entry, dict) for entry in data):
        raise ValueError("Each part must be an object")
    return [Footprint.from_dict(entry) for entry in data]


@cli.command()
@click.argument("file_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--spacing", "-s", type=float, default=None, help="Gap between footprints (mm)")
@click.option("--printer", "-p", default=None, help="Printer preset for the plate size")
@click.option("--plate-width", type=click.FloatRange(min=0, min_open=True), default=None, help="Plate width (mm)")
@click.option("--plate-depth", type=click.FloatRange(min=0, min_open=True), default=None, help="Plate depth (mm)")
@click.option("--offset", type=(float, float), default=None, help="Bin offset instead of centering")
@click.option("--split-rule", type=click.Choice(["tiled", "legacy"]), default=None, help="Leftover partition rule")
@click.option("--no-sort", is_flag=True, help="Pack in file order")
@click.option("--json", "output_json", is_flag=True, help="Output as JSON")
def pack(
    file_path: Path,
    spacing: Optional[float],
    printer: Optional[str],
    plate_width: Optional[float],
    plate_depth: Optional[float],
    offset: Optional[Tuple[float, float]],
    split_rule: Optional[str],
    no_sort: bool,
    output_json: bool,
) -> None:
    """Pack footprints from a JSON file onto the build plate.

    Example: platepack pack parts.json --spacing 5 --printer bambu_a1_mini
    """
    from platepack.config import get_settings
    from platepack.packing import BuildPlate, LayoutConfig, SplitRule, arrange_on_plate

    settings = get_settings()

    try:
        footprints = load_footprints(file_path)
    except (ValueError, KeyError, TypeError) as e:
        console.print(f"[red]Could not read footprints from {file_path}: {e}[/red]")
        raise SystemExit(1)

    printer = printer or settings.printer_model
    plate = BuildPlate.for_printer(printer) if printer else BuildPlate(settings.plate_width, settings.plate_depth)
    if plate_width is not None:
        plate.width = plate_width
    if plate_depth is not None:
        plate.depth = plate_depth

    config = LayoutConfig(
        plate=plate,
        spacing=settings.part_spacing if spacing is None else spacing,
        split_rule=SplitRule(split_rule or settings.split_rule),
        sort_parts=settings.sort_parts and not no_sort,
        offset=offset,
    )

    try:
        result = arrange_on_plate(footprints, config)
    except ValueError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise SystemExit(1)

    if output_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        if not result.success:
            raise SystemExit(1)
        return

    if not result.success:
        console.print(f"[red]Packing failed: {result.error_message}[/red]")
        raise SystemExit(1)

    console.print(f"[bold]Bin:[/bold] {result.bin_width:.1f} x {result.bin_length:.1f} mm")
    console.print(f"[bold]Plate:[/bold] {plate.width:.1f} x {plate.depth:.1f} mm")
    console.print(f"[bold]Utilization:[/bold] {result.plate_utilization:.1f}%")

    table = Table(show_header=True)
    table.add_column("Part", style="cyan")
    table.add_column("Size")
    table.add_column("Position")
    for part in result.footprints:
        table.add_row(
            part.name,
            f"{part.size_x:.1f} x {part.size_y:.1f}",
            f"({part.x:.1f}, {part.y:.1f})",
        )
    console.print(table)

    if not result.fits_plate:
        console.print("[yellow]Warning: layout does not fit on the build plate[/yellow]")


@cli.command()
def status() -> None:
    """Show current packing configuration."""
    from platepack.config import get_settings

    settings = get_settings()

    console.print("[bold]platepack Status[/bold]")
    console.print(f"Version: {__version__}")
    console.print()
    console.print("[bold]Build Plate:[/bold]")
    console.print(f"  Printer: {settings.printer_model or 'Not set'}")
    console.print(f"  Size: {settings.plate_width:.1f} x {settings.plate_depth:.1f} mm")
    console.print()
    console.print("[bold]Packing:[/bold]")
    console.print(f"  Spacing: {settings.part_spacing:.1f} mm")
    console.print(f"  Split rule: {settings.split_rule}")
    console.print(f"  Sort parts: {settings.sort_parts}")


if __name__ == "__main__":
    cli()
