"""mapfence CLI.

Command-line access to a JSON-file region store: list what is stored,
check a point as a submission would, and render regions over a floor plan.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Annotated, NoReturn

import typer

from mapfence import __version__
from mapfence.config import settings
from mapfence.editor.panel import format_floors
from mapfence.regions.exceptions import StoreError
from mapfence.utils.logging import configure_logging, get_logger

app = typer.Typer(
    name="mapfence",
    help="mapfence: floor regions and playing areas for map-based games",
    add_completion=False,
)

StoreOption = Annotated[
    Path,
    typer.Option("--store", "-s", help="Path to the region store JSON document"),
]
VerboseOption = Annotated[
    int,
    typer.Option("--verbose", "-v", count=True, help="Increase verbosity (-v, -vv)"),
]
JsonOption = Annotated[bool, typer.Option("--json", help="Output as JSON")]
Percent = Annotated[float, typer.Argument(min=0.0, max=100.0)]

# Exit codes: 1 is a failed command, 2 a usage error (typer)
EXIT_FAILURE = 1
EXIT_REJECTED = 3


# =============================================================================
# Commands
# =============================================================================


@app.command()
def version(json_output: JsonOption = False) -> None:
    """Show version information."""
    if json_output:
        typer.echo(json.dumps({"version": __version__}))
    else:
        typer.echo(f"mapfence {__version__}")


@app.command()
def regions(
    store: StoreOption = settings.STORE_PATH,
    verbose: VerboseOption = 0,
    json_output: JsonOption = False,
) -> None:
    """List stored regions in creation order."""
    from mapfence.cli.runners import load_snapshot  # noqa: PLC0415

    _configure_logging(verbose)
    try:
        snapshot = load_snapshot(store)
    except StoreError as e:
        _fail(e, json_output)

    if json_output:
        output_data = {
            "regions": [
                {
                    "id": r.id,
                    "name": r.name,
                    "floors": list(r.floors),
                    "color": r.color,
                    "vertices": len(r.polygon),
                }
                for r in snapshot.regions
            ],
            "playing_area": (
                [p.to_tuple() for p in snapshot.playing_area.polygon]
                if snapshot.playing_area is not None
                else None
            ),
        }
        typer.echo(json.dumps(output_data, indent=2))
        return

    if snapshot.playing_area is None:
        typer.echo("Playing area: unrestricted")
    else:
        typer.echo(f"Playing area: {len(snapshot.playing_area.polygon)} vertices")
    if not snapshot.regions:
        typer.echo("No regions")
    for r in snapshot.regions:
        typer.echo(
            f"{r.id}  {r.name}  {format_floors(r.floors)}  ({len(r.polygon)} vertices)"
        )


@app.command()
def query(
    x: Percent,
    y: Percent,
    store: StoreOption = settings.STORE_PATH,
    override: Annotated[
        bool,
        typer.Option("--override", help="Ignore the playing area and offer all floors"),
    ] = False,
    verbose: VerboseOption = 0,
    json_output: JsonOption = False,
) -> None:
    """Check a map point (percent coordinates) as a submission would.

    Exits 3 when the point is outside the playing area.
    """
    from mapfence.cli.runners import run_query  # noqa: PLC0415

    _configure_logging(verbose)
    try:
        result = run_query(store, x, y, override=override)
    except StoreError as e:
        _fail(e, json_output)

    if json_output:
        typer.echo(json.dumps(result.to_dict(), indent=2))
    elif not result.accepted:
        typer.echo("Outside playing area")
    else:
        region_name = result.region.name if result.region else "none"
        typer.echo(f"Region: {region_name}")
        floors = ", ".join(str(f) for f in result.floors) if result.floors else "any"
        typer.echo(f"Floors: {floors}")

    raise typer.Exit(0 if result.accepted else EXIT_REJECTED)


@app.command()
def render(
    image: Annotated[
        Path,
        typer.Argument(
            exists=True,
            file_okay=True,
            dir_okay=False,
            readable=True,
            help="Floor-plan image",
        ),
    ],
    output: Annotated[
        Path, typer.Option("--output", "-o", help="Where to write the rendered image")
    ],
    store: StoreOption = settings.STORE_PATH,
    select: Annotated[
        str | None,
        typer.Option("--select", help="Region id to draw with vertex handles"),
    ] = None,
    verbose: VerboseOption = 0,
) -> None:
    """Render stored regions and the playing area over a floor plan."""
    from mapfence.cli.runners import run_render  # noqa: PLC0415

    _configure_logging(verbose)
    try:
        saved = run_render(image, store, output, selected_region_id=select)
    except (StoreError, OSError) as e:
        _fail(e, json_output=False)

    typer.echo(f"Overlay saved to {saved}")


# =============================================================================
# Helpers
# =============================================================================


def _configure_logging(verbose: int) -> None:
    """Configure logging based on verbosity level."""
    if verbose == 0:
        level = "WARNING"
    elif verbose == 1:
        level = "INFO"
    else:  # verbose >= 2
        level = "DEBUG"

    configure_logging(level=level)


def _fail(error: Exception, json_output: bool) -> NoReturn:
    get_logger(__name__).error("Command failed", error=str(error))
    if json_output:
        typer.echo(json.dumps({"error": str(error)}))
    else:
        typer.echo(f"Error: {error}", err=True)
    raise typer.Exit(EXIT_FAILURE) from None


if __name__ == "__main__":
    app()
