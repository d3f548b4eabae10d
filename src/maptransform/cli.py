"""Typer-based CLI entry point."""

from __future__ import annotations

import functools
import logging
from dataclasses import asdict
from pathlib import Path
from typing import Any, Optional

import typer
from rich.console import Console
from rich.table import Table

from .errors import MapTransformError
from .geo.point import LngLat, Point
from .geo.transform import CoveringOptions, Transform, TransformState
from .schema import load_view_config

# Viewport used when neither the configuration file nor the options give one.
_DEFAULT_VIEWPORT = (512, 512)

app = typer.Typer(help="Inspect a Web Mercator camera: covering tiles and screen projections")
console = Console()


def _handle_errors(func):
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except MapTransformError as exc:
            typer.echo(f"Error: {exc}", err=True)
            raise typer.Exit(1) from exc

    return wrapper


def _without_none(**values: Any) -> dict[str, Any]:
    return {key: value for key, value in values.items() if value is not None}


@app.callback()
@_handle_errors
def main(
    ctx: typer.Context,
    config: Optional[Path] = typer.Option(
        None, "--config", "-c", exists=True, dir_okay=False, help="View configuration JSON file"
    ),
    lng: Optional[float] = typer.Option(None, help="Centre longitude"),
    lat: Optional[float] = typer.Option(None, help="Centre latitude"),
    zoom: Optional[float] = typer.Option(None, help="Camera zoom"),
    bearing: Optional[float] = typer.Option(None, help="Bearing in degrees, clockwise"),
    pitch: Optional[float] = typer.Option(None, help="Pitch in degrees"),
    altitude: Optional[float] = typer.Option(None, help="Camera altitude in viewport heights"),
    width: Optional[int] = typer.Option(None, help="Viewport width in pixels"),
    height: Optional[int] = typer.Option(None, help="Viewport height in pixels"),
    tile_size: Optional[int] = typer.Option(None, help="Tile size of the camera in pixels"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log debug output"),
) -> None:
    """Configure the camera shared by every command."""

    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING)

    state, covering = load_view_config(config) if config else (TransformState(), CoveringOptions())
    data = asdict(state)
    data.update(
        _without_none(
            zoom=zoom,
            bearing=bearing,
            pitch=pitch,
            altitude=altitude,
            width=width,
            height=height,
            tile_size=tile_size,
        )
    )
    if lng is not None or lat is not None:
        data["center"] = [
            state.center.lng if lng is None else lng,
            state.center.lat if lat is None else lat,
        ]
    if not data["width"]:
        data["width"] = _DEFAULT_VIEWPORT[0]
    if not data["height"]:
        data["height"] = _DEFAULT_VIEWPORT[1]

    ctx.obj = {
        "transform": Transform(TransformState.from_mapping(data)),
        "covering": covering,
    }


@app.command()
@_handle_errors
def cover(
    ctx: typer.Context,
    source_tile_size: Optional[int] = typer.Option(None, help="Tile size of the source"),
    min_zoom: Optional[int] = typer.Option(None, help="Source minimum zoom"),
    max_zoom: Optional[int] = typer.Option(None, help="Source maximum zoom"),
    round_zoom: Optional[bool] = typer.Option(None, "--round-zoom/--floor-zoom"),
    reparse_overscaled: Optional[bool] = typer.Option(None, "--reparse-overscaled/--no-reparse-overscaled"),
) -> None:
    """List the tiles covering the viewport."""

    transform: Transform = ctx.obj["transform"]
    data = asdict(ctx.obj["covering"])
    data.update(
        _without_none(
            tile_size=source_tile_size,
            min_zoom=min_zoom,
            max_zoom=max_zoom,
            round_zoom=round_zoom,
            reparse_overscaled=reparse_overscaled,
        )
    )
    options = CoveringOptions.from_mapping(data)
    tiles = transform.covering_tiles(options)

    table = Table(title=f"Covering zoom {transform.covering_zoom_level(options)}")
    table.add_column("tile")
    table.add_column("w", justify="right")
    table.add_column("id", justify="right")
    for tile in tiles:
        table.add_row(str(tile), str(tile.w), str(tile.id))
    console.print(table)
    console.print(f"[green]{len(tiles)} tiles")


@app.command()
@_handle_errors
def locate(
    ctx: typer.Context,
    x: float = typer.Argument(..., help="Screen x in pixels"),
    y: float = typer.Argument(..., help="Screen y in pixels"),
) -> None:
    """Print the location under a screen point."""

    transform: Transform = ctx.obj["transform"]
    location = transform.point_location(Point(x, y))
    console.print(f"{location.lng:.6f}, {location.lat:.6f}")


@app.command()
@_handle_errors
def project(
    ctx: typer.Context,
    lng: float = typer.Argument(..., help="Longitude"),
    lat: float = typer.Argument(..., help="Latitude"),
) -> None:
    """Print the screen point showing a location."""

    transform: Transform = ctx.obj["transform"]
    point = transform.location_point(LngLat(lng, lat))
    console.print(f"{point.x:.3f}, {point.y:.3f}")


if __name__ == "__main__":
    app()
