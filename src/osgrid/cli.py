import logging

import typer

from osgrid.angles import decimal_to_dms
from osgrid.core.datum_transform import convert
from osgrid.core.datums import DatumId, get_datum
from osgrid.core.errors import OsGridError
from osgrid.core.gridref import format_gridref, parse_gridref
from osgrid.core.projections import ProjectionFactory
from osgrid.domain.schemas import GeodeticPoint

app = typer.Typer(no_args_is_help=True)

logger = logging.getLogger(__name__)


def _resolve_datum(name: str) -> DatumId:
    try:
        return get_datum(name).id
    except ValueError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)


def _format_latlon(point: GeodeticPoint, fmt: str) -> str:
    if fmt == "dms":
        return f"{decimal_to_dms(point.latitude, 'lat')}, {decimal_to_dms(point.longitude, 'lon')}"
    return f"{point.latitude:.6f}, {point.longitude:.6f}"


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    """osgrid: Ordnance Survey National Grid reference and datum conversions."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@app.command()
def version() -> None:
    """Print version."""
    typer.echo("osgrid 0.1.0")


@app.command("to-latlon")
def to_latlon(
    gridref: str = typer.Argument(..., help="Grid reference, e.g. 'NU 12765 42058'"),
    datum: str = typer.Option("WGS84", "--datum", help="Output datum: [WGS84|OSGB36|ED50|Irl1975|TokyoJapan]"),
    fmt: str = typer.Option("decimal", "--format", help="Output format: [decimal|dms]"),
) -> None:
    """
    Convert an OS grid reference to latitude/longitude.
    """
    if fmt not in ("decimal", "dms"):
        typer.echo(f"Error: Unknown format {fmt!r}; expected decimal or dms.", err=True)
        raise typer.Exit(code=1)
    target = _resolve_datum(datum)

    try:
        parsed = parse_gridref(gridref)
        osgb = ProjectionFactory.create("national_grid").inverse(parsed)
        point = convert(osgb, target)
    except OsGridError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)

    logger.debug("%s -> E=%d N=%d -> %r", gridref, parsed.easting, parsed.northing, point)
    typer.echo(_format_latlon(point, fmt))


@app.command("to-gridref")
def to_gridref(
    lat: float = typer.Argument(..., help="Latitude in decimal degrees"),
    lon: float = typer.Argument(..., help="Longitude in decimal degrees"),
    datum: str = typer.Option("WGS84", "--datum", help="Datum of the input latitude/longitude"),
    digits: int = typer.Option(10, "--digits", help="Total numeric digits: 0, 2, 4, 6, 8 or 10"),
) -> None:
    """
    Convert latitude/longitude to an OS grid reference.
    """
    source = _resolve_datum(datum)

    try:
        point = convert(GeodeticPoint(latitude=lat, longitude=lon, datum=source), DatumId.OSGB36)
        gridref = ProjectionFactory.create("national_grid").forward(point)
        text = format_gridref(gridref, digits)
    except OsGridError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)

    logger.debug("(%s, %s) on %s -> E=%d N=%d", lat, lon, source.value, gridref.easting, gridref.northing)
    typer.echo(text)


@app.command("convert")
def convert_datum(
    lat: float = typer.Argument(..., help="Latitude in decimal degrees"),
    lon: float = typer.Argument(..., help="Longitude in decimal degrees"),
    from_datum: str = typer.Option(..., "--from", help="Source datum"),
    to_datum: str = typer.Option(..., "--to", help="Target datum"),
    height: float = typer.Option(0.0, "--height", help="Height above the source ellipsoid, metres"),
) -> None:
    """
    Convert a latitude/longitude between datums (7-parameter Helmert transform).
    """
    source = _resolve_datum(from_datum)
    target = _resolve_datum(to_datum)

    try:
        point = convert(GeodeticPoint(latitude=lat, longitude=lon, height=height, datum=source), target)
    except OsGridError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)

    typer.echo(f"{point.latitude:.6f}, {point.longitude:.6f}, {point.height:.3f}")


if __name__ == "__main__":
    app()
