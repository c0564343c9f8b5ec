import io
import sys
import typing as t

import typer
from PIL import Image
from pydantic import ValidationError

from cavegen.data_models import (
    CaveGenConfigModel,
    CaveGenYamlModel,
    TileAtlasConfigModel,
    cavegen_config_from_yaml,
)
from cavegen.exceptions import (
    AtlasSizeError,
    ConfigurationError,
    ResourceExhaustedError,
)
from cavegen.mapgen.floor import generate_floor_tiles
from cavegen.mapgen.mapgen import MapGen
from cavegen.mapgen.random_source import make_random_source
from cavegen.rendering.atlas import TileAtlas
from cavegen.rendering.compositor import render_tile_map
from cavegen.rendering.wall_atlas import generate_wall_atlas, wall_atlas_config
from cavegen.utils.utils import CaveGenLogger

app = typer.Typer()

EXIT_FAILURE = 1
EXIT_CONFIG_ERROR = 2


def check_output(output: str):
    if output == "-" and sys.stdout.isatty():
        typer.echo("Not writing output to stdout because it's a tty", err=True)
        raise typer.Exit(code=EXIT_FAILURE)


def write_image(image: Image.Image, output: str):
    """Encodes the whole image before touching the destination so that a
    failure never leaves a truncated file behind."""
    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    data = buffer.getvalue()
    if output == "-":
        sys.stdout.buffer.write(data)
        sys.stdout.buffer.flush()
    else:
        with open(output, "wb") as f:
            f.write(data)


def build_config(
    config_file: str | None, overrides: t.Dict[str, t.Any]
) -> CaveGenYamlModel:
    base = cavegen_config_from_yaml(config_file) if config_file else CaveGenYamlModel()
    map_values = base.map.model_dump()
    map_values.update({k: v for k, v in overrides.items() if v is not None})
    return CaveGenYamlModel(map=CaveGenConfigModel(**map_values), atlas=base.atlas)


@app.command()
def gen_map(
    output: str,
    config_file: t.Annotated[t.Optional[str], typer.Option("--config")] = None,
    width: t.Annotated[t.Optional[int], typer.Option("--width")] = None,
    height: t.Annotated[t.Optional[int], typer.Option("--height")] = None,
    wall_probability: t.Annotated[
        t.Optional[float], typer.Option("--wall-probability")
    ] = None,
    iterations: t.Annotated[t.Optional[int], typer.Option("--iterations")] = None,
    threshold: t.Annotated[t.Optional[int], typer.Option("--threshold")] = None,
    seed: t.Annotated[t.Optional[int], typer.Option("--seed")] = None,
    atlas_file: t.Annotated[t.Optional[str], typer.Option("--atlas")] = None,
    tile_size: t.Annotated[t.Optional[int], typer.Option("--tile-size")] = None,
    show_ascii: t.Annotated[bool, typer.Option("--ascii")] = False,
):
    """Generates a cave map and renders it with a wall tile atlas."""
    check_output(output)
    logger = CaveGenLogger(stream=sys.stderr)

    try:
        config = build_config(
            config_file,
            {
                "width": width,
                "height": height,
                "wall_probability": wall_probability,
                "smoothing_iterations": iterations,
                "smoothing_threshold": threshold,
                "random_seed": seed,
            },
        )
        atlas_config = config.atlas
        if tile_size is not None:
            atlas_config = TileAtlasConfigModel(
                tile_size=tile_size,
                columns=atlas_config.columns,
                rows=atlas_config.rows,
            )
    except (ValidationError, ConfigurationError) as e:
        typer.echo(f"Invalid configuration: {e}", err=True)
        raise typer.Exit(code=EXIT_CONFIG_ERROR)

    try:
        if atlas_file is None:
            atlas_config = wall_atlas_config(atlas_config.tile_size)
            atlas = TileAtlas(generate_wall_atlas(atlas_config.tile_size), atlas_config)
        else:
            atlas = TileAtlas.load(atlas_file, atlas_config)

        mapgen = MapGen(config.map, logger=logger)
        tiles = mapgen.gen_tiles()
        if show_ascii:
            assert mapgen.map is not None
            typer.echo(mapgen.map.to_ascii(), err=True)
        image = render_tile_map(tiles, atlas)
    except ResourceExhaustedError as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(code=EXIT_FAILURE)
    except (AtlasSizeError, OSError) as e:
        typer.echo(f"Error loading tiles: {e}", err=True)
        raise typer.Exit(code=EXIT_FAILURE)

    try:
        write_image(image, output)
    except OSError as e:
        typer.echo(f"Error writing {output}: {e}", err=True)
        raise typer.Exit(code=EXIT_FAILURE)


@app.command()
def gen_floor(
    atlas_file: str,
    output: str,
    width: t.Annotated[int, typer.Option("--width")] = 16,
    height: t.Annotated[int, typer.Option("--height")] = 9,
    tile_size: t.Annotated[int, typer.Option("--tile-size")] = 64,
    seed: t.Annotated[t.Optional[int], typer.Option("--seed")] = None,
):
    """Renders a random floor test map from a 16x16 floor tile atlas."""
    check_output(output)
    try:
        atlas_config = TileAtlasConfigModel(tile_size=tile_size, columns=16, rows=16)
        tiles = generate_floor_tiles(width, height, make_random_source(seed))
    except (ValidationError, ConfigurationError) as e:
        typer.echo(f"Invalid configuration: {e}", err=True)
        raise typer.Exit(code=EXIT_CONFIG_ERROR)

    try:
        atlas = TileAtlas.load(atlas_file, atlas_config)
        image = render_tile_map(tiles, atlas, background=(0, 0))
    except (AtlasSizeError, OSError) as e:
        typer.echo(f"Error loading tiles: {e}", err=True)
        raise typer.Exit(code=EXIT_FAILURE)

    try:
        write_image(image, output)
    except OSError as e:
        typer.echo(f"Error writing {output}: {e}", err=True)
        raise typer.Exit(code=EXIT_FAILURE)


if __name__ == "__main__":
    app()
