import typing as t

import yaml
from pydantic import BaseModel, Field, model_validator

# The seed carve needs a full 3x3 block inside the map.
MIN_MAP_SIZE = 3


class CaveGenConfigModel(BaseModel):
    width: int = Field(default=160, gt=0)
    height: int = Field(default=160, gt=0)
    wall_probability: float = Field(default=0.45, ge=0.0, le=1.0)
    smoothing_iterations: int = Field(default=4, ge=0)
    smoothing_threshold: int = Field(default=4, ge=0, le=9)
    random_seed: int | None = None

    @model_validator(mode="after")
    def check_seed_fits(self) -> "CaveGenConfigModel":
        if self.width < MIN_MAP_SIZE or self.height < MIN_MAP_SIZE:
            raise ValueError(
                f"map must be at least {MIN_MAP_SIZE}x{MIN_MAP_SIZE}, "
                f"got {self.width}x{self.height}"
            )
        return self


class TileAtlasConfigModel(BaseModel):
    tile_size: int = Field(default=8, gt=0)
    columns: int = Field(default=16, gt=0)
    rows: int = Field(default=9, gt=0)

    @property
    def image_size(self) -> t.Tuple[int, int]:
        return (self.columns * self.tile_size, self.rows * self.tile_size)

    @property
    def tile_count(self) -> int:
        return self.columns * self.rows


class CaveGenYamlModel(BaseModel):
    map: CaveGenConfigModel = CaveGenConfigModel()
    atlas: TileAtlasConfigModel = TileAtlasConfigModel()


def cavegen_config_from_yaml(file_path: str) -> CaveGenYamlModel:
    with open(file_path, "r") as stream:
        config = yaml.safe_load(stream)
    return CaveGenYamlModel(**(config or {}))
