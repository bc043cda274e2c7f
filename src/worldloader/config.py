"""World configuration loading from TOML files."""

import tomllib
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError

from .exceptions import ConfigParseError

# File expected inside every world's config directory
WORLD_CONFIG_FILENAME = "WorldConfig.toml"


class WorldSettings(BaseModel):
    """World-wide generation settings from TOML."""

    seed: int | None = Field(default=None, description="World seed (None = host picks)")
    generator: str = Field(default="normal", description="Terrain generator mode")
    biome_mode: str = Field(default="normal", description="Biome layout mode")
    world_height_cap: int = Field(default=256, description="Maximum terrain height")


class CustomBiomeConfig(BaseModel):
    """A custom biome declared by a world."""

    id: int | None = Field(default=None, ge=0, description="Generation id (None = allocate)")
    replace_to: str | None = Field(
        default=None, description="Vanilla biome sent to clients instead"
    )


class WorldConfig(BaseModel):
    """Complete configuration for one world."""

    world: WorldSettings = Field(default_factory=WorldSettings)
    biomes: dict[str, CustomBiomeConfig] = Field(default_factory=dict)

    def requested_ids(self) -> dict[str, int]:
        """Biome name -> id for biomes that ask for a fixed id."""
        return {
            name: biome.id for name, biome in self.biomes.items() if biome.id is not None
        }


def load_world_config(world_dir: Path) -> WorldConfig:
    """Load a world's configuration from its config directory.

    Args:
        world_dir: The world's config directory.

    Returns:
        Parsed WorldConfig object.

    Raises:
        ConfigParseError: If the file is missing, is malformed TOML or
            fails validation.
    """
    config_path = world_dir / WORLD_CONFIG_FILENAME
    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except (FileNotFoundError, NotADirectoryError) as e:
        raise ConfigParseError(f"World config not found: {config_path}") from e
    except (tomllib.TOMLDecodeError, UnicodeDecodeError) as e:
        raise ConfigParseError(f"Malformed TOML in {config_path}: {e}") from e

    try:
        return WorldConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigParseError(f"Invalid world config {config_path}: {e}") from e


def parse_world_config_json(payload: bytes) -> WorldConfig:
    """Validate a JSON-encoded world configuration.

    Raises:
        ConfigParseError: If the payload is not a valid configuration.
    """
    try:
        return WorldConfig.model_validate_json(payload)
    except ValidationError as e:
        raise ConfigParseError(f"Invalid streamed world config: {e}") from e


def list_worlds(configs_root: Path) -> list[str]:
    """List world names that have a config directory under configs_root."""
    worlds_dir = configs_root / "worlds"
    if not worlds_dir.exists():
        return []
    return sorted(p.name for p in worlds_dir.iterdir() if p.is_dir())
