"""Loader settings from TOML files."""

import tomllib
from pathlib import Path

from pydantic import BaseModel, Field

from .registry import DEFAULT_REGISTRY_CAPACITY


class LoaderSettings(BaseModel):
    """Loader settings."""

    configs_root: str = "."
    registry_capacity: int = Field(default=DEFAULT_REGISTRY_CAPACITY, gt=0)
    log_level: str = "info"


class Settings(BaseModel):
    """Complete settings file."""

    loader: LoaderSettings = Field(default_factory=LoaderSettings)


def load_settings(settings_path: Path) -> Settings:
    """Load settings from a TOML file.

    Args:
        settings_path: Path to the TOML settings file.

    Returns:
        Parsed Settings object.

    Raises:
        FileNotFoundError: If settings file doesn't exist.
        tomllib.TOMLDecodeError: If TOML is malformed.
    """
    with open(settings_path, "rb") as f:
        data = tomllib.load(f)
    return Settings.model_validate(data)


def find_settings(name: str, search_dir: Path | None = None) -> Path:
    """Find a settings file by name.

    Searches in the following order:
    1. Exact path if name contains path separator or ends in .toml
    2. {search_dir}/{name}.toml
    3. {search_dir}/{name}

    Args:
        name: Settings name or path.
        search_dir: Directory to search, defaults to the working directory.

    Returns:
        Path to the settings file.

    Raises:
        FileNotFoundError: If settings file is not found.
    """
    if "/" in name or name.endswith(".toml"):
        path = Path(name)
        if path.exists():
            return path
        raise FileNotFoundError(f"Settings file not found: {name}")

    search_dir = search_dir if search_dir is not None else Path.cwd()

    settings_path = search_dir / f"{name}.toml"
    if settings_path.exists():
        return settings_path

    settings_path = search_dir / name
    if settings_path.exists():
        return settings_path

    raise FileNotFoundError(f"Settings '{name}' not found in {search_dir}")
