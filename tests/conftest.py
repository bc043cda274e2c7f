"""Shared test fixtures for world loader tests."""

from dataclasses import dataclass
from io import BytesIO
from pathlib import Path
from typing import Callable

import pytest

from worldloader.config import WORLD_CONFIG_FILENAME, CustomBiomeConfig, WorldConfig
from worldloader.manager import WorldLifecycleManager
from worldloader.providers import TomlConfigProvider
from worldloader.registry import BiomeIdRegistry
from worldloader.wire import encode_world_packet


ALPHA_CONFIG_TOML = """
[world]
seed = 1234
generator = "normal"

[biomes.Volcano]
id = 5

[biomes.Glacier]
id = 6

[biomes.Mesa]
id = 7
replace_to = "desert"
"""


@dataclass
class FakeRuntimeWorld:
    """Stand-in for the host's live world object."""

    folder_name: str

    def name(self) -> str:
        return self.folder_name


@pytest.fixture
def runtime_world() -> Callable[[str], FakeRuntimeWorld]:
    """Factory for host world objects with a given folder name."""
    return FakeRuntimeWorld


@pytest.fixture
def write_world() -> Callable[[Path, str, str], Path]:
    """Factory that creates a world config directory with a WorldConfig.toml."""

    def _write(configs_root: Path, name: str, toml_text: str) -> Path:
        world_dir = configs_root / "worlds" / name
        world_dir.mkdir(parents=True, exist_ok=True)
        (world_dir / WORLD_CONFIG_FILENAME).write_text(toml_text)
        return world_dir

    return _write


@pytest.fixture
def client_stream() -> Callable[[str, dict[str, int]], BytesIO]:
    """Factory for sync streams carrying a world with the given biome ids."""

    def _stream(name: str, biome_ids: dict[str, int]) -> BytesIO:
        config = WorldConfig(
            biomes={
                biome: CustomBiomeConfig(id=biome_id)
                for biome, biome_id in biome_ids.items()
            }
        )
        return BytesIO(encode_world_packet(name, config))

    return _stream


@pytest.fixture
def configs_root(tmp_path: Path) -> Path:
    """Empty configs root."""
    return tmp_path / "configs"


@pytest.fixture
def alpha_root(configs_root: Path, write_world) -> Path:
    """Configs root with world 'alpha' claiming ids 5, 6 and 7."""
    write_world(configs_root, "alpha", ALPHA_CONFIG_TOML)
    return configs_root


@pytest.fixture
def registry() -> BiomeIdRegistry:
    return BiomeIdRegistry()


@pytest.fixture
def manager(alpha_root: Path, registry: BiomeIdRegistry) -> WorldLifecycleManager:
    """Manager over the alpha configs root with a real registry."""
    return WorldLifecycleManager(
        configs_root=alpha_root,
        provider=TomlConfigProvider(registry),
        registry=registry,
    )
