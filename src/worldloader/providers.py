"""Configuration providers backed by TOML directories and sync streams."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import BinaryIO

import structlog

from .config import CustomBiomeConfig, WorldConfig, load_world_config, parse_world_config_json
from .exceptions import ConfigParseError
from .handle import WorldHandle
from .registry import BiomeIdRegistry
from .wire import read_blob

logger = structlog.get_logger()


@dataclass(frozen=True)
class WorldConfiguration:
    """A world's configuration with every custom biome bound to an id."""

    world_name: str
    config: WorldConfig
    biome_ids: dict[str, int] = field(default_factory=dict)
    from_client: bool = False

    def claimed_identifiers(self) -> frozenset[int]:
        """Ids this world's biomes were bound to."""
        return frozenset(self.biome_ids.values())


@dataclass
class TomlConfigProvider:
    """Loads world configurations and registers their biome ids."""

    registry: BiomeIdRegistry

    # (world, biome) -> id handed out by allocate()
    _allocated: dict[tuple[str, str], int] = field(default_factory=dict, init=False, repr=False)
    # id -> world that last took it through this provider
    _owners: dict[int, str] = field(default_factory=dict, init=False, repr=False)

    def from_directory(self, path: Path, handle: WorldHandle) -> WorldConfiguration:
        """Load the configuration in a world's config directory.

        Fixed biome ids are claimed first, then biomes without an id get the
        lowest free one. A world loaded again keeps the ids allocated to it
        last time, as long as no other world has taken them since. An id
        already held by someone else is still recorded as claimed by this
        world.

        Raises:
            ConfigParseError: If the configuration is missing or invalid.
            RegistryError: If an id is out of range or the registry is full.
        """
        config = load_world_config(path)

        biome_ids: dict[str, int] = {}
        allocated: dict[str, int] = {}
        newly_claimed: list[int] = []
        try:
            for name, biome_id in config.requested_ids().items():
                if self.registry.claim(biome_id):
                    newly_claimed.append(biome_id)
                else:
                    logger.warning(
                        "biome_id_conflict",
                        world=handle.name,
                        biome=name,
                        biome_id=biome_id,
                    )
                biome_ids[name] = biome_id

            for name, biome in config.biomes.items():
                if biome.id is None:
                    biome_id = self._previous_allocation(handle.name, name, biome_ids)
                    if biome_id is None:
                        biome_id = self.registry.allocate()
                        newly_claimed.append(biome_id)
                    elif self.registry.claim(biome_id):
                        newly_claimed.append(biome_id)
                    allocated[name] = biome_id
                    biome_ids[name] = biome_id
        except Exception:
            # Hand back what this load took so a failed load leaves no trace
            self.registry.release(newly_claimed)
            raise

        for biome_id in newly_claimed:
            self._owners[biome_id] = handle.name
        for name, biome_id in allocated.items():
            self._allocated[(handle.name, name)] = biome_id

        resolved = config.model_copy(
            update={
                "biomes": {
                    name: CustomBiomeConfig(id=biome_ids[name], replace_to=biome.replace_to)
                    for name, biome in config.biomes.items()
                }
            }
        )

        logger.info(
            "world_config_loaded",
            world=handle.name,
            path=str(path),
            biome_count=len(biome_ids),
        )
        return WorldConfiguration(world_name=handle.name, config=resolved, biome_ids=biome_ids)

    def _previous_allocation(
        self, world_name: str, biome_name: str, taken: dict[str, int]
    ) -> int | None:
        """Id allocated to this biome on an earlier load, if it can be reused."""
        biome_id = self._allocated.get((world_name, biome_name))
        if biome_id is None or self._owners.get(biome_id) != world_name:
            return None
        if biome_id in taken.values():
            return None
        return biome_id

    def from_stream(self, stream: BinaryIO, handle: WorldHandle) -> WorldConfiguration:
        """Load the configuration carried by the rest of a sync stream.

        Streamed ids were resolved by the server; they are not registered
        locally.

        Raises:
            ConfigParseError: If the payload is truncated or invalid.
        """
        config = parse_world_config_json(read_blob(stream))

        missing = [name for name, biome in config.biomes.items() if biome.id is None]
        if missing:
            raise ConfigParseError(f"Streamed biomes without an id: {sorted(missing)}")

        logger.info("client_world_config_received", world=handle.name, biome_count=len(config.biomes))
        return WorldConfiguration(
            world_name=handle.name,
            config=config,
            biome_ids=config.requested_ids(),
            from_client=True,
        )
