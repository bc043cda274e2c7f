"""Tests for the TOML config provider."""

from io import BytesIO

import pytest

from worldloader.exceptions import ConfigParseError, IdentifierRangeError, RegistryFullError
from worldloader.handle import WorldHandle
from worldloader.providers import TomlConfigProvider, WorldConfiguration
from worldloader.registry import BiomeIdRegistry
from worldloader.wire import write_blob


class TestFromDirectory:
    """Tests for TomlConfigProvider.from_directory."""

    def test_claims_fixed_ids(self, alpha_root, registry):
        """Fixed ids from the config are claimed in the registry."""
        provider = TomlConfigProvider(registry)

        configuration = provider.from_directory(alpha_root / "worlds" / "alpha", WorldHandle("alpha"))

        assert isinstance(configuration, WorldConfiguration)
        assert configuration.world_name == "alpha"
        assert configuration.claimed_identifiers() == frozenset({5, 6, 7})
        assert registry.in_use() == frozenset({5, 6, 7})
        assert not configuration.from_client

    def test_allocates_missing_ids(self, configs_root, registry, write_world):
        """Biomes without an id get the lowest free ones after fixed ids."""
        world_dir = write_world(
            configs_root,
            "mixed",
            "[biomes.Marsh]\n\n[biomes.Volcano]\nid = 0\n\n[biomes.Reef]\n",
        )
        provider = TomlConfigProvider(registry)

        configuration = provider.from_directory(world_dir, WorldHandle("mixed"))

        assert configuration.biome_ids == {"Volcano": 0, "Marsh": 1, "Reef": 2}
        assert configuration.config.biomes["Marsh"].id == 1
        assert registry.in_use() == frozenset({0, 1, 2})

    def test_conflicting_id_still_claimed(self, alpha_root, registry):
        """An id someone else holds is still recorded as this world's claim."""
        registry.claim(6)
        provider = TomlConfigProvider(registry)

        configuration = provider.from_directory(alpha_root / "worlds" / "alpha", WorldHandle("alpha"))

        assert configuration.claimed_identifiers() == frozenset({5, 6, 7})

    def test_out_of_range_id_rolls_back(self, configs_root, write_world):
        """A failed load hands back the ids it already claimed."""
        world_dir = write_world(
            configs_root, "wide", "[biomes.Low]\nid = 3\n\n[biomes.High]\nid = 300\n"
        )
        registry = BiomeIdRegistry()
        provider = TomlConfigProvider(registry)

        with pytest.raises(IdentifierRangeError):
            provider.from_directory(world_dir, WorldHandle("wide"))

        assert registry.in_use() == frozenset()

    def test_registry_full_rolls_back(self, configs_root, write_world):
        """Running out of ids releases the ones allocated so far."""
        world_dir = write_world(configs_root, "big", "[biomes.A]\n[biomes.B]\n[biomes.C]\n")
        registry = BiomeIdRegistry(capacity=2)
        provider = TomlConfigProvider(registry)

        with pytest.raises(RegistryFullError):
            provider.from_directory(world_dir, WorldHandle("big"))

        assert registry.in_use() == frozenset()

    def test_reload_reuses_allocated_ids(self, configs_root, registry, write_world):
        """Loading the same world again keeps the ids it was allocated."""
        world_dir = write_world(configs_root, "alpha", "[biomes.Marsh]\n\n[biomes.Reef]\n")
        provider = TomlConfigProvider(registry)

        first = provider.from_directory(world_dir, WorldHandle("alpha"))
        second = provider.from_directory(world_dir, WorldHandle("alpha"))

        assert second.biome_ids == first.biome_ids == {"Marsh": 0, "Reef": 1}
        assert registry.in_use() == frozenset({0, 1})

    def test_reload_after_release_reclaims_same_ids(self, configs_root, registry, write_world):
        """A released allocation is claimed again by the same world."""
        world_dir = write_world(configs_root, "alpha", "[biomes.Marsh]\n")
        provider = TomlConfigProvider(registry)
        first = provider.from_directory(world_dir, WorldHandle("alpha"))
        registry.release(first.claimed_identifiers())

        second = provider.from_directory(world_dir, WorldHandle("alpha"))

        assert second.biome_ids == {"Marsh": 0}
        assert registry.in_use() == frozenset({0})

    def test_allocation_taken_by_other_world_not_reused(
        self, configs_root, registry, write_world
    ):
        """An id another world took after a release goes to that world."""
        alpha_dir = write_world(configs_root, "alpha", "[biomes.Marsh]\n")
        beta_dir = write_world(configs_root, "beta", "[biomes.Reef]\nid = 0\n")
        provider = TomlConfigProvider(registry)
        alpha = provider.from_directory(alpha_dir, WorldHandle("alpha"))
        registry.release(alpha.claimed_identifiers())
        provider.from_directory(beta_dir, WorldHandle("beta"))

        reloaded = provider.from_directory(alpha_dir, WorldHandle("alpha"))

        assert reloaded.biome_ids == {"Marsh": 1}
        assert registry.in_use() == frozenset({0, 1})

    def test_missing_config(self, tmp_path, registry):
        provider = TomlConfigProvider(registry)
        with pytest.raises(ConfigParseError):
            provider.from_directory(tmp_path, WorldHandle("ghost"))


class TestFromStream:
    """Tests for TomlConfigProvider.from_stream."""

    def test_reads_payload(self, registry):
        """Streamed ids become claims without touching the registry."""
        stream = BytesIO()
        write_blob(stream, b'{"biomes": {"Marsh": {"id": 9, "replace_to": "swamp"}}}')
        stream.seek(0)
        provider = TomlConfigProvider(registry)

        configuration = provider.from_stream(stream, WorldHandle("beta"))

        assert configuration.from_client
        assert configuration.claimed_identifiers() == frozenset({9})
        assert configuration.config.biomes["Marsh"].replace_to == "swamp"
        assert registry.in_use() == frozenset()

    def test_rejects_unassigned_ids(self, registry):
        """A server must send resolved ids."""
        stream = BytesIO()
        write_blob(stream, b'{"biomes": {"Marsh": {}}}')
        stream.seek(0)

        with pytest.raises(ConfigParseError, match="without an id"):
            TomlConfigProvider(registry).from_stream(stream, WorldHandle("beta"))

    def test_invalid_payload(self, registry):
        stream = BytesIO()
        write_blob(stream, b"[]")
        stream.seek(0)

        with pytest.raises(ConfigParseError):
            TomlConfigProvider(registry).from_stream(stream, WorldHandle("beta"))
