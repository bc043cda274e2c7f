"""Single active world loading with biome id reclamation."""

from .config import (
    CustomBiomeConfig,
    WorldConfig,
    WorldSettings,
    list_worlds,
    load_world_config,
)
from .exceptions import (
    ConfigParseError,
    IdentifierRangeError,
    RegistryError,
    RegistryFullError,
    StreamFormatError,
    WorldLoaderError,
    WorldNotReadyError,
)
from .handle import WorldHandle
from .manager import WorldLifecycleManager, WorldSlot
from .providers import TomlConfigProvider, WorldConfiguration
from .reclaim import release_claimed_identifiers
from .registry import BiomeIdRegistry
from .settings import LoaderSettings, Settings, find_settings, load_settings
from .types import (
    Configuration,
    ConfigProvider,
    HostContext,
    IdentifierRegistry,
    RuntimeWorldRef,
    WorldState,
)
from .wire import encode_world_packet

__all__ = [
    # Types
    "Configuration",
    "ConfigProvider",
    "HostContext",
    "IdentifierRegistry",
    "RuntimeWorldRef",
    "WorldState",
    # Lifecycle
    "WorldHandle",
    "WorldLifecycleManager",
    "WorldSlot",
    "release_claimed_identifiers",
    # Registry
    "BiomeIdRegistry",
    # Config
    "CustomBiomeConfig",
    "WorldConfig",
    "WorldSettings",
    "list_worlds",
    "load_world_config",
    "TomlConfigProvider",
    "WorldConfiguration",
    "encode_world_packet",
    # Settings
    "LoaderSettings",
    "Settings",
    "find_settings",
    "load_settings",
    # Exceptions
    "WorldLoaderError",
    "ConfigParseError",
    "StreamFormatError",
    "WorldNotReadyError",
    "RegistryError",
    "IdentifierRangeError",
    "RegistryFullError",
]
