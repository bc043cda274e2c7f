"""Lifecycle management for the single active world."""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, BinaryIO

import structlog

from .handle import WorldHandle
from .reclaim import release_claimed_identifiers
from .types import ConfigProvider, HostContext, IdentifierRegistry, RuntimeWorldRef, WorldState
from .wire import read_string

logger = structlog.get_logger()


@dataclass
class WorldSlot:
    """Holds the one active world and its lifecycle state."""

    world: WorldHandle | None = None
    state: WorldState = WorldState.UNLOADED

    def install(self, handle: WorldHandle) -> None:
        self.world = handle
        self.state = WorldState.LOADED

    def clear(self) -> None:
        self.world = None
        self.state = WorldState.UNLOADED


class WorldLifecycleManager:
    """Loads and unloads the active world at the host's lifecycle hooks.

    Only one world can be active at a time. When it is unloaded, the biome
    ids its configuration claimed are handed back to the registry so the next
    world can reuse them.

    All hooks are expected to be called from the host's own thread; the
    manager does no locking.
    """

    def __init__(
        self,
        configs_root: Path | str,
        provider: ConfigProvider,
        registry: IdentifierRegistry,
        slot: WorldSlot | None = None,
    ):
        if configs_root is None or str(configs_root) == "":
            raise ValueError("configs_root must be set")
        self._configs_root = Path(configs_root)
        self._provider = provider
        self._registry = registry
        self._slot = slot if slot is not None else WorldSlot()

    @property
    def configs_root(self) -> Path:
        """Base directory for world config directories."""
        return self._configs_root

    @property
    def state(self) -> WorldState:
        """Lifecycle state of the slot."""
        return self._slot.state

    def world_dir(self, world_name: str) -> Path:
        """Config directory for a world."""
        return self._configs_root / "worlds" / world_name

    def lookup_by_name(self, world_name: str) -> WorldHandle | None:
        """Get the active world if it has the given name."""
        world = self._slot.world
        if world is None or world.name != world_name:
            return None
        return world

    def lookup_by_runtime(self, runtime_ref: RuntimeWorldRef) -> WorldHandle | None:
        """Get the active world if it matches the host's world object."""
        return self.lookup_by_name(runtime_ref.name())

    def active_handle(self) -> WorldHandle | None:
        """Get the active world, whatever its name."""
        return self._slot.world

    def on_pre_registration(self, host_context: HostContext) -> WorldHandle | None:
        """Tentatively load a world's configs before the host commits to it.

        Dedicated hosts need biome ids registered before they decide which
        world type is in play, so the configs are loaded if a config
        directory exists for the session's world. Other hosts register
        differently and must not load anything yet.

        Returns:
            The installed handle, or None if nothing was loaded.
        """
        if not host_context.is_dedicated_mode:
            logger.debug("pre_registration_skipped", reason="not_dedicated")
            return None

        world_name = host_context.session_folder_name
        world_dir = self.world_dir(world_name)
        if not world_dir.is_dir():
            logger.debug("pre_registration_skipped", reason="no_config_dir", world=world_name)
            return None

        logger.info("world_loading", world=world_name, path=str(world_dir), hook="pre_registration")
        handle = self._load_from_directory(world_name, world_dir)
        self._install(handle)
        return handle

    def demand_load(self, runtime_ref: RuntimeWorldRef) -> WorldHandle:
        """Load the world the host has committed to and bind it.

        A new handle is always built, even if a world of the same name is
        already active, because hosts may recreate their world object without
        a shutdown in between. The previous handle is replaced without
        releasing its ids.

        Raises:
            ConfigParseError: If the world's configuration cannot be loaded.
        """
        world_name = runtime_ref.name()
        world_dir = self.world_dir(world_name)

        logger.info("world_loading", world=world_name, path=str(world_dir), hook="demand_load")
        handle = self._load_from_directory(world_name, world_dir)

        previous = self._slot.world
        if previous is not None:
            logger.warning(
                "world_replaced_without_reclaim",
                world=world_name,
                previous_world=previous.name,
                biome_ids=sorted(previous.claimed_identifiers),
            )

        self._install(handle)
        handle.bind_runtime(runtime_ref)
        return handle

    def demand_client_load(self, stream: BinaryIO, client_binding: Any = None) -> WorldHandle:
        """Load a world whose configuration arrives over a sync stream.

        The handle only becomes active if no world is active yet; an active
        world is never evicted and no ids are released here.

        Returns:
            The handle built from the stream, installed or not.

        Raises:
            ConfigParseError: If the stream is truncated or malformed.
        """
        handle = WorldHandle(read_string(stream))
        logger.info("world_loading", world=handle.name, hook="demand_client_load")
        configuration = self._provider.from_stream(stream, handle)
        handle.provide_client_configuration(client_binding, configuration)

        active = self._slot.world
        if active is None:
            self._install(handle)
        else:
            logger.info("client_world_ignored", world=handle.name, active_world=active.name)
        return handle

    def on_shutdown(self) -> None:
        """Host process stopped."""
        self.unload()

    def on_disconnect(self) -> None:
        """Client left the server."""
        self.unload()

    def unload(self) -> None:
        """Release the active world's ids and empty the slot."""
        world = self._slot.world
        if world is None:
            return

        logger.info("world_unloading", world=world.name)
        self._slot.state = WorldState.UNLOADING
        release_claimed_identifiers(world, self._registry)
        self._slot.clear()

    def _load_from_directory(self, world_name: str, world_dir: Path) -> WorldHandle:
        """Build a handle with its configuration attached, without installing it."""
        previous_state = self._slot.state
        self._slot.state = WorldState.LOADING
        try:
            handle = WorldHandle(world_name)
            handle.provide_configuration(self._provider.from_directory(world_dir, handle))
        except Exception:
            self._slot.state = previous_state
            raise
        return handle

    def _install(self, handle: WorldHandle) -> None:
        self._slot.install(handle)
        logger.info("world_loaded", world=handle.name, biome_ids=sorted(handle.claimed_identifiers))
