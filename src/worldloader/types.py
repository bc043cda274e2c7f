"""Core types and collaborator protocols for world loading."""

from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, BinaryIO, Iterable, Protocol

from pydantic import BaseModel

if TYPE_CHECKING:
    from .handle import WorldHandle


class WorldState(str, Enum):
    """Lifecycle state of the active world slot."""

    UNLOADED = "unloaded"
    LOADING = "loading"
    LOADED = "loaded"
    UNLOADING = "unloading"


class HostContext(BaseModel, frozen=True):
    """What the host reports at the pre-registration hook."""

    is_dedicated_mode: bool
    session_folder_name: str


class Configuration(Protocol):
    """A loaded world configuration."""

    def claimed_identifiers(self) -> frozenset[int]:
        """Ids this configuration declares it owns."""
        ...


class ConfigProvider(Protocol):
    """Produces configurations from disk or from a client sync stream."""

    def from_directory(self, path: Path, handle: "WorldHandle") -> Configuration:
        """Load the configuration stored in a world's config directory."""
        ...

    def from_stream(self, stream: BinaryIO, handle: "WorldHandle") -> Configuration:
        """Load the configuration carried by the rest of a sync stream."""
        ...


class IdentifierRegistry(Protocol):
    """Shared allocator the loader hands ids back to."""

    def release(self, ids: Iterable[int]) -> None:
        """Mark ids as free. Must accept ids that are already free."""
        ...


class RuntimeWorldRef(Protocol):
    """The host's live world object."""

    def name(self) -> str:
        """Folder name of the world."""
        ...
