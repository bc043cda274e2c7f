"""Handle for a single loaded world."""

from typing import Any

from .exceptions import WorldNotReadyError
from .types import Configuration, RuntimeWorldRef


class WorldHandle:
    """Binds a world name to its configuration and the host's world objects.

    The configuration is attached exactly once, before the handle is installed
    in a slot. The runtime and client bindings are only recorded; their
    lifetime belongs to the host.
    """

    def __init__(self, name: str):
        if not name:
            raise ValueError("world name must not be empty")
        self._name = name
        self._configuration: Configuration | None = None
        self._runtime_binding: RuntimeWorldRef | None = None
        self._client_binding: Any = None

    def __repr__(self) -> str:
        return f"WorldHandle(name={self._name!r}, ready={self.is_ready})"

    @property
    def name(self) -> str:
        """World name, fixed at construction."""
        return self._name

    @property
    def is_ready(self) -> bool:
        """Whether a configuration has been attached."""
        return self._configuration is not None

    @property
    def configuration(self) -> Configuration:
        """The attached configuration.

        Raises:
            WorldNotReadyError: If no configuration has been attached yet.
        """
        if self._configuration is None:
            raise WorldNotReadyError(f"world {self._name!r} has no configuration yet")
        return self._configuration

    @property
    def runtime_binding(self) -> RuntimeWorldRef | None:
        """The host's live world object, once bound."""
        return self._runtime_binding

    @property
    def client_binding(self) -> Any:
        """The host's client world object, for worlds loaded from a stream."""
        return self._client_binding

    @property
    def claimed_identifiers(self) -> frozenset[int]:
        """Ids claimed by this world's configuration."""
        return frozenset(self.configuration.claimed_identifiers())

    def provide_configuration(self, configuration: Configuration) -> None:
        """Attach the configuration. Can only be done once."""
        if self._configuration is not None:
            raise RuntimeError(f"world {self._name!r} already has a configuration")
        self._configuration = configuration

    def provide_client_configuration(
        self, client_binding: Any, configuration: Configuration
    ) -> None:
        """Attach a streamed configuration together with the client world."""
        self.provide_configuration(configuration)
        self._client_binding = client_binding

    def bind_runtime(self, runtime_ref: RuntimeWorldRef) -> None:
        """Record the host's live world object."""
        self._runtime_binding = runtime_ref
