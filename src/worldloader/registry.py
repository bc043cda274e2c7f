"""Process-wide biome id registry."""

from dataclasses import dataclass, field
from typing import Iterable

import numpy as np
import structlog
from numpy.typing import NDArray

from .exceptions import IdentifierRangeError, RegistryFullError

logger = structlog.get_logger()


# Biome ids are stored in a single byte on the wire
DEFAULT_REGISTRY_CAPACITY = 256


@dataclass
class BiomeIdRegistry:
    """Tracks which ids in a small integer namespace are in use.

    Ids are claimed while a world's configuration loads and released again
    when the world is unloaded, so the next world can reuse them.
    """

    capacity: int = DEFAULT_REGISTRY_CAPACITY

    # In-use mask indexed by id
    _in_use: NDArray[np.bool_] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if self.capacity <= 0:
            raise ValueError(f"capacity must be positive, got {self.capacity}")
        self._in_use = np.zeros(self.capacity, dtype=np.bool_)

    def claim(self, identifier: int) -> bool:
        """Mark an id as in use.

        Returns True if the id was free, False if it was already in use.

        Raises:
            IdentifierRangeError: If the id is outside the namespace.
        """
        self._check_range(identifier)
        if self._in_use[identifier]:
            logger.debug("biome_id_already_claimed", biome_id=identifier)
            return False
        self._in_use[identifier] = True
        return True

    def allocate(self) -> int:
        """Claim and return the lowest free id.

        Raises:
            RegistryFullError: If every id is in use.
        """
        free = np.flatnonzero(~self._in_use)
        if len(free) == 0:
            raise RegistryFullError(f"all {self.capacity} ids are in use")
        identifier = int(free[0])
        self._in_use[identifier] = True
        return identifier

    def release(self, ids: Iterable[int]) -> None:
        """Mark ids as free.

        Ids that are already free or outside the namespace are ignored.
        """
        released = []
        for identifier in ids:
            if 0 <= identifier < self.capacity and self._in_use[identifier]:
                self._in_use[identifier] = False
                released.append(identifier)

        if released:
            logger.debug("biome_ids_freed", biome_ids=sorted(released))

    def is_in_use(self, identifier: int) -> bool:
        """Check whether an id is currently in use."""
        if not 0 <= identifier < self.capacity:
            return False
        return bool(self._in_use[identifier])

    def in_use(self) -> frozenset[int]:
        """All ids currently in use."""
        return frozenset(int(i) for i in np.flatnonzero(self._in_use))

    @property
    def free_count(self) -> int:
        """Number of ids available for allocation."""
        return int(self.capacity - np.count_nonzero(self._in_use))

    def _check_range(self, identifier: int) -> None:
        if not 0 <= identifier < self.capacity:
            raise IdentifierRangeError(
                f"biome id {identifier} outside 0..{self.capacity - 1}"
            )
