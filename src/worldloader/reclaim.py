"""Handing a world's biome ids back to the shared registry."""

import structlog

from .handle import WorldHandle
from .types import IdentifierRegistry

logger = structlog.get_logger()


def release_claimed_identifiers(handle: WorldHandle, registry: IdentifierRegistry) -> frozenset[int]:
    """Mark every id the world claimed as free again.

    The ids come from the world's own configuration and are not checked
    against the registry; releasing an id that is already free does nothing.

    Returns:
        The ids that were handed to the registry.
    """
    ids = handle.claimed_identifiers
    registry.release(set(ids))
    logger.info("identifiers_released", world=handle.name, biome_ids=sorted(ids))
    return ids
