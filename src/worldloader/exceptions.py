"""Custom exceptions for world loading."""


class WorldLoaderError(Exception):
    """Base exception for world loader errors."""

    pass


class ConfigParseError(WorldLoaderError):
    """Raised when a world configuration cannot be read or validated."""

    pass


class StreamFormatError(ConfigParseError):
    """Raised when a client sync stream is truncated or malformed."""

    pass


class WorldNotReadyError(WorldLoaderError):
    """Raised when a handle's configuration is read before it is attached."""

    pass


class RegistryError(WorldLoaderError):
    """Base exception for identifier registry errors."""

    pass


class IdentifierRangeError(RegistryError):
    """Raised when an identifier falls outside the registry's namespace."""

    pass


class RegistryFullError(RegistryError):
    """Raised when no free identifier is left to allocate."""

    pass
