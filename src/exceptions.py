"""Exception types for the known-good versions registry."""


class RegistryError(Exception):
    """Base class for registry processing errors."""


class LoadFailure(RegistryError):
    """A persisted document is missing or cannot be parsed."""

    def __init__(self, name: str, reason: str):
        self.name = name
        self.reason = reason
        super().__init__(f"Failed to load {name}: {reason}")


class WriteFailure(RegistryError):
    """A document could not be persisted."""

    def __init__(self, name: str, reason: str):
        self.name = name
        self.reason = reason
        super().__init__(f"Failed to write {name}: {reason}")


class MalformedVersionError(RegistryError, ValueError):
    """A version string is not a dotted sequence of 3-4 integers."""

    def __init__(self, version: object, reason: str = "expected 3-4 dot-separated integers"):
        self.version = version
        self.reason = reason
        super().__init__(f"Malformed version {version!r}: {reason}")


class ConfigError(RegistryError):
    """Configuration file content is invalid."""
