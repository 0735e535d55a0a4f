class CuratorError(Exception):
    """Base class for all custom exceptions in the curator library."""

    pass


class ConfigError(CuratorError):
    """Raised when curator settings cannot be loaded or validated."""

    pass


class DatasetFormatError(CuratorError):
    """Raised when an input listing does not have a recognised top-level shape."""

    pass


class SnapshotError(CuratorError):
    """Raised when a serialized snapshot cannot be read back."""

    pass


class SnapshotSchemaError(SnapshotError):
    """Raised when a snapshot declares an unsupported schema version."""

    def __init__(self, *, expected: int, found: int) -> None:
        self.expected = expected
        self.found = found
        super().__init__(f"unsupported snapshot schema version {found}; expected {expected}")


__all__ = [
    "CuratorError",
    "ConfigError",
    "DatasetFormatError",
    "SnapshotError",
    "SnapshotSchemaError",
]
