"""Domain exceptions raised by the selection engine.

Empty admissible sets are never errors. These exceptions cover structural
problems only: a malformed catalog or invalid use of the engine API.
"""

from __future__ import annotations


class ConfiguratorError(Exception):
    """Base class for engine errors."""

    pass


class CatalogIntegrityError(ConfiguratorError):
    """Raised when the resolver meets a malformed catalog entry.

    Attributes:
        entry_id: Id of the offending entry.
    """

    def __init__(self, message: str, entry_id: str | None = None) -> None:
        self.entry_id = entry_id
        super().__init__(message)


class InvalidDriverValue(ConfiguratorError):
    """Raised when a driver is set to a value absent from the catalog.

    The previous driver value is retained.

    Attributes:
        driver: camelCase driver name.
        value: The rejected value.
    """

    def __init__(self, driver: str, value: object, reason: str = "") -> None:
        self.driver = driver
        self.value = value
        message = f"Invalid value for {driver}: {value!r}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class InadmissibleSelectionWrite(ConfiguratorError):
    """Raised when a dependent selection targets an id outside the admissible set.

    Attributes:
        kind: Entry kind of the write.
        entry_id: The rejected id.
    """

    def __init__(self, kind: str, entry_id: str) -> None:
        self.kind = kind
        self.entry_id = entry_id
        super().__init__(f"{kind} {entry_id!r} is not admissible for the current drivers")


class SelectionRestoreError(ConfiguratorError):
    """Raised when a persisted selection payload is malformed."""

    pass
