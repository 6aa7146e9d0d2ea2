"""
Custom exception hierarchy for the toolkit.

Provides specific exception types for the containers and the
dependency-injection resolution engine.
"""

from typing import List, Optional


class SappyError(Exception):
    """Base exception for all toolkit errors."""
    pass


class CollectionError(SappyError):
    """Raised when a collection operation is not permitted."""
    pass


class MapError(SappyError):
    """Raised when a map operation is not permitted."""
    pass


class DuplicateItemError(CollectionError):
    """Raised when adding an item that already exists in a collection."""
    pass


class IndexOutOfRangeError(CollectionError):
    """Raised when a collection index is out of range."""

    def __init__(self, index: int, count: int):
        super().__init__(f"Index #{index} is out of range of 0-{count - 1}.")
        self.index = index
        self.count = count


class MissingItemError(CollectionError, MapError):
    """Raised when an item does not exist in a collection or map."""
    pass


class LockedItemError(MapError):
    """Raised when modifying or removing a locked map item."""
    pass


class FrozenMapError(MapError):
    """Raised when modifying a frozen map."""
    pass


class DependencyInjectionError(SappyError):
    """Base exception for dependency-injection errors."""
    pass


class ResolutionError(DependencyInjectionError):
    """Raised when a definition cannot be turned into a service."""
    pass


class ConfigurationError(ResolutionError):
    """Raised when a definition has no, or more than one, instantiation strategy."""
    pass


class ResolutionLookupError(ResolutionError):
    """Raised when a named callable, factory or module export cannot be found."""
    pass


class InvalidResultError(ResolutionError):
    """Raised when a definition produces a scalar instead of an object."""
    pass


class MethodNotFoundError(ResolutionError):
    """Raised when a method call targets a missing or non-callable member."""

    def __init__(self, message: str, method: Optional[str] = None):
        super().__init__(message)
        self.method = method


class ServiceNotFoundError(DependencyInjectionError):
    """Raised when a service has no registered definition."""

    def __init__(self, service_id: str, requested_by: Optional[str] = None):
        if requested_by is not None:
            message = f'Service "{service_id}" does not exist, requested by "{requested_by}".'
        else:
            message = f'Service "{service_id}" does not exist.'
        super().__init__(message)
        self.service_id = service_id
        self.requested_by = requested_by


class CircularDependencyError(DependencyInjectionError):
    """Raised when a service is requested while it is still being loaded."""

    def __init__(self, service_id: str, chain: List[str]):
        super().__init__(
            f'Circular reference detected while loading service "{service_id}": '
            f"{' -> '.join(chain)}"
        )
        self.service_id = service_id
        self.chain = list(chain)
