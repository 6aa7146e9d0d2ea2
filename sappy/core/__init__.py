"""
Core module providing foundational components for the toolkit.

Includes the exception hierarchy and logging helpers.
"""

from .exceptions import (
    SappyError,
    CollectionError,
    MapError,
    DuplicateItemError,
    IndexOutOfRangeError,
    MissingItemError,
    LockedItemError,
    FrozenMapError,
    DependencyInjectionError,
    ResolutionError,
    ConfigurationError,
    ResolutionLookupError,
    InvalidResultError,
    MethodNotFoundError,
    ServiceNotFoundError,
    CircularDependencyError,
)
from .logging_config import (
    setup_logging,
    reset_logging,
    set_level,
    get_logger,
    configure_from_settings,
)

__all__ = [
    'SappyError',
    'CollectionError',
    'MapError',
    'DuplicateItemError',
    'IndexOutOfRangeError',
    'MissingItemError',
    'LockedItemError',
    'FrozenMapError',
    'DependencyInjectionError',
    'ResolutionError',
    'ConfigurationError',
    'ResolutionLookupError',
    'InvalidResultError',
    'MethodNotFoundError',
    'ServiceNotFoundError',
    'CircularDependencyError',
    'setup_logging',
    'reset_logging',
    'set_level',
    'get_logger',
    'configure_from_settings',
]
