"""
Structured Application Toolkit.

Protected maps, ordered collections and a small dependency-injection
container built on top of them.
"""

from .map import Map
from .collection import Collection
from .dependency_injection import (
    Container,
    Definition,
    Extension,
    Registry,
    create_container,
    get_container,
    set_container,
)

__version__ = '1.0.0'

__all__ = [
    'Map',
    'Collection',
    'Container',
    'Definition',
    'Extension',
    'Registry',
    'create_container',
    'get_container',
    'set_container',
]
