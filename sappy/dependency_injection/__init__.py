"""
Dependency injection module.

Provides the container, service definitions, extensions and the registry
used to look up named callables.
"""

from .registry import Registry
from .definition import Definition
from .extension import Extension
from .container import Container, create_container, get_container, set_container

__all__ = [
    'Registry',
    'Definition',
    'Extension',
    'Container',
    'create_container',
    'get_container',
    'set_container',
]
