"""
Container extension.

Wraps a callback that runs once while the container is compiled, allowing
last-minute changes to definitions and parameters.
"""

from typing import Any, Callable


class Extension:
    """Compile-time hook for a container."""

    def __init__(self, callback: Callable[[Any], Any]):
        if not callable(callback):
            raise TypeError(
                f"Extension expects a callable, got {type(callback).__name__} instead."
            )
        self._callback = callback

    def compile(self, container):
        """Run the callback against the given container."""
        self._callback(container)

    def __repr__(self) -> str:
        name = getattr(self._callback, '__qualname__', repr(self._callback))
        return f"Extension({name})"
