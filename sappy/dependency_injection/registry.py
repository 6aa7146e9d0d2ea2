"""
Named callable registry.

Definitions reference functions and factories by dotted name
(e.g. "app.mailer.SmtpMailer"). The first segment is looked up in the
registry, every following segment is an attribute (or mapping key) of
the previous one.
"""

from typing import Any, Dict, Mapping, Optional

from ..core.exceptions import ResolutionLookupError
from ..core.logging_config import get_logger

logger = get_logger(__name__)

_SCALARS = (bool, int, float, complex, str, bytes)


def is_scalar(value: Any) -> bool:
    """Return True for None and plain scalar values (numbers, strings, bytes)."""
    return value is None or isinstance(value, _SCALARS)


class Registry:
    """
    Explicit table of names that definitions may refer to.
    """

    def __init__(self, entries: Optional[Mapping[str, Any]] = None):
        """
        Initialize the registry.

        Args:
            entries: Optional initial name -> target mapping
        """
        self._entries: Dict[str, Any] = dict(entries or {})

    def register(self, name: str, target: Any = None):
        """
        Register a target under the given name.

        Without a target, returns a decorator:

            @registry.register('mailer')
            class Mailer: ...

        Args:
            name: Name to register (must not contain dots)
            target: Callable or object to register

        Returns:
            The target, or a decorator when no target is given
        """
        if not isinstance(name, str) or not name or '.' in name:
            raise ValueError(f"Registry names must be non-empty strings without dots, got {name!r}")

        if target is None:
            def decorator(obj):
                self.register(name, obj)
                return obj
            return decorator

        if name in self._entries:
            logger.debug(f"Replacing registry entry '{name}'")
        self._entries[name] = target
        return target

    def unregister(self, name: str):
        """Remove a registered name."""
        if name not in self._entries:
            raise ResolutionLookupError(f'Unable to unregister "{name}": it is not registered.')
        del self._entries[name]

    def has(self, name: str) -> bool:
        """Check if a name is registered."""
        return name in self._entries

    def resolve(self, path: str, expect_callable: bool = True) -> Any:
        """
        Resolve a dotted path.

        Args:
            path: Dotted path whose first segment is a registered name
            expect_callable: Require a callable (True) or any non-scalar object (False)

        Returns:
            The resolved target

        Raises:
            ResolutionLookupError: If a segment is missing or the result has the wrong kind
        """
        chunks = path.split('.')
        resolved = 'registry'
        scope: Any = self._entries

        for chunk in chunks:
            found, scope = _lookup(scope, chunk)
            if not found:
                raise ResolutionLookupError(f'Unable to resolve "{chunk}" from "{resolved}"')
            resolved += '.' + chunk

        if expect_callable and not callable(scope):
            raise ResolutionLookupError(
                f'Expected "{resolved}" to resolve as a callable, got {type(scope).__name__} instead.'
            )
        if not expect_callable and is_scalar(scope):
            raise ResolutionLookupError(
                f'Expected "{resolved}" to resolve as an object, got {type(scope).__name__} instead.'
            )
        return scope

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def __len__(self) -> int:
        return len(self._entries)


def _lookup(scope: Any, name: str):
    if isinstance(scope, Mapping):
        if name in scope:
            return True, scope[name]
        return False, None
    if name and hasattr(scope, name):
        return True, getattr(scope, name)
    return False, None
