"""
Argument resolution for definitions.

String arguments understand two forms:

    "%name%"  replaced by the string form of parameter "name"
    "@id"     replaced by the service "id", fetched from the container

Interpolation runs first, so "@%mailer_id%" refers to the service named
by the "mailer_id" parameter.
"""

from functools import lru_cache
from typing import Any, Iterable, List, Mapping, Tuple

import regex

SERVICE_PREFIX = '@'


@lru_cache(maxsize=64)
def _placeholder_pattern(names: Tuple[str, ...]):
    # Longest names first so "%num%" is never shadowed by "%n%".
    ordered = sorted(names, key=len, reverse=True)
    return regex.compile('%(' + '|'.join(regex.escape(name) for name in ordered) + ')%')


def interpolate(value: str, parameters: Mapping[str, Any]) -> str:
    """
    Replace every "%name%" placeholder with the string form of its parameter.

    Placeholders of unknown parameters are left as they are, and
    substituted text is not scanned again.

    Args:
        value: String to interpolate
        parameters: Parameter name -> value

    Returns:
        Interpolated string
    """
    if '%' not in value:
        return value

    names = tuple(name for name in parameters.keys() if isinstance(name, str) and name)
    if not names:
        return value

    pattern = _placeholder_pattern(names)
    return pattern.sub(lambda match: str(parameters.get(match.group(1))), value)


def resolve_argument(argument: Any, container) -> Any:
    """Resolve a single argument against the container."""
    if not isinstance(argument, str):
        return argument

    argument = interpolate(argument, container.get_parameters())

    if argument.startswith(SERVICE_PREFIX):
        return container.get(argument[len(SERVICE_PREFIX):])

    return argument


def resolve_arguments(arguments: Iterable[Any], container) -> List[Any]:
    """
    Resolve arguments in declaration order.

    Each argument is resolved completely, including any service it
    references, before the next one is looked at.

    Args:
        arguments: Raw arguments
        container: Container providing parameters and services

    Returns:
        List of resolved arguments
    """
    return [resolve_argument(argument, container) for argument in arguments]
