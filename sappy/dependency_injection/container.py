"""
Dependency Injection Container.

Holds service definitions and parameters, builds services lazily on
first request and detects circular references between them.
"""

import importlib
from typing import Any, Callable, List, Mapping, Optional, Tuple

from ..collection import Collection
from ..config.settings import Settings, get_settings
from ..core.exceptions import CircularDependencyError, ServiceNotFoundError
from ..core.logging_config import configure_from_settings, get_logger
from ..map import Map
from .definition import Definition
from .extension import Extension
from .registry import Registry

logger = get_logger(__name__)


class Container:
    """
    Dependency Injection Container.

    Services move from defined to loading to resolved; a resolved service
    is cached for the lifetime of the container.

    set_definition(), add_extension() and compile() form the builder API.
    By convention they are only used before the first service is
    requested; this is not enforced.
    """

    def __init__(
        self,
        registry: Optional[Registry] = None,
        module_loader: Optional[Callable[[str], Any]] = None
    ):
        """
        Initialize the container.

        Args:
            registry: Registry for dotted names in definitions (creates empty one if None)
            module_loader: Callable returning a module by name (importlib.import_module if None)
        """
        self._definitions = Map()
        self._services = Map()
        self._parameters = Map()
        self._loading = Collection()
        self._extensions = Collection()
        self._compiled_extensions = Collection()
        self._registry = registry if registry is not None else Registry()
        self._module_loader = module_loader or importlib.import_module
        self._compiled = False

    @property
    def registry(self) -> Registry:
        return self._registry

    @property
    def module_loader(self) -> Callable[[str], Any]:
        return self._module_loader

    @property
    def compiled(self) -> bool:
        """Whether compile() has completed."""
        return self._compiled

    @property
    def loading(self) -> Tuple[str, ...]:
        """Ids of the services currently being built, outermost first."""
        return tuple(self._loading)

    # Builder API

    def set_definition(self, id: str, definition: Definition):
        """
        Add or replace a definition.

        Args:
            id: Service identifier
            definition: Definition of the service
        """
        if not isinstance(definition, Definition):
            raise TypeError(
                f"set_definition expects an instance of Definition, {type(definition).__name__} given."
            )
        self._definitions.set(id, definition)
        logger.debug(f"Definition registered for service '{id}'")

    def get_definition(self, id: str) -> Definition:
        """
        Get the definition of a service.

        Raises:
            ServiceNotFoundError: If no definition is registered
        """
        if not self._definitions.has(id):
            raise ServiceNotFoundError(id)
        return self._definitions.get(id)

    def add_extension(self, extension: Extension):
        """
        Add an extension, run by the next compile().

        Extensions may add further extensions while compiling; those run
        in the same pass. Adding one to a compiled container marks the
        container uncompiled until compile() runs it.

        Args:
            extension: Extension to add
        """
        if not isinstance(extension, Extension):
            raise TypeError(
                f"add_extension expects an instance of Extension, {type(extension).__name__} given."
            )
        self._extensions.add(extension)
        self._compiled = False

    def compile(self):
        """
        Run every extension that has not run yet, in registration order.

        Each extension runs once; compiling again only runs extensions
        added since. If an extension fails the container stays
        uncompiled; changes made by earlier extensions are kept.
        """
        pending = self._pending_extensions()
        if self._compiled and not pending:
            logger.debug("Container already compiled")
            return

        while pending:
            for extension in pending:
                extension.compile(self)
                self._compiled_extensions.add(extension)
            pending = self._pending_extensions()

        self._compiled = True
        logger.info(f"Container compiled with {self._compiled_extensions.count()} extension(s)")

    def _pending_extensions(self) -> List[Extension]:
        return [e for e in self._extensions if not self._compiled_extensions.contains(e)]

    # Runtime API

    def set(self, id: str, service: Any):
        """
        Set a service instance directly.

        Args:
            id: Service identifier
            service: Service instance
        """
        self._services.set(id, service)

    def get(self, id: str) -> Any:
        """
        Get a service, building it on first request.

        Args:
            id: Service identifier

        Returns:
            Service instance

        Raises:
            CircularDependencyError: If the service is already being loaded
            ServiceNotFoundError: If the service has no definition
        """
        if self._loading.contains(id):
            chain = self._loading.all()
            logger.warning(f"Circular reference on '{id}': {' -> '.join(chain)}")
            raise CircularDependencyError(id, chain)

        if self._services.has(id):
            return self._services.get(id)

        if not self._definitions.has(id):
            raise ServiceNotFoundError(id, self._loading.last())

        definition = self._definitions.get(id)

        self._loading.add(id)
        logger.debug(f"Loading service '{id}'")
        try:
            self._services.set(id, definition.initialize(self))
        finally:
            self._loading.remove(id)

        logger.debug(f"Service '{id}' loaded")
        return self._services.get(id)

    def has(self, id: str) -> bool:
        """Check if a service is defined."""
        return self._definitions.has(id)

    def initialized(self, id: str) -> bool:
        """Check if a service has been built (or set)."""
        return self._services.has(id)

    def service_ids(self) -> List[str]:
        """Ids of all defined services, in registration order."""
        return list(self._definitions.keys())

    def find_tagged_service_ids(self, tag: str) -> List[str]:
        """
        Find services whose definition carries a tag.

        Args:
            tag: Tag to look for

        Returns:
            Service ids in registration order
        """
        return [id for id, definition in self._definitions.items() if definition.has_tag(tag)]

    def get_parameter(self, name: str) -> Any:
        """
        Get a parameter.

        Raises:
            MissingItemError: If the parameter is not set
        """
        return self._parameters.get(name)

    def get_parameters(self) -> Map:
        """Return the parameters map."""
        return self._parameters

    def has_parameter(self, name: str) -> bool:
        """Check if a parameter is set."""
        return self._parameters.has(name)

    def set_parameter(self, name: str, value: Any, locked: bool = False):
        """
        Set a parameter.

        Args:
            name: Parameter name
            value: Parameter value
            locked: Prevent further modification (only allowed for new parameters)

        Raises:
            LockedItemError: If the parameter is locked, or locking an existing one
        """
        self._parameters.set(name, value, locked)
        logger.debug(f"Parameter '{name}' set{' (locked)' if locked else ''}")

    def set_parameters(self, parameters: Mapping[str, Any], locked: bool = False):
        """Set several parameters at once."""
        for name, value in parameters.items():
            self.set_parameter(name, value, locked)


def create_container(
    settings: Optional[Settings] = None,
    registry: Optional[Registry] = None,
    module_loader: Optional[Callable[[str], Any]] = None
) -> Container:
    """
    Create a container configured from settings.

    The package logger takes the settings' log level. Parameters found
    in the environment (see Settings.parameter_prefix) are set on the
    container.

    Args:
        settings: Settings to use (global settings if None)
        registry: Optional registry for dotted names
        module_loader: Optional module loader

    Returns:
        New container
    """
    settings = settings or get_settings()
    configure_from_settings(settings)
    container = Container(registry=registry, module_loader=module_loader)

    parameters = settings.environment_parameters()
    container.set_parameters(parameters, locked=settings.lock_env_parameters)
    if parameters:
        logger.debug(f"Loaded {len(parameters)} parameter(s) from the environment")

    if settings.auto_compile:
        container.compile()

    return container


# Default container instance (can be replaced for testing)
_default_container: Optional[Container] = None


def get_container() -> Container:
    """Get the default container instance."""
    global _default_container
    if _default_container is None:
        _default_container = create_container()
    return _default_container


def set_container(container: Optional[Container]):
    """Set the default container instance (useful for testing)."""
    global _default_container
    _default_container = container
