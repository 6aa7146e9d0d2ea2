"""
Service definition.

A definition describes how to build one service: which callable, module
export or factory method to invoke, which arguments to pass and which
methods to call on the result.

    Definition(function=Mailer, arguments=['%smtp_host%', '@logger'])
    Definition(function='app.Mailer')                      # via the registry
    Definition(module='app.mail', function='Mailer')       # module export
    Definition(module='app.mail', factory_method='create')
    Definition(factory=mail_factory, factory_method='create')
"""

from typing import Any, Iterable, List, Mapping, Optional, Sequence, Tuple

from ..collection import Collection
from ..core.exceptions import (
    ConfigurationError,
    InvalidResultError,
    MethodNotFoundError,
    ResolutionLookupError,
)
from ..core.logging_config import get_logger
from .arguments import resolve_arguments
from .registry import Registry, is_scalar

logger = get_logger(__name__)

CONFIG_KEYS = (
    'function',
    'module',
    'factory',
    'factory_method',
    'arguments',
    'method_calls',
    'tags',
)

FUNCTION = 'function'
NAMED_FUNCTION = 'named_function'
MODULE = 'module'
FACTORY = 'factory'


class Definition:
    """
    Build recipe for a single service.

    The service is built at most once; later calls to initialize()
    return the cached instance.
    """

    def __init__(
        self,
        function: Any = None,
        module: Optional[str] = None,
        factory: Any = None,
        factory_method: Optional[str] = None,
        arguments: Optional[Sequence[Any]] = None,
        method_calls: Optional[Sequence[Sequence[Any]]] = None,
        tags: Optional[Sequence[str]] = None,
        registry: Optional[Registry] = None
    ):
        """
        Initialize the definition.

        Args:
            function: Callable, or dotted name resolved through the registry
                (or, with module, the name of the export to call)
            module: Name of a module handed to the container's module loader
            factory: Factory object, or dotted name resolved through the registry
            factory_method: Method of the factory (or module) returning the service
            arguments: Arguments for the callable or factory method
            method_calls: (method_name, arguments) pairs called after construction
            tags: Labels for extensions
            registry: Registry for dotted names (defaults to the container's)
        """
        self.function = function
        self.module = module
        self.factory = factory
        self.factory_method = factory_method
        self._arguments: List[Any] = list(arguments or [])
        self._method_calls: List[Any] = list(method_calls or [])
        self._tags = Collection()
        for tag in tags or []:
            self.add_tag(tag)
        self._registry = registry
        self._initialized = False
        self._service: Any = None

    @classmethod
    def from_config(cls, config: Mapping[str, Any], registry: Optional[Registry] = None) -> 'Definition':
        """
        Create a definition from a configuration mapping.

        Args:
            config: Mapping using the keys in CONFIG_KEYS
            registry: Optional registry for dotted names

        Raises:
            ConfigurationError: If config is not a mapping or has unknown keys
        """
        if not isinstance(config, Mapping):
            raise ConfigurationError(
                f"A definition config must be a mapping, got {type(config).__name__}."
            )

        unknown = [key for key in config if key not in CONFIG_KEYS]
        if unknown:
            raise ConfigurationError(
                f"Unknown definition setting(s): {', '.join(sorted(map(str, unknown)))}."
            )

        return cls(registry=registry, **config)

    @property
    def arguments(self) -> List[Any]:
        return list(self._arguments)

    @property
    def method_calls(self) -> List[Any]:
        return list(self._method_calls)

    @property
    def tags(self) -> List[str]:
        return self._tags.all()

    @property
    def initialized(self) -> bool:
        """Whether the service has been built."""
        return self._initialized

    def set_arguments(self, arguments: Sequence[Any]):
        """Override all arguments with the given ones."""
        self._arguments = list(arguments)

    def add_argument(self, argument: Any):
        self._arguments.append(argument)

    def add_method_call(self, method: str, arguments: Optional[Sequence[Any]] = None):
        self._method_calls.append((method, list(arguments or [])))

    def add_tag(self, tag: str):
        if not self._tags.contains(tag):
            self._tags.add(tag)

    def has_tag(self, tag: str) -> bool:
        return self._tags.contains(tag)

    def initialize(self, container) -> Any:
        """
        Build the service, or return it if it was built before.

        Args:
            container: Container supplying parameters, services, the
                registry and the module loader

        Returns:
            The service

        Raises:
            ConfigurationError: If the definition has no single valid strategy
            ResolutionLookupError: If a named target or module export is missing
            InvalidResultError: If the build produced a scalar
            MethodNotFoundError: If a method call targets a missing method
        """
        if self._initialized:
            return self._service

        strategy = self._strategy()
        arguments = resolve_arguments(self._arguments, container)

        logger.debug(f"Instantiating service using {strategy} strategy")
        service = self._instantiate(strategy, arguments, container)

        if is_scalar(service):
            raise InvalidResultError(
                "Unable to initialize service. Make sure either a function, factory or module is "
                "configured and that it results in an object once initialized, "
                f"got {type(service).__name__}."
            )

        for call in self._method_calls:
            method, call_arguments = _split_method_call(call)
            member = getattr(service, method, None)
            if not callable(member):
                raise MethodNotFoundError(
                    f'Unable to execute method call "{method}" on {type(service).__name__}, '
                    f"because it is {type(member).__name__}.",
                    method=method
                )
            member(*resolve_arguments(call_arguments, container))

        self._service = service
        self._initialized = True
        return service

    _initialize = initialize

    def _strategy(self) -> str:
        function, module, factory, factory_method = (
            self.function, self.module, self.factory, self.factory_method
        )

        if factory_method is not None and (not isinstance(factory_method, str) or not factory_method):
            raise ConfigurationError(
                f'The "factory_method" setting must be a string, got {type(factory_method).__name__}.'
            )

        if module is not None:
            if not isinstance(module, str) or not module:
                raise ConfigurationError(
                    f'The "module" setting must be a string, got {type(module).__name__}.'
                )
            if factory is not None:
                raise ConfigurationError(
                    f'The "module" and "factory" settings cannot be combined (module "{module}").'
                )
            if function is not None and not isinstance(function, str):
                raise ConfigurationError(
                    'With "module", the "function" setting must be the name of an export, '
                    f"got {type(function).__name__}."
                )
            if function is not None and factory_method is not None:
                raise ConfigurationError(
                    f'Unable to determine how to instantiate service from module "{module}": '
                    'both "function" and "factory_method" are set.'
                )
            return MODULE

        if factory is not None:
            if function is not None:
                raise ConfigurationError('The "function" and "factory" settings cannot be combined.')
            if is_scalar(factory) and not isinstance(factory, str):
                raise ConfigurationError(
                    f'The "factory" setting must be an object or string, got {type(factory).__name__}.'
                )
            if factory_method is None:
                raise ConfigurationError('The "factory" setting requires a "factory_method".')
            return FACTORY

        if factory_method is not None:
            raise ConfigurationError(
                'The "factory_method" setting requires either a "factory" or a "module".'
            )

        if callable(function):
            return FUNCTION
        if isinstance(function, str) and function:
            return NAMED_FUNCTION
        if function is None:
            raise ConfigurationError(
                'Unable to determine how to instantiate service: configure a "function", '
                '"module" or "factory".'
            )
        raise ConfigurationError(
            f'The "function" setting must be a callable or string, got {type(function).__name__}.'
        )

    def _instantiate(self, strategy: str, arguments: List[Any], container) -> Any:
        if strategy == FUNCTION:
            return self.function(*arguments)

        if strategy == NAMED_FUNCTION:
            return self._get_registry(container).resolve(self.function)(*arguments)

        if strategy == MODULE:
            module = self._load_module(container)
            if self.function is not None:
                return _module_export(module, self.module, self.function, 'function')(*arguments)
            if self.factory_method is not None:
                return _module_export(module, self.module, self.factory_method, 'factory function')(*arguments)
            if not callable(module):
                raise ResolutionLookupError(
                    f'The module "{self.module}" must be callable, got {type(module).__name__}.'
                )
            return module(*arguments)

        factory = self.factory
        if isinstance(factory, str):
            factory = self._get_registry(container).resolve(factory, expect_callable=False)
        method = getattr(factory, self.factory_method, None)
        if not callable(method):
            raise ResolutionLookupError(
                f'The factory method "{self.factory_method}" does not exist in factory "{self.factory}".'
            )
        return method(*arguments)

    def _get_registry(self, container) -> Registry:
        if self._registry is not None:
            return self._registry
        return container.registry

    def _load_module(self, container) -> Any:
        try:
            return container.module_loader(self.module)
        except ImportError as e:
            raise ResolutionLookupError(f'Unable to load module "{self.module}": {e}') from e

    def __repr__(self) -> str:
        target = self.module or self.factory or self.function
        return f"Definition({target!r}, initialized={self._initialized})"


def _module_export(module: Any, module_name: str, path: str, kind: str) -> Any:
    target = module
    for chunk in path.split('.'):
        target = getattr(target, chunk, None)
        if target is None:
            break
    if not callable(target):
        raise ResolutionLookupError(
            f'The {kind} "{path}" does not exist in module "{module_name}".'
        )
    return target


def _split_method_call(call: Any) -> Tuple[str, Iterable[Any]]:
    if isinstance(call, str):
        return call, []
    if isinstance(call, (list, tuple)) and 1 <= len(call) <= 2 and isinstance(call[0], str):
        arguments = call[1] if len(call) == 2 and call[1] is not None else []
        if not isinstance(arguments, (list, tuple)):
            raise ConfigurationError(
                f'Arguments of method call "{call[0]}" must be a list, got {type(arguments).__name__}.'
            )
        return call[0], arguments
    raise ConfigurationError(
        f"A method call must be a [method_name, arguments] pair, got {call!r}."
    )
