"""
Tests for the dependency injection container.

Tests lazy resolution, service references, circular reference detection,
parameters and extensions.
"""

import pytest
from unittest.mock import Mock
from sappy.dependency_injection import (
    Container,
    Definition,
    Extension,
    create_container,
    get_container,
    set_container,
)
from sappy.config.settings import Settings
from sappy.core.logging_config import reset_logging
from sappy.core.exceptions import (
    CircularDependencyError,
    LockedItemError,
    MissingItemError,
    ServiceNotFoundError,
)


class Node:
    """Service holding references to its dependencies."""

    def __init__(self, *dependencies):
        self.dependencies = list(dependencies)
        self.attached = []

    def attach(self, other):
        self.attached.append(other)


class TestContainerResolution:
    """Test lazy service resolution."""

    def setup_method(self):
        """Set up test fixtures."""
        self.container = Container()

    def test_get_builds_and_caches(self):
        """Test services are built on first request and cached."""
        build = Mock(return_value=Node())
        self.container.set_definition('node', Definition(function=build))

        assert self.container.has('node') is True
        assert self.container.initialized('node') is False

        first = self.container.get('node')
        second = self.container.get('node')

        assert first is second
        assert self.container.initialized('node') is True
        build.assert_called_once_with()

    def test_service_reference_builds_dependency_once(self):
        """Test @B in A's arguments builds B exactly once."""
        build_b = Mock(side_effect=lambda: Node())
        self.container.set_definition('a', Definition(function=Node, arguments=['@b']))
        self.container.set_definition('c', Definition(function=Node, arguments=['@b']))
        self.container.set_definition('b', Definition(function=build_b))

        a = self.container.get('a')

        assert self.container.initialized('b') is True
        assert a.dependencies == [self.container.get('b')]

        c = self.container.get('c')

        assert c.dependencies[0] is a.dependencies[0]
        build_b.assert_called_once_with()

    def test_circular_reference(self):
        """Test A -> B -> C -> A is reported with the full chain."""
        self.container.set_definition('A', Definition(function=Node, arguments=['@B']))
        self.container.set_definition('B', Definition(function=Node, arguments=['@C']))
        self.container.set_definition('C', Definition(function=Node, arguments=['@A']))

        with pytest.raises(CircularDependencyError) as exc_info:
            self.container.get('A')

        assert 'A -> B -> C' in str(exc_info.value)
        assert 'while loading service "A"' in str(exc_info.value)
        assert exc_info.value.chain == ['A', 'B', 'C']
        assert exc_info.value.service_id == 'A'

    def test_circular_reference_leaves_clean_state(self):
        """Test a failed resolution clears the loading stack and caches nothing."""
        self.container.set_definition('A', Definition(function=Node, arguments=['@B']))
        self.container.set_definition('B', Definition(function=Node, arguments=['@A']))

        with pytest.raises(CircularDependencyError):
            self.container.get('A')

        assert self.container.loading == ()
        assert self.container.initialized('A') is False
        assert self.container.initialized('B') is False

        # Still a cycle on the second attempt, not a stale "loading" entry
        with pytest.raises(CircularDependencyError) as exc_info:
            self.container.get('B')
        assert exc_info.value.chain == ['B', 'A']

    def test_self_reference(self):
        """Test a service referencing itself."""
        self.container.set_definition('a', Definition(function=Node, arguments=['@a']))

        with pytest.raises(CircularDependencyError) as exc_info:
            self.container.get('a')
        assert exc_info.value.chain == ['a']

    def test_self_reference_in_method_call(self):
        """Test method calls cannot reference the service being built."""
        self.container.set_definition(
            'a', Definition(function=Node, method_calls=[['attach', ['@a']]])
        )

        with pytest.raises(CircularDependencyError):
            self.container.get('a')

    def test_method_call_reference(self):
        """Test method calls may reference other services."""
        self.container.set_definition('logger', Definition(function=Node))
        self.container.set_definition(
            'app', Definition(function=Node, method_calls=[['attach', ['@logger']]])
        )

        app = self.container.get('app')

        assert app.attached == [self.container.get('logger')]

    def test_service_not_found(self):
        """Test requesting an undefined service."""
        with pytest.raises(ServiceNotFoundError) as exc_info:
            self.container.get('missing')

        assert str(exc_info.value) == 'Service "missing" does not exist.'
        assert exc_info.value.service_id == 'missing'
        assert exc_info.value.requested_by is None

    def test_nested_service_not_found_names_requester(self):
        """Test a missing dependency names the service requesting it."""
        self.container.set_definition('app', Definition(function=Node, arguments=['@missing']))

        with pytest.raises(ServiceNotFoundError) as exc_info:
            self.container.get('app')

        assert 'requested by "app"' in str(exc_info.value)
        assert exc_info.value.requested_by == 'app'
        assert self.container.loading == ()

    def test_failed_build_can_be_retried(self):
        """Test the loading stack is cleared when a build raises."""
        build = Mock(side_effect=[RuntimeError("boom"), Node()])
        self.container.set_definition('flaky', Definition(function=build))

        with pytest.raises(RuntimeError):
            self.container.get('flaky')
        assert self.container.loading == ()
        assert self.container.initialized('flaky') is False

        assert isinstance(self.container.get('flaky'), Node)

    def test_loading_stack_during_build(self):
        """Test the loading stack mirrors the resolution chain."""
        seen = []

        def build():
            seen.append(self.container.loading)
            return Node()

        self.container.set_definition('outer', Definition(function=Node, arguments=['@inner']))
        self.container.set_definition('inner', Definition(function=build))
        self.container.get('outer')

        assert seen == [('outer', 'inner')]
        assert self.container.loading == ()

    def test_set_service(self):
        """Test setting a service instance directly."""
        service = Node()
        self.container.set('manual', service)

        assert self.container.get('manual') is service
        assert self.container.initialized('manual') is True
        assert self.container.has('manual') is False

    def test_set_definition_requires_definition(self):
        """Test set_definition type checking."""
        with pytest.raises(TypeError):
            self.container.set_definition('x', {'function': Node})

    def test_get_definition(self):
        """Test reading back a definition."""
        definition = Definition(function=Node)
        self.container.set_definition('node', definition)

        assert self.container.get_definition('node') is definition
        with pytest.raises(ServiceNotFoundError):
            self.container.get_definition('missing')

    def test_service_ids_and_tags(self):
        """Test listing defined and tagged services."""
        self.container.set_definition('a', Definition(function=Node, tags=['listener']))
        self.container.set_definition('b', Definition(function=Node))
        self.container.set_definition('c', Definition(function=Node, tags=['listener', 'x']))

        assert self.container.service_ids() == ['a', 'b', 'c']
        assert self.container.find_tagged_service_ids('listener') == ['a', 'c']
        assert self.container.find_tagged_service_ids('none') == []


class TestContainerParameters:
    """Test container parameters."""

    def setup_method(self):
        """Set up test fixtures."""
        self.container = Container()

    def test_set_get_has(self):
        """Test parameter accessors."""
        self.container.set_parameter('host', 'localhost')

        assert self.container.has_parameter('host') is True
        assert self.container.has_parameter('port') is False
        assert self.container.get_parameter('host') == 'localhost'
        assert self.container.get_parameters().get('host') == 'localhost'

    def test_missing_parameter(self):
        """Test reading an undefined parameter."""
        with pytest.raises(MissingItemError):
            self.container.get_parameter('missing')

    def test_locked_parameter(self):
        """Test locked parameters cannot be overwritten."""
        self.container.set_parameter('env', 'prod', locked=True)

        with pytest.raises(LockedItemError):
            self.container.set_parameter('env', 'dev')
        assert self.container.get_parameter('env') == 'prod'

    def test_set_parameters(self):
        """Test setting several parameters."""
        self.container.set_parameters({'a': 1, 'b': 2}, locked=True)

        assert self.container.get_parameter('b') == 2
        assert self.container.get_parameters().is_locked('a') is True

    def test_parameter_interpolation(self):
        """Test %n% is replaced by the string form of the parameter."""
        self.container.set_parameter('n', 42)
        self.container.set_definition('f', Definition(function=lambda x: {'x': x}, arguments=['%n%']))

        assert self.container.get('f') == {'x': '42'}

    def test_parameter_names_service(self):
        """Test a parameter selecting which service to inject."""
        self.container.set_parameter('mailer', 'smtp_mailer')
        self.container.set_definition('smtp_mailer', Definition(function=Node))
        self.container.set_definition('app', Definition(function=Node, arguments=['@%mailer%']))

        app = self.container.get('app')

        assert app.dependencies == [self.container.get('smtp_mailer')]


class TestContainerExtensions:
    """Test extensions and the compile pass."""

    def setup_method(self):
        """Set up test fixtures."""
        self.container = Container()

    def test_compile_runs_extensions_in_order(self):
        """Test extensions run once, in registration order."""
        order = []
        self.container.add_extension(Extension(lambda c: order.append('first')))
        self.container.add_extension(Extension(lambda c: order.append('second')))

        self.container.compile()
        self.container.compile()

        assert order == ['first', 'second']
        assert self.container.compiled is True

    def test_extension_added_while_compiling_runs(self):
        """Test an extension registered by another extension runs in the same pass."""
        ran = []

        def register_more(container):
            ran.append(1)
            container.add_extension(Extension(lambda c: ran.append(2)))

        self.container.add_extension(Extension(register_more))
        self.container.compile()

        assert ran == [1, 2]
        assert self.container.compiled is True

    def test_extension_added_after_compile(self):
        """Test a late extension marks the container uncompiled and runs on the next compile."""
        ran = []
        self.container.add_extension(Extension(lambda c: ran.append(1)))
        self.container.compile()

        self.container.add_extension(Extension(lambda c: ran.append(2)))

        assert self.container.compiled is False

        self.container.compile()

        assert ran == [1, 2]
        assert self.container.compiled is True

    def test_extension_edits_definitions(self):
        """Test an extension can change pending definitions."""
        self.container.set_definition('listener', Definition(function=Node, tags=['listener']))
        self.container.set_definition('dispatcher', Definition(function=Node))

        def register_listeners(container):
            definition = container.get_definition('dispatcher')
            for id in container.find_tagged_service_ids('listener'):
                definition.add_method_call('attach', [f"@{id}"])
            container.set_parameter('compiled_by', 'listeners')

        self.container.add_extension(Extension(register_listeners))
        self.container.compile()

        dispatcher = self.container.get('dispatcher')

        assert dispatcher.attached == [self.container.get('listener')]
        assert self.container.get_parameter('compiled_by') == 'listeners'

    def test_failing_extension(self):
        """Test a failing extension leaves the container uncompiled."""
        ran = []

        def broken(container):
            raise RuntimeError("extension failed")

        self.container.add_extension(Extension(lambda c: ran.append(1)))
        self.container.add_extension(Extension(broken))

        with pytest.raises(RuntimeError, match="extension failed"):
            self.container.compile()
        assert self.container.compiled is False
        assert ran == [1]

    def test_add_extension_requires_extension(self):
        """Test add_extension type checking."""
        with pytest.raises(TypeError):
            self.container.add_extension(lambda c: None)

    def test_extension_requires_callable(self):
        """Test Extension rejects non-callables."""
        with pytest.raises(TypeError):
            Extension('not callable')


class TestContainerFactory:
    """Test creating containers from settings."""

    def teardown_method(self):
        """Reset the default container and package logger."""
        set_container(None)
        reset_logging()

    def test_environment_parameters(self, monkeypatch):
        """Test prefixed environment variables become parameters."""
        monkeypatch.setenv('SAPPY_PARAM_DB_HOST', 'db.local')
        monkeypatch.delenv('SAPPY_LOCK_ENV_PARAMETERS', raising=False)

        container = create_container(Settings())

        assert container.get_parameter('db_host') == 'db.local'
        container.set_parameter('db_host', 'other')

    def test_locked_environment_parameters(self, monkeypatch):
        """Test environment parameters can be locked."""
        monkeypatch.setenv('SAPPY_PARAM_DB_HOST', 'db.local')
        monkeypatch.setenv('SAPPY_LOCK_ENV_PARAMETERS', 'true')

        container = create_container(Settings())

        with pytest.raises(LockedItemError):
            container.set_parameter('db_host', 'other')

    def test_auto_compile(self, monkeypatch):
        """Test containers can be compiled on creation."""
        monkeypatch.setenv('SAPPY_AUTO_COMPILE', 'true')

        assert create_container(Settings()).compiled is True

    def test_default_container(self):
        """Test the default container accessors."""
        container = Container()
        set_container(container)

        assert get_container() is container

        set_container(None)
        assert get_container() is get_container()
        assert get_container() is not container
