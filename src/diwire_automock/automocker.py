from __future__ import annotations

import logging
from typing import Any, Literal, TypeVar, cast, overload

from diwire import Container

from diwire_automock._internal.type_checks import (
    describe_key,
    is_abstraction,
    is_runtime_class,
    spec_class_of,
)
from diwire_automock.behavior import MockBehavior
from diwire_automock.config import AutoMockerConfig
from diwire_automock.container_bridge import ContainerBridge
from diwire_automock.dependencies import ConstructorDependenciesExtractor
from diwire_automock.doubles import Mock, MockRepository
from diwire_automock.exceptions import InvalidInstanceError
from diwire_automock.factory import MockFactory
from diwire_automock.registry import MockRegistry

T = TypeVar("T")

logger = logging.getLogger(__name__)


class AutoMocker:
    """Supply doubles for abstractions and publish them into a container.

    An ``AutoMocker`` owns one registry and one container for the lifetime of a
    test. The first ``get_or_create`` call for a key creates a double, publishes
    its instance into the container, and records it; later calls return the same
    double without touching the container again. ``set_instance`` publishes an
    explicit instance instead and keeps later ``get_or_create`` calls from
    replacing it.

    ``verify_all`` and ``verify`` check every double created by this
    auto-mocker together and report all unmet expectations at once.

    Instances are not thread-safe. Create one per test.
    """

    def __init__(
        self,
        container: Container | None = None,
        config: AutoMockerConfig | None = None,
    ) -> None:
        """Initialize an auto-mocker bound to ``container``.

        Args:
            container: Container the doubles are published into. A new
                ``Container()`` is created when omitted.
            config: Auto-mocker configuration. Defaults to ``AutoMockerConfig()``.

        Examples:
            .. code-block:: python

                automocker = AutoMocker()
                greeter = automocker.get_or_create(Greeter)
                greeter.setup("greet", "bob").returns("hi bob").verifiable()

                service = automocker.create(WelcomeService)
                service.welcome("bob")

                automocker.verify()

        """
        self._config = config if config is not None else AutoMockerConfig()
        self._container = container if container is not None else Container()
        self._registry = MockRegistry()
        self._factory = MockFactory(MockRepository(self._config.default_behavior))
        self._bridge = ContainerBridge(self._container)
        self._dependencies_extractor = ConstructorDependenciesExtractor()

        if self._config.register_self:
            self.set_instance(self, provides=AutoMocker)

    @property
    def container(self) -> Container:
        return self._container

    @property
    def registry(self) -> MockRegistry:
        return self._registry

    @property
    def factory(self) -> MockFactory:
        return self._factory

    @property
    def config(self) -> AutoMockerConfig:
        return self._config

    @overload
    def get_or_create(
        self,
        key: type[T],
        behavior: MockBehavior = MockBehavior.DEFAULT,
    ) -> Mock[T]: ...

    @overload
    def get_or_create(
        self,
        key: Any,
        behavior: MockBehavior = MockBehavior.DEFAULT,
    ) -> Mock[Any]: ...

    def get_or_create(
        self,
        key: Any,
        behavior: MockBehavior = MockBehavior.DEFAULT,
    ) -> Mock[Any]:
        """Return the double for ``key``, creating and publishing it on first use.

        A repeated call returns the stored double unchanged, even when
        ``behavior`` differs from the first call.

        Args:
            key: Dependency key to double.
            behavior: Behavior used when the double is created.

        Returns:
            The double registered for ``key``.

        Raises:
            UnsupportedTypeError: If ``key`` cannot be doubled.
            MockNotFoundError: If ``key`` was provided through ``set_instance``.

        """
        if self._registry.has_no_entry_for(key):
            self._create_and_register(key, behavior)
        return self._registry.lookup(key)

    def get_mock(self, key: Any) -> Mock[Any]:
        """Return the double already registered for ``key`` without creating one.

        Raises:
            MockNotFoundError: If no double is registered for ``key``.

        """
        return self._registry.lookup(key)

    def set_instance(self, instance: Any, *, provides: Any | Literal["infer"] = "infer") -> None:
        """Publish an explicit instance for a dependency key.

        The key is marked as provided unless it already has an entry, so a later
        ``get_or_create`` for it never replaces ``instance`` with a double.

        Args:
            instance: Instance returned when the key is resolved.
            provides: Dependency key to bind. Use ``"infer"`` to bind by
                ``type(instance)``.

        Raises:
            InvalidInstanceError: If ``provides`` is ``None``.

        """
        key = self._instance_key(instance, provides)
        self._bridge.publish(key, instance)
        if self._registry.has_no_entry_for(key):
            self._registry.register_provided(key)
        logger.debug("Set explicit instance for %s", describe_key(key))

    def set_mock(self, key: Any, mock: Mock[Any]) -> None:
        """Register an externally created double for ``key``.

        Does nothing when ``key`` already has an entry. Otherwise the double's
        instance is published and the double is recorded for ``key``.

        Args:
            key: Dependency key the double stands in for.
            mock: Double to register.

        """
        if not self._registry.has_no_entry_for(key):
            return
        self._bridge.publish(key, mock.object)
        self._registry.register(key, mock)

    def create(self, sut_type: type[T]) -> T:
        """Resolve a system under test with its abstract dependencies mocked.

        Constructor dependencies of ``sut_type`` are walked recursively through
        concrete classes. Every abstract class or protocol without a registry
        entry gets a double with the default behavior before ``sut_type`` is
        resolved from the container.

        Args:
            sut_type: Concrete class to build.

        Returns:
            The instance resolved from the container.

        """
        self._mock_missing_dependencies(sut_type, visited=set())
        return self._container.resolve(sut_type)

    @overload
    def resolve(self, key: type[T]) -> T: ...

    @overload
    def resolve(self, key: Any) -> Any: ...

    def resolve(self, key: Any) -> Any:
        """Resolve ``key`` from the container without creating doubles."""
        return self._container.resolve(key)

    def verify_all(self) -> None:
        """Require every expectation of every double to be met.

        Raises:
            VerificationError: Listing every unmet expectation.

        """
        self._factory.repository.verify_all()

    def verify(self) -> None:
        """Require every expectation marked ``verifiable()`` to be met.

        Raises:
            VerificationError: Listing every unmet verifiable expectation.

        """
        self._factory.repository.verify()

    def _create_and_register(self, key: Any, behavior: MockBehavior) -> None:
        result = self._factory.create(key, behavior)
        self._bridge.publish(key, result.instance)
        self._registry.register(key, result.mock)
        logger.debug("Auto-mocked %s with %r", describe_key(key), result.mock)

    def _mock_missing_dependencies(self, concrete_type: Any, visited: set[Any]) -> None:
        if concrete_type in visited:
            return
        visited.add(concrete_type)

        for dependency in self._dependencies_extractor.extract(concrete_type):
            key = dependency.provides
            if not self._registry.has_no_entry_for(key):
                continue
            spec = spec_class_of(key)
            if is_abstraction(spec):
                self._create_and_register(key, MockBehavior.DEFAULT)
            elif is_runtime_class(spec) and spec.__module__ != "builtins":
                self._mock_missing_dependencies(spec, visited)

    def _instance_key(self, instance: Any, provides: Any) -> Any:
        provides_value = cast("Any", provides)
        if provides_value == "infer":
            return type(instance)
        if provides_value is None:
            msg = "set_instance() parameter 'provides' must not be None; use 'infer'."
            raise InvalidInstanceError(msg)
        return provides_value
