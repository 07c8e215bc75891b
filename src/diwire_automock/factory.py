from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Generic, TypeVar, overload

from diwire_automock._internal.type_checks import (
    describe_key,
    is_final_class,
    is_runtime_class,
    spec_class_of,
)
from diwire_automock.behavior import MockBehavior
from diwire_automock.doubles import Mock, MockRepository
from diwire_automock.exceptions import UnsupportedTypeError

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class MockCreationResult(Generic[T]):
    """Pair a created double with the instance to inject.

    ``instance`` is always ``mock.object``.
    """

    instance: T
    mock: Mock[T]


class MockFactory:
    """Create doubles for dependency keys known only at runtime.

    Keys are unwrapped to their runtime class before the double is built:
    ``Annotated[Service, Component("ro")]`` is doubled as ``Service`` and
    ``Repo[int]`` as ``Repo``. The factory only allocates doubles; it never
    touches the registry or the container.
    """

    def __init__(self, repository: MockRepository | None = None) -> None:
        self._repository = repository if repository is not None else MockRepository()

    @property
    def repository(self) -> MockRepository:
        return self._repository

    @overload
    def create(
        self,
        key: type[T],
        behavior: MockBehavior = MockBehavior.DEFAULT,
    ) -> MockCreationResult[T]: ...

    @overload
    def create(
        self,
        key: Any,
        behavior: MockBehavior = MockBehavior.DEFAULT,
    ) -> MockCreationResult[Any]: ...

    def create(
        self,
        key: Any,
        behavior: MockBehavior = MockBehavior.DEFAULT,
    ) -> MockCreationResult[Any]:
        """Create a new double for ``key``.

        Args:
            key: Dependency key to double.
            behavior: Behavior of the new double.

        Returns:
            The double and its instance.

        Raises:
            UnsupportedTypeError: If ``key`` does not denote a class that can
                be doubled.

        """
        spec = spec_class_of(key)
        if not is_runtime_class(spec):
            msg = f"Cannot create a mock for {describe_key(key)}: it is not a class."
            raise UnsupportedTypeError(msg)
        if is_final_class(spec):
            msg = f"Cannot create a mock for {describe_key(key)}: the class is final."
            raise UnsupportedTypeError(msg)

        mock = self._repository.create(spec, behavior, name=describe_key(key))
        return MockCreationResult(instance=mock.object, mock=mock)
