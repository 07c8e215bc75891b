from __future__ import annotations

import functools
import inspect
import logging
from collections.abc import Callable, Iterator
from typing import Any, Generic, Protocol, TypeVar, cast
from unittest.mock import DEFAULT, create_autospec
from unittest.mock import call as mock_call

from diwire_automock.behavior import MockBehavior
from diwire_automock.exceptions import UnconfiguredCallError, VerificationError

T = TypeVar("T")

logger = logging.getLogger(__name__)

_UNDECLARED_BASES = (object, Generic, Protocol)


def _format_arguments(args: tuple[Any, ...], kwargs: dict[str, Any]) -> str:
    parts = [repr(arg) for arg in args]
    parts.extend(f"{name}={value!r}" for name, value in kwargs.items())
    return ", ".join(parts)


def _method_signature(spec: type[Any], method: str) -> inspect.Signature | None:
    try:
        attribute = inspect.getattr_static(spec, method)
    except AttributeError:
        return None

    if isinstance(attribute, staticmethod):
        function, skip_first = attribute.__func__, False
    elif isinstance(attribute, classmethod):
        function, skip_first = attribute.__func__, True
    elif inspect.isfunction(attribute):
        function, skip_first = attribute, True
    else:
        return None

    try:
        signature = inspect.signature(function)
    except (TypeError, ValueError):
        return None
    parameters = list(signature.parameters.values())
    if skip_first:
        parameters = parameters[1:]
    return signature.replace(parameters=parameters)


def _is_object_protocol_dunder(name: str) -> bool:
    # ``create_autospec`` does not configure dunders; ``__call__`` is the
    # autospecced instance itself.
    return name.startswith("__") and name.endswith("__") and name != "__call__"


def _declared_method_names(spec: type[Any]) -> list[str]:
    names: set[str] = set()
    for klass in spec.__mro__:
        if klass in _UNDECLARED_BASES:
            continue
        for name, attribute in vars(klass).items():
            if _is_object_protocol_dunder(name):
                continue
            if isinstance(attribute, (staticmethod, classmethod)) or inspect.isfunction(attribute):
                names.add(name)
    return sorted(names)


class Expectation:
    """A configured call on a double, created by ``Mock.setup``.

    Configure the outcome with the fluent helpers. An expectation is met once it
    was matched at least once, or exactly ``times(n)`` times when a count is set.
    """

    def __init__(self, owner: str, method: str, expected_call: Any) -> None:
        self.owner = owner
        self.method = method
        self.call_count = 0
        self.is_verifiable = False
        self._expected_call = expected_call
        self._any_arguments = False
        self._expected_times: int | None = None
        self._outcome: Callable[..., Any] | None = None

    def returns(self, value: Any) -> Expectation:
        """Return ``value`` from matching calls."""
        self._outcome = lambda *_args, **_kwargs: value
        return self

    def raises(self, error: BaseException | type[BaseException]) -> Expectation:
        """Raise ``error`` from matching calls."""

        def outcome(*_args: Any, **_kwargs: Any) -> Any:
            raise error

        self._outcome = outcome
        return self

    def calls(self, func: Callable[..., Any]) -> Expectation:
        """Delegate matching calls to ``func`` and return its result."""
        self._outcome = func
        return self

    def with_any_arguments(self) -> Expectation:
        self._any_arguments = True
        return self

    def times(self, count: int) -> Expectation:
        """Require exactly ``count`` matching calls."""
        if count < 0:
            msg = f"times() count must not be negative, got {count}."
            raise ValueError(msg)
        self._expected_times = count
        return self

    def verifiable(self) -> Expectation:
        """Include this expectation in ``verify()`` passes."""
        self.is_verifiable = True
        return self

    @property
    def is_met(self) -> bool:
        if self._expected_times is None:
            return self.call_count > 0
        return self.call_count == self._expected_times

    def matches(self, actual_call: Any) -> bool:
        return self._any_arguments or actual_call == self._expected_call

    def invoke(self, args: tuple[Any, ...], kwargs: dict[str, Any]) -> Any:
        self.call_count += 1
        if self._outcome is None:
            return DEFAULT
        return self._outcome(*args, **kwargs)

    def __str__(self) -> str:
        arguments = "..." if self._any_arguments else _format_arguments(
            tuple(self._expected_call.args),
            dict(self._expected_call.kwargs),
        )
        if self._expected_times is None:
            expected = "at least once"
        else:
            expected = f"exactly {self._expected_times} time(s)"
        return (
            f"{self.owner}.{self.method}({arguments}) expected {expected}, "
            f"called {self.call_count} time(s)"
        )

    def __repr__(self) -> str:
        return f"Expectation({self})"


class Mock(Generic[T]):
    """A test double for ``spec`` built on ``unittest.mock.create_autospec``.

    ``object`` is the autospecced instance to inject. Calls on it keep the usual
    ``unittest.mock`` recording, so ``mock.object.method.assert_called_once_with``
    works alongside expectations configured through ``setup``.

    Strict doubles intercept every method the spec class declares up front,
    including ``_private`` methods, static and class methods, and ``__call__``,
    so that a call without a matching setup raises ``UnconfiguredCallError``
    immediately. Loose doubles only intercept methods that have setups and fall
    back to the autospec return value otherwise.

    ``async def`` methods are autospecced as ``AsyncMock`` children: calling one
    returns a coroutine, and the setup outcome (or the strict
    ``UnconfiguredCallError``) surfaces when that coroutine is awaited.
    """

    def __init__(
        self,
        spec: type[T],
        behavior: MockBehavior = MockBehavior.LOOSE,
        *,
        name: str | None = None,
    ) -> None:
        if behavior is MockBehavior.DEFAULT:
            behavior = MockBehavior.LOOSE
        self._spec = spec
        self._behavior = behavior
        self._name = name or spec.__qualname__
        self._object = cast("T", create_autospec(spec, instance=True))
        self._expectations: list[Expectation] = []
        self._signatures: dict[str, inspect.Signature | None] = {}
        self._intercepted: set[str] = set()

        if behavior is MockBehavior.STRICT:
            for method in _declared_method_names(spec):
                self._intercept(method)

    @property
    def object(self) -> T:
        return self._object

    @property
    def spec(self) -> type[T]:
        return self._spec

    @property
    def behavior(self) -> MockBehavior:
        return self._behavior

    @property
    def name(self) -> str:
        return self._name

    @property
    def expectations(self) -> tuple[Expectation, ...]:
        return tuple(self._expectations)

    def setup(self, method: str, /, *args: Any, **kwargs: Any) -> Expectation:
        """Configure the outcome of calling ``method`` with the given arguments.

        Arguments are compared with ``unittest.mock.call`` equality after
        binding them to the method signature, so ``unittest.mock.ANY`` matches
        any value and keyword/positional spelling does not matter. When several
        setups match a call, the latest one wins. Use ``"__call__"`` to
        configure calls on a callable double itself.

        Required arguments may be left out when the expectation is followed by
        ``with_any_arguments()``.

        Args:
            method: Name of a method declared on the spec class.
            *args: Expected positional arguments.
            **kwargs: Expected keyword arguments.

        Returns:
            The new expectation, ready for ``returns``/``raises``/``verifiable``.

        Raises:
            AttributeError: If the spec class does not declare ``method``.
            TypeError: If the arguments do not fit the method signature.

        """
        self._intercept(method)
        expected_call = self._normalize(method, args, kwargs, partial=True)
        expectation = Expectation(self._name, method, expected_call)
        self._expectations.append(expectation)
        return expectation

    def verify(self) -> list[Expectation]:
        """Return unmet expectations that were marked ``verifiable()``."""
        return [e for e in self._expectations if e.is_verifiable and not e.is_met]

    def verify_all(self) -> list[Expectation]:
        """Return every unmet expectation of this double."""
        return [e for e in self._expectations if not e.is_met]

    def _intercept(self, method: str) -> None:
        if method in self._intercepted:
            return
        if method == "__call__":
            if not callable(self._object):
                msg = f"{self._name} does not declare '__call__'."
                raise AttributeError(msg)
            target: Any = self._object
        else:
            target = getattr(self._object, method)
        target.side_effect = functools.partial(self._dispatch, method)
        self._intercepted.add(method)

    def _normalize(
        self,
        method: str,
        args: tuple[Any, ...],
        kwargs: dict[str, Any],
        *,
        partial: bool = False,
    ) -> Any:
        if method not in self._signatures:
            self._signatures[method] = _method_signature(self._spec, method)
        signature = self._signatures[method]
        if signature is None:
            return mock_call(*args, **kwargs)
        bind = signature.bind_partial if partial else signature.bind
        bound = bind(*args, **kwargs)
        return mock_call(*bound.args, **bound.kwargs)

    def _dispatch(self, method: str, /, *args: Any, **kwargs: Any) -> Any:
        actual_call = self._normalize(method, args, kwargs)
        for expectation in reversed(self._expectations):
            if expectation.method == method and expectation.matches(actual_call):
                return expectation.invoke(args, kwargs)

        if self._behavior is MockBehavior.STRICT:
            msg = (
                f"{self._name}.{method}({_format_arguments(args, kwargs)}) was called on a "
                "strict mock without a matching setup."
            )
            raise UnconfiguredCallError(msg)
        return DEFAULT

    def __repr__(self) -> str:
        return f"Mock[{self._name}](behavior={self._behavior.name})"


class MockRepository:
    """Create doubles and verify them together.

    Every double created here is tracked for the lifetime of the repository,
    so ``verify``/``verify_all`` report unmet expectations across all of them.
    """

    def __init__(self, default_behavior: MockBehavior = MockBehavior.LOOSE) -> None:
        if default_behavior is MockBehavior.DEFAULT:
            default_behavior = MockBehavior.LOOSE
        self._default_behavior = default_behavior
        self._mocks: list[Mock[Any]] = []

    @property
    def default_behavior(self) -> MockBehavior:
        return self._default_behavior

    def create(
        self,
        spec: type[T],
        behavior: MockBehavior = MockBehavior.DEFAULT,
        *,
        name: str | None = None,
    ) -> Mock[T]:
        """Create and track a double for ``spec``.

        Args:
            spec: Class or protocol the double implements.
            behavior: Behavior for the double. ``DEFAULT`` uses the repository
                default behavior.
            name: Optional display name used in diagnostics.

        """
        if behavior is MockBehavior.DEFAULT:
            behavior = self._default_behavior
        mock = Mock(spec, behavior, name=name)
        self._mocks.append(mock)
        logger.debug("Created %r", mock)
        return mock

    def verify(self) -> None:
        """Raise ``VerificationError`` for unmet expectations marked ``verifiable()``."""
        self._raise_for_unmet([e for mock in self._mocks for e in mock.verify()])

    def verify_all(self) -> None:
        """Raise ``VerificationError`` for every unmet expectation of every double."""
        self._raise_for_unmet([e for mock in self._mocks for e in mock.verify_all()])

    def _raise_for_unmet(self, unmet: list[Expectation]) -> None:
        logger.debug("Verified %d mock(s), %d unmet expectation(s)", len(self._mocks), len(unmet))
        if unmet:
            raise VerificationError(unmet)

    def __iter__(self) -> Iterator[Mock[Any]]:
        return iter(self._mocks)

    def __len__(self) -> int:
        return len(self._mocks)
