from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Protocol
from unittest.mock import ANY

import pytest

from diwire_automock.behavior import MockBehavior
from diwire_automock.doubles import Mock, MockRepository
from diwire_automock.exceptions import UnconfiguredCallError, VerificationError


class _Greeter(Protocol):
    def greet(self, name: str) -> str: ...

    def farewell(self, name: str, *, loud: bool = False) -> str: ...


class _Repository(ABC):
    @abstractmethod
    def get(self, item_id: int) -> str: ...

    @abstractmethod
    async def fetch(self, item_id: int) -> str: ...

    @staticmethod
    def table_name() -> str:
        return "items"

    @classmethod
    def default_page_size(cls) -> int:
        return 50


class _Handler(Protocol):
    def __call__(self, value: int) -> int: ...

    def _validate(self, value: int) -> bool: ...


def test_loose_mock_returns_default_for_unconfigured_call() -> None:
    mock = Mock(_Greeter, MockBehavior.LOOSE)

    mock.object.greet("bob")

    mock.object.greet.assert_called_once_with("bob")


def test_default_behavior_is_loose() -> None:
    mock = Mock(_Greeter, MockBehavior.DEFAULT)

    assert mock.behavior is MockBehavior.LOOSE


def test_strict_mock_raises_for_unconfigured_call() -> None:
    mock = Mock(_Greeter, MockBehavior.STRICT)

    with pytest.raises(UnconfiguredCallError, match=r"_Greeter\.greet\('bob'\)"):
        mock.object.greet("bob")


def test_strict_mock_raises_for_call_with_unmatched_arguments() -> None:
    mock = Mock(_Greeter, MockBehavior.STRICT)
    mock.setup("greet", "bob").returns("hi bob")

    assert mock.object.greet("bob") == "hi bob"
    with pytest.raises(UnconfiguredCallError):
        mock.object.greet("alice")


def test_setup_returns_configured_value() -> None:
    mock = Mock(_Greeter)
    mock.setup("greet", "bob").returns("hi bob")

    assert mock.object.greet("bob") == "hi bob"


def test_setup_raises_configured_error() -> None:
    mock = Mock(_Greeter)
    mock.setup("greet", "bob").raises(LookupError("unknown"))

    with pytest.raises(LookupError, match="unknown"):
        mock.object.greet("bob")


def test_setup_calls_delegate_with_call_arguments() -> None:
    mock = Mock(_Greeter)
    mock.setup("greet", ANY).calls(lambda name: f"hello {name}")

    assert mock.object.greet("carol") == "hello carol"


def test_setup_matches_keyword_and_positional_spelling() -> None:
    mock = Mock(_Greeter, MockBehavior.STRICT)
    mock.setup("greet", name="bob").returns("hi bob")
    mock.setup("farewell", "bob", loud=True).returns("BYE BOB")

    assert mock.object.greet("bob") == "hi bob"
    assert mock.object.farewell(name="bob", loud=True) == "BYE BOB"


def test_latest_matching_setup_wins() -> None:
    mock = Mock(_Greeter)
    mock.setup("greet", ANY).returns("generic")
    mock.setup("greet", "bob").returns("specific")

    assert mock.object.greet("bob") == "specific"
    assert mock.object.greet("alice") == "generic"


def test_with_any_arguments_matches_every_call() -> None:
    mock = Mock(_Greeter, MockBehavior.STRICT)
    mock.setup("farewell").with_any_arguments().returns("bye")

    assert mock.object.farewell("bob") == "bye"
    assert mock.object.farewell("alice", loud=True) == "bye"


def test_setup_without_outcome_returns_mock_default() -> None:
    mock = Mock(_Greeter, MockBehavior.STRICT)
    expectation = mock.setup("greet", "bob")

    mock.object.greet("bob")

    assert expectation.call_count == 1
    assert expectation.is_met


def test_setup_for_unknown_method_raises_attribute_error() -> None:
    mock = Mock(_Greeter)

    with pytest.raises(AttributeError):
        mock.setup("missing")


def test_static_methods_are_intercepted_for_strict_mock() -> None:
    mock = Mock(_Repository, MockBehavior.STRICT)
    mock.setup("table_name").returns("mocked")

    assert mock.object.table_name() == "mocked"


def test_strict_mock_raises_for_unconfigured_class_method() -> None:
    mock = Mock(_Repository, MockBehavior.STRICT)

    with pytest.raises(UnconfiguredCallError, match=r"_Repository\.default_page_size\(\)"):
        mock.object.default_page_size()


def test_strict_mock_raises_for_unconfigured_private_method() -> None:
    mock = Mock(_Handler, MockBehavior.STRICT)

    with pytest.raises(UnconfiguredCallError, match=r"_Handler\._validate\(1\)"):
        mock.object._validate(1)


def test_strict_mock_raises_when_callable_double_is_called_without_setup() -> None:
    mock = Mock(_Handler, MockBehavior.STRICT)

    with pytest.raises(UnconfiguredCallError, match=r"_Handler\.__call__\(1\)"):
        mock.object(1)


@pytest.mark.parametrize("behavior", [MockBehavior.LOOSE, MockBehavior.STRICT])
def test_setup_configures_calls_on_callable_double(behavior: MockBehavior) -> None:
    mock = Mock(_Handler, behavior)
    expectation = mock.setup("__call__", 1).returns(2)

    assert mock.object(1) == 2
    assert expectation.is_met
    mock.object.assert_called_once_with(1)


def test_setup_call_on_non_callable_double_raises_attribute_error() -> None:
    mock = Mock(_Greeter)

    with pytest.raises(AttributeError, match="__call__"):
        mock.setup("__call__", 1)


def test_setup_with_too_many_arguments_raises_type_error() -> None:
    mock = Mock(_Greeter)

    with pytest.raises(TypeError):
        mock.setup("greet", "bob", "alice")


def test_setup_with_unknown_keyword_raises_type_error() -> None:
    mock = Mock(_Greeter)

    with pytest.raises(TypeError):
        mock.setup("greet", nickname="bob")
    assert mock.expectations == ()


def test_mock_object_reports_spec_class() -> None:
    mock = Mock(_Repository)

    assert isinstance(mock.object, _Repository)
    assert mock.spec is _Repository


@pytest.mark.asyncio
async def test_async_method_returns_configured_value() -> None:
    mock = Mock(_Repository, MockBehavior.STRICT)
    mock.setup("fetch", 1).returns("first")

    assert await mock.object.fetch(1) == "first"
    with pytest.raises(UnconfiguredCallError):
        await mock.object.fetch(2)


def test_verify_all_reports_uncalled_expectations() -> None:
    mock = Mock(_Greeter)
    called = mock.setup("greet", "bob").returns("hi")
    uncalled = mock.setup("farewell", "bob")

    mock.object.greet("bob")

    assert mock.verify_all() == [uncalled]
    assert called.is_met


def test_verify_only_reports_verifiable_expectations() -> None:
    mock = Mock(_Greeter)
    mock.setup("greet", "bob")
    verifiable = mock.setup("farewell", "bob").verifiable()

    assert mock.verify() == [verifiable]
    assert len(mock.verify_all()) == 2


def test_times_requires_exact_call_count() -> None:
    mock = Mock(_Greeter)
    expectation = mock.setup("greet", "bob").times(2)

    mock.object.greet("bob")
    assert not expectation.is_met

    mock.object.greet("bob")
    assert expectation.is_met

    mock.object.greet("bob")
    assert not expectation.is_met


def test_times_zero_is_met_without_calls() -> None:
    mock = Mock(_Greeter)
    expectation = mock.setup("greet", "bob").times(0)

    assert expectation.is_met


def test_times_rejects_negative_count() -> None:
    mock = Mock(_Greeter)

    with pytest.raises(ValueError, match="must not be negative"):
        mock.setup("greet", "bob").times(-1)


def test_expectation_description_names_call_and_counts() -> None:
    mock = Mock(_Greeter)
    expectation = mock.setup("farewell", "bob", loud=True)

    assert str(expectation) == (
        "_Greeter.farewell('bob', loud=True) expected at least once, called 0 time(s)"
    )


def test_repository_tracks_every_created_mock() -> None:
    repository = MockRepository()

    first = repository.create(_Greeter)
    second = repository.create(_Greeter)

    assert list(repository) == [first, second]
    assert len(repository) == 2
    assert first is not second


def test_repository_default_behavior_applies_to_default_requests() -> None:
    repository = MockRepository(MockBehavior.STRICT)

    strict = repository.create(_Greeter)
    loose = repository.create(_Greeter, MockBehavior.LOOSE)

    assert strict.behavior is MockBehavior.STRICT
    assert loose.behavior is MockBehavior.LOOSE


def test_repository_verify_all_aggregates_across_mocks() -> None:
    repository = MockRepository()
    greeter = repository.create(_Greeter)
    other = repository.create(_Greeter, name="OtherGreeter")
    greeter.setup("greet", "bob")
    other.setup("greet", "alice")
    other.setup("farewell", "alice")

    with pytest.raises(VerificationError) as exc_info:
        repository.verify_all()

    assert len(exc_info.value.unmet_expectations) == 3
    message = str(exc_info.value)
    assert "_Greeter.greet('bob')" in message
    assert "OtherGreeter.greet('alice')" in message
    assert "OtherGreeter.farewell('alice')" in message


def test_repository_verify_passes_without_verifiable_expectations() -> None:
    repository = MockRepository()
    greeter = repository.create(_Greeter)
    greeter.setup("greet", "bob")

    repository.verify()
