from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from diwire_automock.doubles import Expectation


class AutoMockError(Exception):
    """Represent a base class for all auto-mocking failures.

    Catch this type when you want to handle any auto-mocking error path without
    matching each concrete exception class individually.
    """


class DuplicateRegistrationError(AutoMockError):
    """Signal a second registry entry for the same dependency key.

    Raised by ``MockRegistry.register`` and ``MockRegistry.register_provided``.
    ``AutoMocker`` checks ``has_no_entry_for`` before registering, so this error
    only surfaces when the registry is driven directly.
    """


class MockNotFoundError(AutoMockError):
    """Signal that no double is registered for a dependency key.

    Raised by ``MockRegistry.lookup`` and ``AutoMocker.get_mock`` when the key
    was never requested, and by ``AutoMocker.get_or_create`` when the key was
    provided as an explicit instance through ``set_instance``.

    Typical fix is calling ``get_or_create`` before asking for mock state.
    """


class UnsupportedTypeError(AutoMockError):
    """Signal a dependency key that cannot be turned into a double.

    Raised by ``MockFactory.create`` for keys that are not runtime classes,
    classes marked with ``typing.final``, and classes the interpreter refuses
    to subclass (for example ``bool``).
    """


class UnconfiguredCallError(AutoMockError):
    """Signal a call on a strict double that matches no setup.

    Raised at call time, not at verification time. Typical fix is adding a
    ``mock.setup(...)`` for the call or requesting the double with
    ``MockBehavior.LOOSE``.
    """


class VerificationError(AutoMockError):
    """Signal unmet expectations found by ``verify`` or ``verify_all``.

    The error carries every unmet expectation across every double created by
    the repository, not only the first one.
    """

    def __init__(self, unmet_expectations: Sequence[Expectation]) -> None:
        self.unmet_expectations = tuple(unmet_expectations)
        lines = "\n".join(f"  - {expectation}" for expectation in self.unmet_expectations)
        super().__init__(
            f"{len(self.unmet_expectations)} expectation(s) were not met:\n{lines}",
        )


class InvalidInstanceError(AutoMockError):
    """Signal an explicit instance that cannot be bound to a dependency key.

    Raised by ``AutoMocker.set_instance`` when ``provides`` is ``None``.
    """
