from diwire_automock.automocker import AutoMocker
from diwire_automock.behavior import MockBehavior
from diwire_automock.config import AutoMockerConfig
from diwire_automock.container_bridge import ContainerBridge
from diwire_automock.doubles import Expectation, Mock, MockRepository
from diwire_automock.exceptions import (
    AutoMockError,
    DuplicateRegistrationError,
    InvalidInstanceError,
    MockNotFoundError,
    UnconfiguredCallError,
    UnsupportedTypeError,
    VerificationError,
)
from diwire_automock.factory import MockCreationResult, MockFactory
from diwire_automock.registry import AutoCreatedEntry, MockRegistry, ProvidedEntry

__all__ = [
    "AutoCreatedEntry",
    "AutoMockError",
    "AutoMocker",
    "AutoMockerConfig",
    "ContainerBridge",
    "DuplicateRegistrationError",
    "Expectation",
    "InvalidInstanceError",
    "Mock",
    "MockBehavior",
    "MockCreationResult",
    "MockFactory",
    "MockNotFoundError",
    "MockRegistry",
    "MockRepository",
    "ProvidedEntry",
    "UnconfiguredCallError",
    "UnsupportedTypeError",
    "VerificationError",
]
