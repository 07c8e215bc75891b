from __future__ import annotations

import pytest
from diwire import Container

from diwire_automock.automocker import AutoMocker
from diwire_automock.config import AutoMockerConfig


@pytest.fixture()
def automock_config() -> AutoMockerConfig:
    """Return the configuration used by the ``automocker`` fixture.

    Override this fixture to change the default mock behavior, for example to
    make every double strict unless a test asks otherwise.

    Returns:
        A default ``AutoMockerConfig``.

    """
    return AutoMockerConfig()


@pytest.fixture()
def automock_container() -> Container:
    """Create a per-test DI container the ``automocker`` fixture publishes into.

    Override this fixture to pre-register real dependencies for the system under
    test.

    Returns:
        A new ``Container`` instance.

    """
    return Container()


@pytest.fixture()
def automocker(
    automock_container: Container,
    automock_config: AutoMockerConfig,
) -> AutoMocker:
    """Create a per-test ``AutoMocker`` bound to ``automock_container``.

    The fixture is function-scoped, so doubles and registrations never leak
    between tests. Verification is explicit: call ``automocker.verify()`` or
    ``automocker.verify_all()`` at the end of the test.

    Returns:
        A new ``AutoMocker`` instance.

    """
    return AutoMocker(automock_container, automock_config)
