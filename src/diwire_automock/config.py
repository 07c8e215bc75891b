from __future__ import annotations

from dataclasses import dataclass

from diwire_automock.behavior import MockBehavior


@dataclass(frozen=True, slots=True)
class AutoMockerConfig:
    """Configure an ``AutoMocker``.

    Args:
        default_behavior: Behavior used when a double is requested with
            ``MockBehavior.DEFAULT``. ``DEFAULT`` here means ``LOOSE``.
        register_self: Publish the ``AutoMocker`` into its container under the
            ``AutoMocker`` key so code resolved from the container can reach it.

    """

    default_behavior: MockBehavior = MockBehavior.LOOSE
    register_self: bool = True
