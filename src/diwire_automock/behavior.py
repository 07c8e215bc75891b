from __future__ import annotations

from enum import Enum


class MockBehavior(Enum):
    """Select how a double reacts to calls that have no matching setup.

    Pass these values to ``AutoMocker.get_or_create`` or ``MockFactory.create``.
    ``DEFAULT`` defers to the repository default, which is configured through
    ``AutoMockerConfig.default_behavior``.
    """

    DEFAULT = "default"
    """Use the repository default behavior (``LOOSE`` unless configured otherwise)."""

    STRICT = "strict"
    """Raise ``UnconfiguredCallError`` at call time for any call without a setup."""

    LOOSE = "loose"
    """Return the ``unittest.mock`` default value for calls without a setup."""
