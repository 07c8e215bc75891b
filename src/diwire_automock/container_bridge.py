from __future__ import annotations

import logging
from typing import Any

from diwire import Container

from diwire_automock._internal.type_checks import describe_key

logger = logging.getLogger(__name__)


class ContainerBridge:
    """Publish instances into a ``diwire.Container`` under runtime keys.

    The bridge is write-only and does no existence checks: publishing a key
    twice re-registers it, which ``Container.add_instance`` treats as an
    override.
    """

    def __init__(self, container: Container) -> None:
        self._container = container

    @property
    def container(self) -> Container:
        return self._container

    def publish(self, key: Any, instance: Any) -> None:
        """Register ``instance`` so that resolving ``key`` returns it.

        Args:
            key: Dependency key to bind.
            instance: Instance returned for ``key`` on resolution.

        """
        self._container.add_instance(instance, provides=key)
        logger.debug("Published %s into the container", describe_key(key))
