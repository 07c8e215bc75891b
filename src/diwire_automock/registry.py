from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any, TypeAlias

from diwire_automock._internal.type_checks import describe_key
from diwire_automock.doubles import Mock
from diwire_automock.exceptions import DuplicateRegistrationError, MockNotFoundError


@dataclass(frozen=True, slots=True)
class AutoCreatedEntry:
    """Registry entry for a key whose double was created by the auto-mocker."""

    mock: Mock[Any]


@dataclass(frozen=True, slots=True)
class ProvidedEntry:
    """Registry entry for a key provided as an explicit instance.

    There is no double behind this entry, so verification skips it and
    ``lookup`` reports it as missing.
    """


RegistryEntry: TypeAlias = AutoCreatedEntry | ProvidedEntry


class MockRegistry:
    """Map dependency keys to registry entries.

    Each key moves from unregistered to registered at most once: a second
    registration for the same key raises ``DuplicateRegistrationError`` and
    there is no way to remove or replace an entry. Callers check
    ``has_no_entry_for`` before registering.
    """

    def __init__(self) -> None:
        self._entries_by_key: dict[Any, RegistryEntry] = {}

    def has_no_entry_for(self, key: Any) -> bool:
        return key not in self._entries_by_key

    def register(self, key: Any, mock: Mock[Any]) -> None:
        """Store an auto-created double under ``key``.

        Args:
            key: Dependency key the double was created for.
            mock: Double to store.

        Raises:
            DuplicateRegistrationError: If ``key`` already has an entry.

        """
        self._add(key, AutoCreatedEntry(mock))

    def register_provided(self, key: Any) -> None:
        """Mark ``key`` as provided by an explicit instance.

        Args:
            key: Dependency key the instance was published for.

        Raises:
            DuplicateRegistrationError: If ``key`` already has an entry.

        """
        self._add(key, ProvidedEntry())

    def lookup(self, key: Any) -> Mock[Any]:
        """Return the double stored under ``key``.

        Args:
            key: Dependency key to look up.

        Raises:
            MockNotFoundError: If ``key`` has no entry, or was provided as an
                explicit instance.

        """
        entry = self._entries_by_key.get(key)
        if isinstance(entry, AutoCreatedEntry):
            return entry.mock
        if entry is None:
            msg = f"No mock is registered for {describe_key(key)}."
        else:
            msg = (
                f"{describe_key(key)} was provided as an explicit instance; "
                "there is no mock to return."
            )
        raise MockNotFoundError(msg)

    def entry(self, key: Any) -> RegistryEntry | None:
        return self._entries_by_key.get(key)

    def mocks(self) -> Iterator[Mock[Any]]:
        """Iterate doubles of auto-created entries, skipping provided ones."""
        for entry in self._entries_by_key.values():
            if isinstance(entry, AutoCreatedEntry):
                yield entry.mock

    def _add(self, key: Any, entry: RegistryEntry) -> None:
        if key in self._entries_by_key:
            msg = f"A registry entry for {describe_key(key)} already exists."
            raise DuplicateRegistrationError(msg)
        self._entries_by_key[key] = entry

    def __contains__(self, key: object) -> bool:
        return key in self._entries_by_key

    def __len__(self) -> int:
        return len(self._entries_by_key)
