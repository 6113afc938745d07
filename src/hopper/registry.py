"""Ordered, name-keyed registry of instance definitions."""

import logging
from collections.abc import Iterable, Iterator
from dataclasses import replace
from typing import Protocol

from hopper.errors import (
    DuplicateNameError,
    InstanceNotFoundError,
    InvalidPatternError,
    PersistenceError,
)
from hopper.models import InstanceDef, PatternSpec, PlacementRule

logger = logging.getLogger(__name__)


class RegistryStore(Protocol):
    """Durable storage for the ordered instance list."""

    def load(self) -> list[InstanceDef]: ...

    def save(self, instances: list[InstanceDef]) -> None:
        """Persist *instances* in order. Raises on failure."""
        ...


class InstanceRegistry:
    """Ordered mapping of name -> InstanceDef with unique, case-sensitive names.

    Every mutation is persisted through the optional store.  If the store
    raises, the in-memory change is rolled back and PersistenceError is
    raised, so the mapping and the store never disagree.
    """

    def __init__(
        self,
        instances: Iterable[InstanceDef] = (),
        store: RegistryStore | None = None,
    ) -> None:
        self._store = store
        self._entries: dict[str, InstanceDef] = {}
        for instance in instances:
            if instance.name in self._entries:
                raise DuplicateNameError(instance.name)
            self._entries[instance.name] = instance

    @classmethod
    def from_store(cls, store: RegistryStore) -> "InstanceRegistry":
        """Build a registry seeded from *store* and bound to it for writes."""
        return cls(store.load(), store=store)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get(self, name: str) -> InstanceDef:
        try:
            return self._entries[name]
        except KeyError:
            raise InstanceNotFoundError(name) from None

    def list_instances(self) -> list[tuple[str, InstanceDef]]:
        """Return ``(name, instance)`` pairs in insertion order."""
        return list(self._entries.items())

    def names(self) -> list[str]:
        return list(self._entries)

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[InstanceDef]:
        return iter(list(self._entries.values()))

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def add(
        self,
        name: str,
        pattern: PatternSpec,
        placement: PlacementRule | None = None,
    ) -> None:
        """Append a new instance. Raises DuplicateNameError if *name* is taken."""
        if name in self._entries:
            raise DuplicateNameError(name)
        instance = InstanceDef(name=name, pattern=pattern, placement=placement or PlacementRule())
        previous = dict(self._entries)
        self._entries[name] = instance
        self._commit(previous)
        logger.info("Added instance %r", name)

    def edit(
        self,
        old_name: str,
        new_name: str,
        pattern: PatternSpec,
        placement: PlacementRule,
    ) -> None:
        """Replace an instance's pattern and placement, renaming it in place.

        The entry keeps its position in iteration order even when renamed.
        """
        current = self.get(old_name)
        if not new_name:
            raise InvalidPatternError("Instance name cannot be empty")
        if new_name != old_name and new_name in self._entries:
            raise DuplicateNameError(new_name)
        updated = replace(current, name=new_name, pattern=pattern, placement=placement)
        previous = dict(self._entries)
        self._entries = {
            (new_name if key == old_name else key): (updated if key == old_name else value)
            for key, value in self._entries.items()
        }
        self._commit(previous)
        if new_name != old_name:
            logger.info("Renamed instance %r to %r", old_name, new_name)
        else:
            logger.info("Edited instance %r", old_name)

    def rename(self, old_name: str, new_name: str) -> None:
        """Rename an instance, keeping its pattern and placement."""
        current = self.get(old_name)
        self.edit(old_name, new_name, current.pattern, current.placement)

    def delete(self, name: str) -> None:
        """Remove an instance; the remaining entries keep their order."""
        if name not in self._entries:
            raise InstanceNotFoundError(name)
        previous = dict(self._entries)
        del self._entries[name]
        self._commit(previous)
        logger.info("Deleted instance %r", name)

    def _commit(self, previous: dict[str, InstanceDef]) -> None:
        """Persist the current entries, restoring *previous* if the store fails."""
        if self._store is None:
            return
        try:
            self._store.save(list(self._entries.values()))
        except Exception as exc:
            self._entries = previous
            logger.debug("Rolled back registry mutation after store failure", exc_info=True)
            raise PersistenceError(f"Could not save instances: {exc}") from exc
