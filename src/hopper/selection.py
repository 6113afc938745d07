"""The process-wide pointer to the active instance."""

import logging
from typing import Protocol

from hopper.errors import ChooserCancelledError, InstanceNotFoundError, NoInstancesDefinedError
from hopper.registry import InstanceRegistry

logger = logging.getLogger(__name__)


class Chooser(Protocol):
    """Presents candidate names and returns the one the user picked."""

    def pick(self, candidates: list[str]) -> str:
        """Return one of *candidates*. Raises ChooserCancelledError on abort."""
        ...


class SelectionState:
    """Holds the name of the active instance.

    The held name may go stale when its instance is deleted or renamed;
    that is recoverable and is resolved lazily by ``resolve``.  Nothing
    here is persisted.
    """

    def __init__(self, name: str | None = None) -> None:
        self._name = name

    @property
    def name(self) -> str | None:
        return self._name

    def is_valid(self, registry: InstanceRegistry) -> bool:
        return self._name is not None and self._name in registry

    def resolve(self, registry: InstanceRegistry, chooser: Chooser | None = None) -> str:
        """Return the active name, asking *chooser* if it is unset or stale.

        Without a chooser an unset or stale selection cannot be repaired
        here and ChooserCancelledError is raised; callers that pick
        asynchronously (the TUI) settle the selection before hopping.
        """
        if self._name is not None and self._name in registry:
            return self._name
        candidates = registry.names()
        if not candidates:
            raise NoInstancesDefinedError()
        if self._name is not None:
            logger.debug("Selection %r is stale, asking for a new one", self._name)
        if chooser is None:
            raise ChooserCancelledError("No active instance selected")
        picked = chooser.pick(candidates)
        if picked not in registry:
            raise InstanceNotFoundError(picked)
        self._name = picked
        return picked

    def set(self, name: str, registry: InstanceRegistry) -> None:
        if name not in registry:
            raise InstanceNotFoundError(name)
        self._name = name

    def clear(self) -> None:
        self._name = None
