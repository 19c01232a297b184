"""Phased in-memory store shared by the module and target registries."""

from __future__ import annotations

import logging
from typing import Generic, Iterator, TypeVar

from buildplan.errors import RegistrationClosedError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class PhasedRegistry(Generic[T]):
    """Name-keyed store that accepts registrations until it is frozen.

    The load phase ends with :meth:`freeze`; afterwards the registry is a
    read-only snapshot that any number of resolver threads may share.
    """

    kind = "registry"

    def __init__(self):
        self._items: dict[str, T] = {}
        self._frozen = False

    @property
    def frozen(self) -> bool:
        return self._frozen

    def freeze(self) -> None:
        if not self._frozen:
            logger.info("%s frozen with %d entries", self.kind, len(self._items))
        self._frozen = True

    def _check_open(self, name: str) -> None:
        if self._frozen:
            raise RegistrationClosedError(self.kind, name)

    def names(self) -> list[str]:
        return sorted(self._items)

    def __contains__(self, name: object) -> bool:
        return name in self._items

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[T]:
        for name in self.names():
            yield self._items[name]
