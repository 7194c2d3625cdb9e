"""Directory abstraction and an in-memory implementation.

A Directory is a store of identifiable objects. The REST layer only ever
talks to the abstract interface; concrete storage is supplied by whoever
builds the UserContext.
"""
from __future__ import annotations
import copy
import itertools
import logging
import threading
from abc import ABC, abstractmethod
from typing import Callable, Generic, Iterable, List, Optional, Set, TypeVar

from .exceptions import ClientError, NotFoundError, ObjectExistsError

T = TypeVar("T")

logger = logging.getLogger(__name__)


class Directory(ABC, Generic[T]):
    """Store of objects keyed by string identifier."""

    @abstractmethod
    def get_identifiers(self) -> Set[str]:
        """Return the identifiers of all objects within this directory."""

    @abstractmethod
    def get_all(self, identifiers: Iterable[str]) -> List[T]:
        """Return the objects having the given identifiers, skipping unknown ones."""

    @abstractmethod
    def get(self, identifier: str) -> Optional[T]:
        """Return the object having the given identifier, or None."""

    @abstractmethod
    def add(self, obj: T) -> None:
        """Add the given object, populating its identifier if applicable."""

    @abstractmethod
    def update(self, obj: T) -> None:
        """Replace the stored object having the same identifier."""

    @abstractmethod
    def remove(self, identifier: str) -> None:
        """Remove the object having the given identifier."""


def sequential_identifiers(start: int = 1) -> Callable[[], str]:
    """Return a factory producing "1", "2", ... for stores with numeric keys."""
    counter = itertools.count(start)
    return lambda: str(next(counter))


class InMemoryDirectory(Directory[T]):
    """Thread-safe Directory backed by a dict.

    Objects are copied on the way in and out, so callers never share state
    with the store.

    Args:
        objects: Initial contents
        identifier_factory: Called to assign identifiers to objects added
            without one. If None, such objects are rejected.
    """

    def __init__(self, objects: Iterable[T] = (),
                 identifier_factory: Optional[Callable[[], str]] = None):
        self._lock = threading.RLock()
        self._objects: dict[str, T] = {}
        self._identifier_factory = identifier_factory
        for obj in objects:
            self.add(obj)

    def get_identifiers(self) -> Set[str]:
        with self._lock:
            return set(self._objects)

    def get_all(self, identifiers: Iterable[str]) -> List[T]:
        with self._lock:
            return [
                copy.deepcopy(self._objects[identifier])
                for identifier in identifiers
                if identifier in self._objects
            ]

    def get(self, identifier: str) -> Optional[T]:
        with self._lock:
            obj = self._objects.get(identifier)
            return copy.deepcopy(obj) if obj is not None else None

    def add(self, obj: T) -> None:
        with self._lock:
            if not obj.identifier:
                if self._identifier_factory is None:
                    raise ClientError("An identifier is required for objects in this directory.")
                # Skip identifiers already taken by explicitly-keyed objects
                identifier = self._identifier_factory()
                while identifier in self._objects:
                    identifier = self._identifier_factory()
                obj.identifier = identifier
            elif obj.identifier in self._objects:
                raise ObjectExistsError(f"Object \"{obj.identifier}\" already exists.")
            self._objects[obj.identifier] = copy.deepcopy(obj)
        logger.debug("Added object %s", obj.identifier)

    def update(self, obj: T) -> None:
        with self._lock:
            if obj.identifier not in self._objects:
                raise NotFoundError(f"Not found: \"{obj.identifier}\"")
            self._objects[obj.identifier] = copy.deepcopy(obj)

    def remove(self, identifier: str) -> None:
        with self._lock:
            if identifier not in self._objects:
                raise NotFoundError(f"Not found: \"{identifier}\"")
            del self._objects[identifier]
        logger.debug("Removed object %s", identifier)
