"""An in-memory object store with the semantics the controllers rely on."""

from __future__ import annotations

import copy
import itertools
import threading
import uuid
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone


@dataclass(frozen=True, order=True)
class ObjectKey:
    """Namespace and name identifying an object of a given kind."""

    namespace: str
    name: str

    @classmethod
    def from_object(cls, obj) -> ObjectKey:
        return cls(namespace=obj.metadata.namespace, name=obj.metadata.name)

    def __str__(self) -> str:
        return f"{self.namespace}/{self.name}" if self.namespace else self.name


@dataclass(frozen=True)
class Request:
    """A request to reconcile one object."""

    namespace: str
    name: str

    @property
    def key(self) -> ObjectKey:
        return ObjectKey(namespace=self.namespace, name=self.name)

    @classmethod
    def for_object(cls, obj) -> Request:
        return cls(namespace=obj.metadata.namespace, name=obj.metadata.name)


@dataclass(frozen=True)
class Result:
    """The outcome of a reconciliation."""

    requeue: bool = False
    requeue_after: timedelta | None = None


class NotFoundError(LookupError):
    def __init__(self, kind: str, key: ObjectKey):
        super().__init__(f'{kind} "{key}" not found')
        self.kind = kind
        self.key = key


class AlreadyExistsError(Exception):
    def __init__(self, kind: str, key: ObjectKey):
        super().__init__(f'{kind} "{key}" already exists')
        self.kind = kind
        self.key = key


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class InMemoryClient:
    """Stores copies of objects keyed by kind, namespace and name.

    Status is a subresource: ``update`` leaves the stored status alone and
    ``update_status`` changes nothing else. Objects carrying finalizers are only
    marked for deletion, and disappear once their last finalizer is removed.
    """

    def __init__(self, *objects, clock: Callable[[], datetime] | None = None):
        self._store: dict[tuple[str, str, str], object] = {}
        self._lock = threading.Lock()
        self._versions = itertools.count(1)
        self._clock = clock or _utcnow
        for obj in objects:
            self.create(obj)

    @staticmethod
    def _kind_name(kind) -> str:
        return kind.KIND if isinstance(kind, type) else type(kind).KIND

    def _slot(self, kind, key: ObjectKey) -> tuple[str, str, str]:
        return (self._kind_name(kind), key.namespace, key.name)

    def _require(self, obj) -> tuple[tuple[str, str, str], object]:
        key = ObjectKey.from_object(obj)
        slot = self._slot(obj, key)
        stored = self._store.get(slot)
        if stored is None:
            raise NotFoundError(slot[0], key)
        return slot, stored

    def get(self, kind, key):
        """Return a copy of the stored object of ``kind`` at ``key``."""
        if isinstance(key, Request):
            key = key.key
        slot = self._slot(kind, key)
        with self._lock:
            stored = self._store.get(slot)
            if stored is None:
                raise NotFoundError(slot[0], key)
            return copy.deepcopy(stored)

    def create(self, obj) -> None:
        meta = obj.metadata
        if not meta.name:
            raise ValueError(f"{self._kind_name(obj)} must have a name")
        key = ObjectKey.from_object(obj)
        slot = self._slot(obj, key)
        with self._lock:
            if slot in self._store:
                raise AlreadyExistsError(slot[0], key)
            if not meta.uid:
                meta.uid = str(uuid.uuid4())
            meta.resource_version = next(self._versions)
            self._store[slot] = copy.deepcopy(obj)

    def update(self, obj) -> None:
        """Replace an object's metadata and spec, keeping its stored status."""
        with self._lock:
            slot, stored = self._require(obj)
            fresh = copy.deepcopy(obj)
            if hasattr(stored, "status"):
                fresh.status = copy.deepcopy(stored.status)
                obj.status = copy.deepcopy(stored.status)
            fresh.metadata.uid = stored.metadata.uid
            fresh.metadata.deletion_timestamp = stored.metadata.deletion_timestamp
            version = next(self._versions)
            fresh.metadata.resource_version = version
            obj.metadata.resource_version = version
            obj.metadata.uid = stored.metadata.uid
            if fresh.metadata.deletion_timestamp is not None and not fresh.metadata.finalizers:
                del self._store[slot]
            else:
                self._store[slot] = fresh

    def update_status(self, obj) -> None:
        """Replace only the status of a stored object."""
        with self._lock:
            slot, stored = self._require(obj)
            fresh = copy.deepcopy(stored)
            fresh.status = copy.deepcopy(obj.status)
            version = next(self._versions)
            fresh.metadata.resource_version = version
            obj.metadata.resource_version = version
            self._store[slot] = fresh

    def delete(self, obj) -> None:
        """Delete an object, or mark it for deletion while finalizers remain."""
        with self._lock:
            slot, stored = self._require(obj)
            meta = stored.metadata
            if not meta.finalizers:
                del self._store[slot]
                return
            if meta.deletion_timestamp is None:
                meta.deletion_timestamp = self._clock()
                meta.resource_version = next(self._versions)
            obj.metadata.deletion_timestamp = meta.deletion_timestamp
            obj.metadata.resource_version = meta.resource_version

    def list(self, kind, namespace: str | None = None) -> list:
        """Return copies of all objects of ``kind``, ordered by namespace and name."""
        kind_name = self._kind_name(kind)
        with self._lock:
            found = [
                (ns, name, obj)
                for (k, ns, name), obj in self._store.items()
                if k == kind_name and (namespace is None or ns == namespace)
            ]
            found.sort(key=lambda item: (item[0], item[1]))
            return [copy.deepcopy(obj) for _, _, obj in found]