"""An in-memory resource store with the semantics of a cluster API client."""

from __future__ import annotations

import threading
from typing import Any, Iterable


class ClientError(Exception):
    """Base error raised by the resource client."""


class NotFoundError(ClientError, LookupError):
    """The named resource does not exist."""


class AlreadyExistsError(ClientError):
    """A resource with that name already exists."""


class ConflictError(ClientError):
    """The resource was changed since the caller last read it."""


_Requirement = tuple[str, str, str]


def parse_label_selector(selector: str | None) -> list[_Requirement]:
    """Parse a label selector into (key, operator, value) requirements.

    Operators are "=", "!=", "exists" and "!exists"; "==" is read as "=".
    An empty selector yields no requirements.
    """
    if selector is None or not selector.strip():
        return []
    requirements: list[_Requirement] = []
    for raw in selector.split(","):
        term = raw.strip()
        if not term:
            raise ValueError(f"empty term in label selector {selector!r}")
        if "!=" in term:
            key, value = term.split("!=", 1)
            op = "!="
        elif "==" in term:
            key, value = term.split("==", 1)
            op = "="
        elif "=" in term:
            key, value = term.split("=", 1)
            op = "="
        elif term.startswith("!"):
            key, value, op = term[1:], "", "!exists"
        else:
            key, value, op = term, "", "exists"
        key, value = key.strip(), value.strip()
        if not key or any(ch.isspace() for ch in key):
            raise ValueError(f"invalid label key in selector term {term!r}")
        if "=" in value or "!" in value:
            raise ValueError(f"invalid label value in selector term {term!r}")
        requirements.append((key, op, value))
    return requirements


def _matches(labels: dict[str, str], requirements: Iterable[_Requirement]) -> bool:
    for key, op, value in requirements:
        present = key in labels
        if op == "=" and not (present and labels[key] == value):
            return False
        if op == "!=" and present and labels[key] == value:
            return False
        if op == "exists" and not present:
            return False
        if op == "!exists" and present:
            return False
    return True


class InMemoryClient:
    """Stores copies of resources by kind and name.

    Objects handed in and out are always copies, so callers cannot change
    the stored state by mutating them. An update is refused as a conflict
    when both the stored object and the update carry a resource version and
    the two differ.
    """

    def __init__(self, objects: Iterable[Any] = ()) -> None:
        self._objects: dict[tuple[str, str], Any] = {}
        self._lock = threading.Lock()
        for obj in objects:
            self.create(obj)

    @staticmethod
    def _key(obj: Any) -> tuple[str, str]:
        name = obj.object_meta.name
        if not name:
            raise ClientError(f"{obj.KIND} must have a name")
        return obj.KIND, name

    def create(self, obj: Any) -> None:
        key = self._key(obj)
        with self._lock:
            if key in self._objects:
                raise AlreadyExistsError(f'{key[0]} "{key[1]}" already exists')
            self._objects[key] = obj.deep_copy()

    def get(self, kind: str, name: str) -> Any:
        with self._lock:
            try:
                return self._objects[(kind, name)].deep_copy()
            except KeyError:
                raise NotFoundError(f'{kind} "{name}" not found') from None

    def update(self, obj: Any) -> None:
        key = self._key(obj)
        with self._lock:
            stored = self._objects.get(key)
            if stored is None:
                raise NotFoundError(f'{key[0]} "{key[1]}" not found')
            stored_version = stored.object_meta.resource_version
            new_version = obj.object_meta.resource_version
            if stored_version and new_version and stored_version != new_version:
                raise ConflictError(
                    f'{key[0]} "{key[1]}" has been modified; '
                    f"version {new_version} is stale"
                )
            self._objects[key] = obj.deep_copy()

    def delete(self, kind: str, name: str) -> None:
        with self._lock:
            if self._objects.pop((kind, name), None) is None:
                raise NotFoundError(f'{kind} "{name}" not found')

    def list(self, kind: str, label_selector: str | None = "") -> list[Any]:
        """Return copies of every object of a kind matching the selector, by name."""
        requirements = parse_label_selector(label_selector)
        with self._lock:
            return [
                obj.deep_copy()
                for (obj_kind, _), obj in sorted(self._objects.items())
                if obj_kind == kind and _matches(obj.object_meta.labels, requirements)
            ]