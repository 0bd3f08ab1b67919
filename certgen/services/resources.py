"""Resource loaders mapping logical resource names to bytes."""

from __future__ import annotations

import os
from typing import Mapping, Protocol

from ..errors import ResourceDecodeError, ResourceNotFound


class ResourceLoader(Protocol):
    def load(self, name: str) -> bytes: ...


def _safe_resource_path(root: str, candidate: str | None) -> str | None:
    raw = (candidate or "").strip()
    if not raw:
        return None
    root_real = os.path.realpath(root)
    resolved = os.path.realpath(os.path.join(root_real, raw))
    if resolved == root_real or resolved.startswith(f"{root_real}{os.sep}"):
        return resolved
    return None


class FileResourceLoader:
    """Reads resources from a directory tree; names cannot escape ``root``."""

    def __init__(self, root: str):
        self.root = root

    def load(self, name: str) -> bytes:
        path = _safe_resource_path(self.root, name)
        if not path or not os.path.isfile(path):
            raise ResourceNotFound(f"resource {name!r} not found under {self.root}")
        try:
            with open(path, "rb") as fh:
                data = fh.read()
        except OSError as exc:
            raise ResourceNotFound(f"resource {name!r} unreadable: {exc}") from exc
        if not data:
            raise ResourceDecodeError(f"resource {name!r} is empty")
        return data

    def __repr__(self) -> str:
        return f"FileResourceLoader({self.root!r})"


class StaticResourceLoader:
    """In-memory loader, mostly for tests and embedding callers."""

    def __init__(self, resources: Mapping[str, bytes] | None = None):
        self.resources = dict(resources or {})

    def load(self, name: str) -> bytes:
        try:
            data = self.resources[name]
        except KeyError:
            raise ResourceNotFound(f"resource {name!r} not found") from None
        if not data:
            raise ResourceDecodeError(f"resource {name!r} is empty")
        return data
