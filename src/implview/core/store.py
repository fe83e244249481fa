from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from typing import Any

from .host import HostContext, ImplementorMap
from .logging import get_logger

log = get_logger(__name__)


@dataclass(frozen=True)
class TraitImplementors:
    trait_path: str
    implementors: dict[str, tuple[Any, ...]]
    revision: int
    registered_at: float

    @property
    def crate_names(self) -> tuple[str, ...]:
        return tuple(self.implementors.keys())

    @property
    def descriptor_count(self) -> int:
        return sum(len(v) for v in self.implementors.values())


def normalize_trait_path(trait_path: str) -> str:
    path = str(trait_path).strip().strip("/")
    if path.endswith(".js"):
        path = path[: -len(".js")]
    if not path:
        raise ValueError("trait_path cannot be empty")
    return path


class ImplementorStore:
    """In-memory registrar for implementor data, one host context per trait page."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._hosts: dict[str, HostContext] = {}
        self._traits: dict[str, TraitImplementors] = {}
        self._global_revision = 0

    def host(self, trait_path: str) -> HostContext:
        key = normalize_trait_path(trait_path)
        with self._lock:
            host = self._hosts.get(key)
            if host is None:
                host = HostContext(name=key)
                self._hosts[key] = host
            return host

    def registrar_for(self, trait_path: str):
        key = normalize_trait_path(trait_path)

        def _register(mapping: ImplementorMap) -> TraitImplementors:
            return self.register(key, mapping)

        return _register

    def attach(self, trait_path: str) -> bool:
        """Bind this store as the registrar of ``trait_path``'s host context.

        Any mapping parked in the pending slot is registered now. Returns True
        when pending data was picked up; attaching twice is a no-op.
        """

        host = self.host(trait_path)
        if host.registrar is not None:
            return False
        return host.bind(self.registrar_for(host.name))

    def is_attached(self, trait_path: str) -> bool:
        key = normalize_trait_path(trait_path)
        with self._lock:
            host = self._hosts.get(key)
        return host is not None and host.registrar is not None

    def register(self, trait_path: str, mapping: ImplementorMap) -> TraitImplementors:
        key = normalize_trait_path(trait_path)
        # Snapshot so later changes to the caller's lists don't leak in.
        snapshot = {str(crate): tuple(descriptors) for crate, descriptors in mapping.items()}
        with self._lock:
            prev = self._traits.get(key)
            entry = TraitImplementors(
                trait_path=key,
                implementors=snapshot,
                revision=1 if prev is None else prev.revision + 1,
                registered_at=time.time(),
            )
            self._traits[key] = entry
            self._global_revision += 1
        log.info(
            "implementors registered",
            trait=key,
            revision=entry.revision,
            crates=len(snapshot),
            descriptors=entry.descriptor_count,
        )
        return entry

    def get(self, trait_path: str) -> TraitImplementors | None:
        key = normalize_trait_path(trait_path)
        with self._lock:
            return self._traits.get(key)

    def list(self) -> list[TraitImplementors]:
        with self._lock:
            return [self._traits[k] for k in sorted(self._traits)]

    def traits(self) -> list[str]:
        """All trait paths with registered or pending data, sorted."""

        with self._lock:
            keys = set(self._traits)
            keys.update(k for k, h in self._hosts.items() if h.has_pending())
        return sorted(keys)

    def pending_traits(self) -> list[str]:
        with self._lock:
            hosts = list(self._hosts.items())
        return sorted(k for k, h in hosts if h.has_pending())

    def implementors(self, trait_path: str, crate: str | None = None) -> dict[str, tuple[Any, ...]] | None:
        entry = self.get(trait_path)
        if entry is None:
            return None
        if crate is None:
            return dict(entry.implementors)
        if crate not in entry.implementors:
            return None
        return {crate: entry.implementors[crate]}

    def crates(self) -> list[str]:
        with self._lock:
            names = {c for e in self._traits.values() for c in e.implementors}
        return sorted(names)

    def traits_for_crate(self, crate: str) -> list[str]:
        with self._lock:
            entries = list(self._traits.values())
        return sorted(e.trait_path for e in entries if e.implementors.get(crate))

    def global_revision(self) -> int:
        with self._lock:
            return self._global_revision

    def reset(self) -> None:
        with self._lock:
            self._hosts.clear()
            self._traits.clear()
            self._global_revision += 1
        log.info("store reset")


STORE = ImplementorStore()
