"""Host side of the implementor hand-off.

A `HostContext` plays the part the page runtime plays for a generated
``implementors/*.js`` script: it may or may not have a registrar bound yet,
and it owns the single pending slot a loader falls back to when it has not.
"""

from __future__ import annotations

import threading
from typing import Any, Callable, Mapping, Sequence

from .logging import get_logger

Descriptor = Any
ImplementorMap = Mapping[str, Sequence[Descriptor]]
Registrar = Callable[[ImplementorMap], object]

log = get_logger(__name__)


class HostContext:
    def __init__(self, name: str = "", registrar: Registrar | None = None) -> None:
        self.name = name
        # `_lock` guards the slot and registrar fields; `_deliver_lock` is held
        # through registrar calls so deliveries happen in publish order.
        self._lock = threading.RLock()
        self._deliver_lock = threading.RLock()
        self._registrar: Registrar | None = registrar
        self._pending: ImplementorMap | None = None

    def __repr__(self) -> str:
        return (
            f"HostContext(name={self.name!r}, bound={self.registrar is not None}, "
            f"pending={self.has_pending()})"
        )

    @property
    def registrar(self) -> Registrar | None:
        with self._lock:
            return self._registrar

    @property
    def pending(self) -> ImplementorMap | None:
        with self._lock:
            return self._pending

    def has_pending(self) -> bool:
        with self._lock:
            return self._pending is not None

    def offer(self, mapping: ImplementorMap) -> bool:
        """Hand ``mapping`` to the registrar, or park it in the pending slot.

        Returns True when the registrar was invoked. The pending slot keeps only
        the most recent mapping.
        """

        with self._deliver_lock:
            with self._lock:
                registrar = self._registrar
                if registrar is None:
                    replaced = self._pending is not None
                    self._pending = mapping
                    log.debug("implementors parked", host=self.name, replaced=replaced, crates=len(mapping))
                    return False

            registrar(mapping)
        log.debug("implementors delivered", host=self.name, crates=len(mapping))
        return True

    def drain(self) -> ImplementorMap | None:
        """Take the pending mapping and clear the slot."""

        with self._deliver_lock, self._lock:
            mapping = self._pending
            self._pending = None
            return mapping

    def bind(self, registrar: Registrar) -> bool:
        """Install ``registrar`` and deliver any pending mapping to it.

        Returns True when a pending mapping was picked up. Rebinding replaces the
        registrar; nothing already delivered is sent again. If the registrar
        raises on the pending mapping, the previous binding and the pending
        mapping are restored before the error propagates.
        """

        with self._deliver_lock:
            with self._lock:
                previous = self._registrar
                self._registrar = registrar
                mapping = self._pending
                self._pending = None

            if mapping is None:
                log.debug("registrar bound", host=self.name, drained=False)
                return False

            try:
                registrar(mapping)
            except Exception:
                with self._lock:
                    self._registrar = previous
                    self._pending = mapping
                log.exception("registrar rejected pending implementors", host=self.name)
                raise

        log.info("registrar bound", host=self.name, drained=True, crates=len(mapping))
        return True

    def unbind(self) -> Registrar | None:
        with self._deliver_lock, self._lock:
            registrar = self._registrar
            self._registrar = None
            return registrar
