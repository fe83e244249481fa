from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .errors import InvalidImplementorMap
from .host import HostContext, ImplementorMap


def publish(mapping: ImplementorMap, host: HostContext) -> None:
    """Publish a precomputed implementor mapping to ``host``.

    If the host already has a registrar bound it is called synchronously with
    ``mapping`` (its result is discarded). Otherwise ``mapping`` replaces the
    host's pending slot so a later `HostContext.bind` can pick it up once.

    The mapping object is handed over as-is: it is not copied, validated or
    reordered.
    """

    host.offer(mapping)


@dataclass(frozen=True)
class ImplementorLoader:
    """One generated implementors file: the trait it belongs to plus its data."""

    trait_path: str
    mapping: ImplementorMap

    def publish(self, host: HostContext) -> None:
        publish(self.mapping, host)

    @property
    def crate_names(self) -> tuple[str, ...]:
        return tuple(self.mapping.keys())


def validate_mapping(mapping: Any) -> ImplementorMap:
    """Check the ``{crate: [descriptor, ...]}`` shape of untrusted input.

    Descriptors themselves are opaque and not inspected. Returns ``mapping``
    unchanged.
    """

    if not isinstance(mapping, dict):
        raise InvalidImplementorMap(f"implementor mapping must be an object, got {type(mapping).__name__}")
    for crate, descriptors in mapping.items():
        if not isinstance(crate, str) or not crate.strip():
            raise InvalidImplementorMap(f"crate names must be non-empty strings, got {crate!r}")
        if not isinstance(descriptors, list):
            raise InvalidImplementorMap(
                f"descriptors for crate {crate!r} must be a list, got {type(descriptors).__name__}"
            )
    return mapping
