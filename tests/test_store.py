from __future__ import annotations

import pytest

from implview.core.loader import publish
from implview.core.store import ImplementorStore, normalize_trait_path

DROP = "core/ops/drop/trait.Drop"


def test_attach_picks_up_pending_mapping() -> None:
    store = ImplementorStore()
    publish({"wasmtime": ["impl Drop for Store"]}, store.host(DROP))

    assert store.get(DROP) is None
    assert store.pending_traits() == [DROP]
    assert store.traits() == [DROP]

    assert store.attach(DROP) is True
    entry = store.get(DROP)
    assert entry is not None
    assert entry.implementors == {"wasmtime": ("impl Drop for Store",)}
    assert entry.revision == 1
    assert store.pending_traits() == []
    assert store.is_attached(DROP)

    # Attaching again is a no-op.
    assert store.attach(DROP) is False
    assert store.get(DROP).revision == 1  # type: ignore[union-attr]


def test_publish_after_attach_registers_immediately_and_replaces() -> None:
    store = ImplementorStore()
    store.attach(DROP)
    rev0 = store.global_revision()

    publish({"a": ["1"]}, store.host(DROP))
    publish({"b": ["2"], "c": []}, store.host(DROP))

    entry = store.get(DROP)
    assert entry is not None
    assert entry.implementors == {"b": ("2",), "c": ()}
    assert entry.revision == 2
    assert entry.descriptor_count == 1
    assert store.global_revision() == rev0 + 2


def test_register_snapshots_the_mapping() -> None:
    store = ImplementorStore()
    descriptors = ["x"]
    store.register(DROP, {"a": descriptors})
    descriptors.append("y")

    assert store.implementors(DROP) == {"a": ("x",)}


def test_crate_queries() -> None:
    store = ImplementorStore()
    store.register(DROP, {"wasmtime": ["d"], "wasmtime_environ": []})
    store.register("core/clone/trait.Clone", {"wasmtime": ["c"], "wiggle": ["c"]})

    assert store.crates() == ["wasmtime", "wasmtime_environ", "wiggle"]
    assert store.traits_for_crate("wasmtime") == ["core/clone/trait.Clone", DROP]
    # A crate with an empty list implements nothing.
    assert store.traits_for_crate("wasmtime_environ") == []
    assert store.implementors(DROP, crate="wasmtime") == {"wasmtime": ("d",)}
    assert store.implementors(DROP, crate="missing") is None
    assert store.implementors("core/missing/trait.Nope") is None
    assert [e.trait_path for e in store.list()] == ["core/clone/trait.Clone", DROP]


def test_reset_clears_everything_and_bumps_revision() -> None:
    store = ImplementorStore()
    store.register(DROP, {"a": []})
    publish({"b": []}, store.host("core/clone/trait.Clone"))
    rev = store.global_revision()

    store.reset()

    assert store.traits() == []
    assert store.global_revision() == rev + 1
    assert not store.is_attached(DROP)


def test_normalize_trait_path() -> None:
    assert normalize_trait_path("/core/ops/drop/trait.Drop.js") == DROP
    assert ImplementorStore().host(" core/ops/drop/trait.Drop ").name == DROP
    with pytest.raises(ValueError):
        normalize_trait_path(" / ")
