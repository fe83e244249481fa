from __future__ import annotations

from pathlib import Path

from fastapi.testclient import TestClient

from implview.core.store import ImplementorStore
from implview.runtime.app import create_app

DROP = "core/ops/drop/trait.Drop"


def _client(store: ImplementorStore | None = None, docs_root: Path | None = None) -> TestClient:
    return TestClient(create_app(store=store or ImplementorStore(), docs_root=docs_root))


def test_healthz_and_events() -> None:
    client = _client()

    assert client.get("/healthz").json() == {"ok": True}
    assert client.get("/api/events").json() == {"globalRevision": 0}


def test_publish_parks_until_first_view() -> None:
    store = ImplementorStore()
    client = _client(store)
    body = {"pkgA": ["implements Drop"], "pkgB": []}

    res = client.post(f"/api/implementors/{DROP}", json=body)
    assert res.status_code == 200
    assert res.json() == {"ok": True, "traitPath": DROP, "delivered": False}

    listing = client.get("/api/implementors").json()
    assert listing == [
        {
            "traitPath": DROP,
            "attached": False,
            "pending": True,
            "revision": 0,
            "crateCount": 0,
            "descriptorCount": 0,
        }
    ]

    got = client.get(f"/api/implementors/{DROP}").json()
    assert got["traitPath"] == DROP
    assert got["revision"] == 1
    assert got["implementors"] == body
    assert list(got["implementors"]) == ["pkgA", "pkgB"]

    # Now attached: the next publish is delivered straight away.
    res = client.post(f"/api/implementors/{DROP}", json={"pkgC": ["x"]})
    assert res.json()["delivered"] is True
    assert client.get(f"/api/implementors/{DROP}").json()["implementors"] == {"pkgC": ["x"]}
    assert client.get("/api/events").json()["globalRevision"] == 2


def test_publish_rejects_bad_body() -> None:
    client = _client()

    res = client.post(f"/api/implementors/{DROP}", json={"pkgA": "nope"})
    assert res.status_code == 400

    res = client.post(f"/api/implementors/{DROP}", json=[1, 2])
    assert res.status_code == 400


def test_unknown_trait_and_crate_are_404() -> None:
    store = ImplementorStore()
    store.register(DROP, {"pkgA": ["d"]})
    client = _client(store)

    assert client.get("/api/implementors/core/missing/trait.Nope").status_code == 404
    assert client.get(f"/api/implementors/{DROP}", params={"crate": "zzz"}).status_code == 404

    one = client.get(f"/api/implementors/{DROP}", params={"crate": "pkgA"}).json()
    assert one["implementors"] == {"pkgA": ["d"]}


def test_crates_endpoints() -> None:
    store = ImplementorStore()
    store.register(DROP, {"pkgA": ["d"], "pkgB": []})
    client = _client(store)

    assert client.get("/api/crates").json() == ["pkgA", "pkgB"]
    assert client.get("/api/crates/pkgA").json() == {"crate": "pkgA", "traits": [DROP]}
    assert client.get("/api/crates/pkgB").json() == {"crate": "pkgB", "traits": []}
    assert client.get("/api/crates/nobody").status_code == 404


def test_script_endpoint_reemits_artifact(docs_root: Path) -> None:
    client = _client(docs_root=docs_root)

    res = client.get(f"/implementors/{DROP}.js")
    assert res.status_code == 200
    assert "javascript" in res.headers["content-type"]
    expected = (docs_root / "implementors" / "core" / "ops" / "drop" / "trait.Drop.js").read_text(encoding="utf-8")
    assert res.text == expected


def test_docs_tree_is_served_and_loaded(docs_root: Path) -> None:
    client = _client(docs_root=docs_root)

    res = client.get("/")
    assert res.status_code == 200
    assert "implview test docs" in res.text

    traits = [t["traitPath"] for t in client.get("/api/implementors").json()]
    assert traits == ["core/clone/trait.Clone", DROP]

    got = client.get("/api/implementors/core/clone/trait.Clone").json()
    assert list(got["implementors"]) == ["wasmtime", "wiggle"]


def test_reset() -> None:
    store = ImplementorStore()
    store.register(DROP, {"a": []})
    client = _client(store)

    assert client.post("/api/reset").json() == {"ok": True}
    assert client.get("/api/implementors").json() == []
