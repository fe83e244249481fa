from __future__ import annotations

from typing import Any

from fastapi import Body, FastAPI, HTTPException
from fastapi.responses import Response

from ...core.errors import InvalidImplementorMap
from ...core.loader import validate_mapping
from ...core.store import ImplementorStore, TraitImplementors, normalize_trait_path
from ...io.jsdata import dump_implementors_js


def _trait_key(trait_path: str) -> str:
    try:
        return normalize_trait_path(trait_path)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


def _entry_to_dict(entry: TraitImplementors, implementors: dict[str, Any] | None = None) -> dict:
    data = entry.implementors if implementors is None else implementors
    return {
        "traitPath": entry.trait_path,
        "revision": int(entry.revision),
        "registeredAt": float(entry.registered_at),
        "implementors": {crate: list(descriptors) for crate, descriptors in data.items()},
    }


def mount_implementors_api(app: FastAPI, store: ImplementorStore) -> None:
    @app.get("/api/implementors")
    def list_traits() -> list[dict]:
        out: list[dict] = []
        for key in store.traits():
            entry = store.get(key)
            out.append(
                {
                    "traitPath": key,
                    "attached": store.is_attached(key),
                    "pending": store.host(key).has_pending(),
                    "revision": int(entry.revision) if entry is not None else 0,
                    "crateCount": len(entry.implementors) if entry is not None else 0,
                    "descriptorCount": entry.descriptor_count if entry is not None else 0,
                }
            )
        return out

    @app.get("/api/implementors/{trait_path:path}")
    def get_implementors(trait_path: str, crate: str | None = None) -> dict:
        key = _trait_key(trait_path)
        # Viewing a trait is what initializes its host: pending data is registered now.
        store.attach(key)
        entry = store.get(key)
        if entry is None:
            raise HTTPException(status_code=404, detail=f"No implementors for trait: {key}")
        if crate is None:
            return _entry_to_dict(entry)
        data = store.implementors(key, crate=crate)
        if data is None:
            raise HTTPException(status_code=404, detail=f"Crate {crate!r} has no entry for trait: {key}")
        return _entry_to_dict(entry, data)

    @app.post("/api/implementors/{trait_path:path}")
    def publish_implementors(trait_path: str, body: Any = Body(...)) -> dict:
        key = _trait_key(trait_path)
        try:
            mapping = validate_mapping(body)
        except InvalidImplementorMap as e:
            raise HTTPException(status_code=400, detail=str(e))
        delivered = store.host(key).offer(mapping)
        return {"ok": True, "traitPath": key, "delivered": delivered}

    @app.get("/api/crates")
    def list_crates() -> list[str]:
        return store.crates()

    @app.get("/api/crates/{crate}")
    def get_crate(crate: str) -> dict:
        traits = store.traits_for_crate(crate)
        if not traits and crate not in store.crates():
            raise HTTPException(status_code=404, detail=f"Unknown crate: {crate}")
        return {"crate": crate, "traits": traits}

    @app.get("/implementors/{trait_path:path}", include_in_schema=False)
    def get_implementors_script(trait_path: str) -> Response:
        key = _trait_key(trait_path)
        entry = store.get(key)
        mapping = entry.implementors if entry is not None else store.host(key).pending
        if mapping is None:
            raise HTTPException(status_code=404, detail=f"No implementors for trait: {key}")
        return Response(content=dump_implementors_js(mapping), media_type="application/javascript")
