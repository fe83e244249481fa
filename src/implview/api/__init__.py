from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ..core.store import STORE, ImplementorStore
from .routes import mount_implementors_api


def create_api_app(store: ImplementorStore | None = None) -> FastAPI:
    store = STORE if store is None else store
    app = FastAPI(title="implview", version="0.1.0")
    app.state.store = store

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[
            "http://localhost:5173",
            "http://127.0.0.1:5173",
        ],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    mount_implementors_api(app, store)

    @app.get("/healthz")
    def healthz() -> dict[str, bool]:
        return {"ok": True}

    @app.get("/api/events")
    def events() -> dict[str, int]:
        # Minimal polling endpoint.
        return {"globalRevision": store.global_revision()}

    @app.post("/api/reset")
    def reset() -> dict[str, bool]:
        store.reset()
        return {"ok": True}

    return app
