from __future__ import annotations

from pathlib import Path

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles


def mount_docs(app: FastAPI, docs_root: Path) -> None:
    """Serve a generated documentation tree from the same FastAPI app.

    Must be called after the API routes are registered: the mount sits at `/`
    and would otherwise shadow them.
    """

    docs_root = Path(docs_root).resolve()
    if not docs_root.is_dir():
        raise FileNotFoundError(f"Documentation root not found: {docs_root}")

    app.mount("/", StaticFiles(directory=str(docs_root), html=True), name="docs")
