from __future__ import annotations

from pathlib import Path

from fastapi import FastAPI

from ..api import create_api_app
from ..core.logging import get_logger
from ..core.settings import load_settings
from ..core.store import STORE, ImplementorStore
from ..io.jsdata import load_docs_tree
from .web import mount_docs

log = get_logger(__name__)


def create_app(store: ImplementorStore | None = None, docs_root: str | Path | None = None) -> FastAPI:
    """Create the full app: API + (optional) static documentation tree.

    ``docs_root`` defaults to ``IMPLVIEW_DOCS_ROOT``. When set, its
    ``implementors/`` scripts are loaded into the store before serving.
    """

    store = STORE if store is None else store
    if docs_root is None:
        docs_root = load_settings().docs_root

    app = create_api_app(store)
    app.state.loaded_traits = ()

    if docs_root is not None:
        root = Path(docs_root)
        try:
            loaders = load_docs_tree(root, store)
            app.state.loaded_traits = tuple(loader.trait_path for loader in loaders)
        except FileNotFoundError:
            log.warning("no implementors directory in docs root", docs_root=str(root))
        mount_docs(app, root)

    return app
