from __future__ import annotations

from .core.host import HostContext
from .core.loader import ImplementorLoader, publish
from .core.store import STORE, ImplementorStore
from .io.jsdata import dump_implementors_js, load_docs_tree, load_implementors_file, parse_implementors_js
from .runtime.server import ImplviewServer, run
from .sdk.client import ImplviewClient

__all__ = [
    "run",
    "publish",
    "HostContext",
    "ImplementorLoader",
    "ImplementorStore",
    "STORE",
    "ImplviewServer",
    "ImplviewClient",
    "parse_implementors_js",
    "dump_implementors_js",
    "load_implementors_file",
    "load_docs_tree",
]
