from __future__ import annotations

from .app import create_app
from .server import ImplviewServer, run

__all__ = ["create_app", "ImplviewServer", "run"]
