from __future__ import annotations

from .client import ImplviewClient, ImplviewClientError

__all__ = ["ImplviewClient", "ImplviewClientError"]
