from __future__ import annotations

from .implementors import mount_implementors_api

__all__ = ["mount_implementors_api"]
