from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class Settings:
    """Process settings read from the environment.

    Notes:
    - ``url`` points at an already running implview server to attach to.
    - ``docs_root`` is a generated documentation tree containing ``implementors/``.
    """

    url: str = ""
    docs_root: Path | None = None
    log_level: str = "info"
    log_format: str = "console"


def normalize_base_url(url: str) -> str:
    url = url.strip()
    if not url:
        return ""
    # Allow passing just host:port.
    if "://" not in url:
        url = "http://" + url
    return url.rstrip("/")


def load_settings() -> Settings:
    docs_root = os.getenv("IMPLVIEW_DOCS_ROOT", "").strip()
    return Settings(
        url=normalize_base_url(os.getenv("IMPLVIEW_URL", "")),
        docs_root=Path(docs_root) if docs_root else None,
        log_level=os.getenv("IMPLVIEW_LOG_LEVEL", "info").strip() or "info",
        log_format=os.getenv("IMPLVIEW_LOG_FORMAT", "console").strip() or "console",
    )
