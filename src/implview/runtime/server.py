from __future__ import annotations

import contextlib
import socket
import threading
import time
import webbrowser
from dataclasses import dataclass, field
from pathlib import Path

import httpx
import uvicorn

from ..core.host import ImplementorMap
from ..core.loader import validate_mapping
from ..core.logging import configure_logging, get_logger
from ..core.settings import load_settings, normalize_base_url
from ..core.store import STORE
from ..sdk.client import ImplviewClient
from .app import create_app

log = get_logger(__name__)


@dataclass(frozen=True)
class ImplviewServer:
    host: str
    port: int
    url: str
    # Trait paths whose implementors/*.js files were loaded from the docs root.
    loaded_traits: tuple[str, ...] = field(default=())

    def client(self) -> ImplviewClient:
        return ImplviewClient(self.url.rstrip("/"))

    def publish(self, trait_path: str, mapping: ImplementorMap) -> bool:
        """Publish a mapping into this process's store (no HTTP round trip).

        Returns True when the trait is attached and the mapping was registered,
        False when it was parked in the trait's pending slot.
        """

        return STORE.host(trait_path).offer(validate_mapping(mapping))

    def pending_traits(self) -> list[str]:
        return STORE.pending_traits()


def _find_free_port(host: str) -> int:
    with contextlib.closing(socket.socket(socket.AF_INET, socket.SOCK_STREAM)) as s:
        s.bind((host, 0))
        return int(s.getsockname()[1])


def _running_revision(base_url: str, *, timeout_s: float = 0.2) -> int | None:
    """Return the global revision of an implview server at ``base_url``, or None.

    Anything that is not an implview server (no ``/api/events`` revision) counts
    as not running.
    """

    try:
        with httpx.Client(base_url=base_url, timeout=timeout_s) as client:
            r = client.get("/api/events")
            if r.status_code != 200:
                return None
            revision = r.json().get("globalRevision")
    except (httpx.HTTPError, ValueError, AttributeError):
        return None
    return int(revision) if isinstance(revision, int) else None


def _attach(base_url: str, *, timeout_s: float, open_browser: bool) -> ImplviewClient | None:
    revision = _running_revision(base_url, timeout_s=timeout_s)
    if revision is None:
        return None
    log.info("attached to running server", url=base_url, global_revision=revision)
    if open_browser:
        webbrowser.open(base_url + "/")
    return ImplviewClient(base_url)


def _wait_started(server: uvicorn.Server, thread: threading.Thread, *, timeout_s: float) -> None:
    deadline = time.monotonic() + timeout_s
    while not server.started:
        if not thread.is_alive():
            raise RuntimeError("implview server exited during startup")
        if time.monotonic() > deadline:
            raise RuntimeError(f"implview server did not start within {timeout_s}s")
        time.sleep(0.01)


def run(
    *,
    host: str = "127.0.0.1",
    port: int = 0,
    docs_root: str | Path | None = None,
    open_browser: bool = True,
    log_level: str = "info",
    access_log: bool = False,
    new_server: bool = False,
    connect_timeout_s: float = 0.2,
    startup_timeout_s: float = 10.0,
) -> ImplviewServer | ImplviewClient:
    """Start implview (API + optional docs tree) with a single Python call.

    Behavior:
    - If IMPLVIEW_URL is set, we *attach* to that existing server (client mode)
      unless `new_server=True`.
    - Otherwise, if `port != 0` and an implview server already answers at
      http://{host}:{port}, we attach to it unless `new_server=True`.
    - Otherwise we load ``docs_root`` into the process store, start a new local
      server and return an `ImplviewServer` listing the traits that were loaded.
      Those traits stay pending until first viewed.

    Notes:
    - `port=0` means "pick a free port", so there's nothing to attach to.
    - The per-request access log is off by default because viewers poll
      `/api/events`.
    """

    configure_logging(log_level)

    if not new_server:
        candidates = [load_settings().url]
        if port != 0:
            candidates.append(normalize_base_url(f"http://{host}:{port}"))
        for base_url in candidates:
            if not base_url:
                continue
            client = _attach(base_url, timeout_s=connect_timeout_s, open_browser=open_browser)
            if client is not None:
                return client

    if port == 0:
        port = _find_free_port(host)

    app = create_app(docs_root=docs_root)
    loaded = tuple(app.state.loaded_traits)

    config = uvicorn.Config(app, host=host, port=port, log_level=log_level, access_log=access_log)
    server = uvicorn.Server(config)

    thread = threading.Thread(target=server.run, daemon=True)
    thread.start()
    _wait_started(server, thread, timeout_s=startup_timeout_s)

    url = f"http://{host}:{port}/"
    log.info("server started", url=url, loaded_traits=len(loaded))
    if open_browser:
        webbrowser.open(url)

    return ImplviewServer(host=host, port=port, url=url, loaded_traits=loaded)
