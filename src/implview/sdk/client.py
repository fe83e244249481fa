from __future__ import annotations

from typing import Any
from urllib.parse import quote

import httpx

from ..core.host import ImplementorMap
from ..core.store import normalize_trait_path


class ImplviewClientError(RuntimeError):
    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ImplviewClient:
    """HTTP client for a running implview server.

    This is the "remote" companion to `implview.run()` / `ImplviewServer.publish()`.

    Contract (current):
    - POST /api/implementors/{trait_path}     (JSON mapping)
    - GET  /api/implementors/{trait_path}?crate=...
    - GET  /api/implementors, /api/crates/{crate}, /api/events
    """

    def __init__(self, base_url: str = "http://127.0.0.1:8000", *, timeout_s: float = 10.0) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout_s = float(timeout_s)

    def __repr__(self) -> str:
        return f"ImplviewClient({self.base_url!r})"

    def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        with httpx.Client(base_url=self.base_url, timeout=self.timeout_s) as client:
            res = client.request(method, path, **kwargs)
        if res.status_code >= 400:
            raise ImplviewClientError(
                f"{method} {path} failed: {res.status_code} {res.text}",
                status_code=res.status_code,
            )
        return res.json()

    @staticmethod
    def _trait_url(trait_path: str) -> str:
        return "/api/implementors/" + quote(normalize_trait_path(trait_path), safe="/")

    def health(self) -> bool:
        try:
            return bool(self._request("GET", "/healthz").get("ok"))
        except (httpx.HTTPError, ImplviewClientError):
            return False

    def publish(self, trait_path: str, mapping: ImplementorMap) -> bool:
        """Publish a mapping for one trait. Returns True if it was registered
        immediately, False if the server parked it as pending."""

        body = {str(crate): list(descriptors) for crate, descriptors in mapping.items()}
        data = self._request("POST", self._trait_url(trait_path), json=body)
        return bool(data.get("delivered"))

    def get_implementors(self, trait_path: str, crate: str | None = None) -> dict[str, list[Any]]:
        params = {"crate": crate} if crate is not None else None
        data = self._request("GET", self._trait_url(trait_path), params=params)
        return dict(data.get("implementors", {}))

    def list_traits(self) -> list[dict]:
        return list(self._request("GET", "/api/implementors"))

    def traits_for_crate(self, crate: str) -> list[str]:
        data = self._request("GET", "/api/crates/" + quote(crate, safe=""))
        return [str(t) for t in data.get("traits", [])]

    def global_revision(self) -> int:
        return int(self._request("GET", "/api/events")["globalRevision"])

    def reset(self) -> None:
        self._request("POST", "/api/reset")
