from __future__ import annotations

from dataclasses import dataclass

from ..http_client import HttpClient


@dataclass
class BaseClient:
    http: HttpClient
    store: str | None = None
    operator: str | None = None
    device_id: str | None = None

    def _context_headers(self) -> dict[str, str]:
        headers: dict[str, str] = {}
        if self.store:
            headers["X-Store-ID"] = self.store
        if self.device_id:
            headers["X-Device-ID"] = self.device_id
        return headers

    def _request(self, method: str, path: str, **kwargs):
        headers = kwargs.pop("headers", {})
        merged = {**self._context_headers(), **headers}
        return self.http.request(method, path, headers=merged, **kwargs)
