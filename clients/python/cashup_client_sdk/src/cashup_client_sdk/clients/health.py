from __future__ import annotations

from .base import BaseClient


class HealthClient(BaseClient):
    def health(self) -> dict:
        return self._request("GET", "/health", operation="health") or {}

    def ready(self) -> dict:
        return self._request("GET", "/ready", operation="ready") or {}
