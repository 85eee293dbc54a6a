from __future__ import annotations

import time
import uuid
from dataclasses import dataclass
from typing import Any, Callable, Mapping
from urllib.parse import urljoin

import requests
from requests.adapters import HTTPAdapter

from .config import ClientConfig
from .error_mapper import map_error
from .exceptions import TransportError

TRACE_HEADER = "X-Trace-ID"
TRACE_HEADER_ALIASES = (TRACE_HEADER, "X-Trace-Id", "x-trace-id")

ResponseHook = Callable[[requests.Response], None]
RequestHook = Callable[[str, str, dict[str, Any]], None]


@dataclass
class TraceContext:
    trace_id: str | None = None

    def ensure(self) -> str:
        if not self.trace_id:
            self.trace_id = str(uuid.uuid4())
        return self.trace_id

    def update_from_headers(self, headers: Mapping[str, str]) -> None:
        for key in TRACE_HEADER_ALIASES:
            trace_id = headers.get(key)
            if trace_id:
                self.trace_id = trace_id
                return

    def update_from_payload(self, payload: Mapping[str, object]) -> None:
        trace_id = payload.get("trace_id")
        if isinstance(trace_id, str) and trace_id:
            self.trace_id = trace_id


@dataclass
class LastOperation:
    operation: str
    duration_ms: int
    result: str
    trace_id: str | None


@dataclass
class HttpClient:
    config: ClientConfig
    trace: TraceContext | None = None
    session: requests.Session | None = None
    before_request: RequestHook | None = None
    after_response: ResponseHook | None = None
    last_operation: LastOperation | None = None

    def __post_init__(self) -> None:
        if self.session is None:
            self.session = requests.Session()
            adapter = HTTPAdapter(
                pool_connections=self.config.max_connections,
                pool_maxsize=self.config.max_connections,
            )
            self.session.mount("http://", adapter)
            self.session.mount("https://", adapter)

    def _build_url(self, path: str) -> str:
        base = self.config.api_base_url.rstrip("/") + "/"
        return urljoin(base, path.lstrip("/"))

    def request(
        self,
        method: str,
        path: str,
        *,
        headers: dict[str, str] | None = None,
        json_body: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
        retry_mutation: bool = False,
        operation: str = "unknown",
    ) -> dict[str, Any] | list[Any] | None:
        if self.session is None:
            raise RuntimeError("HTTP session not initialized")
        request_headers = {"Accept": "application/json"}
        if headers:
            request_headers.update(headers)
        trace_context = self.trace or TraceContext()
        request_headers[TRACE_HEADER] = trace_context.ensure()

        normalized_method = method.upper()
        url = self._build_url(path)
        if self.before_request:
            self.before_request(
                normalized_method,
                url,
                {"headers": request_headers, "json_body": json_body, "params": params},
            )

        # Appending a batch twice stores it twice, so mutations only retry on request.
        can_retry = normalized_method in {"GET", "HEAD"} or retry_mutation
        attempts = self.config.retries + 1 if can_retry else 1

        started = time.monotonic()
        last_transport_error: Exception | None = None
        response: requests.Response | None = None
        for attempt in range(attempts):
            try:
                response = self.session.request(
                    method=normalized_method,
                    url=url,
                    headers=request_headers,
                    json=json_body,
                    params=params,
                    timeout=(self.config.connect_timeout_seconds, self.config.read_timeout_seconds),
                    verify=self.config.verify_ssl,
                )
            except requests.RequestException as exc:
                last_transport_error = exc
                if attempt >= attempts - 1:
                    self._record_operation(operation, started, "network_error", trace_context.trace_id)
                    raise TransportError(
                        code="TRANSPORT_ERROR",
                        message=str(exc),
                        details={"type": type(exc).__name__},
                        trace_id=trace_context.trace_id,
                        status_code=0,
                        raw_payload=None,
                    ) from exc
            else:
                if response.status_code < 500 or attempt >= attempts - 1:
                    break
                last_transport_error = None
            time.sleep(self.config.retry_backoff_seconds * (2**attempt))

        if response is None:
            raise RuntimeError(f"HTTP request failed without response: {last_transport_error}")

        if self.after_response:
            self.after_response(response)
        trace_context.update_from_headers(response.headers)
        if response.ok:
            self._record_operation(operation, started, "success", trace_context.trace_id)
            if not response.content:
                return None
            try:
                return response.json()
            except ValueError as exc:
                self._record_operation(operation, started, "invalid_response", trace_context.trace_id)
                raise TransportError(
                    code="INVALID_RESPONSE",
                    message="Response body is not valid JSON",
                    details={"content_type": response.headers.get("Content-Type"), "status_code": response.status_code},
                    trace_id=trace_context.trace_id,
                    status_code=response.status_code,
                    raw_payload=response.text[:500],
                ) from exc

        try:
            payload = response.json()
        except ValueError:
            payload = {"message": response.text}
        trace_context.update_from_payload(payload if isinstance(payload, dict) else {})
        self._record_operation(operation, started, "error", trace_context.trace_id)
        raise map_error(
            response.status_code,
            payload if isinstance(payload, dict) else {"message": str(payload)},
            trace_context.trace_id,
        )

    def _record_operation(self, operation: str, started: float, result: str, trace_id: str | None) -> None:
        self.last_operation = LastOperation(
            operation=operation,
            duration_ms=int((time.monotonic() - started) * 1000),
            result=result,
            trace_id=trace_id,
        )
