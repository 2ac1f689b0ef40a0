# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""Power BI REST client: bearer headers, error mapping, and the raw list endpoints."""

from __future__ import annotations

import logging
import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any, Dict, Iterator, List, Optional

import requests
from requests.utils import quote

from ..core._auth import _AuthManager
from ..core._error_codes import _http_subcode, _is_transient_status
from ..core._http import _HttpClient
from ..core.config import PowerBIConfig
from ..core.errors import HttpError

_logger = logging.getLogger(__name__)

_CALL_SCOPE_CORRELATION_ID: ContextVar[Optional[str]] = ContextVar("_CALL_SCOPE_CORRELATION_ID", default=None)

_BODY_EXCERPT_LIMIT = 200


class _RestClient:
    """Low-level client over the Power BI REST API. Internal; use ``PowerBIClient``."""

    def __init__(
        self,
        auth: _AuthManager,
        config: Optional[PowerBIConfig] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.auth = auth
        self.config = config or PowerBIConfig.from_env()
        self.api = (self.config.api_base_url or "").rstrip("/")
        if not self.api:
            raise ValueError("api_base_url is required.")
        self._http = _HttpClient(
            retries=self.config.http_retries,
            backoff=self.config.http_backoff,
            timeout=self.config.http_timeout,
            session=session,
        )

    @contextmanager
    def _call_scope(self) -> Iterator[str]:
        """Share one correlation id across every request issued inside the scope."""
        existing = _CALL_SCOPE_CORRELATION_ID.get()
        if existing is not None:
            yield existing
            return
        correlation_id = str(uuid.uuid4())
        token = _CALL_SCOPE_CORRELATION_ID.set(correlation_id)
        try:
            yield correlation_id
        finally:
            _CALL_SCOPE_CORRELATION_ID.reset(token)

    def _headers(self) -> Dict[str, str]:
        """Bearer auth plus request tracing headers. A token is requested per call."""
        token = self.auth._acquire_token(self.config.scopes).access_token
        headers = {
            "Authorization": f"Bearer {token}",
            "Accept": "application/json",
            "x-ms-client-request-id": str(uuid.uuid4()),
        }
        correlation_id = _CALL_SCOPE_CORRELATION_ID.get()
        if correlation_id is not None:
            headers["x-ms-correlation-id"] = correlation_id
        return headers

    def _request(self, method: str, url: str, **kwargs: Any):
        headers = self._headers()
        headers.update(kwargs.pop("headers", None) or {})
        _logger.debug("%s %s", method.upper(), url)
        r = self._http._request(method, url, headers=headers, **kwargs)
        if 200 <= r.status_code < 300:
            return r
        raise self._http_error(r, method, url, headers)

    @staticmethod
    def _http_error(r: Any, method: str, url: str, headers: Dict[str, str]) -> HttpError:
        service_code = None
        message = None
        try:
            body = r.json()
        except ValueError:
            body = None
        if isinstance(body, dict):
            err = body.get("error")
            if isinstance(err, dict):
                service_code = err.get("code")
                message = err.get("message")
        text = getattr(r, "text", "") or ""
        retry_after = None
        raw_retry = (r.headers or {}).get("Retry-After")
        if raw_retry is not None:
            try:
                retry_after = int(raw_retry)
            except (TypeError, ValueError):
                retry_after = None
        status = r.status_code
        _logger.warning("%s %s failed: HTTP %s %s", method.upper(), url, status, service_code or "")
        return HttpError(
            message or f"Power BI {method.upper()} {url} failed: HTTP {status}",
            status_code=status,
            is_transient=_is_transient_status(status),
            subcode=_http_subcode(status),
            service_error_code=service_code,
            request_id=(r.headers or {}).get("RequestId"),
            client_request_id=headers.get("x-ms-client-request-id"),
            correlation_id=headers.get("x-ms-correlation-id"),
            body_excerpt=text[:_BODY_EXCERPT_LIMIT] if text else None,
            retry_after=retry_after,
        )

    def _get_collection(self, path: str) -> List[Dict[str, Any]]:
        r = self._request("get", f"{self.api}{path}")
        body = r.json() or {}
        return list(body.get("value") or [])

    # ----------------------------- endpoints -----------------------------

    def _list_groups(self) -> List[Dict[str, Any]]:
        return self._get_collection("/groups")

    def _list_datasets_in_group(self, group_id: str) -> List[Dict[str, Any]]:
        return self._get_collection(f"/groups/{quote(str(group_id), safe='')}/datasets")

    def _list_parameters_in_group(self, group_id: str, dataset_id: str) -> List[Dict[str, Any]]:
        return self._get_collection(
            f"/groups/{quote(str(group_id), safe='')}/datasets/{quote(str(dataset_id), safe='')}/parameters"
        )

    def close(self) -> None:
        """Stop the transport. The shared session is closed by its owner."""
        self._http.close()
