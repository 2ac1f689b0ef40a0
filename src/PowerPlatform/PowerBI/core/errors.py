# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Structured error types for the Power BI proxies.

Every error raised by this package derives from :class:`PowerBIError` and
carries a stable ``code`` plus an optional ``subcode`` so callers can branch on
the category without parsing messages. "Not found" is never an error: lookups
return ``None`` instead.
"""

from __future__ import annotations

import datetime as _dt
from typing import Any, Dict, Optional


class PowerBIError(Exception):
    """
    Base structured error for the Power BI proxies.

    Subclasses fix ``code`` and ``source`` as class attributes; both can still be
    overridden per instance.

    :param message: Human readable description.
    :type message: str
    :param subcode: Finer-grained, stable identifier (see ``_error_codes``).
    :type subcode: str or None
    :param details: Extra context; always a dict on the instance.
    :type details: dict or None
    """

    code = "powerbi_error"
    source = "client"

    def __init__(
        self,
        message: str,
        *,
        code: Optional[str] = None,
        subcode: Optional[str] = None,
        status_code: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
        source: Optional[str] = None,
        is_transient: bool = False,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or type(self).code
        self.subcode = subcode
        self.status_code = status_code
        self.details = dict(details or {})
        self.source = source or type(self).source
        self.is_transient = is_transient
        self.timestamp = _dt.datetime.now(_dt.timezone.utc).isoformat().replace("+00:00", "Z")

    def to_dict(self) -> Dict[str, Any]:
        """Plain-dict view, suitable for logging or JSON responses."""
        return {
            "message": self.message,
            "code": self.code,
            "subcode": self.subcode,
            "status_code": self.status_code,
            "details": self.details,
            "source": self.source,
            "is_transient": self.is_transient,
            "timestamp": self.timestamp,
        }

    def __repr__(self) -> str:  # pragma: no cover
        return f"{type(self).__name__}(code={self.code!r}, subcode={self.subcode!r}, message={self.message!r})"


class ValidationError(PowerBIError):
    """A required argument is missing, empty or whitespace-only."""

    code = "validation_error"


class AmbiguousMatchError(PowerBIError):
    """More than one resource matched a name case-insensitively."""

    code = "ambiguous_match"


class ConfigurationError(PowerBIError):
    code = "configuration_error"


class AuthenticationError(PowerBIError):
    """The identity provider rejected or could not complete a credential flow."""

    code = "authentication_error"
    source = "identity"


class HttpError(PowerBIError):
    """A Power BI REST call returned a non-2xx status.

    Diagnostic values that are set land in ``details`` under their own names.
    """

    code = "http_error"
    source = "server"

    def __init__(
        self,
        message: str,
        status_code: int,
        is_transient: bool = False,
        subcode: Optional[str] = None,
        service_error_code: Optional[str] = None,
        request_id: Optional[str] = None,
        client_request_id: Optional[str] = None,
        correlation_id: Optional[str] = None,
        body_excerpt: Optional[str] = None,
        retry_after: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        context = {
            "service_error_code": service_error_code,
            "request_id": request_id,
            "client_request_id": client_request_id,
            "correlation_id": correlation_id,
            "body_excerpt": body_excerpt,
            "retry_after": retry_after,
        }
        merged = dict(details or {})
        merged.update({k: v for k, v in context.items() if v is not None})
        super().__init__(
            message,
            subcode=subcode,
            status_code=status_code,
            details=merged,
            is_transient=is_transient,
        )


__all__ = [
    "PowerBIError",
    "ValidationError",
    "AmbiguousMatchError",
    "ConfigurationError",
    "AuthenticationError",
    "HttpError",
]
