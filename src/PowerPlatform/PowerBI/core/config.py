# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Configuration for the Power BI proxies.

:class:`PowerBIConfig` carries REST and HTTP tuning. The identity used to
authenticate is a closed variant: :class:`InteractiveUserIdentity` or
:class:`ServicePrincipalIdentity`. The variant is chosen once, when the
settings are loaded, and each variant carries only the fields its mode needs.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Mapping, Optional, Tuple, Union

from ._error_codes import CONFIG_MISSING_FIELD, CONFIG_UNKNOWN_MODE
from .errors import ConfigurationError

DEFAULT_API_BASE_URL = "https://api.powerbi.com/v1.0/myorg"
DEFAULT_AUTHORITY_URL = "https://login.microsoftonline.com/organizations"
DEFAULT_SCOPES: Tuple[str, ...] = ("https://analysis.windows.net/powerbi/api/.default",)
DEFAULT_TOKEN_CACHE_FILE = "msal_cache.dat"

# Literal segment of the authority template replaced by the tenant id.
AUTHORITY_TENANT_PLACEHOLDER = "organizations"


@dataclass(frozen=True)
class PowerBIConfig:
    """
    Configuration settings for Power BI REST operations.

    :param api_base_url: Root of the Power BI REST API. Default is ``https://api.powerbi.com/v1.0/myorg``.
    :type api_base_url: str
    :param scopes: Scopes requested for every REST call.
    :type scopes: tuple[str, ...]
    :param http_retries: Maximum attempts per request, covering network errors and throttled reads (default: 5).
    :type http_retries: int or None
    :param http_backoff: Base delay in seconds for exponential backoff (default: 0.5).
    :type http_backoff: float or None
    :param http_timeout: Request timeout in seconds (default: method-dependent).
    :type http_timeout: float or None
    """

    api_base_url: str = DEFAULT_API_BASE_URL
    scopes: Tuple[str, ...] = DEFAULT_SCOPES

    http_retries: Optional[int] = None
    http_backoff: Optional[float] = None
    http_timeout: Optional[float] = None

    @classmethod
    def from_env(cls) -> "PowerBIConfig":
        """
        Create a configuration instance with default settings.

        :return: Configuration instance with default values.
        :rtype: ~PowerPlatform.PowerBI.core.config.PowerBIConfig
        """
        # Environment-free defaults
        return cls(
            api_base_url=DEFAULT_API_BASE_URL,
            scopes=DEFAULT_SCOPES,
            http_retries=None,  # Will default to 5 in _HttpClient
            http_backoff=None,  # Will default to 0.5 in _HttpClient
            http_timeout=None,  # Will use method-dependent defaults in _HttpClient
        )


class AuthenticationMode(str, Enum):
    """Credential flow used to obtain Power BI access tokens."""

    INTERACTIVE_USER = "InteractiveUser"
    SERVICE_PRINCIPAL = "ServicePrincipal"


# Accepted spellings, compared case-insensitively. "MasterUser" is the name the
# Power BI embedding samples use for the interactive user flow.
_MODE_ALIASES = {
    "interactiveuser": AuthenticationMode.INTERACTIVE_USER,
    "masteruser": AuthenticationMode.INTERACTIVE_USER,
    "serviceprincipal": AuthenticationMode.SERVICE_PRINCIPAL,
}


def _default_cache_path() -> Path:
    return Path.cwd() / DEFAULT_TOKEN_CACHE_FILE


@dataclass(frozen=True)
class InteractiveUserIdentity:
    """
    Identity for the interactive (master user) flow.

    Tokens are reused silently from a persistent cache. ``username`` and
    ``password`` are only used by the deprecated username/password fallback,
    which exists for unattended automation and testing.
    """

    client_id: str
    username: Optional[str] = None
    password: Optional[str] = field(default=None, repr=False)
    authority_url: str = DEFAULT_AUTHORITY_URL
    scopes: Tuple[str, ...] = DEFAULT_SCOPES
    token_cache_path: Path = field(default_factory=_default_cache_path)

    @property
    def mode(self) -> AuthenticationMode:
        return AuthenticationMode.INTERACTIVE_USER


@dataclass(frozen=True)
class ServicePrincipalIdentity:
    """Identity for the unattended client-credentials flow."""

    client_id: str
    tenant_id: str
    client_secret: str = field(repr=False)
    authority_url: str = DEFAULT_AUTHORITY_URL
    scopes: Tuple[str, ...] = DEFAULT_SCOPES

    @property
    def mode(self) -> AuthenticationMode:
        return AuthenticationMode.SERVICE_PRINCIPAL

    @property
    def tenant_authority_url(self) -> str:
        """Authority with the ``organizations`` segment replaced by the tenant id."""
        return self.authority_url.replace(AUTHORITY_TENANT_PLACEHOLDER, self.tenant_id)


Identity = Union[InteractiveUserIdentity, ServicePrincipalIdentity]


def parse_authentication_mode(value: Any) -> AuthenticationMode:
    """
    Map a configured mode string onto :class:`AuthenticationMode`.

    :raises ~PowerPlatform.PowerBI.core.errors.ConfigurationError: If the value is not a known mode.
    """
    if isinstance(value, AuthenticationMode):
        return value
    key = str(value or "").strip().lower()
    try:
        return _MODE_ALIASES[key]
    except KeyError:
        raise ConfigurationError(
            f"Unknown authentication mode {value!r}; expected InteractiveUser (MasterUser) or ServicePrincipal.",
            subcode=CONFIG_UNKNOWN_MODE,
            details={"value": value},
        ) from None


def _scopes_from(value: Any) -> Tuple[str, ...]:
    if value is None:
        return DEFAULT_SCOPES
    if isinstance(value, str):
        parts = [s for s in value.replace(",", " ").split() if s]
    else:
        parts = [str(s).strip() for s in value if str(s).strip()]
    return tuple(parts) or DEFAULT_SCOPES


def _required(settings: Mapping[str, Any], key: str) -> str:
    value = settings.get(key)
    if value is None or not str(value).strip():
        raise ConfigurationError(
            f"Identity setting '{key}' is required.",
            subcode=CONFIG_MISSING_FIELD,
            details={"field": key},
        )
    return str(value).strip()


def _optional(settings: Mapping[str, Any], key: str) -> Optional[str]:
    value = settings.get(key)
    if value is None or not str(value).strip():
        return None
    return str(value)


class IdentityConfig:
    """Loaders that bind settings onto one identity variant."""

    # Settings keys -> environment variable names
    ENV_KEYS = {
        "AuthenticationMode": "POWERBI_AUTHENTICATION_MODE",
        "AuthorityUrl": "POWERBI_AUTHORITY_URL",
        "ClientId": "POWERBI_CLIENT_ID",
        "TenantId": "POWERBI_TENANT_ID",
        "ClientSecret": "POWERBI_CLIENT_SECRET",
        "ScopeBase": "POWERBI_SCOPES",
        "PbiUsername": "POWERBI_USERNAME",
        "PbiPassword": "POWERBI_PASSWORD",
        "TokenCachePath": "POWERBI_TOKEN_CACHE_PATH",
    }

    @staticmethod
    def from_mapping(settings: Mapping[str, Any]) -> Identity:
        """
        Build an identity from an ``AzureAd``-style settings mapping.

        Recognised keys: ``AuthenticationMode``, ``AuthorityUrl``, ``ClientId``,
        ``TenantId``, ``ClientSecret``, ``ScopeBase``, ``PbiUsername``,
        ``PbiPassword`` and ``TokenCachePath``. Keys that belong to the other
        mode are ignored.

        :param settings: Settings mapping.
        :type settings: Mapping[str, Any]
        :return: The identity variant for the configured mode.
        :raises ~PowerPlatform.PowerBI.core.errors.ConfigurationError: On an unknown mode
            or a missing required field.

        Example::

            identity = IdentityConfig.from_mapping({
                "AuthenticationMode": "ServicePrincipal",
                "AuthorityUrl": "https://login.microsoftonline.com/organizations",
                "ClientId": "...",
                "TenantId": "...",
                "ClientSecret": "...",
                "ScopeBase": ["https://analysis.windows.net/powerbi/api/.default"],
            })
        """
        mode = parse_authentication_mode(settings.get("AuthenticationMode"))
        authority = _optional(settings, "AuthorityUrl") or DEFAULT_AUTHORITY_URL
        scopes = _scopes_from(settings.get("ScopeBase"))
        client_id = _required(settings, "ClientId")

        if mode is AuthenticationMode.SERVICE_PRINCIPAL:
            return ServicePrincipalIdentity(
                client_id=client_id,
                tenant_id=_required(settings, "TenantId"),
                client_secret=_required(settings, "ClientSecret"),
                authority_url=authority,
                scopes=scopes,
            )

        cache_path = _optional(settings, "TokenCachePath")
        return InteractiveUserIdentity(
            client_id=client_id,
            username=_optional(settings, "PbiUsername"),
            password=_optional(settings, "PbiPassword"),
            authority_url=authority,
            scopes=scopes,
            token_cache_path=Path(cache_path) if cache_path else _default_cache_path(),
        )

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> Identity:
        """Build an identity from ``POWERBI_*`` environment variables."""
        env = os.environ if environ is None else environ
        settings = {key: env.get(var) for key, var in cls.ENV_KEYS.items()}
        return cls.from_mapping(settings)


__all__ = [
    "PowerBIConfig",
    "AuthenticationMode",
    "InteractiveUserIdentity",
    "ServicePrincipalIdentity",
    "Identity",
    "IdentityConfig",
    "parse_authentication_mode",
    "DEFAULT_API_BASE_URL",
    "DEFAULT_AUTHORITY_URL",
    "DEFAULT_SCOPES",
    "DEFAULT_TOKEN_CACHE_FILE",
]
