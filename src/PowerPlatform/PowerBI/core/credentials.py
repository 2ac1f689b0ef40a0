# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
MSAL-backed credential provider for the Power BI REST API.

:class:`CredentialProvider` hides the two supported credential flows behind one
operation, :meth:`CredentialProvider.get_access_token`:

- **Interactive user** (``InteractiveUserIdentity``): an MSAL public client
  whose token cache is persisted to disk, so refresh tokens survive process
  restarts. A silent acquisition is tried first; only when it reports that
  re-authentication is needed does the provider fall back, once, to the
  deprecated username/password flow.
- **Service principal** (``ServicePrincipalIdentity``): an MSAL confidential
  client that always performs a client-credentials request. No cache file is
  read or written.

The provider also implements the azure-core ``TokenCredential`` protocol, so it
can be handed to :class:`~PowerPlatform.PowerBI.client.PowerBIClient` like any
azure-identity credential.
"""

from __future__ import annotations

import contextlib
import logging
import os
import tempfile
import threading
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Sequence, Union

import msal
import requests
from azure.core.credentials import AccessToken, TokenCredential

from ._error_codes import AUTH_INTERACTION_REQUIRED, AUTH_NETWORK_FAILURE
from .config import AuthenticationMode, InteractiveUserIdentity, ServicePrincipalIdentity
from .errors import AuthenticationError

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SilentSuccess:
    token: AccessToken


@dataclass(frozen=True)
class NeedsReauth:
    reason: str


SilentResult = Union[SilentSuccess, NeedsReauth]


class _PersistentTokenCache(msal.SerializableTokenCache):
    """MSAL token cache mirrored to a file; a missing file is an empty cache."""

    def __init__(self, path: Path) -> None:
        super().__init__()
        self.path = Path(path)
        self._file_lock = threading.Lock()
        self._load()

    def _load(self) -> None:
        if not self.path.exists():
            _logger.debug("No token cache at %s; starting empty", self.path)
            return
        try:
            self.deserialize(self.path.read_text(encoding="utf-8"))
        except ValueError:
            _logger.warning("Token cache at %s is unreadable; starting empty", self.path)

    def save(self) -> None:
        """Write the cache if it changed. Write failures are logged, not raised.

        The file is replaced atomically so a concurrent reader never sees a
        partial cache.
        """
        with self._file_lock:
            if not self.has_state_changed:
                return
            tmp_path: Optional[Path] = None
            try:
                with tempfile.NamedTemporaryFile(
                    mode="w",
                    encoding="utf-8",
                    delete=False,
                    dir=self.path.parent,
                    prefix=f".{self.path.name}.",
                    suffix=".tmp",
                ) as fh:
                    tmp_path = Path(fh.name)
                    fh.write(self.serialize())
                os.replace(tmp_path, self.path)
            except OSError as exc:
                _logger.warning("Could not write token cache to %s: %s", self.path, exc)
                self.has_state_changed = True
                if tmp_path is not None:
                    with contextlib.suppress(OSError):
                        tmp_path.unlink()
                return
            self.has_state_changed = False


def _to_access_token(result: Optional[Dict[str, Any]]) -> Optional[AccessToken]:
    """Convert an MSAL result dict; error results raise AuthenticationError."""
    if not result:
        return None
    if "access_token" not in result:
        error = result.get("error") or "unknown_error"
        description = result.get("error_description") or ""
        raise AuthenticationError(
            f"Failed to acquire Power BI token: {error} {description}".strip(),
            subcode=error,
            details={
                "error_description": description,
                "correlation_id": result.get("correlation_id"),
            },
        )
    expires_in = int(result.get("expires_in") or 0)
    return AccessToken(result["access_token"], int(time.time()) + expires_in)


class CredentialProvider(TokenCredential):
    """
    Produce Power BI access tokens for one configured identity.

    :param identity: The identity variant loaded from configuration.
    :type identity: ~PowerPlatform.PowerBI.core.config.InteractiveUserIdentity or
        ~PowerPlatform.PowerBI.core.config.ServicePrincipalIdentity

    Example::

        identity = IdentityConfig.from_env()
        provider = CredentialProvider(identity)
        token = provider.get_access_token()
    """

    def __init__(self, identity: Any) -> None:
        self._identity = identity
        self._public_app: Optional[msal.PublicClientApplication] = None
        self._confidential_app: Optional[msal.ConfidentialClientApplication] = None
        self._cache: Optional[_PersistentTokenCache] = None

        if isinstance(identity, InteractiveUserIdentity):
            self._cache = _PersistentTokenCache(identity.token_cache_path)
            self._public_app = msal.PublicClientApplication(
                identity.client_id,
                authority=identity.authority_url,
                token_cache=self._cache,
            )
        elif isinstance(identity, ServicePrincipalIdentity):
            self._confidential_app = msal.ConfidentialClientApplication(
                identity.client_id,
                client_credential=identity.client_secret,
                authority=identity.tenant_authority_url,
            )
        else:
            _logger.warning("Unrecognized identity %s; no token will be produced", type(identity).__name__)

    @property
    def mode(self) -> Optional[AuthenticationMode]:
        if isinstance(self._identity, (InteractiveUserIdentity, ServicePrincipalIdentity)):
            return self._identity.mode
        return None

    def get_access_token(self) -> Optional[AccessToken]:
        """
        Acquire a token for the configured identity and scopes.

        :return: The access token, or None when acquisition yields no result
            (including an unrecognized identity).
        :rtype: ~azure.core.credentials.AccessToken or None
        :raises ~PowerPlatform.PowerBI.core.errors.AuthenticationError: If the identity
            provider rejects the flow or cannot be reached.
        """
        return self._acquire(getattr(self._identity, "scopes", ()))

    def get_token(self, *scopes: str, **kwargs: Any) -> AccessToken:
        """``TokenCredential`` entry point; falls back to the configured scopes."""
        token = self._acquire(scopes or getattr(self._identity, "scopes", ()))
        if token is None:
            raise AuthenticationError("No access token was produced for the configured identity.")
        return token

    def _acquire(self, scopes: Sequence[str]) -> Optional[AccessToken]:
        try:
            if self._public_app is not None:
                return self._acquire_for_user(list(scopes))
            if self._confidential_app is not None:
                return _to_access_token(self._confidential_app.acquire_token_for_client(scopes=list(scopes)))
        except requests.exceptions.RequestException as exc:
            raise AuthenticationError(
                f"Could not reach the identity provider: {exc}",
                subcode=AUTH_NETWORK_FAILURE,
            ) from exc
        return None

    def _acquire_silent(self, scopes: Sequence[str]) -> SilentResult:
        accounts = self._public_app.get_accounts()
        if not accounts:
            return NeedsReauth("no cached account")
        result = self._public_app.acquire_token_silent_with_error(list(scopes), account=accounts[0])
        if result and "access_token" in result:
            return SilentSuccess(_to_access_token(result))
        return NeedsReauth((result or {}).get("error") or "no cached token")

    def _acquire_for_user(self, scopes: Sequence[str]) -> Optional[AccessToken]:
        try:
            attempt = self._acquire_silent(scopes)
            if isinstance(attempt, SilentSuccess):
                return attempt.token

            identity = self._identity
            if not identity.username or not identity.password:
                raise AuthenticationError(
                    "Interactive sign-in is required and no username/password fallback is configured.",
                    subcode=AUTH_INTERACTION_REQUIRED,
                    details={"reason": attempt.reason},
                )
            _logger.info("Silent token acquisition needs re-authentication (%s); using username/password", attempt.reason)
            result = self._public_app.acquire_token_by_username_password(
                identity.username,
                identity.password,
                scopes=list(scopes),
            )
            return _to_access_token(result)
        finally:
            self._cache.save()


__all__ = ["CredentialProvider", "SilentSuccess", "NeedsReauth", "SilentResult"]
