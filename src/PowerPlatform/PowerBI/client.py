# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

from __future__ import annotations

import asyncio
from contextlib import contextmanager
from typing import Any, Callable, Iterator, Optional, TypeVar

import requests
from azure.core.credentials import TokenCredential

from .core._auth import _AuthManager
from .core._http import cancellation_scope
from .core.config import PowerBIConfig
from .data._rest import _RestClient
from .operations.datasets import DatasetOperations
from .operations.parameters import ParameterOperations
from .operations.workspaces import WorkspaceOperations

T = TypeVar("T")


class PowerBIClient:
    """
    Async client for the read-only Power BI REST operations used by the proxies.

    The client resolves workspaces, datasets and dataset parameters by name.
    Every REST call asks the credential for a token; nothing is cached between
    calls. HTTP work runs in worker threads so the event loop stays free, and
    every network call is preceded by a cancellation checkpoint. Cancelling the
    surrounding task stops the resolution chain before the next request and
    stops the worker thread before its next retry attempt.

    Operations are grouped in namespaces:

    - ``client.workspaces``: list and find workspaces
    - ``client.datasets``: list and find datasets in a workspace
    - ``client.parameters``: list, find and read dataset parameters

    **Scoped usage (recommended)**: the client is an async context manager. An
    HTTP session is opened on entry and released on every exit path::

        async with PowerBIClient(credential) as client:
            value = await client.parameters.find_value("TenantA", "SalesReport", "RefreshDate")

    Without the context manager, call :meth:`close` when done.

    Pass ``session`` to share a caller-owned ``requests.Session``; the client
    uses it but never closes it.

    :param credential: Credential used to obtain bearer tokens, for example a
        :class:`~PowerPlatform.PowerBI.core.credentials.CredentialProvider`.
    :type credential: ~azure.core.credentials.TokenCredential
    :param config: Optional REST and HTTP configuration. Defaults to
        :meth:`~PowerPlatform.PowerBI.core.config.PowerBIConfig.from_env`.
    :type config: ~PowerPlatform.PowerBI.core.config.PowerBIConfig or None
    :param session: Optional caller-owned HTTP session.
    :type session: :class:`requests.Session` or None
    """

    def __init__(
        self,
        credential: TokenCredential,
        config: Optional[PowerBIConfig] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.auth = _AuthManager(credential)
        self._config = config or PowerBIConfig.from_env()
        self._rest: Optional[_RestClient] = None
        self._session: Optional[requests.Session] = session
        self._owns_session: bool = False

        self.workspaces = WorkspaceOperations(self)
        self.datasets = DatasetOperations(self)
        self.parameters = ParameterOperations(self)

    async def __aenter__(self) -> "PowerBIClient":
        if self._session is None:
            self._session = requests.Session()
            self._owns_session = True
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def close(self) -> None:
        """
        Release the HTTP session and the internal REST client.

        Safe to call multiple times. The client should not be used afterwards.
        """
        if self._rest is not None:
            self._rest.close()
            self._rest = None
        if self._session is not None and self._owns_session:
            self._session.close()
            self._session = None
            self._owns_session = False

    def _get_rest(self) -> _RestClient:
        """Lazily create the REST client, sharing the scoped session when one exists."""
        if self._rest is None:
            self._rest = _RestClient(self.auth, self._config, session=self._session)
        return self._rest

    @contextmanager
    def _scoped_rest(self) -> Iterator[_RestClient]:
        """Yield the REST client while ensuring a correlation scope is active."""
        rest = self._get_rest()
        with rest._call_scope():
            yield rest

    async def _call(self, fn: Callable[..., T], *args: Any) -> T:
        """Network boundary: honour pending cancellation, then run ``fn`` off the loop.

        If the awaiting task is cancelled while ``fn`` runs, the worker is told
        to stop before its next HTTP attempt.
        """
        await asyncio.sleep(0)
        with cancellation_scope() as cancelled:
            try:
                return await asyncio.to_thread(fn, *args)
            except asyncio.CancelledError:
                cancelled.set()
                raise


__all__ = ["PowerBIClient"]
