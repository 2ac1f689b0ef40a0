# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""Workspace operations namespace for the Power BI proxies."""

from __future__ import annotations

import logging
from typing import List, Optional, TYPE_CHECKING

from ..core._error_codes import AMBIGUOUS_WORKSPACE
from ..core._matching import _match_by_name, _require_name, _single_or_none
from ..models.workspace import Workspace

if TYPE_CHECKING:
    from ..client import PowerBIClient


__all__ = ["WorkspaceOperations"]

_logger = logging.getLogger(__name__)


class WorkspaceOperations:
    """Namespace for workspace (group) lookups.

    Accessed via ``client.workspaces``.

    :param client: The parent :class:`~PowerPlatform.PowerBI.client.PowerBIClient` instance.
    :type client: ~PowerPlatform.PowerBI.client.PowerBIClient

    Example::

        async with PowerBIClient(credential) as client:
            workspaces = await client.workspaces.list()
            sales = await client.workspaces.find("sales")
    """

    def __init__(self, client: PowerBIClient) -> None:
        self._client = client

    async def list(self) -> List[Workspace]:
        """List every workspace visible to the caller.

        :return: Workspaces in the order returned by the service.
        :rtype: list[~PowerPlatform.PowerBI.models.workspace.Workspace]

        :raises ~PowerPlatform.PowerBI.core.errors.HttpError: If the service returns an error status.
        """
        with self._client._scoped_rest() as rest:
            rows = await self._client._call(rest._list_groups)
        return [Workspace.from_api_response(row) for row in rows]

    async def find(self, name: str) -> Optional[Workspace]:
        """Find a workspace by exact, case-insensitive name.

        :param name: Workspace name. Cannot be None, empty, or whitespace.
        :type name: :class:`str`

        :return: The matching workspace, or None if no workspace has that name.
        :rtype: ~PowerPlatform.PowerBI.models.workspace.Workspace or None

        :raises ~PowerPlatform.PowerBI.core.errors.ValidationError: If ``name`` is blank.
        :raises ~PowerPlatform.PowerBI.core.errors.AmbiguousMatchError: If several workspaces match.
        """
        _require_name(name, "workspace_name")
        with self._client._scoped_rest():
            workspaces = await self.list()
        workspace = _single_or_none(
            _match_by_name(workspaces, name),
            resource="workspace",
            name=name,
            subcode=AMBIGUOUS_WORKSPACE,
        )
        if workspace is None:
            _logger.debug("Workspace '%s' not found among %d workspaces", name, len(workspaces))
        return workspace
