# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""Dataset operations namespace for the Power BI proxies."""

from __future__ import annotations

import logging
from typing import List, Optional, Tuple, TYPE_CHECKING

from ..core._error_codes import AMBIGUOUS_DATASET
from ..core._matching import _match_by_name, _require_name, _single_or_none
from ..models.dataset import Dataset
from ..models.workspace import Workspace

if TYPE_CHECKING:
    from ..client import PowerBIClient


__all__ = ["DatasetOperations"]

_logger = logging.getLogger(__name__)


class DatasetOperations:
    """Namespace for dataset lookups inside a named workspace.

    Accessed via ``client.datasets``. Each call resolves the workspace first and
    stops without further requests when it does not exist.

    :param client: The parent :class:`~PowerPlatform.PowerBI.client.PowerBIClient` instance.
    :type client: ~PowerPlatform.PowerBI.client.PowerBIClient
    """

    def __init__(self, client: PowerBIClient) -> None:
        self._client = client

    async def find_in_workspace(self, workspace_name: str) -> Tuple[Optional[Workspace], Optional[List[Dataset]]]:
        """Resolve a workspace by name and list its datasets.

        :param workspace_name: Workspace name. Cannot be None, empty, or whitespace.
        :type workspace_name: :class:`str`

        :return: ``(workspace, datasets)``, or ``(None, None)`` if the workspace does not exist.
        :rtype: tuple

        :raises ~PowerPlatform.PowerBI.core.errors.ValidationError: If ``workspace_name`` is blank.
        :raises ~PowerPlatform.PowerBI.core.errors.AmbiguousMatchError: If several workspaces match.
        """
        _require_name(workspace_name, "workspace_name")
        with self._client._scoped_rest() as rest:
            workspace = await self._client.workspaces.find(workspace_name)
            if workspace is None:
                return None, None
            rows = await self._client._call(rest._list_datasets_in_group, workspace.id)
        return workspace, [Dataset.from_api_response(row) for row in rows]

    async def find(self, workspace_name: str, dataset_name: str) -> Tuple[Optional[Workspace], Optional[Dataset]]:
        """Find a dataset by exact, case-insensitive name inside a named workspace.

        :param workspace_name: Workspace name. Cannot be None, empty, or whitespace.
        :type workspace_name: :class:`str`
        :param dataset_name: Dataset name. Cannot be None, empty, or whitespace.
        :type dataset_name: :class:`str`

        :return: ``(workspace, dataset)``; ``(None, None)`` if the workspace does not
            exist, ``(workspace, None)`` if no dataset has that name.
        :rtype: tuple

        :raises ~PowerPlatform.PowerBI.core.errors.ValidationError: If a name is blank.
        :raises ~PowerPlatform.PowerBI.core.errors.AmbiguousMatchError: If several workspaces
            or datasets match.
        """
        _require_name(workspace_name, "workspace_name")
        _require_name(dataset_name, "dataset_name")
        with self._client._scoped_rest():
            workspace, datasets = await self.find_in_workspace(workspace_name)
        if workspace is None or datasets is None:
            return None, None
        dataset = _single_or_none(
            _match_by_name(datasets, dataset_name),
            resource="dataset",
            name=dataset_name,
            subcode=AMBIGUOUS_DATASET,
        )
        if dataset is None:
            _logger.debug("Dataset '%s' not found in workspace '%s'", dataset_name, workspace.name)
        return workspace, dataset
