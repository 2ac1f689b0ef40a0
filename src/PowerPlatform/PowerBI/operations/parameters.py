# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""Dataset parameter operations namespace for the Power BI proxies."""

from __future__ import annotations

from typing import List, Optional, TYPE_CHECKING

from ..core._error_codes import AMBIGUOUS_PARAMETER
from ..core._matching import _match_by_name, _require_name, _single_or_none
from ..models.parameter import Parameter

if TYPE_CHECKING:
    from ..client import PowerBIClient


__all__ = ["ParameterOperations"]


class ParameterOperations:
    """Namespace for dataset parameter lookups.

    Accessed via ``client.parameters``. Resolution runs workspace -> dataset ->
    parameter and returns None at the first missing link.

    :param client: The parent :class:`~PowerPlatform.PowerBI.client.PowerBIClient` instance.
    :type client: ~PowerPlatform.PowerBI.client.PowerBIClient

    Example::

        async with PowerBIClient(credential) as client:
            params = await client.parameters.list("TenantA", "SalesReport")
            value = await client.parameters.find_value("TenantA", "SalesReport", "RefreshDate")
    """

    def __init__(self, client: PowerBIClient) -> None:
        self._client = client

    async def list(self, workspace_name: str, dataset_name: str) -> Optional[List[Parameter]]:
        """List the parameters of a dataset in a named workspace.

        :param workspace_name: Workspace name. Cannot be None, empty, or whitespace.
        :type workspace_name: :class:`str`
        :param dataset_name: Dataset name. Cannot be None, empty, or whitespace.
        :type dataset_name: :class:`str`

        :return: The dataset's parameters, or None if the workspace or dataset does not exist.
        :rtype: list[~PowerPlatform.PowerBI.models.parameter.Parameter] or None

        :raises ~PowerPlatform.PowerBI.core.errors.ValidationError: If a name is blank.
        :raises ~PowerPlatform.PowerBI.core.errors.AmbiguousMatchError: If several workspaces
            or datasets match.
        """
        _require_name(workspace_name, "workspace_name")
        _require_name(dataset_name, "dataset_name")
        with self._client._scoped_rest() as rest:
            workspace, dataset = await self._client.datasets.find(workspace_name, dataset_name)
            if workspace is None or dataset is None:
                return None
            rows = await self._client._call(rest._list_parameters_in_group, workspace.id, dataset.id)
        return [Parameter.from_api_response(row) for row in rows]

    async def find(self, workspace_name: str, dataset_name: str, parameter_name: str) -> Optional[Parameter]:
        """Find a dataset parameter by exact, case-insensitive name.

        :param workspace_name: Workspace name. Cannot be None, empty, or whitespace.
        :type workspace_name: :class:`str`
        :param dataset_name: Dataset name. Cannot be None, empty, or whitespace.
        :type dataset_name: :class:`str`
        :param parameter_name: Parameter name. Cannot be None, empty, or whitespace.
        :type parameter_name: :class:`str`

        :return: The parameter, or None if any link of the chain is missing.
        :rtype: ~PowerPlatform.PowerBI.models.parameter.Parameter or None

        :raises ~PowerPlatform.PowerBI.core.errors.ValidationError: If a name is blank.
        :raises ~PowerPlatform.PowerBI.core.errors.AmbiguousMatchError: If several workspaces,
            datasets or parameters match.
        """
        _require_name(workspace_name, "workspace_name")
        _require_name(dataset_name, "dataset_name")
        _require_name(parameter_name, "parameter_name")
        with self._client._scoped_rest():
            parameters = await self.list(workspace_name, dataset_name)
        if parameters is None:
            return None
        return _single_or_none(
            _match_by_name(parameters, parameter_name),
            resource="parameter",
            name=parameter_name,
            subcode=AMBIGUOUS_PARAMETER,
        )

    async def find_value(self, workspace_name: str, dataset_name: str, parameter_name: str) -> Optional[str]:
        """Return a parameter's current value, or None if it cannot be resolved.

        Same arguments and errors as :meth:`find`.
        """
        parameter = await self.find(workspace_name, dataset_name, parameter_name)
        if parameter is None:
            return None
        return parameter.current_value
