# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Caller-facing entry points for reading Power BI dataset parameters.

:class:`PowerBIService` owns the credential and configuration for a process and
opens a fresh, scoped :class:`~PowerPlatform.PowerBI.client.PowerBIClient` for
every top-level request, so connection resources are released on every exit
path: success, not found, error or cancellation.
"""

from __future__ import annotations

import logging
from typing import Optional

from azure.core.credentials import TokenCredential

from .client import PowerBIClient
from .core._error_codes import VALIDATION_MISSING_REQUEST
from .core._matching import _require_name
from .core.config import PowerBIConfig
from .core.errors import ValidationError
from .models.report_parameter import ReportParameterRequest

_logger = logging.getLogger(__name__)


class PowerBIService:
    """
    Resolve dataset parameter values by name.

    :param credential: Token source, typically a
        :class:`~PowerPlatform.PowerBI.core.credentials.CredentialProvider`.
    :type credential: ~azure.core.credentials.TokenCredential
    :param config: Optional REST and HTTP configuration.
    :type config: ~PowerPlatform.PowerBI.core.config.PowerBIConfig or None

    Example::

        provider = CredentialProvider(IdentityConfig.from_env())
        service = PowerBIService(provider)
        value = await service.find_parameter_value("TenantA", "SalesReport", "RefreshDate")
    """

    def __init__(self, credential: TokenCredential, config: Optional[PowerBIConfig] = None) -> None:
        self._credential = credential
        self._config = config or PowerBIConfig.from_env()

    def get_client(self) -> PowerBIClient:
        """Return a new client bound to this service's credential and configuration."""
        return PowerBIClient(self._credential, self._config)

    async def find_parameter_value(
        self,
        workspace_name: str,
        dataset_name: str,
        parameter_name: str,
    ) -> Optional[str]:
        """
        Return the current value of a dataset parameter.

        :param workspace_name: Workspace name. Cannot be None, empty, or whitespace.
        :param dataset_name: Dataset name. Cannot be None, empty, or whitespace.
        :param parameter_name: Parameter name. Cannot be None, empty, or whitespace.
        :return: The value, or None if the workspace, dataset or parameter does not exist.
        :rtype: str or None
        :raises ~PowerPlatform.PowerBI.core.errors.ValidationError: If a name is blank.
        :raises ~PowerPlatform.PowerBI.core.errors.AmbiguousMatchError: If a name matches
            several resources.
        :raises ~PowerPlatform.PowerBI.core.errors.AuthenticationError: If no token can be obtained.
        :raises ~PowerPlatform.PowerBI.core.errors.HttpError: If the service returns an error status.
        """
        _require_name(workspace_name, "workspace_name")
        _require_name(dataset_name, "dataset_name")
        _require_name(parameter_name, "parameter_name")
        async with self.get_client() as client:
            value = await client.parameters.find_value(workspace_name, dataset_name, parameter_name)
        if value is None:
            _logger.debug("No value for %s/%s/%s", workspace_name, dataset_name, parameter_name)
        return value

    async def find_report_parameter_value(
        self,
        tenant_id: str,
        request: ReportParameterRequest,
    ) -> Optional[str]:
        """
        Return a report parameter's value for a tenant.

        The tenant id is the workspace name; the request's report name is the
        dataset name.

        :param tenant_id: Tenant identifier, used as the workspace name.
        :param request: Report and parameter names.
        :type request: ~PowerPlatform.PowerBI.models.report_parameter.ReportParameterRequest
        :return: The value, or None if it cannot be resolved.
        :rtype: str or None
        :raises ~PowerPlatform.PowerBI.core.errors.ValidationError: If ``tenant_id`` is blank
            or ``request`` is missing.
        """
        _require_name(tenant_id, "tenant_id")
        if request is None:
            raise ValidationError(
                "request is required.",
                subcode=VALIDATION_MISSING_REQUEST,
                details={"argument": "request"},
            )
        return await self.find_parameter_value(tenant_id, request.report_name, request.parameter_name)


__all__ = ["PowerBIService"]
