# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Data models for the Power BI proxies.

- :class:`~PowerPlatform.PowerBI.models.workspace.Workspace`: a workspace (group).
- :class:`~PowerPlatform.PowerBI.models.dataset.Dataset`: a dataset inside a workspace.
- :class:`~PowerPlatform.PowerBI.models.parameter.Parameter`: a dataset parameter.
- :class:`~PowerPlatform.PowerBI.models.report_parameter.ReportParameterRequest`: caller-facing lookup key.

Import models directly from their modules.
"""

__all__ = []
