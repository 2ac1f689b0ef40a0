# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""Dataset model for the Power BI proxies."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

DatasetId = str


@dataclass
class Dataset:
    """
    A Power BI dataset (semantic model) inside one workspace.

    :param id: Dataset identifier.
    :type id: str
    :param name: Dataset display name.
    :type name: str
    :param configured_by: Owner of the dataset configuration.
    :type configured_by: str | None
    :param web_url: Link to the dataset in the Power BI service.
    :type web_url: str | None
    :param is_refreshable: Whether the dataset can be refreshed.
    :type is_refreshable: bool | None
    """

    id: DatasetId
    name: str
    configured_by: Optional[str] = None
    web_url: Optional[str] = None
    is_refreshable: Optional[bool] = None
    raw: Dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "configured_by": self.configured_by,
            "web_url": self.web_url,
            "is_refreshable": self.is_refreshable,
        }

    @classmethod
    def from_api_response(cls, response_data: Dict[str, Any]) -> "Dataset":
        return cls(
            id=str(response_data.get("id", "")),
            name=response_data.get("name") or "",
            configured_by=response_data.get("configuredBy"),
            web_url=response_data.get("webUrl"),
            is_refreshable=response_data.get("isRefreshable"),
            raw=dict(response_data),
        )


__all__ = ["Dataset", "DatasetId"]
