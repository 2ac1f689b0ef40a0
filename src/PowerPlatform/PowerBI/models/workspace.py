# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""Workspace (group) model for the Power BI proxies."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

# Type alias for semantic clarity
WorkspaceId = str  # UUID string


@dataclass
class Workspace:
    """
    A Power BI workspace, called a *group* by the REST API.

    :param id: Workspace GUID.
    :type id: str
    :param name: Workspace display name.
    :type name: str
    :param is_read_only: Whether the caller has read-only access.
    :type is_read_only: bool | None
    :param is_on_dedicated_capacity: Whether the workspace runs on a dedicated capacity.
    :type is_on_dedicated_capacity: bool | None
    :param type: Workspace type reported by the service (e.g. ``"Workspace"``).
    :type type: str | None

    Example::

        workspace = await client.workspaces.find("Sales")
        if workspace:
            print(workspace.id, workspace.name)
    """

    id: WorkspaceId
    name: str
    is_read_only: Optional[bool] = None
    is_on_dedicated_capacity: Optional[bool] = None
    type: Optional[str] = None
    raw: Dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "is_read_only": self.is_read_only,
            "is_on_dedicated_capacity": self.is_on_dedicated_capacity,
            "type": self.type,
        }

    @classmethod
    def from_api_response(cls, response_data: Dict[str, Any]) -> "Workspace":
        """
        Create a Workspace from one entry of ``GET /groups``.

        :param response_data: Raw API dictionary.
        :type response_data: dict[str, Any]
        :return: Workspace instance.
        :rtype: Workspace
        """
        return cls(
            id=str(response_data.get("id", "")),
            name=response_data.get("name") or "",
            is_read_only=response_data.get("isReadOnly"),
            is_on_dedicated_capacity=response_data.get("isOnDedicatedCapacity"),
            type=response_data.get("type"),
            raw=dict(response_data),
        )


__all__ = ["Workspace", "WorkspaceId"]
