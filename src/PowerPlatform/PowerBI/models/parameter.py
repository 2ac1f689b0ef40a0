# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""Dataset parameter model for the Power BI proxies."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class Parameter:
    """
    A Power Query (mashup) parameter defined on a dataset.

    :param name: Parameter name.
    :type name: str
    :param current_value: Current value as reported by the service.
    :type current_value: str | None
    :param type: Parameter type (e.g. ``"Text"``, ``"DateTime"``).
    :type type: str | None
    :param is_required: Whether a value is required.
    :type is_required: bool | None
    :param suggested_values: Values offered by the parameter definition.
    :type suggested_values: list[str]

    Example::

        parameter = await client.parameters.find("TenantA", "SalesReport", "RefreshDate")
        if parameter:
            print(parameter.current_value)
    """

    name: str
    current_value: Optional[str] = None
    type: Optional[str] = None
    is_required: Optional[bool] = None
    suggested_values: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "current_value": self.current_value,
            "type": self.type,
            "is_required": self.is_required,
            "suggested_values": list(self.suggested_values),
        }

    @classmethod
    def from_api_response(cls, response_data: Dict[str, Any]) -> "Parameter":
        current = response_data.get("currentValue")
        return cls(
            name=response_data.get("name") or "",
            current_value=None if current is None else str(current),
            type=response_data.get("type"),
            is_required=response_data.get("isRequired"),
            suggested_values=[str(v) for v in (response_data.get("suggestedValues") or [])],
        )


__all__ = ["Parameter"]
