# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ReportParameterRequest:
    """
    Caller-facing key for a report parameter lookup.

    The report name is resolved as a dataset name inside the caller's workspace.

    :param report_name: Report (dataset) name.
    :type report_name: str
    :param parameter_name: Parameter name within the dataset.
    :type parameter_name: str
    """

    report_name: str
    parameter_name: str


__all__ = ["ReportParameterRequest"]
