# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""REST data access layer for the Power BI proxies. Internal."""

__all__ = []
