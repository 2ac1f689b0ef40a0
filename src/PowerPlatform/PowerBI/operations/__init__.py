# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Operation namespace classes for the Power BI proxies.

This module contains the namespace classes that make up the name-based
resolver, each building on the previous one:
- WorkspaceOperations: list and find workspaces
- DatasetOperations: list and find datasets inside a workspace
- ParameterOperations: list, find and read dataset parameters
"""

__all__ = []
