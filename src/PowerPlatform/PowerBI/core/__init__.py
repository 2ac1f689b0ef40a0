# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Core infrastructure components for the Power BI proxies.

This module contains the foundational components: credentials,
configuration, HTTP transport, name matching, and error handling.
"""

from .errors import (
    PowerBIError,
    ValidationError,
    AmbiguousMatchError,
    ConfigurationError,
    AuthenticationError,
    HttpError,
)

__all__ = [
    "PowerBIError",
    "ValidationError",
    "AmbiguousMatchError",
    "ConfigurationError",
    "AuthenticationError",
    "HttpError",
]
