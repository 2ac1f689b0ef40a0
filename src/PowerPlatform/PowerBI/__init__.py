# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Power BI proxies: MSAL authentication and name-based lookups of Power BI
workspaces, datasets and dataset parameters.
"""

from .client import PowerBIClient
from .core.config import IdentityConfig, PowerBIConfig
from .core.credentials import CredentialProvider
from .service import PowerBIService

__version__ = "0.1.0"

__all__ = [
    "PowerBIClient",
    "PowerBIService",
    "CredentialProvider",
    "IdentityConfig",
    "PowerBIConfig",
]
