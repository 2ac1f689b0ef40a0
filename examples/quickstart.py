# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Power BI proxies - Quickstart

Reads one dataset parameter value by workspace, dataset and parameter name.

Configure the identity through environment variables, for example::

    POWERBI_AUTHENTICATION_MODE=ServicePrincipal
    POWERBI_CLIENT_ID=<app id>
    POWERBI_TENANT_ID=<tenant id>
    POWERBI_CLIENT_SECRET=<secret>

or, for the interactive (master user) flow::

    POWERBI_AUTHENTICATION_MODE=InteractiveUser
    POWERBI_CLIENT_ID=<app id>
    POWERBI_USERNAME=<user@contoso.com>
    POWERBI_PASSWORD=<password>
    POWERBI_TOKEN_CACHE_PATH=msal_cache.dat

Then run::

    python examples/quickstart.py TenantA SalesReport RefreshDate
"""

import argparse
import asyncio
import logging
import sys

from PowerPlatform.PowerBI import CredentialProvider, IdentityConfig, PowerBIService
from PowerPlatform.PowerBI.core.errors import PowerBIError


async def main(workspace: str, dataset: str, parameter: str) -> int:
    provider = CredentialProvider(IdentityConfig.from_env())
    print(f"Authentication mode: {provider.mode.value if provider.mode else 'unknown'}")

    service = PowerBIService(provider)
    try:
        value = await service.find_parameter_value(workspace, dataset, parameter)
    except PowerBIError as ex:
        print(f"❌ {ex.code} ({ex.subcode}): {ex.message}")
        return 1

    if value is None:
        print(f"Parameter '{parameter}' was not found in {workspace}/{dataset}.")
        return 2
    print(f"✅ {workspace}/{dataset}/{parameter} = {value}")
    return 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Read a Power BI dataset parameter value.")
    parser.add_argument("workspace")
    parser.add_argument("dataset")
    parser.add_argument("parameter")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)
    try:
        sys.exit(asyncio.run(main(args.workspace, args.dataset, args.parameter)))
    except PowerBIError as ex:
        print(f"❌ Configuration or sign-in failed: {ex.message}")
        sys.exit(1)
