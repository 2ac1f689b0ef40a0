# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from azure.core.credentials import TokenCredential


@dataclass
class _TokenPair:
    resource: str
    access_token: str


class _AuthManager:
    """Turns an azure-core ``TokenCredential`` into bearer strings for REST calls."""

    def __init__(self, credential: TokenCredential) -> None:
        if not isinstance(credential, TokenCredential):
            raise TypeError("credential must implement azure.core.credentials.TokenCredential.")
        self.credential: TokenCredential = credential

    def _acquire_token(self, scopes: Sequence[str]) -> _TokenPair:
        """Acquire an access token for the given scopes."""
        token = self.credential.get_token(*scopes)
        return _TokenPair(resource=" ".join(scopes), access_token=token.token)
