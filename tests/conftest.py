# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Shared pytest fixtures and configuration for Power BI proxies tests.

This module provides a stub REST boundary that records every call, a dummy
credential, and a small tenant layout used across the resolver tests.
"""

from contextlib import contextmanager

import pytest
from azure.core.credentials import AccessToken, TokenCredential

from PowerPlatform.PowerBI.client import PowerBIClient
from PowerPlatform.PowerBI.core.config import PowerBIConfig


class DummyCredential(TokenCredential):
    def __init__(self):
        self.calls = 0

    def get_token(self, *scopes, **kwargs):
        self.calls += 1
        return AccessToken("test_token_12345", 0)


class StubRest:
    """Stands in for ``_RestClient``: serves canned rows and records each call.

    Args:
        groups: Rows returned by ``GET /groups``.
        datasets: Mapping of group id to dataset rows.
        parameters: Mapping of (group id, dataset id) to parameter rows.
    """

    def __init__(self, groups=None, datasets=None, parameters=None):
        self.groups = list(groups or [])
        self.datasets = dict(datasets or {})
        self.parameters = dict(parameters or {})
        self.calls = []
        self.closed = False

    @contextmanager
    def _call_scope(self):
        yield "corr-id"

    def _list_groups(self):
        self.calls.append(("groups",))
        return list(self.groups)

    def _list_datasets_in_group(self, group_id):
        self.calls.append(("datasets", group_id))
        return list(self.datasets.get(group_id, []))

    def _list_parameters_in_group(self, group_id, dataset_id):
        self.calls.append(("parameters", group_id, dataset_id))
        return list(self.parameters.get((group_id, dataset_id), []))

    def close(self):
        self.closed = True


TENANT_A_ID = "11111111-2222-3333-4444-555555555555"
SALES_REPORT_ID = "ds-sales-001"


def tenant_a_rest():
    """One workspace "TenantA" with one dataset "SalesReport" holding RefreshDate."""
    return StubRest(
        groups=[
            {"id": TENANT_A_ID, "name": "TenantA", "isReadOnly": False},
            {"id": "99999999-0000-0000-0000-000000000000", "name": "Other"},
        ],
        datasets={
            TENANT_A_ID: [
                {"id": SALES_REPORT_ID, "name": "SalesReport", "isRefreshable": True},
                {"id": "ds-finance-002", "name": "Finance"},
            ]
        },
        parameters={
            (TENANT_A_ID, SALES_REPORT_ID): [
                {"name": "RefreshDate", "type": "Text", "currentValue": "2024-01-01", "isRequired": True},
                {"name": "Region", "type": "Text", "currentValue": "EMEA"},
            ]
        },
    )


@pytest.fixture
def dummy_credential():
    return DummyCredential()


@pytest.fixture
def test_config():
    """Test configuration with safe defaults."""
    return PowerBIConfig(
        api_base_url="https://api.example.com/v1.0/myorg",
        http_retries=1,
        http_backoff=0.1,
        http_timeout=5,
    )


@pytest.fixture
def stub_rest():
    return tenant_a_rest()


@pytest.fixture
def client(dummy_credential, test_config, stub_rest):
    """A PowerBIClient whose REST layer is the recording stub."""
    c = PowerBIClient(dummy_credential, test_config)
    c._rest = stub_rest
    return c
