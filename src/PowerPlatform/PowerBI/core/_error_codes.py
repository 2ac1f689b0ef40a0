# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

# HTTP subcode constants
HTTP_400 = "http_400"
HTTP_401 = "http_401"
HTTP_403 = "http_403"
HTTP_404 = "http_404"
HTTP_429 = "http_429"
HTTP_500 = "http_500"
HTTP_502 = "http_502"
HTTP_503 = "http_503"
HTTP_504 = "http_504"

_HTTP_STATUS_TO_SUBCODE = {
    400: HTTP_400,
    401: HTTP_401,
    403: HTTP_403,
    404: HTTP_404,
    429: HTTP_429,
    500: HTTP_500,
    502: HTTP_502,
    503: HTTP_503,
    504: HTTP_504,
}

TRANSIENT_STATUS = {429, 502, 503, 504}

# Validation subcodes
VALIDATION_BLANK_NAME = "validation_blank_name"
VALIDATION_MISSING_REQUEST = "validation_missing_request"

# Resolution subcodes
AMBIGUOUS_WORKSPACE = "ambiguous_workspace"
AMBIGUOUS_DATASET = "ambiguous_dataset"
AMBIGUOUS_PARAMETER = "ambiguous_parameter"

# Configuration subcodes
CONFIG_UNKNOWN_MODE = "config_unknown_mode"
CONFIG_MISSING_FIELD = "config_missing_field"

# Authentication subcodes (MSAL's own ``error`` value is used when present)
AUTH_INTERACTION_REQUIRED = "auth_interaction_required"
AUTH_NETWORK_FAILURE = "auth_network_failure"


def _http_subcode(status: int) -> str:
    return _HTTP_STATUS_TO_SUBCODE.get(status, f"http_{status}")


def _is_transient_status(status: int) -> bool:
    return status in TRANSIENT_STATUS
