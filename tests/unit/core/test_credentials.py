# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""Unit tests for the MSAL-backed CredentialProvider."""

import tempfile
import time
import unittest
from pathlib import Path
from unittest.mock import patch

import requests
from azure.core.credentials import AccessToken, TokenCredential

from PowerPlatform.PowerBI.core._error_codes import AUTH_INTERACTION_REQUIRED, AUTH_NETWORK_FAILURE
from PowerPlatform.PowerBI.core.config import (
    DEFAULT_SCOPES,
    AuthenticationMode,
    InteractiveUserIdentity,
    ServicePrincipalIdentity,
)
from PowerPlatform.PowerBI.core.credentials import (
    CredentialProvider,
    NeedsReauth,
    SilentSuccess,
    _PersistentTokenCache,
)
from PowerPlatform.PowerBI.core.errors import AuthenticationError

TOKEN_RESULT = {"access_token": "tok-123", "expires_in": 3600, "token_type": "Bearer"}


class _TempDirTestCase(unittest.TestCase):
    def setUp(self):
        tmp = tempfile.TemporaryDirectory()
        self.addCleanup(tmp.cleanup)
        self.tmp = Path(tmp.name)
        self.cache_path = self.tmp / "msal_cache.dat"

    def _user(self, **overrides):
        fields = {
            "client_id": "app-id",
            "username": "user@contoso.com",
            "password": "pw",
            "token_cache_path": self.cache_path,
        }
        fields.update(overrides)
        return InteractiveUserIdentity(**fields)


@patch("msal.PublicClientApplication")
class TestInteractiveUser(_TempDirTestCase):
    """Silent-first acquisition with a single username/password fallback."""

    def test_public_client_built_with_persistent_cache(self, mock_pca_cls):
        provider = CredentialProvider(self._user())

        args, kwargs = mock_pca_cls.call_args
        self.assertEqual(args, ("app-id",))
        self.assertEqual(kwargs["authority"], "https://login.microsoftonline.com/organizations")
        self.assertIsInstance(kwargs["token_cache"], _PersistentTokenCache)
        self.assertIs(provider.mode, AuthenticationMode.INTERACTIVE_USER)

    def test_no_cached_account_falls_back_once(self, mock_pca_cls):
        app = mock_pca_cls.return_value
        app.get_accounts.return_value = []
        app.acquire_token_by_username_password.return_value = dict(TOKEN_RESULT)

        token = CredentialProvider(self._user()).get_access_token()

        self.assertIsInstance(token, AccessToken)
        self.assertEqual(token.token, "tok-123")
        app.acquire_token_silent_with_error.assert_not_called()
        app.acquire_token_by_username_password.assert_called_once_with(
            "user@contoso.com", "pw", scopes=list(DEFAULT_SCOPES)
        )

    def test_silent_success_skips_fallback(self, mock_pca_cls):
        app = mock_pca_cls.return_value
        app.get_accounts.return_value = [{"username": "user@contoso.com"}]
        app.acquire_token_silent_with_error.return_value = dict(TOKEN_RESULT)

        token = CredentialProvider(self._user()).get_access_token()

        self.assertEqual(token.token, "tok-123")
        app.acquire_token_silent_with_error.assert_called_once_with(
            list(DEFAULT_SCOPES), account={"username": "user@contoso.com"}
        )
        app.acquire_token_by_username_password.assert_not_called()

    def test_silent_error_falls_back_once(self, mock_pca_cls):
        app = mock_pca_cls.return_value
        app.get_accounts.return_value = [{"username": "user@contoso.com"}]
        app.acquire_token_silent_with_error.return_value = {"error": "invalid_grant"}
        app.acquire_token_by_username_password.return_value = dict(TOKEN_RESULT)

        token = CredentialProvider(self._user()).get_access_token()

        self.assertEqual(token.token, "tok-123")
        app.acquire_token_by_username_password.assert_called_once()

    def test_fallback_failure_raises_without_retry(self, mock_pca_cls):
        app = mock_pca_cls.return_value
        app.get_accounts.return_value = []
        app.acquire_token_by_username_password.return_value = {
            "error": "invalid_grant",
            "error_description": "AADSTS50126: Invalid username or password.",
            "correlation_id": "c-1",
        }

        with self.assertRaises(AuthenticationError) as ctx:
            CredentialProvider(self._user()).get_access_token()

        self.assertEqual(ctx.exception.subcode, "invalid_grant")
        self.assertEqual(ctx.exception.details["correlation_id"], "c-1")
        self.assertEqual(ctx.exception.source, "identity")
        app.acquire_token_by_username_password.assert_called_once()

    def test_empty_result_yields_none(self, mock_pca_cls):
        app = mock_pca_cls.return_value
        app.get_accounts.return_value = []
        app.acquire_token_by_username_password.return_value = None

        self.assertIsNone(CredentialProvider(self._user()).get_access_token())

    def test_missing_username_requires_interaction(self, mock_pca_cls):
        app = mock_pca_cls.return_value
        app.get_accounts.return_value = []

        with self.assertRaises(AuthenticationError) as ctx:
            CredentialProvider(self._user(username=None, password=None)).get_access_token()

        self.assertEqual(ctx.exception.subcode, AUTH_INTERACTION_REQUIRED)
        self.assertEqual(ctx.exception.details["reason"], "no cached account")
        app.acquire_token_by_username_password.assert_not_called()

    def test_network_failure_wrapped(self, mock_pca_cls):
        app = mock_pca_cls.return_value
        app.get_accounts.return_value = []
        boom = requests.exceptions.ConnectionError("unreachable")
        app.acquire_token_by_username_password.side_effect = boom

        with self.assertRaises(AuthenticationError) as ctx:
            CredentialProvider(self._user()).get_access_token()

        self.assertEqual(ctx.exception.subcode, AUTH_NETWORK_FAILURE)
        self.assertIs(ctx.exception.__cause__, boom)

    def test_changed_cache_written_after_acquisition(self, mock_pca_cls):
        provider = CredentialProvider(self._user())
        app = mock_pca_cls.return_value
        app.get_accounts.return_value = []

        def acquire(*args, **kwargs):
            provider._cache.has_state_changed = True
            return dict(TOKEN_RESULT)

        app.acquire_token_by_username_password.side_effect = acquire

        provider.get_access_token()

        self.assertTrue(self.cache_path.exists())

    def test_unwritable_cache_still_returns_token(self, mock_pca_cls):
        cache_path = self.tmp / "missing-dir" / "msal_cache.dat"
        provider = CredentialProvider(self._user(token_cache_path=cache_path))
        app = mock_pca_cls.return_value
        app.get_accounts.return_value = []

        def acquire(*args, **kwargs):
            provider._cache.has_state_changed = True
            return dict(TOKEN_RESULT, access_token="tok")

        app.acquire_token_by_username_password.side_effect = acquire

        with self.assertLogs("PowerPlatform.PowerBI.core.credentials", level="WARNING") as logs:
            token = provider.get_access_token()

        self.assertEqual(token.token, "tok")
        self.assertFalse(cache_path.exists())
        self.assertIn("Could not write token cache", logs.output[0])

    def test_unchanged_cache_not_written(self, mock_pca_cls):
        app = mock_pca_cls.return_value
        app.get_accounts.return_value = []
        app.acquire_token_by_username_password.return_value = dict(TOKEN_RESULT)

        CredentialProvider(self._user()).get_access_token()

        self.assertFalse(self.cache_path.exists())

    def test_get_token_uses_requested_scopes(self, mock_pca_cls):
        app = mock_pca_cls.return_value
        app.get_accounts.return_value = []
        app.acquire_token_by_username_password.return_value = dict(TOKEN_RESULT)
        before = int(time.time())

        token = CredentialProvider(self._user()).get_token("scope/custom")

        self.assertGreaterEqual(token.expires_on, before + 3600)
        self.assertEqual(app.acquire_token_by_username_password.call_args.kwargs["scopes"], ["scope/custom"])


@patch("msal.ConfidentialClientApplication")
class TestServicePrincipal(unittest.TestCase):
    """Client-credentials flow on every call, without a token cache file."""

    def setUp(self):
        self.identity = ServicePrincipalIdentity(
            client_id="app-id",
            tenant_id="contoso-tenant",
            client_secret="s3cret",
        )

    def test_confidential_client_uses_tenant_authority(self, mock_cca_cls):
        CredentialProvider(self.identity)

        mock_cca_cls.assert_called_once_with(
            "app-id",
            client_credential="s3cret",
            authority="https://login.microsoftonline.com/contoso-tenant",
        )

    def test_token_requested_on_every_call(self, mock_cca_cls):
        app = mock_cca_cls.return_value
        app.acquire_token_for_client.return_value = dict(TOKEN_RESULT)
        provider = CredentialProvider(self.identity)

        provider.get_access_token()
        token = provider.get_access_token()

        self.assertEqual(token.token, "tok-123")
        self.assertEqual(app.acquire_token_for_client.call_count, 2)
        app.acquire_token_for_client.assert_called_with(scopes=list(DEFAULT_SCOPES))
        self.assertIs(provider.mode, AuthenticationMode.SERVICE_PRINCIPAL)

    def test_no_token_cache_touched(self, mock_cca_cls):
        mock_cca_cls.return_value.acquire_token_for_client.return_value = dict(TOKEN_RESULT)
        with patch("PowerPlatform.PowerBI.core.credentials._PersistentTokenCache") as cache_cls:
            CredentialProvider(self.identity).get_access_token()
        cache_cls.assert_not_called()

    def test_error_result_raises(self, mock_cca_cls):
        mock_cca_cls.return_value.acquire_token_for_client.return_value = {
            "error": "invalid_client",
            "error_description": "AADSTS7000215: Invalid client secret provided.",
        }

        with self.assertRaises(AuthenticationError) as ctx:
            CredentialProvider(self.identity).get_access_token()

        self.assertEqual(ctx.exception.subcode, "invalid_client")
        self.assertIn("AADSTS7000215", ctx.exception.message)


class TestUnrecognizedIdentity(unittest.TestCase):
    @patch("msal.ConfidentialClientApplication")
    @patch("msal.PublicClientApplication")
    def test_no_token_and_no_apps(self, mock_pca_cls, mock_cca_cls):
        with self.assertLogs("PowerPlatform.PowerBI.core.credentials", level="WARNING"):
            provider = CredentialProvider(object())

        self.assertIsNone(provider.get_access_token())
        self.assertIsNone(provider.mode)
        mock_pca_cls.assert_not_called()
        mock_cca_cls.assert_not_called()

    def test_get_token_raises(self):
        provider = CredentialProvider(object())
        with self.assertRaises(AuthenticationError):
            provider.get_token("scope/a")

    def test_is_token_credential(self):
        self.assertIsInstance(CredentialProvider(object()), TokenCredential)


class TestPersistentTokenCache(_TempDirTestCase):
    def test_missing_file_is_empty_cache(self):
        cache = _PersistentTokenCache(self.cache_path)
        self.assertFalse(cache.has_state_changed)
        cache.save()
        self.assertFalse(self.cache_path.exists())

    def test_round_trips_through_file(self):
        cache = _PersistentTokenCache(self.cache_path)
        cache.has_state_changed = True
        cache.save()
        self.assertTrue(self.cache_path.exists())

        reloaded = _PersistentTokenCache(self.cache_path)
        self.assertEqual(reloaded.serialize(), cache.serialize())

    def test_unreadable_file_starts_empty(self):
        self.cache_path.write_text("not json", encoding="utf-8")
        with self.assertLogs("PowerPlatform.PowerBI.core.credentials", level="WARNING"):
            cache = _PersistentTokenCache(self.cache_path)
        self.assertFalse(cache.has_state_changed)

    def test_save_replaces_file_without_leftovers(self):
        self.cache_path.write_text("stale", encoding="utf-8")
        with self.assertLogs("PowerPlatform.PowerBI.core.credentials", level="WARNING"):
            cache = _PersistentTokenCache(self.cache_path)
        cache.has_state_changed = True

        cache.save()

        self.assertFalse(cache.has_state_changed)
        self.assertEqual(self.cache_path.read_text(encoding="utf-8"), cache.serialize())
        self.assertEqual(sorted(p.name for p in self.tmp.iterdir()), ["msal_cache.dat"])

    def test_failed_replace_keeps_old_file_and_cleans_up(self):
        self.cache_path.write_text("{}", encoding="utf-8")
        cache = _PersistentTokenCache(self.cache_path)
        cache.has_state_changed = True

        with patch("os.replace", side_effect=PermissionError("locked")):
            with self.assertLogs("PowerPlatform.PowerBI.core.credentials", level="WARNING"):
                cache.save()

        self.assertEqual(self.cache_path.read_text(encoding="utf-8"), "{}")
        self.assertEqual(sorted(p.name for p in self.tmp.iterdir()), ["msal_cache.dat"])
        self.assertTrue(cache.has_state_changed)


class TestSilentResult(unittest.TestCase):
    def test_variants_are_distinct(self):
        token = AccessToken("t", 0)
        self.assertEqual(SilentSuccess(token).token, token)
        self.assertEqual(NeedsReauth("no cached account").reason, "no cached account")
        self.assertNotEqual(SilentSuccess(token), NeedsReauth("x"))


if __name__ == "__main__":
    unittest.main()
