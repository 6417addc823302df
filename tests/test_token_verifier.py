import json
import unittest
from unittest.mock import MagicMock, patch

from movie_master_api.app.core import security
from movie_master_api.app.core.errors import InvalidToken, ServiceUnavailable, VerifierInitError
from movie_master_api.app.core.security import TokenVerifier
from stubs import make_settings

SERVICE_ACCOUNT = {"type": "service_account", "project_id": "movie-master"}


class TestTokenVerifierInitialisation(unittest.TestCase):
    def test_production_uses_inline_service_account(self) -> None:
        settings = make_settings(environment="production", firebase_service_account=json.dumps(SERVICE_ACCOUNT))
        verifier = TokenVerifier(settings)

        with patch.object(security.credentials, "Certificate", return_value="cred") as certificate, patch.object(
            security.firebase_admin, "initialize_app", return_value=MagicMock()
        ) as initialize_app:
            verifier.initialize()

        certificate.assert_called_once_with(SERVICE_ACCOUNT)
        initialize_app.assert_called_once_with("cred", name=security.FIREBASE_APP_NAME)
        self.assertTrue(verifier.is_initialized)

    def test_development_uses_credentials_file(self) -> None:
        settings = make_settings(firebase_credentials_file="/secrets/key.json")
        verifier = TokenVerifier(settings)

        with patch.object(security.credentials, "Certificate", return_value="cred") as certificate, patch.object(
            security.firebase_admin, "initialize_app", return_value=MagicMock()
        ):
            verifier.initialize()

        certificate.assert_called_once_with("/secrets/key.json")

    def test_initialise_is_idempotent(self) -> None:
        verifier = TokenVerifier(make_settings())

        with patch.object(security.credentials, "Certificate", return_value="cred"), patch.object(
            security.firebase_admin, "initialize_app", return_value=MagicMock()
        ) as initialize_app:
            verifier.initialize()
            verifier.initialize()

        self.assertEqual(initialize_app.call_count, 1)

    def test_reuses_already_registered_app(self) -> None:
        verifier = TokenVerifier(make_settings())
        existing = MagicMock()

        with patch.object(security.credentials, "Certificate", return_value="cred"), patch.object(
            security.firebase_admin, "initialize_app", side_effect=ValueError("already exists")
        ), patch.object(security.firebase_admin, "get_app", return_value=existing) as get_app:
            verifier.initialize()

        get_app.assert_called_once_with(security.FIREBASE_APP_NAME)
        self.assertTrue(verifier.is_initialized)

    def test_development_failure_leaves_verifier_degraded(self) -> None:
        verifier = TokenVerifier(make_settings(firebase_credentials_file="/missing.json"))

        with patch.object(security.credentials, "Certificate", side_effect=IOError("no such file")):
            with self.assertLogs("movie_master_api.app.core.security", level="WARNING"):
                verifier.initialize()

        self.assertFalse(verifier.is_initialized)

    def test_production_failure_is_fatal(self) -> None:
        verifier = TokenVerifier(make_settings(environment="production", firebase_service_account="{not json"))

        with self.assertRaises(VerifierInitError):
            verifier.initialize()

    def test_production_requires_inline_credentials(self) -> None:
        verifier = TokenVerifier(make_settings(environment="production", firebase_service_account=""))

        with self.assertRaises(VerifierInitError):
            verifier.initialize()


class TestTokenVerifierVerify(unittest.IsolatedAsyncioTestCase):
    def _initialised(self) -> TokenVerifier:
        verifier = TokenVerifier(make_settings())
        with patch.object(security.credentials, "Certificate", return_value="cred"), patch.object(
            security.firebase_admin, "initialize_app", return_value=MagicMock()
        ):
            verifier.initialize()
        return verifier

    async def test_uninitialised_verifier_is_unavailable(self) -> None:
        verifier = TokenVerifier(make_settings())
        with self.assertRaises(ServiceUnavailable):
            await verifier.verify("token")

    async def test_valid_token_yields_identity(self) -> None:
        verifier = self._initialised()
        claims = {"uid": "user1", "email": "user1@example.com"}

        with patch.object(security.firebase_auth, "verify_id_token", return_value=claims):
            identity = await verifier.verify("token")

        self.assertEqual(identity.uid, "user1")
        self.assertEqual(identity.claims["email"], "user1@example.com")

    async def test_firebase_rejection_maps_to_invalid_token(self) -> None:
        verifier = self._initialised()
        error = security.firebase_auth.InvalidIdTokenError("bad signature")

        with patch.object(security.firebase_auth, "verify_id_token", side_effect=error):
            with self.assertRaises(InvalidToken):
                await verifier.verify("token")

    async def test_malformed_token_maps_to_invalid_token(self) -> None:
        verifier = self._initialised()

        with patch.object(security.firebase_auth, "verify_id_token", side_effect=ValueError("malformed")):
            with self.assertRaises(InvalidToken):
                await verifier.verify("token")

    async def test_token_without_subject_is_invalid(self) -> None:
        verifier = self._initialised()

        with patch.object(security.firebase_auth, "verify_id_token", return_value={"email": "x@example.com"}):
            with self.assertRaises(InvalidToken):
                await verifier.verify("token")


if __name__ == "__main__":
    unittest.main()
