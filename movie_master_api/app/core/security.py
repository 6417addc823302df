"""
Firebase ID token verification and the authorization gate.

``TokenVerifier`` wraps the Firebase Admin SDK.  It is initialised once
at application startup from either an inline service account JSON
(production) or a service account key file (every other deployment
mode).  In development a missing or broken credential only disables
the protected routes, which then answer 503; in production the failure
aborts startup.

``get_current_identity`` is the FastAPI dependency guarding protected
routes.  It requires an ``Authorization: Bearer <token>`` header,
verifies the token and stores the resulting ``Identity`` on
``request.state`` before the route handler runs.
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import firebase_admin
from fastapi import Depends, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from firebase_admin import auth as firebase_auth
from firebase_admin import credentials

from .config import Settings
from .errors import (
    Forbidden,
    InternalError,
    InvalidToken,
    ServiceUnavailable,
    Unauthorized,
    VerifierInitError,
)

logger = logging.getLogger(__name__)

FIREBASE_APP_NAME = "movie-master"


@dataclass
class Identity:
    """Authenticated subject derived from a verified ID token."""

    uid: str
    claims: Dict[str, Any] = field(default_factory=dict)


class TokenVerifier:
    """Verifies Firebase ID tokens for the lifetime of the process."""

    def __init__(self, settings: Settings) -> None:
        self._settings = settings
        self._app: Optional[firebase_admin.App] = None

    @property
    def is_initialized(self) -> bool:
        return self._app is not None

    def _load_credential(self) -> credentials.Certificate:
        if self._settings.is_production:
            raw = self._settings.firebase_service_account
            if not raw:
                raise VerifierInitError("FIREBASE_SERVICE_ACCOUNT is not set")
            return credentials.Certificate(json.loads(raw))
        return credentials.Certificate(self._settings.firebase_credentials_file)

    def initialize(self) -> None:
        """Load credentials and register the Firebase app.

        Calling this more than once has no further effect once it has
        succeeded.  Raises ``VerifierInitError`` in production mode when
        the credentials cannot be loaded; otherwise logs the problem and
        leaves the verifier uninitialised.
        """
        if self._app is not None:
            return
        try:
            credential = self._load_credential()
            try:
                self._app = firebase_admin.initialize_app(credential, name=FIREBASE_APP_NAME)
            except ValueError:
                # Already registered in this process (e.g. a second app instance).
                self._app = firebase_admin.get_app(FIREBASE_APP_NAME)
        except (VerifierInitError, ValueError, OSError) as exc:
            if self._settings.is_production:
                logger.error("Firebase Admin initialisation failed: %s", exc)
                if isinstance(exc, VerifierInitError):
                    raise
                raise VerifierInitError(str(exc)) from exc
            logger.warning(
                "Firebase Admin initialisation failed, protected routes will answer 503: %s",
                exc,
            )
            return
        logger.info("Firebase Admin initialised")

    async def verify(self, raw_token: str) -> Identity:
        """Verify ``raw_token`` and return the identity it carries.

        Raises ``ServiceUnavailable`` when the verifier is not initialised
        and ``InvalidToken`` when the token is malformed, expired,
        revoked or carries a bad signature.
        """
        if self._app is None:
            raise ServiceUnavailable()
        try:
            claims = await run_in_threadpool(firebase_auth.verify_id_token, raw_token, app=self._app)
        except (firebase_auth.InvalidIdTokenError, ValueError) as exc:
            raise InvalidToken(str(exc)) from exc
        uid = claims.get("uid") or claims.get("sub")
        if not uid:
            raise InvalidToken("Token carries no subject")
        return Identity(uid=str(uid), claims=dict(claims))


# Declares the bearer scheme in the OpenAPI schema.  The header itself is
# parsed by ``extract_bearer_token`` because HTTPBearer is lenient about
# the scheme's case and the whitespace around the token.
security = HTTPBearer(auto_error=False)

BEARER_PREFIX = "Bearer "


def get_token_verifier(request: Request) -> TokenVerifier:
    return request.app.state.token_verifier


def extract_bearer_token(authorization: Optional[str]) -> str:
    """Return the token of an ``Authorization: Bearer <token>`` header.

    The scheme must be exactly ``Bearer`` followed by one space and a
    non-empty token containing no whitespace; anything else is 401.
    """
    if not authorization or not authorization.startswith(BEARER_PREFIX):
        raise Unauthorized("Not authenticated")
    token = authorization[len(BEARER_PREFIX):]
    if not token or any(ch.isspace() for ch in token):
        raise Unauthorized("Not authenticated")
    return token


async def get_current_identity(
    request: Request,
    _scheme: Optional[HTTPAuthorizationCredentials] = Depends(security),
    verifier: TokenVerifier = Depends(get_token_verifier),
) -> Identity:
    """Dependency guarding protected routes.

    Raises 401 for a missing, malformed or invalid token and 503 when the
    verifier could not be initialised.  Unexpected verifier faults are
    logged and reported as 500.  On success the identity is attached to
    ``request.state.identity`` and returned.
    """
    token = extract_bearer_token(request.headers.get("Authorization"))
    try:
        identity = await verifier.verify(token)
    except InvalidToken as exc:
        logger.info("Rejected token on %s: %s", request.url.path, exc)
        raise Unauthorized("Invalid or expired token") from exc
    except ServiceUnavailable:
        raise
    except Exception as exc:
        logger.exception("Token verification failed unexpectedly")
        raise InternalError() from exc
    request.state.identity = identity
    return identity


def ensure_owner(identity: Identity, owner: str) -> None:
    """Raise 403 unless ``owner`` is the authenticated subject."""
    if owner != identity.uid:
        logger.warning("User %s tried to access watchlist of %s", identity.uid, owner)
        raise Forbidden()
