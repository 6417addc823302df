"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from
environment variables.  Defaults are provided for every field so the
API can start locally without any configuration; a production
deployment is expected to set ``APP_ENV=production`` together with the
MongoDB connection string and the inline Firebase service account.
"""

import os
from dataclasses import dataclass
from typing import List


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = os.getenv("PROJECT_NAME", "MovieMaster API")
    api_version: str = os.getenv("API_VERSION", "1.0.0")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_file: str = os.getenv("LOG_FILE", "")

    # Deployment mode.  ``production`` makes credential and database
    # problems fatal at startup and selects the inline service account;
    # every other value is treated as a development deployment.
    environment: str = os.getenv("APP_ENV", "development")

    mongo_uri: str = os.getenv("MONGO_URI", "mongodb://localhost:27017")
    mongo_db_name: str = os.getenv("MONGO_DB_NAME", "moviemasterdb")

    # Firebase Admin credentials.  ``FIREBASE_SERVICE_ACCOUNT`` holds the
    # service account JSON itself (used in production, where secrets are
    # injected as environment variables); ``FIREBASE_CREDENTIALS_FILE``
    # points to the downloaded key file used during development.
    firebase_service_account: str = os.getenv("FIREBASE_SERVICE_ACCOUNT", "")
    firebase_credentials_file: str = os.getenv("FIREBASE_CREDENTIALS_FILE", "serviceAccountKey.json")

    # Comma‑separated list of browser origins allowed to call the API.
    # ``*`` allows any origin.  An empty value disables CORS headers.
    allowed_origins: str = os.getenv("ALLOWED_ORIGINS", "*")

    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "5000"))

    @property
    def is_production(self) -> bool:
        return self.environment.strip().lower() == "production"

    @property
    def cors_origins(self) -> List[str]:
        return [origin.strip() for origin in self.allowed_origins.split(",") if origin.strip()]


# Instantiate settings once so other modules can import it without
# repeatedly reading environment variables.  Environment variables must
# therefore be set before importing this module.
settings = Settings()
