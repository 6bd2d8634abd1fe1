"""
Notes API — Application Configuration
=======================================

What:  Centralized configuration management using Pydantic Settings.
Why:   Type-safe environment variable loading with validation on startup.
How:   Pydantic Settings reads from environment variables (or .env file),
       validates types/ranges, and provides a singleton `settings` object.
Who:   Imported by main.py, database.py and the routes.
When:  Loaded once at module import time; validated in the app lifespan.

Credential sources:
    The Realtime Database client needs service-account credentials. They come
    from one of two places:
    1. file:   FIREBASE_CREDENTIALS_PATH points at a service-account JSON file
    2. fields: FIREBASE_* variables (project id, private key, client email, ...)
                are assembled into the same structure the JSON file contains
    The file path wins when both are configured.
"""

from pathlib import Path
from typing import Any, Dict, List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


def _split_csv(value: str) -> List[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings have defaults so the module imports cleanly; the remote
    store settings are checked by validate_required_for_production() at startup.
    """

    # ── Remote store ──────────────────────────────────────────────────────
    # What: Realtime Database endpoint, e.g. https://<project>-default-rtdb.firebaseio.com
    database_url: str = Field(default="", description="Realtime Database URL")

    # Root path of the notes collection inside the database tree
    notes_collection: str = Field(default="notes")

    # Name of the Firebase Admin app instance owned by this service
    firebase_app_name: str = Field(default="notes-api")

    # ── Credentials: file source ──────────────────────────────────────────
    firebase_credentials_path: str = Field(
        default="",
        description="Path to a service-account JSON file",
    )

    # ── Credentials: discrete fields source ───────────────────────────────
    firebase_type: str = Field(default="service_account")
    firebase_project_id: str = Field(default="")
    firebase_private_key_id: str = Field(default="")
    firebase_private_key: str = Field(default="")
    firebase_client_email: str = Field(default="")
    firebase_client_id: str = Field(default="")
    firebase_auth_uri: str = Field(default="https://accounts.google.com/o/oauth2/auth")
    firebase_token_uri: str = Field(default="https://oauth2.googleapis.com/token")
    firebase_auth_provider_x509_cert_url: str = Field(
        default="https://www.googleapis.com/oauth2/v1/certs"
    )
    firebase_client_x509_cert_url: str = Field(default="")

    # ── CORS ──────────────────────────────────────────────────────────────
    # Format: Comma-separated values (parsed by the *_list properties below)
    cors_origins: str = Field(default="*")
    cors_allow_methods: str = Field(default="GET,POST,PUT,DELETE")
    cors_allow_headers: str = Field(default="*")

    @property
    def cors_origins_list(self) -> List[str]:
        return _split_csv(self.cors_origins)

    @property
    def cors_allow_methods_list(self) -> List[str]:
        return [method.upper() for method in _split_csv(self.cors_allow_methods)]

    @property
    def cors_allow_headers_list(self) -> List[str]:
        return _split_csv(self.cors_allow_headers)

    # ── Server ────────────────────────────────────────────────────────────
    backend_host: str = Field(default="0.0.0.0")
    backend_port: int = Field(default=8000, ge=1, le=65535)

    # Valid: DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensures log level is a valid Python logging level name."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {valid_levels}")
        return upper

    # ── Pydantic Settings Config ──────────────────────────────────────────
    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",
    }

    @property
    def credentials_source(self) -> str:
        """'file' when a credentials path is configured, otherwise 'fields'."""
        return "file" if self.firebase_credentials_path else "fields"

    def credentials_info(self) -> Dict[str, Any]:
        """
        Assemble the discrete FIREBASE_* fields into a service-account mapping.

        The result has the same keys as a downloaded service-account JSON file.
        A private key pasted into a single-line env var usually carries literal
        "\\n" sequences; those are expanded back into newlines.
        """
        return {
            "type": self.firebase_type,
            "project_id": self.firebase_project_id,
            "private_key_id": self.firebase_private_key_id,
            "private_key": self.firebase_private_key.replace("\\n", "\n"),
            "client_email": self.firebase_client_email,
            "client_id": self.firebase_client_id,
            "auth_uri": self.firebase_auth_uri,
            "token_uri": self.firebase_token_uri,
            "auth_provider_x509_cert_url": self.firebase_auth_provider_x509_cert_url,
            "client_x509_cert_url": self.firebase_client_x509_cert_url,
        }

    def validate_required_for_production(self) -> None:
        """
        What:  Validates that the remote store can be reached with these settings.
        When:  Called during app startup (lifespan).
        How:   Collects every problem and raises one ValueError listing them all.
        """
        errors = []
        if not self.database_url:
            errors.append("DATABASE_URL is not set.")

        if self.credentials_source == "file":
            if not Path(self.firebase_credentials_path).is_file():
                errors.append(
                    f"FIREBASE_CREDENTIALS_PATH '{self.firebase_credentials_path}' "
                    "does not point to a file."
                )
        else:
            required = {
                "FIREBASE_PROJECT_ID": self.firebase_project_id,
                "FIREBASE_PRIVATE_KEY": self.firebase_private_key,
                "FIREBASE_CLIENT_EMAIL": self.firebase_client_email,
            }
            missing = [name for name, value in required.items() if not value]
            if missing:
                errors.append(
                    "Set FIREBASE_CREDENTIALS_PATH or the credential fields "
                    f"(missing: {', '.join(missing)})."
                )

        if errors:
            raise ValueError(
                "Configuration validation failed:\n" + "\n".join(f"  - {e}" for e in errors)
            )


settings = Settings()
