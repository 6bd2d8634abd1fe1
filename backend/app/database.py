"""
Notes API — Remote Store Bootstrap
====================================

What:  Creates and disposes the Firebase Admin app that backs the notes store.
Why:   Centralizes all credential and connection logic in one place.
How:   Builds a service-account credential from the configured source and
       initializes a named Firebase Admin app with the databaseURL option.
Who:   Called by the application lifespan in main.py.
When:  Once at startup; disposed at shutdown.

The Firebase Admin app is the only shared resource of the service. It is
created once, wrapped in a FirebaseStore, and handed to request handlers
through app.state; nothing reinitializes it while the server runs.
"""

import logging
from typing import Optional

import firebase_admin
from fastapi import Request
from firebase_admin import credentials

from app.config import Settings, settings as default_settings
from app.services.store_base import DocumentStore

logger = logging.getLogger(__name__)


def build_credentials(config: Settings) -> credentials.Certificate:
    """
    Build a service-account credential from the configured source.

    Raises:
        ValueError: The file or the assembled fields are not a valid
                    service-account credential (raised by firebase_admin).
        IOError:    The credentials file cannot be read.
    """
    if config.credentials_source == "file":
        logger.info("Loading service-account credentials from %s", config.firebase_credentials_path)
        return credentials.Certificate(config.firebase_credentials_path)

    logger.info(
        "Assembling service-account credentials for project %s from environment",
        config.firebase_project_id,
    )
    return credentials.Certificate(config.credentials_info())


def init_firebase_app(config: Optional[Settings] = None) -> firebase_admin.App:
    """
    Initialize the Firebase Admin app used by the notes store.

    Returns:
        The named firebase_admin.App bound to config.database_url.
    """
    config = config or default_settings
    cred = build_credentials(config)
    app = firebase_admin.initialize_app(
        cred,
        {"databaseURL": config.database_url},
        name=config.firebase_app_name,
    )
    logger.info("Firebase app '%s' initialized for %s", app.name, config.database_url)
    return app


def dispose_firebase_app(app: Optional[firebase_admin.App]) -> None:
    """
    What:  Deletes the Firebase Admin app and releases its HTTP sessions.
    When:  Called during application shutdown (lifespan handler).
    """
    if app is None:
        return
    firebase_admin.delete_app(app)
    logger.info("Firebase app '%s' disposed", app.name)


# ── Store Dependency ──────────────────────────────────────────────────────
def get_store(request: Request) -> DocumentStore:
    """
    FastAPI dependency that provides the application's shared store.

    The store is built once by the application root (lifespan or
    create_app(store=...)) and kept on app.state.

    Example usage in a route:
        @router.get("/notes")
        async def list_notes(store: DocumentStore = Depends(get_store)):
            ...
    """
    store = getattr(request.app.state, "store", None)
    if store is None:
        raise RuntimeError("Notes store is not initialized")
    return store
