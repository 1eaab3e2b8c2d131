"""Firebase Admin app and Firestore client, initialized lazily.

Both Firestore adapters (catalog source and order sink) share one app so the
credentials are loaded once per process.
"""

import firebase_admin
import structlog
from firebase_admin import credentials, firestore

from shared.settings import get_settings

logger = structlog.get_logger(__name__)

_firebase_app = None


def get_firebase_app():
    """Get or initialize the Firebase Admin app."""
    global _firebase_app

    if _firebase_app is not None:
        return _firebase_app

    # Another component may have initialized the default app already
    try:
        _firebase_app = firebase_admin.get_app()
        return _firebase_app
    except ValueError:
        pass

    cred_path = get_settings().firebase_credentials_path
    if cred_path:
        cred = credentials.Certificate(cred_path)
    else:
        cred = credentials.ApplicationDefault()

    _firebase_app = firebase_admin.initialize_app(cred)
    logger.info("Firebase Admin SDK initialized", credentials_path=cred_path)
    return _firebase_app


def get_firestore_client():
    """Return a Firestore client bound to the storefront's Firebase app."""
    return firestore.client(get_firebase_app())
