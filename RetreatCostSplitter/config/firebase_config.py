"""
Firestore client for saved calculations.

Credentials come from FIREBASE_SERVICE_ACCOUNT (the service account JSON
itself) when set, otherwise from the key file at FIREBASE_KEY_PATH.
"""

import json
import logging

import firebase_admin
from firebase_admin import credentials, firestore

from config.settings import FIREBASE_KEY_PATH, FIREBASE_SERVICE_ACCOUNT

logger = logging.getLogger(__name__)

_db = None


def _load_credentials():
    if FIREBASE_SERVICE_ACCOUNT:
        return credentials.Certificate(json.loads(FIREBASE_SERVICE_ACCOUNT))
    return credentials.Certificate(FIREBASE_KEY_PATH)


def get_db():
    """
    Return the shared Firestore client, initialising the app on first use.

    Raises:
        RuntimeError: If credentials are missing or initialisation fails.
    """
    global _db
    if _db is not None:
        return _db

    try:
        if not firebase_admin._apps:
            firebase_admin.initialize_app(_load_credentials())
        _db = firestore.client()
    except Exception as e:
        logger.error("Firestore initialisation failed: %s", e)
        raise RuntimeError(f"Firebase init failed: {e}")

    logger.info("Firestore client initialised")
    return _db
