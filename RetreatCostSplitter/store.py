"""
Store Module

This module saves and loads calculation input in Firebase Firestore so a
calculation can be shared by its identifier.

Firestore Structure:
    calculations/{calculation_id}
        - participants: list of participant dicts
        - settings: booking settings dict
        - additional_activities: list of activity dicts
        - created_at: ISO timestamp (kept across updates)
        - updated_at: ISO timestamp
        - expires_at: timestamp, CALCULATION_TTL_DAYS after the last save

Notes:
    - Saving with an existing id overwrites the document (last write wins)
    - Expired documents are treated as missing; a Firestore TTL policy on
      expires_at removes them server-side
    - Only input is stored; results are recomputed on load

Functions:
    generate_calculation_id: Generate a new calculation identifier.
    save_calculation: Create or overwrite a saved calculation.
    load_calculation: Fetch a saved calculation by identifier.
"""

import logging
import time
import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

from activities import Activity
from booking import BookingSettings
from config.firebase_config import get_db
from config.settings import CALCULATION_TTL_DAYS
from participants import Participant

logger = logging.getLogger(__name__)

COLLECTION = "calculations"


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _validate_calculation_id(calculation_id: str) -> None:
    """
    Validate that calculation_id is a non-empty string.

    Raises:
        ValueError: If calculation_id is invalid.
    """
    if not isinstance(calculation_id, str) or not calculation_id.strip():
        raise ValueError("calculation_id must be a non-empty string")


def _as_datetime(value) -> Optional[datetime]:
    """Firestore returns timestamps as datetimes; older documents may hold ISO strings."""
    if value is None:
        return None
    if isinstance(value, str):
        value = datetime.fromisoformat(value)
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value


def generate_calculation_id() -> str:
    """
    Generate a unique calculation ID.

    Format: calc_{epoch milliseconds}_{9 hex characters}
    """
    return f"calc_{int(time.time() * 1000)}_{uuid.uuid4().hex[:9]}"


def save_calculation(
    participants: list[Participant],
    settings: BookingSettings,
    activities: list[Activity],
    existing_id: Optional[str] = None
) -> str:
    """
    Save calculation input to Firestore.

    Args:
        participants: Participants to store.
        settings: Booking settings to store.
        activities: Activities to store.
        existing_id: Overwrite this calculation instead of creating one.

    Returns:
        str: The calculation ID.

    Raises:
        ValueError: If existing_id is given but empty.
        RuntimeError: If Firestore cannot be initialised (from get_db).
    """
    if existing_id is not None:
        _validate_calculation_id(existing_id)

    db = get_db()

    calculation_id = existing_id or generate_calculation_id()
    doc_ref = db.collection(COLLECTION).document(calculation_id)

    now = _now()
    created_at = now.isoformat()
    if existing_id:
        existing = doc_ref.get()
        if existing.exists:
            created_at = existing.to_dict().get("created_at", created_at)

    doc_ref.set({
        "participants": [p.to_dict() for p in participants],
        "settings": settings.to_dict(),
        "additional_activities": [a.to_dict() for a in activities],
        "created_at": created_at,
        "updated_at": now.isoformat(),
        "expires_at": now + timedelta(days=CALCULATION_TTL_DAYS)
    })

    logger.info("Saved calculation %s (%d participants)", calculation_id, len(participants))
    return calculation_id


def load_calculation(calculation_id: str) -> Optional[dict]:
    """
    Load calculation input from Firestore.

    Args:
        calculation_id: Identifier returned by save_calculation().

    Returns:
        dict | None: The stored document without expires_at, or None if it
            does not exist or has expired.

    Raises:
        ValueError: If calculation_id is invalid.
        RuntimeError: If Firestore cannot be initialised (from get_db).
    """
    _validate_calculation_id(calculation_id)

    db = get_db()

    snapshot = db.collection(COLLECTION).document(calculation_id).get()
    if not snapshot.exists:
        logger.info("Calculation %s not found", calculation_id)
        return None

    data = snapshot.to_dict()
    expires_at = _as_datetime(data.pop("expires_at", None))
    if expires_at is not None and expires_at <= _now():
        logger.info("Calculation %s expired at %s", calculation_id, expires_at.isoformat())
        return None

    return {
        "participants": data.get("participants", []),
        "settings": data.get("settings", {}),
        "additional_activities": data.get("additional_activities", []),
        "created_at": data.get("created_at"),
        "updated_at": data.get("updated_at")
    }
