"""
Participants Module

This module defines the participant value object for the retreat cost
splitter application.

Features:
    - Participant model with arrival/departure dates
    - Optional per-participant nightly-rate flag (used by "mixed" mode)
    - Dict conversion for JSON payloads and Firestore storage
    - Sequential participant ID generation

Data Model:
    Participant fields:
        - participant_id: string (P001, P002, ... when generated)
        - name: string (must not contain ";")
        - arrival_date: string (YYYY-MM-DD)
        - departure_date: string (YYYY-MM-DD), exclusive
        - use_nightly_rate: bool

Functions:
    create_participant: Build a participant after checking required fields.
    next_participant_id: Generate the next sequential participant ID.
"""

import re
from typing import Iterable, Optional

from utils import generate_id, is_valid_date

# Joins participant names in exported activity rows, so names cannot contain it
NAME_SEPARATOR = ";"


class Participant:
    """
    Represents a person sharing the accommodation.

    Attributes:
        participant_id (str): Opaque identifier.
        name (str): Display name.
        arrival_date (str): First night spent (YYYY-MM-DD).
        departure_date (str): Day of leaving (YYYY-MM-DD), not a night spent.
        use_nightly_rate (bool): Bill by occupancy when the method is "mixed".
    """

    def __init__(
        self,
        name: str,
        arrival_date: str,
        departure_date: str,
        participant_id: Optional[str] = None,
        use_nightly_rate: bool = False
    ):
        self.participant_id = participant_id
        self.name = name
        self.arrival_date = arrival_date
        self.departure_date = departure_date
        self.use_nightly_rate = use_nightly_rate

    def to_dict(self) -> dict:
        """Convert participant to dictionary for JSON or Firestore storage."""
        return {
            "participant_id": self.participant_id,
            "name": self.name,
            "arrival_date": self.arrival_date,
            "departure_date": self.departure_date,
            "use_nightly_rate": self.use_nightly_rate
        }

    def __repr__(self) -> str:
        return (
            f"Participant(name='{self.name}', arrival='{self.arrival_date}', "
            f"departure='{self.departure_date}')"
        )

    def __eq__(self, other) -> bool:
        if not isinstance(other, Participant):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    @classmethod
    def from_dict(cls, data: dict) -> "Participant":
        """Create a Participant instance from a dictionary."""
        return cls(
            participant_id=data.get("participant_id"),
            name=data.get("name", ""),
            arrival_date=data.get("arrival_date"),
            departure_date=data.get("departure_date"),
            use_nightly_rate=bool(data.get("use_nightly_rate", False))
        )


def _validate_date(date_str: str, field_name: str) -> bool:
    """
    Validate date string format (YYYY-MM-DD).

    Raises:
        ValueError: If date format is invalid.
    """
    if not is_valid_date(date_str):
        raise ValueError(f"{field_name} must be in YYYY-MM-DD format, got: {date_str}")
    return True


def _validate_non_empty_string(value: str, field_name: str) -> bool:
    """
    Validate that a string is non-empty.

    Raises:
        ValueError: If string is empty or not a string.
    """
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"{field_name} must be a non-empty string")
    return True


def next_participant_id(participants: Iterable[Participant]) -> str:
    """
    Generate the next sequential participant ID.

    Format: P001, P002, P003, ...

    IDs that do not follow the P### format are ignored when looking for the
    highest existing number.

    Args:
        participants: Participants already created.

    Returns:
        str: Next participant ID in format P###.
    """
    max_num = 0
    pattern = re.compile(r'^P(\d+)$')

    for participant in participants:
        match = pattern.match(participant.participant_id or "")
        if match:
            max_num = max(max_num, int(match.group(1)))

    return generate_id("P", max_num + 1)


def create_participant(
    name: str,
    arrival_date: str,
    departure_date: str,
    participant_id: Optional[str] = None,
    use_nightly_rate: bool = False
) -> Participant:
    """
    Create a participant after checking required fields.

    Only presence and date parse-ability are checked here; date ordering
    and booking-window checks are reported by validation.validate_inputs.

    Args:
        name: Display name.
        arrival_date: Arrival date (YYYY-MM-DD).
        departure_date: Departure date (YYYY-MM-DD).
        participant_id: Optional identifier.
        use_nightly_rate: Occupancy-weighted billing flag for "mixed" mode.

    Returns:
        Participant: The created participant.

    Raises:
        ValueError: If the name is empty or contains NAME_SEPARATOR, or a
            date is malformed.
    """
    _validate_non_empty_string(name, "name")
    if NAME_SEPARATOR in name:
        raise ValueError(f"name must not contain '{NAME_SEPARATOR}', got: {name}")
    _validate_date(arrival_date, "arrival_date")
    _validate_date(departure_date, "departure_date")

    return Participant(
        name=name.strip(),
        arrival_date=arrival_date.strip(),
        departure_date=departure_date.strip(),
        participant_id=participant_id,
        use_nightly_rate=bool(use_nightly_rate)
    )
