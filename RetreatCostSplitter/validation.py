"""
Validation Module

This module checks calculation input before the engine runs.

Features:
    - Hard errors that block the calculation
    - Non-blocking warnings shown alongside results
    - Itemized messages tied to participants where relevant

Rules:
    Errors:
        - booking dates must be valid YYYY-MM-DD dates
        - booking end date must be after start date
        - total cost must be greater than 0
        - participant name cannot be empty
        - participant name cannot contain ";"
        - participant dates must be valid YYYY-MM-DD dates
        - departure date must be after arrival date
    Warnings:
        - participant stay extends outside the booking period
        - a night in the booking period has nobody present

Functions:
    validate_inputs: Validate participants and settings.
    has_errors: Check if any message is a hard error.
    split_messages: Separate error and warning texts for display.
"""

import logging
from datetime import timedelta
from typing import Optional

from booking import BookingSettings
from occupancy import booking_nights, is_present, unoccupied_night_warning
from participants import NAME_SEPARATOR, Participant
from utils import is_valid_date, parse_date

logger = logging.getLogger(__name__)


class ValidationMessage:
    """
    A single validation finding.

    Attributes:
        type (str): "error" or "warning".
        message (str): Human-readable text.
        participant_id (str | None): Participant the message refers to.
    """

    def __init__(self, type: str, message: str, participant_id: Optional[str] = None):
        self.type = type
        self.message = message
        self.participant_id = participant_id

    def to_dict(self) -> dict:
        return {
            "type": self.type,
            "message": self.message,
            "participant_id": self.participant_id
        }

    def __repr__(self) -> str:
        return f"ValidationMessage(type='{self.type}', message='{self.message}')"


def validate_inputs(
    participants: list[Participant],
    settings: BookingSettings
) -> list[ValidationMessage]:
    """
    Validate participants and booking settings.

    A broken booking window stops validation immediately, since nothing
    else can be checked against it.

    Args:
        participants: Participants in input order.
        settings: Booking settings.

    Returns:
        list[ValidationMessage]: Errors and warnings, in discovery order.
    """
    messages = []

    if not is_valid_date(settings.start_date) or not is_valid_date(settings.end_date):
        messages.append(ValidationMessage("error", "Booking dates must be in YYYY-MM-DD format"))
        return messages

    start_date = parse_date(settings.start_date)
    end_date = parse_date(settings.end_date)

    if start_date >= end_date:
        messages.append(ValidationMessage("error", "Booking end date must be after start date"))
        return messages

    if settings.total_cost <= 0:
        messages.append(ValidationMessage("error", "Total cost must be greater than 0"))

    staying = []
    for participant in participants:
        pid = participant.participant_id

        if not (participant.name or "").strip():
            messages.append(ValidationMessage("error", "Participant name cannot be empty", pid))
        elif NAME_SEPARATOR in participant.name:
            messages.append(ValidationMessage(
                "error", f"Participant name cannot contain '{NAME_SEPARATOR}'", pid
            ))

        if not is_valid_date(participant.arrival_date) or not is_valid_date(participant.departure_date):
            messages.append(ValidationMessage(
                "error", "Arrival and departure dates must be in YYYY-MM-DD format", pid
            ))
            continue

        arrival = parse_date(participant.arrival_date)
        departure = parse_date(participant.departure_date)

        if arrival >= departure:
            messages.append(ValidationMessage("error", "Departure date must be after arrival date", pid))
        else:
            staying.append(participant)

        if arrival < start_date or departure > end_date + timedelta(days=1):
            messages.append(ValidationMessage(
                "warning", "Participant stay extends outside booking period", pid
            ))

    # Nights nobody occupies are not charged to anyone
    for night in booking_nights(start_date, end_date):
        if not any(is_present(p, night) for p in staying):
            messages.append(ValidationMessage(
                "warning", unoccupied_night_warning(night.isoformat())
            ))

    if messages:
        logger.debug("Validation produced %d messages", len(messages))

    return messages


def has_errors(messages: list[ValidationMessage]) -> bool:
    """Return True if any message is a hard error."""
    return any(m.type == "error" for m in messages)


def split_messages(messages: list[ValidationMessage]) -> tuple[list[str], list[str]]:
    """Split messages into (error texts, warning texts)."""
    errors = [m.message for m in messages if m.type == "error"]
    warnings = [m.message for m in messages if m.type == "warning"]
    return errors, warnings
