"""
Occupancy Module

This module expands a booking window into nights and works out who is
present on each of them.

Features:
    - Inclusive booking window (start and end dates are both nights)
    - Presence rule: arrival <= night < departure
    - Uniform nightly cost and per-person share per night
    - Detection of nights nobody occupies

Data Model:
    Input - participants: list of Participant
    Input - settings: BookingSettings (start_date, end_date, total_cost)

    Output - list of NightRecord ordered by date:
        - date: string (YYYY-MM-DD)
        - present_participants: list of names
        - participant_count: int
        - nightly_cost: float (total_cost / total_nights)
        - per_person_cost: float (nightly_cost / count, 0 if nobody present)

Notes:
    A night nobody occupies is not charged to anyone. Its cost is left to
    the reconciliation pass and reported as a warning by the caller.

Functions:
    booking_nights: List every night in the booking window.
    count_nights: Number of nights between arrival and departure.
    is_present: Check if a participant occupies a given night.
    build_night_breakdown: Build the per-night occupancy table.
    unoccupied_nights: Dates of nights with nobody present.
    unoccupied_night_warning: Warning text for an unoccupied night.
"""

from datetime import date, timedelta

from booking import BookingSettings
from participants import Participant
from results import NightRecord
from utils import divide, format_date, parse_date


def booking_nights(start_date, end_date) -> list[date]:
    """
    List every night of the booking window.

    Both ends are included, so 2025-10-16 to 2025-10-28 gives 13 nights.
    An end date before the start date gives an empty list.

    Args:
        start_date: First night (YYYY-MM-DD string or date).
        end_date: Last night (YYYY-MM-DD string or date).

    Returns:
        list[date]: Nights in chronological order.
    """
    start = parse_date(start_date)
    end = parse_date(end_date)
    return [start + timedelta(days=offset) for offset in range((end - start).days + 1)]


def count_nights(arrival_date, departure_date) -> int:
    """Number of nights stayed: departure minus arrival, in days."""
    return (parse_date(departure_date) - parse_date(arrival_date)).days


def is_present(participant: Participant, night) -> bool:
    """
    Check if a participant occupies a night.

    A participant is present if:
        - arrival_date <= night
        - AND night < departure_date

    The departure day itself is not a night spent.
    """
    night = parse_date(night)
    return parse_date(participant.arrival_date) <= night < parse_date(participant.departure_date)


def build_night_breakdown(
    participants: list[Participant],
    settings: BookingSettings
) -> list[NightRecord]:
    """
    Build the per-night occupancy table for the booking window.

    Args:
        participants: Participants in input order.
        settings: Booking settings with start/end dates and total cost.

    Returns:
        list[NightRecord]: One record per night, ordered by date.
    """
    nights = booking_nights(settings.start_date, settings.end_date)
    nightly_cost = divide(settings.total_cost, len(nights))

    breakdown = []
    for night in nights:
        present = [p for p in participants if is_present(p, night)]
        count = len(present)

        breakdown.append(NightRecord(
            date=format_date(night),
            present_participants=[p.name for p in present],
            participant_count=count,
            nightly_cost=nightly_cost,
            per_person_cost=nightly_cost / count if count > 0 else 0.0
        ))

    return breakdown


def unoccupied_nights(breakdown: list[NightRecord]) -> list[str]:
    """Dates of nights with nobody present."""
    return [night.date for night in breakdown if night.participant_count == 0]


def unoccupied_night_warning(night: str) -> str:
    """Warning text for a night nobody occupies (night as YYYY-MM-DD)."""
    return f"Nobody is present on the night of {night}"
