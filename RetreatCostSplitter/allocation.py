"""
Allocation Module

This module distributes the total booking cost across participants
according to the selected cost-split policy.

Features:
    - equal: total cost split evenly, regardless of stay length
    - nightly: proportional to nights stayed
    - weekly: proportional to weeks stayed, each stay rounded up to whole weeks
    - mixed: flagged participants pay their per-night occupancy shares,
      everyone else splits the remainder evenly

Data Model:
    Input - participants: list of Participant
    Input - settings: BookingSettings (total_cost, calculation_method)
    Input - breakdown: list of NightRecord from occupancy.build_night_breakdown

    Output - list of float base amounts in EUR, aligned with participants

Notes:
    - Nights for "nightly" and "weekly" come from the participant's own dates
      (departure - arrival), not from the occupancy table.
    - When every participant is flagged in "mixed" mode, each pays in
      proportion to the occupied nights they account for, instead of
      summing per-night shares.
    - Preconditions are not guarded: a zero denominator yields inf/nan.

Functions:
    count_weeks: Weeks charged for a number of nights.
    allocate_base_costs: Compute base amounts for all participants.
    describe_allocations: Human-readable calculation string per participant.
"""

import logging
import math

from booking import CALCULATION_METHODS, BookingSettings
from occupancy import count_nights, is_present
from participants import Participant
from results import NightRecord
from utils import divide

logger = logging.getLogger(__name__)


def count_weeks(nights: int) -> int:
    """Weeks charged for a stay: ceil(nights / 7)."""
    return math.ceil(nights / 7)


def _occupied_slots(participant: Participant, breakdown: list[NightRecord]) -> int:
    """Number of booked nights the participant is present on."""
    return sum(1 for night in breakdown if is_present(participant, night.date))


def _occupancy_share(participant: Participant, breakdown: list[NightRecord]) -> float:
    """Sum of per-person night costs over the nights the participant is present."""
    return sum(
        night.per_person_cost
        for night in breakdown
        if is_present(participant, night.date)
    )


def _allocate_mixed(
    participants: list[Participant],
    total_cost: float,
    breakdown: list[NightRecord]
) -> list[float]:
    flagged = [p for p in participants if p.use_nightly_rate]

    if participants and len(flagged) == len(participants):
        slots = [_occupied_slots(p, breakdown) for p in participants]
        total_slots = sum(slots)
        return [divide(s, total_slots) * total_cost for s in slots]

    nightly_amounts = {
        id(p): _occupancy_share(p, breakdown) for p in flagged
    }
    remaining_budget = total_cost - sum(nightly_amounts.values())
    even_share = divide(remaining_budget, len(participants) - len(flagged))

    return [
        nightly_amounts[id(p)] if p.use_nightly_rate else even_share
        for p in participants
    ]


def allocate_base_costs(
    participants: list[Participant],
    settings: BookingSettings,
    breakdown: list[NightRecord]
) -> list[float]:
    """
    Compute each participant's base share of the total cost.

    Args:
        participants: Participants in input order.
        settings: Booking settings (total_cost, calculation_method).
        breakdown: Night occupancy table for the booking window.

    Returns:
        list[float]: Base amounts in EUR, aligned with participants.

    Raises:
        ValueError: If the calculation method is not recognised.
    """
    method = settings.calculation_method
    total_cost = settings.total_cost
    logger.debug("Allocating %.2f across %d participants (%s)", total_cost, len(participants), method)

    if method == "equal":
        share = divide(total_cost, len(participants))
        return [share for _ in participants]

    if method == "nightly":
        nights = [count_nights(p.arrival_date, p.departure_date) for p in participants]
        total_nights = sum(nights)
        return [divide(n, total_nights) * total_cost for n in nights]

    if method == "weekly":
        weeks = [count_weeks(count_nights(p.arrival_date, p.departure_date)) for p in participants]
        total_weeks = sum(weeks)
        return [divide(w, total_weeks) * total_cost for w in weeks]

    if method == "mixed":
        return _allocate_mixed(participants, total_cost, breakdown)

    raise ValueError(f"calculation_method must be one of {CALCULATION_METHODS}, got: {method}")


def describe_allocations(
    participants: list[Participant],
    settings: BookingSettings,
    breakdown: list[NightRecord],
    amounts: list[float]
) -> list[str]:
    """
    Build the calculation description shown next to each base amount.

    Examples:
        "Even split: €260.00"
        "12 nights × €25.49 = €305.88"
        "2 weeks × €185.71 = €371.43"
    """
    method = settings.calculation_method
    all_flagged = bool(participants) and all(p.use_nightly_rate for p in participants)
    total_slots = sum(_occupied_slots(p, breakdown) for p in participants) if all_flagged else 0

    descriptions = []
    for participant, amount in zip(participants, amounts):
        nights = count_nights(participant.arrival_date, participant.departure_date)

        if method == "equal":
            text = f"Even split: €{amount:.2f}"
        elif method == "nightly":
            rate = amount / nights if nights > 0 else 0
            text = f"{nights} nights × €{rate:.2f} = €{amount:.2f}"
        elif method == "weekly":
            weeks = count_weeks(nights)
            per_week = amount / weeks if weeks > 0 else 0
            text = f"{weeks} week{'s' if weeks != 1 else ''} × €{per_week:.2f} = €{amount:.2f}"
        elif all_flagged:
            slots = _occupied_slots(participant, breakdown)
            text = f"{slots} of {total_slots} occupied nights = €{amount:.2f}"
        elif participant.use_nightly_rate:
            slots = _occupied_slots(participant, breakdown)
            text = f"{slots} occupied nights = €{amount:.2f}"
        else:
            text = f"Even split of remainder: €{amount:.2f}"

        descriptions.append(text)

    return descriptions
