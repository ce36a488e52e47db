"""
Calculator Module

This module is the entry point of the cost-allocation engine. It wires the
pipeline stages together in a fixed order:

    1. Night occupancy table (occupancy.py)
    2. Base cost allocation (allocation.py)
    3. Activity charges and credits (activities.py)
    4. Reconciliation and USD rounding (reconciliation.py)

The engine is a pure function: it never mutates its input, keeps no state
between calls, and returns a fresh CalculationResult every time. It does
not validate its input; run_calculation() validates first and skips the
engine entirely when a hard error is found.

Unoccupied nights are reported in both places on purpose: as validation
warnings, which exist even when an error blocks the engine, and in
CalculationResult.warnings, which travel with the result into the HTML
and PDF report. Both use occupancy.unoccupied_night_warning().

Functions:
    calculate_cost_split: Run the engine on well-formed input.
    empty_result: Zeroed result used when input is invalid.
    run_calculation: Validate, then calculate or substitute an empty result.
"""

import logging
from typing import Iterable

from activities import Activity, resolve_activity_balances, summarize_activities
from allocation import allocate_base_costs, describe_allocations
from booking import BookingSettings
from occupancy import build_night_breakdown, count_nights, unoccupied_night_warning, unoccupied_nights
from participants import Participant
from reconciliation import apply_derived_amounts, reconcile
from results import CalculationResult, ParticipantResult
from validation import ValidationMessage, has_errors, validate_inputs

logger = logging.getLogger(__name__)


def calculate_cost_split(
    participants: list[Participant],
    settings: BookingSettings,
    activities: Iterable[Activity] = ()
) -> CalculationResult:
    """
    Split the booking cost across participants.

    Args:
        participants: Participants in input order. The last one absorbs any
            rounding adjustment.
        settings: Booking settings.
        activities: Loans and services between participants.

    Returns:
        CalculationResult: Per-participant breakdown, night table, total
            nights, rounding adjustment, activity summaries and warnings.
    """
    participants = list(participants)
    activities = list(activities)

    # Step 1: who is present on each night
    night_breakdown = build_night_breakdown(participants, settings)
    warnings = []
    for night in unoccupied_nights(night_breakdown):
        logger.warning("Nobody is present on %s; its cost is not collected", night)
        warnings.append(unoccupied_night_warning(night))

    # Step 2: base share per participant
    amounts = allocate_base_costs(participants, settings, night_breakdown)
    descriptions = describe_allocations(participants, settings, night_breakdown, amounts)

    # Step 3: loans, services and tips
    balances = resolve_activity_balances(participants, activities)

    participant_results = []
    for participant, amount, description, (charges, credits) in zip(
        participants, amounts, descriptions, balances
    ):
        result = ParticipantResult(
            participant_id=participant.participant_id,
            name=participant.name,
            arrival_date=participant.arrival_date,
            departure_date=participant.departure_date,
            nights=count_nights(participant.arrival_date, participant.departure_date),
            amount_eur=amount,
            calculation=description,
            additional_charges=charges,
            additional_credits=credits
        )
        participant_results.append(apply_derived_amounts(result, settings))

    # Step 4: make the base amounts add up and round USD
    rounding_adjustment = reconcile(participant_results, settings)

    logger.debug(
        "Calculated split of %.2f over %d nights for %d participants",
        settings.total_cost, len(night_breakdown), len(participant_results)
    )

    return CalculationResult(
        participants=participant_results,
        night_breakdown=night_breakdown,
        total_nights=len(night_breakdown),
        rounding_adjustment=rounding_adjustment,
        additional_activities=summarize_activities(participants, activities),
        warnings=warnings
    )


def empty_result() -> CalculationResult:
    """Zeroed result substituted when validation fails."""
    return CalculationResult()


def run_calculation(
    participants: list[Participant],
    settings: BookingSettings,
    activities: Iterable[Activity] = ()
) -> tuple[list[ValidationMessage], CalculationResult]:
    """
    Validate input, then run the engine only if there are no hard errors.

    Returns:
        tuple: (validation messages, calculation result). The result is
            empty when any message is an error.
    """
    messages = validate_inputs(participants, settings)

    if has_errors(messages):
        logger.info("Skipping calculation: %d validation errors", sum(m.type == "error" for m in messages))
        return messages, empty_result()

    return messages, calculate_cost_split(participants, settings, activities)
