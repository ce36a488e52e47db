"""
Reconciliation Module

This module makes the allocated base amounts add up to the total cost and
applies currency conversion and USD rounding.

Order of operations:
    1. rounding_adjustment = total_cost - sum(amount_eur)
    2. if |rounding_adjustment| > ROUNDING_EPSILON, the whole adjustment is
       added to the LAST participant, whose derived fields (USD amount,
       per-night rates, description, final amounts) are then recomputed
    3. if round_usd is enabled, every amount_usd and final_amount_usd is
       rounded to a whole dollar and effective_per_night_usd is recomputed
       from the rounded amount

Functions:
    apply_derived_amounts: Fill USD, per-night and final amounts of a result.
    reconcile: Run the reconciliation and rounding pass.
"""

import logging

from booking import BookingSettings
from results import ParticipantResult
from utils import round_half_up

logger = logging.getLogger(__name__)


# Residuals at or below this many currency units are left alone
ROUNDING_EPSILON = 0.001


def _per_night(amount: float, nights: int) -> float:
    return amount / nights if nights > 0 else 0.0


def apply_derived_amounts(result: ParticipantResult, settings: BookingSettings) -> ParticipantResult:
    """
    Recompute the fields derived from amount_eur, charges and credits.

    Sets amount_usd, both effective per-night rates, final_amount_eur
    (base + charges - credits) and final_amount_usd.

    Args:
        result: Participant result with amount_eur, nights, charges and credits set.
        settings: Booking settings providing the exchange rate.

    Returns:
        ParticipantResult: The same object, updated in place.
    """
    rate = settings.exchange_rate

    result.amount_usd = result.amount_eur * rate
    result.effective_per_night_eur = _per_night(result.amount_eur, result.nights)
    result.effective_per_night_usd = _per_night(result.amount_usd, result.nights)
    result.final_amount_eur = result.amount_eur + result.additional_charges - result.additional_credits
    result.final_amount_usd = result.final_amount_eur * rate

    return result


def reconcile(results: list[ParticipantResult], settings: BookingSettings) -> float:
    """
    Force base amounts to sum to the total cost, then round USD if enabled.

    The residual is not spread proportionally; it lands entirely on the
    last participant in input order.

    Args:
        results: Participant results in input order, with derived amounts set.
        settings: Booking settings (total_cost, exchange_rate, round_usd).

    Returns:
        float: The rounding adjustment computed before correction. It is
            returned even when it is too small to be applied.
    """
    total_calculated = sum(r.amount_eur for r in results)
    rounding_adjustment = settings.total_cost - total_calculated

    if results and abs(rounding_adjustment) > ROUNDING_EPSILON:
        last = results[-1]
        logger.info(
            "Applying rounding adjustment of %.4f to %s", rounding_adjustment, last.name
        )
        last.amount_eur += rounding_adjustment
        apply_derived_amounts(last, settings)
        last.calculation = (
            f"{last.nights} × €{last.effective_per_night_eur:.2f} = €{last.amount_eur:.2f}"
        )

    if settings.round_usd:
        for result in results:
            result.amount_usd = round_half_up(result.amount_usd)
            result.final_amount_usd = round_half_up(result.final_amount_usd)
            result.effective_per_night_usd = _per_night(result.amount_usd, result.nights)

    return rounding_adjustment
