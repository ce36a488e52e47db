"""
Activities Module

This module handles ancillary transactions between participants: loans,
services provided and services purchased, each with optional tips.

Features:
    - Activity and Tip models with dict conversion
    - Construction-time validation (type, positive amount, non-empty sides)
    - Per-participant charges and credits from all activities
    - Name-resolved activity summaries for presentation

Data Model:
    Activity fields:
        - activity_id: string (A001, A002, ... when generated)
        - activity_type: "loan", "service_provided" or "service_purchased"
        - description: string
        - amount: float (must be > 0)
        - from_participant_ids: list of participant_ids (providers/lenders)
        - to_participant_ids: list of participant_ids (recipients/borrowers)
        - split_equally: bool
        - tips: list of Tip (tip_id, amount, from_participant_id)

Balance rules (per activity):
    - amount_per_provider = amount / len(from_participant_ids)
    - amount_per_recipient = amount / len(to_participant_ids)
    - loan: borrowers are charged amount_per_recipient,
      lenders are credited amount_per_provider
    - service_provided: providers are credited amount_per_provider plus an
      equal share of the tips; recipients are charged amount_per_recipient
    - service_purchased: buyers are credited amount_per_provider;
      recipients are charged amount_per_recipient and credited an equal
      share of the tips
    - every tip is also charged to the participant who gave it

    Tips therefore appear twice, once as the giver's charge and once as a
    credit on the provider or recipient side. This is kept as is.

Functions:
    create_tip: Build a validated tip.
    create_activity: Build a validated activity.
    resolve_activity_balances: Charges and credits per participant.
    summarize_activities: Activities with ids resolved to names.
"""

import logging
from typing import Optional

from participants import Participant
from results import ActivitySummary
from utils import divide

logger = logging.getLogger(__name__)


# Valid activity types
ACTIVITY_TYPES = ("loan", "service_provided", "service_purchased")


class Tip:
    """
    A tip given by one participant on top of an activity.

    Attributes:
        tip_id (str): Identifier of the tip.
        amount (float): Tip amount in EUR.
        from_participant_id (str): Participant who gives the tip.
    """

    def __init__(self, amount: float, from_participant_id: str, tip_id: Optional[str] = None):
        self.tip_id = tip_id
        self.amount = amount
        self.from_participant_id = from_participant_id

    def to_dict(self) -> dict:
        return {
            "tip_id": self.tip_id,
            "amount": self.amount,
            "from_participant_id": self.from_participant_id
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Tip":
        return cls(
            tip_id=data.get("tip_id"),
            amount=data.get("amount", 0),
            from_participant_id=data.get("from_participant_id")
        )

    def __repr__(self) -> str:
        return f"Tip(amount={self.amount}, from='{self.from_participant_id}')"


class Activity:
    """
    Represents a loan or service between participants.

    Attributes:
        activity_id (str): Identifier of the activity.
        activity_type (str): One of: loan, service_provided, service_purchased.
        description (str): Free-text description.
        amount (float): Total amount of the activity (must be > 0).
        from_participant_ids (list[str]): Providers or lenders.
        to_participant_ids (list[str]): Recipients or borrowers.
        split_equally (bool): Amount is split evenly on each side.
        tips (list[Tip]): Tips attached to the activity.
    """

    def __init__(
        self,
        activity_type: str,
        description: str,
        amount: float,
        from_participant_ids: list[str],
        to_participant_ids: list[str],
        activity_id: Optional[str] = None,
        split_equally: bool = True,
        tips: Optional[list[Tip]] = None
    ):
        self.activity_id = activity_id
        self.activity_type = activity_type
        self.description = description
        self.amount = amount
        self.from_participant_ids = from_participant_ids
        self.to_participant_ids = to_participant_ids
        self.split_equally = split_equally
        self.tips = tips or []

    def total_tips(self) -> float:
        """Sum of all tips attached to this activity."""
        return sum(tip.amount for tip in self.tips)

    def to_dict(self) -> dict:
        """Convert activity to dictionary for JSON or Firestore storage."""
        return {
            "activity_id": self.activity_id,
            "activity_type": self.activity_type,
            "description": self.description,
            "amount": self.amount,
            "from_participant_ids": list(self.from_participant_ids),
            "to_participant_ids": list(self.to_participant_ids),
            "split_equally": self.split_equally,
            "tips": [tip.to_dict() for tip in self.tips]
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Activity":
        """Create an Activity instance from a dictionary."""
        return cls(
            activity_id=data.get("activity_id"),
            activity_type=data.get("activity_type"),
            description=data.get("description", ""),
            amount=data.get("amount", 0),
            from_participant_ids=list(data.get("from_participant_ids", [])),
            to_participant_ids=list(data.get("to_participant_ids", [])),
            split_equally=bool(data.get("split_equally", True)),
            tips=[Tip.from_dict(t) for t in data.get("tips", [])]
        )

    def __repr__(self) -> str:
        return (
            f"Activity(id='{self.activity_id}', type='{self.activity_type}', "
            f"amount={self.amount}, from={self.from_participant_ids}, to={self.to_participant_ids})"
        )


def create_tip(amount: float, from_participant_id: str, tip_id: Optional[str] = None) -> Tip:
    """
    Create a tip after validating it.

    Raises:
        ValueError: If the amount is not positive or the giver is missing.
    """
    if not isinstance(amount, (int, float)) or amount <= 0:
        raise ValueError(f"tip amount must be a positive number, got: {amount}")
    if not isinstance(from_participant_id, str) or not from_participant_id.strip():
        raise ValueError("tip from_participant_id must be a non-empty string")
    return Tip(amount=float(amount), from_participant_id=from_participant_id, tip_id=tip_id)


def create_activity(
    activity_type: str,
    description: str,
    amount: float,
    from_participant_ids: list[str],
    to_participant_ids: list[str],
    activity_id: Optional[str] = None,
    tips: Optional[list[Tip]] = None,
    split_equally: bool = True
) -> Activity:
    """
    Create an activity after validating it.

    Activities with an empty side would divide by zero in the resolver, so
    they are rejected here and never reach it.

    Args:
        activity_type: One of ACTIVITY_TYPES.
        description: Free-text description.
        amount: Total amount (must be > 0).
        from_participant_ids: Providers or lenders (non-empty).
        to_participant_ids: Recipients or borrowers (non-empty).
        activity_id: Optional identifier.
        tips: Optional list of tips.
        split_equally: Split evenly on each side.

    Returns:
        Activity: The created activity.

    Raises:
        ValueError: If input validation fails.
    """
    if activity_type not in ACTIVITY_TYPES:
        raise ValueError(f"activity_type must be one of {ACTIVITY_TYPES}, got: {activity_type}")

    if not isinstance(amount, (int, float)) or amount <= 0:
        raise ValueError(f"amount must be a positive number, got: {amount}")

    if not from_participant_ids:
        raise ValueError("from_participant_ids must be a non-empty list of participant IDs")

    if not to_participant_ids:
        raise ValueError("to_participant_ids must be a non-empty list of participant IDs")

    return Activity(
        activity_type=activity_type,
        description=(description or "").strip(),
        amount=float(amount),
        from_participant_ids=list(from_participant_ids),
        to_participant_ids=list(to_participant_ids),
        activity_id=activity_id,
        split_equally=split_equally,
        tips=list(tips or [])
    )


def resolve_activity_balances(
    participants: list[Participant],
    activities: list[Activity]
) -> list[tuple[float, float]]:
    """
    Fold all activities into per-participant charges and credits.

    Args:
        participants: Participants in input order.
        activities: Validated activities.

    Returns:
        list[tuple[float, float]]: (additional_charges, additional_credits)
            per participant, aligned with participants.
    """
    balances = []

    for participant in participants:
        pid = participant.participant_id
        charges = 0.0
        credits = 0.0

        for activity in activities:
            amount_per_provider = divide(activity.amount, len(activity.from_participant_ids))
            amount_per_recipient = divide(activity.amount, len(activity.to_participant_ids))
            is_provider = pid in activity.from_participant_ids
            is_recipient = pid in activity.to_participant_ids

            if activity.activity_type == "loan":
                if is_recipient:
                    charges += amount_per_recipient
                if is_provider:
                    credits += amount_per_provider

            elif activity.activity_type == "service_provided":
                if is_provider:
                    credits += amount_per_provider
                    if activity.tips:
                        credits += divide(activity.total_tips(), len(activity.from_participant_ids))
                if is_recipient:
                    charges += amount_per_recipient

            elif activity.activity_type == "service_purchased":
                if is_provider:
                    credits += amount_per_provider
                if is_recipient:
                    charges += amount_per_recipient
                    if activity.tips:
                        credits += divide(activity.total_tips(), len(activity.to_participant_ids))

            # Tips are charged to whoever gave them, whatever the activity type
            charges += sum(tip.amount for tip in activity.tips if tip.from_participant_id == pid)

        balances.append((charges, credits))

    return balances


def summarize_activities(
    participants: list[Participant],
    activities: list[Activity]
) -> list[ActivitySummary]:
    """
    Resolve participant ids to names for presentation.

    Ids that match no participant are dropped from the name lists; the
    per-side amounts still use the full id lists.
    """
    id_to_name = {p.participant_id: p.name for p in participants}

    summaries = []
    for activity in activities:
        summaries.append(ActivitySummary(
            activity_id=activity.activity_id,
            activity_type=activity.activity_type,
            description=activity.description,
            amount=activity.amount,
            from_participants=[id_to_name[i] for i in activity.from_participant_ids if i in id_to_name],
            to_participants=[id_to_name[i] for i in activity.to_participant_ids if i in id_to_name],
            amount_per_provider=divide(activity.amount, len(activity.from_participant_ids)),
            amount_per_recipient=divide(activity.amount, len(activity.to_participant_ids))
        ))

    logger.debug("Resolved %d activities", len(summaries))
    return summaries
