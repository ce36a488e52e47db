"""
Results Module

This module defines the output models of the cost-allocation engine.

Data Model:
    NightRecord: occupancy and cost of one booked night
    ParticipantResult: base, activity and final amounts of one participant
    ActivitySummary: activity with participant ids resolved to names
    CalculationResult: everything one engine call returns

All models are plain dataclasses; CalculationResult.to_dict() gives the
JSON shape returned by the HTTP API.
"""

from dataclasses import asdict, dataclass, field


@dataclass
class NightRecord:
    """Occupancy and cost of one booked night."""
    date: str  # YYYY-MM-DD
    present_participants: list[str]  # names, in participant order
    participant_count: int
    nightly_cost: float
    per_person_cost: float  # 0 when nobody is present


@dataclass
class ParticipantResult:
    """Per-participant breakdown."""
    participant_id: str
    name: str
    arrival_date: str
    departure_date: str
    nights: int
    amount_eur: float = 0.0
    amount_usd: float = 0.0
    effective_per_night_eur: float = 0.0
    effective_per_night_usd: float = 0.0
    calculation: str = ""
    additional_charges: float = 0.0  # loans taken, services received, tips paid
    additional_credits: float = 0.0  # loans given, services provided, tips received
    final_amount_eur: float = 0.0
    final_amount_usd: float = 0.0


@dataclass
class ActivitySummary:
    """Activity with participant ids resolved to names."""
    activity_id: str
    activity_type: str
    description: str
    amount: float
    from_participants: list[str]
    to_participants: list[str]
    amount_per_provider: float
    amount_per_recipient: float


@dataclass
class CalculationResult:
    """Complete output of one engine invocation."""
    participants: list[ParticipantResult] = field(default_factory=list)
    night_breakdown: list[NightRecord] = field(default_factory=list)
    total_nights: int = 0
    rounding_adjustment: float = 0.0
    additional_activities: list[ActivitySummary] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return asdict(self)

    def total_amount_eur(self) -> float:
        return sum(p.amount_eur for p in self.participants)
