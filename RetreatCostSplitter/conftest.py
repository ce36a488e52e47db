import pytest

from booking import BookingSettings
from participants import Participant


@pytest.fixture
def example_participants():
    """Five guests over a 13-night booking, two of them joining mid-way."""
    return [
        Participant("Andrej", "2025-10-16", "2025-10-28", participant_id="P001"),
        Participant("Jane", "2025-10-16", "2025-10-28", participant_id="P002"),
        Participant("Anna", "2025-10-16", "2025-10-26", participant_id="P003"),
        Participant("Sho", "2025-10-23", "2025-10-27", participant_id="P004"),
        Participant("Hanami", "2025-10-23", "2025-10-24", participant_id="P005"),
    ]


@pytest.fixture
def make_settings():
    def _make(**overrides):
        values = {
            "total_cost": 1300,
            "start_date": "2025-10-16",
            "end_date": "2025-10-28",
            "exchange_rate": 1.07,
            "calculation_method": "equal",
        }
        values.update(overrides)
        return BookingSettings(**values)
    return _make
