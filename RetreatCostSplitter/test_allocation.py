import pytest

from allocation import allocate_base_costs, count_weeks, describe_allocations
from occupancy import build_night_breakdown
from participants import Participant


def _allocate(participants, settings):
    breakdown = build_night_breakdown(participants, settings)
    return allocate_base_costs(participants, settings, breakdown)


def test_equal_split_ignores_stay_length(example_participants, make_settings):
    amounts = _allocate(example_participants, make_settings())
    assert amounts == [260.0] * 5


def test_nightly_split_is_proportional_to_own_nights(example_participants, make_settings):
    amounts = _allocate(example_participants, make_settings(calculation_method="nightly"))
    # 12 + 12 + 10 + 4 + 1 = 39 participant-nights
    assert amounts[0] == pytest.approx(400)
    assert amounts[2] == pytest.approx(1300 * 10 / 39)
    assert amounts[4] == pytest.approx(1300 / 39)
    assert sum(amounts) == pytest.approx(1300)


def test_weekly_split_rounds_each_stay_up_to_whole_weeks(example_participants, make_settings):
    amounts = _allocate(example_participants, make_settings(calculation_method="weekly"))
    # weeks: 2, 2, 2, 1, 1 -> 162.50 per week
    assert amounts == pytest.approx([325, 325, 325, 162.5, 162.5])


def test_eight_nights_count_as_two_weeks(make_settings):
    assert count_weeks(8) == 2
    assert count_weeks(7) == 1
    participants = [
        Participant("Long", "2025-10-01", "2025-10-09", participant_id="P001"),
        Participant("Short", "2025-10-01", "2025-10-08", participant_id="P002"),
    ]
    settings = make_settings(
        total_cost=300, start_date="2025-10-01", end_date="2025-10-08", calculation_method="weekly"
    )
    assert _allocate(participants, settings) == pytest.approx([200, 100])


def test_mixed_mode_flagged_pays_occupancy_rest_split_remainder(example_participants, make_settings):
    example_participants[4].use_nightly_rate = True  # Hanami, one night with 5 people
    amounts = _allocate(example_participants, make_settings(calculation_method="mixed"))
    assert amounts[4] == pytest.approx(20)
    assert amounts[:4] == pytest.approx([320] * 4)


def test_mixed_mode_several_flagged(example_participants, make_settings):
    example_participants[3].use_nightly_rate = True
    example_participants[4].use_nightly_rate = True
    amounts = _allocate(example_participants, make_settings(calculation_method="mixed"))
    sho = 20 + 25 + 25 + 100 / 3
    assert amounts[3] == pytest.approx(sho)
    assert amounts[0] == pytest.approx((1300 - sho - 20) / 3)
    assert sum(amounts) == pytest.approx(1300)


def test_mixed_mode_all_flagged_is_proportional_to_occupied_nights(example_participants, make_settings):
    for participant in example_participants:
        participant.use_nightly_rate = True
    amounts = _allocate(example_participants, make_settings(calculation_method="mixed"))

    assert amounts[0] == pytest.approx(1300 * 12 / 39)
    # Summing per-night shares would have charged Andrej less
    summed_shares = 7 * 100 / 3 + 20 + 25 + 25 + 100 / 3 + 50
    assert amounts[0] != pytest.approx(summed_shares)
    assert sum(amounts) == pytest.approx(1300)


def test_mixed_mode_without_flags_matches_equal(example_participants, make_settings):
    amounts = _allocate(example_participants, make_settings(calculation_method="mixed"))
    assert amounts == pytest.approx([260] * 5)


def test_unknown_method_is_rejected(example_participants, make_settings):
    settings = make_settings()
    settings.calculation_method = "monthly"
    with pytest.raises(ValueError):
        _allocate(example_participants, settings)


def test_descriptions(example_participants, make_settings):
    settings = make_settings(calculation_method="weekly")
    breakdown = build_night_breakdown(example_participants, settings)
    amounts = allocate_base_costs(example_participants, settings, breakdown)
    descriptions = describe_allocations(example_participants, settings, breakdown, amounts)
    assert descriptions[0] == "2 weeks × €162.50 = €325.00"
    assert descriptions[3] == "1 week × €162.50 = €162.50"

    settings = make_settings(calculation_method="nightly")
    amounts = allocate_base_costs(example_participants, settings, breakdown)
    descriptions = describe_allocations(example_participants, settings, breakdown, amounts)
    assert descriptions[0] == "12 nights × €33.33 = €400.00"
