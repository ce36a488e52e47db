import pytest

import csv_io
from activities import create_activity
from calculator import calculate_cost_split
from csv_io import export_csv, import_csv

LEGACY_CSV = """SETTINGS
Total Cost,Start Date,End Date,Exchange Rate,Show USD,Round USD
1300,2025-10-16,2025-10-28,1.07,false,true

PARTICIPANTS
Name,Arrival Date,Departure Date
Andrej,2025-10-16,2025-10-28
Jane,2025-10-16,2025-10-28

ADDITIONAL_MODULES
Type,Description,Amount,From Participants,To Participants
loan,"Groceries, week one",100,"Andrej","Jane"

RESULTS
Name,Arrival Date,Departure Date,Nights,Base Amount (EUR),Additional Charges,Additional Credits,Final Amount (EUR)
Andrej,2025-10-16,2025-10-28,12,650.00,0.00,100.00,550.00
"""


def test_export_sections(example_participants, make_settings):
    settings = make_settings(show_usd=True)
    activities = [create_activity("loan", 'The "big" shop', 100, ["P001", "P002"], ["P005"])]
    result = calculate_cost_split(example_participants, settings, activities)

    text = export_csv(example_participants, settings, activities, result)
    lines = text.splitlines()

    assert lines[0] == "SETTINGS"
    assert lines[2] == "1300,2025-10-16,2025-10-28,1.07,true,false,equal"
    assert "Andrej,2025-10-16,2025-10-28,false" in lines
    assert 'loan,"The ""big"" shop",100,Andrej;Jane,Hanami' in lines
    assert "RESULTS" in lines
    assert lines[lines.index("RESULTS") + 1].endswith("Final Amount (USD)")
    assert "NIGHT BREAKDOWN" in lines
    assert lines[-1] == "2025-10-28,,0,100.00,0.00"


def test_export_then_import_restores_input(example_participants, make_settings):
    example_participants[4].use_nightly_rate = True
    settings = make_settings(calculation_method="mixed", round_usd=True)
    activities = [create_activity("service_provided", "Cooking", 80, ["P003"], ["P001", "P002"])]
    result = calculate_cost_split(example_participants, settings, activities)

    imported = import_csv(export_csv(example_participants, settings, activities, result))

    assert [p.to_dict() for p in imported.participants] == [p.to_dict() for p in example_participants]
    assert imported.settings.to_dict() == settings.to_dict()
    assert imported.activities[0].from_participant_ids == ["P003"]
    assert imported.activities[0].to_participant_ids == ["P001", "P002"]
    assert imported.activities[0].activity_id == "A001"


def test_import_legacy_layout():
    imported = import_csv(LEGACY_CSV)

    assert imported.settings.total_cost == 1300
    assert imported.settings.round_usd is True
    assert imported.settings.calculation_method == "equal"
    assert [p.participant_id for p in imported.participants] == ["P001", "P002"]
    assert len(imported.participants) == 2

    loan = imported.activities[0]
    assert loan.description == "Groceries, week one"
    assert loan.from_participant_ids == ["P001"]
    assert loan.to_participant_ids == ["P002"]


def test_import_requires_participants():
    with pytest.raises(ValueError, match="No participants"):
        import_csv("SETTINGS\n1300,2025-10-16,2025-10-28,1.07,false,false\n")


def test_import_rejects_malformed_dates():
    with pytest.raises(ValueError):
        import_csv("PARTICIPANTS\nAndrej,16/10/2025,2025-10-28\n")


def test_import_rejects_unknown_activity_participant():
    text = (
        "PARTICIPANTS\nAndrej,2025-10-16,2025-10-28\n"
        "ADDITIONAL_ACTIVITIES\nloan,\"Cash\",50,\"Andrej\",\"Nobody\"\n"
    )
    with pytest.raises(ValueError, match="Nobody"):
        import_csv(text)


def test_multi_line_description_survives_round_trip(example_participants, make_settings):
    settings = make_settings()
    activities = [create_activity("loan", "Taxi\nand tolls", 60, ["P001"], ["P002", "P003"])]
    result = calculate_cost_split(example_participants, settings, activities)

    imported = import_csv(export_csv(example_participants, settings, activities, result))

    assert len(imported.activities) == 1
    assert imported.activities[0].description == "Taxi\nand tolls"
    assert imported.activities[0].to_participant_ids == ["P002", "P003"]
    assert len(imported.participants) == 5


def test_import_rejects_short_activity_row():
    text = (
        "PARTICIPANTS\nAndrej,2025-10-16,2025-10-28\nJane,2025-10-16,2025-10-28\n"
        "ADDITIONAL_ACTIVITIES\nloan,Cash,50,Andrej\n"
    )
    with pytest.raises(ValueError, match="Activity rows need 5 columns"):
        import_csv(text)


def test_import_rejects_separator_in_name():
    with pytest.raises(ValueError, match="must not contain"):
        import_csv("PARTICIPANTS\nAna;Lee,2025-10-16,2025-10-28\n")


def test_import_uses_configured_default_exchange_rate(monkeypatch):
    monkeypatch.setattr(csv_io, "DEFAULT_EXCHANGE_RATE", 1.25)
    imported = import_csv(
        "SETTINGS\n1300,2025-10-16,2025-10-28,,false,false\n"
        "PARTICIPANTS\nAndrej,2025-10-16,2025-10-28\n"
    )
    assert imported.settings.exchange_rate == 1.25
