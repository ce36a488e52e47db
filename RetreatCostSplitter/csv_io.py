"""
CSV Module

This module exports calculation input and results as CSV and imports the
input back.

Export Layout (sections separated by blank rows):
    SETTINGS
        Total Cost,Start Date,End Date,Exchange Rate,Show USD,Round USD,Calculation Method
    PARTICIPANTS
        Name,Arrival Date,Departure Date,Use Nightly Rate
    ADDITIONAL_ACTIVITIES (omitted when there are none)
        Type,Description,Amount,From Participants,To Participants
    RESULTS
    NIGHT BREAKDOWN

Notes:
    - Participant name lists are joined with ";" inside one field
    - RESULTS and NIGHT BREAKDOWN are for reference and skipped on import
    - The legacy ADDITIONAL_MODULES tag is read as ADDITIONAL_ACTIVITIES
    - Quoted fields may span lines (e.g. multi-line descriptions)

Functions:
    export_csv: Write input and results as CSV text.
    import_csv: Rebuild calculation input from CSV text.
"""

import csv
import io
import logging
from dataclasses import dataclass, field
from typing import Optional

from activities import Activity, create_activity
from booking import CALCULATION_METHODS, BookingSettings
from config.settings import DEFAULT_EXCHANGE_RATE
from participants import NAME_SEPARATOR, Participant, create_participant
from results import CalculationResult
from utils import generate_id

logger = logging.getLogger(__name__)

SETTINGS_HEADER = ["Total Cost", "Start Date", "End Date", "Exchange Rate", "Show USD", "Round USD",
                   "Calculation Method"]
PARTICIPANTS_HEADER = ["Name", "Arrival Date", "Departure Date", "Use Nightly Rate"]
ACTIVITIES_HEADER = ["Type", "Description", "Amount", "From Participants", "To Participants"]
RESULTS_HEADER = ["Name", "Arrival Date", "Departure Date", "Nights", "Base Amount (EUR)",
                  "Additional Charges", "Additional Credits", "Final Amount (EUR)"]
NIGHTS_HEADER = ["Date", "People Present", "Count", "Nightly Cost", "Per-Person Cost"]

ACTIVITY_SECTIONS = ("ADDITIONAL_ACTIVITIES", "ADDITIONAL_MODULES")
SKIPPED_SECTIONS = ("RESULTS", "NIGHT BREAKDOWN")
SECTION_TAGS = ("SETTINGS", "PARTICIPANTS") + ACTIVITY_SECTIONS + SKIPPED_SECTIONS


@dataclass
class ImportedCalculation:
    """Calculation input rebuilt from a CSV export."""
    participants: list[Participant] = field(default_factory=list)
    settings: Optional[BookingSettings] = None
    activities: list[Activity] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "participants": [p.to_dict() for p in self.participants],
            "settings": self.settings.to_dict() if self.settings else None,
            "additional_activities": [a.to_dict() for a in self.activities],
        }


def _number(value: float) -> str:
    value = float(value)
    return str(int(value)) if value.is_integer() else repr(value)


def _bool(value: bool) -> str:
    return "true" if value else "false"


def export_csv(
    participants: list[Participant],
    settings: BookingSettings,
    activities: list[Activity],
    result: CalculationResult
) -> str:
    """
    Export input and results as CSV text that import_csv() can read back.

    Args:
        participants: Participants in input order.
        settings: Booking settings.
        activities: Activities; ids are written as participant names.
        result: Engine output for the RESULTS and NIGHT BREAKDOWN sections.

    Returns:
        str: CSV text with "\\n" line endings.
    """
    id_to_name = {p.participant_id: p.name for p in participants}
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")

    writer.writerow(["SETTINGS"])
    writer.writerow(SETTINGS_HEADER)
    writer.writerow([
        _number(settings.total_cost), settings.start_date, settings.end_date,
        _number(settings.exchange_rate), _bool(settings.show_usd), _bool(settings.round_usd),
        settings.calculation_method,
    ])
    writer.writerow([])

    writer.writerow(["PARTICIPANTS"])
    writer.writerow(PARTICIPANTS_HEADER)
    for p in participants:
        writer.writerow([p.name, p.arrival_date, p.departure_date, _bool(p.use_nightly_rate)])
    writer.writerow([])

    if activities:
        writer.writerow(["ADDITIONAL_ACTIVITIES"])
        writer.writerow(ACTIVITIES_HEADER)
        for a in activities:
            from_names = NAME_SEPARATOR.join(id_to_name[i] for i in a.from_participant_ids if i in id_to_name)
            to_names = NAME_SEPARATOR.join(id_to_name[i] for i in a.to_participant_ids if i in id_to_name)
            writer.writerow([a.activity_type, a.description, _number(a.amount), from_names, to_names])
        writer.writerow([])

    writer.writerow(["RESULTS"])
    headers = list(RESULTS_HEADER)
    if settings.show_usd:
        headers.append("Final Amount (USD)")
    writer.writerow(headers)
    for p in result.participants:
        row = [
            p.name, p.arrival_date, p.departure_date, p.nights,
            f"{p.amount_eur:.2f}", f"{p.additional_charges:.2f}",
            f"{p.additional_credits:.2f}", f"{p.final_amount_eur:.2f}",
        ]
        if settings.show_usd:
            row.append(f"{p.final_amount_usd:.{0 if settings.round_usd else 2}f}")
        writer.writerow(row)
    writer.writerow([])

    writer.writerow(["NIGHT BREAKDOWN"])
    writer.writerow(NIGHTS_HEADER)
    for night in result.night_breakdown:
        writer.writerow([
            night.date, ", ".join(night.present_participants), night.participant_count,
            f"{night.nightly_cost:.2f}", f"{night.per_person_cost:.2f}",
        ])

    return buffer.getvalue()


def _parse_float(value: str, default: float) -> float:
    """Parse a float, falling back to default for blanks and garbage."""
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        return default
    return parsed if parsed else default


def _is_header(row: list[str], header: list[str]) -> bool:
    return [c.strip() for c in row[:3]] == header[:3]


def _section_tag(row: list[str]) -> Optional[str]:
    """Return the section tag if the row is a single-cell section marker."""
    cells = [c.strip() for c in row if c.strip()]
    if len(cells) == 1 and cells[0] in SECTION_TAGS:
        return cells[0]
    return None


def _split_names(value: str) -> list[str]:
    return [name.strip() for name in value.split(NAME_SEPARATOR) if name.strip()]


def _parse_settings(row: list[str]) -> BookingSettings:
    method = row[6].strip() if len(row) > 6 and row[6].strip() in CALCULATION_METHODS else "equal"
    return BookingSettings(
        total_cost=_parse_float(row[0], 0.0),
        start_date=row[1].strip(),
        end_date=row[2].strip(),
        exchange_rate=_parse_float(row[3], DEFAULT_EXCHANGE_RATE),
        show_usd=row[4].strip() == "true",
        round_usd=row[5].strip() == "true",
        calculation_method=method,
    )


def import_csv(text: str) -> ImportedCalculation:
    """
    Parse CSV text produced by export_csv() (or the older 3-column layout).

    Participants get sequential ids (P001, ...) and activities (A001, ...);
    activity name lists are resolved to those ids.

    Args:
        text: CSV text.

    Returns:
        ImportedCalculation: Participants, settings (None if the SETTINGS
            section is missing) and activities.

    Raises:
        ValueError: No participants, a malformed participant or activity
            row, or an activity that names an unknown participant or fails
            validation.
    """
    data = ImportedCalculation()
    pending_activities = []
    section = ""

    for row in csv.reader(io.StringIO(text)):
        if not any(c.strip() for c in row):
            continue

        tag = _section_tag(row)
        if tag is not None:
            if tag in ACTIVITY_SECTIONS:
                section = "ADDITIONAL_ACTIVITIES"
            elif tag in SKIPPED_SECTIONS:
                section = "SKIP"
            else:
                section = tag
            continue

        if section == "SETTINGS":
            if _is_header(row, SETTINGS_HEADER):
                continue
            if len(row) >= 6:
                data.settings = _parse_settings(row)

        elif section == "PARTICIPANTS":
            if _is_header(row, PARTICIPANTS_HEADER):
                continue
            if len(row) < 3 or not all(c.strip() for c in row[:3]):
                raise ValueError("All participants must have name, arrival date, and departure date")
            data.participants.append(create_participant(
                name=row[0],
                arrival_date=row[1],
                departure_date=row[2],
                participant_id=generate_id("P", len(data.participants) + 1),
                use_nightly_rate=len(row) > 3 and row[3].strip() == "true",
            ))

        elif section == "ADDITIONAL_ACTIVITIES":
            if _is_header(row, ACTIVITIES_HEADER):
                continue
            if len(row) < 5:
                raise ValueError(
                    f"Activity rows need {len(ACTIVITIES_HEADER)} columns, got {len(row)}: {row}"
                )
            pending_activities.append(row)

    if not data.participants:
        raise ValueError("No participants found in CSV file")

    name_to_id = {}
    for p in data.participants:
        name_to_id.setdefault(p.name, p.participant_id)

    def resolve(names: list[str]) -> list[str]:
        unknown = [n for n in names if n not in name_to_id]
        if unknown:
            raise ValueError(f"Unknown participants in activity: {', '.join(unknown)}")
        return [name_to_id[n] for n in names]

    for index, row in enumerate(pending_activities, start=1):
        data.activities.append(create_activity(
            activity_type=row[0].strip(),
            description=row[1],
            amount=_parse_float(row[2], 0.0),
            from_participant_ids=resolve(_split_names(row[3])),
            to_participant_ids=resolve(_split_names(row[4])),
            activity_id=generate_id("A", index),
        ))

    logger.info(
        "Imported %d participants and %d activities from CSV",
        len(data.participants), len(data.activities)
    )
    return data
