from participants import Participant
from validation import has_errors, split_messages, validate_inputs


def _guest(name="Kim", arrival="2025-10-16", departure="2025-10-29", pid="P001"):
    return Participant(name, arrival, departure, participant_id=pid)


def test_valid_input_has_no_messages(make_settings):
    assert validate_inputs([_guest()], make_settings()) == []


def test_end_date_must_follow_start_date(make_settings):
    messages = validate_inputs([_guest(name="")], make_settings(end_date="2025-10-16"))
    assert [m.message for m in messages] == ["Booking end date must be after start date"]
    assert has_errors(messages)


def test_malformed_booking_dates(make_settings):
    messages = validate_inputs([], make_settings(start_date="16.10.2025"))
    assert has_errors(messages)


def test_total_cost_must_be_positive(make_settings):
    messages = validate_inputs([_guest()], make_settings(total_cost=0))
    errors, _ = split_messages(messages)
    assert errors == ["Total cost must be greater than 0"]


def test_participant_errors_are_tied_to_participant(make_settings):
    participants = [
        _guest(name="  ", pid="P001"),
        _guest(name="Lee", arrival="2025-10-20", departure="2025-10-20", pid="P002"),
        _guest(name="Max", arrival="soon", pid="P003"),
    ]
    messages = validate_inputs(participants, make_settings())
    errors = [(m.participant_id, m.message) for m in messages if m.type == "error"]
    assert errors == [
        ("P001", "Participant name cannot be empty"),
        ("P002", "Departure date must be after arrival date"),
        ("P003", "Arrival and departure dates must be in YYYY-MM-DD format"),
    ]


def test_stay_outside_booking_window_is_a_warning(make_settings):
    participants = [
        _guest(pid="P001"),
        _guest(arrival="2025-10-15", pid="P002"),
        _guest(departure="2025-10-30", pid="P003"),
    ]
    messages = validate_inputs(participants, make_settings())
    assert not has_errors(messages)
    assert [m.participant_id for m in messages] == ["P002", "P003"]


def test_unoccupied_nights_are_warnings(make_settings):
    messages = validate_inputs([_guest(departure="2025-10-27")], make_settings())
    _, warnings = split_messages(messages)
    assert warnings == [
        "Nobody is present on the night of 2025-10-27",
        "Nobody is present on the night of 2025-10-28",
    ]
    assert not has_errors(messages)


def test_name_with_list_separator_is_an_error(make_settings):
    messages = validate_inputs([_guest(name="Ana;Lee")], make_settings())
    errors, _ = split_messages(messages)
    assert errors == ["Participant name cannot contain ';'"]
