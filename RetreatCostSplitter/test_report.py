from activities import create_activity
from calculator import calculate_cost_split
from report import build_report_html, export_pdf, generate_summary_text


def test_summary_text(example_participants, make_settings):
    settings = make_settings()
    result = calculate_cost_split(example_participants, settings)

    text = generate_summary_text(result, settings)

    assert text.startswith("RETREAT COST SPLIT SUMMARY")
    assert "Total Cost: €1,300.00" in text
    assert "Total Nights: 13" in text
    assert "Andrej:" in text
    assert "  Dates: Oct 16 - Oct 28" in text
    assert "  Amount: €260.00" in text
    assert "Amount (USD)" not in text
    assert text.splitlines()[-1] == "TOTAL: €1,300.00"


def test_summary_text_with_rounded_usd(example_participants, make_settings):
    settings = make_settings(show_usd=True, round_usd=True)
    result = calculate_cost_split(example_participants, settings)

    text = generate_summary_text(result, settings)

    assert "  Amount (USD): $278" in text
    assert text.splitlines()[-1] == "TOTAL (USD): $1,390"


def test_report_html_escapes_user_text(example_participants, make_settings):
    settings = make_settings()
    activities = [create_activity("loan", "<b>Taxi</b>", 40, ["P001"], ["P002"])]
    result = calculate_cost_split(example_participants, settings, activities)

    report = build_report_html(result, settings, title="Autumn retreat")

    assert "Autumn retreat" in report
    assert "&lt;b&gt;Taxi&lt;/b&gt;" in report
    assert "Nobody is present on the night of 2025-10-28" in report


def test_pdf_export(example_participants, make_settings):
    settings = make_settings()
    result = calculate_cost_split(example_participants, settings)

    pdf = export_pdf(result, settings)

    assert pdf.startswith(b"%PDF")
