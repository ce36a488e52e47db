"""
Report Module

This module renders a calculation result for people to read.

Features:
    - Plain-text summary suitable for pasting into a chat or email
    - HTML report with participant, activity and night tables
    - PDF export of the HTML report (xhtml2pdf)

Functions:
    generate_summary_text: Plain-text summary of a calculation.
    build_report_html: HTML report of a calculation.
    export_pdf: PDF bytes of the HTML report.
"""

import html
import io
import logging
from datetime import date

from xhtml2pdf import pisa

from booking import BookingSettings
from results import CalculationResult
from utils import format_currency, parse_date, round_half_up

logger = logging.getLogger(__name__)


def _short_date(value: str) -> str:
    """Format YYYY-MM-DD as 'Oct 16'."""
    return parse_date(value).strftime("%b %d")


def _total_usd(result: CalculationResult, settings: BookingSettings) -> float:
    if settings.round_usd:
        return sum(round_half_up(p.amount_usd) for p in result.participants)
    return sum(p.amount_usd for p in result.participants)


def generate_summary_text(result: CalculationResult, settings: BookingSettings) -> str:
    """
    Build a plain-text summary of a calculation.

    Args:
        result: Engine output.
        settings: Booking settings (total cost and USD display options).

    Returns:
        str: Multi-line summary.
    """
    lines = [
        "RETREAT COST SPLIT SUMMARY",
        "=" * 30,
        "",
        f"Total Cost: {format_currency(settings.total_cost)}",
        f"Total Nights: {result.total_nights}",
        "",
        "PARTICIPANT BREAKDOWN:",
        "-" * 20,
    ]

    for p in result.participants:
        lines.append(f"{p.name}:")
        lines.append(f"  Dates: {_short_date(p.arrival_date)} - {_short_date(p.departure_date)}")
        lines.append(f"  Nights: {p.nights}")
        lines.append(f"  Amount: {format_currency(p.amount_eur)}")
        if settings.show_usd:
            lines.append(f"  Amount (USD): {format_currency(p.amount_usd, 'USD', settings.round_usd)}")
        lines.append(f"  Effective per night: {format_currency(p.effective_per_night_eur)}")
        if p.additional_charges or p.additional_credits:
            lines.append(f"  Final amount: {format_currency(p.final_amount_eur)}")
        lines.append("")

    lines.append(f"TOTAL: {format_currency(result.total_amount_eur())}")
    if settings.show_usd:
        lines.append(f"TOTAL (USD): {format_currency(_total_usd(result, settings), 'USD', settings.round_usd)}")

    return "\n".join(lines)


def build_report_html(
    result: CalculationResult,
    settings: BookingSettings,
    title: str = "Retreat Cost Split"
) -> str:
    """Build the HTML report rendered into the PDF export."""
    esc = html.escape
    usd_header = "<th>Final (USD)</th>" if settings.show_usd else ""

    participant_rows = []
    for p in result.participants:
        usd_cell = (
            f"<td>{format_currency(p.final_amount_usd, 'USD', settings.round_usd)}</td>"
            if settings.show_usd else ""
        )
        participant_rows.append(
            f"<tr><td>{esc(p.name)}</td><td>{p.arrival_date}</td><td>{p.departure_date}</td>"
            f"<td>{p.nights}</td><td>{format_currency(p.amount_eur)}</td>"
            f"<td>{format_currency(p.additional_charges)}</td>"
            f"<td>{format_currency(p.additional_credits)}</td>"
            f"<td>{format_currency(p.final_amount_eur)}</td>{usd_cell}</tr>"
        )

    activity_rows = [
        f"<tr><td>{esc(a.activity_type)}</td><td>{esc(a.description)}</td>"
        f"<td>{format_currency(a.amount)}</td><td>{esc(', '.join(a.from_participants))}</td>"
        f"<td>{esc(', '.join(a.to_participants))}</td></tr>"
        for a in result.additional_activities
    ]

    night_rows = [
        f"<tr><td>{n.date}</td><td>{esc(', '.join(n.present_participants))}</td>"
        f"<td>{n.participant_count}</td><td>{format_currency(n.per_person_cost)}</td></tr>"
        for n in result.night_breakdown
    ]

    warnings = "".join(f'<p class="warning">{esc(w)}</p>' for w in result.warnings)

    return f"""
    <!DOCTYPE html>
    <html>
    <head>
        <meta charset="UTF-8">
        <style>
            body {{ font-family: Arial, sans-serif; padding: 20px; color: #333; }}
            h1 {{ color: #667eea; border-bottom: 2px solid #667eea; padding-bottom: 10px; }}
            h2 {{ color: #444; margin-top: 25px; }}
            table {{ width: 100%; border-collapse: collapse; margin: 15px 0; }}
            th, td {{ border: 1px solid #ddd; padding: 6px; text-align: left; }}
            th {{ background: #667eea; color: white; }}
            .warning {{ background: #ffebee; padding: 10px; color: #c62828; }}
            .footer {{ margin-top: 30px; text-align: center; color: #888; font-size: 12px; }}
        </style>
    </head>
    <body>
        <h1>{esc(title)}</h1>
        <p><strong>Generated:</strong> {date.today().strftime('%B %d, %Y')}</p>
        <p><strong>Total Cost:</strong> {format_currency(settings.total_cost)}
           &nbsp; <strong>Nights:</strong> {result.total_nights}
           &nbsp; <strong>Method:</strong> {esc(settings.calculation_method)}</p>
        {warnings}

        <h2>Participants</h2>
        <table>
            <tr><th>Name</th><th>Arrival</th><th>Departure</th><th>Nights</th><th>Base</th>
                <th>Charges</th><th>Credits</th><th>Final</th>{usd_header}</tr>
            {''.join(participant_rows) or '<tr><td colspan="8">No participants</td></tr>'}
        </table>

        <h2>Additional Activities</h2>
        <table>
            <tr><th>Type</th><th>Description</th><th>Amount</th><th>From</th><th>To</th></tr>
            {''.join(activity_rows) or '<tr><td colspan="5">No activities recorded</td></tr>'}
        </table>

        <h2>Night Breakdown</h2>
        <table>
            <tr><th>Date</th><th>People Present</th><th>Count</th><th>Per Person</th></tr>
            {''.join(night_rows)}
        </table>

        <div class="footer">
            <p>Generated by Retreat Cost Splitter</p>
        </div>
    </body>
    </html>
    """


def export_pdf(
    result: CalculationResult,
    settings: BookingSettings,
    title: str = "Retreat Cost Split"
) -> bytes:
    """
    Render the HTML report to PDF.

    Raises:
        RuntimeError: If xhtml2pdf reports a rendering error.
    """
    html_content = build_report_html(result, settings, title)

    pdf_buffer = io.BytesIO()
    status = pisa.CreatePDF(io.StringIO(html_content), dest=pdf_buffer)
    if status.err:
        raise RuntimeError(f"PDF generation failed with {status.err} errors")

    logger.debug("Rendered PDF report (%d bytes)", pdf_buffer.tell())
    return pdf_buffer.getvalue()
