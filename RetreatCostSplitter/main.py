"""
RetreatCostSplitter - FastAPI Web Backend

This module serves as the HTTP entry point for the retreat cost splitter.

Features:
    - Stateless cost-split calculation with validation messages
    - Save/load of calculation input in Firebase Firestore
    - CSV, plain-text and PDF export; CSV import

Endpoints:
    POST /calculate          - Validate and calculate a cost split
    POST /save               - Save calculation input, returns its id
    GET  /load/{calc_id}     - Load saved calculation input
    POST /export/csv         - Download input and results as CSV
    POST /export/summary     - Plain-text summary
    POST /export/pdf         - PDF report
    POST /import/csv         - Parse an exported CSV back into input
    GET  /health             - Health check

Usage:
    uvicorn main:app --reload
"""

import logging
from typing import Literal, Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import PlainTextResponse, Response
from pydantic import BaseModel, Field

from activities import ACTIVITY_TYPES, Activity, create_activity, create_tip
from booking import BookingSettings
from calculator import run_calculation
from config.logging_config import configure_logging
from config.settings import DEFAULT_EXCHANGE_RATE
from csv_io import export_csv, import_csv
from participants import Participant
from report import export_pdf, generate_summary_text
from store import load_calculation, save_calculation
from validation import ValidationMessage

configure_logging()
logger = logging.getLogger(__name__)


# =============================================================================
# Pydantic Models for Request/Response Validation
# =============================================================================

class ParticipantIn(BaseModel):
    """Participant as sent by the client. Date checks happen in validation."""
    participant_id: str = Field(..., min_length=1, description="Participant identifier")
    name: str = Field("", description="Display name")
    arrival_date: str = Field(..., description="Arrival date (YYYY-MM-DD)")
    departure_date: str = Field(..., description="Departure date (YYYY-MM-DD)")
    use_nightly_rate: bool = Field(False, description="Occupancy-weighted billing in mixed mode")


class SettingsIn(BaseModel):
    """Booking settings."""
    total_cost: float = Field(..., description="Total accommodation cost in EUR")
    start_date: str = Field(..., description="First night (YYYY-MM-DD)")
    end_date: str = Field(..., description="Last night, inclusive (YYYY-MM-DD)")
    currency: Literal["EUR"] = "EUR"
    exchange_rate: float = Field(DEFAULT_EXCHANGE_RATE, gt=0, description="EUR to USD rate")
    show_usd: bool = False
    round_usd: bool = False
    calculation_method: Literal["equal", "nightly", "weekly", "mixed"] = "equal"


class TipIn(BaseModel):
    """Tip attached to an activity."""
    tip_id: Optional[str] = None
    amount: float = Field(..., gt=0)
    from_participant_id: str = Field(..., min_length=1)


class ActivityIn(BaseModel):
    """Loan or service between participants."""
    activity_id: Optional[str] = None
    activity_type: Literal["loan", "service_provided", "service_purchased"]
    description: str = ""
    amount: float = Field(..., gt=0, description="Activity amount (must be > 0)")
    from_participant_ids: list[str] = Field(..., min_length=1, description="Providers or lenders")
    to_participant_ids: list[str] = Field(..., min_length=1, description="Recipients or borrowers")
    split_equally: bool = True
    tips: list[TipIn] = Field(default_factory=list)


class CalculationIn(BaseModel):
    """Complete calculation input."""
    participants: list[ParticipantIn]
    settings: SettingsIn
    additional_activities: list[ActivityIn] = Field(default_factory=list)


class SaveIn(CalculationIn):
    """Calculation input plus the id to overwrite, if any."""
    existing_id: Optional[str] = None


class CalculateResponse(BaseModel):
    """Validation messages and calculation result."""
    errors: list[dict]
    warnings: list[dict]
    result: dict


class SaveResponse(BaseModel):
    success: bool
    calculation_id: str
    message: str


class LoadResponse(BaseModel):
    success: bool
    data: dict


# =============================================================================
# FastAPI Application
# =============================================================================

app = FastAPI(
    title="Retreat Cost Splitter",
    description="Split a shared accommodation cost by stay dates, with loans and services",
    version="1.0.0"
)


# =============================================================================
# Helper Functions
# =============================================================================

def _build_input(body: CalculationIn) -> tuple[list[Participant], BookingSettings, list[Activity]]:
    """Convert request models to domain objects."""
    participants = [Participant(**p.model_dump()) for p in body.participants]
    settings = BookingSettings(**body.settings.model_dump())
    activities = [
        create_activity(
            activity_type=a.activity_type,
            description=a.description,
            amount=a.amount,
            from_participant_ids=a.from_participant_ids,
            to_participant_ids=a.to_participant_ids,
            activity_id=a.activity_id,
            split_equally=a.split_equally,
            tips=[create_tip(t.amount, t.from_participant_id, t.tip_id) for t in a.tips]
        )
        for a in body.additional_activities
    ]
    return participants, settings, activities


def _messages_of_type(messages: list[ValidationMessage], kind: str) -> list[dict]:
    return [m.to_dict() for m in messages if m.type == kind]


def _calculate_or_reject(body: CalculationIn):
    """Run the engine for an export; validation errors become a 400."""
    participants, settings, activities = _build_input(body)
    messages, result = run_calculation(participants, settings, activities)
    errors = [m.message for m in messages if m.type == "error"]
    if errors:
        raise HTTPException(status_code=400, detail=errors)
    return participants, settings, activities, result


# =============================================================================
# API Endpoints
# =============================================================================

@app.post("/calculate", response_model=CalculateResponse)
async def calculate(body: CalculationIn):
    """
    Validate input and calculate the cost split.

    Request flow:
        1. Convert request to domain objects
        2. Validate (validation.py)
        3. Run the engine unless there are errors (calculator.py)
        4. Return errors, warnings and the (possibly empty) result
    """
    try:
        participants, settings, activities = _build_input(body)
        messages, result = run_calculation(participants, settings, activities)

        return CalculateResponse(
            errors=_messages_of_type(messages, "error"),
            warnings=_messages_of_type(messages, "warning"),
            result=result.to_dict()
        )

    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception("Calculation failed")
        raise HTTPException(status_code=500, detail=str(e))


@app.post("/save", response_model=SaveResponse)
async def save(body: SaveIn):
    """
    Save calculation input to Firestore.

    Request flow:
        1. Convert request to domain objects
        2. Call save_calculation() from store.py
        3. Return the calculation id
    """
    try:
        participants, settings, activities = _build_input(body)
        calculation_id = save_calculation(participants, settings, activities, body.existing_id)

        return SaveResponse(
            success=True,
            calculation_id=calculation_id,
            message="Calculation saved successfully"
        )

    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except RuntimeError as e:
        raise HTTPException(status_code=503, detail=str(e))
    except Exception as e:
        logger.exception("Save failed")
        raise HTTPException(status_code=500, detail=str(e))


@app.get("/load/{calculation_id}", response_model=LoadResponse)
async def load(calculation_id: str):
    """Load saved calculation input; 404 when missing or expired."""
    try:
        data = load_calculation(calculation_id)
        if data is None:
            raise HTTPException(status_code=404, detail="Calculation not found or has expired")

        return LoadResponse(success=True, data=data)

    except HTTPException:
        raise
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except RuntimeError as e:
        raise HTTPException(status_code=503, detail=str(e))
    except Exception as e:
        logger.exception("Load failed")
        raise HTTPException(status_code=500, detail=str(e))


@app.post("/export/csv")
async def export_csv_endpoint(body: CalculationIn):
    """Download input and results as CSV."""
    try:
        participants, settings, activities, result = _calculate_or_reject(body)
        csv_text = export_csv(participants, settings, activities, result)

        return PlainTextResponse(
            csv_text,
            media_type="text/csv",
            headers={"Content-Disposition": "attachment; filename=retreat-cost-breakdown.csv"}
        )

    except HTTPException:
        raise
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception("CSV export failed")
        raise HTTPException(status_code=500, detail=str(e))


@app.post("/export/summary", response_class=PlainTextResponse)
async def export_summary(body: CalculationIn):
    """Plain-text summary for copying."""
    try:
        _, settings, _, result = _calculate_or_reject(body)
        return PlainTextResponse(generate_summary_text(result, settings))

    except HTTPException:
        raise
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception("Summary export failed")
        raise HTTPException(status_code=500, detail=str(e))


@app.post("/export/pdf")
async def export_pdf_endpoint(body: CalculationIn):
    """PDF report of the calculation."""
    try:
        _, settings, _, result = _calculate_or_reject(body)
        pdf_bytes = export_pdf(result, settings)

        return Response(
            content=pdf_bytes,
            media_type="application/pdf",
            headers={"Content-Disposition": "attachment; filename=retreat-cost-report.pdf"}
        )

    except HTTPException:
        raise
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception("PDF export failed")
        raise HTTPException(status_code=500, detail=str(e))


@app.post("/import/csv")
async def import_csv_endpoint(request: Request):
    """Parse a CSV export (raw request body) back into calculation input."""
    try:
        raw = await request.body()
        imported = import_csv(raw.decode("utf-8-sig"))
        return imported.to_dict()

    except UnicodeDecodeError:
        raise HTTPException(status_code=400, detail="CSV file must be UTF-8 encoded")
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception("CSV import failed")
        raise HTTPException(status_code=500, detail=str(e))


# =============================================================================
# Health Check Endpoint
# =============================================================================

@app.get("/health")
async def health_check():
    """Health check endpoint to verify API is running."""
    return {
        "status": "healthy",
        "service": "Retreat Cost Splitter",
        "activity_types": list(ACTIVITY_TYPES)
    }


# =============================================================================
# Run with: python main.py
# =============================================================================

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host="127.0.0.1", port=8000, reload=True)
