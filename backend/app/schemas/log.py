"""
FitLog Backend - Pydantic Request/Response Schemas
====================================================

What:  Pydantic models defining the API contract with the mobile frontend.
How:   Request bodies are decoded into these models by the route dependencies;
       responses are serialized from them by FastAPI.

Rows are sent to Google Sheets exactly as received. No schema beyond JSON
decoding is enforced on cell values.
"""

from typing import Any, List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class SheetRequest(BaseModel):
    """
    What:  A row submission for POST /submit.
    Example:
        {"target_sheet": "Logs", "row_data": ["Strength", "2024-05-01", "Bench", "80"]}
    """
    target_sheet: str = Field(
        default="",
        description='Sheet tab to append to ("Logs", "Schedule", ...). Empty means "Logs".',
    )
    row_data: List[str] = Field(
        default_factory=list,
        description="Cell values in column order",
    )

    @field_validator("target_sheet", mode="before")
    @classmethod
    def null_sheet_is_default(cls, v: Any) -> Any:
        return "" if v is None else v

    @field_validator("row_data", mode="before")
    @classmethod
    def null_cells_are_empty(cls, v: Any) -> Any:
        """`null` row_data is an empty row; `null` cells are empty strings."""
        if v is None:
            return []
        if isinstance(v, list):
            return ["" if cell is None else cell for cell in v]
        return v


# ══════════════════════════════════════════════════════════════════════════
# AI Extraction
# ══════════════════════════════════════════════════════════════════════════


class CardioData(BaseModel):
    """
    The three values Gemini is asked to read off a treadmill/cardio screen.

    Values are kept as the strings Gemini returned ("32:15", "5.2", "410");
    Sheets coerces them on append. Absent keys and `null` values decode to
    empty strings. Keys match case-insensitively ("Duration" fills
    `duration`); an exact lower-case key wins over any other spelling.
    """
    duration: str = ""
    distance: str = ""
    calories: str = ""

    @model_validator(mode="before")
    @classmethod
    def fold_keys(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data

        folded = {}
        for key, value in data.items():
            if not isinstance(key, str):
                continue
            name = key.lower()
            if name not in cls.model_fields:
                continue
            if key != name and name in data:
                continue
            folded[name] = "" if value is None else value
        return folded


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class SheetDataResponse(BaseModel):
    """Rows of a sheet tab, exactly as returned by the Sheets API."""
    data: List[List[Any]] = Field(description="Rows of the A:Z range; ragged rows are kept ragged")


class ErrorResponse(BaseModel):
    """
    Standard error body returned by the global exception handlers.

    Example:
        {"error": "validation_error", "message": "Invalid JSON", "request_id": "a1b2c3d4"}
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    request_id: Optional[str] = Field(default=None, description="Correlation ID for support")


class HealthResponse(BaseModel):
    """Health endpoint response."""
    status: str = Field(description="healthy or misconfigured")
    version: str
    spreadsheet_configured: bool
    gemini_configured: bool
    uptime_seconds: float
