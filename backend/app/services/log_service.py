"""
FitLog Backend - Log Service (Business Logic Orchestrator)
============================================================

What:  Coordinates the spreadsheet and vision services for each endpoint.
How:   Receives its collaborators through the constructor; holds no
       per-request state.
Who:   Called by the route handlers.

Orchestration Flow (POST /analyze-image):
    ┌──────────┐    ┌──────────────┐    ┌──────────────┐    ┌────────────────┐
    │  Upload  │───▶│  Gemini API  │───▶│ parse_cardio │───▶│ append to Logs │
    │  (Route) │    │  (LLMService)│    │  (optional)  │    │ (best effort)  │
    └──────────┘    └──────────────┘    └──────────────┘    └────────────────┘

    The Gemini text is always returned to the caller once the AI call
    succeeds. The append to Logs only runs when the text decodes as the
    cardio schema, and its failure is logged without changing the response.
"""

import logging
import time
from datetime import datetime
from typing import Any, List, Optional

from pydantic import ValidationError as PydanticValidationError

from app.exceptions import SheetsServiceError
from app.schemas.log import CardioData, SheetRequest
from app.services.llm_base import LLMService
from app.services.sheets_service import SheetsService

logger = logging.getLogger(__name__)

CARDIO_ACTIVITY = "Cardio"
AI_SCAN_SOURCE = "AI Scan"
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

SCHEDULE_SHEET = "Schedule"

# Row format: [Day, Title, Details]
WEEKLY_SCHEDULE = [
    (
        "Day 1",
        "Heavy Push (Chest Focus)",
        "Chest (Big Muscle) × 5\n"
        "- Flat Barbell Bench Press (Heavy: 5-8 reps)\n"
        "- Incline Dumbbell Press\n"
        "- Weighted Dips (Leaning forward)\n"
        "- Pec Deck Flys\n"
        "- Cable Crossovers (Low to High)\n"
        "\n"
        "Shoulders × 3\n"
        "- Front: Seated Dumbbell Overhead Press (Heavy)\n"
        "- Side: Dumbbell Lateral Raises\n"
        "- Side: Cable Lateral Raises (Behind the back)\n"
        "\n"
        "Biceps × 2\n"
        "- Barbell Curls (Heavy)\n"
        "- Hammer Curls",
    ),
    (
        "Day 2",
        "Heavy Pull (Back Focus)",
        "Back (Big Muscle) × 5\n"
        "- Deadlifts (or Rack Pulls)\n"
        "- Lat Pulldowns (Wide Grip)\n"
        "- Bent Over Barbell Rows\n"
        "- Seated Cable Rows (Close Grip)\n"
        "- Straight Arm Pulldowns (Rope)\n"
        "\n"
        "Rear Delts × 2\n"
        "- Face Pulls\n"
        "- Reverse Pec Deck\n"
        "\n"
        "Triceps × 2\n"
        "- Rope Pushdowns\n"
        "- Overhead Cable Extensions",
    ),
    (
        "Day 3",
        "Heavy Legs (Quad Focus)",
        "Squats (Barbell or Smith Machine)\n"
        "- Leg Press (Heavy)\n"
        "- Leg Extensions\n"
        "- Standing Calf Raises",
    ),
    (
        "Day 4",
        "Aesthetic Push (Shoulder Priority)",
        "Chest (Maintenance) × 3\n"
        "- Incline Machine Press\n"
        "- Flat Dumbbell Press (Moderate weight, deep stretch)\n"
        "- Machine Flys\n"
        "\n"
        "Shoulders (Focus) × 4\n"
        "- Side: Dumbbell Lateral Raises (Strict)\n"
        "- Side: Machine Lateral Raises (Drop set focus)\n"
        "- Front: Arnold Press (Rotational)\n"
        "- Front: Front Plate Raises (or Cable Front Raises)\n"
        "\n"
        "Biceps (Focus) × 3\n"
        "- Preacher Curls\n"
        "- Incline Dumbbell Curls\n"
        "- Concentration Curls",
    ),
    (
        "Day 5",
        "Aesthetic Pull (Rear Delt Priority)",
        "Back (Maintenance) × 3\n"
        "- Pull-Ups (or Assisted Machine)\n"
        "- Single Arm Dumbbell Rows\n"
        "- Chest-Supported Machine Row\n"
        "\n"
        "Rear Delts (Focus) × 3\n"
        "- Face Pulls (High reps: 15-20)\n"
        "- Rear Delt Dumbbell Flys (Bent over)\n"
        "- Cable Reverse Flys (Cross body)\n"
        "\n"
        "Triceps (Focus) × 3\n"
        "- Skull Crushers (EZ Bar)\n"
        "- Tricep Dips (Bodyweight)\n"
        "- Single Arm Reverse Grip Pushdown",
    ),
    (
        "Day 6",
        "Legs B (Posterior Chain)",
        "Romanian Deadlifts (RDL) (Hamstrings/Glutes)\n"
        "- Lying Leg Curls\n"
        "- Walking Lunges\n"
        "- Seated Calf Raises",
    ),
    (
        "Day 7",
        "Active Rest",
        "Just the 1 Hour Morning Walk.",
    ),
]


def parse_cardio(text: str) -> Optional[CardioData]:
    """
    Decode Gemini's answer as the cardio schema.

    Accepts any JSON object whose duration/distance/calories keys (any
    letter case), when present, hold strings or null. Returns None for
    anything else: prose, arrays, numbers instead of strings, truncated JSON.
    """
    try:
        return CardioData.model_validate_json(text)
    except PydanticValidationError:
        return None


def build_cardio_row(cardio: CardioData, now: Optional[datetime] = None) -> List[str]:
    """["Cardio", <local timestamp>, "AI Scan", duration, distance, calories]"""
    timestamp = (now or datetime.now()).strftime(TIMESTAMP_FORMAT)
    return [
        CARDIO_ACTIVITY,
        timestamp,
        AI_SCAN_SOURCE,
        cardio.duration,
        cardio.distance,
        cardio.calories,
    ]


class SeedScheduleError(SheetsServiceError):
    """A schedule row could not be appended; `day` names the row that failed."""

    def __init__(self, day: str, cause: SheetsServiceError):
        super().__init__(
            message=f"Failed to save {day}",
            detail=cause.detail,
            context={"day": day},
        )
        self.day = day


class LogService:
    """
    Business logic layer for the fitness log endpoints.

    Responsibilities:
        - submit_row():     append a client-built row to a tab
        - analyze_image():  Gemini extraction + best-effort auto-save
        - read_sheet():     fetch all rows of a tab
        - seed_schedule():  one-time population of the Schedule tab
    """

    def __init__(
        self,
        sheets: SheetsService,
        llm: LLMService,
        default_sheet: str = "Logs",
        seed_delay_seconds: float = 0.2,
    ):
        self.sheets = sheets
        self.llm = llm
        self.default_sheet = default_sheet
        self.seed_delay_seconds = seed_delay_seconds

    def _sheet_or_default(self, sheet: Optional[str]) -> str:
        return sheet or self.default_sheet

    def submit_row(self, request: SheetRequest) -> None:
        """Append `row_data` to `target_sheet` ("Logs" when empty)."""
        sheet = self._sheet_or_default(request.target_sheet)
        self.sheets.append_row(sheet, request.row_data)
        logger.info("Saved %d cells to %s", len(request.row_data), sheet)

    def read_sheet(self, sheet: Optional[str] = None) -> List[List[Any]]:
        return self.sheets.read_rows(self._sheet_or_default(sheet))

    def analyze_image(self, image_bytes: bytes) -> str:
        """
        Run Gemini on the image and return its cleaned text.

        Raises:
            LLMServiceError: the AI call failed (nothing is saved).
        """
        result_text = self.llm.analyze_image(image_bytes)

        cardio = parse_cardio(result_text)
        if cardio is not None:
            self._auto_save_cardio(cardio)
        else:
            logger.info("AI response is not the cardio schema; skipping auto-save")

        return result_text

    def _auto_save_cardio(self, cardio: CardioData) -> bool:
        """
        Append the extracted cardio row to the default log tab.

        Non-critical side effect of /analyze-image: a Sheets failure is
        logged and reported as False, never raised.
        """
        row = build_cardio_row(cardio)
        try:
            self.sheets.append_row(self.default_sheet, row)
        except SheetsServiceError as e:
            logger.warning(
                "AI analysis worked, but auto-save failed: %s",
                e.detail or e.message,
            )
            return False
        logger.info("Auto-saved AI cardio to %s: %s", self.default_sheet, row)
        return True

    def seed_schedule(self) -> int:
        """
        Append the seven-day training plan to the Schedule tab.

        Stops at the first failing day. Rows already written stay written.

        Returns:
            Number of rows appended.

        Raises:
            SeedScheduleError: naming the day that failed.
        """
        for index, (day, title, details) in enumerate(WEEKLY_SCHEDULE):
            if index and self.seed_delay_seconds:
                time.sleep(self.seed_delay_seconds)
            try:
                self.sheets.append_row(SCHEDULE_SHEET, [day, title, details])
            except SheetsServiceError as e:
                raise SeedScheduleError(day, e) from e

        logger.info("Seeded %d schedule rows to %s", len(WEEKLY_SCHEDULE), SCHEDULE_SHEET)
        return len(WEEKLY_SCHEDULE)
