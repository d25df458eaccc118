"""
FitLog Backend - Image Analysis Route Handler
===============================================

What:  POST /analyze-image: reads a cardio machine photo with Gemini.
How:   Multipart field `image` → LogService.analyze_image() → raw AI text.

Request Flow:
    1. read_image_upload pulls the `image` file (400 when missing, max 10MB)
    2. Gemini extracts {"duration", "distance", "calories"} as JSON text
    3. When that text decodes, a Cardio row is appended to Logs (best effort)
    4. The AI text is returned verbatim as application/json

Error responses (global exception handlers):
    HTTP 400: no image field (ValidationError)
    HTTP 500: upload read failure (UploadReadError)
    HTTP 500: Gemini failure, message "AI Error: <detail>" (LLMServiceError)
"""

import logging

from fastapi import APIRouter, Depends, Response

from app.dependencies import get_log_service, read_image_upload
from app.exceptions import LLMServiceError
from app.schemas.log import ErrorResponse
from app.services.log_service import LogService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Analyze"])


@router.post(
    "/analyze-image",
    response_class=Response,
    responses={
        200: {
            "description": "Gemini output (ideally the cardio JSON object)",
            "content": {
                "application/json": {
                    "example": {"duration": "32:10", "distance": "5.2", "calories": "410"}
                }
            },
        },
        400: {"description": "No image field", "model": ErrorResponse},
        500: {"description": "Read or AI error", "model": ErrorResponse},
    },
    summary="Extract cardio metrics from a machine photo",
)
def analyze_image(
    image_bytes: bytes = Depends(read_image_upload),
    service: LogService = Depends(get_log_service),
) -> Response:
    try:
        result_text = service.analyze_image(image_bytes)
    except LLMServiceError as e:
        logger.error("AI Error: %s", e.message)
        raise

    # Passed through unparsed; the body is whatever Gemini produced
    return Response(content=result_text, media_type="application/json")
