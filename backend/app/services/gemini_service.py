"""
FitLog Backend - Google Gemini Service Implementation
=======================================================

What:  Reads duration, distance and calories off a treadmill/cardio screen photo.
How:   Sends a fixed instruction prompt plus the image as an inline
       image/jpeg part to Gemini in a single generate_content call, then
       strips Markdown code fences from the answer.
Who:   Constructed by the app factory; called by LogService.

Failure Model:
    One attempt per request. No retry, no streaming, and no timeout beyond
    the SDK's own default. Every failure is raised as LLMServiceError with
    the SDK's message so the handler can return it to the caller.
"""

import logging
import time

import google.generativeai as genai

from app.config import is_placeholder_key
from app.exceptions import LLMServiceError
from app.services.llm_base import LLMService

logger = logging.getLogger(__name__)

IMAGE_MIME_TYPE = "image/jpeg"

CODE_FENCE_MARKERS = ("```json", "```")


def clean_model_text(text: str) -> str:
    """Remove ```json / ``` fences anywhere in the text and trim whitespace."""
    for marker in CODE_FENCE_MARKERS:
        text = text.replace(marker, "")
    return text.strip()


class GeminiService(LLMService):
    """
    Google Gemini implementation of LLMService.

    The SDK is configured with the API key on every call and a new model
    handle is created each time; nothing is cached between requests.
    """

    CARDIO_PROMPT = """Analyze this treadmill/cardio screen. Extract:
1. Duration (Time)
2. Distance (km or miles)
3. Calories
Return ONLY a JSON object. No markdown.
Format: {"duration": "xx:xx", "distance": "x.x", "calories": "xxx"}"""

    def __init__(self, api_key: str, model_name: str = "gemini-2.5-flash"):
        self.api_key = api_key
        self.model_name = model_name
        logger.info("GeminiService initialized with model=%s", model_name)

    def _new_model(self) -> "genai.GenerativeModel":
        if is_placeholder_key(self.api_key):
            raise LLMServiceError(message="API Key is missing/invalid")
        try:
            genai.configure(api_key=self.api_key)
            return genai.GenerativeModel(self.model_name)
        except Exception as e:
            raise LLMServiceError(
                message=f"failed to create GenAI client: {e}",
                context={"model": self.model_name},
            ) from e

    def analyze_image(self, image_bytes: bytes) -> str:
        model = self._new_model()
        start_time = time.time()

        try:
            response = model.generate_content(
                [
                    self.CARDIO_PROMPT,
                    {"mime_type": IMAGE_MIME_TYPE, "data": image_bytes},
                ]
            )
            # .text raises ValueError when the candidate was blocked or empty
            raw_text = response.text or ""
        except Exception as e:
            logger.warning(
                "Gemini call failed after %.0fms: %s",
                (time.time() - start_time) * 1000,
                e,
            )
            raise LLMServiceError(
                message=f"GenerateContent error: {e}",
                context={"model": self.model_name, "error_type": type(e).__name__},
            ) from e

        text = clean_model_text(raw_text)
        logger.info(
            "Gemini analysis completed in %.0fms, %d bytes in, %d chars out",
            (time.time() - start_time) * 1000,
            len(image_bytes),
            len(text),
        )
        return text
