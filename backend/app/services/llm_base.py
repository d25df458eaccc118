"""
FitLog Backend - Abstract LLM Service Interface
=================================================

What:  Contract for vision services that read metrics off a workout photo.
How:   Concrete implementations inherit from LLMService and implement
       analyze_image().
Who:   Called by LogService during POST /analyze-image.
"""

from abc import ABC, abstractmethod


class LLMService(ABC):
    """
    Abstract interface for AI-powered metric extraction from images.

    Contract:
        - analyze_image() accepts raw image bytes and returns the model's text
          with Markdown code fences removed and whitespace trimmed
        - Failures are raised as LLMServiceError carrying the provider's message
        - No retries: one call per request

    Implementations:
        - GeminiService: Google Gemini (default)
    """

    @abstractmethod
    def analyze_image(self, image_bytes: bytes) -> str:
        """
        Send the image to the vision model and return its cleaned answer.

        Args:
            image_bytes: Raw uploaded image content (sent as image/jpeg).

        Returns:
            str: Model output, ideally a JSON object
                 {"duration": ..., "distance": ..., "calories": ...}.

        Raises:
            LLMServiceError: API key missing/placeholder, or the call failed.
        """
        ...
