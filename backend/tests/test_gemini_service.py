"""
FitLog Backend - Gemini Service Unit Tests (Mocked)
=====================================================

What:  Tests for GeminiService with the google.generativeai module patched out.

What we test:
    ✅ Prompt + inline image/jpeg part sent in one generate_content call
    ✅ Markdown code fences stripped from the answer
    ✅ Empty and placeholder keys rejected before any SDK call
    ✅ SDK failures wrapped in LLMServiceError with the SDK message
    ❌ Real API calls
"""

from unittest.mock import MagicMock, PropertyMock, patch

import pytest

from app.exceptions import LLMServiceError
from app.services.gemini_service import GeminiService, clean_model_text


class TestCleanModelText:

    def test_plain_json_unchanged(self):
        assert clean_model_text('{"a": "1"}') == '{"a": "1"}'

    def test_json_fence_removed(self):
        assert clean_model_text('```json\n{"a": "1"}\n```') == '{"a": "1"}'

    def test_bare_fence_removed(self):
        assert clean_model_text('```\n{"a": "1"}\n```\n') == '{"a": "1"}'

    def test_whitespace_trimmed(self):
        assert clean_model_text("  \n hello \t") == "hello"


class TestGeminiServiceMocked:

    def test_analyze_image_success(self, sample_image_bytes):
        with patch("app.services.gemini_service.genai") as mock_genai:
            mock_response = MagicMock()
            mock_response.text = '```json\n{"duration": "20:00", "distance": "3.1", "calories": "250"}\n```'
            mock_model = MagicMock()
            mock_model.generate_content.return_value = mock_response
            mock_genai.GenerativeModel.return_value = mock_model

            service = GeminiService(api_key="real-looking-key", model_name="gemini-2.5-flash")
            result = service.analyze_image(sample_image_bytes)

        assert result == '{"duration": "20:00", "distance": "3.1", "calories": "250"}'
        mock_genai.configure.assert_called_once_with(api_key="real-looking-key")
        mock_genai.GenerativeModel.assert_called_once_with("gemini-2.5-flash")

        (parts,), _ = mock_model.generate_content.call_args
        prompt, image_part = parts
        assert "Duration" in prompt and "Calories" in prompt
        assert image_part == {"mime_type": "image/jpeg", "data": sample_image_bytes}

    def test_new_model_per_call(self, sample_image_bytes):
        with patch("app.services.gemini_service.genai") as mock_genai:
            mock_genai.GenerativeModel.return_value.generate_content.return_value.text = "{}"

            service = GeminiService(api_key="real-looking-key")
            service.analyze_image(sample_image_bytes)
            service.analyze_image(sample_image_bytes)

        assert mock_genai.GenerativeModel.call_count == 2

    @pytest.mark.parametrize("key", ["", "PASTE_YOUR_KEY_HERE", "your_gemini_api_key_here"])
    def test_placeholder_key_rejected(self, key, sample_image_bytes):
        with patch("app.services.gemini_service.genai") as mock_genai:
            service = GeminiService(api_key=key)

            with pytest.raises(LLMServiceError, match="API Key is missing/invalid"):
                service.analyze_image(sample_image_bytes)

        mock_genai.GenerativeModel.assert_not_called()

    def test_generate_failure_wrapped(self, sample_image_bytes):
        with patch("app.services.gemini_service.genai") as mock_genai:
            mock_genai.GenerativeModel.return_value.generate_content.side_effect = RuntimeError(
                "429 Resource has been exhausted"
            )

            service = GeminiService(api_key="real-looking-key")
            with pytest.raises(LLMServiceError) as exc_info:
                service.analyze_image(sample_image_bytes)

        assert exc_info.value.message == "GenerateContent error: 429 Resource has been exhausted"
        assert isinstance(exc_info.value.__cause__, RuntimeError)

    def test_blocked_response_wrapped(self, sample_image_bytes):
        with patch("app.services.gemini_service.genai") as mock_genai:
            response = MagicMock()
            type(response).text = PropertyMock(side_effect=ValueError("response was blocked"))
            mock_genai.GenerativeModel.return_value.generate_content.return_value = response

            service = GeminiService(api_key="real-looking-key")
            with pytest.raises(LLMServiceError, match="response was blocked"):
                service.analyze_image(sample_image_bytes)
