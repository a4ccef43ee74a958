"""
Gemini Summarizer

Concrete Summarizer backed by Google Generative AI.

DESIGN DECISION: This is the only module that imports the Gemini client.
The advisor and the ledger only know the Summarizer interface.
"""

from typing import Optional

import google.generativeai as genai
import structlog
from google.api_core import exceptions as google_exceptions
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from fintrack.agents.advisor import Summarizer, SummarizerNotConfiguredError
from fintrack.config import GeminiSettings, get_settings


logger = structlog.get_logger(__name__)

# Worth another attempt; everything else fails straight to the fallback
TRANSIENT_ERRORS = (
    google_exceptions.ServiceUnavailable,
    google_exceptions.DeadlineExceeded,
    google_exceptions.InternalServerError,
)


class GeminiSummarizer(Summarizer):
    """Generates advisory text with a Gemini model."""

    def __init__(self, settings: Optional[GeminiSettings] = None):
        self._settings = settings or get_settings().gemini
        self._model: Optional[genai.GenerativeModel] = None

    @property
    def is_configured(self) -> bool:
        return self._settings.is_configured

    def _configure_genai(self) -> genai.GenerativeModel:
        """Configure Google Generative AI on first use."""
        if self._model is None:
            genai.configure(api_key=self._settings.api_key)
            self._model = genai.GenerativeModel(
                model_name=self._settings.model_name,
                generation_config={
                    "temperature": self._settings.temperature,
                    "max_output_tokens": self._settings.max_tokens,
                },
            )
        return self._model

    @retry(
        retry=retry_if_exception_type(TRANSIENT_ERRORS),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=8),
        reraise=True,
    )
    async def summarize(self, prompt: str) -> str:
        if not self.is_configured:
            raise SummarizerNotConfiguredError("Gemini API key not found")

        model = self._configure_genai()
        response = await model.generate_content_async(prompt)
        logger.debug("gemini_response_received", model=self._settings.model_name)
        # response.text raises ValueError when the candidate was blocked
        return response.text
