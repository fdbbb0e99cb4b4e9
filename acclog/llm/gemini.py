"""
Gemini Model Manager - cached shared model instance.

Supports two backends:
  1. Vertex AI SDK (production) - uses GOOGLE_CLOUD_PROJECT + service account
  2. google-generativeai (local dev) - uses GOOGLE_API_KEY
"""

from __future__ import annotations

import os
from functools import lru_cache

from acclog.errors import NotConfiguredError
from acclog.infrastructure.settings import GEMINI_LOCATION, GEMINI_MODEL
from acclog.observability.logging import get_logger

logger = get_logger(__name__)


class GeminiInitializationError(NotConfiguredError):
    """Raised when Gemini model cannot be initialized."""


@lru_cache(maxsize=1)
def get_gemini_model():
    """
    Get or create the shared Gemini model instance.

    Tries Vertex AI first when GOOGLE_CLOUD_PROJECT is set. Falls back to
    google-generativeai with GOOGLE_API_KEY for local development.

    Returns:
        GenerativeModel: Shared Gemini model

    Raises:
        GeminiInitializationError: If no backend has credentials or an SDK
    """
    # Read env vars fresh (settings may have been loaded before dotenv)
    project = os.getenv("GOOGLE_CLOUD_PROJECT")
    location = os.getenv("GEMINI_LOCATION") or GEMINI_LOCATION
    model_name = os.getenv("GEMINI_MODEL") or GEMINI_MODEL

    if project:
        try:
            import vertexai
            from vertexai.generative_models import GenerativeModel

            vertexai.init(project=project, location=location)
            model = GenerativeModel(model_name)
            logger.info(
                "Initialized Gemini model (Vertex AI): project=%s, location=%s, model=%s",
                project,
                location,
                model_name,
            )
            return model
        except ImportError:
            logger.info("Vertex AI SDK not installed, trying google-generativeai fallback")

    api_key = os.getenv("GOOGLE_API_KEY")
    if not api_key:
        raise GeminiInitializationError(
            "Gemini not configured. Set GOOGLE_CLOUD_PROJECT or GOOGLE_API_KEY."
        )

    try:
        import google.generativeai as genai
    except ImportError as e:
        raise GeminiInitializationError(
            "No Gemini SDK available. Install google-cloud-aiplatform or google-generativeai."
        ) from e

    try:
        genai.configure(api_key=api_key)
        model = genai.GenerativeModel(model_name)
    except Exception as e:
        logger.error("Failed to initialize Gemini model: %s", e)
        raise GeminiInitializationError(f"Failed to initialize Gemini: {e}") from e

    logger.info("Initialized Gemini model (google-generativeai): model=%s", model_name)
    return model


def clear_model_cache() -> None:
    """
    Clear the cached model instance.

    Useful for testing or when reconfiguration is needed.
    """
    get_gemini_model.cache_clear()
    logger.info("Cleared Gemini model cache")
