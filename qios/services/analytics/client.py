import logging
from typing import Optional

from fastapi import HTTPException
from google import genai

from qios.core.config import settings

log = logging.getLogger(__name__)


class GeminiClient:
    """Thin async wrapper over google-genai; one prompt in, reply text out."""

    def __init__(self, api_key: str, model: Optional[str] = None):
        self.model = model or settings.gemini_model
        self._client = genai.Client(api_key=api_key)

    async def generate(self, prompt: str) -> str:
        log.info("gemini: model=%s prompt_chars=%s", self.model, len(prompt))
        response = await self._client.aio.models.generate_content(
            model=self.model,
            contents=prompt,
        )
        return response.text or ""


def get_ai_client() -> GeminiClient:
    if not settings.gemini_api_key:
        raise HTTPException(status_code=500, detail="AI analytics not configured")
    return GeminiClient(settings.gemini_api_key)
