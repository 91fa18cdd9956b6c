"""Name translation and family narrative via the Gemini API (google-genai)."""

import json
import logging

from google import genai

from errors import ExternalServiceError
from models import Language, Member
from settings import DEFAULT_MODEL, Settings

logger = logging.getLogger(__name__)

SERVICE_UNAVAILABLE = "AI service unavailable."


class TextService:
    """
    Async wrapper around the generative-text API.

    Both public coroutines always return a string: on any failure the
    translation gives back its input and the narrative gives back an empty
    string (or ``SERVICE_UNAVAILABLE`` when no API key is configured).
    """

    def __init__(self, api_key: str | None = None, model: str = DEFAULT_MODEL, client=None):
        self.api_key = api_key
        self.model = model
        self._client = client

    @classmethod
    def from_settings(cls, settings: Settings) -> "TextService":
        return cls(api_key=settings.api_key, model=settings.model)

    @property
    def available(self) -> bool:
        return self._client is not None or bool(self.api_key)

    def _get_client(self):
        if self._client is None:
            if not self.api_key:
                raise ExternalServiceError("API key is missing")
            try:
                self._client = genai.Client(api_key=self.api_key)
            except Exception as exc:
                raise ExternalServiceError(f"Failed initializing Gemini client: {exc}") from exc
        return self._client

    async def _generate(self, prompt: str) -> str:
        client = self._get_client()
        try:
            response = await client.aio.models.generate_content(model=self.model, contents=prompt)
        except Exception as exc:
            raise ExternalServiceError(f"Gemini generation failed: {exc}") from exc

        text = (getattr(response, "text", None) or "").strip()
        if not text:
            raise ExternalServiceError("Gemini returned an empty response")
        return text

    async def translate_name(self, text: str, language: Language) -> str:
        """Return ``text`` written in ``language``'s script, or ``text`` unchanged on failure."""
        if not text or not text.strip():
            return text

        try:
            prompt = (
                f'Translate the name or phrase "{text}" into {Language(language).value} script. '
                "Return ONLY the translated text, no explanation."
            )
            return await self._generate(prompt)
        except (ExternalServiceError, ValueError) as exc:
            logger.error("Translation error: %s", exc)
            return text

    async def generate_family_history(self, members: list[Member], language: Language) -> str:
        """Short poetic summary of the family in ``language``; empty string on failure."""
        if not self.available:
            logger.warning("API key is missing; family history unavailable")
            return SERVICE_UNAVAILABLE

        structure = json.dumps(
            [{"name": m.name, "relation": m.relation_type} for m in members], ensure_ascii=False
        )
        try:
            prompt = (
                "Based on the following family tree structure, write a short, poetic summary of "
                f"the family legacy in {Language(language).value} language. Keep it under 100 words. "
                f"Structure: {structure}"
            )
            return await self._generate(prompt)
        except (ExternalServiceError, ValueError) as exc:
            logger.error("Family history error: %s", exc)
            return ""
