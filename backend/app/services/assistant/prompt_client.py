"""
Gemini prompt-completion client

One generateContent call per request, JSON output validated against a
pydantic model. No retries; the httpx timeout bounds each call.
"""
import json
import logging
from typing import Optional, Type, TypeVar

import httpx
import pydantic
from pydantic import BaseModel

from app.core.errors import PromptServiceError

logger = logging.getLogger(__name__)

GEMINI_API_BASE = "https://generativelanguage.googleapis.com/v1beta/models"

OutputT = TypeVar("OutputT", bound=BaseModel)


class PromptClient:

    def __init__(
        self,
        api_key: Optional[str],
        model: str = "gemini-1.5-flash",
        timeout: float = 15.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.api_key = api_key
        self.model = model
        self.timeout = timeout
        self.transport = transport

    @property
    def url(self) -> str:
        return f"{GEMINI_API_BASE}/{self.model}:generateContent"

    async def generate(self, prompt: str, output_model: Type[OutputT], temperature: float = 0.4) -> OutputT:
        """
        Run a prompt and parse the reply into output_model.

        Raises:
            PromptServiceError: no API key, transport failure, non-200
                status, or a reply that does not match output_model
        """
        if not self.api_key:
            raise PromptServiceError("The assistant is not configured right now.")

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                resp = await client.post(
                    self.url,
                    params={"key": self.api_key},
                    json={
                        "contents": [{"parts": [{"text": prompt}]}],
                        "generationConfig": {
                            "temperature": temperature,
                            "responseMimeType": "application/json",
                        },
                    },
                )
        except httpx.TimeoutException:
            logger.warning("Gemini API timeout")
            raise PromptServiceError("The assistant took too long to respond. Please try again.")
        except httpx.HTTPError as e:
            logger.error(f"Gemini request error: {e}")
            raise PromptServiceError("The assistant is unavailable right now.")

        if resp.status_code != 200:
            logger.warning(f"Gemini API returned {resp.status_code}")
            raise PromptServiceError("The assistant is unavailable right now.")

        text = self._extract_text(resp)
        try:
            return output_model.model_validate(json.loads(text))
        except (json.JSONDecodeError, pydantic.ValidationError) as e:
            logger.warning(f"Gemini output did not match {output_model.__name__}: {e}")
            raise PromptServiceError("The assistant returned an unexpected answer.")

    def _extract_text(self, resp: httpx.Response) -> str:
        try:
            data = resp.json()
        except ValueError:
            raise PromptServiceError("The assistant returned an unexpected answer.")

        candidates = data.get("candidates", [])
        if not candidates:
            raise PromptServiceError("The assistant returned no answer.")

        # Blocked replies (finishReason SAFETY) come back with no parts
        parts = (candidates[0].get("content") or {}).get("parts") or []
        if not parts:
            raise PromptServiceError("The assistant returned no answer.")
        text = (parts[0].get("text") or "").strip()
        if not text:
            raise PromptServiceError("The assistant returned no answer.")
        return text
