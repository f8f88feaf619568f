from typing import Optional

import httpx

from . import config
from .exceptions import AnalysisError, GeminiAPIError
from .logging_utils import get_logger

logger = get_logger(__name__)

HARM_CATEGORIES = [
    "HARM_CATEGORY_HARASSMENT",
    "HARM_CATEGORY_HATE_SPEECH",
    "HARM_CATEGORY_SEXUALLY_EXPLICIT",
    "HARM_CATEGORY_DANGEROUS_CONTENT",
]


class GeminiClient:
    """Thin async wrapper over the Gemini ``generateContent`` REST call."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        endpoint: Optional[str] = None,
        timeout: float = config.GEMINI_TIMEOUT_SECONDS,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key or config.GEMINI_API_KEY
        self.endpoint = endpoint or config.GEMINI_ENDPOINT
        self.timeout = timeout
        self._transport = transport

    def _payload(self, prompt: str, temperature: float) -> dict:
        return {
            "contents": [
                {
                    "role": "user",
                    "parts": [{"text": prompt}]
                }
            ],
            "generationConfig": {
                "temperature": temperature,
                "topK": 32,
                "topP": 0.95,
                "maxOutputTokens": 2048,
            },
            "safetySettings": [
                {"category": category, "threshold": "BLOCK_MEDIUM_AND_ABOVE"}
                for category in HARM_CATEGORIES
            ],
        }

    async def generate_content(self, prompt: str, temperature: float = 0.2) -> str:
        """Send one prompt and return the first candidate's text.

        Raises ``GeminiAPIError`` on any non-2xx response; its message
        carries the status line and body so callers can detect 429/503 and
        the provider's ``retryDelay`` hint.
        """
        if not self.api_key:
            raise AnalysisError(
                "Invalid or missing Gemini API key. Please set GEMINI_API_KEY in your .env file."
            )

        headers = {"Content-Type": "application/json"}
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            resp = await client.post(
                self.endpoint,
                headers=headers,
                json=self._payload(prompt, temperature),
                params={"key": self.api_key},
            )

        if resp.status_code >= 400:
            message = f"[{resp.status_code} {resp.reason_phrase}] {resp.text}"
            logger.warning(f"Gemini request failed: {message[:300]}")
            raise GeminiAPIError(resp.status_code, message)

        data = resp.json()
        candidates = data.get("candidates") or [{}]
        parts = candidates[0].get("content", {}).get("parts") or [{}]
        return parts[0].get("text", "")
