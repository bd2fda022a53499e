from typing import Any, Optional

import httpx
import structlog

from app.core.exceptions import UpstreamError
from app.repositories.interfaces.generation_provider import IGenerationProvider

logger = structlog.get_logger()


def extract_candidate_text(envelope: Any) -> Optional[str]:
    """Return ``candidates[0].content.parts[0].text`` or None if any step is missing."""
    node = envelope
    for key in ("candidates", 0, "content", "parts", 0, "text"):
        if isinstance(key, int):
            if not isinstance(node, list) or len(node) <= key:
                return None
        elif not isinstance(node, dict) or key not in node:
            return None
        node = node[key]
    return node if isinstance(node, str) else None


class GeminiProvider(IGenerationProvider):
    """Google Gemini ``generateContent`` over plain REST."""

    def __init__(
        self,
        api_key: Optional[str],
        model: str,
        base_url: str,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    def is_configured(self) -> bool:
        return bool(self.api_key)

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}/models/{self.model}:generateContent"

    async def generate_text(self, prompt: str) -> Optional[str]:
        payload = {"contents": [{"parts": [{"text": prompt}]}]}

        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            response = await client.post(
                self.endpoint,
                json=payload,
                # Header, not query string: httpx logs request URLs
                headers={"Content-Type": "application/json", "x-goog-api-key": self.api_key or ""},
            )

        if not response.is_success:
            logger.error(
                "Gemini API returned an error",
                status_code=response.status_code,
                model=self.model,
            )
            raise UpstreamError(
                "Gemini API error",
                details=response.text,
                upstream_status=response.status_code,
            )

        text = extract_candidate_text(response.json())
        if text is None:
            logger.warning("Gemini response carried no candidate text", model=self.model)
        return text
