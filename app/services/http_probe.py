import json
import time
from typing import Any, Dict, Optional

import httpx
import structlog

from app.core.exceptions import ProbeError, ValidationError
from app.models.schemas import ProbeRequest, ProbeResult

logger = structlog.get_logger()

NO_BODY_METHODS = frozenset({"GET", "HEAD"})


class HttpProbe:
    """Forwards one arbitrary request to a target URL and reports what came back.

    There is no protocol logic here: the method, headers and body are passed
    through, the response body is always read as text, and nothing is retried.
    """

    def __init__(
        self,
        timeout: Optional[float] = None,
        follow_redirects: bool = True,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.timeout = timeout
        self.follow_redirects = follow_redirects
        self._transport = transport

    async def send(self, request: ProbeRequest) -> ProbeResult:
        if not request.url:
            raise ValidationError("Missing 'url' in request body.", details="missing: url")

        method = (request.method or "GET").upper()
        headers = {str(k): str(v) for k, v in request.headers.items()}
        content = self._serialize_body(method, request.body)

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout,
                follow_redirects=self.follow_redirects,
                transport=self._transport,
            ) as client:
                start = time.perf_counter()
                response = await client.request(method, request.url, headers=headers, content=content)
                body = response.text
                elapsed_millis = int(round((time.perf_counter() - start) * 1000))
        except Exception as e:
            logger.error("API probe failed", method=method, url=request.url, error=str(e))
            raise ProbeError("Failed to test API", details=str(e) or type(e).__name__) from e

        logger.info(
            "API probe completed",
            method=method,
            url=request.url,
            status_code=response.status_code,
            elapsed_millis=elapsed_millis,
        )
        return ProbeResult(
            status=response.status_code,
            status_text=response.reason_phrase,
            headers=self._flatten_headers(response.headers),
            body=body,
            elapsed_millis=elapsed_millis,
        )

    @staticmethod
    def _serialize_body(method: str, body: Any) -> Optional[str]:
        if method in NO_BODY_METHODS or body is None or body == "":
            return None
        if isinstance(body, str):
            return body
        return json.dumps(body)

    @staticmethod
    def _flatten_headers(headers: httpx.Headers) -> Dict[str, str]:
        # Repeated headers are already comma-joined by httpx
        return {key: value for key, value in headers.items()}
