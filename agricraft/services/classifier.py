import logging
from typing import Any, Dict, Optional

import httpx

from ..config import settings
from ..errors import NetworkError, StreamReadError
from ..prompts import CLASSIFY_PROMPT
from ..schemas import ClassificationRecord, ImageAsset
from ..utils.images import to_base64
from .stream_decoder import decode_stream

logger = logging.getLogger(__name__)

_client: Optional[httpx.AsyncClient] = None


def get_client() -> httpx.AsyncClient:
    global _client
    if _client is None:
        # only connecting is bounded; a slow stream is left to the caller's deadline
        timeout = httpx.Timeout(None, connect=settings.AI_CONNECT_TIMEOUT)
        _client = httpx.AsyncClient(timeout=timeout)
    return _client


async def close_client() -> None:
    global _client
    if _client is not None:
        await _client.aclose()
        _client = None


def build_request_body(asset: ImageAsset, prompt: str = CLASSIFY_PROMPT) -> Dict[str, Any]:
    return {
        "contents": [
            {
                "role": "user",
                "parts": [
                    {"text": prompt},
                    {"inlineData": {"mimeType": asset.content_type, "data": to_base64(asset)}},
                ],
            }
        ]
    }


async def classify_waste(asset: ImageAsset, client: Optional[httpx.AsyncClient] = None) -> ClassificationRecord:
    """
    Send the image to the streaming model endpoint and decode its SSE reply.

    Raises StreamReadError when the endpoint answers with a failure status or
    the body breaks while being read, NetworkError when it cannot be reached.
    Malformed content never raises; it degrades to fallback values.
    """
    client = client or get_client()
    headers = {"Content-Type": "application/json", "X-App-Id": settings.APP_ID}
    body = build_request_body(asset)

    try:
        async with client.stream("POST", settings.AI_API_URL, json=body, headers=headers) as response:
            if response.is_error:
                try:
                    error_text = (await response.aread()).decode("utf-8", errors="replace")
                except httpx.HTTPError as e:
                    raise StreamReadError(f"AI API error: status {response.status_code}") from e
                raise StreamReadError(f"AI API error: {error_text}")
            try:
                record = await decode_stream(response.aiter_bytes())
            except httpx.HTTPError as e:
                raise StreamReadError(f"AI stream interrupted: {e}") from e
    except httpx.HTTPError as e:
        logger.error("AI classification error: %s", e)
        raise NetworkError(f"Failed to reach AI service: {e}") from e

    logger.info("classified %s as %s (%s)", asset.name, record.detected_type, record.confidence)
    return record
