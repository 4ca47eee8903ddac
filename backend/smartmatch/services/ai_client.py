"""
Client for the external AI service.

The service exposes `POST /chat` and `POST /analyze-resume`, both taking
JSON and returning a JSON object. No analysis happens in this repo.
"""
import asyncio
import logging
import time
from typing import Any, Optional

import aiohttp

from smartmatch.config import settings

logger = logging.getLogger(__name__)


class AIServiceError(Exception):
    """Raised when the AI service is unreachable or answers with an error"""
    pass


class AIServiceClient:
    def __init__(self, base_url: str, default_model: str, timeout_seconds: int = 60):
        self.base_url = base_url.rstrip("/")
        self.default_model = default_model
        self.timeout = aiohttp.ClientTimeout(total=timeout_seconds)

    async def _post(self, path: str, payload: dict[str, Any]) -> tuple[dict[str, Any], float]:
        """
        POST `payload` to the service.

        Returns:
            (response body, elapsed seconds)

        Raises:
            AIServiceError: On connection errors, timeouts, non-2xx status or non-JSON body
        """
        url = f"{self.base_url}{path}"
        started = time.monotonic()
        try:
            async with aiohttp.ClientSession(timeout=self.timeout) as session:
                async with session.post(url, json=payload) as response:
                    if response.status >= 400:
                        body = await response.text()
                        logger.error(f"AI service {path} returned {response.status}: {body[:200]}")
                        raise AIServiceError(f"AI service returned {response.status}")
                    data = await response.json(content_type=None)
        except aiohttp.ClientError as e:
            logger.error(f"AI service {path} request failed: {str(e)}")
            raise AIServiceError(f"AI service unavailable: {str(e)}")
        except asyncio.TimeoutError:
            logger.error(f"AI service {path} timed out")
            raise AIServiceError("AI service timed out")
        except ValueError as e:
            raise AIServiceError(f"AI service returned invalid JSON: {str(e)}")

        if not isinstance(data, dict):
            data = {"result": data}
        return data, round(time.monotonic() - started, 3)

    async def chat(self, message: str, model: Optional[str] = None) -> tuple[dict[str, Any], float]:
        return await self._post("/chat", {"message": message, "model": model or self.default_model})

    async def analyze_resume(self, resume_text: str, model: Optional[str] = None) -> tuple[dict[str, Any], float]:
        return await self._post(
            "/analyze-resume",
            {"resume_text": resume_text, "model": model or self.default_model},
        )


def get_ai_client() -> Optional[AIServiceClient]:
    """Dependency: the configured client, or None when AI_SERVICE_URL is unset."""
    if not settings.ai_service_url:
        return None
    return AIServiceClient(
        settings.ai_service_url,
        settings.ai_default_model,
        settings.ai_timeout_seconds,
    )
