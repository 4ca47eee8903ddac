"""
AI endpoints.

Thin proxy to the external AI service configured by AI_SERVICE_URL.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException

from smartmatch.models.user import User
from smartmatch.api.auth import get_current_user
from smartmatch.schemas.ai import ChatRequest, ResumeAnalysisRequest, AIResponse
from smartmatch.services.ai_client import AIServiceClient, AIServiceError, get_ai_client

logger = logging.getLogger(__name__)
router = APIRouter()


def _require_client(client: Optional[AIServiceClient]) -> AIServiceClient:
    if client is None:
        raise HTTPException(status_code=503, detail="AI service is not configured")
    return client


@router.post("/chat", response_model=AIResponse)
async def chat(
    payload: ChatRequest,
    current_user: User = Depends(get_current_user),
    client: Optional[AIServiceClient] = Depends(get_ai_client)
):
    client = _require_client(client)
    try:
        data, elapsed = await client.chat(payload.message, payload.model)
    except AIServiceError as e:
        raise HTTPException(status_code=502, detail=str(e))

    logger.info(f"AI chat for {current_user.email} took {elapsed}s")
    return AIResponse(success=True, data=data, processing_time=elapsed)


@router.post("/analyze-resume", response_model=AIResponse)
async def analyze_resume(
    payload: ResumeAnalysisRequest,
    current_user: User = Depends(get_current_user),
    client: Optional[AIServiceClient] = Depends(get_ai_client)
):
    client = _require_client(client)
    try:
        data, elapsed = await client.analyze_resume(payload.resume_text, payload.model)
    except AIServiceError as e:
        raise HTTPException(status_code=502, detail=str(e))

    logger.info(f"Resume analysis for {current_user.email} took {elapsed}s")
    return AIResponse(success=True, data=data, processing_time=elapsed)
