"""Schemas for the external AI service proxy."""
from typing import Any, Optional
from pydantic import BaseModel, Field


class ChatRequest(BaseModel):
    message: str = Field(min_length=1)
    model: Optional[str] = None


class ResumeAnalysisRequest(BaseModel):
    resume_text: str = Field(min_length=1)
    model: Optional[str] = None


class AIResponse(BaseModel):
    success: bool
    data: Optional[dict[str, Any]] = None
    error: Optional[str] = None
    processing_time: float = 0.0
