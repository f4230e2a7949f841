"""
Wingman API - Pydantic models for requests and responses.
"""
from enum import Enum
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field


# ============================================================
# Enums
# ============================================================

class SpeakerType(str, Enum):
    YOU = "you"
    SPEAKER = "speaker"


class ExportFormat(str, Enum):
    MARKDOWN = "markdown"
    JSON = "json"


# ============================================================
# LLM Models
# ============================================================

class ChatRequest(BaseModel):
    """Send a message to the active provider (or the fallback chain)."""
    message: str = Field(..., min_length=1)
    system_prompt: Optional[str] = None
    temperature: Optional[float] = Field(None, ge=0.0, le=2.0)
    max_tokens: Optional[int] = Field(None, gt=0)
    fallback: bool = False


class ChatResponse(BaseModel):
    reply: str
    provider_id: Optional[str] = None


class SwitchProviderRequest(BaseModel):
    provider_id: str
    model: Optional[str] = None


class ImageAnalysisRequest(BaseModel):
    """Image bytes as base64 plus the question to ask about them."""
    image_base64: str = Field(..., min_length=1)
    mime_type: str = "image/png"
    prompt: str = "Describe this image."


class AudioAnalysisRequest(BaseModel):
    audio_base64: str = Field(..., min_length=1)
    mime_type: str = "audio/wav"
    prompt: str = "Transcribe this audio and summarize what is said."


class ConnectionTestResponse(BaseModel):
    success: bool
    error: Optional[str] = None


class ProviderConfigResponse(BaseModel):
    active_provider: Optional[str] = None
    fallback_order: List[str] = Field(default_factory=list)
    providers: List[Dict[str, Any]] = Field(default_factory=list)


# ============================================================
# Meeting Models
# ============================================================

class StartMeetingRequest(BaseModel):
    title: Optional[str] = Field(None, max_length=200)
    playbook: Optional[str] = None


class TranscriptEntryCreate(BaseModel):
    """A transcribed statement. timestamp defaults to now (epoch ms)."""
    speaker: SpeakerType
    text: str = Field(..., min_length=1)
    timestamp: Optional[int] = Field(None, ge=0)


class MeetingListItem(BaseModel):
    id: str
    title: str
    started_at: int
    ended_at: Optional[int] = None
    entry_count: int = 0
    has_summary: bool = False


class SummaryResponse(BaseModel):
    summary: Optional[str] = None
    chunk_summaries: List[str] = Field(default_factory=list)


class ActionItemUpdate(BaseModel):
    completed: bool


# ============================================================
# Coaching Models
# ============================================================

class CoachingRequest(BaseModel):
    statement: str = Field(..., min_length=1)
    playbook_id: str = "general"


class CoachingResponse(BaseModel):
    advice: Optional[str] = None


class QuickResponseRequest(BaseModel):
    """Question to answer. context defaults to the active meeting's latest entries."""
    question: str = Field(..., min_length=1)
    context: Optional[str] = None


class QuickResponseResponse(BaseModel):
    suggestions: List[str] = Field(default_factory=list)


class PlaybookCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: str = ""
    icon: str = ""
    guidelines: str = ""
    response_style: str = ""
    summary_format: str = ""


class PlaybookUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = None
    icon: Optional[str] = None
    guidelines: Optional[str] = None
    response_style: Optional[str] = None
    summary_format: Optional[str] = None


# ============================================================
# Generic
# ============================================================

class SuccessResponse(BaseModel):
    success: bool = True
    message: Optional[str] = None
