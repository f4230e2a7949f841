"""
Wingman API - FastAPI routes.

Every route reaches the running assistant through the AppContext stored on
app.state, so one process can host several independent apps under test.
"""
import base64
import binascii
import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from fastapi.responses import PlainTextResponse, Response

from ..app import AppContext
from ..config import save_settings
from ..llm import (
    AllProvidersFailedError,
    ChatOptions,
    LLMError,
    NoActiveProviderError,
    ProviderError,
    UnknownProviderError,
    UnsupportedCapabilityError,
)
from ..meeting import (
    ActionItemNotFoundError,
    MeetingError,
    MeetingInProgressError,
    MeetingNotFoundError,
    NoActiveMeetingError,
    Speaker,
    TranscriptEntry,
    format_transcript,
    meeting_to_json,
    meeting_to_markdown,
)
from ..meeting.store import now_ms
from .models import (
    ActionItemUpdate,
    AudioAnalysisRequest,
    ChatRequest,
    ChatResponse,
    CoachingRequest,
    CoachingResponse,
    ConnectionTestResponse,
    ExportFormat,
    ImageAnalysisRequest,
    MeetingListItem,
    PlaybookCreate,
    PlaybookUpdate,
    ProviderConfigResponse,
    QuickResponseRequest,
    QuickResponseResponse,
    StartMeetingRequest,
    SuccessResponse,
    SummaryResponse,
    SwitchProviderRequest,
    TranscriptEntryCreate,
)

logger = logging.getLogger(__name__)

router = APIRouter()

# Entries of the active meeting used as quick-response context
QUICK_CONTEXT_ENTRIES = 10


def get_context(request: Request) -> AppContext:
    return request.app.state.context


def http_error(e: Exception) -> HTTPException:
    """Translate a domain error into the matching HTTP status."""
    if isinstance(e, (MeetingNotFoundError, ActionItemNotFoundError, UnknownProviderError)):
        return HTTPException(status_code=404, detail=str(e))
    if isinstance(e, (MeetingInProgressError, NoActiveMeetingError)):
        return HTTPException(status_code=409, detail=str(e))
    if isinstance(e, NoActiveProviderError):
        return HTTPException(status_code=503, detail=str(e))
    if isinstance(e, UnsupportedCapabilityError):
        return HTTPException(status_code=400, detail=str(e))
    if isinstance(e, (ProviderError, AllProvidersFailedError)):
        return HTTPException(status_code=502, detail=str(e))
    return HTTPException(status_code=500, detail=str(e))


# ==================== Health ====================

@router.get("/health")
async def health(context: AppContext = Depends(get_context)):
    return {
        "status": "ok",
        "active_provider": context.registry.active_provider_id,
        "providers": context.registry.provider_ids(),
        "meeting_active": context.meetings.current_meeting_id is not None,
    }


# ==================== LLM ====================

@router.get("/llm/config", response_model=ProviderConfigResponse)
async def llm_config(context: AppContext = Depends(get_context)):
    registry = context.registry
    return ProviderConfigResponse(
        active_provider=registry.active_provider_id,
        fallback_order=registry.fallback_order,
        providers=[p.config.to_dict() for p in registry.providers()],
    )


@router.get("/llm/models")
async def llm_models(context: AppContext = Depends(get_context)) -> Dict[str, List[Dict[str, Any]]]:
    catalog = await context.registry.list_models()
    return {pid: [m.to_dict() for m in models] for pid, models in catalog.items()}


@router.post("/llm/switch")
async def switch_provider(body: SwitchProviderRequest, context: AppContext = Depends(get_context)):
    try:
        provider = await context.switch_provider(body.provider_id, body.model)
    except LLMError as e:
        raise http_error(e) from e

    context.settings.active_provider = provider.config.id
    context.settings.active_model = provider.config.model
    save_settings(context.settings)
    return provider.config.to_dict()


@router.post("/llm/test", response_model=ConnectionTestResponse)
async def test_connection(context: AppContext = Depends(get_context)):
    result = await context.registry.test_connection()
    return ConnectionTestResponse(**result.to_dict())


@router.post("/llm/chat", response_model=ChatResponse)
async def chat(body: ChatRequest, context: AppContext = Depends(get_context)):
    options = ChatOptions(
        system_prompt=body.system_prompt,
        temperature=body.temperature,
        max_tokens=body.max_tokens,
    )
    registry = context.registry

    try:
        if body.fallback:
            reply, provider_id = await registry.chat_with_fallback_source(body.message, options)
        else:
            reply = await registry.chat(body.message, options)
            provider_id = registry.active_provider_id
    except LLMError as e:
        logger.warning(f"Chat failed: {e}")
        raise http_error(e) from e

    context.conversation.add_message("user", body.message)
    context.conversation.add_message("assistant", reply)
    return ChatResponse(reply=reply, provider_id=provider_id)


@router.post("/llm/analyze-image")
async def analyze_image(body: ImageAnalysisRequest, context: AppContext = Depends(get_context)):
    try:
        image_data = base64.b64decode(body.image_base64, validate=True)
    except (binascii.Error, ValueError):
        raise HTTPException(status_code=400, detail="image_base64 is not valid base64")

    provider = context.registry.active_provider
    if provider is None:
        raise http_error(NoActiveProviderError())

    try:
        analysis = await provider.analyze_image(image_data, body.mime_type, body.prompt)
    except LLMError as e:
        raise http_error(e) from e

    return {"analysis": analysis, "provider_id": provider.config.id}


@router.post("/llm/analyze-audio")
async def analyze_audio(body: AudioAnalysisRequest, context: AppContext = Depends(get_context)):
    try:
        audio_data = base64.b64decode(body.audio_base64, validate=True)
    except (binascii.Error, ValueError):
        raise HTTPException(status_code=400, detail="audio_base64 is not valid base64")

    provider = context.registry.active_provider
    if provider is None:
        raise http_error(NoActiveProviderError())

    try:
        analysis = await provider.analyze_audio(audio_data, body.mime_type, body.prompt)
    except LLMError as e:
        raise http_error(e) from e

    return {"analysis": analysis, "provider_id": provider.config.id}


# ==================== Meetings ====================

@router.post("/meetings")
async def start_meeting(body: StartMeetingRequest, context: AppContext = Depends(get_context)):
    if body.playbook and context.playbooks.get_playbook(body.playbook) is None:
        raise HTTPException(status_code=404, detail=f"Playbook not found: {body.playbook}")

    try:
        record = context.meetings.start_meeting(body.title, context.meeting_metadata(body.playbook))
    except MeetingError as e:
        raise http_error(e) from e
    return record.to_dict()


@router.get("/meetings", response_model=List[MeetingListItem])
async def list_meetings(
    q: Optional[str] = Query(None, description="Search title, summary and transcript"),
    context: AppContext = Depends(get_context),
):
    records = context.store.search_meetings(q) if q else context.store.list_meetings()
    return [
        MeetingListItem(
            id=r.id,
            title=r.title,
            started_at=r.started_at,
            ended_at=r.ended_at,
            entry_count=len(r.entries),
            has_summary=bool(r.summary),
        )
        for r in records
    ]


@router.get("/meetings/current")
async def current_meeting(context: AppContext = Depends(get_context)):
    record = context.meetings.current_meeting()
    return record.to_dict() if record else None


@router.post("/meetings/current/entries")
async def add_entry(body: TranscriptEntryCreate, context: AppContext = Depends(get_context)):
    entry = TranscriptEntry(
        speaker=Speaker(body.speaker.value),
        text=body.text,
        timestamp=body.timestamp if body.timestamp is not None else now_ms(),
    )
    try:
        context.meetings.add_entry(entry)
    except MeetingError as e:
        raise http_error(e) from e
    return entry.to_dict()


@router.post("/meetings/current/end")
async def end_meeting(context: AppContext = Depends(get_context)):
    try:
        record = await context.meetings.end_meeting()
    except (MeetingError, LLMError) as e:
        raise http_error(e) from e
    return record.to_dict()


@router.get("/meetings/{meeting_id}")
async def get_meeting(meeting_id: str, context: AppContext = Depends(get_context)):
    record = context.store.get_meeting(meeting_id)
    if record is None:
        raise http_error(MeetingNotFoundError(meeting_id))
    return record.to_dict()


@router.delete("/meetings/{meeting_id}", response_model=SuccessResponse)
async def delete_meeting(meeting_id: str, context: AppContext = Depends(get_context)):
    if meeting_id == context.meetings.current_meeting_id:
        raise HTTPException(status_code=409, detail="Cannot delete the active meeting")
    if not context.store.delete_meeting(meeting_id):
        raise http_error(MeetingNotFoundError(meeting_id))
    return SuccessResponse(message=f"Deleted meeting {meeting_id}")


@router.post("/meetings/{meeting_id}/summary", response_model=SummaryResponse)
async def generate_summary(meeting_id: str, context: AppContext = Depends(get_context)):
    try:
        await context.meetings.generate_summary(meeting_id)
    except (MeetingError, LLMError) as e:
        raise http_error(e) from e

    record = context.store.get_meeting(meeting_id)
    return SummaryResponse(summary=record.summary, chunk_summaries=record.chunk_summaries)


@router.post("/meetings/{meeting_id}/action-items")
async def extract_action_items(meeting_id: str, context: AppContext = Depends(get_context)):
    try:
        items = await context.meetings.extract_action_items(meeting_id)
    except (MeetingError, LLMError) as e:
        raise http_error(e) from e
    return [item.to_dict() for item in items]


@router.patch("/meetings/{meeting_id}/action-items/{item_id}")
async def update_action_item(
    meeting_id: str,
    item_id: str,
    body: ActionItemUpdate,
    context: AppContext = Depends(get_context),
):
    try:
        item = context.meetings.set_action_item_completed(meeting_id, item_id, body.completed)
    except MeetingError as e:
        raise http_error(e) from e
    return item.to_dict()


@router.get("/meetings/{meeting_id}/export")
async def export_meeting(
    meeting_id: str,
    format: ExportFormat = ExportFormat.MARKDOWN,
    context: AppContext = Depends(get_context),
):
    record = context.store.get_meeting(meeting_id)
    if record is None:
        raise http_error(MeetingNotFoundError(meeting_id))

    if format == ExportFormat.JSON:
        return Response(content=meeting_to_json(record), media_type="application/json")
    return PlainTextResponse(meeting_to_markdown(record), media_type="text/markdown")


# ==================== Coaching ====================

@router.post("/coaching/evaluate", response_model=CoachingResponse)
async def evaluate_statement(body: CoachingRequest, context: AppContext = Depends(get_context)):
    playbook = context.playbooks.get_playbook(body.playbook_id)
    if playbook is None:
        raise HTTPException(status_code=404, detail=f"Playbook not found: {body.playbook_id}")

    advice = await context.coach.evaluate_statement(body.statement, playbook)
    return CoachingResponse(advice=advice)


@router.post("/coaching/quick-responses", response_model=QuickResponseResponse)
async def quick_responses(body: QuickResponseRequest, context: AppContext = Depends(get_context)):
    recent = body.context
    if recent is None:
        record = context.meetings.current_meeting()
        recent = format_transcript(record.entries[-QUICK_CONTEXT_ENTRIES:]) if record else ""

    suggestions = await context.coach.generate_quick_responses(body.question, recent)
    return QuickResponseResponse(suggestions=suggestions)


# ==================== Playbooks ====================

@router.get("/playbooks")
async def list_playbooks(context: AppContext = Depends(get_context)):
    return [p.to_dict() for p in context.playbooks.list_playbooks()]


@router.post("/playbooks")
async def create_playbook(body: PlaybookCreate, context: AppContext = Depends(get_context)):
    fields = body.model_dump()
    name = fields.pop("name")
    return context.playbooks.create_playbook(name, **fields).to_dict()


@router.patch("/playbooks/{playbook_id}")
async def update_playbook(
    playbook_id: str,
    body: PlaybookUpdate,
    context: AppContext = Depends(get_context),
):
    updated = context.playbooks.update_playbook(playbook_id, **body.model_dump(exclude_none=True))
    if updated is None:
        raise HTTPException(status_code=404, detail="Custom playbook not found")
    return updated.to_dict()


@router.delete("/playbooks/{playbook_id}", response_model=SuccessResponse)
async def delete_playbook(playbook_id: str, context: AppContext = Depends(get_context)):
    if not context.playbooks.delete_playbook(playbook_id):
        raise HTTPException(status_code=404, detail="Custom playbook not found")
    return SuccessResponse(message=f"Deleted playbook {playbook_id}")
