# symptom_chat/api/chat.py
from typing import AsyncIterator, List

from fastapi import APIRouter, Depends, Query
from fastapi.responses import HTMLResponse, JSONResponse

from symptom_chat.db.session import SessionLocal
from symptom_chat.runtime.flow import make_symptom_flow
from symptom_chat.schemas.chat import (
    ChatIn,
    ChatOut,
    MessageRecord,
    ResetOut,
    SymptomCheckIn,
    SymptomCheckOut,
)
from symptom_chat.services.ollama_client import OllamaClient
from symptom_chat.services.repo import Repo
from symptom_chat.services.report import build_report
from symptom_chat.services.session_store import SessionStore
from symptom_chat.services.tags import extract_symptom_tags
from symptom_chat.services.turns import handle_turn
from symptom_chat.settings import Settings, load_settings

router = APIRouter(tags=["chat"])


# ---------------------------
# Dependencies
# ---------------------------

def get_settings() -> Settings:
    return load_settings()


def get_repo() -> Repo:
    return Repo(SessionLocal)


async def get_model_client(settings: Settings = Depends(get_settings)) -> AsyncIterator[OllamaClient]:
    client = OllamaClient(
        base_url=settings.ollama_base_url,
        model=settings.ollama_model,
        timeout=settings.ollama_timeout,
        max_retries=settings.ollama_max_retries,
    )
    try:
        yield client
    finally:
        await client.aclose()


async def _load_store(repo: Repo, settings: Settings, session_id: str) -> SessionStore:
    store = SessionStore(repo, settings.session_key(session_id))
    await store.load()
    return store


# ---------------------------
# Stateless turn
# ---------------------------

@router.post("/api/symptom-checker", response_model=SymptomCheckOut, response_model_exclude_none=True)
async def symptom_checker(
    payload: SymptomCheckIn,
    client: OllamaClient = Depends(get_model_client),
):
    """Single turn with caller-held history; no server-side session."""
    result = await handle_turn(payload.message, payload.history, client=client)
    if "error" in result:
        return JSONResponse(result, status_code=500)
    return SymptomCheckOut(**result)


# ---------------------------
# Session-backed chat
# ---------------------------

@router.get("/api/chat/history", response_model=List[MessageRecord], response_model_exclude_none=True)
async def get_chat_history(
    session_id: str = Query(...),
    repo: Repo = Depends(get_repo),
    settings: Settings = Depends(get_settings),
):
    """Return the persisted session as compact records."""
    store = await _load_store(repo, settings, session_id)
    return [MessageRecord(**r) for r in store.records()]


@router.post("/api/chat", response_model=ChatOut, response_model_exclude_none=True)
async def chat_endpoint(
    payload: ChatIn,
    repo: Repo = Depends(get_repo),
    settings: Settings = Depends(get_settings),
    client: OllamaClient = Depends(get_model_client),
):
    """
    Handle a chat message from frontend:
    1. Load the session
    2. Run flow (context + model + normalize + persist)
    3. Return the canonical assistant message
    """
    store = await _load_store(repo, settings, payload.session_id)
    flow = make_symptom_flow(context_limit=settings.context_limit)
    shared = {
        "store": store,
        "user_text": payload.message,
        "model_client": client,
    }

    await flow.run_async(shared)

    return ChatOut(
        message=MessageRecord(**shared["assistant_message"].to_record()),
        tags=extract_symptom_tags(payload.message),
        persisted=shared.get("persisted", False),
        degraded=shared.get("upstream_failed", False),
    )


@router.delete("/api/chat", response_model=ResetOut)
async def new_chat(
    session_id: str = Query(...),
    repo: Repo = Depends(get_repo),
    settings: Settings = Depends(get_settings),
):
    """Start over: clear the session and its persisted mirror."""
    store = SessionStore(repo, settings.session_key(session_id))
    result = await store.reset()
    return ResetOut(ok=result.ok)


@router.get("/api/chat/report", response_class=HTMLResponse)
async def chat_report(
    session_id: str = Query(...),
    repo: Repo = Depends(get_repo),
    settings: Settings = Depends(get_settings),
):
    """Printable summary of the latest assistant answer."""
    store = await _load_store(repo, settings, session_id)
    return HTMLResponse(build_report(store.last_assistant()))
