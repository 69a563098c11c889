"""Training session and WebSocket endpoints."""

import logging

from fastapi import HTTPException, WebSocket, WebSocketDisconnect, APIRouter

from config.settings import get_default_config
from web.coach_manager import CoachManager
from web.input_request import InputRequest
from web.reply_request import ReplyRequest
from web.session_response import SessionResponse
from web.session_setup_request import SessionSetupRequest
from web.speech_toggle_request import SpeechToggleRequest
from web.start_request import StartRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")
ws_router = APIRouter()


def setup_coach_manager() -> CoachManager:
    """Get or create the global coach manager."""
    # Import here to avoid circular imports
    from web import api

    if api.coach_manager is None:
        api.coach_manager = CoachManager(get_default_config())
    return api.coach_manager


@router.get("/session", response_model=SessionResponse)
async def get_session():
    """Get the current session, transcript and feedback."""
    return SessionResponse(**setup_coach_manager().snapshot())


@router.post("/session/configure", response_model=SessionResponse)
async def configure_session(setup: SessionSetupRequest):
    """Choose level, topic and number of rounds for the next session."""
    coach_manager = setup_coach_manager()
    try:
        accepted = coach_manager.coach.configure(
            setup.level, setup.topic, setup.max_rounds
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if accepted:
        await coach_manager.broadcast_state()
    return SessionResponse(**coach_manager.snapshot(accepted))


@router.post("/session/start", response_model=SessionResponse)
async def start_session(request: StartRequest | None = None):
    """Generate a proposition and open the first round."""
    coach_manager = setup_coach_manager()
    request = request or StartRequest()
    if request.level is not None and not request.level.strip():
        raise HTTPException(status_code=400, detail="Level cannot be empty")
    if request.topic is not None and not request.topic.strip():
        raise HTTPException(status_code=400, detail="Topic cannot be empty")

    accepted = await coach_manager.coach.start(request.level, request.topic)
    return SessionResponse(**coach_manager.snapshot(accepted))


@router.post("/session/submit", response_model=SessionResponse)
async def submit_reply(reply: ReplyRequest):
    """Submit a reply, or the pending input buffer when no text is given."""
    coach_manager = setup_coach_manager()
    if reply.text is None:
        accepted = await coach_manager.coach.submit_pending()
    else:
        accepted = await coach_manager.coach.submit(reply.text)
    return SessionResponse(**coach_manager.snapshot(accepted))


@router.put("/session/input", response_model=SessionResponse)
async def set_input(request: InputRequest):
    """Replace the pending input buffer with manually typed text."""
    coach_manager = setup_coach_manager()
    accepted = coach_manager.coach.set_input(request.text)
    return SessionResponse(**coach_manager.snapshot(accepted))


@router.post("/session/reset", response_model=SessionResponse)
async def reset_session():
    """Discard the session and return to idle."""
    coach_manager = setup_coach_manager()
    await coach_manager.coach.reset()
    return SessionResponse(**coach_manager.snapshot(True))


@router.put("/session/speech", response_model=SessionResponse)
async def toggle_speech(request: SpeechToggleRequest):
    """Turn reading coach messages aloud on or off."""
    coach_manager = setup_coach_manager()
    await coach_manager.playback.set_enabled(request.enabled)
    await coach_manager.broadcast_state()
    return SessionResponse(**coach_manager.snapshot(True))


@router.post("/session/listen/start", response_model=SessionResponse)
async def start_listening():
    """Open a listening session; manual input is locked until it ends."""
    coach_manager = setup_coach_manager()
    accepted = await coach_manager.speech_input.start_listening()
    if accepted:
        await coach_manager.broadcast_state()
    return SessionResponse(**coach_manager.snapshot(accepted))


@router.post("/session/listen/stop", response_model=SessionResponse)
async def stop_listening():
    """Close the listening session without a transcript."""
    coach_manager = setup_coach_manager()
    accepted = await coach_manager.speech_input.stop_listening()
    if accepted:
        await coach_manager.broadcast_state()
    return SessionResponse(**coach_manager.snapshot(accepted))


@router.post("/session/listen/transcript", response_model=SessionResponse)
async def post_transcript(request: InputRequest):
    """Deliver the browser's recognized speech to the active listening session."""
    coach_manager = setup_coach_manager()
    accepted = coach_manager.recognizer.deliver(request.text)
    if accepted:
        await coach_manager.broadcast_state()
    return SessionResponse(**coach_manager.snapshot(accepted))


@ws_router.websocket("/ws/session")
async def websocket_endpoint(websocket: WebSocket):
    """WebSocket endpoint for real-time session updates."""
    await websocket.accept()
    coach_manager = setup_coach_manager()
    coach_manager.add_connection(websocket)

    try:
        state = coach_manager.snapshot()
        state.pop("accepted")
        await websocket.send_json({"type": "connected", "session": state})

        # Keep connection alive
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        coach_manager.remove_connection(websocket)
