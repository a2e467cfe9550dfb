import logging
from typing import Any

from fastapi import FastAPI, HTTPException, Response, WebSocket
from pydantic import BaseModel, Field

from app import event_bus
from app.config import config
from app.errors import EncodingFailure, ImageNotYetAvailable, NoteNotFound, VersionConflict
from app.hw.screen import ScreenGrabber
from app.messages import TOPIC_IMAGE, TOPIC_POINTER
from app.nodes.pointer import PointerNode
from app.nodes.screencast import ScreenCastNode
from app.notes import MAX_TEXT_LENGTH, NoteRepository
from app.settings import SettingsService

logger = logging.getLogger(__name__)

app = FastAPI(title="screencaster")

settings_service = SettingsService(cast_enabled=config.screencast.auto_start)

screencast_node = ScreenCastNode(
    ScreenGrabber(),
    settings_service,
    event_bus,
    screen_no=config.grabbing.screen_no,
    quality=config.grabbing.quality,
    pause_text=config.screencast.pause_text,
    interval_s=config.screencast.refresh_interval_s,
)
pointer_node = PointerNode(event_bus, interval_s=config.screencast.refresh_pointer_s)

note_repository = NoteRepository(config.notes.database_path)


@app.on_event("startup")
async def on_startup() -> None:
    await screencast_node.start()
    await pointer_node.start()


@app.on_event("shutdown")
async def on_shutdown() -> None:
    await screencast_node.stop()
    await pointer_node.stop()
    await event_bus.close()
    note_repository.close()


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/api/config")
async def get_config() -> dict[str, Any]:
    """Получить конфигурацию для фронтенда"""
    return {
        "screencast": {
            "refresh_interval_ms": config.screencast.refresh_interval_ms,
            "refresh_pointer_ms": config.screencast.refresh_pointer_ms,
        },
        "grabbing": {
            "screen_no": config.grabbing.screen_no,
            "quality": config.grabbing.quality,
        },
    }


@app.get("/screenshot.jpg")
def screenshot() -> Response:
    try:
        data = screencast_node.latest_image_bytes()
    except ImageNotYetAvailable as exc:
        raise HTTPException(status_code=503, detail=str(exc)) from exc
    except EncodingFailure as exc:
        logger.error("Failed to serve screenshot: %s", exc)
        raise HTTPException(status_code=500, detail=str(exc)) from exc
    return Response(content=data, media_type="image/jpeg", headers={"Cache-Control": "no-store"})


class CastSettings(BaseModel):
    cast_enabled: bool


@app.get("/api/settings")
async def get_settings() -> CastSettings:
    return CastSettings(cast_enabled=settings_service.is_cast_enabled())


@app.put("/api/settings")
async def put_settings(body: CastSettings) -> CastSettings:
    settings_service.set_cast_enabled(body.cast_enabled)
    return CastSettings(cast_enabled=settings_service.is_cast_enabled())


@app.get("/api/pointer", response_model=None)
async def get_pointer() -> dict[str, int] | Response:
    location = pointer_node.current_location()
    if location is None:
        return Response(status_code=204)
    return location.to_payload()


@app.websocket("/ws/events")
async def ws_events(ws: WebSocket) -> None:
    await ws.accept()

    async def forward_pointer(message: Any) -> None:
        await ws.send_json({"topic": TOPIC_POINTER, "payload": message.to_payload()})

    async def forward_image(message: Any) -> None:
        await ws.send_json({"topic": TOPIC_IMAGE, "payload": message.to_payload()})

    await event_bus.subscribe(TOPIC_POINTER, forward_pointer)
    await event_bus.subscribe(TOPIC_IMAGE, forward_image)
    try:
        # Клиент ничего не присылает (текст или бинарные кадры игнорируем), ждём отключения
        while True:
            message = await ws.receive()
            if message["type"] == "websocket.disconnect":
                logger.info("Event subscriber disconnected")
                break
    finally:
        await event_bus.unsubscribe(TOPIC_POINTER, forward_pointer)
        await event_bus.unsubscribe(TOPIC_IMAGE, forward_image)


class NoteIn(BaseModel):
    text: str = Field(..., min_length=1, max_length=MAX_TEXT_LENGTH)


class NoteUpdate(NoteIn):
    version: int = Field(..., ge=0)


@app.post("/api/notes", status_code=201)
def create_note(body: NoteIn) -> dict[str, Any]:
    try:
        note = note_repository.create(body.text)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return note.to_dict()


@app.get("/api/notes")
def list_notes() -> list[dict[str, Any]]:
    return [note.to_dict() for note in note_repository.list()]


@app.get("/api/notes/{note_id}")
def get_note(note_id: int) -> dict[str, Any]:
    try:
        return note_repository.get(note_id).to_dict()
    except NoteNotFound as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc


@app.put("/api/notes/{note_id}")
def update_note(note_id: int, body: NoteUpdate) -> dict[str, Any]:
    try:
        note = note_repository.update(note_id, body.text, body.version)
    except NoteNotFound as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except VersionConflict as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return note.to_dict()
