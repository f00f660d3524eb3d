from __future__ import annotations

import asyncio
from typing import List

from dotenv import load_dotenv
from fastapi import Depends, FastAPI, HTTPException, Request
from loguru import logger

from config import Configuration
from models import Coordinates, Event
from services.dispatcher import EventDispatcher
from services.line_client import LineMessagingClient, ReplySendFailure
from services.line_webhook import MalformedWebhook, SignatureInvalid, parse_events, validate_signature
from services.photos import PhotoResolver
from services.places import PlaceSearchClient, SearchFailure
from services.reply import ReplyComposer

load_dotenv()

# Tokyo Station, used only to check the places API.
HEALTH_CHECK_POINT = Coordinates(lat=35.681236, lon=139.767125)

app = FastAPI(title="LINE Restaurant Bot")


def get_configuration() -> Configuration:
    return Configuration.from_env()


def get_line_client(cfg: Configuration = Depends(get_configuration)) -> LineMessagingClient:
    return LineMessagingClient(cfg)


def get_dispatcher(
    cfg: Configuration = Depends(get_configuration),
    line: LineMessagingClient = Depends(get_line_client),
) -> EventDispatcher:
    places = PlaceSearchClient(cfg)
    composer = ReplyComposer(cfg, PhotoResolver(cfg))
    return EventDispatcher(places=places, composer=composer, line=line)


def handle_events(events: List[Event], dispatcher: EventDispatcher, line: LineMessagingClient) -> int:
    """Dispatch every event and send its reply. Returns the number of replies sent."""
    sent = 0
    for event in events:
        try:
            reply = dispatcher.dispatch(event)
        except Exception as exc:
            logger.exception("dispatch failed for {}: {}", type(event).__name__, exc)
            continue
        if reply is None:
            continue
        try:
            line.reply_message(reply.reply_token, reply.messages)
        except ReplySendFailure as exc:
            logger.exception("reply send failed: {}", exc)
            continue
        sent += 1
    return sent


@app.get("/healthz")
def healthz() -> dict:
    cfg = Configuration.from_env()
    logger.info("cfg: {}", cfg.log_summary())
    return {"status": "ok"}


@app.get("/health/places")
def health_places() -> dict:
    cfg = Configuration.from_env()
    try:
        cfg.require_places()
        PlaceSearchClient(cfg).search(HEALTH_CHECK_POINT)
        ok = True
    except (ValueError, SearchFailure) as exc:
        logger.warning("places health check failed: {}", exc)
        ok = False
    return {"ok": ok}


@app.post("/callback")
async def callback(
    request: Request,
    cfg: Configuration = Depends(get_configuration),
    dispatcher: EventDispatcher = Depends(get_dispatcher),
    line: LineMessagingClient = Depends(get_line_client),
) -> dict:
    try:
        cfg.require_line()
    except ValueError as exc:
        logger.error("webhook rejected, bot not configured: {}", exc)
        raise HTTPException(status_code=500, detail="bot not configured")

    body = await request.body()
    signature = request.headers.get("X-Line-Signature")
    try:
        validate_signature(body, signature, cfg.line_channel_secret)
        events = parse_events(body)
    except SignatureInvalid as exc:
        logger.warning("rejected webhook: {}", exc)
        raise HTTPException(status_code=400, detail="invalid signature")
    except MalformedWebhook as exc:
        logger.warning("rejected webhook: {}", exc)
        raise HTTPException(status_code=400, detail="malformed body")

    sent = await asyncio.to_thread(handle_events, events, dispatcher, line)
    logger.info("handled {} events, sent {} replies", len(events), sent)
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host="0.0.0.0", port=8010, reload=True)
