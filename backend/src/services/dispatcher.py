from __future__ import annotations

import tempfile
from typing import Dict, Optional

from loguru import logger

from models import Event, LocationEvent, MediaEvent, OtherEvent, OutboundReply, TextEvent
from services.line_client import ContentFetchFailure, LineMessagingClient
from services.places import PlaceSearchClient, SearchFailure
from services.reply import ReplyComposer, apology_message, to_line_message

HUNGRY_PROMPT = "お腹が空いたんですね！位置情報を送ってくれたら、近くの評価の高いお店を探します🍴"
THANKS_REPLY = "どういたしまして！またお腹が空いたら呼んでください😊"
DEFAULT_PROMPT = "近くのおすすめのお店を探します。トーク画面の「＋」から位置情報を送ってください📍"

# Exact-match table. Every synonym is its own key.
CANNED_REPLIES: Dict[str, str] = {
    "腹減った": HUNGRY_PROMPT,
    "お腹すいた": HUNGRY_PROMPT,
    "おなかすいた": HUNGRY_PROMPT,
    "はらへった": HUNGRY_PROMPT,
    "腹ペコ": HUNGRY_PROMPT,
    "ありがとう": THANKS_REPLY,
}


def canned_reply(text: str) -> str:
    return CANNED_REPLIES.get(text.strip(), DEFAULT_PROMPT)


class EventDispatcher:
    """Routes one parsed LINE event to its handler.

    Holds no state between events; every collaborator is passed in.
    """

    def __init__(
        self,
        places: PlaceSearchClient,
        composer: ReplyComposer,
        line: LineMessagingClient,
    ) -> None:
        self.places = places
        self.composer = composer
        self.line = line

    def dispatch(self, event: Event) -> Optional[OutboundReply]:
        if isinstance(event, MediaEvent):
            self._store_media(event)
            return None
        if isinstance(event, OtherEvent):
            logger.debug("ignoring event type={}", event.type)
            return None
        if not isinstance(event, (TextEvent, LocationEvent)):
            raise TypeError(f"unsupported event: {event!r}")

        # Replies need a token, so skip the work when there is none.
        if not event.reply_token:
            logger.debug("{} has no reply token, nothing to answer", type(event).__name__)
            return None

        if isinstance(event, TextEvent):
            messages = [{"type": "text", "text": canned_reply(event.text)}]
        else:
            messages = [self._recommend(event)]
        return OutboundReply(reply_token=event.reply_token, messages=messages)

    def _store_media(self, event: MediaEvent) -> None:
        try:
            content = self.line.get_message_content(event.message_id)
        except ContentFetchFailure as exc:
            logger.warning("could not fetch {} content {}: {}", event.media_type, event.message_id, exc)
            return
        with tempfile.NamedTemporaryFile(prefix="content-") as tf:
            tf.write(content)
            tf.flush()
            logger.info("stored {} {} ({} bytes) at {}", event.media_type, event.message_id, len(content), tf.name)

    def _recommend(self, event: LocationEvent) -> dict:
        try:
            ranked = self.places.search(event.coordinates)
        except SearchFailure as exc:
            logger.warning("place search failed at {}: {}", event.coordinates.as_query(), exc)
            return apology_message()

        payload = self.composer.compose(ranked)
        if not payload.columns:
            logger.info("no venues near {}", event.coordinates.as_query())
            return apology_message()

        logger.info(
            "recommending {} venues near {} ({})",
            len(payload.columns),
            event.coordinates.as_query(),
            event.address or "no address",
        )
        return to_line_message(payload)
