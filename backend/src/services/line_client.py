"""LINE Messaging API client: reply messages and message content download."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import requests

from config import Configuration

REPLY_PATH = "/v2/bot/message/reply"
CONTENT_PATH = "/v2/bot/message/{message_id}/content"
MAX_REPLY_MESSAGES = 5


class ReplySendFailure(RuntimeError):
    pass


class ContentFetchFailure(RuntimeError):
    pass


class LineMessagingClient:
    def __init__(self, cfg: Configuration, session: Optional[requests.Session] = None) -> None:
        self.cfg = cfg
        self.session = session or requests.Session()

    def _headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self.cfg.line_channel_access_token}"}

    def reply_message(self, reply_token: str, messages: List[Dict[str, Any]]) -> None:
        if not reply_token:
            raise ReplySendFailure("reply token is empty")
        if not messages:
            raise ReplySendFailure("nothing to send")
        if len(messages) > MAX_REPLY_MESSAGES:
            raise ReplySendFailure(f"at most {MAX_REPLY_MESSAGES} messages per reply")

        url = f"{self.cfg.line_api_base_url.rstrip('/')}{REPLY_PATH}"
        try:
            resp = self.session.post(
                url,
                json={"replyToken": reply_token, "messages": messages},
                headers={**self._headers(), "Content-Type": "application/json"},
                timeout=self.cfg.http_timeout,
            )
        except requests.RequestException as exc:
            raise ReplySendFailure(f"request error: {exc}") from exc

        if not resp.ok:
            raise ReplySendFailure(f"LINE reply {resp.status_code}: {resp.text[:300]}")

    def get_message_content(self, message_id: str) -> bytes:
        path = CONTENT_PATH.format(message_id=message_id)
        url = f"{self.cfg.line_data_base_url.rstrip('/')}{path}"
        try:
            resp = self.session.get(url, headers=self._headers(), timeout=self.cfg.http_timeout)
        except requests.RequestException as exc:
            raise ContentFetchFailure(f"request error: {exc}") from exc

        if not resp.ok:
            raise ContentFetchFailure(f"LINE content {resp.status_code}")
        return resp.content
