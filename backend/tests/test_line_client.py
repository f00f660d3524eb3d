from __future__ import annotations

from unittest.mock import MagicMock

import pytest
import requests

from helpers import fake_response, make_cfg
from services.line_client import ContentFetchFailure, LineMessagingClient, ReplySendFailure


def test_reply_posts_token_and_messages() -> None:
    session = MagicMock()
    session.post.return_value = fake_response(json_data={})
    client = LineMessagingClient(make_cfg(), session=session)

    client.reply_message("token-1", [{"type": "text", "text": "hi"}])

    args, kwargs = session.post.call_args
    assert args[0] == "https://api.line.me/v2/bot/message/reply"
    assert kwargs["json"] == {"replyToken": "token-1", "messages": [{"type": "text", "text": "hi"}]}
    assert kwargs["headers"]["Authorization"] == "Bearer channel-token"
    assert kwargs["timeout"] == 10.0


def test_reply_http_error_raises() -> None:
    session = MagicMock()
    session.post.return_value = fake_response(status_code=400, text='{"message":"Invalid reply token"}')
    client = LineMessagingClient(make_cfg(), session=session)
    with pytest.raises(ReplySendFailure):
        client.reply_message("token-1", [{"type": "text", "text": "hi"}])


def test_reply_network_error_raises() -> None:
    session = MagicMock()
    session.post.side_effect = requests.ConnectionError("down")
    client = LineMessagingClient(make_cfg(), session=session)
    with pytest.raises(ReplySendFailure):
        client.reply_message("token-1", [{"type": "text", "text": "hi"}])


def test_reply_rejects_bad_input_without_calling_api() -> None:
    session = MagicMock()
    client = LineMessagingClient(make_cfg(), session=session)
    with pytest.raises(ReplySendFailure):
        client.reply_message("", [{"type": "text", "text": "hi"}])
    with pytest.raises(ReplySendFailure):
        client.reply_message("t", [])
    with pytest.raises(ReplySendFailure):
        client.reply_message("t", [{"type": "text", "text": str(i)} for i in range(6)])
    session.post.assert_not_called()


def test_get_message_content() -> None:
    session = MagicMock()
    session.get.return_value = fake_response(content=b"\x89PNG")
    client = LineMessagingClient(make_cfg(), session=session)

    assert client.get_message_content("m-1") == b"\x89PNG"
    args, kwargs = session.get.call_args
    assert args[0] == "https://api-data.line.me/v2/bot/message/m-1/content"
    assert kwargs["headers"]["Authorization"] == "Bearer channel-token"
    assert kwargs["timeout"] == 10.0


def test_get_message_content_error() -> None:
    session = MagicMock()
    session.get.return_value = fake_response(status_code=404)
    client = LineMessagingClient(make_cfg(), session=session)
    with pytest.raises(ContentFetchFailure):
        client.get_message_content("m-1")
