from __future__ import annotations

from unittest.mock import MagicMock

import pytest
import requests

from helpers import fake_response, make_cfg
from services.photos import PhotoResolutionFailure, PhotoResolver


def _resolver(resp=None, exc=None):
    session = MagicMock()
    if exc is not None:
        session.get.side_effect = exc
    else:
        session.get.return_value = resp
    return PhotoResolver(make_cfg(), session=session), session


def test_resolve_reads_location_header() -> None:
    resp = fake_response(
        status_code=302,
        headers={"Location": "https://lh3.googleusercontent.com/p/photo=w400"},
        text="<html><a href='https://elsewhere.example/'>here</a></html>",
    )
    resolver, session = _resolver(resp)

    assert resolver.resolve("ref-1") == "https://lh3.googleusercontent.com/p/photo=w400"
    args, kwargs = session.get.call_args
    assert args[0] == "https://maps.googleapis.com/maps/api/place/photo"
    assert kwargs["params"] == {"maxwidth": 400, "photoreference": "ref-1", "key": "places-key"}
    assert kwargs["allow_redirects"] is False
    assert kwargs["timeout"] == 10.0
    resp.json.assert_not_called()


def test_relative_location_is_joined() -> None:
    resolver, _ = _resolver(fake_response(status_code=307, headers={"Location": "/img/1.jpg"}))
    assert resolver.resolve("ref") == "https://maps.googleapis.com/img/1.jpg"


def test_non_redirect_fails() -> None:
    resolver, _ = _resolver(fake_response(status_code=200, text="<a href='x'>x</a>"))
    with pytest.raises(PhotoResolutionFailure):
        resolver.resolve("ref")


def test_unparseable_location_fails() -> None:
    resolver, _ = _resolver(fake_response(status_code=302, headers={"Location": "https://[broken"}))
    with pytest.raises(PhotoResolutionFailure):
        resolver.resolve("ref")


def test_missing_location_fails() -> None:
    resolver, _ = _resolver(fake_response(status_code=302, headers={}))
    with pytest.raises(PhotoResolutionFailure):
        resolver.resolve("ref")


def test_network_error_fails() -> None:
    resolver, _ = _resolver(exc=requests.Timeout("slow"))
    with pytest.raises(PhotoResolutionFailure):
        resolver.resolve("ref")


def test_empty_reference_is_caller_error() -> None:
    resolver, session = _resolver(fake_response(status_code=302))
    with pytest.raises(ValueError):
        resolver.resolve("")
    session.get.assert_not_called()
