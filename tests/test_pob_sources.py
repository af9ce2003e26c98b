import pathlib
import sys

import pytest
import requests

PROJECT_ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from poe_build_analyzer.errors import PasteFetchError
from poe_build_analyzer.models import CharacterInfo, NormalizedBuild
from poe_build_analyzer.pob import encode_build
from poe_build_analyzer.pob.sources import (
    HEADERS,
    REQUEST_TIMEOUT,
    fetch_build_code,
    fetch_party_build,
    load_build,
    raw_paste_url,
)


class FakeResponse:
    def __init__(self, text: str = "", status_code: int = 200, payload=None) -> None:
        self.text = text
        self.status_code = status_code
        self._payload = payload

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Client Error")

    def json(self):
        if self._payload is None:
            raise ValueError("No JSON object could be decoded")
        return self._payload


class FakeSession:
    def __init__(self, response=None, error=None) -> None:
        self.response = response
        self.error = error
        self.urls = []

    def get(self, url, headers=None, timeout=None):
        self.urls.append(url)
        if self.error is not None:
            raise self.error
        return self.response


@pytest.mark.parametrize(
    "url, expected",
    [
        ("https://pastebin.com/AbCd1234", "https://pastebin.com/raw/AbCd1234"),
        ("https://pastebin.com/raw/AbCd1234", "https://pastebin.com/raw/AbCd1234"),
        ("https://www.pastebin.com/AbCd1234/", "https://pastebin.com/raw/AbCd1234"),
        ("https://pobb.in/xyz987", "https://pobb.in/xyz987/raw"),
        ("  https://pobb.in/xyz987/raw ", "https://pobb.in/xyz987/raw"),
        ("https://example.com/builds/code.txt", "https://example.com/builds/code.txt"),
    ],
)
def test_raw_paste_url(url: str, expected: str) -> None:
    assert raw_paste_url(url) == expected


def test_raw_paste_url_rejects_other_schemes() -> None:
    with pytest.raises(ValueError):
        raw_paste_url("ftp://pastebin.com/AbCd1234")


def test_fetch_build_code_strips_whitespace() -> None:
    session = FakeSession(FakeResponse(text="\n eJxLTEoGAAJNASc= \n"))

    assert fetch_build_code("https://pastebin.com/AbCd1234", session=session) == "eJxLTEoGAAJNASc="
    assert session.urls == ["https://pastebin.com/raw/AbCd1234"]


@pytest.mark.parametrize(
    "session",
    [
        FakeSession(error=requests.ConnectionError("connection refused")),
        FakeSession(FakeResponse(status_code=404)),
        FakeSession(FakeResponse(text="   ")),
    ],
)
def test_fetch_build_code_failures(session: FakeSession) -> None:
    with pytest.raises(PasteFetchError):
        fetch_build_code("https://pobb.in/xyz987", session=session)


def test_load_build_fetches_and_decodes_urls() -> None:
    build = NormalizedBuild(character=CharacterInfo(class_name="Duelist", ascendancy="Slayer", level="85"))
    session = FakeSession(FakeResponse(text=encode_build(build)))

    assert load_build("https://pobb.in/xyz987", session=session) == build
    assert load_build(encode_build(build, algorithm="zstd")) == build


def test_fetch_party_build_converts_payload() -> None:
    payload = {"build": {"class": "Templar", "level": 70, "skills": [], "items": []}}
    session = FakeSession(FakeResponse(payload=payload))

    build = fetch_party_build("https://pob.party/share/FNSGYXu2QUgG/", session=session)

    assert session.urls == ["https://pob.party/api/v2/pastebin/FNSGYXu2QUgG"]
    assert build.character.class_name == "Templar"
    assert build.character.level == "70"


def test_fetch_party_build_rejects_non_json() -> None:
    session = FakeSession(FakeResponse(text="<html>"))

    with pytest.raises(PasteFetchError):
        fetch_party_build("FNSGYXu2QUgG", session=session)


def test_fetch_without_session_uses_module_level_get(monkeypatch: pytest.MonkeyPatch) -> None:
    build = NormalizedBuild(character=CharacterInfo(class_name="Shadow", level="12"))
    calls = []

    def fake_get(url, headers=None, timeout=None):
        calls.append((url, headers, timeout))
        return FakeResponse(text=encode_build(build))

    def no_session(*args, **kwargs):
        raise AssertionError("a Session should not be opened")

    monkeypatch.setattr(requests, "get", fake_get)
    monkeypatch.setattr(requests, "Session", no_session)

    assert load_build("https://pastebin.com/AbCd1234") == build
    assert calls == [("https://pastebin.com/raw/AbCd1234", HEADERS, REQUEST_TIMEOUT)]
