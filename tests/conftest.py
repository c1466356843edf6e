"""Shared fixtures: a scripted stand-in for requests.Session and test settings."""

import pytest
import requests

from ksense_assessment import config
from ksense_assessment.config import Settings

NOT_JSON = object()


class FakeResponse:
    def __init__(self, status_code=200, body=None, text=""):
        self.status_code = status_code
        self._body = body
        self.text = text

    def json(self):
        if self._body is NOT_JSON:
            raise ValueError("Expecting value: line 1 column 1 (char 0)")
        return self._body

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error", response=self)


def ok(records, has_next=None):
    body = {"data": records}
    if has_next is not None:
        body["pagination"] = {"hasNext": has_next}
    return FakeResponse(200, body)


def status(code, text=""):
    return FakeResponse(code, {"error": text}, text=text)


def patient(pid, bp="120/80", temp="98.6", age="40"):
    return {"patient_id": pid, "blood_pressure": bp, "temperature": temp, "age": age}


class FakeSession:
    """Replays scripted responses per page number.

    Each page maps to a list of responses (or exceptions to raise); the
    last entry repeats once the list runs out.
    """

    def __init__(self, pages=None, post=None):
        self.headers = {}
        self.pages = {k: list(v) for k, v in (pages or {}).items()}
        self.post_responses = list(post or [FakeResponse(200, {"status": "ok"})])
        self.get_calls = []
        self.post_calls = []

    def _next(self, queue):
        item = queue.pop(0) if len(queue) > 1 else queue[0]
        if isinstance(item, Exception):
            raise item
        return item

    def get(self, url, params=None, timeout=None):
        self.get_calls.append({"url": url, "params": dict(params or {}), "timeout": timeout})
        page = (params or {}).get("page")
        if page not in self.pages:
            return status(404, "no such page")
        return self._next(self.pages[page])

    def post(self, url, json=None, headers=None, timeout=None):
        self.post_calls.append({"url": url, "json": json, "headers": headers or {}, "timeout": timeout})
        return self._next(self.post_responses)

    def attempts(self, page):
        return sum(1 for c in self.get_calls if c["params"].get("page") == page)


class SleepRecorder:
    def __init__(self):
        self.delays = []

    def __call__(self, seconds):
        self.delays.append(seconds)


@pytest.fixture
def settings():
    return Settings(api_key="test-key", base_url="https://api.test")


@pytest.fixture
def sleeper():
    return SleepRecorder()


@pytest.fixture
def clean_env(monkeypatch):
    """No ambient API settings and no .env lookups."""
    for name in ("KSENSE_API_KEY", "API_KEY", "KSENSE_BASE_URL", "KSENSE_TOTAL_PAGES",
                 "KSENSE_PAGE_LIMIT", "KSENSE_DEDUPE"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(config, "load_dotenv", lambda *a, **k: False)
