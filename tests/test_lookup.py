"""Tests for the dictionary lookup client (no network: the session is faked)."""

import pytest
import requests

from vocabenrich.lookup import LookupClient


class FakeResponse:
    def __init__(self, status_code=200, payload=None, body_error=None):
        self.status_code = status_code
        self.payload = payload
        self.body_error = body_error

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error")

    def json(self):
        if self.body_error is not None:
            raise self.body_error
        return self.payload


class FakeSession:
    def __init__(self, response=None, error=None):
        self.headers = {}
        self.response = response
        self.error = error
        self.requests = []
        self.closed = False

    def get(self, url, params=None, timeout=None):
        self.requests.append({"url": url, "params": params, "timeout": timeout})
        if self.error is not None:
            raise self.error
        return self.response

    def close(self):
        self.closed = True


class TestFetch:

    def test_success_returns_json(self):
        session = FakeSession(FakeResponse(payload={"translation": ["苹果"]}))
        client = LookupClient(endpoint="https://dict.example/api", timeout=3, session=session)

        assert client.fetch("apple") == {"translation": ["苹果"]}
        assert session.requests == [
            {"url": "https://dict.example/api", "params": {"q": "apple"}, "timeout": 3}
        ]

    def test_headword_passed_as_query_parameter(self):
        session = FakeSession(FakeResponse(payload={}))
        LookupClient(session=session).fetch("ice cream & co")
        assert session.requests[0]["params"] == {"q": "ice cream & co"}

    def test_query_is_url_encoded(self):
        prepared = requests.Request(
            "GET", "https://dict.example/api", params={"q": "ice cream & co"}
        ).prepare()
        assert prepared.url == "https://dict.example/api?q=ice+cream+%26+co"

    @pytest.mark.parametrize(
        "session",
        [
            FakeSession(error=requests.ConnectionError("unreachable")),
            FakeSession(error=requests.Timeout("slow")),
            FakeSession(FakeResponse(status_code=500)),
            FakeSession(FakeResponse(status_code=404)),
            FakeSession(FakeResponse(body_error=ValueError("not json"))),
        ],
    )
    def test_failures_return_none(self, session, caplog):
        client = LookupClient(session=session)
        assert client.fetch("apple") is None
        assert "apple" in caplog.text

    def test_user_agent_header(self):
        session = FakeSession()
        LookupClient(user_agent="Tester/1.0", session=session)
        assert session.headers["User-Agent"] == "Tester/1.0"
        assert session.headers["Accept"] == "application/json"


def test_context_manager_closes_session():
    session = FakeSession()
    with LookupClient(session=session) as client:
        assert client.session is session
    assert session.closed
