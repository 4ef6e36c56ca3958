"""Tests for session middleware — signed cookie sessions."""

import pytest
from itsdangerous import URLSafeTimedSerializer

from switchyard.errors import ConfigurationError
from switchyard.http.response import Response
from switchyard.middleware.compose import wrap
from switchyard.middleware.sessions import SessionConfig, get_session, wrap_session
from switchyard.routing.route import get
from switchyard.routing.router import define_routes
from switchyard.testing import TestClient, mock_request


def cookie_value(response: Response, name: str = "switchyard_session") -> str:
    for cookie in response.cookies:
        if cookie.name == name:
            return cookie.value
    raise AssertionError(f"no {name} cookie set")


def counter_routes():
    def visit():
        session = get_session()
        session["visits"] = session.get("visits", 0) + 1
        return f"visits={session['visits']}"

    return define_routes(
        "counter",
        get("/visit", None, visit),
        get("/peek", "req", lambda req: f"name={req.session.get('name', 'none')}"),
        get("/skip", None, lambda: None),
    )


class TestSessionConfig:
    def test_default_config(self) -> None:
        config = SessionConfig(secret_key="secret")
        assert config.cookie_name == "switchyard_session"
        assert config.max_age == 86400
        assert config.httponly is True
        assert config.samesite == "lax"

    def test_empty_secret_key_raises(self) -> None:
        with pytest.raises(ConfigurationError, match="secret_key must not be empty"):
            wrap_session(lambda request: None)

    def test_config_object(self) -> None:
        handler = wrap_session(
            lambda request: Response("x"),
            config=SessionConfig(secret_key="k", cookie_name="sid", secure=True),
        )
        response = handler(mock_request("GET", "/"))
        (cookie,) = response.cookies
        assert cookie.name == "sid"
        assert cookie.secure is True

    def test_keyword_options(self) -> None:
        handler = wrap_session(lambda request: Response("x"), "k", cookie_name="sid")
        assert handler(mock_request("GET", "/")).cookies[0].name == "sid"


class TestGetSession:
    def test_raises_outside_request(self) -> None:
        with pytest.raises(LookupError, match="No active session"):
            get_session()

    def test_reset_after_handler(self) -> None:
        handler = wrap_session(lambda request: Response("x"), "k")
        handler(mock_request("GET", "/"))
        with pytest.raises(LookupError):
            get_session()

    def test_reset_after_exception(self) -> None:
        def boom(request):
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError):
            wrap_session(boom, "k")(mock_request("GET", "/"))
        with pytest.raises(LookupError):
            get_session()


class TestSessionRoundTrip:
    def test_new_session_is_empty(self) -> None:
        client = TestClient(wrap(counter_routes(), ("session", "test-secret")))
        assert client.get("/peek").text == "name=none"

    def test_counter_persists_through_cookie(self) -> None:
        client = TestClient(wrap(counter_routes(), ("session", "test-secret")))
        first = client.get("/visit")
        assert first.text == "visits=1"

        cookie = cookie_value(first)
        second = client.get("/visit", headers={"cookie": f"switchyard_session={cookie}"})
        assert second.text == "visits=2"

    def test_request_session_matches_get_session(self) -> None:
        serializer = URLSafeTimedSerializer("test-secret", salt="switchyard.session")
        cookie = serializer.dumps({"name": "alice"})
        client = TestClient(wrap(counter_routes(), ("session", "test-secret")))
        response = client.get("/peek", headers={"cookie": f"switchyard_session={cookie}"})
        assert response.text == "name=alice"

    def test_cookies_wrapper_is_used_when_present(self) -> None:
        serializer = URLSafeTimedSerializer("test-secret", salt="switchyard.session")
        cookies = {"switchyard_session": serializer.dumps({"name": "bob"})}
        request = mock_request("GET", "/peek", cookies=cookies)
        handler = wrap_session(counter_routes(), "test-secret")
        assert handler(request).text == "name=bob"

    def test_tampered_cookie_starts_fresh(self) -> None:
        client = TestClient(wrap(counter_routes(), ("session", "test-secret")))
        cookie = cookie_value(client.get("/visit")) + "tampered"
        response = client.get("/visit", headers={"cookie": f"switchyard_session={cookie}"})
        assert response.text == "visits=1"

    def test_other_secret_rejected(self) -> None:
        forged = URLSafeTimedSerializer("wrong", salt="switchyard.session").dumps({"visits": 41})
        client = TestClient(wrap(counter_routes(), ("session", "test-secret")))
        response = client.get("/visit", headers={"cookie": f"switchyard_session={forged}"})
        assert response.text == "visits=1"

    def test_absent_result_stays_absent(self) -> None:
        handler = wrap_session(counter_routes(), "test-secret")
        assert handler(mock_request("GET", "/skip")) is None

    def test_cookie_attributes(self) -> None:
        handler = wrap_session(counter_routes(), "test-secret", max_age=60, samesite="strict")
        (cookie,) = handler(mock_request("GET", "/visit")).cookies
        assert cookie.max_age == 60
        assert cookie.samesite == "strict"
        assert cookie.httponly is True
