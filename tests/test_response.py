"""Tests for switchyard.http.response — Response and Redirect."""

import dataclasses

import pytest

from switchyard.http.cookies import SetCookie
from switchyard.http.response import Redirect, Response
from switchyard.middleware.sessions import SessionConfig


@pytest.fixture
def json_response() -> Response:
    return Response('{"id": 42}', status=201, content_type="application/json")


class TestResponse:
    def test_defaults(self) -> None:
        response = Response()
        assert (response.status, response.body) == (200, "")
        assert response.content_type == "text/html; charset=utf-8"
        assert response.headers == ()
        assert response.cookies == ()

    def test_frozen(self, json_response: Response) -> None:
        with pytest.raises(dataclasses.FrozenInstanceError):
            json_response.status = 500  # type: ignore[misc]

    def test_chaining_leaves_original_untouched(self, json_response: Response) -> None:
        moved = json_response.with_status(303).with_header("Location", "/users/42")
        assert json_response.status == 201
        assert json_response.headers == ()
        assert moved.status == 303
        assert moved.content_type == "application/json"

    def test_with_headers_from_mapping(self) -> None:
        response = Response().with_header("A", "1").with_headers({"B": "2", "C": "3"})
        assert response.headers == (("A", "1"), ("B", "2"), ("C", "3"))

    def test_with_headers_from_pairs(self) -> None:
        response = Response().with_headers((("Vary", "Cookie"), ("Vary", "Accept")))
        assert response.headers == (("Vary", "Cookie"), ("Vary", "Accept"))

    def test_with_cookie_from_session_config(self) -> None:
        cookie = SessionConfig(secret_key="k", max_age=60).cookie("signed")
        response = Response("ok").with_cookie(cookie)
        assert response.cookies == (cookie,)
        assert response.cookies[0].to_header_value().startswith("switchyard_session=signed;")

    def test_cookies_accumulate(self) -> None:
        response = Response().with_cookie(SetCookie("a", "1")).with_cookie(SetCookie("b", "2"))
        assert [c.name for c in response.cookies] == ["a", "b"]

    def test_header_lookup_is_case_insensitive(self) -> None:
        response = Response().with_header("Location", "/x").with_header("location", "/y")
        assert response.header("LOCATION") == "/x"
        assert response.header("missing") is None


class TestWithoutBody:
    def test_keeps_status_headers_and_cookies(self, json_response: Response) -> None:
        response = json_response.with_header("ETag", '"v1"').with_cookie(SetCookie("a", "1"))
        cleared = response.without_body()
        assert cleared.body == ""
        assert cleared.status == 201
        assert cleared.content_type == "application/json"
        assert cleared.header("ETag") == '"v1"'
        assert cleared.cookies == response.cookies

    def test_keeps_bytes_type(self) -> None:
        assert Response(b"\x00\x01").without_body().body == b""


class TestBodyAccess:
    @pytest.mark.parametrize("body", ["naïve", "naïve".encode()])
    def test_bytes_and_text_agree(self, body: str | bytes) -> None:
        response = Response(body)
        assert response.body_bytes == "naïve".encode()
        assert response.text == "naïve"


class TestRedirect:
    def test_defaults(self) -> None:
        redirect = Redirect("/login")
        assert (redirect.url, redirect.status, redirect.headers) == ("/login", 302, ())

    def test_permanent(self) -> None:
        assert Redirect("/new", status=301).status == 301
