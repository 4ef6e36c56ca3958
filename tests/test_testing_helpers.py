"""Tests for switchyard.testing — mock_request and TestClient."""

from switchyard.http.forms import FORM_URLENCODED
from switchyard.routing.route import delete, get, head, post, put
from switchyard.routing.router import define_routes
from switchyard.testing import TestClient, mock_request


class TestMockRequest:
    def test_splits_query(self) -> None:
        request = mock_request("get", "/search?q=x")
        assert request.method == "GET"
        assert request.uri == "/search"
        assert request.query_string == "q=x"

    def test_params_appended(self) -> None:
        request = mock_request("GET", "/s?a=1", params={"b": ["2", "3"]})
        assert request.query_string == "a=1&b=2&b=3"

    def test_form(self) -> None:
        request = mock_request("POST", "/", form={"name": "alice"})
        assert request.body == b"name=alice"
        assert request.content_type == FORM_URLENCODED
        assert request.content_length == len(b"name=alice")

    def test_string_body(self) -> None:
        assert mock_request("POST", "/", body="hé").body == "hé".encode()

    def test_headers_case_insensitive(self) -> None:
        request = mock_request("GET", "/", headers={"X-Token": "t"})
        assert request.headers["x-token"] == "t"

    def test_extra_fields(self) -> None:
        request = mock_request("GET", "/a/b", path_info="/b", context="/a")
        assert request.path == "/b"
        assert request.context == "/a"

    def test_empty_uri(self) -> None:
        assert mock_request("GET", "?q=1").uri == "/"


class TestTestClient:
    def client(self) -> TestClient:
        return TestClient(
            define_routes(
                "site",
                get("/hello/:name", ["name"], lambda name: "Hi " + name),
                post("/items", "req", lambda req: f"created {req.body.decode()}"),
                put("/items/:id", ["id"], lambda id: f"put {id}"),
                delete("/items/:id", ["id"], lambda id: f"deleted {id}"),
                head("/ping", None, lambda: "pong"),
            )
        )

    def test_get(self) -> None:
        response = self.client().get("/hello/Bob")
        assert response.status == 200
        assert response.text == "Hi Bob"

    def test_not_found(self) -> None:
        assert self.client().get("/missing").status == 404

    def test_head_on_get_route(self) -> None:
        response = self.client().head("/hello/Bob")
        assert response.status == 200
        assert response.body == ""

    def test_head_route(self) -> None:
        assert self.client().head("/ping").text == "pong"

    def test_post_body(self) -> None:
        assert self.client().post("/items", body="x").text == "created x"

    def test_put_and_delete(self) -> None:
        assert self.client().put("/items/3").text == "put 3"
        assert self.client().delete("/items/3").text == "deleted 3"

    def test_method_mismatch_is_404(self) -> None:
        assert self.client().delete("/hello/Bob").status == 404
