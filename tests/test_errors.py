"""Tests for switchyard.errors — exception hierarchy and error messages."""

import pytest

from switchyard.errors import (
    BindingError,
    ConfigurationError,
    HTTPError,
    NotFound,
    RenderError,
    RoutePatternError,
    SwitchyardError,
)
from switchyard.routing.binding import parse_bindings
from switchyard.routing.route import get


class TestHierarchy:
    @pytest.mark.parametrize(
        "error",
        [ConfigurationError, RenderError, HTTPError, NotFound, BindingError, RoutePatternError],
    )
    def test_all_are_switchyard_errors(self, error: type) -> None:
        assert issubclass(error, SwitchyardError)

    def test_declaration_errors_are_configuration_errors(self) -> None:
        assert issubclass(BindingError, ConfigurationError)
        assert issubclass(RoutePatternError, ConfigurationError)

    def test_render_error_is_not_configuration_error(self) -> None:
        assert not issubclass(RenderError, ConfigurationError)

    def test_not_found_is_http_error(self) -> None:
        assert issubclass(NotFound, HTTPError)


class TestHTTPError:
    def test_status_and_detail(self) -> None:
        err = HTTPError(status=400, detail="Bad request body")
        assert err.status == 400
        assert err.detail == "Bad request body"

    def test_str_with_detail(self) -> None:
        assert str(HTTPError(status=400, detail="Bad request body")) == "400: Bad request body"

    def test_str_without_detail(self) -> None:
        assert str(HTTPError(status=500)) == "500"

    def test_headers(self) -> None:
        err = HTTPError(status=401, headers=(("WWW-Authenticate", "Basic"),))
        assert err.headers == (("WWW-Authenticate", "Basic"),)

    def test_raisable(self) -> None:
        with pytest.raises(HTTPError) as exc_info:
            raise HTTPError(status=418, detail="teapot")
        assert exc_info.value.status == 418

    def test_not_found(self) -> None:
        err = NotFound()
        assert err.status == 404
        assert err.detail == "Not Found"
        assert NotFound("gone").detail == "gone"


class TestFailFast:
    def test_invalid_binding_raised_before_any_request(self) -> None:
        with pytest.raises(BindingError, match="Unexpected binding"):
            get("/hello/:name", ["name", {"not": "a token"}], lambda name: name)

    def test_message_names_the_token(self) -> None:
        with pytest.raises(BindingError, match="42"):
            parse_bindings([42])
