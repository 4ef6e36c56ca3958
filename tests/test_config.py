"""Tests for switchyard.config — AppConfig defaults and immutability."""

import pytest

from switchyard.config import DEFAULT_CONFIG, AppConfig


class TestAppConfig:
    def test_defaults(self) -> None:
        config = AppConfig()
        assert config.debug is False
        assert config.method_override_field == "_method"
        assert config.head_as_get is True
        assert config.max_content_length == 16 * 1024 * 1024

    def test_override(self) -> None:
        config = AppConfig(debug=True, method_override_field="_verb")
        assert config.debug is True
        assert config.method_override_field == "_verb"

    def test_frozen(self) -> None:
        with pytest.raises(AttributeError):
            DEFAULT_CONFIG.debug = True  # type: ignore[misc]

    def test_default_instance(self) -> None:
        assert DEFAULT_CONFIG == AppConfig()
