"""Tests for env parsing helpers."""

from __future__ import annotations

import pytest

from heart_osc.utilities.env.parsing import (_env_flag, _env_float,
                                             _env_int, _env_optional_str,
                                             _env_str)


class TestEnvParsingHelpers:
    """Group env parsing helper tests so configuration errors surface at startup."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [("true", True), ("  YES ", True), ("1", True), ("off", False), ("0", False)],
    )
    def test_env_flag_recognizes_truthy_tokens(
        self, monkeypatch: pytest.MonkeyPatch, value: str, expected: bool
    ) -> None:
        """Confirm _env_flag recognizes truthy tokens so switches like HEART_OSC_LOG_TO_FILE behave predictably."""
        monkeypatch.setenv("HEART_OSC_TEST_FLAG", value)

        assert _env_flag("HEART_OSC_TEST_FLAG") is expected

    def test_env_flag_returns_default_when_unset(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("HEART_OSC_TEST_FLAG", raising=False)

        assert _env_flag("HEART_OSC_TEST_FLAG", default=True) is True

    def test_env_str_strips_and_defaults_blank(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Confirm blank strings fall back to the default so an empty export does not clear the host."""
        monkeypatch.setenv("HEART_OSC_TEST_STR", "   ")
        assert _env_str("HEART_OSC_TEST_STR", default="fallback") == "fallback"

        monkeypatch.setenv("HEART_OSC_TEST_STR", " 10.0.0.5 ")
        assert _env_str("HEART_OSC_TEST_STR", default="fallback") == "10.0.0.5"

    def test_env_optional_str_returns_none_when_unset(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Check unset optional values stay None so callers can distinguish absence."""
        monkeypatch.delenv("HEART_OSC_TEST_OPTIONAL", raising=False)

        assert _env_optional_str("HEART_OSC_TEST_OPTIONAL") is None

    def test_env_int_enforces_bounds(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Verify _env_int rejects values outside its bounds so misconfiguration is surfaced early."""
        monkeypatch.setenv("HEART_OSC_TEST_INT", "0")
        with pytest.raises(ValueError, match="at least 1"):
            _env_int("HEART_OSC_TEST_INT", default=5, minimum=1)

        monkeypatch.setenv("HEART_OSC_TEST_INT", "70000")
        with pytest.raises(ValueError, match="at most 65535"):
            _env_int("HEART_OSC_TEST_INT", default=5, maximum=65535)

    def test_env_int_rejects_non_integers(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Ensure the variable name is reported when a value cannot be parsed."""
        monkeypatch.setenv("HEART_OSC_TEST_INT", "nine thousand")

        with pytest.raises(ValueError, match="HEART_OSC_TEST_INT must be an integer"):
            _env_int("HEART_OSC_TEST_INT", default=5)

    def test_env_float_enforces_minimum(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Confirm _env_float rejects negative delays."""
        monkeypatch.setenv("HEART_OSC_TEST_FLOAT", "-1")

        with pytest.raises(ValueError):
            _env_float("HEART_OSC_TEST_FLOAT", default=2.0, minimum=0.0)

    def test_env_float_parses_value(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("HEART_OSC_TEST_FLOAT", "0.25")

        assert _env_float("HEART_OSC_TEST_FLOAT", default=2.0) == 0.25
