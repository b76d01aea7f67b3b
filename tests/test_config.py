"""Tests for environment configuration and check loading."""

from __future__ import annotations

import os.path

import pytest

from healthili.config import ServiceSettings, load_check


def test_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in list(os.environ):
        if key.startswith("HEALTHILI_"):
            monkeypatch.delenv(key)

    settings = ServiceSettings()

    assert settings.port == 3000
    assert settings.path == "/health"
    assert settings.timeout_ms is None
    assert settings.hide_error is False
    assert settings.service_id is None
    assert settings.check is None
    assert settings.log_level == "info"
    assert settings.log_service == "healthili"


def test_reads_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("HEALTHILI_HOST", "127.0.0.1")
    monkeypatch.setenv("HEALTHILI_PORT", "8081")
    monkeypatch.setenv("HEALTHILI_PATH", "ready")
    monkeypatch.setenv("HEALTHILI_TIMEOUT_MS", "250")
    monkeypatch.setenv("HEALTHILI_HIDE_ERROR", "true")
    monkeypatch.setenv("HEALTHILI_SERVICE_ID", "billing")
    monkeypatch.setenv("HEALTHILI_VERSION", "2")
    monkeypatch.setenv("HEALTHILI_RELEASE_ID", "2.0.1")
    monkeypatch.setenv("HEALTHILI_DESCRIPTION", "")

    endpoint_settings = ServiceSettings().to_endpoint_settings()

    assert endpoint_settings.host == "127.0.0.1"
    assert endpoint_settings.port == 8081
    assert endpoint_settings.path == "/ready"
    assert endpoint_settings.timeout == 250
    assert endpoint_settings.hide_error is True
    assert endpoint_settings.service_id == "billing"
    assert endpoint_settings.version == "2"
    assert endpoint_settings.release_id == "2.0.1"
    assert endpoint_settings.description is None


@pytest.mark.parametrize(("value", "expected"), [("1", True), ("YES", True), ("on", True), ("0", False), ("no", False)])
def test_hide_error_flag(monkeypatch: pytest.MonkeyPatch, value: str, expected: bool) -> None:
    monkeypatch.setenv("HEALTHILI_HIDE_ERROR", value)

    assert ServiceSettings().hide_error is expected


def test_load_check_default_always_passes() -> None:
    assert load_check(None)() == "pass"
    assert load_check("")() == "pass"


def test_load_check_resolves_import_path() -> None:
    assert load_check("os.path:isdir") is os.path.isdir


def test_load_check_resolves_nested_attribute() -> None:
    assert load_check("os:path.isdir") is os.path.isdir


@pytest.mark.parametrize("import_path", ["os.path", ":isdir", "os.path:"])
def test_load_check_rejects_malformed_import_path(import_path: str) -> None:
    with pytest.raises(ValueError, match="module:attribute"):
        load_check(import_path)


def test_load_check_rejects_non_callable() -> None:
    with pytest.raises(TypeError, match="not callable"):
        load_check("os:sep")
