"""Configuration loading and structured logging helpers."""

import json
import logging

from matcher_app.config import DEFAULT_CLASSIFIER_MODEL, MatcherConfig
from matcher_app.logging_config import (
    CORRELATION_ID,
    JsonFormatter,
    correlation_context,
    log_event,
    operation_context,
    redact_for_log,
)


def test_from_env_reads_file_and_env_overrides(monkeypatch, tmp_path) -> None:
    config_file = tmp_path / "staging.yaml"
    config_file.write_text("# staging\nclassifier_model: gemini-test\nuser_agent: 'Custom/2.0'\nlog_level: DEBUG\n")
    monkeypatch.setenv("APP_ENV", "staging")
    monkeypatch.setenv("MATCHER_CONFIG_DIR", str(tmp_path))
    monkeypatch.setenv("GOOGLE_API_KEY", "from-env")
    monkeypatch.setenv("LOG_LEVEL", "WARNING")
    monkeypatch.delenv("APP_CONFIG_PATH", raising=False)

    config = MatcherConfig.from_env()

    assert config.environment == "staging"
    assert config.classifier_model == "gemini-test"
    assert config.user_agent == "Custom/2.0"
    assert config.google_api_key == "from-env"
    assert config.log_level == "WARNING"


def test_from_env_defaults(monkeypatch) -> None:
    for key in ("APP_ENV", "APP_CONFIG_PATH", "GOOGLE_API_KEY", "CLASSIFIER_MODEL"):
        monkeypatch.delenv(key, raising=False)

    config = MatcherConfig.from_env()

    assert config.google_api_key is None
    assert config.classifier_model == DEFAULT_CLASSIFIER_MODEL


def test_redaction_scrubs_keys_bytes_and_emails() -> None:
    scrubbed = redact_for_log(
        {
            "api_key": "secret",
            "image": b"\x00\x01",
            "nested": {"note": "contact me@example.com", "url": "https://x?key=abc&q=1"},
            "data": b"12345",
        }
    )

    assert scrubbed["api_key"] == "[redacted]"
    assert scrubbed["image"] == "[redacted]"
    assert scrubbed["data"] == "[5 bytes]"
    assert "me@example.com" not in scrubbed["nested"]["note"]
    assert "abc" not in scrubbed["nested"]["url"]


def test_log_event_emits_json_with_correlation_id() -> None:
    logger = logging.getLogger("tests.structured")
    records: list[logging.LogRecord] = []

    class _Capture(logging.Handler):
        def emit(self, record: logging.LogRecord) -> None:
            records.append(record)

    handler = _Capture()
    logger.addHandler(handler)
    logger.setLevel(logging.INFO)
    try:
        with correlation_context("corr-123"):
            log_event(logger, logging.INFO, "weather_cached", cache_key="1.00_2.00", google_api_key="x")
    finally:
        logger.removeHandler(handler)

    payload = json.loads(JsonFormatter().format(records[0]))
    assert payload["event"] == "weather_cached"
    assert payload["correlation_id"] == "corr-123"
    assert payload["cache_key"] == "1.00_2.00"
    assert payload["google_api_key"] == "[redacted]"


def test_operation_context_reuses_caller_id_and_restores_it() -> None:
    with correlation_context("outer"):
        with operation_context("app:get_weather") as scoped:
            assert scoped == "outer"
        assert CORRELATION_ID.get() == "outer"

    with correlation_context("fresh"):
        with operation_context("app:generate") as minted:
            assert minted == CORRELATION_ID.get() == "fresh"
