"""Testes das settings (validação e carga de variáveis de ambiente)."""

from __future__ import annotations

import json

import pytest

from config.settings import (
    BaseSettings,
    DayHours,
    DedupeSettings,
    FirestoreSettings,
    OpenAISettings,
    RileySettings,
    StorageSettings,
    TwilioSettings,
    get_base_settings,
    get_dedupe_settings,
    get_openai_settings,
    get_riley_settings,
    get_twilio_settings,
)

PRODUCTION = BaseSettings(environment="production", redis_url="redis://localhost:6379/0")
DEVELOPMENT = BaseSettings()


@pytest.fixture(autouse=True)
def _clear_settings_cache() -> None:
    for getter in (
        get_base_settings,
        get_dedupe_settings,
        get_openai_settings,
        get_riley_settings,
        get_twilio_settings,
    ):
        getter.cache_clear()
    yield
    for getter in (
        get_base_settings,
        get_dedupe_settings,
        get_openai_settings,
        get_riley_settings,
        get_twilio_settings,
    ):
        getter.cache_clear()


class TestBaseSettings:
    """Testes de BaseSettings."""

    def test_defaults_are_valid(self) -> None:
        assert DEVELOPMENT.validate() == []
        assert DEVELOPMENT.is_development is True

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [("prod", "production"), ("STAGE", "staging"), ("anything", "development")],
    )
    def test_environment_aliases(
        self, monkeypatch: pytest.MonkeyPatch, raw: str, expected: str
    ) -> None:
        monkeypatch.setenv("ENVIRONMENT", raw)

        assert get_base_settings().environment == expected

    def test_gcp_project_fallback(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("GCP_PROJECT", raising=False)
        monkeypatch.setenv("GOOGLE_CLOUD_PROJECT", "proj-x")

        assert get_base_settings().gcp_project == "proj-x"

    def test_http_settings_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CORS_ALLOWED_ORIGINS", "https://a.example.com, https://b.example.com,")
        monkeypatch.setenv("PORT", "9000")
        monkeypatch.setenv("LOG_LEVEL", "debug")

        settings = get_base_settings()

        assert settings.cors_allowed_origins == ("https://a.example.com", "https://b.example.com")
        assert settings.port == 9000
        assert settings.log_level == "DEBUG"

    @pytest.mark.parametrize(
        ("settings", "error"),
        [
            (BaseSettings(log_level="LOUD"), "LOG_LEVEL inválido: LOUD"),
            (
                BaseSettings(redis_url="localhost:6379"),
                "REDIS_URL deve começar com redis:// ou rediss://",
            ),
            (BaseSettings(port=0), "PORT fora do intervalo: 0"),
        ],
    )
    def test_invalid_values(self, settings: BaseSettings, error: str) -> None:
        assert settings.validate() == [error]

    def test_wildcard_cors_rejected_in_production(self) -> None:
        assert PRODUCTION.validate() == ["CORS_ALLOWED_ORIGINS=* não permitido em production"]


class TestBackendSettings:
    def test_memory_dedupe_forbidden_outside_dev(self) -> None:
        errors = DedupeSettings(backend="memory").validate(PRODUCTION)

        assert any("proibido" in error for error in errors)

    def test_redis_dedupe_requires_url(self) -> None:
        errors = DedupeSettings(backend="redis").validate(DEVELOPMENT)

        assert errors == ["DEDUPE_BACKEND=redis requer REDIS_URL configurado"]

    def test_redis_dedupe_valid_in_production(self) -> None:
        assert DedupeSettings(backend="redis").validate(PRODUCTION) == []

    def test_dedupe_env_loading(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("DEDUPE_BACKEND", "REDIS")
        monkeypatch.setenv("DEDUPE_TTL_SECONDS", "60")
        monkeypatch.setenv("DEDUPE_KEY_PREFIX", "riley-staging:")

        settings = get_dedupe_settings()

        assert settings.backend == "redis"
        assert settings.ttl_seconds == 60
        assert settings.key_prefix == "riley-staging:"

    def test_redis_dedupe_requires_prefix(self) -> None:
        errors = DedupeSettings(backend="redis", key_prefix="").validate(PRODUCTION)

        assert errors == ["DEDUPE_KEY_PREFIX não pode ser vazio"]

    def test_memory_store_forbidden_outside_dev(self) -> None:
        errors = StorageSettings().validate(PRODUCTION)

        assert errors == ["CONVERSATION_STORE_BACKEND=memory proibido em staging/production"]

    def test_storage_negative_window(self) -> None:
        errors = StorageSettings(history_window=-1).validate(DEVELOPMENT)

        assert errors == ["CONVERSATION_HISTORY_WINDOW deve ser >= 0"]

    def test_firestore_requires_project(self) -> None:
        assert FirestoreSettings().validate("") != []
        assert FirestoreSettings().validate("proj") == []

    def test_firestore_project_override(self) -> None:
        settings = FirestoreSettings(project_id="riley-data")

        assert settings.resolve_project("riley-app") == "riley-data"
        assert FirestoreSettings().resolve_project("riley-app") == "riley-app"

    def test_firestore_collection_must_be_top_level(self) -> None:
        errors = FirestoreSettings(collection_conversations="a/b").validate("proj")

        assert errors == ["FIRESTORE_COLLECTION_CONVERSATIONS inválida"]


class TestOpenAISettings:
    def test_enabled_requires_key(self) -> None:
        errors = OpenAISettings(enabled=True).validate()

        assert errors == ["OPENAI_API_KEY não configurado mas OPENAI_ENABLED=true"]

    def test_temperature_range(self) -> None:
        assert OpenAISettings(temperature=3.0).validate() == [
            "OPENAI_TEMPERATURE deve estar entre 0.0 e 2.0"
        ]

    def test_fallback_provider(self) -> None:
        assert OpenAISettings().has_fallback_provider is False
        assert OpenAISettings(fallback_model="gpt-4o").has_fallback_provider is True

    def test_env_loading(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("OPENAI_ENABLED", "yes")
        monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
        monkeypatch.setenv("OPENAI_TIMEOUT_SECONDS", "2.5")
        monkeypatch.setenv("OPENAI_FALLBACK_MODEL", "gpt-4o")

        settings = get_openai_settings()

        assert settings.enabled is True
        assert settings.api_key == "sk-test"
        assert settings.timeout_seconds == 2.5
        assert settings.fallback_model == "gpt-4o"


class TestTwilioSettings:
    def test_signature_validation_requirements(self) -> None:
        errors = TwilioSettings(validate_signature=True).validate()

        assert len(errors) == 2

    def test_can_send(self) -> None:
        assert TwilioSettings().can_send is False
        assert TwilioSettings(account_sid="AC", auth_token="t", from_number="+1").can_send

    def test_env_loading(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("TWILIO_VALIDATE_SIGNATURE", "true")
        monkeypatch.setenv("TWILIO_WEBHOOK_URL", "https://example.com/webhook/sms")

        settings = get_twilio_settings()

        assert settings.validate_signature is True
        assert settings.webhook_url == "https://example.com/webhook/sms"


class TestRileySettings:
    def test_defaults_are_valid(self) -> None:
        settings = RileySettings()

        assert settings.validate() == []
        assert settings.business_hours["sunday"].open is False
        assert settings.after_hours_enabled is False

    def test_inverted_window_is_invalid(self) -> None:
        settings = RileySettings(
            business_hours={"monday": DayHours(open_time="18:00", close_time="08:00")}
        )

        assert settings.validate() == ["RILEY_BUSINESS_HOURS[monday]: open_time >= close_time"]

    def test_unknown_day_is_invalid(self) -> None:
        settings = RileySettings(business_hours={"funday": DayHours()})

        assert any("dias inválidos" in error for error in settings.validate())

    def test_env_loading(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("RILEY_COMPANY_NAME", "Acme")
        monkeypatch.setenv("RILEY_NEGATIVE_FILTERS", "cheap| guarantee |")
        monkeypatch.setenv("RILEY_COMPANY_DETAILS", json.dumps({"phone": "555-0100"}))
        monkeypatch.setenv(
            "RILEY_BUSINESS_HOURS",
            json.dumps({"Sunday": {"open": True, "openTime": "10:00", "closeTime": "14:00"}}),
        )

        settings = get_riley_settings()

        assert settings.company_name == "Acme"
        assert settings.negative_filters == ("cheap", "guarantee")
        assert settings.company_details == {"phone": "555-0100"}
        assert settings.business_hours["sunday"] == DayHours(True, "10:00", "14:00")
        assert settings.business_hours["monday"] == DayHours()
