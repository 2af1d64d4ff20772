"""Tests for configuration helpers."""

from shop_finder.config import Settings, parse_admin_ids


def test_parse_admin_ids() -> None:
    assert parse_admin_ids("1, 2,,x, 3 ") == frozenset({1, 2, 3})
    assert parse_admin_ids("") == frozenset()
    assert parse_admin_ids(None) == frozenset()


def test_settings_read_environment(monkeypatch) -> None:
    monkeypatch.setenv("TELEGRAM_BOT_TOKEN", "bot-token")
    monkeypatch.setenv("ADMIN_IDS", "10,20")
    monkeypatch.setenv("SUPABASE_URL", "https://example.supabase.co")
    monkeypatch.setenv("SUPABASE_SERVICE_KEY", "service-key")
    monkeypatch.setenv("GEOCODER_API_KEY", "geo-key")

    settings = Settings()

    assert settings.telegram_bot_token == "bot-token"
    assert parse_admin_ids(settings.admin_ids) == frozenset({10, 20})
    assert settings.geocoder_base_url.startswith("https://maps.googleapis.com/")
