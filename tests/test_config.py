from tutorium.config import Settings, parse_comma_separated


def test_settings_read_environment(monkeypatch):
    monkeypatch.setenv("API_BASE_URL", "https://admin-api.example.com")
    monkeypatch.setenv("API_TIMEOUT_SECONDS", "2.5")
    monkeypatch.setenv("REVENUE_WINDOW_DAYS", "30")
    settings = Settings()
    assert settings.api_base_url == "https://admin-api.example.com"
    assert settings.api_timeout_seconds == 2.5
    assert settings.revenue_window_days == 30


def test_settings_defaults(monkeypatch):
    for name in ("API_BASE_URL", "API_TIMEOUT_SECONDS", "REVENUE_WINDOW_DAYS", "CORS_ORIGINS"):
        monkeypatch.delenv(name, raising=False)
    settings = Settings(_env_file=None)
    assert settings.api_timeout_seconds is None
    assert settings.revenue_window_days == 14
    assert settings.cors_origin_list == ["http://localhost:3000", "http://127.0.0.1:3000"]


def test_parse_comma_separated():
    assert parse_comma_separated(" a, ,b ") == ["a", "b"]
    assert parse_comma_separated("") == []
