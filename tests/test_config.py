from wedding_directory.core import config


def setup_function(function):
    config.get_settings.cache_clear()


def teardown_function(function):
    config.get_settings.cache_clear()


def test_get_settings_reads_env(monkeypatch):
    monkeypatch.setenv("DATAFORSEO_USERNAME", "user@example.com")
    monkeypatch.setenv("DATAFORSEO_PASSWORD", "secret")
    monkeypatch.setenv("PROVIDER_TIMEOUT_SECONDS", "2.5")
    monkeypatch.setenv("UPLOAD_DIR", "/tmp/uploads")
    monkeypatch.setenv("SITE_URL", "https://weddings.example.com/")
    monkeypatch.setenv("MAJOR_CITY_POPULATION", "50000")

    settings = config.get_settings()

    assert settings.dataforseo_username == "user@example.com"
    assert settings.has_provider_credentials is True
    assert settings.provider_timeout == 2.5
    assert settings.upload_dir == "/tmp/uploads"
    assert settings.site_url == "https://weddings.example.com"
    assert settings.major_city_population == 50000


def test_get_settings_warns_when_credentials_missing(monkeypatch, caplog):
    monkeypatch.delenv("DATAFORSEO_USERNAME", raising=False)
    monkeypatch.delenv("DATAFORSEO_PASSWORD", raising=False)
    monkeypatch.delenv("PROVIDER_TIMEOUT_SECONDS", raising=False)
    monkeypatch.setattr(config, "load_dotenv", lambda: None)

    with caplog.at_level("WARNING"):
        settings = config.get_settings()

    assert "DATAFORSEO_USERNAME/DATAFORSEO_PASSWORD are not configured" in " ".join(caplog.messages)
    assert settings.has_provider_credentials is False
    assert settings.provider_timeout == 5.0


def test_get_settings_is_cached(monkeypatch):
    monkeypatch.setattr(config, "load_dotenv", lambda: None)
    assert config.get_settings() is config.get_settings()
