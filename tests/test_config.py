import pytest

from roster_sync.core import config


def setup_function(function):
    config.get_settings.cache_clear()


def teardown_function(function):
    config.get_settings.cache_clear()


@pytest.fixture(autouse=True)
def no_dotenv(monkeypatch):
    monkeypatch.setattr(config, "load_dotenv", lambda: None)


def test_get_settings_reads_env(monkeypatch):
    monkeypatch.setenv("HEROELD_USERNAME", "ops@example.com")
    monkeypatch.setenv("HEROELD_PASSWORD", "secret")
    monkeypatch.setenv("HEROELD_API_URL", "https://backend.test/")
    monkeypatch.setenv("ROSTER_DATA_DIR", "/tmp/rosters")
    monkeypatch.setenv("ROSTER_RETRY_ATTEMPTS", "5")
    monkeypatch.setenv("ROSTER_COMPANY_DELAY_SECONDS", "0.3")

    settings = config.get_settings()

    assert settings.heroeld_username == "ops@example.com"
    assert settings.api_base_url == "https://backend.test"
    assert settings.data_dir == "/tmp/rosters"
    assert settings.retry_attempts == 5
    assert settings.company_delay == 0.3
    assert settings.require_credentials() == config.OperatorCredentials("ops@example.com", "secret")


def test_get_settings_warns_when_credentials_missing(monkeypatch, caplog):
    monkeypatch.delenv("HEROELD_USERNAME", raising=False)
    monkeypatch.delenv("HEROELD_PASSWORD", raising=False)
    monkeypatch.delenv("ROSTER_RETRY_ATTEMPTS", raising=False)
    monkeypatch.delenv("ROSTER_RETRY_DELAY_SECONDS", raising=False)

    with caplog.at_level("WARNING"):
        settings = config.get_settings()

    assert "HEROELD_USERNAME/HEROELD_PASSWORD are not configured" in " ".join(caplog.messages)
    assert settings.retry_attempts == 3
    assert settings.retry_initial_delay == 0.7
    with pytest.raises(config.CredentialMissingError, match="HEROELD_USERNAME and HEROELD_PASSWORD"):
        settings.require_credentials()


def test_require_credentials_names_the_missing_variable():
    settings = config.Settings(heroeld_username="ops", heroeld_password="")
    with pytest.raises(config.CredentialMissingError, match="HEROELD_PASSWORD"):
        settings.require_credentials()


def test_credentials_repr_hides_password():
    creds = config.OperatorCredentials("ops", "hunter2")
    assert "hunter2" not in repr(creds)


def test_invalid_retry_attempts(monkeypatch):
    monkeypatch.setenv("ROSTER_RETRY_ATTEMPTS", "0")
    with pytest.raises(config.ConfigError):
        config.get_settings()
