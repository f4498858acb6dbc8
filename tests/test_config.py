import pytest
from pydantic import ValidationError

from prepflow import config
from prepflow.config import Settings, get_settings


@pytest.fixture
def fresh_settings():
    get_settings.cache_clear()
    yield get_settings
    get_settings.cache_clear()


@pytest.mark.parametrize(
    "env, expected",
    [
        ("testing", config.TestingSettings),
        ("production", config.ProductionSettings),
        ("development", config.DevelopmentSettings),
        ("anything-else", config.DevelopmentSettings),
    ],
)
def test_environment_selects_settings_class(monkeypatch, fresh_settings, env, expected):
    monkeypatch.setenv("PREPFLOW_ENV", env)
    assert type(fresh_settings()) is expected


def test_get_settings_is_cached(fresh_settings):
    assert fresh_settings() is fresh_settings()


def test_testing_defaults(settings):
    assert settings.TESTING is True
    assert settings.PREPROCESS_SERVICE_URL == "http://preprocess.test"
    assert settings.preprocess_url == "http://preprocess.test/preprocess"
    assert settings.PREPROCESS_TIMEOUT_SECONDS == 5.0


def test_service_url_and_endpoints_are_normalised():
    settings = Settings(
        PREPROCESS_SERVICE_URL="http://svc:5000/",
        PREPROCESS_ENDPOINT="api/preprocess/",
        DOWNLOAD_ENDPOINT="files",
    )

    assert settings.preprocess_url == "http://svc:5000/api/preprocess"
    assert settings.DOWNLOAD_ENDPOINT == "/files"


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("PREPROCESS_SERVICE_URL", "http://exec.internal:9000")
    monkeypatch.setenv("PREPROCESS_TIMEOUT_SECONDS", "42")

    settings = Settings()

    assert settings.PREPROCESS_SERVICE_URL == "http://exec.internal:9000"
    assert settings.PREPROCESS_TIMEOUT_SECONDS == 42.0


def test_allowed_extensions_from_string():
    settings = Settings(ALLOWED_EXTENSIONS=".CSV, parquet,")
    assert settings.ALLOWED_EXTENSIONS == ["csv", "parquet"]


def test_log_level_is_normalised():
    assert Settings(LOG_LEVEL="debug").LOG_LEVEL == "DEBUG"
    with pytest.raises(ValidationError):
        Settings(LOG_LEVEL="chatty")


@pytest.mark.parametrize("timeout", [0, -1.5])
def test_timeout_must_be_positive(timeout):
    with pytest.raises(ValidationError):
        Settings(PREPROCESS_TIMEOUT_SECONDS=timeout)


def test_create_directories(tmp_path):
    settings = Settings(LOG_FILE=str(tmp_path / "nested" / "app.log"))
    settings.create_directories()
    assert (tmp_path / "nested").is_dir()
