import pytest

from videoscribe.config import Settings


class TestSettingsDefaults:
    def test_default_model(self) -> None:
        s = Settings(_env_file=None)
        assert s.gemini_model_name == "gemini-2.5-flash"

    def test_default_decoding_parameters(self) -> None:
        s = Settings(_env_file=None)
        assert s.gemini_temperature == 0.2
        assert s.gemini_max_output_tokens == 8192

    def test_default_upload_ceiling_is_30_mib(self) -> None:
        s = Settings(_env_file=None)
        assert s.max_upload_bytes == 30 * 1024 * 1024

    def test_default_session_bounds(self) -> None:
        s = Settings(_env_file=None)
        assert s.session_ttl_seconds == 3600
        assert s.max_sessions == 100


class TestSettingsFromEnv:
    def test_loads_api_key(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("GEMINI_API_KEY", "secret")
        s = Settings(_env_file=None)
        assert s.gemini_api_key == "secret"

    def test_loads_upload_ceiling(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("MAX_UPLOAD_MB", "5")
        s = Settings(_env_file=None)
        assert s.max_upload_bytes == 5 * 1024 * 1024

    def test_loads_log_level(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")
        s = Settings(_env_file=None)
        assert s.log_level == "DEBUG"
