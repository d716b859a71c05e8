"""Tests for IRISConfig loading and validation."""

import pytest

from iris_sdk.config import IRISConfig, mask_secret, DEFAULT_BASE_URL, LOCAL_IRIS_URL
from iris_sdk.errors import InvalidConfigurationError, UserIdRequiredError
from tests.conftest import SAMPLE_API_KEY, SAMPLE_USER_ID


class TestValidation:
    """Constructor validation."""

    def test_missing_api_key(self):
        with pytest.raises(InvalidConfigurationError) as exc_info:
            IRISConfig()
        assert "api_key is required" in str(exc_info.value)

    def test_blank_api_key(self):
        with pytest.raises(InvalidConfigurationError):
            IRISConfig(api_key="   ")

    def test_user_id_coerced_from_string(self):
        config = IRISConfig(api_key=SAMPLE_API_KEY, user_id="42")
        assert config.user_id == 42

    def test_user_id_not_numeric(self):
        with pytest.raises(InvalidConfigurationError):
            IRISConfig(api_key=SAMPLE_API_KEY, user_id="abc")

    def test_negative_retries(self):
        with pytest.raises(InvalidConfigurationError):
            IRISConfig(api_key=SAMPLE_API_KEY, retries=-1)

    def test_trailing_slashes_stripped(self):
        config = IRISConfig(api_key=SAMPLE_API_KEY, base_url="https://api.example.com/")
        assert config.base_url == "https://api.example.com"

    def test_require_user_id(self):
        config = IRISConfig(api_key=SAMPLE_API_KEY)
        with pytest.raises(UserIdRequiredError) as exc_info:
            config.require_user_id()
        assert "as_user" in str(exc_info.value)

        config.user_id = SAMPLE_USER_ID
        assert config.require_user_id() == SAMPLE_USER_ID


class TestFromEnv:
    """Loading from environment variables and .env files."""

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("IRIS_API_KEY", SAMPLE_API_KEY)
        monkeypatch.setenv("IRIS_USER_ID", "42")
        monkeypatch.setenv("IRIS_TIMEOUT", "12.5")

        config = IRISConfig.from_env()

        assert config.api_key == SAMPLE_API_KEY
        assert config.user_id == 42
        assert config.timeout == 12.5
        assert config.base_url == DEFAULT_BASE_URL

    def test_reads_dotenv_file(self, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text(f"IRIS_API_KEY={SAMPLE_API_KEY}\nIRIS_USER_ID=7\n")

        config = IRISConfig.from_env(env_file)

        assert config.api_key == SAMPLE_API_KEY
        assert config.user_id == 7

    def test_environment_wins_over_dotenv(self, tmp_path, monkeypatch):
        (tmp_path / ".env").write_text("IRIS_API_KEY=from_dotenv_file\n")
        monkeypatch.setenv("IRIS_API_KEY", "from_environment")

        config = IRISConfig.from_env()

        assert config.api_key == "from_environment"

    def test_overrides_win(self, monkeypatch):
        monkeypatch.setenv("IRIS_API_KEY", SAMPLE_API_KEY)
        config = IRISConfig.from_env(user_id=99, api_key=None)
        assert config.user_id == 99
        assert config.api_key == SAMPLE_API_KEY

    def test_local_environment(self, monkeypatch):
        monkeypatch.setenv("IRIS_ENV", "local")
        monkeypatch.setenv("IRIS_LOCAL_API_KEY", "local_key_123456")

        config = IRISConfig.from_env()

        assert config.api_key == "local_key_123456"
        assert config.iris_url == LOCAL_IRIS_URL

    def test_missing_key_raises(self):
        with pytest.raises(InvalidConfigurationError):
            IRISConfig.from_env()

    @pytest.mark.parametrize("name", ["IRIS_TIMEOUT", "IRIS_RETRIES"])
    def test_non_numeric_setting_raises(self, monkeypatch, name):
        monkeypatch.setenv("IRIS_API_KEY", SAMPLE_API_KEY)
        monkeypatch.setenv(name, "lots")

        with pytest.raises(InvalidConfigurationError, match=name):
            IRISConfig.from_env()

    def test_numeric_settings_parsed(self, monkeypatch):
        monkeypatch.setenv("IRIS_API_KEY", SAMPLE_API_KEY)
        monkeypatch.setenv("IRIS_TIMEOUT", "12.5")
        monkeypatch.setenv("IRIS_RETRIES", "1")

        config = IRISConfig.from_env()

        assert config.timeout == 12.5
        assert config.retries == 1


class TestExport:
    """Headers and masked export."""

    def test_headers(self, mock_config):
        headers = mock_config.headers()
        assert headers["Authorization"] == f"Bearer {SAMPLE_API_KEY}"
        assert headers["Accept"] == "application/json"
        assert headers["User-Agent"].startswith("iris-python-sdk/")

    def test_to_dict_masks_secrets(self, mock_config):
        data = mock_config.to_dict()
        assert data["api_key"] == "sk_t****3456"
        assert SAMPLE_API_KEY not in str(data)

    def test_mask_secret_short_values_unchanged(self):
        assert mask_secret("short") == "short"
        assert mask_secret(None) is None
        assert mask_secret("abcdefghij") == "abcd****ghij"
