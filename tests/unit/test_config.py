"""Unit tests for reading settings from env.yaml and the environment"""

import pytest

import config
from config import ApplicationConfig, ConfigurationError, flag, setting, string_list, validate_config


@pytest.fixture
def no_yaml(monkeypatch):
    monkeypatch.setattr(config, "data", {})


class TestSetting:
    def test_environment_values_stay_strings(self, monkeypatch, no_yaml):
        """
        Given: Environment values that YAML would read as numbers
        When: They are looked up
        Then: The raw strings are returned, leading zeros and hex digits intact
        """
        # Arrange
        monkeypatch.setenv("DEFAULT_PAYMENT_ACCOUNT_NUMBER", "00123456")
        monkeypatch.setenv("AUTH_API_KEY", "0x1A2B")
        monkeypatch.setenv("COMPANY_GSTIN", "1e5")

        # Act / Assert
        assert setting("DEFAULT_PAYMENT_ACCOUNT_NUMBER") == "00123456"
        assert setting("AUTH_API_KEY") == "0x1A2B"
        assert setting("COMPANY_GSTIN") == "1e5"

    def test_yaml_file_wins_over_environment(self, monkeypatch):
        monkeypatch.setattr(config, "data", {"API_PORT": 9000})
        monkeypatch.setenv("API_PORT", "7000")

        assert setting("API_PORT") == 9000

    def test_default_when_unset(self, monkeypatch, no_yaml):
        monkeypatch.delenv("INVOICE_PAGE_SIZE", raising=False)

        assert setting("INVOICE_PAGE_SIZE", 10) == 10

    def test_numeric_settings_are_coerced_per_key(self, monkeypatch, no_yaml):
        monkeypatch.setenv("API_PORT", "8080")
        monkeypatch.setenv("FILTER_DEBOUNCE_SECONDS", "0.25")

        assert int(setting("API_PORT", 8000)) == 8080
        assert float(setting("FILTER_DEBOUNCE_SECONDS", 0.5)) == 0.25


class TestCoercion:
    @pytest.mark.parametrize("value", ["1", "true", "True", "yes", "on", True, 1])
    def test_flag_true(self, value):
        assert flag(value) is True

    @pytest.mark.parametrize("value", ["0", "false", "no", "", False, 0, None])
    def test_flag_false(self, value):
        assert flag(value) is False

    def test_string_list(self):
        assert string_list("http://a.test, http://b.test") == ["http://a.test", "http://b.test"]
        assert string_list(["x"]) == ["x"]
        assert string_list(None) == []
        assert string_list("Line one, street; City 673014", separator=";") == [
            "Line one, street",
            "City 673014",
        ]

    def test_account_number_is_a_string(self):
        assert isinstance(ApplicationConfig.DEFAULT_PAYMENT_ACCOUNT_NUMBER, str)


class TestValidateConfig:
    def test_missing_keys_are_named(self):
        class Incomplete(ApplicationConfig):
            DB_URI = None
            AUTH_API_KEY = None
            AUTH_URL = None
            AUTH_DISABLED = False

        with pytest.raises(ConfigurationError, match="DB_URI, AUTH_API_KEY, AUTH_URL"):
            validate_config(Incomplete)

    def test_auth_url_optional_when_auth_disabled(self):
        class Local(ApplicationConfig):
            DB_URI = "sqlite+aiosqlite://"
            AUTH_API_KEY = "key"
            AUTH_URL = None
            AUTH_DISABLED = True

        validate_config(Local)
