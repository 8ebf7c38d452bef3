"""Tests for client configuration."""

import dataclasses

import pytest

from xrplsale import ClientConfig, ConfigurationError, Environment


class TestEnvironment:
    @pytest.mark.parametrize(
        "name, expected",
        [
            ("production", Environment.PRODUCTION),
            ("prod", Environment.PRODUCTION),
            ("Testnet", Environment.TESTNET),
            ("test", Environment.TESTNET),
        ],
    )
    def test_parse(self, name: str, expected: Environment) -> None:
        assert Environment.parse(name) is expected

    def test_parse_rejects_unknown(self) -> None:
        with pytest.raises(ConfigurationError, match="Invalid environment"):
            Environment.parse("staging")

    def test_base_urls(self) -> None:
        assert Environment.PRODUCTION.base_url == "https://api.xrpl.sale/v1"
        assert Environment.TESTNET.base_url == "https://api-testnet.xrpl.sale/v1"


class TestClientConfig:
    def test_defaults(self) -> None:
        config = ClientConfig.create("key")

        assert config.environment is Environment.PRODUCTION
        assert config.resolved_base_url == "https://api.xrpl.sale/v1"
        assert config.timeout == 30.0
        assert config.max_retries == 3
        assert config.retry_base_delay == 1.0
        assert config.retry_statuses == (429,)
        assert config.webhook_secret is None
        assert config.debug is False

    def test_custom_base_url_overrides_environment(self) -> None:
        config = ClientConfig.create(
            "key", environment="testnet", base_url="http://localhost:8080/v1/"
        )

        assert config.resolved_base_url == "http://localhost:8080/v1"

    def test_is_immutable(self) -> None:
        config = ClientConfig.create("key")

        with pytest.raises(dataclasses.FrozenInstanceError):
            config.api_key = "other"  # type: ignore[misc]

    @pytest.mark.parametrize(
        "options",
        [
            {"timeout": 0},
            {"max_retries": -1},
            {"retry_base_delay": -0.5},
            {"retry_base_delay": 10, "retry_max_delay": 5},
            {"retry_jitter": -1},
            {"retry_statuses": (200,)},
            {"base_url": "ftp://example.com"},
            {"base_url": "not a url"},
            {"environment": "mainnet"},
        ],
    )
    def test_rejects_invalid_options(self, options: dict) -> None:
        with pytest.raises(ConfigurationError):
            ClientConfig.create("key", **options)

    @pytest.mark.parametrize("api_key", ["", "   "])
    def test_requires_api_key(self, api_key: str) -> None:
        with pytest.raises(ConfigurationError, match="API key is required"):
            ClientConfig.create(api_key)


class TestFromEnv:
    def test_reads_variables(self) -> None:
        config = ClientConfig.from_env(
            {
                "XRPLSALE_API_KEY": "env_key",
                "XRPLSALE_ENVIRONMENT": "testnet",
                "XRPLSALE_TIMEOUT": "12.5",
                "XRPLSALE_MAX_RETRIES": "5",
                "XRPLSALE_RETRY_DELAY": "0.25",
                "XRPLSALE_WEBHOOK_SECRET": "whsec_env",
                "XRPLSALE_DEBUG": "true",
            }
        )

        assert config.api_key == "env_key"
        assert config.environment is Environment.TESTNET
        assert config.timeout == 12.5
        assert config.max_retries == 5
        assert config.retry_base_delay == 0.25
        assert config.webhook_secret == "whsec_env"
        assert config.debug is True

    def test_reads_process_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("XRPLSALE_API_KEY", "process_key")
        monkeypatch.setenv("XRPLSALE_BASE_URL", "https://sandbox.example.com/v1")

        config = ClientConfig.from_env()

        assert config.api_key == "process_key"
        assert config.resolved_base_url == "https://sandbox.example.com/v1"

    def test_missing_api_key(self) -> None:
        with pytest.raises(ConfigurationError):
            ClientConfig.from_env({})

    @pytest.mark.parametrize(
        "name, value",
        [("XRPLSALE_TIMEOUT", "soon"), ("XRPLSALE_MAX_RETRIES", "2.5")],
    )
    def test_rejects_malformed_numbers(self, name: str, value: str) -> None:
        with pytest.raises(ConfigurationError):
            ClientConfig.from_env({"XRPLSALE_API_KEY": "key", name: value})
