"""Tests for configuration settings.

Tests the Config class and environment variable handling.
"""

import os
import pytest
from unittest.mock import patch

from logsender.common.config.settings import (
    Config,
    Environment,
    LogLevel,
    StoreLogType,
    TransportType,
    get_config,
    reset_config,
)
from logsender.common.exceptions import ConfigurationError


class TestEnums:
    """Tests for configuration enums."""

    def test_transport_type_values(self):
        """Test TransportType enum values."""
        assert TransportType.MEMORY.value == "memory"
        assert TransportType.SQS.value == "sqs"

    def test_store_log_type_values(self):
        """Test StoreLogType enum values."""
        assert StoreLogType.STUB.value == "stub"
        assert StoreLogType.HTTP.value == "http"


class TestConfig:
    """Tests for Config class."""

    def test_default_config(self):
        """Test Config with default values."""
        with patch.dict(os.environ, {}, clear=True):
            config = Config()

            assert config.environment == Environment.DEVELOPMENT
            assert config.log_level == LogLevel.INFO
            assert config.bulk_size == 10
            assert config.bulk_timeout_ms == 60000
            assert config.bulk_timeout_seconds == 60.0
            assert config.transport_type == TransportType.MEMORY
            assert config.store_log_type == StoreLogType.STUB
            assert config.receive_log_message_queue == "logsender-receive"
            assert config.aggregated_log_message_queue == "logsender-aggregated"
            assert config.aggregated_log_message_dlq == "logsender-aggregated-dlq"
            assert config.store_log_logical_address == "SE165565594230-1000"
            assert config.store_log_endpoint_url is None
            assert config.aws_profile is None

    def test_values_from_env_vars(self):
        """Test settings loaded from environment variables."""
        env = {
            "LOGSENDER_ENVIRONMENT": "production",
            "LOGSENDER_BULK_SIZE": "25",
            "LOGSENDER_BULK_TIMEOUT_MS": "5000",
            "LOGSENDER_TRANSPORT_TYPE": "sqs",
            "LOGSENDER_STORE_LOG_TYPE": "http",
            "LOGSENDER_STORE_LOG_ENDPOINT_URL": "https://storelog.test/storelog",
            "AWS_REGION": "eu-west-1",
        }
        with patch.dict(os.environ, env, clear=True):
            config = Config()

            assert config.is_production
            assert config.bulk_size == 25
            assert config.bulk_timeout_seconds == 5.0
            assert config.transport_type == TransportType.SQS
            assert config.store_log_type == StoreLogType.HTTP
            assert config.store_log_endpoint_url == "https://storelog.test/storelog"
            assert config.aws_region == "eu-west-1"

    def test_string_enums_are_coerced(self):
        """Test enum fields accept plain strings."""
        config = Config(transport_type="sqs", store_log_type="stub", log_level="DEBUG")
        assert config.transport_type == TransportType.SQS
        assert config.log_level == LogLevel.DEBUG

    def test_unknown_enum_value_raises(self):
        """Test unknown enum values raise ConfigurationError."""
        with pytest.raises(ConfigurationError):
            Config(transport_type="carrier-pigeon")

    @pytest.mark.parametrize("bulk_size", [0, -1])
    def test_bulk_size_must_be_positive(self, bulk_size):
        """Test non-positive bulk size is rejected."""
        with pytest.raises(ConfigurationError) as exc_info:
            Config(bulk_size=bulk_size)
        assert exc_info.value.code == "CONFIG_ERROR"

    def test_bulk_timeout_minimum(self):
        """Test bulk timeout below one second is rejected."""
        with pytest.raises(ConfigurationError):
            Config(bulk_timeout_ms=999)
        assert Config(bulk_timeout_ms=1000).bulk_timeout_seconds == 1.0

    def test_blank_queue_name_rejected(self):
        """Test blank queue names are rejected."""
        with pytest.raises(ConfigurationError):
            Config(aggregated_log_message_dlq="  ")

    def test_http_store_log_requires_endpoint(self):
        """Test http StoreLog without endpoint is rejected."""
        with patch.dict(os.environ, {}, clear=True):
            with pytest.raises(ConfigurationError):
                Config(store_log_type="http")

    def test_key_file_requires_cert_file(self):
        """Test a StoreLog key file without a certificate is rejected."""
        with patch.dict(os.environ, {}, clear=True):
            with pytest.raises(ConfigurationError):
                Config(store_log_key_file="client.key")
            config = Config(store_log_cert_file="client.pem", store_log_key_file="client.key")
        assert config.store_log_key_file == "client.key"

    @pytest.mark.parametrize("name", [
        "LOGSENDER_BULK_SIZE",
        "LOGSENDER_BULK_TIMEOUT_MS",
        "LOGSENDER_STORE_LOG_TIMEOUT_SECONDS",
    ])
    def test_non_numeric_env_var_raises(self, name):
        """Test non-numeric values in numeric env vars raise ConfigurationError."""
        with patch.dict(os.environ, {name: "ten"}, clear=True):
            with pytest.raises(ConfigurationError) as exc_info:
                Config()
        assert name in exc_info.value.message


class TestGlobalConfig:
    """Tests for the config singleton."""

    def test_get_config_returns_same_instance(self):
        """Test get_config caches its instance."""
        assert get_config() is get_config()

    def test_reset_config(self):
        """Test reset_config drops the cached instance."""
        first = get_config()
        reset_config()
        assert get_config() is not first
