"""Tests for the StoreLog clients."""

import json
import logging
import httpx
import pytest
from unittest.mock import MagicMock

from logsender.common.config import Config
from logsender.common.exceptions import ConfigurationError, StoreLogExecutionError, StoreLogTransportError
from logsender.storelog.client import HttpStoreLogService, LogSenderClient
from logsender.storelog.config import create_log_sender_client, create_store_log_service
from logsender.storelog.converter import LogRecordConverter
from logsender.storelog.schemas import ResultCode, StoreLogResult
from logsender.storelog.stub import StoreLogStub

from conftest import make_event

ENDPOINT = "https://storelog.test/storelog"


def records(*log_ids):
    converter = LogRecordConverter()
    return [converter.convert(make_event(log_id=log_id)) for log_id in log_ids]


def http_service(handler):
    client = httpx.Client(transport=httpx.MockTransport(handler))
    return HttpStoreLogService(ENDPOINT, client=client)


class TestHttpStoreLogService:
    """Tests for HttpStoreLogService."""

    def test_posts_logical_address_and_records(self):
        """Test the request body carries the address and wire records."""
        seen = {}

        def handler(request):
            seen["url"] = str(request.url)
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"result": {"resultCode": "OK", "resultText": "Done"}})

        result = http_service(handler).store_log("SE165565594230-1000", records("a", "b"))

        assert result.result_code == ResultCode.OK
        assert seen["url"] == ENDPOINT
        assert seen["body"]["logicalAddress"] == "SE165565594230-1000"
        assert [r["logId"] for r in seen["body"]["log"]] == ["a", "b"]

    def test_error_result_is_returned(self):
        """Test a 4xx answer with a result is returned, not raised."""
        def handler(request):
            return httpx.Response(
                400, json={"result": {"resultCode": "VALIDATION_ERROR", "resultText": "bad"}}
            )

        result = http_service(handler).store_log("addr", records("a"))

        assert result.result_code == ResultCode.VALIDATION_ERROR
        assert result.result_text == "bad"

    def test_unknown_result_code_is_kept(self):
        """Test codes outside ResultCode survive as plain strings."""
        def handler(request):
            return httpx.Response(200, json={"result": {"resultCode": "MAINTENANCE"}})

        result = http_service(handler).store_log("addr", records("a"))

        assert result.result_code == "MAINTENANCE"

    def test_server_error_raises(self):
        """Test 5xx answers are transport errors."""
        service = http_service(lambda request: httpx.Response(503))
        with pytest.raises(StoreLogTransportError):
            service.store_log("addr", records("a"))

    def test_connection_error_raises(self):
        """Test connection failures are transport errors."""
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(StoreLogTransportError):
            http_service(handler).store_log("addr", records("a"))

    def test_key_file_without_cert_file_raises(self):
        """Test a private key alone is refused instead of ignored."""
        with pytest.raises(ConfigurationError):
            HttpStoreLogService(ENDPOINT, key_file="client.key")

    def test_unreadable_body_raises(self):
        """Test a body without a result is a transport error."""
        service = http_service(lambda request: httpx.Response(200, text="<html/>"))
        with pytest.raises(StoreLogTransportError):
            service.store_log("addr", records("a"))


class TestLogSenderClient:
    """Tests for LogSenderClient."""

    def test_empty_records_skip_service(self):
        """Test an empty list answers INFO without a call."""
        service = MagicMock()
        result = LogSenderClient(service, "addr").send_log_messages([])

        assert result.result_code == ResultCode.INFO
        assert result.result_text == "No log entries supplied, not invoking storeLog"
        service.store_log.assert_not_called()

    def test_transport_error_becomes_execution_error(self):
        """Test transport failures are raised as StoreLogExecutionError."""
        service = MagicMock()
        service.store_log.side_effect = StoreLogTransportError("down")

        with pytest.raises(StoreLogExecutionError):
            LogSenderClient(service, "addr").send_log_messages(records("a"))

    def test_ok_logs_ids_at_debug(self, caplog):
        """Test stored ids are logged at debug level."""
        service = MagicMock()
        service.store_log.return_value = StoreLogResult.ok()

        with caplog.at_level(logging.DEBUG, logger="logsender.storelog.client"):
            LogSenderClient(service, "addr").send_log_messages(records("a", "b"))

        assert "a, b" in caplog.text


class TestStoreLogFactories:
    """Tests for the StoreLog factory functions."""

    def test_stub_by_default(self):
        """Test the stub is created for store_log_type stub."""
        service = create_store_log_service(Config(store_log_type="stub"))
        assert isinstance(service, StoreLogStub)

    def test_http_service(self):
        """Test the http service is created with the configured endpoint."""
        config = Config(store_log_type="http", store_log_endpoint_url=ENDPOINT)
        service = create_store_log_service(config)

        assert isinstance(service, HttpStoreLogService)
        assert service.endpoint_url == ENDPOINT
        service.close()

    def test_client_bound_to_logical_address(self):
        """Test the client uses the configured logical address."""
        config = Config(store_log_logical_address="SE000-1")
        client = create_log_sender_client(config, service=StoreLogStub())
        assert client.logical_address == "SE000-1"
