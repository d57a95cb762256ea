"""Tests for structured logging utilities."""

from __future__ import annotations

import json
import logging
import sys

import pytest

from bff.utils.logging import ContextLogger
from bff.utils.logging import StructuredLogFormatter
from bff.utils.logging import clear_request_context
from bff.utils.logging import configure_logging
from bff.utils.logging import get_logger
from bff.utils.logging import log_lambda_event
from bff.utils.logging import log_response
from bff.utils.logging import set_request_context


def _record(
    message: str = 'hello',
    level: int = logging.INFO,
    **extra,
) -> logging.LogRecord:
    record = logging.LogRecord('bff.test', level, __file__, 10, message, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


@pytest.fixture(autouse=True)
def _reset_context():
    clear_request_context()
    yield
    clear_request_context()


class TestStructuredLogFormatter:
    """Tests for StructuredLogFormatter."""

    def test_formats_as_json(self) -> None:
        payload = json.loads(StructuredLogFormatter().format(_record()))
        assert payload['level'] == 'INFO'
        assert payload['logger'] == 'bff.test'
        assert payload['message'] == 'hello'
        assert 'timestamp' in payload

    def test_includes_request_context(self) -> None:
        set_request_context(req_id='req-1', corr_id='corr-1')
        payload = json.loads(StructuredLogFormatter().format(_record()))
        assert payload['request_id'] == 'req-1'
        assert payload['correlation_id'] == 'corr-1'

    def test_omits_empty_request_context(self) -> None:
        payload = json.loads(StructuredLogFormatter().format(_record()))
        assert 'request_id' not in payload
        assert 'correlation_id' not in payload

    def test_includes_extra_fields(self) -> None:
        record = _record(event={'path': '/users/1'})
        payload = json.loads(StructuredLogFormatter().format(record))
        assert payload['extra'] == {'event': {'path': '/users/1'}}

    def test_source_only_for_warnings(self) -> None:
        info = json.loads(StructuredLogFormatter().format(_record()))
        warning = json.loads(
            StructuredLogFormatter().format(_record(level=logging.WARNING))
        )
        assert 'source' not in info
        assert warning['source']['line'] == 10

    def test_includes_exception(self) -> None:
        try:
            raise RuntimeError('boom')
        except RuntimeError:
            record = logging.LogRecord(
                'bff.test', logging.ERROR, __file__, 1, 'failed', None, sys.exc_info()
            )
        payload = json.loads(StructuredLogFormatter().format(record))
        assert payload['exception']['type'] == 'RuntimeError'
        assert payload['exception']['message'] == 'boom'


class TestContextLogger:
    """Tests for ContextLogger and get_logger."""

    def test_get_logger_returns_adapter(self) -> None:
        logger = get_logger('bff.test', component='gateway')
        assert isinstance(logger, ContextLogger)
        assert logger.extra == {'component': 'gateway'}

    def test_merges_adapter_extra(self) -> None:
        logger = get_logger('bff.test', component='gateway')
        _, kwargs = logger.process('msg', {'extra': {'count': 2}})
        assert kwargs['extra'] == {'count': 2, 'component': 'gateway'}

    def test_call_site_extra_wins(self) -> None:
        logger = get_logger('bff.test', component='gateway')
        _, kwargs = logger.process('msg', {'extra': {'component': 'proxy'}})
        assert kwargs['extra']['component'] == 'proxy'


class TestConfigureLogging:
    """Tests for configure_logging."""

    @pytest.fixture(autouse=True)
    def _restore_root_logger(self):
        root = logging.getLogger()
        handlers, level = root.handlers[:], root.level
        yield
        root.handlers[:] = handlers
        root.setLevel(level)

    def test_uses_log_level_env(self, monkeypatch) -> None:
        monkeypatch.setenv('LOG_LEVEL', 'debug')
        configure_logging()
        root = logging.getLogger()
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, StructuredLogFormatter)

    def test_explicit_level_wins(self, monkeypatch) -> None:
        monkeypatch.setenv('LOG_LEVEL', 'DEBUG')
        configure_logging('WARNING')
        assert logging.getLogger().level == logging.WARNING


class TestLogHelpers:
    """Tests for log_lambda_event and log_response."""

    def test_log_lambda_event_logs_full_event(self, mocker) -> None:
        logger = get_logger('bff.test')
        spy = mocker.patch.object(logger, 'info')
        event = {'httpMethod': 'GET', 'path': '/a', 'headers': {'x-api-key': 'k'}}

        log_lambda_event(logger, event)

        extra = spy.call_args.kwargs['extra']
        assert extra['http_method'] == 'GET'
        assert extra['path'] == '/a'
        assert extra['event'] == event

    def test_log_response_levels(self, mocker) -> None:
        logger = get_logger('bff.test')
        spy = mocker.patch.object(logger, 'log')

        log_response(logger, 200, duration_ms=1.234)
        log_response(logger, 502)

        first, second = spy.call_args_list
        assert first.args[0] == logging.INFO
        assert first.kwargs['extra']['response'] == {
            'status_code': 200,
            'duration_ms': 1.23,
        }
        assert second.args[0] == logging.WARNING
