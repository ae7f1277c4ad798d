"""
Tests for configuration, logging and error handling
===================================================
"""

import json
import logging

import pytest

from revision_compare.config_logging import (
    CompareConfig, DiffOracleError, JsonFormatter, ProcessingError, RevisionCompareError,
    StructuredLogger, ValidationError, get_config, get_logger, handle_errors, reset_config
)
from revision_compare.text_diff import TextDiffOracle


class TestCompareConfig:
    """Tests for CompareConfig."""

    def test_defaults(self):
        """Defaults match the documented alignment parameters."""
        config = CompareConfig()
        assert config.match_threshold == 0.8
        assert config.lookahead_window == 3
        assert config.preview_length == 80
        assert config.validate() == (True, [])

    def test_diff_runs_without_time_limit(self):
        """The default oracle never stops early on wall-clock time."""
        assert CompareConfig().diff_timeout == 0
        assert TextDiffOracle(CompareConfig()).dmp.Diff_Timeout == 0

    def test_from_env(self, monkeypatch):
        """Environment variables override defaults."""
        monkeypatch.setenv('RC_MATCH_THRESHOLD', '0.6')
        monkeypatch.setenv('RC_LOOKAHEAD_WINDOW', '5')
        monkeypatch.setenv('RC_LOG_FORMAT', 'text')
        config = CompareConfig.from_env()
        assert config.match_threshold == 0.6
        assert config.lookahead_window == 5
        assert config.log_format == 'text'

    def test_production_raises_log_level(self, monkeypatch):
        """Production environments log warnings and above."""
        monkeypatch.setenv('RC_ENV', 'production')
        assert CompareConfig().log_level == 'WARNING'

    def test_validate_errors(self):
        """Invalid settings are all reported."""
        config = CompareConfig(match_threshold=1.5, lookahead_window=-1, log_format='xml')
        is_valid, errors = config.validate()
        assert not is_valid
        assert len(errors) == 3

    def test_global_config_cached(self, monkeypatch):
        """The global config is built once until reset."""
        config = get_config()
        assert get_config() is config
        monkeypatch.setenv('RC_LOOKAHEAD_WINDOW', '7')
        reset_config()
        assert get_config().lookahead_window == 7


class TestStructuredLogging:
    """Tests for StructuredLogger and JsonFormatter."""

    def test_correlation_id(self):
        """New correlation IDs are visible on the current thread."""
        correlation_id = StructuredLogger.new_correlation_id()
        assert StructuredLogger.get_correlation_id() == correlation_id

    def test_json_record(self, caplog):
        """Records are emitted as JSON with context fields."""
        logger = get_logger('revision_compare.test')
        logger.logger.propagate = True
        with caplog.at_level(logging.INFO, logger='revision_compare.test'):
            logger.info("hello", job_id='abc')
        record = json.loads(caplog.records[-1].getMessage())
        assert record['message'] == 'hello'
        assert record['job_id'] == 'abc'
        assert record['level'] == 'INFO'

    def test_formatter_passes_serialized_messages(self):
        """Already serialized messages are not wrapped twice."""
        record = logging.LogRecord('x', logging.INFO, __file__, 1, '{"a": 1}', None, None)
        assert JsonFormatter().format(record) == '{"a": 1}'

    def test_formatter_wraps_plain_messages(self):
        """Plain messages are wrapped in a JSON envelope."""
        record = logging.LogRecord('x', logging.INFO, __file__, 1, 'plain', None, None)
        assert json.loads(JsonFormatter().format(record))['message'] == 'plain'


class TestErrors:
    """Tests for the error hierarchy and handle_errors."""

    def test_error_to_dict(self):
        """Errors serialize to the API error shape."""
        error = ValidationError("bad input", field='left_html')
        assert error.status_code == 400
        assert error.to_dict() == {
            'success': False,
            'error': {'code': 'VALIDATION_ERROR', 'message': 'bad input',
                      'details': {'field': 'left_html'}},
        }

    def test_oracle_error_code(self):
        """Oracle failures carry their own code."""
        assert DiffOracleError("x").code == 'DIFF_ERROR'
        assert isinstance(DiffOracleError("x"), RevisionCompareError)

    def test_library_errors_pass_through(self):
        """Library errors are re-raised unchanged."""
        @handle_errors()
        def fail():
            raise ValidationError("nope")

        with pytest.raises(ValidationError):
            fail()

    def test_value_error_becomes_validation_error(self):
        """ValueError is reported as a validation error."""
        @handle_errors()
        def fail():
            raise ValueError("bad")

        with pytest.raises(ValidationError) as excinfo:
            fail()
        assert excinfo.value.message == 'bad'

    def test_unexpected_error_becomes_processing_error(self):
        """Other exceptions become processing errors naming the stage."""
        @handle_errors()
        def explode():
            raise KeyError("k")

        with pytest.raises(ProcessingError) as excinfo:
            explode()
        assert excinfo.value.details['stage'] == 'explode'
