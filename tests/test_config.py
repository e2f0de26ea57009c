"""
Test suite for configuration and logging setup
"""

import io
import json
import logging

import pytest
from pydantic import ValidationError

from payment_engine.config import EngineConfig, get_config, reload_config
from payment_engine.logging_config import (
    JSONFormatter, ROOT_LOGGER, get_logger, log_action, setup_logging
)


class TestEngineConfig:
    """Test environment-driven settings"""
    
    def test_defaults(self, monkeypatch):
        """Test default settings"""
        for name in ("LOG_LEVEL", "LOG_FORMAT", "LOG_FILE", "STRICT", "SORT_OUTPUT"):
            monkeypatch.delenv(f"PAYMENT_ENGINE_{name}", raising=False)
        settings = EngineConfig(_env_file=None)
        
        assert settings.log_level == "WARNING"
        assert settings.log_format == "json"
        assert settings.log_file is None
        assert settings.strict is False
        assert settings.sort_output is True
    
    def test_environment_overrides(self, monkeypatch):
        """Test PAYMENT_ENGINE_ variables override defaults"""
        monkeypatch.setenv("PAYMENT_ENGINE_STRICT", "true")
        monkeypatch.setenv("payment_engine_log_format", "text")
        settings = EngineConfig(_env_file=None)
        
        assert settings.strict is True
        assert settings.log_format == "text"
    
    def test_log_level_case_insensitive(self, monkeypatch):
        """Test level names are normalized to upper case"""
        monkeypatch.setenv("PAYMENT_ENGINE_LOG_LEVEL", "debug")
        assert EngineConfig(_env_file=None).log_level == "DEBUG"
    
    def test_unknown_log_level_rejected(self, monkeypatch):
        """Test an unknown level name fails validation"""
        monkeypatch.setenv("PAYMENT_ENGINE_LOG_LEVEL", "verbose")
        with pytest.raises(ValidationError):
            EngineConfig(_env_file=None)
    
    def test_reload(self, monkeypatch):
        """Test reload_config replaces the global instance"""
        monkeypatch.setenv("PAYMENT_ENGINE_LOG_LEVEL", "DEBUG")
        try:
            assert reload_config().log_level == "DEBUG"
            assert get_config().log_level == "DEBUG"
        finally:
            monkeypatch.delenv("PAYMENT_ENGINE_LOG_LEVEL")
            reload_config()


class TestLogging:
    """Test structured logging helpers"""
    
    def teardown_method(self):
        logger = logging.getLogger(ROOT_LOGGER)
        for handler in logger.handlers[:]:
            logger.removeHandler(handler)
    
    def test_json_formatter_drops_empty_fields(self):
        """Test JSON output includes only populated fields"""
        record = logging.makeLogRecord({
            "msg": "Dropped dispute", "levelname": "DEBUG", "client_id": 1, "tx_id": 3,
        })
        entry = json.loads(JSONFormatter().format(record))
        
        assert entry["message"] == "Dropped dispute"
        assert entry["client_id"] == 1
        assert entry["tx_id"] == 3
        assert "outcome" not in entry
    
    def test_setup_logging_replaces_handlers(self):
        """Test repeated setup does not duplicate handlers"""
        setup_logging("INFO")
        logger = setup_logging("DEBUG", fmt="text")
        
        assert len(logger.handlers) == 1
        assert logger.level == logging.DEBUG
        assert logger.propagate is False
    
    def test_log_action_fields(self):
        """Test log_action attaches structured fields"""
        stream = io.StringIO()
        logger = setup_logging("DEBUG")
        logger.handlers[0].setStream(stream)
        
        log_action(get_logger(f"{ROOT_LOGGER}.engine"), "info", "Client 1 frozen by chargeback",
                   client_id=1, tx_id=3, action="chargeback", outcome="applied")
        entry = json.loads(stream.getvalue())
        
        assert entry["level"] == "INFO"
        assert entry["client_id"] == 1
        assert entry["action"] == "chargeback"
        assert entry["outcome"] == "applied"
        assert entry["module"] == "test_config"
    
    def test_log_action_respects_level(self):
        """Test records below the logger level are not emitted"""
        stream = io.StringIO()
        logger = setup_logging("WARNING")
        logger.handlers[0].setStream(stream)
        
        log_action(get_logger(f"{ROOT_LOGGER}.engine"), "debug", "quiet", client_id=1)
        assert stream.getvalue() == ""
    
    def test_setup_logging_unknown_level(self):
        """Test setup_logging refuses unknown level names"""
        with pytest.raises(ValueError, match="Unknown log level"):
            setup_logging("verbose")
