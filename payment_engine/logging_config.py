"""
Structured Logging Configuration Module

Provides JSON-formatted structured logging for engine runs. Everything goes
to stderr (or a file) so that the balance report on stdout stays clean.
"""

import logging
import json
from datetime import datetime, timezone
from typing import Optional

ROOT_LOGGER = "payment_engine"

TEXT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured logging"""
    
    def format(self, record):
        log_entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "module": record.module if hasattr(record, 'module') else record.name,
            "message": record.getMessage(),
            "client_id": getattr(record, 'client_id', None),
            "tx_id": getattr(record, 'tx_id', None),
            "action": getattr(record, 'action', None),
            "outcome": getattr(record, 'outcome', None),
            "extra": getattr(record, 'extra', None)
        }
        
        # Remove None values
        log_entry = {k: v for k, v in log_entry.items() if v is not None}
        
        if record.exc_info:
            log_entry['exception'] = self.formatException(record.exc_info)
            
        return json.dumps(log_entry, default=str)


def setup_logging(level: str = "WARNING", fmt: str = "json",
                  log_file: Optional[str] = None,
                  logger_name: str = ROOT_LOGGER) -> logging.Logger:
    """
    Setup structured logging for the engine.
    
    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        fmt: "json" for one JSON object per line, "text" for plain lines
        log_file: Path to append to; stderr when None
        logger_name: Name of the logger
        
    Returns:
        Configured logger instance
    """
    levelno = _level_number(level)
    logger = logging.getLogger(logger_name)
    
    # Remove existing handlers to avoid duplicates
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        handler.close()
    
    if log_file:
        handler = logging.FileHandler(log_file, encoding="utf-8")
    else:
        handler = logging.StreamHandler()
    
    if fmt.lower() == "text":
        handler.setFormatter(logging.Formatter(TEXT_FORMAT))
    else:
        handler.setFormatter(JSONFormatter())
    
    logger.addHandler(handler)
    logger.setLevel(levelno)
    
    # Prevent propagation to avoid duplicate logs
    logger.propagate = False
    
    return logger


def _level_number(level: str) -> int:
    """Map a level name to its number, rejecting unknown names"""
    levelno = logging.getLevelName(level.upper())
    if not isinstance(levelno, int):
        raise ValueError(f"Unknown log level: {level!r}")
    return levelno


def get_logger(name: str = ROOT_LOGGER) -> logging.Logger:
    """Get logger instance"""
    return logging.getLogger(name)


def log_action(logger: logging.Logger, level: str, message: str,
               client_id: Optional[int] = None, tx_id: Optional[int] = None,
               action: Optional[str] = None, outcome: Optional[str] = None,
               extra: Optional[dict] = None):
    """
    Log an engine action with structured data.
    
    Args:
        logger: Logger instance
        level: Log level (info, warning, error, etc.)
        message: Log message
        client_id: Client the record belongs to
        tx_id: Transaction id of the record
        action: Transaction type being applied
        outcome: What happened to the record (applied, rejected, malformed)
        extra: Additional structured data
    """
    fields = {
        "client_id": client_id,
        "tx_id": tx_id,
        "action": action or None,
        "outcome": outcome or None,
        "extra": extra or None,
    }
    
    # stacklevel=2 attributes the record to the caller, not this helper
    logger.log(_level_number(level), message, stacklevel=2,
               extra={k: v for k, v in fields.items() if v is not None})
