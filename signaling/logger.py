"""
Logging configuration for the signaling relay
"""

import logging
import sys
from typing import Optional
from logging.handlers import RotatingFileHandler
from .constants import LOG_LEVEL, LOG_FILE, LOG_FILE_MAX_BYTES, LOG_FILE_BACKUP_COUNT

LOGGER_NAME = "signaling_relay"


class SecureFormatter(logging.Formatter):
    """Custom formatter that masks credentials in log lines"""

    def format(self, record):
        message = super().format(record)
        sanitized = message.replace('password=', 'password=***')
        sanitized = sanitized.replace('token=', 'token=***')
        return sanitized


def get_logger(name: str = LOGGER_NAME) -> logging.Logger:
    """
    Get a logger instance with the relay's handlers attached

    Args:
        name: Logger name

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    if not logger.handlers:
        formatter = SecureFormatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )

        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

        if LOG_FILE:
            file_handler = RotatingFileHandler(
                LOG_FILE,
                maxBytes=LOG_FILE_MAX_BYTES,
                backupCount=LOG_FILE_BACKUP_COUNT
            )
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)

        logger.setLevel(LOG_LEVEL)

        # Prevent propagation to root logger
        logger.propagate = False

    return logger


def _format_details(details: dict) -> str:
    return " | ".join(f"{key}={value}" for key, value in details.items())


def log_security_event(event_type: str, details: dict, logger: Optional[logging.Logger] = None):
    """
    Log rejected input (rate limit, validation, capacity) with structured data

    Args:
        event_type: Type of security event
        details: Event details
        logger: Logger instance (optional)
    """
    if logger is None:
        logger = get_logger()

    logger.warning(f"SECURITY_EVENT: {event_type} | {_format_details(details)}")


def log_connection_event(connection_id: str, action: str, details: Optional[dict] = None):
    """
    Log connection lifecycle events for monitoring

    Args:
        connection_id: Connection identifier
        action: Action (connect/disconnect/join/leave)
        details: Additional details
    """
    logger = get_logger()
    suffix = f" | {_format_details(details)}" if details else ""
    logger.info(f"CONNECTION_EVENT: {action} | conn={connection_id}{suffix}")


def log_signaling_event(event: str, connection_id: str, details: Optional[dict] = None):
    """
    Log relayed signaling traffic for debugging

    Args:
        event: Relayed event name
        connection_id: Sending connection identifier
        details: Additional details
    """
    logger = get_logger()
    suffix = f" | {_format_details(details)}" if details else ""
    logger.debug(f"SIGNALING_EVENT: {event} | conn={connection_id}{suffix}")


def log_system_event(event_type: str, details: str, level: str = "info"):
    """
    Log system-level events

    Args:
        event_type: Type of system event
        details: Event details
        level: Log level (info/warning/error)
    """
    logger = get_logger()
    log_message = f"SYSTEM_EVENT: {event_type} | {details}"

    if level == "warning":
        logger.warning(log_message)
    elif level == "error":
        logger.error(log_message)
    else:
        logger.info(log_message)
