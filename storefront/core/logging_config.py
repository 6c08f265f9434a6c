# storefront/core/logging_config.py
"""Logging configuration, including redaction of credentials in log output"""

import os
import re
import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

REDACTED = "[REDACTED]"

SENSITIVE_PATTERNS = [
    re.compile(r"password\s*[=:]\s*\S+", re.IGNORECASE),
    re.compile(r"token\s*[=:]\s*\S+", re.IGNORECASE),
    re.compile(r"secret\s*[=:]\s*\S+", re.IGNORECASE),
    re.compile(r"api[_-]?key\s*[=:]\s*\S+", re.IGNORECASE),
    re.compile(r"authorization\s*[=:]\s*(?:\w+\s+)?\S+", re.IGNORECASE),
    re.compile(r"bearer\s+\S+", re.IGNORECASE),
]

# Compared lower-cased
SENSITIVE_FIELDS = {
    "password",
    "email",
    "phone",
    "address",
    "creditcard",
    "credit_card",
    "cardnumber",
    "card_number",
    "cvv",
    "ssn",
    "socialsecuritynumber",
    "token",
    "accesstoken",
    "access_token",
    "refreshtoken",
    "refresh_token",
    "csrftoken",
    "csrf_token",
    "apikey",
    "api_key",
    "secret",
}


def mask_sensitive_info(message: str) -> str:
    """Replace credential-looking fragments in a message with [REDACTED]"""
    masked = message
    for pattern in SENSITIVE_PATTERNS:
        masked = pattern.sub(REDACTED, masked)
    return masked


def sanitize_for_log(data: Any) -> Any:
    """Recursively redact values stored under sensitive keys"""
    if data is None:
        return data

    if isinstance(data, (list, tuple)):
        return [sanitize_for_log(item) for item in data]

    if isinstance(data, dict):
        sanitized = {}
        for key, value in data.items():
            if str(key).lower() in SENSITIVE_FIELDS:
                sanitized[key] = REDACTED
            else:
                sanitized[key] = sanitize_for_log(value)
        return sanitized

    return data


class SensitiveDataFilter(logging.Filter):
    """Redacts credentials from the rendered message of every record"""

    def filter(self, record: logging.LogRecord) -> bool:
        rendered = record.getMessage()
        masked = mask_sensitive_info(rendered)
        if masked != rendered:
            record.msg = masked
            record.args = None
        return True


def setup_logging():
    """Configure the root logger (console + rotating file)"""
    log_level = os.getenv("LOG_LEVEL", "INFO").upper()
    log_dir = Path(os.getenv("LOG_DIR", "logs"))

    log_dir.mkdir(parents=True, exist_ok=True)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    # Attach each handler only once
    if not any(type(h) is logging.StreamHandler for h in root_logger.handlers):
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(formatter)
        console_handler.addFilter(SensitiveDataFilter())
        root_logger.addHandler(console_handler)

    # Rotating file, 5 MB per file, 5 backups
    log_file = log_dir / 'storefront.log'
    if not any(isinstance(h, RotatingFileHandler) and h.baseFilename == os.path.abspath(log_file) for h in root_logger.handlers):
        file_handler = RotatingFileHandler(
            filename=str(log_file),
            maxBytes=5 * 1024 * 1024,
            backupCount=5,
            encoding='utf-8'
        )
        file_handler.setFormatter(formatter)
        file_handler.addFilter(SensitiveDataFilter())
        root_logger.addHandler(file_handler)

    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

    return root_logger
