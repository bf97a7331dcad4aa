"""
Logger configuration for the Document Manager service.

All modules obtain their logger through ``get_logger(__name__)``; the
application factory calls ``setup_logging`` once with values taken from
the settings object, so handlers are never configured at import time.
"""

import copy
import json
import logging
import logging.handlers
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional


class ColoredFormatter(logging.Formatter):
    """Console formatter that colors the level name."""

    COLORS = {
        'DEBUG': '\033[36m',
        'INFO': '\033[32m',
        'WARNING': '\033[33m',
        'ERROR': '\033[31m',
        'CRITICAL': '\033[35m',
        'RESET': '\033[0m'
    }

    def format(self, record):
        # other handlers share the record, color a copy only
        record = copy.copy(record)
        color = self.COLORS.get(record.levelname, self.COLORS['RESET'])
        record.levelname = f"{color}{record.levelname}{self.COLORS['RESET']}"
        return super().format(record)


class JSONFormatter(logging.Formatter):
    """One JSON object per line, extra fields included."""

    RESERVED = {
        'name', 'msg', 'args', 'levelname', 'levelno', 'pathname', 'filename',
        'module', 'exc_info', 'exc_text', 'stack_info', 'lineno', 'funcName',
        'created', 'msecs', 'relativeCreated', 'thread', 'threadName',
        'processName', 'process', 'message', 'taskName',
    }

    def format(self, record):
        log_entry = {
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            'module': record.module,
            'function': record.funcName,
            'line': record.lineno,
        }

        if record.exc_info:
            log_entry['exception'] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key not in self.RESERVED:
                log_entry[key] = value

        return json.dumps(log_entry, ensure_ascii=False, default=str)


class LoggerConfig:
    """Centralized logger configuration."""

    FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

    def __init__(self, log_dir: str = "logs"):
        self.log_dir = Path(log_dir)
        self.config = {
            'level': logging.INFO,
            'console': True,
            'file': False,
            'json_format': False,
            'max_file_size': 10 * 1024 * 1024,
            'backup_count': 5,
            'log_file': 'app.log',
            'error_file': 'error.log'
        }

    def configure(self,
                  level: str = 'INFO',
                  console: bool = True,
                  file: bool = False,
                  json_format: bool = False,
                  log_file: Optional[str] = None,
                  error_file: Optional[str] = None,
                  max_file_size: int = 10 * 1024 * 1024,
                  backup_count: int = 5) -> None:
        """
        Configure the root logger.

        Args:
            level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
            console: Enable console logging
            file: Enable rotating file logging under ``logs/``
            json_format: Use JSON format for structured logging
            log_file: Custom log file name
            error_file: Custom error log file name
            max_file_size: Maximum file size before rotation
            backup_count: Number of backup files to keep
        """
        self.config.update({
            'level': getattr(logging, level.upper()),
            'console': console,
            'file': file,
            'json_format': json_format,
            'log_file': log_file or self.config['log_file'],
            'error_file': error_file or self.config['error_file'],
            'max_file_size': max_file_size,
            'backup_count': backup_count
        })

        root_logger = logging.getLogger()
        root_logger.handlers.clear()
        root_logger.setLevel(self.config['level'])

        if self.config['console']:
            console_handler = logging.StreamHandler(sys.stdout)
            console_handler.setLevel(self.config['level'])
            if self.config['json_format']:
                console_handler.setFormatter(JSONFormatter())
            else:
                console_handler.setFormatter(ColoredFormatter(self.FORMAT, datefmt=self.DATE_FORMAT))
            root_logger.addHandler(console_handler)

        if self.config['file']:
            self.log_dir.mkdir(parents=True, exist_ok=True)

            file_handler = self._rotating_handler(self.config['log_file'], self.config['level'])
            file_handler.setFormatter(self._file_formatter(self.FORMAT))
            root_logger.addHandler(file_handler)

            # ERROR and CRITICAL only
            error_handler = self._rotating_handler(self.config['error_file'], logging.ERROR)
            error_handler.setFormatter(
                self._file_formatter(self.FORMAT + '\n%(pathname)s:%(lineno)d')
            )
            root_logger.addHandler(error_handler)

    def _rotating_handler(self, name: str, level: int) -> logging.Handler:
        handler = logging.handlers.RotatingFileHandler(
            self.log_dir / name,
            maxBytes=self.config['max_file_size'],
            backupCount=self.config['backup_count']
        )
        handler.setLevel(level)
        return handler

    def _file_formatter(self, fmt: str) -> logging.Formatter:
        if self.config['json_format']:
            return JSONFormatter()
        return logging.Formatter(fmt, datefmt=self.DATE_FORMAT)

    def get_logger(self, name: str) -> logging.Logger:
        return logging.getLogger(name)


logger_config = LoggerConfig()


def setup_logging(level: str = 'INFO',
                  console: bool = True,
                  file: bool = False,
                  json_format: bool = False,
                  **kwargs) -> None:
    """
    Setup logging configuration.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        console: Enable console logging
        file: Enable file logging
        json_format: Use JSON format for structured logging
        **kwargs: Additional options passed to ``LoggerConfig.configure``
    """
    logger_config.configure(
        level=level,
        console=console,
        file=file,
        json_format=json_format,
        **kwargs
    )


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance.

    Args:
        name: Logger name (usually __name__)

    Returns:
        Logger instance
    """
    return logger_config.get_logger(name)


def log_request(logger: logging.Logger, method: str, url: str, status_code: int,
                response_time: float, **extra):
    """Log HTTP request details."""
    logger.info(f"{method} {url} - {status_code} - {response_time:.3f}s", extra=extra)


def log_database_operation(logger: logging.Logger, operation: str, table: str,
                           record_id: str = None, **extra):
    """Log database operations."""
    message = f"DB {operation} on {table}"
    if record_id:
        message += f" (ID: {record_id})"
    logger.debug(message, extra=extra)


def log_file_operation(logger: logging.Logger, operation: str, path: str,
                       size: int = None, **extra):
    """Log file store operations."""
    message = f"FILE {operation} {path}"
    if size is not None:
        message += f" ({size} bytes)"
    logger.debug(message, extra=extra)
