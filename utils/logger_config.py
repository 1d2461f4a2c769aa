"""
Unified logging configuration for the depth quality toolkit.

Every module obtains its logger through ``get_logger`` so that all output is
routed through a single project root logger with one set of handlers.
"""

import logging
import sys
from typing import Optional, Dict, Any, Union
from pathlib import Path


DEFAULT_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


class LoggerConfig:
    """Centralized logger configuration manager."""

    _configured = False
    _root_logger_name = 'depth_quality_toolkit'

    @classmethod
    def setup_root_logger(
        cls,
        level: Union[int, str] = logging.INFO,
        format_string: Optional[str] = None,
        log_file: Optional[Path] = None,
        force: bool = False
    ) -> logging.Logger:
        """
        Setup the project root logger.

        Args:
            level: Logging level, as an int or a level name such as 'DEBUG'
            format_string: Custom format string (optional)
            log_file: Optional file path for logging to file
            force: Reconfigure even if the root logger was already set up

        Returns:
            logging.Logger: Configured root logger
        """
        root_logger = logging.getLogger(cls._root_logger_name)
        if cls._configured and not force:
            return root_logger

        level = cls._resolve_level(level)
        root_logger.setLevel(level)

        for handler in list(root_logger.handlers):
            root_logger.removeHandler(handler)
            handler.close()

        formatter = logging.Formatter(format_string or DEFAULT_FORMAT)

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        root_logger.addHandler(console_handler)

        if log_file is not None:
            log_file = Path(log_file)
            log_file.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(log_file)
            file_handler.setLevel(level)
            file_handler.setFormatter(formatter)
            root_logger.addHandler(file_handler)

        # Handlers live on the project root only
        root_logger.propagate = False

        cls._configured = True

        root_logger.debug(f"Root logger configured: level={logging.getLevelName(level)}")
        if log_file is not None:
            root_logger.info(f"Logging to file: {log_file}")

        return root_logger

    @classmethod
    def configure_from(cls, config: Any) -> logging.Logger:
        """
        Reconfigure the root logger from a loaded configuration object.

        Reads the optional ``log_level`` and ``log_file`` entries.
        """
        level = getattr(config, 'log_level', 'INFO')
        log_file = getattr(config, 'log_file', None)
        return cls.setup_root_logger(
            level=level,
            log_file=Path(log_file) if log_file else None,
            force=True
        )

    @classmethod
    def get_logger(cls, name: str) -> logging.Logger:
        """
        Get a child logger of the project root logger.

        Args:
            name: Logger name (typically __name__ from calling module)

        Returns:
            logging.Logger: Configured logger
        """
        if not cls._configured:
            cls.setup_root_logger()

        logger = logging.getLogger(f"{cls._root_logger_name}.{name}")
        logger.propagate = True
        return logger

    @classmethod
    def set_level(cls, level: Union[int, str]) -> None:
        """Change the logging level of the root logger and its handlers."""
        level = cls._resolve_level(level)
        root_logger = logging.getLogger(cls._root_logger_name)
        root_logger.setLevel(level)
        for handler in root_logger.handlers:
            handler.setLevel(level)

        root_logger.info(f"Logging level changed to: {logging.getLevelName(level)}")

    @classmethod
    def is_configured(cls) -> bool:
        """Check if the root logger has been configured."""
        return cls._configured

    @classmethod
    def get_configuration_info(cls) -> Dict[str, Any]:
        """Describe the current root logger setup."""
        if not cls._configured:
            return {'configured': False}

        root_logger = logging.getLogger(cls._root_logger_name)
        return {
            'configured': True,
            'root_logger_name': cls._root_logger_name,
            'level': logging.getLevelName(root_logger.level),
            'handlers': [type(handler).__name__ for handler in root_logger.handlers]
        }

    @staticmethod
    def _resolve_level(level: Union[int, str]) -> int:
        if isinstance(level, str):
            resolved = logging.getLevelName(level.upper())
            if not isinstance(resolved, int):
                raise ValueError(f"Unknown logging level: {level}")
            return resolved
        return level


def get_logger(name: str) -> logging.Logger:
    """
    Convenience function to get a properly configured logger.

    Args:
        name: Logger name, usually the calling module's __name__

    Returns:
        logging.Logger: Configured logger
    """
    return LoggerConfig.get_logger(name)
