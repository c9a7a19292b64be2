"""
Logging setup for the package. Modules log through ``logging.getLogger(__name__)``;
this only wires handlers and levels from ``config``.
"""
import logging
from typing import Optional

from . import config as core_config


def configure_logging(level: Optional[str] = None,
                      log_to_file: Optional[bool] = None,
                      log_file_path: Optional[str] = None) -> logging.Logger:
    """
    Configures the package logger.

    :param level: Log level name, defaults to core_config.LOG_LEVEL.
    :param log_to_file: Also write to a file, defaults to core_config.LOG_TO_FILE.
    :param log_file_path: Path of the log file, defaults to core_config.LOG_FILE_PATH.
    :return: The configured package logger.
    """
    level_name = (level or core_config.LOG_LEVEL).upper()
    numeric_level = logging.getLevelName(level_name)
    if not isinstance(numeric_level, int):
        raise ValueError(f"Unknown log level: {level_name}")

    package_logger = logging.getLogger(__package__)
    package_logger.setLevel(numeric_level)
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(core_config.LOG_FORMAT)
    stream_handler = logging.StreamHandler() # stderr, so stdout stays the report
    stream_handler.setFormatter(formatter)
    package_logger.addHandler(stream_handler)

    if log_to_file if log_to_file is not None else core_config.LOG_TO_FILE:
        file_handler = logging.FileHandler(log_file_path or core_config.LOG_FILE_PATH)
        file_handler.setFormatter(formatter)
        package_logger.addHandler(file_handler)

    package_logger.propagate = False
    return package_logger
