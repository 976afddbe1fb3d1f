"""
Logging Configuration Module

This module sets up logging for the entire application. It provides functionality to configure
logging using a YAML file or basic configuration, and includes a custom ContextFilter class
for stamping every record produced while a report is assembled with a request identifier.

Key components:
- ContextFilter: Custom logging filter for adding run IDs to log records
- setup_logging: Function to configure logging based on a YAML file or default settings
- Error handling for logging setup

Dependencies:
- logging: Python's built-in logging module
- yaml: For parsing YAML configuration files
- pathlib: For file path handling
- uuid: For generating unique identifiers
"""

import logging
import logging.config
import os
import yaml
from pathlib import Path
from uuid import uuid4

ENV = os.getenv("APP_ENV", "dev")  # Default to 'dev'

if ENV == "prod":
    from .config_prod import settings
else:
    from .config_dev import settings


class ContextFilter(logging.Filter):
    """
    Custom logging filter to add a unique run identifier to log records.

    Attached to the ``app_logger`` handlers once the YAML configuration is applied,
    since the configured format references ``%(run_id)s``.

    Attributes:
        run_id (uuid): A unique identifier for the current run.
    """
    def __init__(self, name='', run_id=None):

        super().__init__(name)
        self.run_id = run_id or uuid4()

    def filter(self, record):
        """
        Adds the run_id to the log record.

        Args:
            record (LogRecord): The log record to be modified.

        Returns:
            bool: Always returns True to include the record in the log.
        """
        if not hasattr(record, "run_id"):
            record.run_id = self.run_id
        return True


def setup_logging(
    default_path=settings.LOGGING_CONFIG,
    default_level=logging.DEBUG if settings.DEBUG else logging.INFO,
    log_dir=settings.ANALYTICS_LOG
):
    """
    Sets up logging configuration for the application.

    This function attempts to load a YAML configuration file for logging.
    If the file is not found, it falls back to basic logging configuration.

    Args:
        default_path (str): Path to the YAML logging configuration file.
        default_level (int): Default logging level to use if config file is not found.
        log_dir (str): Directory where logs should be stored.

    Returns:
        str: The path of the log file in use.
    """
    log_file_path = os.path.join(log_dir, "analytics_service.log")
    try:
        # Ensure the log directory exists
        os.makedirs(log_dir, exist_ok=True)

        # Load YAML configuration
        path = Path(default_path)
        if path.exists():
            with open(path, 'rt') as f:
                config = yaml.safe_load(f.read())

                # Dynamically update the file handler's filename
                if 'handlers' in config and 'file' in config['handlers']:
                    config['handlers']['file']['filename'] = log_file_path

                # Apply the updated logging configuration
                logging.config.dictConfig(config)

                # Formatters reference %(run_id)s
                app_logger = logging.getLogger("app_logger")
                run_filter = ContextFilter()
                for handler in app_logger.handlers:
                    handler.addFilter(run_filter)
                app_logger.info(f"Logging configured using YAML file at {path}")
        else:
            # Fallback to basic configuration
            logging.basicConfig(
                level=default_level,
                format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                handlers=[
                    logging.FileHandler(log_file_path),
                    logging.StreamHandler()
                ]
            )
            logging.getLogger("app_logger").warning(
                f"Logging configuration file not found at {path}. Using basic config."
            )

    except (OSError, ValueError, yaml.YAMLError) as e:
        # Log any errors during setup
        logging.basicConfig(level=default_level)
        logging.getLogger("app_logger").error(f"Error occurred during logging setup: {str(e)}", exc_info=True)
    return log_file_path


log = setup_logging()
