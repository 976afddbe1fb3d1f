"""
Configuration module for the production deployment.

Same settings surface as the development module; debug is off and the log
directory defaults to the system location used by the service container.
Benchmarks are still read from the environment so they can be tuned per
deployment.
"""

import os
from pydantic_settings import SettingsConfigDict
import logging

from .config_dev import Settings as BaseAnalyticsSettings

"""<-----------------------SERVER CONFIGURATION FILE [NOT FOR DEV]------------------------>"""

logger = logging.getLogger("app_logger")


class Settings(BaseAnalyticsSettings):
    """
    Production settings. Only values that differ from development are declared here.
    """

    model_config = SettingsConfigDict(env_file=None, extra="ignore")

    DEBUG: bool = False
    ANALYTICS_LOG: str = os.getenv("ANALYTICS_LOG", "/var/log/job-search-analytics")


settings = Settings()
logger.info(f"Production settings loaded for {settings.APP_NAME}")
