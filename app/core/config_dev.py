"""
Configuration Module

This module handles the configuration settings for the analytics service, including
environment variables, the log directory and the benchmark constants used by the
recommendation rules.

Key components:
- Settings: Pydantic BaseSettings class for managing configuration
- Environment variable loading
- Benchmark and threshold defaults (product-tunable heuristics)

Dependencies:
- os for environment variable access
- pydantic_settings for settings management
- dotenv for .env file loading
- logging for application logging
"""

import os
from pydantic_settings import BaseSettings, SettingsConfigDict
from dotenv import load_dotenv
import logging

# Load environment variables from .env file
load_dotenv(override=True)

logger = logging.getLogger("app_logger")


class Settings(BaseSettings):
    """
    Settings class to manage application configuration.

    Benchmarks are industry reference values, not derived constants. Every one of them
    can be overridden through the environment without touching the rule table.
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Basic configurations
    APP_NAME: str = "Job Search Analytics Service"
    DEBUG: bool = True
    ANALYTICS_LOG: str = os.getenv("ANALYTICS_LOG", "./logs")
    LOGGING_CONFIG: str = os.getenv("LOGGING_CONFIG", "logging.yaml")

    # Job-search industry averages (percent / days)
    BENCHMARK_RESPONSE_RATE: float = 25.0
    BENCHMARK_INTERVIEW_RATE: float = 15.0
    BENCHMARK_OFFER_RATE: float = 5.0
    BENCHMARK_TIME_TO_OFFER_DAYS: float = 45.0
    BENCHMARK_RESPONSE_TIME_DAYS: float = 14.0

    # Interview industry averages
    BENCHMARK_INTERVIEW_SUCCESS_RATE: float = 40.0
    BENCHMARK_INTERVIEW_TO_OFFER_RATE: float = 25.0

    # Networking industry averages
    BENCHMARK_WEEKLY_ACTIVITY: float = 3.0
    BENCHMARK_NETWORKING_RESPONSE_RATE: float = 40.0
    BENCHMARK_RECIPROCITY_SCORE: float = 80.0
    BENCHMARK_NETWORKING_CONVERSION_RATE: float = 15.0

    # Heuristic thresholds
    TREND_THRESHOLD: float = 5.0
    LOW_RESPONSE_RATE_THRESHOLD: float = 20.0
    LOW_INTERVIEW_RATE_THRESHOLD: float = 10.0
    LOW_INTERVIEW_RATE_MIN_APPLIED: int = 10
    LOW_OFFER_RATE_THRESHOLD: float = 20.0
    DEADLINE_ADHERENCE_THRESHOLD: float = 80.0
    COHORT_MIN_SIZE: int = 3
    COHORT_SUCCESS_MULTIPLIER: float = 2.0
    FAST_RESPONSE_DAYS: float = 7.0

    # Goals
    WEEKLY_APPLICATION_GOAL: int = 5
    MONTHLY_APPLICATION_GOAL: int = 20
    MONTHLY_INTERVIEW_GOAL: int = 5
    MONTHLY_OFFER_GOAL: int = 1


# Create an instance of the Settings class
settings = Settings()
logger.info(f"Settings loaded for {settings.APP_NAME} (debug={settings.DEBUG})")
