# File: trainset/config.py
"""
Configuration and logging setup for the train composition package

Settings are validated with pydantic and can be overridden through
environment variables:
- TRAINSET_AVERAGE_PERSON_WEIGHT
- TRAINSET_PERSONS_PER_CONDUCTOR
- TRAINSET_MAX_PENDING_EVENTS
- TRAINSET_LOG_LEVEL
"""

from typing import Optional, Dict, Any
import logging
import os
import sys

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .domain.models import AVERAGE_PERSON_WEIGHT, PERSONS_PER_CONDUCTOR


ENV_PREFIX = "TRAINSET_"

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG", "NOTSET")


class TrainSettings(BaseModel):
    """Tunable constants used by train payload calculations"""

    model_config = ConfigDict(frozen=True)

    average_person_weight: float = Field(
        default=AVERAGE_PERSON_WEIGHT, gt=0,
        description="Weight of one passenger or conductor"
    )
    persons_per_conductor: int = Field(
        default=PERSONS_PER_CONDUCTOR, ge=1,
        description="Passenger capacity served by one conductor"
    )
    max_pending_events: int = Field(
        default=1000, ge=1,
        description="Domain events a train keeps until they are cleared"
    )
    log_level: str = Field(default="INFO", description="Root logging level")

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"Unknown log level: {v}")
        return level

    @classmethod
    def from_env(cls, environ: Optional[Dict[str, str]] = None) -> 'TrainSettings':
        """Build settings from TRAINSET_* environment variables"""
        environ = os.environ if environ is None else environ
        overrides: Dict[str, Any] = {}
        for name in cls.model_fields:
            key = f"{ENV_PREFIX}{name.upper()}"
            if key in environ:
                overrides[name] = environ[key]
        return cls(**overrides)


DEFAULT_SETTINGS = TrainSettings()


def setup_logging(level: str = "INFO", log_file: Optional[str] = None) -> logging.Logger:
    """Setup application logging configuration"""
    handlers: list = [logging.StreamHandler(sys.stdout)]
    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir and not os.path.exists(log_dir):
            os.makedirs(log_dir)
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        handlers=handlers,
        force=True
    )
    return logging.getLogger("trainset")
