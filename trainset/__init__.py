"""
trainset - composable train domain model

A train is built from one or more locomotives and any number of wagons.
The Train aggregate guards its composition and derives weight, length,
capacity and payload from the parts it holds.
"""

from .config import TrainSettings, setup_logging
from .domain.models import (
    TrainPart, Locomotive, Wagon,
    LocomotiveType, WagonType, TrainState,
    TrainPartFactory, AVERAGE_PERSON_WEIGHT
)
from .domain.aggregates import Train
from .domain import errors

__version__ = "1.0.0"

__all__ = [
    "Train", "TrainPart", "Locomotive", "Wagon",
    "LocomotiveType", "WagonType", "TrainState",
    "TrainPartFactory", "TrainSettings", "setup_logging",
    "AVERAGE_PERSON_WEIGHT", "errors",
]
