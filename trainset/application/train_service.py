# File: trainset/application/train_service.py
"""
Train Composition Application Service

This module implements the application service layer for train composition.
It orchestrates the Train aggregate, guards it against concurrent use and
forwards the domain events it raises to the event bus.

Responsibilities:
1. Compose trains and keep them addressable by id
2. Execute composition and movement use cases
3. Handle cross-cutting concerns (locking, logging, event dispatch)
4. Provide read models for callers

Domain errors propagate unchanged to the caller.
"""

from typing import Dict, List, Optional, Union, Iterator
from contextlib import contextmanager
import logging
import threading

from ..config import TrainSettings
from ..domain.models import Locomotive, Wagon
from ..domain.aggregates import Train
from ..domain.errors import TrainsetError, TrainConsistencyError, ChangesProhibitedInMoveError
from ..infrastructure.messaging import EventBus
from .dtos import LocomotiveSpecDTO, WagonSpecDTO, TrainSummaryDTO


# ============================================================================
# EXCEPTIONS
# ============================================================================

class TrainServiceError(Exception):
    """Base exception for train service errors"""
    pass


class TrainNotFoundError(TrainServiceError):
    """Exception when no train is registered under the given id"""

    def __init__(self, train_id: str):
        self.train_id = train_id
        super().__init__(f"Train {train_id} not found")


class InvalidPartError(TrainServiceError):
    """Exception when a part or part specification cannot be used"""
    pass


PartInput = Union[Locomotive, Wagon, LocomotiveSpecDTO, WagonSpecDTO]


# ============================================================================
# TRAIN SERVICE
# ============================================================================

class TrainService:
    """
    Application service for train composition

    Each registered train has its own re-entrant lock; every use case on a
    train runs entirely inside that lock, which also covers the usage flags
    of the parts the train holds.
    """

    def __init__(
        self,
        event_bus: Optional[EventBus] = None,
        settings: Optional[TrainSettings] = None
    ):
        self.event_bus = event_bus or EventBus()
        self.settings = settings or TrainSettings()
        self._trains: Dict[str, Train] = {}
        self._locks: Dict[str, threading.RLock] = {}
        self._registry_lock = threading.Lock()
        self.logger = logging.getLogger(self.__class__.__name__)

    # ========================================================================
    # REGISTRY
    # ========================================================================

    def compose(self, locomotive: Union[Locomotive, LocomotiveSpecDTO]) -> Train:
        """
        Create a train led by the given locomotive and register it
        Raises: LocomotiveAlreadyUsedError if the locomotive is attached elsewhere
        """
        locomotive = self._to_part(locomotive)
        if not isinstance(locomotive, Locomotive):
            raise InvalidPartError(f"A train must be composed from a locomotive, got {type(locomotive).__name__}")

        train = Train.create(locomotive, settings=self.settings)
        with self._registry_lock:
            self._trains[train.id] = train
            self._locks[train.id] = threading.RLock()

        self.logger.info(f"Composed train {train.id}")
        self._dispatch(train)
        return train

    def get_train(self, train_id: str) -> Train:
        train = self._trains.get(train_id)
        if train is None:
            raise TrainNotFoundError(train_id)
        return train

    def list_trains(self) -> List[Train]:
        return list(self._trains.values())

    def decommission(self, train_id: str) -> Train:
        """
        Stop managing a train and return it
        Its parts stay used for as long as the caller keeps the train.
        Raises: ChangesProhibitedInMoveError if the train is moving
        """
        with self.lock(train_id) as train:
            if train.is_moving:
                self.logger.warning(f"Rejected decommission of moving train {train_id}")
                raise ChangesProhibitedInMoveError(
                    f"Train {train_id} cannot be decommissioned while moving"
                )
            with self._registry_lock:
                del self._trains[train_id]
                del self._locks[train_id]

        self.logger.info(f"Decommissioned train {train_id}")
        return train

    # ========================================================================
    # USE CASES
    # ========================================================================

    def attach(self, train_id: str, part: PartInput, at: Optional[int] = None) -> int:
        """
        Attach a locomotive or wagon
        Returns: position of the part within its sequence
        """
        part = self._to_part(part)
        with self._train_operation(train_id, "attach") as train:
            return train.add(part, at)

    def detach(self, train_id: str, part: Union[Locomotive, Wagon]) -> int:
        """
        Detach a locomotive or wagon
        Returns: former position of the part
        """
        if not isinstance(part, (Locomotive, Wagon)):
            raise InvalidPartError(f"Unsupported part: {type(part).__name__}")
        with self._train_operation(train_id, "detach") as train:
            return train.remove(part)

    def start(self, train_id: str) -> TrainSummaryDTO:
        with self._train_operation(train_id, "start") as train:
            train.start()
            return TrainSummaryDTO.from_train(train)

    def stop(self, train_id: str) -> TrainSummaryDTO:
        with self._train_operation(train_id, "stop") as train:
            train.stop()
            return TrainSummaryDTO.from_train(train)

    def summary(self, train_id: str) -> TrainSummaryDTO:
        """Get current read model of a train"""
        with self.lock(train_id) as train:
            return TrainSummaryDTO.from_train(train)

    # ========================================================================
    # INTERNAL HELPERS
    # ========================================================================

    @contextmanager
    def lock(self, train_id: str) -> Iterator[Train]:
        """Hold the lock of a train for a block of operations"""
        with self._registry_lock:
            train = self._trains.get(train_id)
            train_lock = self._locks.get(train_id)
        if train is None:
            raise TrainNotFoundError(train_id)
        with train_lock:
            # decommissioned while waiting for the lock
            if train_id not in self._trains:
                raise TrainNotFoundError(train_id)
            yield train

    @contextmanager
    def _train_operation(self, train_id: str, operation: str) -> Iterator[Train]:
        with self.lock(train_id) as train:
            try:
                yield train
            except TrainConsistencyError as e:
                self.logger.error(f"Consistency violation during {operation} on train {train_id}: {e}")
                raise
            except TrainsetError as e:
                self.logger.warning(f"Rejected {operation} on train {train_id}: {e}")
                raise
            self._dispatch(train)

    def _dispatch(self, train: Train) -> None:
        events = train.clear_events()
        if events:
            self.event_bus.publish_all(events)

    @staticmethod
    def _to_part(part: PartInput) -> Union[Locomotive, Wagon]:
        if isinstance(part, (LocomotiveSpecDTO, WagonSpecDTO)):
            return part.to_domain()
        if isinstance(part, (Locomotive, Wagon)):
            return part
        raise InvalidPartError(f"Unsupported part: {type(part).__name__}")
