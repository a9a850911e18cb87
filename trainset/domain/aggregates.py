# File: trainset/domain/aggregates.py
"""
Aggregate Roots for Train Composition
Following Domain-Driven Design (DDD) Aggregate Pattern

Aggregates:
1. Train - Root aggregate owning ordered locomotives and wagons

Key Concepts:
- The aggregate root enforces composition invariants
- Parts are attached and detached only through the root
- Domain events are raised for composition and movement changes
- Derived physical properties are recomputed on every access
"""

from collections import deque
from typing import Deque, List, Optional, Tuple, Union
import logging

from .models import (
    Entity, TrainPart, Locomotive, Wagon, TrainState,
    DomainEvent, TrainStartedEvent, TrainStoppedEvent,
    TrainPartAttachedEvent, TrainPartDetachedEvent
)
from .errors import (
    AlreadyStartedError, AlreadyStoppedError, LackPullingForceError,
    ChangesProhibitedInMoveError, RemovingLonelyLocomotiveProhibitedError,
    TrainConsistencyError,
    LocomotiveAlreadyUsedError, LocomotiveNotUsedError,
    WagonAlreadyUsedError, WagonNotUsedError
)
from ..config import TrainSettings, DEFAULT_SETTINGS


# ============================================================================
# BASE AGGREGATE ROOT
# ============================================================================

class AggregateRoot(Entity):
    """
    Base class for all aggregate roots
    Provides domain event collection and versioning

    Pending events are bounded by max_pending_events; when nobody drains
    them with clear_events(), the oldest are dropped.
    """

    def __init__(self, id: Optional[str] = None, max_pending_events: int = 1000):
        super().__init__(id)
        self._version: int = 1
        self._changes: Deque[DomainEvent] = deque(maxlen=max_pending_events)
        self._logger = logging.getLogger(self.__class__.__name__)

    @property
    def version(self) -> int:
        """Get current aggregate version"""
        return self._version

    def _increment_version(self) -> None:
        self._version += 1

    def _add_domain_event(self, event: DomainEvent) -> None:
        """Add a domain event to the list of changes"""
        if len(self._changes) == self._changes.maxlen:
            self._logger.warning(
                f"Dropping oldest pending event of {self.id}: {self._changes[0].__class__.__name__}"
            )
        self._changes.append(event)
        self._logger.debug(f"Added domain event: {event.__class__.__name__}")

    def clear_events(self) -> List[DomainEvent]:
        """Clear and return all domain events"""
        events = list(self._changes)
        self._changes.clear()
        return events

    @property
    def has_changes(self) -> bool:
        """Check if aggregate has pending domain events"""
        return len(self._changes) > 0

    def _validate_invariants(self) -> None:
        """Validate aggregate invariants - to be overridden by subclasses"""
        pass


# ============================================================================
# TRAIN AGGREGATE
# ============================================================================

class Train(AggregateRoot):
    """
    Aggregate Root: Train composed of locomotives and wagons

    Locomotives always lead the train. A train holds at least one
    locomotive from construction on, and its composition can only change
    while it is stopped.

    Every successful change records a domain event. TrainService drains
    them after each use case; direct callers should call clear_events()
    themselves, otherwise only the newest settings.max_pending_events
    are kept.
    """

    def __init__(
        self,
        locomotive: Locomotive,
        settings: Optional[TrainSettings] = None,
        id: Optional[str] = None
    ):
        if locomotive.is_used:
            raise LocomotiveAlreadyUsedError(
                locomotive.id, f"{locomotive.describe()} is already used"
            )

        settings = settings or DEFAULT_SETTINGS
        super().__init__(id, max_pending_events=settings.max_pending_events)
        self.settings = settings

        self._locomotives: List[Locomotive] = [locomotive]
        self._wagons: List[Wagon] = []
        self._state: TrainState = TrainState.STOPPED
        locomotive._attach_to(self)

        self._validate_invariants()
        self._logger.info(f"Created Train {self.id} led by {locomotive.describe()}")

    @classmethod
    def create(cls, locomotive: Locomotive, settings: Optional[TrainSettings] = None) -> 'Train':
        """Create a stopped train with the given locomotive as its only part"""
        return cls(locomotive, settings=settings)

    def _validate_invariants(self) -> None:
        if not self._locomotives:
            raise TrainConsistencyError(f"Train {self.id} has no locomotives")

        for part in self.all_parts:
            if part.owner is not self:
                raise TrainConsistencyError(
                    f"{part.describe()} is listed in train {self.id} but owned elsewhere"
                )

    # ========================================================================
    # STATE
    # ========================================================================

    @property
    def locomotives(self) -> Tuple[Locomotive, ...]:
        return tuple(self._locomotives)

    @property
    def wagons(self) -> Tuple[Wagon, ...]:
        return tuple(self._wagons)

    @property
    def state(self) -> TrainState:
        return self._state

    @property
    def is_moving(self) -> bool:
        return self._state == TrainState.MOVING

    # ========================================================================
    # DERIVED PROPERTIES
    # ========================================================================

    @property
    def all_parts(self) -> List[TrainPart]:
        """Locomotives first, then wagons"""
        return [*self._locomotives, *self._wagons]

    @property
    def empty_weight(self) -> float:
        return sum(part.weight for part in self.all_parts)

    @property
    def length(self) -> float:
        return sum(part.length for part in self.all_parts)

    @property
    def max_persons_count(self) -> int:
        return sum(part.max_persons_count for part in self.all_parts)

    @property
    def max_goods_weight(self) -> float:
        return sum(part.max_goods_weight for part in self.all_parts)

    @property
    def conductors_count(self) -> int:
        """One conductor for every started group of persons_per_conductor seats"""
        persons = self.max_persons_count
        per_conductor = self.settings.persons_per_conductor
        if persons % per_conductor == 0:
            return persons // per_conductor
        return persons // per_conductor + 1

    @property
    def max_payload(self) -> float:
        """Weight of all persons, conductors and goods at full capacity"""
        persons = self.max_persons_count + self.conductors_count
        return persons * self.settings.average_person_weight + self.max_goods_weight

    @property
    def max_overall_weight(self) -> float:
        return self.max_payload + self.empty_weight

    @property
    def total_pulling_force(self) -> float:
        return sum(locomotive.pulling_force for locomotive in self._locomotives)

    @property
    def is_max_payload_possible_to_pull(self) -> bool:
        return self.total_pulling_force >= self.max_overall_weight

    def describe_parts(self) -> List[str]:
        """Get descriptions of all parts in train order"""
        descriptions = [part.describe() for part in self.all_parts]
        for description in descriptions:
            self._logger.debug(description)
        return descriptions

    # ========================================================================
    # COMPOSITION METHODS
    # ========================================================================

    def add_locomotive(self, locomotive: Locomotive, at: Optional[int] = None) -> int:
        """
        Attach a locomotive
        Inserts at 'at' when it is a valid index, otherwise appends.
        Returns: position of the locomotive
        Raises: ChangesProhibitedInMoveError, LocomotiveAlreadyUsedError
        """
        self._ensure_stopped()

        if locomotive.is_used:
            raise LocomotiveAlreadyUsedError(
                locomotive.id, f"{locomotive.describe()} is already used"
            )

        position = self._insert(self._locomotives, locomotive, at)
        self._record_attach(locomotive, position)
        return position

    def remove_locomotive(self, locomotive: Locomotive) -> int:
        """
        Detach a locomotive
        Returns: former position of the locomotive
        Raises: ChangesProhibitedInMoveError, RemovingLonelyLocomotiveProhibitedError,
                LocomotiveNotUsedError, TrainConsistencyError
        """
        self._ensure_stopped()

        if len(self._locomotives) <= 1:
            raise RemovingLonelyLocomotiveProhibitedError(
                f"Train {self.id} cannot lose its only locomotive"
            )

        if not locomotive.is_used:
            raise LocomotiveNotUsedError(
                locomotive.id, f"{locomotive.describe()} is not used"
            )

        position = self._pop(self._locomotives, locomotive)
        self._record_detach(locomotive, position)
        return position

    def add_wagon(self, wagon: Wagon, at: Optional[int] = None) -> int:
        """
        Attach a wagon
        Inserts at 'at' when it is a valid index, otherwise appends.
        Returns: position of the wagon
        """
        self._ensure_stopped()

        if wagon.is_used:
            raise WagonAlreadyUsedError(wagon.id, f"{wagon.describe()} is already used")

        position = self._insert(self._wagons, wagon, at)
        self._record_attach(wagon, position)
        return position

    def remove_wagon(self, wagon: Wagon) -> int:
        """
        Detach a wagon
        Returns: former position of the wagon
        """
        self._ensure_stopped()

        if not wagon.is_used:
            raise WagonNotUsedError(wagon.id, f"{wagon.describe()} is not used")

        position = self._pop(self._wagons, wagon)
        self._record_detach(wagon, position)
        return position

    def add(self, part: Union[Locomotive, Wagon], at: Optional[int] = None) -> int:
        """Attach a locomotive or a wagon"""
        if isinstance(part, Locomotive):
            return self.add_locomotive(part, at)
        if isinstance(part, Wagon):
            return self.add_wagon(part, at)
        raise TypeError(f"Cannot attach {type(part).__name__} to a train")

    def remove(self, part: Union[Locomotive, Wagon]) -> int:
        """Detach a locomotive or a wagon"""
        if isinstance(part, Locomotive):
            return self.remove_locomotive(part)
        if isinstance(part, Wagon):
            return self.remove_wagon(part)
        raise TypeError(f"Cannot detach {type(part).__name__} from a train")

    # ========================================================================
    # MOVEMENT METHODS
    # ========================================================================

    def start(self) -> None:
        """
        Start moving
        Raises: AlreadyStartedError, LackPullingForceError
        """
        if self._state != TrainState.STOPPED:
            raise AlreadyStartedError(f"Train {self.id} is already moving")

        pulling_force = self.total_pulling_force
        overall_weight = self.max_overall_weight
        if pulling_force < overall_weight:
            raise LackPullingForceError(pulling_force, overall_weight)

        self._state = TrainState.MOVING
        self._increment_version()
        self._add_domain_event(TrainStartedEvent(
            train_id=self.id,
            total_pulling_force=pulling_force,
            max_overall_weight=overall_weight
        ))
        self._logger.info(f"Train {self.id} started")

    def stop(self) -> None:
        """
        Stop moving
        Raises: AlreadyStoppedError
        """
        if self._state != TrainState.MOVING:
            raise AlreadyStoppedError(f"Train {self.id} is already stopped")

        self._state = TrainState.STOPPED
        self._increment_version()
        self._add_domain_event(TrainStoppedEvent(train_id=self.id))
        self._logger.info(f"Train {self.id} stopped")

    # ========================================================================
    # INTERNAL HELPER METHODS
    # ========================================================================

    def _ensure_stopped(self) -> None:
        if self._state != TrainState.STOPPED:
            raise ChangesProhibitedInMoveError(
                f"Train {self.id} cannot change composition while moving"
            )

    def _insert(self, parts: list, part: TrainPart, at: Optional[int]) -> int:
        if at is not None and 0 <= at < len(parts):
            parts.insert(at, part)
            position = at
        else:
            parts.append(part)
            position = len(parts) - 1
        part._attach_to(self)
        return position

    def _pop(self, parts: list, part: TrainPart) -> int:
        for index, candidate in enumerate(parts):
            if candidate is part:
                del parts[index]
                part._detach()
                return index

        self._logger.error(
            f"{part.describe()} is marked used but is not part of train {self.id}"
        )
        raise TrainConsistencyError(
            f"{part.describe()} is used but not found in train {self.id}"
        )

    def _record_attach(self, part: TrainPart, position: int) -> None:
        self._increment_version()
        self._add_domain_event(TrainPartAttachedEvent(
            train_id=self.id,
            part_id=part.id,
            part_kind=part.label,
            position=position
        ))
        self._logger.info(f"{part.describe()} attached to train {self.id} at {position}")

    def _record_detach(self, part: TrainPart, position: int) -> None:
        self._increment_version()
        self._add_domain_event(TrainPartDetachedEvent(
            train_id=self.id,
            part_id=part.id,
            part_kind=part.label,
            position=position
        ))
        self._logger.info(f"{part.describe()} detached from train {self.id} at {position}")

    def __repr__(self) -> str:
        return (
            f"Train(id={self.id}, state={self._state.value}, "
            f"locomotives={len(self._locomotives)}, wagons={len(self._wagons)})"
        )
