# File: trainset/domain/models.py
"""
Domain Models for Train Composition
Following Domain-Driven Design (DDD) principles with rich domain models

This module contains:
1. Enums: Type enumerations for domain concepts
2. Entities: Train parts with identity and lifecycle
3. Factories: Creation of parts from plain values
4. Domain Events: Events representing composition and movement changes

Train parts carry no range validation of their physical attributes.
"""

from abc import ABC, abstractmethod
from typing import Optional, Dict, Any, TYPE_CHECKING
from datetime import datetime
from enum import Enum
import uuid
import weakref

if TYPE_CHECKING:
    from .aggregates import Train


# ============================================================================
# DOMAIN CONSTANTS
# ============================================================================

AVERAGE_PERSON_WEIGHT: float = 75.0   # kg per passenger or conductor
PERSONS_PER_CONDUCTOR: int = 50       # one conductor per started fifty seats


# ============================================================================
# ENUMS FOR DOMAIN TYPES
# ============================================================================

class LocomotiveType(Enum):
    """Enumeration of locomotive traction types"""
    DIESEL = "diesel"
    ELECTRICAL = "electrical"
    STEAM = "steam"

    def __str__(self) -> str:
        return self.value.title()


class WagonType(Enum):
    """
    Enumeration of wagon types
    Each type describes what the wagon carries
    """
    PASSENGER = "passenger"     # Seated passengers
    SLEEPING = "sleeping"       # Sleeper berths
    RESTAURANT = "restaurant"   # Dining car
    FREIGHT = "freight"         # Goods only

    def __str__(self) -> str:
        return self.value.title()


class TrainState(Enum):
    """
    Enumeration of train movement states
    Composition changes are only allowed while stopped
    """
    STOPPED = "stopped"
    MOVING = "moving"


# ============================================================================
# DOMAIN ENTITIES
# ============================================================================

class Entity:
    """
    Base class for all domain entities
    Provides common functionality for entities with identity
    """

    def __init__(self, id: Optional[str] = None):
        self._id = id or str(uuid.uuid4())

    @property
    def id(self) -> str:
        """Get entity ID"""
        return self._id

    def __eq__(self, other: object) -> bool:
        """Entities are equal if they have the same ID"""
        if not isinstance(other, Entity):
            return False
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(id={self.id})"


class TrainPart(Entity):
    """
    Entity: Any physical unit that can be attached to a train

    The part keeps a weak back-reference to the train that currently owns
    it. Only Train writes that reference, through _attach_to/_detach.
    Its id is always generated, so no two parts share one.
    """

    label = "Train Part"

    def __init__(
        self,
        weight: float,
        length: float,
        max_persons_count: int,
        max_goods_weight: float
    ):
        super().__init__()
        self._weight = weight
        self._length = length
        self._max_persons_count = max_persons_count
        self._max_goods_weight = max_goods_weight
        self._owner_ref: Optional[weakref.ReferenceType] = None

    @property
    def weight(self) -> float:
        return self._weight

    @property
    def length(self) -> float:
        return self._length

    @property
    def max_persons_count(self) -> int:
        return self._max_persons_count

    @property
    def max_goods_weight(self) -> float:
        return self._max_goods_weight

    @property
    def owner(self) -> Optional['Train']:
        """Train currently holding this part, if it is still alive"""
        if self._owner_ref is None:
            return None
        return self._owner_ref()

    @property
    def is_used(self) -> bool:
        """True while the part is attached to a train"""
        return self.owner is not None

    def _attach_to(self, train: 'Train') -> None:
        self._owner_ref = weakref.ref(train)

    def _detach(self) -> None:
        self._owner_ref = None

    def describe(self) -> str:
        """Get human-readable part description"""
        return f"{self.label} №{self.id}"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for read models"""
        return {
            "id": self.id,
            "kind": self.label,
            "weight": self.weight,
            "length": self.length,
            "max_persons_count": self.max_persons_count,
            "max_goods_weight": self.max_goods_weight,
            "is_used": self.is_used
        }

    def __str__(self) -> str:
        return self.describe()


class Locomotive(TrainPart):
    """
    Entity: Locomotive providing pulling force
    Extends TrainPart with traction attributes
    """

    label = "Locomotive"

    def __init__(
        self,
        weight: float,
        length: float,
        max_persons_count: int,
        max_goods_weight: float,
        pulling_force: float,
        type: LocomotiveType
    ):
        super().__init__(weight, length, max_persons_count, max_goods_weight)
        self._pulling_force = pulling_force
        self._type = type

    @property
    def pulling_force(self) -> float:
        return self._pulling_force

    @property
    def type(self) -> LocomotiveType:
        return self._type

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data.update({
            "pulling_force": self.pulling_force,
            "type": self.type.value
        })
        return data


class Wagon(TrainPart):
    """
    Entity: Wagon carrying passengers or goods
    """

    label = "Wagon"

    def __init__(
        self,
        weight: float,
        length: float,
        max_persons_count: int,
        max_goods_weight: float,
        manufacturer_name: str,
        production_year: int,
        type: WagonType
    ):
        super().__init__(weight, length, max_persons_count, max_goods_weight)
        self._manufacturer_name = manufacturer_name
        self._production_year = production_year
        self._type = type

    @property
    def manufacturer_name(self) -> str:
        return self._manufacturer_name

    @property
    def production_year(self) -> int:
        return self._production_year

    @property
    def type(self) -> WagonType:
        return self._type

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data.update({
            "manufacturer_name": self.manufacturer_name,
            "production_year": self.production_year,
            "type": self.type.value
        })
        return data


# ============================================================================
# FACTORIES
# ============================================================================

class TrainPartFactory:
    """
    Factory for creating Locomotive and Wagon instances
    Converts type names (e.g. "diesel", "freight") into domain types
    """

    @staticmethod
    def create_locomotive(
        weight: float,
        length: float,
        max_persons_count: int,
        max_goods_weight: float,
        pulling_force: float,
        locomotive_type: str
    ) -> Locomotive:
        """Create a Locomotive from string type name"""
        try:
            type_ = LocomotiveType(locomotive_type)
        except ValueError:
            raise ValueError(f"Invalid locomotive type: {locomotive_type}")

        return Locomotive(
            weight=weight,
            length=length,
            max_persons_count=max_persons_count,
            max_goods_weight=max_goods_weight,
            pulling_force=pulling_force,
            type=type_
        )

    @staticmethod
    def create_wagon(
        weight: float,
        length: float,
        max_persons_count: int,
        max_goods_weight: float,
        manufacturer_name: str,
        production_year: int,
        wagon_type: str
    ) -> Wagon:
        """Create a Wagon from string type name"""
        try:
            type_ = WagonType(wagon_type)
        except ValueError:
            raise ValueError(f"Invalid wagon type: {wagon_type}")

        return Wagon(
            weight=weight,
            length=length,
            max_persons_count=max_persons_count,
            max_goods_weight=max_goods_weight,
            manufacturer_name=manufacturer_name,
            production_year=production_year,
            type=type_
        )


# ============================================================================
# DOMAIN EVENTS
# ============================================================================

class DomainEvent(ABC):
    """
    Base class for all domain events
    Events represent something that happened to a train
    """

    event_type: str = "domain_event"

    def __init__(self, train_id: str):
        self.event_id = str(uuid.uuid4())
        self.timestamp = datetime.now()
        self.train_id = train_id

    @abstractmethod
    def to_dict(self) -> Dict[str, Any]:
        """Convert event to dictionary"""
        pass

    def _envelope(self, data: Dict[str, Any]) -> Dict[str, Any]:
        return {
            "event_type": self.event_type,
            "event_id": self.event_id,
            "timestamp": self.timestamp.isoformat(),
            "data": {"train_id": self.train_id, **data}
        }

    def __str__(self) -> str:
        return f"{self.__class__.__name__} at {self.timestamp}"


class TrainStartedEvent(DomainEvent):
    """Event raised when a train starts moving"""

    event_type = "train_started"

    def __init__(self, train_id: str, total_pulling_force: float, max_overall_weight: float):
        super().__init__(train_id)
        self.total_pulling_force = total_pulling_force
        self.max_overall_weight = max_overall_weight

    def to_dict(self) -> Dict[str, Any]:
        return self._envelope({
            "total_pulling_force": self.total_pulling_force,
            "max_overall_weight": self.max_overall_weight
        })


class TrainStoppedEvent(DomainEvent):
    """Event raised when a train stops"""

    event_type = "train_stopped"

    def to_dict(self) -> Dict[str, Any]:
        return self._envelope({})


class TrainPartAttachedEvent(DomainEvent):
    """Event raised when a locomotive or wagon is attached"""

    event_type = "part_attached"

    def __init__(self, train_id: str, part_id: str, part_kind: str, position: int):
        super().__init__(train_id)
        self.part_id = part_id
        self.part_kind = part_kind
        self.position = position

    def to_dict(self) -> Dict[str, Any]:
        return self._envelope({
            "part_id": self.part_id,
            "part_kind": self.part_kind,
            "position": self.position
        })


class TrainPartDetachedEvent(DomainEvent):
    """Event raised when a locomotive or wagon is detached"""

    event_type = "part_detached"

    def __init__(self, train_id: str, part_id: str, part_kind: str, position: int):
        super().__init__(train_id)
        self.part_id = part_id
        self.part_kind = part_kind
        self.position = position

    def to_dict(self) -> Dict[str, Any]:
        return self._envelope({
            "part_id": self.part_id,
            "part_kind": self.part_kind,
            "position": self.position
        })
