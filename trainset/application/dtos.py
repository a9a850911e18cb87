# File: trainset/application/dtos.py
"""
Data Transfer Objects (DTOs) for Train Composition

This module defines DTOs for data transfer between layers:
1. Input DTOs - Part specifications received from callers
2. Output DTOs - Read models of trains and their parts

DTO Principles:
- Validation of types at creation, no range checks on physical values
- No business logic, only data
- Conversion helpers to and from domain objects
"""

from typing import Dict, List, Any, Union
from enum import Enum
import json

from pydantic import BaseModel, ConfigDict, Field

from ..domain.models import (
    TrainPart, Locomotive, Wagon, TrainPartFactory
)
from ..domain.aggregates import Train


# ============================================================================
# BASE DTO CLASSES
# ============================================================================

class BaseDTO(BaseModel):
    """Base DTO with common functionality"""

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        use_enum_values=True
    )

    def to_dict(self, exclude_none: bool = False, **kwargs) -> Dict[str, Any]:
        """Convert DTO to dictionary"""
        return self.model_dump(exclude_none=exclude_none, **kwargs)

    def to_json(self, **kwargs) -> str:
        """Convert DTO to JSON string"""
        return self.model_dump_json(**kwargs)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'BaseDTO':
        """Create DTO from dictionary"""
        return cls(**data)

    @classmethod
    def from_json(cls, json_str: str) -> 'BaseDTO':
        """Create DTO from JSON string"""
        return cls(**json.loads(json_str))


# ============================================================================
# ENUM DTOs
# ============================================================================

class LocomotiveTypeDTO(str, Enum):
    """Locomotive type DTO"""
    DIESEL = "diesel"
    ELECTRICAL = "electrical"
    STEAM = "steam"


class WagonTypeDTO(str, Enum):
    """Wagon type DTO"""
    PASSENGER = "passenger"
    SLEEPING = "sleeping"
    RESTAURANT = "restaurant"
    FREIGHT = "freight"


class TrainStateDTO(str, Enum):
    """Train state DTO"""
    STOPPED = "stopped"
    MOVING = "moving"


# ============================================================================
# INPUT DTOs
# ============================================================================

class TrainPartSpecDTO(BaseDTO):
    """Physical attributes shared by every part"""
    weight: float = Field(description="Own weight of the part")
    length: float = Field(description="Length of the part")
    max_persons_count: int = Field(default=0, description="Seats or berths")
    max_goods_weight: float = Field(default=0.0, description="Goods capacity")


class LocomotiveSpecDTO(TrainPartSpecDTO):
    """Specification of a locomotive to build"""
    pulling_force: float = Field(description="Mass the locomotive is able to move")
    type: LocomotiveTypeDTO = LocomotiveTypeDTO.DIESEL

    def to_domain(self) -> Locomotive:
        return TrainPartFactory.create_locomotive(
            weight=self.weight,
            length=self.length,
            max_persons_count=self.max_persons_count,
            max_goods_weight=self.max_goods_weight,
            pulling_force=self.pulling_force,
            locomotive_type=LocomotiveTypeDTO(self.type).value
        )


class WagonSpecDTO(TrainPartSpecDTO):
    """Specification of a wagon to build"""
    manufacturer_name: str
    production_year: int
    type: WagonTypeDTO = WagonTypeDTO.FREIGHT

    def to_domain(self) -> Wagon:
        return TrainPartFactory.create_wagon(
            weight=self.weight,
            length=self.length,
            max_persons_count=self.max_persons_count,
            max_goods_weight=self.max_goods_weight,
            manufacturer_name=self.manufacturer_name,
            production_year=self.production_year,
            wagon_type=WagonTypeDTO(self.type).value
        )


PartSpecDTO = Union[LocomotiveSpecDTO, WagonSpecDTO]


# ============================================================================
# OUTPUT DTOs
# ============================================================================

class TrainPartDTO(BaseDTO):
    """Read model of an attached part"""
    id: str
    kind: str
    description: str
    position: int
    weight: float
    length: float
    max_persons_count: int
    max_goods_weight: float
    type: str

    @classmethod
    def from_part(cls, part: TrainPart, position: int) -> 'TrainPartDTO':
        part_type = part.type.value if isinstance(part, (Locomotive, Wagon)) else ""
        return cls(
            id=part.id,
            kind=part.label,
            description=part.describe(),
            position=position,
            weight=part.weight,
            length=part.length,
            max_persons_count=part.max_persons_count,
            max_goods_weight=part.max_goods_weight,
            type=part_type
        )


class TrainSummaryDTO(BaseDTO):
    """Read model of a train with its derived properties"""
    train_id: str
    state: TrainStateDTO
    version: int
    locomotives: List[TrainPartDTO]
    wagons: List[TrainPartDTO]
    empty_weight: float
    length: float
    max_persons_count: int
    max_goods_weight: float
    conductors_count: int
    max_payload: float
    max_overall_weight: float
    total_pulling_force: float
    can_start: bool

    @classmethod
    def from_train(cls, train: Train) -> 'TrainSummaryDTO':
        return cls(
            train_id=train.id,
            state=TrainStateDTO(train.state.value),
            version=train.version,
            locomotives=[TrainPartDTO.from_part(p, i) for i, p in enumerate(train.locomotives)],
            wagons=[TrainPartDTO.from_part(p, i) for i, p in enumerate(train.wagons)],
            empty_weight=train.empty_weight,
            length=train.length,
            max_persons_count=train.max_persons_count,
            max_goods_weight=train.max_goods_weight,
            conductors_count=train.conductors_count,
            max_payload=train.max_payload,
            max_overall_weight=train.max_overall_weight,
            total_pulling_force=train.total_pulling_force,
            can_start=not train.is_moving and train.is_max_payload_possible_to_pull
        )
