# File: tests/builders.py
"""
Test data builders for train parts

Defaults describe a light diesel locomotive and an empty freight wagon,
so a train of one default locomotive is able to start.
"""

from typing import List

from trainset.domain.models import DomainEvent, Locomotive, Wagon, LocomotiveType, WagonType
from trainset.infrastructure.messaging import EventHandler


def make_locomotive(
    weight: float = 10.0,
    length: float = 10.0,
    max_persons_count: int = 0,
    max_goods_weight: float = 10.0,
    pulling_force: float = 30.0,
    type: LocomotiveType = LocomotiveType.DIESEL
) -> Locomotive:
    return Locomotive(
        weight=weight,
        length=length,
        max_persons_count=max_persons_count,
        max_goods_weight=max_goods_weight,
        pulling_force=pulling_force,
        type=type
    )


def make_wagon(
    weight: float = 10.0,
    length: float = 10.0,
    max_persons_count: int = 0,
    max_goods_weight: float = 10.0,
    manufacturer_name: str = "Some Name",
    production_year: int = 2022,
    type: WagonType = WagonType.FREIGHT
) -> Wagon:
    return Wagon(
        weight=weight,
        length=length,
        max_persons_count=max_persons_count,
        max_goods_weight=max_goods_weight,
        manufacturer_name=manufacturer_name,
        production_year=production_year,
        type=type
    )


class RecordingEventHandler(EventHandler):
    """Keeps every handled event in memory"""

    def __init__(self):
        self.events: List[DomainEvent] = []

    def handle(self, event: DomainEvent) -> None:
        self.events.append(event)
